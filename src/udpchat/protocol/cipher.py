""" The keyed, reversible text transform applied to every datagram.

    This is a shift cipher over a fixed alphabet; the shift is the length
    of the key. Characters outside the alphabet (braces, quotes, colons,
    anything non-ASCII) pass through unchanged, which keeps the JSON
    structure intact and makes the transform exactly invertible for any
    input. It obscures the wire bytes and nothing more.
"""

alphabet = 'ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789 .,!?'

_index = dict()
for position,character in enumerate(alphabet):
    _index[character] = position

del position, character


def shift(key):
    """ Return the shift amount for *key*. An empty or missing key is not
        a valid key; the caller is expected to have checked.
    """

    if not key:
        raise ValueError('transform key must be a non-empty string')

    return len(key) % len(alphabet)


def encrypt(text, key):
    return _rotate(text, shift(key))


def decrypt(text, key):
    return _rotate(text, -shift(key))


def _rotate(text, amount):

    if amount == 0:
        return text

    length = len(alphabet)
    rotated = list()

    for character in text:
        try:
            position = _index[character]
        except KeyError:
            rotated.append(character)
        else:
            rotated.append(alphabet[(position + amount) % length])

    return ''.join(rotated)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
