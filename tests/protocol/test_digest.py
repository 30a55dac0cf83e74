import random

from udpchat.protocol import digest


def test_fingerprint():

    assert digest.fingerprint('hello') == {'h': 1, 'e': 1, 'l': 2, 'o': 1}

    counted = digest.fingerprint('{"a": "b, c!"}\n')
    assert counted['"'] == 4
    assert counted[' '] == 2
    assert counted['\n'] == 1
    assert counted[','] == 1
    assert counted['!'] == 1


def test_empty():

    assert digest.fingerprint('') == {}
    assert digest.fingerprint(None) == {}


def test_permutation_invariance():

    text = '{"action":"send_message","data":{"content":"Hello, world!"}}'
    characters = list(text)

    for seed in range(10):
        random.Random(seed).shuffle(characters)
        shuffled = ''.join(characters)
        assert digest.equal_fingerprints(digest.fingerprint(text), digest.fingerprint(shuffled))

    # Anagrams collide. That is expected of this digest.
    assert digest.fingerprint('listen') == digest.fingerprint('silent')


def test_single_character_changes():

    text = 'The quick brown fox.'
    original = digest.fingerprint(text)

    for position in range(len(text)):
        altered = text[:position] + '#' + text[position + 1:]
        deleted = text[:position] + text[position + 1:]
        inserted = text[:position] + text[position] + text[position:]

        assert not digest.equal_fingerprints(original, digest.fingerprint(altered))
        assert not digest.equal_fingerprints(original, digest.fingerprint(deleted))
        assert not digest.equal_fingerprints(original, digest.fingerprint(inserted))


def test_equality():

    assert digest.equal_fingerprints({}, {})
    assert digest.equal_fingerprints(None, {})
    assert digest.equal_fingerprints(None, None)
    assert not digest.equal_fingerprints({}, {'x': 0})
    assert not digest.equal_fingerprints({'x': 1}, {'x': 2})
    assert digest.equal_fingerprints({'x': 1, 'y': 2}, {'y': 2, 'x': 1})


def test_parse_frequencies():

    raw = {'a': 2, 'bc': 1, '': 4, 'd': 'three', 'e': 1.5, 'f': True, 'g': 0}
    parsed = digest.parse_frequencies(raw)

    assert parsed == {'a': 2, 'g': 0}
    assert digest.parse_frequencies(None) == {}
    assert digest.parse_frequencies({}) == {}


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
