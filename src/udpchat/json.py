''' Wrapper module around msgspec to handle the equivalent of
    :func:`json.loads` and :func:`json.dumps`, plus typed decoding into
    :class:`msgspec.Struct` definitions.
'''

import msgspec


# The msgspec 'encode' operation returns bytes. Everything in udpchat that
# calls dumps() expects bytes in return, the codec decodes to text itself
# when it needs to.

encoder = msgspec.json.Encoder()
decoder = msgspec.json.Decoder()

dumps = encoder.encode
loads = decoder.decode

DecodeError = msgspec.DecodeError
EncodeError = msgspec.EncodeError
ValidationError = msgspec.ValidationError


def convert(obj, type):
    """ Convert an already-decoded Python object (typically a dictionary)
        into an instance of *type*. Raises :class:`ValidationError` if it
        does not match the declared structure.
    """

    return msgspec.convert(obj, type=type)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
