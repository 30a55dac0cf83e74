""" Map :class:`Message` instances to datagram bytes and back.

    Going out, a message is serialized to compact JSON text, the text is run
    through the keyed transform, and the result is encoded as UTF-8. Coming
    in, the same steps run in reverse. The intermediate text is significant:
    it is what both sides fingerprint during the handshake, so
    :func:`decode` hands it back alongside the parsed message.
"""

from .. import config
from .. import json
from . import cipher
from .errors import EncodingError, ParseError, SchemaError, SizeError, TransformError
from .message import Decoded, Message


def serialize(message):
    """ Return the JSON text for *message*, exactly as it will be
        transformed and sent. Raises :class:`EncodingError` if the message
        holds a value JSON cannot represent.
    """

    try:
        encoded = json.dumps(message)
    except (TypeError, json.EncodeError) as e:
        raise EncodingError('cannot serialize %s message: %s' % (message.action, e))

    return encoded.decode('utf-8')


def parse(text):
    """ Parse *text* into a :class:`Message`. Raises :class:`ParseError` if
        the text is not a JSON object, :class:`SchemaError` if it is an
        object without the required fields.
    """

    try:
        raw = json.loads(text.encode('utf-8'))
    except json.DecodeError as e:
        raise ParseError('invalid JSON: ' + str(e))

    if not isinstance(raw, dict):
        raise ParseError('expected a JSON object, got ' + type(raw).__name__)

    try:
        return json.convert(raw, Message)
    except json.ValidationError as e:
        raise SchemaError(str(e))


def seal(text, key, limit=None):
    """ Apply the keyed transform to already-serialized *text* and return the
        datagram bytes. The datagram is never truncated: if it would exceed
        *limit* bytes (the configured maximum datagram size by default) a
        :class:`SizeError` is raised instead.
    """

    if not key:
        raise EncodingError('cannot encode a datagram without a key')

    if limit is None:
        limit = config.get('max_datagram')

    datagram = cipher.encrypt(text, key).encode('utf-8')

    if len(datagram) > limit:
        raise SizeError("datagram is %d bytes, maximum is %d" % (len(datagram), limit))

    return datagram


def encode(message, key, limit=None):
    return seal(serialize(message), key, limit)


def decode(datagram, key):
    """ Reverse :func:`encode`, returning a :class:`Decoded` pairing the
        parsed message with the exact decoded text.
    """

    if not key:
        raise TransformError('cannot decode a datagram without a key')

    if not datagram:
        raise TransformError('empty datagram')

    try:
        transformed = datagram.decode('utf-8')
    except UnicodeDecodeError as e:
        raise TransformError('datagram is not UTF-8: ' + str(e))

    text = cipher.decrypt(transformed, key)
    message = parse(text)

    return Decoded(message, text)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
