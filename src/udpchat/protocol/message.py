""" Structured representations of udpchat messages.

    A :class:`Message` is the envelope that goes on the wire: an *action*,
    an optional *status*, an optional free-text *message*, and an optional
    *data* dictionary. The handshake reserves a handful of keys inside
    *data*; the structures below (:class:`Challenge`, :class:`Confirmation`,
    :class:`Acknowledgment`, :class:`Push`) describe what each control
    message is required to carry, and :func:`body` validates a received
    message against one of them.
"""

from typing import Any, Dict, NamedTuple, Optional

import msgspec

from .. import json
from . import fields
from .errors import SchemaError


class Message(msgspec.Struct, omit_defaults=True):
    """ The on-the-wire envelope. Fields left as None are omitted when the
        message is serialized, matching what the remote side sends.

        *original_action* is only ever set at the top level by error
        replies; every other message carries it inside *data*.
    """

    action: str
    status: Optional[str] = None
    message: Optional[str] = None
    original_action: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


    def get(self, key, default=None):
        """ Return *key* from the data dictionary, or *default* if either
            the key or the dictionary itself is absent.
        """

        if self.data is None:
            return default

        return self.data.get(key, default)


# end of class Message



class Challenge(msgspec.Struct):
    """ Body of a digest challenge. The sender asserts the fingerprint of the
        text it received, so the receiver can confirm that both sides saw the
        same content.
    """

    transaction_id: str
    letter_frequencies: Dict[str, Any]
    original_action: Optional[str] = None


class Confirmation(msgspec.Struct):
    transaction_id: str
    confirm: bool


class Acknowledgment(msgspec.Struct):
    transaction_id: str
    original_action: Optional[str] = None


class Push(msgspec.Struct):
    transaction_id: str


class Decoded(NamedTuple):
    """ A received message alongside the exact text it was parsed from. The
        text is needed to recompute the fingerprint; re-serializing the
        parsed message is not guaranteed to reproduce it byte for byte.
    """

    message: Message
    text: str


def body(message, type):
    """ Validate the data dictionary of *message* against the structure
        *type*, returning the populated structure. Raises
        :class:`SchemaError` if the data is absent or incomplete.
    """

    data = message.data

    if data is None:
        raise SchemaError("%s message missing 'data' object" % (message.action))

    try:
        return json.convert(data, type)
    except json.ValidationError as e:
        raise SchemaError("%s message: %s" % (message.action, e))


def request(action, data=None):
    """ Build a request: an action and an optional data dictionary, without
        a status or note.
    """

    if data is not None:
        data = dict(data)

    return Message(action, data=data)


def reply(action, status, note=None, data=None):

    if status not in fields.STATUSES:
        raise ValueError('invalid status: ' + repr(status))

    if data is not None:
        data = dict(data)

    return Message(action, status=status, message=note, data=data)


def error_reply(original_action, note):
    """ Build an error reply for *original_action*, in the shape the remote
        side uses when it rejects a request outright.
    """

    return Message(fields.ERROR, status=fields.STATUS_ERROR, message=note, original_action=original_action)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
