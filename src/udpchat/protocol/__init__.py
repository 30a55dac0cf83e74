from . import fields
from . import errors
from . import message
from . import cipher
from . import digest
from . import codec


"""
udpchat Protocol Layer
======================

This package defines the message vocabulary, the wire codec, and the
content digest used by the handshake. It does not know about sockets,
threads, or transactions; those live in :mod:`udpchat.transport` and
:mod:`udpchat.handshake`.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

Handshake (udpchat.handshake)
    Correlates challenges, confirmations and acknowledgments
    with in-flight transactions

    │
    ▼
Codec (codec.py)
    Message <-> text <-> transformed datagram bytes
    - serialize() / parse()
    - seal() / encode() / decode()

    │
    ▼
Message Model (message.py)
    msgspec structures for the envelope and the
    control-message bodies

    │
    ▼
Field Vocabulary (fields.py)
    Canonical action, status and key names

Alongside:

Cipher (cipher.py)
    Keyed, exactly invertible text transform. It obscures,
    it does not protect.

Digest (digest.py)
    Character-frequency fingerprint used by the challenge
    and confirmation steps.

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
