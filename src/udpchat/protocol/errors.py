"""Protocol-layer exceptions.

Decode and correlation failures are absorbed by the listener; none of these
are raised across the boundary to a caller blocked in a submission.
"""


class ProtocolError(Exception):
    """Base class for all protocol-layer errors."""


class EncodingError(ProtocolError):
    """A message could not be prepared for the wire (missing key, etc)."""


class SizeError(EncodingError):
    """The transformed datagram exceeds the maximum datagram size."""


class TransformError(ProtocolError):
    """The keyed transform could not be reversed (missing key, bad bytes)."""


class ParseError(ProtocolError):
    """The decoded text is not a well-formed message."""


class SchemaError(ProtocolError):
    """A well-formed message is missing required fields, or has the wrong
    type for one of them."""


class CorrelationMiss(ProtocolError):
    """No in-flight transaction matches an identifier or action label."""
