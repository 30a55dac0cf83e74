""" The blocking submission call: send a request, wait for the handshake
    to finish, and hand back a :class:`Result`.
"""

import logging
import uuid

from ..protocol import codec
from ..protocol.errors import EncodingError
from ..transport import TransportError
from .transaction import OutboundPhase, Outcome, Result

log = logging.getLogger(__name__)


def submit(coordinator, message, label, key, timeout=None, address=None):
    """ Send *message* as a new outbound transaction for the action *label*,
        transformed with *key*, and block until the remote side acknowledges
        it, rejects it, or *timeout* seconds elapse (the coordinator's
        default timeout if not specified).

        The return value is always a :class:`Result`; nothing is raised for
        encoding problems, transport problems, or timeouts. The transaction
        is gone from the registry by the time this returns.
    """

    if timeout is None:
        timeout = coordinator.timeout

    registry = coordinator.registry
    temp_key = str(uuid.uuid4())

    try:
        text = codec.serialize(message)
    except EncodingError as e:
        log.error("Failed to serialize %s (TempID: %s): %s", label, temp_key, e)
        return Result.failure(str(e))

    # Register before sending: the challenge can arrive before sendto()
    # returns.

    transaction = registry.register_outbound(temp_key, label, text, timeout)

    try:
        try:
            datagram = codec.seal(text, key)
            coordinator.transport.send(datagram, address)
        except (EncodingError, TransportError) as e:
            log.error("Unexpected error sending %s (TempID: %s): %s", label, temp_key, e)
            transaction.complete(Result.failure(str(e)))
        else:
            transaction.advance(OutboundPhase.AWAITING_CHALLENGE)
            log.info("Sent action %s (TempID: %s), waiting for %.1f sec", label, temp_key, timeout)

        if transaction.wait(timeout) == False:
            # Whichever of this and a late acknowledgment gets there first
            # wins; complete() makes the other a no-op.

            transaction.complete(Result.timeout(timeout))

    finally:
        registry.remove(transaction)

    result = transaction.result

    if result.outcome is Outcome.TIMEOUT:
        log.warning("Timeout waiting for acknowledgment of %s (TempID: %s)", label, temp_key)
    elif result.outcome is Outcome.FAILURE:
        log.warning("Action %s (TempID: %s) failed. Status: %s, reason: %s", label, temp_key, result.status, result.reason)
    else:
        log.info("Action %s (TempID: %s) acknowledged successfully", label, temp_key)

    return result


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
