""" The coordinator drives both directions of the handshake. It is invoked
    from the listener thread, one decoded message at a time, and is the only
    code that advances a transaction past its first phase.

    Outbound (we sent a request)::

        request ──────────────▶
                ◀──────────────  character_count {transaction_id, letter_frequencies, original_action}
        confirm_count ────────▶  {transaction_id, confirm}
                ◀──────────────  ack {transaction_id} + status

    Inbound (the remote side pushed something at us)::

                ◀──────────────  push {transaction_id, ...}
        character_count ──────▶  {transaction_id, letter_frequencies, original_action}
                ◀──────────────  confirm_count {transaction_id, confirm}
        ack ──────────────────▶  {transaction_id} + status
"""

import logging

from .. import config
from ..protocol import codec
from ..protocol import digest
from ..protocol import fields
from ..protocol import message as protocol
from ..protocol.errors import CorrelationMiss, EncodingError, SchemaError
from ..processor import Processor
from ..transport import TransportError
from .transaction import InboundPhase, OutboundPhase, Result

log = logging.getLogger(__name__)


class Coordinator:
    """ Glue between the listener, the :class:`Registry`, the
        :class:`Session`, and the transport. *processor* receives the text of
        every push whose content the remote side confirmed.

        :ivar timeout: Default number of seconds a submission waits for its
            acknowledgment.
    """

    def __init__(self, registry, session, transport, processor=None, timeout=None):

        if processor is None:
            processor = Processor()

        if timeout is None:
            timeout = config.get('timeout')

        self.registry = registry
        self.session = session
        self.transport = transport
        self.processor = processor
        self.timeout = timeout

        handlers = dict()
        handlers[fields.CHALLENGE] = self.on_challenge
        handlers[fields.CONFIRM] = self.on_confirm
        handlers[fields.ACK] = self.on_ack
        handlers[fields.ERROR] = self.on_error
        self.handlers = handlers


    def dispatch(self, decoded, address=None):
        """ Route one :class:`Decoded` message by its action. Anything that
            is not one of the handshake's own control actions is treated as
            a push. Schema problems and correlation misses are logged here
            and go no further.
        """

        action = decoded.message.action
        handler = self.handlers.get(action, self.on_push)

        try:
            handler(decoded, address)
        except SchemaError as e:
            log.error("Dropping malformed %s message: %s", action, e)
        except CorrelationMiss as e:
            log.warning("%s", e)


    def send(self, message, address=None, key=None):
        """ Encode and send *message*, returning True on success. Failures are
            logged rather than raised; the listener thread must keep going.
        """

        if key is None:
            key = self.session.send_key()

        try:
            datagram = codec.encode(message, key)
            self.transport.send(datagram, address)
        except (EncodingError, TransportError) as e:
            log.error("Failed to send %s: %s", message.action, e)
            return False

        return True


    # Outbound flow.

    def on_challenge(self, decoded, address=None):

        challenge = protocol.body(decoded.message, protocol.Challenge)
        remote_id = challenge.transaction_id
        label = challenge.original_action

        log.info("Received %s for original action %r, transaction id %s", fields.CHALLENGE, label, remote_id)

        # A retransmitted challenge for a transaction we already bound means
        # our confirmation went missing. Answer it again.

        transaction = self.registry.get(remote_id)

        if transaction is None:
            if label is None:
                raise SchemaError("%s for transaction %s has no original action" % (fields.CHALLENGE, remote_id))

            transaction = self.registry.find_by_kind_label(label)

            if transaction is None:
                raise CorrelationMiss("Received %s for original action %r, but no matching pending request (transaction id %s)" % (fields.CHALLENGE, label, remote_id))

            if self.registry.bind_remote_id(transaction.temp_key, remote_id) is None:
                return

        elif transaction.done():
            raise CorrelationMiss("Received %s for already resolved transaction %s" % (fields.CHALLENGE, remote_id))

        transaction.advance(OutboundPhase.CHALLENGE_RECEIVED)

        ours = digest.fingerprint(transaction.raw_payload)
        theirs = digest.parse_frequencies(challenge.letter_frequencies)
        valid = digest.equal_fingerprints(ours, theirs)

        if valid:
            log.info("Frequency check successful for transaction %s", remote_id)
        else:
            log.warning("Frequency check failed for transaction %s. Local: %d characters, remote: %d characters", remote_id, sum(ours.values()), sum(theirs.values()))

        data = dict()
        data[fields.TRANSACTION_ID] = remote_id
        data[fields.CONFIRM_FLAG] = valid
        confirm = protocol.request(fields.CONFIRM, data)

        if self.send(confirm, address):
            transaction.advance(OutboundPhase.CONFIRM_SENT)
            log.info("Sent %s (confirmed: %s) for transaction %s", fields.CONFIRM, valid, remote_id)
        else:
            transaction.complete(Result.failure('could not send confirmation'))
            self.registry.remove(transaction)


    def on_ack(self, decoded, address=None):

        message = decoded.message
        status = message.status

        if status is None:
            raise SchemaError(fields.ACK + ' message missing status')

        ack = protocol.body(message, protocol.Acknowledgment)
        remote_id = ack.transaction_id

        log.info("Received %s for transaction %s (original action %r) with status %s", fields.ACK, remote_id, ack.original_action, status)

        transaction = self.registry.get(remote_id)

        if transaction is None:
            raise CorrelationMiss("Received %s for unknown, timed-out, or already processed transaction %s" % (fields.ACK, remote_id))

        if status != fields.SUCCESS:
            note = message.message
            if note is None:
                note = 'No details'
            result = Result.failure(note, status, message.data)

        elif transaction.label == fields.LOGIN:
            result = self._establish(message)

        else:
            result = Result.success(message.data, status)

        if transaction.complete(result):
            log.info("Signaled completion for %s, transaction %s: %r", transaction.label, remote_id, result)

        self.registry.remove(transaction)


    def _establish(self, message):
        """ Adopt the session credentials carried by a successful login
            acknowledgment. This happens here, on the listener thread and
            before the waiting caller is released, so that the very next
            datagram is already decoded with the new key.
        """

        key = message.get(fields.SESSION_KEY)
        chat_id = message.get(fields.CHAT_ID)

        if not key or not chat_id:
            log.error("Login acknowledged but missing %s or %s", fields.SESSION_KEY, fields.CHAT_ID)
            return Result.failure('incomplete session response', message.status, message.data)

        if self.session.establish(key, chat_id) == False:
            return Result.failure('session already established', message.status, message.data)

        return Result.success(message.data, message.status)


    def on_error(self, decoded, address=None):

        message = decoded.message

        note = message.message
        if note is None:
            note = 'Unknown server error'

        label = message.get(fields.ORIGINAL_ACTION)
        if label is None:
            label = message.original_action

        remote_id = message.get(fields.TRANSACTION_ID)

        log.error("Received %s for action %r: %s", fields.ERROR, label, note)

        transaction = None

        if remote_id is not None:
            transaction = self.registry.get(remote_id)

        if transaction is None and label is not None:
            transaction = self.registry.find_by_kind_label(label)

        if transaction is None:
            raise CorrelationMiss("Could not find pending request for action %r to signal error" % (label))

        status = message.status
        if status is None:
            status = fields.STATUS_ERROR

        transaction.complete(Result.failure(note, status, message.data))
        self.registry.remove(transaction)
        log.warning("Signaled failure for pending %s due to remote error", transaction.label)


    # Inbound flow.

    def on_push(self, decoded, address=None):

        message = decoded.message
        push = protocol.body(message, protocol.Push)
        remote_id = push.transaction_id

        transaction, created = self.registry.register_inbound(remote_id, message.action, decoded.text)

        if created:
            log.info("Received push %r, transaction id %s", message.action, remote_id)
        else:
            log.info("Received retransmitted push %r, transaction id %s", transaction.label, remote_id)

        data = dict()
        data[fields.TRANSACTION_ID] = remote_id
        data[fields.LETTER_FREQUENCIES] = digest.fingerprint(transaction.raw_payload)
        data[fields.ORIGINAL_ACTION] = transaction.label
        challenge = protocol.request(fields.CHALLENGE, data)

        if self.send(challenge, address):
            transaction.advance(InboundPhase.CHALLENGE_SENT)
            log.info("Sent %s for transaction %s", fields.CHALLENGE, remote_id)
        else:
            self.registry.remove(transaction)


    def on_confirm(self, decoded, address=None):

        confirmation = protocol.body(decoded.message, protocol.Confirmation)
        remote_id = confirmation.transaction_id

        log.info("Received %s for transaction %s (confirmed: %s)", fields.CONFIRM, remote_id, confirmation.confirm)

        transaction = self.registry.take_inbound(remote_id)
        label = None
        note = None

        if transaction is not None:
            label = transaction.label

        # A rejection is acknowledged as cancelled whether or not the push
        # is still cached.

        if confirmation.confirm == False:
            status = fields.CANCELLED
            note = 'Frequency mismatch detected by remote.'
            log.warning("Remote indicated frequency mismatch for transaction %s, not processing", remote_id)

        elif transaction is None:
            log.warning("No pending push found for transaction %s", remote_id)
            status = fields.FAILURE
            note = 'Lost original action state.'

        else:
            status = fields.SUCCESS

            try:
                self.processor.process(transaction.raw_payload)
            except Exception:
                log.exception("Error processing confirmed %s push, transaction %s", label, remote_id)

        data = dict()
        data[fields.TRANSACTION_ID] = remote_id
        if label is not None:
            data[fields.ORIGINAL_ACTION] = label

        ack = protocol.reply(fields.ACK, status, note, data)

        if self.send(ack, address):
            log.info("Sent %s for transaction %s with status %s", fields.ACK, remote_id, status)
            if transaction is not None:
                transaction.advance(InboundPhase.ACK_SENT)


# end of class Coordinator


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
