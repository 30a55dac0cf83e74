""" The receive loop: a single background thread that reads datagrams off
    the transport, decodes them, and hands them to the coordinator.
"""

import logging
import threading
import time

from . import config
from .protocol import codec
from .protocol import fields
from .protocol.errors import ProtocolError
from .transport import TransportClosed, TransportError, TransportTimeout

log = logging.getLogger(__name__)


class Listener:
    """ Read from *transport* for as long as *session.running* is set. A
        single malformed datagram never stops the loop; the transport closing
        does. If the transport closes while the session is still supposed to
        be running, that is treated as fatal: the running flag is cleared and
        the reason is kept in :attr:`failure`.

        :ivar poll: Seconds to block in each recv() before checking the
            running flag and sweeping stale pushes.
        :ivar failure: Why the loop stopped unexpectedly, or None.
    """

    def __init__(self, transport, session, coordinator, poll=None, push_ttl=None):

        if poll is None:
            poll = config.get('poll')
        if push_ttl is None:
            push_ttl = config.get('push_ttl')

        self.transport = transport
        self.session = session
        self.coordinator = coordinator
        self.poll = poll
        self.push_ttl = push_ttl
        self.failure = None
        self.thread = None
        self.swept = time.time()


    def start(self):

        if self.thread is not None and self.thread.is_alive():
            return

        self.session.running.set()
        self.thread = threading.Thread(target=self.run, name='udpchat.Listener')
        self.thread.daemon = True
        self.thread.start()
        log.info("Message listener started")


    def join(self, timeout=None):
        if self.thread is not None:
            self.thread.join(timeout)


    def decode(self, datagram, address=None):
        """ Decode *datagram* with the session key, falling back to the fixed
            key. Returns None if no key produces a valid message.
        """

        decoded = None

        for key in self.session.decode_keys():
            try:
                decoded = codec.decode(datagram, key)
            except ProtocolError as e:
                log.debug("Decoding with key of length %d failed: %s", len(key), e)
                continue
            else:
                break

        if decoded is None:
            log.error("Failed to decode or parse datagram from %s", address)

        return decoded


    def sweep(self):
        """ Drop pushes that were never confirmed. Runs at most once per
            poll interval, whether or not datagrams are arriving.
        """

        now = time.time()

        if now - self.swept < self.poll:
            return

        self.swept = now
        self.coordinator.registry.expire_inbound(self.push_ttl, now)


    def run(self):

        running = self.session.running

        while running.is_set():
            try:
                datagram, address = self.transport.recv(self.poll)
            except TransportTimeout:
                self.sweep()
                continue
            except TransportClosed as e:
                if running.is_set():
                    log.error("Transport closed unexpectedly: %s", e)
                    self.failure = e
                    running.clear()
                else:
                    log.info("Transport closed")
                break
            except TransportError as e:
                if running.is_set():
                    log.error("Error receiving datagram: %s", e)
                continue

            self.sweep()

            decoded = self.decode(datagram, address)

            if decoded is None:
                continue

            log.debug("Received %s (transaction id %s) from %s", decoded.message.action, decoded.message.get(fields.TRANSACTION_ID), address)

            try:
                self.coordinator.dispatch(decoded, address)
            except Exception:
                log.exception("Unexpected error handling %s message", decoded.message.action)

        log.info("Message listener stopped")


# end of class Listener


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
