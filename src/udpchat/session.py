""" Per-client session state: the fixed pre-session key, the session key
    issued by the remote side upon login, the identity that login was for,
    and whether the client is expected to be running.
"""

import logging
import threading

from . import config

log = logging.getLogger(__name__)


class Session:
    """ The session key is read by the submission path and by the listener
        thread, and written exactly once, by the listener, when a login
        acknowledgment succeeds. Once established it is never replaced; a
        new login requires a new :class:`Session`.

        :ivar fixed_key: The key used before a session exists.
        :ivar running: Set while the client is expected to be receiving.
    """

    def __init__(self, fixed_key=None):

        if fixed_key is None:
            fixed_key = config.get('fixed_key')

        if not fixed_key:
            raise ValueError('the fixed pre-session key must be non-empty')

        self.fixed_key = fixed_key
        self.running = threading.Event()

        self._key = None
        self._chat_id = None
        self._lock = threading.Lock()


    @property
    def key(self):
        """ The established session key, or None before login.
        """

        with self._lock:
            return self._key


    @property
    def chat_id(self):
        with self._lock:
            return self._chat_id


    @property
    def established(self):
        return self.key is not None


    def establish(self, key, chat_id):
        """ Adopt the credentials from a successful login acknowledgment.
            Returns True if they were adopted, False if a session was already
            established (the earlier credentials are kept).
        """

        if not key:
            raise ValueError('session key must be non-empty')

        with self._lock:
            if self._key is not None:
                log.warning("Session already established for %r, ignoring new credentials for %r", self._chat_id, chat_id)
                return False

            self._key = key
            self._chat_id = chat_id

        log.info("Session established for %r", chat_id)
        return True


    def send_key(self):
        """ The key for outbound datagrams that are not tied to a specific
            request: the session key if there is one, otherwise the fixed key.
        """

        key = self.key
        if key is None:
            key = self.fixed_key

        return key


    def decode_keys(self):
        """ Keys to try, in order, when decoding an inbound datagram. A late
            reply to a pre-session request can still arrive under the fixed
            key after the session key is adopted, hence the fallback.
        """

        key = self.key

        if key is None or key == self.fixed_key:
            return (self.fixed_key,)

        return (key, self.fixed_key)


# end of class Session


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
