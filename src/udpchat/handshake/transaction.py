""" A :class:`Transaction` is the unit of bookkeeping for one handshake,
    in either direction. It carries the exact text under verification, the
    phase the handshake has reached, and, once resolved, the :class:`Result`
    handed back to whoever is waiting on it.
"""

import enum
import threading
import time


class Direction(enum.Enum):
    OUTBOUND = 'outbound'
    INBOUND = 'inbound'


class OutboundPhase(enum.IntEnum):
    """ We sent a request; the remote side challenges us. """

    SENT = 1
    AWAITING_CHALLENGE = 2
    CHALLENGE_RECEIVED = 3
    CONFIRM_SENT = 4
    RESOLVED = 5


class InboundPhase(enum.IntEnum):
    """ The remote side pushed content at us; we challenge it. """

    PUSH_RECEIVED = 1
    CHALLENGE_SENT = 2
    CONFIRM_RECEIVED = 3
    ACK_SENT = 4


class Outcome(enum.Enum):
    SUCCESS = 'success'
    FAILURE = 'failure'
    TIMEOUT = 'timeout'


class Result:
    """ The terminal outcome of a submission. Callers must handle all three
        outcomes: success (with the acknowledgment data, if any), failure
        (with a reason), and timeout.

        :ivar outcome: One of the :class:`Outcome` values.
        :ivar status: The status string from the acknowledgment, if any.
        :ivar reason: Human-readable reason for a failure or timeout.
        :ivar data: The acknowledgment's data dictionary, if any.
    """

    def __init__(self, outcome, status=None, reason=None, data=None):
        self.outcome = outcome
        self.status = status
        self.reason = reason
        self.data = data


    def __repr__(self):
        return "Result(%s, status=%r, reason=%r)" % (self.outcome.value, self.status, self.reason)


    @property
    def ok(self):
        return self.outcome is Outcome.SUCCESS


    @classmethod
    def success(cls, data=None, status='success'):
        return cls(Outcome.SUCCESS, status, None, data)


    @classmethod
    def failure(cls, reason, status=None, data=None):
        return cls(Outcome.FAILURE, status, reason, data)


    @classmethod
    def timeout(cls, seconds):
        return cls(Outcome.TIMEOUT, None, "no acknowledgment in %.2f sec" % (seconds))


# end of class Result



class Transaction:
    """ State for one in-flight handshake. Outbound transactions start out
        known only by a locally generated *temp_key*; the remote transaction
        id is bound later, when the challenge arrives. Inbound transactions
        are known by the remote id from the start.

        Only the registry creates transactions, and only the coordinator (on
        the listener thread) advances their phase, with one exception: the
        submitting thread moves an outbound transaction from SENT to
        AWAITING_CHALLENGE once its request is on the wire. :func:`advance`
        ignores any move that is not strictly forward, so that step is a
        no-op if the challenge already arrived.
    """

    def __init__(self, direction, label, raw_payload, temp_key=None, remote_id=None, timeout=None):

        if direction is Direction.OUTBOUND:
            phase = OutboundPhase.SENT
        else:
            phase = InboundPhase.PUSH_RECEIVED

        self.direction = direction
        self.label = label
        self.temp_key = temp_key
        self.remote_id = remote_id
        self.phase = phase
        self.result = None

        self.created = time.time()

        if timeout is None:
            self.deadline = None
        else:
            self.deadline = self.created + timeout

        self._raw_payload = raw_payload
        self._lock = threading.Lock()
        self._done = threading.Event()


    def __repr__(self):
        if self.remote_id is None:
            key = 'temp=' + str(self.temp_key)
        else:
            key = 'id=' + str(self.remote_id)

        return "Transaction(%s %s %s %s)" % (self.direction.value, self.label, key, self.phase.name)


    @property
    def raw_payload(self):
        """ The exact text that was sent or received for this transaction.
            Read-only: the fingerprint comparison depends on it.
        """

        return self._raw_payload


    @property
    def key(self):
        """ The best available correlation key: the remote id once bound,
            the temporary key before that.
        """

        if self.remote_id is None:
            return self.temp_key
        return self.remote_id


    def advance(self, phase):
        """ Move to *phase* if it is strictly ahead of the current phase.
            Returns True if the phase changed.
        """

        with self._lock:
            if type(phase) is not type(self.phase):
                raise ValueError("%s is not a %s phase" % (phase, self.direction.value))

            if phase <= self.phase:
                return False

            self.phase = phase
            return True


    def complete(self, result):
        """ Store the terminal *result* and release anyone blocked in
            :func:`wait`. Only the first call has any effect; it returns
            True, and every later call returns False.
        """

        with self._lock:
            if self._done.is_set():
                return False

            self.result = result

            if self.direction is Direction.OUTBOUND:
                self.phase = OutboundPhase.RESOLVED

            self._done.set()

        return True


    def done(self):
        return self._done.is_set()


    def expired(self, now=None):
        if self.deadline is None:
            return False

        if now is None:
            now = time.time()

        return now >= self.deadline


    def remaining(self, now=None):
        """ Seconds until the deadline, never negative; None if there is no
            deadline.
        """

        if self.deadline is None:
            return None

        if now is None:
            now = time.time()

        return max(0.0, self.deadline - now)


    def wait(self, timeout=None):
        """ Block until the transaction resolves or *timeout* seconds elapse.
            Returns True if it resolved.
        """

        return self._done.wait(timeout)


# end of class Transaction


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
