""" The registry holds every in-flight :class:`Transaction`.

    Outbound transactions are indexed by their temporary key until the
    remote side assigns a transaction id, and by that id afterwards; a
    transaction is never in both indices at once. Inbound transactions
    (pushes awaiting confirmation) are indexed by the remote id. A single
    lock protects all three dictionaries; it is held only for the duration
    of a lookup or mutation, never across a send or a wait.

    Losing a race is normal: a transaction can resolve, time out, or be
    removed by another thread between any two calls. Every method here
    reports that by returning None or False, never by raising.
"""

import logging
import threading
import time

from .transaction import Direction, InboundPhase, Transaction

log = logging.getLogger(__name__)


class Registry:

    def __init__(self):

        self._by_temp = dict()
        self._by_remote = dict()
        self._inbound = dict()
        self._lock = threading.Lock()


    def __len__(self):
        with self._lock:
            return len(self._by_temp) + len(self._by_remote) + len(self._inbound)


    def __contains__(self, key):
        return self.get(key) is not None or self.get_inbound(key) is not None


    def register_outbound(self, temp_key, label, raw_payload, timeout=None):
        """ Create and index a new outbound transaction for a request whose
            serialized text is *raw_payload*.
        """

        transaction = Transaction(Direction.OUTBOUND, label, raw_payload, temp_key=temp_key, timeout=timeout)

        with self._lock:
            if temp_key in self._by_temp:
                raise ValueError('duplicate temporary key: ' + repr(temp_key))

            self._by_temp[temp_key] = transaction

        log.debug("Registered outbound %s (TempID: %s)", label, temp_key)
        return transaction


    def bind_remote_id(self, temp_key, remote_id):
        """ Move the transaction known by *temp_key* into the remote-id index
            under *remote_id*. Returns the transaction, or None if the
            temporary key is gone (already resolved or timed out) or the
            remote id is already bound.
        """

        conflict = None

        with self._lock:
            transaction = self._by_temp.get(temp_key)

            if transaction is not None and transaction.done():
                transaction = None

            if transaction is not None:
                conflict = self._by_remote.get(remote_id)

                if conflict is None:
                    del self._by_temp[temp_key]
                    transaction.remote_id = remote_id
                    self._by_remote[remote_id] = transaction
                else:
                    transaction = None

        if conflict is not None:
            log.warning("Transaction id %s is already bound to %r, not rebinding TempID %s", remote_id, conflict, temp_key)
            return None

        if transaction is None:
            log.warning("Cannot bind transaction id %s: TempID %s already resolved or timed out", remote_id, temp_key)
            return None

        log.info("Associated transaction id %s with pending %s (TempID: %s)", remote_id, transaction.label, temp_key)
        return transaction


    def find_by_kind_label(self, label, predicate=None):
        """ Return the oldest outbound transaction for *label* that is
            not yet bound to a remote id and whose deadline has not passed.
            If *predicate* is given, predicate(transaction) must also be
            true. Returns None if there is no such transaction.
        """

        with self._lock:
            candidates = list(self._by_temp.values())

        candidates.sort(key=lambda transaction: transaction.created)
        now = time.time()

        for transaction in candidates:
            if transaction.label != label:
                continue
            if transaction.remote_id is not None or transaction.done():
                continue
            if transaction.expired(now):
                continue
            if predicate is not None and not predicate(transaction):
                continue
            return transaction

        return None


    def get(self, key):
        """ Look up an outbound transaction by remote id or temporary key.
        """

        with self._lock:
            try:
                return self._by_remote[key]
            except KeyError:
                pass

            return self._by_temp.get(key)


    def resolve(self, key, result):
        """ Complete the outbound transaction known by *key* with *result*.
            Returns False if there is no such transaction, or if it was
            already resolved (for example, by a timeout).
        """

        transaction = self.get(key)

        if transaction is None:
            log.warning("Cannot resolve %s: unknown, timed-out, or already processed", key)
            return False

        return transaction.complete(result)


    def remove(self, key):
        """ Remove a transaction from every index that references it. *key*
            may be a temporary key, a remote id, or the :class:`Transaction`
            itself. Removing something that is already gone is a no-op.
        """

        with self._lock:
            if isinstance(key, Transaction):
                transaction = key
            else:
                transaction = self._by_remote.get(key)
                if transaction is None:
                    transaction = self._by_temp.get(key)
                if transaction is None:
                    transaction = self._inbound.get(key)

            if transaction is None:
                return

            if transaction.direction is Direction.INBOUND:
                if self._inbound.get(transaction.remote_id) is transaction:
                    del self._inbound[transaction.remote_id]
                return

            if self._by_temp.get(transaction.temp_key) is transaction:
                del self._by_temp[transaction.temp_key]

            if transaction.remote_id is not None:
                if self._by_remote.get(transaction.remote_id) is transaction:
                    del self._by_remote[transaction.remote_id]


    def pending(self):
        """ Snapshot of every outbound transaction still in the registry.
        """

        with self._lock:
            return list(self._by_temp.values()) + list(self._by_remote.values())


    def register_inbound(self, remote_id, label, raw_payload):
        """ Cache the exact text of a push under *remote_id*. Returns a
            (transaction, created) tuple; if the id is already cached (the
            push was retransmitted) the existing transaction is returned and
            created is False.
        """

        with self._lock:
            try:
                existing = self._inbound[remote_id]
            except KeyError:
                pass
            else:
                return existing, False

            transaction = Transaction(Direction.INBOUND, label, raw_payload, remote_id=remote_id)
            self._inbound[remote_id] = transaction

        return transaction, True


    def get_inbound(self, remote_id):
        with self._lock:
            return self._inbound.get(remote_id)


    def take_inbound(self, remote_id):
        """ Remove and return the cached push for *remote_id*. Each push can
            be taken exactly once; later calls return None.
        """

        with self._lock:
            transaction = self._inbound.pop(remote_id, None)

        if transaction is not None:
            transaction.advance(InboundPhase.CONFIRM_RECEIVED)

        return transaction


    def expire_inbound(self, max_age, now=None):
        """ Drop cached pushes that have waited more than *max_age* seconds
            for a confirmation. Returns the expired transactions.
        """

        if now is None:
            now = time.time()

        expired = list()

        with self._lock:
            for remote_id,transaction in list(self._inbound.items()):
                if now - transaction.created > max_age:
                    del self._inbound[remote_id]
                    expired.append(transaction)

        for transaction in expired:
            log.warning("Discarding unconfirmed %s push for transaction %s after %.1f sec", transaction.label, transaction.remote_id, max_age)

        return expired


    def clear(self):
        with self._lock:
            count = len(self._by_temp) + len(self._by_remote) + len(self._inbound)
            self._by_temp.clear()
            self._by_remote.clear()
            self._inbound.clear()

        if count:
            log.info("Cleared %d pending transactions", count)


# end of class Registry


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
