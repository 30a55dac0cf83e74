import queue
import threading

import pytest

import udpchat
from udpchat.protocol import codec
from udpchat.transport import Transport, TransportClosed, TransportTimeout


FIXED_KEY = 'LoginKey9'
SESSION_KEY = 'a-much-longer-session-key'
REMOTE = ('192.0.2.1', 9876)


class MemoryTransport(Transport):
    """ In-process stand-in for a UDP socket. Datagrams the code under test
        sends land in *sent*; datagrams put in *inbox* are what recv()
        returns. Closing wakes a blocked recv().
    """

    def __init__(self):
        self.inbox = queue.Queue()
        self.sent = queue.Queue()
        self.closed = False
        self.send_lock = threading.Lock()

    @property
    def is_open(self):
        return not self.closed

    def close(self):
        self.closed = True
        self.inbox.put(None)

    def send(self, datagram, address=None):
        if self.closed:
            raise TransportClosed('closed')
        with self.send_lock:
            self.sent.put((datagram, address))

    def recv(self, timeout=None):
        if self.closed:
            raise TransportClosed('closed')
        try:
            item = self.inbox.get(timeout=timeout)
        except queue.Empty:
            raise TransportTimeout('nothing')
        if item is None:
            raise TransportClosed('closed')
        return item


class Peer:
    """ Scripted remote side of the handshake: reads what the client sent,
        and feeds datagrams back to it.
    """

    def __init__(self, transport, address=REMOTE):
        self.transport = transport
        self.address = address

    def expect(self, key=FIXED_KEY, timeout=2):
        datagram, address = self.transport.sent.get(timeout=timeout)
        return codec.decode(datagram, key)

    def nothing_sent(self, timeout=0.2):
        try:
            self.transport.sent.get(timeout=timeout)
        except queue.Empty:
            return True
        return False

    def deliver(self, message, key=FIXED_KEY):
        self.transport.inbox.put((codec.encode(message, key), self.address))

    def deliver_raw(self, datagram):
        self.transport.inbox.put((datagram, self.address))


@pytest.fixture
def transport():
    transport = MemoryTransport()
    yield transport
    transport.close()


@pytest.fixture
def peer(transport):
    return Peer(transport)


@pytest.fixture
def received():
    """ List of every message the processor was handed. """
    return list()


@pytest.fixture
def coordinator(transport, received):
    processor = udpchat.processor.Processor(default=received.append)
    session = udpchat.session.Session(FIXED_KEY)
    registry = udpchat.handshake.Registry()
    return udpchat.handshake.Coordinator(registry, session, transport, processor, timeout=2)


@pytest.fixture
def client(transport, received):
    processor = udpchat.processor.Processor(default=received.append)
    client = udpchat.Client(transport=transport, processor=processor, timeout=2, fixed_key=FIXED_KEY)
    client.listener.poll = 0.05
    client.start()
    yield client
    client.stop()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
