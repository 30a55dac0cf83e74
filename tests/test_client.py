""" End to end over real UDP sockets on the loopback interface: a scripted
    server thread on one side, a :class:`udpchat.Client` on the other.
"""

import threading

import pytest

import udpchat
from udpchat.protocol import codec
from udpchat.protocol import digest
from udpchat.protocol import fields
from udpchat.protocol import message
from udpchat.transport.udp import UdpTransport

from conftest import FIXED_KEY, SESSION_KEY


class Server:
    """ Plays the remote side of exactly the exchanges a test scripts: every
        request is challenged, confirmed requests are acknowledged, and a
        login hands out :data:`SESSION_KEY`.
    """

    def __init__(self):
        self.transport = UdpTransport(bind=('127.0.0.1', 0))
        self.key = FIXED_KEY
        self.count = 0
        self.failure = None
        self.client = None


    @property
    def port(self):
        return self.transport.address[1]


    def receive(self):
        datagram, address = self.transport.recv(5)
        self.client = address
        return codec.decode(datagram, self.key), address


    def send(self, reply, address):
        self.transport.send(codec.encode(reply, self.key), address)


    def exchange(self):
        """ Handle one complete request from the client.
        """

        request, address = self.receive()
        self.count += 1
        remote_id = 'srv-' + str(self.count)

        data = dict()
        data[fields.TRANSACTION_ID] = remote_id
        data[fields.LETTER_FREQUENCIES] = digest.fingerprint(request.text)
        data[fields.ORIGINAL_ACTION] = request.message.action
        self.send(message.request(fields.CHALLENGE, data), address)

        confirm, address = self.receive()
        assert confirm.message.action == fields.CONFIRM
        assert confirm.message.get('transaction_id') == remote_id

        if confirm.message.get('confirm') != True:
            self.send(message.reply(fields.ACK, fields.CANCELLED, 'Frequency mismatch.', {'transaction_id': remote_id}), address)
            return request

        data = dict()
        data[fields.TRANSACTION_ID] = remote_id

        if request.message.action == fields.LOGIN:
            data[fields.SESSION_KEY] = SESSION_KEY
            data[fields.CHAT_ID] = request.message.get(fields.CHAT_ID)
            self.send(message.reply(fields.ACK, fields.SUCCESS, 'Login successful.', data), address)
            self.key = SESSION_KEY
        else:
            data['echo'] = request.message.data
            self.send(message.reply(fields.ACK, fields.SUCCESS, None, data), address)

        return request


    def push(self, action, data):
        """ Push *action* at the client and run the inbound handshake to
            completion, returning the acknowledgment.
        """

        self.count += 1
        remote_id = 'push-' + str(self.count)

        data = dict(data)
        data[fields.TRANSACTION_ID] = remote_id
        pushed = message.request(action, data)
        text = codec.serialize(pushed)
        self.send(pushed, self.client)

        challenge, address = self.receive()
        valid = challenge.message.get(fields.LETTER_FREQUENCIES) == digest.fingerprint(text)

        self.send(message.request(fields.CONFIRM, {'transaction_id': remote_id, 'confirm': valid}), address)

        ack, address = self.receive()
        return ack.message


    def run(self, script):
        try:
            script(self)
        except Exception as e:
            self.failure = e


    def close(self):
        self.transport.close()


# end of class Server


@pytest.fixture
def server():
    server = Server()
    yield server
    server.close()


def start(server, script):
    thread = threading.Thread(target=server.run, args=(script,))
    thread.daemon = True
    thread.start()
    return thread


def test_login_and_request(server, received):

    processor = udpchat.processor.Processor(default=received.append)
    client = udpchat.Client('127.0.0.1', server.port, processor=processor, timeout=3)
    client.listener.poll = 0.1
    client.start()

    acks = list()

    def script(server):
        server.exchange()
        request = server.exchange()
        acks.append(server.push('receive_message', {'room_id': 'r1', 'content': 'welcome'}))
        assert request.message.action == 'send_message'

    thread = start(server, script)

    try:
        result = client.login('alice', 'secret')
        assert result.ok, result.reason
        assert client.logged_in
        assert client.session.key == SESSION_KEY

        result = client.request('send_message', {'room_id': 'r1', 'content': 'Hello, world!'})
        assert result.ok, result.reason
        assert result.data['echo'] == {'room_id': 'r1', 'content': 'Hello, world!'}

        thread.join(5)
    finally:
        client.stop()

    assert server.failure is None
    assert acks[0].status == fields.SUCCESS
    assert [message.get('content') for message in received] == ['welcome']


def test_request_without_server(server):

    # Nothing ever answers; the request times out and the client survives
    # whatever ICMP errors the platform reports for the unreachable port.

    port = server.port
    server.close()

    client = udpchat.Client('127.0.0.1', port, timeout=0.3)
    client.listener.poll = 0.1
    client.start()

    try:
        result = client.request('get_rooms')
        assert result.ok == False
        assert client.running
    finally:
        client.stop()


def test_transport_timeout_and_close():

    transport = UdpTransport(bind=('127.0.0.1', 0))

    with pytest.raises(udpchat.transport.TransportTimeout):
        transport.recv(0.05)

    with pytest.raises(udpchat.transport.TransportError):
        transport.send(b'nowhere to go')

    transport.close()
    assert transport.is_open == False

    with pytest.raises(udpchat.transport.TransportClosed):
        transport.recv(0.05)

    with pytest.raises(udpchat.transport.TransportClosed):
        transport.send(b'x', ('127.0.0.1', 9))


def test_transport_loopback():

    one = UdpTransport(bind=('127.0.0.1', 0))
    two = UdpTransport(('127.0.0.1', one.address[1]), bind=('127.0.0.1', 0))

    try:
        two.send(b'ping')
        datagram, address = one.recv(2)
        assert datagram == b'ping'
        assert address == two.address

        one.send(b'pong', address)
        datagram, address = two.recv(2)
        assert datagram == b'pong'
    finally:
        one.close()
        two.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
