import pytest

from udpchat.protocol import fields
from udpchat.protocol import message
from udpchat.protocol.errors import SchemaError


def test_request():

    data = {'chatid': 'alice'}
    request = message.request('login', data)

    assert request.action == 'login'
    assert request.status is None
    assert request.message is None
    assert request.data == data

    # The builder copies the dictionary; later changes by the caller do
    # not leak into a message already built.
    data['chatid'] = 'mallory'
    assert request.get('chatid') == 'alice'

    assert message.request('get_rooms').data is None


def test_reply():

    ack = message.reply(fields.ACK, fields.CANCELLED, 'mismatch', {'transaction_id': 't'})

    assert ack.status == 'cancelled'
    assert ack.message == 'mismatch'
    assert ack.get('transaction_id') == 't'
    assert ack.get('missing', 'default') == 'default'

    with pytest.raises(ValueError):
        message.reply(fields.ACK, 'maybe')


def test_error_reply():

    error = message.error_reply('send_message', 'Room not found.')

    assert error.action == fields.ERROR
    assert error.status == fields.STATUS_ERROR
    assert error.original_action == 'send_message'
    assert error.message == 'Room not found.'


def test_body():

    challenge = message.request(fields.CHALLENGE, {'transaction_id': 't1', 'letter_frequencies': {'a': 1}, 'original_action': 'login', 'extra': 'ignored'})
    parsed = message.body(challenge, message.Challenge)

    assert parsed.transaction_id == 't1'
    assert parsed.letter_frequencies == {'a': 1}
    assert parsed.original_action == 'login'

    confirm = message.request(fields.CONFIRM, {'transaction_id': 't1', 'confirm': False})
    assert message.body(confirm, message.Confirmation).confirm is False


def test_body_errors():

    with pytest.raises(SchemaError):
        message.body(message.request(fields.ACK), message.Acknowledgment)

    with pytest.raises(SchemaError):
        message.body(message.request(fields.CONFIRM, {'transaction_id': 't1'}), message.Confirmation)

    with pytest.raises(SchemaError):
        message.body(message.request(fields.CONFIRM, {'transaction_id': 't1', 'confirm': 'yes'}), message.Confirmation)

    with pytest.raises(SchemaError):
        message.body(message.request('receive_message', {'content': 'hi'}), message.Push)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
