""" The :class:`Client` assembles a transport, a session, the registry, the
    coordinator, and the listener into something an application can use:
    start it, log in, issue requests, and stop it.
"""

import logging

from . import config
from .handshake import submit as submission
from .handshake.coordinator import Coordinator
from .handshake.registry import Registry
from .handshake.transaction import Result
from .listener import Listener
from .protocol import fields
from .protocol import message as protocol
from .session import Session
from .transport.udp import UdpTransport

log = logging.getLogger(__name__)


class Client:
    """ A handshake client talking to a single remote *host* and *port*
        (the configured defaults if not specified). A custom *transport* can
        be supplied instead, in which case *host* and *port* are ignored.
        Confirmed pushes from the remote side are handed to *processor*.

        Requests may be issued from any number of threads once
        :func:`start` has been called.
    """

    def __init__(self, host=None, port=None, processor=None, transport=None, timeout=None, fixed_key=None):

        if transport is None:
            if host is None:
                host = config.get('host')
            if port is None:
                port = config.get('port')

            transport = UdpTransport((host, int(port)))

        self.transport = transport
        self.session = Session(fixed_key)
        self.registry = Registry()
        self.coordinator = Coordinator(self.registry, self.session, transport, processor, timeout)
        self.listener = Listener(transport, self.session, self.coordinator)


    @property
    def processor(self):
        return self.coordinator.processor


    @property
    def logged_in(self):
        return self.session.established


    @property
    def running(self):
        return self.session.running.is_set()


    def start(self):
        self.listener.start()


    def stop(self, timeout=1.0):
        """ Shut down: stop the listener, close the transport, and forget any
            pending transactions. Callers still blocked in a request will
            time out normally.
        """

        log.info("Starting client cleanup")

        self.session.running.clear()
        self.transport.close()
        self.listener.join(timeout)

        if self.listener.thread is not None and self.listener.thread.is_alive():
            log.warning("Listener thread did not exit within %.1f sec", timeout)

        self.registry.clear()
        log.info("Client cleanup finished")


    def submit(self, message, label=None, key=None, timeout=None):
        """ Send *message* through the full handshake and return the
            :class:`Result`. *label* defaults to the message action; *key*
            defaults to the session key, or the fixed key before login.
        """

        if label is None:
            label = message.action

        if key is None:
            key = self.session.send_key()

        return submission.submit(self.coordinator, message, label, key, timeout)


    def request(self, action, data=None, timeout=None):
        """ Issue a domain request for *action* with the optional *data*
            dictionary. The content is opaque to the handshake.
        """

        if action in fields.CONTROL:
            raise ValueError('reserved protocol action: ' + action)

        message = protocol.request(action, data)
        return self.submit(message, action, timeout=timeout)


    def login(self, chat_id, password, timeout=None):
        """ Request a session for *chat_id*. Login always uses the fixed key;
            on success the session key from the acknowledgment is adopted
            before this returns.
        """

        if self.session.established:
            return Result.failure('already logged in as ' + str(self.session.chat_id))

        data = dict()
        data[fields.CHAT_ID] = chat_id
        data[fields.PASSWORD] = password

        message = protocol.request(fields.LOGIN, data)
        return self.submit(message, fields.LOGIN, self.session.fixed_key, timeout)


# end of class Client


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
