""" Hand-off point between the handshake and whatever interprets the
    content of confirmed pushes. The handshake itself never looks inside a
    push; once the remote side confirms it, the exact text is given to a
    :class:`Processor`, which parses it and calls the handler registered for
    its action.
"""

import logging

from .protocol import codec

log = logging.getLogger(__name__)


class Processor:
    """ Dispatch confirmed pushes by action. Handlers are registered with
        :func:`on`; each receives the parsed
        :class:`udpchat.protocol.message.Message`. A *default* handler, if
        given, is offered every processed push as well, after the handler
        registered for its action (if any) has run.
    """

    def __init__(self, default=None):
        self.default = default
        self.handlers = dict()


    def on(self, action, handler):
        self.handlers[action] = handler


    def process(self, text):
        """ Parse the confirmed *text* and dispatch it. Errors raised while
            parsing propagate; the coordinator logs them.
        """

        message = codec.parse(text)
        action = message.action

        handler = self.handlers.get(action)

        if handler is None and self.default is None:
            log.warning("Unhandled confirmed action: %s", action)
            return

        log.info("Processing confirmed action: %s", action)

        if handler is not None:
            handler(message)

        if self.default is not None:
            self.default(message)


# end of class Processor


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
