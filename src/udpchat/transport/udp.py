"""UDP datagram transport."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Any, Optional, Tuple

from .. import config
from .base import Transport, TransportClosed, TransportError, TransportTimeout

log = logging.getLogger(__name__)


class UdpTransport(Transport):
    """ Send and receive datagrams on a single UDP socket. The socket is bound
        to an ephemeral local port unless *bind* is specified; *remote* is the
        default destination for :meth:`send`.

        The lock around sendto() keeps concurrent callers from interleaving
        on the socket; recv() is expected to be called from a single thread.
    """

    def __init__(self, remote: Optional[Tuple[str, int]] = None, bind: Tuple[str, int] = ('', 0), buffer: Optional[int] = None):

        if buffer is None:
            buffer = config.get('max_datagram')

        self.buffer = int(buffer)
        self.remote = remote

        if remote is not None:
            # Resolve once; a hostname lookup per datagram is wasted effort.
            host, port = remote
            self.remote = (socket.gethostbyname(host), int(port))

        self.socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.socket.bind(bind)
        self.socket_lock = threading.Lock()
        self._closed = False


    @property
    def address(self) -> Tuple[str, int]:
        return self.socket.getsockname()


    @property
    def is_open(self) -> bool:
        return self._closed == False


    def close(self) -> None:

        if self._closed:
            return

        self._closed = True

        # shutdown() is what actually wakes a thread blocked in recvfrom() on
        # Linux; close() alone leaves it waiting. Not every platform allows
        # shutdown() on an unconnected datagram socket.

        try:
            self.socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass

        self.socket.close()
        log.debug("Closed UDP transport")


    def send(self, datagram: bytes, address: Optional[Any] = None) -> None:

        if address is None:
            address = self.remote

        if address is None:
            raise TransportError('no destination address for datagram')

        if self._closed:
            raise TransportClosed('transport is closed')

        try:
            with self.socket_lock:
                self.socket.sendto(datagram, address)
        except OSError as e:
            if self._closed:
                raise TransportClosed(str(e))
            raise TransportError(str(e))

        log.debug("Sent %d byte datagram to %s:%s", len(datagram), address[0], address[1])


    def recv(self, timeout: Optional[float] = None) -> Tuple[bytes, Any]:

        if self._closed:
            raise TransportClosed('transport is closed')

        try:
            self.socket.settimeout(timeout)
            datagram, address = self.socket.recvfrom(self.buffer)
        except socket.timeout:
            raise TransportTimeout("no datagram in %s sec" % (timeout))
        except ConnectionError as e:
            # An ICMP port-unreachable for an earlier sendto() surfaces here
            # on some platforms. The socket is still usable.
            raise TransportError(str(e))
        except OSError as e:
            raise TransportClosed(str(e))

        # A shut-down socket returns an empty read on some platforms instead
        # of raising.

        if self._closed:
            raise TransportClosed('transport is closed')

        return datagram, address


# end of class UdpTransport


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
