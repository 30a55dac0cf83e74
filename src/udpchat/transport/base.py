"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`udpchat.protocol` so the protocol remains unaware of
sockets. A transport moves opaque datagrams; it neither frames nor retries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """No datagram arrived within the requested timeout."""


class TransportClosed(TransportError):
    """The transport was closed, locally or otherwise, and cannot be used."""


class Transport(ABC):
    """Minimal contract for a datagram transport.

    Implementations must allow :meth:`send` to be called from several
    threads at once while a single other thread blocks in :meth:`recv`.
    """

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying socket; a blocked recv() must return."""

    @abstractmethod
    def send(self, datagram: bytes, address: Optional[Any] = None) -> None:
        """Send one datagram, to *address* or to the default remote."""

    @abstractmethod
    def recv(self, timeout: Optional[float] = None) -> Tuple[bytes, Any]:
        """Receive the next datagram and the address it came from.

        Raises TransportTimeout if nothing arrived in *timeout* seconds, and
        TransportClosed if the transport is closed.
        """

    @property
    def is_open(self) -> bool:
        """Whether the transport can currently send and receive."""
        return False
