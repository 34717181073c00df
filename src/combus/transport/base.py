"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`combus.protocol` so the message layer remains
transport-agnostic. A transport moves opaque frames; it never looks inside
them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Tuple


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """No frame arrived within the requested time."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class TransportPortError(TransportError):
    """No suitable port could be bound or connected."""


class Publisher(ABC):
    """Sending half of a publish/subscribe channel."""

    @abstractmethod
    def open(self) -> None:
        """Establish the underlying connection/socket."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket."""

    @abstractmethod
    def send(self, frame: bytes, topic: str = "") -> None:
        """Broadcast one encoded frame on *topic*."""


class Subscriber(ABC):
    """Receiving half of a publish/subscribe channel."""

    @abstractmethod
    def open(self) -> None:
        """Establish the underlying connection/socket."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket."""

    @abstractmethod
    def subscribe(self, topic: str) -> None:
        """Receive frames published on *topic*."""

    @abstractmethod
    def recv(self, timeout: Optional[float] = None) -> Tuple[str, bytes]:
        """Return the next (topic, frame) pair; raise
        :class:`TransportTimeout` if none arrives within *timeout*
        seconds."""
