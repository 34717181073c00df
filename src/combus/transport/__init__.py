"""Transport layer implementations."""

from .. import config

from .base import (
    Publisher,
    Subscriber,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
    TransportPortError,
)

_BACKEND = config.transport()

if _BACKEND == "zmq":
    from .zmq import publish
else:
    raise ImportError(f"unknown COMBUS_TRANSPORT backend: {_BACKEND!r}")
