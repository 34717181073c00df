"""Exceptions raised by the message layer.

Field-level problems found while decoding are never raised; they are
recovered with defaults (see :mod:`combus.protocol.facets`). The exceptions
here cover the conditions that cannot be recovered locally.
"""


class ProtocolError(Exception):
    """Base class for all message-layer errors."""


class InvalidKey(ProtocolError, ValueError):
    """A map key cannot be represented as a document path segment."""

    def __init__(self, key, reason):
        self.key = key
        self.reason = reason
        ProtocolError.__init__(self, f"invalid key {key!r}: {reason}")


class UnknownMessageType(ProtocolError, LookupError):
    """No message in the catalogue carries the received type tag."""

    def __init__(self, tag):
        self.tag = tag
        ProtocolError.__init__(self, f"unrecognized message type tag: {tag!r}")


class FrameError(ProtocolError, ValueError):
    """An encoded frame could not be split into header and document."""
