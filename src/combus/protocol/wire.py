"""Frame codec: a message as the bytes handed to the transport.

Layout::

    [JSON header][SEP][JSON document]

The header carries the protocol version and the type tag, so a receiver
can choose the message class, or reject the frame, before the document is
parsed at all.
"""

from __future__ import annotations

from typing import Tuple

from .. import json
from ..document import Document
from . import catalogue
from .errors import FrameError
from .message import Message


VERSION = 1

# Separator between header and document. Compact JSON never contains a
# raw newline, so the first occurrence is always the boundary.
_SEP = b"\n\n"


def pack(message: Message) -> bytes:
    """Serialize a message to a single frame."""

    header = {
        "version": VERSION,
        "type": int(message.type_tag),
    }

    body = message.encode().to_python()
    return json.dumps(header) + _SEP + json.dumps(body)


def _split(frame: bytes) -> Tuple[dict, bytes]:

    try:
        header_bytes, body = frame.split(_SEP, 1)
    except ValueError:
        raise FrameError("frame has no document section") from None

    try:
        header = json.loads(header_bytes)
    except (json.DecodeError, UnicodeDecodeError) as exc:
        raise FrameError(f"malformed frame header: {exc}") from None

    if not isinstance(header, dict):
        raise FrameError("frame header is not a JSON object")

    version = header.get("version")
    if version != VERSION:
        raise FrameError(f"frame is protocol version {version!r}, expected {VERSION}")

    tag = header.get("type")
    if isinstance(tag, bool) or not isinstance(tag, int):
        raise FrameError(f"frame type tag is not an integer: {tag!r}")

    return header, body


def _document(body: bytes) -> Document:

    try:
        return Document.from_python(json.loads(body))
    except (json.DecodeError, UnicodeDecodeError) as exc:
        raise FrameError(f"malformed frame document: {exc}") from None


def peek(frame: bytes) -> int:
    """Return the type tag of a frame without parsing its document."""

    header, _body = _split(frame)
    return header["type"]


def unpack(frame: bytes) -> Tuple[int, Document]:
    """Deserialize a frame to its type tag and document."""

    header, body = _split(frame)
    return header["type"], _document(body)


def decode(frame: bytes) -> Message:
    """Deserialize a frame to the message its type tag names. An unknown
    tag raises :class:`~combus.protocol.errors.UnknownMessageType` before
    the document is parsed."""

    header, body = _split(frame)
    message = catalogue.lookup(header["type"])
    return message.decode(_document(body))
