from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Union

from . import catalogue
from . import wire
from .errors import UnknownMessageType
from .message import Message

logger = logging.getLogger(__name__)

Handler = Callable[[Message], None]


class Bus:
    """Send messages through a publisher, and hand received frames to the
    handlers registered for their message type.

    Either endpoint may be omitted: a process that only broadcasts status
    needs no subscriber, and a passive monitor needs no publisher.
    """

    def __init__(self, publisher=None, subscriber=None):
        self.publisher = publisher
        self.subscriber = subscriber
        self._handlers: Dict[int, List[Handler]] = {}


    def publish(self, message: Message, topic: str = "") -> bytes:

        if self.publisher is None:
            raise RuntimeError("this bus has no publisher")

        frame = wire.pack(message)
        self.publisher.send(frame, topic)
        return frame


    def on(self, message: Union[type, int], handler: Handler) -> None:
        """Invoke *handler* for every received message of the given class
        or type tag."""

        tag = getattr(message, "type_tag", message)
        catalogue.lookup(tag)

        self._handlers.setdefault(int(tag), []).append(handler)


    def off(self, message: Union[type, int], handler: Handler) -> None:

        tag = int(getattr(message, "type_tag", message))

        try:
            self._handlers[tag].remove(handler)
        except (KeyError, ValueError):
            return

        if not self._handlers[tag]:
            del self._handlers[tag]


    def dispatch(self, frame: bytes) -> Message:
        """Decode *frame* and invoke the matching handlers. A frame whose
        type tag is not in the catalogue raises
        :class:`UnknownMessageType`; it is never silently dropped."""

        try:
            message = wire.decode(frame)
        except UnknownMessageType as exc:
            logger.warning("unrecognized message: type tag %r", exc.tag)
            raise

        for handler in tuple(self._handlers.get(int(message.type_tag), ())):
            handler(message)

        return message


    def receive(self, timeout: Optional[float] = None) -> Message:
        """Wait for the next frame from the subscriber and dispatch it."""

        if self.subscriber is None:
            raise RuntimeError("this bus has no subscriber")

        _topic, frame = self.subscriber.recv(timeout)
        return self.dispatch(frame)
