"""ZeroMQ publish/subscribe transport.

Each frame goes out as a two-part ZeroMQ message::

    topic_with_trailing_dot, frame

The trailing dot on the topic prevents leading substring matches from
picking up extra topics when subscribing.
"""

from __future__ import annotations

import atexit
import logging
import queue
import threading
from typing import Dict, Optional, Tuple

import zmq

from ... import config
from ... import weakref
from ..base import Publisher, Subscriber, TransportConnectionError, TransportError, TransportPortError, TransportTimeout

logger = logging.getLogger(__name__)

zmq_context = zmq.Context()


def _topic_bytes(topic: str) -> bytes:
    return (topic + ".").encode()


class Server(Publisher):
    """PUB server. If no *port* is given the first free port in
    :func:`combus.config.port_range` is bound, skipping any in *avoid*."""

    def __init__(self, port: Optional[int] = None, address: str = "*", avoid: Optional[set] = None):
        self.address = address
        self.port = int(port) if port is not None else None
        self.avoid = set(avoid or ())

        self.socket = None
        self.thread = None
        self.shutdown = False
        self._queue: "queue.SimpleQueue[Tuple[bytes, bytes]]" = queue.SimpleQueue()
        self._signal_lock = threading.Lock()

        self.open()

    def _bind(self, socket) -> None:

        if self.port is not None:
            try:
                socket.bind(f"tcp://{self.address}:{self.port}")
            except zmq.ZMQError as exc:
                raise TransportPortError(f"port already in use: {self.port}") from exc
            return

        minimum, maximum = config.port_range()

        for port in range(minimum, maximum + 1):
            if port in self.avoid:
                continue
            try:
                socket.bind(f"tcp://{self.address}:{port}")
            except zmq.ZMQError:
                continue
            self.port = port
            return

        raise TransportPortError(f"no ports available in range {minimum}:{maximum}")

    def open(self) -> None:

        if self.socket is not None:
            return

        socket = zmq_context.socket(zmq.PUB)
        socket.setsockopt(zmq.LINGER, 0)

        try:
            self._bind(socket)
        except TransportPortError:
            socket.close()
            raise

        self.socket = socket

        # Sends from any thread are queued and signalled to the one thread
        # that owns the PUB socket.
        internal = f"inproc://combus.publish.Server:signal:{id(self)}"
        self._sig_rx = zmq_context.socket(zmq.PAIR)
        self._sig_rx.bind(internal)
        self._sig_tx = zmq_context.socket(zmq.PAIR)
        self._sig_tx.connect(internal)

        self.shutdown = False
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

    def close(self) -> None:

        if self.socket is None:
            return

        self.shutdown = True
        with self._signal_lock:
            self._sig_tx.send(b"")
        self.thread.join()

        self._sig_tx.close()
        self._sig_rx.close()
        self.socket.close()

        self.socket = None
        self.thread = None

    def send(self, frame: bytes, topic: str = "") -> None:

        if self.socket is None:
            raise TransportError("publisher is closed")

        self._queue.put((_topic_bytes(topic), frame))
        with self._signal_lock:
            self._sig_tx.send(b"")

    def _drain(self) -> None:

        while True:
            try:
                parts = self._queue.get(block=False)
            except queue.Empty:
                return

            try:
                self.socket.send_multipart(parts)
            except zmq.ZMQError:
                logger.exception("failed to publish frame on topic %r", parts[0])

    def run(self) -> None:

        poller = zmq.Poller()
        poller.register(self._sig_rx, zmq.POLLIN)

        while not self.shutdown:
            for active, _flag in poller.poll(1000):
                if active == self._sig_rx:
                    self._sig_rx.recv()
                    self._drain()


# end of class Server



class Client(Subscriber):
    """SUB client. Frames are either pulled with :func:`recv`, or pushed to
    callbacks registered with :func:`register`; not both, since a ZeroMQ
    socket belongs to one thread."""

    timeout = 0.1

    def __init__(self, address: str, port: int):
        self.address = address
        self.port = int(port)

        self.socket = None
        self.thread = None
        self.shutdown = False
        self.callback_all = weakref.Callbacks()
        self.callback_specific: Dict[str, weakref.Callbacks] = {}

        self.open()

    def open(self) -> None:

        if self.socket is not None:
            return

        socket = zmq_context.socket(zmq.SUB)
        socket.setsockopt(zmq.LINGER, 0)

        try:
            socket.connect(f"tcp://{self.address}:{self.port}")
        except zmq.ZMQError as exc:
            socket.close()
            raise TransportConnectionError(f"cannot connect to {self.address}:{self.port}") from exc

        self.socket = socket

    def close(self) -> None:

        self.shutdown = True

        if self.thread is not None and self.thread is not threading.current_thread():
            self.thread.join()
        self.thread = None

        if self.socket is not None:
            self.socket.close()
            self.socket = None

    def subscribe(self, topic: str) -> None:
        """Receive frames published on *topic*; the empty topic receives
        everything."""

        if topic == "":
            prefix = b""
        else:
            prefix = _topic_bytes(topic)

        self.socket.setsockopt(zmq.SUBSCRIBE, prefix)

    def _recv(self, timeout: Optional[float]) -> Tuple[str, bytes]:

        if timeout is not None:
            if self.socket.poll(int(timeout * 1000), zmq.POLLIN) == 0:
                raise TransportTimeout(f"no frame in {timeout:.2f} sec")

        parts = self.socket.recv_multipart()

        if len(parts) != 2:
            raise TransportError(f"expected 2 message parts, received {len(parts)}")

        topic, frame = parts
        topic = topic.decode()

        if topic.endswith("."):
            topic = topic[:-1]

        return topic, frame

    def recv(self, timeout: Optional[float] = None) -> Tuple[str, bytes]:

        if self.thread is not None:
            raise RuntimeError("frames are being delivered to registered callbacks")

        return self._recv(timeout)

    def register(self, callback, topic: Optional[str] = None) -> None:
        """Register a callback that will be invoked with every newly arrived
        frame. If no topic is specified the callback will be invoked for all
        frames; otherwise the topic must be an exact match. Only a weak
        reference to the callback is kept, so the caller must hold on to it.

        :func:`subscribe` will be invoked for any/all topics registered
        with a callback, it does not need to be called separately.
        """

        if topic is None:
            self.callback_all.add(callback)
            self.subscribe("")
        else:
            callbacks = self.callback_specific.get(topic, weakref.Callbacks())
            callbacks.add(callback)
            self.callback_specific[topic] = callbacks
            self.subscribe(topic)

        if self.thread is None:
            self.shutdown = False
            self.thread = threading.Thread(target=self.run, daemon=True)
            self.thread.start()

    def propagate(self, topic: str, frame: bytes) -> None:
        """Invoke any/all callbacks registered via :func:`register` for
        a newly arrived frame."""

        self.callback_all(frame)

        try:
            callbacks = self.callback_specific[topic]
        except KeyError:
            return

        callbacks(frame)

        if not callbacks:
            del self.callback_specific[topic]

    def run(self) -> None:

        while not self.shutdown:
            try:
                topic, frame = self._recv(self.timeout)
            except TransportTimeout:
                continue
            except TransportError:
                logger.exception("discarding malformed transport message")
                continue

            self.propagate(topic, frame)


# end of class Client



def _cleanup() -> None:
    zmq_context.destroy(linger=0)


atexit.register(_cleanup)
