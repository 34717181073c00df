import pytest

from combus.protocol import catalogue
from combus.protocol import wire
from combus.protocol.errors import UnknownMessageType
from combus.protocol.protocol import Bus
from combus.transport.base import Publisher, Subscriber, TransportTimeout


class RecordingPublisher(Publisher):

    def __init__(self):
        self.sent = list()

    def open(self):
        pass

    def close(self):
        pass

    def send(self, frame, topic=""):
        self.sent.append((topic, frame))


class QueuedSubscriber(Subscriber):

    def __init__(self, frames=()):
        self.frames = list(frames)

    def open(self):
        pass

    def close(self):
        pass

    def subscribe(self, topic):
        pass

    def recv(self, timeout=None):
        if not self.frames:
            raise TransportTimeout('no frame queued')
        return '', self.frames.pop(0)


def test_publish():

    publisher = RecordingPublisher()
    bus = Bus(publisher=publisher)

    message = catalogue.PauseStatusMessage(paused=True)
    frame = bus.publish(message, 'status')

    assert publisher.sent == [('status', frame)]
    assert wire.decode(frame) == message


def test_dispatch_to_handlers():

    bus = Bus()
    received = list()
    others = list()

    bus.on(catalogue.RunStatusMessage, received.append)
    bus.on(int(catalogue.PauseStatusMessage.type_tag), others.append)

    message = catalogue.RunStatusMessage(recording=True, run_number=9)
    returned = bus.dispatch(wire.pack(message))

    assert returned == message
    assert received == [message]
    assert others == []


def test_off():

    bus = Bus()
    received = list()

    bus.on(catalogue.ScanStatusMessage, received.append)
    bus.off(catalogue.ScanStatusMessage, received.append)

    # Removing a handler that is not registered is harmless.
    bus.off(catalogue.ScanStatusMessage, received.append)

    bus.dispatch(wire.pack(catalogue.ScanStatusMessage(scanning=True)))
    assert received == []


def test_unknown_tag():

    bus = Bus()

    with pytest.raises(UnknownMessageType):
        bus.on(0x0999, print)

    frame = wire.pack(catalogue.GetInputFacts())
    frame = frame.replace(b'%d' % catalogue.GetInputFacts.type_tag, b'%d' % 0x0999, 1)

    with pytest.raises(UnknownMessageType) as raised:
        bus.dispatch(frame)

    assert raised.value.tag == 0x0999


def test_receive():

    message = catalogue.BeamInfoMessage(facility='SNS', beam_id='BL-7')
    subscriber = QueuedSubscriber([wire.pack(message)])
    bus = Bus(subscriber=subscriber)

    assert bus.receive() == message

    with pytest.raises(TransportTimeout):
        bus.receive(timeout=0)


def test_missing_endpoints():

    bus = Bus()

    with pytest.raises(RuntimeError):
        bus.publish(catalogue.GetProcessVariables())

    with pytest.raises(RuntimeError):
        bus.receive()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
