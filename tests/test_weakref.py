import pytest

import combus


class Referenced:
    def a_method(self, frame):
        pass


def test_persistent_object():
    thing = Referenced()

    reference = combus.weakref.ref(thing)
    assert reference is not None
    assert callable(reference)

    dereferenced = reference()
    assert dereferenced is thing


def test_persistent_object_method():
    """ A plain weakref.ref() cannot refer to a bound method, which loses
        scope as soon as it is created; this is why subscribers register
        callbacks through combus.weakref.
    """

    thing = Referenced()

    reference = combus.weakref.ref(thing.a_method)
    dereferenced = reference()
    assert dereferenced is not None
    assert callable(dereferenced)


def test_bus_dispatch_reference():
    bus = combus.Bus()

    reference = combus.weakref.ref(bus.dispatch)
    assert reference() == bus.dispatch

    del bus
    assert reference() is None


def test_removed_object_method():
    thing = Referenced()

    reference = combus.weakref.ref(thing.a_method)

    del thing

    dereferenced = reference()
    assert dereferenced is None


class Recorder:
    def __init__(self):
        self.frames = list()

    def record(self, frame):
        self.frames.append(frame)

    def fail(self, frame):
        raise RuntimeError('callback failure')


def test_callbacks_invoked_in_order():
    first = Recorder()
    second = Recorder()

    callbacks = combus.weakref.Callbacks()
    callbacks.add(first.fail)
    callbacks.add(first.record)
    callbacks.add(second.record)

    callbacks(b'frame')

    assert first.frames == [b'frame']
    assert second.frames == [b'frame']
    assert len(callbacks) == 3


def test_callbacks_drop_dead_references():
    kept = Recorder()
    dropped = Recorder()

    callbacks = combus.weakref.Callbacks()
    callbacks.add(kept.record)
    callbacks.add(dropped.record)

    del dropped
    callbacks(b'frame')

    assert len(callbacks) == 1
    assert kept.frames == [b'frame']


def test_callbacks_must_be_callable():
    callbacks = combus.weakref.Callbacks()

    with pytest.raises(TypeError):
        callbacks.add('not callable')

    assert len(callbacks) == 0


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
