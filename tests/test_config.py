import os
import socket

import pytest

import combus


def test_source_default(clean_config):

    expected = '%s:%d' % (socket.gethostname(), os.getpid())
    assert combus.config.source() == expected


def test_source_environment(clean_config, monkeypatch):

    monkeypatch.setenv('COMBUS_SOURCE', 'dasmond')
    assert combus.config.source() == 'dasmond'

    # Cached after the first call.
    monkeypatch.setenv('COMBUS_SOURCE', 'something-else')
    assert combus.config.source() == 'dasmond'


def test_source_override(clean_config):

    assert combus.config.source('beamline-12') == 'beamline-12'
    assert combus.config.source() == 'beamline-12'

    with pytest.raises(ValueError):
        combus.config.source('')


def test_source_used_by_messages(clean_config):

    combus.config.source('unit-test')
    message = combus.protocol.GetRuleDefinitions()
    assert message.source == 'unit-test'


def test_transport(clean_config, monkeypatch):

    assert combus.config.transport() == 'zmq'

    combus.config.reset()
    monkeypatch.setenv('COMBUS_TRANSPORT', 'other')
    assert combus.config.transport() == 'other'


def test_port_range(clean_config, monkeypatch):

    assert combus.config.port_range() == (10139, 13679)

    combus.config.reset()
    monkeypatch.setenv('COMBUS_PORT_MIN', '20000')
    monkeypatch.setenv('COMBUS_PORT_MAX', '20010')
    assert combus.config.port_range() == (20000, 20010)

    assert combus.config.port_range(maximum=20005) == (20000, 20005)

    with pytest.raises(ValueError):
        combus.config.port_range(30000, 20000)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
