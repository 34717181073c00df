import pytest

import combus


@pytest.fixture
def clean_config(monkeypatch):
    """ Clear the cached settings and the environment variables behind them,
        restoring the cache afterwards.
    """

    for variable in ('COMBUS_SOURCE', 'COMBUS_TRANSPORT', 'COMBUS_PORT_MIN', 'COMBUS_PORT_MAX'):
        monkeypatch.delenv(variable, raising=False)

    combus.config.reset()
    yield
    combus.config.reset()


@pytest.fixture
def rules():
    return [
        combus.protocol.RuleInfo('beam_down', 'pulse_freq < 1'),
        combus.protocol.RuleInfo('sms_lost', 'not sms_connected'),
    ]


@pytest.fixture
def signals():
    Level = combus.protocol.Level

    return [
        combus.protocol.SignalInfo('BEAM', 'beam_down', 'dasmon', Level.WARNING, 'Beam is down'),
        combus.protocol.SignalInfo('SMS', 'sms_lost', 'dasmon', Level.ERROR, 'Lost SMS connection'),
    ]

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
