import pytest

from combus.document import Document
from combus.protocol import fields
from combus.protocol.errors import InvalidKey
from combus.protocol.types import Level


def test_missing_paths_use_defaults():

    document = Document()

    assert fields.STRING.get(document, 'host') == ''
    assert fields.INT.get(document, 'status') == 0
    assert fields.UINT32.get(document, 'run_number') == 0
    assert fields.FLOAT.get(document, 'count_rate') == 0.0
    assert fields.BOOL.get(document, 'connected') is False
    assert fields.LEVEL.get(document, 'level') == Level.TRACE

    assert fields.STRING.get(document, 'host', 'localhost') == 'localhost'
    assert fields.UINT32.get(document, 'run_number', 7) == 7


def test_type_mismatch_uses_defaults():

    document = Document()
    document.put('number', 'forty-two')
    document.put('flag', 'maybe')
    document.put('fraction', '3.5')

    assert fields.INT.get(document, 'number') == 0
    assert fields.FLOAT.get(document, 'number') == 0.0
    assert fields.BOOL.get(document, 'flag') is False
    assert fields.INT.get(document, 'fraction') == 0
    assert fields.FLOAT.get(document, 'fraction') == 3.5


def test_unsigned_ranges():

    document = Document()
    document.put('negative', '-1')
    document.put('big', str(0x100000000))
    document.put('port', '70000')

    assert fields.UINT32.get(document, 'negative') == 0
    assert fields.UINT32.get(document, 'big') == 0
    assert fields.UINT64.get(document, 'big') == 0x100000000
    assert fields.UINT16.get(document, 'port') == 0
    assert fields.INT.get(document, 'negative') == -1


def test_booleans():

    document = Document()

    for text, expected in (('true', True), ('TRUE', True), ('1', True), ('false', False), ('0', False)):
        document.put('flag', text)
        assert fields.BOOL.get(document, 'flag', not expected) is expected

    fields.BOOL.put(document, 'flag', True)
    assert document.get('flag') == 'true'


def test_put_overwrites():

    document = Document()
    fields.UINT32.put(document, 'run_number', 1)
    fields.UINT32.put(document, 'run_number', 4821)

    assert document.get('run_number') == '4821'
    assert len(document) == 1


def test_float_round_trip():

    document = Document()

    for value in (0.1, 1e-300, 123456789.123456789, -0.0, float('inf')):
        fields.FLOAT.put(document, 'value', value)
        assert fields.FLOAT.get(document, 'value') == value


def test_level():

    document = Document()

    fields.LEVEL.put(document, 'level', Level.ERROR)
    assert document.get('level') == '4'
    assert fields.LEVEL.get(document, 'level') is Level.ERROR

    # No range validation: an unknown level is passed through as an int.
    document.put('level', '42')
    level = fields.LEVEL.get(document, 'level')
    assert level == 42
    assert not isinstance(level, Level)

    fields.LEVEL.put(document, 'level', level)
    assert document.get('level') == '42'


def test_validate_key():

    assert fields.validate_key('temp1') == 'temp1'

    for bad in ('', 'beam.current', 5, None):
        with pytest.raises(InvalidKey):
            fields.validate_key(bad)

    with pytest.raises(ValueError):
        fields.validate_key('a.b')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
