import pytest

from combus.document import Document
from combus.protocol import catalogue
from combus.protocol.errors import UnknownMessageType
from combus.protocol.message import Message
from combus.protocol.tags import MessageType


def test_tags_unique():

    tags = [int(message.type_tag) for message in catalogue.messages]
    assert len(tags) == len(set(tags))
    assert sorted(catalogue.tags()) == sorted(tags)


def test_every_tag_registered():

    assert set(catalogue.tags()) == set(int(tag) for tag in MessageType)


def test_lookup():

    for message in catalogue.messages:
        assert catalogue.lookup(message.type_tag) is message
        assert catalogue.lookup(int(message.type_tag)) is message


def test_lookup_unknown():

    with pytest.raises(UnknownMessageType) as raised:
        catalogue.lookup(0x0999)

    assert raised.value.tag == 0x0999

    with pytest.raises(LookupError):
        catalogue.lookup(None)


def test_decode_by_tag():

    document = catalogue.ScanStatusMessage(scanning=True, scan_index=3).encode()
    message = catalogue.decode(MessageType.SCAN_STATUS, document)

    assert isinstance(message, catalogue.ScanStatusMessage)
    assert message.status.scan_index == 3

    with pytest.raises(UnknownMessageType):
        catalogue.decode(1, document)


def test_try_decode_by_tag():

    decoded = catalogue.try_decode(MessageType.INPUT_FACTS, Document())

    assert decoded.value.inputs.facts == set()
    assert [issue.section for issue in decoded.issues] == ['facts']


def test_duplicate_tags_rejected():

    class Impostor(Message):
        type_tag = MessageType.RUN_STATUS

    with pytest.raises(ValueError):
        catalogue.build(catalogue.messages + (Impostor,))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
