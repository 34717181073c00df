from . import errors
from . import types
from . import fields
from . import facets
from . import message
from . import tags
from . import catalogue
from . import wire
from . import factory
from . import protocol

from .catalogue import *
from .errors import FrameError, InvalidKey, ProtocolError, UnknownMessageType
from .facets import (
    BeamInfo,
    BeamMetrics,
    ConnectionStatus,
    DecodeIssue,
    Decoded,
    ErrorMap,
    FactSet,
    PauseStatus,
    PVMap,
    RulePayload,
    RunInfo,
    RunMetrics,
    RunStatus,
    ScanStatus,
    StreamMetrics,
)
from .message import Message, SimpleMessage
from .protocol import Bus
from .tags import MessageType
from .types import Level, PVEntry, RuleInfo, SignalInfo, UserInfo


"""
combus Protocol Layer
=====================

This package defines the typed messages exchanged with the DAS monitor and
their mapping onto a hierarchical document. It MUST NOT depend on any
transport implementation.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Bus facade (protocol.py)
    publish() / on() / dispatch()
    Unknown type tags are surfaced, never dropped

    │
    ▼
Frame codec (wire.py)
    Message <-> bytes; type tag readable before the document is parsed

    │
    ▼
Message Catalogue (catalogue.py, tags.py)
    Concrete messages and the tag -> class registry

    │
    ▼
Message Envelope (message.py)
    Type tag, source, time, id; composes facets in a fixed order

    │
    ▼
Payload Facets (facets.py)
    Independent encode/decode units; permissive decoding with
    explicit DecodeIssue reporting

    │
    ▼
Field Codecs (fields.py)
    Typed get-with-default / put on document scalars

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
