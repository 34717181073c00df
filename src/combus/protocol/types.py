"""Record types carried inside message payloads.

These are the data shapes produced by the rule engine and the signal
monitor; the message layer only moves them around.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union


class Level(enum.IntEnum):
    """Severity of a signal, stored on the wire as a small integer."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5


# A level decoded from the wire is not range checked; a value outside the
# enumeration stays a plain int so it re-encodes unchanged.
LevelValue = Union[Level, int]


def to_level(value: int) -> LevelValue:
    try:
        return Level(value)
    except ValueError:
        return value


@dataclass
class RuleInfo:
    fact: str = ""
    expr: str = ""


@dataclass
class SignalInfo:
    name: str = ""
    fact: str = ""
    source: str = ""
    level: LevelValue = Level.TRACE
    msg: str = ""


@dataclass
class UserInfo:
    id: str = ""
    name: str = ""
    role: str = ""


@dataclass
class PVEntry:
    """Most recent value of one process variable."""

    value: float = 0.0
    status: int = 0
    timestamp: int = 0
