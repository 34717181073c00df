"""Conversions between document scalars and typed fields.

Every codec here follows the same contract: ``get()`` never fails, an
absent path or unparseable text yields the default, and ``put()`` always
succeeds, overwriting whatever was there.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from .. import document
from ..document import Document
from .errors import InvalidKey
from .types import Level, to_level


_INTEGER = re.compile(r"^\s*[+-]?[0-9]+\s*$")


class Codec:
    """Base scalar codec; subclasses implement :meth:`parse`."""

    default: Any = None

    def parse(self, text: str) -> Any:
        raise NotImplementedError

    def render(self, value: Any) -> str:
        return document.render(value)

    def get(self, node: Document, path: str, default: Any = None) -> Any:
        if default is None:
            default = self.default

        text = node.get(path)
        if text is None:
            return default

        try:
            return self.parse(text)
        except (ValueError, OverflowError):
            return default

    def put(self, node: Document, path: str, value: Any) -> None:
        node.put(path, self.render(value))


class String(Codec):
    default = ""

    def parse(self, text: str) -> str:
        return text


class Integer(Codec):
    """Decimal integer, optionally bounded; out-of-range text is rejected."""

    default = 0

    def __init__(self, minimum: Optional[int] = None, maximum: Optional[int] = None):
        self.minimum = minimum
        self.maximum = maximum

    def parse(self, text: str) -> int:
        if _INTEGER.match(text) is None:
            raise ValueError(f"not an integer: {text!r}")

        value = int(text)

        if self.minimum is not None and value < self.minimum:
            raise ValueError(f"{value} is below {self.minimum}")
        if self.maximum is not None and value > self.maximum:
            raise ValueError(f"{value} is above {self.maximum}")

        return value

    def render(self, value: Any) -> str:
        return str(int(value))


class Float(Codec):
    default = 0.0

    def parse(self, text: str) -> float:
        return float(text)

    def render(self, value: Any) -> str:
        return repr(float(value))


class Boolean(Codec):
    default = False

    def parse(self, text: str) -> bool:
        lowered = text.strip().lower()

        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False

        raise ValueError(f"not a boolean: {text!r}")

    def render(self, value: Any) -> str:
        return document.render(bool(value))


class LevelCodec(Integer):
    """Signal level. Any integer that fits the wire width is accepted;
    values outside :class:`Level` are passed through unchanged."""

    default = Level.TRACE

    def __init__(self):
        Integer.__init__(self, 0, 0xFFFF)

    def parse(self, text: str):
        return to_level(Integer.parse(self, text))


STRING = String()
INT = Integer(-0x80000000, 0x7FFFFFFF)
UINT16 = Integer(0, 0xFFFF)
UINT32 = Integer(0, 0xFFFFFFFF)
UINT64 = Integer(0, 0xFFFFFFFFFFFFFFFF)
FLOAT = Float()
BOOL = Boolean()
LEVEL = LevelCodec()


def validate_key(key: Any) -> str:
    """Return *key* if it can be used as a single path segment, otherwise
    raise :class:`InvalidKey`."""

    if not isinstance(key, str):
        raise InvalidKey(key, "keys must be strings")
    if key == "":
        raise InvalidKey(key, "keys cannot be empty")
    if document.separator in key:
        raise InvalidKey(key, f"keys cannot contain {document.separator!r}")

    return key
