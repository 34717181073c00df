"""Payload facets: independently encodable pieces of a message body.

A facet knows how to write itself into a :class:`~combus.document.Document`
and how to read itself back. Facets know nothing about the message that
carries them, which is what lets one facet be shared between several
message types.

Decoding is deliberately permissive. A missing field takes its default, a
missing or malformed section leaves that section empty, and nothing is ever
raised; each section that had to fall back is reported as a
:class:`DecodeIssue` by :meth:`Facet.try_decode`. Encoding, on the other
hand, rejects map keys that cannot be represented as a path segment.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Dict, List, NamedTuple, Optional, Set, Tuple

from .. import document
from ..document import Document, DocumentPathError
from . import fields
from .errors import InvalidKey
from .types import PVEntry, RuleInfo, SignalInfo, UserInfo

logger = logging.getLogger(__name__)


class DecodeIssue(NamedTuple):
    """A section of a document that could not be read."""

    section: str
    reason: str


class Decoded(NamedTuple):
    value: Any
    issues: List[DecodeIssue]


class Result(NamedTuple):
    """Outcome of reading one section: a value, or the issue that
    prevented reading it."""

    value: Any = None
    issue: Optional[DecodeIssue] = None

    @property
    def ok(self) -> bool:
        return self.issue is None

    def value_or(self, default: Callable[[], Any], issues: Optional[List[DecodeIssue]] = None) -> Any:
        if self.issue is None:
            return self.value
        if issues is not None:
            issues.append(self.issue)
        return default()


def attempt(node: Document, path: str, reader: Callable[[Document], Any]) -> Result:
    """Apply *reader* to the subtree at *path* as a unit; any failure,
    including the subtree being absent, becomes a :class:`DecodeIssue`."""

    try:
        subtree = node.get_child(path)
        return Result(reader(subtree))
    except DocumentPathError:
        issue = DecodeIssue(path, "absent")
    except (ValueError, TypeError, OverflowError) as exc:
        issue = DecodeIssue(path, str(exc))

    logger.debug("section %r not decoded: %s", path, issue.reason)
    return Result(issue=issue)


class Field(NamedTuple):
    """One row of a field table: attribute name, wire name, codec."""

    attribute: str
    name: str
    codec: fields.Codec


def read_fields(node: Document, table: Tuple[Field, ...]) -> Dict[str, Any]:
    return {row.attribute: row.codec.get(node, row.name) for row in table}


def write_fields(node: Document, table: Tuple[Field, ...], source: Any) -> None:
    for row in table:
        row.codec.put(node, row.name, getattr(source, row.attribute))


def read_records(node: Document, record: type, table: Tuple[Field, ...]) -> list:
    """Read every child of *node* as one record; fields missing from a
    child take their defaults individually."""

    return [record(**read_fields(child, table)) for _name, child in node]


def write_records(node: Document, path: str, records, table: Tuple[Field, ...]) -> None:
    for record in records:
        child = Document()
        write_fields(child, table, record)
        node.add_child(path, child)


def join(*names: str) -> str:
    return document.separator.join(names)


class Facet:
    """Common decode entry points; subclasses implement :meth:`encode`
    and :meth:`read`, and :meth:`validate` if their content can be
    unrepresentable."""

    def validate(self) -> None:
        """Raise :class:`InvalidKey` if this facet cannot be encoded.
        Called before anything is written."""

    def encode(self, node: Document) -> None:
        raise NotImplementedError

    @classmethod
    def read(cls, node: Document, issues: List[DecodeIssue]) -> "Facet":
        raise NotImplementedError

    @classmethod
    def try_decode(cls, node: Document) -> Decoded:
        issues: List[DecodeIssue] = []
        value = cls.read(node, issues)
        return Decoded(value, issues)

    @classmethod
    def decode(cls, node: Document) -> "Facet":
        return cls.try_decode(node).value


class FlatFacet(Facet):
    """A facet made only of scalars, described by a field table. Reading
    a flat facet cannot fail."""

    table: ClassVar[Tuple[Field, ...]] = ()

    def encode(self, node: Document) -> None:
        write_fields(node, self.table, self)

    @classmethod
    def read(cls, node: Document, issues: List[DecodeIssue]) -> "FlatFacet":
        return cls(**read_fields(node, cls.table))


RULE_FIELDS = (
    Field("fact", "fact", fields.STRING),
    Field("expr", "expr", fields.STRING),
)

SIGNAL_FIELDS = (
    Field("name", "name", fields.STRING),
    Field("fact", "fact", fields.STRING),
    Field("source", "source", fields.STRING),
    Field("level", "level", fields.LEVEL),
    Field("msg", "message", fields.STRING),
)

USER_FIELDS = (
    Field("id", "id", fields.STRING),
    Field("name", "name", fields.STRING),
    Field("role", "role", fields.STRING),
)

PV_FIELDS = (
    Field("status", "status", fields.INT),
    Field("value", "value", fields.FLOAT),
    Field("timestamp", "timestamp", fields.UINT32),
)


@dataclass
class RulePayload(Facet):
    """Rule and signal configuration. The two sections are independent:
    either may be absent without affecting the other."""

    rules: List[RuleInfo] = field(default_factory=list)
    signals: List[SignalInfo] = field(default_factory=list)

    def encode(self, node: Document) -> None:
        write_records(node, join("rules", "rule"), self.rules, RULE_FIELDS)
        write_records(node, join("signals", "signal"), self.signals, SIGNAL_FIELDS)

    @classmethod
    def read(cls, node: Document, issues: List[DecodeIssue]) -> "RulePayload":
        rules = attempt(node, "rules", lambda n: read_records(n, RuleInfo, RULE_FIELDS))
        signals = attempt(node, "signals", lambda n: read_records(n, SignalInfo, SIGNAL_FIELDS))

        return cls(rules.value_or(list, issues), signals.value_or(list, issues))


@dataclass
class ErrorMap(Facet):
    """Error descriptions keyed by the fact or field they refer to."""

    errors: Dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        for key in self.errors:
            fields.validate_key(key)

    def encode(self, node: Document) -> None:
        self.validate()

        errors = Document()
        for key, text in self.errors.items():
            fields.STRING.put(errors, key, text)

        node.put_child("errors", errors)

    @classmethod
    def read(cls, node: Document, issues: List[DecodeIssue]) -> "ErrorMap":
        errors = attempt(node, "errors", lambda n: {name: child.data for name, child in n})
        return cls(errors.value_or(dict, issues))


@dataclass
class FactSet(Facet):
    facts: Set[str] = field(default_factory=set)

    def encode(self, node: Document) -> None:
        facts = Document()
        for fact in sorted(self.facts):
            facts.push_back("", Document(fact))

        node.add_child("facts", facts)

    @classmethod
    def read(cls, node: Document, issues: List[DecodeIssue]) -> "FactSet":
        facts = attempt(node, "facts", lambda n: {child.data for _name, child in n})
        return cls(facts.value_or(set, issues))


@dataclass
class PVMap(Facet):
    """Process variables keyed by name."""

    pvs: Dict[str, PVEntry] = field(default_factory=dict)

    def validate(self) -> None:
        for name in self.pvs:
            fields.validate_key(name)

    def encode(self, node: Document) -> None:
        self.validate()

        for name in sorted(self.pvs):
            entry = Document()
            write_fields(entry, PV_FIELDS, self.pvs[name])
            node.add_child(join("pvs", name), entry)

    @classmethod
    def read(cls, node: Document, issues: List[DecodeIssue]) -> "PVMap":
        def entries(pvs):
            return {name: PVEntry(**read_fields(child, PV_FIELDS)) for name, child in pvs}

        return cls(attempt(node, "pvs", entries).value_or(dict, issues))


@dataclass
class ConnectionStatus(FlatFacet):
    connected: bool = False
    host: str = ""
    port: int = 0

    table = (
        Field("connected", "connected", fields.BOOL),
        Field("host", "host", fields.STRING),
        Field("port", "port", fields.UINT16),
    )


@dataclass
class RunStatus(FlatFacet):
    recording: bool = False
    run_number: int = 0
    timestamp: int = 0

    table = (
        Field("recording", "recording", fields.BOOL),
        Field("run_number", "run_number", fields.UINT32),
        Field("timestamp", "timestamp", fields.UINT32),
    )


@dataclass
class PauseStatus(FlatFacet):
    paused: bool = False

    table = (Field("paused", "paused", fields.BOOL),)


@dataclass
class ScanStatus(FlatFacet):
    scanning: bool = False
    scan_index: int = 0

    table = (
        Field("scanning", "scanning", fields.BOOL),
        Field("scan_index", "scan_index", fields.UINT32),
    )


@dataclass
class BeamInfo(FlatFacet):
    facility: str = ""
    beam_id: str = ""
    beam_sname: str = ""
    beam_lname: str = ""

    table = (
        Field("facility", "facility", fields.STRING),
        Field("beam_id", "beam_id", fields.STRING),
        Field("beam_sname", "beam_sname", fields.STRING),
        Field("beam_lname", "beam_lname", fields.STRING),
    )


@dataclass
class RunInfo(FlatFacet):
    """Proposal, sample and user information for the current run."""

    proposal_id: str = ""
    run_title: str = ""
    run_num: int = 0
    sample_id: str = ""
    sample_name: str = ""
    sample_environment: str = ""
    sample_formula: str = ""
    sample_nature: str = ""
    users: List[UserInfo] = field(default_factory=list)

    table = (
        Field("proposal_id", "proposal_id", fields.STRING),
        Field("run_title", "run_title", fields.STRING),
        Field("run_num", "run_num", fields.UINT32),
        Field("sample_id", "sample_id", fields.STRING),
        Field("sample_name", "sample_name", fields.STRING),
        Field("sample_environment", "sample_environment", fields.STRING),
        Field("sample_formula", "sample_formula", fields.STRING),
        Field("sample_nature", "sample_nature", fields.STRING),
    )

    def encode(self, node: Document) -> None:
        FlatFacet.encode(self, node)
        write_records(node, join("users", "user"), self.users, USER_FIELDS)

    @classmethod
    def read(cls, node: Document, issues: List[DecodeIssue]) -> "RunInfo":
        users = attempt(node, "users", lambda n: read_records(n, UserInfo, USER_FIELDS))
        return cls(users=users.value_or(list, issues), **read_fields(node, cls.table))


_MONITOR_ID = re.compile(r"[0-9]+")
_MONITOR_RATE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?:inf|infinity|nan)", re.IGNORECASE)


def read_monitors(node: Document) -> Dict[int, float]:
    """Parse the monitor count rates. Any bad entry fails the whole map;
    ids and rates must be exact, with no padding or digit separators."""

    rates = dict()

    for name, child in node:
        if _MONITOR_ID.fullmatch(name) is None:
            raise ValueError(f"monitor id is not an unsigned integer: {name!r}")
        if _MONITOR_RATE.fullmatch(child.data) is None:
            raise ValueError(f"monitor {name} rate is not a number: {child.data!r}")

        rates[fields.UINT32.parse(name)] = fields.FLOAT.parse(child.data)

    return rates


@dataclass
class BeamMetrics(FlatFacet):
    count_rate: float = 0.0
    pulse_charge: float = 0.0
    pulse_freq: float = 0.0
    pixel_error_rate: float = 0.0
    stream_bps: int = 0
    monitor_count_rate: Dict[int, float] = field(default_factory=dict)

    table = (
        Field("count_rate", "count_rate", fields.FLOAT),
        Field("pulse_charge", "pulse_charge", fields.FLOAT),
        Field("pulse_freq", "pulse_freq", fields.FLOAT),
        Field("pixel_error_rate", "pixel_error_rate", fields.FLOAT),
        Field("stream_bps", "stream_bps", fields.UINT64),
    )

    def validate(self) -> None:
        for monitor in self.monitor_count_rate:
            if isinstance(monitor, bool) or not isinstance(monitor, int) or not 0 <= monitor <= 0xFFFFFFFF:
                raise InvalidKey(monitor, "monitor ids must be unsigned 32-bit integers")

    def encode(self, node: Document) -> None:
        self.validate()

        FlatFacet.encode(self, node)

        monitors = Document()
        for monitor in sorted(self.monitor_count_rate):
            fields.FLOAT.put(monitors, str(monitor), self.monitor_count_rate[monitor])

        node.put_child("monitors", monitors)

    @classmethod
    def read(cls, node: Document, issues: List[DecodeIssue]) -> "BeamMetrics":
        monitors = attempt(node, "monitors", read_monitors)
        return cls(monitor_count_rate=monitors.value_or(dict, issues), **read_fields(node, cls.table))


@dataclass
class RunMetrics(FlatFacet):
    total_time: float = 0.0
    total_counts: int = 0
    total_charge: float = 0.0
    pixel_error_count: int = 0
    dup_pulse_count: int = 0
    pulse_veto_count: int = 0
    mapping_error_count: int = 0
    missing_rtdl_count: int = 0

    table = (
        Field("total_time", "total_time", fields.FLOAT),
        Field("total_counts", "total_counts", fields.UINT64),
        Field("total_charge", "total_charge", fields.FLOAT),
        Field("pixel_error_count", "pixel_error_count", fields.UINT64),
        Field("dup_pulse_count", "dup_pulse_count", fields.UINT64),
        Field("pulse_veto_count", "pulse_veto_count", fields.UINT64),
        Field("mapping_error_count", "mapping_error_count", fields.UINT64),
        Field("missing_rtdl_count", "missing_rtdl_count", fields.UINT64),
    )


@dataclass
class StreamMetrics(FlatFacet):
    """Counters of defects found in the incoming data stream."""

    invalid_pkt_type: int = 0
    invalid_pkt: int = 0
    invalid_pkt_time: int = 0
    duplicate_packet: int = 0
    pulse_freq_tol: int = 0
    cycle_err: int = 0
    invalid_bank_id: int = 0
    bank_source_mismatch: int = 0
    duplicate_source: int = 0
    duplicate_bank: int = 0
    pixel_map_err: int = 0
    pixel_bank_mismatch: int = 0
    pixel_invalid_tof: int = 0
    pixel_unknown_id: int = 0
    pixel_errors: int = 0
    bad_ddp_xml: int = 0
    bad_runinfo_xml: int = 0

    table = (
        Field("invalid_pkt_type", "pkt_type", fields.UINT64),
        Field("invalid_pkt", "inv_pkt", fields.UINT64),
        Field("invalid_pkt_time", "pkt_time", fields.UINT64),
        Field("duplicate_packet", "dup_pkt", fields.UINT64),
        Field("pulse_freq_tol", "pulse_freq", fields.UINT64),
        Field("cycle_err", "cycle", fields.UINT64),
        Field("invalid_bank_id", "inv_bank", fields.UINT64),
        Field("bank_source_mismatch", "bank_src", fields.UINT64),
        Field("duplicate_source", "dup_src", fields.UINT64),
        Field("duplicate_bank", "dup_bank", fields.UINT64),
        Field("pixel_map_err", "pix_map", fields.UINT64),
        Field("pixel_bank_mismatch", "pix_bank", fields.UINT64),
        Field("pixel_invalid_tof", "pix_tof", fields.UINT64),
        Field("pixel_unknown_id", "pix_id", fields.UINT64),
        Field("pixel_errors", "pix_err", fields.UINT64),
        Field("bad_ddp_xml", "ddp_xml", fields.UINT64),
        Field("bad_runinfo_xml", "runinfo_xml", fields.UINT64),
    )
