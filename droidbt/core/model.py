"""Core data models used across reader, dispatcher, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Address:
    octets: bytes

    def __post_init__(self) -> None:
        if len(self.octets) != 6:
            raise ValueError(f"Address must be 6 bytes, got {len(self.octets)}")

    def __str__(self) -> str:
        return ":".join(f"{octet:02X}" for octet in self.octets)


class FieldTag(Enum):
    SERVICE = "Service"
    HID_DESCRIPTOR = "HidDescriptor"
    HOGP_REPORT = "HogpReport"
    GATT_ATTRIBUTE = "GattAttribute"
    DEVICE_CLASS = "DeviceClass"
    TIMESTAMP = "Timestamp"
    ADDRESS = "Address"
    PLAIN_TEXT = "PlainText"


class NodeKind(Enum):
    ELEMENT_START = "element_start"
    TEXT = "text"
    OTHER = "other"


@dataclass(frozen=True)
class NodeEvent:
    kind: NodeKind
    depth: int
    name: str | None = None
    text: str | None = None


@dataclass(frozen=True)
class ParsedInt:
    """Best-effort integer; ``defaulted`` marks a fallback rather than a parsed value."""

    value: int
    defaulted: bool = False


@dataclass(frozen=True)
class Symbol:
    value: int
    name: str | None


@dataclass(frozen=True)
class SymbolTable:
    id: str
    name: str
    entries: tuple[tuple[int, str], ...]


@dataclass(frozen=True)
class ServiceEntry:
    token: str
    uuid: ParsedInt
    name: str | None


@dataclass(frozen=True)
class HogpReportEntry:
    token: str
    uuid: Symbol | None = None
    report_id: str | None = None
    report_type: Symbol | None = None
    property: str | None = None
    instance_id: str | None = None


@dataclass(frozen=True)
class TimestampValue:
    seconds: ParsedInt
    rendered: str


@dataclass(frozen=True)
class DecodedField:
    tag: FieldTag
    key: str
    depth: int
    value: Any
    raw: str = ""


@dataclass
class DeviceRecord:
    name: str
    depth: int
    address: Address | None = None
    fields: list[DecodedField] = field(default_factory=list)

    def field_value(self, tag: FieldTag) -> Any:
        for decoded in self.fields:
            if decoded.tag is tag:
                return decoded.value
        return None

    def value_for(self, key: str) -> Any:
        for decoded in self.fields:
            if decoded.key == key:
                return decoded.value
        return None


@dataclass(frozen=True)
class ScanReport:
    path: str
    records: tuple[DeviceRecord, ...]
    fields: tuple[DecodedField, ...]
    addresses: tuple[Address, ...]
    conflicts: tuple[Address, ...]
    local_address: Address | None
    local_conflict: bool = False
    lines: tuple[str, ...] = ()
    error: str | None = None

    @property
    def complete(self) -> bool:
        return self.error is None
