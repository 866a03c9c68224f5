"""Human-readable report rendering."""

from __future__ import annotations

from droidbt.core.model import (
    DecodedField,
    FieldTag,
    HogpReportEntry,
    NodeEvent,
    NodeKind,
    ParsedInt,
    ScanReport,
)
from droidbt.core.symbols import MAJOR_DEVICE_CLASS_TABLE, SERVICE_CLASS_TABLE, LoadedTables, lookup

DETAIL_INDENT = "\t\t\t "
UNKNOWN = "Unknown"


def indent_for(depth: int) -> str:
    if depth == 2:
        return "\t"
    if depth == 3:
        return "\t\t"
    return ""


def describe_device_class(value: ParsedInt, tables: LoadedTables) -> str:
    """Render a Class of Device as ``0x5a020c Phone (minor 0x03) [Networking, ...]``."""
    if value.defaulted:
        return "0 (unparsed)"

    cod = value.value & 0xFFFFFF
    major = (cod >> 8) & 0x1F
    minor = (cod >> 2) & 0x3F
    major_name = lookup(tables.entries(MAJOR_DEVICE_CLASS_TABLE), major) or f"Reserved ({major})"
    services = [
        name
        for bit, name in tables.entries(SERVICE_CLASS_TABLE)
        if cod & (1 << bit)
    ]
    description = f"0x{cod:06x} {major_name} (minor 0x{minor:02x})"
    if services:
        description += f" [{', '.join(services)}]"
    return description


def _optional(value: str | None) -> str:
    return value if value is not None else "-"


def _hogp_lines(entry: HogpReportEntry) -> list[str]:
    lines = [f"{DETAIL_INDENT}{entry.token}"]
    if entry.uuid is not None:
        lines.append(f"{DETAIL_INDENT}{entry.uuid.value:04x}: {entry.uuid.name or UNKNOWN}")
    lines.append(f"{DETAIL_INDENT}report ID: \t0x{_optional(entry.report_id)}")
    if entry.report_type is not None:
        lines.append(
            f"{DETAIL_INDENT}report type: \t{entry.report_type.value} {entry.report_type.name or UNKNOWN}"
        )
    else:
        lines.append(f"{DETAIL_INDENT}report type: \t-")
    lines.append(f"{DETAIL_INDENT}property: \t{_optional(entry.property)}")
    lines.append(f"{DETAIL_INDENT}inst_id: \t{_optional(entry.instance_id)}")
    return lines


class ReportRenderer:
    """Turns node events and decoded fields into indented report lines.

    An element's name is held back as a pending header so that a scalar field
    prints on the same line as its tag, e.g. ``\\t\\tTimestamp: Thu Jan ...``.
    """

    def __init__(self, tables: LoadedTables) -> None:
        self.tables = tables
        self.lines: list[str] = []
        self._pending: str | None = None

    def node(self, event: NodeEvent, decoded: DecodedField | None = None) -> None:
        if event.kind is NodeKind.ELEMENT_START:
            self._flush()
            if event.depth == 2:
                self.lines.append("")
            if not event.name:
                return
            if event.depth == 2:
                self.lines.append(f"{indent_for(event.depth)}{event.name}")
            else:
                self._pending = f"{indent_for(event.depth)}{event.name}:"
        elif event.kind is NodeKind.TEXT and decoded is not None:
            self._field(decoded)

    def finish(self) -> list[str]:
        self._flush()
        return self.lines

    def _flush(self) -> None:
        if self._pending is not None:
            self.lines.append(self._pending)
            self._pending = None

    def _head(self, decoded: DecodedField, summary: str = "") -> None:
        head = self._pending if self._pending is not None else indent_for(decoded.depth)
        self._pending = None
        self.lines.append(f"{head} {summary}" if summary else head)

    def _field(self, decoded: DecodedField) -> None:
        value = decoded.value
        if decoded.tag is FieldTag.SERVICE:
            self._head(decoded)
            for entry in value:
                name = entry.name or UNKNOWN
                self.lines.append(f"{DETAIL_INDENT}{entry.token}: {entry.uuid.value:04x} {name}")
        elif decoded.tag is FieldTag.HOGP_REPORT:
            self._head(decoded)
            for entry in value:
                self.lines.extend(_hogp_lines(entry))
        elif decoded.tag is FieldTag.GATT_ATTRIBUTE:
            self._head(decoded)
            self.lines.extend(f"{DETAIL_INDENT}{attr}" for attr in value)
        elif decoded.tag is FieldTag.HID_DESCRIPTOR:
            self._head(decoded)
            self.lines.append(f"{DETAIL_INDENT}{value}")
        elif decoded.tag is FieldTag.DEVICE_CLASS:
            self._head(decoded, describe_device_class(value, self.tables))
        elif decoded.tag is FieldTag.TIMESTAMP:
            self._head(decoded, value.rendered)
        elif decoded.tag is FieldTag.ADDRESS:
            summary = str(value) if value is not None else f"{decoded.raw} (invalid address)"
            self._head(decoded, summary)
        else:
            self._head(decoded, value)


def summary_lines(report: ScanReport) -> list[str]:
    lines = [""]
    local = str(report.local_address) if report.local_address else "unknown"
    lines.append(f"Local adapter: {local}")
    lines.append(f"Known addresses ({len(report.addresses)}):")
    lines.extend(f"\t{address}" for address in report.addresses)
    if report.conflicts:
        lines.append(f"Address conflicts ({len(report.conflicts)}):")
        lines.extend(f"\t{address}" for address in report.conflicts)
    else:
        lines.append("Address conflicts: none")
    if report.local_conflict:
        lines.append(f"Local adapter address {report.local_address} is also used by a remote device")
    return lines
