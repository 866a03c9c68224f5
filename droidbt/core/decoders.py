"""Field decoders: one micro-grammar per field kind.

Every decoder is best-effort. Malformed numbers degrade to a defaulted
``ParsedInt`` and malformed tokens never abort the rest of the payload.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from droidbt.core.address import parse_address
from droidbt.core.model import (
    FieldTag,
    HogpReportEntry,
    ParsedInt,
    ServiceEntry,
    Symbol,
    TimestampValue,
)
from droidbt.core.symbols import REPORT_TYPE_TABLE, UUID16_TABLE, LoadedTables, lookup

_HEX_PREFIX_RE = re.compile(r"\s*(?:0[xX])?([0-9A-Fa-f]+)")
_DEC_PREFIX_RE = re.compile(r"\s*([+-]?[0-9]+)")
INVALID_TIMESTAMP = "<invalid timestamp>"
LOGGER = logging.getLogger(__name__)

Table = Sequence[tuple[int, str]]


def parse_hex(text: str | None) -> ParsedInt:
    """Parse leading hex digits the way ``strtol(s, NULL, 16)`` does."""
    match = _HEX_PREFIX_RE.match(text or "")
    if not match:
        return ParsedInt(0, defaulted=True)
    return ParsedInt(int(match.group(1), 16))


def parse_decimal(text: str | None) -> ParsedInt:
    """Parse leading decimal digits the way ``atoi`` does."""
    match = _DEC_PREFIX_RE.match(text or "")
    if not match:
        return ParsedInt(0, defaulted=True)
    return ParsedInt(int(match.group(1)))


def _tokens(payload: str) -> list[str]:
    return [token for token in payload.split(" ") if token]


def _symbol(parsed: ParsedInt, table: Table) -> Symbol:
    name = None if parsed.defaulted else lookup(table, parsed.value)
    return Symbol(parsed.value, name)


def decode_services(payload: str, uuid_table: Table) -> tuple[ServiceEntry, ...]:
    entries: list[ServiceEntry] = []
    for token in _tokens(payload):
        uuid = parse_hex(token.split("-", 1)[0])
        if uuid.defaulted:
            LOGGER.debug("Service token %r has no hex prefix", token)
            name = None
        else:
            uuid = ParsedInt(uuid.value & 0xFFFF)
            name = lookup(uuid_table, uuid.value)
        entries.append(ServiceEntry(token=token, uuid=uuid, name=name))
    return tuple(entries)


def decode_hogp_reports(
    payload: str,
    uuid_table: Table,
    report_type_table: Table,
) -> tuple[HogpReportEntry, ...]:
    entries: list[HogpReportEntry] = []
    for token in _tokens(payload):
        parts: list[str | None] = list(token.split(":")[:5])
        parts.extend([None] * (5 - len(parts)))
        uuid_text, report_id, report_type_text, prop, instance_id = parts

        uuid = None
        if uuid_text is not None:
            parsed = parse_hex(uuid_text)
            uuid = _symbol(ParsedInt(parsed.value & 0xFFFF, parsed.defaulted), uuid_table)
        report_type = None
        if report_type_text is not None:
            parsed = parse_decimal(report_type_text)
            report_type = _symbol(ParsedInt(parsed.value & 0xFF, parsed.defaulted), report_type_table)

        entries.append(
            HogpReportEntry(
                token=token,
                uuid=uuid,
                report_id=report_id,
                report_type=report_type,
                property=prop,
                instance_id=instance_id,
            )
        )
    return tuple(entries)


def decode_device_class(payload: str) -> ParsedInt:
    return parse_decimal(payload)


def render_timestamp(seconds: int) -> str:
    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return INVALID_TIMESTAMP
    return f"{moment:%a %b} {moment.day:>2} {moment:%H:%M:%S %Y}"


def decode_timestamp(payload: str) -> TimestampValue:
    seconds = parse_decimal(payload)
    return TimestampValue(seconds=seconds, rendered=render_timestamp(seconds.value))


def decode_gatt_attributes(payload: str) -> tuple[str, ...]:
    # Placeholder decoder: attributes stay raw.
    return tuple(payload.split(" "))


def decode_passthrough(payload: str) -> str:
    return payload


def decode_field(tag: FieldTag, payload: str, tables: LoadedTables) -> Any:
    """Decode one text payload with the decoder selected for ``tag``."""
    uuid_table = tables.entries(UUID16_TABLE)
    decoders: dict[FieldTag, Callable[[str], Any]] = {
        FieldTag.SERVICE: lambda text: decode_services(text, uuid_table),
        FieldTag.HID_DESCRIPTOR: decode_passthrough,
        FieldTag.HOGP_REPORT: lambda text: decode_hogp_reports(
            text, uuid_table, tables.entries(REPORT_TYPE_TABLE)
        ),
        FieldTag.GATT_ATTRIBUTE: decode_gatt_attributes,
        FieldTag.DEVICE_CLASS: decode_device_class,
        FieldTag.TIMESTAMP: decode_timestamp,
        FieldTag.ADDRESS: parse_address,
        FieldTag.PLAIN_TEXT: decode_passthrough,
    }
    return decoders[tag](payload)
