"""Node dispatcher: the traversal state machine that routes text to decoders."""

from __future__ import annotations

import logging
from enum import Enum

from droidbt.core.address import parse_address
from droidbt.core.decoders import decode_field
from droidbt.core.model import DecodedField, DeviceRecord, FieldTag, NodeEvent, NodeKind
from droidbt.core.registry import AddressRegistry
from droidbt.core.symbols import LoadedTables

RECORD_DEPTH = 2
LOGGER = logging.getLogger(__name__)

# Ordered: a tag containing several markers resolves to the earliest one.
DISPATCH_ORDER: tuple[tuple[str, FieldTag], ...] = (
    ("Service", FieldTag.SERVICE),
    ("HidDescriptor", FieldTag.HID_DESCRIPTOR),
    ("HogpRpt", FieldTag.HOGP_REPORT),
    ("GattAttrs", FieldTag.GATT_ATTRIBUTE),
    ("DevClass", FieldTag.DEVICE_CLASS),
    ("Timestamp", FieldTag.TIMESTAMP),
    ("Address", FieldTag.ADDRESS),
)


def classify(active_tag: str) -> FieldTag:
    """Pick the field kind whose marker occurs anywhere in ``active_tag``."""
    for marker, tag in DISPATCH_ORDER:
        if marker in active_tag:
            return tag
    return FieldTag.PLAIN_TEXT


class DispatchState(Enum):
    IDLE = "idle"
    IN_ELEMENT = "in_element"
    IN_TEXT = "in_text"


class NodeDispatcher:
    """Consumes node events for a single document scan.

    The active tag is the value of the most recent element "name" attribute.
    Element names that parse as addresses are registered, as are decoded
    Address fields; the first decoded Address field is taken as the local
    adapter address.
    """

    def __init__(self, tables: LoadedTables, registry: AddressRegistry | None = None) -> None:
        self.tables = tables
        self.registry = registry if registry is not None else AddressRegistry()
        self.state = DispatchState.IDLE
        self.active_tag = ""
        self.depth = 0
        self.records: list[DeviceRecord] = []
        self.fields: list[DecodedField] = []
        self._record: DeviceRecord | None = None

    def feed(self, event: NodeEvent) -> DecodedField | None:
        if event.kind is NodeKind.ELEMENT_START:
            self._on_element(event)
            return None
        if event.kind is NodeKind.TEXT:
            return self._on_text(event)
        return None

    def _on_element(self, event: NodeEvent) -> None:
        self.state = DispatchState.IN_ELEMENT
        self.depth = event.depth
        if event.depth < RECORD_DEPTH:
            self._record = None

        address = None
        if event.name:
            self.active_tag = event.name
            address = parse_address(event.name)
            if address is not None:
                self.registry.register(address)

        if event.depth == RECORD_DEPTH:
            self._record = DeviceRecord(
                name=event.name or "",
                depth=event.depth,
                address=address,
            )
            self.records.append(self._record)

    def _on_text(self, event: NodeEvent) -> DecodedField:
        self.state = DispatchState.IN_TEXT
        self.depth = event.depth
        text = event.text or ""
        tag = classify(self.active_tag)
        value = decode_field(tag, text, self.tables)
        if tag is FieldTag.ADDRESS:
            if value is None:
                LOGGER.debug("Ignoring malformed address %r under %r", text, self.active_tag)
            else:
                self.registry.register_local(value)

        decoded = DecodedField(tag=tag, key=self.active_tag, depth=event.depth, value=value, raw=text)
        self.fields.append(decoded)
        if self._record is not None:
            self._record.fields.append(decoded)
        return decoded
