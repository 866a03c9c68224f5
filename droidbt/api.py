"""Stable public API for building tooling on top of droidbt.

Scripts that want decoded records rather than report text should go through
`Inspector` and the models re-exported here.
"""

from __future__ import annotations

from droidbt.core.errors import (
    DocumentError,
    DocumentOpenError,
    DocumentParseError,
    DroidbtError,
    TableLoadError,
    TableValidationError,
)
from droidbt.core.model import (
    Address,
    DecodedField,
    DeviceRecord,
    FieldTag,
    HogpReportEntry,
    NodeEvent,
    NodeKind,
    ParsedInt,
    ScanReport,
    ServiceEntry,
    Symbol,
    SymbolTable,
    TimestampValue,
)
from droidbt.core.render import summary_lines
from droidbt.core.service import ScanService
from droidbt.readers.base import DocumentReader
from droidbt.readers.xml_reader import XMLDocumentReader

__all__ = [
    "DroidbtError",
    "DocumentError",
    "DocumentOpenError",
    "DocumentParseError",
    "TableLoadError",
    "TableValidationError",
    "Address",
    "DecodedField",
    "DeviceRecord",
    "FieldTag",
    "HogpReportEntry",
    "NodeEvent",
    "NodeKind",
    "ParsedInt",
    "ScanReport",
    "ServiceEntry",
    "Symbol",
    "SymbolTable",
    "TimestampValue",
    "DocumentReader",
    "XMLDocumentReader",
    "Inspector",
]


class Inspector:
    """Public client for scanning bluedroid pairing documents.

    An `Inspector` wraps symbol table loading, document reading and the
    decoding pass behind a stable API intended for third-party tools.
    """

    def __init__(self, *, reader: DocumentReader | None = None) -> None:
        self._service = ScanService(reader=reader)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_tables(self) -> list[SymbolTable]:
        return self._service.list_tables()

    def scan(self, path: str | None = None) -> ScanReport:
        return self._service.scan(path)

    def render(self, report: ScanReport) -> list[str]:
        return [*report.lines, *summary_lines(report)]
