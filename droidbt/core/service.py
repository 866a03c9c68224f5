"""Service layer used by CLI and the public API."""

from __future__ import annotations

import logging
import os

from droidbt.core.dispatcher import NodeDispatcher
from droidbt.core.errors import DocumentParseError
from droidbt.core.model import ScanReport, SymbolTable
from droidbt.core.registry import AddressRegistry
from droidbt.core.render import ReportRenderer
from droidbt.core.symbols import LoadedTables, load_tables
from droidbt.readers.base import DocumentReader
from droidbt.readers.xml_reader import XMLDocumentReader

DEFAULT_DOCUMENT_PATH = "/data/misc/bluedroid/bt_config.xml"
LOGGER = logging.getLogger(__name__)


def default_document_path() -> str:
    return os.environ.get("DROIDBT_CONFIG") or DEFAULT_DOCUMENT_PATH


class ScanService:
    def __init__(
        self,
        *,
        reader: DocumentReader | None = None,
        tables: LoadedTables | None = None,
    ) -> None:
        loaded = tables if tables is not None else load_tables()
        self.tables = loaded
        self.load_warnings = loaded.warnings
        self.reader = reader or XMLDocumentReader()

    def list_tables(self) -> list[SymbolTable]:
        return sorted(self.tables.tables.values(), key=lambda t: t.id)

    def scan(self, path: str | None = None) -> ScanReport:
        """Decode one document.

        DocumentOpenError propagates before anything is decoded. A parse
        failure mid-stream keeps everything decoded so far and is recorded on
        the report instead of being raised.
        """
        document = path or default_document_path()
        events = self.reader.read(document)

        registry = AddressRegistry()
        dispatcher = NodeDispatcher(self.tables, registry)
        renderer = ReportRenderer(self.tables)
        error: str | None = None
        try:
            for event in events:
                renderer.node(event, dispatcher.feed(event))
        except DocumentParseError as exc:
            error = str(exc)

        LOGGER.debug(
            "Scanned %s: %d records, %d addresses, %d conflicts",
            document,
            len(dispatcher.records),
            len(registry),
            len(registry.report_conflicts()),
        )
        return ScanReport(
            path=document,
            records=tuple(dispatcher.records),
            fields=tuple(dispatcher.fields),
            addresses=registry.dump_all(),
            conflicts=registry.report_conflicts(),
            local_address=registry.local_address,
            local_conflict=registry.local_conflict(),
            lines=tuple(renderer.finish()),
            error=error,
        )
