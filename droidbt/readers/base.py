"""Document reader interfaces."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from droidbt.core.model import NodeEvent


class DocumentReader(Protocol):
    def read(self, path: str) -> Iterator[NodeEvent]:
        """Yield node events in document order.

        Raises DocumentOpenError before the first event if the document cannot
        be opened, and DocumentParseError if the stream breaks off later.
        """
