"""Streaming XML reader producing node events with defusedxml."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import IO, Any

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from droidbt.core.errors import DocumentOpenError, DocumentParseError
from droidbt.core.model import NodeEvent, NodeKind

LOGGER = logging.getLogger(__name__)


@dataclass
class _Frame:
    element: Any
    depth: int
    last_child: Any = None
    pending: bool = True


def _element_name(element: Any) -> str | None:
    # bluedroid keeps the key in the first attribute ("Tag").
    for value in element.attrib.values():
        return value
    return None


def _pending_text(frame: _Frame) -> NodeEvent | None:
    if not frame.pending:
        return None
    frame.pending = False
    text = frame.element.text if frame.last_child is None else frame.last_child.tail
    if text is None or not text.strip():
        return None
    return NodeEvent(NodeKind.TEXT, frame.depth + 1, text=text)


def _release(element: Any) -> None:
    # The tail still belongs to the parent and is read when the next sibling
    # starts or the parent ends.
    del element[:]
    element.attrib.clear()
    element.text = None


class XMLDocumentReader:
    def read(self, path: str) -> Iterator[NodeEvent]:
        try:
            handle = open(path, "rb")
        except OSError as exc:
            raise DocumentOpenError(f"Unable to open {path}: {exc}") from exc
        return self._events(handle, path)

    def _events(self, handle: IO[bytes], path: str) -> Iterator[NodeEvent]:
        stack: list[_Frame] = []
        try:
            for action, element in ET.iterparse(handle, events=("start", "end")):
                if action == "start":
                    if stack:
                        parent = stack[-1]
                        text_event = _pending_text(parent)
                        if text_event is not None:
                            yield text_event
                        parent.last_child = element
                        parent.pending = True
                    stack.append(_Frame(element=element, depth=len(stack)))
                    yield NodeEvent(NodeKind.ELEMENT_START, len(stack) - 1, name=_element_name(element))
                else:
                    frame = stack.pop()
                    text_event = _pending_text(frame)
                    if text_event is not None:
                        yield text_event
                    _release(frame.element)
                    yield NodeEvent(NodeKind.OTHER, frame.depth)
        except ET.ParseError as exc:
            LOGGER.warning("%s: failed to parse: %s", path, exc)
            raise DocumentParseError(f"{path} : failed to parse: {exc}") from exc
        except DefusedXmlException as exc:
            LOGGER.warning("%s: rejected unsafe XML: %s", path, exc)
            raise DocumentParseError(f"{path} : failed to parse: {exc}") from exc
        finally:
            handle.close()
