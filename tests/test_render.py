from __future__ import annotations

import pytest

from droidbt.core.model import DecodedField, FieldTag, NodeEvent, NodeKind, ParsedInt, SymbolTable
from droidbt.core.render import ReportRenderer, describe_device_class, indent_for
from droidbt.core.symbols import LoadedTables


@pytest.fixture
def class_tables() -> LoadedTables:
    return LoadedTables(
        tables={
            "major_device_class": SymbolTable(
                id="major_device_class",
                name="majors",
                entries=((2, "Phone"), (5, "Peripheral")),
            ),
            "service_class": SymbolTable(
                id="service_class",
                name="services",
                entries=((17, "Networking"), (19, "Capturing"), (20, "Object Transfer"), (22, "Telephony")),
            ),
        },
        warnings=(),
    )


def test_describe_phone_device_class(class_tables: LoadedTables) -> None:
    assert (
        describe_device_class(ParsedInt(5898764), class_tables)
        == "0x5a020c Phone (minor 0x03) [Networking, Capturing, Object Transfer, Telephony]"
    )


def test_describe_unknown_major_without_services(class_tables: LoadedTables) -> None:
    assert describe_device_class(ParsedInt(0x1F00), class_tables) == "0x001f00 Reserved (31) (minor 0x00)"


def test_describe_fallback_device_class(class_tables: LoadedTables) -> None:
    assert describe_device_class(ParsedInt(0, defaulted=True), class_tables) == "0 (unparsed)"


def test_indentation_by_depth() -> None:
    assert indent_for(1) == ""
    assert indent_for(2) == "\t"
    assert indent_for(3) == "\t\t"
    assert indent_for(4) == ""


def test_scalar_field_shares_line_with_tag(class_tables: LoadedTables) -> None:
    renderer = ReportRenderer(class_tables)
    renderer.node(NodeEvent(NodeKind.ELEMENT_START, 2, name="AA:BB:CC:DD:EE:FF"))
    renderer.node(NodeEvent(NodeKind.ELEMENT_START, 3, name="Name"))
    text = NodeEvent(NodeKind.TEXT, 4, text="Speaker")
    renderer.node(text, DecodedField(tag=FieldTag.PLAIN_TEXT, key="Name", depth=4, value="Speaker", raw="Speaker"))
    renderer.node(NodeEvent(NodeKind.ELEMENT_START, 3, name="Empty"))

    assert renderer.finish() == ["", "\tAA:BB:CC:DD:EE:FF", "\t\tName: Speaker", "\t\tEmpty:"]


def test_invalid_address_field_shows_raw_text(class_tables: LoadedTables) -> None:
    renderer = ReportRenderer(class_tables)
    renderer.node(NodeEvent(NodeKind.ELEMENT_START, 3, name="Address"))
    decoded = DecodedField(tag=FieldTag.ADDRESS, key="Address", depth=4, value=None, raw="zz:zz")
    renderer.node(NodeEvent(NodeKind.TEXT, 4, text="zz:zz"), decoded)

    assert renderer.finish() == ["\t\tAddress: zz:zz (invalid address)"]


def test_unnamed_elements_print_no_header(class_tables: LoadedTables) -> None:
    renderer = ReportRenderer(class_tables)
    renderer.node(NodeEvent(NodeKind.ELEMENT_START, 3, name="Name"))
    renderer.node(NodeEvent(NodeKind.ELEMENT_START, 3, name=""))
    renderer.node(NodeEvent(NodeKind.ELEMENT_START, 3, name=None))

    assert renderer.finish() == ["\t\tName:"]
