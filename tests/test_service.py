from __future__ import annotations

from pathlib import Path

import pytest

from droidbt.core.address import parse_address
from droidbt.core.errors import DocumentOpenError
from droidbt.core.model import FieldTag, ParsedInt
from droidbt.core.render import summary_lines
from droidbt.core.service import DEFAULT_DOCUMENT_PATH, ScanService, default_document_path

@pytest.fixture
def service(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> ScanService:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    return ScanService()


def test_scan_sample_document(service: ScanService, sample_path: Path) -> None:
    report = service.scan(str(sample_path))

    assert report.complete
    assert report.local_address == parse_address("22:22:A3:B4:C5:D6")
    assert report.addresses == (
        parse_address("22:22:A3:B4:C5:D6"),
        parse_address("00:1F:20:AA:BB:CC"),
        parse_address("5C:F3:70:11:22:33"),
    )
    assert report.conflicts == ()
    assert [record.name for record in report.records] == ["Adapter", "00:1f:20:aa:bb:cc", "5c:f3:70:11:22:33"]

    keyboard = report.records[1]
    assert keyboard.value_for("Name") == "Keyboard"
    assert keyboard.field_value(FieldTag.DEVICE_CLASS) == ParsedInt(9536)
    services = keyboard.field_value(FieldTag.SERVICE)
    assert [entry.name for entry in services] == ["Human Interface Device Service", "PnP Information"]

    mouse = report.records[2]
    reports = mouse.field_value(FieldTag.HOGP_REPORT)
    assert [entry.report_type.name for entry in reports] == ["Input", "Output"]
    assert mouse.field_value(FieldTag.HID_DESCRIPTOR) == "05010902a101"


def test_scan_renders_indented_lines(service: ScanService, sample_path: Path) -> None:
    lines = service.scan(str(sample_path)).lines

    assert "\tAdapter" in lines
    assert "\t\tAddress: 22:22:A3:B4:C5:D6" in lines
    assert "\t\tName: Nexus 7" in lines
    assert "\t\tTimestamp: Tue May 13 16:53:20 2014" in lines
    assert "\t\tDevClass: 0x002540 Peripheral (minor 0x10) [Limited Discoverable Mode]" in lines
    assert "\t\tService:" in lines
    assert "\t\t\t 00001124-0000-1000-8000-00805f9b34fb: 1124 Human Interface Device Service" in lines
    assert "\t\t\t report type: \t2 Output" in lines
    assert "\t\t\t 05010902a101" in lines


def test_duplicate_top_level_addresses_are_reported(service: ScanService, conflict_path: Path) -> None:
    report = service.scan(str(conflict_path))

    address = parse_address("AA:BB:CC:DD:EE:FF")
    assert report.conflicts == (address,)
    assert report.addresses == (address,)
    assert "Address conflicts (1):" in summary_lines(report)


def test_local_adapter_conflict(service: ScanService, write_document) -> None:
    path = write_document(
        """<N1 Tag="Bluedroid">
  <N2 Tag="Local"><N3 Tag="Adapter"><N4 Tag="Address">aa:bb:cc:dd:ee:ff</N4></N3></N2>
  <N2 Tag="Remote"><N3 Tag="aa:bb:cc:dd:ee:ff"><N4 Tag="Name">clone</N4></N3></N2>
</N1>
"""
    )
    report = service.scan(str(path))
    assert report.local_conflict
    assert any("also used by a remote device" in line for line in summary_lines(report))


def test_missing_document_raises_before_decoding(service: ScanService, tmp_path: Path) -> None:
    with pytest.raises(DocumentOpenError):
        service.scan(str(tmp_path / "missing.xml"))


def test_parse_failure_keeps_partial_results(service: ScanService, write_document) -> None:
    path = write_document(
        '<N1 Tag="Bluedroid"><N2 Tag="Remote">'
        '<N3 Tag="AA:BB:CC:DD:EE:FF"><N4 Tag="Name">Headset</N4></N3>'
        '<N3 Tag="11:22:33:44:55:66"><N4 Tag="Name">Broken</N5>'
    )
    report = service.scan(str(path))

    assert not report.complete
    assert "failed to parse" in report.error
    assert parse_address("AA:BB:CC:DD:EE:FF") in report.addresses
    assert report.records[0].value_for("Name") == "Headset"


def test_default_document_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DROIDBT_CONFIG", raising=False)
    assert default_document_path() == DEFAULT_DOCUMENT_PATH
    monkeypatch.setenv("DROIDBT_CONFIG", "/tmp/bt_config.xml")
    assert default_document_path() == "/tmp/bt_config.xml"


def test_scan_without_path_uses_environment(
    service: ScanService, sample_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DROIDBT_CONFIG", str(sample_path))
    report = service.scan()
    assert report.path == str(sample_path)
    assert len(report.records) == 3


def test_list_tables_sorted(service: ScanService) -> None:
    ids = [table.id for table in service.list_tables()]
    assert ids == sorted(ids)
    assert "uuid16" in ids
