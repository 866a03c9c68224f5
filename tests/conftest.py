from __future__ import annotations

from pathlib import Path

import pytest

from droidbt.core.model import SymbolTable
from droidbt.core.symbols import LoadedTables

SAMPLE_DOCUMENT = """<?xml version="1.0" encoding="UTF-8" standalone="no"?>
<N1 Tag="Bluedroid">
  <N2 Tag="Local">
    <N3 Tag="Adapter">
      <N4 Tag="Address" Type="string">22:22:a3:b4:c5:d6</N4>
      <N4 Tag="Name" Type="string">Nexus 7</N4>
    </N3>
  </N2>
  <N2 Tag="Remote">
    <N3 Tag="00:1f:20:aa:bb:cc">
      <N4 Tag="Timestamp" Type="int">1400000000</N4>
      <N4 Tag="Name" Type="string">Keyboard</N4>
      <N4 Tag="DevClass" Type="int">9536</N4>
      <N4 Tag="Service" Type="string">00001124-0000-1000-8000-00805f9b34fb 00001200-0000-1000-8000-00805f9b34fb</N4>
    </N3>
    <N3 Tag="5c:f3:70:11:22:33">
      <N4 Tag="Name" Type="string">Mouse</N4>
      <N4 Tag="HogpRpt" Type="string">2a4d:01:1:dynamic:0 2a4d:02:2:dynamic:1</N4>
      <N4 Tag="HidDescriptor" Type="binary">05010902a101</N4>
    </N3>
  </N2>
</N1>
"""


CONFLICT_DOCUMENT = """<N1 Tag="Bluedroid">
  <N2 Tag="Remote">
    <N3 Tag="AA:BB:CC:DD:EE:FF"><N4 Tag="Name">first</N4></N3>
    <N3 Tag="AA:BB:CC:DD:EE:FF"><N4 Tag="Name">second</N4></N3>
  </N2>
</N1>
"""


@pytest.fixture
def write_document(tmp_path: Path):
    def _write(content: str, name: str = "bt_config.xml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_path(write_document) -> Path:
    return write_document(SAMPLE_DOCUMENT)


@pytest.fixture
def conflict_path(write_document) -> Path:
    return write_document(CONFLICT_DOCUMENT)

@pytest.fixture
def small_tables() -> LoadedTables:
    return LoadedTables(
        tables={
            "uuid16": SymbolTable(
                id="uuid16",
                name="test uuids",
                entries=((0x1101, "SerialPort"), (0x1800, "GenericAccess"), (0x2A4D, "ReportMap")),
            ),
            "report_type": SymbolTable(id="report_type", name="test types", entries=((3, "Input"),)),
        },
        warnings=(),
    )
