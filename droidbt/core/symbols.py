"""Symbol table lookup plus loading and validation of YAML-based tables."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from droidbt.core.errors import TableLoadError, TableValidationError
from droidbt.core.model import SymbolTable

UUID16_TABLE = "uuid16"
REPORT_TYPE_TABLE = "report_type"
MAJOR_DEVICE_CLASS_TABLE = "major_device_class"
SERVICE_CLASS_TABLE = "service_class"
LOGGER = logging.getLogger(__name__)


def lookup(table: Sequence[tuple[int, str]], value: int) -> str | None:
    """Return the name of the first (value, name) pair matching ``value``."""
    for entry_value, name in table:
        if entry_value == value:
            return name
    return None


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise TableValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedTables:
    tables: dict[str, SymbolTable]
    warnings: tuple[str, ...]

    def entries(self, table_id: str) -> tuple[tuple[int, str], ...]:
        table = self.tables.get(table_id)
        return table.entries if table else ()


def _load_schema_validator() -> Any:
    schema_text = resources.files("droidbt.schemas").joinpath("table.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _table_dirs() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "droidbt/tables", xdg_data / "droidbt/tables"


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TableLoadError(f"Could not read table file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise TableValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise TableValidationError(f"Table file {path} must contain a mapping at root")
    return loaded


def _build_table(doc: dict[str, Any], source: Path | Traversable) -> SymbolTable:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise TableValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    entries: list[tuple[int, str]] = []
    seen: set[int] = set()
    for entry in doc["entries"]:
        value = int(entry["value"])
        if value in seen:
            LOGGER.debug("Table %s repeats value %#x; first entry wins", doc["id"], value)
        seen.add(value)
        entries.append((value, str(entry["name"])))

    return SymbolTable(id=doc["id"], name=doc["name"], entries=tuple(entries))


def _iter_packaged_table_paths() -> list[Traversable]:
    table_root = resources.files("droidbt.tables")
    return [item for item in table_root.iterdir() if item.name.endswith((".yml", ".yaml"))]


def _iter_user_table_paths() -> list[Path]:
    paths: list[Path] = []
    for directory in _table_dirs():
        if not directory.exists() or not directory.is_dir():
            continue
        paths.extend(sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"}))
    return paths


def load_tables() -> LoadedTables:
    tables: dict[str, SymbolTable] = {}
    warnings: list[str] = []

    for path in sorted(_iter_packaged_table_paths(), key=lambda p: p.name):
        doc = _read_yaml(path)
        table = _build_table(doc, path)
        tables[table.id] = table

    for path in _iter_user_table_paths():
        doc = _read_yaml(path)
        table = _build_table(doc, path)
        if table.id in tables:
            warning = f"User table '{table.id}' overrides packaged table"
            LOGGER.warning(warning)
            warnings.append(warning)
        tables[table.id] = table

    return LoadedTables(tables=tables, warnings=tuple(warnings))
