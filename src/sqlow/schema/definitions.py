"""Load table specifications from a TOML definitions file.

File format:

    [[tables]]
    name = "users"
    previous_name = "accounts"   # optional, for renames

    [[tables.columns]]
    name = "id"
    type = "INTEGER"
    primary_key = true
    auto_increment = true

    [[tables.columns]]
    name = "status"
    type = "ENUM"
    parameter = ["active", "disabled"]
    default = "active"

TOML dates, datetimes and times load as ``datetime`` objects and can be used
directly as DATE / DATETIME / TIME defaults.  Columns are created strict, so a
modifier the type does not support is an error rather than a warning.
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sqlow.schema.column import Column, ColumnSpec
from sqlow.schema.table import Table, TableSpec
from sqlow.schema.types import lookup_type

_FLAG_SETTERS = {
    "primary_key": "set_primary_key",
    "not_null": "set_not_null",
    "unique_index": "set_unique_index",
    "unsigned": "set_unsigned",
    "zerofill": "set_zerofill",
    "auto_increment": "set_auto_increment",
}
_COLUMN_KEYS = {"name", "type", "parameter", "default", *_FLAG_SETTERS}


@dataclass
class DefinitionSet:
    """Tables loaded from a definitions file.

    Attributes:
        tables: Table specifications in file order.
        renames: Map of table name to its previous live name.
    """

    tables: list[TableSpec] = field(default_factory=list)
    renames: dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> TableSpec | None:
        for table in self.tables:
            if table.name == name:
                return table
        return None


def _build_column(table_name: str, data: dict[str, Any]) -> ColumnSpec:
    unknown = set(data) - _COLUMN_KEYS
    if unknown:
        raise ValueError(
            f"Table '{table_name}': unknown column keys {sorted(unknown)}"
        )
    if "name" not in data or "type" not in data:
        raise ValueError(f"Table '{table_name}': every column needs 'name' and 'type'")

    try:
        data_type = lookup_type(data["type"])
    except KeyError:
        raise ValueError(
            f"Table '{table_name}', column '{data['name']}': unknown type '{data['type']}'"
        ) from None

    column = Column(data["name"], data_type, strict=True)
    for key, setter in _FLAG_SETTERS.items():
        if data.get(key, False):
            column = getattr(column, setter)()
    if "parameter" in data:
        column = column.set_parameter(data["parameter"])
    if "default" in data:
        column = column.set_default(data["default"])
    return column


def parse_table_specs(data: dict[str, Any]) -> DefinitionSet:
    """Build table specifications from already-parsed TOML data.

    Raises:
        ValueError: If the structure is invalid or a type is unknown.
        UnsupportedModifier: If a column sets a modifier its type lacks.
    """
    definitions = DefinitionSet()
    seen: set[str] = set()

    for entry in data.get("tables", []):
        name = entry.get("name")
        if not name:
            raise ValueError("Every [[tables]] entry needs a 'name'")
        if name in seen:
            raise ValueError(f"Table '{name}' is defined more than once")
        seen.add(name)

        columns = [_build_column(name, col) for col in entry.get("columns", [])]
        definitions.tables.append(Table(name, columns))

        previous_name = entry.get("previous_name")
        if previous_name:
            definitions.renames[name] = previous_name

    return definitions


def load_table_specs(path: str | Path) -> DefinitionSet:
    """Load table specifications from a TOML file.

    Args:
        path: Path to the definitions file.

    Returns:
        ``DefinitionSet`` with tables in file order.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file format is invalid.
        UnsupportedModifier: If a column sets a modifier its type lacks.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Table definitions not found: {path}")

    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {path}: {e}") from e

    return parse_table_specs(data)
