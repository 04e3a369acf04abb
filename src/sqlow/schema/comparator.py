"""Structural comparison of desired columns against live columns.

Pure logic -- no I/O, no database connections.  Column names are compared
case-insensitively, as MySQL does.

Usage:
    from sqlow.schema.comparator import compare_table
    from sqlow.schema.introspector import SchemaIntrospector

    live = await SchemaIntrospector(client).get_columns("app", "users")
    diff = compare_table(users_spec, live)
    if diff.has_changes:
        print(diff.format_report())
"""

import re
from typing import TYPE_CHECKING

from sqlow.schema.ddl import effective_auto_increment, render_type
from sqlow.schema.models import ColumnDiff, ColumnSchema, TableDiff

if TYPE_CHECKING:
    from sqlow.schema.column import ColumnSpec
    from sqlow.schema.table import TableSpec


_INTEGER_TYPES = {"tinyint", "smallint", "mediumint", "int", "bigint"}
# Byte capacity of the TEXT family; MySQL stores TEXT(n) as the smallest that fits
_TEXT_CAPACITY = {
    "tinytext": 255,
    "text": 65535,
    "mediumtext": 16777215,
    "longtext": 4294967295,
}
_TYPE_PATTERN = re.compile(r"^\s*([A-Za-z]+)\s*(?:\((.*)\))?\s*(.*)$", re.DOTALL)


def normalize_column_type(column_type: str) -> str:
    """Normalize a MySQL type string so desired and live types compare equal.

    - Lowercases the type name and attributes (not ENUM/SET values).
    - Maps INTEGER to int and BOOLEAN/BOOL to tinyint(1).
    - Drops integer display widths (MySQL 8 no longer reports them).
    - ZEROFILL implies UNSIGNED.
    - FLOAT(p) becomes float (p <= 24) or double, as MySQL stores it.

    Examples:
        >>> normalize_column_type("INTEGER ZEROFILL")
        'int unsigned zerofill'
        >>> normalize_column_type("int(11) unsigned")
        'int unsigned'
        >>> normalize_column_type("BOOLEAN")
        'tinyint(1)'
        >>> normalize_column_type("FLOAT(30)")
        'double'
    """
    match = _TYPE_PATTERN.match(column_type)
    if match is None:
        return column_type.strip().lower()

    base = match.group(1).lower()
    params = match.group(2)
    modifiers = set(match.group(3).lower().split())

    if base in ("boolean", "bool"):
        return "tinyint(1)"
    if base == "integer":
        base = "int"

    if "zerofill" in modifiers:
        modifiers.add("unsigned")

    if base in _INTEGER_TYPES and params is not None:
        if not (base == "tinyint" and params.strip() == "1"):
            params = None
    if base == "float" and params is not None and params.strip().isdigit():
        base = "float" if int(params) <= 24 else "double"
        params = None
    if base == "bit" and params is None:
        params = "1"
    if params is not None and base not in ("enum", "set"):
        params = params.replace(" ", "")

    result = base if params is None else f"{base}({params})"
    for modifier in ("unsigned", "zerofill"):
        if modifier in modifiers:
            result += f" {modifier}"
    return result


def _types_match(desired_type: str, live_type: str) -> bool:
    """Compare normalized types; ``text(n)`` matches any TEXT type holding n.

    The TEXT type MySQL picks for ``TEXT(n)`` depends on the column charset,
    so only the lower bound on capacity is known.
    """
    if desired_type == live_type:
        return True
    match = re.fullmatch(r"text\((\d+)\)", desired_type)
    capacity = _TEXT_CAPACITY.get(live_type)
    return match is not None and capacity is not None and capacity >= int(match.group(1))


def _column_changes(column: "ColumnSpec", live: ColumnSchema) -> list[str]:
    changes: list[str] = []

    desired_type = normalize_column_type(render_type(column))
    live_type = normalize_column_type(live.column_type)
    if not _types_match(desired_type, live_type):
        changes.append(f"type {live_type} -> {desired_type}")

    # Primary key columns are implicitly NOT NULL
    desired_nullable = not (column.not_null or column.primary_key)
    if desired_nullable != live.is_nullable:
        changes.append("nullable" if desired_nullable else "not null")

    desired_auto = effective_auto_increment(column)
    if desired_auto != live.is_auto_increment:
        changes.append("auto_increment" if desired_auto else "no auto_increment")

    return changes


def compare_table(
    desired: "TableSpec",
    actual_columns: dict[str, ColumnSchema],
) -> TableDiff:
    """Compare a table specification against its live columns.

    Finds:
    - Added: columns in *desired* but not live
    - Modified: columns whose type, nullability or AUTO_INCREMENT differ
    - Removed: live columns not in *desired*

    Args:
        desired: The table specification.
        actual_columns: Live columns, as returned by
            ``SchemaIntrospector.get_columns()``.

    Returns:
        ``TableDiff`` listing the differences in declaration/ordinal order.

    Raises:
        PropertyRequired, InvalidParameter: If a desired column's type
            cannot be rendered.
    """
    live_by_name = {name.lower(): col for name, col in actual_columns.items()}
    desired_names = {column.name.lower() for column in desired.columns}
    diff = TableDiff(table=desired.name)

    for column in desired.columns:
        live = live_by_name.get(column.name.lower())
        if live is None:
            diff.added.append(
                ColumnDiff(
                    table=desired.name,
                    column=column.name,
                    change="add",
                    message=f"Column '{column.name}' missing from table '{desired.name}'",
                )
            )
            continue

        changes = _column_changes(column, live)
        if changes:
            diff.modified.append(
                ColumnDiff(
                    table=desired.name,
                    column=column.name,
                    change="modify",
                    message=", ".join(changes),
                )
            )

    for name, live in actual_columns.items():
        if name.lower() not in desired_names:
            diff.removed.append(
                ColumnDiff(
                    table=desired.name,
                    column=live.name,
                    change="drop",
                    message=f"Column '{live.name}' not in specification",
                )
            )

    return diff
