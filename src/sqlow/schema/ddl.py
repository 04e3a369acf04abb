"""DDL rendering for column and table specifications.

Turns ``ColumnSpec`` / ``TableSpec`` values into MySQL DDL text.  Every
function here is pure: the same specification always renders to the same
bytes, and a failure raises before any text is returned.

Usage:
    from sqlow.schema.ddl import render_column, render_create_table

    render_column(Column("name", VARCHAR).set_parameter(100).set_not_null())
    # '`name` VARCHAR(100) NOT NULL'
"""

import math
import re
from collections.abc import Callable, Sequence
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any

from sqlow.errors import (
    DefaultTypeMismatch,
    InvalidParameter,
    MultipleAutoIncrement,
    PropertyRequired,
)
from sqlow.schema.types import StorageCategory

if TYPE_CHECKING:
    from sqlow.schema.column import ColumnSpec
    from sqlow.schema.table import TableSpec


_SCALAR_PARAMETER = re.compile(r"^\s*(\d+)\s*(?:,\s*(\d+)\s*)?$")


# ------------------------------------------------------------------
# Literal helpers
# ------------------------------------------------------------------


def quote_identifier(name: str) -> str:
    """Quote an identifier with backticks, doubling embedded backticks."""
    return "`" + name.replace("`", "``") + "`"


def quote_string(value: str) -> str:
    """Quote a string literal for MySQL."""
    escaped = value.replace("\\", "\\\\").replace("'", "''")
    return f"'{escaped}'"


def format_value_list(values: Sequence[str]) -> str:
    """Render ``['a', 'b']`` as ``'a','b'``."""
    return ",".join(quote_string(v) for v in values)


def format_date(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def format_datetime(value: datetime, fsp: int = 0) -> str:
    return f"{format_date(value)} {format_time(value, fsp)}"


def format_time(value: time | datetime, fsp: int = 0) -> str:
    """Render ``HH:MM:SS``, with up to ``fsp`` fractional digits when non-zero."""
    text = f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    if fsp and value.microsecond:
        text += "." + f"{value.microsecond:06d}"[:fsp]
    return text


# ------------------------------------------------------------------
# Column capability views
# ------------------------------------------------------------------


def effective_unsigned(column: "ColumnSpec") -> bool:
    return column.unsigned and column.data_type.supports_unsigned


def effective_zerofill(column: "ColumnSpec") -> bool:
    return column.zerofill and column.data_type.supports_zerofill


def effective_auto_increment(column: "ColumnSpec") -> bool:
    return column.auto_increment and column.data_type.supports_auto_increment


# ------------------------------------------------------------------
# Type clause
# ------------------------------------------------------------------


def list_parameter(column: "ColumnSpec") -> list[str]:
    """Return the ENUM/SET value list, or raise ``PropertyRequired``."""
    values = column.parameter
    if (
        values is None
        or isinstance(values, str)
        or not isinstance(values, Sequence)
        or len(values) == 0
        or not all(isinstance(v, str) for v in values)
    ):
        raise PropertyRequired(
            f"{column.data_type.name} column '{column.name}' requires a "
            f"non-empty list of string values",
            details={"column": column.name},
        )
    return list(values)


def _scalar_parameter(column: "ColumnSpec") -> str | None:
    value = column.parameter
    if value is None:
        return column.data_type.default_parameter

    match = _SCALAR_PARAMETER.match(value) if isinstance(value, str) else None
    if isinstance(value, int) and not isinstance(value, bool):
        if value <= 0:
            raise InvalidParameter(
                f"Parameter for column '{column.name}' must be positive",
                details={"column": column.name, "parameter": value},
            )
        size = value
        rendered = str(value)
    elif match is not None:
        size = int(match.group(1))
        rendered = match.group(1) if match.group(2) is None else f"{match.group(1)},{match.group(2)}"
    else:
        raise InvalidParameter(
            f"Parameter for column '{column.name}' must be a length or "
            f"'M,D' precision, got {value!r}",
            details={"column": column.name},
        )

    max_length = column.data_type.max_length
    if max_length is not None and size > max_length:
        raise InvalidParameter(
            f"Parameter {size} for column '{column.name}' exceeds "
            f"{column.data_type.name} maximum of {max_length}",
            details={"column": column.name, "parameter": size},
        )
    return rendered


def render_type(column: "ColumnSpec") -> str:
    """Render the type clause including ZEROFILL/UNSIGNED attributes.

    UNSIGNED and ZEROFILL belong to the data type in MySQL's grammar, so they
    follow the type name directly.
    """
    data_type = column.data_type
    if data_type.is_list:
        clause = f"{data_type.name}({format_value_list(list_parameter(column))})"
    else:
        parameter = _scalar_parameter(column)
        clause = data_type.name if parameter is None else f"{data_type.name}({parameter})"

    if effective_zerofill(column):
        clause += " ZEROFILL"
    if effective_unsigned(column):
        clause += " UNSIGNED"
    return clause


# ------------------------------------------------------------------
# Default literals
# ------------------------------------------------------------------


def _mismatch(column: "ColumnSpec", expected: str) -> DefaultTypeMismatch:
    return DefaultTypeMismatch(
        f"Default for column '{column.name}' ({column.data_type.name}) must be "
        f"{expected}, got {type(column.default).__name__} {column.default!r}",
        details={"column": column.name, "type": column.data_type.name},
    )


def _format_integer(column: "ColumnSpec", value: Any) -> str:
    unsigned = effective_unsigned(column)
    expected = "an unsigned int" if unsigned else "an int"
    if isinstance(value, bool) or not isinstance(value, int):
        raise _mismatch(column, expected)

    bits = column.data_type.bit_width or 64
    if unsigned:
        low, high = 0, 2**bits - 1
    else:
        low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    if not low <= value <= high:
        raise _mismatch(column, f"{expected} in [{low}, {high}]")
    return str(value)


def _format_float(column: "ColumnSpec", value: Any) -> str:
    unsigned = effective_unsigned(column)
    expected = "a non-negative number" if unsigned else "a number"
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _mismatch(column, expected)
    if isinstance(value, float) and not math.isfinite(value):
        raise _mismatch(column, f"a finite {expected[2:]}")
    if unsigned and value < 0:
        raise _mismatch(column, expected)
    return repr(value)


def _format_boolean(column: "ColumnSpec", value: Any) -> str:
    if not isinstance(value, bool):
        raise _mismatch(column, "a bool")
    return "true" if value else "false"


def _format_bit(column: "ColumnSpec", value: Any) -> str:
    # BIT without a length is BIT(1)
    parameter = _scalar_parameter(column)
    width = 1 if parameter is None else int(parameter.split(",")[0])
    if not isinstance(value, int) or value < 0 or value.bit_length() > width:
        raise _mismatch(column, f"a bool or int that fits in {width} bit(s)")
    return f"b'{int(value):b}'"


def _fractional_precision(column: "ColumnSpec") -> int:
    parameter = _scalar_parameter(column)
    if parameter is None:
        return 0
    if "," in parameter:
        raise InvalidParameter(
            f"Parameter for column '{column.name}' must be a fractional "
            f"seconds precision, got {parameter!r}",
            details={"column": column.name},
        )
    return int(parameter)


def _check_temporal(column: "ColumnSpec", value: time | datetime, expected: str) -> int:
    """Reject values the column would store differently; return the precision."""
    if value.tzinfo is not None:
        raise _mismatch(column, f"a naive {expected}")
    fsp = _fractional_precision(column)
    if value.microsecond % 10 ** (6 - fsp):
        raise _mismatch(column, f"a {expected} with at most {fsp} fractional second digit(s)")
    return fsp


def _format_date(column: "ColumnSpec", value: Any) -> str:
    if isinstance(value, datetime) or not isinstance(value, date):
        raise _mismatch(column, "a date")
    return quote_string(format_date(value))


def _format_datetime(column: "ColumnSpec", value: Any) -> str:
    if not isinstance(value, datetime):
        raise _mismatch(column, "a datetime")
    fsp = _check_temporal(column, value, "datetime")
    return quote_string(format_datetime(value, fsp))


def _format_time(column: "ColumnSpec", value: Any) -> str:
    if not isinstance(value, (time, datetime)):
        raise _mismatch(column, "a time")
    fsp = _check_temporal(column, value, "time")
    return quote_string(format_time(value, fsp))


def _format_string(column: "ColumnSpec", value: Any) -> str:
    if not isinstance(value, str):
        raise _mismatch(column, "a str")
    return quote_string(value)


def _format_enum(column: "ColumnSpec", value: Any) -> str:
    if not isinstance(value, str):
        raise _mismatch(column, "a str")
    allowed = list_parameter(column)
    if value not in allowed:
        raise _mismatch(column, f"one of {allowed}")
    return quote_string(value)


def _format_set(column: "ColumnSpec", value: Any) -> str:
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise _mismatch(column, "a list of str")
    allowed = list_parameter(column)
    unknown = [v for v in value if v not in allowed]
    if unknown:
        raise _mismatch(column, f"a subset of {allowed}")
    return quote_string(",".join(value))


_DEFAULT_FORMATTERS: dict[StorageCategory, Callable[["ColumnSpec", Any], str]] = {
    StorageCategory.INTEGER: _format_integer,
    StorageCategory.FLOATING_POINT: _format_float,
    StorageCategory.BOOLEAN: _format_boolean,
    StorageCategory.BIT: _format_bit,
    StorageCategory.DATE: _format_date,
    StorageCategory.DATETIME: _format_datetime,
    StorageCategory.TIME: _format_time,
    StorageCategory.STRING: _format_string,
    StorageCategory.ENUM: _format_enum,
    StorageCategory.SET: _format_set,
}


def format_default(column: "ColumnSpec") -> str | None:
    """Format the column's default as a SQL literal.

    Returns ``None`` when there is nothing to emit: no default was set, or the
    column is AUTO_INCREMENT (which ignores defaults).

    Raises:
        DefaultTypeMismatch: If the value does not fit the storage category.
    """
    if column.default is None or effective_auto_increment(column):
        return None
    formatter = _DEFAULT_FORMATTERS[column.data_type.category]
    return formatter(column, column.default)


# ------------------------------------------------------------------
# Statements
# ------------------------------------------------------------------


def render_column(column: "ColumnSpec") -> str:
    """Render a column definition fragment.

    Raises:
        PropertyRequired: ENUM/SET without a value list.
        DefaultTypeMismatch: Default does not fit the storage category.
        InvalidParameter: Scalar parameter is malformed or too large.
    """
    parts = [quote_identifier(column.name), render_type(column)]
    if column.not_null:
        parts.append("NOT NULL")
    if effective_auto_increment(column):
        parts.append("AUTO_INCREMENT")
    literal = format_default(column)
    if literal is not None:
        parts.append(f"DEFAULT {literal}")
    return " ".join(parts)


def qualified_name(schema_name: str, table_name: str) -> str:
    return f"{quote_identifier(schema_name)}.{quote_identifier(table_name)}"


def render_primary_key(names: Sequence[str]) -> str:
    return f"PRIMARY KEY ({','.join(quote_identifier(name) for name in names)})"


def render_unique_index(name: str) -> str:
    return f"UNIQUE INDEX {quote_identifier(f'{name}_UNIQUE')} ({quote_identifier(name)} ASC)"


def validate_table(table: "TableSpec") -> list[str]:
    """Run the table-level checks and render every column definition.

    Used for both CREATE and ALTER so a table that cannot be created is never
    altered either.

    Returns:
        Column definitions in declaration order.

    Raises:
        PropertyRequired: Table has no columns, or a column needs a value list.
        MultipleAutoIncrement: More than one AUTO_INCREMENT column.
        DefaultTypeMismatch, InvalidParameter: From column rendering.
    """
    if not table.columns:
        raise PropertyRequired(
            f"Table '{table.name}' requires at least one column",
            details={"table": table.name},
        )

    auto_increment_column: str | None = None
    definitions: list[str] = []
    for column in table.columns:
        if effective_auto_increment(column):
            if auto_increment_column is not None:
                raise MultipleAutoIncrement(
                    f"Table '{table.name}' allows at most one AUTO_INCREMENT column",
                    details={
                        "table": table.name,
                        "columns": f"{auto_increment_column},{column.name}",
                    },
                )
            auto_increment_column = column.name
        definitions.append(render_column(column))
    return definitions


def render_create_table(table: "TableSpec", schema_name: str) -> str:
    """Render a CREATE TABLE statement.

    Columns render in declaration order, followed by one composite
    PRIMARY KEY clause and one UNIQUE INDEX clause per unique column.

    Raises:
        PropertyRequired: Table has no columns, or a column needs a value list.
        MultipleAutoIncrement: More than one AUTO_INCREMENT column.
        DefaultTypeMismatch, InvalidParameter: From column rendering.
    """
    clauses = validate_table(table)

    primary_keys = [column.name for column in table.columns if column.primary_key]
    if primary_keys:
        clauses.append(render_primary_key(primary_keys))

    for column in table.columns:
        if column.unique_index:
            clauses.append(render_unique_index(column.name))

    return f"CREATE TABLE {qualified_name(schema_name, table.name)} ({', '.join(clauses)});"


def render_rename_table(schema_name: str, old_name: str, new_name: str) -> str:
    return (
        f"RENAME TABLE {qualified_name(schema_name, old_name)} "
        f"TO {qualified_name(schema_name, new_name)};"
    )


def render_alter_table(schema_name: str, table_name: str, clauses: Sequence[str]) -> str:
    """Join ALTER clauses (``ADD COLUMN ...`` etc.) into one statement."""
    return f"ALTER TABLE {qualified_name(schema_name, table_name)} {', '.join(clauses)};"
