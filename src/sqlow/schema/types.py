"""SQL data type catalog.

Each ``DataType`` is an immutable descriptor: the canonical MySQL name, the
storage category that decides how default literals are formatted, and the
capability flags that decide which column modifiers are legal.  The catalog is
built once at import time and never mutated.

Usage:
    from sqlow.schema.types import INTEGER, VARCHAR, lookup_type

    INTEGER.supports_auto_increment
    # True
    lookup_type("varchar") is VARCHAR
    # True
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class StorageCategory(str, Enum):
    """Semantic family of a data type."""

    INTEGER = "integer"
    FLOATING_POINT = "floating_point"
    BOOLEAN = "boolean"
    BIT = "bit"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    STRING = "string"
    ENUM = "enum"
    SET = "set"


class DataType(BaseModel):
    """Descriptor for a SQL data type.

    Two data types are equal iff every field matches.

    Example:
        >>> INT == INTEGER
        False
        >>> INT.model_copy() == INT
        True
    """

    model_config = ConfigDict(frozen=True)

    name: str
    category: StorageCategory
    bit_width: int | None = None  # integer range for default checks
    max_length: int | None = None
    supports_unsigned: bool = False
    supports_zerofill: bool = False
    supports_auto_increment: bool = False
    default_parameter: str | None = None  # used when no parameter is set

    @property
    def is_numeric(self) -> bool:
        """True for integer and floating point types."""
        return self.category in (StorageCategory.INTEGER, StorageCategory.FLOATING_POINT)

    @property
    def is_list(self) -> bool:
        """True for ENUM and SET, which need a value list parameter."""
        return self.category in (StorageCategory.ENUM, StorageCategory.SET)


def _integer(name: str, bit_width: int) -> DataType:
    return DataType(
        name=name,
        category=StorageCategory.INTEGER,
        bit_width=bit_width,
        supports_unsigned=True,
        supports_zerofill=True,
        supports_auto_increment=True,
    )


def _floating(name: str) -> DataType:
    return DataType(
        name=name,
        category=StorageCategory.FLOATING_POINT,
        supports_unsigned=True,
        supports_zerofill=True,
        supports_auto_increment=True,
    )


# Integers: -2^(w-1) .. 2^(w-1)-1 signed, 0 .. 2^w-1 unsigned
TINYINT = _integer("TINYINT", 8)
SMALLINT = _integer("SMALLINT", 16)
MEDIUMINT = _integer("MEDIUMINT", 24)
INT = _integer("INT", 32)
INTEGER = _integer("INTEGER", 32)
BIGINT = _integer("BIGINT", 64)

FLOAT = _floating("FLOAT")
DOUBLE = _floating("DOUBLE")

BOOLEAN = DataType(name="BOOLEAN", category=StorageCategory.BOOLEAN)
BOOL = DataType(name="BOOL", category=StorageCategory.BOOLEAN)
BIT = DataType(name="BIT", category=StorageCategory.BIT, max_length=64)

DATE = DataType(name="DATE", category=StorageCategory.DATE)
# max_length on temporal types is the fractional seconds precision
DATETIME = DataType(name="DATETIME", category=StorageCategory.DATETIME, max_length=6)
# Auto-set by the server when no value is assigned on update
TIMESTAMP = DataType(name="TIMESTAMP", category=StorageCategory.DATETIME, max_length=6)
TIME = DataType(name="TIME", category=StorageCategory.TIME, max_length=6)

VARCHAR = DataType(
    name="VARCHAR",
    category=StorageCategory.STRING,
    max_length=65535,
    default_parameter="255",
)
TEXT = DataType(name="TEXT", category=StorageCategory.STRING, max_length=65535)
MEDIUMTEXT = DataType(name="MEDIUMTEXT", category=StorageCategory.STRING, max_length=16777215)
LONGTEXT = DataType(name="LONGTEXT", category=StorageCategory.STRING, max_length=4294967295)

ENUM = DataType(name="ENUM", category=StorageCategory.ENUM)
SET = DataType(name="SET", category=StorageCategory.SET)


CATALOG: dict[str, DataType] = {
    t.name: t
    for t in (
        TINYINT,
        SMALLINT,
        MEDIUMINT,
        INT,
        INTEGER,
        BIGINT,
        FLOAT,
        DOUBLE,
        BOOLEAN,
        BOOL,
        BIT,
        DATE,
        DATETIME,
        TIMESTAMP,
        TIME,
        VARCHAR,
        TEXT,
        MEDIUMTEXT,
        LONGTEXT,
        ENUM,
        SET,
    )
}


def lookup_type(name: str) -> DataType:
    """Resolve a catalog type by name (case-insensitive).

    Raises:
        KeyError: If the name is not in the catalog.
    """
    key = name.strip().upper()
    if key not in CATALOG:
        raise KeyError(
            f"Unknown data type '{name}'. Available: {', '.join(CATALOG)}"
        )
    return CATALOG[key]
