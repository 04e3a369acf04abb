"""Column specification with an immutable fluent builder.

Every setter returns a new ``ColumnSpec``; the original is never changed.
Modifiers the data type does not support (UNSIGNED, ZEROFILL,
AUTO_INCREMENT) are skipped with a warning, or rejected with
``UnsupportedModifier`` when the column is created with ``strict=True``.

Usage:
    from sqlow.schema.column import Column
    from sqlow.schema.types import INTEGER, VARCHAR

    id_col = Column("id", INTEGER).set_primary_key().set_auto_increment()
    name_col = Column("name", VARCHAR).set_parameter(100).set_not_null()
    name_col.render()
    # '`name` VARCHAR(100) NOT NULL'
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from sqlow.errors import UnsupportedModifier
from sqlow.schema.ddl import render_column
from sqlow.schema.types import DataType

logger = logging.getLogger(__name__)


class ColumnSpec(BaseModel):
    """Desired definition of a single column.

    ``default`` and ``parameter`` are stored verbatim; they are checked
    against the storage category when the column is rendered.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    data_type: DataType
    primary_key: bool = False
    not_null: bool = False
    unique_index: bool = False
    unsigned: bool = False
    zerofill: bool = False
    auto_increment: bool = False
    default: Any = None
    parameter: Any = None
    strict: bool = False

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Column name must not be empty")
        return value

    @classmethod
    def create(cls, name: str, data_type: DataType, strict: bool = False) -> "ColumnSpec":
        """Create a column with no modifiers set."""
        return cls(name=name, data_type=data_type, strict=strict)

    # ------------------------------------------------------------------
    # Unconditional setters
    # ------------------------------------------------------------------

    def set_primary_key(self, flag: bool = True) -> "ColumnSpec":
        return self.model_copy(update={"primary_key": flag})

    def set_not_null(self, flag: bool = True) -> "ColumnSpec":
        return self.model_copy(update={"not_null": flag})

    def set_unique_index(self, flag: bool = True) -> "ColumnSpec":
        return self.model_copy(update={"unique_index": flag})

    def set_default(self, value: Any) -> "ColumnSpec":
        """Store a default value; its type is checked at render time."""
        if isinstance(value, list):
            value = tuple(value)
        return self.model_copy(update={"default": value})

    def set_parameter(self, value: Any) -> "ColumnSpec":
        """Store a length/precision or the ENUM/SET value list."""
        if isinstance(value, list):
            value = tuple(value)
        return self.model_copy(update={"parameter": value})

    # ------------------------------------------------------------------
    # Capability-checked setters
    # ------------------------------------------------------------------

    def set_unsigned(self, flag: bool = True) -> "ColumnSpec":
        return self._set_modifier("unsigned", "UNSIGNED", flag, self.data_type.supports_unsigned)

    def set_zerofill(self, flag: bool = True) -> "ColumnSpec":
        return self._set_modifier("zerofill", "ZEROFILL", flag, self.data_type.supports_zerofill)

    def set_auto_increment(self, flag: bool = True) -> "ColumnSpec":
        return self._set_modifier(
            "auto_increment",
            "AUTO_INCREMENT",
            flag,
            self.data_type.supports_auto_increment,
        )

    def _set_modifier(self, field: str, keyword: str, flag: bool, allowed: bool) -> "ColumnSpec":
        if allowed:
            return self.model_copy(update={field: flag})
        if not flag:
            return self

        if self.strict:
            raise UnsupportedModifier(
                f"{keyword} is not supported by {self.data_type.name}",
                details={"column": self.name, "type": self.data_type.name},
            )
        logger.warning(
            f"Ignoring {keyword} on column '{self.name}': "
            f"not supported by {self.data_type.name}"
        )
        return self

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> str:
        """Render this column as a DDL fragment.

        Raises:
            PropertyRequired: ENUM/SET column without a value list.
            DefaultTypeMismatch: Default does not match the storage category.
            InvalidParameter: Length/precision parameter cannot be rendered.
        """
        return render_column(self)


def Column(name: str, data_type: DataType, strict: bool = False) -> ColumnSpec:
    """Shorthand for ``ColumnSpec.create``."""
    return ColumnSpec.create(name, data_type, strict=strict)
