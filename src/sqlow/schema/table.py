"""Table specification and the rename/alter workflow.

``TableSpec`` aggregates ``ColumnSpec`` values and renders CREATE TABLE DDL
against a ``SchemaContext``.  ``UpdateSpec`` (from ``TableSpec.to_update``)
compares the specification with the live table and produces the RENAME and
ALTER statements that bring the live table in line.

Usage:
    from sqlow.schema.column import Column
    from sqlow.schema.table import Table
    from sqlow.schema.types import BOOLEAN, INTEGER, VARCHAR

    users = Table("users", [
        Column("id", INTEGER).set_auto_increment().set_primary_key(),
        Column("name", VARCHAR).set_parameter(100).set_not_null(),
        Column("active", BOOLEAN).set_default(True),
    ])
    users.render(context)
    # 'CREATE TABLE `app`.`users` (`id` INTEGER AUTO_INCREMENT, ...);'

    plan = await users.to_update("accounts").build(context)
    plan.statements
    # ['RENAME TABLE `app`.`accounts` TO `app`.`users`;', 'ALTER TABLE ...;']
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, field_validator

from sqlow.errors import TableNotFound, UnsupportedAlteration
from sqlow.schema.column import ColumnSpec
from sqlow.schema.comparator import compare_table
from sqlow.schema.context import SchemaContext, require_context
from sqlow.schema.ddl import (
    effective_auto_increment,
    quote_identifier,
    render_alter_table,
    render_column,
    render_create_table,
    render_primary_key,
    render_rename_table,
    render_unique_index,
    validate_table,
)
from sqlow.schema.introspector import SchemaIntrospector
from sqlow.schema.models import ColumnSchema, TableDiff


class TableSpec(BaseModel):
    """Desired definition of a table.

    The owning schema is not stored; it comes from the context passed to
    ``render``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    columns: tuple[ColumnSpec, ...] = ()

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Table name must not be empty")
        return value

    @classmethod
    def create(cls, name: str, columns: Sequence[ColumnSpec]) -> "TableSpec":
        return cls(name=name, columns=tuple(columns))

    def column(self, name: str) -> ColumnSpec | None:
        """Look up a column by name (case-insensitive)."""
        for col in self.columns:
            if col.name.lower() == name.lower():
                return col
        return None

    def render(self, context: SchemaContext | None) -> str:
        """Render the CREATE TABLE statement.

        Raises:
            SchemaUninitialized: If ``context`` is missing.
            PropertyRequired: No columns, or ENUM/SET without values.
            MultipleAutoIncrement: More than one AUTO_INCREMENT column.
            DefaultTypeMismatch: A default does not match its column type.
            InvalidParameter: A length/precision parameter is invalid.
        """
        context = require_context(context)
        return render_create_table(self, context.schema_name)

    def to_update(self, previous_name: str) -> "UpdateSpec":
        """Start an update keyed on the table's live name.

        Args:
            previous_name: Current live name; pass ``self.name`` when the
                table is not being renamed.
        """
        return UpdateSpec(table=self, previous_name=previous_name)


def Table(name: str, columns: Sequence[ColumnSpec]) -> TableSpec:
    """Shorthand for ``TableSpec.create``."""
    return TableSpec.create(name, columns)


# ------------------------------------------------------------------
# Update workflow
# ------------------------------------------------------------------


@dataclass
class AlterPlan:
    """Statements that bring a live table in line with its specification.

    Attributes:
        table: Desired table name.
        previous_name: Live name before the update.
        diff: Column-level differences found.
        statements: RENAME and ALTER statements, in execution order.
        kept_columns: Live columns not in the specification that were left
            in place because drops were not allowed.
    """

    table: str
    previous_name: str
    diff: TableDiff
    statements: list[str] = field(default_factory=list)
    kept_columns: list[str] = field(default_factory=list)

    @property
    def is_rename(self) -> bool:
        return self.table != self.previous_name

    @property
    def has_changes(self) -> bool:
        return bool(self.statements)


class UpdateSpec(BaseModel):
    """Rename/alter workflow for an existing table."""

    model_config = ConfigDict(frozen=True)

    table: TableSpec
    previous_name: str

    def _key_clauses(self, added: list[ColumnSpec], live_has_primary_key: bool) -> list[str]:
        """Keys for newly added columns.

        Raises:
            UnsupportedAlteration: The primary key would have to change, or an
                added AUTO_INCREMENT column would have no key.
        """
        clauses: list[str] = []
        added_keys = [column.name for column in added if column.primary_key]
        if added_keys:
            if live_has_primary_key:
                raise UnsupportedAlteration(
                    f"Table '{self.table.name}' already has a primary key; "
                    f"adding primary key column(s) {', '.join(added_keys)} "
                    f"requires a manual migration",
                    details={"table": self.table.name, "columns": ",".join(added_keys)},
                )
            primary_keys = [column.name for column in self.table.columns if column.primary_key]
            clauses.append(f"ADD {render_primary_key(primary_keys)}")

        for column in added:
            if column.unique_index:
                clauses.append(f"ADD {render_unique_index(column.name)}")
            elif effective_auto_increment(column) and not column.primary_key:
                # MySQL requires an AUTO_INCREMENT column to be indexed
                raise UnsupportedAlteration(
                    f"AUTO_INCREMENT column '{column.name}' can only be added "
                    f"to table '{self.table.name}' as a primary key or unique column",
                    details={"table": self.table.name, "column": column.name},
                )
        return clauses

    def plan(
        self,
        context: SchemaContext | None,
        diff: TableDiff,
        allow_drop: bool = False,
        live_columns: dict[str, ColumnSchema] | None = None,
    ) -> AlterPlan:
        """Render statements for a precomputed diff (no database access).

        The whole table goes through the same checks as CREATE TABLE first,
        so nothing is planned for a table that could not be created.  Added
        columns use ``ADD COLUMN`` plus ``ADD PRIMARY KEY`` / ``ADD UNIQUE
        INDEX`` for their keys, modified columns ``MODIFY COLUMN`` with the
        full desired definition, removed columns ``DROP COLUMN`` only when
        ``allow_drop`` is True.  All clauses go into one ALTER statement,
        preceded by a RENAME when the name changed.

        Args:
            live_columns: Live columns of the table, used to tell whether it
                already has a primary key.

        Raises:
            PropertyRequired, MultipleAutoIncrement, DefaultTypeMismatch,
                InvalidParameter: The table fails the CREATE TABLE checks.
            UnsupportedAlteration: An added column's key cannot be added.
        """
        context = require_context(context)
        schema_name = context.schema_name
        validate_table(self.table)
        plan = AlterPlan(table=self.table.name, previous_name=self.previous_name, diff=diff)

        added = [self.table.column(col_diff.column) for col_diff in diff.added]
        clauses = [f"ADD COLUMN {render_column(column)}" for column in added]
        for col_diff in diff.modified:
            clauses.append(f"MODIFY COLUMN {render_column(self.table.column(col_diff.column))}")
        for col_diff in diff.removed:
            if allow_drop:
                clauses.append(f"DROP COLUMN {quote_identifier(col_diff.column)}")
            else:
                plan.kept_columns.append(col_diff.column)

        live_has_primary_key = any(col.is_primary_key for col in (live_columns or {}).values())
        clauses.extend(self._key_clauses(added, live_has_primary_key))

        if plan.is_rename:
            plan.statements.append(
                render_rename_table(schema_name, self.previous_name, self.table.name)
            )
        if clauses:
            plan.statements.append(render_alter_table(schema_name, self.table.name, clauses))
        return plan

    async def build(self, context: SchemaContext | None, allow_drop: bool = False) -> AlterPlan:
        """Compare with the live table and build the alter plan.

        Raises:
            SchemaUninitialized: If ``context`` is missing or offline.
            TableNotFound: If ``previous_name`` does not exist live.
            QueryFailure: If introspection fails.
        """
        context = require_context(context, connected=True)
        introspector = SchemaIntrospector(context.client)

        if not await introspector.table_exists(context.schema_name, self.previous_name):
            raise TableNotFound(
                f"Table '{self.previous_name}' does not exist in schema "
                f"'{context.schema_name}'",
                details={"table": self.previous_name},
            )

        live_columns = await introspector.get_columns(context.schema_name, self.previous_name)
        diff = compare_table(self.table, live_columns)
        return self.plan(context, diff, allow_drop=allow_drop, live_columns=live_columns)
