"""Pydantic models for live schema state, diffs, and reconciliation results.

This module contains schema-domain models:
- Introspection models: ColumnSchema, TableSchema
- Diff models: ColumnDiff, TableDiff
- Reconciliation models: ReconcileOutcome, ReconcileResult

Desired-state models (ColumnSpec, TableSpec) live in
sqlow.schema.column and sqlow.schema.table.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from sqlow.errors import SqlowError


# ============================================================================
# Schema Introspection Models
# ============================================================================


class ColumnSchema(BaseModel):
    """Live column as reported by ``information_schema.columns``.

    Example:
        >>> col = ColumnSchema(name="id", data_type="int", column_type="int unsigned")
        >>> col.is_nullable
        True
    """

    name: str
    data_type: str
    column_type: str  # full type incl. length and attributes, e.g. "varchar(100)"
    is_nullable: bool = True
    default: str | None = None
    extra: str = ""  # e.g. "auto_increment"
    key: str = ""  # column_key: PRI, UNI or MUL

    @property
    def is_auto_increment(self) -> bool:
        return "auto_increment" in self.extra.lower()

    @property
    def is_primary_key(self) -> bool:
        return self.key.upper() == "PRI"


class TableSchema(BaseModel):
    """Live table with its columns in ordinal order."""

    name: str
    columns: dict[str, ColumnSchema] = Field(default_factory=dict)


# ============================================================================
# Diff Models
# ============================================================================


class ColumnDiff(BaseModel):
    """A single column difference between desired and live state."""

    table: str
    column: str
    change: Literal["add", "modify", "drop"]
    message: str = ""


class TableDiff(BaseModel):
    """Structural difference for one table.

    Example:
        >>> diff = TableDiff(table="users")
        >>> diff.has_changes
        False
        >>> diff.format_report()
        'Table users: up to date'
    """

    table: str
    added: list[ColumnDiff] = Field(default_factory=list)
    modified: list[ColumnDiff] = Field(default_factory=list)
    removed: list[ColumnDiff] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.modified or self.removed)

    @property
    def change_count(self) -> int:
        return len(self.added) + len(self.modified) + len(self.removed)

    def format_report(self) -> str:
        """Format the diff as a human-readable report."""
        if not self.has_changes:
            return f"Table {self.table}: up to date"

        lines = [f"Table {self.table}: {self.change_count} change(s)"]
        for label, diffs in (
            ("Added", self.added),
            ("Modified", self.modified),
            ("Removed", self.removed),
        ):
            if diffs:
                lines.append(f"\n  {label} columns ({len(diffs)}):")
                for diff in diffs:
                    suffix = f" ({diff.message})" if diff.message else ""
                    lines.append(f"    - {diff.column}{suffix}")

        return "\n".join(lines)


# ============================================================================
# Reconciliation Models
# ============================================================================


class ReconcileOutcome(str, Enum):
    """Action taken for one table."""

    ADDED = "ADD"
    UNCHANGED = "PASS"
    UPDATED = "UPDATE"
    FAILED = "ERROR"


class ReconcileResult(BaseModel):
    """Result of reconciling one table.

    Attributes:
        table: Desired table name.
        outcome: Action taken (or that would be taken, on dry run).
        statements: DDL executed, or that would be executed on dry run.
        diff: Column diff when the table already existed.
        error: The failure when ``outcome`` is FAILED.
        dry_run: True if nothing was executed.

    Example:
        >>> result = ReconcileResult(table="users", outcome=ReconcileOutcome.UNCHANGED)
        >>> result.success
        True
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    table: str
    outcome: ReconcileOutcome
    statements: list[str] = Field(default_factory=list)
    diff: TableDiff | None = None
    error: SqlowError | None = None
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return self.outcome != ReconcileOutcome.FAILED
