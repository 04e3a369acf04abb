"""Schema context: the connection and schema name every operation runs against.

A ``SchemaContext`` is created once and passed explicitly to rendering and
reconciliation calls.  Offline contexts (no client) can render DDL but cannot
reconcile.

Usage:
    from sqlow.schema.context import SchemaContext, initialize_context

    context = initialize_context(adapter, "app")
    ddl = table.render(context)

    offline = SchemaContext.offline("app")
    ddl = table.render(offline)
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlow.errors import SchemaUninitialized, UnsupportedDialect

if TYPE_CHECKING:
    from sqlow.adapters.base import DatabaseClient


SUPPORTED_DIALECTS = frozenset({"mysql", "mariadb"})


@dataclass(frozen=True)
class SchemaContext:
    """Active client plus the schema (database) name DDL is qualified with."""

    client: "DatabaseClient | None"
    schema_name: str
    dialect: str = "mysql"

    @classmethod
    def offline(cls, schema_name: str, dialect: str = "mysql") -> "SchemaContext":
        """Context for rendering only; reconciliation rejects it."""
        _check_schema_name(schema_name)
        return cls(client=None, schema_name=schema_name, dialect=_check_dialect(dialect))

    @property
    def is_connected(self) -> bool:
        return self.client is not None


def _check_dialect(dialect: str) -> str:
    normalized = dialect.strip().lower()
    if normalized not in SUPPORTED_DIALECTS:
        raise UnsupportedDialect(
            f"Unsupported SQL dialect: {dialect}",
            details={"supported": ",".join(sorted(SUPPORTED_DIALECTS))},
        )
    return normalized


def _check_schema_name(schema_name: str | None) -> None:
    if not schema_name or not schema_name.strip():
        raise SchemaUninitialized("Schema name must not be empty")


def initialize_context(
    client: "DatabaseClient | None",
    schema_name: str,
    dialect: str = "mysql",
) -> SchemaContext:
    """Create the context for rendering and reconciliation.

    Args:
        client: Connected ``DatabaseClient``.
        schema_name: Database (schema) that tables are created in.
        dialect: SQL engine name; must be in ``SUPPORTED_DIALECTS``.

    Raises:
        UnsupportedDialect: If ``dialect`` is not supported.
        SchemaUninitialized: If ``client`` is None or ``schema_name`` is empty.
    """
    normalized = _check_dialect(dialect)
    if client is None:
        raise SchemaUninitialized(
            "No database client. Create one with get_adapter() first."
        )
    _check_schema_name(schema_name)
    return SchemaContext(client=client, schema_name=schema_name, dialect=normalized)


def require_context(context: SchemaContext | None, connected: bool = False) -> SchemaContext:
    """Return ``context`` or raise ``SchemaUninitialized``.

    Args:
        context: Context passed by the caller.
        connected: Also require a live client.
    """
    if context is None or not context.schema_name:
        raise SchemaUninitialized(
            "Schema context has not been initialized. "
            "Call initialize_context(client, schema_name) first."
        )
    if connected and context.client is None:
        raise SchemaUninitialized(
            "Schema context has no database client (offline context)."
        )
    return context
