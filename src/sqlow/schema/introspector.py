"""MySQL schema introspection via information_schema.

This module queries the live database through a ``DatabaseClient`` to
answer:
- Does a table / column exist?
- Which tables does a schema contain?
- What are a table's columns, types, nullability, defaults, and extras?

Queries use bound parameters against ``information_schema`` and are the
equivalent of ``SHOW TABLES LIKE`` / ``SHOW COLUMNS FROM``.  Client errors
are wrapped in ``QueryFailure``.
"""

from typing import TYPE_CHECKING, Any

from sqlow.errors import QueryFailure
from sqlow.schema.models import ColumnSchema, TableSchema

if TYPE_CHECKING:
    from sqlow.adapters.base import DatabaseClient


class SchemaIntrospector:
    """Introspects MySQL schema state.

    Usage:
        introspector = SchemaIntrospector(client)
        if await introspector.table_exists("app", "users"):
            columns = await introspector.get_columns("app", "users")
    """

    def __init__(self, client: "DatabaseClient"):
        """Initialize with a database client.

        Args:
            client: Any ``DatabaseClient`` implementation.
        """
        self._client = client

    async def _query(self, sql: str, params: dict[str, Any]) -> list[dict]:
        try:
            return await self._client.query(sql, params)
        except Exception as e:
            raise QueryFailure(
                "Schema introspection query failed",
                details=dict(params),
                cause=e,
            ) from e

    async def table_exists(self, schema_name: str, table_name: str) -> bool:
        """Return True if ``schema_name.table_name`` is a base table."""
        query = """
            SELECT table_name AS name
            FROM information_schema.tables
            WHERE table_schema = :schema
              AND table_name = :table
              AND table_type = 'BASE TABLE'
        """
        rows = await self._query(query, {"schema": schema_name, "table": table_name})
        return len(rows) > 0

    async def column_exists(self, schema_name: str, table_name: str, column_name: str) -> bool:
        """Return True if the column exists on the table."""
        query = """
            SELECT column_name AS name
            FROM information_schema.columns
            WHERE table_schema = :schema
              AND table_name = :table
              AND column_name = :column
        """
        rows = await self._query(
            query, {"schema": schema_name, "table": table_name, "column": column_name}
        )
        return len(rows) > 0

    async def get_table_names(self, schema_name: str) -> list[str]:
        """Get all base table names in the schema, sorted."""
        query = """
            SELECT table_name AS name
            FROM information_schema.tables
            WHERE table_schema = :schema
              AND table_type = 'BASE TABLE'
            ORDER BY table_name
        """
        rows = await self._query(query, {"schema": schema_name})
        return [row["name"] for row in rows]

    async def get_columns(self, schema_name: str, table_name: str) -> dict[str, ColumnSchema]:
        """Get columns for a table in ordinal order."""
        query = """
            SELECT
                column_name AS name,
                data_type AS data_type,
                column_type AS column_type,
                is_nullable AS is_nullable,
                column_default AS column_default,
                extra AS extra,
                column_key AS column_key
            FROM information_schema.columns
            WHERE table_schema = :schema
              AND table_name = :table
            ORDER BY ordinal_position
        """
        rows = await self._query(query, {"schema": schema_name, "table": table_name})
        columns: dict[str, ColumnSchema] = {}
        for row in rows:
            default = row.get("column_default")
            columns[row["name"]] = ColumnSchema(
                name=row["name"],
                data_type=str(row["data_type"]).lower(),
                column_type=str(row["column_type"]),
                is_nullable=(row["is_nullable"] == "YES"),
                default=None if default is None else str(default),
                extra=row.get("extra") or "",
                key=row.get("column_key") or "",
            )
        return columns

    async def introspect_table(self, schema_name: str, table_name: str) -> TableSchema | None:
        """Return the live table, or None if it does not exist."""
        if not await self.table_exists(schema_name, table_name):
            return None
        columns = await self.get_columns(schema_name, table_name)
        return TableSchema(name=table_name, columns=columns)
