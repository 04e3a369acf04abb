"""Database client protocol definition.

Defines the ``DatabaseClient`` Protocol the schema layer talks to.  All
methods are ``async def`` -- the library is async-first.

Usage:
    from sqlow.adapters.base import DatabaseClient

    async def do_work(client: DatabaseClient) -> None:
        rows = await client.query(
            "SELECT table_name AS name FROM information_schema.tables "
            "WHERE table_schema = :schema",
            {"schema": "app"},
        )
        await client.execute("CREATE TABLE `app`.`t` (`id` INT)")
        await client.close()
"""

from typing import Any, Protocol


class DatabaseClient(Protocol):
    """Database client interface that all adapters must implement.

    Existence checks and introspection go through ``query``; generated DDL
    goes through ``execute``.  Errors are raised as the driver's own
    exceptions; the schema layer wraps them in ``QueryFailure``.
    """

    async def query(self, sql: str, params: dict[str, Any] | None = None) -> list[dict]:
        """Run a statement that returns rows.

        Args:
            sql: SQL text with ``:name`` placeholders.
            params: Optional dict of named parameters.

        Returns:
            List of dicts, one per row.  Empty list if no rows.

        Example:
            rows = await client.query(
                "SELECT column_name AS name FROM information_schema.columns "
                "WHERE table_schema = :schema AND table_name = :table",
                {"schema": "app", "table": "users"},
            )
        """
        ...

    async def execute(self, sql: str, params: dict[str, Any] | None = None) -> None:
        """Execute a statement that returns no rows (DDL).

        Args:
            sql: Raw SQL statement to execute.
            params: Optional dict of named parameters for the SQL statement.

        Example:
            await client.execute(
                "ALTER TABLE `app`.`users` ADD COLUMN `email` VARCHAR(255)"
            )
        """
        ...

    async def ping(self) -> bool:
        """Check that the database is reachable.

        Returns:
            ``True`` if a trivial round trip succeeds.

        Raises:
            Exception: If the database connection fails.
        """
        ...

    async def close(self) -> None:
        """Close database connection and clean up resources."""
        ...
