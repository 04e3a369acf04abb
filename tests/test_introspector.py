"""Tests for SchemaIntrospector against a fake client."""

from unittest.mock import AsyncMock

import pytest

from sqlow.errors import QueryFailure
from sqlow.schema.introspector import SchemaIntrospector
from tests.fakes import FakeMySQL, live_column


@pytest.fixture
def client() -> FakeMySQL:
    return FakeMySQL(
        {
            ("app", "users"): [
                live_column("id", "int", nullable=False, extra="auto_increment", key="PRI"),
                live_column("email", "varchar(255)", default="x@y", key="UNI"),
            ],
            ("app", "orders"): [live_column("id", "bigint unsigned", nullable=False)],
            ("other", "users"): [],
        }
    )


class TestExistence:
    """Verify table and column existence checks."""

    async def test_table_exists(self, client: FakeMySQL) -> None:
        introspector = SchemaIntrospector(client)
        assert await introspector.table_exists("app", "users") is True
        assert await introspector.table_exists("app", "missing") is False

    async def test_table_exists_uses_bound_parameters(self, client: FakeMySQL) -> None:
        await SchemaIntrospector(client).table_exists("app", "users")
        sql, params = client.query.call_args.args
        assert "information_schema.tables" in sql
        assert ":schema" in sql and ":table" in sql
        assert params == {"schema": "app", "table": "users"}

    async def test_column_exists(self, client: FakeMySQL) -> None:
        introspector = SchemaIntrospector(client)
        assert await introspector.column_exists("app", "users", "email") is True
        assert await introspector.column_exists("app", "users", "phone") is False

    async def test_get_table_names_scoped_to_schema(self, client: FakeMySQL) -> None:
        names = await SchemaIntrospector(client).get_table_names("app")
        assert names == ["orders", "users"]


class TestColumns:
    """Verify column metadata mapping."""

    async def test_get_columns(self, client: FakeMySQL) -> None:
        columns = await SchemaIntrospector(client).get_columns("app", "users")
        assert list(columns) == ["id", "email"]
        assert columns["id"].is_nullable is False
        assert columns["id"].is_auto_increment is True
        assert columns["email"].column_type == "varchar(255)"
        assert columns["email"].default == "x@y"
        assert columns["id"].is_primary_key is True
        assert columns["email"].is_primary_key is False

    async def test_introspect_table(self, client: FakeMySQL) -> None:
        table = await SchemaIntrospector(client).introspect_table("app", "orders")
        assert table.name == "orders"
        assert table.columns["id"].column_type == "bigint unsigned"

    async def test_introspect_missing_table(self, client: FakeMySQL) -> None:
        assert await SchemaIntrospector(client).introspect_table("app", "nope") is None


class TestErrors:
    """Client errors surface as QueryFailure."""

    async def test_query_failure_wraps_cause(self) -> None:
        client = AsyncMock()
        cause = RuntimeError("server has gone away")
        client.query = AsyncMock(side_effect=cause)
        with pytest.raises(QueryFailure) as exc_info:
            await SchemaIntrospector(client).table_exists("app", "users")
        assert exc_info.value.cause is cause
        assert exc_info.value.details == {"schema": "app", "table": "users"}
        assert "server has gone away" in str(exc_info.value)
