"""Tests for the async MySQL adapter (engine is mocked, no server needed)."""

import inspect
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from sqlow.adapters import AsyncMySQLAdapter, DatabaseClient
from sqlow.adapters.mysql import create_async_engine_pooled, normalize_url


class TestProtocol:
    """DatabaseClient declares the four async methods."""

    @pytest.mark.parametrize("method", ["query", "execute", "ping", "close"])
    def test_methods_are_async(self, method: str) -> None:
        assert inspect.iscoroutinefunction(getattr(DatabaseClient, method))
        assert inspect.iscoroutinefunction(getattr(AsyncMySQLAdapter, method))


class TestNormalizeUrl:
    """Verify URL scheme normalization."""

    @pytest.mark.parametrize(
        "url",
        [
            "mysql://u:p@h:3306/app",
            "mariadb://u:p@h:3306/app",
            "mysql+pymysql://u:p@h:3306/app",
            "mysql+aiomysql://u:p@h:3306/app",
        ],
    )
    def test_mysql_family(self, url: str) -> None:
        assert normalize_url(url) == "mysql+aiomysql://u:p@h:3306/app"

    def test_rejects_other_schemes(self) -> None:
        with pytest.raises(ValueError, match="Not a MySQL URL"):
            normalize_url("postgresql://u:p@h/app")


class TestEngineCreation:
    """Verify pooled engine defaults."""

    def test_defaults_and_connect_timeout(self) -> None:
        with patch("sqlow.adapters.mysql.create_async_engine") as mock_create:
            create_async_engine_pooled("mysql+aiomysql://u@h/app")
        url, kwargs = mock_create.call_args.args[0], mock_create.call_args.kwargs
        assert url == "mysql+aiomysql://u@h/app?connect_timeout=5"
        assert kwargs["pool_pre_ping"] is True
        assert kwargs["pool_size"] == 5

    def test_kwargs_override(self) -> None:
        with patch("sqlow.adapters.mysql.create_async_engine") as mock_create:
            create_async_engine_pooled("mysql+aiomysql://u@h/app?charset=utf8mb4", pool_size=1)
        assert mock_create.call_args.args[0].endswith("?charset=utf8mb4&connect_timeout=5")
        assert mock_create.call_args.kwargs["pool_size"] == 1

    def test_adapter_normalizes_url(self) -> None:
        with patch("sqlow.adapters.mysql.create_async_engine_pooled") as mock_create:
            AsyncMySQLAdapter("mysql://u@h/app", echo=True)
        mock_create.assert_called_once_with("mysql+aiomysql://u@h/app", echo=True)


def _mock_engine(rows: list[tuple] | None = None, keys: list[str] | None = None) -> tuple:
    """Build a mock AsyncEngine whose connect()/begin() yield one connection."""
    result = MagicMock()
    result.keys.return_value = keys or []
    result.fetchall.return_value = rows or []
    result.scalar.return_value = 1

    conn = AsyncMock()
    conn.execute = AsyncMock(return_value=result)

    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=conn)
    ctx.__aexit__ = AsyncMock(return_value=False)

    engine = MagicMock()
    engine.connect.return_value = ctx
    engine.begin.return_value = ctx
    engine.dispose = AsyncMock()
    return engine, conn


class TestAdapterMethods:
    """Verify query/execute/ping/close against a mocked engine."""

    def _adapter(self, engine: MagicMock) -> AsyncMySQLAdapter:
        with patch("sqlow.adapters.mysql.create_async_engine_pooled", return_value=engine):
            return AsyncMySQLAdapter("mysql://u@h/app")

    async def test_query_returns_dicts(self) -> None:
        engine, conn = _mock_engine(
            rows=[(b"users", Decimal("3"), date(2024, 1, 5))],
            keys=["name", "count", "created"],
        )
        rows = await self._adapter(engine).query("SELECT 1", {"schema": "app"})
        assert rows == [{"name": "users", "count": 3, "created": "2024-01-05"}]
        assert conn.execute.call_args.args[1] == {"schema": "app"}

    async def test_execute_uses_transaction(self) -> None:
        engine, conn = _mock_engine()
        await self._adapter(engine).execute("CREATE TABLE `app`.`t` (`id` INT);")
        engine.begin.assert_called_once()
        conn.execute.assert_awaited_once()

    async def test_execute_keeps_colons_in_literals(self) -> None:
        """Colons inside DDL literals are not treated as bind parameters."""
        engine, conn = _mock_engine()
        sql = "CREATE TABLE `app`.`t` (`t` TIME DEFAULT '10:30:00', `s` TEXT DEFAULT 'a :b');"
        await self._adapter(engine).execute(sql)
        clause = conn.execute.call_args.args[0]
        assert clause._bindparams == {}

    async def test_ping(self) -> None:
        engine, _ = _mock_engine()
        assert await self._adapter(engine).ping() is True

    async def test_close_disposes_engine(self) -> None:
        engine, _ = _mock_engine()
        await self._adapter(engine).close()
        engine.dispose.assert_awaited_once()


class TestSerializeValue:
    """Verify driver value conversion."""

    def _adapter(self) -> AsyncMySQLAdapter:
        with patch("sqlow.adapters.mysql.create_async_engine_pooled"):
            return AsyncMySQLAdapter("mysql://u@h/app")

    def test_bytes_decoded(self) -> None:
        assert self._adapter()._serialize_value(b"varchar(10)") == "varchar(10)"

    def test_datetime_isoformat(self) -> None:
        assert self._adapter()._serialize_value(datetime(2024, 1, 5, 9, 0)) == "2024-01-05T09:00:00"

    def test_decimal(self) -> None:
        adapter = self._adapter()
        assert adapter._serialize_value(Decimal("2")) == 2
        assert adapter._serialize_value(Decimal("2.5")) == 2.5

    def test_passthrough(self) -> None:
        assert self._adapter()._serialize_value("x") == "x"
        assert self._adapter()._serialize_value(None) is None
