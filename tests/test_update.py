"""Tests for the UpdateSpec rename/alter workflow."""

import pytest

from sqlow.errors import (
    DefaultTypeMismatch,
    MultipleAutoIncrement,
    SchemaUninitialized,
    TableNotFound,
    UnsupportedAlteration,
)
from sqlow.schema.column import Column
from sqlow.schema.context import SchemaContext, initialize_context
from sqlow.schema.table import AlterPlan, Table, TableSpec
from sqlow.schema.types import BOOLEAN, INTEGER, VARCHAR
from tests.fakes import FakeMySQL, live_column


def _users() -> TableSpec:
    return Table(
        "users",
        [
            Column("id", INTEGER).set_auto_increment().set_primary_key(),
            Column("name", VARCHAR).set_parameter(100).set_not_null(),
            Column("active", BOOLEAN).set_default(True),
        ],
    )


def _live_users(**overrides: dict) -> list[dict]:
    columns = {
        "id": live_column("id", "int", nullable=False, extra="auto_increment"),
        "name": live_column("name", "varchar(100)", nullable=False),
        "active": live_column("active", "tinyint(1)"),
    }
    columns.update(overrides)
    return [col for col in columns.values() if col is not None]


def _context(tables: dict) -> SchemaContext:
    return initialize_context(FakeMySQL(tables), "app")


class TestUpdateBuild:
    """Verify AlterPlan construction against live tables."""

    async def test_up_to_date(self) -> None:
        context = _context({("app", "users"): _live_users()})
        plan = await _users().to_update("users").build(context)
        assert isinstance(plan, AlterPlan)
        assert not plan.has_changes
        assert not plan.is_rename
        assert plan.statements == []

    async def test_rename_and_add_column(self) -> None:
        context = _context({("app", "accounts"): _live_users(active=None)})
        plan = await _users().to_update("accounts").build(context)
        assert plan.is_rename
        assert plan.statements == [
            "RENAME TABLE `app`.`accounts` TO `app`.`users`;",
            "ALTER TABLE `app`.`users` ADD COLUMN `active` BOOLEAN DEFAULT true;",
        ]

    async def test_rename_only(self) -> None:
        context = _context({("app", "accounts"): _live_users()})
        plan = await _users().to_update("accounts").build(context)
        assert plan.statements == ["RENAME TABLE `app`.`accounts` TO `app`.`users`;"]

    async def test_modify_column(self) -> None:
        context = _context(
            {("app", "users"): _live_users(name=live_column("name", "varchar(50)", nullable=False))}
        )
        plan = await _users().to_update("users").build(context)
        assert plan.statements == [
            "ALTER TABLE `app`.`users` MODIFY COLUMN `name` VARCHAR(100) NOT NULL;"
        ]
        assert plan.diff.modified[0].column == "name"

    async def test_removed_column_kept_without_allow_drop(self) -> None:
        context = _context(
            {("app", "users"): _live_users(legacy=live_column("legacy", "text"))}
        )
        plan = await _users().to_update("users").build(context)
        assert plan.statements == []
        assert plan.kept_columns == ["legacy"]
        assert [d.column for d in plan.diff.removed] == ["legacy"]

    async def test_removed_column_dropped_with_allow_drop(self) -> None:
        context = _context(
            {("app", "users"): _live_users(legacy=live_column("legacy", "text"))}
        )
        plan = await _users().to_update("users").build(context, allow_drop=True)
        assert plan.statements == ["ALTER TABLE `app`.`users` DROP COLUMN `legacy`;"]
        assert plan.kept_columns == []

    async def test_single_alter_in_add_modify_drop_order(self) -> None:
        live = _live_users(
            active=None,
            name=live_column("name", "varchar(100)", nullable=True),
            legacy=live_column("legacy", "text"),
        )
        context = _context({("app", "users"): live})
        plan = await _users().to_update("users").build(context, allow_drop=True)
        assert plan.statements == [
            "ALTER TABLE `app`.`users` ADD COLUMN `active` BOOLEAN DEFAULT true, "
            "MODIFY COLUMN `name` VARCHAR(100) NOT NULL, DROP COLUMN `legacy`;"
        ]

    async def test_build_does_not_execute(self) -> None:
        client = FakeMySQL({("app", "accounts"): _live_users(active=None)})
        await _users().to_update("accounts").build(initialize_context(client, "app"))
        client.execute.assert_not_called()


class TestAddedColumnKeys:
    """Added columns bring their keys along in the same ALTER."""

    async def test_added_unique_column(self) -> None:
        table = Table("users", list(_users().columns) + [Column("email", VARCHAR).set_unique_index()])
        context = _context({("app", "users"): _live_users()})
        plan = await table.to_update("users").build(context)
        assert plan.statements == [
            "ALTER TABLE `app`.`users` ADD COLUMN `email` VARCHAR(255), "
            "ADD UNIQUE INDEX `email_UNIQUE` (`email` ASC);"
        ]

    async def test_added_auto_increment_primary_key(self) -> None:
        table = Table(
            "events",
            [
                Column("id", INTEGER).set_auto_increment().set_primary_key(),
                Column("name", VARCHAR).set_parameter(100).set_not_null(),
            ],
        )
        context = _context(
            {("app", "events"): [live_column("name", "varchar(100)", nullable=False)]}
        )
        plan = await table.to_update("events").build(context)
        assert plan.statements == [
            "ALTER TABLE `app`.`events` ADD COLUMN `id` INTEGER AUTO_INCREMENT, "
            "ADD PRIMARY KEY (`id`);"
        ]

    async def test_added_primary_key_column_with_existing_key(self) -> None:
        table = Table("users", list(_users().columns) + [Column("tenant", INTEGER).set_primary_key()])
        live = _live_users(
            id=live_column("id", "int", nullable=False, extra="auto_increment", key="PRI")
        )
        with pytest.raises(UnsupportedAlteration) as exc_info:
            await table.to_update("users").build(_context({("app", "users"): live}))
        assert exc_info.value.details["columns"] == "tenant"

    async def test_added_auto_increment_without_key(self) -> None:
        table = Table(
            "events",
            [
                Column("name", VARCHAR).set_parameter(100).set_not_null(),
                Column("seq", INTEGER).set_auto_increment(),
            ],
        )
        context = _context(
            {("app", "events"): [live_column("name", "varchar(100)", nullable=False)]}
        )
        with pytest.raises(UnsupportedAlteration, match="seq"):
            await table.to_update("events").build(context)


class TestUpdateValidation:
    """The whole table is checked before any statement is planned."""

    async def test_multiple_auto_increment_on_rename(self) -> None:
        live = [
            live_column("a", "int", nullable=False, extra="auto_increment", key="PRI"),
            live_column("b", "int"),
        ]
        client = FakeMySQL({("app", "old"): live})
        table = Table(
            "t",
            [
                Column("a", INTEGER).set_auto_increment().set_primary_key(),
                Column("b", INTEGER).set_auto_increment(),
            ],
        )
        with pytest.raises(MultipleAutoIncrement):
            await table.to_update("old").build(initialize_context(client, "app"))
        client.execute.assert_not_called()

    async def test_unchanged_column_with_bad_default(self) -> None:
        table = Table(
            "users",
            [
                Column("id", INTEGER).set_auto_increment().set_primary_key(),
                Column("name", VARCHAR).set_parameter(100).set_not_null(),
                Column("active", BOOLEAN).set_default(1),
            ],
        )
        context = _context({("app", "users"): _live_users()})
        with pytest.raises(DefaultTypeMismatch):
            await table.to_update("users").build(context)


class TestUpdateErrors:
    """Verify UpdateSpec failure modes."""

    async def test_missing_previous_table(self) -> None:
        context = _context({})
        with pytest.raises(TableNotFound) as exc_info:
            await _users().to_update("accounts").build(context)
        assert exc_info.value.details["table"] == "accounts"

    async def test_offline_context_rejected(self) -> None:
        with pytest.raises(SchemaUninitialized):
            await _users().to_update("users").build(SchemaContext.offline("app"))

    async def test_missing_context_rejected(self) -> None:
        with pytest.raises(SchemaUninitialized):
            await _users().to_update("users").build(None)
