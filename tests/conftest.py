"""Shared fixtures for schema tests."""

import pytest

from sqlow.schema.context import SchemaContext, initialize_context
from tests.fakes import FakeMySQL


@pytest.fixture
def fake_client() -> FakeMySQL:
    return FakeMySQL()


@pytest.fixture
def context(fake_client: FakeMySQL) -> SchemaContext:
    return initialize_context(fake_client, "app")


@pytest.fixture
def offline_context() -> SchemaContext:
    return SchemaContext.offline("app")
