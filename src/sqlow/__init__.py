"""sqlow: declarative MySQL table definitions, DDL rendering, and reconciliation.

Describe tables with typed columns, render CREATE TABLE DDL, and reconcile the
description against a live MySQL/MariaDB schema (create, leave, or alter).

Usage:
    from sqlow import Column, Table, SchemaReconciler, connect
    from sqlow import INTEGER, VARCHAR, BOOLEAN
    from sqlow import SchemaContext, load_table_specs
"""

__version__ = "0.1.0"

# Adapters
from sqlow.adapters.base import DatabaseClient
from sqlow.adapters.mysql import AsyncMySQLAdapter

# Config
from sqlow.config.loader import load_db_config
from sqlow.config.models import DatabaseConfig, DatabaseProfile

# Errors
from sqlow.errors import (
    DefaultTypeMismatch,
    InvalidParameter,
    MultipleAutoIncrement,
    PropertyRequired,
    QueryFailure,
    SchemaUninitialized,
    SqlowError,
    TableNotFound,
    UnsupportedAlteration,
    UnsupportedDialect,
    UnsupportedModifier,
)

# Factory
from sqlow.factory import ProfileNotFoundError, connect, get_adapter, resolve_url

# Schema
from sqlow.schema.column import Column, ColumnSpec
from sqlow.schema.context import SchemaContext, initialize_context
from sqlow.schema.definitions import load_table_specs
from sqlow.schema.models import ReconcileOutcome, ReconcileResult
from sqlow.schema.reconciler import SchemaReconciler
from sqlow.schema.table import Table, TableSpec, UpdateSpec
from sqlow.schema.types import (
    BIGINT,
    BIT,
    BOOL,
    BOOLEAN,
    DATE,
    DATETIME,
    DOUBLE,
    ENUM,
    FLOAT,
    INT,
    INTEGER,
    LONGTEXT,
    MEDIUMINT,
    MEDIUMTEXT,
    SET,
    SMALLINT,
    TEXT,
    TIME,
    TIMESTAMP,
    TINYINT,
    VARCHAR,
    DataType,
)

__all__ = [
    # Adapters
    "DatabaseClient",
    "AsyncMySQLAdapter",
    # Config
    "load_db_config",
    "DatabaseProfile",
    "DatabaseConfig",
    # Errors
    "SqlowError",
    "UnsupportedDialect",
    "SchemaUninitialized",
    "PropertyRequired",
    "DefaultTypeMismatch",
    "MultipleAutoIncrement",
    "TableNotFound",
    "QueryFailure",
    "UnsupportedModifier",
    "InvalidParameter",
    "UnsupportedAlteration",
    # Factory
    "connect",
    "get_adapter",
    "ProfileNotFoundError",
    "resolve_url",
    # Schema
    "Column",
    "ColumnSpec",
    "Table",
    "TableSpec",
    "UpdateSpec",
    "SchemaContext",
    "initialize_context",
    "SchemaReconciler",
    "ReconcileOutcome",
    "ReconcileResult",
    "load_table_specs",
    # Types
    "DataType",
    "TINYINT",
    "SMALLINT",
    "MEDIUMINT",
    "INT",
    "INTEGER",
    "BIGINT",
    "FLOAT",
    "DOUBLE",
    "BOOLEAN",
    "BOOL",
    "BIT",
    "DATE",
    "DATETIME",
    "TIMESTAMP",
    "TIME",
    "VARCHAR",
    "TEXT",
    "MEDIUMTEXT",
    "LONGTEXT",
    "ENUM",
    "SET",
]
