"""Schema definition, DDL rendering, introspection, and reconciliation.

Provides the type catalog (``INTEGER``, ``VARCHAR``, ...), column and table
specifications (``Column``, ``Table``), the explicit ``SchemaContext``, live
introspection (``SchemaIntrospector``), structural diffs (``compare_table``),
and the ``SchemaReconciler`` that creates or alters tables.

Usage:
    from sqlow.schema import Column, Table, SchemaReconciler, initialize_context
    from sqlow.schema import INTEGER, VARCHAR
"""

from sqlow.schema.column import Column, ColumnSpec
from sqlow.schema.comparator import compare_table, normalize_column_type
from sqlow.schema.context import (
    SUPPORTED_DIALECTS,
    SchemaContext,
    initialize_context,
    require_context,
)
from sqlow.schema.definitions import DefinitionSet, load_table_specs, parse_table_specs
from sqlow.schema.introspector import SchemaIntrospector
from sqlow.schema.models import (
    ColumnDiff,
    ColumnSchema,
    ReconcileOutcome,
    ReconcileResult,
    TableDiff,
    TableSchema,
)
from sqlow.schema.reconciler import SchemaReconciler
from sqlow.schema.table import AlterPlan, Table, TableSpec, UpdateSpec
from sqlow.schema.types import (
    BIGINT,
    BIT,
    BOOL,
    BOOLEAN,
    CATALOG,
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
    StorageCategory,
    lookup_type,
)

__all__ = [
    # Types
    "DataType",
    "StorageCategory",
    "CATALOG",
    "lookup_type",
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
    # Specifications
    "Column",
    "ColumnSpec",
    "Table",
    "TableSpec",
    "UpdateSpec",
    "AlterPlan",
    # Context
    "SchemaContext",
    "SUPPORTED_DIALECTS",
    "initialize_context",
    "require_context",
    # Introspection and diff
    "SchemaIntrospector",
    "compare_table",
    "normalize_column_type",
    "ColumnSchema",
    "TableSchema",
    "ColumnDiff",
    "TableDiff",
    # Reconciliation
    "SchemaReconciler",
    "ReconcileOutcome",
    "ReconcileResult",
    # Definitions file
    "DefinitionSet",
    "load_table_specs",
    "parse_table_specs",
]
