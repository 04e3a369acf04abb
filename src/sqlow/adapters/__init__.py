"""Database adapters package.

Provides the ``DatabaseClient`` Protocol and the async MySQL adapter.

Usage:
    from sqlow.adapters import DatabaseClient, AsyncMySQLAdapter
"""

from sqlow.adapters.base import DatabaseClient
from sqlow.adapters.mysql import AsyncMySQLAdapter

__all__ = [
    "DatabaseClient",
    "AsyncMySQLAdapter",
]
