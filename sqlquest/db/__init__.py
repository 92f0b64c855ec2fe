"""Database connectivity and statement execution."""

from sqlquest.db.base import BaseAdapter, QueryResult, QuestConnection
from sqlquest.db.connection import AdapterFactory
from sqlquest.db.adapters import (
    PostgreSQLAdapter,
    MySQLAdapter,
    SQLiteAdapter,
)

__all__ = [
    # Base classes
    "BaseAdapter",
    "QueryResult",
    "QuestConnection",
    # Adapter creation
    "AdapterFactory",
    # Database adapters
    "PostgreSQLAdapter",
    "MySQLAdapter",
    "SQLiteAdapter",
]
