"""Database adapters for different database types."""

from sqlquest.db.adapters.postgresql import PostgreSQLAdapter
from sqlquest.db.adapters.mysql import MySQLAdapter
from sqlquest.db.adapters.sqlite import SQLiteAdapter

__all__ = [
    "PostgreSQLAdapter",
    "MySQLAdapter",
    "SQLiteAdapter",
]
