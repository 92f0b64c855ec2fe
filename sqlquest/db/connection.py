"""Database adapter factory."""

from typing import Dict, Type

from sqlquest.config.models import DatabaseConfig, DatabaseType
from sqlquest.db.adapters.mysql import MySQLAdapter
from sqlquest.db.adapters.postgresql import PostgreSQLAdapter
from sqlquest.db.adapters.sqlite import SQLiteAdapter
from sqlquest.db.base import BaseAdapter
from sqlquest.exceptions import DatabaseError


class AdapterFactory:
    """Factory for creating database adapters."""

    _adapters: Dict[DatabaseType, Type[BaseAdapter]] = {
        DatabaseType.POSTGRESQL: PostgreSQLAdapter,
        DatabaseType.MYSQL: MySQLAdapter,
        DatabaseType.SQLITE: SQLiteAdapter,
    }

    @classmethod
    def create_adapter(cls, config: DatabaseConfig) -> BaseAdapter:
        """Create a database adapter based on configuration.

        Raises:
            DatabaseError: If database type is not supported.
        """
        adapter_class = cls._adapters.get(config.type)
        if not adapter_class:
            supported_types = [db_type.value for db_type in cls._adapters]
            raise DatabaseError(
                f"Unsupported database type: {config.type}. "
                f"Supported types: {supported_types}"
            )

        return adapter_class(config)

    @classmethod
    def register_adapter(cls, db_type: DatabaseType, adapter_class: Type[BaseAdapter]) -> None:
        """Register a custom database adapter."""
        cls._adapters[db_type] = adapter_class

    @classmethod
    def get_supported_types(cls) -> list[DatabaseType]:
        """Get list of supported database types."""
        return list(cls._adapters.keys())
