"""PostgreSQL database adapter."""

from typing import Any, Dict
from urllib.parse import quote_plus

from sqlquest.config.models import DatabaseConfig
from sqlquest.db.base import BaseAdapter
from sqlquest.exceptions import DatabaseError


class PostgreSQLAdapter(BaseAdapter):
    """PostgreSQL database adapter on asyncpg."""

    async_driver = "asyncpg"

    def __init__(self, config: DatabaseConfig) -> None:
        """Initialize PostgreSQL adapter."""
        super().__init__(config)

        if self.config.port is None and not self.config.url:
            self.config.port = 5432

    def build_connection_string(self) -> str:
        """Build PostgreSQL connection string.

        Raises:
            DatabaseError: If required configuration is missing.
        """
        if not all([self.config.host, self.config.database, self.config.username]):
            raise DatabaseError("PostgreSQL requires host, database and username")

        credentials = self.config.username
        if self.config.password:
            credentials += f":{quote_plus(self.config.password)}"

        return (
            f"postgresql+{self.async_driver}://{credentials}@"
            f"{self.config.host}:{self.config.port}/{self.config.database}"
        )

    def _get_engine_options(self) -> Dict[str, Any]:
        """Get PostgreSQL-specific engine options."""
        return {
            'connect_args': {
                'timeout': self.config.options.get('connect_timeout', 10),
                'server_settings': {
                    'application_name': self.config.options.get('application_name', 'sqlquest'),
                },
            }
        }
