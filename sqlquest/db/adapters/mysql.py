"""MySQL database adapter."""

from typing import Any, Dict
from urllib.parse import quote_plus

from sqlquest.config.models import DatabaseConfig
from sqlquest.db.base import BaseAdapter
from sqlquest.exceptions import DatabaseError


class MySQLAdapter(BaseAdapter):
    """MySQL database adapter on aiomysql."""

    async_driver = "aiomysql"

    def __init__(self, config: DatabaseConfig) -> None:
        """Initialize MySQL adapter."""
        super().__init__(config)

        if self.config.port is None and not self.config.url:
            self.config.port = 3306

    def build_connection_string(self) -> str:
        """Build MySQL connection string.

        Raises:
            DatabaseError: If required configuration is missing.
        """
        if not all([self.config.host, self.config.database, self.config.username]):
            raise DatabaseError("MySQL requires host, database and username")

        credentials = self.config.username
        if self.config.password:
            credentials += f":{quote_plus(self.config.password)}"

        connection_string = (
            f"mysql+{self.async_driver}://{credentials}@"
            f"{self.config.host}:{self.config.port}/{self.config.database}"
        )

        options = {'charset': self.config.options.get('charset', 'utf8mb4')}
        option_string = "&".join([f"{k}={v}" for k, v in options.items()])
        return f"{connection_string}?{option_string}"

    def _get_engine_options(self) -> Dict[str, Any]:
        """Get MySQL-specific engine options."""
        return {
            'connect_args': {
                'connect_timeout': self.config.options.get('connect_timeout', 10),
            }
        }
