"""SQLite database adapter."""

from pathlib import Path
from typing import Any, Dict

from sqlquest.config.models import DatabaseConfig
from sqlquest.db.base import BaseAdapter
from sqlquest.exceptions import DatabaseError


class SQLiteAdapter(BaseAdapter):
    """SQLite database adapter on aiosqlite."""

    async_driver = "aiosqlite"

    def __init__(self, config: DatabaseConfig) -> None:
        """Initialize SQLite adapter."""
        super().__init__(config)

        if not (self.config.path or self.config.url):
            raise DatabaseError("SQLite requires a database file path")

    def build_connection_string(self) -> str:
        """Build SQLite connection string.

        ``:memory:`` is passed through; relative paths are resolved against
        the working directory and their parent directory is created.
        """
        if self.config.path == ":memory:":
            return f"sqlite+{self.async_driver}://"

        db_path = Path(self.config.path)
        if not db_path.is_absolute():
            db_path = Path.cwd() / db_path

        db_path.parent.mkdir(parents=True, exist_ok=True)

        return f"sqlite+{self.async_driver}:///{db_path}"

    def _get_engine_options(self) -> Dict[str, Any]:
        """Get SQLite-specific engine options."""
        return {
            'connect_args': {
                'timeout': self.config.options.get('timeout', 30),
            }
        }
