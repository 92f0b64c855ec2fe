"""Base database adapter and the quest connection."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd
from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from sqlquest.config.models import DatabaseConfig
from sqlquest.exceptions import DatabaseError, QuestConnectionError, StatementError

logger = logging.getLogger(__name__)

Params = Optional[Union[Sequence[Any], Mapping[str, Any]]]


class QueryResult:
    """Rows and field metadata of an executed statement."""

    def __init__(
        self,
        fields: Optional[List[str]] = None,
        rows: Optional[List[Dict[str, Any]]] = None,
        rows_affected: Optional[int] = None,
        execution_time: Optional[float] = None,
    ) -> None:
        """Initialize query result.

        Args:
            fields: Ordered column names.
            rows: Ordered rows keyed by column name.
            rows_affected: Number of rows affected by the statement.
            execution_time: Statement execution time in milliseconds.
        """
        self.fields = fields or []
        self.rows = rows or []
        self.rows_affected = rows_affected or 0
        self.execution_time = execution_time or 0.0

    @property
    def is_empty(self) -> bool:
        """Check if result is empty."""
        return not self.rows

    @property
    def row_count(self) -> int:
        """Get number of rows in result."""
        return len(self.rows)

    def to_dataframe(self) -> pd.DataFrame:
        """Return the rows as a DataFrame with columns in field order."""
        return pd.DataFrame(self.rows, columns=self.fields)

    def __repr__(self) -> str:
        return f"QueryResult(fields={self.fields!r}, row_count={self.row_count}, rows_affected={self.rows_affected})"


class QuestConnection:
    """The single connection a quest run executes on.

    Runs in AUTOCOMMIT mode; transaction boundaries are plain statements.
    """

    def __init__(self, adapter: "BaseAdapter", connection: AsyncConnection) -> None:
        self.adapter = adapter
        self._connection = connection
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dialect(self) -> str:
        return self._connection.dialect.name

    async def execute(self, statement: str, params: Params = None) -> QueryResult:
        """Execute one statement.

        Args:
            statement: SQL statement text.
            params: Ordered bind values using the driver's positional
                placeholders, or a mapping for ``:name`` placeholders.

        Returns:
            QueryResult instance.

        Raises:
            StatementError: If the statement fails.
        """
        if self._closed:
            raise DatabaseError("Connection is already closed")

        start_time = time.perf_counter()
        try:
            if isinstance(params, Mapping):
                result = await self._connection.execute(text(statement), dict(params))
            elif params:
                result = await self._connection.exec_driver_sql(statement, tuple(params))
            else:
                result = await self._connection.exec_driver_sql(statement)

            execution_time = (time.perf_counter() - start_time) * 1000

            if result.returns_rows:
                fields = list(result.keys())
                rows = [dict(row) for row in result.mappings().all()]
                return QueryResult(
                    fields=fields,
                    rows=rows,
                    rows_affected=len(rows),
                    execution_time=execution_time,
                )

            rows_affected = result.rowcount if result.rowcount >= 0 else 0
            return QueryResult(rows_affected=rows_affected, execution_time=execution_time)

        except SQLAlchemyError as e:
            message = str(getattr(e, 'orig', None) or e)
            raise StatementError(message, statement=statement, params=params) from e

    async def close(self) -> None:
        """Close the connection and dispose its engine. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._connection.close()
        finally:
            await self.adapter.dispose()
        logger.debug(f"Closed {self.adapter.get_driver_name()} connection")


class BaseAdapter(ABC):
    """Base class for database adapters."""

    async_driver: str = ""

    def __init__(self, config: DatabaseConfig) -> None:
        """Initialize database adapter.

        Args:
            config: Database configuration.
        """
        self.config = config
        self._engine: Optional[AsyncEngine] = None

    @abstractmethod
    def build_connection_string(self) -> str:
        """Build database connection string from discrete fields."""
        pass

    def get_driver_name(self) -> str:
        """Get the driver name for this adapter."""
        return self.async_driver

    def get_connection_url(self) -> Union[str, URL]:
        """Return the async connection URL.

        A configured ``url`` wins over discrete fields; a URL without an
        explicit driver is switched to this adapter's async driver.
        """
        if self.config.url:
            url = make_url(self.config.url)
            if "+" not in url.drivername:
                url = url.set(drivername=f"{url.get_backend_name()}+{self.async_driver}")
            return url
        return self.build_connection_string()

    def get_engine(self) -> AsyncEngine:
        """Get or create the async engine.

        Raises:
            DatabaseError: If engine creation fails.
        """
        if self._engine is None:
            try:
                engine_args = {
                    'poolclass': NullPool,
                    'isolation_level': 'AUTOCOMMIT',
                    'echo': False,
                }
                engine_args.update(self._get_engine_options())
                self._engine = create_async_engine(self.get_connection_url(), **engine_args)
            except Exception as e:
                raise DatabaseError(
                    f"Failed to create database engine: {e}",
                    database_type=self.config.type.value if self.config.type else None,
                ) from e

        return self._engine

    def _get_engine_options(self) -> Dict[str, Any]:
        """Get database-specific engine options."""
        return {}

    async def connect(self) -> QuestConnection:
        """Open the quest connection.

        Raises:
            QuestConnectionError: If the connection cannot be established.
        """
        try:
            engine = self.get_engine()
            connection = await engine.connect()
        except (SQLAlchemyError, DatabaseError, OSError) as e:
            await self.dispose()
            raise QuestConnectionError(
                f"Failed to connect to {self.config.type.value} database: {e}",
                database_type=self.config.type.value,
            ) from e

        logger.info(f"Connected to {self.config.type.value} database via {self.get_driver_name()}")
        return QuestConnection(self, connection)

    async def test_connection(self) -> bool:
        """Open a connection, probe it with ``SELECT 1`` and close it.

        Raises:
            QuestConnectionError: If the connection cannot be established.
            StatementError: If the probe query fails.
        """
        connection = await self.connect()
        try:
            result = await connection.execute("SELECT 1 AS test")
            return result.rows == [{'test': 1}]
        finally:
            await connection.close()

    async def dispose(self) -> None:
        """Dispose the engine and release driver resources."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
