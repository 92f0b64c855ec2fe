"""Tests for the quest connection against a real SQLite database."""

import pytest

from sqlquest.config.models import DatabaseConfig, DatabaseType
from sqlquest.db.adapters.sqlite import SQLiteAdapter
from sqlquest.db.connection import AdapterFactory
from sqlquest.exceptions import DatabaseError, StatementError


class TestSQLiteQuestConnection:
    """Test statement execution over aiosqlite."""

    @pytest.mark.asyncio
    async def test_rows_and_fields(self, sqlite_config) -> None:
        connection = await AdapterFactory.create_adapter(sqlite_config).connect()
        try:
            await connection.execute("CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT)")
            insert = await connection.execute("INSERT INTO items (name) VALUES ('apple'), ('pear')")
            result = await connection.execute("SELECT id, name FROM items ORDER BY id")
        finally:
            await connection.close()

        assert insert.rows_affected == 2
        assert insert.fields == []
        assert result.fields == ["id", "name"]
        assert result.rows == [{"id": 1, "name": "apple"}, {"id": 2, "name": "pear"}]
        assert result.to_dataframe()["name"].tolist() == ["apple", "pear"]

    @pytest.mark.asyncio
    async def test_positional_and_named_params(self, sqlite_config) -> None:
        connection = await AdapterFactory.create_adapter(sqlite_config).connect()
        try:
            await connection.execute("CREATE TABLE items (id INTEGER, name TEXT)")
            await connection.execute("INSERT INTO items VALUES (?, ?)", [1, "apple"])
            await connection.execute("INSERT INTO items VALUES (:id, :name)", {"id": 2, "name": "pear"})
            result = await connection.execute("SELECT name FROM items WHERE id = ?", (2,))
        finally:
            await connection.close()

        assert result.rows == [{"name": "pear"}]

    @pytest.mark.asyncio
    async def test_failing_statement_carries_driver_message(self, sqlite_config) -> None:
        connection = await AdapterFactory.create_adapter(sqlite_config).connect()
        try:
            with pytest.raises(StatementError, match="no such table: missing") as excinfo:
                await connection.execute("SELECT * FROM missing")
        finally:
            await connection.close()

        assert excinfo.value.statement == "SELECT * FROM missing"

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, sqlite_config) -> None:
        connection = await AdapterFactory.create_adapter(sqlite_config).connect()

        await connection.close()
        await connection.close()

        assert connection.closed
        with pytest.raises(DatabaseError, match="already closed"):
            await connection.execute("SELECT 1")

    @pytest.mark.asyncio
    async def test_explicit_transaction_rollback(self, sqlite_config) -> None:
        connection = await AdapterFactory.create_adapter(sqlite_config).connect()
        try:
            await connection.execute("CREATE TABLE items (id INTEGER)")
            await connection.execute("BEGIN")
            await connection.execute("INSERT INTO items VALUES (1)")
            await connection.execute("ROLLBACK")
            result = await connection.execute("SELECT count(*) AS n FROM items")
        finally:
            await connection.close()

        assert result.rows == [{"n": 0}]

    @pytest.mark.asyncio
    async def test_test_connection(self, sqlite_config) -> None:
        assert await SQLiteAdapter(sqlite_config).test_connection() is True


class TestSQLiteAdapter:
    """Test connection URL construction."""

    def test_memory_database(self) -> None:
        adapter = SQLiteAdapter(DatabaseConfig(type=DatabaseType.SQLITE, path=":memory:"))
        assert adapter.build_connection_string() == "sqlite+aiosqlite://"

    def test_file_database(self, tmp_path) -> None:
        path = tmp_path / "nested" / "quest.db"
        adapter = SQLiteAdapter(DatabaseConfig(type=DatabaseType.SQLITE, path=str(path)))

        assert adapter.build_connection_string() == f"sqlite+aiosqlite:///{path}"
        assert path.parent.is_dir()

    def test_plain_url_gets_async_driver(self) -> None:
        adapter = SQLiteAdapter(DatabaseConfig(url="sqlite:///quest.db"))
        assert str(adapter.get_connection_url()) == "sqlite+aiosqlite:///quest.db"
