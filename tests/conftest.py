"""Shared fixtures: an in-memory fake connection and a recording reporter."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

from sqlquest.config.models import DatabaseConfig, DatabaseType
from sqlquest.db.base import QueryResult
from sqlquest.reporting import QuestReporter


class FakeConnection:
    """Records statements; raises the configured error for matching statements."""

    def __init__(self) -> None:
        self.statements: List[Tuple[str, Any]] = []
        self.failures: Dict[str, List[Exception]] = {}
        self.close_count = 0

    def fail(self, statement: str, *errors: Exception) -> None:
        self.failures.setdefault(statement, []).extend(errors)

    @property
    def executed(self) -> List[str]:
        return [statement for statement, _ in self.statements]

    @property
    def closed(self) -> bool:
        return self.close_count > 0

    async def execute(self, statement: str, params: Any = None) -> QueryResult:
        self.statements.append((statement, params))
        pending = self.failures.get(statement)
        if pending:
            raise pending.pop(0)
        return QueryResult(fields=["statement"], rows=[{"statement": statement}])

    async def close(self) -> None:
        self.close_count += 1


class RecordingReporter(QuestReporter):
    """Keeps every reporter event for assertions."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Any]] = []

    def names(self, kind: str) -> List[Any]:
        return [payload for event, payload in self.events if event == kind]

    def statement(self, sql: str) -> None:
        self.events.append(("statement", sql))

    def timing(self, sql: str, elapsed_ms: float) -> None:
        self.events.append(("timing", elapsed_ms))

    def completed(self, sql: str, result: QueryResult) -> None:
        self.events.append(("completed", sql))

    def retrying(self, error: BaseException, attempt: int, wait_ms: int) -> None:
        self.events.append(("retrying", attempt))

    def error(self, error: BaseException, context: Optional[str] = None) -> None:
        self.events.append(("error", error))

    def table(self, result: QueryResult) -> None:
        self.events.append(("table", result))


@pytest.fixture
def fake_connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def sqlite_config(tmp_path: Path) -> DatabaseConfig:
    return DatabaseConfig(type=DatabaseType.SQLITE, path=str(tmp_path / "quest.db"))
