"""Reporting interface the quest engine calls into.

The engine never prints. Statement progress, timing, retries and failures
are handed to a :class:`QuestReporter`; the CLI plugs in a rich console
implementation, everything else gets :class:`LoggingReporter`.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlquest.db.base import QueryResult

logger = logging.getLogger(__name__)


class QuestReporter(ABC):
    """Receives statement lifecycle and failure events from a quest run."""

    @abstractmethod
    def statement(self, sql: str) -> None:
        """A statement is about to execute."""

    @abstractmethod
    def timing(self, sql: str, elapsed_ms: float) -> None:
        """A statement finished after ``elapsed_ms`` milliseconds."""

    @abstractmethod
    def completed(self, sql: str, result: QueryResult) -> None:
        """A statement completed successfully."""

    @abstractmethod
    def retrying(self, error: BaseException, attempt: int, wait_ms: int) -> None:
        """Attempt ``attempt`` failed with a retryable error."""

    @abstractmethod
    def error(self, error: BaseException, context: Optional[str] = None) -> None:
        """A failure worth surfacing to the operator."""

    @abstractmethod
    def table(self, result: QueryResult) -> None:
        """Render a result as a table."""


def _abbreviate(sql: str, limit: int = 200) -> str:
    flat = " ".join(sql.split())
    return flat if len(flat) <= limit else flat[:limit - 3] + "..."


class LoggingReporter(QuestReporter):
    """Reporter writing to the standard logging hierarchy."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.log = log or logger

    def statement(self, sql: str) -> None:
        self.log.info(f"Executing: {_abbreviate(sql)}")

    def timing(self, sql: str, elapsed_ms: float) -> None:
        self.log.info(f"Statement took {elapsed_ms:.2f}ms")

    def completed(self, sql: str, result: QueryResult) -> None:
        if result.fields:
            self.log.info(f"Done, {result.row_count} row(s) returned")
        else:
            self.log.info(f"Done, {result.rows_affected} row(s) affected")

    def retrying(self, error: BaseException, attempt: int, wait_ms: int) -> None:
        self.log.warning(f"Attempt {attempt} failed: {error}. Retrying in {wait_ms}ms")

    def error(self, error: BaseException, context: Optional[str] = None) -> None:
        prefix = f"{context}: " if context else ""
        self.log.error(f"{prefix}{type(error).__name__}: {error}")

    def table(self, result: QueryResult) -> None:
        if not result.fields:
            self.log.info(f"{result.rows_affected} row(s) affected")
            return
        self.log.info("\n" + result.to_dataframe().to_string(index=False))
