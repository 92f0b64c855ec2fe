"""The object a quest's adventure works with."""

import asyncio
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from sqlquest.config.models import RetrySettings
from sqlquest.db.base import QueryResult, QuestConnection
from sqlquest.engine.combinators import ErrorPatterns, ErrorPredicate, Procedure, RetryPolicy, retry, transaction
from sqlquest.engine.executor import RequestLike, StatementExecutor
from sqlquest.reporting import QuestReporter

_UNSET: Any = object()


class Quest:
    """Procedure-facing API of a running quest.

    Every coroutine method is a suspension point of the quest's single
    logical thread::

        async def adventure(quest):
            await quest.transaction(lambda: quest.sql({"file": "load.sql"}))
            result = await quest.retry(
                lambda: quest.sql("SELECT count(*) AS n FROM events"),
                times=3, wait=500, ok_errors=[r"deadlock"],
            )
            quest.print_table(result)
    """

    def __init__(
        self,
        name: str,
        directory: Path,
        executor: StatementExecutor,
        retry_settings: Optional[RetrySettings] = None,
    ) -> None:
        self.name = name
        self.directory = directory
        self.executor = executor
        self.retry_settings = retry_settings or RetrySettings()

    @property
    def sql_dir(self) -> Path:
        return self.executor.sql_dir

    @property
    def connection(self) -> QuestConnection:
        return self.executor.connection

    @property
    def reporter(self) -> QuestReporter:
        return self.executor.reporter

    @property
    def view(self) -> Mapping[str, Any]:
        return self.executor.default_view or {}

    async def sql(self, request: RequestLike, view: Optional[Mapping[str, Any]] = None) -> QueryResult:
        """Execute a SQL request and return the result of its last statement."""
        return await self.executor.sql(request, view)

    async def retry(
        self,
        procedure: Procedure,
        times: Optional[int] = _UNSET,
        wait: Optional[int] = None,
        ok_errors: Optional[Union[ErrorPredicate, ErrorPatterns]] = None,
    ) -> Any:
        """Retry ``procedure``; unset arguments fall back to configured defaults.

        ``times=None`` retries without bound.
        """
        policy = RetryPolicy.build(
            times=self.retry_settings.times if times is _UNSET else times,
            wait=self.retry_settings.wait if wait is None else wait,
            ok_errors=ok_errors,
        )
        return await retry(policy, procedure, reporter=self.reporter)

    async def transaction(self, procedure: Procedure) -> Any:
        """Run ``procedure`` inside BEGIN/COMMIT, rolling back on failure."""
        return await transaction(self.executor, procedure)

    async def sleep(self, milliseconds: int) -> None:
        await asyncio.sleep(milliseconds / 1000)

    def print_table(self, result: QueryResult) -> None:
        self.reporter.table(result)
