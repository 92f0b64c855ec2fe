"""Statement execution loop."""

import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlquest.db.base import QueryResult, QuestConnection
from sqlquest.engine import template
from sqlquest.engine.request import SqlRequest
from sqlquest.engine.splitter import NaiveSplitter, StatementSplitter
from sqlquest.reporting import LoggingReporter, QuestReporter

logger = logging.getLogger(__name__)

RequestLike = Union[SqlRequest, str, Mapping[str, Any]]


class StatementExecutor:
    """Renders, splits and executes SQL requests one statement at a time."""

    def __init__(
        self,
        connection: QuestConnection,
        sql_dir: Union[str, Path] = ".",
        splitter: Optional[StatementSplitter] = None,
        reporter: Optional[QuestReporter] = None,
        timing: bool = True,
        default_view: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Initialize the executor.

        Args:
            connection: The quest connection; never opened or closed here.
            sql_dir: Directory relative SQL file paths resolve under.
            splitter: Statement splitter, naive when omitted.
            reporter: Receives statement events.
            timing: Time every statement and report it.
            default_view: Bindings every request renders with, lowest precedence.
        """
        self.connection = connection
        self.sql_dir = Path(sql_dir)
        self.splitter = splitter or NaiveSplitter()
        self.reporter = reporter or LoggingReporter()
        self.timing = timing
        self.default_view = dict(default_view) if default_view else None

    async def prepare(self, request: SqlRequest, view: Optional[Mapping[str, Any]] = None) -> List[str]:
        """Render and split a request into its statement batch."""
        effective_view = self._merge_views(self.default_view, request.view, view)

        sql = template.render(request.load_text(self.sql_dir), effective_view)

        if request.split:
            return await self.splitter.split(sql)
        statement = sql.strip()
        return [statement] if statement else []

    async def sql(self, request: RequestLike, view: Optional[Mapping[str, Any]] = None) -> QueryResult:
        """Execute every statement of a request in order.

        Args:
            request: Raw SQL text, a mapping of request fields or a SqlRequest.
            view: Template bindings; merged over the default and request views.

        Returns:
            Result of the last statement, or an empty result for an empty batch.

        Raises:
            StatementError: On the first failing statement; later statements
                of the batch are not executed.
        """
        request = SqlRequest.coerce(request)
        statements = await self.prepare(request, view)
        logger.debug(f"Prepared batch of {len(statements)} statement(s)")

        result = QueryResult()
        for statement in statements:
            result = await self.execute(statement, request.params)
        return result

    async def execute(self, statement: str, params: Any = None) -> QueryResult:
        """Execute a single statement with reporting and timing."""
        self.reporter.statement(statement)
        start_time = time.perf_counter() if self.timing else None

        result = await self.connection.execute(statement, params)

        if start_time is not None:
            self.reporter.timing(statement, (time.perf_counter() - start_time) * 1000)
        self.reporter.completed(statement, result)
        return result

    @staticmethod
    def _merge_views(*views: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        if all(view is None for view in views):
            return None
        merged: Dict[str, Any] = {}
        for view in views:
            merged.update(view or {})
        return merged
