"""Synchronous execution adapter.

Quest procedures are coroutines: every ``await`` on a database call is the
one place the procedure suspends, and it resumes at that call site with the
statement's result or its error. :class:`SyncExecutionAdapter` hides the
event loop from callers. ``run`` blocks until the single procedure task has
finished, closes the connection exactly once and hands back the result or
raises the error.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from sqlquest.db.base import QuestConnection
from sqlquest.exceptions import QuestConnectionError
from sqlquest.reporting import LoggingReporter, QuestReporter

logger = logging.getLogger(__name__)

T = TypeVar("T")

Connector = Callable[[], Awaitable[QuestConnection]]
ConnectionProcedure = Callable[[QuestConnection], Awaitable[T]]


class SyncExecutionAdapter:
    """Drives one procedure to completion on one connection and one task."""

    def __init__(self, connect: Connector, reporter: Optional[QuestReporter] = None) -> None:
        """Initialize the adapter.

        Args:
            connect: Coroutine function opening the quest connection. It is
                awaited inside the adapter's event loop, the loop the
                connection then belongs to.
            reporter: Receives connection and procedure failures.
        """
        self.connect = connect
        self.reporter = reporter or LoggingReporter()

    def run(self, procedure: ConnectionProcedure) -> T:
        """Block until ``procedure`` finishes and return its result.

        Raises:
            QuestConnectionError: If the connection cannot be established;
                the procedure is never invoked.
            Exception: Whatever the procedure raised, after the connection
                has been closed.
        """
        return asyncio.run(self.run_async(procedure))

    async def run_async(self, procedure: ConnectionProcedure) -> T:
        """Coroutine body of :meth:`run` for callers already inside a loop."""
        try:
            connection = await self.connect()
        except QuestConnectionError as e:
            self.reporter.error(e, context="Connection failed")
            raise

        try:
            result = await procedure(connection)
        except Exception as e:
            self.reporter.error(e, context="Quest failed")
            raise
        finally:
            await self._close(connection)

        logger.info("Quest completed successfully")
        return result

    async def _close(self, connection: QuestConnection) -> None:
        try:
            await connection.close()
        except Exception as e:
            logger.error(f"Failed to close connection: {e}")
