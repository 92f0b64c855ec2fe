"""Quest runner: one quest, one connection, one run."""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from sqlquest.config.models import (
    DatabaseConfig,
    ExecutionSettings,
    RetrySettings,
    SQLQuestConfig,
)
from sqlquest.db.base import QuestConnection
from sqlquest.db.connection import AdapterFactory
from sqlquest.engine.adapter import SyncExecutionAdapter
from sqlquest.engine.executor import StatementExecutor
from sqlquest.engine.splitter import StatementSplitter, create_splitter
from sqlquest.exceptions import ConfigurationError, DatabaseError, QuestConnectionError
from sqlquest.quest.adventure import Adventure, DefaultAdventure
from sqlquest.quest.context import Quest
from sqlquest.reporting import LoggingReporter, QuestReporter

logger = logging.getLogger(__name__)


class QuestRunner:
    """Connects, runs the quest's adventure and tears the connection down."""

    def __init__(
        self,
        database: DatabaseConfig,
        quest_dir: Union[str, Path],
        adventure: Optional[Adventure] = None,
        *,
        name: Optional[str] = None,
        execution: Optional[ExecutionSettings] = None,
        retry: Optional[RetrySettings] = None,
        splitter: Optional[StatementSplitter] = None,
        view: Optional[Mapping[str, Any]] = None,
        reporter: Optional[QuestReporter] = None,
    ) -> None:
        """Initialize the runner.

        Args:
            database: Connection parameters.
            quest_dir: Quest directory; SQL files live in its SQL subdirectory.
            adventure: Quest body; the default adventure when omitted.
            name: Quest name, the directory name by default.
            execution: SQL directory and timing settings.
            retry: Defaults for ``quest.retry``.
            splitter: Statement splitter, naive when omitted.
            view: Template bindings applied to every request.
            reporter: Receives statement events and failures.

        Raises:
            ConfigurationError: If the quest directory does not exist.
        """
        self.quest_dir = Path(quest_dir)
        if not self.quest_dir.is_dir():
            raise ConfigurationError(f"Quest directory '{self.quest_dir}' not found")

        self.database = database
        self.adventure = adventure if adventure is not None else DefaultAdventure()
        self.name = name or self.quest_dir.resolve().name
        self.execution = execution or ExecutionSettings()
        self.retry = retry or RetrySettings()
        self.splitter = splitter or create_splitter()
        self.view = dict(view) if view else None
        self.reporter = reporter or LoggingReporter()

    @classmethod
    def from_config(
        cls,
        config: SQLQuestConfig,
        quest_dir: Union[str, Path],
        adventure: Optional[Adventure] = None,
        db_name: Optional[str] = None,
        **kwargs: Any,
    ) -> "QuestRunner":
        """Build a runner from a loaded configuration.

        Raises:
            ConfigurationError: If the database name is unknown.
        """
        try:
            database = config.get_database(db_name)
        except KeyError as e:
            raise ConfigurationError(str(e.args[0])) from e

        kwargs.setdefault('splitter', create_splitter(config.splitter))
        kwargs['view'] = {**config.view, **(kwargs.get('view') or {})}
        return cls(
            database,
            quest_dir,
            adventure,
            execution=config.execution,
            retry=config.retry,
            **kwargs,
        )

    @property
    def sql_dir(self) -> Path:
        return self.quest_dir / self.execution.sql_dir

    def run(self) -> Any:
        """Run the quest to completion and return the adventure's result.

        Raises:
            QuestConnectionError: If connecting fails; nothing is executed.
            Exception: The adventure's error, after the connection is closed.
        """
        adapter = SyncExecutionAdapter(self._connect, self.reporter)
        return adapter.run(self._play)

    async def run_async(self) -> Any:
        """Run the quest inside an already running event loop."""
        adapter = SyncExecutionAdapter(self._connect, self.reporter)
        return await adapter.run_async(self._play)

    async def _connect(self) -> QuestConnection:
        try:
            db_adapter = AdapterFactory.create_adapter(self.database)
        except DatabaseError as e:
            raise QuestConnectionError(str(e), database_type=e.database_type) from e
        return await db_adapter.connect()

    async def _play(self, connection: QuestConnection) -> Any:
        executor = StatementExecutor(
            connection,
            sql_dir=self.sql_dir,
            splitter=self.splitter,
            reporter=self.reporter,
            timing=self.execution.timing,
            default_view=self.view,
        )
        quest = Quest(self.name, self.quest_dir, executor, self.retry)
        logger.info(f"Starting quest '{self.name}' with {self.adventure.description}")
        return await self.adventure.run(quest)
