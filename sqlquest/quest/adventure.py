"""Adventures: the body of a quest."""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

from sqlquest.quest.context import Quest

AdventureFunction = Callable[[Quest], Awaitable[Any]]


class Adventure(ABC):
    """A quest body. Subclasses implement :meth:`run`."""

    @abstractmethod
    async def run(self, quest: Quest) -> Any:
        pass

    @property
    def description(self) -> str:
        return type(self).__name__


class FunctionAdventure(Adventure):
    """Adventure backed by a user-supplied ``async def adventure(quest)``."""

    def __init__(self, function: AdventureFunction) -> None:
        if not callable(function):
            raise TypeError(f"Adventure must be callable, got {type(function).__name__}")
        self.function = function

    async def run(self, quest: Quest) -> Any:
        return await self.function(quest)

    @property
    def description(self) -> str:
        return getattr(self.function, '__qualname__', repr(self.function))


class DefaultAdventure(Adventure):
    """Execute ``<sql_dir>/<quest name>.sql`` and print its result as a table."""

    async def run(self, quest: Quest) -> Any:
        result = await quest.sql({'file_path': f"{quest.name}.sql"})
        quest.print_table(result)
        return result

    @property
    def description(self) -> str:
        return "default adventure"
