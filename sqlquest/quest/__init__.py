"""Quests: adventures, the quest context and the runner."""

from sqlquest.quest.adventure import Adventure, DefaultAdventure, FunctionAdventure
from sqlquest.quest.context import Quest
from sqlquest.quest.loader import load_adventure
from sqlquest.quest.runner import QuestRunner

__all__ = [
    "Adventure",
    "DefaultAdventure",
    "FunctionAdventure",
    "Quest",
    "QuestRunner",
    "load_adventure",
]
