"""Locate a quest's adventure module on disk."""

import importlib.util
import inspect
import logging
from pathlib import Path
from typing import Optional, Union

from sqlquest.exceptions import ConfigurationError
from sqlquest.quest.adventure import Adventure, FunctionAdventure

logger = logging.getLogger(__name__)

ADVENTURE_FILE = "adventure.py"
ADVENTURE_ATTRIBUTE = "adventure"


def load_adventure(quest_dir: Union[str, Path]) -> Optional[Adventure]:
    """Load ``<quest_dir>/adventure.py`` if it exists.

    The module must define ``adventure``: either an ``async def
    adventure(quest)`` function or an :class:`Adventure` instance.

    Returns:
        The quest's adventure, or None when the quest has no adventure module.

    Raises:
        ConfigurationError: If the module fails to import or defines no usable
            ``adventure``.
    """
    module_path = Path(quest_dir) / ADVENTURE_FILE
    if not module_path.is_file():
        return None

    module_name = f"sqlquest_adventure_{Path(quest_dir).resolve().name}"
    spec = importlib.util.spec_from_file_location(module_name, module_path)
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"Cannot load adventure module '{module_path}'")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigurationError(f"Failed to import adventure module '{module_path}': {e}") from e

    candidate = getattr(module, ADVENTURE_ATTRIBUTE, None)
    if isinstance(candidate, Adventure):
        return candidate
    if inspect.iscoroutinefunction(candidate):
        logger.debug(f"Loaded adventure function from {module_path}")
        return FunctionAdventure(candidate)

    raise ConfigurationError(
        f"'{module_path}' must define 'async def {ADVENTURE_ATTRIBUTE}(quest)' or an Adventure instance"
    )
