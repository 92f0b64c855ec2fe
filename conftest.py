from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def quest_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Provide an empty quest directory named ``inventory`` with a ``sql`` subdirectory."""
    root = tmp_path_factory.mktemp("quests") / "inventory"
    (root / "sql").mkdir(parents=True)
    return root
