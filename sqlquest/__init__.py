"""SQL Quest: run ordered batches of templated SQL against a database.

SQL Quest provides:
- Jinja2 templated SQL with per-quest views
- Statement splitting, naive or through a dialect-aware service
- Per-statement logging and timing
- Retry and transaction combinators for quest procedures
- A click CLI that runs a quest directory end to end
"""

__version__ = "0.1.0"
__author__ = "SQL Quest contributors"
__license__ = "MIT"

# Core exports
from sqlquest.exceptions import (
    SQLQuestError,
    ConfigurationError,
    DatabaseError,
    QuestConnectionError,
    StatementError,
    SplitterError,
)

__all__ = [
    "__version__",
    "SQLQuestError",
    "ConfigurationError",
    "DatabaseError",
    "QuestConnectionError",
    "StatementError",
    "SplitterError",
]
