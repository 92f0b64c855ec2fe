"""Core exceptions for SQL Quest."""

from typing import Any, Dict, Optional


class SQLQuestError(Exception):
    """Base exception for all SQL Quest errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(SQLQuestError):
    """Raised when configuration, quest layout or adventure loading is invalid."""
    pass


class DatabaseError(SQLQuestError):
    """Raised when there's an error connecting to or querying a database."""

    def __init__(
        self,
        message: str,
        database_type: Optional[str] = None,
        connection_string: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.database_type = database_type
        self.connection_string = connection_string


class QuestConnectionError(DatabaseError):
    """Raised when the quest connection cannot be established."""
    pass


class StatementError(DatabaseError):
    """Raised when a single statement of a batch fails.

    The message is the driver's own message so retry patterns such as
    ``deadlock`` or ``database is locked`` can match it.
    """

    def __init__(
        self,
        message: str,
        statement: Optional[str] = None,
        params: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details=details)
        self.statement = statement
        self.params = params


class SplitterError(SQLQuestError):
    """Raised when the statement splitting service fails or answers badly."""
    pass
