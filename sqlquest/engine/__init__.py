"""Quest execution engine."""

from sqlquest.engine.adapter import SyncExecutionAdapter
from sqlquest.engine.combinators import RetryPolicy, matches_any, retry, transaction
from sqlquest.engine.executor import StatementExecutor
from sqlquest.engine.request import SqlRequest
from sqlquest.engine.splitter import (
    NaiveSplitter,
    ServiceSplitter,
    StatementSplitter,
    create_splitter,
)
from sqlquest.engine.template import render

__all__ = [
    "SyncExecutionAdapter",
    "RetryPolicy",
    "matches_any",
    "retry",
    "transaction",
    "StatementExecutor",
    "SqlRequest",
    "NaiveSplitter",
    "ServiceSplitter",
    "StatementSplitter",
    "create_splitter",
    "render",
]
