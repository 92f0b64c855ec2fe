"""Retry and transaction combinators for quest procedures.

A procedure is any zero-argument callable returning an awaitable, e.g.
``lambda: quest.sql("UPDATE ...")``.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional, Pattern, TypeVar, Union

from sqlquest.reporting import QuestReporter

logger = logging.getLogger(__name__)

T = TypeVar("T")

Procedure = Callable[[], Awaitable[T]]
ErrorPredicate = Callable[[BaseException], bool]
ErrorPatterns = Iterable[Union[str, Pattern[str]]]

DEFAULT_TIMES = 10
DEFAULT_WAIT_MS = 5000


def matches_any(patterns: ErrorPatterns) -> ErrorPredicate:
    """Build a predicate matching an error whose message matches any pattern."""
    compiled = [re.compile(pattern) if isinstance(pattern, str) else pattern for pattern in patterns]

    def predicate(error: BaseException) -> bool:
        message = str(error)
        return any(pattern.search(message) for pattern in compiled)

    return predicate


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how patiently to retry a procedure.

    Attributes:
        times: Total attempts, at least one; ``None`` retries without bound.
        wait: Milliseconds to wait between attempts.
        ok_errors: Decides whether an error is retryable; ``None`` retries
            every error.
    """

    times: Optional[int] = DEFAULT_TIMES
    wait: int = DEFAULT_WAIT_MS
    ok_errors: Optional[ErrorPredicate] = None

    def __post_init__(self) -> None:
        if self.times is not None and self.times < 1:
            raise ValueError(f"Retry times must be at least 1 or None for unbounded, got {self.times}")
        if self.wait < 0:
            raise ValueError(f"Retry wait must not be negative, got {self.wait}")

    @classmethod
    def build(
        cls,
        times: Optional[int] = DEFAULT_TIMES,
        wait: int = DEFAULT_WAIT_MS,
        ok_errors: Optional[Union[ErrorPredicate, ErrorPatterns]] = None,
    ) -> "RetryPolicy":
        """Build a policy, turning regex patterns into an error predicate."""
        if ok_errors is not None and not callable(ok_errors):
            ok_errors = matches_any(ok_errors)
        return cls(times=times, wait=wait, ok_errors=ok_errors)

    @property
    def unbounded(self) -> bool:
        return self.times is None

    def is_retryable(self, error: BaseException) -> bool:
        return self.ok_errors is None or bool(self.ok_errors(error))


async def retry(
    policy: RetryPolicy,
    procedure: Procedure,
    *,
    reporter: Optional[QuestReporter] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """Run ``procedure`` until it succeeds or the policy gives up.

    The original error is re-raised unchanged when it is not retryable or
    when attempts are exhausted.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return await procedure()
        except Exception as error:
            if not policy.is_retryable(error):
                logger.debug(f"Attempt {attempt} failed with a non-retryable error: {error}")
                raise
            if not policy.unbounded and attempt >= policy.times:
                logger.warning(f"Giving up after {attempt} attempt(s): {error}")
                raise

            if reporter is not None:
                reporter.retrying(error, attempt, policy.wait)
            else:
                logger.warning(f"Attempt {attempt} failed: {error}. Retrying in {policy.wait}ms")

        await sleep(policy.wait / 1000)


async def transaction(executor, procedure: Procedure) -> T:
    """Run ``procedure`` between BEGIN and COMMIT, rolling back on failure.

    Args:
        executor: A :class:`~sqlquest.engine.executor.StatementExecutor`.
        procedure: Zero-argument callable returning an awaitable.

    Returns:
        The procedure's result.
    """
    await executor.execute("BEGIN")
    try:
        result = await procedure()
    except Exception as error:
        try:
            await executor.execute("ROLLBACK")
        except Exception as rollback_error:
            logger.error(f"Rollback failed after '{error}': {rollback_error}")
            executor.reporter.error(rollback_error, context="Rollback failed")
        raise
    await executor.execute("COMMIT")
    return result
