"""Statement splitting.

:class:`NaiveSplitter` cuts on ``;`` and is unsafe for terminators inside
string literals, comments or procedural blocks. :class:`ServiceSplitter`
asks a dialect-aware HTTP service for statement boundaries instead.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import httpx

from sqlquest.config.models import SplitterSettings
from sqlquest.exceptions import SplitterError

logger = logging.getLogger(__name__)


class StatementSplitter(ABC):
    """Turns rendered SQL into an ordered list of trimmed, non-empty statements."""

    @abstractmethod
    async def split(self, sql: str) -> List[str]:
        pass


class NaiveSplitter(StatementSplitter):
    """Split on a delimiter, ``;`` by default."""

    def __init__(self, delimiter: str = ";") -> None:
        self.delimiter = delimiter

    def split_text(self, sql: str) -> List[str]:
        return [stmt.strip() for stmt in sql.split(self.delimiter) if stmt.strip()]

    async def split(self, sql: str) -> List[str]:
        return self.split_text(sql)


class ServiceSplitter(StatementSplitter):
    """Delegate splitting to a remote service.

    The service receives ``{"sql": ..., "dialect": ...}`` and answers with
    ``{"statements": [{"start": 0, "end": 42}, ...]}``, where ``start`` and
    ``end`` are character offsets into the submitted text.
    """

    def __init__(
        self,
        service_url: str,
        timeout: float = 10.0,
        dialect: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.service_url = service_url
        self.timeout = timeout
        self.dialect = dialect
        self._transport = transport

    async def split(self, sql: str) -> List[str]:
        payload = {"sql": sql}
        if self.dialect:
            payload["dialect"] = self.dialect

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            ) as client:
                response = await client.post(self.service_url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise SplitterError(
                f"Splitting service returned HTTP {e.response.status_code}",
                details={'url': self.service_url},
            ) from e
        except httpx.HTTPError as e:
            raise SplitterError(
                f"Splitting service request failed: {e}",
                details={'url': self.service_url},
            ) from e
        except ValueError as e:
            raise SplitterError(f"Splitting service returned invalid JSON: {e}") from e

        statements = [fragment.strip() for fragment in self._slice(sql, data)]
        statements = [stmt for stmt in statements if stmt]
        logger.debug(f"Splitting service returned {len(statements)} statement(s)")
        return statements

    @staticmethod
    def _slice(sql: str, data: Any) -> List[str]:
        boundaries = data.get("statements") if isinstance(data, dict) else None
        if not isinstance(boundaries, list):
            raise SplitterError("Splitting service response has no 'statements' list")

        fragments = []
        for boundary in boundaries:
            try:
                start, end = int(boundary["start"]), int(boundary["end"])
            except (KeyError, TypeError, ValueError) as e:
                raise SplitterError(f"Malformed statement boundary: {boundary!r}") from e
            if not 0 <= start <= end <= len(sql):
                raise SplitterError(f"Statement boundary out of range: {start}..{end}")
            fragments.append(sql[start:end])
        return fragments


def create_splitter(
    settings: Optional[SplitterSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> StatementSplitter:
    """Use the splitting service when one is configured, else split naively."""
    if settings is not None and settings.service_url:
        return ServiceSplitter(
            settings.service_url,
            timeout=settings.timeout,
            dialect=settings.dialect,
            transport=transport,
        )
    return NaiveSplitter()
