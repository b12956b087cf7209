# adrules/fetcher/fetcher.py
"""
Fetcher: downloads one rule source and classifies every failure.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Union

from aiohttp import (
    ClientError,
    ClientPayloadError,
    ClientSession,
    ClientTimeout,
    InvalidURL,
    TCPConnector,
)
from yarl import URL

from adrules.config import SyncConfig
from adrules.errors import (
    BadStatusError,
    BodyReadError,
    EmptyBodyError,
    FetchError,
    RequestConstructionError,
    TransportError,
)
from adrules.fetcher.models import Failure, FetchOutcome, Success, WorkItem
from adrules.logger import get_logger

__all__ = ["Fetcher"]


class Fetcher:
    """Single GET per source, fixed timeout, no retries.

    Use as an async context manager so the HTTP session is opened and closed
    around a run. An existing ``session`` may be passed in; it is then left
    open on exit.
    """

    def __init__(self, config: SyncConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self.logger = get_logger("fetcher")

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            # the pool bounds parallelism; a smaller connector limit would make
            # queued requests spend their own timeout waiting for a connection
            self.session = ClientSession(
                connector=TCPConnector(limit=self.config.concurrency),
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, item: Union[WorkItem, str]) -> FetchOutcome:
        """Download ``item`` and return a Success or a Failure. Never raises a FetchError."""
        if isinstance(item, str):
            item = WorkItem(0, item)
        try:
            content = await self._download(item.url)
        except FetchError as exc:
            self.logger.warning("Download failed for %s: %s", item.url, exc.message)
            return Failure(item.url, item.position, exc.kind, exc.message)
        self.logger.info("Downloaded %s (%d bytes)", item.url, len(content))
        return Success(item.url, item.position, content)

    async def _download(self, url: str) -> bytes:
        if not self.session:
            raise RuntimeError("Session not initialized")
        target = self._build_url(url)
        try:
            async with self.session.get(target) as resp:
                if resp.status != 200:
                    raise BadStatusError(url, resp.status, resp.reason)
                try:
                    body = await resp.read()
                except (ClientPayloadError, asyncio.IncompleteReadError) as exc:
                    raise BodyReadError(url, f"failed to read body: {exc}") from exc
        except FetchError:
            raise
        except InvalidURL as exc:
            raise RequestConstructionError(url, f"failed to create request: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise TransportError(
                url, f"http request failed: timed out after {self.config.timeout}s"
            ) from exc
        except (ClientError, OSError) as exc:
            raise TransportError(url, f"http request failed: {exc}") from exc

        if not body:
            raise EmptyBodyError(url)
        return body

    @staticmethod
    def _build_url(url: str) -> URL:
        try:
            parsed = URL(url)
        except (TypeError, ValueError) as exc:
            raise RequestConstructionError(url, f"failed to create request: {exc}") from exc
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise RequestConstructionError(
                url, "failed to create request: not an absolute http(s) URL"
            )
        return parsed
