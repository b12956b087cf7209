# adrules/fetcher/pool.py
"""
Bounded worker pool: N asyncio workers drain a pre-filled queue of work items.
"""
from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, List, Sequence

from adrules.errors import ErrorKind, FetchError
from adrules.fetcher.models import Failure, FetchOutcome, WorkItem
from adrules.logger import get_logger

__all__ = ["WorkerPool", "FetchFn"]

FetchFn = Callable[[WorkItem], Awaitable[FetchOutcome]]


class WorkerPool:
    """Runs ``fetch`` for every identifier with at most ``concurrency`` in flight.

    A pool is single-use. Outcomes come back in completion order; callers that
    need input order sort by ``outcome.position``.
    """

    def __init__(self, fetch: FetchFn, concurrency: int) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.fetch = fetch
        self.concurrency = concurrency
        self.logger = get_logger("pool")
        self._used = False

    async def run(self, identifiers: Sequence[str]) -> List[FetchOutcome]:
        if self._used:
            raise RuntimeError("WorkerPool is single-use; create a new pool per run")
        self._used = True

        total = len(identifiers)
        if total == 0:
            return []

        queue: asyncio.Queue[WorkItem] = asyncio.Queue(maxsize=total)
        for position, url in enumerate(identifiers):
            queue.put_nowait(WorkItem(position, url))

        outcomes: List[FetchOutcome] = []
        n_workers = min(self.concurrency, total)
        self.logger.info("Fetching %d sources with %d workers", total, n_workers)
        start = time.monotonic()
        workers = [
            asyncio.create_task(self._worker(worker_id, queue, outcomes))
            for worker_id in range(1, n_workers + 1)
        ]
        await asyncio.gather(*workers)

        duration = time.monotonic() - start
        self.logger.info("Fetched %d sources in %.2f s", len(outcomes), duration)
        return outcomes

    async def _worker(
        self, worker_id: int, queue: asyncio.Queue[WorkItem], outcomes: List[FetchOutcome]
    ) -> None:
        while True:
            try:
                item = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            self.logger.debug("[Worker %d] Downloading %s", worker_id, item.url)
            outcomes.append(await self._fetch_one(item))
            queue.task_done()

    async def _fetch_one(self, item: WorkItem) -> FetchOutcome:
        try:
            return await self.fetch(item)
        except FetchError as exc:
            return Failure(item.url, item.position, exc.kind, exc.message)
        except Exception as exc:
            self.logger.exception("Fetcher crashed on %s", item.url)
            return Failure(item.url, item.position, ErrorKind.UNEXPECTED, f"{type(exc).__name__}: {exc}")
