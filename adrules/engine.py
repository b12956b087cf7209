# File: adrules/engine.py
"""adrules.engine: orchestration of a sync run (fetch, merge, compile, publish)."""

from __future__ import annotations

import asyncio
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from adrules.aggregator import RunSummary, aggregate, enforce_success_ratio
from adrules.compiler import compile_rules
from adrules.config import SyncConfig
from adrules.fetcher import Fetcher, FetchOutcome, WorkerPool
from adrules.logger import logger
from adrules.report import count_rules, render_header, summary_env, write_github_env, write_outputs
from adrules.sources import read_sources

__all__ = ["Engine", "SyncResult", "start_fetch"]


async def start_fetch(urls: Sequence[str], config: SyncConfig) -> List[FetchOutcome]:
    """Download every URL with the configured concurrency; one outcome per URL."""
    async with Fetcher(config) as fetcher:
        pool = WorkerPool(fetcher.fetch, config.concurrency)
        return await pool.run(urls)


@dataclass(slots=True)
class SyncResult:
    """What a finished run produced."""

    sources: List[str]
    summary: RunSummary
    rule_count: int = 0
    outputs: List[Path] = field(default_factory=list)

    @property
    def nothing_to_do(self) -> bool:
        return not self.sources


class Engine:
    """Facade for the CLI and tests: fetch and merge, then compile and publish."""

    def __init__(self, config: SyncConfig) -> None:
        self.config = config

    async def download(self, urls: Sequence[str]) -> Tuple[bytes, RunSummary]:
        """Fetch ``urls`` and return the merged payload with its summary.

        Raises NoSuccessfulDownloadsError or SuccessRatioError for a run that
        cannot produce a usable payload.
        """
        outcomes = await start_fetch(urls, self.config)
        payload, summary = aggregate(outcomes, urls)
        logger.info(
            "Download summary: %d successful, %d failed", summary.success, summary.failure
        )
        for url in summary.failed:
            logger.warning("Failed source: %s", url)
        enforce_success_ratio(summary, self.config.min_success_ratio)
        return payload, summary

    async def run_async(self, urls: Optional[Sequence[str]] = None) -> SyncResult:
        """Full pipeline. ``urls`` defaults to the configured rules file."""
        sources = list(urls) if urls is not None else read_sources(self.config.rules_file)
        if not sources:
            logger.warning("No rule sources configured; nothing to do")
            return SyncResult(sources=sources, summary=RunSummary())

        payload, summary = await self.download(sources)

        with tempfile.TemporaryDirectory(prefix="adrules-") as tmp:
            compiled = await asyncio.to_thread(
                compile_rules, self.config.compiler, payload, Path(tmp)
            )

        rule_count = count_rules(compiled)
        header = render_header(self.config, sources, summary, rule_count)
        outputs = write_outputs(self.config, header.encode("utf-8") + compiled)
        for path in outputs:
            logger.info("Wrote output to %s", path)

        write_github_env(summary_env(summary, rule_count))
        logger.info("All tasks completed: %d rules from %d sources", rule_count, summary.success)
        return SyncResult(sources=sources, summary=summary, rule_count=rule_count, outputs=outputs)

    def run(self, urls: Optional[Sequence[str]] = None) -> SyncResult:
        return asyncio.run(self.run_async(urls))
