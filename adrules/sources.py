# File: adrules/sources.py
"""adrules.sources: reading the list of rule source URLs."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Union

from adrules.logger import logger

__all__ = ["parse_sources", "read_sources"]


def parse_sources(lines: Iterable[str]) -> List[str]:
    """Strip lines and drop blanks and ``#`` comments, keeping order."""
    return [line for line in (raw.strip() for raw in lines) if line and not line.startswith("#")]


def read_sources(path: Union[str, Path]) -> List[str]:
    """Read the source list file; raises FileNotFoundError when it is missing."""
    p = Path(path)
    if not p.is_file():
        logger.error("Rules file not found: %s", p)
        raise FileNotFoundError(f"Rules file not found: {p}")
    urls = parse_sources(p.read_text(encoding="utf-8").splitlines())
    logger.info("Found %d rule sources in '%s'", len(urls), p)
    return urls
