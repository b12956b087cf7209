"""Publishing run counters to later GitHub Actions steps via ``$GITHUB_ENV``."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from adrules.aggregator import RunSummary
from adrules.logger import logger


def summary_env(summary: RunSummary, rule_count: int) -> Dict[str, int]:
    return {
        "RULES_COUNT": rule_count,
        "SUCCESS_COUNT": summary.success,
        "FAILED_COUNT": summary.failure,
        "TOTAL_COUNT": summary.total,
    }


def write_github_env(
    values: Mapping[str, int], env_file: Union[str, Path, None] = None
) -> Optional[Path]:
    """Append ``KEY=value`` lines to ``env_file`` (default ``$GITHUB_ENV``).

    Returns the file written, or None when there is no target. Write errors
    are logged and swallowed: a missing counter must not fail the build.
    """
    target = env_file or os.getenv("GITHUB_ENV")
    if not target:
        return None
    path = Path(target)
    try:
        with path.open("a", encoding="utf-8") as f:
            for key, val in values.items():
                f.write(f"{key}={val}\n")
    except OSError as exc:
        logger.warning("Could not write to GITHUB_ENV file %s: %s", path, exc)
        return None
    return path


__all__ = ["summary_env", "write_github_env"]
