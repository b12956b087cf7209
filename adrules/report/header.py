"""adrules.report.header: annotated header and final rule-list files."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from jinja2 import Environment, PackageLoader

from adrules.aggregator import RunSummary
from adrules.config import SyncConfig

_env = Environment(
    loader=PackageLoader("adrules", "templates"),
    autoescape=False,
    trim_blocks=True,
    keep_trailing_newline=True,
)


def count_rules(content: bytes) -> int:
    """Count non-empty lines that are neither ``!`` nor ``#`` comments."""
    count = 0
    for raw in content.decode("utf-8", errors="replace").split("\n"):
        line = raw.strip()
        if line and not line.startswith(("!", "#")):
            count += 1
    return count


def render_header(
    config: SyncConfig,
    sources: Sequence[str],
    summary: RunSummary,
    rule_count: int,
    now: Optional[datetime] = None,
) -> str:
    """Render the comment header placed above the compiled rules.

    Args:
        config: sync configuration (title, expires, homepage).
        sources: every configured source URL, in source-list order.
        summary: counters of the fetch run.
        rule_count: number of rules in the compiled output.
        now: build time; defaults to the current local time.

    Returns:
        Header text ending with an empty line.
    """
    now = now or datetime.now().astimezone()
    text = _env.get_template("header.txt.j2").render(
        title=config.title,
        version=now.strftime("%Y%m%d%H%M"),
        generated=now.isoformat(timespec="seconds"),
        expires=config.expires,
        summary=summary,
        rule_count=rule_count,
        homepage=config.resolve_homepage(),
        sources=sources,
    )
    return text.rstrip("\n") + "\n\n"


def write_outputs(config: SyncConfig, content: bytes) -> List[Path]:
    """Write ``content`` to the output directory and copy it to the publish directory."""
    written: List[Path] = []
    for directory in (config.output_dir, config.publish_dir):
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / config.output_file
        path.write_bytes(content)
        written.append(path)
    return written


__all__ = ["count_rules", "render_header", "write_outputs"]
