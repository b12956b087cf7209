"""adrules.report: header, output files, JSON summary and CI environment export."""

from __future__ import annotations

from adrules.report.github_env import summary_env, write_github_env
from adrules.report.header import count_rules, render_header, write_outputs
from adrules.report.json_report import render_json

__all__ = [
    "count_rules",
    "render_header",
    "write_outputs",
    "render_json",
    "summary_env",
    "write_github_env",
]
