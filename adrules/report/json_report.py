# adrules/report/json_report.py

"""
JSON summary of a sync run.
"""
import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from adrules.aggregator import RunSummary


def render_json(
    summary: RunSummary,
    output_path: Path | str,
    rule_count: Optional[int] = None,
    generated: Optional[datetime] = None,
) -> Path:
    """
    Save the run summary as JSON.

    :param summary: counters of the fetch run
    :param output_path: path of the JSON file
    :param rule_count: number of compiled rules, if the compiler ran
    :param generated: build time; defaults to now
    :return: Path of the saved file
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = summary.as_dict()
    data["rules"] = rule_count
    data["generated"] = (generated or datetime.now().astimezone()).isoformat(timespec="seconds")

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
