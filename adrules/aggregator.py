# File: adrules/aggregator.py
"""adrules.aggregator: merges fetch outcomes into one payload and a run summary."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from adrules.errors import AggregationError, NoSuccessfulDownloadsError, SuccessRatioError
from adrules.fetcher.models import FetchOutcome

SEPARATOR = b"\n"


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Counters of a finished fetch run; ``failed`` keeps source-list order."""

    total: int = 0
    success: int = 0
    failure: int = 0
    failed: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def success_ratio(self) -> float:
        return self.success / self.total if self.total else 0.0

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["failed"] = list(self.failed)
        return data


def _order_outcomes(
    outcomes: Iterable[FetchOutcome], original_order: Sequence[str]
) -> List[FetchOutcome]:
    """Place every outcome at its source-list position, rejecting gaps and duplicates."""
    slots: List[Optional[FetchOutcome]] = [None] * len(original_order)
    for outcome in outcomes:
        pos = outcome.position
        if not 0 <= pos < len(slots):
            raise AggregationError(f"Outcome for {outcome.url} has unknown position {pos}")
        if original_order[pos] != outcome.url:
            raise AggregationError(
                f"Outcome at position {pos} is for {outcome.url}, expected {original_order[pos]}"
            )
        if slots[pos] is not None:
            raise AggregationError(f"Duplicate outcome for {outcome.url} at position {pos}")
        slots[pos] = outcome

    missing = [original_order[i] for i, slot in enumerate(slots) if slot is None]
    if missing:
        raise AggregationError(f"No outcome recorded for {len(missing)} source(s): {missing}")
    return slots  # type: ignore[return-value]


def aggregate(
    outcomes: Iterable[FetchOutcome], original_order: Sequence[str]
) -> Tuple[bytes, RunSummary]:
    """Join successful contents in source-list order and count the results.

    Raises :class:`NoSuccessfulDownloadsError` when there was at least one
    source and none of them downloaded. An empty source list yields an empty
    payload and a zero summary.
    """
    ordered = _order_outcomes(outcomes, original_order)

    contents: List[bytes] = []
    failed: List[str] = []
    for outcome in ordered:
        if outcome.ok:
            contents.append(outcome.content)
        else:
            failed.append(outcome.url)

    summary = RunSummary(
        total=len(ordered),
        success=len(contents),
        failure=len(failed),
        failed=tuple(failed),
    )
    if summary.total and not summary.success:
        raise NoSuccessfulDownloadsError(summary)
    return SEPARATOR.join(contents), summary


def enforce_success_ratio(summary: RunSummary, min_ratio: float) -> None:
    """Raise :class:`SuccessRatioError` when fewer sources succeeded than ``min_ratio`` requires."""
    if summary.total and summary.success_ratio < min_ratio:
        raise SuccessRatioError(summary, min_ratio)


__all__ = ["RunSummary", "aggregate", "enforce_success_ratio", "SEPARATOR"]
