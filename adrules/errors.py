"""Exception hierarchy for AdRules.

Per-source fetch errors (:class:`FetchError` and subclasses) never escape the
worker pool: they are turned into a failure outcome for that source. The
run-level errors below them end the whole sync.
"""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adrules.aggregator import RunSummary

__all__ = [
    "ErrorKind",
    "AdRulesError",
    "FetchError",
    "RequestConstructionError",
    "TransportError",
    "BadStatusError",
    "BodyReadError",
    "EmptyBodyError",
    "AggregationError",
    "NoSuccessfulDownloadsError",
    "SuccessRatioError",
    "CompilerError",
]


class ErrorKind(str, Enum):
    """Why a single download failed."""

    REQUEST_CONSTRUCTION = "request_construction"
    TRANSPORT = "transport"
    BAD_STATUS = "bad_status"
    BODY_READ = "body_read"
    EMPTY_BODY = "empty_body"
    UNEXPECTED = "unexpected"


class AdRulesError(RuntimeError):
    """Base exception of the package."""


class FetchError(AdRulesError):
    """A single source could not be downloaded."""

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{message} ({url})")
        self.url = url
        self.message = message


class RequestConstructionError(FetchError):
    """The URL cannot be turned into a request."""

    kind = ErrorKind.REQUEST_CONSTRUCTION


class TransportError(FetchError):
    """Connection failure or timeout."""

    kind = ErrorKind.TRANSPORT


class BadStatusError(FetchError):
    """The server answered with something other than 200 OK."""

    kind = ErrorKind.BAD_STATUS

    def __init__(self, url: str, status: int, reason: str | None = None) -> None:
        super().__init__(url, f"bad status: {status} {reason or ''}".rstrip())
        self.status = status


class BodyReadError(FetchError):
    """The response body could not be read completely."""

    kind = ErrorKind.BODY_READ


class EmptyBodyError(FetchError):
    """The download succeeded but carried no bytes."""

    kind = ErrorKind.EMPTY_BODY

    def __init__(self, url: str) -> None:
        super().__init__(url, "downloaded file is empty")


class AggregationError(AdRulesError):
    """The set of outcomes cannot be aggregated."""


class NoSuccessfulDownloadsError(AggregationError):
    """Every source failed; there is nothing to merge."""

    def __init__(self, summary: "RunSummary") -> None:
        super().__init__(
            f"No rules were downloaded successfully ({summary.failure} of {summary.total} failed)"
        )
        self.summary = summary


class SuccessRatioError(AggregationError):
    """Too few sources downloaded for the configured minimum ratio."""

    def __init__(self, summary: "RunSummary", min_ratio: float) -> None:
        super().__init__(
            f"Only {summary.success}/{summary.total} sources downloaded "
            f"({summary.success_ratio:.0%} < required {min_ratio:.0%})"
        )
        self.summary = summary
        self.min_ratio = min_ratio


class CompilerError(AdRulesError):
    """The external rule compiler could not be run or failed."""
