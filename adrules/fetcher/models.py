# adrules/fetcher/models.py
"""
Data models of the fetch pipeline: work items and their outcomes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from adrules.errors import ErrorKind


@dataclass(frozen=True, slots=True)
class WorkItem:
    """One source URL and its position in the source list."""

    position: int
    url: str


@dataclass(frozen=True, slots=True)
class Success:
    url: str
    position: int
    content: bytes

    ok = True


@dataclass(frozen=True, slots=True)
class Failure:
    url: str
    position: int
    kind: ErrorKind
    message: str

    ok = False


FetchOutcome = Union[Success, Failure]

__all__ = ["ErrorKind", "WorkItem", "Success", "Failure", "FetchOutcome"]
