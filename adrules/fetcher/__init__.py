"""adrules.fetcher: concurrent download of rule sources."""

from adrules.fetcher.models import ErrorKind, Failure, FetchOutcome, Success, WorkItem
from adrules.fetcher.fetcher import Fetcher
from adrules.fetcher.pool import WorkerPool

__all__ = ["ErrorKind", "Failure", "FetchOutcome", "Success", "WorkItem", "Fetcher", "WorkerPool"]
