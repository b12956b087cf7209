"""Logging setup for AdRules.

All modules log through the ``AdRules`` logger or one of its children
(``get_logger("fetcher")`` -> ``AdRules.fetcher``). Console output goes to
stderr so that ``adrules fetch`` can stream the merged payload on stdout.

The initial level comes from ``$ADRULES_LOG_LEVEL`` (default ``INFO``); the
CLI reconfigures the logger once it has parsed ``--log-level`` and
``--log-file``.
"""
from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "AdRules"
LEVEL_ENV_VAR: Final[str] = "ADRULES_LOG_LEVEL"

#: rotate the log file at 5 MiB, keep three old files
_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def default_level() -> str:
    """Level named by ``$ADRULES_LOG_LEVEL``, or ``INFO`` when unset or unknown."""
    value = os.getenv(LEVEL_ENV_VAR, "").strip().upper()
    if value and isinstance(logging.getLevelName(value), int):
        return value
    return "INFO"


def _handlers(fmt: str, log_file: Optional[Path]) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file), maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding="utf-8"
            )
        )
    formatter = logging.Formatter(fmt)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: Optional[_LevelT] = None,
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the project logger.

    Args:
        level: numeric or textual level; ``None`` uses :func:`default_level`.
        log_file: also write to this file, rotated; ``None`` logs to stderr only.
        log_format: format string for :class:`logging.Formatter`.
        replace_handlers: drop and close the current handlers first.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(default_level() if level is None else level)

    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()

    for handler in _handlers(log_format, Path(log_file) if log_file is not None else None):
        lg.addHandler(handler)

    lg.propagate = False
    return lg


def init_logging(
    level: Optional[_LevelT] = None,
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the project logger or its child ``AdRules.<name>``."""
    return logging.getLogger(LOGGER_NAME if not name else f"{LOGGER_NAME}.{name}")


logger: logging.Logger = init_logging()

__all__ = [
    "DEFAULT_FORMAT",
    "LEVEL_ENV_VAR",
    "LOGGER_NAME",
    "configure",
    "default_level",
    "get_logger",
    "init_logging",
    "logger",
]
