"""Logging setup for the CLI (library log records go to stderr)."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

_LOGGER_NAME = "consulkit"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True, slots=True)
class PreviousLogging:
    level: int
    propagate: bool
    handlers: list[logging.Handler]


def _level_for(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(*, verbosity: int, quiet: bool = False) -> PreviousLogging:
    """
    Route ``consulkit`` log records to stderr.

    ``-v`` shows INFO, ``-vv`` shows DEBUG (including per-request lines).
    ``--quiet`` limits output to errors. Returns the previous state so it can
    be restored when the command finishes.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    previous = PreviousLogging(
        level=logger.level, propagate=logger.propagate, handlers=list(logger.handlers)
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.handlers = [handler]
    logger.setLevel(logging.ERROR if quiet else _level_for(verbosity))
    logger.propagate = False
    return previous


def restore_logging(previous: PreviousLogging) -> None:
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in logger.handlers:
        if handler not in previous.handlers:
            handler.close()
    logger.handlers = list(previous.handlers)
    logger.setLevel(previous.level)
    logger.propagate = previous.propagate
