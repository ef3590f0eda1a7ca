"""Logging setup for the CLI. The library itself never installs handlers."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

from rich.console import Console
from rich.logging import RichHandler


@dataclass(frozen=True, slots=True)
class _LoggingState:
    level: int
    handlers: list[logging.Handler]


def _level_for_verbosity(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(*, verbosity: int) -> _LoggingState:
    """Route log records to stderr; returns the state to hand to restore_logging()."""
    root = logging.getLogger()
    previous = _LoggingState(level=root.level, handlers=list(root.handlers))

    handler = RichHandler(
        console=Console(file=sys.stderr, force_terminal=False),
        show_time=False,
        show_path=verbosity >= 2,
    )
    root.handlers = [handler]
    root.setLevel(_level_for_verbosity(verbosity))
    return previous


def restore_logging(state: _LoggingState) -> None:
    root = logging.getLogger()
    root.handlers = state.handlers
    root.setLevel(state.level)
