"""Logging configuration for taskkeep."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "taskkeep"


def setup_logging(level: int | str = logging.WARNING, console: Console | None = None) -> None:
    """Route taskkeep logs to stderr through rich.

    Call this once, early. Calling it again replaces the handler instead of
    adding a second one.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
