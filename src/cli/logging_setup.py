"""Logging setup for the CLI (stdlib logging + Rich handler)."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "ts3query"


def configure_logging(level: str | int = "WARNING", *, console: Console | None = None) -> logging.Logger:
    """Build the logging sink handed to the core pipeline.

    Logs go to stderr so stdout stays clean for the result summary.
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
