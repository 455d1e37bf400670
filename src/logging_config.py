"""Logging configuration for the layerlint CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Route log records to stderr through a rich handler.

    `quiet` wins over `verbose`: ERROR only. `verbose` enables DEBUG.
    The default level is WARNING, so skipped files are still reported.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_time=verbose,
        show_path=verbose,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )

    logger = logging.getLogger("layerlint")
    logger.setLevel(level)
    return logger


__all__ = ["setup_logging"]
