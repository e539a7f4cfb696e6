"""Loguru setup for the CLI."""

from __future__ import annotations

import sys

from loguru import logger

_FORMAT = "<level>{level: <7}</level> <dim>{name}</dim> {message}"


def setup_logging(verbose: bool = False) -> None:
    """Route loguru output to stderr; WARNING by default, DEBUG when verbose."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format=_FORMAT,
        colorize=None,
    )
