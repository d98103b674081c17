"""Logging setup for texrender.

Library code logs through loguru; the ``texrender`` namespace stays disabled
until an application (such as the CLI) calls :func:`setup_logger`.
"""

from __future__ import annotations

import sys

from loguru import logger

logger.disable("texrender")

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | [texrender] {message}"


def setup_logger(verbose: bool = False) -> None:
    """Send texrender log records to stderr at INFO, or DEBUG when verbose."""

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO", format=LOG_FORMAT)
    logger.enable("texrender")


__all__ = ["logger", "setup_logger"]
