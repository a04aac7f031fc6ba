"""
Logging configuration using loguru.
Modules log through `from loguru import logger`; this module only installs the sink.
"""
from __future__ import annotations

import sys

from loguru import logger

from stackstats.config import get_log_level

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str | None = None) -> None:
    """Replace loguru's default sink with a single stderr sink at the configured level."""
    logger.remove()
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=level or get_log_level(),
        colorize=True,
    )


__all__ = ["logger", "configure_logging"]
