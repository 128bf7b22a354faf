"""
Logging configuration using loguru.

Library modules log through ``loguru.logger`` and never add sinks
themselves; the CLI (or any embedding application) calls
``setup_logging()`` once at startup.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from pawtrack.core.config_schema import LoggingConfig


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    fmt: str = "<level>[{level.name}]</level> {message}",
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Configure loguru with console and optional file output.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
        log_file: Path to log file. If None, only logs to stderr.
        fmt: Loguru format string.
        rotation: Log file rotation size.
        retention: How long to keep rotated logs.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=fmt)

    if log_file:
        logger.add(
            log_file,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}",
            rotation=rotation,
            retention=retention,
        )


def setup_logging_from_config(settings: LoggingConfig, verbose: bool = False) -> None:
    """Apply the ``logging`` config section; ``verbose`` forces DEBUG."""
    setup_logging(level="DEBUG" if verbose else settings.level, log_file=settings.file)
