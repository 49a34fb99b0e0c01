"""Logging setup for applications embedding the container."""

import sys
from typing import Dict, Optional

from loguru import logger

DEFAULT_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

# Root of every logger name emitted by the container
CONTAINER_LOGGER = "sprig"


def level_filter(level: str, container_level: Optional[str] = None) -> Dict[str, str]:
    """Per-module thresholds for loguru's dict filter.

    ``container_level`` applies to records from ``sprig.*`` only, so the
    container can be traced without lowering the application's level.
    """
    return {"": level, CONTAINER_LOGGER: container_level or level}


def configure_logging(
    level: str = "INFO",
    format: Optional[str] = None,
    container_level: Optional[str] = None,
    enqueue: bool = False,
    backtrace: bool = False,
    diagnose: bool = False,
) -> int:
    """
    Replace loguru's default handler with a stderr handler.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Custom log format string (uses default if None)
        container_level: Separate level for the container's own records
        enqueue: Whether to enqueue logs (helps with threading issues)
        backtrace: Whether to show full traceback on errors
        diagnose: Whether to show variable values in tracebacks

    Returns:
        The id of the added handler
    """
    thresholds = level_filter(level, container_level)
    lowest = min(thresholds.values(), key=lambda name: logger.level(name).no)

    logger.remove()
    return logger.add(
        sys.stderr,
        format=format or DEFAULT_FORMAT,
        level=lowest,
        filter=thresholds,
        enqueue=enqueue,
        backtrace=backtrace,
        diagnose=diagnose,
    )
