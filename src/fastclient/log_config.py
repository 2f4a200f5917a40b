# fastclient/log_config.py
"""Logging configuration for the fastclient library using Loguru.

The library itself only emits records through ``loguru.logger``; call
:func:`configure_logging` from application code to install a formatted sink.
Dispatch details are logged at DEBUG, per-stage pipeline progress at TRACE.
"""

import sys

from loguru import logger

__all__ = ["configure_logging", "logger"]

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO", sink=sys.stderr, *, library_only: bool = False) -> int:
    """
    Configures Loguru logger.

    Removes existing handlers and adds a new one with the specified level and sink.

    Args:
        level: The minimum logging level (e.g., "TRACE", "DEBUG", "WARNING").
        sink: The output sink (e.g., sys.stderr, "file.log").
        library_only: Keep only records emitted by fastclient modules.

    Returns:
        int: The id of the installed handler.
    """
    logger.remove()
    handler_id = logger.add(
        sink,
        level=level.upper(),
        format=LOG_FORMAT,
        filter="fastclient" if library_only else None,
        colorize=sink is sys.stderr,  # Only colorize if writing to stderr
        backtrace=True,
        diagnose=True,
    )
    logger.debug(f"Loguru logger configured with level={level.upper()} writing to {sink}")
    return handler_id
