"""
================================================================================
Global Logging Configuration for Automation Tools
================================================================================

This module owns the Loguru sink setup and the logger factory that is handed
to resolvers and page objects.

Features:
    - One-time Loguru sink configuration (stderr + optional rotating file)
    - Structured context rendered from `extra` (strategy, attempt, ...)
    - Explicit LoggerFactory value instead of per-class global settings

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger


DEFAULT_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[context]: <24} | {message} | {extra}"
)

_logger_initialized: bool = False
_default_factory: Optional["LoggerFactory"] = None


def init_logger(
    level: str = "INFO",
    format_str: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    force: bool = False,
) -> None:
    """
    Initializes the global Loguru logger with consistent configuration.

    Subsequent calls are no-ops unless `force` is set.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format_str: Custom log format string.
        log_file: Optional file path; enables a rotating file sink.
        rotation: Loguru rotation policy for the file sink.
        retention: Loguru retention policy for the file sink.
        force: Re-apply configuration even if already initialized.
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    log_format = format_str or DEFAULT_LOG_FORMAT

    # Records logged without a bound context still render the format
    logger.configure(extra={"context": "-"})
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=level.upper(),
            format=log_format.replace("{level: <8}", "{level}"),
            rotation=rotation,
            retention=retention,
            compression="zip",
            enqueue=True,
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {level}")


class LoggerFactory:
    """
    Hands out Loguru loggers bound to a component context.

    A factory is created once at startup and passed down explicitly through
    constructors, so components never reach for process-wide logger state.

    Usage:
        >>> factory = LoggerFactory(base_context={"run_id": "nightly-42"})
        >>> log = factory.get("ElementResolver")
        >>> log.bind(strategy="css").debug("Trying strategy")
    """

    def __init__(self, base_context: Optional[dict] = None, sink_logger: Any = None):
        """
        Args:
            base_context: Key/values bound to every logger produced
            sink_logger: Loguru logger to bind from (tests may pass their own)
        """
        self._base_context = dict(base_context or {})
        self._logger = sink_logger if sink_logger is not None else logger

    def get(self, context: str, **extra: Any):
        """Return a logger bound to `context` plus any additional key/values."""
        return self._logger.bind(context=context, **self._base_context, **extra)

    __call__ = get


def default_logger_factory() -> LoggerFactory:
    """
    Return the process-wide default factory, constructing it on first use.

    Initializes the Loguru sinks with defaults if nobody did so yet.
    """
    global _default_factory
    if _default_factory is None:
        init_logger()
        _default_factory = LoggerFactory()
    return _default_factory


def get_logger(context: str = "-"):
    """Convenience accessor for a logger from the default factory."""
    return default_logger_factory().get(context)


__all__ = [
    "DEFAULT_LOG_FORMAT",
    "LoggerFactory",
    "default_logger_factory",
    "get_logger",
    "init_logger",
]
