"""
================================================================================
Webtest Tools Common Utilities
================================================================================

Shared logging setup for the UI automation framework.

Exports:
    - init_logger: Configure Loguru sinks once per process
    - LoggerFactory: Explicit factory of context-bound loggers
    - default_logger_factory: The single process-wide default factory
    - get_logger: Convenience accessor on the default factory

Usage:
    from webtest_tools.common import init_logger, default_logger_factory

    init_logger(level="DEBUG")
    log = default_logger_factory().get("SauceDemoLoginPage")

================================================================================
"""

from .global_config import (
    DEFAULT_LOG_FORMAT,
    LoggerFactory,
    default_logger_factory,
    get_logger,
    init_logger,
)

__all__ = [
    "DEFAULT_LOG_FORMAT",
    "LoggerFactory",
    "default_logger_factory",
    "get_logger",
    "init_logger",
]
