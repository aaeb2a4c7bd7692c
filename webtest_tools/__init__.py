"""
================================================================================
Webtest Tools
================================================================================

Shared infrastructure for the UI automation suites.

Modules:
    - common: Loguru logging setup and logger factory
    - report_tools: Allure attachment helpers

Example:
    from webtest_tools.common import init_logger, default_logger_factory

    init_logger()
    log = default_logger_factory().get("LoginPage")

Author: Automation Team
License: MIT
================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
