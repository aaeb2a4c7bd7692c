"""
Repository-level pytest configuration.

Sets up Loguru once for the whole test session, using the `logging` section
of config/config.yaml (LOGGING_LEVEL etc. override it as usual).
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from testsuites.ui_testing.framework.config_loader import ConfigLoader
from webtest_tools.common import init_logger


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _session_logging() -> Generator[None, None, None]:
    """Configure the Loguru sinks before any test logs."""
    config = ConfigLoader()
    init_logger(
        level=config.get("logging.level", "INFO"),
        log_file=config.get("logging.file"),
        rotation=config.get("logging.rotation", "10 MB"),
        retention=config.get("logging.retention", "7 days"),
    )
    yield
