"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration management with environment variable override support.

Features:
    - YAML configuration loading (config/config.yaml)
    - Environment variable override (UI_BASE_URL overrides ui.base_url)
    - `${VAR}` / `${VAR:-default}` substitution inside YAML string values
    - Dot notation path access with default values
    - Typed FrameworkSettings snapshot for page objects and fixtures

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger

from .errors import ConfigurationError


# Default configuration file path (repository root /config)
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[3] / "config" / "config.yaml"

_ENV_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def _substitute_env(value: Any) -> Any:
    """Recursively expand `${VAR}` and `${VAR:-default}` references."""
    if isinstance(value, str):
        return _ENV_REFERENCE.sub(
            lambda m: os.environ.get(m.group(1), m.group(2) if m.group(2) is not None else ""),
            value,
        )
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


_TRUTHY = frozenset({"true", "1", "yes", "on"})

_MISSING = object()


def _coerce_env(raw: str, like: Any) -> Any:
    """Parse an environment string as the type of `like`, leaving it a string if that fails."""
    if isinstance(like, bool):
        return raw.strip().lower() in _TRUTHY
    for number_type in (int, float):
        if isinstance(like, number_type):
            try:
                return number_type(raw)
            except ValueError:
                return raw
    return raw


class ConfigLoader:
    """
    Process-wide view of config/config.yaml with environment overrides.

    Lookup order for `get("ui.base_url")`:
        1. Environment variable UI_BASE_URL (coerced to the default's type)
        2. The YAML value at ui -> base_url
        3. The default passed by the caller

    Usage:
        >>> ConfigLoader().get("ui.browser", "chromium")
        'chromium'
    """

    _instance: Optional["ConfigLoader"] = None

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        # First construction wins; later calls share the loaded data
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
            instance._config = instance._read()
            cls._instance = instance
        return cls._instance

    @property
    def path(self) -> Path:
        return self._config_path

    def _read(self) -> Dict[str, Any]:
        if not self._config_path.is_file():
            logger.warning("No configuration file at {}, using defaults and environment only", self._config_path)
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}",
                details={"path": str(self._config_path)},
            ) from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigurationError(
                "Configuration root must be a mapping",
                details={"path": str(self._config_path), "type": type(raw).__name__},
            )

        logger.debug("Loaded configuration from {}", self._config_path)
        return _substitute_env(raw)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Value at dot-separated `key`.

        An environment variable named after the key (dots to underscores,
        upper-cased) wins over the file.
        """
        override = os.environ.get(key.replace(".", "_").upper())
        if override is not None:
            return _coerce_env(override, default)

        node: Any = self._config
        for part in key.split("."):
            node = node.get(part, _MISSING) if isinstance(node, dict) else _MISSING
            if node is _MISSING or node is None:
                return default
        return node

    def get_section(self, section: str) -> Dict[str, Any]:
        """Top-level mapping `section`, or an empty dict."""
        value = self._config.get(section)
        return value if isinstance(value, dict) else {}

    def reload(self) -> None:
        """Re-read the file this loader was created with."""
        self._config = self._read()
        logger.info("Configuration reloaded from {}", self._config_path)

    @classmethod
    def reset(cls) -> None:
        """Forget the shared instance so the next ConfigLoader() reads afresh."""
        cls._instance = None


@dataclass(frozen=True)
class PerformanceThresholds:
    """Upper bounds for page performance metrics."""

    page_load_time_ms: int = 10000
    memory_usage_bytes: int = 200 * 1024 * 1024


@dataclass(frozen=True)
class FrameworkSettings:
    """
    Typed snapshot of the settings the UI framework consumes.

    Built once per session and passed explicitly to page objects.
    """

    base_url: str = "https://www.saucedemo.com"
    browser: str = "chromium"
    headless: bool = True
    default_timeout_ms: int = 30000
    test_id_attribute: str = "data-testid"
    screenshot_dir: Path = Path("test-results") / "screenshots"
    full_page_screenshots: bool = True
    performance_monitoring: bool = True
    thresholds: PerformanceThresholds = field(default_factory=PerformanceThresholds)

    @classmethod
    def from_loader(cls, loader: ConfigLoader) -> "FrameworkSettings":
        defaults = cls()
        default_thresholds = defaults.thresholds
        return cls(
            base_url=str(loader.get("ui.base_url", defaults.base_url)).rstrip("/"),
            browser=loader.get("ui.browser", defaults.browser),
            headless=loader.get("ui.headless", defaults.headless),
            default_timeout_ms=int(loader.get("ui.default_timeout", defaults.default_timeout_ms)),
            test_id_attribute=loader.get("ui.test_id_attribute", defaults.test_id_attribute),
            screenshot_dir=Path(loader.get("media.screenshot_dir", str(defaults.screenshot_dir))),
            full_page_screenshots=loader.get("media.full_page", defaults.full_page_screenshots),
            performance_monitoring=loader.get("performance.monitoring", defaults.performance_monitoring),
            thresholds=PerformanceThresholds(
                page_load_time_ms=int(loader.get(
                    "performance.thresholds.page_load_time", default_thresholds.page_load_time_ms
                )),
                memory_usage_bytes=int(loader.get(
                    "performance.thresholds.memory_usage", default_thresholds.memory_usage_bytes
                )),
            ),
        )


__all__ = [
    "ConfigLoader",
    "FrameworkSettings",
    "PerformanceThresholds",
]
