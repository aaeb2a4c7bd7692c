"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework with self-healing element resolution.

Components:
    - selector_strategies: Multi-strategy selector sets for one element
    - element_resolver: Ordered fallback resolution and state waits
    - browser_session: Browser capability consumed by the resolver
    - page_base: Base page object for common operations
    - browser_manager: Browser lifecycle management
    - performance_monitor / media_capture: Metrics and screenshots

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager
from .browser_session import BrowserSession, ElementState, PlaywrightSession
from .config_loader import ConfigLoader, FrameworkSettings
from .element_resolver import ElementResolver, ResolutionAttempt, ResolvedElement
from .errors import (
    ConfigurationError,
    ElementNotFoundError,
    FrameworkError,
    StateTimeoutError,
)
from .page_base import BasePage, PageConfig
from .selector_strategies import SelectorKind, SelectorStrategies

__all__ = [
    "BasePage",
    "BrowserManager",
    "BrowserSession",
    "ConfigLoader",
    "ConfigurationError",
    "ElementNotFoundError",
    "ElementResolver",
    "ElementState",
    "FrameworkError",
    "FrameworkSettings",
    "PageConfig",
    "PlaywrightSession",
    "ResolutionAttempt",
    "ResolvedElement",
    "SelectorKind",
    "SelectorStrategies",
    "StateTimeoutError",
]
