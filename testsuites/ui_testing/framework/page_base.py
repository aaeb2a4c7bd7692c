"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Navigation using an explicit PageConfig record (name + path)
    - Element interactions over SelectorStrategies via ElementResolver
    - Screenshot, failure capture and performance monitoring
    - Wait strategies

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import allure
from playwright.async_api import Page

from webtest_tools.common import LoggerFactory, default_logger_factory
from webtest_tools.report_tools import attach_resolution, attach_text

from .browser_session import ElementState, PlaywrightSession
from .config_loader import FrameworkSettings
from .element_resolver import EXISTS_TIMEOUT_MS, ElementResolver, ResolvedElement
from .errors import ElementNotFoundError, ValidationError
from .media_capture import MediaCapture
from .performance_monitor import PerformanceMonitor
from .selector_strategies import SelectorStrategies


@dataclass(frozen=True)
class PageConfig:
    """
    Identity of a page object.

    Attributes:
        name: Page name used in logs, errors and reports
        path: URL path relative to the application base URL
    """

    name: str
    path: str = "/"


class BasePage:
    """
    Base class for all page objects.

    Provides common functionality for:
        - Navigation and URL handling
        - Self-healing element interaction
        - Screenshot capture
        - Wait utilities

    Usage:
        LOGIN = PageConfig("LoginPage", "/login")

        class LoginPage(BasePage):
            USERNAME = SelectorStrategies(test_id="username", dom_id="user-name")

            def __init__(self, page, config=LOGIN, **kwargs):
                super().__init__(page, config, **kwargs)

            async def login(self, username: str, password: str):
                await self.type_text(self.USERNAME, username, clear=True)
    """

    def __init__(
        self,
        page: Page,
        config: PageConfig,
        settings: Optional[FrameworkSettings] = None,
        logger_factory: Optional[LoggerFactory] = None,
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            config: Page identity (name + path)
            settings: Framework settings (defaults when omitted)
            logger_factory: Factory for context-bound loggers
        """
        self.page = page
        self.config = config
        self.settings = settings or FrameworkSettings()
        self.base_url = self.settings.base_url.rstrip("/")
        self.default_timeout = self.settings.default_timeout_ms

        factory = logger_factory or default_logger_factory()
        self.log = factory.get(config.name)

        self.session = PlaywrightSession(page, test_id_attribute=self.settings.test_id_attribute)
        self.resolver = ElementResolver(self.session, self.log, context=config.name)
        self.performance_monitor = PerformanceMonitor(page, self.log, context=config.name)
        self.media_capture = MediaCapture(
            page,
            self.log,
            directory=self.settings.screenshot_dir,
            full_page=self.settings.full_page_screenshots,
        )

    @property
    def url(self) -> str:
        """Get full page URL."""
        return f"{self.base_url}{self.config.path}"

    # =========================================================================
    # Navigation
    # =========================================================================

    async def navigate(self, path: Optional[str] = None, wait_for: str = "load") -> None:
        """
        Navigate to this page (or to `path` under the base URL).

        Args:
            path: Optional path overriding the page's own path
            wait_for: Wait condition - 'load', 'domcontentloaded', 'networkidle'
        """
        target = f"{self.base_url}{path}" if path is not None else self.url
        with allure.step(f"Navigate to {target}"):
            self.log.info(f"Navigating to {target}")
            monitoring = self.settings.performance_monitoring
            if monitoring:
                self.performance_monitor.start_monitoring()
            await self.page.goto(target, wait_until=wait_for)
            await self.wait_for_page_load()
            if monitoring:
                await self.performance_monitor.stop_monitoring()

    async def wait_for_page_load(
        self,
        state: str = "domcontentloaded",
        timeout: Optional[int] = None,
    ) -> None:
        """
        Wait for the page to reach a load state.

        Args:
            state: Playwright load state ('load', 'domcontentloaded', 'networkidle')
            timeout: Timeout in milliseconds
        """
        await self.page.wait_for_load_state(state, timeout=timeout or self.default_timeout)

    async def wait_for_url(self, url_pattern: str, timeout: int = 10000) -> None:
        with allure.step(f"Wait for URL: {url_pattern}"):
            await self.page.wait_for_url(url_pattern, timeout=timeout)

    async def refresh(self) -> None:
        await self.page.reload()
        await self.wait_for_page_load()

    async def get_page_title(self) -> str:
        return await self.page.title()

    def current_url(self) -> str:
        return self.page.url

    # =========================================================================
    # Element Resolution
    # =========================================================================

    async def locate(
        self,
        strategies: SelectorStrategies,
        timeout: Optional[int] = None,
        name: Optional[str] = None,
    ) -> ResolvedElement:
        """Resolve an element through the self-healing resolver."""
        resolved = await self.resolver.resolve(strategies, timeout or self.default_timeout, name)
        if resolved.used_fallback:
            attach_resolution(resolved, name=f"Fallback used: {name or strategies.describe()}")
        return resolved

    async def click_element(
        self,
        strategies: SelectorStrategies,
        name: Optional[str] = None,
        timeout: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        """
        Click element using self-healing location.

        Args:
            strategies: Selector strategies of the element
            name: Human-readable element name for logs/Allure
            timeout: Resolution budget in milliseconds
            **kwargs: Additional Playwright click options (force, click_count, ...)
        """
        label = name or strategies.describe()
        with allure.step(f"Click: {label}"):
            element = await self.locate(strategies, timeout, name)
            await element.handle.click(**kwargs)

    async def type_text(
        self,
        strategies: SelectorStrategies,
        text: str,
        name: Optional[str] = None,
        clear: bool = False,
        delay: Optional[float] = None,
        timeout: Optional[int] = None,
    ) -> None:
        """
        Type text into an input, optionally clearing it first.

        Args:
            strategies: Selector strategies of the input
            text: Text to type
            name: Human-readable element name
            clear: Clear existing content before typing
            delay: Delay between keystrokes in milliseconds
            timeout: Resolution budget in milliseconds
        """
        label = name or strategies.describe()
        shown = "*" * len(text) if "password" in label.lower() else text
        with allure.step(f"Type into {label}: {shown}"):
            element = await self.locate(strategies, timeout, name)
            if clear:
                await element.handle.clear()
            if delay is None:
                await element.handle.fill(text)
            else:
                await element.handle.press_sequentially(text, delay=delay)

    async def get_element_text(
        self,
        strategies: SelectorStrategies,
        name: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> Optional[str]:
        element = await self.locate(strategies, timeout, name)
        return await element.handle.text_content()

    async def get_element_attribute(
        self,
        strategies: SelectorStrategies,
        attribute: str,
        name: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> Optional[str]:
        element = await self.locate(strategies, timeout, name)
        return await element.handle.get_attribute(attribute)

    async def is_element_visible(
        self,
        strategies: SelectorStrategies,
        name: Optional[str] = None,
        timeout: int = EXISTS_TIMEOUT_MS,
    ) -> bool:
        """True if the element resolves (i.e. is visible) within `timeout`."""
        return await self.resolver.exists(strategies, timeout, name)

    async def is_element_enabled(
        self,
        strategies: SelectorStrategies,
        name: Optional[str] = None,
        timeout: int = EXISTS_TIMEOUT_MS,
    ) -> bool:
        try:
            element = await self.locate(strategies, timeout, name)
        except ElementNotFoundError:
            return False
        return await element.handle.is_enabled()

    async def hover_element(self, strategies: SelectorStrategies, name: Optional[str] = None) -> None:
        element = await self.locate(strategies, name=name)
        await element.handle.hover()

    async def select_option(
        self,
        strategies: SelectorStrategies,
        value: Optional[str] = None,
        label: Optional[str] = None,
        index: Optional[int] = None,
        name: Optional[str] = None,
    ) -> List[str]:
        """
        Select an option from a dropdown by value, label or index.

        Raises:
            ValidationError: When no selection criterion is given
        """
        if value is None and label is None and index is None:
            raise ValidationError("select_option", "one of value, label or index is required",
                                  context=self.config.name)
        element = await self.locate(strategies, name=name)
        if value is not None:
            return await element.handle.select_option(value=value)
        if label is not None:
            return await element.handle.select_option(label=label)
        return await element.handle.select_option(index=index)

    async def fill_form(
        self,
        form_data: Mapping[str, Union[str, bool]],
        field_mappings: Mapping[str, SelectorStrategies],
    ) -> None:
        """
        Fill several fields at once.

        String values are filled, booleans set checkbox state.

        Raises:
            ValidationError: A field has no selector mapping
        """
        self.log.bind(fields=list(form_data)).info("Filling form")
        for field_name, value in form_data.items():
            if field_name not in field_mappings:
                raise ValidationError(field_name, "no selector mapping for form field",
                                      context=self.config.name)
            element = await self.locate(field_mappings[field_name], name=field_name)
            if isinstance(value, bool):
                await element.handle.set_checked(value)
            else:
                await element.handle.fill(value)

    # =========================================================================
    # Wait Utilities
    # =========================================================================

    async def wait_for_visible(
        self,
        strategies: SelectorStrategies,
        name: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> ResolvedElement:
        return await self.resolver.wait_for_state(
            strategies, ElementState.VISIBLE, timeout or self.default_timeout, name
        )

    async def wait_for_hidden(
        self,
        strategies: SelectorStrategies,
        name: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> ResolvedElement:
        return await self.resolver.wait_for_state(
            strategies, ElementState.HIDDEN, timeout or self.default_timeout, name
        )

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def capture_screenshot(self, name: str, attach_to_allure: bool = True) -> Path:
        return await self.media_capture.take_screenshot(name, attach_to_allure=attach_to_allure)

    async def capture_failure(self, test_name: str) -> None:
        """
        Capture debugging information on test failure.

        Saves:
            - Screenshot
            - Current URL
            - Locator health report
        """
        with allure.step("Capture failure details"):
            await self.capture_screenshot(f"failure_{test_name}")
            attach_text(self.page.url, name="Current URL")
            attach_text(self.get_locator_health_report(), name="Locator Health")

    def get_locator_health_report(self) -> str:
        """Get self-healing locator health report."""
        return self.resolver.get_health_report()

    def fallback_summary(self) -> Dict[str, str]:
        """Element name -> strategy that replaced the primary one."""
        return {
            name: health.fallback_strategy.value
            for name, health in self.resolver.fallback_usage.items()
        }


__all__ = [
    "BasePage",
    "PageConfig",
]
