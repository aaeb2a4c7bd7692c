"""
================================================================================
Browser Manager
================================================================================

Owns the Playwright driver and one browser for a test (or a run).

Features:
    - chromium / firefox / webkit chosen from FrameworkSettings
    - A fresh isolated context per page, with the framework default timeout
    - Storage-state persistence, so a logged-in session can be reused by
      later contexts instead of logging in through the UI again

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from webtest_tools.common import LoggerFactory, default_logger_factory

from .config_loader import FrameworkSettings
from .errors import ConfigurationError


# Where a logged-in session is persisted between contexts
STORAGE_STATE_FILE = Path("test-results") / ".auth" / "storage_state.json"

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")

CONTEXT_DEFAULTS: Dict[str, Any] = {
    "viewport": {"width": 1920, "height": 1080},
    "ignore_https_errors": True,
}


class BrowserManager:
    """
    Browser lifecycle for UI tests.

    Usage:
        async with BrowserManager(settings) as manager:
            page = await manager.new_page()

        # Reuse a login captured earlier with save_storage_state()
        async with BrowserManager(settings) as manager:
            page = await manager.new_page(with_storage_state=True)
    """

    def __init__(
        self,
        settings: Optional[FrameworkSettings] = None,
        storage_state_file: Union[str, Path] = STORAGE_STATE_FILE,
        logger_factory: Optional[LoggerFactory] = None,
    ):
        """
        Args:
            settings: Browser type, headless flag and default timeout
            storage_state_file: Location of the persisted storage state
            logger_factory: Factory for the manager's bound logger

        Raises:
            ConfigurationError: Unsupported browser type
        """
        self.settings = settings or FrameworkSettings()
        if self.settings.browser not in SUPPORTED_BROWSERS:
            raise ConfigurationError(
                f"Unsupported browser: {self.settings.browser}",
                details={"supported": list(SUPPORTED_BROWSERS)},
            )
        self.storage_state_file = Path(storage_state_file)
        factory = logger_factory or default_logger_factory()
        self.log = factory.get("BrowserManager", browser=self.settings.browser)

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser

    @property
    def has_storage_state(self) -> bool:
        return self.storage_state_file.is_file()

    async def start(self) -> None:
        """Start the Playwright driver and launch the configured browser."""
        self._playwright = await async_playwright().start()
        launcher = getattr(self._playwright, self.settings.browser)
        self._browser = await launcher.launch(headless=self.settings.headless)
        self.log.bind(headless=self.settings.headless).debug("Browser started")

    async def close(self) -> None:
        """Close every context this manager opened, then the browser and driver."""
        while self._contexts:
            context = self._contexts.pop()
            try:
                await context.close()
            except Exception as e:
                self.log.bind(error=str(e)).debug("Context already closed")

        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        self.log.debug("Browser closed")

    async def new_context(self, with_storage_state: bool = False, **options: Any) -> BrowserContext:
        """
        Open an isolated browser context.

        Args:
            with_storage_state: Load the persisted storage state, if one exists
            **options: Extra Playwright context options

        Raises:
            RuntimeError: start() was not called
        """
        if self._browser is None:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {**CONTEXT_DEFAULTS, **options}
        if with_storage_state and self.has_storage_state:
            context_options["storage_state"] = str(self.storage_state_file)
            self.log.bind(path=str(self.storage_state_file)).debug("Restoring storage state")

        context = await self._browser.new_context(**context_options)
        context.set_default_timeout(self.settings.default_timeout_ms)
        self._contexts.append(context)
        return context

    async def new_page(self, with_storage_state: bool = False, **options: Any) -> Page:
        """Open a page in its own new context."""
        context = await self.new_context(with_storage_state=with_storage_state, **options)
        return await context.new_page()

    async def save_storage_state(self, context: BrowserContext) -> Path:
        """Persist cookies and localStorage of `context` for later contexts."""
        self.storage_state_file.parent.mkdir(parents=True, exist_ok=True)
        await context.storage_state(path=str(self.storage_state_file))
        self.log.bind(path=str(self.storage_state_file)).info("Storage state saved")
        return self.storage_state_file

    async def page_with_session(
        self,
        login: Callable[[Page], Awaitable[None]],
        protected_path: str,
    ) -> Page:
        """
        Return a page already past the login screen.

        The persisted storage state is tried first; if `protected_path` still
        redirects away, `login` runs on the page and the fresh state is saved.

        Args:
            login: Coroutine performing a UI login on the given page
            protected_path: Path only reachable when logged in
        """
        page = await self.new_page(with_storage_state=True)
        await page.goto(f"{self.settings.base_url}{protected_path}")

        if protected_path in page.url:
            self.log.info("Reused persisted session")
            return page

        self.log.info("No reusable session, logging in")
        await login(page)
        await self.save_storage_state(page.context)
        return page


__all__ = [
    "BrowserManager",
    "STORAGE_STATE_FILE",
    "SUPPORTED_BROWSERS",
]
