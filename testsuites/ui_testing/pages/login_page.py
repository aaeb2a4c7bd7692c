"""
================================================================================
SauceDemo Login Page Object (Async / Playwright)
================================================================================

Login form of https://www.saucedemo.com.

Every element is declared as a SelectorStrategies set (test id first, XPath
last) and resolved through the self-healing ElementResolver.

================================================================================
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import List, Optional

import allure

from testsuites.ui_testing.framework.errors import AuthenticationFailedError
from testsuites.ui_testing.framework.page_base import BasePage, PageConfig
from testsuites.ui_testing.framework.selector_strategies import SelectorStrategies
from webtest_tools.report_tools import attach_error


LOGIN_PAGE = PageConfig(name="SauceDemoLoginPage", path="/")

INVENTORY_PATH = "/inventory.html"


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str


@dataclass
class LoginResult:
    """Outcome of a login attempt."""

    success: bool
    redirect_url: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class PageValidation:
    is_valid: bool
    missing_elements: List[str] = field(default_factory=list)


class SauceDemoLoginPage(BasePage):
    """SauceDemo login page object (async)."""

    USERNAME_FIELD = SelectorStrategies(
        test_id="username",
        dom_id="user-name",
        css="#user-name",
        xpath='//input[@id="user-name"]',
    )
    PASSWORD_FIELD = SelectorStrategies(
        test_id="password",
        dom_id="password",
        css="#password",
        xpath='//input[@id="password"]',
    )
    LOGIN_BUTTON = SelectorStrategies(
        test_id="login-button",
        dom_id="login-button",
        css="#login-button",
        xpath='//input[@id="login-button"]',
    )
    ERROR_MESSAGE = SelectorStrategies(
        test_id="error",
        css='[data-test="error"]',
        xpath='//h3[@data-test="error"]',
    )
    ERROR_BUTTON = SelectorStrategies(
        test_id="error-button",
        css=".error-button",
        xpath='//button[contains(@class, "error-button")]',
    )
    LOGIN_CONTAINER = SelectorStrategies(
        css=".login_container",
        xpath='//div[@class="login_container"]',
    )
    LOGIN_LOGO = SelectorStrategies(
        css=".login_logo",
        text="Swag Labs",
        xpath='//div[@class="login_logo"]',
    )

    def __init__(self, page, config: PageConfig = LOGIN_PAGE, **kwargs):
        super().__init__(page, config, **kwargs)

    @allure.step("Open SauceDemo login page")
    async def open(self) -> "SauceDemoLoginPage":
        await self.navigate()
        await self.wait_for_page_to_load()
        return self

    async def wait_for_page_to_load(self) -> None:
        self.log.debug("Waiting for login page to load")
        await self.wait_for_visible(self.LOGIN_CONTAINER, name="login container")
        await self.wait_for_visible(self.USERNAME_FIELD, name="username field")
        await self.wait_for_visible(self.PASSWORD_FIELD, name="password field")
        await self.wait_for_visible(self.LOGIN_BUTTON, name="login button")

    @allure.step("Login to SauceDemo")
    async def login(self, credentials: Credentials, result_timeout: int = 10000) -> LoginResult:
        """
        Fill and submit the login form, then wait for the outcome.

        Args:
            credentials: Username and password
            result_timeout: How long to wait for redirect or error (ms)

        Returns:
            LoginResult with either the redirect URL or the displayed error

        Raises:
            AuthenticationFailedError: The form could not be used, or neither
                a redirect nor an error appeared in time
        """
        self.log.bind(username=credentials.username).info("Attempting login")

        try:
            await self.wait_for_page_to_load()
            await self.type_text(self.USERNAME_FIELD, credentials.username, name="username", clear=True)
            await self.type_text(self.PASSWORD_FIELD, credentials.password, name="password", clear=True)
            await self.click_element(self.LOGIN_BUTTON, name="login button")
            return await self._wait_for_login_result(result_timeout)
        except AuthenticationFailedError:
            raise
        except Exception as e:
            self.log.bind(username=credentials.username, error=str(e)).error("Login failed")
            attach_error(e, name="Login Error")
            await self.capture_screenshot(f"login-failure-{credentials.username}")
            raise AuthenticationFailedError(
                "SauceDemo login failed",
                details={"username": credentials.username, "error": str(e)},
                context=self.config.name,
            ) from e

    async def _wait_for_login_result(self, timeout: int) -> LoginResult:
        deadline = time.monotonic() + timeout / 1000

        while time.monotonic() < deadline:
            if INVENTORY_PATH in self.page.url:
                self.log.info("Login successful")
                return LoginResult(success=True, redirect_url=self.page.url)

            error_message = await self.get_error_message(timeout=500)
            if error_message:
                self.log.bind(error=error_message).warning("Login rejected")
                return LoginResult(success=False, error_message=error_message)

            await asyncio.sleep(0.25)

        raise AuthenticationFailedError(
            "login result timeout",
            details={"timeout": timeout},
            context=self.config.name,
        )

    async def get_error_message(self, timeout: int = 2000) -> Optional[str]:
        """Return the displayed error text, or None when no error is shown."""
        if not await self.is_element_visible(self.ERROR_MESSAGE, name="error message", timeout=timeout):
            return None
        text = await self.get_element_text(self.ERROR_MESSAGE, name="error message", timeout=timeout)
        return (text or "").strip() or None

    async def clear_error_message(self) -> None:
        """Dismiss the error banner if present."""
        if await self.is_element_visible(self.ERROR_BUTTON, name="error close button", timeout=2000):
            await self.click_element(self.ERROR_BUTTON, name="error close button")
            self.log.debug("Error message cleared")

    async def is_displayed(self) -> bool:
        return await self.is_element_visible(self.LOGIN_CONTAINER, name="login container")

    async def is_logo_displayed(self) -> bool:
        return await self.is_element_visible(self.LOGIN_LOGO, name="login logo")

    async def get_accepted_usernames(self) -> List[str]:
        """Usernames listed on the login page helper panel."""
        text = await self.page.locator("#login_credentials").text_content() or ""
        return [
            line.strip()
            for line in text.splitlines()
            if line.strip() and "Accepted usernames" not in line
        ]

    async def validate_page_elements(self) -> PageValidation:
        """Check every login page element is visible."""
        elements = {
            "Username Field": self.USERNAME_FIELD,
            "Password Field": self.PASSWORD_FIELD,
            "Login Button": self.LOGIN_BUTTON,
            "Login Container": self.LOGIN_CONTAINER,
            "Logo": self.LOGIN_LOGO,
        }
        missing = [
            label
            for label, strategies in elements.items()
            if not await self.is_element_visible(strategies, name=label)
        ]
        return PageValidation(is_valid=not missing, missing_elements=missing)


__all__ = [
    "Credentials",
    "LOGIN_PAGE",
    "LoginResult",
    "PageValidation",
    "SauceDemoLoginPage",
]
