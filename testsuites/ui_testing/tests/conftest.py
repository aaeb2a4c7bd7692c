"""
================================================================================
UI Testing Pytest Configuration
================================================================================

This module configures pytest for UI tests, providing fixtures for browser
management, page objects, and test setup/teardown.

Key Features:
- Settings and logger factory built once per session and passed explicitly
- Browser and page lifecycle management
- Page Object fixtures for SauceDemo pages
- Screenshot and locator health capture on failure

UI tests drive a real browser against SauceDemo, so they only run when
RUN_UI_TESTS=1 (run_tests.py --suite ui sets it).

================================================================================
"""

import os
from typing import AsyncGenerator, Dict

import pytest
from playwright.async_api import Page

from testsuites.ui_testing.framework.browser_manager import BrowserManager
from testsuites.ui_testing.framework.config_loader import ConfigLoader, FrameworkSettings
from testsuites.ui_testing.pages.inventory_page import INVENTORY_PAGE, SauceDemoInventoryPage
from testsuites.ui_testing.pages.login_page import Credentials, SauceDemoLoginPage
from webtest_tools.common import LoggerFactory


# ================================================================================
# Pytest Configuration
# ================================================================================

def pytest_collection_modifyitems(config, items):
    """Skip browser tests unless explicitly enabled."""
    if os.environ.get("RUN_UI_TESTS", "").lower() in ("1", "true", "yes"):
        return

    skip_ui = pytest.mark.skip(reason="UI tests disabled (set RUN_UI_TESTS=1 to enable)")
    for item in items:
        if "ui_testing" in str(item.fspath):
            item.add_marker(skip_ui)


# ================================================================================
# Session Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def framework_settings() -> FrameworkSettings:
    """Typed settings from config/config.yaml plus environment overrides."""
    return FrameworkSettings.from_loader(ConfigLoader())


@pytest.fixture(scope="session")
def logger_factory() -> LoggerFactory:
    """Single logger factory shared by every page object in the run."""
    return LoggerFactory(base_context={"suite": "ui"})


@pytest.fixture(scope="session")
def credentials() -> Dict[str, Credentials]:
    """SauceDemo accounts keyed by role."""
    config = ConfigLoader()
    password = config.get("credentials.password", "secret_sauce")
    return {
        "standard": Credentials(config.get("credentials.standard_user", "standard_user"), password),
        "locked": Credentials(config.get("credentials.locked_user", "locked_out_user"), password),
        "problem": Credentials(config.get("credentials.problem_user", "problem_user"), password),
        "invalid": Credentials("invalid_user", "wrong_password"),
    }


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture
async def browser_manager(
    framework_settings: FrameworkSettings,
    logger_factory: LoggerFactory,
    tmp_path_factory: pytest.TempPathFactory,
) -> AsyncGenerator[BrowserManager, None]:
    """
    Function-scoped browser manager.

    One browser per test keeps event loops and contexts isolated under
    pytest-asyncio's per-test loop.
    """
    storage_state_file = tmp_path_factory.getbasetemp() / "auth" / "storage_state.json"
    async with BrowserManager(framework_settings, storage_state_file, logger_factory) as manager:
        yield manager


@pytest.fixture
async def page(browser_manager: BrowserManager) -> AsyncGenerator[Page, None]:
    """Fresh page in a new isolated context."""
    page = await browser_manager.new_page()
    yield page
    await page.close()


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(page: Page, framework_settings: FrameworkSettings,
               logger_factory: LoggerFactory) -> SauceDemoLoginPage:
    return SauceDemoLoginPage(page, settings=framework_settings, logger_factory=logger_factory)


@pytest.fixture
def inventory_page(page: Page, framework_settings: FrameworkSettings,
                   logger_factory: LoggerFactory) -> SauceDemoInventoryPage:
    return SauceDemoInventoryPage(page, settings=framework_settings, logger_factory=logger_factory)


@pytest.fixture
async def logged_in_inventory(
    login_page: SauceDemoLoginPage,
    inventory_page: SauceDemoInventoryPage,
    credentials: Dict[str, Credentials],
) -> SauceDemoInventoryPage:
    """Inventory page reached by logging in as the standard user."""
    await login_page.open()
    result = await login_page.login(credentials["standard"])
    assert result.success, result.error_message
    await inventory_page.wait_for_page_to_load()
    return inventory_page


@pytest.fixture
async def session_inventory(
    browser_manager: BrowserManager,
    framework_settings: FrameworkSettings,
    logger_factory: LoggerFactory,
    credentials: Dict[str, Credentials],
) -> SauceDemoInventoryPage:
    """Inventory page reached through the persisted session when one exists."""

    async def login(target: Page) -> None:
        login_page = SauceDemoLoginPage(target, settings=framework_settings, logger_factory=logger_factory)
        await login_page.open()
        result = await login_page.login(credentials["standard"])
        assert result.success, result.error_message

    session_page = await browser_manager.page_with_session(login, INVENTORY_PAGE.path)
    inventory = SauceDemoInventoryPage(session_page, settings=framework_settings, logger_factory=logger_factory)
    await inventory.wait_for_page_to_load()
    return inventory


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Remember each phase's report so async fixtures can see failures."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


@pytest.fixture(autouse=True)
async def capture_on_failure(request, page: Page):
    """
    Attach a screenshot and the locator health report when a UI test fails.

    Depends on `page` so it tears down first, while the page is still open,
    on the test's own event loop.
    """
    yield

    report = getattr(request.node, "rep_call", None)
    if report is None or not report.failed:
        return

    for fixture_name in ("login_page", "inventory_page"):
        page_object = request.node.funcargs.get(fixture_name)
        if page_object is None:
            continue
        try:
            await page_object.capture_failure(request.node.name)
        except Exception as e:
            page_object.log.bind(error=str(e)).warning("Failed to capture failure details")
