"""
================================================================================
Browser Session Capability
================================================================================

The narrow interface the element resolver needs from a browser:

    - materialize a (lazy) handle for a selector kind + value
    - wait, bounded by a timeout, for a handle to reach a state
    - count matches / pick the n-th match
    - pause for a fixed delay

`PlaywrightSession` implements it on top of a Playwright async `Page`.
Anything else honouring `BrowserSession` (e.g. an in-memory fake in unit
tests) can be handed to the resolver instead.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Protocol

from playwright.async_api import Locator, Page, expect

from .selector_strategies import SelectorKind


class ElementState(str, Enum):
    """States an element can be waited into."""

    VISIBLE = "visible"
    HIDDEN = "hidden"
    ENABLED = "enabled"
    DISABLED = "disabled"
    STABLE = "stable"


class BrowserSession(Protocol):
    """Capability consumed by ElementResolver. All waits raise on timeout."""

    def locate(self, kind: SelectorKind, value: str) -> Any:
        ...

    async def wait_for_state(self, handle: Any, state: ElementState, timeout: int) -> None:
        ...

    async def wait_attached(self, handle: Any, timeout: int) -> None:
        ...

    async def expect_text(self, handle: Any, expected: str, timeout: int, exact: bool = False) -> None:
        ...

    async def expect_attribute(self, handle: Any, name: str, value: str, timeout: int) -> None:
        ...

    async def expect_class(self, handle: Any, pattern: str, timeout: int) -> None:
        ...

    async def count(self, handle: Any) -> int:
        ...

    def nth(self, handle: Any, index: int) -> Any:
        ...

    async def pause(self, delay_ms: int) -> None:
        ...


_SIMPLE_ID = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")

# `stable` has no single browser predicate; the resolver composes it
_ASSERTABLE_STATES = frozenset({
    ElementState.VISIBLE,
    ElementState.HIDDEN,
    ElementState.ENABLED,
    ElementState.DISABLED,
})


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class PlaywrightSession:
    """
    BrowserSession backed by a Playwright async Page.

    Usage:
        >>> session = PlaywrightSession(page, test_id_attribute="data-test")
        >>> handle = session.locate(SelectorKind.TEST_ID, "login-button")
        >>> await session.wait_for_state(handle, ElementState.VISIBLE, 5000)
    """

    def __init__(self, page: Page, test_id_attribute: str = "data-testid"):
        """
        Args:
            page: Playwright Page object
            test_id_attribute: Attribute holding stable test ids
                (SauceDemo uses `data-test`)
        """
        self.page = page
        self.test_id_attribute = test_id_attribute

    def locate(self, kind: SelectorKind, value: str) -> Locator:
        if kind is SelectorKind.TEST_ID:
            return self.page.locator(f'[{self.test_id_attribute}="{_quote(value)}"]')
        if kind is SelectorKind.DOM_ID:
            if _SIMPLE_ID.match(value):
                return self.page.locator(f"#{value}")
            return self.page.locator(f'[id="{_quote(value)}"]')
        if kind is SelectorKind.CSS:
            return self.page.locator(value)
        if kind is SelectorKind.ROLE:
            return self.page.get_by_role(value)
        if kind is SelectorKind.TEXT:
            return self.page.get_by_text(value)
        if kind is SelectorKind.XPATH:
            selector = value if value.startswith("xpath=") else f"xpath={value}"
            return self.page.locator(selector)
        raise ValueError(f"Unsupported selector kind: {kind}")

    async def wait_for_state(self, handle: Locator, state: ElementState, timeout: int) -> None:
        if state not in _ASSERTABLE_STATES:
            raise ValueError(f"State cannot be asserted directly: {state}")

        assertion = expect(handle)
        if state is ElementState.VISIBLE:
            await assertion.to_be_visible(timeout=timeout)
        elif state is ElementState.HIDDEN:
            await assertion.to_be_hidden(timeout=timeout)
        elif state is ElementState.ENABLED:
            await assertion.to_be_enabled(timeout=timeout)
        else:
            await assertion.to_be_disabled(timeout=timeout)

    async def wait_attached(self, handle: Locator, timeout: int) -> None:
        await handle.wait_for(state="attached", timeout=timeout)

    async def expect_text(self, handle: Locator, expected: str, timeout: int, exact: bool = False) -> None:
        if exact:
            await expect(handle).to_have_text(expected, timeout=timeout)
        else:
            await expect(handle).to_contain_text(expected, timeout=timeout)

    async def expect_attribute(self, handle: Locator, name: str, value: str, timeout: int) -> None:
        await expect(handle).to_have_attribute(name, value, timeout=timeout)

    async def expect_class(self, handle: Locator, pattern: str, timeout: int) -> None:
        await expect(handle).to_have_class(re.compile(pattern), timeout=timeout)

    async def count(self, handle: Locator) -> int:
        return await handle.count()

    def nth(self, handle: Locator, index: int) -> Locator:
        return handle.nth(index)

    async def pause(self, delay_ms: int) -> None:
        await self.page.wait_for_timeout(delay_ms)


__all__ = [
    "BrowserSession",
    "ElementState",
    "PlaywrightSession",
]
