"""
Fixtures for browser-free framework tests.

`FakeSession` implements the BrowserSession capability over an in-memory
element table. Elements can appear, disappear or attach at fixed offsets
(in ms) from the moment the session was created, and every call the
resolver makes is recorded in `calls`.
"""

from __future__ import annotations

import asyncio
import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pytest
from loguru import logger

from testsuites.ui_testing.framework.browser_session import ElementState
from testsuites.ui_testing.framework.config_loader import ConfigLoader
from testsuites.ui_testing.framework.selector_strategies import SelectorKind
from webtest_tools.common import default_logger_factory


@dataclass
class FakeElement:
    visible_from_ms: Optional[int] = 0
    hidden_from_ms: Optional[int] = None
    attached_from_ms: int = 0
    enabled: bool = True
    text: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    matches: int = 1
    count_error: Optional[Exception] = None

    def is_visible(self, now_ms: int) -> bool:
        if self.visible_from_ms is None or now_ms < self.visible_from_ms:
            return False
        return self.hidden_from_ms is None or now_ms < self.hidden_from_ms

    def is_attached(self, now_ms: int) -> bool:
        return now_ms >= self.attached_from_ms


@dataclass(frozen=True)
class FakeHandle:
    kind: SelectorKind
    value: str
    element: Optional[FakeElement]
    index: Optional[int] = None


class FakeSession:
    """
    In-memory BrowserSession.

    Args:
        fail_fast: Fail waits on unknown selectors immediately instead of
            sleeping out the timeout
    """

    poll_interval = 0.005

    def __init__(self, fail_fast: bool = False):
        self.fail_fast = fail_fast
        self.elements: Dict[Tuple[SelectorKind, str], FakeElement] = {}
        self.calls: List[Tuple[Any, ...]] = []
        self.pauses: List[int] = []
        self._started = time.monotonic()

    def add(self, kind: SelectorKind, value: str, **kwargs: Any) -> FakeElement:
        element = FakeElement(**kwargs)
        self.elements[(kind, value)] = element
        return element

    def now_ms(self) -> int:
        return int((time.monotonic() - self._started) * 1000)

    def wait_timeouts(self) -> List[int]:
        return [call[4] for call in self.calls if call[0] == "wait_for_state"]

    def located(self) -> List[Tuple[SelectorKind, str]]:
        return [(call[1], call[2]) for call in self.calls if call[0] == "locate"]

    # BrowserSession -----------------------------------------------------------

    def locate(self, kind: SelectorKind, value: str) -> FakeHandle:
        self.calls.append(("locate", kind, value))
        return FakeHandle(kind, value, self.elements.get((kind, value)))

    async def _poll(self, handle: FakeHandle, predicate, timeout: int, what: str) -> None:
        if handle.element is None and self.fail_fast:
            raise TimeoutError(f"No element matches {handle.kind.value}={handle.value!r}")

        deadline = time.monotonic() + timeout / 1000
        while not predicate():
            if time.monotonic() >= deadline:
                raise TimeoutError(f"Timeout {timeout}ms exceeded waiting for {what}")
            await asyncio.sleep(self.poll_interval)

    async def wait_for_state(self, handle: FakeHandle, state: ElementState, timeout: int) -> None:
        self.calls.append(("wait_for_state", handle.kind, handle.value, state, timeout))
        element = handle.element
        predicates = {
            ElementState.VISIBLE: lambda: element is not None and element.is_visible(self.now_ms()),
            ElementState.HIDDEN: lambda: element is None or not element.is_visible(self.now_ms()),
            ElementState.ENABLED: lambda: element is not None and element.enabled,
            ElementState.DISABLED: lambda: element is not None and not element.enabled,
        }
        if state not in predicates:
            raise ValueError(f"State cannot be asserted directly: {state}")
        await self._poll(handle, predicates[state], timeout, f"{handle.value} to be {state.value}")

    async def wait_attached(self, handle: FakeHandle, timeout: int) -> None:
        self.calls.append(("wait_attached", handle.kind, handle.value, timeout))
        element = handle.element
        await self._poll(
            handle,
            lambda: element is not None and element.is_attached(self.now_ms()),
            timeout,
            f"{handle.value} to be attached",
        )

    async def expect_text(self, handle: FakeHandle, expected: str, timeout: int, exact: bool = False) -> None:
        element = handle.element
        if exact:
            await self._poll(handle, lambda: element.text.strip() == expected, timeout, f"text == {expected!r}")
        else:
            await self._poll(handle, lambda: expected in element.text, timeout, f"text {expected!r}")

    async def expect_attribute(self, handle: FakeHandle, name: str, value: str, timeout: int) -> None:
        element = handle.element
        await self._poll(
            handle,
            lambda: element.attributes.get(name) == value,
            timeout,
            f"{name}={value!r}",
        )

    async def expect_class(self, handle: FakeHandle, pattern: str, timeout: int) -> None:
        element = handle.element
        await self._poll(
            handle,
            lambda: re.search(pattern, element.attributes.get("class", "")) is not None,
            timeout,
            f"class {pattern!r}",
        )

    async def count(self, handle: FakeHandle) -> int:
        self.calls.append(("count", handle.kind, handle.value))
        element = handle.element
        if element is None:
            return 0
        if element.count_error is not None:
            raise element.count_error
        return element.matches if element.is_attached(self.now_ms()) else 0

    def nth(self, handle: FakeHandle, index: int) -> FakeHandle:
        return FakeHandle(handle.kind, handle.value, handle.element, index)

    async def pause(self, delay_ms: int) -> None:
        self.pauses.append(delay_ms)
        await asyncio.sleep(delay_ms / 1000)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def fast_session() -> FakeSession:
    return FakeSession(fail_fast=True)


@pytest.fixture
def log_records():
    """Collect Loguru records emitted during the test."""
    default_logger_factory()
    records: List[Dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG", format="{message}")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def isolated_config(monkeypatch):
    """Fresh ConfigLoader singleton with UI_* overrides cleared."""
    for name in ("UI_BASE_URL", "UI_BROWSER", "UI_HEADLESS", "UI_DEFAULT_TIMEOUT", "UI_TEST_ID_ATTRIBUTE"):
        monkeypatch.delenv(name, raising=False)
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()
