"""
================================================================================
Self-Healing Element Resolver
================================================================================

Resolves one logical element from a SelectorStrategies set:
    - Candidates are the populated strategies in fixed priority order
    - The overall timeout is split evenly across candidates, so one slow
      strategy cannot starve the ones after it
    - The first candidate that becomes visible wins
    - Falling back past the first candidate is logged as a warning, since it
      means the test's primary selector has drifted from the UI

Handles are never cached: every call re-resolves against the live DOM.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from webtest_tools.common import get_logger

from .browser_session import BrowserSession, ElementState
from .errors import ConfigurationError, ElementNotFoundError, StateTimeoutError
from .selector_strategies import SelectorKind, SelectorStrategies


DEFAULT_TIMEOUT_MS = 30000
EXISTS_TIMEOUT_MS = 5000
LOCATE_ALL_POLL_INTERVAL_MS = 250

# Approximation of layout stability: attached, then a fixed grace period.
# Not configurable and not a guarantee that the element stopped moving.
STABLE_SETTLE_DELAY_MS = 1000


@dataclass(frozen=True)
class ResolutionAttempt:
    """Outcome of trying one strategy during a single resolve call."""

    strategy: SelectorKind
    selector: str
    ordinal: int
    elapsed_ms: int
    succeeded: bool
    reason: str = ""


@dataclass(frozen=True)
class ResolvedElement:
    """
    A live element handle plus how it was found.

    Attributes:
        handle: Session handle (a Playwright Locator in production)
        strategy: Strategy kind that produced the handle
        selector: Selector value for that strategy
        attempt: 1-based ordinal of the winning attempt
        attempts: Every attempt made, in order
        elapsed_ms: Total time spent resolving
    """

    handle: Any
    strategy: SelectorKind
    selector: str
    attempt: int
    attempts: Tuple[ResolutionAttempt, ...]
    elapsed_ms: int

    @property
    def used_fallback(self) -> bool:
        return self.attempt > 1


@dataclass
class LocatorHealth:
    """
    Fallback usage for one element, kept for maintenance reports.

    Attributes:
        element_name: Human-readable element name
        primary_strategy: First populated strategy (the one that failed)
        primary_selector: Its selector
        fallback_strategy: Strategy that eventually succeeded
        fallback_selector: Its selector
        attempt: Ordinal of the successful attempt
    """

    element_name: str
    primary_strategy: SelectorKind
    primary_selector: str
    fallback_strategy: SelectorKind
    fallback_selector: str
    attempt: int


def _ms_since(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _summarize(exc: BaseException, limit: int = 200) -> str:
    text = str(exc).strip().splitlines()
    first_line = text[0] if text else ""
    summary = f"{type(exc).__name__}: {first_line}" if first_line else type(exc).__name__
    return summary[:limit]


StateLike = Union[ElementState, str]


class ElementResolver:
    """
    Multi-strategy element resolver.

    Strategy Priority Order:
        1. test id attribute (most stable, recommended)
        2. DOM id
        3. CSS selector
        4. ARIA role
        5. Visible text
        6. XPath (last resort)

    Usage:
        >>> resolver = ElementResolver(PlaywrightSession(page), log)
        >>> login = SelectorStrategies(test_id="login-button", css="#login-button")
        >>> element = await resolver.resolve(login, timeout=10000)
        >>> await element.handle.click()
    """

    def __init__(
        self,
        session: BrowserSession,
        log: Any = None,
        context: Optional[str] = None,
    ):
        """
        Args:
            session: Browser session capability
            log: Bound Loguru logger (from a LoggerFactory)
            context: Owner name attached to raised errors (e.g. page name)
        """
        self.session = session
        self.log = log if log is not None else get_logger("ElementResolver")
        self.context = context
        self._fallback_used: Dict[str, LocatorHealth] = {}

    # =========================================================================
    # Resolution
    # =========================================================================

    def _candidates(
        self,
        strategies: SelectorStrategies,
        name: Optional[str],
    ) -> List[Tuple[SelectorKind, str]]:
        candidates = strategies.candidates()
        if not candidates:
            raise ConfigurationError(
                "Selector strategy set has no usable selectors",
                details={"element": name, "strategies": strategies.as_dict()},
                context=self.context,
            )
        return candidates

    async def resolve(
        self,
        strategies: SelectorStrategies,
        timeout: int = DEFAULT_TIMEOUT_MS,
        name: Optional[str] = None,
    ) -> ResolvedElement:
        """
        Resolve a visible element, trying strategies in priority order.

        Args:
            strategies: Selector strategies for the element
            timeout: Overall budget in milliseconds, split evenly per strategy
            name: Optional human-readable element name for logs

        Returns:
            The first handle that became visible, with diagnostics

        Raises:
            ConfigurationError: No populated strategy, or a non-positive budget
            ElementNotFoundError: Every strategy failed
        """
        candidates = self._candidates(strategies, name)
        if timeout <= 0:
            raise ConfigurationError(
                f"Timeout budget must be positive, got {timeout}",
                details={"element": name, "timeout": timeout},
                context=self.context,
            )

        display_name = name or strategies.describe()
        total = len(candidates)
        per_attempt = max(timeout // total, 1)
        started = time.monotonic()
        attempts: List[ResolutionAttempt] = []

        for ordinal, (kind, selector) in enumerate(candidates, start=1):
            attempt_log = self.log.bind(
                element=display_name,
                strategy=kind.value,
                selector=selector,
                attempt=ordinal,
                total=total,
                timeout=per_attempt,
            )
            attempt_log.debug(f"Trying strategy {ordinal}/{total}: {kind.value}")
            attempt_started = time.monotonic()

            try:
                handle = self.session.locate(kind, selector)
                await self.session.wait_for_state(handle, ElementState.VISIBLE, per_attempt)
            except Exception as e:
                reason = _summarize(e)
                attempts.append(ResolutionAttempt(
                    strategy=kind,
                    selector=selector,
                    ordinal=ordinal,
                    elapsed_ms=_ms_since(attempt_started),
                    succeeded=False,
                    reason=reason,
                ))
                attempt_log.bind(reason=reason).debug(f"Strategy {kind.value} failed")
                continue

            attempts.append(ResolutionAttempt(
                strategy=kind,
                selector=selector,
                ordinal=ordinal,
                elapsed_ms=_ms_since(attempt_started),
                succeeded=True,
            ))
            resolved = ResolvedElement(
                handle=handle,
                strategy=kind,
                selector=selector,
                attempt=ordinal,
                attempts=tuple(attempts),
                elapsed_ms=_ms_since(started),
            )

            if resolved.used_fallback:
                attempt_log.warning(
                    f"⚠️ Element '{display_name}' found using fallback strategy: "
                    f"{kind.value} -> {selector}"
                )
                primary_kind, primary_selector = candidates[0]
                self._fallback_used[display_name] = LocatorHealth(
                    element_name=display_name,
                    primary_strategy=primary_kind,
                    primary_selector=primary_selector,
                    fallback_strategy=kind,
                    fallback_selector=selector,
                    attempt=ordinal,
                )
            else:
                attempt_log.debug(f"✅ Element '{display_name}' found using primary strategy: {kind.value}")

            return resolved

        error = ElementNotFoundError(strategies, timeout, attempts, context=self.context)
        self.log.bind(
            element=display_name,
            strategies=strategies.as_dict(),
            timeout=timeout,
            attempt_count=len(attempts),
        ).error(f"❌ All locators failed for '{display_name}'")
        raise error

    # =========================================================================
    # Condition Waits
    # =========================================================================

    async def _resolve_then(
        self,
        strategies: SelectorStrategies,
        condition: str,
        timeout: int,
        name: Optional[str],
        check: Callable[[Any], Awaitable[None]],
    ) -> ResolvedElement:
        resolved = await self.resolve(strategies, timeout, name)
        log = self.log.bind(
            element=name or strategies.describe(),
            strategy=resolved.strategy.value,
            condition=condition,
            timeout=timeout,
        )
        log.debug(f"Waiting for element condition: {condition}")

        try:
            await check(resolved.handle)
        except Exception as e:
            log.bind(reason=_summarize(e)).error(f"Element never reached condition: {condition}")
            raise StateTimeoutError(
                strategies,
                state=condition,
                timeout=timeout,
                strategy=resolved.strategy,
                attempts=resolved.attempts,
                context=self.context,
                reason=_summarize(e),
            ) from e

        log.debug(f"Element reached condition: {condition}")
        return resolved

    async def wait_for_state(
        self,
        strategies: SelectorStrategies,
        state: StateLike = ElementState.VISIBLE,
        timeout: int = DEFAULT_TIMEOUT_MS,
        name: Optional[str] = None,
    ) -> ResolvedElement:
        """
        Resolve the element, then wait until it reaches `state`.

        `timeout` is used both as the resolution budget and as the bound for
        the state wait. `stable` means attached plus a fixed settle delay.

        Raises:
            ElementNotFoundError: Resolution failed
            StateTimeoutError: Resolved, but the state never held
            ConfigurationError: `state` is not an ElementState value
        """
        try:
            state = ElementState(state)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown element state: {state!r}",
                details={"supported": [s.value for s in ElementState]},
                context=self.context,
            ) from e

        async def check(handle: Any) -> None:
            if state is ElementState.STABLE:
                await self.session.wait_attached(handle, timeout)
            else:
                await self.session.wait_for_state(handle, state, timeout)

        resolved = await self._resolve_then(strategies, state.value, timeout, name, check)
        if state is ElementState.STABLE:
            await self.session.pause(STABLE_SETTLE_DELAY_MS)
        return resolved

    async def wait_for_text(
        self,
        strategies: SelectorStrategies,
        expected: str,
        timeout: int = DEFAULT_TIMEOUT_MS,
        name: Optional[str] = None,
        exact: bool = False,
    ) -> ResolvedElement:
        """Resolve the element, then wait until its text contains (or with `exact`, equals) `expected`."""

        async def check(handle: Any) -> None:
            await self.session.expect_text(handle, expected, timeout, exact=exact)

        condition = f"text {'equals' if exact else 'contains'} {expected!r}"
        return await self._resolve_then(strategies, condition, timeout, name, check)

    async def wait_for_attribute(
        self,
        strategies: SelectorStrategies,
        attribute: str,
        value: str,
        timeout: int = DEFAULT_TIMEOUT_MS,
        name: Optional[str] = None,
    ) -> ResolvedElement:
        """Resolve the element, then wait until `attribute == value`."""

        async def check(handle: Any) -> None:
            await self.session.expect_attribute(handle, attribute, value, timeout)

        return await self._resolve_then(strategies, f"{attribute}={value!r}", timeout, name, check)

    async def wait_for_class(
        self,
        strategies: SelectorStrategies,
        pattern: str,
        timeout: int = DEFAULT_TIMEOUT_MS,
        name: Optional[str] = None,
    ) -> ResolvedElement:
        """Resolve the element, then wait until its class attribute matches the regex `pattern`."""

        async def check(handle: Any) -> None:
            await self.session.expect_class(handle, pattern, timeout)

        return await self._resolve_then(strategies, f"class matches {pattern!r}", timeout, name, check)

    async def wait_for_appear_and_disappear(
        self,
        strategies: SelectorStrategies,
        appear_timeout: int = DEFAULT_TIMEOUT_MS,
        disappear_timeout: int = DEFAULT_TIMEOUT_MS,
        name: Optional[str] = None,
    ) -> None:
        """Wait for a transient element (toast, spinner) to show up and go away."""
        self.log.bind(element=name or strategies.describe()).debug(
            "Waiting for element to appear and then disappear"
        )
        await self.wait_for_state(strategies, ElementState.VISIBLE, appear_timeout, name)
        await self.wait_for_state(strategies, ElementState.HIDDEN, disappear_timeout, name)
        self.log.bind(element=name or strategies.describe()).debug(
            "Element appeared and disappeared successfully"
        )

    # =========================================================================
    # Multi-element and Non-throwing Queries
    # =========================================================================

    async def locate_all(
        self,
        strategies: SelectorStrategies,
        timeout: int = 0,
        name: Optional[str] = None,
    ) -> List[Any]:
        """
        Return every match of the first strategy that matches anything.

        Strategies are tried in priority order; results are never merged
        across strategies. Finding nothing is not an error.

        Args:
            strategies: Selector strategies
            timeout: Polling deadline in milliseconds (0 = single pass)
            name: Optional element name for logs

        Returns:
            Handles for each match, or an empty list
        """
        candidates = self._candidates(strategies, name)
        log = self.log.bind(element=name or strategies.describe())
        deadline = time.monotonic() + max(timeout, 0) / 1000

        while True:
            for kind, selector in candidates:
                try:
                    handle = self.session.locate(kind, selector)
                    count = await self.session.count(handle)
                except Exception as e:
                    log.bind(strategy=kind.value, reason=_summarize(e)).debug(
                        f"Count failed for strategy {kind.value}, skipping"
                    )
                    continue

                if count > 0:
                    log.bind(strategy=kind.value, count=count).debug(
                        f"Found {count} element(s) via {kind.value}"
                    )
                    return [self.session.nth(handle, i) for i in range(count)]

            remaining_ms = int((deadline - time.monotonic()) * 1000)
            if remaining_ms <= 0:
                break
            await self.session.pause(max(min(LOCATE_ALL_POLL_INTERVAL_MS, remaining_ms), 1))

        log.info("No elements found with any strategy")
        return []

    async def exists(
        self,
        strategies: SelectorStrategies,
        timeout: int = EXISTS_TIMEOUT_MS,
        name: Optional[str] = None,
    ) -> bool:
        """True if the element resolves within `timeout`; never raises."""
        try:
            await self.resolve(strategies, timeout, name)
            return True
        except Exception as e:
            self.log.bind(element=name or strategies.describe(), reason=_summarize(e)).debug(
                "Element does not exist"
            )
            return False

    async def get_count(
        self,
        strategies: SelectorStrategies,
        name: Optional[str] = None,
    ) -> int:
        """Number of matches for the first matching strategy; never raises."""
        try:
            return len(await self.locate_all(strategies, name=name))
        except Exception as e:
            self.log.bind(element=name or strategies.describe(), reason=_summarize(e)).debug(
                "Element count unavailable, reporting 0"
            )
            return 0

    # =========================================================================
    # Health Report
    # =========================================================================

    @property
    def fallback_usage(self) -> Dict[str, LocatorHealth]:
        return dict(self._fallback_used)

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Lists elements that needed a fallback strategy (maintenance candidates).
        """
        if not self._fallback_used:
            return "✅ All elements used primary locators. No maintenance needed."

        report_lines = [
            "⚠️ Locator Health Report - Fallbacks Used:",
            "",
            "The following elements used fallback locators.",
            "Consider updating the primary selectors:",
            "",
        ]

        for element_name, health in self._fallback_used.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_strategy.value} -> {health.primary_selector}",
                f"    Used (attempt {health.attempt}): "
                f"{health.fallback_strategy.value} -> {health.fallback_selector}",
                "",
            ])

        return "\n".join(report_lines)


__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "EXISTS_TIMEOUT_MS",
    "STABLE_SETTLE_DELAY_MS",
    "ElementResolver",
    "LocatorHealth",
    "ResolutionAttempt",
    "ResolvedElement",
]
