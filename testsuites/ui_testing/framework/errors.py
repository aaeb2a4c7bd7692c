"""
================================================================================
Framework Errors
================================================================================

Typed failures raised by the UI automation framework.

Taxonomy:
    - ConfigurationError: caller/config bug (e.g. strategy set with no
      usable selectors); never retried
    - ElementNotFoundError: every locator strategy was exhausted
    - StateTimeoutError: the element resolved but never reached the
      requested state (subclass of ElementNotFoundError)

Every error carries a machine-readable `code`, a `details` payload and an
optional `context` (usually the page object name).

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Sequence


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    ELEMENT_NOT_FOUND = "ELEMENT_NOT_FOUND"
    STATE_TIMEOUT = "STATE_TIMEOUT"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    PAGE_LOAD_TIMEOUT = "PAGE_LOAD_TIMEOUT"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    PERFORMANCE_THRESHOLD_EXCEEDED = "PERFORMANCE_THRESHOLD_EXCEEDED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"


class FrameworkError(Exception):
    """Base class for all framework errors."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        context: Optional[str] = None,
        code: Optional[ErrorCode] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})
        self.context = context
        self.timestamp = datetime.now()
        if code is not None:
            self.code = code

    def to_dict(self) -> Dict[str, Any]:
        """Serializable payload for logs and report attachments."""
        return {
            "name": type(self).__name__,
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def formatted_message(self) -> str:
        """`CODE [context]: message Details: {...}`"""
        context_str = f" [{self.context}]" if self.context else ""
        details_str = f" Details: {self.details}" if self.details else ""
        return f"{self.code.value}{context_str}: {self.message}{details_str}"


class ConfigurationError(FrameworkError):
    """Raised for caller or configuration mistakes (fix at the call site)."""

    code = ErrorCode.CONFIGURATION_ERROR


class ElementNotFoundError(FrameworkError):
    """
    Raised when all locator strategies fail to find an element.

    Attributes:
        strategies: The full SelectorStrategies that was tried
        timeout: Overall timeout budget in milliseconds
        attempt_count: Number of strategies attempted
        attempts: Per-strategy ResolutionAttempt records
    """

    code = ErrorCode.ELEMENT_NOT_FOUND

    def __init__(
        self,
        strategies: Any,
        timeout: int,
        attempts: Sequence[Any] = (),
        context: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.strategies = strategies
        self.timeout = timeout
        self.attempts = tuple(attempts)
        self.attempt_count = len(self.attempts)
        super().__init__(
            message or self._build_message(),
            details={
                "strategies": strategies.as_dict(),
                "timeout": timeout,
                "attempt_count": self.attempt_count,
                "attempts": [
                    {
                        "strategy": a.strategy.value,
                        "selector": a.selector,
                        "ordinal": a.ordinal,
                        "elapsed_ms": a.elapsed_ms,
                        "reason": a.reason,
                    }
                    for a in self.attempts
                ],
            },
            context=context,
        )

    def _build_message(self) -> str:
        lines = [
            f"Element not found after {self.attempt_count} attempt(s) "
            f"within {self.timeout}ms. Tried in order:"
        ]
        for attempt in self.attempts:
            lines.append(
                f"  {attempt.ordinal}. {attempt.strategy.value}={attempt.selector!r}"
                f" -> {attempt.reason or 'failed'}"
            )
        return "\n".join(lines)


class StateTimeoutError(ElementNotFoundError):
    """
    Raised when a resolved element never reaches the requested condition.

    The element existed (it resolved), so this is distinct from a plain
    not-found failure, but it still satisfies `except ElementNotFoundError`.
    """

    code = ErrorCode.STATE_TIMEOUT

    def __init__(
        self,
        strategies: Any,
        state: str,
        timeout: int,
        strategy: Any = None,
        attempts: Sequence[Any] = (),
        context: Optional[str] = None,
        reason: str = "",
    ):
        self.state = state
        self.strategy = strategy
        strategy_name = getattr(strategy, "value", strategy)
        message = (
            f"Element resolved via {strategy_name} but did not become "
            f"'{state}' within {timeout}ms ({strategies.describe()})"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(strategies, timeout, attempts=attempts, context=context, message=message)
        self.details["state"] = state
        self.details["strategy"] = strategy_name


class PageLoadTimeoutError(FrameworkError):
    code = ErrorCode.PAGE_LOAD_TIMEOUT

    def __init__(self, url: str, timeout: int, details: Optional[Dict[str, Any]] = None,
                 context: Optional[str] = None):
        super().__init__(f"Page load timeout after {timeout}ms: {url}", details, context)


class AuthenticationFailedError(FrameworkError):
    code = ErrorCode.AUTHENTICATION_FAILED

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None,
                 context: Optional[str] = None):
        super().__init__(f"Authentication failed: {reason}", details, context)


class PerformanceThresholdExceededError(FrameworkError):
    code = ErrorCode.PERFORMANCE_THRESHOLD_EXCEEDED

    def __init__(self, metric: str, actual: float, threshold: float,
                 details: Optional[Dict[str, Any]] = None, context: Optional[str] = None):
        payload = {"metric": metric, "actual": actual, "threshold": threshold, **(details or {})}
        super().__init__(
            f"Performance threshold exceeded: {metric} ({actual} > {threshold})",
            payload,
            context,
        )


class ValidationError(FrameworkError):
    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, field: str, reason: str, details: Optional[Dict[str, Any]] = None,
                 context: Optional[str] = None):
        super().__init__(f"Validation failed for {field}: {reason}", details, context)


class ErrorHandler:
    """Classification helpers for framework errors."""

    RETRYABLE_CODES = frozenset({
        ErrorCode.NETWORK_ERROR,
        ErrorCode.PAGE_LOAD_TIMEOUT,
        ErrorCode.TIMEOUT_ERROR,
    })

    SEVERITY_BY_CODE: Dict[ErrorCode, str] = {
        ErrorCode.AUTHENTICATION_FAILED: "critical",
        ErrorCode.CONFIGURATION_ERROR: "critical",
        ErrorCode.PERFORMANCE_THRESHOLD_EXCEEDED: "high",
        ErrorCode.ELEMENT_NOT_FOUND: "medium",
        ErrorCode.STATE_TIMEOUT: "medium",
        ErrorCode.PAGE_LOAD_TIMEOUT: "medium",
        ErrorCode.VALIDATION_ERROR: "medium",
    }

    @classmethod
    def is_retryable(cls, error: FrameworkError) -> bool:
        return error.code in cls.RETRYABLE_CODES

    @classmethod
    def get_severity(cls, error: FrameworkError) -> str:
        return cls.SEVERITY_BY_CODE.get(error.code, "low")

    @staticmethod
    def wrap(error: Exception, context: Optional[str] = None) -> FrameworkError:
        """
        Convert a foreign exception into a FrameworkError.

        Framework errors pass through (gaining `context` if they had none);
        others are classified by their message.
        """
        if isinstance(error, FrameworkError):
            if context and not error.context:
                error.context = context
            return error

        text = str(error)
        lowered = text.lower()
        details = {"original_error": text, "original_type": type(error).__name__}
        if "timeout" in lowered:
            code = ErrorCode.TIMEOUT_ERROR
        elif "net::" in lowered or "network" in lowered:
            code = ErrorCode.NETWORK_ERROR
        elif "authentication" in lowered:
            code = ErrorCode.AUTHENTICATION_FAILED
        else:
            code = ErrorCode.VALIDATION_ERROR
        return FrameworkError(text, details=details, context=context, code=code)


__all__ = [
    "AuthenticationFailedError",
    "ConfigurationError",
    "ElementNotFoundError",
    "ErrorCode",
    "ErrorHandler",
    "FrameworkError",
    "PageLoadTimeoutError",
    "PerformanceThresholdExceededError",
    "StateTimeoutError",
    "ValidationError",
]
