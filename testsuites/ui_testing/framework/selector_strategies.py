"""
================================================================================
Selector Strategy Set
================================================================================

One immutable bag of selectors describing a single logical UI element.

Each field is an independent way of locating the same element. Empty fields
are simply not attempted. The resolution order is the explicit
`STRATEGY_PRIORITY` tuple below rather than the order fields are declared in.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import ConfigurationError


class SelectorKind(str, Enum):
    """Supported locator strategies."""

    TEST_ID = "test_id"
    DOM_ID = "dom_id"
    CSS = "css"
    ROLE = "role"
    TEXT = "text"
    XPATH = "xpath"


# Most stable first; XPath is the most brittle and always tried last
STRATEGY_PRIORITY: Tuple[SelectorKind, ...] = (
    SelectorKind.TEST_ID,
    SelectorKind.DOM_ID,
    SelectorKind.CSS,
    SelectorKind.ROLE,
    SelectorKind.TEXT,
    SelectorKind.XPATH,
)

# Keys accepted by `from_dict` (legacy camelCase selector maps included)
_FIELD_ALIASES: Dict[str, str] = {
    "test_id": "test_id",
    "testId": "test_id",
    "dataTestId": "test_id",
    "data_testid": "test_id",
    "dom_id": "dom_id",
    "domId": "dom_id",
    "id": "dom_id",
    "css": "css",
    "cssPath": "css",
    "xpath": "xpath",
    "text": "text",
    "visibleText": "text",
    "role": "role",
    "accessibilityRole": "role",
}


@dataclass(frozen=True)
class SelectorStrategies:
    """
    Selector definitions for one logical element.

    Attributes:
        test_id: Value of the stable test-id attribute
        dom_id: DOM id (without '#')
        css: CSS selector
        xpath: XPath expression
        text: Visible text
        role: ARIA role
    """

    test_id: Optional[str] = None
    dom_id: Optional[str] = None
    css: Optional[str] = None
    xpath: Optional[str] = None
    text: Optional[str] = None
    role: Optional[str] = None

    @classmethod
    def from_dict(cls, mapping: Mapping[str, Any]) -> "SelectorStrategies":
        """
        Build a strategy set from a plain mapping.

        Scalar values are stringified, so `id: 42` in YAML becomes "42".

        Raises:
            KeyError: On keys that do not name a known strategy
            ConfigurationError: On mapping or sequence values
        """
        values: Dict[str, Optional[str]] = {}
        for key, value in mapping.items():
            if key not in _FIELD_ALIASES:
                raise KeyError(f"Unknown selector strategy: {key}")
            if isinstance(value, (Mapping, list, tuple, set)):
                raise ConfigurationError(
                    f"Selector value for {key!r} must be a scalar",
                    details={"key": key, "type": type(value).__name__},
                )
            values[_FIELD_ALIASES[key]] = None if value is None else str(value)
        return cls(**values)

    def value_of(self, kind: SelectorKind) -> Optional[str]:
        return getattr(self, kind.value)

    def candidates(self) -> List[Tuple[SelectorKind, str]]:
        """Return populated (kind, value) pairs in resolution priority order."""
        pairs = []
        for kind in STRATEGY_PRIORITY:
            value = self.value_of(kind)
            if value is not None and value.strip():
                pairs.append((kind, value))
        return pairs

    def present_kinds(self) -> List[SelectorKind]:
        return [kind for kind, _ in self.candidates()]

    def is_empty(self) -> bool:
        return not self.candidates()

    def as_dict(self) -> Dict[str, str]:
        """Populated strategies keyed by kind name, in priority order."""
        return {kind.value: value for kind, value in self.candidates()}

    def describe(self) -> str:
        """Human-readable summary, e.g. `test_id='login-button', xpath='//button'`."""
        if self.is_empty():
            return "<no strategies>"
        return ", ".join(f"{kind.value}={value!r}" for kind, value in self.candidates())

    def __str__(self) -> str:
        return f"SelectorStrategies({self.describe()})"


__all__ = [
    "STRATEGY_PRIORITY",
    "SelectorKind",
    "SelectorStrategies",
]
