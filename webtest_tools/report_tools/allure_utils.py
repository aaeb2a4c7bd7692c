"""
================================================================================
Allure Report Utilities
================================================================================

Helpers for enriching Allure reports with UI automation artifacts.

Features:
- JSON / text / PNG attachment helpers
- Element resolution diagnostics (which strategy won, per-attempt timings)
- Structured framework error payloads

================================================================================
"""

import json
from typing import Any, Iterable, Optional

import allure


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data"):
    """Attach `data` serialized as indented JSON (non-JSON values via str())."""
    allure.attach(json.dumps(data, indent=2, default=str), name=name,
                  attachment_type=allure.attachment_type.JSON)


def attach_text(text: str, name: str = "Text"):
    allure.attach(text, name=name, attachment_type=allure.attachment_type.TEXT)


def attach_png(png: bytes, name: str = "Screenshot"):
    """Attach raw PNG bytes, typically a Playwright screenshot."""
    allure.attach(png, name=name, attachment_type=allure.attachment_type.PNG)


# ================================================================================
# UI Diagnostics
# ================================================================================

def format_attempts(attempts: Iterable[Any]) -> str:
    """
    Render resolution attempts as an aligned text table.

    Each attempt is expected to expose `ordinal`, `strategy`, `selector`,
    `elapsed_ms`, `succeeded` and `reason`.
    """
    lines = ["#  strategy  elapsed   outcome   selector"]
    for attempt in attempts:
        outcome = "ok" if attempt.succeeded else "failed"
        strategy = getattr(attempt.strategy, "value", attempt.strategy)
        lines.append(
            f"{attempt.ordinal:<2} {strategy:<9} {attempt.elapsed_ms:>6}ms  "
            f"{outcome:<8}  {attempt.selector}"
        )
        if attempt.reason:
            lines.append(f"     -> {attempt.reason}")
    return "\n".join(lines)


def attach_resolution(resolved: Any, name: Optional[str] = None):
    """
    Attach the attempt table of a resolved element.

    Args:
        resolved: A ResolvedElement
        name: Attachment name (defaults to the winning strategy)
    """
    strategy = getattr(resolved.strategy, "value", resolved.strategy)
    attach_text(
        format_attempts(resolved.attempts),
        name=name or f"Resolution via {strategy} (attempt {resolved.attempt})",
    )


def attach_error(error: Exception, name: str = "Framework Error"):
    """
    Attach a framework error payload.

    Errors exposing `to_dict()` are attached as JSON, others as plain text.
    """
    to_dict = getattr(error, "to_dict", None)
    if callable(to_dict):
        attach_json(to_dict(), name=name)
    else:
        attach_text(f"{type(error).__name__}: {error}", name=name)
