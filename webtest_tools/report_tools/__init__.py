"""Allure attachment helpers."""

from .allure_utils import (
    attach_error,
    attach_json,
    attach_png,
    attach_resolution,
    attach_text,
)

__all__ = [
    "attach_error",
    "attach_json",
    "attach_png",
    "attach_resolution",
    "attach_text",
]
