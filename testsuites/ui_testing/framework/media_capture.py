"""
================================================================================
Media Capture
================================================================================

Timestamped screenshots saved to disk and attached to Allure.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Any, Union

from playwright.async_api import Page

from webtest_tools.report_tools import attach_png


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


class MediaCapture:
    """Screenshot capture for a single page."""

    def __init__(
        self,
        page: Page,
        log: Any,
        directory: Union[str, Path] = Path("test-results") / "screenshots",
        full_page: bool = True,
    ):
        self.page = page
        self.log = log
        self.directory = Path(directory)
        self.full_page = full_page

    def _build_path(self, name: str) -> Path:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        safe_name = _UNSAFE_CHARS.sub("_", name).strip("_") or "screenshot"
        return self.directory / f"{safe_name}_{timestamp}.png"

    async def take_screenshot(self, name: str, attach_to_allure: bool = True) -> Path:
        """
        Save a screenshot and optionally attach it to Allure.

        Args:
            name: Screenshot name (without extension)
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        filepath = self._build_path(name)

        png = await self.page.screenshot(path=str(filepath), full_page=self.full_page)
        if attach_to_allure:
            attach_png(png, name=name)

        self.log.info(f"Screenshot captured: {filepath}")
        return filepath


__all__ = [
    "MediaCapture",
]
