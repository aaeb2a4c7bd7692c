"""
================================================================================
Performance Monitor
================================================================================

Records page-level performance metrics around navigations:
    - Wall-clock load time measured by the framework
    - Navigation Timing (DOMContentLoaded) and first contentful paint
    - JS heap usage (Chromium only; zeros elsewhere)

Metrics are logged, attached to Allure and can be checked against
configured thresholds.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from playwright.async_api import Page

from webtest_tools.report_tools import attach_json

from .config_loader import PerformanceThresholds
from .errors import PerformanceThresholdExceededError, ValidationError


_COLLECT_METRICS_JS = """
() => {
    const nav = performance.getEntriesByType('navigation')[0];
    const paint = performance.getEntriesByType('paint')
        .find(entry => entry.name === 'first-contentful-paint');
    const memory = performance.memory;
    return {
        domContentLoaded: nav ? nav.domContentLoadedEventEnd - nav.domContentLoadedEventStart : 0,
        firstContentfulPaint: paint ? paint.startTime : 0,
        memory: memory ? {
            usedJSHeapSize: memory.usedJSHeapSize,
            totalJSHeapSize: memory.totalJSHeapSize,
            jsHeapSizeLimit: memory.jsHeapSizeLimit,
        } : null,
        resources: performance.getEntriesByType('resource').map(entry => ({
            url: entry.name,
            initiatorType: entry.initiatorType,
            duration: entry.duration,
            transferSize: entry.transferSize || 0,
        })),
    };
}
"""


@dataclass
class MemoryMetric:
    used_js_heap_size: int = 0
    total_js_heap_size: int = 0
    js_heap_size_limit: int = 0


@dataclass
class PerformanceMetrics:
    """
    Metrics captured for one monitored navigation.

    Attributes:
        page_load_time_ms: Wall-clock time between start and stop
        dom_content_loaded_ms: DOMContentLoaded handler duration
        first_contentful_paint_ms: FCP start time (0 if unavailable)
        memory: JS heap snapshot
        network_requests: Resource timing entries (url, initiator, duration, size)
    """

    page_load_time_ms: int
    dom_content_loaded_ms: float = 0.0
    first_contentful_paint_ms: float = 0.0
    memory: MemoryMetric = field(default_factory=MemoryMetric)
    network_requests: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class PerformanceMonitor:
    """
    Page performance monitor.

    Usage:
        monitor = PerformanceMonitor(page, log)
        monitor.start_monitoring()
        await page.goto(url)
        metrics = await monitor.stop_monitoring()
        monitor.assert_thresholds(settings.thresholds)
    """

    def __init__(self, page: Page, log: Any, context: Optional[str] = None):
        self.page = page
        self.log = log
        self.context = context
        self._started_at: Optional[float] = None
        self._metrics: Optional[PerformanceMetrics] = None

    def start_monitoring(self) -> None:
        self._started_at = time.monotonic()
        self.log.debug("Performance monitoring started")

    async def stop_monitoring(self) -> PerformanceMetrics:
        """
        Stop the clock and collect browser-side metrics.

        Raises:
            ValidationError: If monitoring was never started
        """
        if self._started_at is None:
            raise ValidationError("performance monitor", "stop_monitoring() called before start_monitoring()",
                                  context=self.context)

        page_load_time_ms = int((time.monotonic() - self._started_at) * 1000)
        self._started_at = None

        data = await self.page.evaluate(_COLLECT_METRICS_JS)
        memory = data.get("memory") or {}

        self._metrics = PerformanceMetrics(
            page_load_time_ms=page_load_time_ms,
            dom_content_loaded_ms=data.get("domContentLoaded", 0) or 0,
            first_contentful_paint_ms=data.get("firstContentfulPaint", 0) or 0,
            memory=MemoryMetric(
                used_js_heap_size=memory.get("usedJSHeapSize", 0),
                total_js_heap_size=memory.get("totalJSHeapSize", 0),
                js_heap_size_limit=memory.get("jsHeapSizeLimit", 0),
            ),
            network_requests=[
                {
                    "url": entry.get("url", ""),
                    "initiator_type": entry.get("initiatorType", ""),
                    "duration_ms": entry.get("duration", 0),
                    "transfer_size": entry.get("transferSize", 0),
                }
                for entry in data.get("resources") or []
            ],
        )

        self.log.bind(metrics=self._metrics.to_dict()).info(
            f"Performance monitoring completed: load {page_load_time_ms}ms"
        )
        attach_json(self._metrics.to_dict(), name="Performance Metrics")
        return self._metrics

    @property
    def last_metrics(self) -> Optional[PerformanceMetrics]:
        return self._metrics

    def validate_thresholds(self, thresholds: PerformanceThresholds) -> bool:
        """Return True when the last metrics are within `thresholds` (False if none recorded)."""
        if self._metrics is None:
            return False

        page_load_ok = self._metrics.page_load_time_ms <= thresholds.page_load_time_ms
        memory_ok = self._metrics.memory.used_js_heap_size <= thresholds.memory_usage_bytes

        self.log.bind(
            page_load_ok=page_load_ok,
            memory_ok=memory_ok,
            thresholds=asdict(thresholds),
        ).info("Performance thresholds validation")
        return page_load_ok and memory_ok

    def assert_thresholds(self, thresholds: PerformanceThresholds) -> None:
        """
        Raise on the first exceeded threshold.

        Raises:
            ValidationError: No metrics recorded yet
            PerformanceThresholdExceededError: A metric is over its limit
        """
        if self._metrics is None:
            raise ValidationError("performance metrics", "no navigation has been monitored",
                                  context=self.context)

        if self._metrics.page_load_time_ms > thresholds.page_load_time_ms:
            raise PerformanceThresholdExceededError(
                "page_load_time_ms",
                self._metrics.page_load_time_ms,
                thresholds.page_load_time_ms,
                context=self.context,
            )
        if self._metrics.memory.used_js_heap_size > thresholds.memory_usage_bytes:
            raise PerformanceThresholdExceededError(
                "used_js_heap_size",
                self._metrics.memory.used_js_heap_size,
                thresholds.memory_usage_bytes,
                context=self.context,
            )


__all__ = [
    "MemoryMetric",
    "PerformanceMetrics",
    "PerformanceMonitor",
]
