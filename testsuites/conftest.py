"""
================================================================================
Root Pytest Configuration
================================================================================

Registers the project markers and tags each collected test by the suite
directory it lives in.

================================================================================
"""

import pytest


MARKERS = {
    # Priority
    "P0": "Critical path, must pass before release",
    "P1": "Core functionality",
    "P2": "Edge cases and secondary features",
    "P3": "Extended validation",
    # Test type
    "smoke": "Quick verification tests",
    "regression": "Full regression suite",
    "e2e": "End-to-end user flows",
    # Suite
    "unit": "Framework tests that run without a browser",
    "ui": "Browser-driven tests against SauceDemo",
    # Feature
    "auth": "Login and logout",
    "inventory": "Product inventory and cart",
    "self_healing": "Selector fallback behaviour",
}

SUITE_DIRECTORIES = (("ui_testing", pytest.mark.ui), ("unit", pytest.mark.unit))


def pytest_configure(config):
    for name, description in MARKERS.items():
        config.addinivalue_line("markers", f"{name}: {description}")


def pytest_collection_modifyitems(config, items):
    for item in items:
        path = str(item.fspath)
        for directory, marker in SUITE_DIRECTORIES:
            if directory in path:
                item.add_marker(marker)
                break


def pytest_report_header(config):
    return "Self-Healing UI Automation Framework (SauceDemo)"
