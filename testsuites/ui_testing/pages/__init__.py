"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for SauceDemo pages.

Each page class encapsulates:
    - SelectorStrategies for its elements
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .inventory_page import CartSummary, Product, SauceDemoInventoryPage
from .login_page import Credentials, LoginResult, SauceDemoLoginPage

__all__ = [
    "CartSummary",
    "Credentials",
    "LoginResult",
    "Product",
    "SauceDemoInventoryPage",
    "SauceDemoLoginPage",
]
