"""
================================================================================
SauceDemo Inventory Page Object (Async / Playwright)
================================================================================

Product listing shown after a successful login.

Covers:
    - Product list parsing
    - Cart add/remove and badge count
    - Sorting
    - Logout via the side menu

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import allure
from playwright.async_api import Locator

from testsuites.ui_testing.framework.browser_session import ElementState
from testsuites.ui_testing.framework.errors import ValidationError
from testsuites.ui_testing.framework.page_base import BasePage, PageConfig
from testsuites.ui_testing.framework.selector_strategies import SelectorStrategies


INVENTORY_PAGE = PageConfig(name="SauceDemoInventoryPage", path="/inventory.html")

# Sort dropdown option values
SORT_OPTIONS: Dict[str, str] = {
    "az": "Name (A to Z)",
    "za": "Name (Z to A)",
    "lohi": "Price (low to high)",
    "hilo": "Price (high to low)",
}

EXPECTED_PRODUCT_COUNT = 6


@dataclass
class Product:
    name: str
    description: str
    price: str
    image: Optional[str] = None

    @property
    def price_value(self) -> float:
        return float(self.price.replace("$", "").strip() or 0)


@dataclass
class CartSummary:
    item_count: int
    items: List[str] = field(default_factory=list)


class SauceDemoInventoryPage(BasePage):
    """SauceDemo inventory page object (async)."""

    INVENTORY_CONTAINER = SelectorStrategies(
        test_id="inventory-container",
        css=".inventory_container",
        xpath='//div[@data-test="inventory-container"]',
    )
    INVENTORY_LIST = SelectorStrategies(
        test_id="inventory-list",
        css=".inventory_list",
        xpath='//div[@class="inventory_list"]',
    )
    INVENTORY_ITEM = SelectorStrategies(
        test_id="inventory-item",
        css=".inventory_item",
        xpath='//div[@class="inventory_item"]',
    )
    SHOPPING_CART_LINK = SelectorStrategies(
        test_id="shopping-cart-link",
        css=".shopping_cart_link",
        xpath='//a[@class="shopping_cart_link"]',
    )
    SHOPPING_CART_BADGE = SelectorStrategies(
        test_id="shopping-cart-badge",
        css=".shopping_cart_badge",
        xpath='//span[@class="shopping_cart_badge"]',
    )
    SORT_DROPDOWN = SelectorStrategies(
        test_id="product-sort-container",
        css=".product_sort_container",
        xpath='//select[@class="product_sort_container"]',
    )
    MENU_BUTTON = SelectorStrategies(
        dom_id="react-burger-menu-btn",
        css="#react-burger-menu-btn",
        xpath='//button[@id="react-burger-menu-btn"]',
    )
    LOGOUT_LINK = SelectorStrategies(
        test_id="logout-sidebar-link",
        dom_id="logout_sidebar_link",
        css="#logout_sidebar_link",
        text="Logout",
    )
    APP_LOGO = SelectorStrategies(
        css=".app_logo",
        text="Swag Labs",
        xpath='//div[@class="app_logo"]',
    )

    def __init__(self, page, config: PageConfig = INVENTORY_PAGE, **kwargs):
        super().__init__(page, config, **kwargs)

    # =========================================================================
    # Page State
    # =========================================================================

    async def wait_for_page_to_load(self) -> None:
        self.log.debug("Waiting for inventory page to load")
        await self.wait_for_visible(self.INVENTORY_CONTAINER, name="inventory container")
        await self.wait_for_visible(self.INVENTORY_LIST, name="inventory list")
        await self.wait_for_visible(self.SHOPPING_CART_LINK, name="shopping cart")

    async def is_logged_in(self) -> bool:
        return await self.is_element_visible(self.INVENTORY_CONTAINER, name="inventory container")

    async def get_app_title(self) -> str:
        return (await self.get_element_text(self.APP_LOGO, name="app logo") or "").strip()

    # =========================================================================
    # Products
    # =========================================================================

    async def _product_items(self) -> List[Locator]:
        await self.wait_for_visible(self.INVENTORY_LIST, name="inventory list")
        return await self.resolver.locate_all(self.INVENTORY_ITEM, timeout=5000, name="inventory item")

    async def _parse_product(self, item: Locator) -> Product:
        name = await item.locator(".inventory_item_name").text_content() or ""
        description = await item.locator(".inventory_item_desc").text_content() or ""
        price = await item.locator(".inventory_item_price").text_content() or ""
        image = await item.locator("img.inventory_item_img").get_attribute("src")
        return Product(
            name=name.strip(),
            description=description.strip(),
            price=price.strip(),
            image=image,
        )

    @allure.step("Get all products")
    async def get_all_products(self) -> List[Product]:
        products = [await self._parse_product(item) for item in await self._product_items()]
        self.log.bind(count=len(products)).info("Products loaded")
        return products

    async def get_product(self, product_name: str) -> Optional[Product]:
        for product in await self.get_all_products():
            if product.name == product_name:
                return product
        return None

    async def is_product_available(self, product_name: str) -> bool:
        return await self.get_product(product_name) is not None

    async def get_product_names(self) -> List[str]:
        return [product.name for product in await self.get_all_products()]

    async def verify_all_products_displayed(self, expected_count: int = EXPECTED_PRODUCT_COUNT) -> bool:
        count = await self.resolver.get_count(self.INVENTORY_ITEM, name="inventory item")
        if count != expected_count:
            self.log.bind(expected=expected_count, actual=count).warning("Unexpected product count")
        return count == expected_count

    def _product_item(self, product_name: str) -> Locator:
        return self.page.locator(".inventory_item").filter(
            has=self.page.locator(".inventory_item_name", has_text=product_name)
        )

    # =========================================================================
    # Cart
    # =========================================================================

    @allure.step("Add product to cart: {product_name}")
    async def add_product_to_cart(self, product_name: str) -> None:
        self.log.bind(product=product_name).info("Adding product to cart")
        await self._product_item(product_name).locator('button[data-test^="add-to-cart"]').click()

    @allure.step("Remove product from cart: {product_name}")
    async def remove_product_from_cart(self, product_name: str) -> None:
        self.log.bind(product=product_name).info("Removing product from cart")
        await self._product_item(product_name).locator('button[data-test^="remove"]').click()

    async def add_multiple_products_to_cart(self, product_names: List[str]) -> None:
        for product_name in product_names:
            await self.add_product_to_cart(product_name)

    async def get_cart_item_count(self) -> int:
        """Badge count; 0 when the badge is not shown."""
        if not await self.is_element_visible(self.SHOPPING_CART_BADGE, name="cart badge", timeout=1000):
            return 0
        text = await self.get_element_text(self.SHOPPING_CART_BADGE, name="cart badge") or "0"
        return int(text.strip() or 0)

    async def wait_for_cart_count(self, expected: int, timeout: int = 5000) -> None:
        await self.resolver.wait_for_text(
            self.SHOPPING_CART_BADGE, str(expected), timeout=timeout, name="cart badge", exact=True
        )

    async def get_cart_summary(self) -> CartSummary:
        items = []
        for item in await self._product_items():
            if await item.locator('button[data-test^="remove"]').count():
                items.append((await item.locator(".inventory_item_name").text_content() or "").strip())
        return CartSummary(item_count=await self.get_cart_item_count(), items=items)

    @allure.step("Go to cart")
    async def go_to_cart(self) -> None:
        await self.click_element(self.SHOPPING_CART_LINK, name="shopping cart")
        await self.wait_for_url("**/cart.html")

    # =========================================================================
    # Sorting
    # =========================================================================

    @allure.step("Sort products: {option}")
    async def sort_products(self, option: str) -> None:
        """
        Sort the product list.

        Args:
            option: One of 'az', 'za', 'lohi', 'hilo'

        Raises:
            ValidationError: Unknown sort option
        """
        if option not in SORT_OPTIONS:
            raise ValidationError(
                "sort option",
                f"must be one of {sorted(SORT_OPTIONS)}, got {option!r}",
                context=self.config.name,
            )
        await self.select_option(self.SORT_DROPDOWN, value=option, name="sort dropdown")
        await self.resolver.wait_for_state(
            self.INVENTORY_LIST, ElementState.STABLE, timeout=5000, name="inventory list"
        )

    async def get_active_sort(self) -> Optional[str]:
        resolved = await self.locate(self.SORT_DROPDOWN, name="sort dropdown")
        return await resolved.handle.input_value()

    # =========================================================================
    # Session
    # =========================================================================

    @allure.step("Logout")
    async def logout(self) -> None:
        self.log.info("Logging out")
        await self.click_element(self.MENU_BUTTON, name="menu button")
        await self.wait_for_visible(self.LOGOUT_LINK, name="logout link", timeout=5000)
        await self.click_element(self.LOGOUT_LINK, name="logout link")
        await self.wait_for_url(f"{self.base_url}/")


__all__ = [
    "CartSummary",
    "EXPECTED_PRODUCT_COUNT",
    "INVENTORY_PAGE",
    "Product",
    "SORT_OPTIONS",
    "SauceDemoInventoryPage",
]
