"""
================================================================================
Dashboard Page Object (Async / Playwright)
================================================================================

Post-login navigation among sidebar modules, logout and session
termination checks.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, expect

from testsuites.ui_testing.framework.menu_catalog import MenuCatalog
from testsuites.ui_testing.framework.page_base import BasePage
from testsuites.ui_testing.pages.login_page import (
    LOGIN_BUTTON,
    PASSWORD_INPUT,
    USERNAME_INPUT,
)


def menu_item_selector(label: str) -> str:
    return f'.oxd-main-menu-item:has-text("{label}")'


class DashboardPage(BasePage):
    """Dashboard page object (async)."""

    URL_PATH = "/web/index.php/dashboard/index"
    PAGE_TITLE = "Dashboard"

    def __init__(
        self,
        page: Page,
        base_url: str = "",
        catalog: Optional[MenuCatalog] = None,
    ):
        super().__init__(page, base_url)
        self.catalog = catalog or MenuCatalog.load()
        self.user_dropdown_tab = page.locator(".oxd-userdropdown-tab")
        self.user_dropdown = page.locator(".oxd-userdropdown")
        self.logout_option = page.locator('a:has-text("Logout")')
        self.dashboard_heading = page.locator('h6:has-text("Dashboard")')

    @allure.step("Navigate to module: {module_name}")
    async def navigate_to_module(self, module_name: str) -> None:
        """Click a sidebar module and assert its canonical route."""
        route = self.catalog.route_for(module_name)
        platform = await self.get_platform_info()
        module_item = self.page.locator(menu_item_selector(module_name))

        if platform.is_mobile:
            try:
                await module_item.click(timeout=10000)
            except PlaywrightError:
                logger.warning(f"Mobile click failed for {module_name}, using JavaScript approach")
                await self.click_via_javascript_link(self.catalog.get(module_name).href_fragment)
        else:
            await module_item.click()

        await expect(self.page).to_have_url(route)
        logger.info(f"Navigated to {module_name} module on {platform.device_type}")

    @allure.step("Open user dropdown")
    async def open_user_dropdown(self) -> None:
        await self.user_dropdown_tab.click()
        await expect(self.user_dropdown).to_be_visible()
        logger.info("User dropdown opened and displays user information")

    @allure.step("Click logout")
    async def click_logout(self) -> None:
        await expect(self.logout_option).to_be_visible()
        await self.logout_option.click()
        logger.info("Logout option clicked")

    @allure.step("Verify complete logout")
    async def verify_complete_logout(self) -> None:
        """Redirected to the login route with the full login form rendered."""
        await self.page.wait_for_url("**/auth/login", timeout=10000)

        for selector in (USERNAME_INPUT, PASSWORD_INPUT, LOGIN_BUTTON):
            await expect(self.page.locator(selector)).to_be_visible()

        logger.info("Session completely terminated and redirected to login page")

    @allure.step("Verify back navigation does not restore dashboard")
    async def verify_back_navigation_blocked(self) -> None:
        await self.page.go_back()

        await expect(self.page.locator(USERNAME_INPUT)).to_be_visible(timeout=5000)
        await expect(self.dashboard_heading).not_to_be_visible()

        logger.info("Browser back button does not access protected content after logout")

    async def perform_full_logout_flow(self) -> None:
        await self.open_user_dropdown()
        await self.click_logout()
        await self.verify_complete_logout()
        await self.verify_back_navigation_blocked()

    async def navigate_through_multiple_modules(self) -> None:
        for module_name in ("Admin", "PIM", "Dashboard"):
            await self.navigate_to_module(module_name)
        logger.info("Session persists across module navigation")
