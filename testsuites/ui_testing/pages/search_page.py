"""
================================================================================
Sidebar Search Page Object (Async / Playwright)
================================================================================

The sidebar search field and the menu items it filters.

Filtering itself happens in the application; this page object only drives the
field and asserts on which menu items remain. Expected labels come from the
menu catalog (config/menu_items.yaml).

Key Features:
- Visibility / count assertions on filtered menu items
- Case-insensitive, partial, multi-word and rapid-input scenarios
- Injection payload handling (no dialogs, no page errors)
- Click-through to a filtered item with canonical route verification

================================================================================
"""

from __future__ import annotations

from typing import Iterable, List, Optional

import allure
from loguru import logger
from playwright.async_api import Dialog, Page, expect
from playwright.async_api import Error as PlaywrightError

from testsuites.ui_testing.framework.menu_catalog import MenuCatalog
from testsuites.ui_testing.framework.page_base import BasePage
from testsuites.ui_testing.pages.dashboard_page import menu_item_selector
from testsuites.ui_testing.pages.login_page import LoginPage


SEARCH_INPUT = '[placeholder="Search"]'
HAMBURGER_MENU = '.oxd-topbar-header-hamburger, [class*="hamburger"], [class*="menu-toggle"]'

# Settle time for the client-side filter (ms)
FILTER_SETTLE_MS = 500
RAPID_INPUT_GAP_MS = 50


class SearchPage(BasePage):
    """
    Page Object for the OrangeHRM sidebar search.

    Composes a LoginPage to reach the dashboard.
    """

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
        self.login_page = LoginPage(page, base_url)

        self.search_field = page.locator(SEARCH_INPUT)
        self.side_panel = page.locator(".oxd-sidepanel")
        self.menu_items = page.locator(".oxd-main-menu-item")
        self.visible_menu_items = self.menu_items.filter(has=page.locator(".oxd-text--span"))
        self.dashboard_heading = page.locator('h6:has-text("Dashboard")')

        # Anything that looks like script execution triggered by search input
        self.dialogs: List[str] = []
        self.page_errors: List[str] = []
        page.on("dialog", self._on_dialog)
        page.on("pageerror", self._on_page_error)

    async def _on_dialog(self, dialog: Dialog) -> None:
        self.dialogs.append(f"{dialog.type}: {dialog.message}")
        logger.error(f"Unexpected {dialog.type} dialog: {dialog.message}")
        await dialog.dismiss()

    def _on_page_error(self, error: Exception) -> None:
        self.page_errors.append(str(error))
        logger.error(f"Page error: {error}")

    @property
    def all_menu_items(self) -> List[str]:
        return self.catalog.labels

    # ============================================================
    # Setup
    # ============================================================

    @allure.step("Login and open dashboard")
    async def login_and_navigate_to_dashboard(
        self,
        base_url: str,
        username: str,
        password: str,
    ) -> None:
        await self.login_page.navigate_to_login_page(base_url)
        await self.login_page.login_with_credentials(username, password)

        try:
            await self.page.wait_for_url("**/dashboard/index", timeout=10000)
        except PlaywrightError:
            await self.page.wait_for_url("**/dashboard**", timeout=10000)
        await expect(self.dashboard_heading).to_be_visible(timeout=10000)

        platform = await self.get_platform_info()
        if platform.is_mobile:
            await self._reveal_mobile_sidebar()
        else:
            await expect(self.side_panel).to_be_visible()
        logger.info("Successfully logged in and navigated to dashboard")

    async def _reveal_mobile_sidebar(self) -> None:
        if await self.side_panel.is_visible():
            return

        hamburger = self.page.locator(HAMBURGER_MENU).first
        if await hamburger.is_visible():
            await hamburger.click()
            await self.page.wait_for_timeout(500)

        if not await self.side_panel.is_visible():
            logger.info("Mobile layout - sidebar collapsed but search still reachable")

    # ============================================================
    # Search Field Actions
    # ============================================================

    @allure.step("Click search field")
    async def click_search_field(self) -> None:
        platform = await self.get_platform_info()

        if platform.is_mobile:
            await self.scroll_to_top()
            await expect(self.search_field).to_be_visible(timeout=self.get_adjusted_timeout(10000))
            try:
                await self.cross_browser_click(SEARCH_INPUT)
            except PlaywrightError:
                logger.warning("Mobile click blocked, using direct focus approach")
                await self.search_field.focus()
        else:
            await expect(self.search_field).to_be_visible()
            await self.search_field.click()

        logger.info(f"Search field clicked and focused on {platform.device_type}")

    @allure.step("Enter search term: {search_term}")
    async def enter_search_term(self, search_term: str) -> None:
        await self.search_field.fill(search_term)
        await self.page.wait_for_timeout(FILTER_SETTLE_MS)
        logger.info(f"Entered search term: {search_term}")

    @allure.step("Clear search field")
    async def clear_search_field(self) -> None:
        await self.search_field.clear()
        await self.page.wait_for_timeout(FILTER_SETTLE_MS)
        logger.info("Search field cleared")

    @allure.step("Select all and delete")
    async def select_all_text_and_delete(self) -> None:
        await self.search_field.select_text()
        await self.page.keyboard.press("Delete")
        await self.page.wait_for_timeout(FILTER_SETTLE_MS)
        logger.info("Selected all text and deleted")

    async def get_search_field_value(self) -> str:
        value = await self.search_field.input_value()
        logger.info(f"Current search field value: {value!r}")
        return value

    # ============================================================
    # Menu Item Assertions
    # ============================================================

    async def get_visible_menu_items_count(self) -> int:
        count = await self.visible_menu_items.count()
        logger.info(f"Visible menu items count: {count}")
        return count

    async def verify_menu_item_visible(self, item_name: str) -> None:
        await expect(self.page.locator(menu_item_selector(item_name))).to_be_visible()
        logger.info(f'Verified "{item_name}" menu item is visible')

    async def verify_menu_item_not_visible(self, item_name: str) -> None:
        await expect(self.page.locator(menu_item_selector(item_name))).not_to_be_visible()
        logger.info(f'Verified "{item_name}" menu item is not visible')

    async def verify_multiple_menu_items_visible(self, item_names: Iterable[str]) -> None:
        for item in item_names:
            await self.verify_menu_item_visible(item)

    async def verify_multiple_menu_items_not_visible(self, item_names: Iterable[str]) -> None:
        for item in item_names:
            await self.verify_menu_item_not_visible(item)

    @allure.step("Verify no results")
    async def verify_no_results_state(self) -> None:
        count = await self.get_visible_menu_items_count()
        assert count == 0, f"Expected no menu items, found {count}"
        logger.info("Verified no results state - no menu items visible")

    @allure.step("Verify full menu restored")
    async def verify_all_menu_items_restored(self) -> None:
        await expect(self.visible_menu_items).to_have_count(len(self.catalog))
        logger.info(f"All {len(self.catalog)} menu items visible")

    def verify_no_script_execution(self) -> None:
        assert not self.dialogs, f"Search input triggered dialogs: {self.dialogs}"
        assert not self.page_errors, f"Search input raised page errors: {self.page_errors}"

    # ============================================================
    # Navigation from Filtered State
    # ============================================================

    @allure.step("Click menu item: {item_name}")
    async def click_menu_item(self, item_name: str) -> None:
        """
        Click a (possibly filtered) menu item and verify its route.

        Raises:
            MenuConfigurationError: item is not in the catalog
            AssertionError: URL did not reach the item's route pattern
        """
        menu_entry = self.catalog.get(item_name)
        platform = await self.get_platform_info()
        selector = menu_item_selector(item_name)
        menu_item = self.page.locator(selector)

        if platform.is_mobile:
            await self.cross_browser_scroll_to_element(selector)
            try:
                await menu_item.click(timeout=10000)
            except PlaywrightError:
                logger.warning(f"Mobile click failed for {item_name}, using JavaScript approach")
                await self.click_via_javascript_link(menu_entry.href_fragment)
        else:
            await menu_item.click()

        try:
            await expect(self.page).to_have_url(menu_entry.route_regex, timeout=8000)
        except AssertionError as e:
            raise AssertionError(
                f"Clicking {item_name!r} did not reach route pattern {menu_entry.route_pattern!r}; "
                f"current URL: {self.page.url}"
            ) from e

        logger.info(f'Clicked "{item_name}" and reached {self.page.url} on {platform.device_type}')

    # ============================================================
    # Scenario Helpers
    # ============================================================

    async def verify_exact_match_filtering(self, search_term: str, expected_item: str) -> None:
        await self.enter_search_term(search_term)
        await self.verify_menu_item_visible(expected_item)

        count = await self.get_visible_menu_items_count()
        assert count <= 1, f"Exact match {search_term!r} left {count} items visible"
        logger.info(f'Verified exact match filtering for "{search_term}" shows only "{expected_item}"')

    async def verify_partial_matching(self, partial_term: str, expected_items: Iterable[str]) -> None:
        await self.enter_search_term(partial_term)
        await self.verify_multiple_menu_items_visible(expected_items)
        logger.info(f'Verified partial matching for "{partial_term}"')

    async def verify_case_insensitive_search(self, search_term: str, expected_item: str) -> None:
        await self.enter_search_term(search_term)
        await self.verify_menu_item_visible(expected_item)
        logger.info(f'Verified case-insensitive search: "{search_term}" matches "{expected_item}"')

    @allure.step("Verify special input handled: {special_chars}")
    async def verify_special_character_handling(self, special_chars: str) -> None:
        # Only events raised by this payload count
        self.dialogs.clear()
        self.page_errors.clear()
        await self.enter_search_term(special_chars)
        await self.verify_no_results_state()
        self.verify_no_script_execution()
        logger.info(f'Verified special characters "{special_chars}" handled without errors')

    async def _type_prefixes(self, word: str) -> None:
        for end in range(1, len(word) + 1):
            await self.search_field.fill(word[:end])
            await self.page.wait_for_timeout(RAPID_INPUT_GAP_MS)
        await self.page.wait_for_timeout(100)

    @allure.step("Rapid input: A -> Admin")
    async def perform_rapid_input_changes(self) -> None:
        await self.search_field.click()
        await self._type_prefixes("Admin")
        logger.info("Performed rapid input sequence: A -> Ad -> Adm -> Admi -> Admin")

    @allure.step("Rapid clear and type: L -> Leave")
    async def perform_rapid_clear_and_type(self) -> None:
        await self.search_field.clear()
        await self._type_prefixes("Leave")
        logger.info("Performed rapid clear and type sequence: L -> Leave")

    async def verify_search_field_focused(self) -> None:
        await expect(self.search_field).to_be_focused()
        logger.info("Verified search field is focused")

    async def verify_search_field_value(self, expected_value: str) -> None:
        await expect(self.search_field).to_have_value(expected_value)
        logger.info(f"Verified search field has value: {expected_value!r}")

    # ============================================================
    # Keyboard
    # ============================================================

    async def navigate_to_keyboard_accessible_field(self) -> None:
        """Tab from the brand banner into the search field."""
        await self.page.locator(".oxd-brand-banner").click()
        await self.page.keyboard.press("Tab")
        await self.page.keyboard.press("Tab")
        logger.info("Navigated to search field using keyboard")

    async def type_with_keyboard(self, text: str) -> None:
        await self.page.keyboard.type(text)
        await self.page.wait_for_timeout(FILTER_SETTLE_MS)
        logger.info(f'Typed "{text}" using keyboard')

    async def press_enter_key(self) -> None:
        await self.page.keyboard.press("Enter")

    async def press_escape_key(self) -> None:
        await self.page.keyboard.press("Escape")
        await self.page.wait_for_timeout(300)

    async def press_tab_key(self) -> None:
        await self.page.keyboard.press("Tab")

    # ============================================================
    # Flows
    # ============================================================

    async def perform_exact_match_test(self, search_term: str, expected_item: str) -> None:
        await self.click_search_field()
        await self.verify_exact_match_filtering(search_term, expected_item)
        await self.click_menu_item(expected_item)

    async def perform_performance_test(self) -> None:
        await self.perform_rapid_input_changes()
        await self.verify_menu_item_visible("Admin")
        count = await self.get_visible_menu_items_count()
        assert count <= 1, f"Rapid input left {count} items visible"

        await self.perform_rapid_clear_and_type()
        await self.verify_menu_item_visible("Leave")

    async def perform_multi_word_test(self) -> None:
        for term in ("My Info", "My", "Info"):
            await self.clear_search_field()
            await self.enter_search_term(term)
            await self.verify_menu_item_visible("My Info")

    async def perform_keyboard_navigation_test(self) -> None:
        await self.navigate_to_keyboard_accessible_field()
        await self.verify_search_field_focused()
        await self.type_with_keyboard("Time")
        await self.verify_menu_item_visible("Time")
        await self.press_enter_key()
        await self.press_escape_key()
        await self.press_tab_key()

    @allure.step("Search state after navigation")
    async def perform_search_persistence_test(self) -> None:
        """
        Filter to PIM, navigate to it, then back to the dashboard.

        Each sidebar module is a full page load, so the filter does not
        survive navigation: the field is empty on arrival and the full menu
        is shown again after returning to the dashboard.
        """
        await self.enter_search_term("PIM")
        await self.verify_menu_item_visible("PIM")
        await self.click_menu_item("PIM")

        await self.verify_search_field_value("")

        await self.click_menu_item("Dashboard")
        await self.verify_search_field_value("")
        await self.verify_all_menu_items_restored()
        logger.info("Search state reset after navigation")
