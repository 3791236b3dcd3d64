"""
================================================================================
Login Page Object (Async / Playwright)
================================================================================

OrangeHRM login form.

Terminal states after submitting the form:
  - authenticated, on the dashboard route
  - error banner shown (invalid credentials)
  - field-level "Required" validation shown (empty fields)

================================================================================
"""

from __future__ import annotations

import re

import allure
from loguru import logger
from playwright.async_api import Page, expect

from testsuites.ui_testing.framework.page_base import BasePage


USERNAME_INPUT = 'input[name="username"]'
PASSWORD_INPUT = 'input[name="password"]'
LOGIN_BUTTON = 'button[type="submit"]'

LOGIN_ROUTE = re.compile(r".*auth/login")
DASHBOARD_URL_GLOB = "**/dashboard/index"


class LoginPage(BasePage):
    """Login page object (async)."""

    URL_PATH = "/web/index.php/auth/login"
    PAGE_TITLE = "OrangeHRM"

    def __init__(self, page: Page, base_url: str = ""):
        super().__init__(page, base_url)
        self.username_field = page.locator(USERNAME_INPUT)
        self.password_field = page.locator(PASSWORD_INPUT)
        self.login_button = page.locator(LOGIN_BUTTON)
        self.error_message = page.locator(".oxd-alert-content--error")
        self.required_field_errors = page.locator(".oxd-input-field-error-message")
        self.dashboard_heading = page.locator('h6:has-text("Dashboard")')
        self.user_dropdown = page.locator(".oxd-userdropdown")
        self.side_panel = page.locator(".oxd-sidepanel")

    # ============================================================
    # Navigation
    # ============================================================

    @allure.step("Open login page")
    async def navigate_to_login_page(self, base_url: str = "") -> None:
        """Load the login page and wait for the username field."""
        await self.log_environment_info()
        platform = await self.get_platform_info()
        logger.info(f"Navigating to OrangeHRM login page on {platform.device_type}")

        if base_url:
            self.base_url = base_url.rstrip("/")

        await self.page.goto(
            self.url,
            wait_until="domcontentloaded",
            timeout=self.get_adjusted_timeout(30000),
        )

        field_timeout = self.get_adjusted_timeout(15000 if platform.is_mobile else 10000)
        await self.page.wait_for_selector(USERNAME_INPUT, state="visible", timeout=field_timeout)

        if platform.is_mobile:
            await self.scroll_to_top()

        logger.info("Login page loaded successfully")

    @allure.step("Verify login page loaded")
    async def verify_page_load(self) -> None:
        await expect(self.username_field).to_be_visible(timeout=10000)
        logger.info("Login page loaded with username field visible")

    # ============================================================
    # Form Actions
    # ============================================================

    @allure.step("Enter username: {username}")
    async def enter_username(self, username: str) -> None:
        await self.cross_browser_fill(USERNAME_INPUT, username)
        logger.info(f"Entered username: {username}")

    @allure.step("Enter password")
    async def enter_password(self, password: str) -> None:
        await self.cross_browser_fill(PASSWORD_INPUT, password)
        await expect(self.password_field).to_have_attribute("type", "password")
        logger.info("Entered password and verified masking")

    @allure.step("Click login button")
    async def click_login_button(self) -> None:
        await expect(self.login_button).to_be_enabled()
        await self.cross_browser_click(LOGIN_BUTTON)
        logger.info("Clicked login button")

    @allure.step("Clear login fields")
    async def clear_fields(self) -> None:
        await self.username_field.clear()
        await self.password_field.clear()
        logger.info("Cleared username and password fields")

    # ============================================================
    # Verifications
    # ============================================================

    @allure.step("Wait for dashboard")
    async def wait_for_dashboard(self) -> None:
        await self.page.wait_for_url(DASHBOARD_URL_GLOB, timeout=10000)
        logger.info("Successfully navigated to dashboard")

    @allure.step("Verify dashboard elements")
    async def verify_dashboard_elements(self) -> None:
        """Heading and user menu visible; sidebar visible (desktop) or in DOM (mobile)."""
        platform = await self.get_platform_info()

        await expect(self.dashboard_heading).to_be_visible(timeout=5000)
        await expect(self.user_dropdown).to_be_visible(timeout=5000)

        if platform.is_mobile:
            # Collapsed behind the hamburger on small screens
            assert await self.side_panel.count() > 0, "Side panel should exist in the DOM"
            logger.info("Mobile dashboard elements verified - sidebar exists in DOM")
        else:
            await expect(self.side_panel).to_be_visible(timeout=5000)
            logger.info("Desktop dashboard elements verified successfully")

    @allure.step("Verify error message contains '{expected_text}'")
    async def verify_error_message(self, expected_text: str) -> None:
        await expect(self.error_message).to_be_visible(timeout=5000)
        await expect(self.error_message).to_contain_text(expected_text)
        logger.info("Error message displayed for invalid credentials")

    @allure.step("Verify form is ready for retry")
    async def verify_form_state_after_error(self) -> None:
        await expect(self.page).to_have_url(LOGIN_ROUTE)

        for field in (self.username_field, self.password_field):
            await expect(field).to_be_visible()
            await expect(field).to_be_enabled()

        logger.info("Form is ready for immediate retry")

    @allure.step("Verify client-side validation")
    async def verify_client_side_validation(self) -> None:
        """Both empty fields show exactly one 'Required' message each."""
        await expect(self.required_field_errors).to_have_count(2)

        messages = await self.required_field_errors.all_text_contents()
        for message in messages:
            assert message.strip() == "Required", f"Unexpected validation message: {message!r}"

        logger.info("Client-side validation triggered with Required messages")

    @allure.step("Verify field-level errors")
    async def verify_field_level_errors(self) -> None:
        await expect(self.page).to_have_url(LOGIN_ROUTE)
        await expect(self.required_field_errors.first).to_be_visible()
        logger.info("Field-level error messages displayed, user remains on login page")

    @allure.step("Verify password field is masked")
    async def verify_password_field_security(self) -> None:
        await expect(self.password_field).to_have_attribute("type", "password")
        logger.info("Password field properly masked with type=password attribute")

    @allure.step("Type password slowly")
    async def type_password_slowly(self, password: str) -> None:
        await self.password_field.press_sequentially(password, delay=100)
        await expect(self.password_field).to_have_attribute("type", "password")
        logger.info("Password typed slowly for security verification")

    @allure.step("Refresh page and verify password cleared")
    async def refresh_page_and_verify_field_cleared(self) -> None:
        await self.page.reload()
        await self.page.wait_for_selector(PASSWORD_INPUT, state="visible")
        await expect(self.page.locator(PASSWORD_INPUT)).to_have_value("")
        logger.info("Password field cleared on page refresh as expected")

    async def take_screenshot(self, filename: str) -> None:
        await self.take_cross_browser_screenshot(filename)

    # ============================================================
    # Flows
    # ============================================================

    async def login_with_credentials(self, username: str, password: str) -> None:
        await self.enter_username(username)
        await self.enter_password(password)
        await self.click_login_button()

    async def perform_valid_login(self, username: str, password: str) -> None:
        await self.login_with_credentials(username, password)
        await self.wait_for_dashboard()
        await self.verify_dashboard_elements()

    async def perform_invalid_login(self, username: str, password: str) -> None:
        await self.login_with_credentials(username, password)
        await self.verify_error_message("Invalid credentials")
        await self.verify_form_state_after_error()

    async def perform_empty_fields_test(self) -> None:
        await self.clear_fields()
        await self.click_login_button()
        await self.verify_client_side_validation()
        await self.verify_field_level_errors()
