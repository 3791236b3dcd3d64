"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Viewport / platform classification (desktop, tablet, mobile)
    - Cross-browser click, fill and scroll helpers with fallback strategies
    - Platform-aware waits and per-engine timeout scaling
    - Screenshot and failure capture utilities
    - API response capture for debugging

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
import inspect
import json
import os
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Response
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .browser_profiles import ClickFallback, EngineProfile, get_engine_profile
from .config_loader import PROJECT_ROOT, ConfigLoader


# Viewport width thresholds (px)
MOBILE_MAX_WIDTH = 768
DESKTOP_MIN_WIDTH = 1024

DEFAULT_ACTION_TIMEOUT = 10000
MOBILE_WAIT_MULTIPLIER = 1.5
TYPE_DELAY_MS = 50
SCROLL_SETTLE_MS = 500
POLL_INTERVAL_S = 0.1


def _screenshot_dir() -> Path:
    configured = ConfigLoader().get("artifacts.screenshots", "test-results/screenshots")
    path = Path(configured)
    return path if path.is_absolute() else PROJECT_ROOT / path


@dataclass(frozen=True)
class PlatformInfo:
    """Device classification derived from the current viewport."""

    is_mobile: bool
    is_tablet: bool
    is_desktop: bool
    user_agent: str = ""

    @property
    def device_type(self) -> str:
        if self.is_mobile:
            return "mobile"
        if self.is_tablet:
            return "tablet"
        return "desktop"


def classify_viewport(
    viewport: Optional[Dict[str, int]],
    user_agent: str = "",
) -> PlatformInfo:
    """
    Classify a viewport by width.

    desktop >= 1024px, tablet 768-1023px, mobile < 768px.
    An unknown viewport (None) is treated as desktop.
    """
    if not viewport:
        return PlatformInfo(False, False, True, user_agent)

    width = viewport.get("width", DESKTOP_MIN_WIDTH)
    return PlatformInfo(
        is_mobile=width < MOBILE_MAX_WIDTH,
        is_tablet=MOBILE_MAX_WIDTH <= width < DESKTOP_MIN_WIDTH,
        is_desktop=width >= DESKTOP_MIN_WIDTH,
        user_agent=user_agent,
    )


Predicate = Union[str, Callable[[], Union[bool, Awaitable[bool]]]]


class BasePage:
    """
    Base class for all page objects.

    Usage:
        class LoginPage(BasePage):
            URL_PATH = "/web/index.php/auth/login"

            async def login(self, username: str, password: str):
                await self.cross_browser_fill("input[name='username']", username)
                await self.cross_browser_fill("input[name='password']", password)
                await self.cross_browser_click("button[type='submit']")
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""

    def __init__(
        self,
        page: Page,
        base_url: str = "",
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            base_url: Base URL for the application
        """
        self.page = page
        if not base_url:
            base_url = os.getenv("ORANGEHRM_BASE_URL", "https://opensource-demo.orangehrmlive.com")
        self.base_url = base_url.rstrip("/")

        self._captured_requests: List[Dict[str, Any]] = []
        self._setup_request_capture()

    def _setup_request_capture(self) -> None:
        """Keep the last API responses for failure reports."""

        async def capture_response(response: Response) -> None:
            if "/api/" not in response.url:
                return
            self._captured_requests.append({
                "timestamp": datetime.now().isoformat(),
                "url": response.url,
                "status": response.status,
            })
            if len(self._captured_requests) > 20:
                self._captured_requests.pop(0)

        self.page.on("response", capture_response)

    @property
    def url(self) -> str:
        """Get full page URL."""
        return f"{self.base_url}{self.URL_PATH}"

    # =========================================================================
    # Browser / Platform Detection
    # =========================================================================

    def get_browser_name(self) -> str:
        """Engine name of the browser driving this page."""
        browser = self.page.context.browser
        if browser is None:
            return "chromium"
        return browser.browser_type.name

    @property
    def engine_profile(self) -> EngineProfile:
        return get_engine_profile(self.get_browser_name())

    async def get_platform_info(self) -> PlatformInfo:
        """Classify the current viewport; computed on every call."""
        user_agent = await self.page.evaluate("() => navigator.userAgent")
        return classify_viewport(self.page.viewport_size, user_agent or "")

    def get_adjusted_timeout(self, base_timeout: float) -> int:
        """Scale a timeout (ms) by the engine's multiplier."""
        return self.engine_profile.adjust_timeout(base_timeout)

    async def log_environment_info(self) -> None:
        browser_name = self.get_browser_name()
        platform = await self.get_platform_info()
        viewport = self.page.viewport_size or {}

        logger.info(f"Test Environment: {browser_name} on {platform.device_type.capitalize()}")
        logger.info(f"Viewport: {viewport.get('width')}x{viewport.get('height')}")
        logger.info(f"User Agent: {platform.user_agent}")

    # =========================================================================
    # Navigation
    # =========================================================================

    async def scroll_to_top(self) -> None:
        await self.page.evaluate("() => window.scrollTo(0, 0)")
        await self.page.wait_for_timeout(300)

    async def mobile_javascript_navigation(self, url: str) -> bool:
        """
        Navigate by assigning window.location on mobile viewports.

        Returns:
            True if navigation was performed (mobile only)
        """
        platform = await self.get_platform_info()
        if not platform.is_mobile:
            return False

        logger.info(f"Using JavaScript navigation to {url} on mobile")
        await self.page.evaluate("(targetUrl) => { window.location.href = targetUrl; }", url)
        await self.page.wait_for_load_state("domcontentloaded")
        return True

    async def click_via_javascript_link(self, href_fragment: str) -> bool:
        """
        Click the first link whose href contains `href_fragment` from page JS.

        Used when overlapping elements intercept pointer events on small screens.

        Returns:
            True if a link was found and clicked
        """
        clicked = await self.page.evaluate(
            """(fragment) => {
                const link = document.querySelector(`a[href*="${fragment}"]`);
                if (!link) return false;
                link.click();
                return true;
            }""",
            href_fragment,
        )
        if not clicked:
            logger.warning(f"No link matching href*='{href_fragment}' to click")
        return bool(clicked)

    # =========================================================================
    # Cross-Browser Interactions
    # =========================================================================

    async def cross_browser_click(
        self,
        selector: str,
        timeout: Optional[int] = None,
    ) -> None:
        """
        Click with one engine-specific fallback.

        The fallback comes from the engine profile: keyboard activation
        (focus + Enter) or a forced click. Errors from the fallback propagate.
        """
        timeout = timeout or DEFAULT_ACTION_TIMEOUT
        element = self.page.locator(selector)

        with allure.step(f"Click: {selector}"):
            try:
                await element.click(timeout=timeout)
                return
            except PlaywrightError as e:
                profile = self.engine_profile
                reason = str(e).partition("\n")[0]
                logger.warning(
                    f"Standard click failed on {profile.engine}, "
                    f"trying {profile.click_fallback.value}: {reason}"
                )

            if profile.click_fallback is ClickFallback.KEYBOARD_ACTIVATE:
                await element.focus()
                await self.page.keyboard.press("Enter")
            else:
                await element.click(force=True, timeout=timeout)

    async def cross_browser_fill(
        self,
        selector: str,
        value: str,
        timeout: Optional[int] = None,
    ) -> None:
        """Fill an input; on failure clear it and type character by character."""
        timeout = timeout or DEFAULT_ACTION_TIMEOUT
        element = self.page.locator(selector)
        shown = "*" * len(value) if "password" in selector.lower() else value

        with allure.step(f"Fill {selector}: {shown}"):
            try:
                await element.fill(value, timeout=timeout)
                return
            except PlaywrightError:
                logger.warning(
                    f"Standard fill failed on {self.get_browser_name()}, typing instead"
                )

            await element.clear()
            await element.press_sequentially(value, delay=TYPE_DELAY_MS)

    async def cross_browser_scroll_to_element(self, selector: str) -> None:
        await self.page.locator(selector).scroll_into_view_if_needed()
        await self.page.wait_for_timeout(SCROLL_SETTLE_MS)

    async def cross_platform_wait(
        self,
        predicate: Predicate,
        timeout: int = 10000,
    ) -> None:
        """
        Wait until `predicate` holds.

        Args:
            predicate: JavaScript expression/function evaluated in the page,
                or a Python callable (sync or async) returning a bool
            timeout: Base timeout in ms; x1.5 on mobile viewports

        Raises:
            playwright TimeoutError: predicate did not hold in time
        """
        platform = await self.get_platform_info()
        adjusted = int(timeout * MOBILE_WAIT_MULTIPLIER) if platform.is_mobile else timeout

        if isinstance(predicate, str):
            await self.page.wait_for_function(predicate, timeout=adjusted)
            return

        loop = asyncio.get_running_loop()
        deadline = loop.time() + adjusted / 1000
        while True:
            result = predicate()
            if inspect.isawaitable(result):
                result = await result
            if result:
                return
            if loop.time() >= deadline:
                raise PlaywrightTimeoutError(
                    f"Condition not met within {adjusted}ms ({platform.device_type})"
                )
            await asyncio.sleep(POLL_INTERVAL_S)

    async def handle_responsive_element(
        self,
        mobile_selector: str,
        desktop_selector: str,
    ) -> str:
        """Pick the mobile selector when on mobile and it is visible."""
        platform = await self.get_platform_info()
        if platform.is_mobile:
            try:
                if await self.page.locator(mobile_selector).is_visible():
                    return mobile_selector
            except PlaywrightError:
                logger.debug(f"Mobile selector not usable: {mobile_selector}")
        return desktop_selector

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def take_cross_browser_screenshot(
        self,
        base_name: str,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Save a full-page screenshot named <base>-<browser>-<device>-<epoch ms>.png.

        Returns:
            Path to saved screenshot
        """
        platform = await self.get_platform_info()
        filename = (
            f"{base_name}-{self.get_browser_name()}-{platform.device_type}-"
            f"{int(time.time() * 1000)}.png"
        )
        directory = _screenshot_dir()
        directory.mkdir(parents=True, exist_ok=True)
        filepath = directory / filename

        await self.page.screenshot(path=str(filepath), full_page=True)

        if attach_to_allure:
            allure.attach.file(
                str(filepath),
                name=base_name,
                attachment_type=allure.attachment_type.PNG,
            )

        logger.info(f"Screenshot taken: {filename}")
        return filepath

    async def capture_failure(self, test_name: str) -> None:
        """Attach screenshot, current URL and recent API responses to Allure."""
        with allure.step("Capture failure details"):
            await self.take_cross_browser_screenshot(f"failure_{test_name}")

            allure.attach(
                self.page.url,
                name="Current URL",
                attachment_type=allure.attachment_type.TEXT,
            )

            if self._captured_requests:
                allure.attach(
                    json.dumps(self._captured_requests[-10:], indent=2),
                    name="Recent API Responses",
                    attachment_type=allure.attachment_type.JSON,
                )


__all__ = [
    "BasePage",
    "PlatformInfo",
    "classify_viewport",
    "MOBILE_MAX_WIDTH",
    "DESKTOP_MIN_WIDTH",
]
