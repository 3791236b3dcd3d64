"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for browser management, page objects and failure artifacts.

Key Features:
- One browser + context + page per test (no shared state between tests)
- Device/browser project selected by UI_PROJECT (see browser_manager.PROJECTS)
- Screenshot, trace and video kept for failed tests
- Suites run only when UI_E2E=1 (set by run_tests.py)

================================================================================
"""

import os
import re
from pathlib import Path
from typing import AsyncGenerator

import allure
import pytest
from loguru import logger
from playwright.async_api import BrowserContext, Page, expect
from playwright.async_api import Error as PlaywrightError

from testsuites.ui_testing.framework.browser_manager import (
    BrowserManager,
    DeviceProject,
    get_project,
)
from testsuites.ui_testing.framework.config_loader import (
    PROJECT_ROOT,
    AppSettings,
    ConfigLoader,
    get_app_settings,
)
from testsuites.ui_testing.framework.menu_catalog import MenuCatalog
from testsuites.ui_testing.framework.page_base import BasePage
from testsuites.ui_testing.pages.dashboard_page import DashboardPage
from testsuites.ui_testing.pages.login_page import LoginPage
from testsuites.ui_testing.pages.search_page import SearchPage


# ================================================================================
# Pytest Configuration
# ================================================================================

def _is_ci() -> bool:
    return bool(os.getenv("CI"))


def _artifacts_dir() -> Path:
    configured = Path(ConfigLoader().get("artifacts.output", "test-results"))
    return configured if configured.is_absolute() else PROJECT_ROOT / configured


def pytest_collection_modifyitems(config, items):
    """Skip browser suites unless explicitly enabled."""
    if os.getenv("UI_E2E") == "1":
        return

    skip_ui = pytest.mark.skip(reason="UI suites need a browser and network; set UI_E2E=1")
    for item in items:
        if "ui_testing" in str(item.fspath):
            item.add_marker(skip_ui)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase's report on the item (`item.rep_call`) for fixtures."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


def _failed(request) -> bool:
    report = getattr(request.node, "rep_call", None)
    return report is None or report.failed


def _safe_name(nodeid: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", nodeid)[-120:]


# ================================================================================
# Settings Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def app_settings() -> AppSettings:
    """Target base URL and credentials."""
    return get_app_settings()


@pytest.fixture(scope="session")
def menu_catalog() -> MenuCatalog:
    return MenuCatalog.load()


@pytest.fixture(scope="session")
def device_project() -> DeviceProject:
    project = get_project()
    logger.info(f"UI project: {project.name}")
    return project


@pytest.fixture(scope="session")
def test_data(app_settings: AppSettings):
    """Common credentials for login scenarios."""
    return {
        "valid_user": {
            "username": app_settings.username,
            "password": app_settings.password,
        },
        "invalid_user": {
            "username": "InvalidUser",
            "password": "wrongpass123",
        },
    }


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture
async def browser_manager(device_project: DeviceProject) -> AsyncGenerator[BrowserManager, None]:
    """Function-scoped browser: each test owns its browser session."""
    manager = BrowserManager(
        project=device_project,
        headless=os.getenv("HEADLESS", "true").lower() != "false",
        video_dir=_artifacts_dir() / "videos",
    )
    await manager.start()
    yield manager
    await manager.close()


@pytest.fixture
async def context(
    request,
    browser_manager: BrowserManager,
) -> AsyncGenerator[BrowserContext, None]:
    """
    Browser context with tracing and video.

    Trace kept on failure (always in CI); videos attached on failure and
    deleted otherwise. Videos are finalized only when the context closes.
    """
    context = await browser_manager.new_context()
    await context.tracing.start(screenshots=True, snapshots=True)
    yield context

    failed = _failed(request)
    if failed or _is_ci():
        trace_path = _artifacts_dir() / "traces" / f"{_safe_name(request.node.nodeid)}.zip"
        trace_path.parent.mkdir(parents=True, exist_ok=True)
        await context.tracing.stop(path=str(trace_path))
        logger.info(f"Trace saved: {trace_path}")
    else:
        await context.tracing.stop()

    videos = [page.video for page in context.pages if page.video is not None]
    await context.close()
    for video in videos:
        video_path = Path(await video.path())
        if failed:
            allure.attach.file(
                str(video_path),
                name="failure_video",
                attachment_type=allure.attachment_type.WEBM,
            )
        else:
            video_path.unlink(missing_ok=True)


@pytest.fixture
async def page(request, context: BrowserContext) -> AsyncGenerator[Page, None]:
    """Page with suite timeouts; failure details attached to Allure."""
    config = ConfigLoader()
    page = await context.new_page()
    page.set_default_timeout(
        config.get("timeouts.action_ci" if _is_ci() else "timeouts.action", 15000)
    )
    page.set_default_navigation_timeout(
        config.get("timeouts.navigation_ci" if _is_ci() else "timeouts.navigation", 30000)
    )
    expect.set_options(timeout=config.get("timeouts.expect", 30000))
    # Records API responses from the start of the test for the failure report
    failure_page = BasePage(page)

    yield page

    failed = _failed(request)
    if failed and not page.is_closed():
        try:
            await failure_page.capture_failure(_safe_name(request.node.name))
        except PlaywrightError as e:
            # The page may have crashed; the trace still has the last frame
            logger.warning(f"Failed to capture failure details: {e}")


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(page: Page, app_settings: AppSettings) -> LoginPage:
    return LoginPage(page, app_settings.base_url)


@pytest.fixture
def dashboard_page(page: Page, app_settings: AppSettings, menu_catalog: MenuCatalog) -> DashboardPage:
    return DashboardPage(page, app_settings.base_url, catalog=menu_catalog)


@pytest.fixture
def search_page(page: Page, app_settings: AppSettings, menu_catalog: MenuCatalog) -> SearchPage:
    return SearchPage(page, app_settings.base_url, catalog=menu_catalog)


# ================================================================================
# Starting-State Fixtures
# ================================================================================

@pytest.fixture
async def opened_login_page(login_page: LoginPage, app_settings: AppSettings) -> LoginPage:
    """Login page loaded and ready."""
    await login_page.navigate_to_login_page(app_settings.base_url)
    return login_page


@pytest.fixture
async def dashboard_search(search_page: SearchPage, app_settings: AppSettings) -> SearchPage:
    """Logged in, on the dashboard with the sidebar search available."""
    await search_page.login_and_navigate_to_dashboard(
        app_settings.base_url,
        app_settings.username,
        app_settings.password,
    )
    return search_page
