"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - Browser/device project matrix (desktop, tablet, mobile)
    - Device emulation through Playwright device descriptors
    - One isolated browser + context per test
    - Video recording and tracing for failure artifacts

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)


DESKTOP_VIEWPORT: Dict[str, int] = {"width": 1920, "height": 1080}


@dataclass(frozen=True)
class DeviceProject:
    """
    One row of the browser/device matrix.

    Attributes:
        name: Project name used on the command line (`--project`)
        browser_type: Playwright engine - 'chromium', 'firefox', 'webkit'
        device: Playwright device descriptor name (None for plain desktop)
        viewport: Viewport override (desktop projects pin 1920x1080)
        channel: Branded browser channel, e.g. 'msedge'
        launch_args: Extra browser launch arguments
    """

    name: str
    browser_type: str
    device: Optional[str] = None
    viewport: Optional[Dict[str, int]] = None
    channel: Optional[str] = None
    launch_args: List[str] = field(default_factory=list)


PROJECTS: Dict[str, DeviceProject] = {
    project.name: project
    for project in (
        DeviceProject(
            "chrome-desktop", "chromium", "Desktop Chrome",
            viewport=DESKTOP_VIEWPORT, launch_args=["--start-maximized"],
        ),
        DeviceProject("firefox-desktop", "firefox", "Desktop Firefox", viewport=DESKTOP_VIEWPORT),
        DeviceProject("safari-desktop", "webkit", "Desktop Safari", viewport=DESKTOP_VIEWPORT),
        DeviceProject("chrome-mobile", "chromium", "Pixel 5"),
        DeviceProject("safari-mobile", "webkit", "iPhone 12"),
        DeviceProject("ipad", "webkit", "iPad Pro 11"),
        DeviceProject(
            "edge-desktop", "chromium", "Desktop Edge",
            viewport=DESKTOP_VIEWPORT, channel="msedge",
        ),
    )
}

DEFAULT_PROJECT = "chrome-desktop"


class UnknownProjectError(ValueError):
    """Raised when a project name is not in the matrix."""
    pass


def get_project(name: Optional[str] = None) -> DeviceProject:
    """Return a project by name (defaults to UI_PROJECT env, then chrome-desktop)."""
    name = name or os.getenv("UI_PROJECT") or DEFAULT_PROJECT
    try:
        return PROJECTS[name]
    except KeyError:
        raise UnknownProjectError(
            f"Unknown project {name!r}. Available: {', '.join(PROJECTS)}"
        ) from None


def resolve_projects(names: Optional[Sequence[str]] = None) -> List[DeviceProject]:
    """Expand a list of project names; 'all' selects the full matrix."""
    if not names:
        return [get_project()]
    if "all" in names:
        return list(PROJECTS.values())
    return [get_project(name) for name in names]


class BrowserManager:
    """
    Manages the browser and context for one test.

    Usage:
        async with BrowserManager(get_project("safari-mobile")) as manager:
            page = await manager.new_page()
            await page.goto("https://example.com")
    """

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        project: Optional[DeviceProject] = None,
        headless: bool = True,
        video_dir: Optional[Path] = None,
    ):
        """
        Args:
            project: Browser/device project to emulate
            headless: Run browser in headless mode
            video_dir: Record videos into this directory when set
        """
        self.project = project or get_project()
        self.headless = headless
        self.video_dir = video_dir

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: list[BrowserContext] = []

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch the project's browser."""
        self._playwright = await async_playwright().start()
        browser_launcher = getattr(self._playwright, self.project.browser_type)

        launch_options: Dict[str, Any] = {"headless": self.headless}
        if self.project.launch_args:
            launch_options["args"] = list(self.project.launch_args)
        if self.project.channel:
            launch_options["channel"] = self.project.channel

        self._browser = await browser_launcher.launch(**launch_options)
        logger.debug(
            f"Browser started: {self.project.name} "
            f"({self.project.browser_type}, headless={self.headless})"
        )

    async def close(self) -> None:
        """Close all contexts, the browser and Playwright."""
        for context in self._contexts:
            try:
                await context.close()
            except Exception as e:
                logger.debug(f"Context already closed: {e}")
        self._contexts.clear()

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    def context_options(self, **options: Any) -> Dict[str, Any]:
        """Build context options: device descriptor, project overrides, caller options."""
        context_options: Dict[str, Any] = {}
        if self.project.device and self._playwright:
            descriptor = dict(self._playwright.devices[self.project.device])
            descriptor.pop("default_browser_type", None)
            context_options.update(descriptor)
        if self.project.viewport:
            context_options["viewport"] = dict(self.project.viewport)
            context_options["device_scale_factor"] = 1
        context_options.update(self.DEFAULT_CONTEXT_OPTIONS)
        if self.video_dir:
            context_options["record_video_dir"] = str(self.video_dir)
        context_options.update(options)
        return context_options

    async def new_context(self, **options: Any) -> BrowserContext:
        """Create a new isolated browser context for the project."""
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context = await self._browser.new_context(**self.context_options(**options))
        self._contexts.append(context)
        return context

    async def new_page(
        self,
        context: Optional[BrowserContext] = None,
        **context_options: Any,
    ) -> Page:
        """Create a page in a new or existing context."""
        if context is None:
            context = await self.new_context(**context_options)
        return await context.new_page()

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser


__all__ = [
    "BrowserManager",
    "DeviceProject",
    "PROJECTS",
    "DEFAULT_PROJECT",
    "UnknownProjectError",
    "get_project",
    "resolve_projects",
]
