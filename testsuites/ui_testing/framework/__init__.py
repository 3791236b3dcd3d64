"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework for the OrangeHRM suite.

Components:
    - page_base: Base page object with cross-browser/cross-device helpers
    - browser_profiles: Per-engine fallback strategies and timeout scaling
    - browser_manager: Browser/device project matrix and lifecycle
    - menu_catalog: Sidebar menu items and their route patterns
    - config_loader: YAML config, env files, application settings
    - logger: Process-wide Loguru setup

Author: Automation Team
License: MIT
================================================================================
"""

from .page_base import BasePage, PlatformInfo, classify_viewport
from .browser_profiles import ClickFallback, EngineProfile, get_engine_profile
from .browser_manager import BrowserManager, DeviceProject, get_project
from .menu_catalog import MenuCatalog, MenuConfigurationError
from .logger import init_logger

__all__ = [
    "BasePage",
    "PlatformInfo",
    "classify_viewport",
    "ClickFallback",
    "EngineProfile",
    "get_engine_profile",
    "BrowserManager",
    "DeviceProject",
    "get_project",
    "MenuCatalog",
    "MenuConfigurationError",
    "init_logger",
]
