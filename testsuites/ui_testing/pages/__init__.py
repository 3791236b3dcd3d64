"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for OrangeHRM screens.

Each page class encapsulates:
    - Element locators
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .login_page import LoginPage
from .dashboard_page import DashboardPage
from .search_page import SearchPage

__all__ = [
    "LoginPage",
    "DashboardPage",
    "SearchPage",
]
