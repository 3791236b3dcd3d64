"""
Repository-level pytest configuration.

  - Load `.env.<ENV>` (default dev) without overriding variables already set
  - Fall back to the public OrangeHRM demo target and credentials
  - Initialize the suite logger once per process (each xdist worker too)

Values below are the public demo defaults; real environments provide their
own through CI secrets or an env file.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from testsuites.ui_testing.framework.config_loader import (
    DEFAULT_BASE_URL,
    DEFAULT_PASSWORD,
    DEFAULT_USERNAME,
    load_environment,
)
from testsuites.ui_testing.framework.logger import init_logger


def pytest_configure(config):
    load_environment()

    defaults = {
        "ORANGEHRM_BASE_URL": DEFAULT_BASE_URL,
        "ORANGEHRM_USERNAME": DEFAULT_USERNAME,
        "ORANGEHRM_PASSWORD": DEFAULT_PASSWORD,
    }
    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    init_logger()


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent
