"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration with environment variable overrides.

Features:
    - Singleton YAML configuration (config/config.yaml)
    - Environment variable override (APP_BASE_URL overrides app.base_url)
    - Dot notation path access with defaults
    - Per-environment `.env.<ENV>` files loaded through python-dotenv
    - Resolved application settings (base URL + credentials)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger


PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "config.yaml"

DEFAULT_BASE_URL = "https://opensource-demo.orangehrmlive.com"
DEFAULT_USERNAME = "Admin"
DEFAULT_PASSWORD = "admin123"


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (APP_BASE_URL)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("timeouts.action", 15000)
        15000
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        if getattr(self, "_initialized", False):
            return

        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    @property
    def config_path(self) -> Path:
        return self._config_path

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "app.base_url")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire configuration section (empty dict if absent)."""
        return self._config.get(section, {}) or {}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """Convert an env var string to match the reference type."""
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value

    @classmethod
    def reset(cls) -> None:
        """Reset singleton instance (tests)."""
        cls._instance = None
        cls._config = {}


# =============================================================================
# Environment Files
# =============================================================================

def load_environment(
    env: Optional[str] = None,
    root: Optional[Path] = None,
    strict: bool = False,
) -> Optional[Path]:
    """
    Load `.env.<env>` into the process environment.

    Variables already present in the environment win over the file, so CI
    secrets are never shadowed by a checked-in env file.

    Args:
        env: Environment name. Defaults to the ENV variable, then "dev".
        root: Directory holding the env files. Defaults to the project root.
        strict: Raise ConfigurationError when the file does not exist.

    Returns:
        Path of the loaded file, or None when nothing was loaded.
    """
    env = env or os.getenv("ENV", "dev")
    env_file = (root or PROJECT_ROOT) / f".env.{env}"

    if not env_file.exists():
        if strict:
            raise ConfigurationError(
                f'Environment file "{env_file.name}" not found. Please create one.'
            )
        logger.debug(f"No environment file {env_file}, relying on process env")
        return None

    load_dotenv(env_file, override=False)
    logger.info(f"Loaded environment file: {env_file.name}")
    return env_file


# =============================================================================
# Application Settings
# =============================================================================

@dataclass(frozen=True)
class AppSettings:
    """Resolved target application settings."""

    base_url: str
    username: str
    password: str

    @property
    def login_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/web/index.php/auth/login"


def get_app_settings(config: Optional[ConfigLoader] = None) -> AppSettings:
    """
    Resolve base URL and credentials.

    Order: ORANGEHRM_* env vars, then config `app.*`, then demo defaults.
    """
    config = config or ConfigLoader()
    return AppSettings(
        base_url=os.getenv("ORANGEHRM_BASE_URL")
        or config.get("app.base_url", DEFAULT_BASE_URL),
        username=os.getenv("ORANGEHRM_USERNAME")
        or config.get("app.username", DEFAULT_USERNAME),
        password=os.getenv("ORANGEHRM_PASSWORD")
        or config.get("app.password", DEFAULT_PASSWORD),
    )


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "AppSettings",
    "get_app_settings",
    "load_environment",
    "PROJECT_ROOT",
]
