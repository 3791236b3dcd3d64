"""
================================================================================
Suite Logging
================================================================================

Process-wide Loguru configuration for the UI suite.

Sinks:
    - Console (colorized)
    - logs/combined.log (INFO and above, append-only)
    - logs/error.log (ERROR and above, append-only)

Call `init_logger()` once at process start (root conftest / run_tests.py).
Repeated calls are no-ops until `reset_logger()` is used.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger


DEFAULT_LOG_DIR = Path("logs")

CONSOLE_FORMAT = "<level>[{time:HH:mm:ss}] {level}: {message}</level>"
FILE_FORMAT = "[{time:HH:mm:ss}] {level}: {message}"

_handler_ids: List[int] = []
_logger_initialized: bool = False


def init_logger(
    level: Optional[str] = None,
    log_dir: Optional[Union[str, Path]] = None,
) -> None:
    """
    Initialize the global Loguru logger.

    Args:
        level: Console log level. Falls back to LOG_LEVEL env var, then the
            `logging.level` config value, then INFO.
        log_dir: Directory for combined.log / error.log (default: `logging.dir`
            config value, then logs/). Relative paths resolve against the
            project root. Created if missing.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    level = (level or os.getenv("LOG_LEVEL") or _configured_level()).upper()
    log_dir = _resolve_dir(log_dir) if log_dir else _configured_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()
    _handler_ids.append(
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)
    )
    _handler_ids.append(
        logger.add(
            log_dir / "combined.log",
            level="INFO",
            format=FILE_FORMAT,
            mode="a",
            enqueue=True,
        )
    )
    _handler_ids.append(
        logger.add(
            log_dir / "error.log",
            level="ERROR",
            format=FILE_FORMAT,
            mode="a",
            enqueue=True,
        )
    )

    _logger_initialized = True
    logger.debug(f"Logger initialized (level={level}, dir={log_dir})")


def reset_logger() -> None:
    """Drop the sinks added by `init_logger()` so it can run again."""
    global _logger_initialized

    for handler_id in _handler_ids:
        try:
            logger.remove(handler_id)
        except ValueError:
            # Already removed by someone calling logger.remove() directly
            continue
    _handler_ids.clear()
    _logger_initialized = False


def is_initialized() -> bool:
    return _logger_initialized


def _configured_level() -> str:
    # Imported lazily; the config loader logs through this module's logger
    from .config_loader import ConfigLoader

    return str(ConfigLoader().get("logging.level", "INFO"))


def _configured_dir() -> Path:
    from .config_loader import ConfigLoader

    return _resolve_dir(ConfigLoader().get("logging.dir", str(DEFAULT_LOG_DIR)))


def _resolve_dir(log_dir: Union[str, Path]) -> Path:
    """Relative log dirs are anchored at the project root, not the cwd."""
    from . import config_loader

    path = Path(log_dir)
    return path if path.is_absolute() else config_loader.PROJECT_ROOT / path


__all__ = [
    "init_logger",
    "reset_logger",
    "is_initialized",
    "CONSOLE_FORMAT",
    "FILE_FORMAT",
]
