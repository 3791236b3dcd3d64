"""
================================================================================
Browser Engine Profiles
================================================================================

Capability table keyed by Playwright engine name.

Each engine maps to:
    - the fallback strategy used when a standard click fails
    - a timeout multiplier for slower engines

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class ClickFallback(str, Enum):
    """Secondary click strategies."""

    # Focus the element and press Enter (WebKit drops some synthetic clicks)
    KEYBOARD_ACTIVATE = "keyboard_activate"
    # Retry with force=True, skipping actionability checks
    FORCE_CLICK = "force_click"


@dataclass(frozen=True)
class EngineProfile:
    """Interaction profile for one browser engine."""

    engine: str
    click_fallback: ClickFallback = ClickFallback.FORCE_CLICK
    timeout_multiplier: float = 1.0

    def adjust_timeout(self, base_timeout: float) -> int:
        return int(base_timeout * self.timeout_multiplier)


ENGINE_PROFILES: Dict[str, EngineProfile] = {
    "chromium": EngineProfile("chromium"),
    "firefox": EngineProfile("firefox", timeout_multiplier=1.1),
    "webkit": EngineProfile(
        "webkit",
        click_fallback=ClickFallback.KEYBOARD_ACTIVATE,
        timeout_multiplier=1.2,
    ),
}


def get_engine_profile(engine: str) -> EngineProfile:
    """
    Look up the profile for an engine.

    Unknown engines get the default profile (force click, no slowdown)
    under their own name.
    """
    profile = ENGINE_PROFILES.get((engine or "").lower())
    if profile is None:
        return EngineProfile(engine or "unknown")
    return profile


__all__ = [
    "ClickFallback",
    "EngineProfile",
    "ENGINE_PROFILES",
    "get_engine_profile",
]
