"""
================================================================================
Sidebar Menu Catalog
================================================================================

Known sidebar menu items and their canonical route patterns, loaded from
`config/menu_items.yaml`.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Pattern, Sequence

import yaml
from loguru import logger

from .config_loader import PROJECT_ROOT, ConfigLoader, ConfigurationError


DEFAULT_CATALOG_PATH = PROJECT_ROOT / "config" / "menu_items.yaml"


def _configured_catalog_path() -> Path:
    configured = ConfigLoader().get("menu.catalog")
    if not configured:
        return DEFAULT_CATALOG_PATH
    path = Path(configured)
    return path if path.is_absolute() else PROJECT_ROOT / path


class MenuConfigurationError(ConfigurationError):
    """Raised for malformed catalogs or lookups of unknown menu labels."""
    pass


@dataclass(frozen=True)
class MenuItem:
    """One sidebar entry."""

    label: str
    route_pattern: str
    link: Optional[str] = None

    @property
    def href_fragment(self) -> str:
        """Fragment of the sidebar link href, for the JavaScript click fallback."""
        return self.link or self.label.lower().replace(" ", "")

    @property
    def route_regex(self) -> Pattern[str]:
        return re.compile(self.route_pattern)

    def matches_url(self, url: str) -> bool:
        return self.route_regex.search(url or "") is not None


class MenuCatalog:
    """
    Ordered, read-only collection of sidebar menu items.

    Usage:
        >>> catalog = MenuCatalog.load()
        >>> catalog.route_for("PIM").pattern
        '/pim/'
    """

    def __init__(self, items: Sequence[MenuItem]):
        self._items: List[MenuItem] = list(items)
        self._by_label: Dict[str, MenuItem] = {}
        for item in self._items:
            if item.label in self._by_label:
                raise MenuConfigurationError(f"Duplicate menu label: {item.label}")
            self._by_label[item.label] = item

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "MenuCatalog":
        """
        Load the catalog from YAML (`items: [{label, route}, ...]`).

        Defaults to the `menu.catalog` config value, relative to the project root.
        """
        path = Path(path) if path else _configured_catalog_path()
        if not path.exists():
            raise MenuConfigurationError(f"Menu catalog not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise MenuConfigurationError(f"Invalid YAML in menu catalog: {e}") from e

        raw_items = data.get("items") if isinstance(data, dict) else None
        if not raw_items:
            raise MenuConfigurationError(f"Menu catalog {path} defines no items")

        items = []
        for entry in raw_items:
            if not isinstance(entry, dict) or not entry.get("label") or not entry.get("route"):
                raise MenuConfigurationError(
                    f"Menu entry needs 'label' and 'route': {entry!r}"
                )
            for key in ("label", "route", "link"):
                if key in entry and not isinstance(entry[key], str):
                    raise MenuConfigurationError(
                        f"Menu entry {key!r} must be a string: {entry!r}"
                    )
            try:
                re.compile(entry["route"])
            except re.error as e:
                raise MenuConfigurationError(
                    f"Invalid route pattern for {entry['label']!r}: {e}"
                ) from e
            items.append(
                MenuItem(
                    label=entry["label"],
                    route_pattern=entry["route"],
                    link=entry.get("link"),
                )
            )

        logger.debug(f"Loaded {len(items)} menu items from {path}")
        return cls(items)

    @property
    def labels(self) -> List[str]:
        return [item.label for item in self._items]

    def get(self, label: str) -> MenuItem:
        """
        Return the item for `label`.

        Raises:
            MenuConfigurationError: label is not in the catalog
        """
        try:
            return self._by_label[label]
        except KeyError:
            raise MenuConfigurationError(
                f"Unknown menu item {label!r}. Known items: {', '.join(self.labels)}"
            ) from None

    def route_for(self, label: str) -> Pattern[str]:
        return self.get(label).route_regex

    def matching(self, term: str) -> List[str]:
        """Labels that contain `term` case-insensitively (expected filter result)."""
        needle = term.lower()
        return [item.label for item in self._items if needle in item.label.lower()]

    def __contains__(self, label: object) -> bool:
        return label in self._by_label

    def __iter__(self) -> Iterator[MenuItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


__all__ = [
    "MenuItem",
    "MenuCatalog",
    "MenuConfigurationError",
    "DEFAULT_CATALOG_PATH",
]
