"""Themes and theme hierarchies"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from pydantic import BaseModel

from themeloader.exceptions import InvalidConfigurationError, ThemeNotFoundError

log = logging.getLogger(__name__)


class Theme(BaseModel):
    """A named override directory, optionally extending a parent theme"""

    name: str
    parent: str | None = None
    display_name: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.name


class ThemeModel(Protocol):
    """Provides the hierarchy of a theme"""

    def get_theme_hierarchy(self, name: str) -> dict[str, bool]:
        """Ordered {theme: True} mapping, the theme itself first"""
        ...


class ThemeRegistry:
    """Dict-backed ThemeModel.

    Structure:
        default            <- base theme, no parent
        └── dark           <- parent: default
            └── dark-hc    <- parent: dark

    get_theme_hierarchy("dark-hc") -> {"dark-hc": True, "dark": True, "default": True}
    """

    def __init__(self, themes: Iterable[Theme] = ()):
        self._themes: dict[str, Theme] = {}
        for theme in themes:
            self.add(theme)

    def add(self, theme: Theme) -> None:
        self._themes[theme.name] = theme

    def get(self, name: str) -> Theme:
        theme = self._themes.get(name)
        if theme is None:
            raise ThemeNotFoundError(name)
        return theme

    def __contains__(self, name: object) -> bool:
        return name in self._themes

    def __iter__(self):
        return iter(self._themes.values())

    def __len__(self) -> int:
        return len(self._themes)

    def get_theme_hierarchy(self, name: str) -> dict[str, bool]:
        hierarchy: dict[str, bool] = {}

        current: str | None = name
        while current is not None:
            if current in hierarchy:
                raise InvalidConfigurationError(
                    f"Theme '{name}' has a cyclic parent chain: "
                    + " -> ".join([*hierarchy, current])
                )
            theme = self.get(current)
            hierarchy[theme.name] = True
            current = theme.parent

        log.debug(f"Hierarchy of theme '{name}': {list(hierarchy)}")
        return hierarchy
