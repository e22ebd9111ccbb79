"""Configuration parsing for themeloader.yaml"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from themeloader.browser import FileBrowser
from themeloader.engine import JinjaEngine
from themeloader.exceptions import InvalidConfigurationError
from themeloader.loader import ThemeLoader
from themeloader.themes import Theme, ThemeRegistry

log = logging.getLogger(__name__)

CONFIG_FILENAME = "themeloader.yaml"


class ThemeConfig(BaseModel):
    """A theme entry under `themes:`"""

    parent: str | None = None
    display_name: str | None = None


class EngineConfig(BaseModel):
    """Full themeloader.yaml configuration.

    Example:
        include_dirs: [templates]
        base_path: views
        compile_dir: .cache/templates
        themes:
          default: {}
          dark: {parent: default}
    """

    include_dirs: list[str] = ["templates"]
    base_path: str | None = None
    compile_dir: str = ".cache/templates"
    themes: dict[str, ThemeConfig] = {}

    # directory relative paths resolve against (the config file's directory)
    root: Path = Path(".")

    @field_validator("themes", mode="before")
    @classmethod
    def _empty_theme_entries(cls, value):
        if isinstance(value, dict):
            return {name: entry or {} for name, entry in value.items()}
        return value

    @classmethod
    def load(cls, path: Path) -> "EngineConfig":
        """Load config from yaml file, defaults if it does not exist"""
        if not path.exists():
            log.debug(f"No config at {path}, using defaults")
            return cls(root=path.parent)

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise InvalidConfigurationError(f"{path}: expected a mapping at top level")

        try:
            return cls.model_validate({**data, "root": path.parent})
        except ValidationError as e:
            raise InvalidConfigurationError(f"{path}: {e}") from e

    def resolve_path(self, path: str) -> Path:
        p = Path(path).expanduser()
        if not p.is_absolute():
            p = self.root / p
        return p

    def build_browser(self) -> FileBrowser:
        return FileBrowser(self.resolve_path(d) for d in self.include_dirs)

    def build_theme_model(self) -> ThemeRegistry:
        return ThemeRegistry(
            Theme(name=name, parent=entry.parent, display_name=entry.display_name)
            for name, entry in self.themes.items()
        )

    def build_engine(self) -> JinjaEngine:
        """Wire browser, loader, themes and engine from this config"""
        loader = ThemeLoader(self.build_browser(), self.base_path)
        return JinjaEngine(
            loader,
            self.resolve_path(self.compile_dir),
            theme_model=self.build_theme_model(),
        )


def find_config(start: Path | None = None) -> Path | None:
    """Find themeloader.yaml in start (default: cwd) or its parents."""
    cwd = start or Path.cwd()
    for parent in [cwd] + list(cwd.parents):
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None
