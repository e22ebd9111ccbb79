"""Shared fixtures for themeloader tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from themeloader import FileBrowser, JinjaEngine, ThemeLoader, ThemeRegistry, Theme


def write(root: Path, relpath: str, content: str = "") -> Path:
    """Create a file under root, including parent directories."""
    path = root / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def templates(tmp_path) -> Path:
    root = tmp_path / "templates"
    root.mkdir()
    return root


@pytest.fixture
def loader(templates) -> ThemeLoader:
    return ThemeLoader(FileBrowser([templates]))


@pytest.fixture
def registry() -> ThemeRegistry:
    return ThemeRegistry(
        [
            Theme(name="default"),
            Theme(name="dark", parent="default"),
            Theme(name="dark-hc", parent="dark"),
        ]
    )


@pytest.fixture
def engine(tmp_path, loader, registry) -> JinjaEngine:
    return JinjaEngine(loader, tmp_path / "compiled", theme_model=registry)
