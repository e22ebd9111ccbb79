"""Compiled template cache keyed by the loader's theme-aware cache key"""

from __future__ import annotations

from hashlib import sha1
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import FileSystemBytecodeCache

if TYPE_CHECKING:
    from themeloader.loader import ThemeLoader


class ThemedBytecodeCache(FileSystemBytecodeCache):
    """Stores compiled templates per theme / template id.

    The bucket key comes from ``ThemeLoader.cache_key`` in the active
    context. Within a bucket Jinja2 still checks the source checksum, so
    two stacks sharing a key recompile instead of serving stale code.
    """

    def __init__(self, directory: str | Path, loader: "ThemeLoader"):
        super().__init__(str(directory), "__themeloader_%s.cache")
        self.loader = loader

    def get_cache_key(self, name: str, filename: str | None = None) -> str:
        key = self.loader.cache_key(name)
        return sha1(key.encode("utf-8")).hexdigest()
