"""Resolution context - the themes, template id and base path of one lookup"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass


def normalize_themes(themes: Iterable[str] | None) -> tuple[str, ...]:
    """Turn a theme list or an ordered {theme: True} mapping into a tuple.

    Order is kept and duplicates are not removed.
    """
    if not themes:
        return ()
    if isinstance(themes, str):
        return (themes,)
    return tuple(themes)


@dataclass(frozen=True)
class ResolutionContext:
    """Immutable resolution state.

    themes are in priority order, the first one being the most specific.
    base_path None means "inherit the loader's base path".
    """

    themes: tuple[str, ...] = ()
    template_id: str | None = None
    base_path: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "themes", normalize_themes(self.themes))

    @property
    def top_theme(self) -> str | None:
        return self.themes[0] if self.themes else None

    def replace(self, **changes) -> "ResolutionContext":
        return dataclasses.replace(self, **changes)


EMPTY_CONTEXT = ResolutionContext()
