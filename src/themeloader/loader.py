"""ThemeLoader - theme-aware Jinja2 loader.

Resolution order for a template name, most specific first:

    [base/]<theme>/<name>.<template_id>.j2    for each theme in priority order
    [base/]<theme>/<name>.j2
    [base/]<name>.<template_id>.j2            no theme segment
    [base/]<name>.j2

The qualified filename is only probed when a template id is set. The
active themes and template id live in a ResolutionContext held per
thread / asyncio task, see ``activate()``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from pathlib import PurePosixPath

from jinja2 import BaseLoader, Environment

from themeloader.browser import FileBrowser, TemplateFile
from themeloader.context import EMPTY_CONTEXT, ResolutionContext, normalize_themes
from themeloader.exceptions import InvalidConfigurationError, ResourceNotFoundError

log = logging.getLogger(__name__)

# Extension of every template resource
EXTENSION = "j2"


def _normalize_name(name: str) -> str:
    """Collapse a template name to "a/b/c", refusing parent references."""
    pieces = [piece for piece in str(name).replace("\\", "/").split("/") if piece not in ("", ".")]
    if not pieces or ".." in pieces:
        raise ResourceNotFoundError(name)
    return "/".join(pieces)


class ThemeLoader(BaseLoader):
    """Resolves template names across a theme hierarchy.

    Implements the Jinja2 loader protocol (``get_source`` and
    ``list_templates``) on top of a FileBrowser.
    """

    def __init__(self, browser: FileBrowser, path: str | None = None):
        self.browser = browser
        self._path: str | None = None
        self.set_base_path(path)
        self._state: ContextVar[ResolutionContext] = ContextVar(
            f"themeloader_state_{id(self)}", default=EMPTY_CONTEXT
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def base_path(self) -> str | None:
        return self._path

    def set_base_path(self, path: str | None) -> None:
        """Set the path prepended to every lookup.

        Raises:
            InvalidConfigurationError: If path is not None and empty or not a string.
        """
        if path is not None and (not isinstance(path, str) or not path):
            raise InvalidConfigurationError(
                "Could not set the base path: provided path is empty or invalid"
            )
        self._path = path

    @property
    def context(self) -> ResolutionContext:
        """Active resolution context, with the loader's base path filled in"""
        return self._effective(None)

    @property
    def state(self) -> ResolutionContext:
        """Active resolution context as set, without defaults applied"""
        return self._state.get()

    @property
    def themes(self) -> tuple[str, ...]:
        return self._state.get().themes

    @property
    def template_id(self) -> str | None:
        return self._state.get().template_id

    def set_themes(self, themes: Iterable[str] | None) -> None:
        """Set the active themes, highest priority first. None clears them."""
        state = self._state.get().replace(themes=normalize_themes(themes))
        self._state.set(state)
        log.debug(f"Themes set to {list(state.themes)}")

    def set_template_id(self, template_id: str | None) -> None:
        self._state.set(self._state.get().replace(template_id=template_id or None))
        log.debug(f"Template id set to {template_id!r}")

    def push_context(self, context: ResolutionContext) -> Token:
        """Make context active; returns the token to restore the previous one"""
        return self._state.set(context)

    def pop_context(self, token: Token) -> None:
        self._state.reset(token)

    @contextmanager
    def activate(self, context: ResolutionContext) -> Iterator[ResolutionContext]:
        """Activate context for the duration of the with block."""
        token = self.push_context(context)
        try:
            yield self.context
        finally:
            self.pop_context(token)

    def _effective(self, context: ResolutionContext | None) -> ResolutionContext:
        ctx = context if context is not None else self._state.get()
        if ctx.base_path is None and self._path is not None:
            ctx = ctx.replace(base_path=self._path)
        return ctx

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    @staticmethod
    def _prefix(base_path: str | None, theme: str | None = None) -> str:
        parts = []
        if base_path:
            parts.append(base_path.rstrip("/"))
        if theme:
            parts.append(theme.strip("/"))
        parts = [part for part in parts if part]
        return "/".join(parts) + "/" if parts else ""

    def candidates(
        self, name: str, context: ResolutionContext | None = None
    ) -> list[str]:
        """Every filename probed for name, in probe order"""
        ctx = self._effective(context)
        name = _normalize_name(name)

        filenames = []
        for theme in (*ctx.themes, None):
            prefix = self._prefix(ctx.base_path, theme)
            if ctx.template_id:
                filenames.append(f"{prefix}{name}.{ctx.template_id}.{EXTENSION}")
            filenames.append(f"{prefix}{name}.{EXTENSION}")
        return filenames

    def resolve(self, name: str, context: ResolutionContext | None = None) -> TemplateFile:
        """Locate the source file of a template.

        Args:
            name: Template name relative to the template root, without extension.
            context: Resolution context; defaults to the active one.

        Returns:
            The first existing candidate.

        Raises:
            ResourceNotFoundError: If no candidate exists. Carries the last
                attempted filename (no theme, no template id).
        """
        filename = name
        for filename in self.candidates(name, context):
            file = self.browser.find(filename)
            if file is not None:
                log.debug(f"Resolved template '{name}' to {file.path}")
                return file
            log.debug(f"Template candidate not found: {filename}")

        raise ResourceNotFoundError(filename)

    def cache_key(self, name: str, context: ResolutionContext | None = None) -> str:
        """Key of the compiled template for name.

        Only the first theme takes part in the key: theme stacks sharing
        their top theme share keys, even when a lower theme provides the file.
        """
        ctx = self._effective(context)
        key = name
        if ctx.top_theme:
            key = f"{ctx.top_theme}-{key}"
        if ctx.template_id:
            key += ctx.template_id
        return key

    def is_fresh(
        self, name: str, since: float, context: ResolutionContext | None = None
    ) -> bool:
        """True if the resolved file was not modified after since"""
        return self.resolve(name, context).modification_time <= since

    def get_source(
        self, environment: Environment, template: str
    ) -> tuple[str, str | None, Callable[[], bool] | None]:
        ctx = self.context
        file = self.resolve(template, ctx)
        mtime = file.modification_time

        def uptodate() -> bool:
            if self.context != ctx:
                return False
            try:
                current = self.resolve(template, ctx)
            except ResourceNotFoundError:
                return False
            # a deleted or newly added override resolves to another file
            return current.path == file.path and current.modification_time <= mtime

        return file.read(), file.absolute_path, uptodate

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_resources(
        self, namespace: str = "", context: ResolutionContext | None = None
    ) -> dict[str, str]:
        """Available templates under namespace.

        Keys are paths relative to the theme root, values are paths relative
        to the namespace directory, both without extension. Higher priority
        themes win on duplicate keys.

        Without themes the listing starts at the base path, so theme
        directories below it are listed too, e.g. "dark/page/home".
        """
        ctx = self._effective(context)
        namespace = namespace.strip("/")

        resources: dict[str, str] = {}
        for theme in ctx.themes or (None,):
            root = self._prefix(ctx.base_path, theme)
            path = f"{root}{namespace}" if namespace else root.rstrip("/")
            for key, name in self._list_path(path, root).items():
                resources.setdefault(key, name)
        return resources

    def _list_path(self, path: str, root: str) -> dict[str, str]:
        files: dict[str, str] = {}
        namespace_prefix = f"{path}/" if path else ""

        depth = len(PurePosixPath(path).parts) if path else 0
        for directory in self.browser.list_directories(path):
            include_dir = directory.parents[depth - 1] if depth else directory
            for file in sorted(directory.rglob(f"*.{EXTENSION}")):
                if not file.is_file():
                    continue

                stem = self.browser.relativize(file, include_dir)[: -(len(EXTENSION) + 1)]
                key = stem.removeprefix(root)
                name = stem.removeprefix(namespace_prefix)
                files.setdefault(key, name)

        log.debug(f"Found {len(files)} template(s) under '{path}'")
        return files

    def list_templates(self) -> list[str]:
        return sorted(self.list_resources(""))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_path={self._path!r}, context={self._state.get()!r})"

