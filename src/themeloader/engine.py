"""JinjaEngine - renders themed templates through Jinja2.

Every render or lookup runs in three steps:

    pre_process   push the theme hierarchy and template id of the template
    delegate      let Jinja2 load/render, calling back into the loader
    post_process  restore the previous loader state, also on errors
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import Token
from pathlib import Path
from typing import Any

from jinja2 import Environment
from jinja2.ext import Extension

from themeloader.cache import ThemedBytecodeCache
from themeloader.context import ResolutionContext
from themeloader.exceptions import ResourceNotSetError, ThemeNotFoundError
from themeloader.loader import EXTENSION, ThemeLoader
from themeloader.template import Template, ThemedTemplate
from themeloader.themes import ThemeModel

log = logging.getLogger(__name__)


class JinjaEngine:
    """Theme-aware template engine on top of a Jinja2 Environment.

    Usage:
        engine = JinjaEngine(ThemeLoader(FileBrowser(["templates"])), ".cache/templates")
        engine.render(ThemedTemplate("page/home", {"title": "Hi"}, theme="dark"))
    """

    NAME = "jinja"
    EXTENSION = EXTENSION

    def __init__(
        self,
        loader: ThemeLoader,
        compile_directory: str | Path,
        theme_model: ThemeModel | None = None,
        **options: Any,
    ):
        """Initialize the engine.

        Args:
            loader: Resolves template names for Jinja2.
            compile_directory: Directory for compiled templates, created if missing.
            theme_model: Provides theme hierarchies for themed templates.
            **options: Extra keyword arguments for the Jinja2 Environment.
        """
        compile_directory = Path(compile_directory)
        if not compile_directory.is_dir():
            compile_directory.mkdir(parents=True, exist_ok=True)
            log.info(f"Created compile directory {compile_directory}")

        self.loader = loader
        self.theme_model = theme_model
        self.compile_directory = compile_directory

        options.setdefault("auto_reload", True)
        self._environment = Environment(
            loader=loader,
            bytecode_cache=ThemedBytecodeCache(compile_directory, loader),
            **options,
        )

    @property
    def environment(self) -> Environment:
        return self._environment

    def add_extension(self, extension: str | type[Extension]) -> None:
        self._environment.add_extension(extension)

    def render(self, template: Template) -> str:
        """Render a template.

        Raises:
            ResourceNotSetError: If the template has no resource.
            ResourceNotFoundError: If the resource could not be resolved.
        """
        resource = self._get_resource(template)

        with self.processing(template) as context:
            log.debug(
                f"Rendering '{resource}' with themes {list(context.themes)}"
                f" and template id {context.template_id!r}"
            )
            return self._environment.get_template(resource).render(template.variables)

    def get_file(self, template: Template) -> str:
        """Absolute path of the file the template resolves to.

        Raises:
            ResourceNotSetError: If the template has no resource.
            ResourceNotFoundError: If the resource could not be resolved.
        """
        resource = self._get_resource(template)

        with self.processing(template):
            return self.loader.resolve(resource).absolute_path

    def list_files(self, namespace: str, theme: str | None = None) -> dict[str, str]:
        """Available templates under namespace for a theme and its parents"""
        hierarchy = self.get_theme_hierarchy(theme)
        context = self.loader.state.replace(themes=tuple(hierarchy))

        with self.loader.activate(context):
            return self.loader.list_resources(namespace)

    def get_theme_hierarchy(self, theme: str | None) -> dict[str, bool]:
        if theme is None:
            return {}
        if self.theme_model is None:
            raise ThemeNotFoundError(theme)
        return self.theme_model.get_theme_hierarchy(theme)

    def pre_process(self, template: Template) -> Token:
        """Push the loader state for template.

        Only themed templates change the state. Returns the token for
        post_process.
        """
        state = self.loader.state
        if isinstance(template, ThemedTemplate):
            state = state.replace(
                themes=tuple(self.get_theme_hierarchy(template.theme)),
                template_id=template.resource_id or state.template_id,
            )
        return self.loader.push_context(state)

    def post_process(self, token: Token) -> None:
        """Restore the loader state from before pre_process"""
        self.loader.pop_context(token)

    @contextmanager
    def processing(self, template: Template) -> Iterator[ResolutionContext]:
        token = self.pre_process(template)
        try:
            yield self.loader.context
        finally:
            self.post_process(token)

    @staticmethod
    def _get_resource(template: Template) -> str:
        if not template.resource:
            raise ResourceNotSetError()
        return template.resource
