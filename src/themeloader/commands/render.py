"""Render and which commands - render a template or show the file it resolves to"""

from __future__ import annotations

from pathlib import Path

import typer
from jinja2 import TemplateError

from themeloader.exceptions import ThemeLoaderError
from themeloader.template import ThemedTemplate

from .utils import exit_with_error, load_engine


def render_command(
    name: str,
    theme: str | None = None,
    template_id: str | None = None,
    variables: dict[str, str] | None = None,
    config_path: Path | None = None,
) -> None:
    """Render a template and print the output."""
    try:
        engine = load_engine(config_path)
        template = ThemedTemplate(
            resource=name,
            variables=dict(variables or {}),
            theme=theme,
            resource_id=template_id,
        )
        output = engine.render(template)
    except (ThemeLoaderError, TemplateError) as e:
        exit_with_error(str(e))

    typer.echo(output, nl=not output.endswith("\n"))


def which_command(
    name: str,
    theme: str | None = None,
    template_id: str | None = None,
    config_path: Path | None = None,
) -> None:
    """Print the absolute path of the file a template resolves to."""
    try:
        engine = load_engine(config_path)
        path = engine.get_file(
            ThemedTemplate(resource=name, theme=theme, resource_id=template_id)
        )
    except ThemeLoaderError as e:
        exit_with_error(str(e))

    typer.echo(path)
