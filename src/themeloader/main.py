"""themeloader CLI Main Entry Point

Usage:
    themeloader render page/home -t dark --var title=Hi   # Render a template
    themeloader which page/home -t dark -i en             # Show the resolved file
    themeloader list page -t dark                          # List templates of a namespace
    themeloader -c path/to/themeloader.yaml ...            # Use specific config
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from . import __version__
from .commands import list_command, render_command, which_command
from .commands.utils import parse_variables, setup_logging

typer_app = typer.Typer(no_args_is_help=True)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"themeloader {__version__}")
        raise typer.Exit()


@typer_app.callback()
def cli(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to themeloader.yaml file."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Resolve and render Jinja2 templates across a theme hierarchy."""
    setup_logging(verbose)
    ctx.obj = config


@typer_app.command()
def render(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Template name without extension."),
    theme: Optional[str] = typer.Option(None, "-t", "--theme", help="Theme to render in."),
    template_id: Optional[str] = typer.Option(
        None, "-i", "--id", help="Template id qualifier, e.g. a locale."
    ),
    var: Optional[List[str]] = typer.Option(
        None, "--var", help="Template variable as key=value, repeatable."
    ),
) -> None:
    """Render a template and print the output."""
    render_command(name, theme, template_id, parse_variables(var or []), ctx.obj)


@typer_app.command()
def which(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Template name without extension."),
    theme: Optional[str] = typer.Option(None, "-t", "--theme", help="Theme to resolve in."),
    template_id: Optional[str] = typer.Option(
        None, "-i", "--id", help="Template id qualifier, e.g. a locale."
    ),
) -> None:
    """Print the file a template resolves to."""
    which_command(name, theme, template_id, ctx.obj)


@typer_app.command("list")
def list_templates(
    ctx: typer.Context,
    namespace: str = typer.Argument("", help="Namespace (directory) to list."),
    theme: Optional[str] = typer.Option(None, "-t", "--theme", help="Theme to list for."),
) -> None:
    """List available templates, higher priority themes first."""
    list_command(namespace, theme, ctx.obj)


def app() -> None:
    """Entry point for the CLI."""
    typer_app()


if __name__ == "__main__":
    app()
