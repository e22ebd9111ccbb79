"""List command - list available templates of a namespace"""

from __future__ import annotations

from pathlib import Path

from rich.table import Table

from themeloader.exceptions import ThemeLoaderError

from .utils import console, exit_with_error, load_engine


def list_command(
    namespace: str = "",
    theme: str | None = None,
    config_path: Path | None = None,
) -> None:
    """List templates under namespace, merged over the theme hierarchy."""
    try:
        engine = load_engine(config_path)
        files = engine.list_files(namespace, theme)
    except ThemeLoaderError as e:
        exit_with_error(str(e))

    if not files:
        console.print("[yellow]No templates found[/yellow]")
        return

    table = Table()
    table.add_column("Resource", style="cyan")
    table.add_column("Name")

    for resource in sorted(files):
        table.add_row(resource, files[resource])

    console.print(table)
