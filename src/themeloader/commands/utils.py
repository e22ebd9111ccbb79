"""Shared utilities for CLI commands"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

from themeloader.config import CONFIG_FILENAME, EngineConfig, find_config
from themeloader.engine import JinjaEngine

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the themeloader CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level - shows compile directory creation
    - Debug (THEMELOADER_DEBUG=1): DEBUG level - shows every probed candidate
    """
    debug = bool(os.environ.get("THEMELOADER_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=err_console,
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("themeloader")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=exit_code)


def load_engine(config_path: Path | None = None) -> JinjaEngine:
    """Build the engine from --config, themeloader.yaml in cwd/parents, or defaults"""
    if config_path is not None and not config_path.exists():
        exit_with_error(f"Config file not found: {config_path}")

    path = config_path or find_config() or Path.cwd() / CONFIG_FILENAME
    return EngineConfig.load(path).build_engine()


def parse_variables(pairs: list[str]) -> dict[str, str]:
    """Parse key=value pairs from --var options"""
    variables: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--var")
        variables[key.strip()] = value
    return variables
