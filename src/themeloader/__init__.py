"""themeloader - theme-aware template resolution and rendering for Jinja2"""

from .browser import FileBrowser, TemplateFile
from .cache import ThemedBytecodeCache
from .context import ResolutionContext
from .engine import JinjaEngine
from .exceptions import (
    InvalidConfigurationError,
    ResourceNotFoundError,
    ResourceNotSetError,
    ThemeLoaderError,
    ThemeNotFoundError,
)
from .loader import EXTENSION, ThemeLoader
from .template import Template, ThemedTemplate
from .themes import Theme, ThemeModel, ThemeRegistry

__version__ = "0.1.0"

__all__ = [
    "EXTENSION",
    "FileBrowser",
    "InvalidConfigurationError",
    "JinjaEngine",
    "ResolutionContext",
    "ResourceNotFoundError",
    "ResourceNotSetError",
    "Template",
    "TemplateFile",
    "Theme",
    "ThemeLoader",
    "ThemeLoaderError",
    "ThemeModel",
    "ThemeNotFoundError",
    "ThemeRegistry",
    "ThemedBytecodeCache",
    "ThemedTemplate",
]
