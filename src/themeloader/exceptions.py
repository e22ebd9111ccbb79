"""themeloader exceptions

Errors raised while resolving and rendering themed templates.
"""

from __future__ import annotations

from jinja2 import TemplateNotFound


class ThemeLoaderError(Exception):
    """Base exception for all themeloader errors."""

    pass


class ResourceNotSetError(ThemeLoaderError):
    """Raised when a template is rendered without a resource."""

    def __init__(self) -> None:
        super().__init__("No template resource set")


class ResourceNotFoundError(ThemeLoaderError, TemplateNotFound):
    """Raised when no candidate file exists for a template name.

    ``resource`` holds the last attempted filename, which is the most
    generic one (no theme, no template id).
    """

    def __init__(self, resource: str):
        self.resource = resource
        TemplateNotFound.__init__(
            self, resource, f"Could not find template resource: {resource}"
        )


class InvalidConfigurationError(ThemeLoaderError, ValueError):
    """Raised for invalid paths, theme cycles or malformed config files."""

    pass


class ThemeNotFoundError(ThemeLoaderError, LookupError):
    """Raised when a theme is not known to the theme model."""

    def __init__(self, theme: str):
        self.theme = theme
        super().__init__(f"Theme not found: {theme}")
