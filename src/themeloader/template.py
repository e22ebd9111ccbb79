"""Templates handed to the engine: a resource name plus variables"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Template:
    """A template resource with its variable bindings.

    Usage:
        template = Template("page/home", {"title": "Home"})
        template.set("user", user)
    """

    resource: str | None = None
    variables: dict[str, Any] = field(default_factory=dict)

    def set(self, name: str, value: Any) -> None:
        self.variables[name] = value

    def get(self, name: str, default: Any = None) -> Any:
        return self.variables.get(name, default)

    def set_variables(self, variables: Mapping[str, Any]) -> None:
        self.variables.update(variables)


@dataclass
class ThemedTemplate(Template):
    """A template rendered within a theme.

    resource_id qualifies the resource, e.g. a locale: with resource_id
    "en", "page/home" first looks for "page/home.en.j2".
    """

    theme: str | None = None
    resource_id: str | None = None
