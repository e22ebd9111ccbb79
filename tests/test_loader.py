"""Tests for ThemeLoader resolution, cache keys, freshness and listing."""

import os

import pytest
from jinja2 import TemplateNotFound

from conftest import write
from themeloader import (
    FileBrowser,
    InvalidConfigurationError,
    ResolutionContext,
    ResourceNotFoundError,
    ThemeLoader,
)


def test_resolve_without_themes(loader, templates):
    write(templates, "page/home.j2", "home")

    file = loader.resolve("page/home")
    assert file.path == templates / "page/home.j2"
    assert file.read() == "home"


def test_resolve_honors_theme_priority(loader, templates):
    write(templates, "dark/page/home.j2", "dark")
    write(templates, "default/page/home.j2", "default")
    loader.set_themes(["dark", "default"])

    assert loader.resolve("page/home").read() == "dark"


def test_resolve_falls_through_to_lower_theme(loader, templates):
    write(templates, "default/page/home.j2", "default")
    loader.set_themes(["dark", "default"])

    assert loader.resolve("page/home").read() == "default"


def test_resolve_falls_back_to_unthemed(loader, templates):
    write(templates, "page/home.j2", "plain")
    loader.set_themes(["dark", "default"])

    assert loader.resolve("page/home").read() == "plain"


def test_resolve_prefers_template_id_within_theme(loader, templates):
    write(templates, "dark/page/home.j2", "dark")
    write(templates, "dark/page/home.en.j2", "dark en")
    loader.set_themes(["dark"])
    loader.set_template_id("en")

    assert loader.resolve("page/home").read() == "dark en"


def test_themed_unqualified_wins_over_unthemed_qualified(loader, templates):
    write(templates, "dark/page/home.j2", "dark")
    write(templates, "page/home.en.j2", "plain en")
    loader.set_themes(["dark"])
    loader.set_template_id("en")

    assert loader.resolve("page/home").read() == "dark"


def test_resolve_not_found_carries_generic_filename(loader):
    loader.set_themes(["dark", "default"])
    loader.set_template_id("v2")

    with pytest.raises(ResourceNotFoundError) as exc_info:
        loader.resolve("page/home")

    assert exc_info.value.resource == "page/home.j2"
    # usable by Jinja2 machinery as well
    assert isinstance(exc_info.value, TemplateNotFound)


def test_resolve_not_found_with_base_path(templates):
    loader = ThemeLoader(FileBrowser([templates]), "views")
    loader.set_themes(["dark"])

    with pytest.raises(ResourceNotFoundError) as exc_info:
        loader.resolve("page/home")
    assert exc_info.value.resource == "views/page/home.j2"


def test_probe_order():
    loader = ThemeLoader(FileBrowser(["."]))
    context = ResolutionContext(themes=("dark", "default"), template_id="v2")

    assert loader.candidates("page/home", context) == [
        "dark/page/home.v2.j2",
        "dark/page/home.j2",
        "default/page/home.v2.j2",
        "default/page/home.j2",
        "page/home.v2.j2",
        "page/home.j2",
    ]


def test_probe_order_with_base_path():
    loader = ThemeLoader(FileBrowser(["."]), "views/")
    context = ResolutionContext(themes=("dark",))

    assert loader.candidates("page/home", context) == [
        "views/dark/page/home.j2",
        "views/page/home.j2",
    ]


def test_probe_order_returns_first_match(loader, templates):
    write(templates, "default/page/home.v2.j2", "default v2")
    write(templates, "page/home.v2.j2", "plain v2")
    write(templates, "dark/page/home.j2", "dark")

    context = ResolutionContext(themes=("dark", "default"), template_id="v2")
    # dark/page/home.v2 is missing, dark/page/home is next in line
    assert loader.resolve("page/home", context).read() == "dark"


def test_resolve_rejects_parent_references(loader, templates):
    write(templates.parent, "secret.j2", "nope")

    with pytest.raises(ResourceNotFoundError):
        loader.resolve("../secret")


def test_resolve_with_base_path(templates):
    write(templates, "views/dark/page/home.j2", "dark")
    loader = ThemeLoader(FileBrowser([templates]), "views")
    loader.set_themes(["dark"])

    assert loader.resolve("page/home").read() == "dark"


def test_resolve_with_ordered_theme_mapping(loader, templates):
    write(templates, "dark/page/home.j2", "dark")
    write(templates, "default/page/home.j2", "default")
    loader.set_themes({"dark": True, "default": True})

    assert loader.themes == ("dark", "default")
    assert loader.resolve("page/home").read() == "dark"


def test_set_base_path_rejects_empty_string(loader):
    with pytest.raises(InvalidConfigurationError):
        loader.set_base_path("")


def test_set_base_path_accepts_none(loader):
    loader.set_base_path("views")
    loader.set_base_path(None)
    assert loader.base_path is None


def test_constructor_rejects_empty_base_path(templates):
    with pytest.raises(InvalidConfigurationError):
        ThemeLoader(FileBrowser([templates]), "")


def test_cache_key_with_themes_and_template_id(loader):
    loader.set_themes(["a", "b"])
    loader.set_template_id("en")

    assert loader.cache_key("page/home") == "a-page/homeen"


def test_cache_key_without_state(loader):
    assert loader.cache_key("page/home") == "page/home"


def test_cache_key_only_uses_top_theme(loader):
    first = loader.cache_key("x", ResolutionContext(themes=("a", "b")))
    second = loader.cache_key("x", ResolutionContext(themes=("a", "c")))

    assert first == second == "a-x"


def test_is_fresh(loader, templates):
    path = write(templates, "page/home.j2", "home")
    os.utime(path, (1000, 1000))

    assert loader.is_fresh("page/home", 1000)
    assert loader.is_fresh("page/home", 1001)
    assert not loader.is_fresh("page/home", 999)


def test_is_fresh_missing_template_raises(loader):
    with pytest.raises(ResourceNotFoundError):
        loader.is_fresh("missing", 0)


def test_get_source_returns_filename_and_uptodate(loader, templates):
    write(templates, "page/home.j2", "home")

    source, filename, uptodate = loader.get_source(None, "page/home")

    assert source == "home"
    assert filename == str(templates / "page/home.j2")
    assert uptodate()


def test_get_source_not_uptodate_after_context_change(loader, templates):
    write(templates, "page/home.j2", "home")
    _, _, uptodate = loader.get_source(None, "page/home")

    loader.set_themes(["dark"])
    assert not uptodate()


def test_get_source_not_uptodate_after_modification(loader, templates):
    path = write(templates, "page/home.j2", "home")
    os.utime(path, (1000, 1000))
    _, _, uptodate = loader.get_source(None, "page/home")

    os.utime(path, (2000, 2000))
    assert not uptodate()


def test_activate_restores_previous_state(loader):
    loader.set_themes(["outer"])

    with loader.activate(ResolutionContext(themes=("inner",), template_id="en")) as ctx:
        assert ctx.themes == ("inner",)
        assert loader.template_id == "en"

    assert loader.themes == ("outer",)
    assert loader.template_id is None


def test_list_resources_without_themes(loader, templates):
    write(templates, "page/home.j2")
    write(templates, "page/blog/post.j2")
    write(templates, "page/readme.txt")

    assert loader.list_resources("page") == {
        "page/home": "home",
        "page/blog/post": "blog/post",
    }


def test_list_resources_first_theme_wins(loader, templates):
    write(templates, "dark/page/home.j2")
    write(templates, "default/page/home.j2")
    write(templates, "default/page/about.j2")
    loader.set_themes(["dark", "default"])

    resources = loader.list_resources("page")

    assert resources == {"page/home": "home", "page/about": "about"}


def test_list_resources_lower_theme_never_overrides(templates):
    write(templates, "views/default/page/home.j2")
    write(templates, "views/dark/page/home.j2")
    write(templates, "views/dark/page/about.j2")
    loader = ThemeLoader(FileBrowser([templates]), "views")

    resources = loader.list_resources(
        "page", ResolutionContext(themes=("default", "dark"))
    )

    # home was seen first under default and keeps its position
    assert list(resources) == ["page/home", "page/about"]


def test_list_resources_merges_include_dirs(tmp_path):
    first = tmp_path / "app"
    second = tmp_path / "vendor"
    write(first, "page/home.j2")
    write(second, "page/home.j2")
    write(second, "page/about.j2")
    loader = ThemeLoader(FileBrowser([first, second]))

    assert loader.list_resources("page") == {
        "page/home": "home",
        "page/about": "about",
    }


def test_list_resources_missing_namespace(loader):
    assert loader.list_resources("nothing") == {}


def test_list_templates(loader, templates):
    write(templates, "page/home.j2")
    write(templates, "layout.j2")

    assert loader.list_templates() == ["layout", "page/home"]


def test_list_resources_nested_include_dirs(tmp_path):
    outer = tmp_path / "app"
    inner = outer / "vendor"
    write(outer, "page/home.j2")
    write(inner, "page/about.j2")
    loader = ThemeLoader(FileBrowser([outer, inner]))

    assert loader.list_resources("page") == {
        "page/home": "home",
        "page/about": "about",
    }


def test_list_resources_without_themes_includes_theme_dirs(loader, templates):
    write(templates, "page/home.j2")
    write(templates, "dark/page/home.j2")

    assert loader.list_templates() == ["dark/page/home", "page/home"]
