"""Tests for loading ``.pagewright/config.yaml``."""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import pytest

from pagewright.config import SiteConfig, SiteConfigError, load_site_config
from pagewright.config.models import SidebarItem, ThemeConfig

if typ.TYPE_CHECKING:
    from .conftest import WriteDocs


def _config_root(write_docs: WriteDocs, yaml_text: str) -> Path:
    return write_docs({".pagewright/config.yaml": yaml_text})


def test_defaults_without_config_file(write_docs: WriteDocs) -> None:
    """A root without a config file uses the defaults."""
    root = write_docs({"index.md": "# Home\n"})
    config = load_site_config(root)
    assert config.root == root.resolve()
    assert config.title == "Documentation"
    assert config.base == "/"
    assert config.versions == []
    assert config.locales == {}
    assert config.search.enabled
    assert config.llms.enabled
    assert config.pygments_style == "monokai"


def test_sample_config_is_parsed(sample_docs: Path) -> None:
    """Versions, locales, and theme entries are turned into dataclasses."""
    config = load_site_config(sample_docs)
    assert config.title == "Acme Docs"
    assert config.versions == ["v2", "v1"]
    assert config.default_version == "v2"
    assert list(config.locales) == ["en", "ja"]
    assert config.locales["ja"].lang == "ja"
    assert config.default_locale == "en"
    assert [link.text for link in config.theme.nav] == ["Guide"]
    (section,) = config.theme.sidebar["/"]
    assert section.text == "Getting started"
    assert [item.link for item in section.items] == ["/guide/intro"]


def test_yml_extension_is_accepted(write_docs: WriteDocs) -> None:
    """``config.yml`` is found when ``config.yaml`` is absent."""
    root = write_docs({".pagewright/config.yml": "title: Short\n"})
    assert load_site_config(root).title == "Short"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("docs", "/docs/"), ("/docs", "/docs/"), ("/docs/", "/docs/"), ("/", "/"), ("", "/")],
)
def test_base_is_normalized(write_docs: WriteDocs, raw: str, expected: str) -> None:
    """The base always starts and ends with a slash."""
    root = _config_root(write_docs, f"base: '{raw}'\n")
    assert load_site_config(root).base == expected


@pytest.mark.parametrize(
    ("yaml_text", "message"),
    [
        ("versions: [v1, latest]\n", "not a version token"),
        ("versions: [v1]\ndefault_version: v3\n", "not listed in 'versions'"),
        ("default_locale: fr\n", "not a key of 'locales'"),
        ("locales:\n  ja:\n    label: Japanese\n", "locales.ja.lang"),
        ("theme:\n  nav: {text: x}\n", "must be a list"),
        ("search:\n  enabled: maybe\n", "search.enabled"),
        ("- just\n- a list\n", "must be a mapping"),
        ("title: [unclosed\n", "Invalid YAML"),
    ],
)
def test_invalid_config_raises(write_docs: WriteDocs, yaml_text: str, message: str) -> None:
    """Malformed configuration is reported with the offending key."""
    root = _config_root(write_docs, yaml_text)
    with pytest.raises(SiteConfigError, match=message):
        load_site_config(root)


def test_unknown_keys_are_warned(write_docs: WriteDocs, caplog: pytest.LogCaptureFixture) -> None:
    """Unknown top-level keys are ignored with a warning."""
    root = _config_root(write_docs, "title: Docs\nfavicon: icon.png\n")
    with caplog.at_level(logging.WARNING, logger="pagewright.config.loader"):
        config = load_site_config(root)
    assert config.title == "Docs"
    assert "favicon" in caplog.text


def test_explicit_missing_config_path(tmp_path: Path) -> None:
    """An explicit config path must exist."""
    with pytest.raises(FileNotFoundError):
        load_site_config(tmp_path, config_path=tmp_path / "missing.yaml")


def test_explicit_config_path(write_docs: WriteDocs, tmp_path: Path) -> None:
    """An explicit config file overrides the lookup."""
    root = write_docs({"index.md": "# Home\n"})
    custom = tmp_path / "custom.yaml"
    custom.write_text("title: Custom\n", encoding="utf-8")
    assert load_site_config(root, config_path=custom).title == "Custom"


@pytest.mark.parametrize(
    ("base", "url", "expected"),
    [
        ("/", "/guide", "/guide"),
        ("/docs/", "/guide", "/docs/guide"),
        ("/docs/", "/", "/docs/"),
        ("/docs/", "/docs/guide", "/docs/guide"),
    ],
)
def test_with_base_applies_prefix_once(base: str, url: str, expected: str) -> None:
    """The base is added once and never doubled."""
    config = SiteConfig(root=Path("."), base=base)
    assert config.with_base(url) == expected


@pytest.mark.parametrize(
    ("base", "url", "expected"),
    [
        ("/", "/guide", "/guide"),
        ("/", "/", "/"),
        ("/docs/", "/", "/docs/"),
        ("/docs/", "/docs/intro", "/docs/docs/intro"),
        ("/docs/", "/ja/docs/", "/docs/ja/docs/"),
    ],
)
def test_route_url_always_prefixes(base: str, url: str, expected: str) -> None:
    """Route paths never carry the base, even when they start with its name."""
    config = SiteConfig(root=Path("."), base=base)
    assert config.route_url(url) == expected


def test_sidebar_for_uses_longest_prefix() -> None:
    """The most specific sidebar key wins, with ``/`` as the fallback."""
    root_items = [SidebarItem(text="Root")]
    guide_items = [SidebarItem(text="Guide")]
    theme = ThemeConfig(sidebar={"/": root_items, "/guide/": guide_items})
    assert theme.sidebar_for("/guide/intro") is guide_items
    assert theme.sidebar_for("/reference") is root_items
    assert ThemeConfig().sidebar_for("/anything") == []


def test_client_payload_omits_build_paths(sample_docs: Path) -> None:
    """The embedded configuration never leaks the documentation root."""
    payload = load_site_config(sample_docs).client_payload()
    assert "root" not in payload
    assert payload["base"] == "/"
    assert payload["locales"]["en"] == {"label": "English", "lang": "en"}
