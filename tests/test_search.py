"""Tests for the static search provider and search documents."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import pytest

from pagewright.bundler import BuildTarget
from pagewright.catalog import build_catalog
from pagewright.config import load_site_config
from pagewright.search import (
    NullSearchProvider,
    SearchDocument,
    StaticSearchProvider,
    build_search_documents,
    clean_markdown,
    default_search_provider,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .conftest import WriteDocs


@pytest.fixture
def search_root(write_docs: WriteDocs) -> Path:
    """Return a small site with one page clearly about installation."""
    return write_docs(
        {
            "install.md": "---\ntitle: Install\n---\n# Install\n\nRun the installer to install the CLI.\n",
            "config.md": "# Configuration\n\nAfter you install, edit the config file.\n",
            "faq.md": "# FAQ\n\nNothing relevant here.\n",
        }
    )


@pytest.fixture
def provider(search_root: Path) -> StaticSearchProvider:
    """Return a provider indexing ``search_root``."""
    config = load_site_config(search_root)
    return StaticSearchProvider.from_routes(build_catalog(search_root), config)


def test_title_matches_rank_first(provider: StaticSearchProvider) -> None:
    """Title and heading hits outrank body-only hits; scores are normalized."""
    results = provider.search("install")
    assert [result.id for result in results] == ["/install", "/config"]
    assert results[0].score == 1.0
    assert results[1].score == pytest.approx(0.125)
    assert results[0].title == "Install"
    assert results[1].title == "Config"


def test_all_terms_must_match(provider: StaticSearchProvider) -> None:
    """Multi-word queries only return pages containing every term."""
    results = provider.search("install config")
    assert [result.id for result in results] == ["/config"]
    assert results[0].excerpt == "Configuration After you install, edit the config file."


@pytest.mark.parametrize("query", ["", "   ", "nonexistent"])
def test_queries_without_hits(provider: StaticSearchProvider, query: str) -> None:
    """Blank or unmatched queries return no results."""
    assert provider.search(query) == []


def test_search_is_case_insensitive(provider: StaticSearchProvider) -> None:
    """Query case does not matter."""
    assert provider.search("INSTALL") == provider.search("install")


def test_limit_caps_results(search_root: Path) -> None:
    """At most ``limit`` results are returned."""
    config = load_site_config(search_root)
    limited = StaticSearchProvider.from_routes(build_catalog(search_root), config, limit=1)
    assert [result.id for result in limited.search("install")] == ["/install"]


def test_excerpt_is_windowed_around_the_match() -> None:
    """Long content is trimmed around the first hit with ellipses."""
    content = "lorem " * 40 + "needle" + " ipsum" * 40
    document = SearchDocument("/long", "Long", "/long", "", "", content)
    (result,) = StaticSearchProvider([document]).search("needle")
    assert result.excerpt.startswith("...")
    assert result.excerpt.endswith("...")
    assert "needle" in result.excerpt
    assert len(result.excerpt) < len(content)


def test_documents_use_base_and_skip_code(write_docs: WriteDocs) -> None:
    """Search URLs carry the base; fenced code is not indexed."""
    root = write_docs(
        {
            "guide.md": "# Guide\n\n```bash\nsecret-token\n```\n\n::: tip\nVisible tip.\n:::\n",
            ".pagewright/config.yaml": "base: /docs/\n",
        }
    )
    config = load_site_config(root)
    (document,) = build_search_documents(build_catalog(root), config)
    assert document.url == "/docs/guide"
    assert document.headings == "Guide"
    assert "secret-token" not in document.content
    assert "Visible tip." in document.content
    assert ":::" not in document.content


def test_clean_markdown_strips_markup() -> None:
    """Links keep their text; emphasis and headings lose their markers."""
    assert clean_markdown("## Title\n\nUse **bold** and [links](/x).") == (
        "Title Use bold and links."
    )


def test_client_module_exports_search(provider: StaticSearchProvider) -> None:
    """The client module defines ``exports.search``; the server has none."""
    source = provider.module_source(BuildTarget.CLIENT)
    assert source is not None
    assert "exports.search = function (query)" in source
    assert '"/install"' in source
    assert provider.module_source(BuildTarget.SERVER) is None


def test_null_provider() -> None:
    """The null provider answers nothing and ships a stub module."""
    provider = NullSearchProvider()
    assert provider.search("anything") == []
    assert "return []" in (provider.module_source(BuildTarget.CLIENT) or "")
    assert provider.module_source(BuildTarget.SERVER) is None


def test_default_provider_follows_config(search_root: Path) -> None:
    """Disabling search in the config selects the null provider."""
    config = load_site_config(search_root)
    routes = build_catalog(search_root)
    assert isinstance(default_search_provider(routes, config), StaticSearchProvider)
    disabled = dc.replace(config, search=dc.replace(config.search, enabled=False))
    assert isinstance(default_search_provider(routes, disabled), NullSearchProvider)


def test_result_payload_shape(provider: StaticSearchProvider) -> None:
    """Results serialize to the fields the client runtime expects."""
    payload = provider.search("install")[0].to_dict()
    assert set(payload) == {"id", "title", "url", "excerpt", "score"}
