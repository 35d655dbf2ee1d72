"""Tests for route discovery in :mod:`pagewright.catalog`."""

from __future__ import annotations

import typing as typ

import pytest

from pagewright.catalog import (
    CatalogError,
    DuplicateRouteError,
    build_catalog,
    iter_markdown_files,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .conftest import WriteDocs


def test_sample_catalog_routes(sample_docs: Path) -> None:
    """Routes are sorted by URL and carry version and locale tokens."""
    routes = build_catalog(sample_docs)
    assert [route.url_path for route in routes] == ["/", "/guide/intro", "/ja/", "/v1/"]
    by_url = {route.url_path: route for route in routes}
    assert by_url["/v1/"].version == "v1"
    assert by_url["/v1/"].locale is None
    assert by_url["/ja/"].locale == "ja"
    assert by_url["/ja/"].version is None
    assert by_url["/"].title == "Home"
    assert by_url["/guide/intro"].source_file == sample_docs / "guide" / "intro.md"


def test_versioned_tree_routes(write_docs: WriteDocs) -> None:
    """Version folders map to prefixed routes tagged with their version."""
    root = write_docs(
        {
            "index.md": "# Home\n",
            "v1/index.md": "# v1\n",
            "v1/guide/intro.md": "# Intro\n",
            "v2/index.md": "# v2\n",
        }
    )
    routes = [(route.url_path, route.version, route.locale) for route in build_catalog(root)]
    assert routes == [
        ("/", None, None),
        ("/v1/", "v1", None),
        ("/v1/guide/intro", "v1", None),
        ("/v2/", "v2", None),
    ]


def test_catalog_is_deterministic(sample_docs: Path) -> None:
    """Two builds of the same tree produce identical catalogs."""
    first = build_catalog(sample_docs)
    second = build_catalog(sample_docs)
    assert [(r.url_path, r.raw_content, r.toc) for r in first] == [
        (r.url_path, r.raw_content, r.toc) for r in second
    ]


def test_route_keeps_raw_content_and_outline(sample_docs: Path) -> None:
    """Routes expose the untouched source and the transformed body."""
    intro = next(route for route in build_catalog(sample_docs) if route.url_path == "/guide/intro")
    assert intro.raw_content.startswith("---\ntitle: Introduction\n---\n")
    assert [item.id for item in intro.toc] == ["introduction", "install", "configure"]
    names = [getattr(node, "name", None) for node in intro.body]
    assert "tab-group" in names
    assert "diagram" in names


def test_drafts_and_reserved_directories_are_skipped(write_docs: WriteDocs) -> None:
    """Underscore files, the tool directory, and dependency folders are ignored."""
    root = write_docs(
        {
            "index.md": "# Home\n",
            "_draft.md": "# Draft\n",
            "guide/_partial.md": "shared\n",
            ".pagewright/notes.md": "# Internal\n",
            "node_modules/pkg/readme.md": "# Dependency\n",
            "notes.txt": "not markdown\n",
        }
    )
    assert [route.url_path for route in build_catalog(root)] == ["/"]
    assert [path.name for path in iter_markdown_files(root)] == ["index.md"]


def test_mdx_files_are_routes(write_docs: WriteDocs) -> None:
    """Both ``.md`` and ``.mdx`` sources are catalogued."""
    root = write_docs({"a.md": "A\n", "b.mdx": "B\n"})
    assert [route.url_path for route in build_catalog(root)] == ["/a", "/b"]


def test_empty_root_yields_no_routes(write_docs: WriteDocs) -> None:
    """A directory without Markdown is a valid, empty site."""
    assert build_catalog(write_docs({})) == []


@pytest.mark.parametrize(
    "files",
    [
        {"guide.md": "A\n", "guide/index.md": "B\n"},
        {"index.md": "A\n", "README.md": "B\n"},
        {"guide/index.md": "A\n", "guide/readme.mdx": "B\n"},
    ],
)
def test_duplicate_routes_are_rejected(write_docs: WriteDocs, files: dict[str, str]) -> None:
    """Two sources resolving to one output location abort the catalog."""
    root = write_docs(files)
    with pytest.raises(DuplicateRouteError) as excinfo:
        build_catalog(root)
    assert excinfo.value.first != excinfo.value.second
    assert "Duplicate route" in str(excinfo.value)


def test_missing_root_is_an_error(tmp_path: Path) -> None:
    """A root that is not a directory cannot be catalogued."""
    with pytest.raises(CatalogError, match="not a directory"):
        build_catalog(tmp_path / "absent")


def test_broken_page_does_not_abort_catalog(write_docs: WriteDocs) -> None:
    """Invalid frontmatter degrades one page instead of failing the build."""
    root = write_docs({"bad.md": "---\ntitle: [oops\n---\n# Bad\n", "good.md": "# Good\n"})
    routes = build_catalog(root)
    assert [route.url_path for route in routes] == ["/bad", "/good"]
    assert routes[0].title is None
