"""Discover Markdown pages and build the ordered route catalog.

The catalog is rebuilt wholesale on every build: walk the documentation
root, skip the reserved ``.pagewright`` directory, dependency directories, and
underscore-prefixed drafts, derive each page's URL and version/locale from its
relative path, and run the document transformer on its contents.

Example
-------
>>> from pathlib import Path
>>> from pagewright.catalog import build_catalog
>>> [route.url_path for route in build_catalog(Path("docs"))]  # doctest: +SKIP
['/', '/guide/intro', '/v1/']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import os
from pathlib import Path

from pagewright._constants import IGNORED_DIRS, MARKDOWN_SUFFIXES, TOOL_DIR
from pagewright.document import (
    ContentTree,
    Frontmatter,
    TocItem,
    transform_document,
)
from pagewright.paths import detect_locale, detect_version, file_to_url_path

logger = logging.getLogger(__name__)


class CatalogError(RuntimeError):
    """Raised when the documentation tree cannot be turned into routes."""


class DuplicateRouteError(CatalogError):
    """Raised when two source files resolve to the same page location."""

    def __init__(self, url_path: str, first: Path, second: Path) -> None:
        self.url_path = url_path
        self.first = first
        self.second = second
        msg = f"Duplicate route '{url_path}': '{first}' and '{second}' map to the same page."
        super().__init__(msg)


@dc.dataclass(slots=True, frozen=True)
class Route:
    """One discovered documentation page.

    Attributes
    ----------
    url_path : str
        Canonical absolute URL; directory-style pages end with ``/``.
    source_file : Path
        Absolute path of the backing Markdown file.
    version : str or None
        Version token from the first path segment.
    locale : str or None
        Locale token from the first path segment when no version matched.
    frontmatter : Frontmatter
        Declared page metadata.
    toc : tuple[TocItem, ...]
        Heading outline.
    raw_content : str
        Source text exactly as read from disk.
    body : ContentTree
        Transformed content tree.
    """

    url_path: str
    source_file: Path
    version: str | None
    locale: str | None
    frontmatter: Frontmatter
    toc: tuple[TocItem, ...]
    raw_content: str
    body: ContentTree = ()

    @property
    def title(self) -> str | None:
        """Return the frontmatter title, if declared."""
        return self.frontmatter.title


def _route_key(url_path: str) -> str:
    """Return the output location key shared by colliding URLs."""
    return url_path.rstrip("/").casefold()


def iter_markdown_files(root: Path) -> cabc.Iterator[Path]:
    """Yield Markdown sources under ``root`` in a stable order.

    Reserved and dependency directories are pruned during the walk, and
    files whose name starts with ``_`` are skipped.
    """
    for current, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            name for name in dirnames if name != TOOL_DIR and name not in IGNORED_DIRS
        )
        for filename in sorted(filenames):
            if filename.startswith("_") or not filename.endswith(MARKDOWN_SUFFIXES):
                continue
            yield Path(current) / filename


def _load_route(root: Path, path: Path) -> Route:
    relative = path.relative_to(root).as_posix()
    try:
        raw_content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read '{path}': {exc}"
        raise CatalogError(msg) from exc
    document = transform_document(raw_content, source=path)
    return Route(
        url_path=file_to_url_path(relative),
        source_file=path,
        version=detect_version(relative),
        locale=detect_locale(relative),
        frontmatter=document.frontmatter,
        toc=document.toc,
        raw_content=raw_content,
        body=document.body,
    )


def build_catalog(root: Path) -> list[Route]:
    """Build the ordered list of routes for a documentation root.

    Parameters
    ----------
    root : Path
        Directory containing the Markdown sources.

    Returns
    -------
    list[Route]
        Routes sorted by ``url_path`` using code-point ordering.

    Raises
    ------
    CatalogError
        If ``root`` is not a directory or a source file cannot be read.
    DuplicateRouteError
        If two files resolve to the same URL or output location, including
        paths that differ only by case or a trailing slash.
    """
    resolved = root.resolve()
    if not resolved.is_dir():
        msg = f"Documentation root '{root}' is not a directory."
        raise CatalogError(msg)

    seen: dict[str, Route] = {}
    for path in iter_markdown_files(resolved):
        route = _load_route(resolved, path)
        key = _route_key(route.url_path)
        if key in seen:
            raise DuplicateRouteError(route.url_path, seen[key].source_file, path)
        seen[key] = route

    routes = sorted(seen.values(), key=lambda route: route.url_path)
    logger.info("Discovered %d routes under %s", len(routes), resolved)
    return routes


__all__ = [
    "CatalogError",
    "DuplicateRouteError",
    "Route",
    "build_catalog",
    "iter_markdown_files",
]
