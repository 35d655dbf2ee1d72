"""Render function used by the generated server bundle.

The server entry written by the bundler embeds the resolved routes and
config modules as JSON text and calls :func:`create_renderer` with them. The
returned callable renders exactly what the client paints first, because both
go through :func:`pagewright.generator.shell.build_app_tree` with the default
render state.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ
from pathlib import Path

from pagewright.config import build_site_config
from pagewright.generator.elements import render_html
from pagewright.generator.models import PageData
from pagewright.generator.shell import DEFAULT_STATE, build_app_tree, build_not_found_tree

RenderResult = dict[str, typ.Any]
RenderFunction = cabc.Callable[[str], RenderResult]


def _lookup(pages: cabc.Mapping[str, PageData], url_path: str) -> PageData | None:
    """Find the page for ``url_path``, tolerating a missing or extra trailing slash."""
    candidates = [url_path, url_path.rstrip("/") or "/"]
    if not url_path.endswith("/"):
        candidates.append(url_path + "/")
    for candidate in candidates:
        page = pages.get(candidate)
        if page is not None:
            return page
    return None


def create_renderer(
    *,
    routes: cabc.Iterable[cabc.Mapping[str, typ.Any]],
    config: cabc.Mapping[str, typ.Any],
) -> RenderFunction:
    """Return ``render(url_path) -> {"markup", "frontmatter", "toc"}``.

    Parameters
    ----------
    routes : Iterable[Mapping[str, Any]]
        :meth:`PageData.to_dict` payloads from the routes module.
    config : Mapping[str, Any]
        :meth:`SiteConfig.client_payload` from the config module.

    Examples
    --------
    >>> render = create_renderer(routes=[], config={"title": "Docs"})
    >>> render("/missing")["markup"].startswith('<div class="pw-app pw-not-found"')
    True
    """
    site_config = build_site_config(Path("."), config)
    pages = {page.url_path: page for page in map(PageData.from_dict, routes)}

    def render(url_path: str) -> RenderResult:
        page = _lookup(pages, url_path)
        if page is None:
            return {
                "markup": render_html(build_not_found_tree(site_config)),
                "frontmatter": {},
                "toc": [],
            }
        tree = build_app_tree(page, site_config, DEFAULT_STATE)
        return {
            "markup": render_html(tree),
            "frontmatter": dict(page.frontmatter),
            "toc": [item.to_dict() for item in page.toc],
        }

    return render


__all__ = ["RenderFunction", "RenderResult", "create_renderer"]
