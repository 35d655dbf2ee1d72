"""Render a route's content tree into the HTML embedded in the page shell."""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ
from html import escape

from pagewright.document import (
    ComponentReference,
    ContentNode,
    GroupNode,
    MarkdownBlock,
    TocItem,
)

from .components import ComponentRegistry
from .link_rewriter import _build_link_rewriter
from .models import PageData
from .renderer import HeadingAnchors, HtmlContentRenderer

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension

    from pagewright.catalog import Route
    from pagewright.config import SiteConfig

logger = logging.getLogger(__name__)


class ContentRenderer:
    """Turn content trees into HTML using Markdown plus registered components.

    Parameters
    ----------
    markdown_renderer : HtmlContentRenderer, optional
        Markdown and code highlighting backend.
    registry : ComponentRegistry, optional
        Component renderers; the defaults cover every component name.
    """

    def __init__(
        self,
        markdown_renderer: HtmlContentRenderer | None = None,
        registry: ComponentRegistry | None = None,
    ) -> None:
        self.markdown_renderer = markdown_renderer or HtmlContentRenderer()
        self.registry = registry or ComponentRegistry()

    @property
    def stylesheet(self) -> str:
        """Return the code highlighting CSS."""
        return self.markdown_renderer.stylesheet

    def render(
        self,
        body: cabc.Sequence[ContentNode],
        *,
        outline: cabc.Iterable[TocItem] = (),
        link_extension: Extension | None = None,
    ) -> str:
        """Render ``body`` to HTML.

        Only top-level Markdown receives heading ids; headings nested in
        components are not part of the page outline.
        """
        anchors = HeadingAnchors(outline)

        def _children(nodes: cabc.Sequence[ContentNode]) -> str:
            return "".join(_node(node, top_level=False) for node in nodes)

        def _node(node: ContentNode, *, top_level: bool) -> str:
            match node:
                case MarkdownBlock(text=text):
                    return self.markdown_renderer.markdown(
                        text,
                        anchors=anchors if top_level else None,
                        link_extension=link_extension,
                    )
                case ComponentReference():
                    return self.registry.render(node, _children)
                case GroupNode(children=children):
                    return _children(children)
            return ""

        return "".join(_node(node, top_level=True) for node in body)


def build_page_data(route: Route, config: SiteConfig, renderer: ContentRenderer) -> PageData:
    """Prepare the shell input for ``route``.

    Rendering failures degrade to the escaped source in a ``<pre>`` block and
    are logged with the route path.
    """
    relative = route.source_file.relative_to(config.root).as_posix()
    try:
        content_html = renderer.render(
            route.body,
            outline=route.toc,
            link_extension=_build_link_rewriter(relative, config.base),
        )
    except Exception:  # noqa: BLE001
        logger.warning("Rendering %s as plain text", route.url_path, exc_info=True)
        content_html = f'<pre class="pw-source">{escape(route.raw_content)}</pre>'
    return PageData(
        url_path=route.url_path,
        frontmatter=route.frontmatter.to_dict(),
        toc=route.toc,
        content_html=content_html,
        raw_markdown=route.raw_content,
        version=route.version,
        locale=route.locale,
    )


__all__ = ["ContentRenderer", "build_page_data"]
