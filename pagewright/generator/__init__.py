"""Utilities for rendering page content and the shared page shell."""

from .components import ComponentRegistry
from .content import ContentRenderer, build_page_data
from .elements import Element, RawHtml, Text, from_data, h, render_html, to_data
from .link_rewriter import SiteLinkExtension
from .models import PageData
from .renderer import HtmlContentRenderer
from .shell import DEFAULT_STATE, RenderState, build_app_tree, build_not_found_tree

__all__ = [
    "DEFAULT_STATE",
    "ComponentRegistry",
    "ContentRenderer",
    "Element",
    "HtmlContentRenderer",
    "PageData",
    "RawHtml",
    "RenderState",
    "SiteLinkExtension",
    "Text",
    "build_app_tree",
    "build_not_found_tree",
    "build_page_data",
    "from_data",
    "h",
    "render_html",
    "to_data",
]
