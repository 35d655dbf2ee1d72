"""Default HTML renderers for the documentation component set.

The document transformer only emits component *names*; this module maps each
name in :data:`~pagewright.document.COMPONENT_NAMES` to a function producing
HTML. Projects can register replacements on a :class:`ComponentRegistry`.
A component without a renderer is rendered as its literal child content so
nothing the author wrote disappears.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ
from html import escape

from pagewright.document import ComponentReference, ContentNode, GroupNode

logger = logging.getLogger(__name__)

RenderChildren = cabc.Callable[[cabc.Sequence[ContentNode]], str]
ComponentRenderer = cabc.Callable[[ComponentReference, RenderChildren], str]

CALLOUT_TITLES: dict[str, str] = {
    "info": "Info",
    "warning": "Warning",
    "tip": "Tip",
    "danger": "Danger",
    "note": "Note",
}


def _attr(value: object) -> str:
    return escape(str(value), quote=True)


def render_callout(component: ComponentReference, render_children: RenderChildren) -> str:
    """Render an admonition box."""
    variant = str(component.attributes.get("variant", "info"))
    title = component.attributes.get("title") or CALLOUT_TITLES.get(variant, variant.title())
    return (
        f'<aside class="pw-callout pw-callout-{_attr(variant)}" data-variant="{_attr(variant)}">'
        f'<p class="pw-callout-title">{escape(str(title))}</p>'
        f'<div class="pw-callout-body">{render_children(component.children)}</div>'
        "</aside>"
    )


def render_tab_group(component: ComponentReference, render_children: RenderChildren) -> str:
    """Render tabs with the first panel selected."""
    buttons: list[str] = []
    panels: list[str] = []
    for index, child in enumerate(component.children):
        if not isinstance(child, GroupNode):
            continue
        label = str(child.attributes.get("label", f"Tab {index + 1}"))
        selected = index == 0
        buttons.append(
            f'<button type="button" role="tab" class="pw-tab{" pw-active" if selected else ""}"'
            f' data-pw-action="select-tab" data-tab-index="{index}"'
            f' aria-selected="{"true" if selected else "false"}">{escape(label)}</button>'
        )
        hidden = "" if selected else " hidden"
        panels.append(
            f'<div class="pw-tab-panel" role="tabpanel" data-tab-index="{index}"{hidden}>'
            f"{render_children(child.children)}</div>"
        )
    return (
        '<div class="pw-tabs">'
        f'<div class="pw-tab-list" role="tablist">{"".join(buttons)}</div>'
        f'{"".join(panels)}'
        "</div>"
    )


def render_steps(component: ComponentReference, render_children: RenderChildren) -> str:
    """Render a numbered procedure."""
    items: list[str] = []
    for child in component.children:
        if not isinstance(child, GroupNode):
            continue
        number = _attr(child.attributes.get("number", len(items) + 1))
        title = escape(str(child.attributes.get("title", "")))
        items.append(
            f'<li class="pw-step" data-step="{number}">'
            f'<p class="pw-step-title"><span class="pw-step-number">{number}</span> {title}</p>'
            f'<div class="pw-step-body">{render_children(child.children)}</div>'
            "</li>"
        )
    return f'<ol class="pw-steps">{"".join(items)}</ol>'


def render_file_tree(component: ComponentReference, render_children: RenderChildren) -> str:
    """Render an indented file listing; names ending in ``/`` are folders."""
    rows: list[str] = []
    for item in component.attributes.get("items", []):
        name = str(item.get("name", ""))
        depth = int(item.get("depth", 0))
        kind = "folder" if name.endswith("/") else "file"
        rows.append(
            f'<li class="pw-file-tree-item pw-{kind}" data-depth="{depth}">'
            f"{escape(name.rstrip('/') if kind == 'folder' else name)}</li>"
        )
    trailing = render_children(component.children)
    return f'<ul class="pw-file-tree">{"".join(rows)}</ul>{trailing}'


def render_diagram(component: ComponentReference, render_children: RenderChildren) -> str:  # noqa: ARG001
    """Render a Mermaid chart placeholder drawn by the client runtime."""
    chart = str(component.attributes.get("chart", ""))
    return f'<div class="pw-diagram"><pre class="mermaid">{escape(chart)}</pre></div>'


def render_literal(component: ComponentReference, render_children: RenderChildren) -> str:
    """Render a component's raw attributes and children as plain content."""
    parts: list[str] = []
    if "chart" in component.attributes:
        parts.append(f"<pre><code>{escape(str(component.attributes['chart']))}</code></pre>")
    if "items" in component.attributes:
        lines = [
            "  " * int(item.get("depth", 0)) + str(item.get("name", ""))
            for item in component.attributes["items"]
        ]
        listing = "\n".join(lines)
        parts.append(f"<pre>{escape(listing)}</pre>")
    parts.append(render_children(component.children))
    return "".join(parts)


DEFAULT_RENDERERS: dict[str, ComponentRenderer] = {
    "callout": render_callout,
    "tab-group": render_tab_group,
    "steps": render_steps,
    "file-tree": render_file_tree,
    "diagram": render_diagram,
}


class ComponentRegistry:
    """Map component names to HTML renderers."""

    def __init__(self, renderers: typ.Mapping[str, ComponentRenderer] | None = None) -> None:
        self._renderers: dict[str, ComponentRenderer] = dict(
            DEFAULT_RENDERERS if renderers is None else renderers
        )

    def render(self, component: ComponentReference, render_children: RenderChildren) -> str:
        """Render ``component``, falling back to its literal children."""
        renderer = self._renderers.get(component.name)
        if renderer is None:
            logger.debug("No renderer for component '%s'; emitting it literally", component.name)
            return render_literal(component, render_children)
        return renderer(component, render_children)


__all__ = [
    "DEFAULT_RENDERERS",
    "ComponentRegistry",
    "ComponentRenderer",
    "render_callout",
    "render_diagram",
    "render_file_tree",
    "render_literal",
    "render_steps",
    "render_tab_group",
]
