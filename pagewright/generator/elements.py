r"""Minimal element tree shared by the static renderer and the client runtime.

The page shell is described once as a tree of :class:`Element`,
:class:`Text` and :class:`RawHtml` nodes. The server entry serializes the
tree straight to markup with :func:`render_html`; the client routes module
embeds the same tree as JSON (:func:`to_data`) and ``runtime.js`` builds the
DOM from it. Because both targets walk one tree, their first paint cannot
drift apart.

Example
-------
>>> from pagewright.generator.elements import h, render_html
>>> render_html(h("p", {"class": "lead"}, "Hello ", h("b", None, "world")))
'<p class="lead">Hello <b>world</b></p>'
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from html import escape

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)


@dc.dataclass(slots=True)
class Text:
    """Escaped text node."""

    value: str


@dc.dataclass(slots=True)
class RawHtml:
    """Pre-rendered markup inserted verbatim, such as converted Markdown."""

    html: str


@dc.dataclass(slots=True)
class Element:
    """HTML element with ordered attributes and children."""

    tag: str
    attrs: dict[str, str] = dc.field(default_factory=dict)
    children: list[Node] = dc.field(default_factory=list)


Node = Element | Text | RawHtml
Child = Node | str | None | bool


def h(
    tag: str, attrs: typ.Mapping[str, str | None] | None = None, *children: Child
) -> Element:
    """Build an element, dropping ``None``/``False`` children and attributes.

    Strings become :class:`Text` nodes so callers can write content inline.
    """
    clean_attrs = {key: value for key, value in (attrs or {}).items() if value is not None}
    nodes: list[Node] = []
    for child in children:
        match child:
            case None | False | True:
                continue
            case str():
                nodes.append(Text(child))
            case _:
                nodes.append(child)
    return Element(tag, clean_attrs, nodes)


def render_html(node: Node) -> str:
    """Serialize a node to HTML.

    Attributes keep their insertion order and every value is quoted with
    ``"`` so the output is stable byte for byte.
    """
    match node:
        case Text(value=value):
            return escape(value, quote=False)
        case RawHtml(html=html):
            return html
        case Element(tag=tag, attrs=attrs, children=children):
            attributes = "".join(
                f' {name}="{escape(value, quote=True)}"' for name, value in attrs.items()
            )
            if tag in VOID_ELEMENTS:
                return f"<{tag}{attributes}>"
            inner = "".join(render_html(child) for child in children)
            return f"<{tag}{attributes}>{inner}</{tag}>"
    msg = f"Cannot render node of type {type(node).__name__}"
    raise TypeError(msg)


def to_data(node: Node) -> typ.Any:
    """Return a JSON-safe representation of ``node`` for the client runtime.

    Text nodes are plain strings, raw markup is ``{"html": ...}`` and elements
    are ``{"tag", "attrs", "children"}`` objects.
    """
    match node:
        case Text(value=value):
            return value
        case RawHtml(html=html):
            return {"html": html}
        case Element(tag=tag, attrs=attrs, children=children):
            return {
                "tag": tag,
                "attrs": dict(attrs),
                "children": [to_data(child) for child in children],
            }
    msg = f"Cannot serialize node of type {type(node).__name__}"
    raise TypeError(msg)


def from_data(data: typ.Any) -> Node:
    """Rebuild a node from :func:`to_data` output."""
    match data:
        case str():
            return Text(data)
        case {"html": str(html)}:
            return RawHtml(html)
        case {"tag": str(tag), "attrs": dict(attrs), "children": list(children)}:
            return Element(
                tag,
                {str(key): str(value) for key, value in attrs.items()},
                [from_data(child) for child in children],
            )
    msg = f"Unrecognized element payload: {data!r}"
    raise ValueError(msg)


__all__ = [
    "VOID_ELEMENTS",
    "Element",
    "Node",
    "RawHtml",
    "Text",
    "from_data",
    "h",
    "render_html",
    "to_data",
]
