"""Turn ``mermaid`` fenced code blocks into diagram component references."""

from __future__ import annotations

import re

from .models import ComponentReference, ContentNode, GroupNode, MarkdownBlock

DIAGRAM_LANGUAGES = frozenset({"mermaid", "mmd"})
DIAGRAM_FENCE_PATTERN = re.compile(
    r"\A(?P<fence>`{3,}|~{3,})[ \t]*(?P<lang>[\w+-]+)[^\n]*\n(?P<body>.*?)\n?(?P=fence)[ \t]*\Z",
    re.DOTALL,
)


def match_diagram_fence(text: str) -> str | None:
    """Return the chart source when ``text`` is exactly one diagram fence.

    Examples
    --------
    >>> match_diagram_fence("```mermaid\\ngraph TD; A-->B\\n```")
    'graph TD; A-->B'
    >>> match_diagram_fence("```python\\nprint(1)\\n```") is None
    True
    """
    match = DIAGRAM_FENCE_PATTERN.match(text.strip())
    if match is None or match.group("lang").lower() not in DIAGRAM_LANGUAGES:
        return None
    return match.group("body")


def escape_template_literal(text: str) -> str:
    r"""Escape text for embedding inside a JavaScript template literal.

    Backslashes are doubled first so the later escapes are not re-escaped.

    Examples
    --------
    >>> escape_template_literal("a`b${c}\\d")
    'a\\`b\\${c}\\\\d'
    """
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("$", "\\$")


def _transform_node(node: ContentNode) -> ContentNode:
    match node:
        case MarkdownBlock(text=text):
            chart = match_diagram_fence(text)
            if chart is None:
                return node
            return ComponentReference("diagram", {"chart": chart})
        case ComponentReference(name=name, attributes=attributes, children=children):
            return ComponentReference(
                name, attributes, tuple(_transform_node(child) for child in children)
            )
        case GroupNode(attributes=attributes, children=children):
            return GroupNode(attributes, tuple(_transform_node(child) for child in children))
        case _:  # pragma: no cover - exhaustive over ContentNode
            return node


def transform_diagrams(nodes: list[ContentNode] | tuple[ContentNode, ...]) -> list[ContentNode]:
    """Replace diagram fences at any depth with ``diagram`` components."""
    return [_transform_node(node) for node in nodes]


__all__ = [
    "DIAGRAM_LANGUAGES",
    "escape_template_literal",
    "match_diagram_fence",
    "transform_diagrams",
]
