"""Dataclasses describing a transformed Markdown document."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

COMPONENT_NAMES = frozenset({"callout", "tab-group", "steps", "file-tree", "diagram"})


@dc.dataclass(slots=True, frozen=True)
class TocItem:
    """Single heading in a page outline.

    Attributes
    ----------
    id : str
        Anchor slug, unique within the page.
    text : str
        Heading text as written in the source.
    depth : int
        Heading level between 1 and 6.
    """

    id: str
    text: str
    depth: int

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-safe mapping for synthetic modules."""
        return {"id": self.id, "text": self.text, "depth": self.depth}


@dc.dataclass(slots=True, frozen=True)
class Frontmatter:
    """Declared page metadata.

    ``title`` and ``description`` are the keys the site shell understands;
    everything else is preserved untouched in ``extra``.
    """

    title: str | None = None
    description: str | None = None
    extra: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the metadata as a flat mapping, omitting unset known keys."""
        payload: dict[str, typ.Any] = dict(self.extra)
        if self.title is not None:
            payload["title"] = self.title
        if self.description is not None:
            payload["description"] = self.description
        return payload


@dc.dataclass(slots=True, frozen=True)
class MarkdownBlock:
    """Plain Markdown source that needs no component."""

    text: str


@dc.dataclass(slots=True, frozen=True)
class GroupNode:
    """Child group inside a component, such as one tab panel or one step."""

    attributes: typ.Mapping[str, typ.Any]
    children: tuple[ContentNode, ...] = ()


@dc.dataclass(slots=True, frozen=True)
class ComponentReference:
    """A custom block rendered by a named component.

    Attributes
    ----------
    name : str
        Component name, always a member of ``COMPONENT_NAMES``.
    attributes : Mapping[str, Any]
        Component parameters (``variant``, ``labels``, ``chart`` ...).
    children : tuple[ContentNode, ...]
        Nested content, which may itself contain components.
    """

    name: str
    attributes: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    children: tuple[ContentNode, ...] = ()

    def __post_init__(self) -> None:
        if self.name not in COMPONENT_NAMES:
            msg = f"Unknown component name '{self.name}'"
            raise ValueError(msg)


ContentNode = MarkdownBlock | ComponentReference | GroupNode
ContentTree = tuple[ContentNode, ...]


@dc.dataclass(slots=True, frozen=True)
class TransformedDocument:
    """Result of transforming one Markdown file."""

    frontmatter: Frontmatter
    toc: tuple[TocItem, ...]
    body: ContentTree
    fallback: bool = False

    def components(self) -> set[str]:
        """Return the names of every component referenced in the body."""
        found: set[str] = set()
        stack: list[ContentNode] = list(self.body)
        while stack:
            node = stack.pop()
            if isinstance(node, ComponentReference):
                found.add(node.name)
            if isinstance(node, ComponentReference | GroupNode):
                stack.extend(node.children)
        return found


__all__ = [
    "COMPONENT_NAMES",
    "ComponentReference",
    "ContentNode",
    "ContentTree",
    "Frontmatter",
    "GroupNode",
    "MarkdownBlock",
    "TocItem",
    "TransformedDocument",
]
