"""Transform one Markdown file into a :class:`TransformedDocument`.

The pipeline runs frontmatter extraction, heading outline extraction,
directive expansion, and diagram detection in that order. It never raises for
malformed content: a failing stage degrades the body to a single literal
block and logs a warning naming the file, so one bad page cannot abort a
whole catalog build.

Example
-------
>>> from pagewright.document import transform_document
>>> doc = transform_document("---\\ntitle: Intro\\n---\\n# Hello\\n")
>>> doc.frontmatter.title, [item.id for item in doc.toc]
('Intro', ['hello'])
"""

from __future__ import annotations

import logging
import typing as typ

from ruamel.yaml.error import YAMLError

from .diagrams import transform_diagrams
from .directives import parse_directive_tree
from .frontmatter import FrontmatterError, parse_frontmatter, split_frontmatter
from .models import (
    ComponentReference,
    ContentNode,
    Frontmatter,
    GroupNode,
    MarkdownBlock,
    TransformedDocument,
)
from .outline import extract_toc

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def _coalesce(nodes: typ.Iterable[ContentNode]) -> tuple[ContentNode, ...]:
    """Merge adjacent Markdown blocks so each renders as one fragment."""
    merged: list[ContentNode] = []
    for node in nodes:
        match node:
            case MarkdownBlock(text=text):
                if merged and isinstance(merged[-1], MarkdownBlock):
                    merged[-1] = MarkdownBlock(f"{merged[-1].text}\n\n{text}")
                else:
                    merged.append(node)
            case ComponentReference(name=name, attributes=attributes, children=children):
                merged.append(ComponentReference(name, attributes, _coalesce(children)))
            case GroupNode(attributes=attributes, children=children):
                merged.append(GroupNode(attributes, _coalesce(children)))
    return tuple(merged)


def _fallback_body(body: str) -> tuple[ContentNode, ...]:
    return (MarkdownBlock(body),) if body.strip() else ()


def transform_document(
    raw_text: str, *, source: Path | str | None = None
) -> TransformedDocument:
    """Parse ``raw_text`` into frontmatter, outline, and a content tree.

    Parameters
    ----------
    raw_text : str
        Full contents of a Markdown file, frontmatter included.
    source : Path or str, optional
        Originating file, used only to label log messages.

    Returns
    -------
    TransformedDocument
        The structured document. ``fallback`` is ``True`` when the body had
        to be emitted as one literal block.
    """
    label = str(source) if source is not None else "<string>"
    block, body = split_frontmatter(raw_text)
    toc = tuple(extract_toc(body))

    try:
        frontmatter = parse_frontmatter(block)
    except (FrontmatterError, YAMLError) as exc:
        logger.warning("Ignoring invalid frontmatter in %s: %s", label, exc)
        return TransformedDocument(
            frontmatter=Frontmatter(),
            toc=toc,
            body=_fallback_body(body),
            fallback=True,
        )

    try:
        parsed = parse_directive_tree(body)
        for opener in parsed.unterminated:
            logger.warning("Unterminated directive %r in %s left as text", opener, label)
        nodes = _coalesce(transform_diagrams(parsed.body))
    except Exception:  # noqa: BLE001
        logger.warning("Falling back to literal text for %s", label, exc_info=True)
        return TransformedDocument(
            frontmatter=frontmatter,
            toc=toc,
            body=_fallback_body(body),
            fallback=True,
        )

    return TransformedDocument(frontmatter=frontmatter, toc=toc, body=nodes)


__all__ = ["transform_document"]
