"""Parse Markdown pages into frontmatter, outlines, and component trees.

The entry point is :func:`transform_document`; the submodules expose each
pipeline stage so the renderer and tests can reuse them directly.
"""

from .diagrams import DIAGRAM_LANGUAGES, escape_template_literal, transform_diagrams
from .directives import CALLOUT_VARIANTS, KNOWN_DIRECTIVES, parse_directives
from .frontmatter import FrontmatterError, parse_frontmatter, split_frontmatter
from .models import (
    COMPONENT_NAMES,
    ComponentReference,
    ContentNode,
    ContentTree,
    Frontmatter,
    GroupNode,
    MarkdownBlock,
    TocItem,
    TransformedDocument,
)
from .outline import Slugger, extract_toc, slugify
from .transformer import transform_document

__all__ = [
    "CALLOUT_VARIANTS",
    "COMPONENT_NAMES",
    "DIAGRAM_LANGUAGES",
    "KNOWN_DIRECTIVES",
    "ComponentReference",
    "ContentNode",
    "ContentTree",
    "Frontmatter",
    "FrontmatterError",
    "GroupNode",
    "MarkdownBlock",
    "Slugger",
    "TocItem",
    "TransformedDocument",
    "escape_template_literal",
    "extract_toc",
    "parse_directives",
    "parse_frontmatter",
    "slugify",
    "split_frontmatter",
    "transform_diagrams",
    "transform_document",
]
