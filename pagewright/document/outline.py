r"""Heading outline extraction and anchor slugs.

Example
-------
>>> from pagewright.document.outline import extract_toc
>>> [(item.depth, item.id) for item in extract_toc("# One\n## Two\n### Three")]
[(1, 'one'), (2, 'two'), (3, 'three')]
"""

from __future__ import annotations

import re

from .directives import directive_regions, iter_fence_spans
from .models import TocItem

HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.+?)[ \t]*$")
CLOSING_HASHES_PATTERN = re.compile(r"[ \t]+#+$")


def slugify(text: str) -> str:
    """Return the anchor slug for a heading.

    Examples
    --------
    >>> slugify("Getting Started!")
    'getting-started'
    >>> slugify("API  --  v2")
    'api-v2'
    """
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip()


class Slugger:
    """Issue unique slugs, suffixing repeats with ``-1``, ``-2`` and so on."""

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}

    def slug(self, text: str) -> str:
        """Return a slug for ``text`` that has not been issued before."""
        base = slugify(text)
        count = self._counts.get(base, 0)
        self._counts[base] = count + 1
        return base if count == 0 else f"{base}-{count}"


def strip_code_and_directives(text: str) -> list[str]:
    """Return body lines with fenced code and matched directive regions blanked.

    Line positions are preserved so callers can still report line numbers.
    """
    lines = text.splitlines()
    hidden: set[int] = set()
    for start, end in iter_fence_spans(lines):
        hidden.update(range(start, end + 1))
    for start, end in directive_regions(text):
        hidden.update(range(start, end + 1))
    return ["" if index in hidden else line for index, line in enumerate(lines)]


def extract_toc(text: str) -> list[TocItem]:
    """Collect ATX headings outside code samples and directive blocks.

    Parameters
    ----------
    text : str
        Markdown body without frontmatter.

    Returns
    -------
    list[TocItem]
        Headings in document order with de-duplicated slugs.
    """
    slugger = Slugger()
    toc: list[TocItem] = []
    for line in strip_code_and_directives(text):
        match = HEADING_PATTERN.match(line)
        if not match:
            continue
        heading = CLOSING_HASHES_PATTERN.sub("", match.group(2)).strip()
        if not heading or set(heading) == {"#"}:
            continue
        toc.append(TocItem(id=slugger.slug(heading), text=heading, depth=len(match.group(1))))
    return toc


__all__ = ["Slugger", "extract_toc", "slugify", "strip_code_and_directives"]
