"""Utilities for rendering markdown and syntax-highlighted code snippets."""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ
from html import escape

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from pygments.formatters.html import HtmlFormatter

from pagewright.document.models import TocItem
from pagewright.document.outline import Slugger, slugify

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

CODE_BLOCK_PATTERN = re.compile(r"```([A-Za-z0-9_+#.-]+)?[^\n]*\n(.*?)```", re.DOTALL)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})


class HeadingAnchors:
    """Hand out heading ids for one document.

    Ids come from the page outline in order so anchors match the "On this
    page" links. A heading whose text does not match the next outline entry
    gets a fresh slug instead of consuming it.
    """

    def __init__(self, outline: cabc.Iterable[TocItem] = ()) -> None:
        self._queue = list(outline)
        self._slugger = Slugger()
        for item in self._queue:
            self._slugger.slug(item.id)

    def next_id(self, text: str) -> str:
        """Return the id for the next heading in document order."""
        if self._queue and slugify(self._queue[0].text) == slugify(text):
            return self._queue.pop(0).id
        return self._slugger.slug(text)


class HeadingAnchorExtension(Extension):
    """Assign ``id`` attributes to top-level headings."""

    def __init__(self, anchors: HeadingAnchors) -> None:
        super().__init__()
        self.anchors = anchors

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the heading treeprocessor on the Markdown instance."""
        md.treeprocessors.register(
            HeadingAnchorTreeprocessor(md, self.anchors), "pagewright_heading_anchors", 5
        )


class HeadingAnchorTreeprocessor(Treeprocessor):
    """Set heading ids from a shared :class:`HeadingAnchors`."""

    def __init__(self, md: Markdown, anchors: HeadingAnchors) -> None:
        super().__init__(md)
        self.anchors = anchors

    def run(self, root: Element) -> Element:
        """Assign ids to headings that are direct children of the document."""
        for element in root:
            if element.tag in HEADING_TAGS and not element.get("id"):
                text = "".join(element.itertext())
                element.set("id", self.anchors.next_id(text))
        return root


class HtmlContentRenderer:
    """Render markdown and code snippets with consistent styling."""

    def __init__(
        self, pygments_style: str = "monokai", link_extension: Extension | None = None
    ) -> None:
        """Initialize a renderer with optional pygments style and link extension.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        link_extension : Extension, optional
            Markdown extension used when rewriting links; pass ``None`` to skip
            link rewriting.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")
        self._link_extension = link_extension

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(
        self,
        text: str,
        *,
        anchors: HeadingAnchors | None = None,
        link_extension: Extension | None = None,
    ) -> str:
        """Render markdown into HTML using the configured extensions.

        Parameters
        ----------
        text : str
            Markdown source.
        anchors : HeadingAnchors, optional
            Heading id source; headings get no ids when omitted.
        link_extension : Extension, optional
            Per-call link rewriter overriding the one given at construction.
        """
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return ""
        extensions: list[Extension | str] = [
            "fenced_code",
            "codehilite",
            "tables",
            "sane_lists",
        ]
        links = link_extension or self._link_extension
        if links:
            extensions.append(links)
        if anchors is not None:
            extensions.append(HeadingAnchorExtension(anchors))
        md = Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        html = md.convert(normalized)
        return self._annotate_codehilite(html, normalized)

    def _annotate_codehilite(self, html: str, source_markdown: str) -> str:
        """Attach language metadata to each highlighted block in converted markdown."""
        languages = [
            match.group(1) or "text"
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            label = language or ""
            return f"{fence}{label}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


__all__ = [
    "CODE_BLOCK_PATTERN",
    "HeadingAnchorExtension",
    "HeadingAnchors",
    "HtmlContentRenderer",
]
