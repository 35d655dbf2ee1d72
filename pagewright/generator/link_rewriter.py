"""Helpers for rewriting relative markdown links to site URLs."""

from __future__ import annotations

import posixpath
import typing as typ
from urllib.parse import urlsplit

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from pagewright.paths import MARKDOWN_SUFFIX_PATTERN, file_to_url_path

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any


def _build_link_rewriter(source_relpath: str, base: str) -> Extension:
    """Return a SiteLinkExtension for a page at ``source_relpath``."""
    return SiteLinkExtension(posixpath.dirname(source_relpath), base)


class SiteLinkExtension(Extension):
    """Rewrite relative markdown links to the generated page URLs.

    Authors link between pages by file (``./install.md``,
    ``../reference/cli.mdx#flags``); the built site serves those pages at
    their route URLs under the configured base. Links to anything other than
    a Markdown file are left untouched.
    """

    def __init__(self, base_dir: str, base: str) -> None:
        super().__init__()
        self.base_dir = base_dir
        self.base = base

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the site-link treeprocessor on the Markdown instance."""
        processor = SiteLinkTreeprocessor(md, self.base_dir, self.base)
        md.treeprocessors.register(processor, "pagewright_site_links", 15)


class SiteLinkTreeprocessor(Treeprocessor):
    """Rewrite relative ``.md``/``.mdx`` anchors to route URLs."""

    def __init__(self, md: Markdown, base_dir: str, base: str) -> None:
        super().__init__(md)
        self.base_dir = base_dir
        self.base = base

    def run(self, root: Element) -> Element:
        """Rewrite relative anchors in the parsed markdown tree to route URLs."""
        for element in root.iter():
            if element.tag == "a":
                href = element.get("href")
                rewritten = self._rewrite(href)
                if rewritten:
                    element.set("href", rewritten)
        return root

    def _rewrite(self, target: str | None) -> str | None:
        """Rewrite a relative Markdown link target into a site URL when applicable."""
        if not target:
            return None

        lower = target.lower()
        invalid = lower.startswith(
            ("http://", "https://", "mailto:", "tel:", "data:", "javascript:")
        )
        if target.startswith(("#", "//")) or "://" in target:
            invalid = True

        parsed = None
        if not invalid:
            parsed = urlsplit(target)
            invalid = bool(
                parsed.scheme
                or parsed.netloc
                or not MARKDOWN_SUFFIX_PATTERN.search(parsed.path)
                or parsed.path.startswith("/")
            )

        joined = None
        if not invalid and parsed is not None:
            joined = posixpath.normpath(posixpath.join(self.base_dir, parsed.path))
            while joined.startswith("../"):
                joined = joined[3:]
            if joined in (".", ""):
                invalid = True

        if invalid or parsed is None or joined is None:
            return None

        url = self.base.rstrip("/") + file_to_url_path(joined)
        if parsed.query:
            url = f"{url}?{parsed.query}"
        if parsed.fragment:
            url = f"{url}#{parsed.fragment}"
        return url


__all__ = [
    "SiteLinkExtension",
    "SiteLinkTreeprocessor",
    "_build_link_rewriter",
]
