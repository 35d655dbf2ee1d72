"""Shared dataclasses used by the page shell and both build entries."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from pagewright.document import TocItem


@dc.dataclass(slots=True, frozen=True)
class PageData:
    """Everything the page shell needs to render one route.

    Attributes
    ----------
    url_path : str
        Canonical route URL without the site base.
    frontmatter : Mapping[str, Any]
        Flattened page metadata (``title``, ``description`` and extras).
    toc : tuple[TocItem, ...]
        Heading outline for the "On this page" aside.
    content_html : str
        Rendered page body, components included.
    raw_markdown : str
        Source text offered by the copy button.
    version : str or None
        Version token of the route.
    locale : str or None
        Locale token of the route.
    """

    url_path: str
    frontmatter: typ.Mapping[str, typ.Any]
    toc: tuple[TocItem, ...]
    content_html: str
    raw_markdown: str = ""
    version: str | None = None
    locale: str | None = None

    @property
    def title(self) -> str | None:
        """Return the declared page title, if any."""
        value = self.frontmatter.get("title")
        return str(value) if value else None

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the JSON payload stored in the routes module."""
        return {
            "url_path": self.url_path,
            "frontmatter": dict(self.frontmatter),
            "toc": [item.to_dict() for item in self.toc],
            "content_html": self.content_html,
            "raw_markdown": self.raw_markdown,
            "version": self.version,
            "locale": self.locale,
        }

    @classmethod
    def from_dict(cls, payload: typ.Mapping[str, typ.Any]) -> PageData:
        """Rebuild a page from :meth:`to_dict` output."""
        return cls(
            url_path=str(payload["url_path"]),
            frontmatter=dict(payload.get("frontmatter") or {}),
            toc=tuple(
                TocItem(id=str(item["id"]), text=str(item["text"]), depth=int(item["depth"]))
                for item in payload.get("toc") or ()
            ),
            content_html=str(payload.get("content_html", "")),
            raw_markdown=str(payload.get("raw_markdown", "")),
            version=payload.get("version"),
            locale=payload.get("locale"),
        )


__all__ = ["PageData"]
