"""Render ``sitemap.xml`` for the route catalog."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

if typ.TYPE_CHECKING:
    from pagewright.catalog import Route
    from pagewright.config import SiteConfig

logger = logging.getLogger(__name__)

SITEMAP_FILENAME = "sitemap.xml"
FALLBACK_SITE_URL = "https://example.com"


@dc.dataclass(slots=True, frozen=True)
class SitemapEntry:
    """One ``<url>`` element."""

    loc: str
    lastmod: str


def sitemap_entries(
    routes: cabc.Iterable[Route],
    *,
    site_url: str,
    lastmod: dt.date,
) -> list[SitemapEntry]:
    """Return one entry per route under ``site_url``.

    Examples
    --------
    >>> import datetime as dt
    >>> from types import SimpleNamespace
    >>> routes = [SimpleNamespace(url_path="/"), SimpleNamespace(url_path="/guide")]
    >>> [e.loc for e in sitemap_entries(routes, site_url="https://x.dev/", lastmod=dt.date(2024, 1, 2))]
    ['https://x.dev/', 'https://x.dev/guide']
    """
    normalized = site_url.rstrip("/")
    stamp = lastmod.isoformat()
    return [
        SitemapEntry(
            loc=normalized + "/" if route.url_path == "/" else normalized + route.url_path,
            lastmod=stamp,
        )
        for route in routes
    ]


class SitemapBuilder:
    """Render ``sitemap.xml.jinja`` for a catalog.

    Parameters
    ----------
    config : SiteConfig
        Site configuration; ``base`` is the fallback site URL.
    site_url : str, optional
        Absolute URL the site is deployed at.
    templates_dir : Path, optional
        Directory containing ``sitemap.xml.jinja``.
    """

    def __init__(
        self,
        config: SiteConfig,
        *,
        site_url: str | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        self.config = config
        self.site_url = site_url or config.base or FALLBACK_SITE_URL
        self.templates_dir = templates_dir or Path(__file__).resolve().parent.parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("sitemap.xml.jinja")

    def render(self, routes: cabc.Iterable[Route], *, today: dt.date | None = None) -> str:
        """Return the sitemap document."""
        entries = sitemap_entries(
            routes, site_url=self.site_url, lastmod=today or dt.datetime.now(dt.UTC).date()
        )
        xml = self.template.render(entries=entries)
        if not xml.endswith("\n"):
            xml += "\n"
        return xml

    def run(self, routes: cabc.Sequence[Route], out_dir: Path) -> Path:
        """Write ``sitemap.xml`` into ``out_dir`` and return its path."""
        out_dir.mkdir(parents=True, exist_ok=True)
        output_path = out_dir / SITEMAP_FILENAME
        output_path.write_text(self.render(routes), encoding="utf-8")
        logger.info("Sitemap generated (%d URLs)", len(routes))
        return output_path


__all__ = ["FALLBACK_SITE_URL", "SITEMAP_FILENAME", "SitemapBuilder", "SitemapEntry", "sitemap_entries"]
