"""Read the client asset manifest back out of the bundler's HTML shell."""

from __future__ import annotations

import dataclasses as dc
import re

SCRIPT_SRC_PATTERN = re.compile(r'src="([^"]+\.js)"')
STYLE_HREF_PATTERN = re.compile(r'href="([^"]+\.css)"')
ABSOLUTE_URL_PATTERN = re.compile(r"^(?:[a-z][a-z0-9+.-]*:)?//", re.IGNORECASE)


@dc.dataclass(slots=True, frozen=True)
class AssetManifest:
    """Script and stylesheet URLs emitted by the client build."""

    scripts: tuple[str, ...] = ()
    styles: tuple[str, ...] = ()

    def normalized(self, base: str) -> AssetManifest:
        """Return the manifest with every URL carrying ``base`` once."""
        return AssetManifest(
            scripts=tuple(normalize_asset_url(url, base) for url in self.scripts),
            styles=tuple(normalize_asset_url(url, base) for url in self.styles),
        )


def parse_asset_manifest(html: str) -> AssetManifest:
    """Collect ``.js`` script sources and ``.css`` stylesheet links in order.

    Examples
    --------
    >>> parse_asset_manifest('<link href="/a.css"><script src="/b.js"></script>')
    AssetManifest(scripts=('/b.js',), styles=('/a.css',))
    """
    return AssetManifest(
        scripts=tuple(SCRIPT_SRC_PATTERN.findall(html)),
        styles=tuple(STYLE_HREF_PATTERN.findall(html)),
    )


def normalize_asset_url(url: str, base: str) -> str:
    """Prefix ``url`` with ``base`` unless it already carries it.

    Absolute URLs pass through unchanged.

    Examples
    --------
    >>> normalize_asset_url("assets/app.js", "/docs/")
    '/docs/assets/app.js'
    >>> normalize_asset_url("/docs/assets/app.js", "/docs/")
    '/docs/assets/app.js'
    >>> normalize_asset_url("/assets/app.js", "/")
    '/assets/app.js'
    """
    if ABSOLUTE_URL_PATTERN.match(url):
        return url
    prefix = "/" + base.strip("/") if base.strip("/") else ""
    path = url if url.startswith("/") else "/" + url
    if prefix and (path == prefix or path.startswith(prefix + "/")):
        return path
    return prefix + path


__all__ = ["AssetManifest", "normalize_asset_url", "parse_asset_manifest"]
