"""Typed dataclasses describing pagewright site configuration."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class NavLink:
    """Top navigation link shown in the page header."""

    text: str
    link: str

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-safe mapping."""
        return {"text": self.text, "link": self.link}


@dc.dataclass(slots=True)
class SidebarItem:
    """Sidebar entry; entries with ``items`` render as a titled section."""

    text: str
    link: str | None = None
    items: list[SidebarItem] = dc.field(default_factory=list)
    collapsed: bool = False

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-safe mapping, nested items included."""
        payload: dict[str, typ.Any] = {"text": self.text}
        if self.link is not None:
            payload["link"] = self.link
        if self.items:
            payload["items"] = [item.to_dict() for item in self.items]
        if self.collapsed:
            payload["collapsed"] = True
        return payload


@dc.dataclass(slots=True)
class SocialLink:
    """Icon link to an external profile or repository."""

    icon: str
    link: str

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-safe mapping."""
        return {"icon": self.icon, "link": self.link}


@dc.dataclass(slots=True)
class ThemeConfig:
    """Header and sidebar content for the page shell."""

    logo: str | None = None
    nav: list[NavLink] = dc.field(default_factory=list)
    sidebar: dict[str, list[SidebarItem]] = dc.field(default_factory=dict)
    social_links: list[SocialLink] = dc.field(default_factory=list)

    def sidebar_for(self, url_path: str) -> list[SidebarItem]:
        """Return the sidebar whose key is the longest prefix of ``url_path``.

        Falls back to the ``"/"`` sidebar, then to an empty list.
        """
        for key in sorted(self.sidebar, key=len, reverse=True):
            if url_path.startswith(key):
                return self.sidebar[key]
        return self.sidebar.get("/", [])

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-safe mapping."""
        return {
            "logo": self.logo,
            "nav": [item.to_dict() for item in self.nav],
            "sidebar": {
                key: [item.to_dict() for item in items]
                for key, items in self.sidebar.items()
            },
            "social_links": [item.to_dict() for item in self.social_links],
        }


@dc.dataclass(slots=True)
class LocaleConfig:
    """Display label and HTML ``lang`` value for one locale."""

    label: str
    lang: str

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-safe mapping."""
        return {"label": self.label, "lang": self.lang}


@dc.dataclass(slots=True)
class LlmsConfig:
    """Options for the ``llms.txt`` content index."""

    enabled: bool = True
    title: str | None = None
    description: str | None = None


@dc.dataclass(slots=True)
class SearchConfig:
    """Options for the search affordance."""

    enabled: bool = True


@dc.dataclass(slots=True)
class SiteConfig:
    """Resolved configuration for one documentation root.

    Attributes
    ----------
    root : Path
        Documentation root directory.
    title : str
        Site title used in the header and as the page title suffix.
    description : str or None
        Default page description.
    base : str
        URL prefix the site is served under; always starts and ends with
        ``/``.
    versions : list[str]
        Version tokens offered by the version switcher, newest first.
    default_version : str or None
        Version shown for unversioned pages; a member of ``versions``.
    locales : dict[str, LocaleConfig]
        Locale tokens offered by the language switcher.
    default_locale : str or None
        Locale shown for pages without a locale segment; a key of
        ``locales``.
    pygments_style : str
        Pygments style used for highlighted code blocks.
    """

    root: Path
    title: str = "Documentation"
    description: str | None = None
    base: str = "/"
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)
    versions: list[str] = dc.field(default_factory=list)
    default_version: str | None = None
    locales: dict[str, LocaleConfig] = dc.field(default_factory=dict)
    default_locale: str | None = None
    llms: LlmsConfig = dc.field(default_factory=LlmsConfig)
    search: SearchConfig = dc.field(default_factory=SearchConfig)
    pygments_style: str = "monokai"

    def with_base(self, url_path: str) -> str:
        """Return an author-supplied link prefixed with the base exactly once.

        Links from the configuration may already carry the base; route URLs
        never do and go through :meth:`route_url` instead.
        """
        if url_path.startswith(self.base):
            return url_path
        return self.route_url(url_path)

    def route_url(self, url_path: str) -> str:
        """Return the public URL of a route path.

        Examples
        --------
        >>> config = SiteConfig(root=Path("."), base="/docs/")
        >>> config.route_url("/docs/intro")
        '/docs/docs/intro'
        >>> config.route_url("/")
        '/docs/'
        """
        return self.base.rstrip("/") + "/" + url_path.lstrip("/")

    def client_payload(self) -> dict[str, typ.Any]:
        """Return the JSON-safe configuration embedded in the build.

        The documentation root is omitted because it is a build-machine path.
        """
        return {
            "title": self.title,
            "description": self.description,
            "base": self.base,
            "theme": self.theme.to_dict(),
            "versions": list(self.versions),
            "default_version": self.default_version,
            "locales": {key: value.to_dict() for key, value in self.locales.items()},
            "default_locale": self.default_locale,
            "llms": dc.asdict(self.llms),
            "search": dc.asdict(self.search),
        }


__all__ = [
    "LlmsConfig",
    "LocaleConfig",
    "NavLink",
    "SearchConfig",
    "SidebarItem",
    "SiteConfig",
    "SiteConfigError",
    "SocialLink",
    "ThemeConfig",
]
