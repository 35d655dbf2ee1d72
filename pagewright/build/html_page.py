"""Wrap server-rendered markup in the final HTML document."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from pagewright._constants import APP_ROOT_ID

if typ.TYPE_CHECKING:
    from pagewright.config import SiteConfig

    from .manifest import AssetManifest


def page_title(frontmatter: typ.Mapping[str, typ.Any], config: SiteConfig) -> str:
    """Return ``"<page title> | <site title>"``, or the site title alone.

    Examples
    --------
    >>> from pathlib import Path
    >>> from pagewright.config import SiteConfig
    >>> page_title({"title": "Intro"}, SiteConfig(root=Path("."), title="Docs"))
    'Intro | Docs'
    >>> page_title({}, SiteConfig(root=Path("."), title="Docs"))
    'Docs'
    """
    title = frontmatter.get("title")
    if title:
        return f"{title} | {config.title}"
    return config.title


def page_description(frontmatter: typ.Mapping[str, typ.Any], config: SiteConfig) -> str:
    """Return the page description, then the site description, then ``""``."""
    return str(frontmatter.get("description") or config.description or "")


def page_lang(config: SiteConfig, locale: str | None = None) -> str:
    """Return the ``lang`` attribute for a page in ``locale``.

    Pages without a configured locale use the default locale, then ``en``.
    """
    for token in (locale, config.default_locale):
        if token and token in config.locales:
            return config.locales[token].lang
    return "en"


class HtmlPageBuilder:
    """Render ``page.jinja`` around prerendered markup.

    Parameters
    ----------
    config : SiteConfig
        Site configuration supplying title, description, base, and locales.
    templates_dir : Path, optional
        Directory containing ``page.jinja``. Defaults to the packaged
        templates.
    """

    def __init__(self, config: SiteConfig, *, templates_dir: Path | None = None) -> None:
        self.config = config
        self.templates_dir = templates_dir or Path(__file__).resolve().parent.parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("page.jinja")

    def render(
        self,
        *,
        url_path: str,
        markup: str,
        frontmatter: typ.Mapping[str, typ.Any],
        assets: AssetManifest,
        locale: str | None = None,
    ) -> str:
        """Return the full HTML document for one route.

        ``assets`` must already be normalized against the site base.
        """
        html = self.template.render(
            lang=page_lang(self.config, locale),
            title=page_title(frontmatter, self.config),
            description=page_description(frontmatter, self.config),
            canonical=self.config.route_url(url_path),
            styles=assets.styles,
            scripts=assets.scripts,
            app_root_id=APP_ROOT_ID,
            markup=markup,
        )
        if not html.endswith("\n"):
            html += "\n"
        return html


__all__ = ["HtmlPageBuilder", "page_description", "page_lang", "page_title"]
