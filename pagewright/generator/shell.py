"""The page shell: one pure function from page data and config to an element tree.

Both build entries call :func:`build_app_tree`. The server entry serializes
the result to markup; the client routes module embeds it as JSON for the
runtime to mount. The active outline entry and a stored dark theme are
driven by :class:`RenderState`, whose defaults describe the very first
paint. The search dialog is built by :func:`build_search_dialog` and only
inserted by the client once it has mounted.

Example
-------
>>> from pathlib import Path
>>> from pagewright.config import SiteConfig
>>> from pagewright.generator.models import PageData
>>> from pagewright.generator.shell import build_app_tree
>>> page = PageData("/", {"title": "Home"}, (), "<p>Hi</p>")
>>> build_app_tree(page, SiteConfig(root=Path("."))).attrs["class"]
'pw-app'
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from pagewright.paths import add_prefix, strip_prefix

from .elements import Element, RawHtml, h

if typ.TYPE_CHECKING:
    from pagewright.config import SidebarItem, SiteConfig

    from .models import PageData

ThemeName = typ.Literal["light", "dark"]
THEME_ICONS: dict[str, str] = {"light": "☾", "dark": "☀"}


@dc.dataclass(slots=True, frozen=True)
class RenderState:
    """Interactive state applied on top of the first paint.

    The defaults are the state every static page is rendered in.
    """

    theme: ThemeName = "light"
    active_heading: str | None = None


DEFAULT_STATE = RenderState()


def _href(config: SiteConfig, link: str | None) -> str | None:
    """Prefix site-absolute links with the configured base."""
    if link is None or not link.startswith("/") or link.startswith("//"):
        return link
    return config.with_base(link)


def version_switch_url(url_path: str, current: str | None, target: str) -> str:
    """Return the URL of the same page under another version.

    Examples
    --------
    >>> version_switch_url("/v2/guide/intro", "v2", "v1")
    '/v1/guide/intro'
    >>> version_switch_url("/guide/intro", None, "v1")
    '/v1/guide/intro'
    """
    base_path = strip_prefix(url_path, current) if current else url_path
    return add_prefix(base_path, target)


def locale_switch_url(
    url_path: str, current: str | None, target: str, default: str | None
) -> str:
    """Return the URL of the same page in another locale.

    The default locale lives at the unprefixed path.

    Examples
    --------
    >>> locale_switch_url("/ja/guide", "ja", "en", "en")
    '/guide'
    >>> locale_switch_url("/guide", None, "ja", "en")
    '/ja/guide'
    """
    base_path = strip_prefix(url_path, current) if current else url_path
    if target == default:
        return base_path
    return add_prefix(base_path, target)


def _brand(config: SiteConfig) -> Element:
    logo = config.theme.logo
    mark = (
        h("img", {"class": "pw-logo", "src": _href(config, logo) or "", "alt": ""})
        if logo
        else h("div", {"class": "pw-logo"}, (config.title or "D")[0])
    )
    return h(
        "a",
        {"class": "pw-brand", "href": config.base},
        mark,
        h("span", {"class": "pw-title"}, config.title or "Documentation"),
    )


def _header(config: SiteConfig, state: RenderState) -> Element:
    search_button = None
    if config.search.enabled:
        search_button = h(
            "button",
            {"type": "button", "class": "pw-search-button", "data-pw-action": "open-search"},
            h("span", {"class": "pw-search-label"}, "Search..."),
            h("kbd", None, "⌘K"),
        )
    nav_links = [
        h("a", {"class": "pw-nav-link", "href": _href(config, item.link)}, item.text)
        for item in config.theme.nav
    ]
    social_links = [
        h(
            "a",
            {"class": "pw-social-link", "href": item.link, "aria-label": item.icon},
            item.icon,
        )
        for item in config.theme.social_links
    ]
    return h(
        "header",
        {"class": "pw-header"},
        h(
            "button",
            {"type": "button", "class": "pw-menu-button", "data-pw-action": "toggle-sidebar"},
            "☰",
        ),
        _brand(config),
        h("div", {"class": "pw-spacer"}),
        search_button,
        h(
            "button",
            {
                "type": "button",
                "class": "pw-theme-toggle",
                "data-pw-action": "toggle-theme",
                "aria-label": "Toggle theme",
            },
            THEME_ICONS[state.theme],
        ),
        h("nav", {"class": "pw-nav"}, *nav_links, *social_links),
    )


def _version_switcher(page: PageData, config: SiteConfig) -> Element:
    display = page.version or config.default_version or config.versions[0]
    items = []
    for index, version in enumerate(config.versions):
        href = config.route_url(version_switch_url(page.url_path, page.version, version))
        classes = "pw-switcher-option pw-active" if version == display else "pw-switcher-option"
        items.append(
            h(
                "li",
                None,
                h(
                    "a",
                    {"class": classes, "href": href},
                    version,
                    h("span", {"class": "pw-badge"}, "latest") if index == 0 else None,
                ),
            )
        )
    outdated = page.version is not None and display != config.versions[0]
    return h(
        "details",
        {"class": "pw-switcher pw-version-switcher"},
        h(
            "summary",
            {"class": "pw-switcher-current pw-outdated" if outdated else "pw-switcher-current"},
            display,
        ),
        h("ul", {"class": "pw-switcher-options"}, *items),
    )


def _language_switcher(page: PageData, config: SiteConfig) -> Element:
    # A folder such as ``ui/`` fits the locale grammar without being a locale.
    current = page.locale if page.locale in config.locales else None
    display = current or config.default_locale or next(iter(config.locales))
    active = display if current is not None or page.locale is None else None
    items = []
    for token, locale in config.locales.items():
        href = config.route_url(
            locale_switch_url(page.url_path, current, token, config.default_locale)
        )
        classes = "pw-switcher-option pw-active" if token == active else "pw-switcher-option"
        items.append(
            h("li", None, h("a", {"class": classes, "href": href, "lang": locale.lang}, locale.label))
        )
    return h(
        "details",
        {"class": "pw-switcher pw-language-switcher"},
        h("summary", {"class": "pw-switcher-current"}, config.locales[display].label),
        h("ul", {"class": "pw-switcher-options"}, *items),
    )


def _sidebar_link(item: SidebarItem, page: PageData, config: SiteConfig) -> Element:
    active = item.link is not None and item.link in (page.url_path, config.route_url(page.url_path))
    return h(
        "a",
        {
            "class": "pw-sidebar-link pw-active" if active else "pw-sidebar-link",
            "href": _href(config, item.link),
        },
        item.text,
    )


def _sidebar_items(items: list[SidebarItem], page: PageData, config: SiteConfig) -> Element:
    entries: list[Element] = []
    for item in items:
        if item.items:
            entries.append(
                h(
                    "li",
                    None,
                    h(
                        "details",
                        {"class": "pw-sidebar-group", "open": None if item.collapsed else "open"},
                        h("summary", None, item.text),
                        _sidebar_items(item.items, page, config),
                    ),
                )
            )
        else:
            entries.append(h("li", None, _sidebar_link(item, page, config)))
    return h("ul", {"class": "pw-sidebar-list"}, *entries)


def _sidebar(page: PageData, config: SiteConfig) -> Element:
    switchers = []
    if config.versions:
        switchers.append(_version_switcher(page, config))
    if len(config.locales) > 1:
        switchers.append(_language_switcher(page, config))
    sections = []
    for item in config.theme.sidebar_for(page.url_path):
        if item.items:
            sections.append(
                h(
                    "section",
                    {"class": "pw-sidebar-section"},
                    h("h3", {"class": "pw-sidebar-heading"}, item.text),
                    _sidebar_items(item.items, page, config),
                )
            )
        else:
            sections.append(
                h("section", {"class": "pw-sidebar-section"}, _sidebar_link(item, page, config))
            )
    return h(
        "aside",
        {"class": "pw-sidebar"},
        h(
            "nav",
            {"class": "pw-sidebar-nav"},
            h("div", {"class": "pw-switchers"}, *switchers) if switchers else None,
            *sections,
        ),
    )


def _article(page: PageData) -> Element:
    page_header = None
    if page.title or page.raw_markdown:
        page_header = h(
            "div",
            {"class": "pw-page-header"},
            h("h1", {"class": "pw-page-title"}, page.title) if page.title else h("div", None),
            h(
                "button",
                {"type": "button", "class": "pw-copy-markdown", "data-pw-action": "copy-markdown"},
                "Copy as Markdown",
            )
            if page.raw_markdown
            else None,
        )
    return h(
        "main",
        {"class": "pw-main pw-with-toc" if page.toc else "pw-main"},
        h(
            "article",
            {"class": "pw-article"},
            page_header,
            h("div", {"class": "pw-content"}, RawHtml(page.content_html)),
        ),
    )


def _outline(page: PageData, state: RenderState) -> Element | None:
    if not page.toc:
        return None
    entries = []
    for item in page.toc:
        active = state.active_heading == item.id
        entries.append(
            h(
                "li",
                {"class": f"pw-toc-item pw-depth-{item.depth}"},
                h(
                    "a",
                    {
                        "class": "pw-toc-link pw-active" if active else "pw-toc-link",
                        "href": f"#{item.id}",
                    },
                    item.text,
                ),
            )
        )
    return h(
        "aside",
        {"class": "pw-toc"},
        h("p", {"class": "pw-toc-title"}, "On this page"),
        h("ul", {"class": "pw-toc-list"}, *entries),
    )


def build_search_dialog() -> Element:
    """Return the closed search dialog the client inserts after mounting.

    It is never part of the first paint; the config module ships it to the
    runtime, which places it first inside ``div.pw-app``.
    """
    return h(
        "div",
        {
            "class": "pw-search-dialog",
            "role": "dialog",
            "aria-modal": "true",
            "hidden": "hidden",
        },
        h(
            "div",
            {"class": "pw-search-panel"},
            h(
                "input",
                {"type": "search", "class": "pw-search-input", "placeholder": "Search documentation..."},
            ),
            h("ul", {"class": "pw-search-results"}),
        ),
    )


def build_app_tree(
    page: PageData, config: SiteConfig, state: RenderState = DEFAULT_STATE
) -> Element:
    """Return the element tree for one page.

    Parameters
    ----------
    page : PageData
        Route content and metadata.
    config : SiteConfig
        Resolved site configuration.
    state : RenderState, optional
        Interactive state. The default is the first-paint state shared by the
        static page and the client's initial render.

    Returns
    -------
    Element
        The ``div.pw-app`` root mounted inside ``#app``.
    """
    return h(
        "div",
        {"class": "pw-app", "data-theme": state.theme},
        _header(config, state),
        h(
            "div",
            {"class": "pw-layout"},
            _sidebar(page, config),
            _article(page),
            _outline(page, state),
        ),
    )


def build_not_found_tree(config: SiteConfig) -> Element:
    """Return the tree rendered for a URL with no matching route."""
    return h(
        "div",
        {"class": "pw-app pw-not-found", "data-theme": DEFAULT_STATE.theme},
        h(
            "main",
            {"class": "pw-main"},
            h("h1", None, "404 - Page not found"),
            h("p", None, h("a", {"href": config.base}, f"Back to {config.title}")),
        ),
    )


__all__ = [
    "DEFAULT_STATE",
    "RenderState",
    "build_app_tree",
    "build_not_found_tree",
    "build_search_dialog",
    "locale_switch_url",
    "version_switch_url",
]
