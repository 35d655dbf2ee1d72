"""Utility helpers shared by the pagewright configuration loader."""

from __future__ import annotations

import typing as typ

from .models import (
    LlmsConfig,
    LocaleConfig,
    NavLink,
    SearchConfig,
    SidebarItem,
    SiteConfigError,
    SocialLink,
    ThemeConfig,
)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_str(payload: typ.Mapping[str, typ.Any], key: str, where: str) -> str:
    """Return ``payload[key]`` as a non-empty string or raise ``SiteConfigError``."""
    value = _optional_str(payload.get(key))
    if value is None:
        msg = f"'{where}.{key}' is required."
        raise SiteConfigError(msg)
    return value


def _require_mapping(value: object, where: str) -> typ.Mapping[str, typ.Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"'{where}' must be a mapping."
        raise SiteConfigError(msg)
    return value


def _require_list(value: object, where: str) -> list[typ.Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        msg = f"'{where}' must be a list."
        raise SiteConfigError(msg)
    return value


def _as_bool(value: object, where: str, *, default: bool) -> bool:
    match value:
        case None:
            return default
        case bool():
            return value
        case _:
            msg = f"'{where}' must be true or false."
            raise SiteConfigError(msg)


def _normalize_base(value: object | None) -> str:
    """Return a base path that starts and ends with ``/``.

    Examples
    --------
    >>> _normalize_base("docs")
    '/docs/'
    >>> _normalize_base(None)
    '/'
    """
    text = _optional_str(value) or "/"
    stripped = text.strip("/")
    return f"/{stripped}/" if stripped else "/"


def _build_sidebar_items(value: object, where: str) -> list[SidebarItem]:
    items: list[SidebarItem] = []
    for index, entry in enumerate(_require_list(value, where)):
        entry_where = f"{where}[{index}]"
        payload = _require_mapping(entry, entry_where)
        items.append(
            SidebarItem(
                text=_require_str(payload, "text", entry_where),
                link=_optional_str(payload.get("link")),
                items=_build_sidebar_items(payload.get("items"), f"{entry_where}.items"),
                collapsed=_as_bool(
                    payload.get("collapsed"), f"{entry_where}.collapsed", default=False
                ),
            )
        )
    return items


def _build_theme_config(value: object) -> ThemeConfig:
    """Build a ThemeConfig instance from the ``theme`` mapping."""
    payload = _require_mapping(value, "theme")
    nav: list[NavLink] = []
    for index, entry in enumerate(_require_list(payload.get("nav"), "theme.nav")):
        where = f"theme.nav[{index}]"
        item = _require_mapping(entry, where)
        nav.append(
            NavLink(text=_require_str(item, "text", where), link=_require_str(item, "link", where))
        )

    sidebar = {
        str(key): _build_sidebar_items(items, f"theme.sidebar.{key}")
        for key, items in _require_mapping(payload.get("sidebar"), "theme.sidebar").items()
    }

    social_links: list[SocialLink] = []
    raw_social = _require_list(payload.get("social_links"), "theme.social_links")
    for index, entry in enumerate(raw_social):
        where = f"theme.social_links[{index}]"
        item = _require_mapping(entry, where)
        social_links.append(
            SocialLink(icon=_require_str(item, "icon", where), link=_require_str(item, "link", where))
        )

    return ThemeConfig(
        logo=_optional_str(payload.get("logo")),
        nav=nav,
        sidebar=sidebar,
        social_links=social_links,
    )


def _build_locales(value: object) -> dict[str, LocaleConfig]:
    """Build the locale table from the ``locales`` mapping."""
    locales: dict[str, LocaleConfig] = {}
    for key, entry in _require_mapping(value, "locales").items():
        where = f"locales.{key}"
        item = _require_mapping(entry, where)
        locales[str(key)] = LocaleConfig(
            label=_require_str(item, "label", where),
            lang=_require_str(item, "lang", where),
        )
    return locales


def _build_llms_config(value: object) -> LlmsConfig:
    payload = _require_mapping(value, "llms")
    return LlmsConfig(
        enabled=_as_bool(payload.get("enabled"), "llms.enabled", default=True),
        title=_optional_str(payload.get("title")),
        description=_optional_str(payload.get("description")),
    )


def _build_search_config(value: object) -> SearchConfig:
    payload = _require_mapping(value, "search")
    return SearchConfig(
        enabled=_as_bool(payload.get("enabled"), "search.enabled", default=True)
    )


__all__ = [
    "_as_bool",
    "_build_llms_config",
    "_build_locales",
    "_build_search_config",
    "_build_sidebar_items",
    "_build_theme_config",
    "_normalize_base",
    "_optional_str",
    "_require_list",
    "_require_mapping",
    "_require_str",
]
