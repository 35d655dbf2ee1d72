"""Synthetic modules handed to the bundler for both build targets.

Every plugin is resolved for both targets from the same graph; a plugin
returns ``None`` for the target it does not exist in. The routes module is the
interesting one: the client flavour embeds each page's first-paint element
tree (from :func:`~pagewright.generator.shell.build_app_tree`) for the runtime
to mount, while the server flavour carries the page data the server entry
renders with the very same function.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import json
import logging
import typing as typ
from pathlib import Path

from pagewright._constants import (
    CLIENT_ENTRY_ID,
    CONFIG_MODULE_ID,
    ROUTES_MODULE_ID,
    SEARCH_MODULE_ID,
    SERVER_ENTRY_ID,
    STYLES_MODULE_ID,
)
from pagewright.bundler import JAVASCRIPT, JSON_DATA, PYTHON, STYLESHEET, BuildTarget
from pagewright.document import escape_template_literal
from pagewright.generator.elements import to_data
from pagewright.generator.shell import DEFAULT_STATE, build_app_tree, build_search_dialog

if typ.TYPE_CHECKING:
    from pagewright.bundler import ModulePlugin
    from pagewright.config import SiteConfig
    from pagewright.generator.models import PageData
    from pagewright.search import SearchProvider

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"

SERVER_ENTRY_SOURCE = f"""\
import json

from pagewright.build.server_runtime import create_renderer

render = create_renderer(
    routes=json.loads(MODULES[{ROUTES_MODULE_ID!r}]),
    config=json.loads(MODULES[{CONFIG_MODULE_ID!r}]),
)
"""


def _client_route(page: PageData, config: SiteConfig) -> str:
    """Return one route object literal for the client routes module."""
    tree = build_app_tree(page, config, DEFAULT_STATE)
    fields = [
        f"      path: {json.dumps(page.url_path)}",
        f"      version: {json.dumps(page.version)}",
        f"      locale: {json.dumps(page.locale)}",
        f"      frontmatter: {json.dumps(dict(page.frontmatter))}",
        f"      toc: {json.dumps([item.to_dict() for item in page.toc])}",
        f"      rawMarkdown: `{escape_template_literal(page.raw_markdown)}`",
        f"      tree: {json.dumps(to_data(tree))}",
    ]
    return "    {\n" + ",\n".join(fields) + "\n    }"


@dc.dataclass(slots=True)
class RoutesModule:
    """``virtual:pagewright/routes``: the page catalog."""

    pages: cabc.Sequence[PageData]
    config: SiteConfig
    module_id: str = ROUTES_MODULE_ID

    def media_type(self, target: BuildTarget) -> str:
        """Return JavaScript for the client and JSON for the server."""
        return JAVASCRIPT if target is BuildTarget.CLIENT else JSON_DATA

    def load(self, target: BuildTarget) -> str | None:
        """Return the routes for ``target``."""
        if target is BuildTarget.SERVER:
            return json.dumps([page.to_dict() for page in self.pages])
        entries: list[str] = []
        for page in self.pages:
            try:
                entries.append(_client_route(page, self.config))
            except Exception:  # noqa: BLE001
                logger.warning(
                    "Leaving %s out of the client routes", page.url_path, exc_info=True
                )
        routes = ",\n".join(entries)
        return f"  exports.routes = [\n{routes}\n  ];\n"


@dc.dataclass(slots=True)
class ConfigModule:
    """``virtual:pagewright/config``: the resolved site configuration."""

    config: SiteConfig
    module_id: str = CONFIG_MODULE_ID

    def media_type(self, target: BuildTarget) -> str:
        """Return JavaScript for the client and JSON for the server."""
        return JAVASCRIPT if target is BuildTarget.CLIENT else JSON_DATA

    def load(self, target: BuildTarget) -> str | None:
        """Return the config payload for ``target``."""
        payload = json.dumps(self.config.client_payload())
        if target is BuildTarget.SERVER:
            return payload
        dialog = to_data(build_search_dialog()) if self.config.search.enabled else None
        return (
            f"  exports.config = {payload};\n"
            f"  exports.searchDialog = {json.dumps(dialog)};\n"
        )


@dc.dataclass(slots=True)
class SearchModule:
    """``virtual:pagewright/search``: delegated to the injected provider."""

    provider: SearchProvider
    module_id: str = SEARCH_MODULE_ID

    def media_type(self, target: BuildTarget) -> str:  # noqa: ARG002
        """Return JavaScript."""
        return JAVASCRIPT

    def load(self, target: BuildTarget) -> str | None:
        """Return the provider's module source for ``target``."""
        return self.provider.module_source(target)


@dc.dataclass(slots=True)
class StylesModule:
    """``virtual:pagewright/styles``: site CSS plus code highlighting."""

    highlight_css: str = ""
    module_id: str = STYLES_MODULE_ID

    def media_type(self, target: BuildTarget) -> str:  # noqa: ARG002
        """Return CSS."""
        return STYLESHEET

    def load(self, target: BuildTarget) -> str | None:
        """Return the stylesheet; the server bundle has no styles."""
        if target is BuildTarget.SERVER:
            return None
        site_css = (ASSETS_DIR / "site.css").read_text(encoding="utf-8")
        return f"{site_css.rstrip()}\n\n{self.highlight_css.strip()}\n"


@dc.dataclass(slots=True)
class ClientEntryModule:
    """Client entry: the runtime that mounts or hydrates the page."""

    module_id: str = CLIENT_ENTRY_ID

    def media_type(self, target: BuildTarget) -> str:  # noqa: ARG002
        """Return JavaScript."""
        return JAVASCRIPT

    def load(self, target: BuildTarget) -> str | None:
        """Return the runtime source for client builds."""
        if target is BuildTarget.SERVER:
            return None
        return (ASSETS_DIR / "runtime.js").read_text(encoding="utf-8")


@dc.dataclass(slots=True)
class ServerEntryModule:
    """Server entry: Python source exposing ``render(url_path)``."""

    module_id: str = SERVER_ENTRY_ID

    def media_type(self, target: BuildTarget) -> str:  # noqa: ARG002
        """Return Python."""
        return PYTHON

    def load(self, target: BuildTarget) -> str | None:
        """Return the entry source for server builds."""
        if target is BuildTarget.CLIENT:
            return None
        return SERVER_ENTRY_SOURCE


def build_plugins(
    pages: cabc.Sequence[PageData],
    config: SiteConfig,
    search_provider: SearchProvider,
    *,
    highlight_css: str = "",
) -> tuple[ModulePlugin, ...]:
    """Return the plugin graph shared by the client and server builds."""
    return (
        RoutesModule(pages, config),
        ConfigModule(config),
        SearchModule(search_provider),
        StylesModule(highlight_css),
        ClientEntryModule(),
        ServerEntryModule(),
    )


__all__ = [
    "SERVER_ENTRY_SOURCE",
    "ClientEntryModule",
    "ConfigModule",
    "RoutesModule",
    "SearchModule",
    "ServerEntryModule",
    "StylesModule",
    "build_plugins",
]
