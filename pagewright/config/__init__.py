"""Load and validate site configuration for a pagewright documentation root.

This subpackage parses ``.pagewright/config.yaml``, applies defaults, checks
that the default version and locale are among the declared choices, and
produces strongly typed dataclasses (:class:`SiteConfig`,
:class:`ThemeConfig`, etc.) that the catalog, the page shell, and the
ancillary generators consume. The primary entry point is
:func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from pagewright.config import load_site_config
>>> site = load_site_config(Path("docs"))  # doctest: +SKIP
>>> site.base  # doctest: +SKIP
'/'
"""

from .loader import build_site_config, find_config_file, load_site_config
from .models import (
    LlmsConfig,
    LocaleConfig,
    NavLink,
    SearchConfig,
    SidebarItem,
    SiteConfig,
    SiteConfigError,
    SocialLink,
    ThemeConfig,
)

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
    "build_site_config",
    "find_config_file",
    "load_site_config",
]
