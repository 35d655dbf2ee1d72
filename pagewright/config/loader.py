"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from pagewright._constants import CONFIG_FILENAMES, TOOL_DIR
from pagewright.paths import is_version_token

from .helpers import (
    _build_llms_config,
    _build_locales,
    _build_search_config,
    _build_theme_config,
    _normalize_base,
    _optional_str,
    _require_list,
)
from .models import SiteConfig, SiteConfigError

logger = logging.getLogger(__name__)

KNOWN_KEYS = frozenset(
    {
        "title",
        "description",
        "base",
        "theme",
        "versions",
        "default_version",
        "locales",
        "default_locale",
        "llms",
        "search",
        "pygments_style",
    }
)


def find_config_file(root: Path) -> Path | None:
    """Return the first existing config file under ``root/.pagewright``."""
    for name in CONFIG_FILENAMES:
        candidate = root / TOOL_DIR / name
        if candidate.is_file():
            return candidate
    return None


def build_site_config(root: Path, raw: typ.Mapping[str, typ.Any]) -> SiteConfig:
    """Validate a raw mapping and resolve defaults into a :class:`SiteConfig`.

    Parameters
    ----------
    root : Path
        Documentation root the configuration belongs to.
    raw : Mapping[str, Any]
        Parsed YAML document.

    Returns
    -------
    SiteConfig
        Fully defaulted configuration.

    Raises
    ------
    SiteConfigError
        If a value has the wrong shape or a default selection is not among
        the declared choices.
    """
    for key in sorted(set(raw) - KNOWN_KEYS):
        logger.warning("Ignoring unknown configuration key '%s'", key)

    versions = [str(item) for item in _require_list(raw.get("versions"), "versions")]
    for version in versions:
        if not is_version_token(version):
            msg = f"'versions' entry '{version}' is not a version token such as 'v2'."
            raise SiteConfigError(msg)
    default_version = _optional_str(raw.get("default_version"))
    if default_version is not None and default_version not in versions:
        msg = f"'default_version' '{default_version}' is not listed in 'versions'."
        raise SiteConfigError(msg)

    locales = _build_locales(raw.get("locales"))
    default_locale = _optional_str(raw.get("default_locale"))
    if default_locale is not None and default_locale not in locales:
        msg = f"'default_locale' '{default_locale}' is not a key of 'locales'."
        raise SiteConfigError(msg)

    return SiteConfig(
        root=root,
        title=_optional_str(raw.get("title")) or "Documentation",
        description=_optional_str(raw.get("description")),
        base=_normalize_base(raw.get("base")),
        theme=_build_theme_config(raw.get("theme")),
        versions=versions,
        default_version=default_version,
        locales=locales,
        default_locale=default_locale,
        llms=_build_llms_config(raw.get("llms")),
        search=_build_search_config(raw.get("search")),
        pygments_style=_optional_str(raw.get("pygments_style")) or "monokai",
    )


def load_site_config(root: Path, *, config_path: Path | None = None) -> SiteConfig:
    """Load the configuration for a documentation root.

    Parameters
    ----------
    root : Path
        Documentation root. The config file is looked up as
        ``.pagewright/config.yaml`` (or ``config.yml``) beneath it.
    config_path : Path, optional
        Explicit config file, overriding the lookup.

    Returns
    -------
    SiteConfig
        Parsed configuration, or the defaults when no file exists.

    Raises
    ------
    FileNotFoundError
        If ``config_path`` is given but does not exist.
    SiteConfigError
        If the YAML cannot be parsed, is not a mapping, or fails validation.

    Examples
    --------
    >>> from pathlib import Path
    >>> from pagewright.config import load_site_config
    >>> load_site_config(Path("docs")).title  # doctest: +SKIP
    'Documentation'
    """
    resolved_root = root.resolve()
    if config_path is not None and not config_path.exists():
        msg = f"Configuration file '{config_path}' not found."
        raise FileNotFoundError(msg)
    path = config_path or find_config_file(resolved_root)
    if path is None:
        logger.debug("No configuration file under %s; using defaults", resolved_root)
        return SiteConfig(root=resolved_root)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"Invalid YAML in '{path}': {exc}"
        raise SiteConfigError(msg) from exc
    if not isinstance(loaded, dict):
        msg = f"Top-level YAML structure in '{path}' must be a mapping."
        raise SiteConfigError(msg)
    logger.debug("Loaded configuration from %s", path)
    return build_site_config(resolved_root, dict(loaded))


__all__ = ["build_site_config", "find_config_file", "load_site_config"]
