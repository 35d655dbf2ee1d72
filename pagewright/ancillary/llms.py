"""Generate ``llms.txt`` and ``llms-full.txt`` content indexes.

``llms.txt`` lists every page with its title and description;
``llms-full.txt`` concatenates every page body. Both are derived from the
route catalog and written next to the prerendered site.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ

from pagewright.document import split_frontmatter
from pagewright.paths import url_path_to_title

if typ.TYPE_CHECKING:
    from pathlib import Path

    from pagewright.catalog import Route
    from pagewright.config import SiteConfig

logger = logging.getLogger(__name__)

LLMS_FILENAME = "llms.txt"
LLMS_FULL_FILENAME = "llms-full.txt"


def _heading(config: SiteConfig) -> list[str]:
    title = config.llms.title or config.title
    description = config.llms.description or config.description or ""
    lines = [f"# {title}", ""]
    if description:
        lines.extend([f"> {description}", ""])
    return lines


def _page_title(route: Route) -> str:
    return route.title or url_path_to_title(route.url_path)


def generate_llms_overview(config: SiteConfig, routes: cabc.Iterable[Route]) -> str:
    """Return the ``llms.txt`` page listing.

    Each page becomes ``- [title](path): description``; the description part
    is omitted when the page declares none.
    """
    lines = _heading(config)
    lines.extend(["## Pages", ""])
    for route in routes:
        entry = f"- [{_page_title(route)}]({route.url_path})"
        description = route.frontmatter.description
        lines.append(f"{entry}: {description}" if description else entry)
    return "\n".join(lines)


def generate_llms_full(config: SiteConfig, routes: cabc.Iterable[Route]) -> str:
    """Return ``llms-full.txt``: every page body under its title."""
    sections = _heading(config)
    for route in routes:
        _, body = split_frontmatter(route.raw_content)
        sections.extend(["---", f"# {_page_title(route)}", "", body.strip(), ""])
    return "\n".join(sections)


def write_llms_files(
    config: SiteConfig, routes: cabc.Sequence[Route], out_dir: Path
) -> list[Path]:
    """Write both files into ``out_dir`` unless ``llms.enabled`` is false.

    Returns
    -------
    list[Path]
        Written files, empty when disabled.
    """
    if not config.llms.enabled:
        logger.debug("llms.txt generation disabled")
        return []
    out_dir.mkdir(parents=True, exist_ok=True)
    overview = out_dir / LLMS_FILENAME
    overview.write_text(generate_llms_overview(config, routes), encoding="utf-8")
    full = out_dir / LLMS_FULL_FILENAME
    full.write_text(generate_llms_full(config, routes), encoding="utf-8")
    logger.info("Generated llms.txt (%d pages)", len(routes))
    return [overview, full]


__all__ = [
    "LLMS_FILENAME",
    "LLMS_FULL_FILENAME",
    "generate_llms_full",
    "generate_llms_overview",
    "write_llms_files",
]
