"""Production build pipeline: catalog, orchestrated bundles, and extras."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

from pagewright._constants import DEFAULT_OUT_DIR
from pagewright.ancillary import SitemapBuilder, write_llms_files
from pagewright.catalog import build_catalog
from pagewright.config import load_site_config
from pagewright.config.helpers import _normalize_base
from pagewright.search import NullSearchProvider

from .orchestrator import BuildOrchestrator, BuildReport

if typ.TYPE_CHECKING:
    from pagewright.bundler import Bundler
    from pagewright.config import SiteConfig

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class BuildOptions:
    """Switches accepted by ``pagewright build``.

    Attributes
    ----------
    out_dir : Path or None
        Output directory, relative to the root unless absolute.
    base : str or None
        Public base path overriding the configured ``base``.
    skip_prerender : bool
        Publish the client bundle only.
    skip_search : bool
        Ship an empty search module.
    skip_llms : bool
        Do not write ``llms.txt`` files.
    skip_sitemap : bool
        Do not write ``sitemap.xml``.
    site_url : str or None
        Absolute site URL used in the sitemap.
    max_workers : int
        Prerender worker threads.
    """

    out_dir: Path | None = None
    base: str | None = None
    skip_prerender: bool = False
    skip_search: bool = False
    skip_llms: bool = False
    skip_sitemap: bool = False
    site_url: str | None = None
    max_workers: int = 1


@dc.dataclass(slots=True)
class SiteBuildResult:
    """Build report plus the extra files written after it."""

    report: BuildReport
    extra_files: list[Path] = dc.field(default_factory=list)


class SiteBuilder:
    """Build a documentation root into a deployable directory.

    Parameters
    ----------
    root : Path
        Documentation root.
    options : BuildOptions, optional
        Build switches.
    config : SiteConfig, optional
        Preloaded configuration; read from ``root`` when omitted.
    bundler : Bundler, optional
        Bundler passed to the orchestrator.
    """

    def __init__(
        self,
        root: Path,
        options: BuildOptions | None = None,
        *,
        config: SiteConfig | None = None,
        bundler: Bundler | None = None,
    ) -> None:
        self.root = root.resolve()
        self.options = options or BuildOptions()
        loaded = config or load_site_config(self.root)
        if self.options.base is not None:
            loaded = dc.replace(loaded, base=_normalize_base(self.options.base))
        self.config = loaded
        self.bundler = bundler

    @property
    def out_dir(self) -> Path:
        """Return the resolved output directory."""
        out_dir = self.options.out_dir or Path(DEFAULT_OUT_DIR)
        return out_dir if out_dir.is_absolute() else self.root / out_dir

    def run(self) -> SiteBuildResult:
        """Build the site and write the sitemap and llms files.

        Raises
        ------
        CatalogError
            If the documentation tree cannot be catalogued.
        BuildPhaseError
            If the client or server build fails.
        """
        logger.info("Building %s (base=%s)", self.root, self.config.base)
        routes = build_catalog(self.root)
        orchestrator = BuildOrchestrator(
            routes,
            self.config,
            bundler=self.bundler,
            search_provider=NullSearchProvider() if self.options.skip_search else None,
            out_dir=self.out_dir,
            max_workers=self.options.max_workers,
        )
        report = orchestrator.run(prerender=not self.options.skip_prerender)

        extra_files: list[Path] = []
        if not self.options.skip_sitemap:
            sitemap = SitemapBuilder(self.config, site_url=self.options.site_url)
            extra_files.append(sitemap.run(routes, report.out_dir))
        if not self.options.skip_llms:
            extra_files.extend(write_llms_files(self.config, routes, report.out_dir))
        return SiteBuildResult(report=report, extra_files=extra_files)


__all__ = ["BuildOptions", "SiteBuildResult", "SiteBuilder"]
