"""Cyclopts CLI entrypoint for building pagewright documentation sites.

The ``pagewright`` console script builds a documentation root into a static
site (client bundle, prerendered pages, sitemap, and ``llms.txt`` files),
lists the routes a root would produce, and queries the search index from the
terminal. Every option can also be supplied through ``PAGEWRIGHT_*``
environment variables, which is how CI jobs usually drive it.

Examples
--------
Build the ``docs`` directory for deployment under ``/handbook/``:

>>> from pagewright.cli import app
>>> app.run(["build", "docs", "--base", "/handbook/"])  # doctest: +SKIP

List the discovered routes:

>>> from pagewright.cli import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .build import BuildOptions, BuildPhaseError, OutputDirectoryError, SiteBuilder
from .catalog import CatalogError, build_catalog
from .config import SiteConfigError, load_site_config
from .search import StaticSearchProvider

DEFAULT_ROOT = Path(".")

app = App(name="pagewright", config=cyclopts.config.Env("PAGEWRIGHT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(exc: Exception) -> typ.NoReturn:
    """Report a fatal error on stderr and exit with status 1."""
    print(f"error: {exc}", file=sys.stderr)
    raise SystemExit(1) from exc


@app.command(help="Build the documentation site for production.")
def build(
    root: typ.Annotated[
        Path, Parameter(help="Documentation root", env_var="PAGEWRIGHT_ROOT")
    ] = DEFAULT_ROOT,
    *,
    out_dir: typ.Annotated[
        Path | None,
        Parameter(help="Output directory (default .pagewright/dist)", env_var="PAGEWRIGHT_OUT_DIR"),
    ] = None,
    base: typ.Annotated[
        str | None, Parameter(help="Public base path", env_var="PAGEWRIGHT_BASE")
    ] = None,
    skip_prerender: typ.Annotated[
        bool, Parameter(help="Skip prerendering (client-only build)")
    ] = False,
    skip_search: typ.Annotated[bool, Parameter(help="Ship an empty search index")] = False,
    skip_llms: typ.Annotated[bool, Parameter(help="Skip llms.txt generation")] = False,
    skip_sitemap: typ.Annotated[bool, Parameter(help="Skip sitemap.xml generation")] = False,
    site_url: typ.Annotated[
        str | None,
        Parameter(help="Absolute site URL used in sitemap.xml", env_var="PAGEWRIGHT_SITE_URL"),
    ] = None,
    max_workers: typ.Annotated[int, Parameter(help="Prerender worker threads")] = 1,
    verbose: typ.Annotated[bool, Parameter(help="Log debug output")] = False,
) -> None:
    """Build ``root`` into a static site.

    Parameters
    ----------
    root : Path, optional
        Documentation root containing Markdown sources and ``.pagewright``.
    out_dir : Path or None, optional
        Output directory, relative to ``root`` unless absolute.
    base : str or None, optional
        Public base path overriding the configured ``base``.
    skip_prerender, skip_search, skip_llms, skip_sitemap : bool, optional
        Disable the corresponding build stage.
    site_url : str or None, optional
        Absolute deployment URL for sitemap entries.
    max_workers : int, optional
        Worker threads used for prerendering.
    verbose : bool, optional
        Enable debug logging.

    Raises
    ------
    SystemExit
        With status 1 when the catalog, the configuration, or a build phase
        fails; nothing is published in that case.
    """
    _configure_logging(verbose)
    options = BuildOptions(
        out_dir=out_dir,
        base=base,
        skip_prerender=skip_prerender,
        skip_search=skip_search,
        skip_llms=skip_llms,
        skip_sitemap=skip_sitemap,
        site_url=site_url,
        max_workers=max_workers,
    )
    try:
        result = SiteBuilder(root, options).run()
    except (
        CatalogError,
        BuildPhaseError,
        OutputDirectoryError,
        SiteConfigError,
        FileNotFoundError,
    ) as exc:
        _fail(exc)

    report = result.report
    if not report.prerendered:
        print(f"wrote {_format_path(report.out_dir)} (client bundle only)")
    for artifact in report.artifacts:
        print(f"wrote {_format_path(report.out_dir / artifact.output)}")
    for path in result.extra_files:
        print(f"wrote {_format_path(path)}")
    for failure in report.failures:
        print(f"warning: failed to render {failure.url_path}: {failure.error}", file=sys.stderr)
    if report.prerendered:
        print(f"rendered {report.pages_rendered} of {report.routes_discovered} pages")


@app.command(help="List the routes discovered under a documentation root.")
def routes(
    root: typ.Annotated[
        Path, Parameter(help="Documentation root", env_var="PAGEWRIGHT_ROOT")
    ] = DEFAULT_ROOT,
) -> None:
    """Print one line per route: URL, source file, version and locale."""
    resolved = root.resolve()
    try:
        catalog = build_catalog(resolved)
    except CatalogError as exc:
        _fail(exc)
    for route in catalog:
        source = route.source_file.relative_to(resolved).as_posix()
        tags = [tag for tag in (route.version, route.locale) if tag]
        suffix = f" [{', '.join(tags)}]" if tags else ""
        print(f"{route.url_path}\t{source}{suffix}")


@app.command(help="Search the documentation from the terminal.")
def search(
    query: str,
    *,
    root: typ.Annotated[
        Path, Parameter(help="Documentation root", env_var="PAGEWRIGHT_ROOT")
    ] = DEFAULT_ROOT,
    limit: typ.Annotated[int, Parameter(help="Maximum results")] = 10,
) -> None:
    """Print ranked search results for ``query``."""
    resolved = root.resolve()
    try:
        config = load_site_config(resolved)
        catalog = build_catalog(resolved)
    except (CatalogError, SiteConfigError) as exc:
        _fail(exc)
    results = StaticSearchProvider.from_routes(catalog, config, limit=limit).search(query)
    if not results:
        print("no results")
        return
    for result in results:
        print(f"{result.score:.2f}\t{result.url}\t{result.title}")
        print(f"\t{result.excerpt}")


def main() -> None:
    """Invoke the Cyclopts application behind the ``pagewright`` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
