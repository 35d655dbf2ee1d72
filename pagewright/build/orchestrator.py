"""Drive the client build, the server build, and per-route prerendering.

A build moves through ``IDLE -> CLIENT_BUILT -> SERVER_BUILT ->
PRERENDERED`` and lands in ``FAILED`` on any fatal error. Both bundles are
produced from one plugin graph (:func:`~pagewright.build.entries.build_plugins`)
into a staging directory under ``.pagewright/.build``. The staged client
output replaces the output directory only once every phase has run, so a
failing client or server build never publishes a partial site. Individual
route failures during prerendering are logged and reported but do not stop
the remaining routes.

Example
-------
>>> from pathlib import Path
>>> from pagewright.catalog import build_catalog
>>> from pagewright.config import load_site_config
>>> from pagewright.build.orchestrator import BuildOrchestrator
>>> root = Path("docs")
>>> config = load_site_config(root)  # doctest: +SKIP
>>> report = BuildOrchestrator(build_catalog(root), config).run()  # doctest: +SKIP
>>> report.pages_rendered == report.routes_discovered  # doctest: +SKIP
True
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import hashlib
import importlib.util
import logging
import shutil
import typing as typ
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from pagewright._constants import (
    CLIENT_ENTRY_ID,
    DEFAULT_OUT_DIR,
    SERVER_ENTRY_ID,
    STAGING_DIRNAME,
    TOOL_DIR,
)
from pagewright.bundler import (
    BuildTarget,
    BundleError,
    BundleRequest,
    InProcessBundler,
)
from pagewright.generator import ContentRenderer, HtmlContentRenderer, build_page_data
from pagewright.search import default_search_provider

from .entries import build_plugins
from .html_page import HtmlPageBuilder
from .manifest import AssetManifest, parse_asset_manifest

if typ.TYPE_CHECKING:
    from pagewright.bundler import Bundler, BundleOutput
    from pagewright.catalog import Route
    from pagewright.config import SiteConfig
    from pagewright.search import SearchProvider

    from .server_runtime import RenderFunction

logger = logging.getLogger(__name__)

T = typ.TypeVar("T")


class BuildState(enum.Enum):
    """Lifecycle of one :class:`BuildOrchestrator` run."""

    IDLE = "idle"
    CLIENT_BUILT = "client-built"
    SERVER_BUILT = "server-built"
    PRERENDERED = "prerendered"
    FAILED = "failed"


class BuildPhaseError(RuntimeError):
    """Raised when the client or server build fails; nothing is published."""

    def __init__(self, phase: str, cause: BaseException) -> None:
        self.phase = phase
        self.cause = cause
        super().__init__(f"{phase} build failed: {cause}")


class OutputDirectoryError(ValueError):
    """Raised when the output directory would overwrite sources or build state."""


@dc.dataclass(slots=True, frozen=True)
class BuildArtifact:
    """One prerendered page.

    Attributes
    ----------
    route : Route
        Catalog entry that was rendered.
    server_markup : str
        Markup returned by the server entry, before the page shell.
    client_asset_refs : tuple[str, ...]
        Script and stylesheet URLs injected into the page.
    output : str
        Output file relative to the output directory.
    """

    route: Route
    server_markup: str
    client_asset_refs: tuple[str, ...]
    output: str


@dc.dataclass(slots=True, frozen=True)
class RenderFailure:
    """A route that could not be prerendered."""

    url_path: str
    error: str


@dc.dataclass(slots=True)
class BuildReport:
    """Outcome of a build; ``pages_rendered`` may trail ``routes_discovered``."""

    routes_discovered: int
    pages_rendered: int
    out_dir: Path
    artifacts: list[BuildArtifact] = dc.field(default_factory=list)
    failures: list[RenderFailure] = dc.field(default_factory=list)
    prerendered: bool = True

    @property
    def ok(self) -> bool:
        """Return True when every discovered route was rendered."""
        return not self.failures


def output_path_for(url_path: str) -> str:
    """Return the output file for ``url_path`` relative to the output root.

    Examples
    --------
    >>> output_path_for("/")
    'index.html'
    >>> output_path_for("/guide/intro")
    'guide/intro/index.html'
    >>> output_path_for("/v2/")
    'v2/index.html'
    """
    trimmed = url_path.strip("/")
    if not trimmed:
        return "index.html"
    return f"{trimmed}/index.html"


def load_server_render(entry_file: Path) -> RenderFunction:
    """Import the server bundle at ``entry_file`` and return its ``render``.

    Raises
    ------
    BundleError
        If the file cannot be imported or defines no callable ``render``.
    """
    digest = hashlib.sha256(str(entry_file).encode("utf-8")).hexdigest()[:12]
    spec = importlib.util.spec_from_file_location(f"_pagewright_server_{digest}", entry_file)
    if spec is None or spec.loader is None:
        msg = f"Cannot import server bundle '{entry_file}'."
        raise BundleError(msg)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    render = getattr(module, "render", None)
    if not callable(render):
        msg = f"Server bundle '{entry_file}' does not define render(url_path)."
        raise BundleError(msg)
    return typ.cast("RenderFunction", render)


def check_out_dir(out_dir: Path, root: Path, routes: cabc.Sequence[Route] = ()) -> None:
    """Reject an output directory that publishing would wipe unsafely.

    Publishing replaces ``out_dir`` wholesale, so it may not be the root or
    one of its ancestors, hold a catalogued source file, or sit in the tool
    directory anywhere but under the default output location.

    Raises
    ------
    OutputDirectoryError
        If ``out_dir`` is unsafe to replace.
    """
    target = out_dir.resolve()
    root = root.resolve()
    if root.is_relative_to(target):
        msg = f"Output directory '{out_dir}' contains the documentation root '{root}'."
        raise OutputDirectoryError(msg)
    tool_dir = root / TOOL_DIR
    if target.is_relative_to(tool_dir) and not target.is_relative_to(root / DEFAULT_OUT_DIR):
        msg = f"Output directory '{out_dir}' would overwrite build state in '{tool_dir}'."
        raise OutputDirectoryError(msg)
    for route in routes:
        if route.source_file.resolve().is_relative_to(target):
            msg = f"Output directory '{out_dir}' contains the source page '{route.source_file}'."
            raise OutputDirectoryError(msg)


def _remove_tree(path: Path) -> None:
    """Delete ``path`` recursively; a missing path is not an error."""
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        logger.debug("Nothing to clean up at %s", path)


class BuildOrchestrator:
    """Build a documentation site from a route catalog.

    Parameters
    ----------
    routes : Sequence[Route]
        Catalog produced by :func:`pagewright.catalog.build_catalog`.
    config : SiteConfig
        Resolved site configuration.
    bundler : Bundler, optional
        Bundler collaborator; defaults to :class:`InProcessBundler`.
    search_provider : SearchProvider, optional
        Search backend; defaults to a static index when search is enabled.
    content_renderer : ContentRenderer, optional
        Content renderer used to prepare page bodies.
    out_dir : Path, optional
        Publish directory; defaults to ``<root>/.pagewright/dist``.
    max_workers : int, optional
        Worker threads used to prerender routes; ``1`` renders serially.
    """

    def __init__(
        self,
        routes: cabc.Sequence[Route],
        config: SiteConfig,
        *,
        bundler: Bundler | None = None,
        search_provider: SearchProvider | None = None,
        content_renderer: ContentRenderer | None = None,
        out_dir: Path | None = None,
        max_workers: int = 1,
    ) -> None:
        self.routes = list(routes)
        self.config = config
        self.bundler = bundler or InProcessBundler()
        self.search_provider = search_provider or default_search_provider(self.routes, config)
        self.content_renderer = content_renderer or ContentRenderer(
            HtmlContentRenderer(pygments_style=config.pygments_style)
        )
        self.out_dir = out_dir or config.root / DEFAULT_OUT_DIR
        self.max_workers = max(1, max_workers)
        self.staging_dir = config.root / TOOL_DIR / STAGING_DIRNAME
        self.page_builder = HtmlPageBuilder(config)
        self._state = BuildState.IDLE

    @property
    def state(self) -> BuildState:
        """Return the current lifecycle state."""
        return self._state

    def _phase(self, name: str, action: cabc.Callable[[], T]) -> T:
        try:
            return action()
        except Exception as exc:
            self._state = BuildState.FAILED
            logger.exception("The %s build failed", name)
            raise BuildPhaseError(name, exc) from exc

    def _build_client(self, plugins: tuple[typ.Any, ...]) -> tuple[BundleOutput, AssetManifest]:
        output = self.bundler.build(
            BundleRequest(
                target=BuildTarget.CLIENT,
                entry=CLIENT_ENTRY_ID,
                out_dir=self.staging_dir / "client",
                base=self.config.base,
                plugins=plugins,
            )
        )
        manifest = parse_asset_manifest(output.entry_file.read_text(encoding="utf-8"))
        if not manifest.scripts:
            msg = f"Client build wrote no scripts to '{output.entry_file}'."
            raise BundleError(msg)
        return output, manifest

    def _build_server(self, plugins: tuple[typ.Any, ...]) -> RenderFunction:
        output = self.bundler.build(
            BundleRequest(
                target=BuildTarget.SERVER,
                entry=SERVER_ENTRY_ID,
                out_dir=self.staging_dir / "server",
                base=self.config.base,
                plugins=plugins,
            )
        )
        return load_server_render(output.entry_file)

    def _render_route(
        self, render: RenderFunction, route: Route, assets: AssetManifest, client_dir: Path
    ) -> BuildArtifact:
        result = render(route.url_path)
        html = self.page_builder.render(
            url_path=route.url_path,
            markup=result["markup"],
            frontmatter=result.get("frontmatter") or {},
            assets=assets,
            locale=route.locale,
        )
        relative = output_path_for(route.url_path)
        target = client_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(html, encoding="utf-8")
        logger.debug("Rendered %s -> %s", route.url_path, relative)
        return BuildArtifact(
            route=route,
            server_markup=result["markup"],
            client_asset_refs=assets.scripts + assets.styles,
            output=relative,
        )

    def _prerender(
        self, render: RenderFunction, assets: AssetManifest, client_dir: Path
    ) -> tuple[list[BuildArtifact], list[RenderFailure]]:
        def _attempt(route: Route) -> BuildArtifact | RenderFailure:
            try:
                return self._render_route(render, route, assets, client_dir)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to render %s: %s", route.url_path, exc, exc_info=True)
                return RenderFailure(route.url_path, str(exc))

        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                outcomes = list(pool.map(_attempt, self.routes))
        else:
            outcomes = [_attempt(route) for route in self.routes]
        artifacts = [item for item in outcomes if isinstance(item, BuildArtifact)]
        failures = [item for item in outcomes if isinstance(item, RenderFailure)]
        return artifacts, failures

    def _publish(self, client_dir: Path) -> None:
        _remove_tree(self.out_dir)
        self.out_dir.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(client_dir), str(self.out_dir))

    def run(self, *, prerender: bool = True) -> BuildReport:
        """Run the build and publish the site.

        Parameters
        ----------
        prerender : bool, optional
            When False only the client bundle is published, with its HTML
            shell as ``index.html``.

        Returns
        -------
        BuildReport
            Rendered pages, failures, and the output directory.

        Raises
        ------
        BuildPhaseError
            If the client or server build fails.
        OutputDirectoryError
            If the output directory is unsafe to replace.
        """
        check_out_dir(self.out_dir, self.config.root, self.routes)
        client_dir = self.staging_dir / "client"
        _remove_tree(self.staging_dir)
        try:
            pages = [
                build_page_data(route, self.config, self.content_renderer)
                for route in self.routes
            ]
            plugins = build_plugins(
                pages,
                self.config,
                self.search_provider,
                highlight_css=self.content_renderer.stylesheet,
            )
            client_output, manifest = self._phase("client", lambda: self._build_client(plugins))
            self._state = BuildState.CLIENT_BUILT
            logger.info("Client bundle written (%d files)", len(client_output.files))

            if not prerender:
                self._publish(client_dir)
                return BuildReport(
                    routes_discovered=len(self.routes),
                    pages_rendered=0,
                    out_dir=self.out_dir,
                    prerendered=False,
                )

            render = self._phase("server", lambda: self._build_server(plugins))
            self._state = BuildState.SERVER_BUILT

            client_output.entry_file.unlink(missing_ok=True)
            assets = manifest.normalized(self.config.base)
            artifacts, failures = self._prerender(render, assets, client_dir)
            logger.info("Pre-rendered %d of %d pages", len(artifacts), len(self.routes))

            self._publish(client_dir)
            self._state = BuildState.PRERENDERED
            return BuildReport(
                routes_discovered=len(self.routes),
                pages_rendered=len(artifacts),
                out_dir=self.out_dir,
                artifacts=artifacts,
                failures=failures,
            )
        except Exception:
            self._state = BuildState.FAILED
            raise
        finally:
            _remove_tree(self.staging_dir)


__all__ = [
    "BuildArtifact",
    "BuildOrchestrator",
    "BuildPhaseError",
    "BuildReport",
    "BuildState",
    "OutputDirectoryError",
    "RenderFailure",
    "check_out_dir",
    "load_server_render",
    "output_path_for",
]
