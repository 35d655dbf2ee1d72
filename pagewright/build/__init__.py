"""Build pipeline: synthetic modules, bundles, prerendering, and publishing."""

from .entries import build_plugins
from .html_page import HtmlPageBuilder
from .manifest import AssetManifest, normalize_asset_url, parse_asset_manifest
from .orchestrator import (
    BuildArtifact,
    BuildOrchestrator,
    BuildPhaseError,
    BuildReport,
    BuildState,
    OutputDirectoryError,
    RenderFailure,
    check_out_dir,
    output_path_for,
)
from .site import BuildOptions, SiteBuilder, SiteBuildResult

__all__ = [
    "AssetManifest",
    "BuildArtifact",
    "BuildOptions",
    "BuildOrchestrator",
    "BuildPhaseError",
    "BuildReport",
    "BuildState",
    "HtmlPageBuilder",
    "OutputDirectoryError",
    "RenderFailure",
    "SiteBuildResult",
    "SiteBuilder",
    "build_plugins",
    "check_out_dir",
    "normalize_asset_url",
    "output_path_for",
    "parse_asset_manifest",
]
