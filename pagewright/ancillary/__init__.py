"""Optional outputs generated alongside the prerendered site."""

from .llms import generate_llms_full, generate_llms_overview, write_llms_files
from .sitemap import SitemapBuilder, sitemap_entries

__all__ = [
    "SitemapBuilder",
    "generate_llms_full",
    "generate_llms_overview",
    "sitemap_entries",
    "write_llms_files",
]
