"""Static documentation site generator with prerendered, hydrating pages.

This package turns a directory of Markdown files into a versioned,
localised documentation site: it catalogues routes, transforms directives
into components, bundles a client runtime, and prerenders every page with
markup identical to the client's first paint.

Exports
-------
- ``app``: Cyclopts application exposing the subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from pagewright import main
>>> main()  # doctest: +SKIP
>>> from pagewright import app
>>> app(["routes", "docs"])  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
