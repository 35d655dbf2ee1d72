"""Behaviour tests for version and locale route prefixes.

The ``versioned_routes.feature`` scenario lays out a documentation root with
an unversioned guide, a ``v1`` folder, and a ``ja`` folder, builds the route
catalog with :func:`pagewright.catalog.build_catalog`, and checks the
version and locale recorded on each route.

Usage
-----
Run ``pytest tests/bdd/test_versioned_routes.py -v``. The scenario only
touches ``tmp_path`` and needs no network access.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from pagewright.catalog import Route, build_catalog

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "versioned_routes.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _route(scenario_state: dict[str, object], url_path: str) -> Route:
    routes = typ.cast("list[Route]", scenario_state["routes"])
    matches = [route for route in routes if route.url_path == url_path]
    assert matches, f"expected a route for {url_path!r}, got {[r.url_path for r in routes]}"
    return matches[0]


@given("a documentation root with versioned and localized pages")
def given_versioned_root(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Write guide pages at the root, under ``v1`` and under ``ja``."""
    root = tmp_path / "docs"
    for relative in ("index.md", "guide.md", "v1/guide.md", "v1/index.md", "ja/index.md"):
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"# {relative}\n", encoding="utf-8")
    scenario_state["root"] = root


@when("I build the route catalog")
def when_build_catalog(scenario_state: dict[str, object]) -> None:
    """Catalogue the documentation root."""
    scenario_state["routes"] = build_catalog(typ.cast("Path", scenario_state["root"]))


@then(parsers.parse('the route "{url_path}" has version "{version}"'))
def then_route_has_version(scenario_state: dict[str, object], url_path: str, version: str) -> None:
    """Check the version token recorded on a route."""
    route = _route(scenario_state, url_path)
    assert route.version == version, f"expected {url_path} to be version {version}"
    assert route.locale is None, "a versioned route must not also carry a locale"


@then(parsers.parse('the route "{url_path}" has locale "{locale}"'))
def then_route_has_locale(scenario_state: dict[str, object], url_path: str, locale: str) -> None:
    """Check the locale token recorded on a route."""
    route = _route(scenario_state, url_path)
    assert route.locale == locale, f"expected {url_path} to be locale {locale}"
    assert route.version is None


@then(parsers.parse('the route "{url_path}" has no version or locale'))
def then_route_is_plain(scenario_state: dict[str, object], url_path: str) -> None:
    """Check that an unprefixed route carries neither token."""
    route = _route(scenario_state, url_path)
    assert route.version is None
    assert route.locale is None


@then("the routes are listed in URL order")
def then_routes_sorted(scenario_state: dict[str, object]) -> None:
    """Check the catalog order."""
    routes = typ.cast("list[Route]", scenario_state["routes"])
    assert [route.url_path for route in routes] == ["/", "/guide", "/ja/", "/v1/", "/v1/guide"]
