"""Tests for the pure path helpers in :mod:`pagewright.paths`."""

from __future__ import annotations

import pytest

from pagewright.paths import (
    add_prefix,
    detect_locale,
    detect_version,
    file_to_url_path,
    is_locale_token,
    is_version_token,
    strip_prefix,
    url_path_to_title,
)


@pytest.mark.parametrize(
    ("relative", "expected"),
    [
        ("index.md", "/"),
        ("README.md", "/"),
        ("guide.md", "/guide"),
        ("guide/index.md", "/guide/"),
        ("guide/Readme.mdx", "/guide/"),
        ("v2/guide/intro.md", "/v2/guide/intro"),
        ("guide\\windows.md", "/guide/windows"),
        ("API/Overview.md", "/API/Overview"),
    ],
)
def test_file_to_url_path(relative: str, expected: str) -> None:
    """Map source files to URLs, collapsing index files onto their directory."""
    assert file_to_url_path(relative) == expected, (
        f"expected {relative!r} to map to {expected!r}"
    )


@pytest.mark.parametrize(
    "relative", ["index.md", "a/b/c.md", "v1/index.md", "ja/guide.mdx", "x\\y.md"]
)
def test_url_paths_are_absolute(relative: str) -> None:
    """Every URL starts with a single slash."""
    url = file_to_url_path(relative)
    assert url.startswith("/"), f"expected {url!r} to be absolute"
    assert not url.startswith("//"), f"expected {url!r} to have one leading slash"


@pytest.mark.parametrize("token", ["v1", "v2", "v10", "v1.2.3", "V2"])
def test_version_tokens_accepted(token: str) -> None:
    """Version-like segments are recognised in either case."""
    assert is_version_token(token), f"expected {token!r} to be a version token"


@pytest.mark.parametrize("token", ["vanilla", "guide", "overview", "v", "1.2", "v1."])
def test_version_tokens_rejected(token: str) -> None:
    """Words that merely start with ``v`` are not versions."""
    assert not is_version_token(token), f"expected {token!r} not to be a version token"


@pytest.mark.parametrize("token", ["en", "ja", "en-US", "zh-CN", "JA"])
def test_locale_tokens_accepted(token: str) -> None:
    """Two-letter languages with an optional upper-case region are locales."""
    assert is_locale_token(token), f"expected {token!r} to be a locale token"


@pytest.mark.parametrize("token", ["v1", "english", "en_US", "e", "en-us"])
def test_locale_tokens_rejected(token: str) -> None:
    """Other segments are not locales."""
    assert not is_locale_token(token), f"expected {token!r} not to be a locale token"


def test_detection_uses_first_segment_only() -> None:
    """Only the first segment carries version or locale information."""
    assert detect_version("v2/guide.md") == "v2"
    assert detect_version("guide/v2/intro.md") is None
    assert detect_locale("ja/guide.md") == "ja"
    assert detect_locale("guide/ja/intro.md") is None
    assert detect_version("index.md") is None
    assert detect_locale("index.md") is None


def test_version_takes_precedence_over_locale() -> None:
    """A versioned path is never also reported as localized."""
    assert detect_version("v1/index.md") == "v1"
    assert detect_locale("v1/index.md") is None


@pytest.mark.parametrize(
    ("url", "token"),
    [("/", "v1"), ("/guide/intro", "v2"), ("/guide/", "ja"), ("/a", "zh-CN")],
)
def test_prefix_round_trip(url: str, token: str) -> None:
    """Stripping an added prefix yields the original path."""
    prefixed = add_prefix(url, token)
    assert prefixed.startswith(f"/{token}/"), f"expected {prefixed!r} to start with the token"
    assert strip_prefix(prefixed, token) == url


def test_strip_prefix_requires_whole_segment() -> None:
    """Only a complete leading segment is removed."""
    assert strip_prefix("/v20/guide", "v2") == "/v20/guide"
    assert strip_prefix("/guide/v2", "v2") == "/guide/v2"
    assert strip_prefix("/v2", "v2") == "/"


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("/", "Home"),
        ("/guide/intro", "Guide Intro"),
        ("/guide/quick-start/", "Guide Quick Start"),
        ("/v1/", "V1"),
    ],
)
def test_url_path_to_title(url: str, expected: str) -> None:
    """Titles are derived from URL words when a page declares none."""
    assert url_path_to_title(url) == expected
