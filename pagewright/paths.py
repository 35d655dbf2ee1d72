r"""Map documentation file paths to site URLs.

Every helper in this module is pure: no filesystem access, no configuration.
The catalog uses them to derive a page's URL and its version/locale segment,
and the page shell uses the prefix helpers to build version and language
switcher links.

Example
-------
>>> from pagewright.paths import file_to_url_path, detect_version
>>> file_to_url_path("guide/index.md")
'/guide/'
>>> detect_version("v2/guide/intro.md")
'v2'
"""

from __future__ import annotations

import re

VERSION_TOKEN_PATTERN = re.compile(r"^v\d+(\.\d+)*$", re.IGNORECASE)
LOCALE_TOKEN_PATTERN = re.compile(r"^[A-Za-z]{2}(-[A-Z]{2})?$")
MARKDOWN_SUFFIX_PATTERN = re.compile(r"\.mdx?$")
INDEX_NAMES = frozenset({"index", "readme"})


def _segments(relative_path: str) -> list[str]:
    """Split a relative path into non-empty POSIX segments."""
    normalized = relative_path.replace("\\", "/")
    return [segment for segment in normalized.split("/") if segment and segment != "."]


def file_to_url_path(relative_path: str) -> str:
    """Return the site URL for a Markdown file relative to the docs root.

    Parameters
    ----------
    relative_path : str
        Path of the source file relative to the documentation root, using
        either separator.

    Returns
    -------
    str
        Absolute URL path. ``index`` and ``readme`` files (any case) map to
        their directory and end with ``/``; the root index maps to ``/``.
        Segment case is preserved.

    Examples
    --------
    >>> file_to_url_path("guide.md")
    '/guide'
    >>> file_to_url_path("README.md")
    '/'
    >>> file_to_url_path("v1/guide/intro.mdx")
    '/v1/guide/intro'
    """
    segments = _segments(relative_path)
    if not segments:
        return "/"
    segments[-1] = MARKDOWN_SUFFIX_PATTERN.sub("", segments[-1])
    if segments[-1].lower() in INDEX_NAMES:
        directory = segments[:-1]
        if not directory:
            return "/"
        return "/" + "/".join(directory) + "/"
    return "/" + "/".join(segments)


def is_version_token(segment: str) -> bool:
    """Return True when ``segment`` looks like ``v2`` or ``v1.2.3``."""
    return bool(VERSION_TOKEN_PATTERN.match(segment))


def is_locale_token(segment: str) -> bool:
    """Return True for ``en``, ``JA`` or ``zh-CN`` style locale segments."""
    return bool(LOCALE_TOKEN_PATTERN.match(segment))


def _first_segment(relative_path: str) -> str | None:
    segments = _segments(relative_path)
    return segments[0] if segments else None


def detect_version(relative_path: str) -> str | None:
    """Return the version token carried by the first path segment, if any."""
    first = _first_segment(relative_path)
    if first is not None and is_version_token(first):
        return first
    return None


def detect_locale(relative_path: str) -> str | None:
    """Return the locale token carried by the first path segment, if any.

    A version match on the same segment takes precedence, so a path is never
    reported as both versioned and localized.
    """
    first = _first_segment(relative_path)
    if first is None or is_version_token(first):
        return None
    if is_locale_token(first):
        return first
    return None


def strip_prefix(url_path: str, token: str) -> str:
    """Remove a leading ``/<token>`` segment from ``url_path``.

    Paths that do not start with the token segment are returned unchanged.

    Examples
    --------
    >>> strip_prefix("/v2/guide/intro", "v2")
    '/guide/intro'
    >>> strip_prefix("/v2", "v2")
    '/'
    >>> strip_prefix("/v20/guide", "v2")
    '/v20/guide'
    """
    prefix = f"/{token}"
    if url_path == prefix:
        return "/"
    if url_path.startswith(prefix + "/"):
        return url_path[len(prefix) :]
    return url_path


def add_prefix(url_path: str, token: str) -> str:
    """Prepend a ``/<token>`` segment to ``url_path``.

    Examples
    --------
    >>> add_prefix("/", "ja")
    '/ja/'
    >>> add_prefix("/guide/intro", "v1")
    '/v1/guide/intro'
    """
    if url_path == "/":
        return f"/{token}/"
    if not url_path.startswith("/"):
        url_path = "/" + url_path
    return f"/{token}{url_path}"


def url_path_to_title(url_path: str) -> str:
    """Derive a readable title from a URL path.

    Examples
    --------
    >>> url_path_to_title("/")
    'Home'
    >>> url_path_to_title("/guide/quick-start")
    'Guide Quick Start'
    """
    trimmed = url_path.strip("/")
    if not trimmed:
        return "Home"
    words = [word for word in re.split(r"[/-]", trimmed) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


__all__ = [
    "INDEX_NAMES",
    "MARKDOWN_SUFFIX_PATTERN",
    "add_prefix",
    "detect_locale",
    "detect_version",
    "file_to_url_path",
    "is_locale_token",
    "is_version_token",
    "strip_prefix",
    "url_path_to_title",
]
