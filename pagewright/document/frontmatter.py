"""Split and parse the YAML frontmatter block at the top of a page."""

from __future__ import annotations

import datetime as dt
import io
import re
import typing as typ

from ruamel.yaml import YAML

from .models import Frontmatter

FRONTMATTER_PATTERN = re.compile(
    r"\A(?:\ufeff)?---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


class FrontmatterError(ValueError):
    """Raised when a frontmatter block is present but cannot be used."""


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Return the raw frontmatter block (or None) and the remaining body.

    Examples
    --------
    >>> split_frontmatter("---\\ntitle: Hi\\n---\\n# Body\\n")
    ('title: Hi', '# Body\\n')
    >>> split_frontmatter("# No metadata")
    (None, '# No metadata')
    """
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return None, text
    return match.group(1), text[match.end() :]


def _json_safe(value: object) -> typ.Any:
    """Convert YAML scalars (dates, nested containers) into JSON-safe values."""
    match value:
        case dt.datetime() | dt.date():
            return value.isoformat()
        case dict():
            return {str(key): _json_safe(item) for key, item in value.items()}
        case list() | tuple():
            return [_json_safe(item) for item in value]
        case _:
            return value


def _optional_text(payload: dict[str, typ.Any], key: str) -> str | None:
    value = payload.pop(key, None)
    if value is None:
        return None
    if isinstance(value, dict | list):
        msg = f"Frontmatter '{key}' must be a string."
        raise FrontmatterError(msg)
    return str(value)


def parse_frontmatter(block: str | None) -> Frontmatter:
    """Parse a raw YAML block into a :class:`Frontmatter` record.

    Parameters
    ----------
    block : str or None
        YAML source without the ``---`` delimiters. ``None`` or blank input
        yields an empty record.

    Returns
    -------
    Frontmatter
        ``title`` and ``description`` lifted into fields; every other key kept
        in ``extra``.

    Raises
    ------
    FrontmatterError
        If the block is not a mapping or a known key has the wrong shape.
    YAMLError
        If the YAML cannot be parsed.
    """
    if block is None or not block.strip():
        return Frontmatter()
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    loaded = loader.load(io.StringIO(block))
    if loaded is None:
        return Frontmatter()
    if not isinstance(loaded, dict):
        msg = "Frontmatter must be a mapping."
        raise FrontmatterError(msg)
    payload = typ.cast("dict[str, typ.Any]", _json_safe(loaded))
    title = _optional_text(payload, "title")
    description = _optional_text(payload, "description")
    return Frontmatter(title=title, description=description, extra=payload)


__all__ = ["FrontmatterError", "parse_frontmatter", "split_frontmatter"]
