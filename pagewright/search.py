"""Search providers injected into the build.

A provider answers queries in Python (used by the ``pagewright search``
command) and supplies the source of the ``virtual:pagewright/search`` module
for each bundle target. The client runtime only relies on that module
exporting ``search(query)`` returning ``{id, title, url, excerpt, score}``
objects.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import json
import re
import typing as typ

from .bundler import BuildTarget
from .document import split_frontmatter
from .document.directives import iter_fence_spans
from .paths import url_path_to_title

if typ.TYPE_CHECKING:
    from .catalog import Route
    from .config import SiteConfig

EXCERPT_RADIUS = 60
MAX_CONTENT_LENGTH = 10_000
DIRECTIVE_LINE_PATTERN = re.compile(r"^[ \t]*:::.*$", re.MULTILINE)
HEADING_LINE_PATTERN = re.compile(r"^#{1,6}[ \t]+(.+?)[ \t]*#*[ \t]*$", re.MULTILINE)
LINK_PATTERN = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
MARKUP_PATTERN = re.compile(r"[`*_>#|~]+")
WHITESPACE_PATTERN = re.compile(r"\s+")
FIELD_WEIGHTS = {"title": 3.0, "headings": 2.0, "description": 1.5, "content": 1.0}


@dc.dataclass(slots=True, frozen=True)
class SearchResult:
    """One ranked search hit; ``score`` lies in ``(0, 1]``."""

    id: str
    title: str
    url: str
    excerpt: str
    score: float

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-safe mapping."""
        return dc.asdict(self)


@dc.dataclass(slots=True, frozen=True)
class SearchDocument:
    """Searchable text extracted from one route."""

    id: str
    title: str
    url: str
    description: str
    headings: str
    content: str

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-safe mapping."""
        return dc.asdict(self)


class SearchProvider(typ.Protocol):
    """Search backend handed to the build at construction time."""

    def search(self, query: str) -> list[SearchResult]:
        """Return ranked results for ``query``."""
        ...

    def module_source(self, target: BuildTarget) -> str | None:
        """Return the search module body for ``target``, or ``None``."""
        ...


def clean_markdown(text: str) -> str:
    """Reduce Markdown to plain searchable text.

    Fenced code and directive fences are dropped; link targets and inline
    markup characters are removed.

    Examples
    --------
    >>> clean_markdown("# Title\\n\\nSee [the guide](/guide) for **more**.")
    'Title See the guide for more.'
    """
    lines = text.splitlines()
    hidden: set[int] = set()
    for start, end in iter_fence_spans(lines):
        hidden.update(range(start, end + 1))
    kept = "\n".join(line for index, line in enumerate(lines) if index not in hidden)
    kept = DIRECTIVE_LINE_PATTERN.sub("", kept)
    kept = LINK_PATTERN.sub(r"\1", kept)
    kept = MARKUP_PATTERN.sub("", kept)
    return WHITESPACE_PATTERN.sub(" ", kept).strip()


def build_search_documents(
    routes: cabc.Iterable[Route], config: SiteConfig
) -> list[SearchDocument]:
    """Extract one :class:`SearchDocument` per route."""
    documents: list[SearchDocument] = []
    for route in routes:
        _, body = split_frontmatter(route.raw_content)
        headings = [item.text for item in route.toc] or HEADING_LINE_PATTERN.findall(body)
        documents.append(
            SearchDocument(
                id=route.url_path,
                title=route.title or url_path_to_title(route.url_path),
                url=config.route_url(route.url_path),
                description=route.frontmatter.description or "",
                headings=" ".join(headings),
                content=clean_markdown(body)[:MAX_CONTENT_LENGTH],
            )
        )
    return documents


def _excerpt(document: SearchDocument, terms: list[str]) -> str:
    lowered = document.content.casefold()
    for term in terms:
        position = lowered.find(term)
        if position < 0:
            continue
        start = max(position - EXCERPT_RADIUS, 0)
        end = min(position + len(term) + EXCERPT_RADIUS, len(document.content))
        prefix = "..." if start > 0 else ""
        suffix = "..." if end < len(document.content) else ""
        return f"{prefix}{document.content[start:end].strip()}{suffix}"
    fallback = document.description or document.content
    if len(fallback) > EXCERPT_RADIUS * 2:
        return fallback[: EXCERPT_RADIUS * 2].rstrip() + "..."
    return fallback


def _raw_score(document: SearchDocument, terms: list[str]) -> float:
    """Weighted term frequency; zero unless every term occurs somewhere."""
    total = 0.0
    for term in terms:
        term_score = 0.0
        for field, weight in FIELD_WEIGHTS.items():
            term_score += weight * getattr(document, field).casefold().count(term)
        if term_score == 0:
            return 0.0
        total += term_score
    return total


class StaticSearchProvider:
    """Substring search over documents embedded in the client bundle.

    Parameters
    ----------
    documents : Sequence[SearchDocument]
        Indexed pages.
    limit : int, optional
        Maximum number of results returned per query.

    Examples
    --------
    >>> doc = SearchDocument("/", "Home", "/", "", "", "Install the tool")
    >>> [hit.id for hit in StaticSearchProvider([doc]).search("install")]
    ['/']
    """

    def __init__(self, documents: cabc.Sequence[SearchDocument], *, limit: int = 10) -> None:
        self.documents = list(documents)
        self.limit = limit

    @classmethod
    def from_routes(
        cls, routes: cabc.Iterable[Route], config: SiteConfig, *, limit: int = 10
    ) -> StaticSearchProvider:
        """Index ``routes`` for ``config``."""
        return cls(build_search_documents(routes, config), limit=limit)

    def search(self, query: str) -> list[SearchResult]:
        """Return up to ``limit`` results ranked by weighted term frequency."""
        terms = [term for term in query.casefold().split() if term]
        if not terms:
            return []
        scored = [
            (score, document)
            for document in self.documents
            if (score := _raw_score(document, terms)) > 0
        ]
        if not scored:
            return []
        best = max(score for score, _ in scored)
        scored.sort(key=lambda item: (-item[0], item[1].url))
        return [
            SearchResult(
                id=document.id,
                title=document.title,
                url=document.url,
                excerpt=_excerpt(document, terms),
                score=round(score / best, 4),
            )
            for score, document in scored[: self.limit]
        ]

    def module_source(self, target: BuildTarget) -> str | None:
        """Return the client search module; static renders never search."""
        if target is BuildTarget.SERVER:
            return None
        payload = json.dumps([document.to_dict() for document in self.documents])
        weights = json.dumps(FIELD_WEIGHTS)
        return _CLIENT_SEARCH_TEMPLATE.format(
            documents=payload,
            weights=weights,
            limit=self.limit,
            radius=EXCERPT_RADIUS,
        )


class NullSearchProvider:
    """Provider used when search is disabled; every query is empty."""

    def search(self, query: str) -> list[SearchResult]:  # noqa: ARG002
        """Return no results."""
        return []

    def module_source(self, target: BuildTarget) -> str | None:
        """Return a search module that always answers with no results."""
        if target is BuildTarget.SERVER:
            return None
        return "  exports.search = function () { return []; };\n"


def default_search_provider(
    routes: cabc.Iterable[Route], config: SiteConfig
) -> StaticSearchProvider | NullSearchProvider:
    """Return the provider matching ``config.search.enabled``."""
    if not config.search.enabled:
        return NullSearchProvider()
    return StaticSearchProvider.from_routes(routes, config)


_CLIENT_SEARCH_TEMPLATE = """\
  var documents = {documents};
  var weights = {weights};
  var limit = {limit};
  var radius = {radius};
  function count(haystack, needle) {{
    var total = 0;
    var index = haystack.indexOf(needle);
    while (index !== -1) {{
      total += 1;
      index = haystack.indexOf(needle, index + needle.length);
    }}
    return total;
  }}
  function rawScore(doc, terms) {{
    var total = 0;
    for (var i = 0; i < terms.length; i += 1) {{
      var termScore = 0;
      for (var field in weights) {{
        termScore += weights[field] * count(doc[field].toLowerCase(), terms[i]);
      }}
      if (termScore === 0) {{
        return 0;
      }}
      total += termScore;
    }}
    return total;
  }}
  function excerpt(doc, terms) {{
    var lowered = doc.content.toLowerCase();
    for (var i = 0; i < terms.length; i += 1) {{
      var position = lowered.indexOf(terms[i]);
      if (position < 0) {{
        continue;
      }}
      var start = Math.max(position - radius, 0);
      var end = Math.min(position + terms[i].length + radius, doc.content.length);
      return (start > 0 ? "..." : "") + doc.content.slice(start, end).trim() +
        (end < doc.content.length ? "..." : "");
    }}
    var fallback = doc.description || doc.content;
    return fallback.length > radius * 2 ? fallback.slice(0, radius * 2).trim() + "..." : fallback;
  }}
  exports.search = function (query) {{
    var terms = String(query || "").toLowerCase().split(/\\s+/).filter(Boolean);
    if (!terms.length) {{
      return [];
    }}
    var scored = [];
    documents.forEach(function (doc) {{
      var score = rawScore(doc, terms);
      if (score > 0) {{
        scored.push({{ score: score, doc: doc }});
      }}
    }});
    if (!scored.length) {{
      return [];
    }}
    var best = Math.max.apply(null, scored.map(function (item) {{ return item.score; }}));
    scored.sort(function (a, b) {{
      return b.score - a.score || (a.doc.url < b.doc.url ? -1 : a.doc.url > b.doc.url ? 1 : 0);
    }});
    return scored.slice(0, limit).map(function (item) {{
      return {{
        id: item.doc.id,
        title: item.doc.title,
        url: item.doc.url,
        excerpt: excerpt(item.doc, terms),
        score: Math.round((item.score / best) * 10000) / 10000
      }};
    }});
  }};
"""


__all__ = [
    "NullSearchProvider",
    "SearchDocument",
    "SearchProvider",
    "SearchResult",
    "StaticSearchProvider",
    "build_search_documents",
    "clean_markdown",
    "default_search_provider",
]
