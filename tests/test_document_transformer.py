"""Tests for :func:`pagewright.document.transform_document`.

Covers the outline (depths, de-duplicated slugs, headings hidden in code
and directives), frontmatter parsing with its fail-open fallback, diagram
detection, and block coalescing.
"""

from __future__ import annotations

import logging
import textwrap

import pytest

from pagewright.document import (
    ComponentReference,
    Frontmatter,
    MarkdownBlock,
    Slugger,
    TocItem,
    escape_template_literal,
    slugify,
    split_frontmatter,
    transform_document,
)


def test_outline_depths_and_slugs() -> None:
    """Headings become TOC items in order with their ATX depth."""
    document = transform_document("# One\n## Two\n### Three")
    assert document.toc == (
        TocItem("one", "One", 1),
        TocItem("two", "Two", 2),
        TocItem("three", "Three", 3),
    )


def test_duplicate_headings_get_numbered_slugs() -> None:
    """Repeated heading text receives ``-1``, ``-2`` suffixes."""
    document = transform_document("## Setup\ntext\n## Setup\n## Setup")
    assert [item.id for item in document.toc] == ["setup", "setup-1", "setup-2"]


def test_outline_skips_code_and_directives() -> None:
    """Headings inside fenced code or a matched directive are not outlined."""
    body = textwrap.dedent(
        """\
        # Visible

        ```markdown
        # Not a heading
        ```

        ::: tip
        ## Inside callout
        :::

        ## Also visible ##
        """
    )
    document = transform_document(body)
    assert [item.text for item in document.toc] == ["Visible", "Also visible"]


def test_headings_after_unterminated_directive_are_outlined() -> None:
    """An unterminated opener hides nothing, not even headings."""
    document = transform_document("::: warning\n\n## Still here\n")
    assert [item.id for item in document.toc] == ["still-here"]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Getting Started", "getting-started"),
        ("What's new?", "whats-new"),
        ("API  --  v2", "api-v2"),
        ("snake_case stays", "snake_case-stays"),
    ],
)
def test_slugify(text: str, expected: str) -> None:
    """Slugs are lower-case with punctuation removed and spaces hyphenated."""
    assert slugify(text) == expected


def test_slugger_is_stateful() -> None:
    """The same slugger never issues a slug twice."""
    slugger = Slugger()
    assert [slugger.slug("Intro") for _ in range(3)] == ["intro", "intro-1", "intro-2"]


def test_frontmatter_known_and_extra_keys() -> None:
    """Title and description are lifted out; other keys stay in ``extra``."""
    document = transform_document(
        "---\ntitle: Intro\ndescription: First steps\ntags: [a, b]\norder: 2\n---\n# Hello\n"
    )
    assert document.frontmatter.title == "Intro"
    assert document.frontmatter.description == "First steps"
    assert dict(document.frontmatter.extra) == {"tags": ["a", "b"], "order": 2}
    assert document.frontmatter.to_dict() == {
        "tags": ["a", "b"],
        "order": 2,
        "title": "Intro",
        "description": "First steps",
    }


def test_frontmatter_dates_become_strings() -> None:
    """Frontmatter values are JSON-safe."""
    document = transform_document("---\nupdated: 2024-01-02\n---\nBody\n")
    assert document.frontmatter.extra["updated"] == "2024-01-02"


def test_missing_frontmatter_is_empty() -> None:
    """Pages without frontmatter get an empty record, not a fallback."""
    document = transform_document("# Title\n")
    assert document.frontmatter == Frontmatter()
    assert not document.fallback


def test_split_frontmatter_requires_leading_block() -> None:
    """A ``---`` rule later in the page is not frontmatter."""
    text = "Intro\n\n---\ntitle: no\n---\n"
    assert split_frontmatter(text) == (None, text)


@pytest.mark.parametrize(
    "raw",
    [
        "---\ntitle: [unclosed\n---\n# Body\n",
        "---\n- just\n- a list\n---\n# Body\n",
        "---\ntitle: {nested: map}\n---\n# Body\n",
    ],
)
def test_invalid_frontmatter_falls_back(raw: str, caplog: pytest.LogCaptureFixture) -> None:
    """Broken frontmatter yields a literal body and a warning, never an error."""
    with caplog.at_level(logging.WARNING, logger="pagewright.document.transformer"):
        document = transform_document(raw, source="broken.md")
    assert document.fallback, "expected the fallback flag to be set"
    assert document.frontmatter == Frontmatter()
    assert document.body == (MarkdownBlock("# Body\n"),)
    assert [item.id for item in document.toc] == ["body"]
    assert "broken.md" in caplog.text


def test_unterminated_directive_logs_and_coalesces(caplog: pytest.LogCaptureFixture) -> None:
    """The literal opener and following blocks merge into one Markdown block."""
    with caplog.at_level(logging.WARNING, logger="pagewright.document.transformer"):
        document = transform_document("Intro\n\n::: warning\nDanger\n", source="page.md")
    assert document.body == (MarkdownBlock("Intro\n\n::: warning\n\nDanger"),)
    assert not document.components()
    assert "::: warning" in caplog.text


def test_mermaid_fence_becomes_diagram() -> None:
    """A mermaid fence, even nested in a callout, becomes a diagram component."""
    document = transform_document(
        textwrap.dedent(
            """\
            ```mermaid
            graph TD; A-->B
            ```

            ::: note
            ```mermaid
            sequenceDiagram
            ```
            :::
            """
        )
    )
    first, callout = document.body
    assert first == ComponentReference("diagram", {"chart": "graph TD; A-->B"})
    assert isinstance(callout, ComponentReference)
    assert callout.children == (ComponentReference("diagram", {"chart": "sequenceDiagram"}),)
    assert document.components() == {"diagram", "callout"}


def test_other_fences_stay_markdown() -> None:
    """Non-diagram code fences are left for the Markdown renderer."""
    document = transform_document("```python\nprint(1)\n```\n")
    assert document.body == (MarkdownBlock("```python\nprint(1)\n```"),)


def test_component_names_are_validated() -> None:
    """Only known component names can be referenced."""
    with pytest.raises(ValueError, match="Unknown component"):
        ComponentReference("carousel")


def test_mmd_fence_is_a_diagram_language() -> None:
    """``mmd`` is accepted as a diagram fence language, in any case."""
    document = transform_document("```MMD\ngraph LR; A-->B\n```\n")
    assert document.body == (ComponentReference("diagram", {"chart": "graph LR; A-->B"}),)


@pytest.mark.parametrize(
    ("raw", "escaped"),
    [
        ("C:\\path", "C:\\\\path"),
        ("use `code`", "use \\`code\\`"),
        ("${name}", "\\${name}"),
        ("\\`$", "\\\\\\`\\$"),
    ],
)
def test_escape_template_literal(raw: str, escaped: str) -> None:
    """Backslashes, backticks, and dollars are escaped for template literals."""
    assert escape_template_literal(raw) == escaped
