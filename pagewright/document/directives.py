r"""Container directive parsing for ``::: name`` blocks.

Markdown bodies are first split into blocks: paragraphs separated by blank
lines, fenced code blocks, and lone directive marker lines. A small stack
machine then matches ``::: name [title]`` openers with ``:::`` closers and
turns each matched pair into a :class:`ComponentReference`.

Malformed input fails open. An opener without a closer is emitted as literal
text and the blocks it collected are handed back to the enclosing level, so
one broken block never hides the content below it. Unknown directive names
keep their markers as literal text too.

Example
-------
>>> from pagewright.document.directives import parse_directives
>>> tree = parse_directives("::: tip Heads up\nBe careful.\n:::\n")
>>> tree[0].name, dict(tree[0].attributes)
('callout', {'variant': 'tip', 'title': 'Heads up'})
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import re
import textwrap
import typing as typ

from .models import ComponentReference, ContentNode, GroupNode, MarkdownBlock

FENCE_PATTERN = re.compile(r"^(?P<indent>[ \t]*)(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
DIRECTIVE_OPEN_PATTERN = re.compile(
    r"^:::[ \t]*(?P<name>[\w-]+)(?:[ \t]+(?P<title>.*?))?[ \t]*$"
)
DIRECTIVE_CLOSE_PATTERN = re.compile(r"^:::[ \t]*$")
TAB_MARKER_PATTERN = re.compile(r"^[ \t]*@tab[ \t]+(?P<label>.+?)[ \t]*$")
STEP_MARKER_PATTERN = re.compile(r"^[ \t]*\d+\.[ \t]+(?P<title>.*?)[ \t]*$")
LIST_BULLET_PATTERN = re.compile(r"^[-*+][ \t]*")

CALLOUT_VARIANTS = ("info", "warning", "tip", "danger", "note")
KNOWN_DIRECTIVES = frozenset({*CALLOUT_VARIANTS, "tabs", "steps", "file-tree"})

BlockKind = typ.Literal["text", "fence", "open", "close"]


@dc.dataclass(slots=True)
class _Block:
    kind: BlockKind
    text: str
    name: str | None = None
    title: str | None = None


@dc.dataclass(slots=True)
class _Frame:
    """Open directive waiting for its closer."""

    directive: str
    title: str | None
    opener: str
    pending_children: list[ContentNode] = dc.field(default_factory=list)


def _closes_fence(line: str, fence: str) -> bool:
    match = FENCE_PATTERN.match(line)
    if not match or match.group("info").strip():
        return False
    closing = match.group("fence")
    return closing[0] == fence[0] and len(closing) >= len(fence)


def iter_fence_spans(lines: list[str]) -> cabc.Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` line indexes of each fenced code block."""
    index = 0
    while index < len(lines):
        match = FENCE_PATTERN.match(lines[index])
        if not match:
            index += 1
            continue
        fence = match.group("fence")
        end = index + 1
        while end < len(lines) and not _closes_fence(lines[end], fence):
            end += 1
        end = min(end, len(lines) - 1)
        yield index, end
        index = end + 1


def split_blocks(text: str) -> list[_Block]:
    """Split a Markdown body into paragraphs, fences, and directive markers."""
    lines = text.splitlines()
    fence_spans = dict(iter_fence_spans(lines))
    blocks: list[_Block] = []
    buffer: list[str] = []

    def _flush() -> None:
        if buffer:
            blocks.append(_Block("text", "\n".join(buffer)))
            buffer.clear()

    index = 0
    while index < len(lines):
        line = lines[index]
        if index in fence_spans:
            _flush()
            end = fence_spans[index]
            blocks.append(_Block("fence", "\n".join(lines[index : end + 1])))
            index = end + 1
            continue
        if opener := DIRECTIVE_OPEN_PATTERN.match(line):
            _flush()
            title = (opener.group("title") or "").strip() or None
            blocks.append(_Block("open", line, opener.group("name"), title))
        elif DIRECTIVE_CLOSE_PATTERN.match(line):
            _flush()
            blocks.append(_Block("close", line))
        elif not line.strip():
            _flush()
        else:
            buffer.append(line)
        index += 1
    _flush()
    return blocks


@dc.dataclass(slots=True)
class _OpenRegion:
    start: int
    name: str
    literal_lines: list[int] = dc.field(default_factory=list)


GROUP_MARKERS: dict[str, re.Pattern[str]] = {
    "tabs": TAB_MARKER_PATTERN,
    "steps": STEP_MARKER_PATTERN,
}


def directive_regions(text: str) -> list[tuple[int, int]]:
    """Return inclusive line ranges whose content becomes a component.

    Fenced code is skipped so ``:::`` inside code samples is ignored.
    Unterminated openers, unknown names, and ``tabs``/``steps`` blocks
    without markers stay literal Markdown and produce no region. Text before
    the first ``tabs``/``steps`` marker is emitted ahead of the component,
    so the region starts at that marker.
    """
    lines = text.splitlines()
    fence_spans = dict(iter_fence_spans(lines))
    regions: list[tuple[int, int]] = []
    stack: list[_OpenRegion] = []
    index = 0
    while index < len(lines):
        if index in fence_spans:
            index = fence_spans[index] + 1
            continue
        line = lines[index]
        if opener := DIRECTIVE_OPEN_PATTERN.match(line):
            stack.append(_OpenRegion(index, opener.group("name")))
        elif DIRECTIVE_CLOSE_PATTERN.match(line) and stack:
            region = stack.pop()
            start = _component_start(region, lines)
            if start is not None:
                regions.append((start, index))
            elif stack:
                # Literal fallbacks become plain children of the enclosing block.
                stack[-1].literal_lines.extend((region.start, *region.literal_lines, index))
        elif stack:
            stack[-1].literal_lines.append(index)
        index += 1
    return sorted(regions)


def _component_start(region: _OpenRegion, lines: list[str]) -> int | None:
    marker = GROUP_MARKERS.get(region.name)
    if marker is None:
        return region.start if region.name in KNOWN_DIRECTIVES else None
    return next(
        (number for number in region.literal_lines if marker.match(lines[number])), None
    )


def _literal(frame: _Frame, closer: str) -> list[ContentNode]:
    return [MarkdownBlock(frame.opener), *frame.pending_children, MarkdownBlock(closer)]


def _split_groups(
    children: list[ContentNode], marker: re.Pattern[str]
) -> tuple[list[ContentNode], list[tuple[re.Match[str], list[ContentNode]]]]:
    """Partition children on marker lines into a preamble and marked groups."""
    preamble: list[ContentNode] = []
    groups: list[tuple[re.Match[str], list[ContentNode]]] = []

    def _target() -> list[ContentNode]:
        return groups[-1][1] if groups else preamble

    for child in children:
        if not isinstance(child, MarkdownBlock) or FENCE_PATTERN.match(child.text):
            _target().append(child)
            continue
        buffer: list[str] = []
        for line in child.text.splitlines():
            match = marker.match(line)
            if match is None:
                buffer.append(line)
                continue
            if buffer:
                _target().append(MarkdownBlock(textwrap.dedent("\n".join(buffer))))
                buffer = []
            groups.append((match, []))
        if buffer:
            _target().append(MarkdownBlock(textwrap.dedent("\n".join(buffer))))
    return preamble, groups


def _build_callout(frame: _Frame, closer: str) -> list[ContentNode]:  # noqa: ARG001
    attributes: dict[str, typ.Any] = {"variant": frame.directive}
    if frame.title:
        attributes["title"] = frame.title
    return [ComponentReference("callout", attributes, tuple(frame.pending_children))]


def _build_tabs(frame: _Frame, closer: str) -> list[ContentNode]:
    preamble, groups = _split_groups(frame.pending_children, TAB_MARKER_PATTERN)
    if not groups:
        return _literal(frame, closer)
    labels = [match.group("label") for match, _content in groups]
    panels = tuple(
        GroupNode({"label": label, "index": idx}, tuple(content))
        for idx, (label, (_match, content)) in enumerate(zip(labels, groups, strict=True))
    )
    return [*preamble, ComponentReference("tab-group", {"labels": labels}, panels)]


def _build_steps(frame: _Frame, closer: str) -> list[ContentNode]:
    preamble, groups = _split_groups(frame.pending_children, STEP_MARKER_PATTERN)
    if not groups:
        return _literal(frame, closer)
    steps = tuple(
        GroupNode({"number": number, "title": match.group("title")}, tuple(content))
        for number, (match, content) in enumerate(groups, start=1)
    )
    return [*preamble, ComponentReference("steps", {}, steps)]


def _build_file_tree(frame: _Frame, closer: str) -> list[ContentNode]:  # noqa: ARG001
    items: list[dict[str, typ.Any]] = []
    leftovers: list[ContentNode] = []
    for child in frame.pending_children:
        if not isinstance(child, MarkdownBlock):
            leftovers.append(child)
            continue
        for line in child.text.splitlines():
            if not line.strip():
                continue
            expanded = line.expandtabs(2)
            depth = (len(expanded) - len(expanded.lstrip(" "))) // 2
            name = LIST_BULLET_PATTERN.sub("", expanded.strip()).strip()
            if name:
                items.append({"name": name, "depth": depth})
    return [ComponentReference("file-tree", {"items": items}), *leftovers]


DirectiveBuilder = cabc.Callable[[_Frame, str], list[ContentNode]]

DIRECTIVE_BUILDERS: dict[str, DirectiveBuilder] = {
    **{variant: _build_callout for variant in CALLOUT_VARIANTS},
    "tabs": _build_tabs,
    "steps": _build_steps,
    "file-tree": _build_file_tree,
}


def _close_frame(frame: _Frame, closer: str) -> list[ContentNode]:
    builder = DIRECTIVE_BUILDERS.get(frame.directive)
    if builder is None:
        return _literal(frame, closer)
    return builder(frame, closer)


@dc.dataclass(slots=True)
class DirectiveParseResult:
    """Parsed tree plus the openers that were never closed."""

    body: list[ContentNode]
    unterminated: list[str]


def parse_directive_tree(text: str) -> DirectiveParseResult:
    """Run the directive stack machine over ``text``.

    Parameters
    ----------
    text : str
        Markdown body without frontmatter.

    Returns
    -------
    DirectiveParseResult
        Ordered content nodes, one per block, with matched directives
        replaced by components, and the literal opener lines that had no
        matching closer.
    """
    root: list[ContentNode] = []
    stack: list[_Frame] = []

    def _target() -> list[ContentNode]:
        return stack[-1].pending_children if stack else root

    for block in split_blocks(text):
        match block.kind:
            case "open":
                stack.append(_Frame(block.name or "", block.title, block.text))
            case "close" if stack:
                frame = stack.pop()
                _target().extend(_close_frame(frame, block.text))
            case _:
                _target().append(MarkdownBlock(block.text))

    unterminated: list[str] = []
    while stack:
        frame = stack.pop()
        unterminated.append(frame.opener)
        _target().extend([MarkdownBlock(frame.opener), *frame.pending_children])
    unterminated.reverse()
    return DirectiveParseResult(body=root, unterminated=unterminated)


def parse_directives(text: str) -> list[ContentNode]:
    """Return the content nodes for ``text`` with directives expanded."""
    return parse_directive_tree(text).body


__all__ = [
    "CALLOUT_VARIANTS",
    "DIRECTIVE_BUILDERS",
    "KNOWN_DIRECTIVES",
    "DirectiveParseResult",
    "directive_regions",
    "iter_fence_spans",
    "parse_directive_tree",
    "parse_directives",
    "split_blocks",
]
