# mdbook_exercises/exercises/exclusions.py
"""
Find the parts of a Markdown document that directive detection must skip.

Fenced and indented code blocks, raw HTML blocks, inline code spans and
inline HTML are returned as half-open (start, end) offset ranges into the
original text. Directive lines are only recognized outside these ranges,
so a `::: exercise` shown inside a code sample never counts.
"""

import logging
import re

from markdown_it import MarkdownIt
from markdown_it.token import Token

logger = logging.getLogger(__name__)

ExcludedRange = tuple[int, int]

# Block tokens whose whole line span is opaque
OPAQUE_BLOCK_TYPES = {"fence", "code_block", "html_block"}

# Same line breaks markdown-it normalizes, so token.map line numbers line up
_LINE_BREAK_RE = re.compile(r"\r\n?|\n")

_markdown = MarkdownIt("commonmark")


def _line_starts(text: str) -> list[int]:
    """Offset of the first character of each line."""
    return [0] + [match.end() for match in _LINE_BREAK_RE.finditer(text)]


def split_lines(text: str) -> list[tuple[int, str]]:
    """
    Split text into (offset, line) pairs, keeping each line's break.

    Uses the same line table as find_excluded_ranges(), so offsets can be
    passed straight to is_excluded().
    """
    lines = []
    start = 0
    for match in _LINE_BREAK_RE.finditer(text):
        lines.append((start, text[start : match.end()]))
        start = match.end()
    if start < len(text):
        lines.append((start, text[start:]))
    return lines


_BACKTICK_RUN_RE = re.compile(r"`+")


def _is_escaped(text: str, pos: int) -> bool:
    """True when an odd number of backslashes precede `pos`."""
    backslashes = 0
    while pos > backslashes and text[pos - backslashes - 1] == "\\":
        backslashes += 1
    return backslashes % 2 == 1


def _find_code_span(
    text: str, markup: str, start: int, end: int
) -> ExcludedRange | None:
    """
    Locate the next code span delimited by `markup` within [start, end).

    A backslash escapes the first backtick of an opening run. Backslashes
    inside the span are literal, so the closing run is never escaped.
    """
    length = len(markup)
    opening = None
    for match in _BACKTICK_RUN_RE.finditer(text, start, end):
        run_start, run_end = match.span()
        if opening is None:
            if _is_escaped(text, run_start):
                run_start += 1
            if run_end - run_start == length:
                opening = run_start
        elif run_end - run_start == length:
            return opening, run_end
    return None


def _inline_ranges(
    text: str, start: int, end: int, children: list[Token]
) -> list[ExcludedRange]:
    """
    Map code_inline/html_inline children back to offsets in the source.

    markdown-it doesn't record offsets for inline tokens, so each one is
    searched for in order within its parent block's line span.
    """
    ranges = []
    cursor = start
    for child in children:
        if child.type == "code_inline":
            span = _find_code_span(text, child.markup, cursor, end)
        elif child.type == "html_inline":
            found = text.find(child.content, cursor, end)
            span = (found, found + len(child.content)) if found != -1 else None
        else:
            continue

        if span is None:
            logger.debug(f"Could not locate {child.type} token {child.content!r}")
            continue
        ranges.append(span)
        cursor = span[1]
    return ranges


def find_excluded_ranges(text: str) -> list[ExcludedRange]:
    """
    Collect the opaque ranges of a Markdown document in one pass.

    Args:
        text: Full Markdown text

    Returns:
        List of (start, end) offsets. Not sorted or merged; only ever used
        for containment tests via is_excluded().
    """
    line_starts = _line_starts(text)

    def offset(line: int) -> int:
        return line_starts[line] if line < len(line_starts) else len(text)

    ranges: list[ExcludedRange] = []
    for token in _markdown.parse(text):
        if token.map is None:
            continue
        start, end = offset(token.map[0]), offset(token.map[1])
        if token.type in OPAQUE_BLOCK_TYPES:
            ranges.append((start, end))
        elif token.type == "inline" and token.children:
            ranges.extend(_inline_ranges(text, start, end, token.children))
    return ranges


def is_excluded(start: int, end: int, ranges: list[ExcludedRange]) -> bool:
    """
    Check whether the span [start, end) falls in an opaque range.

    A span is excluded when its start lies inside a range, or when a range
    covers the whole span.
    """
    for range_start, range_end in ranges:
        if range_start <= start < range_end:
            return True
        if range_start <= start and range_end >= end:
            return True
    return False
