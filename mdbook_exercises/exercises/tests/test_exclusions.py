# mdbook_exercises/exercises/tests/test_exclusions.py
"""Tests for code/HTML exclusion ranges."""

from mdbook_exercises.exercises.exclusions import (
    find_excluded_ranges,
    is_excluded,
    split_lines,
)


def _line_span(text: str, needle: str) -> tuple[int, int]:
    """Offsets of the whole line containing `needle`."""
    start = text.index(needle)
    start = text.rfind("\n", 0, start) + 1
    end = text.find("\n", start)
    return start, (len(text) if end == -1 else end + 1)


class TestFindExcludedRanges:
    """Test which parts of a document are opaque to directive detection."""

    def test_fenced_code_block(self):
        text = """Intro

```markdown
::: exercise
:::
```

After
"""
        ranges = find_excluded_ranges(text)
        assert is_excluded(*_line_span(text, "::: exercise"), ranges)
        assert not is_excluded(*_line_span(text, "After"), ranges)
        assert not is_excluded(*_line_span(text, "Intro"), ranges)

    def test_indented_code_block(self):
        text = "Para\n\n    ::: exercise\n\nAfter\n"
        ranges = find_excluded_ranges(text)
        assert is_excluded(*_line_span(text, "::: exercise"), ranges)
        assert not is_excluded(*_line_span(text, "After"), ranges)

    def test_html_block(self):
        text = "<div>\n::: exercise\n</div>\n\nAfter\n"
        ranges = find_excluded_ranges(text)
        assert is_excluded(*_line_span(text, "::: exercise"), ranges)
        assert not is_excluded(*_line_span(text, "After"), ranges)

    def test_inline_code_span(self):
        text = "Use `::: exercise` to start.\n"
        ranges = find_excluded_ranges(text)
        start = text.index("`")
        assert (start, start + len("`::: exercise`")) in ranges

    def test_double_backtick_code_span(self):
        text = "A ``code ` span`` here\n"
        ranges = find_excluded_ranges(text)
        start = text.index("``")
        assert (start, start + len("``code ` span``")) in ranges

    def test_escaped_backtick_does_not_open_code_span(self):
        text = r"""Type a literal \` here.
:::
::: hint level=2
Run `cargo test`.
"""
        ranges = find_excluded_ranges(text)
        assert not is_excluded(*_line_span(text, "::: hint"), ranges)
        start = text.index("`cargo")
        assert (start, start + len("`cargo test`")) in ranges

    def test_double_backslash_leaves_backtick_unescaped(self):
        text = r"Path \\`C:\dir` here" + "\n"
        ranges = find_excluded_ranges(text)
        start = text.index("`")
        assert (start, start + len(r"`C:\dir`")) in ranges

    def test_code_span_across_lines_excludes_inner_line(self):
        text = "Inline: ``\n::: exercise\n`` done.\n"
        ranges = find_excluded_ranges(text)
        assert is_excluded(*_line_span(text, "::: exercise"), ranges)

    def test_inline_html(self):
        text = "Text <span>x</span> end\n"
        ranges = find_excluded_ranges(text)
        start = text.index("<span>")
        assert (start, start + len("<span>")) in ranges

    def test_plain_prose_has_no_ranges(self):
        text = "# Title\n\nJust prose.\n\n::: exercise\nid: x\n:::\n"
        assert find_excluded_ranges(text) == []

    def test_crlf_line_breaks(self):
        text = "Intro\r\n\r\n```\r\n::: exercise\r\n```\r\n\r\nAfter\r\n"
        ranges = find_excluded_ranges(text)
        lines = {
            line.strip(): (offset, offset + len(line))
            for offset, line in split_lines(text)
        }
        assert is_excluded(*lines["::: exercise"], ranges)
        assert not is_excluded(*lines["After"], ranges)


class TestIsExcluded:
    """Test the containment rule."""

    def test_start_inside_range(self):
        assert is_excluded(12, 30, [(10, 20)])

    def test_coincident_span(self):
        assert is_excluded(10, 20, [(10, 20)])

    def test_end_is_exclusive(self):
        assert not is_excluded(20, 25, [(10, 20)])

    def test_range_inside_span_does_not_exclude(self):
        assert not is_excluded(5, 25, [(10, 20)])

    def test_any_range_matches(self):
        assert is_excluded(42, 43, [(0, 5), (40, 50)])

    def test_no_ranges(self):
        assert not is_excluded(0, 10, [])


class TestSplitLines:
    """Test the shared line table."""

    def test_keeps_line_breaks_and_offsets(self):
        assert split_lines("a\nbb\r\nccc") == [(0, "a\n"), (2, "bb\r\n"), (6, "ccc")]

    def test_trailing_newline_adds_no_empty_line(self):
        assert split_lines("a\n") == [(0, "a\n")]

    def test_empty_text(self):
        assert split_lines("") == []
