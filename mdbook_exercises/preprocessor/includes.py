# mdbook_exercises/preprocessor/includes.py
"""
Expand `{{#exercise path/to/exercise.md}}` includes in a chapter.

Each include is replaced by the rendered exercise, or by an
`exercise-error` block describing why the file couldn't be used. Includes
shown inside code samples are left alone.
"""

import html
import logging
import re
from pathlib import Path

from mdbook_exercises.config import BookConfig, ParseOptions
from mdbook_exercises.exercises.errors import ParseError
from mdbook_exercises.exercises.exclusions import find_excluded_ranges, is_excluded
from mdbook_exercises.exercises.markdown_parser import parse_exercise
from mdbook_exercises.rendering.renderer import render

logger = logging.getLogger(__name__)

INCLUDE_RE = re.compile(r"\{\{#exercise\s+([^}]+)\}\}")


def wrap_exercise_html(rendered: str) -> str:
    return f'<div class="exercise-container">\n{rendered.rstrip()}\n</div>\n'


def _error_html(problem: str, error: Exception, relative_path: str) -> str:
    return (
        '<div class="exercise-error">\n'
        f"  <p><strong>{problem}:</strong> {html.escape(str(error))}</p>\n"
        f"  <p>File: {html.escape(relative_path)}</p>\n"
        "</div>"
    )


def render_include(relative_path: str, source_dir: Path, config: BookConfig) -> str:
    """Load, parse and render one included exercise file."""
    path = source_dir / relative_path
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not load exercise include {relative_path}: {e}")
        return _error_html("Error loading exercise file", e, relative_path)

    try:
        exercise = parse_exercise(
            text, ParseOptions(default_language=config.default_language)
        )
    except ParseError as e:
        logger.warning(f"Could not parse exercise include {relative_path}: {e}")
        return _error_html("Error parsing exercise", e, relative_path)

    return wrap_exercise_html(render(exercise, config.render))


def expand_includes(content: str, source_dir: Path, config: BookConfig) -> str:
    """
    Replace every include directive outside code samples.

    Args:
        content: Chapter Markdown
        source_dir: Book source directory include paths are relative to
        config: Preprocessor settings

    Returns:
        Chapter Markdown with includes expanded
    """
    if "{{#exercise" not in content:
        return content

    excluded = find_excluded_ranges(content)

    def replace(match: re.Match) -> str:
        if is_excluded(match.start(), match.end(), excluded):
            return match.group(0)
        return render_include(match.group(1).strip(), source_dir, config)

    return INCLUDE_RE.sub(replace, content)
