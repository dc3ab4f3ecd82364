# mdbook_exercises/preprocessor/book.py
"""
mdBook preprocessor: turn exercise chapters into interactive HTML.

mdBook writes `[context, book]` as JSON to the preprocessor's stdin and
reads the modified book back from stdout. Chapters are nested dicts:

    {"Chapter": {"name": ..., "content": ..., "sub_items": [...]}}

Book items live under "sections" (older mdBook) or "items".
"""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from mdbook_exercises.config import BookConfig, ParseOptions, load_book_config
from mdbook_exercises.exercises.directives import (
    is_directive_close,
    parse_directive_start,
)
from mdbook_exercises.exercises.errors import ParseError
from mdbook_exercises.exercises.exclusions import (
    ExcludedRange,
    find_excluded_ranges,
    is_excluded,
    split_lines,
)
from mdbook_exercises.exercises.markdown_parser import (
    detect_exercise_type,
    parse_exercise,
)
from mdbook_exercises.preprocessor.assets import asset_setup_hint, install_assets
from mdbook_exercises.preprocessor.includes import expand_includes, wrap_exercise_html
from mdbook_exercises.rendering.renderer import render

logger = logging.getLogger(__name__)

PREPROCESSOR_NAME = "exercises"
SUPPORTED_RENDERERS = {"html"}
TOP_LEVEL_DIRECTIVES = {"exercise", "usecase"}


def supports_renderer(renderer: str) -> bool:
    return renderer in SUPPORTED_RENDERERS


def book_source_dir(context: dict[str, Any]) -> Path:
    """`<root>/<book.src>` from the preprocessor context."""
    root = Path(context.get("root") or ".")
    book_config = (context.get("config") or {}).get("book") or {}
    return root / (book_config.get("src") or "src")


def iter_chapters(book: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield every chapter dict in the book, depth first."""
    items = book.get("sections")
    if items is None:
        items = book.get("items") or []

    stack = list(reversed(items))
    while stack:
        item = stack.pop()
        if not isinstance(item, dict) or not isinstance(item.get("Chapter"), dict):
            continue  # "Separator" / {"PartTitle": ...}
        chapter = item["Chapter"]
        yield chapter
        stack.extend(reversed(chapter.get("sub_items") or []))


def replace_exercise_region(
    content: str, rendered: str, excluded: list[ExcludedRange] | None = None
) -> str:
    """
    Swap the directive region of a chapter for rendered HTML.

    The region runs from the first top-level `::: exercise` / `::: usecase`
    line to the end of the last directive closer. Text before and after it
    is kept. Directive lines inside code samples don't count.
    """
    if excluded is None:
        excluded = find_excluded_ranges(content)

    start = None
    end = None
    for line_number, (offset, raw) in enumerate(split_lines(content), start=1):
        if is_excluded(offset, offset + len(raw), excluded):
            continue
        line = raw.rstrip("\r\n")
        if start is None:
            directive = parse_directive_start(line, line_number)
            if directive is not None and directive.name in TOP_LEVEL_DIRECTIVES:
                start = offset
        elif is_directive_close(line):
            end = offset + len(raw)

    if start is None:
        return content
    if end is None:
        end = len(content)

    return content[:start] + wrap_exercise_html(rendered) + content[end:]


def process_chapter(content: str, config: BookConfig, source_dir: Path) -> str:
    """
    Expand includes, then render the chapter's own exercise if it has one.

    A chapter that fails to parse is returned unchanged, with the error in
    an HTML comment at the top.
    """
    content = expand_includes(content, source_dir, config)

    excluded = find_excluded_ranges(content)
    if detect_exercise_type(content, excluded) is None:
        return content

    options = ParseOptions(default_language=config.default_language)
    try:
        exercise = parse_exercise(content, options)
    except ParseError as e:
        logger.warning(f"Exercise parse error: {e}")
        return f"<!-- Exercise parse error: {e} -->\n\n{content}"

    return replace_exercise_region(content, render(exercise, config.render), excluded)


def process_book(context: dict[str, Any], book: dict[str, Any]) -> dict[str, Any]:
    """
    Run the preprocessor over a whole book.

    Args:
        context: mdBook preprocessor context (root, config, renderer)
        book: mdBook book object; chapters are modified in place

    Returns:
        The same book object
    """
    config = load_book_config(context)
    if not config.enabled:
        logger.info("Disabled by configuration; skipping.")
        return book

    source_dir = book_source_dir(context)
    if config.manage_assets:
        try:
            install_assets(source_dir)
            logger.info("Assets installed to book theme directory.")
        except OSError as e:
            logger.warning(f"Failed to install assets: {e}")
    else:
        hint = asset_setup_hint(source_dir)
        if hint:
            logger.info(hint)

    processed = 0
    for chapter in iter_chapters(book):
        content = chapter.get("content")
        if not isinstance(content, str):
            continue
        new_content = process_chapter(content, config, source_dir)
        if new_content != content:
            processed += 1
            logger.debug(f"Rendered exercises in chapter '{chapter.get('name')}'")
        chapter["content"] = new_content

    logger.info(f"Processed exercises in {processed} chapter(s)")
    return book
