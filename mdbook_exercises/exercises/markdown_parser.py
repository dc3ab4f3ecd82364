# mdbook_exercises/exercises/markdown_parser.py
"""
Parse exercise Markdown into an Exercise or UseCaseExercise.

Document shape:

    # Title

    Free Markdown description.

    ::: exercise
    id: ex01-hello
    difficulty: beginner
    :::

    ::: starter file="src/main.rs"
    ```rust
    fn main() {}
    ```
    :::

Directive blocks don't nest: opening a new directive while another is open
closes the previous one. Directive lines inside code samples, inline code
and raw HTML are ignored.
"""

import enum
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from mdbook_exercises.config import ParseOptions
from mdbook_exercises.exercises.blocks import (
    CODE_BLOCK_PARSERS,
    REPEATABLE_BLOCKS,
    USECASE_BLOCK_PARSERS,
    BlockParser,
    CodeBlockKind,
    UseCaseBlockKind,
)
from mdbook_exercises.exercises.directives import (
    Directive,
    is_directive_close,
    parse_directive_start,
)
from mdbook_exercises.exercises.errors import (
    DuplicateBlockError,
    MissingFieldError,
    UnclosedBlockError,
    UnknownExerciseTypeError,
)
from mdbook_exercises.exercises.exclusions import (
    ExcludedRange,
    find_excluded_ranges,
    is_excluded,
    split_lines,
)
from mdbook_exercises.exercises.types import Exercise, ParsedExercise, UseCaseExercise

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Scanner events
# -----------------------------------------------------------------------------


@dataclass
class ProseLine:
    """A document line outside any directive block."""

    text: str  # Raw line, including its line break
    line: int
    excluded: bool = False  # Inside a code sample or raw HTML


@dataclass
class DirectiveBlock:
    """A finished directive block and its raw body."""

    directive: Directive
    content: str
    chained: bool = False  # Opened while another directive was still open

    @property
    def name(self) -> str:
        return self.directive.name


def scan_document(
    text: str, excluded: list[ExcludedRange] | None = None
) -> Iterator[ProseLine | DirectiveBlock]:
    """
    Walk a document line by line, yielding prose lines and directive blocks.

    Directive openers and closers are only recognized on lines outside the
    excluded ranges. Body lines are captured verbatim either way.

    Raises:
        UnclosedBlockError: If input ends with a directive still open
    """
    if excluded is None:
        excluded = find_excluded_ranges(text)

    current: Directive | None = None
    chained = False
    body: list[str] = []

    for line_number, (offset, raw) in enumerate(split_lines(text), start=1):
        line_excluded = is_excluded(offset, offset + len(raw), excluded)
        if not line_excluded:
            line = raw.rstrip("\r\n")
            directive = parse_directive_start(line, line_number)
            if directive is not None:
                if current is not None:
                    yield DirectiveBlock(current, "".join(body), chained)
                chained = current is not None
                current = directive
                body = []
                continue

            if is_directive_close(line):
                if current is not None:
                    yield DirectiveBlock(current, "".join(body), chained)
                    current = None
                    body = []
                else:
                    logger.debug(f"Ignoring stray directive closer at line {line_number}")
                continue

        if current is not None:
            body.append(raw)
        else:
            yield ProseLine(raw, line_number, line_excluded)

    if current is not None:
        raise UnclosedBlockError(current.name, current.line)


def detect_exercise_type(
    text: str, excluded: list[ExcludedRange] | None = None
) -> str | None:
    """
    Find which top-level directive a document uses.

    Directive names are compared whole rather than as a line prefix, so
    `::: exercises` is not an exercise while `:::usecase` (no space) is a
    use case.

    Returns:
        "usecase" or "exercise" (usecase wins if both appear), or None
    """
    if excluded is None:
        excluded = find_excluded_ranges(text)

    names = set()
    for line_number, (offset, raw) in enumerate(split_lines(text), start=1):
        if is_excluded(offset, offset + len(raw), excluded):
            continue
        directive = parse_directive_start(raw.rstrip("\r\n"), line_number)
        if directive is not None:
            names.add(directive.name)

    if "usecase" in names:
        return "usecase"
    if "exercise" in names:
        return "exercise"
    return None


# -----------------------------------------------------------------------------
# Block assembly
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ExerciseLayout:
    """How one exercise type is assembled from its directive blocks."""

    directive: str  # Top-level metadata directive name
    record_factory: Callable[[], Any]
    kinds: type[enum.Enum]
    parsers: dict[Any, BlockParser]


CODE_LAYOUT = ExerciseLayout("exercise", Exercise, CodeBlockKind, CODE_BLOCK_PARSERS)
USECASE_LAYOUT = ExerciseLayout(
    "usecase", UseCaseExercise, UseCaseBlockKind, USECASE_BLOCK_PARSERS
)


def _dispatch(
    record,
    block: DirectiveBlock,
    layout: ExerciseLayout,
    options: ParseOptions,
    seen: dict,
) -> None:
    directive = block.directive
    try:
        kind = layout.kinds(directive.name)
    except ValueError:
        logger.debug(
            f"Ignoring unknown directive '{directive.name}' at line {directive.line}"
        )
        return

    if kind.value not in REPEATABLE_BLOCKS:
        if kind in seen:
            if options.strict:
                raise DuplicateBlockError(kind.value, directive.line)
            logger.warning(
                f"Duplicate '{kind.value}' block at line {directive.line} "
                f"replaces the one at line {seen[kind]}"
            )
        seen[kind] = directive.line

    layout.parsers[kind](record, directive, block.content, options)


def _heading_text(line: str) -> str:
    return line.lstrip("#").strip()


def assemble_exercise(
    text: str,
    layout: ExerciseLayout,
    options: ParseOptions,
    excluded: list[ExcludedRange] | None = None,
):
    """
    Build one record from the document's directive blocks.

    Prose before the first content block becomes the description, except
    the first heading, which becomes the title.
    """
    record = layout.record_factory()
    description: list[str] = []
    collecting = True
    seen: dict = {}

    for event in scan_document(text, excluded):
        if isinstance(event, ProseLine):
            if not collecting:
                continue
            if (
                record.title is None
                and not event.excluded
                and event.text.startswith("#")
                and _heading_text(event.text)
            ):
                record.title = _heading_text(event.text)
                continue
            description.append(event.text)
            continue

        if collecting and not event.chained and event.name != layout.directive:
            record.description = "".join(description).strip()
            collecting = False

        _dispatch(record, event, layout, options, seen)

    if collecting:
        record.description = "".join(description).strip()

    if not record.metadata.id:
        raise MissingFieldError(layout.directive, "id")

    return record


def parse_exercise(text: str, options: ParseOptions | None = None) -> ParsedExercise:
    """
    Parse an exercise document.

    Args:
        text: Full Markdown text
        options: Default language and duplicate-block policy

    Returns:
        UseCaseExercise if the document has a `::: usecase` block, otherwise
        Exercise

    Raises:
        ParseError: Any subclass; no partial record is returned
    """
    options = options or ParseOptions()
    excluded = find_excluded_ranges(text)

    exercise_type = detect_exercise_type(text, excluded)
    if exercise_type == "usecase":
        layout = USECASE_LAYOUT
    elif exercise_type == "exercise":
        layout = CODE_LAYOUT
    else:
        raise UnknownExerciseTypeError()

    record = assemble_exercise(text, layout, options, excluded)
    logger.debug(
        f"Parsed {record.type} exercise '{record.metadata.id}' "
        f"with {len(record.hints)} hints"
    )
    return record


def parse_exercise_file(
    path: Path | str, options: ParseOptions | None = None
) -> ParsedExercise:
    """Read a UTF-8 Markdown file and parse it."""
    text = Path(path).read_text(encoding="utf-8")
    return parse_exercise(text, options)
