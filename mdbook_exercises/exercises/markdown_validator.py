# mdbook_exercises/exercises/markdown_validator.py
"""
Lint exercise Markdown files before a book build.

The parser forgives a few authoring mistakes (repeated blocks, empty code
blocks). The lint parses in strict mode and reports those mistakes too.

Usage:
    python -m mdbook_exercises.exercises.markdown_validator src/exercises/

Or import directly:
    from mdbook_exercises.exercises.markdown_validator import validate_exercise
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from mdbook_exercises.config import ParseOptions
from mdbook_exercises.exercises.directives import FENCE_MARKER, extract_code_block
from mdbook_exercises.exercises.errors import (
    DuplicateBlockError,
    ParseError,
    UnclosedBlockError,
)
from mdbook_exercises.exercises.exclusions import find_excluded_ranges
from mdbook_exercises.exercises.markdown_parser import (
    DirectiveBlock,
    detect_exercise_type,
    parse_exercise,
    scan_document,
)

logger = logging.getLogger(__name__)

# Blocks whose whole value is a fenced code sample
CODE_BLOCKS = {"starter", "solution", "tests"}


@dataclass
class ValidationError:
    """A single validation error."""

    message: str
    line: int | None = None
    context: str | None = None  # Directive the error belongs to

    def __str__(self) -> str:
        parts = []
        if self.line is not None:
            parts.append(f"line {self.line}")
        if self.context:
            parts.append(self.context)
        location = ", ".join(parts)
        if location:
            return f"{location}: {self.message}"
        return self.message


@dataclass
class ValidationResult:
    """Result of validating a file."""

    path: Path | None = None
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def __str__(self) -> str:
        if self.is_valid:
            return f"{self.path}: OK" if self.path else "OK"
        prefix = f"{self.path}: " if self.path else ""
        error_strs = [f"  - {e}" for e in self.errors]
        return f"{prefix}{len(self.errors)} error(s)\n" + "\n".join(error_strs)


def _has_fence(content: str) -> bool:
    return any(line.strip().startswith(FENCE_MARKER) for line in content.splitlines())


def _validate_code_blocks(text: str, excluded) -> list[ValidationError]:
    errors = []
    try:
        for event in scan_document(text, excluded):
            if not isinstance(event, DirectiveBlock) or event.name not in CODE_BLOCKS:
                continue

            context = f"::: {event.name}"
            line = event.directive.line
            if not _has_fence(event.content):
                errors.append(
                    ValidationError("Block has no fenced code", line, context)
                )
            elif not extract_code_block(event.content)[1].strip():
                errors.append(
                    ValidationError(
                        "Code block is empty and will be dropped", line, context
                    )
                )
    except UnclosedBlockError:
        # Already reported by the strict parse
        pass
    return errors


def validate_exercise(
    text: str, options: ParseOptions | None = None
) -> list[ValidationError]:
    """
    Validate exercise Markdown text.

    Args:
        text: Full Markdown text
        options: Only default_language is used; parsing is always strict

    Returns:
        List of validation errors (empty if valid)
    """
    strict = ParseOptions(strict=True)
    if options is not None:
        strict.default_language = options.default_language

    errors = []
    try:
        parse_exercise(text, strict)
    except (UnclosedBlockError, DuplicateBlockError) as e:
        errors.append(ValidationError(str(e), line=e.line))
    except ParseError as e:
        errors.append(ValidationError(str(e)))

    errors.extend(_validate_code_blocks(text, find_excluded_ranges(text)))
    return errors


def validate_exercise_file(
    path: Path | str, options: ParseOptions | None = None
) -> ValidationResult:
    """
    Validate an exercise Markdown file from disk.

    Args:
        path: Path to the .md file

    Returns:
        ValidationResult with path and any errors
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ValidationResult(
            path=path, errors=[ValidationError(f"File not found: {path}")]
        )
    except (OSError, UnicodeDecodeError) as e:
        return ValidationResult(
            path=path, errors=[ValidationError(f"Error reading file: {e}")]
        )

    return ValidationResult(path=path, errors=validate_exercise(text, options))


def validate_directory(
    directory: Path | str,
    glob: str = "**/*.md",
    options: ParseOptions | None = None,
) -> list[ValidationResult]:
    """
    Validate every exercise file under a directory.

    Markdown files without a top-level `::: exercise` or `::: usecase`
    block are ordinary chapters and are skipped.

    Args:
        directory: Root directory to search
        glob: Glob pattern for Markdown files (default: **/*.md)

    Returns:
        List of ValidationResult for each exercise file
    """
    directory = Path(directory)
    results = []

    for md_path in sorted(directory.glob(glob)):
        if not md_path.is_file():
            continue
        try:
            text = md_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            results.append(
                ValidationResult(
                    path=md_path, errors=[ValidationError(f"Error reading file: {e}")]
                )
            )
            continue

        if detect_exercise_type(text) is None:
            logger.debug(f"Skipping {md_path}: no exercise block")
            continue

        results.append(
            ValidationResult(path=md_path, errors=validate_exercise(text, options))
        )

    return results


def lint_paths(
    paths: list[Path],
    options: ParseOptions | None = None,
    glob: str = "**/*.md",
    verbose: bool = False,
) -> int:
    """
    Validate files and directories and print a report.

    Returns:
        Process exit code: 1 if any file is invalid, else 0
    """
    all_results: list[ValidationResult] = []

    for path in paths:
        if path.is_dir():
            all_results.extend(validate_directory(path, glob=glob, options=options))
        elif path.is_file():
            all_results.append(validate_exercise_file(path, options))
        else:
            all_results.append(
                ValidationResult(
                    path=path, errors=[ValidationError(f"Path not found: {path}")]
                )
            )

    invalid_count = 0
    for result in all_results:
        if not result.is_valid:
            print(result)
            invalid_count += 1
        elif verbose:
            print(result)

    total = len(all_results)
    valid = total - invalid_count
    print(f"\nValidated {total} file(s): {valid} valid, {invalid_count} invalid")

    return 1 if invalid_count > 0 else 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for validation."""
    parser = argparse.ArgumentParser(
        description="Validate exercise Markdown files",
    )
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files or directories to validate",
    )
    parser.add_argument(
        "--glob",
        default="**/*.md",
        help="Glob pattern for Markdown files in directories (default: **/*.md)",
    )
    parser.add_argument(
        "--default-language",
        help="Language for code blocks that don't declare one",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show all files, including valid ones",
    )

    args = parser.parse_args(argv)
    options = ParseOptions()
    if args.default_language:
        options.default_language = args.default_language

    return lint_paths(args.paths, options, glob=args.glob, verbose=args.verbose)


if __name__ == "__main__":
    sys.exit(main())
