# mdbook_exercises/main.py
"""
Command-line entry point.

mdBook calls the preprocessor twice per build:

    mdbook-exercises supports html     # exit 0 if the renderer is supported
    mdbook-exercises                   # [context, book] JSON on stdin

Authoring helpers:

    mdbook-exercises parse exercise.md     # parsed record as JSON
    mdbook-exercises render exercise.md    # rendered HTML
    mdbook-exercises lint src/             # check exercise files

Logs go to stderr; stdout carries the book JSON.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TextIO

from dotenv import load_dotenv

from mdbook_exercises import __version__
from mdbook_exercises.config import ParseOptions, RenderConfig, get_log_level
from mdbook_exercises.exercises.errors import ParseError
from mdbook_exercises.exercises.markdown_parser import parse_exercise_file
from mdbook_exercises.exercises.markdown_validator import lint_paths
from mdbook_exercises.exercises.serialization import exercise_to_json
from mdbook_exercises.preprocessor.book import process_book, supports_renderer
from mdbook_exercises.rendering.renderer import render

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=get_log_level(),
        stream=sys.stderr,
        format="[%(levelname)s] (mdbook-exercises): %(message)s",
    )


def run_preprocessor(stdin: TextIO, stdout: TextIO) -> int:
    """Read `[context, book]` from stdin and write the processed book."""
    try:
        payload = json.load(stdin)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid preprocessor input: {e}")
        return 1

    if not isinstance(payload, list) or len(payload) != 2:
        logger.error("Expected a [context, book] JSON array on stdin")
        return 1
    context, book = payload

    logger.info(f"Running the mdbook-exercises preprocessor (v{__version__})")
    if context.get("renderer") and not supports_renderer(context["renderer"]):
        logger.warning(f"Renderer '{context['renderer']}' is not supported")

    json.dump(process_book(context, book), stdout)
    return 0


def _parse_options(args: argparse.Namespace) -> ParseOptions:
    options = ParseOptions()
    if args.default_language:
        options.default_language = args.default_language
    return options


def _load(args: argparse.Namespace):
    """Parse the FILE argument; None (after logging) on failure."""
    try:
        return parse_exercise_file(args.file, _parse_options(args))
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read {args.file}: {e}")
    except ParseError as e:
        logger.error(f"{args.file}: {e}")
    return None


def cmd_parse(args: argparse.Namespace) -> int:
    exercise = _load(args)
    if exercise is None:
        return 1
    print(exercise_to_json(exercise))
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    exercise = _load(args)
    if exercise is None:
        return 1

    config = RenderConfig(
        reveal_hints=args.reveal_hints,
        reveal_solution=args.reveal_solution,
        enable_playground=not args.no_playground,
        enable_progress=not args.no_progress,
    )
    sys.stdout.write(render(exercise, config))
    return 0


def cmd_lint(args: argparse.Namespace) -> int:
    return lint_paths(
        args.paths, _parse_options(args), glob=args.glob, verbose=args.verbose
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdbook-exercises",
        description="mdBook preprocessor for interactive exercises",
    )
    parser.add_argument("--version", action="version", version=__version__)
    subparsers = parser.add_subparsers(dest="command")

    supports = subparsers.add_parser("supports", help="Check renderer support")
    supports.add_argument("renderer")

    language = argparse.ArgumentParser(add_help=False)
    language.add_argument(
        "--default-language",
        help="Language for code blocks that don't declare one",
    )

    parse = subparsers.add_parser(
        "parse", parents=[language], help="Print a parsed exercise as JSON"
    )
    parse.add_argument("file", type=Path)
    parse.set_defaults(handler=cmd_parse)

    render_cmd = subparsers.add_parser(
        "render", parents=[language], help="Print an exercise rendered as HTML"
    )
    render_cmd.add_argument("file", type=Path)
    render_cmd.add_argument("--reveal-hints", action="store_true")
    render_cmd.add_argument("--reveal-solution", action="store_true")
    render_cmd.add_argument(
        "--no-playground", action="store_true", help="Show local test commands"
    )
    render_cmd.add_argument(
        "--no-progress", action="store_true", help="Omit the completion button"
    )
    render_cmd.set_defaults(handler=cmd_render)

    lint = subparsers.add_parser(
        "lint", parents=[language], help="Validate exercise files"
    )
    lint.add_argument("paths", nargs="+", type=Path)
    lint.add_argument(
        "--glob",
        default="**/*.md",
        help="Glob pattern for Markdown files in directories (default: **/*.md)",
    )
    lint.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show all files, including valid ones",
    )
    lint.set_defaults(handler=cmd_lint)

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv(Path.cwd() / ".env.local")  # Local overrides (gitignored)
    load_dotenv(Path.cwd() / ".env")  # Fallback
    configure_logging()

    args = build_parser().parse_args(argv)

    if args.command is None:
        return run_preprocessor(sys.stdin, sys.stdout)
    if args.command == "supports":
        return 0 if supports_renderer(args.renderer) else 1
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
