"""
Interactive exercises for mdBook.

Parses exercise Markdown (`::: exercise` / `::: usecase` directive blocks)
into typed records and renders them to HTML.
"""

__version__ = "0.1.0"

from .config import BookConfig, ParseOptions, RenderConfig
from .exercises import (
    Exercise,
    ParsedExercise,
    ParseError,
    UseCaseExercise,
    exercise_from_json,
    exercise_to_json,
    parse_exercise,
    parse_exercise_file,
)
from .rendering import render

__all__ = [
    "__version__",
    # Configuration
    "BookConfig",
    "ParseOptions",
    "RenderConfig",
    # Parsing
    "Exercise",
    "UseCaseExercise",
    "ParsedExercise",
    "ParseError",
    "parse_exercise",
    "parse_exercise_file",
    # Serialization
    "exercise_to_json",
    "exercise_from_json",
    # Rendering
    "render",
]
