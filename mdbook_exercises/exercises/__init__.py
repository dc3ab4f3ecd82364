"""Exercise Markdown parsing."""

from .types import (
    Criterion,
    Difficulty,
    EvaluationCriteria,
    Exercise,
    ExerciseMetadata,
    Hint,
    Objectives,
    ParsedExercise,
    RevealPolicy,
    SampleAnswer,
    Scenario,
    Solution,
    StarterCode,
    TestBlock,
    TestMode,
    UseCaseDomain,
    UseCaseExercise,
    UseCaseMetadata,
    UseCasePrompt,
)
from .errors import (
    DuplicateBlockError,
    InvalidAttributeError,
    InvalidHintLevelError,
    MissingFieldError,
    ParseError,
    UnclosedBlockError,
    UnknownExerciseTypeError,
    YamlBlockError,
)
from .exclusions import find_excluded_ranges, is_excluded
from .directives import (
    extract_code_block,
    extract_explanation,
    parse_fence_info,
    parse_inline_attributes,
)
from .blocks import parse_markdown_list, parse_time
from .markdown_parser import (
    DirectiveBlock,
    ProseLine,
    detect_exercise_type,
    parse_exercise,
    parse_exercise_file,
    scan_document,
)
from .serialization import (
    exercise_from_dict,
    exercise_from_json,
    exercise_to_dict,
    exercise_to_json,
)

__all__ = [
    # Records
    "Criterion",
    "Difficulty",
    "EvaluationCriteria",
    "Exercise",
    "ExerciseMetadata",
    "Hint",
    "Objectives",
    "ParsedExercise",
    "RevealPolicy",
    "SampleAnswer",
    "Scenario",
    "Solution",
    "StarterCode",
    "TestBlock",
    "TestMode",
    "UseCaseDomain",
    "UseCaseExercise",
    "UseCaseMetadata",
    "UseCasePrompt",
    # Errors
    "DuplicateBlockError",
    "InvalidAttributeError",
    "InvalidHintLevelError",
    "MissingFieldError",
    "ParseError",
    "UnclosedBlockError",
    "UnknownExerciseTypeError",
    "YamlBlockError",
    # Parsing
    "find_excluded_ranges",
    "is_excluded",
    "extract_code_block",
    "extract_explanation",
    "parse_fence_info",
    "parse_inline_attributes",
    "parse_markdown_list",
    "parse_time",
    "DirectiveBlock",
    "ProseLine",
    "detect_exercise_type",
    "parse_exercise",
    "parse_exercise_file",
    "scan_document",
    # Serialization
    "exercise_from_dict",
    "exercise_from_json",
    "exercise_to_dict",
    "exercise_to_json",
]
