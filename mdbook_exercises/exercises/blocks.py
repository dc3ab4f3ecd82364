# mdbook_exercises/exercises/blocks.py
"""
Content interpreters for directive blocks.

Each interpreter takes the record being assembled, the opening directive,
the raw block body and the parse options, and fills in one field. Which
interpreter runs for which directive name is decided by the per-type
dispatch tables at the bottom of this module.
"""

import enum
import logging
import re
from typing import Any, Callable

import yaml

from mdbook_exercises.config import ParseOptions
from mdbook_exercises.exercises.directives import (
    Directive,
    extract_code_block,
    extract_explanation,
    first_fence_info,
    parse_fence_info,
)
from mdbook_exercises.exercises.errors import (
    InvalidAttributeError,
    InvalidHintLevelError,
    MissingFieldError,
    YamlBlockError,
)
from mdbook_exercises.exercises.types import (
    Criterion,
    Difficulty,
    EvaluationCriteria,
    Exercise,
    Hint,
    Objectives,
    RevealPolicy,
    SampleAnswer,
    Scenario,
    Solution,
    StarterCode,
    TestBlock,
    TestMode,
    UseCaseDomain,
    UseCaseExercise,
    UseCasePrompt,
)

logger = logging.getLogger(__name__)

MAX_HINT_LEVEL = 255

_LIST_ITEM_RE = re.compile(r"^(?:[-*]|\d+\.)(.*)$")
_INTEGER_RE = re.compile(r"\d+", re.ASCII)


# -----------------------------------------------------------------------------
# Shared helpers
# -----------------------------------------------------------------------------


def load_yaml_mapping(block: str, content: str) -> dict[str, Any]:
    """
    Parse a block body as YAML.

    Raises:
        YamlBlockError: If PyYAML rejects the payload

    Returns:
        The mapping, or an empty dict for empty or non-mapping documents
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise YamlBlockError(block, e) from e
    return data if isinstance(data, dict) else {}


def _string_list(value: Any) -> list[str]:
    """Keep the scalar items of a YAML sequence as strings."""
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if isinstance(item, str):
            items.append(item)
        elif isinstance(item, (int, float)) and not isinstance(item, bool):
            items.append(str(item))
    return items


def _non_negative_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value >= 0 else None


def _optional_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _enum_value(enum_cls: type[enum.Enum], attribute: str, value: Any):
    """Case-insensitive enum lookup; None means "use the default"."""
    if value is None:
        return None
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise InvalidAttributeError(attribute, str(value)) from None


def parse_time_string(text: str) -> int | None:
    """
    Parse "45", "30 minutes" or "2 hours" into minutes.

    The unit is optional; anything starting with "hour" multiplies by 60.
    """
    parts = text.split()
    if not parts or not _INTEGER_RE.fullmatch(parts[0]):
        return None
    minutes = int(parts[0])
    if len(parts) > 1 and parts[1].lower().startswith("hour"):
        minutes *= 60
    return minutes


def parse_time(value: Any) -> int | None:
    """Time estimate in minutes from a YAML integer or "N unit" string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        return parse_time_string(value)
    return None


def parse_markdown_list(content: str) -> list[str]:
    """
    Collect `-`, `*` and `1.` list items from a block body.

    Lines that aren't list items are ignored, as are items with no text.
    """
    items = []
    for line in content.splitlines():
        match = _LIST_ITEM_RE.match(line.strip())
        if not match:
            continue
        item = match.group(1).strip()
        if item:
            items.append(item)
    return items


def split_yaml_header(content: str) -> tuple[dict[str, Any], str]:
    """
    Split a block into a leading YAML header and a Markdown body.

    Header lines are leading `key: value` / `key:` lines, plus `- item`
    lines following a bare `key:`. The first line of any other shape ends
    the header for good; everything from there on is the body.

    Header lines never reach the body. When they don't parse as a YAML
    mapping the header is empty, so the caller's header fields stay unset.

    Returns:
        (header mapping, trimmed body)
    """
    header_lines = []
    body_lines = []
    in_header = True
    in_list = False

    for line in content.splitlines():
        if not in_header:
            body_lines.append(line)
            continue

        stripped = line.strip()
        if ":" in stripped and not stripped.startswith(("-", "#")):
            header_lines.append(line)
            in_list = stripped.endswith(":")
        elif in_list and stripped.startswith("-"):
            header_lines.append(line)
        elif not stripped and not header_lines:
            continue
        else:
            in_header = False
            body_lines.append(line)

    body = "\n".join(body_lines).strip()
    if not header_lines:
        return {}, body

    try:
        header = yaml.safe_load("\n".join(header_lines))
    except yaml.YAMLError as e:
        logger.debug(f"Block header is not valid YAML: {e}")
        return {}, body

    if not isinstance(header, dict):
        logger.debug("Block header is not a YAML mapping")
        return {}, body
    return header, body


def _code_fields(
    directive: Directive, content: str, options: ParseOptions
) -> tuple[str, str, dict[str, str]] | None:
    """
    Resolve (code, language, fence attributes) for a code-carrying block.

    Language precedence: `language=` directive attribute, then the fence's
    info string, then the first fence-looking line, then the default.
    Returns None when the code body is empty.
    """
    info, code = extract_code_block(content)
    if not code.strip():
        logger.debug(
            f"Dropping {directive.name} block at line {directive.line}: no code"
        )
        return None

    if info is None:
        info = first_fence_info(content)
    fence_language, fence_attributes = parse_fence_info(info or "")

    language = (
        directive.attributes.get("language")
        or fence_language
        or options.default_language
    )
    return code, language, fence_attributes


# -----------------------------------------------------------------------------
# Interpreters shared by both exercise types
# -----------------------------------------------------------------------------


def _parse_identifier(block: str, data: dict[str, Any]) -> str:
    value = data.get("id")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value
    raise MissingFieldError(block, "id")


def parse_objectives(record, directive: Directive, content: str, options):
    data = load_yaml_mapping(directive.name, content)
    record.objectives = Objectives(
        thinking=_string_list(data.get("thinking")),
        doing=_string_list(data.get("doing")),
    )


def parse_hint(record, directive: Directive, content: str, options):
    """Add a hint and keep the list ordered by level."""
    raw_level = directive.attributes.get("level")
    if raw_level is None:
        raise MissingFieldError("hint", "level")
    if not _INTEGER_RE.fullmatch(raw_level) or int(raw_level) > MAX_HINT_LEVEL:
        raise InvalidHintLevelError(raw_level)

    record.hints.append(
        Hint(
            level=int(raw_level),
            content=content.strip(),
            title=directive.attributes.get("title"),
        )
    )
    record.hints.sort(key=lambda hint: hint.level)


# -----------------------------------------------------------------------------
# Code exercise interpreters
# -----------------------------------------------------------------------------


def parse_exercise_metadata(
    record: Exercise, directive: Directive, content: str, options
):
    data = load_yaml_mapping("exercise", content)
    metadata = record.metadata
    metadata.id = _parse_identifier("exercise", data)
    metadata.difficulty = (
        _enum_value(Difficulty, "difficulty", data.get("difficulty"))
        or Difficulty.beginner
    )
    metadata.time_minutes = parse_time(data.get("time"))
    metadata.prerequisites = _string_list(data.get("prerequisites"))


def parse_discussion(record: Exercise, directive: Directive, content: str, options):
    record.discussion = parse_markdown_list(content) or None


def parse_reflection(record: Exercise, directive: Directive, content: str, options):
    record.reflection = parse_markdown_list(content) or None


def parse_starter(
    record: Exercise, directive: Directive, content: str, options: ParseOptions
):
    fields = _code_fields(directive, content, options)
    if fields is None:
        record.starter = None
        return
    code, language, fence_attributes = fields

    filename = (
        directive.attributes.get("file")
        or directive.attributes.get("filename")
        or fence_attributes.get("filename")
        or fence_attributes.get("file")
    )
    record.starter = StarterCode(code=code, language=language, filename=filename)


def parse_solution(
    record: Exercise, directive: Directive, content: str, options: ParseOptions
):
    fields = _code_fields(directive, content, options)
    if fields is None:
        record.solution = None
        return
    code, language, _ = fields

    record.solution = Solution(
        code=code,
        language=language,
        explanation=extract_explanation(content),
        reveal=RevealPolicy.from_attribute(directive.attributes.get("reveal")),
    )


def parse_tests(
    record: Exercise, directive: Directive, content: str, options: ParseOptions
):
    fields = _code_fields(directive, content, options)
    if fields is None:
        record.tests = None
        return
    code, language, _ = fields

    mode = TestMode.playground
    raw_mode = directive.attributes.get("mode")
    if raw_mode is not None:
        try:
            mode = TestMode(raw_mode.strip().lower())
        except ValueError:
            logger.debug(f"Unknown tests mode {raw_mode!r}, using playground")

    record.tests = TestBlock(code=code, language=language, mode=mode)


# -----------------------------------------------------------------------------
# Use-case exercise interpreters
# -----------------------------------------------------------------------------


def parse_usecase_metadata(
    record: UseCaseExercise, directive: Directive, content: str, options
):
    data = load_yaml_mapping("usecase", content)
    metadata = record.metadata
    metadata.id = _parse_identifier("usecase", data)
    metadata.difficulty = (
        _enum_value(Difficulty, "difficulty", data.get("difficulty"))
        or Difficulty.beginner
    )
    metadata.domain = (
        _enum_value(UseCaseDomain, "domain", data.get("domain"))
        or UseCaseDomain.general
    )
    metadata.time_minutes = parse_time(data.get("time"))
    metadata.prerequisites = _string_list(data.get("prerequisites"))


def parse_scenario(
    record: UseCaseExercise, directive: Directive, content: str, options
):
    header, body = split_yaml_header(content)
    record.scenario = Scenario(
        content=body,
        organization=_optional_text(header.get("organization")),
        constraints=_string_list(header.get("constraints")),
    )


def parse_prompt(record: UseCaseExercise, directive: Directive, content: str, options):
    header, body = split_yaml_header(content)
    record.prompt = UseCasePrompt(
        prompt=body,
        aspects=_string_list(header.get("aspects")),
    )


def _parse_criterion(item: dict[str, Any]) -> Criterion:
    name = item.get("name")
    description = item.get("description")
    return Criterion(
        name=name if isinstance(name, str) else "Unknown",
        weight=_non_negative_int(item.get("weight")) or 0,
        description=description.strip() if isinstance(description, str) else "",
    )


def parse_evaluation(
    record: UseCaseExercise, directive: Directive, content: str, options
):
    data = load_yaml_mapping("evaluation", content)
    evaluation = EvaluationCriteria(
        key_points=_string_list(data.get("key_points")),
        min_words=_non_negative_int(data.get("min_words")),
        max_words=_non_negative_int(data.get("max_words")),
    )

    criteria = data.get("criteria")
    if isinstance(criteria, list):
        evaluation.criteria = [
            _parse_criterion(item) for item in criteria if isinstance(item, dict)
        ]

    threshold = data.get("pass_threshold")
    if isinstance(threshold, (int, float)) and not isinstance(threshold, bool):
        if not 0 <= threshold <= 1:
            raise InvalidAttributeError("pass_threshold", str(threshold))
        evaluation.pass_threshold = float(threshold)

    record.evaluation = evaluation


def parse_sample_answer(
    record: UseCaseExercise, directive: Directive, content: str, options
):
    """Strip leading `expected_score:` lines; the rest is the answer."""
    expected_score = None
    lines = content.splitlines()
    while lines:
        stripped = lines[0].strip()
        if stripped.startswith("expected_score:"):
            value = stripped.split(":", 1)[1].strip()
            try:
                expected_score = float(value)
            except ValueError:
                logger.debug(f"Ignoring non-numeric expected_score {value!r}")
        elif stripped:
            break
        lines.pop(0)

    record.sample_answer = SampleAnswer(
        content="\n".join(lines).strip(),
        expected_score=expected_score,
        reveal=RevealPolicy.from_attribute(directive.attributes.get("reveal")),
    )


def parse_context(record: UseCaseExercise, directive: Directive, content: str, options):
    record.context = content.strip()


# -----------------------------------------------------------------------------
# Dispatch tables
# -----------------------------------------------------------------------------


BlockParser = Callable[[Any, Directive, str, ParseOptions], None]


class CodeBlockKind(str, enum.Enum):
    """Directive names understood inside a code exercise."""

    exercise = "exercise"
    objectives = "objectives"
    discussion = "discussion"
    starter = "starter"
    hint = "hint"
    solution = "solution"
    tests = "tests"
    reflection = "reflection"


class UseCaseBlockKind(str, enum.Enum):
    """Directive names understood inside a use-case exercise."""

    usecase = "usecase"
    scenario = "scenario"
    prompt = "prompt"
    hint = "hint"
    evaluation = "evaluation"
    sample_answer = "sample-answer"
    context = "context"
    objectives = "objectives"


CODE_BLOCK_PARSERS: dict[CodeBlockKind, BlockParser] = {
    CodeBlockKind.exercise: parse_exercise_metadata,
    CodeBlockKind.objectives: parse_objectives,
    CodeBlockKind.discussion: parse_discussion,
    CodeBlockKind.starter: parse_starter,
    CodeBlockKind.hint: parse_hint,
    CodeBlockKind.solution: parse_solution,
    CodeBlockKind.tests: parse_tests,
    CodeBlockKind.reflection: parse_reflection,
}

USECASE_BLOCK_PARSERS: dict[UseCaseBlockKind, BlockParser] = {
    UseCaseBlockKind.usecase: parse_usecase_metadata,
    UseCaseBlockKind.scenario: parse_scenario,
    UseCaseBlockKind.prompt: parse_prompt,
    UseCaseBlockKind.hint: parse_hint,
    UseCaseBlockKind.evaluation: parse_evaluation,
    UseCaseBlockKind.sample_answer: parse_sample_answer,
    UseCaseBlockKind.context: parse_context,
    UseCaseBlockKind.objectives: parse_objectives,
}

# Blocks that may appear any number of times
REPEATABLE_BLOCKS = {"hint"}
