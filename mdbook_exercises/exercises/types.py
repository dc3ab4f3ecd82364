# mdbook_exercises/exercises/types.py
"""
Type definitions for parsed exercises.

A document parses into exactly one of two records: a code Exercise or a
UseCaseExercise. Both are plain dataclasses built once per parse call.
"""

import enum
from dataclasses import dataclass, field
from typing import Literal


class Difficulty(str, enum.Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class UseCaseDomain(str, enum.Enum):
    general = "general"
    healthcare = "healthcare"
    defense = "defense"
    financial = "financial"


class RevealPolicy(str, enum.Enum):
    """When a solution or sample answer is shown expanded."""

    on_demand = "on-demand"  # Follows the renderer's reveal_solution option
    always = "always"
    never = "never"

    @classmethod
    def from_attribute(cls, value: str | None) -> "RevealPolicy":
        """Parse a `reveal=` attribute; anything unrecognized is on-demand."""
        if value is None:
            return cls.on_demand
        value = value.strip().lower()
        if value == "always":
            return cls.always
        if value == "never":
            return cls.never
        return cls.on_demand


class TestMode(str, enum.Enum):
    """How the tests block is meant to be run."""

    __test__ = False

    playground = "playground"  # Run in the browser via the playground
    local = "local"  # Display only, run locally


@dataclass
class ExerciseMetadata:
    """Metadata from the `::: exercise` block."""

    id: str = ""
    difficulty: Difficulty = Difficulty.beginner
    time_minutes: int | None = None
    prerequisites: list[str] = field(default_factory=list)


@dataclass
class UseCaseMetadata:
    """Metadata from the `::: usecase` block."""

    id: str = ""
    difficulty: Difficulty = Difficulty.beginner
    domain: UseCaseDomain = UseCaseDomain.general
    time_minutes: int | None = None
    prerequisites: list[str] = field(default_factory=list)


@dataclass
class Objectives:
    """Learning objectives, split into conceptual and practical goals."""

    thinking: list[str] = field(default_factory=list)
    doing: list[str] = field(default_factory=list)


@dataclass
class StarterCode:
    """Code the student starts from."""

    code: str
    language: str
    filename: str | None = None  # e.g. "src/main.rs"


@dataclass
class Hint:
    """A progressive hint. Lists of hints are kept sorted by level."""

    level: int
    content: str  # Markdown
    title: str | None = None


@dataclass
class Solution:
    code: str
    language: str
    explanation: str | None = None  # Markdown after the code fence
    reveal: RevealPolicy = RevealPolicy.on_demand


@dataclass
class TestBlock:
    __test__ = False

    code: str
    language: str
    mode: TestMode = TestMode.playground


@dataclass
class Scenario:
    """The situation a use-case exercise is set in."""

    content: str = ""  # Markdown body
    organization: str | None = None
    constraints: list[str] = field(default_factory=list)


@dataclass
class UseCasePrompt:
    prompt: str = ""  # Markdown body
    aspects: list[str] = field(default_factory=list)  # Aspects to address


@dataclass
class Criterion:
    """One weighted rubric line."""

    name: str
    weight: int = 0
    description: str = ""


@dataclass
class EvaluationCriteria:
    criteria: list[Criterion] = field(default_factory=list)
    key_points: list[str] = field(default_factory=list)
    min_words: int | None = None
    max_words: int | None = None
    pass_threshold: float | None = None  # Fraction between 0 and 1


@dataclass
class SampleAnswer:
    content: str  # Markdown
    expected_score: float | None = None
    reveal: RevealPolicy = RevealPolicy.on_demand


@dataclass
class Exercise:
    """A code exercise: starter code, hints, solution and tests."""

    type: Literal["code"] = "code"
    metadata: ExerciseMetadata = field(default_factory=ExerciseMetadata)
    title: str | None = None  # First heading before any directive
    description: str = ""  # Markdown collected before the first content block
    objectives: Objectives | None = None
    discussion: list[str] | None = None
    starter: StarterCode | None = None
    hints: list[Hint] = field(default_factory=list)
    solution: Solution | None = None
    tests: TestBlock | None = None
    reflection: list[str] | None = None


@dataclass
class UseCaseExercise:
    """A scenario-based exercise answered in free text."""

    type: Literal["usecase"] = "usecase"
    metadata: UseCaseMetadata = field(default_factory=UseCaseMetadata)
    title: str | None = None
    description: str = ""
    scenario: Scenario = field(default_factory=Scenario)
    prompt: UseCasePrompt = field(default_factory=UseCasePrompt)
    hints: list[Hint] = field(default_factory=list)
    evaluation: EvaluationCriteria = field(default_factory=EvaluationCriteria)
    sample_answer: SampleAnswer | None = None
    context: str | None = None  # Extra reference material (Markdown)
    objectives: Objectives | None = None


ParsedExercise = Exercise | UseCaseExercise
