# mdbook_exercises/exercises/serialization.py
"""
JSON round trip for parsed exercises.

The record dataclasses are validated through a pydantic TypeAdapter over
the union, discriminated by the `type` field ("code" / "usecase").
"""

from typing import Annotated, Any

from pydantic import Field, TypeAdapter

from mdbook_exercises.exercises.types import Exercise, ParsedExercise, UseCaseExercise

_adapter: TypeAdapter = TypeAdapter(
    Annotated[Exercise | UseCaseExercise, Field(discriminator="type")]
)


def exercise_to_dict(exercise: ParsedExercise) -> dict[str, Any]:
    """Convert a record to plain JSON-compatible data (enums as strings)."""
    return _adapter.dump_python(exercise, mode="json")


def exercise_to_json(exercise: ParsedExercise, indent: int | None = 2) -> str:
    return _adapter.dump_json(exercise, indent=indent).decode("utf-8")


def exercise_from_dict(data: dict[str, Any]) -> ParsedExercise:
    """
    Rebuild a record from exercise_to_dict() output.

    Raises:
        pydantic.ValidationError: If the data doesn't describe an exercise
    """
    return _adapter.validate_python(data)


def exercise_from_json(text: str | bytes) -> ParsedExercise:
    return _adapter.validate_json(text)
