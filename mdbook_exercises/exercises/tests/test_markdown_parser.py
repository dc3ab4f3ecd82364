# mdbook_exercises/exercises/tests/test_markdown_parser.py
"""Tests for document scanning, block assembly and exercise-type detection."""

import pytest

from mdbook_exercises.config import ParseOptions
from mdbook_exercises.exercises import types
from mdbook_exercises.exercises.errors import (
    UnclosedBlockError,
    UnknownExerciseTypeError,
)
from mdbook_exercises.exercises.markdown_parser import (
    DirectiveBlock,
    ProseLine,
    detect_exercise_type,
    parse_exercise,
    parse_exercise_file,
    scan_document,
)

HELLO_EXERCISE = """# Hello World

Write your first program.

::: exercise
id: ex01-hello
difficulty: beginner
time: 15
prerequisites:
  - ex00-setup
:::

::: objectives
thinking:
  - Understand the entry point
doing:
  - Print a greeting
:::

::: discussion
- Why does every program need an entry point?
- What does `println!` expand to?
:::

::: starter file="src/main.rs"
```rust
fn main() {
    // print a greeting here
}
```
:::

::: hint level=2 title="Macro"
Use `println!`.
:::

::: hint level=1
Look at the `main` function.
:::

::: solution reveal=always
```rust
fn main() {
    println!("Hello, world!");
}
```

### Explanation

`println!` writes a line to stdout.
:::

::: tests mode=local
```rust
#[test]
fn it_runs() {
    main();
}
```
:::

::: reflection
1. What surprised you?
2. What would you change?
:::
"""

BREACH_USECASE = """# Patient Data Breach

A short description.

::: usecase
id: uc-breach
difficulty: intermediate
domain: healthcare
time: 45 minutes
:::

::: scenario
organization: City Hospital
constraints:
  - HIPAA applies
  - No new budget

The hospital discovered that patient records were exposed.
:::

::: prompt
aspects:
  - Immediate containment
  - Notification duties

Describe how you would respond.
:::

::: hint level=1
Start with containment.
:::

::: evaluation
min_words: 150
max_words: 600
pass_threshold: 0.7
criteria:
  - name: Containment
    weight: 40
    description: Stops the leak first
key_points:
  - Revoke exposed credentials
:::

::: sample-answer reveal=never
expected_score: 0.9

First, revoke the credentials.
:::

::: context
Breach notification rule summary.
:::
"""


def rust_options() -> ParseOptions:
    return ParseOptions(default_language="rust")


class TestScanDocument:
    """Test the line scanner's event stream."""

    def test_prose_and_blocks(self):
        events = list(scan_document("Intro\n::: hint level=1\nBody\n:::\nOutro\n"))
        assert events[0] == ProseLine("Intro\n", 1, False)
        assert isinstance(events[1], DirectiveBlock)
        assert events[1].name == "hint"
        assert events[1].directive.attributes == {"level": "1"}
        assert events[1].directive.line == 2
        assert events[1].content == "Body\n"
        assert events[2] == ProseLine("Outro\n", 5, False)

    def test_new_directive_closes_open_one(self):
        events = list(scan_document("::: a\none\n::: b\ntwo\n:::\n"))
        assert [(e.name, e.content, e.chained) for e in events] == [
            ("a", "one\n", False),
            ("b", "two\n", True),
        ]

    def test_directive_inside_code_is_body_text(self):
        text = "::: solution\n```markdown\n::: hint\n:::\n```\n:::\n"
        events = list(scan_document(text))
        assert len(events) == 1
        assert events[0].content == "```markdown\n::: hint\n:::\n```\n"

    def test_excluded_prose_is_flagged(self):
        events = list(scan_document("```\n# not a title\n```\n"))
        assert all(event.excluded for event in events)

    def test_stray_closer_is_dropped(self):
        events = list(scan_document(":::\ntext\n"))
        assert events == [ProseLine("text\n", 2, False)]

    def test_unclosed_block(self):
        with pytest.raises(UnclosedBlockError) as exc_info:
            list(scan_document("Intro\n::: hint level=1\nnever closed\n"))
        assert exc_info.value.block == "hint"
        assert exc_info.value.line == 2


class TestDetectExerciseType:
    def test_code_exercise(self):
        assert detect_exercise_type("::: exercise\nid: x\n:::\n") == "exercise"

    def test_usecase_wins(self):
        text = "::: exercise\nid: x\n:::\n::: usecase\nid: y\n:::\n"
        assert detect_exercise_type(text) == "usecase"

    def test_ignores_code_samples(self):
        assert detect_exercise_type("```\n::: exercise\n```\n") is None

    def test_name_must_match_exactly(self):
        assert detect_exercise_type("::: exercises\n:::\n") is None

    def test_space_after_marker_is_optional(self):
        assert detect_exercise_type(":::usecase\n:::\n") == "usecase"


class TestParseCodeExercise:
    """Test parsing a complete code exercise."""

    def test_full_document(self):
        exercise = parse_exercise(HELLO_EXERCISE, rust_options())

        assert isinstance(exercise, types.Exercise)
        assert exercise.type == "code"
        assert exercise.title == "Hello World"
        assert exercise.description == "Write your first program."
        assert exercise.metadata == types.ExerciseMetadata(
            id="ex01-hello",
            difficulty=types.Difficulty.beginner,
            time_minutes=15,
            prerequisites=["ex00-setup"],
        )
        assert exercise.objectives.thinking == ["Understand the entry point"]
        assert exercise.discussion == [
            "Why does every program need an entry point?",
            "What does `println!` expand to?",
        ]
        assert exercise.starter == types.StarterCode(
            code="fn main() {\n    // print a greeting here\n}",
            language="rust",
            filename="src/main.rs",
        )
        assert [hint.level for hint in exercise.hints] == [1, 2]
        assert exercise.hints[1].title == "Macro"
        assert exercise.solution.code == 'fn main() {\n    println!("Hello, world!");\n}'
        assert exercise.solution.explanation == "`println!` writes a line to stdout."
        assert exercise.solution.reveal == types.RevealPolicy.always
        assert exercise.tests.mode == types.TestMode.local
        assert exercise.tests.code == "#[test]\nfn it_runs() {\n    main();\n}"
        assert exercise.reflection == ["What surprised you?", "What would you change?"]

    def test_id_is_kept_verbatim(self):
        exercise = parse_exercise("::: exercise\nid: Ex-01_MixedCase\n:::\n")
        assert exercise.metadata.id == "Ex-01_MixedCase"

    def test_directive_inside_code_sample_is_ignored(self):
        text = """::: exercise
id: real
difficulty: beginner
:::

Here is what the syntax looks like:

```markdown
::: exercise
id: fake
difficulty: advanced
:::
```
"""
        exercise = parse_exercise(text)
        assert exercise.metadata.id == "real"
        assert exercise.metadata.difficulty == types.Difficulty.beginner
        assert "id: fake" in exercise.description

    def test_unclosed_hint(self):
        text = "::: exercise\nid: x\n:::\n\n::: hint level=1\nNever closed.\n"
        with pytest.raises(UnclosedBlockError) as exc_info:
            parse_exercise(text)
        assert exc_info.value.block == "hint"
        assert exc_info.value.line == 5
        assert "starting at line 5" in str(exc_info.value)

    def test_implicitly_closed_blocks(self):
        text = """::: exercise
id: x
:::
::: starter
```rust
fn a() {}
```
::: solution
```rust
fn b() {}
```
:::
"""
        exercise = parse_exercise(text, rust_options())
        assert exercise.starter.code == "fn a() {}"
        assert exercise.solution.code == "fn b() {}"

    def test_unknown_directives_are_ignored(self):
        text = "::: exercise\nid: x\n:::\n\n::: quiz\nWhatever\n:::\n"
        exercise = parse_exercise(text)
        assert exercise.metadata.id == "x"

    def test_crlf_document(self):
        text = "::: exercise\r\nid: crlf\r\n:::\r\n\r\n::: hint level=1\r\nHi\r\n:::\r\n"
        exercise = parse_exercise(text)
        assert exercise.metadata.id == "crlf"
        assert exercise.hints[0].content == "Hi"

    def test_escaped_backtick_in_hint(self):
        text = r"""::: exercise
id: x
:::
::: hint level=1
Type a literal \` in the shell.
:::
::: hint level=2
Run `cargo test`.
:::
"""
        exercise = parse_exercise(text)
        assert [hint.level for hint in exercise.hints] == [1, 2]
        assert exercise.hints[1].content == "Run `cargo test`."


class TestTitleAndDescription:
    """Test prose collection before the first content block."""

    def test_description_stops_at_first_content_block(self):
        text = """::: exercise
id: x
:::

Intro text.

::: starter
```rust
fn main() {}
```
:::

Trailing prose.
"""
        exercise = parse_exercise(text, rust_options())
        assert exercise.title is None
        assert exercise.description == "Intro text."

    def test_description_without_content_blocks(self):
        exercise = parse_exercise("# Title\n\nBefore.\n\n::: exercise\nid: x\n:::\n\nAfter.\n")
        assert exercise.title == "Title"
        assert exercise.description == "Before.\n\n\nAfter."

    def test_only_first_heading_is_the_title(self):
        exercise = parse_exercise("# One\n## Two\n\n::: exercise\nid: x\n:::\n")
        assert exercise.title == "One"
        assert exercise.description == "## Two"

    def test_heading_inside_code_is_not_the_title(self):
        text = "```bash\n# comment\n```\n\n# Real Title\n\n::: exercise\nid: x\n:::\n"
        exercise = parse_exercise(text)
        assert exercise.title == "Real Title"
        assert exercise.description.startswith("```bash\n# comment")


class TestParseUseCase:
    """Test parsing a complete use-case exercise."""

    def test_full_document(self):
        exercise = parse_exercise(BREACH_USECASE, rust_options())

        assert isinstance(exercise, types.UseCaseExercise)
        assert exercise.type == "usecase"
        assert exercise.title == "Patient Data Breach"
        assert exercise.description == "A short description."
        assert exercise.metadata == types.UseCaseMetadata(
            id="uc-breach",
            difficulty=types.Difficulty.intermediate,
            domain=types.UseCaseDomain.healthcare,
            time_minutes=45,
        )
        assert exercise.scenario.organization == "City Hospital"
        assert exercise.scenario.constraints == ["HIPAA applies", "No new budget"]
        assert exercise.scenario.content.startswith("The hospital discovered")
        assert exercise.prompt.aspects == ["Immediate containment", "Notification duties"]
        assert exercise.prompt.prompt == "Describe how you would respond."
        assert exercise.hints[0].content == "Start with containment."
        assert exercise.evaluation.criteria[0].weight == 40
        assert exercise.evaluation.pass_threshold == 0.7
        assert exercise.sample_answer.expected_score == 0.9
        assert exercise.sample_answer.reveal == types.RevealPolicy.never
        assert exercise.context == "Breach notification rule summary."

    def test_usecase_takes_precedence(self):
        text = "::: usecase\nid: uc\n:::\n\n::: exercise\nid: ex\n:::\n"
        exercise = parse_exercise(text)
        assert isinstance(exercise, types.UseCaseExercise)
        assert exercise.metadata.id == "uc"


class TestUnknownExerciseType:
    """Documents with no top-level directive outside code samples."""

    def test_plain_markdown(self):
        with pytest.raises(UnknownExerciseTypeError):
            parse_exercise("# Just a chapter\n\nSome content.\n")

    def test_directive_only_in_fenced_code(self):
        with pytest.raises(UnknownExerciseTypeError):
            parse_exercise("# Notes\n\n```markdown\n::: exercise\nid: x\n:::\n```\n")

    def test_directive_only_in_code_span(self):
        with pytest.raises(UnknownExerciseTypeError):
            parse_exercise("Inline: ``\n::: exercise\n`` done.\n")

    def test_message(self):
        with pytest.raises(UnknownExerciseTypeError) as exc_info:
            parse_exercise("")
        assert "'::: exercise' or '::: usecase'" in str(exc_info.value)


class TestParseExerciseFile:
    def test_reads_utf8_file(self, tmp_path):
        path = tmp_path / "hello.md"
        path.write_text(HELLO_EXERCISE, encoding="utf-8")
        exercise = parse_exercise_file(path, rust_options())
        assert exercise.metadata.id == "ex01-hello"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_exercise_file(tmp_path / "missing.md")

    def test_default_language_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("EXERCISES_DEFAULT_LANGUAGE", "python")
        path = tmp_path / "py.md"
        path.write_text(
            "::: exercise\nid: py\n:::\n\n::: starter\n```\nprint(1)\n```\n:::\n",
            encoding="utf-8",
        )
        assert parse_exercise_file(path).starter.language == "python"
