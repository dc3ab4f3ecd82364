# mdbook_exercises/rendering/renderer.py
"""
Render parsed exercises to HTML for mdBook.

The output is one self-contained <article> per exercise. Interactivity
(copy/reset buttons, running tests, progress tracking, word counts) is
wired up by exercises.js using the classes and data attributes emitted
here.

The HTML is embedded back into a Markdown chapter, so no emitted line may
be blank: code and multi-line attribute values encode their line breaks
as character references.
"""

import html
import re

from markdown_it import MarkdownIt

from mdbook_exercises.config import RenderConfig
from mdbook_exercises.exercises.types import (
    Difficulty,
    EvaluationCriteria,
    Exercise,
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
    UseCaseExercise,
    UseCasePrompt,
)

DIFFICULTY_STARS = {
    Difficulty.beginner: "⭐",
    Difficulty.intermediate: "⭐⭐",
    Difficulty.advanced: "⭐⭐⭐",
}

# Shown instead of a run button when tests can't run in the browser
LOCAL_TEST_COMMANDS = {
    "rust": "cargo test",
    "python": "pytest",
    "javascript": "npm test",
    "typescript": "npm test",
    "go": "go test ./...",
    "java": "mvn test",
    "c": "make test",
    "cpp": "make test",
}

_markdown = MarkdownIt("commonmark").enable(["table", "strikethrough"])

_PRE_BLOCK_RE = re.compile(r"<pre>.*?</pre>", re.DOTALL)


def _escape(value) -> str:
    return html.escape(str(value), quote=True)


def _escape_multiline(value: str) -> str:
    """Escape text and encode line breaks so it stays on one line."""
    return _escape(value).replace("\r", "&#13;").replace("\n", "&#10;")


def _markdown_html(text: str) -> str:
    """Render author Markdown, keeping code samples free of blank lines."""
    rendered = _markdown.render(text)
    return _PRE_BLOCK_RE.sub(
        lambda match: match.group(0).replace("\n", "&#10;"), rendered
    ).rstrip("\n")


def _code_html(code: str, language: str) -> str:
    return (
        f'<pre><code class="language-{_escape(language)}">'
        f"{_escape_multiline(code)}</code></pre>"
    )


def _open_attr(is_open: bool) -> str:
    return " open" if is_open else ""


def is_revealed(policy: RevealPolicy, reveal_by_default: bool) -> bool:
    """
    Decide whether a solution or sample answer starts expanded.

    `always` and `never` on the block win; `on-demand` follows the
    renderer's reveal_solution option.
    """
    if policy == RevealPolicy.always:
        return True
    if policy == RevealPolicy.never:
        return False
    return reveal_by_default


def format_minutes(minutes: int) -> str:
    """45 -> "45 min", 90 -> "1h 30m"."""
    if minutes >= 60:
        return f"{minutes // 60}h {minutes % 60}m"
    return f"{minutes} min"


# -----------------------------------------------------------------------------
# Shared sections
# -----------------------------------------------------------------------------


def _render_header(exercise: ParsedExercise) -> list[str]:
    metadata = exercise.metadata
    lines = ['<header class="exercise-header">']
    if exercise.title:
        lines.append(f'  <h2 class="exercise-title">{_escape(exercise.title)}</h2>')

    lines.append('  <div class="exercise-meta">')
    difficulty = metadata.difficulty
    lines.append(
        f'    <span class="badge difficulty {difficulty.value}">'
        f"{DIFFICULTY_STARS[difficulty]} {difficulty.value}</span>"
    )
    if isinstance(exercise, UseCaseExercise):
        lines.append(
            f'    <span class="badge domain {metadata.domain.value}">'
            f"🏛️ {metadata.domain.value}</span>"
        )
    if metadata.time_minutes is not None:
        lines.append(
            f'    <span class="badge time">⏱️ {format_minutes(metadata.time_minutes)}</span>'
        )
    if metadata.prerequisites:
        links = ", ".join(
            f'<a href="#{_escape(prerequisite)}">{_escape(prerequisite)}</a>'
            for prerequisite in metadata.prerequisites
        )
        lines.append(f'    <span class="badge prerequisites">📚 Requires: {links}</span>')
    lines.append("  </div>")
    lines.append("</header>")
    return lines


def _render_navigation(exercise_id: str, sections: list[tuple[str, str]]) -> list[str]:
    """Section outline; `sections` is (section key, label) in page order."""
    lines = ['<nav class="exercise-nav" aria-label="Exercise sections">', "  <ul>"]
    for key, label in sections:
        lines.append(
            f'    <li><a href="#{_escape(exercise_id)}-{key}" '
            f'data-section="{key}">{label}</a></li>'
        )
    lines.extend(["  </ul>", "</nav>"])
    return lines


def _render_description(description: str, exercise_id: str) -> list[str]:
    return [
        f'<section class="exercise-description" id="{_escape(exercise_id)}-description">',
        _markdown_html(description),
        "</section>",
    ]


def _render_objective_group(kind: str, items: list[str], exercise_id: str) -> list[str]:
    lines = [
        f'    <div class="objectives-{kind}">',
        f"      <h4>{kind.capitalize()}</h4>",
        "      <ul>",
    ]
    for index, item in enumerate(items):
        checkbox_id = f"{_escape(exercise_id)}-{kind}-{index}"
        lines.append(
            f'        <li><input type="checkbox" id="{checkbox_id}" class="objective-checkbox">'
            f'<label for="{checkbox_id}">{_escape(item)}</label></li>'
        )
    lines.extend(["      </ul>", "    </div>"])
    return lines


def _render_objectives(objectives: Objectives, exercise_id: str) -> list[str]:
    lines = [
        f'<section class="exercise-objectives" id="{_escape(exercise_id)}-objectives">',
        "  <h3>🎯 Learning Objectives</h3>",
        '  <div class="objectives-grid">',
    ]
    if objectives.thinking:
        lines.extend(_render_objective_group("thinking", objectives.thinking, exercise_id))
    if objectives.doing:
        lines.extend(_render_objective_group("doing", objectives.doing, exercise_id))
    lines.extend(["  </div>", "</section>"])
    return lines


def _render_hints(hints: list[Hint], reveal: bool, exercise_id: str) -> list[str]:
    lines = [
        f'<section class="exercise-hints" id="{_escape(exercise_id)}-hints">',
        "  <h3>💡 Hints</h3>",
    ]
    for hint in hints:
        summary = f"Hint {hint.level}: {hint.title}" if hint.title else f"Hint {hint.level}"
        lines.extend(
            [
                f'  <details class="hint" data-level="{hint.level}"{_open_attr(reveal)}>',
                f"    <summary>{_escape(summary)}</summary>",
                '    <div class="hint-content">',
                _markdown_html(hint.content),
                "    </div>",
                "  </details>",
            ]
        )
    lines.append("</section>")
    return lines


def _render_list_section(
    css_class: str, heading: str, items: list[str], section_id: str | None = None
) -> list[str]:
    id_attr = f' id="{_escape(section_id)}"' if section_id else ""
    lines = [f'<section class="{css_class}"{id_attr}>', f"  <h3>{heading}</h3>", "  <ul>"]
    lines.extend(f"    <li>{_escape(item)}</li>" for item in items)
    lines.extend(["  </ul>", "</section>"])
    return lines


def _render_footer(exercise_id: str) -> list[str]:
    return [
        '<footer class="exercise-footer">',
        f'  <button class="btn btn-complete" data-exercise-id="{_escape(exercise_id)}">'
        "✓ Mark Complete</button>",
        "</footer>",
    ]


# -----------------------------------------------------------------------------
# Code exercises
# -----------------------------------------------------------------------------


def _render_starter(starter: StarterCode, exercise_id: str) -> list[str]:
    code_id = f"code-{_escape(exercise_id)}"
    lines = [
        f'<section class="exercise-starter" id="{_escape(exercise_id)}-starter">',
        '  <div class="code-header">',
    ]
    if starter.filename:
        lines.append(f'    <span class="filename">{_escape(starter.filename)}</span>')
    lines.extend(
        [
            '    <div class="code-actions">',
            f'      <button class="btn btn-copy" data-target="{code_id}" title="Copy code">'
            "📋 Copy</button>",
            f'      <button class="btn btn-reset" data-target="{code_id}" '
            'title="Reset to original">↺ Reset</button>',
            "    </div>",
            "  </div>",
            # Body left empty; exercises.js fills it from data-original
            f'  <textarea class="code-editor" id="{code_id}" '
            f'data-language="{_escape(starter.language)}" '
            f'data-original="{_escape_multiline(starter.code)}" spellcheck="false"></textarea>',
            "</section>",
        ]
    )
    return lines


def _render_solution(solution: Solution, config: RenderConfig, exercise_id: str) -> list[str]:
    is_open = is_revealed(solution.reveal, config.reveal_solution)
    lines = [
        f'<section class="exercise-solution" id="{_escape(exercise_id)}-solution">',
        f'  <details class="solution" data-reveal="{solution.reveal.value}"{_open_attr(is_open)}>',
        "    <summary>",
        '      <span class="solution-warning">⚠️ Try the exercise first!</span>',
        '      <span class="solution-toggle">Show Solution</span>',
        "    </summary>",
        '    <div class="solution-content">',
        f"      {_code_html(solution.code, solution.language)}",
    ]
    if solution.explanation:
        lines.extend(
            [
                '      <div class="solution-explanation">',
                "        <h4>Explanation</h4>",
                _markdown_html(solution.explanation),
                "      </div>",
            ]
        )
    lines.extend(["    </div>", "  </details>", "</section>"])
    return lines


def _render_local_test_info(language: str) -> list[str]:
    command = LOCAL_TEST_COMMANDS.get(language.lower())
    if command is None:
        return [
            '    <div class="local-test-info">',
            "      <p>Run these tests locally with your project's test runner.</p>",
            "    </div>",
        ]
    return [
        '    <div class="local-test-info">',
        "      <p>Run these tests locally with:</p>",
        f"      <pre><code>{_escape(command)}</code></pre>",
        "    </div>",
    ]


def _render_tests(tests: TestBlock, config: RenderConfig, exercise_id: str) -> list[str]:
    escaped_id = _escape(exercise_id)
    lines = [
        f'<section class="exercise-tests" id="{escaped_id}-tests" data-mode="{tests.mode.value}">',
        "  <h3>🧪 Tests</h3>",
        '  <div class="test-actions">',
    ]
    if tests.mode == TestMode.playground and config.enable_playground:
        lines.append(
            f'    <button class="btn btn-run-tests" data-exercise-id="{escaped_id}" '
            f'data-playground-url="{_escape(config.playground_url)}">▶ Run Tests</button>'
        )
    else:
        lines.extend(_render_local_test_info(tests.language))
    lines.extend(
        [
            "  </div>",
            f'  <div class="test-results" id="results-{escaped_id}" hidden></div>',
            '  <details class="tests-code">',
            "    <summary>View Test Code</summary>",
            f"    {_code_html(tests.code, tests.language)}",
            "  </details>",
            "</section>",
        ]
    )
    return lines


def render_exercise(exercise: Exercise, config: RenderConfig | None = None) -> str:
    """
    Render a code exercise.

    Args:
        exercise: Parsed code exercise (not modified)
        config: Render options; defaults from the environment

    Returns:
        HTML for one <article class="exercise">
    """
    config = config or RenderConfig()
    exercise_id = exercise.metadata.id

    sections = []
    if exercise.description:
        sections.append(("description", "📖 Overview"))
    if exercise.objectives is not None:
        sections.append(("objectives", "🎯 Objectives"))
    if exercise.starter is not None:
        sections.append(("starter", "💻 Code"))
    if exercise.hints:
        sections.append(("hints", "💡 Hints"))
    if exercise.solution is not None:
        sections.append(("solution", "✅ Solution"))
    if exercise.tests is not None:
        sections.append(("tests", "🧪 Tests"))
    if exercise.reflection:
        sections.append(("reflection", "🤔 Reflect"))

    lines = [
        f'<article class="exercise" data-exercise-id="{_escape(exercise_id)}" '
        f'data-difficulty="{exercise.metadata.difficulty.value}">'
    ]
    lines.extend(_render_header(exercise))
    lines.extend(_render_navigation(exercise_id, sections))

    if exercise.description:
        lines.extend(_render_description(exercise.description, exercise_id))
    if exercise.objectives is not None:
        lines.extend(_render_objectives(exercise.objectives, exercise_id))
    if exercise.discussion:
        lines.extend(
            _render_list_section("exercise-discussion", "💬 Discussion", exercise.discussion)
        )
    if exercise.starter is not None:
        lines.extend(_render_starter(exercise.starter, exercise_id))
    if exercise.hints:
        lines.extend(_render_hints(exercise.hints, config.reveal_hints, exercise_id))
    if exercise.solution is not None:
        lines.extend(_render_solution(exercise.solution, config, exercise_id))
    if exercise.tests is not None:
        lines.extend(_render_tests(exercise.tests, config, exercise_id))
    if exercise.reflection:
        lines.extend(
            _render_list_section(
                "exercise-reflection",
                "🤔 Reflection",
                exercise.reflection,
                f"{exercise_id}-reflection",
            )
        )
    if config.enable_progress:
        lines.extend(_render_footer(exercise_id))

    lines.append("</article>")
    return "\n".join(line for line in lines if line) + "\n"


# -----------------------------------------------------------------------------
# Use-case exercises
# -----------------------------------------------------------------------------


def _render_scenario(scenario: Scenario, exercise_id: str) -> list[str]:
    lines = [
        f'<section class="usecase-scenario" id="{_escape(exercise_id)}-scenario">',
        "  <h3>📋 Scenario</h3>",
    ]
    if scenario.organization:
        lines.append(
            '  <p class="scenario-organization"><strong>Organization:</strong> '
            f"{_escape(scenario.organization)}</p>"
        )
    if scenario.content:
        lines.append(_markdown_html(scenario.content))
    if scenario.constraints:
        lines.extend(['  <div class="scenario-constraints">', "    <h4>Constraints</h4>", "    <ul>"])
        lines.extend(f"      <li>{_escape(item)}</li>" for item in scenario.constraints)
        lines.extend(["    </ul>", "  </div>"])
    lines.append("</section>")
    return lines


def _render_context(context: str, exercise_id: str) -> list[str]:
    return [
        f'<section class="usecase-context" id="{_escape(exercise_id)}-context">',
        '  <details class="context">',
        "    <summary>📎 Additional Context</summary>",
        _markdown_html(context),
        "  </details>",
        "</section>",
    ]


def _render_prompt(prompt: UseCasePrompt, exercise_id: str) -> list[str]:
    lines = [
        f'<section class="usecase-prompt" id="{_escape(exercise_id)}-prompt">',
        "  <h3>✍️ Your Task</h3>",
    ]
    if prompt.prompt:
        lines.append(_markdown_html(prompt.prompt))
    if prompt.aspects:
        lines.extend(['  <div class="prompt-aspects">', "    <h4>Address the following</h4>", "    <ul>"])
        lines.extend(f"      <li>{_escape(aspect)}</li>" for aspect in prompt.aspects)
        lines.extend(["    </ul>", "  </div>"])
    lines.append("</section>")
    return lines


def _word_limits(evaluation: EvaluationCriteria) -> str | None:
    low, high = evaluation.min_words, evaluation.max_words
    if low is not None and high is not None:
        return f"{low}–{high} words"
    if low is not None:
        return f"At least {low} words"
    if high is not None:
        return f"At most {high} words"
    return None


def _render_response(evaluation: EvaluationCriteria, exercise_id: str) -> list[str]:
    escaped_id = _escape(exercise_id)
    data_attrs = ""
    if evaluation.min_words is not None:
        data_attrs += f' data-min-words="{evaluation.min_words}"'
    if evaluation.max_words is not None:
        data_attrs += f' data-max-words="{evaluation.max_words}"'

    lines = [
        f'<section class="usecase-response" id="{escaped_id}-response">',
        "  <h3>📝 Your Response</h3>",
        f'  <textarea class="response-editor" id="response-{escaped_id}"{data_attrs} '
        'placeholder="Write your response here..."></textarea>',
        f'  <div class="word-count" id="word-count-{escaped_id}">0 words</div>',
    ]
    limits = _word_limits(evaluation)
    if limits:
        lines.append(f'  <p class="word-limits">{limits}</p>')
    lines.append("</section>")
    return lines


def _render_rubric(evaluation: EvaluationCriteria, exercise_id: str) -> list[str]:
    lines = [
        f'<section class="usecase-rubric" id="{_escape(exercise_id)}-rubric">',
        "  <h3>📊 Evaluation Criteria</h3>",
    ]
    if evaluation.criteria:
        lines.extend(
            [
                '  <table class="rubric">',
                "    <thead><tr><th>Criterion</th><th>Weight</th><th>Description</th></tr></thead>",
                "    <tbody>",
            ]
        )
        for criterion in evaluation.criteria:
            lines.append(
                f"      <tr><td>{_escape(criterion.name)}</td>"
                f'<td class="weight">{criterion.weight}%</td>'
                f"<td>{_escape(criterion.description)}</td></tr>"
            )
        lines.extend(["    </tbody>", "  </table>"])
    if evaluation.key_points:
        lines.extend(['  <div class="key-points">', "    <h4>Key Points</h4>", "    <ul>"])
        lines.extend(f"      <li>{_escape(point)}</li>" for point in evaluation.key_points)
        lines.extend(["    </ul>", "  </div>"])
    if evaluation.pass_threshold is not None:
        lines.append(
            f'  <p class="pass-threshold">Passing score: '
            f"{round(evaluation.pass_threshold * 100)}%</p>"
        )
    lines.append("</section>")
    return lines


def _render_sample_answer(
    sample: SampleAnswer, config: RenderConfig, exercise_id: str
) -> list[str]:
    is_open = is_revealed(sample.reveal, config.reveal_solution)
    lines = [
        f'<section class="usecase-sample" id="{_escape(exercise_id)}-sample">',
        f'  <details class="sample-answer" data-reveal="{sample.reveal.value}"{_open_attr(is_open)}>',
        "    <summary>Show Sample Answer</summary>",
        '    <div class="sample-answer-content">',
    ]
    if sample.expected_score is not None:
        lines.append(
            f'      <p class="expected-score">Expected score: {sample.expected_score:g}</p>'
        )
    lines.extend([_markdown_html(sample.content), "    </div>", "  </details>", "</section>"])
    return lines


def _has_rubric(evaluation: EvaluationCriteria) -> bool:
    return bool(
        evaluation.criteria or evaluation.key_points or evaluation.pass_threshold is not None
    )


def render_usecase(exercise: UseCaseExercise, config: RenderConfig | None = None) -> str:
    """
    Render a use-case exercise.

    Args:
        exercise: Parsed use-case exercise (not modified)
        config: Render options; defaults from the environment

    Returns:
        HTML for one <article class="usecase-exercise">
    """
    config = config or RenderConfig()
    metadata = exercise.metadata
    exercise_id = metadata.id

    sections = []
    if exercise.description:
        sections.append(("description", "📖 Overview"))
    sections.append(("scenario", "📋 Scenario"))
    sections.append(("prompt", "✍️ Task"))
    if exercise.hints:
        sections.append(("hints", "💡 Hints"))
    sections.append(("response", "📝 Response"))
    if _has_rubric(exercise.evaluation):
        sections.append(("rubric", "📊 Rubric"))
    if exercise.sample_answer is not None:
        sections.append(("sample", "✅ Sample"))

    lines = [
        f'<article class="usecase-exercise" data-exercise-id="{_escape(exercise_id)}" '
        f'data-difficulty="{metadata.difficulty.value}" data-domain="{metadata.domain.value}">'
    ]
    lines.extend(_render_header(exercise))
    lines.extend(_render_navigation(exercise_id, sections))

    if exercise.description:
        lines.extend(_render_description(exercise.description, exercise_id))
    if exercise.objectives is not None:
        lines.extend(_render_objectives(exercise.objectives, exercise_id))
    lines.extend(_render_scenario(exercise.scenario, exercise_id))
    if exercise.context:
        lines.extend(_render_context(exercise.context, exercise_id))
    lines.extend(_render_prompt(exercise.prompt, exercise_id))
    if exercise.hints:
        lines.extend(_render_hints(exercise.hints, config.reveal_hints, exercise_id))
    lines.extend(_render_response(exercise.evaluation, exercise_id))
    if _has_rubric(exercise.evaluation):
        lines.extend(_render_rubric(exercise.evaluation, exercise_id))
    if exercise.sample_answer is not None:
        lines.extend(_render_sample_answer(exercise.sample_answer, config, exercise_id))
    if config.enable_progress:
        lines.extend(_render_footer(exercise_id))

    lines.append("</article>")
    return "\n".join(line for line in lines if line) + "\n"


def render(exercise: ParsedExercise, config: RenderConfig | None = None) -> str:
    """Render either kind of exercise to HTML."""
    if isinstance(exercise, UseCaseExercise):
        return render_usecase(exercise, config)
    return render_exercise(exercise, config)
