# mdbook_exercises/exercises/directives.py
"""
Small parsers for directive opening lines and code fences.

Directive line:   ::: hint level=2 title="Borrowing rules"
Fence info:       ```rust,filename=src/main.rs,editable
"""

import re
from dataclasses import dataclass, field

DIRECTIVE_MARKER = ":::"
FENCE_MARKER = "```"

# One attribute token: key, key=value or key="quoted value".
# An unterminated quote runs to the end of the line.
_ATTRIBUTE_RE = re.compile(
    r'\s*(?P<key>[^=\s]*)(?:=(?:"(?P<quoted>[^"]*)"?|(?P<bare>\S*)))?'
)


@dataclass
class Directive:
    """An opened `::: name attrs` directive."""

    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    line: int = 0  # 1-indexed line of the opening marker


def parse_directive_start(line: str, line_number: int) -> Directive | None:
    """
    Recognize a directive opening line.

    Args:
        line: One document line, without its line break
        line_number: 1-indexed position of the line

    Returns:
        Directive, or None for prose and for bare `:::` closers
    """
    stripped = line.strip()
    if not stripped.startswith(DIRECTIVE_MARKER):
        return None

    rest = stripped[len(DIRECTIVE_MARKER) :].strip()
    if not rest or rest.startswith(":"):
        return None

    parts = rest.split(None, 1)
    name = parts[0]
    attributes = parse_inline_attributes(parts[1] if len(parts) > 1 else "")
    return Directive(name=name, attributes=attributes, line=line_number)


def is_directive_close(line: str) -> bool:
    """A closer is a bare `:::` on its own line."""
    return line.strip() == DIRECTIVE_MARKER


def parse_inline_attributes(text: str) -> dict[str, str]:
    """
    Parse `key=value key="quoted value" flag` into a dict.

    Bare keys become presence flags with the value "true". Quoted values
    end at the next double quote (no escapes). A repeated key keeps the
    last value.
    """
    attributes: dict[str, str] = {}
    pos = 0
    while pos < len(text):
        match = _ATTRIBUTE_RE.match(text, pos)
        pos = match.end()

        key = match.group("key")
        if not key:
            continue

        if match.group("quoted") is not None:
            attributes[key] = match.group("quoted")
        elif match.group("bare") is not None:
            attributes[key] = match.group("bare")
        else:
            attributes[key] = "true"
    return attributes


def parse_fence_info(info: str) -> tuple[str, dict[str, str]]:
    """
    Split a fence info string into (language, attributes).

    Tokens are comma separated. The first token is the language unless it
    contains `=`; every other token is `key=value` or a bare flag.
    """
    language = ""
    attributes: dict[str, str] = {}
    for index, raw in enumerate(info.split(",")):
        token = raw.strip()
        if not token:
            continue
        if index == 0 and "=" not in token:
            language = token
            continue
        key, sep, value = token.partition("=")
        if sep:
            attributes[key.strip()] = value.strip()
        else:
            attributes[token] = "true"
    return language, attributes


def _fence_info(line: str) -> str:
    return line.strip().lstrip("`").strip()


def extract_code_block(content: str) -> tuple[str | None, str]:
    """
    Pull the first fenced code block out of a directive body.

    Returns:
        (info string or None, code). The code is empty when the body has
        no fence. Anything after the closing fence is ignored here.
    """
    info = None
    code_lines = []
    in_code = False

    for line in content.splitlines():
        if line.strip().startswith(FENCE_MARKER):
            if in_code:
                break
            in_code = True
            info = _fence_info(line) or None
        elif in_code:
            code_lines.append(line)

    return info, "\n".join(code_lines)


def first_fence_info(content: str) -> str | None:
    """Info string of the first fence-looking line, if it has one."""
    for line in content.splitlines():
        if line.strip().startswith(FENCE_MARKER):
            return _fence_info(line) or None
    return None


def extract_explanation(content: str) -> str | None:
    """
    Return the Markdown that follows the first complete code block.

    A leading "### Explanation" heading is dropped.
    """
    in_code = False
    found_code = False
    explanation_lines = []

    for line in content.splitlines():
        if line.strip().startswith(FENCE_MARKER):
            if in_code:
                in_code = False
                found_code = True
            else:
                in_code = True
        elif found_code and not in_code:
            explanation_lines.append(line)

    explanation = "\n".join(explanation_lines).strip()
    explanation = explanation.removeprefix("### Explanation").strip()
    return explanation or None
