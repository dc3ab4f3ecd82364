# mdbook_exercises/exercises/errors.py
"""Errors raised while parsing exercise Markdown.

Every error aborts the parse call that raised it; no partial record is
returned.
"""


class ParseError(Exception):
    """Base class for all exercise parse failures."""

    pass


class MissingFieldError(ParseError):
    """Raised when a required key is absent from a block."""

    def __init__(self, block: str, field: str):
        self.block = block
        self.field = field
        super().__init__(f"Missing required field '{field}' in {block} block")


class InvalidAttributeError(ParseError):
    """Raised when a recognized attribute holds a value outside its domain."""

    def __init__(self, attribute: str, value: str):
        self.attribute = attribute
        self.value = value
        super().__init__(f"Invalid attribute value '{value}' for '{attribute}'")


class UnclosedBlockError(ParseError):
    """Raised when the document ends with a directive still open."""

    def __init__(self, block: str, line: int):
        self.block = block
        self.line = line  # 1-indexed line of the opening directive
        super().__init__(
            f"Unclosed directive block '{block}' starting at line {line}"
        )


class DuplicateBlockError(ParseError):
    """Raised in strict mode when a single-occurrence block repeats."""

    def __init__(self, block_type: str, line: int | None = None):
        self.block_type = block_type
        self.line = line
        super().__init__(f"Duplicate block type '{block_type}' (only one allowed)")


class YamlBlockError(ParseError):
    """Raised when a block's YAML payload can't be parsed.

    The PyYAML exception is kept on `source` and chained as __cause__.
    """

    def __init__(self, block: str, source: Exception):
        self.block = block
        self.source = source
        super().__init__(f"YAML parse error in {block} block: {source}")


class InvalidHintLevelError(ParseError):
    """Raised when a hint's level attribute isn't a small non-negative integer."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid hint level: {value}")


class UnknownExerciseTypeError(ParseError):
    """Raised when neither top-level directive appears outside code."""

    def __init__(self):
        super().__init__(
            "Unknown exercise type. Must contain either '::: exercise' or '::: usecase'"
        )
