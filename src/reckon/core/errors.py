"""
Error types for reckon tokenizing, evaluation, and function application.

Every failure a caller can observe is an ``EvaluationError`` carrying an
``ErrorKind`` and the offset of the token being processed. Functions and
environments raise the position-less ``BadArgumentError`` /
``NameNotFoundError``; the engine attaches the position before re-raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    """Flat set of evaluation failure kinds."""

    EXPECT_OPERATOR = "expect_operator"
    NA_EXPRESSION = "na_expression"
    DISALLOWED_UNARY = "disallowed_unary"
    UNFINISHED_EXPRESSION = "unfinished_expression"
    INVALID_TOKEN = "invalid_token"
    UNBALANCED_PARENS = "unbalanced_parens"
    MISPLACED_COMMA = "misplaced_comma"
    BAD_ARGUMENT = "bad_argument"
    NAME_NOT_FOUND = "name_not_found"
    # A broken engine invariant, never caused by input. Report as a bug.
    INTERNAL_ERROR = "internal_error"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: dict[ErrorKind, str] = {
    ErrorKind.EXPECT_OPERATOR: "expected an operator",
    ErrorKind.NA_EXPRESSION: "not an expression",
    ErrorKind.DISALLOWED_UNARY: "not an unary operator",
    ErrorKind.UNFINISHED_EXPRESSION: "unfinished expression",
    ErrorKind.INVALID_TOKEN: "invalid token",
    ErrorKind.UNBALANCED_PARENS: "unbalanced parens",
    ErrorKind.MISPLACED_COMMA: "misplaced comma",
    ErrorKind.BAD_ARGUMENT: "bad argument",
    ErrorKind.NAME_NOT_FOUND: "name not found",
    ErrorKind.INTERNAL_ERROR: "internal error",
}


class ReckonError(Exception):
    """Base exception for all reckon errors."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str = "") -> None:
        self.message = message or self.kind.description
        super().__init__(self.message)


class BadArgumentError(ReckonError):
    """
    Raised by a function that cannot accept its arguments.

    Examples:
    - Wrong number of arguments (``sqrt(1, 2)``)
    - Arguments outside the function's domain (``select(5, 1, 2)``)
    """

    kind = ErrorKind.BAD_ARGUMENT


class NameNotFoundError(ReckonError):
    """Raised by an environment for an unknown or non-settable name."""

    kind = ErrorKind.NAME_NOT_FOUND

    def __init__(self, name: str, message: str = "") -> None:
        self.name = name
        super().__init__(message or f"name not found: {name!r}")


class EvaluationError(ReckonError):
    """
    A failed evaluation, positioned at the offending token.

    ``position`` is an index into the source ``str`` (a character offset).
    Use ``byte_position`` for the offset into the UTF-8 encoded source.
    """

    def __init__(self, kind: ErrorKind, position: int, message: str = "") -> None:
        self.kind = kind
        self.position = position
        super().__init__(message or kind.description)

    def __str__(self) -> str:
        return f"error at position {self.position}: {self.message}"

    def __repr__(self) -> str:
        return f"EvaluationError({self.kind!s}, position={self.position})"

    def byte_position(self, source: str) -> int:
        """Offset of the error within ``source`` encoded as UTF-8."""
        return len(source[: self.position].encode("utf-8"))

    def diagnostic(self, source: str) -> str:
        """
        Render the offending line, a caret and the error description.

        Example for ``"1+"``::

            1+
              ^
            error: unfinished expression
        """
        return CaretDiagnostic.locate(source, self.position).format(self.kind, show_input=True)

    def compact_diagnostic(self, source: str) -> str:
        """Like ``diagnostic`` without the input line, for prompts that already show it."""
        return CaretDiagnostic.locate(source, self.position).format(self.kind, show_input=False)


@dataclass
class CaretDiagnostic:
    """
    Location of an error within its source line.

    Attributes:
        line: Text of the line containing the error position
        column: 0-indexed offset of the caret within that line
    """

    line: str
    column: int

    @classmethod
    def locate(cls, source: str, position: int) -> CaretDiagnostic:
        line_start = source.rfind("\n", 0, position) + 1
        line_end = source.find("\n", line_start)
        if line_end == -1:
            line_end = len(source)
        return cls(line=source[line_start:line_end], column=max(position - line_start, 0))

    def format(self, kind: ErrorKind, show_input: bool = True) -> str:
        lines = []
        if show_input:
            lines.append(self.line)
        lines.append(" " * self.column + "^")
        lines.append(f"error: {kind.description}")
        return "\n".join(lines) + "\n"
