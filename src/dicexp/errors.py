"""Errors raised while interpreting dice expressions."""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    DECIMAL_NOT_ALLOWED = "decimal_not_allowed"
    UNMATCHED_PARENTHESIS = "unmatched_parenthesis"
    MISSING_OPERAND = "missing_operand"
    NUMERIC_PARSE_FAILURE = "numeric_parse_failure"
    UNEXPECTED_TOKEN = "unexpected_token"
    DIVISION_BY_ZERO = "division_by_zero"
    INVALID_DIE = "invalid_die"
    NESTING_TOO_DEEP = "nesting_too_deep"


class DiceSyntaxError(ValueError):
    """A dice expression could not be interpreted.

    One error type covers every failure; ``kind`` says which. ``line`` and
    ``col`` are 1-based and point at the offending character when known.
    An underlying exception (e.g. a failed ``int()``) is chained with
    ``raise ... from`` and exposed as ``cause``.
    """

    def __init__(
        self,
        kind: ErrorKind,
        msg: str | None = None,
        line: int | None = None,
        col: int | None = None,
    ):
        super().__init__(msg)
        self.kind = kind
        self.msg = msg
        self.line = line
        self.col = col

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def __str__(self) -> str:
        text = f"SyntaxError: {self.msg or 'Failed to parse string'}"
        if self.line is not None:
            text += f"; error on line {self.line}"
            if self.col is not None:
                text += f", column {self.col}"
        if self.cause is not None:
            text += f"\n\tCaused by: {self.cause}"
        return text


class InvalidArgumentError(ValueError):
    """Conflicting command-line options."""

    def __str__(self) -> str:
        return f"InvalidArgumentError: {self.args[0] if self.args else ''}"
