"""
Error types for mathexpr lexing, parsing, and interpretation.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Kinds of user-facing diagnostics, one per failure class."""

    # Lexing
    UNEXPECTED_CHARACTER = "unexpected_character"

    # Parsing
    UNEXPECTED_TOKEN = "unexpected_token"
    UNCLOSED_PAREN = "unclosed_paren"
    MISMATCHED_PAREN = "mismatched_paren"
    MISSING_OPERAND = "missing_operand"
    INVALID_UNARY_OPERATOR = "invalid_unary_operator"


_TITLES: dict[ErrorKind, str] = {
    ErrorKind.UNEXPECTED_CHARACTER: "Unexpected character",
    ErrorKind.UNEXPECTED_TOKEN: "Unexpected token",
    ErrorKind.UNCLOSED_PAREN: "Unclosed parenthesis",
    ErrorKind.MISMATCHED_PAREN: "Mismatched parenthesis",
    ErrorKind.MISSING_OPERAND: "Missing operand",
    ErrorKind.INVALID_UNARY_OPERATOR: "Invalid unary operator",
}


class ExpressionError(Exception):
    """
    Base exception for all user-facing mathexpr errors.

    Attributes:
        kind: Failure class
        title: Short heading derived from the kind
        description: Human-readable explanation
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    def __init__(self, kind: ErrorKind, description: str, *, line: int, column: int):
        self.kind = kind
        self.title = _TITLES[kind]
        self.description = description
        self.line = line
        self.column = column
        super().__init__(self.format())

    def format(self) -> str:
        """
        Format the error for display.

        Returns:
            Formatted string like: "Unexpected token at line 1, column 3\\n..."
        """
        return f"{self.title} at line {self.line}, column {self.column}\n{self.description}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.kind!s}, {self.description!r}, "
            f"line={self.line}, column={self.column})"
        )


class LexError(ExpressionError):
    """
    Raised when input text cannot be scanned into tokens.

    Examples:
    - Characters outside the accepted set
    - A decimal point without a following digit
    """

    pass


class ParseError(ExpressionError):
    """
    Raised when a token stream does not form a valid expression.

    Examples:
    - Operand expected but operator, ')' or end of input found
    - Unbalanced parentheses
    - '*', '/' or '^' used as a prefix operator
    """

    pass


class InternalInvariantError(RuntimeError):
    """
    Raised when the interpreter meets a tree the parser can never build.

    Signals a parser bug, not bad input. Not an ExpressionError, and
    never reported as a diagnostic.
    """


_LEX_KINDS = frozenset({ErrorKind.UNEXPECTED_CHARACTER})


def make_error(kind: ErrorKind, description: str, line: int, column: int) -> ExpressionError:
    """
    Helper to create the stage-appropriate error for a kind.

    Args:
        kind: Failure class
        description: Error description
        line: Line number (1-indexed)
        column: Column number (1-indexed)

    Returns:
        LexError for scanning failures, ParseError otherwise
    """
    cls = LexError if kind in _LEX_KINDS else ParseError
    return cls(kind, description, line=line, column=column)
