"""
Lexer for mathexpr.

Converts an expression string into a stream of positioned tokens, pulled
one at a time by the parser.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from enum import StrEnum, auto

from mathexpr.errors import ErrorKind, make_error
from mathexpr.ir import Op


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals
    NUMBER = auto()

    # Reserved: lexed, never accepted by the grammar
    IDENTIFIER = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()

    OPERATOR = auto()

    # End of input
    EOF = auto()


class Token:
    """A single token with its source position."""

    __slots__ = ("kind", "value", "line", "column")

    def __init__(
        self,
        kind: TokenKind,
        value: int | float | str | Op | None,
        line: int,
        column: int,
    ) -> None:
        self.kind = kind
        self.value = value
        self.line = line
        self.column = column

    def describe(self) -> str:
        """Short human-readable form used in diagnostics."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        if self.kind == TokenKind.NUMBER:
            return f"number {self.value}"
        if self.kind == TokenKind.IDENTIFIER:
            return f"identifier {self.value!r}"
        if self.kind == TokenKind.OPERATOR:
            assert isinstance(self.value, Op)
            return f"operator '{self.value.value}'"
        return f"'{self.value}'"

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, line={self.line}, column={self.column})"


_WHITESPACE = " \t\r"

_SINGLE_CHAR: dict[str, tuple[TokenKind, str | Op]] = {
    "(": (TokenKind.LPAREN, "("),
    ")": (TokenKind.RPAREN, ")"),
    "+": (TokenKind.OPERATOR, Op.ADD),
    "-": (TokenKind.OPERATOR, Op.SUB),
    "*": (TokenKind.OPERATOR, Op.MUL),
    "/": (TokenKind.OPERATOR, Op.DIV),
    "^": (TokenKind.OPERATOR, Op.POW),
}

# ASCII only: str.isdigit()/isalpha() accept far more than the grammar does
_INT_RE = re.compile(r"[0-9]+")
_DECIMAL_RE = re.compile(r"[0-9]+(\.[0-9]+)?")
_IDENT_RE = re.compile(r"[A-Za-z]+")


class Lexer:
    """Single-pass, forward-only scanner over one input string.

    Calling ``next_token()`` after the end of input keeps returning EOF.
    """

    def __init__(self, source: str, *, allow_decimals: bool = False) -> None:
        self.source = source
        self.allow_decimals = allow_decimals
        self.pos = 0
        self.line = 1
        self.line_start = 0

    @property
    def column(self) -> int:
        """Column (1-indexed) of the scan position on the current line."""
        return self.pos - self.line_start + 1

    def next_token(self) -> Token:
        """Scan and return the next token."""
        self._skip_whitespace()

        line, column = self.line, self.column
        if self.pos >= len(self.source):
            return Token(TokenKind.EOF, None, line, column)

        c = self.source[self.pos]

        if "0" <= c <= "9":
            number_re = _DECIMAL_RE if self.allow_decimals else _INT_RE
            m = number_re.match(self.source, self.pos)
            assert m is not None
            text = m.group(0)
            self.pos = m.end()
            return Token(TokenKind.NUMBER, _number_value(text), line, column)

        m = _IDENT_RE.match(self.source, self.pos)
        if m is not None:
            self.pos = m.end()
            return Token(TokenKind.IDENTIFIER, m.group(0), line, column)

        if c in _SINGLE_CHAR:
            kind, payload = _SINGLE_CHAR[c]
            self.pos += 1
            return Token(kind, payload, line, column)

        raise make_error(
            ErrorKind.UNEXPECTED_CHARACTER,
            f"Character {c!r} is not part of an arithmetic expression",
            line,
            column,
        )

    def _skip_whitespace(self) -> None:
        source = self.source
        while self.pos < len(source):
            c = source[self.pos]
            if c == "\n":
                self.pos += 1
                self.line += 1
                self.line_start = self.pos
            elif c in _WHITESPACE:
                self.pos += 1
            else:
                break

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including EOF."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.kind == TokenKind.EOF:
                return


def _number_value(text: str) -> int | float:
    if "." in text:
        return float(text)
    try:
        return int(text)
    except ValueError:
        # Longer than the int/str conversion limit; no double holds it either
        return float(text)


def tokenize(source: str, *, allow_decimals: bool = False) -> list[Token]:
    """Tokenize an expression string into a list of tokens, EOF included."""
    return list(Lexer(source, allow_decimals=allow_decimals))
