"""
mathexpr: arithmetic expression evaluation with line/column diagnostics.

Lexer, parser, and interpreter for integer arithmetic with
``+ - * / ^``, parentheses, and unary signs.

Usage:
    from mathexpr import evaluate

    evaluate("2 ^ 3 ^ 2")
    # 512.0
"""

from mathexpr.config import MathexprConfig, load_config
from mathexpr.errors import (
    ErrorKind,
    ExpressionError,
    InternalInvariantError,
    LexError,
    ParseError,
)
from mathexpr.interpreter import evaluate, interpret
from mathexpr.lexer import Lexer, Token, TokenKind, tokenize
from mathexpr.parser import Parser, parse

__all__ = [
    "ErrorKind",
    "ExpressionError",
    "InternalInvariantError",
    "LexError",
    "Lexer",
    "MathexprConfig",
    "ParseError",
    "Parser",
    "Token",
    "TokenKind",
    "evaluate",
    "interpret",
    "load_config",
    "parse",
    "tokenize",
]
