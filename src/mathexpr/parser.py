"""
Operator-precedence parser for mathexpr.

Grammar:
    expr     → unary_op* term (bin_op unary_op* term)*
    term     → NUMBER | "(" expr ")"
    unary_op → "+" | "-"
    bin_op   → "+" | "-" | "*" | "/" | "^"

Precedence (high to low):
    ^          4  right-associative
    unary + -  3
    * /        2  left-associative
    binary + - 1  left-associative

The parser is a shunting-yard variant that builds tree nodes instead of
emitting postfix: an operand stack of finished nodes and a stack of pending
operators and open-parenthesis markers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mathexpr.config import MathexprConfig
from mathexpr.errors import ErrorKind, ExpressionError, make_error
from mathexpr.ir import UNARY_OPS, AstNode, BinaryNode, NumberNode, Op, UnaryNode
from mathexpr.lexer import Lexer, Token, TokenKind

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pending operator stack entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PendingUnary:
    """A prefix sign operator waiting for its operand."""

    op: Op
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class PendingBinary:
    """An infix operator waiting for its right operand."""

    op: Op
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class PendingGroup:
    """An open parenthesis; reduction never crosses it."""

    line: int
    column: int


PendingOp = PendingUnary | PendingBinary | PendingGroup

UNARY_PRECEDENCE = 3

BINARY_PRECEDENCE: dict[Op, int] = {
    Op.POW: 4,
    Op.MUL: 2,
    Op.DIV: 2,
    Op.ADD: 1,
    Op.SUB: 1,
}


def precedence(pending: PendingUnary | PendingBinary) -> int:
    """Binding strength of a pending operator (higher binds tighter)."""
    if isinstance(pending, PendingUnary):
        return UNARY_PRECEDENCE
    return BINARY_PRECEDENCE[pending.op]


def _reduces_before(top: PendingOp, incoming: PendingBinary) -> bool:
    """Whether ``top`` must be attached before ``incoming`` is pushed."""
    if isinstance(top, PendingGroup):
        return False
    top_prec = precedence(top)
    incoming_prec = precedence(incoming)
    if top_prec > incoming_prec:
        return True
    # Equal precedence groups left-to-right, except ^ which groups right-to-left
    return top_prec == incoming_prec and top.op != Op.POW


class Parser:
    """Single-lookahead parser pulling tokens from one Lexer."""

    def __init__(self, source: str, config: MathexprConfig | None = None) -> None:
        config = config or MathexprConfig()
        self.lexer = Lexer(source, allow_decimals=config.allow_decimals)
        self.current: Token = self.lexer.next_token()

    def advance(self) -> Token:
        """Consume the current token and buffer the next one."""
        tok = self.current
        if tok.kind != TokenKind.EOF:
            self.current = self.lexer.next_token()
        return tok

    def parse_expression(self) -> AstNode:
        """Parse the whole input as one expression.

        Raises:
            ParseError: If the token stream is not a valid expression.
            LexError: If the input holds a character outside the language.
        """
        operands: list[AstNode] = []
        pending: list[PendingOp] = []
        depth = 0
        expect_operand = True

        while True:
            tok = self.current

            if expect_operand:
                if tok.kind == TokenKind.OPERATOR:
                    assert isinstance(tok.value, Op)
                    if tok.value not in UNARY_OPS:
                        raise make_error(
                            ErrorKind.INVALID_UNARY_OPERATOR,
                            f"Operator '{tok.value.value}' needs a left operand; "
                            "only '+' and '-' may be used as a sign",
                            tok.line,
                            tok.column,
                        )
                    # Prefix operators have nothing to their left to reduce
                    pending.append(PendingUnary(tok.value, tok.line, tok.column))
                    self.advance()
                elif tok.kind == TokenKind.NUMBER:
                    assert isinstance(tok.value, (int, float))
                    operands.append(NumberNode(value=tok.value))
                    self.advance()
                    expect_operand = False
                elif tok.kind == TokenKind.LPAREN:
                    pending.append(PendingGroup(tok.line, tok.column))
                    depth += 1
                    self.advance()
                else:
                    raise _unexpected(tok, "a number or '('")
                continue

            if tok.kind == TokenKind.OPERATOR:
                assert isinstance(tok.value, Op)
                incoming = PendingBinary(tok.value, tok.line, tok.column)
                while pending and _reduces_before(pending[-1], incoming):
                    _reduce(pending.pop(), operands)
                pending.append(incoming)
                self.advance()
                expect_operand = True
            elif tok.kind == TokenKind.RPAREN:
                if depth == 0:
                    raise make_error(
                        ErrorKind.MISMATCHED_PAREN,
                        "')' has no matching '('",
                        tok.line,
                        tok.column,
                    )
                self._close_group(tok, operands, pending)
                depth -= 1
                self.advance()
            elif tok.kind == TokenKind.EOF:
                if depth > 0:
                    group = next(p for p in reversed(pending) if isinstance(p, PendingGroup))
                    raise make_error(
                        ErrorKind.UNCLOSED_PAREN,
                        f"'(' opened at line {group.line}, column {group.column} is never closed",
                        tok.line,
                        tok.column,
                    )
                while pending:
                    top = pending.pop()
                    assert not isinstance(top, PendingGroup)
                    _reduce(top, operands)
                if len(operands) != 1:
                    raise _unexpected(tok, "a complete expression")
                return operands[0]
            else:
                raise _unexpected(tok, "an operator, ')' or end of input")

    def _close_group(self, tok: Token, operands: list[AstNode], pending: list[PendingOp]) -> None:
        """Reduce everything down to and including the innermost '('."""
        while pending:
            top = pending.pop()
            if isinstance(top, PendingGroup):
                return
            _reduce(top, operands)
        raise make_error(
            ErrorKind.MISMATCHED_PAREN,
            "')' has no matching '('",
            tok.line,
            tok.column,
        )


def _reduce(pending: PendingUnary | PendingBinary, operands: list[AstNode]) -> None:
    """Attach a pending operator to its operands and push the new node."""
    needed = 1 if isinstance(pending, PendingUnary) else 2
    if len(operands) < needed:
        raise make_error(
            ErrorKind.MISSING_OPERAND,
            f"Operator '{pending.op.value}' is missing an operand",
            pending.line,
            pending.column,
        )

    if isinstance(pending, PendingUnary):
        operands.append(UnaryNode(op=pending.op, operand=operands.pop()))
        return

    # Right comes off the stack first
    right = operands.pop()
    left = operands.pop()
    operands.append(BinaryNode(left=left, op=pending.op, right=right))


def _unexpected(tok: Token, expected: str) -> ExpressionError:
    if tok.kind == TokenKind.IDENTIFIER:
        description = (
            f"Expected {expected}, got {tok.describe()}; "
            "names are reserved and cannot be evaluated"
        )
    else:
        description = f"Expected {expected}, got {tok.describe()}"
    return make_error(ErrorKind.UNEXPECTED_TOKEN, description, tok.line, tok.column)


def parse(source: str, config: MathexprConfig | None = None) -> AstNode:
    """Parse an expression string into an AST.

    Args:
        source: Expression string (e.g., "2 + 3 * 4")
        config: Optional settings; decimals are rejected by default.

    Returns:
        Root node of the parsed expression.

    Raises:
        ParseError: If the expression is invalid.
        LexError: If tokenization fails.
    """
    tree = Parser(source, config).parse_expression()
    logger.debug("Parsed %r as %s", source, tree)
    return tree
