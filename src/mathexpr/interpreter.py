"""
Tree-walking interpreter for mathexpr.

Reduces an expression AST to a float. Pure evaluation, no I/O, no state
shared between calls. Floating-point edge cases follow IEEE-754 instead of
raising: division by zero gives a signed infinity (or NaN for 0/0), and a
negative base raised to a fractional power gives NaN.
"""

from __future__ import annotations

import logging
import math

from mathexpr.config import MathexprConfig
from mathexpr.errors import InternalInvariantError
from mathexpr.ir import AstNode, BinaryNode, NumberNode, Op, UnaryNode
from mathexpr.parser import parse

logger = logging.getLogger(__name__)


def evaluate(source: str, config: MathexprConfig | None = None) -> float:
    """Lex, parse and interpret an expression string.

    Args:
        source: Expression text, possibly spanning several lines.
        config: Optional settings.

    Returns:
        The value of the expression.

    Raises:
        ExpressionError: On the first lexing or parsing error.
    """
    result = interpret(parse(source, config))
    logger.debug("Evaluated %r = %r", source, result)
    return result


def interpret(node: AstNode) -> float:
    """Compute the value of an AST.

    Walks the tree in post-order with an explicit stack, so a long chain of
    operators is limited by memory rather than the interpreter's recursion
    limit.
    """
    values: list[float] = []
    # (node, children already evaluated)
    stack: list[tuple[AstNode, bool]] = [(node, False)]

    while stack:
        current, ready = stack.pop()

        if isinstance(current, NumberNode):
            values.append(_to_float(current.value))
        elif isinstance(current, UnaryNode):
            if ready:
                values.append(_apply_unary(current.op, values.pop()))
            else:
                stack.append((current, True))
                stack.append((current.operand, False))
        elif isinstance(current, BinaryNode):
            if ready:
                right = values.pop()
                left = values.pop()
                values.append(_apply_binary(current.op, left, right))
            else:
                stack.append((current, True))
                stack.append((current.right, False))
                stack.append((current.left, False))
        else:
            raise InternalInvariantError(f"Unknown node type: {type(current).__name__}")

    return values.pop()


def _to_float(value: int | float) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf


def _apply_unary(op: Op, operand: float) -> float:
    if op == Op.ADD:
        return operand
    if op == Op.SUB:
        return -operand
    raise InternalInvariantError(f"Unexpected unary operator {op.value!r}")


def _apply_binary(op: Op, left: float, right: float) -> float:
    if op == Op.ADD:
        return left + right
    if op == Op.SUB:
        return left - right
    if op == Op.MUL:
        return left * right
    if op == Op.DIV:
        return divide(left, right)
    if op == Op.POW:
        return power(left, right)

    raise InternalInvariantError(f"Unknown binary operator {op!r}")


def divide(left: float, right: float) -> float:
    """IEEE-754 division; Python raises ZeroDivisionError instead."""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        # Sign is the xor of both operand signs, including the sign of zero
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def power(base: float, exponent: float) -> float:
    """IEEE-754 pow.

    ``math.pow`` raises ValueError/OverflowError where C's pow() returns
    NaN or an infinity; ``**`` would return a complex number for a
    negative base with a fractional exponent.
    """
    try:
        return math.pow(base, exponent)
    except ValueError:
        if base == 0.0 and exponent < 0.0:
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan
    except OverflowError:
        if base < 0.0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value.is_integer() and value % 2 == 1
