"""
Expression tree types for mathexpr.

Supports:
- Integer literals (and decimal literals when enabled): 42, 3.5
- Unary sign operators: +x, -x
- Binary arithmetic: +, -, *, /, ^
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class Op(StrEnum):
    """Arithmetic operators.

    Precedence and associativity are not properties of the operator alone;
    the parser derives them from the operator and its unary/binary position.
    """

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"


UNARY_OPS = frozenset({Op.ADD, Op.SUB})


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class NumberNode(BaseModel):
    """A numeric literal."""

    value: int | float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.value)


class UnaryNode(BaseModel):
    """Unary operation: op operand."""

    op: Op
    operand: AstNode

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return render(self)


class BinaryNode(BaseModel):
    """Binary operation: left op right."""

    left: AstNode
    op: Op
    right: AstNode

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return render(self)


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

AstNode = NumberNode | UnaryNode | BinaryNode

# Rebuild models for recursive forward references
UnaryNode.model_rebuild()
BinaryNode.model_rebuild()


def render(node: AstNode) -> str:
    """Fully parenthesised infix form, e.g. ``((1 + 2) * (-3))``.

    Iterative so that very deep trees render without hitting the recursion
    limit.
    """
    parts: list[str] = []
    stack: list[AstNode | str] = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, NumberNode):
            parts.append(str(item.value))
        elif isinstance(item, UnaryNode):
            stack.extend((")", item.operand, f"({item.op.value}"))
        else:
            stack.extend((")", item.right, f" {item.op.value} ", item.left, "("))
    return "".join(parts)
