"""
mathexpr CLI.

One-shot commands around the evaluation pipeline:

- eval: print the value of an expression
- tokens: show the token stream
- tree: show the parsed AST
"""

from __future__ import annotations

import logging
import platform
import sys
import tomllib
from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from mathexpr._version import get_version
from mathexpr.config import MathexprConfig, find_config, load_config
from mathexpr.errors import ExpressionError
from mathexpr.interpreter import evaluate
from mathexpr.ir import AstNode, BinaryNode, NumberNode, UnaryNode
from mathexpr.lexer import Lexer
from mathexpr.parser import parse

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="Evaluate arithmetic expressions with + - * / ^, parentheses and signs.",
    no_args_is_help=True,
)

EXPRESSION_ARG = typer.Argument(
    None, help="Expression to evaluate; '-' or omitted reads all of stdin"
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"mathexpr version {get_version()}")
        typer.echo(f"Python {platform.python_implementation()} {platform.python_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version information",
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="mathexpr.toml or pyproject.toml to read settings from"
    ),
    decimals: bool = typer.Option(
        False, "--decimals", "-d", help="Accept decimal literals such as 2.5"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """mathexpr CLI main callback for global options."""
    try:
        config = load_config(config_path) if config_path else find_config()
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        err_console.print(
            f"Invalid configuration: {e}", markup=False, highlight=False, soft_wrap=True
        )
        raise typer.Exit(code=1) from None
    if decimals:
        config = config.model_copy(update={"allow_decimals": True})

    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.obj = config


def _read_source(expression: str | None) -> str:
    if expression is None or expression == "-":
        return sys.stdin.read()
    return expression


def _report(error: ExpressionError) -> NoReturn:
    err_console.print(error.format(), markup=False, highlight=False, soft_wrap=True)
    raise typer.Exit(code=1)


@app.command("eval")
def eval_command(
    ctx: typer.Context,
    expression: str | None = EXPRESSION_ARG,
) -> None:
    """Evaluate an expression and print its value."""
    config: MathexprConfig = ctx.obj
    try:
        value = evaluate(_read_source(expression), config)
    except ExpressionError as e:
        _report(e)
    typer.echo(format_result(value))


@app.command("tokens")
def tokens_command(
    ctx: typer.Context,
    expression: str | None = EXPRESSION_ARG,
) -> None:
    """Print the token stream of an expression."""
    config: MathexprConfig = ctx.obj
    table = Table(title="Tokens")
    table.add_column("Kind")
    table.add_column("Value")
    table.add_column("Line", justify="right")
    table.add_column("Column", justify="right")

    try:
        for tok in Lexer(_read_source(expression), allow_decimals=config.allow_decimals):
            value = "" if tok.value is None else str(tok.value)
            table.add_row(str(tok.kind), value, str(tok.line), str(tok.column))
    except ExpressionError as e:
        _report(e)
    console.print(table)


@app.command("tree")
def tree_command(
    ctx: typer.Context,
    expression: str | None = EXPRESSION_ARG,
) -> None:
    """Print the parsed AST of an expression."""
    config: MathexprConfig = ctx.obj
    try:
        node = parse(_read_source(expression), config)
    except ExpressionError as e:
        _report(e)
    console.print(build_tree(node), highlight=False)


def build_tree(node: AstNode) -> Tree:
    """Render an AST as a rich Tree."""
    root = Tree(_label(node))
    stack: list[tuple[AstNode, Tree]] = [(node, root)]
    while stack:
        current, branch = stack.pop()
        for child in _children(current):
            stack.append((child, branch.add(_label(child))))
    return root


def _label(node: AstNode) -> str:
    if isinstance(node, NumberNode):
        return str(node.value)
    if isinstance(node, UnaryNode):
        return f"unary {node.op.value}"
    return node.op.value


def _children(node: AstNode) -> tuple[AstNode, ...]:
    if isinstance(node, UnaryNode):
        return (node.operand,)
    if isinstance(node, BinaryNode):
        return (node.left, node.right)
    return ()


def format_result(value: float) -> str:
    """Format a result the way Python prints floats (14.0, inf, nan)."""
    return repr(value)


def main() -> None:
    app(standalone_mode=True)


if __name__ == "__main__":
    main()
