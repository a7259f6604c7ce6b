"""Tests for the mathexpr interpreter and the evaluate() entry point.

Covers:
- Arithmetic, precedence and associativity end to end
- IEEE-754 edge cases (no exceptions for division by zero or bad powers)
- Internal invariant violations
- Reentrancy
"""

from __future__ import annotations

import math
import struct
import threading

import pytest

from mathexpr.config import MathexprConfig
from mathexpr.errors import ErrorKind, ExpressionError, InternalInvariantError
from mathexpr.interpreter import divide, evaluate, interpret, power
from mathexpr.ir import BinaryNode, NumberNode, Op, UnaryNode


class TestEvaluateArithmetic:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("2+3*4", 14.0),
            ("(2+3)*4", 20.0),
            ("2^3^2", 512.0),
            ("(2^3)^2", 64.0),
            ("-2^2", -4.0),
            ("(-2)^2", 4.0),
            ("-2*3", -6.0),
            ("10-4-3", 3.0),
            ("100/10/5", 2.0),
            ("7/2", 3.5),
            ("2^-1", 0.5),
            ("--3", 3.0),
            ("+-+4", -4.0),
            ("1 +\n2 *\n3", 7.0),
        ],
    )
    def test_values(self, source: str, expected: float) -> None:
        assert evaluate(source) == expected

    def test_result_is_float(self) -> None:
        assert isinstance(evaluate("3"), float)

    def test_decimals_when_enabled(self) -> None:
        assert evaluate("2.5*2", MathexprConfig(allow_decimals=True)) == 5.0


class TestFloatSemantics:
    """Floating-point edge cases propagate special values instead of raising."""

    def test_divide_by_zero_positive(self) -> None:
        assert evaluate("1/0") == math.inf

    def test_divide_by_zero_negative(self) -> None:
        assert evaluate("-1/0") == -math.inf

    def test_divide_by_negative_zero(self) -> None:
        assert evaluate("1/-0") == -math.inf

    def test_zero_over_zero(self) -> None:
        assert math.isnan(evaluate("0/0"))

    def test_negative_base_fractional_exponent(self) -> None:
        assert math.isnan(evaluate("(-8)^(1/3)"))

    def test_power_overflow(self) -> None:
        assert evaluate("10^400") == math.inf

    def test_power_overflow_negative_odd(self) -> None:
        assert evaluate("(-10)^401") == -math.inf

    def test_power_overflow_negative_even(self) -> None:
        assert evaluate("(-10)^400") == math.inf

    def test_zero_to_negative_power(self) -> None:
        assert evaluate("0^-1") == math.inf

    def test_negative_zero_to_negative_odd_power(self) -> None:
        assert evaluate("(-0)^-1") == -math.inf

    def test_huge_literal(self) -> None:
        assert evaluate("9" * 400) == math.inf

    def test_literal_past_conversion_limit(self) -> None:
        assert evaluate("9" * 5000) == math.inf

    def test_inf_minus_inf(self) -> None:
        assert math.isnan(evaluate("1/0 - 1/0"))

    def test_divide_helper_nan_numerator(self) -> None:
        assert math.isnan(divide(math.nan, 0.0))

    def test_power_helper_regular(self) -> None:
        assert power(2.0, 10.0) == 1024.0


class TestInterpret:
    """interpret() works directly on hand-built trees."""

    def test_number(self) -> None:
        assert interpret(NumberNode(value=5)) == 5.0

    def test_unary_plus(self) -> None:
        assert interpret(UnaryNode(op=Op.ADD, operand=NumberNode(value=5))) == 5.0

    def test_nested(self) -> None:
        tree = BinaryNode(
            left=UnaryNode(op=Op.SUB, operand=NumberNode(value=2)),
            op=Op.POW,
            right=NumberNode(value=2),
        )
        assert interpret(tree) == 4.0

    @pytest.mark.parametrize("op", [Op.MUL, Op.DIV, Op.POW])
    def test_invalid_unary_is_internal_error(self, op: Op) -> None:
        node = UnaryNode(op=op, operand=NumberNode(value=1))
        with pytest.raises(InternalInvariantError):
            interpret(node)

    def test_internal_error_is_not_a_diagnostic(self) -> None:
        assert not issubclass(InternalInvariantError, ExpressionError)


class TestDeepExpressions:
    """Evaluation depth is not bounded by the recursion limit."""

    def test_long_sum(self) -> None:
        assert evaluate("+".join(["1"] * 10_000)) == 10_000.0

    def test_long_chain_of_signs(self) -> None:
        assert evaluate("-" * 10_000 + "1") == 1.0
        assert evaluate("-" * 10_001 + "1") == -1.0

    def test_deeply_nested_parens(self) -> None:
        assert evaluate("(" * 10_000 + "1" + "+1)" * 10_000) == 10_001.0

    def test_right_leaning_powers(self) -> None:
        assert evaluate("^".join(["1"] * 10_000)) == 1.0

    def test_hand_built_chain(self) -> None:
        tree: BinaryNode | NumberNode = NumberNode(value=0)
        for _ in range(10_000):
            tree = BinaryNode(left=tree, op=Op.SUB, right=NumberNode(value=1))
        assert interpret(tree) == -10_000.0


class TestEvaluateErrors:
    """evaluate() surfaces the first error from any stage."""

    def test_trailing_operator(self) -> None:
        with pytest.raises(ExpressionError) as exc_info:
            evaluate("1+")
        assert exc_info.value.kind == ErrorKind.UNEXPECTED_TOKEN

    def test_unclosed(self) -> None:
        with pytest.raises(ExpressionError) as exc_info:
            evaluate("(1+2")
        assert exc_info.value.kind == ErrorKind.UNCLOSED_PAREN

    def test_mismatched(self) -> None:
        with pytest.raises(ExpressionError) as exc_info:
            evaluate("1+2)")
        assert exc_info.value.kind == ErrorKind.MISMATCHED_PAREN

    def test_bad_character(self) -> None:
        with pytest.raises(ExpressionError) as exc_info:
            evaluate("2 & 3")
        assert exc_info.value.kind == ErrorKind.UNEXPECTED_CHARACTER


class TestReentrancy:
    """Independent calls never share state."""

    @staticmethod
    def _bits(value: float) -> bytes:
        return struct.pack("<d", value)

    def test_repeated_evaluation_bit_identical(self) -> None:
        source = "(7/3)^(1/2)*-2"
        assert self._bits(evaluate(source)) == self._bits(evaluate(source))

    def test_nan_bit_identical(self) -> None:
        assert self._bits(evaluate("0/0")) == self._bits(evaluate("0/0"))

    def test_error_does_not_leak(self) -> None:
        with pytest.raises(ExpressionError):
            evaluate("(1+")
        assert evaluate("1+1") == 2.0

    def test_threads(self) -> None:
        results: dict[int, float] = {}

        def worker(i: int) -> None:
            results[i] = evaluate(f"{i} * 2 + 1")

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == {i: i * 2.0 + 1 for i in range(16)}
