"""Tests for the kumi evaluator.

Covers:
- Int and Float arithmetic, including 128-bit overflow checks
- Equality, logic and unary operators
- Declarations, scoping and evaluation order
- Error tracebacks
"""

from __future__ import annotations

import math
from collections.abc import Callable

import pytest

from kumi.core.errors import (
    DivisionByZeroError,
    EvalError,
    IntegerOverflowError,
    NameNotFoundError,
    NegativeExponentError,
    NotABoolError,
    OperandTypeError,
    UnsupportedOperatorError,
)
from kumi.core.expression_lang import Context, evaluate, parse_expr
from kumi.core.ir.values import (
    FALSE,
    INT_MAX,
    INT_MIN,
    NONE,
    TRUE,
    FloatValue,
    IntValue,
    Value,
)

Run = Callable[[str], Value]


def _int(n: int) -> IntValue:
    return IntValue(value=n)


class TestIntArithmetic:
    def test_add(self, run: Run) -> None:
        assert run("1 + 2") == _int(3)

    def test_precedence(self, run: Run) -> None:
        assert run("1 + 2 * 3") == _int(7)
        assert run("(1 + 2) * 3") == _int(9)

    def test_subtract_folds_left(self, run: Run) -> None:
        assert run("10 - 3 - 2") == _int(5)

    def test_division_truncates(self, run: Run) -> None:
        assert run("7 / 2") == _int(3)
        assert run("-7 / 2") == _int(-3)
        assert run("7 / -2") == _int(-3)

    def test_remainder_takes_dividend_sign(self, run: Run) -> None:
        assert run("7 % 3") == _int(1)
        assert run("-7 % 3") == _int(-1)
        assert run("7 % -3") == _int(1)

    def test_power(self, run: Run) -> None:
        assert run("2 ^ 10") == _int(1024)
        assert run("0 ^ 0") == _int(1)

    def test_power_folds_left(self, run: Run) -> None:
        assert run("2 ^ 3 ^ 2") == _int(64)

    def test_negative_base(self, run: Run) -> None:
        assert run("(-2) ^ 3") == _int(-8)
        assert run("-2 ^ 2") == _int(-4)

    def test_unary_minus(self, run: Run) -> None:
        assert run("--5") == _int(5)
        assert run("1 - -1") == _int(2)


class TestIntRange:
    def test_add_overflow(self, run: Run) -> None:
        with pytest.raises(IntegerOverflowError):
            run(f"{INT_MAX} + 1")

    def test_subtract_overflow(self, run: Run) -> None:
        with pytest.raises(IntegerOverflowError):
            run(f"-{INT_MAX} - 2")

    def test_min_reachable(self, run: Run) -> None:
        assert run(f"-{INT_MAX} - 1") == _int(INT_MIN)

    def test_negate_min_overflows(self, run: Run) -> None:
        with pytest.raises(IntegerOverflowError):
            run(f"-(-{INT_MAX} - 1)")

    def test_multiply_overflow(self, run: Run) -> None:
        with pytest.raises(IntegerOverflowError):
            run("2 ^ 64 * 2 ^ 64")

    def test_power_overflow(self, run: Run) -> None:
        with pytest.raises(IntegerOverflowError):
            run("2 ^ 127")
        assert run("2 ^ 126") == _int(2**126)

    def test_power_reaches_min(self, run: Run) -> None:
        assert run("(-2) ^ 127") == _int(INT_MIN)

    def test_huge_exponent_rejected(self, run: Run) -> None:
        with pytest.raises(IntegerOverflowError, match="exponent"):
            run("1 ^ 5000000000")

    def test_unit_base_large_exponent(self, run: Run) -> None:
        assert run("1 ^ 1000000") == _int(1)
        assert run("(-1) ^ 1000001") == _int(-1)

    def test_negative_exponent(self, run: Run) -> None:
        with pytest.raises(NegativeExponentError):
            run("2 ^ -1")


class TestFloatArithmetic:
    def test_add(self, run: Run) -> None:
        assert run("1.5 + 2.5") == FloatValue(value=4.0)

    def test_divide(self, run: Run) -> None:
        assert run("1.0 / 4.0") == FloatValue(value=0.25)

    def test_remainder(self, run: Run) -> None:
        assert run("7.5 % 2.0") == FloatValue(value=1.5)

    def test_power(self, run: Run) -> None:
        assert run("2.0 ^ 3.0") == FloatValue(value=8.0)
        assert run("4.0 ^ -1.0") == FloatValue(value=0.25)

    def test_power_of_negative_base_is_nan(self, run: Run) -> None:
        result = run("(-8.0) ^ 0.5")
        assert isinstance(result, FloatValue)
        assert math.isnan(result.value)

    def test_power_overflow_is_infinite(self, run: Run) -> None:
        assert run("10.0 ^ 400.0") == FloatValue(value=math.inf)

    def test_zero_to_negative_power(self, run: Run) -> None:
        assert run("0.0 ^ -1.0") == FloatValue(value=math.inf)


class TestTypeRules:
    @pytest.mark.parametrize("source", ["1 + 1.0", "1.0 - 1", "2 * 2.0", "2 ^ 2.0", "1 + true"])
    def test_mixed_numeric_rejected(self, run: Run, source: str) -> None:
        with pytest.raises(OperandTypeError, match="the types must match"):
            run(source)

    def test_message_names_operation_and_operands(self, run: Run) -> None:
        with pytest.raises(OperandTypeError) as exc_info:
            run("1 + 1.0")
        assert exc_info.value.message == (
            "can't execute add operation on int(1) and float(1.0), the types must match"
        )

    def test_declaration_result_is_not_numeric(self, run: Run) -> None:
        with pytest.raises(OperandTypeError):
            run("(let x = 1) + 1")


class TestDivisionByZero:
    @pytest.mark.parametrize("source", ["1 / 0", "1 % 0", "1.0 / 0.0", "1.0 % 0.0"])
    def test_zero_divisor(self, run: Run, source: str) -> None:
        with pytest.raises(DivisionByZeroError):
            run(source)

    def test_message(self, run: Run) -> None:
        with pytest.raises(DivisionByZeroError) as exc_info:
            run("1 / 0")
        assert exc_info.value.message == "can't divide int(1) by zero (int(0))"

    @pytest.mark.parametrize("source", ["1.0 / 0", "1.0 % 0", "true / 0", "true % 0"])
    def test_checked_before_types(self, run: Run, source: str) -> None:
        with pytest.raises(DivisionByZeroError):
            run(source)


class TestEquality:
    def test_int(self, run: Run) -> None:
        assert run("1 == 1") == TRUE
        assert run("1 != 1") == FALSE
        assert run("1 != 2") == TRUE

    def test_float(self, run: Run) -> None:
        assert run("0.5 == 0.5") == TRUE

    def test_mixed_rejected(self, run: Run) -> None:
        with pytest.raises(OperandTypeError, match="equals"):
            run("1 == 1.0")
        with pytest.raises(OperandTypeError, match="not equals"):
            run("1 != 1.0")

    def test_bool_equality_unsupported(self, run: Run) -> None:
        with pytest.raises(OperandTypeError):
            run("true == true")

    @pytest.mark.parametrize("source", ["1 < 2", "1 <= 2", "1 > 2", "1 >= 2"])
    def test_ordering_unsupported(self, run: Run, source: str) -> None:
        with pytest.raises(UnsupportedOperatorError, match="not supported"):
            run(source)


class TestLogic:
    def test_and(self, run: Run) -> None:
        assert run("true && true") == TRUE
        assert run("true && false") == FALSE

    def test_or(self, run: Run) -> None:
        assert run("false || true") == TRUE
        assert run("false || false") == FALSE

    def test_not(self, run: Run) -> None:
        assert run("!true") == FALSE
        assert run("!!true") == TRUE

    def test_not_of_comparison(self, run: Run) -> None:
        assert run("!1 == 2") == TRUE

    def test_not_requires_bool(self, run: Run) -> None:
        with pytest.raises(NotABoolError):
            run("!1")

    def test_logic_requires_bool(self, run: Run) -> None:
        with pytest.raises(NotABoolError):
            run("1 && true")
        with pytest.raises(NotABoolError):
            run("false || 0")

    def test_negating_a_bool_flips_it(self, run: Run) -> None:
        assert run("-true") == FALSE

    def test_negating_none_fails(self, run: Run) -> None:
        with pytest.raises(OperandTypeError, match="can't invert"):
            run("-(let x = 1)")


class TestDeclarations:
    def test_declaration_returns_none(self, run: Run) -> None:
        assert run("let x = 5") == NONE

    def test_declared_value_visible(self, run: Run) -> None:
        run("let x = 5")
        assert run("x * 2") == _int(10)

    def test_redeclaration_uses_old_value(self, run: Run) -> None:
        run("let x = 1")
        run("let x = x + 1")
        assert run("x") == _int(2)

    def test_nested_declaration(self, run: Run, context: Context) -> None:
        run("let a = let b = 3")
        assert context.symbol_table.lookup("a") == NONE
        assert context.symbol_table.lookup("b") == _int(3)

    def test_undefined_name(self, run: Run) -> None:
        with pytest.raises(NameNotFoundError, match="there isn't a variable with name y"):
            run("y")

    def test_failed_initializer_binds_nothing(self, run: Run, context: Context) -> None:
        with pytest.raises(DivisionByZeroError):
            run("let a = 1 / 0")
        assert "a" not in context.symbol_table

    def test_left_operand_evaluated_first(self, run: Run, context: Context) -> None:
        # The right operand sees the binding made by the left one.
        with pytest.raises(OperandTypeError):
            run("(let x = 3) + x")
        assert context.symbol_table.lookup("x") == _int(3)


class TestScoping:
    def test_child_sees_parent(self, context: Context) -> None:
        context.symbol_table.declare("x", _int(1))
        child = context.child("<block>", 2)
        assert evaluate(parse_expr("x + 1"), child) == _int(2)

    def test_child_shadows_without_touching_parent(self, context: Context) -> None:
        context.symbol_table.declare("x", _int(1))
        child = context.child("<block>", 2)
        evaluate(parse_expr("let x = 2"), child)
        assert child.symbol_table.lookup("x") == _int(2)
        assert context.symbol_table.lookup("x") == _int(1)

    def test_parent_does_not_see_child(self, context: Context) -> None:
        child = context.child("<block>", 2)
        evaluate(parse_expr("let inner = 1"), child)
        with pytest.raises(NameNotFoundError):
            evaluate(parse_expr("inner"), context)


class TestTracebacks:
    def test_root_traceback(self, run: Run) -> None:
        with pytest.raises(EvalError) as exc_info:
            run("y")
        assert str(exc_info.value) == (
            "Traceback:\n  line 1, in <program>\nthere isn't a variable with name y"
        )

    def test_nested_traceback_innermost_first(self, context: Context) -> None:
        block = context.child("<block>", 3)
        with pytest.raises(EvalError) as exc_info:
            evaluate(parse_expr("1 / 0"), block)
        assert str(exc_info.value) == (
            "Traceback:\n"
            "  line 3, in <block>\n"
            "  line 1, in <program>\n"
            "can't divide int(1) by zero (int(0))"
        )


class TestDeepTrees:
    def test_long_operator_chain(self, run: Run) -> None:
        # Parsing folds iteratively; only evaluation walks the full depth.
        with pytest.raises(EvalError, match="nested too deeply") as exc_info:
            run("1" + " + 1" * 5000)
        assert exc_info.value.traceback == "  line 1, in <program>\n"

    def test_context_usable_afterwards(self, run: Run) -> None:
        with pytest.raises(EvalError):
            run("1" + " + 1" * 5000)
        assert run("1 + 1") == _int(2)


class TestPurity:
    def test_same_tree_in_fresh_contexts(self) -> None:
        expr = parse_expr("let z = 2 ^ 3 ^ 2")
        first, second = Context(), Context()
        assert evaluate(expr, first) == evaluate(expr, second) == NONE
        assert first.symbol_table.lookup("z") == second.symbol_table.lookup("z") == _int(64)

    def test_tree_unchanged_by_evaluation(self, context: Context) -> None:
        source = "(1 + 2) * -3"
        expr = parse_expr(source)
        assert evaluate(expr, context) == _int(-9)
        assert expr == parse_expr(source)
        assert evaluate(expr, context) == _int(-9)
