"""
Operator semantics over runtime values.

Numeric binary operators never convert between Int and Float: both operands
must be the same variant. Int arithmetic is checked against the 128-bit range
and never wraps. Float arithmetic follows IEEE 754.
"""

from __future__ import annotations

import math
from collections.abc import Callable

from kumi.core.errors import (
    DivisionByZeroError,
    IntegerOverflowError,
    NegativeExponentError,
    NotABoolError,
    OperandTypeError,
    UnsupportedOperatorError,
)
from kumi.core.ir.expressions import BinaryOp
from kumi.core.ir.values import (
    INT_BITS,
    BoolValue,
    FloatValue,
    IntValue,
    Value,
    int_in_range,
)

# Largest exponent an Int power accepts (unsigned 32-bit magnitude).
MAX_INT_EXPONENT = 2**32 - 1

_OP_NAMES: dict[BinaryOp, str] = {
    BinaryOp.ADD: "add",
    BinaryOp.SUB: "subtract",
    BinaryOp.DIV: "divide",
    BinaryOp.MUL: "multiply",
    BinaryOp.POW: "power",
    BinaryOp.MOD: "remainder",
    BinaryOp.EQ: "equals",
    BinaryOp.NE: "not equals",
    BinaryOp.AND: "and",
    BinaryOp.OR: "or",
}


# ---------------------------------------------------------------------------
# Unary operators
# ---------------------------------------------------------------------------


def negate(value: Value) -> Value:
    """Int/Float change sign, Bool flips. Fails for None."""
    if isinstance(value, IntValue):
        return _checked_int(-value.value, f"can't invert {value}")
    if isinstance(value, FloatValue):
        return FloatValue(value=-value.value)
    if isinstance(value, BoolValue):
        return BoolValue(value=not value.value)
    raise OperandTypeError(f"can't invert {value}")


def logical_not(value: Value) -> BoolValue:
    if not isinstance(value, BoolValue):
        raise NotABoolError(f"can't execute not on a non-bool value {value}")
    return BoolValue(value=not value.value)


# ---------------------------------------------------------------------------
# Binary operators
# ---------------------------------------------------------------------------


def apply_binary(op: BinaryOp, left: Value, right: Value) -> Value:
    """
    Apply a binary operator to two already-evaluated operands.

    Raises:
        DivisionByZeroError: ``/`` or ``%`` with a zero right operand. Checked
            before the operand types are looked at.
        OperandTypeError: Operands are not the same numeric variant.
        NotABoolError: ``&&``/``||`` with a non-Bool operand.
        UnsupportedOperatorError: ``<``, ``<=``, ``>``, ``>=``.
        IntegerOverflowError: Int result outside the 128-bit range.
        NegativeExponentError: Int ``^`` with a negative exponent.
    """
    handler = _HANDLERS.get(op)
    if handler is None:
        raise UnsupportedOperatorError(
            f"can't execute {op.value} on {left} and {right}, the operator is not supported"
        )
    return handler(left, right)


def _mismatch(op: BinaryOp, left: Value, right: Value) -> OperandTypeError:
    return OperandTypeError(
        f"can't execute {_OP_NAMES[op]} operation on {left} and {right}, the types must match"
    )


def _checked_int(result: int, message: str) -> IntValue:
    if not int_in_range(result):
        raise IntegerOverflowError(f"{message}: result overflows a {INT_BITS}-bit integer")
    return IntValue(value=result)


def _numeric(
    op: BinaryOp,
    int_fn: Callable[[int, int], int],
    float_fn: Callable[[float, float], float],
) -> Callable[[Value, Value], Value]:
    def handler(left: Value, right: Value) -> Value:
        if isinstance(left, IntValue) and isinstance(right, IntValue):
            return _checked_int(
                int_fn(left.value, right.value),
                f"can't execute {_OP_NAMES[op]} operation on {left} and {right}",
            )
        if isinstance(left, FloatValue) and isinstance(right, FloatValue):
            return FloatValue(value=float_fn(left.value, right.value))
        raise _mismatch(op, left, right)

    return handler


def _by_zero_checked(
    handler: Callable[[Value, Value], Value], verb: str
) -> Callable[[Value, Value], Value]:
    def checked(left: Value, right: Value) -> Value:
        if right.is_zero():
            raise DivisionByZeroError(f"can't {verb} {left} by zero ({right})")
        return handler(left, right)

    return checked


def _int_div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def _int_rem(a: int, b: int) -> int:
    """Remainder with the sign of the dividend."""
    return a - b * _int_div(a, b)


def _int_pow(base: int, exponent: int) -> int:
    if exponent < 0:
        raise NegativeExponentError(
            f"can't raise int({base}) to a negative power int({exponent})"
        )
    if exponent > MAX_INT_EXPONENT:
        raise IntegerOverflowError(
            f"exponent int({exponent}) is larger than the maximum {MAX_INT_EXPONENT}"
        )
    # Any base other than -1, 0, 1 leaves the 128-bit range long before this.
    if abs(base) > 1 and exponent >= INT_BITS:
        raise IntegerOverflowError(
            f"can't execute power operation on int({base}) and int({exponent}): "
            f"result overflows a {INT_BITS}-bit integer"
        )
    return base**exponent


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1


def _float_pow(base: float, exponent: float) -> float:
    if base == 0.0 and exponent < 0:
        return math.copysign(math.inf, base) if _is_odd_integer(exponent) else math.inf
    try:
        return math.pow(base, exponent)
    except ValueError:
        return math.nan
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf


def _float_rem(a: float, b: float) -> float:
    try:
        return math.fmod(a, b)
    except ValueError:
        return math.nan


def _equals(left: Value, right: Value) -> BoolValue:
    if isinstance(left, IntValue) and isinstance(right, IntValue):
        return BoolValue(value=left.value == right.value)
    if isinstance(left, FloatValue) and isinstance(right, FloatValue):
        return BoolValue(value=left.value == right.value)
    raise _mismatch(BinaryOp.EQ, left, right)


def _not_equals(left: Value, right: Value) -> BoolValue:
    try:
        return logical_not(_equals(left, right))
    except OperandTypeError:
        raise _mismatch(BinaryOp.NE, left, right) from None


def _logical(op: BinaryOp, fn: Callable[[bool, bool], bool]) -> Callable[[Value, Value], Value]:
    def handler(left: Value, right: Value) -> Value:
        if not isinstance(left, BoolValue) or not isinstance(right, BoolValue):
            raise NotABoolError(
                f"can't execute {_OP_NAMES[op]} operation on {left} and {right}, "
                "both operands must be bool"
            )
        return BoolValue(value=fn(left.value, right.value))

    return handler


_HANDLERS: dict[BinaryOp, Callable[[Value, Value], Value]] = {
    BinaryOp.ADD: _numeric(BinaryOp.ADD, lambda a, b: a + b, lambda a, b: a + b),
    BinaryOp.SUB: _numeric(BinaryOp.SUB, lambda a, b: a - b, lambda a, b: a - b),
    BinaryOp.MUL: _numeric(BinaryOp.MUL, lambda a, b: a * b, lambda a, b: a * b),
    BinaryOp.DIV: _by_zero_checked(
        _numeric(BinaryOp.DIV, _int_div, lambda a, b: a / b), "divide"
    ),
    BinaryOp.MOD: _by_zero_checked(
        _numeric(BinaryOp.MOD, _int_rem, _float_rem), "take the remainder of"
    ),
    BinaryOp.POW: _numeric(BinaryOp.POW, _int_pow, _float_pow),
    BinaryOp.EQ: _equals,
    BinaryOp.NE: _not_equals,
    BinaryOp.AND: _logical(BinaryOp.AND, lambda a, b: a and b),
    BinaryOp.OR: _logical(BinaryOp.OR, lambda a, b: a or b),
}
