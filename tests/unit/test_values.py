"""Tests for runtime value types."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from kumi.core.ir.values import (
    INT_MAX,
    INT_MIN,
    NONE,
    BoolValue,
    FloatValue,
    IntValue,
)


class TestRendering:
    def test_int(self) -> None:
        assert str(IntValue(value=-3)) == "int(-3)"

    def test_float(self) -> None:
        assert str(FloatValue(value=1.0)) == "float(1.0)"
        assert str(FloatValue(value=0.25)) == "float(0.25)"

    def test_bool(self) -> None:
        assert str(BoolValue(value=True)) == "bool(true)"
        assert str(BoolValue(value=False)) == "bool(false)"

    def test_none(self) -> None:
        assert str(NONE) == "()"


class TestConstruction:
    def test_int_bounds(self) -> None:
        assert IntValue(value=INT_MAX).value == INT_MAX
        assert IntValue(value=INT_MIN).value == INT_MIN

    def test_int_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            IntValue(value=INT_MAX + 1)
        with pytest.raises(ValidationError):
            IntValue(value=INT_MIN - 1)

    def test_no_implicit_conversion(self) -> None:
        with pytest.raises(ValidationError):
            IntValue(value=True)
        with pytest.raises(ValidationError):
            BoolValue(value=1)

    def test_frozen(self) -> None:
        value = IntValue(value=1)
        with pytest.raises(ValidationError):
            value.value = 2


class TestZero:
    def test_numeric_zero(self) -> None:
        assert IntValue(value=0).is_zero()
        assert FloatValue(value=0.0).is_zero()
        assert FloatValue(value=-0.0).is_zero()

    def test_non_numeric_never_zero(self) -> None:
        assert not BoolValue(value=False).is_zero()
        assert not NONE.is_zero()
