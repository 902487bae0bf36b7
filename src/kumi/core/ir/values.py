"""
Runtime value types for kumi.

A value is one of four immutable variants:

- ``IntValue``: 128-bit signed integer
- ``FloatValue``: 64-bit float
- ``BoolValue``: boolean
- ``NoneValue``: absence of a value (the result of a declaration)

``str()`` of a value is its user-facing echo: ``int(3)``, ``float(1.5)``,
``bool(true)`` or ``()``.
"""

from __future__ import annotations

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    field_validator,
)

INT_BITS = 128
INT_MIN = -(2 ** (INT_BITS - 1))
INT_MAX = 2 ** (INT_BITS - 1) - 1


class IntValue(BaseModel):
    """A 128-bit signed integer."""

    value: StrictInt = Field(description="Integer payload")

    model_config = ConfigDict(frozen=True)

    @field_validator("value")
    @classmethod
    def _check_range(cls, v: int) -> int:
        if not int_in_range(v):
            raise ValueError(f"{v} does not fit a {INT_BITS}-bit signed integer")
        return v

    def __str__(self) -> str:
        return f"int({self.value})"

    def is_zero(self) -> bool:
        return self.value == 0


class FloatValue(BaseModel):
    """A 64-bit float."""

    value: StrictFloat = Field(description="Float payload")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"float({self.value!r})"

    def is_zero(self) -> bool:
        return self.value == 0.0


class BoolValue(BaseModel):
    """A boolean."""

    value: StrictBool = Field(description="Boolean payload")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"bool({'true' if self.value else 'false'})"

    def is_zero(self) -> bool:
        return False


class NoneValue(BaseModel):
    """No value. Produced by declarations."""

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "()"

    def is_zero(self) -> bool:
        return False


Value = IntValue | FloatValue | BoolValue | NoneValue

NONE = NoneValue()
TRUE = BoolValue(value=True)
FALSE = BoolValue(value=False)


def int_in_range(value: int) -> bool:
    """True if ``value`` fits a 128-bit signed integer."""
    return INT_MIN <= value <= INT_MAX
