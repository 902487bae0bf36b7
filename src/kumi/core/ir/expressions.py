"""
Expression AST for kumi.

Supports:
- Literals: 42, 3.14, true, false
- Variable references: x, total_2
- Arithmetic: +, -, *, /, %, ^
- Comparison: ==, !=, <, <=, >, >=
- Logic: &&, ||, !
- Negation: -x
- Declarations: let x = expr

Nodes are frozen, so one parsed tree can be evaluated any number of times.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from kumi.core.ir.values import Value

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators for expressions."""

    # Arithmetic
    ADD = "+"
    SUB = "-"
    DIV = "/"
    MUL = "*"
    POW = "^"
    MOD = "%"
    # Comparison
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    # Logical
    AND = "&&"
    OR = "||"


class UnaryOp(StrEnum):
    """Unary operators for expressions."""

    NEG = "-"
    NOT = "!"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Literal(BaseModel):
    """A literal value: int, float, or bool."""

    value: Value = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.value)


class VarRef(BaseModel):
    """Reference to a variable by name."""

    name: str = Field(description="Variable name")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class DeclareVar(BaseModel):
    """
    Variable declaration: let name = initializer.

    The initializer is evaluated once, when the declaration is evaluated.
    """

    name: str = Field(description="Variable name")
    initializer: Expr = Field(description="Expression bound to the name")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"(let {self.name} = {self.initializer})"


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


class UnaryExpr(BaseModel):
    """Unary operation: op operand."""

    op: UnaryOp
    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.op.value}{self.operand}"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Literal | VarRef | DeclareVar | BinaryExpr | UnaryExpr

# Rebuild models for recursive forward references
DeclareVar.model_rebuild()
BinaryExpr.model_rebuild()
UnaryExpr.model_rebuild()
