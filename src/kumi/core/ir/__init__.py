"""
kumi intermediate representation: runtime values and the expression AST.

All types are re-exported from this package.
"""

from .expressions import (
    BinaryExpr,
    BinaryOp,
    DeclareVar,
    Expr,
    Literal,
    UnaryExpr,
    UnaryOp,
    VarRef,
)
from .values import (
    FALSE,
    INT_MAX,
    INT_MIN,
    NONE,
    TRUE,
    BoolValue,
    FloatValue,
    IntValue,
    NoneValue,
    Value,
)

__all__ = [
    # Expressions
    "BinaryExpr",
    "BinaryOp",
    "DeclareVar",
    "Expr",
    "Literal",
    "UnaryExpr",
    "UnaryOp",
    "VarRef",
    # Values
    "BoolValue",
    "FALSE",
    "FloatValue",
    "INT_MAX",
    "INT_MIN",
    "IntValue",
    "NONE",
    "NoneValue",
    "TRUE",
    "Value",
]
