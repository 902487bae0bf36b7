"""
Expression evaluator for the kumi expression language.

Walks an expression AST against a :class:`Context`. Pure apart from
declarations, which bind names in the context's innermost scope.
"""

from __future__ import annotations

import logging

from kumi.core.errors import EvalError
from kumi.core.expression_lang.context import Context
from kumi.core.expression_lang.operators import apply_binary, logical_not, negate
from kumi.core.ir.expressions import (
    BinaryExpr,
    DeclareVar,
    Expr,
    Literal,
    UnaryExpr,
    UnaryOp,
    VarRef,
)
from kumi.core.ir.values import NONE, Value

logger = logging.getLogger(__name__)


def evaluate(expr: Expr, context: Context) -> Value:
    """Evaluate an expression against a context.

    The tree is not modified, so the same AST can be evaluated again, against
    the same or another context.

    Args:
        expr: Parsed expression AST.
        context: Active context. Declarations bind into its innermost scope.

    Returns:
        The computed value. Declarations evaluate to ``NONE``.

    Raises:
        EvalError: If evaluation fails, including a tree too deep to walk.
            The error's traceback is the frame stack of ``context``.
    """
    try:
        return _interpret(expr, context)
    except EvalError as e:
        if e.traceback is None:
            e.traceback = context.traceback()
        logger.debug("Evaluation failed in %s: %s", context.label, e.message)
        raise
    except RecursionError:
        raise EvalError(
            "expression is nested too deeply to evaluate", context.traceback()
        ) from None


def _interpret(expr: Expr, ctx: Context) -> Value:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(expr, Literal):
        return expr.value

    if isinstance(expr, VarRef):
        return ctx.symbol_table.lookup(expr.name)

    if isinstance(expr, BinaryExpr):
        # Left before right: a declaration on the left is visible on the right.
        left = _interpret(expr.left, ctx)
        right = _interpret(expr.right, ctx)
        return apply_binary(expr.op, left, right)

    if isinstance(expr, UnaryExpr):
        return _interpret_unary(expr, ctx)

    if isinstance(expr, DeclareVar):
        return _interpret_declaration(expr, ctx)

    raise EvalError(f"Unknown expression type: {type(expr).__name__}")


def _interpret_unary(expr: UnaryExpr, ctx: Context) -> Value:
    val = _interpret(expr.operand, ctx)
    if expr.op == UnaryOp.NOT:
        return logical_not(val)
    if expr.op == UnaryOp.NEG:
        return negate(val)
    raise EvalError(f"Unknown unary op: {expr.op}")


def _interpret_declaration(expr: DeclareVar, ctx: Context) -> Value:
    value = _interpret(expr.initializer, ctx)
    ctx.symbol_table.declare(expr.name, value)
    return NONE
