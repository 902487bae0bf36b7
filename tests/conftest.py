"""Shared pytest fixtures for kumi tests."""

from collections.abc import Callable

import pytest

from kumi.core.expression_lang import Context, evaluate, parse_expr
from kumi.core.interpreter import Interpreter
from kumi.core.ir.values import Value


@pytest.fixture
def context() -> Context:
    """Return a fresh root program context."""
    return Context()


@pytest.fixture
def interpreter() -> Interpreter:
    """Return an interpreter with an empty program context."""
    return Interpreter()


@pytest.fixture
def run(context: Context) -> Callable[[str], Value]:
    """Return a helper that tokenizes, parses and evaluates in ``context``."""

    def _run(source: str) -> Value:
        return evaluate(parse_expr(source), context)

    return _run
