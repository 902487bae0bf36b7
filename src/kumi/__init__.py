"""
kumi - a small typed expression language.

Tokenizes, parses and evaluates numeric/boolean expressions with
lexically scoped ``let`` declarations.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import EvalError, KumiError, LexError, ParseError
from .core.expression_lang import Context, evaluate, parse, tokenize
from .core.interpreter import Interpreter

__version__ = get_version()

__all__ = [
    "__version__",
    "Context",
    "EvalError",
    "Interpreter",
    "KumiError",
    "LexError",
    "ParseError",
    "evaluate",
    "ir",
    "parse",
    "tokenize",
]
