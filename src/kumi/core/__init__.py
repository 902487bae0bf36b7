"""Core kumi functionality: values, AST, lexer, parser, scopes, evaluator, and the pipeline."""

from . import ir
from .config import ShellConfig, load_config
from .errors import (
    ConfigError,
    DivisionByZeroError,
    EvalError,
    IntegerOverflowError,
    KumiError,
    LexError,
    NameNotFoundError,
    NegativeExponentError,
    NotABoolError,
    OperandTypeError,
    ParseError,
    SourceContext,
    UnsupportedOperatorError,
)
from .interpreter import Interpreter

__all__ = [
    "ir",
    # Config
    "ShellConfig",
    "load_config",
    # Errors
    "ConfigError",
    "DivisionByZeroError",
    "EvalError",
    "IntegerOverflowError",
    "KumiError",
    "LexError",
    "NameNotFoundError",
    "NegativeExponentError",
    "NotABoolError",
    "OperandTypeError",
    "ParseError",
    "SourceContext",
    "UnsupportedOperatorError",
    # Pipeline
    "Interpreter",
]
