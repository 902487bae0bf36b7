"""
kumi expression language.

Tokenizer, parser, scopes, and evaluator.

Usage:
    from kumi.core.expression_lang import Context, evaluate, parse, tokenize

    source = "let x = 2 ^ 3 ^ 2"
    context = Context()
    evaluate(parse(tokenize(source), source), context)   # NoneValue()
    evaluate(parse_expr("x + 1"), context)               # IntValue(value=65)
"""

from kumi.core.expression_lang.context import Context, Frame
from kumi.core.expression_lang.evaluator import evaluate
from kumi.core.expression_lang.parser import parse, parse_expr
from kumi.core.expression_lang.symbol_table import ScopeArena, SymbolTable, Variable
from kumi.core.expression_lang.tokenizer import Token, TokenKind, tokenize

__all__ = [
    "Context",
    "Frame",
    "ScopeArena",
    "SymbolTable",
    "Token",
    "TokenKind",
    "Variable",
    "evaluate",
    "parse",
    "parse_expr",
    "tokenize",
]
