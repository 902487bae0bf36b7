"""
Recursive descent parser for the kumi expression language.

Grammar (precedence low to high):
    expr        → "let" IDENT "=" expr | logic_or
    logic_or    → logic_expr (("&&" | "||") logic_expr)*
    logic_expr  → "!" logic_expr | comparison
    comparison  → arithm_expr (comp_op arithm_expr)*
    arithm_expr → term (("+" | "-") term)*
    term        → factor (("*" | "/" | "%") factor)*
    factor      → "-" factor | power
    power       → atom ("^" power_operand)*
    power_operand → "-" power_operand | atom
    atom        → INT | FLOAT | "true" | "false" | IDENT | "(" expr ")"

Every binary level folds left, ``^`` included: ``2 ^ 3 ^ 2`` is
``(2 ^ 3) ^ 2``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from kumi.core.errors import ParseError
from kumi.core.expression_lang.tokenizer import Token, TokenKind, tokenize
from kumi.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    DeclareVar,
    Expr,
    Literal,
    UnaryExpr,
    UnaryOp,
    VarRef,
)

logger = logging.getLogger(__name__)

_LOGIC_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.AND: BinaryOp.AND,
    TokenKind.OR: BinaryOp.OR,
}

_COMPARISON_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.EQ: BinaryOp.EQ,
    TokenKind.NE: BinaryOp.NE,
    TokenKind.LT: BinaryOp.LT,
    TokenKind.LE: BinaryOp.LE,
    TokenKind.GT: BinaryOp.GT,
    TokenKind.GE: BinaryOp.GE,
}

_ADDITIVE_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
}

_MULTIPLICATIVE_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.STAR: BinaryOp.MUL,
    TokenKind.SLASH: BinaryOp.DIV,
    TokenKind.PERCENT: BinaryOp.MOD,
}

_LITERAL_KINDS = frozenset({TokenKind.INT, TokenKind.FLOAT, TokenKind.TRUE, TokenKind.FALSE})


class _Parser:
    """Recursive descent parser for expressions."""

    def __init__(self, tokens: list[Token]) -> None:
        if not tokens:
            raise ParseError("can't parse an empty token sequence")
        self.tokens = tokens
        self.pos = 0

    @property
    def current(self) -> Token:
        return self.peek()

    def peek(self, offset: int = 0) -> Token:
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1]  # EOF

    def advance(self) -> Token:
        tok = self.current
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def expect(self, kind: TokenKind, description: str) -> Token:
        tok = self.current
        if tok.kind != kind:
            raise ParseError(f"expected {description}", tok)
        return self.advance()

    # -- Grammar rules --

    def parse(self) -> Expr:
        """Parse a complete input: one expression followed by EOF."""
        expr = self.parse_expr()
        if self.current.kind != TokenKind.EOF:
            raise ParseError(
                "expected an operator or the end of input after a complete expression",
                self.current,
            )
        return expr

    def parse_expr(self) -> Expr:
        """'let' declaration or logic_or."""
        if self.current.kind == TokenKind.LET:
            return self.parse_declaration()
        return self.parse_logic_or()

    def parse_declaration(self) -> DeclareVar:
        """'let' IDENT '=' expr"""
        self.advance()  # let
        name = self.expect(TokenKind.IDENT, "identifier")
        self.expect(TokenKind.ASSIGN, "'='")
        initializer = self.parse_expr()
        return DeclareVar(name=name.value, initializer=initializer)

    def parse_logic_or(self) -> Expr:
        """logic_expr (('&&' | '||') logic_expr)*"""
        return self._fold_left(_LOGIC_OPS, self.parse_logic_expr)

    def parse_logic_expr(self) -> Expr:
        """'!' logic_expr | comparison"""
        if self.current.kind == TokenKind.NOT:
            self.advance()
            operand = self.parse_logic_expr()
            return UnaryExpr(op=UnaryOp.NOT, operand=operand)
        return self.parse_comparison()

    def parse_comparison(self) -> Expr:
        """arithm_expr (comp_op arithm_expr)*"""
        return self._fold_left(_COMPARISON_OPS, self.parse_arithm_expr)

    def parse_arithm_expr(self) -> Expr:
        """term (('+' | '-') term)*"""
        return self._fold_left(_ADDITIVE_OPS, self.parse_term)

    def parse_term(self) -> Expr:
        """factor (('*' | '/' | '%') factor)*"""
        return self._fold_left(_MULTIPLICATIVE_OPS, self.parse_factor)

    def parse_factor(self) -> Expr:
        """'-' factor | power"""
        if self.current.kind == TokenKind.MINUS:
            self.advance()
            operand = self.parse_factor()
            return UnaryExpr(op=UnaryOp.NEG, operand=operand)
        return self.parse_power()

    def parse_power(self) -> Expr:
        """atom ('^' power_operand)*"""
        left = self.parse_atom()
        while self.current.kind == TokenKind.CARET:
            self.advance()
            right = self._parse_power_operand()
            left = BinaryExpr(op=BinaryOp.POW, left=left, right=right)
        return left

    def _parse_power_operand(self) -> Expr:
        """'-' power_operand | atom; never starts a nested '^' chain."""
        if self.current.kind == TokenKind.MINUS:
            self.advance()
            operand = self._parse_power_operand()
            return UnaryExpr(op=UnaryOp.NEG, operand=operand)
        return self.parse_atom()

    def parse_atom(self) -> Expr:
        """literal | IDENT | '(' expr ')'"""
        tok = self.current

        if tok.kind in _LITERAL_KINDS and tok.literal is not None:
            self.advance()
            return Literal(value=tok.literal)

        if tok.kind == TokenKind.IDENT:
            self.advance()
            return VarRef(name=tok.value)

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            expr = self.parse_expr()
            self.expect(TokenKind.RPAREN, "')'")
            return expr

        raise ParseError("expected int, float, bool, identifier or '('", tok)

    def _fold_left(
        self, ops: dict[TokenKind, BinaryOp], operand: Callable[[], Expr]
    ) -> Expr:
        left = operand()
        while self.current.kind in ops:
            op = ops[self.advance().kind]
            right = operand()
            left = BinaryExpr(op=op, left=left, right=right)
        return left


def parse(tokens: list[Token], source: str | None = None) -> Expr:
    """Parse a token sequence into an AST.

    Args:
        tokens: Output of :func:`~kumi.core.expression_lang.tokenizer.tokenize`,
            ending with EOF.
        source: The text the tokens were read from. When given, errors show
            the offending source line.

    Returns:
        Parsed expression AST.

    Raises:
        ParseError: If the tokens do not form exactly one expression, or nest
            deeper than the interpreter stack allows.
    """
    parser = _Parser(tokens)
    try:
        try:
            expr = parser.parse()
        except RecursionError:
            raise ParseError("expression is nested too deeply", parser.current) from None
    except ParseError as e:
        if source is not None:
            e.with_source(source)
        logger.debug("Parse failed: %s", e.message)
        raise
    logger.debug("Parsed %d tokens into a %s", len(tokens), type(expr).__name__)
    return expr


def parse_expr(source: str) -> Expr:
    """Tokenize and parse an expression string.

    Raises:
        LexError: If tokenization fails.
        ParseError: If the expression is invalid.
    """
    return parse(tokenize(source), source)
