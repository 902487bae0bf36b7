"""
Tokenizer for the kumi expression language.

Converts source text into a sequence of positioned tokens ending with EOF.
"""

from __future__ import annotations

import logging
from enum import StrEnum, auto

from kumi.core.errors import LexError, SourceContext, source_line_at
from kumi.core.ir.values import (
    FALSE,
    INT_BITS,
    INT_MAX,
    TRUE,
    FloatValue,
    IntValue,
    Value,
    int_in_range,
)

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals
    INT = auto()
    FLOAT = auto()

    # Identifiers and keywords
    IDENT = auto()
    LET = auto()
    TRUE = auto()
    FALSE = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    CARET = auto()
    PERCENT = auto()
    EQ = auto()
    NE = auto()
    LT = auto()
    LE = auto()
    GT = auto()
    GE = auto()
    AND = auto()
    OR = auto()
    NOT = auto()

    # Punctuation
    ASSIGN = auto()
    LPAREN = auto()
    RPAREN = auto()

    # End of input
    EOF = auto()


KEYWORD_KINDS = frozenset({TokenKind.LET, TokenKind.TRUE, TokenKind.FALSE})


class Token:
    """
    A single token: kind, matched text and ``[start, end)`` character span.

    Number and boolean tokens also carry the literal value they denote.
    """

    __slots__ = ("kind", "value", "start", "end", "literal")

    def __init__(
        self,
        kind: TokenKind,
        value: str,
        start: int,
        end: int,
        literal: Value | None = None,
    ) -> None:
        self.kind = kind
        self.value = value
        self.start = start
        self.end = end
        self.literal = literal

    @property
    def pos(self) -> int:
        return self.start

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, span=({self.start}, {self.end}))"

    def __str__(self) -> str:
        if self.literal is not None:
            return str(self.literal)
        if self.kind == TokenKind.EOF:
            return "EOF"
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.value, self.start, self.end) == (
            other.kind,
            other.value,
            other.start,
            other.end,
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.value, self.start, self.end))


_KEYWORDS: dict[str, TokenKind] = {
    "let": TokenKind.LET,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
}

_KEYWORD_LITERALS: dict[TokenKind, Value] = {
    TokenKind.TRUE: TRUE,
    TokenKind.FALSE: FALSE,
}

_DIGITS = "0123456789"
_MAX_INT_DIGITS = len(str(INT_MAX))
_WHITESPACE = " \t"

_SINGLE_CHAR: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "/": TokenKind.SLASH,
    "*": TokenKind.STAR,
    "^": TokenKind.CARET,
    "%": TokenKind.PERCENT,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

# first char -> (kind alone, second char, kind with second char)
_MAYBE_DOUBLE: dict[str, tuple[TokenKind, str, TokenKind]] = {
    "<": (TokenKind.LT, "=", TokenKind.LE),
    ">": (TokenKind.GT, "=", TokenKind.GE),
    "!": (TokenKind.NOT, "=", TokenKind.NE),
    "=": (TokenKind.ASSIGN, "=", TokenKind.EQ),
}

# first char -> (required second char, kind)
_MUST_DOUBLE: dict[str, tuple[str, TokenKind]] = {
    "&": ("&", TokenKind.AND),
    "|": ("|", TokenKind.OR),
}


class _Lexer:
    """Character-at-a-time scanner tracking offset, line and column."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.current: str | None = source[0] if source else None

    def step(self) -> None:
        if self.current == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.pos += 1
        self.current = self.source[self.pos] if self.pos < len(self.source) else None

    def error(self, message: str) -> LexError:
        context = SourceContext(
            line_text=source_line_at(self.source, self.pos),
            line=self.line,
            column=self.column,
        )
        return LexError(message, context)

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []

        while self.current is not None:
            c = self.current

            if c in _WHITESPACE:
                self.step()
                continue

            if c in _DIGITS:
                tokens.append(self._read_number())
                continue

            if c.isalpha() or c == "_":
                tokens.append(self._read_identifier())
                continue

            start = self.pos

            if c in _MAYBE_DOUBLE:
                single, second, double = _MAYBE_DOUBLE[c]
                self.step()
                if self.current == second:
                    self.step()
                    tokens.append(Token(double, c + second, start, self.pos))
                else:
                    tokens.append(Token(single, c, start, self.pos))
                continue

            if c in _MUST_DOUBLE:
                second, kind = _MUST_DOUBLE[c]
                self.step()
                if self.current != second:
                    raise self.error(f"expected {second!r}")
                self.step()
                tokens.append(Token(kind, c + second, start, self.pos))
                continue

            if c in _SINGLE_CHAR:
                self.step()
                tokens.append(Token(_SINGLE_CHAR[c], c, start, self.pos))
                continue

            raise self.error(f"invalid character {c!r}")

        tokens.append(Token(TokenKind.EOF, "", self.pos, self.pos))
        return tokens

    def _read_number(self) -> Token:
        start = self.pos
        chars: list[str] = []
        dots = 0

        while self.current is not None and (self.current in _DIGITS or self.current == "."):
            if self.current == ".":
                if dots == 1:
                    text = "".join(chars)
                    raise self.error(
                        f"a float can have only one dot, can't add another to {text}"
                    )
                dots += 1
            chars.append(self.current)
            self.step()

        text = "".join(chars)
        if dots == 0:
            # Longer digit strings are out of range; int() would refuse the longest ones.
            if len(text.lstrip("0")) <= _MAX_INT_DIGITS:
                number = int(text)
                if int_in_range(number):
                    return Token(TokenKind.INT, text, start, self.pos, IntValue(value=number))
            raise self.error(
                f"can't parse {text} as int: out of range for a {INT_BITS}-bit signed integer"
            )

        try:
            as_float = float(text)
        except ValueError as e:
            raise self.error(f"can't parse {text} as float: {e}") from e
        return Token(TokenKind.FLOAT, text, start, self.pos, FloatValue(value=as_float))

    def _read_identifier(self) -> Token:
        start = self.pos
        chars: list[str] = []

        while self.current is not None and (
            self.current.isalpha() or self.current in _DIGITS or self.current == "_"
        ):
            chars.append(self.current)
            self.step()

        word = "".join(chars)
        kind = _KEYWORDS.get(word, TokenKind.IDENT)
        return Token(kind, word, start, self.pos, _KEYWORD_LITERALS.get(kind))


def tokenize(source: str) -> list[Token]:
    """
    Tokenize source text into a list of tokens.

    Args:
        source: Expression text (e.g., "let x = 2 ^ 8")

    Returns:
        Tokens in source order, always ending with an EOF token positioned at
        the end of the text.

    Raises:
        LexError: On a malformed number, a lone ``&``/``|`` or an invalid
            character. The message shows the offending line underlined.
    """
    tokens = _Lexer(source).tokenize()
    logger.debug("Tokenized %d characters into %d tokens", len(source), len(tokens))
    return tokens
