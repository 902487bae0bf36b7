"""
Error types for the kumi lexer, parser, and evaluator.

Every stage raises a subclass of :class:`KumiError`. Lexical and syntactic
errors carry a :class:`SourceContext` (the offending source line plus its
1-indexed position); evaluation errors carry the scope traceback of the
context they were raised in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kumi.core.expression_lang.tokenizer import Token


class KumiError(Exception):
    """Base exception for all kumi errors."""

    def __init__(self, message: str, context: SourceContext | None = None):
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        return self._format_message()

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class LexError(KumiError):
    """
    Raised when source text cannot be tokenized.

    Examples:
    - A number literal with more than one dot
    - An integer literal outside the 128-bit range
    - A lone ``&`` or ``|``
    - A character with no meaning in the language
    """

    def _format_message(self) -> str:
        if not self.context:
            return self.message
        return (
            f"...\n{self.context.format()}\n"
            f"Lexer error on line - {self.context.line}, column - {self.context.column}: "
            f"{self.message}\n..."
        )


class ParseError(KumiError):
    """
    Raised when a token sequence does not match the grammar.

    Examples:
    - Unexpected token
    - Missing ``)``, identifier, or ``=``
    - Trailing input after a complete expression

    The offending token is always kept; the source context is attached once
    the source text is known (see :meth:`with_source`).
    """

    def __init__(
        self,
        message: str,
        token: Token | None = None,
        context: SourceContext | None = None,
    ):
        self.token = token
        self.lexeme = ""
        super().__init__(message, context)

    def with_source(self, source: str) -> ParseError:
        """Attach the source text the offending token was read from."""
        if self.token is not None:
            self.context = SourceContext.at(source, self.token.start)
            self.lexeme = source[self.token.start : self.token.end]
        return self

    def _format_message(self) -> str:
        if not self.context or self.token is None:
            return self.message
        return (
            f"...\n{self.context.format()}\n"
            f'Parser error on "{self.lexeme}", token - {self.token}: {self.message}\n...'
        )


class EvalError(KumiError):
    """
    Raised when an AST cannot be evaluated.

    The traceback is filled in by the evaluator from the active context
    before the error leaves :func:`kumi.core.expression_lang.evaluate`.
    """

    def __init__(self, message: str, traceback: str | None = None):
        self.traceback = traceback
        super().__init__(message)

    def _format_message(self) -> str:
        if self.traceback is None:
            return self.message
        return f"Traceback:\n{self.traceback}{self.message}"


class NameNotFoundError(EvalError):
    """No scope in the chain binds the requested name."""


class OperandTypeError(EvalError):
    """Operand variants do not fit the operator (mismatched or non-numeric)."""


class DivisionByZeroError(EvalError):
    """Right operand of ``/`` or ``%`` is zero."""


class UnsupportedOperatorError(EvalError):
    """Operator tokenizes and parses but has no evaluation semantics."""


class NotABoolError(EvalError):
    """A logical operator received a non-Bool operand."""


class IntegerOverflowError(EvalError):
    """An Int result or exponent falls outside its representable range."""


class NegativeExponentError(EvalError):
    """An Int raised to a negative Int power."""


@dataclass
class SourceContext:
    """
    Location of an error inside the source text.

    Attributes:
        line_text: The full source line containing the error offset
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    line_text: str
    line: int
    column: int

    @classmethod
    def at(cls, source: str, index: int) -> SourceContext:
        """Build the context for a character offset into ``source``."""
        line_start = source.rfind("\n", 0, index) + 1
        return cls(
            line_text=source_line_at(source, index),
            line=source.count("\n", 0, line_start) + 1,
            column=index - line_start + 1,
        )

    def format(self) -> str:
        """
        Render the source line underlined with carets.

        The underline spans the whole line, not just the offending column.
        """
        return f"{self.line_text}\n{'^' * len(self.line_text)}"


def source_line_at(source: str, index: int) -> str:
    """Return the line of ``source`` containing character offset ``index``."""
    index = min(max(index, 0), len(source))
    start = source.rfind("\n", 0, index) + 1
    end = source.find("\n", start)
    if end == -1:
        end = len(source)
    return source[start:end]


class ConfigError(KumiError):
    """Raised when a configuration file cannot be read or is malformed."""
