"""
The kumi pipeline: text → tokens → AST → value.

An :class:`Interpreter` owns one ``<program>`` context that persists across
inputs, so variables declared by one line are visible to the next. Token and
AST state is rebuilt from scratch for every input.
"""

from __future__ import annotations

import logging

from kumi.core.config import ShellConfig
from kumi.core.expression_lang.context import Context
from kumi.core.expression_lang.evaluator import evaluate
from kumi.core.expression_lang.parser import parse
from kumi.core.expression_lang.tokenizer import Token, tokenize
from kumi.core.ir.values import Value

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Persistent-context front end for the lexer, parser and evaluator.

    Usage:
        interpreter = Interpreter()
        interpreter.execute("let x = 5")   # NoneValue()
        interpreter.execute("x * 2")       # IntValue(value=10)
    """

    def __init__(self, text: str = "", config: ShellConfig | None = None) -> None:
        self.config = config or ShellConfig()
        self.context = Context(self.config.program_label, None, 1)
        self.text = ""
        self.tokens: list[Token] = []
        self.update(text)

    def update(self, text: str) -> None:
        """Replace the current input and tokenize it.

        Raises:
            LexError: If ``text`` cannot be tokenized. The previous input is
                discarded either way.
        """
        self.text = text
        self.tokens = []
        self.tokens = tokenize(text)

    def run(self) -> Value:
        """Parse the current tokens and evaluate them in the program context.

        Raises:
            ParseError: With the offending source line attached.
            EvalError: With the program traceback attached.
        """
        node = parse(self.tokens, self.text)
        result = evaluate(node, self.context)
        logger.debug("%r evaluated to %s", self.text, result)
        return result

    def execute(self, text: str) -> Value:
        """Tokenize, parse and evaluate ``text``."""
        self.update(text)
        return self.run()

    def reset(self) -> None:
        """Drop every variable by starting a fresh program context."""
        self.context = Context(self.config.program_label, None, 1)
