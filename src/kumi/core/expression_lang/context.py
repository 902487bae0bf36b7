"""
Evaluation context: a stack of frames, each paired with one scope.

A child context shares its parent's scope arena, derives a fresh child scope,
and extends the parent's frame stack by one frame. The stack is what the
traceback is rendered from.
"""

from __future__ import annotations

from dataclasses import dataclass

from kumi.core.expression_lang.symbol_table import SymbolTable

PROGRAM_LABEL = "<program>"


@dataclass(frozen=True)
class Frame:
    """One evaluation level: a label and the source line it was entered at."""

    label: str
    line: int

    def format(self) -> str:
        return f"line {self.line}, in {self.label}"


class Context:
    """
    One frame of the evaluation chain and the scope that belongs to it.

    Usage:
        program = Context()                         # root frame, root scope
        inner = Context("<block>", program, line=3) # child scope of program's
        inner.traceback()
        # '  line 3, in <block>\\n  line 1, in <program>\\n'
    """

    def __init__(
        self,
        label: str = PROGRAM_LABEL,
        parent: Context | None = None,
        line: int = 1,
    ) -> None:
        self.parent = parent
        frame = Frame(label=label, line=line)
        if parent is None:
            self.symbol_table = SymbolTable()
            self.frames: tuple[Frame, ...] = (frame,)
        else:
            self.symbol_table = parent.symbol_table.child()
            self.frames = parent.frames + (frame,)

    @property
    def label(self) -> str:
        return self.frames[-1].label

    @property
    def line(self) -> int:
        return self.frames[-1].line

    @property
    def depth(self) -> int:
        return len(self.frames)

    def child(self, label: str, line: int = 1) -> Context:
        return Context(label, self, line)

    def traceback(self) -> str:
        """Render every frame, innermost first, one per line."""
        return "".join(f"  {frame.format()}\n" for frame in reversed(self.frames))
