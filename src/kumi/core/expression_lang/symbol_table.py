"""
Scoped variable storage.

Scopes live in a :class:`ScopeArena` and are addressed by index; each record
holds an optional parent index. A :class:`SymbolTable` is a view of one scope
in an arena: it declares into and removes from that scope only, and looks
names up through the whole parent chain.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from kumi.core.errors import NameNotFoundError
from kumi.core.ir.values import Value

logger = logging.getLogger(__name__)


class Variable(BaseModel):
    """A name bound to a value, fixed at declaration time."""

    name: str = Field(description="Variable name")
    value: Value = Field(description="Bound value")

    model_config = ConfigDict(frozen=True)


@dataclass
class _Scope:
    parent: int | None
    symbols: dict[str, Variable] = field(default_factory=dict)


class ScopeArena:
    """
    Owns every scope of one context tree.

    Scopes are only ever appended, so a parent index always refers to a live
    scope for as long as any of its children do.
    """

    def __init__(self) -> None:
        self._scopes: list[_Scope] = []

    def __len__(self) -> int:
        return len(self._scopes)

    def new_scope(self, parent: int | None = None) -> int:
        if parent is not None and not 0 <= parent < len(self._scopes):
            raise IndexError(f"no scope with index {parent}")
        self._scopes.append(_Scope(parent=parent))
        return len(self._scopes) - 1

    def parent_of(self, index: int) -> int | None:
        return self._scopes[index].parent

    def symbols(self, index: int) -> dict[str, Variable]:
        return self._scopes[index].symbols

    def chain(self, index: int | None) -> list[int]:
        """Scope indices from ``index`` out to the root."""
        indices: list[int] = []
        while index is not None:
            indices.append(index)
            index = self._scopes[index].parent
        return indices


class SymbolTable:
    """
    One scope in a nested lookup chain.

    Usage:
        root = SymbolTable()
        root.declare("x", IntValue(value=1))
        inner = root.child()
        inner.declare("x", IntValue(value=2))   # shadows, root unchanged
        inner.lookup("x")                       # IntValue(value=2)
    """

    def __init__(self, arena: ScopeArena | None = None, index: int | None = None) -> None:
        self.arena = arena if arena is not None else ScopeArena()
        self.index = index if index is not None else self.arena.new_scope()

    def child(self) -> SymbolTable:
        """Create a fresh scope whose parent is this one."""
        return SymbolTable(self.arena, self.arena.new_scope(self.index))

    def declare(self, name: str, value: Value) -> Variable:
        """Bind ``name`` in this scope, replacing any binding it already holds."""
        variable = Variable(name=name, value=value)
        self.arena.symbols(self.index)[name] = variable
        logger.debug("Declared %s = %s in scope %d", name, value, self.index)
        return variable

    def get_variable(self, name: str) -> Variable:
        """Find the innermost binding of ``name`` in the scope chain."""
        for index in self.arena.chain(self.index):
            variable = self.arena.symbols(index).get(name)
            if variable is not None:
                return variable
        raise NameNotFoundError(f"there isn't a variable with name {name}")

    def lookup(self, name: str) -> Value:
        return self.get_variable(name).value

    def remove(self, name: str) -> None:
        """Delete ``name`` from this scope only; outer scopes are never touched."""
        symbols = self.arena.symbols(self.index)
        if name not in symbols:
            raise NameNotFoundError(f"there isn't a variable with name {name}")
        del symbols[name]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return any(name in self.arena.symbols(i) for i in self.arena.chain(self.index))

    def names(self) -> list[str]:
        """Names bound directly in this scope, in declaration order."""
        return list(self.arena.symbols(self.index))
