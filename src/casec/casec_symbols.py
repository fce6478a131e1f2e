"""
Scoped symbol table used during semantic analysis.

The table is a stack of scopes, each a mapping from name to `SymbolInfo`.
The bottom (global) scope exists from construction and is never popped.
A name can be declared once per scope; an inner scope may shadow an outer
declaration. Lookups search innermost to outermost.

The table also owns the diagnostic list for one analysis pass. Its error
count only ever grows and always equals the number of diagnostics reported.
"""

import logging
from dataclasses import dataclass

from casec.casec_errors import Diagnostic

logger = logging.getLogger(__name__)


@dataclass
class SymbolInfo:
    """Declaration record for a single name in a single scope."""

    type: str
    line: int = 0
    col: int = 0
    initialized: bool = False


class SymbolTable:
    """
    Stack of lexical scopes plus the diagnostics reported against them.

    Attributes:
        scopes (list[dict[str, SymbolInfo]]): Innermost scope last.
        diagnostics (list[Diagnostic]): Everything reported so far, in order.
    """

    def __init__(self) -> None:
        self.scopes: list[dict[str, SymbolInfo]] = [{}]
        self.diagnostics: list[Diagnostic] = []

    @property
    def depth(self) -> int:
        return len(self.scopes)

    def enter_scope(self) -> None:
        self.scopes.append({})

    def exit_scope(self) -> None:
        """Pops the innermost scope. The global scope is never popped."""
        if len(self.scopes) > 1:
            self.scopes.pop()

    def declare(self, name: str, type_: str, line: int = 0, col: int = 0) -> bool:
        """Declares `name` in the innermost scope.

        Returns:
            False if `name` already exists in the innermost scope, True otherwise.
        """
        scope = self.scopes[-1]
        if name in scope:
            return False
        scope[name] = SymbolInfo(type_, line, col)
        return True

    def lookup_with_info(self, name: str) -> SymbolInfo | None:
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        return None

    def lookup(self, name: str) -> str | None:
        info = self.lookup_with_info(name)
        return info.type if info is not None else None

    def lookup_current(self, name: str) -> SymbolInfo | None:
        """Looks up `name` in the innermost scope only."""
        return self.scopes[-1].get(name)

    def mark_initialized(self, name: str) -> None:
        info = self.lookup_with_info(name)
        if info is not None:
            info.initialized = True

    def is_initialized(self, name: str) -> bool:
        info = self.lookup_with_info(name)
        return info is not None and info.initialized

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        logger.info("%s", diagnostic)

    @property
    def error_count(self) -> int:
        return len(self.diagnostics)

    def has_errors(self) -> bool:
        return bool(self.diagnostics)


__all__ = ["SymbolInfo", "SymbolTable"]
