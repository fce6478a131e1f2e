"""
Error and diagnostic types shared by every CASE compiler stage.

Two tiers:
    - Fatal lexical/syntactic errors are raised as `LexError` / `ParseError`.
      Both subclass the builtin `SyntaxError`, so callers can catch either.
    - Recoverable semantic problems are collected as `Diagnostic` records
      and never raised.

Each carries a kind tag and a 1-based source position.
"""

from dataclasses import dataclass
from typing import Literal

DiagnosticKind = Literal[
    "UnterminatedString",
    "UnexpectedCharacter",
    "UnterminatedBlock",
    "ExpectedAssignment",
    "ExpectedToken",
    "Redeclaration",
    "UndefinedVariable",
    "UsedBeforeInit",
    "TypeMismatch",
    "ConditionNotBoolean",
    "ArgumentCountMismatch",
]

FATAL_KINDS: frozenset[str] = frozenset(
    {
        "UnterminatedString",
        "UnexpectedCharacter",
        "UnterminatedBlock",
        "ExpectedAssignment",
        "ExpectedToken",
    }
)


@dataclass(frozen=True)
class Diagnostic:
    """A single reported problem with its kind tag and source position.

    Attributes:
        kind: One of the `DiagnosticKind` tags.
        message: Human readable description.
        line: 1-based line number, 0 when unknown.
        col: 1-based column number, 0 when unknown.
    """

    kind: DiagnosticKind
    message: str
    line: int = 0
    col: int = 0

    @property
    def fatal(self) -> bool:
        return self.kind in FATAL_KINDS

    def __str__(self) -> str:
        return f"{self.kind} at line {self.line}, col {self.col}: {self.message}"


class CaseSyntaxError(SyntaxError):
    """Base class for fatal errors that abort a pipeline run.

    Args:
        kind: Diagnostic kind tag.
        message: Description without position information.
        line: 1-based line of the offending input.
        col: 1-based column of the offending input.
    """

    def __init__(self, kind: DiagnosticKind, message: str, line: int = 0, col: int = 0):
        super().__init__(f"{message} at line {line}, col {col}")
        self.kind: DiagnosticKind = kind
        self.detail = message
        self.line = line
        self.col = col

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(self.kind, self.detail, self.line, self.col)


class LexError(CaseSyntaxError):
    """Raised by the tokenizer on unterminated strings or stray characters."""


class ParseError(CaseSyntaxError):
    """Raised by the parser on malformed statements."""


__all__ = [
    "CaseSyntaxError",
    "Diagnostic",
    "DiagnosticKind",
    "FATAL_KINDS",
    "LexError",
    "ParseError",
]
