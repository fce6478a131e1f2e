"""
Provides the `Transpiler` class and emitter interface for converting CASE ASTs into code.

Classes and Features:
    - Emitter (Protocol): Interface for all backend emitters.
    - CppEmitter: Default backend producing C++.
    - PythonEmitter: Backend producing Python.
    - Transpiler: Picks an emitter by target name and walks the program root:
      preamble, hoisted top-level functions, then the entry point holding
      every other top-level statement.

Usage:
    >>> Transpiler("cpp").transpile(root)

Raises:
    ValueError: If the target language is not supported.
    TypeError: If the AST root is not a `block` ASTNode.
    NotImplementedError: If the emitter lacks an `emit_*` method for a node kind.
"""

import logging
from typing import Protocol

from casec.casec_ast import ASTNode
from casec.emitters.cpp_emitter import CppEmitter
from casec.emitters.py_emitter import PythonEmitter

logger = logging.getLogger(__name__)


class Emitter(Protocol):  # pragma: no cover
    """Protocol for all CASE language emitters.

    Methods:
        open_program(): Writes the preamble/import section.
        open_entry_point(): Opens the entry-point block.
        close_program(): Closes the entry-point block and the program.
        get_output(): Returns the complete emitted code as a string.
        _visit(node): Emits one statement node through its `emit_<kind>` method.
    """

    def open_program(self) -> None: ...  # pragma: no cover

    def open_entry_point(self) -> None: ...  # pragma: no cover

    def close_program(self) -> None: ...  # pragma: no cover

    def get_output(self) -> str: ...  # pragma: no cover

    def _visit(self, node: ASTNode) -> None: ...  # pragma: no cover


EmitterType = type[CppEmitter] | type[PythonEmitter]
"""Alias for a concrete Emitter class type."""

EMITTERS: dict[str, EmitterType] = {
    "cpp": CppEmitter,
    "c++": CppEmitter,
    "py": PythonEmitter,
    "python": PythonEmitter,
}

TARGETS: tuple[str, ...] = ("cpp", "py")


class Transpiler:
    """Dispatches CASE AST nodes to the appropriate target language emitter.

    Attributes:
        target (str): Normalized target name.
        emitter (Emitter): The selected emitter instance for the output target.
    """

    def __init__(self, target: str = "cpp") -> None:
        """Initializes the transpiler with the desired output target.

        Args:
            target: The desired output language ("cpp", "py", ...).

        Raises:
            ValueError: If the target language is not supported.
        """
        target = target.lower()
        if target not in EMITTERS:
            raise ValueError(f"Unknown transpilation target: {target!r}")
        self.target = target
        self.emitter_cls = EMITTERS[target]
        self.emitter: Emitter = self.emitter_cls()

    def transpile(self, root: ASTNode) -> str:
        """Transpiles a program root into source code for the selected target.

        Args:
            root: The `block` node returned by the parser.

        Returns:
            The emitted source code as a string.

        Raises:
            TypeError: If `root` is not a `block` ASTNode.
        """
        if not isinstance(root, ASTNode) or root.kind != "block":
            raise TypeError("Transpiler expects the program root block ASTNode.")
        functions = [n for n in root.children if n.kind == "func_decl"]
        statements = [n for n in root.children if n.kind != "func_decl"]

        self.emitter = self.emitter_cls()
        self.emitter.open_program()
        for node in functions:
            self.emitter._visit(node)
        self.emitter.open_entry_point()
        for node in statements:
            self.emitter._visit(node)
        self.emitter.close_program()
        output = self.emitter.get_output()
        logger.debug(
            "Emitted %d functions and %d statements for target %s",
            len(functions),
            len(statements),
            self.target,
        )
        return output


def emit(root: ASTNode, target: str = "cpp") -> str:
    """Emits `root` for `target` using a fresh emitter."""
    return Transpiler(target).transpile(root)


__all__ = ["EMITTERS", "Emitter", "TARGETS", "Transpiler", "emit"]
