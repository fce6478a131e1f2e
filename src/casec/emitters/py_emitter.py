"""
Translates CASE AST nodes into executable Python code.

This module defines the `PythonEmitter` class, the second backend next to
`CppEmitter`. The program layout mirrors the C++ one: functions first, then
a `main()` entry point holding all other top-level statements, then a
`__main__` guard.

Supported Features:
    - Expressions: arithmetic and comparison operators, calls, literals
    - Statements: let bindings, print, return, calls, bare expressions
    - Control flow: if/else, loops (`for <header>:` or `while True:`)
    - Functions: nested definitions are emitted as nested `def`s

Behavior:
    - `true`/`false` become `True`/`False`.
    - Names that are Python keywords, `main` or `print` get a trailing underscore.
    - Empty bodies emit `pass`.
"""

from casec.casec_ast import ASTNode
from casec.casec_constants import ENTRY_POINT, KEYWORD, PY_RESERVED, STRING
from casec.emitters.base_emitter import BaseEmitter, escape_string


class PythonEmitter(BaseEmitter):
    """Emits Python code from CASE AST nodes.

    Attributes:
        lines (list[str]): Accumulated lines of emitted Python code.
        indent (int): Current indentation level for emitted code blocks.
    """

    reserved = PY_RESERVED

    def __init__(self) -> None:
        super().__init__()
        self._entry_start = 0

    def open_program(self) -> None:
        self.lines.append("# Generated by casec")
        self.lines.append("")

    def open_entry_point(self) -> None:
        self.line(f"def {ENTRY_POINT}():")
        self.indent += 1
        self._entry_start = len(self.lines)

    def close_program(self) -> None:
        if len(self.lines) == self._entry_start:
            self.line("pass")
        self.indent -= 1
        self.lines.extend(
            ["", "", 'if __name__ == "__main__":', f"    {ENTRY_POINT}()"]
        )

    def emit_expr_literal(self, node: ASTNode) -> str:
        if node.literal_kind == STRING:
            return f'"{escape_string(str(node.value))}"'
        if node.literal_kind == KEYWORD:
            return "True" if node.value == "true" else "False"
        return str(node.value)

    def emit_body(self, block: ASTNode) -> None:
        if not block.children:
            self.indent += 1
            self.line("pass")
            self.indent -= 1
            return
        super().emit_body(block)

    def emit_print(self, node: ASTNode) -> None:
        """
        Emits a `print` statement.

        Parameters
        ----------
        node : ASTNode
            A print node with one expression child.
        """
        e = self.emit_expr(node.children[0])
        self.line(f"print({e})")

    def emit_var_decl(self, node: ASTNode) -> None:
        rhs = self.emit_expr(node.children[0])
        self.line(f"{self.name(node.value)} = {rhs}")

    def emit_return(self, node: ASTNode) -> None:
        """
        Emits a `return` statement.

        If the node has children, emits `return expr` using the first child as the return value.
        If no children are present, emits a bare `return`.
        """
        if node.children:
            v = self.emit_expr(node.children[0])
            self.line(f"return {v}")
        else:
            self.line("return")

    def emit_if(self, node: ASTNode) -> None:
        """
        Emits an `if` statement with optional `else` block.

        Parameters
        ----------
        node : ASTNode
            The if-node with condition and then-block in `children` and an optional
            else-block in `else_children`.
        """
        cond_expr = self.emit_condition(node.children[0])
        self.line(f"if {cond_expr}:")
        self.emit_body(node.children[1])
        if node.else_children:
            self.line("else:")
            self.emit_body(node.else_children[0])

    def emit_loop(self, node: ASTNode) -> None:
        """Emits `for <header>:` when a header is present, otherwise `while True:`."""
        if node.value is not None:
            self.line(f"for {node.value}:")
        else:
            self.line("while True:")
        self.emit_body(node.children[0])

    def emit_func_decl(self, node: ASTNode) -> None:
        params = ", ".join(self.name(p) for p in node.params)
        self.line(f"def {self.name(node.value)}({params}):")
        self.emit_body(node.children[0])
        if self.indent == 0:
            self.lines.extend(["", ""])

    def emit_call(self, node: ASTNode) -> None:
        self.line(self.emit_expr_call(node))

    def emit_expr_stmt(self, node: ASTNode) -> None:
        """
        Emits a standalone expression statement.

        Parameters
        ----------
        node : ASTNode
            A node containing one expression child to be evaluated.
        """
        self.line(self.emit_expr(node.children[0]))
