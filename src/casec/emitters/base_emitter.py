"""
Shared machinery for CASE backend emitters.

`BaseEmitter` owns the output buffer, the indentation depth and the
dispatch from AST node kinds to `emit_<kind>` (statements) and
`emit_expr_<kind>` (expressions). Concrete emitters supply the target
syntax.

Emitters are pure functions of the AST: they never consult a symbol table,
and the same tree always produces byte-identical output.
"""

from casec.casec_ast import ASTNode

ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}


def escape_string(value: str) -> str:
    """Re-applies the escapes the lexer removed (backslash, quote, \\n, \\t, \\r)."""
    return "".join(ESCAPES.get(ch, ch) for ch in value)


class BaseEmitter:
    """Base class for emitters.

    Attributes:
        lines (list[str]): Accumulated lines of emitted code.
        indent (int): Current indentation level.
        reserved (frozenset[str]): Target words that user names are kept clear of.
    """

    indent_unit = "    "
    reserved: frozenset[str] = frozenset()

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.indent = 0

    def indent_str(self) -> str:
        return self.indent_unit * self.indent

    def line(self, text: str) -> None:
        self.lines.append(f"{self.indent_str()}{text}" if text else "")

    def get_output(self) -> str:
        return "\n".join(self.lines) + "\n"

    def emit_body(self, block: ASTNode) -> None:
        """Emits the statements of a block one level deeper."""
        self.indent += 1
        for stmt in block.children:
            self._visit(stmt)
        self.indent -= 1

    def emit_condition(self, node: ASTNode) -> str:
        """Emits an expression without the outer parentheses of a binary node."""
        code = self.emit_expr(node)
        if node.kind == "binary":
            return code[1:-1]
        return code

    def emit_expr(self, node: ASTNode) -> str:
        """
        Dispatches expression emission based on node kind.

        Raises
        ------
        NotImplementedError
            If no emitter exists for the node kind.
        """
        method = getattr(self, f"emit_expr_{node.kind}", None)
        if method is None:
            raise NotImplementedError(
                f"{type(self).__name__}: no expression emitter for kind '{node.kind}'"
            )
        return str(method(node))

    def name(self, value: object) -> str:
        """Returns `value` safe to use as a name in the target.

        A name whose underscore-stripped stem is reserved gets one more
        trailing `_`, so `new` becomes `new_` and a user's own `new_` becomes
        `new__`. Distinct CASE names stay distinct.
        """
        text = str(value)
        return f"{text}_" if text.rstrip("_") in self.reserved else text

    def emit_expr_identifier(self, node: ASTNode) -> str:
        return self.name(node.value)

    def emit_expr_binary(self, node: ASTNode) -> str:
        left = self.emit_expr(node.children[0])
        right = self.emit_expr(node.children[1])
        return f"({left} {node.value} {right})"

    def emit_expr_call(self, node: ASTNode) -> str:
        args = ", ".join(self.emit_expr(c) for c in node.children)
        return f"{self.emit_expr_identifier(node)}({args})"

    def _visit(self, node: ASTNode) -> None:
        """Dispatches a statement node to its `emit_<kind>` method."""
        method = getattr(self, f"emit_{node.kind}", None)
        if method is None:
            raise NotImplementedError(
                f"{type(self).__name__}: no emitter for {node.kind} "
                f"(line {node.line}, col {node.col})"
            )
        method(node)

    def emit_block(self, node: ASTNode) -> None:
        for stmt in node.children:
            self._visit(stmt)
