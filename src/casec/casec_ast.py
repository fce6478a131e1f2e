"""
Defines the abstract syntax tree (AST) node structure for the CASE programming language.

Classes:
    ASTNode:
        A closed tagged variant over the node kinds listed in
        `casec_constants.NODE_KINDS`. Used by the parser, analyzer and emitters.

    ASTDict:
        TypedDict representation for serializing ASTNode instances to plain Python dictionaries,
        suitable for JSON output or debugging.

Each ASTNode tracks:
    kind (str): The syntactic construct (e.g., "func_decl", "if", "binary").
    value (str, optional): Name, lexeme, operator or loop header, depending on kind.
    children (list[ASTNode]): Primary child nodes, owned exclusively by this node.
    else_children (list[ASTNode]): Statements of an `if` node's else branch.
    params (list[str]): Parameter names of a `func_decl`.
    declared_type (str, optional): Annotation on a `var_decl` (`let x: int = 1`).
    literal_kind (str, optional): Token kind that produced a `literal`.
    type (str, optional): Inferred type tag, filled in by semantic analysis.
    line (int), col (int): Source position of the triggering token.

Per-kind layout:
    block       children = statements
    print       children = [expr]
    if          children = [cond, then_block], else_children = [else_block] or []
    loop        value = header or None, children = [body_block]
    func_decl   value = name, params = names, children = [body_block]
    return      children = [expr] or []
    call        value = callee name, children = args
    binary      value = operator, children = [lhs, rhs]
    var_decl    value = name, children = [initializer]
    literal     value = lexeme / string contents
    identifier  value = name
    expr_stmt   children = [expr]

Example:
    node = ASTNode("var_decl", "x", [ASTNode("literal", "1", literal_kind="NUMBER")])
"""

from typing import Any, TypedDict

from casec.casec_constants import EXPRESSION_KINDS, NODE_KINDS


class ASTDict(TypedDict, total=False):
    """TypedDict shape of a serialized `ASTNode` (see `ASTNode.to_dict`)."""

    kind: str
    value: str | None
    line: int
    col: int
    type: str | None
    params: list[str]
    declared_type: str | None
    literal_kind: str | None
    children: list["ASTDict"]
    else_children: list["ASTDict"]


class ASTNode:
    """
    Represents a node in the abstract syntax tree (AST) for the CASE language.

    Args:
        kind (str): One of `NODE_KINDS`.
        value (str, optional): Per-kind payload, see module docstring.
        children (list[ASTNode], optional): Primary child nodes.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).
        else_children (list[ASTNode], optional): Else branch for `if`.
        params (list[str], optional): Parameter names for `func_decl`.
        declared_type (str, optional): Type annotation for `var_decl`.
        literal_kind (str, optional): Producing token kind for `literal`.

    Raises:
        ValueError: If `kind` is not a known node kind.
    """

    def __init__(
        self,
        kind: str,
        value: str | None = None,
        children: list["ASTNode"] | None = None,
        line: int = 0,
        col: int = 0,
        else_children: list["ASTNode"] | None = None,
        params: list[str] | None = None,
        declared_type: str | None = None,
        literal_kind: str | None = None,
    ):
        if kind not in NODE_KINDS:
            raise ValueError(f"Unknown AST node kind: {kind!r}")
        self.kind = kind
        self.value = value
        self.children: list["ASTNode"] = children or []
        self.else_children: list["ASTNode"] = else_children or []
        self.params: list[str] = params or []
        self.declared_type = declared_type
        self.literal_kind = literal_kind
        self.line = line
        self.col = col
        self.type: str | None = None

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        if self.value is not None:
            parts.append(f"value={repr(self.value)}")
        if self.params:
            parts.append(f"params={self.params!r}")
        if self.declared_type is not None:
            parts.append(f"declared_type={self.declared_type}")
        if self.type is not None:
            parts.append(f"type={self.type}")
        if self.children:
            preview = ", ".join(repr(c) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        if self.else_children:
            preview = ", ".join(repr(c) for c in self.else_children[:3])
            parts.append(f"else_children=[{preview}]")
        return f"ASTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        """Structural equality. The analyzer's inferred `type` is not compared."""
        if not isinstance(other, ASTNode):
            return False
        return (
            self.kind == other.kind
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
            and self.params == other.params
            and self.declared_type == other.declared_type
            and self.literal_kind == other.literal_kind
            and self.children == other.children
            and self.else_children == other.else_children
        )

    __hash__ = None  # type: ignore[assignment]

    @property
    def is_expression(self) -> bool:
        return self.kind in EXPRESSION_KINDS

    def walk(self) -> list["ASTNode"]:
        """Returns this node and all descendants in pre-order."""
        nodes = [self]
        for child in self.children + self.else_children:
            nodes.extend(child.walk())
        return nodes

    def block_depth(self) -> int:
        """Maximum nesting of `block` nodes below and including this node."""
        inner = max(
            (c.block_depth() for c in self.children + self.else_children), default=0
        )
        return inner + (1 if self.kind == "block" else 0)

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "value": self.value,
            "line": self.line,
            "col": self.col,
            "type": self.type,
            "params": list(self.params),
            "declared_type": self.declared_type,
            "literal_kind": self.literal_kind,
            "children": [c.to_dict() for c in self.children],
            "else_children": [c.to_dict() for c in self.else_children],
        }


__all__ = ["ASTDict", "ASTNode"]
