"""
Semantic analysis for CASE abstract syntax trees.

Walks the AST produced by `casec_parser`, maintaining a `SymbolTable` and
inferring a type tag for every expression. Problems are reported as
`Diagnostic` records and analysis always continues, so a single pass shows
every error rather than only the first.

Checks performed:
    - Redeclaration of a name within one scope (shadowing across scopes is fine)
    - Undefined names and names used before initialization
    - Type mismatches between binary operands and against `let` annotations
    - Non-boolean `if` conditions
    - Calls to undefined functions and calls with the wrong argument count

Dispatch is by node kind: statements go to `analyze_<kind>`, expressions to
`infer_<kind>`. Each expression node gets its inferred type written to
`node.type`.

Example:
    >>> analyzer = SemanticAnalyzer()
    >>> analyzer.analyze(root)
    >>> analyzer.error_count
    0
"""

import logging

from casec.casec_ast import ASTNode
from casec.casec_constants import (
    ARITH_OPS,
    BOOL,
    BOOL_LITERALS,
    COMPARISON_OPS,
    EXPRESSION_KINDS,
    FLOAT,
    FUNCTION,
    INT,
    STRING,
    STRING_TYPE,
    UNKNOWN_TYPE,
)
from casec.casec_errors import Diagnostic, DiagnosticKind
from casec.casec_symbols import SymbolTable

logger = logging.getLogger(__name__)


class SemanticAnalyzer:
    """Validates scoping and typing rules over a parsed CASE program.

    Args:
        symbols: Table to populate. A fresh one is created when omitted.

    Attributes:
        symbols (SymbolTable): Scope stack and diagnostics for this pass.
        local_arities (list[dict[str, int]]): Parameter counts of the
            functions declared in each open scope, innermost last.
    """

    def __init__(self, symbols: SymbolTable | None = None) -> None:
        self.symbols = symbols if symbols is not None else SymbolTable()
        self.local_arities: list[dict[str, int]] = []

    @property
    def error_count(self) -> int:
        return self.symbols.error_count

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.symbols.diagnostics

    def has_errors(self) -> bool:
        return self.symbols.has_errors()

    def report(self, kind: DiagnosticKind, message: str, node: ASTNode) -> None:
        self.symbols.report(Diagnostic(kind, message, node.line, node.col))

    def analyze(self, root: ASTNode) -> None:
        """Analyzes a whole program (or any subtree). Never raises on program errors."""
        before = self.error_count
        if root.kind == "block":
            self.analyze_program(root)
        else:
            self.visit(root)
        logger.debug(
            "Semantic analysis finished with %d new errors", self.error_count - before
        )

    def visit(self, node: ASTNode) -> None:
        if node.kind in EXPRESSION_KINDS:
            self.infer(node)
            return
        method = getattr(self, f"analyze_{node.kind}", None)
        if method is None:
            raise NotImplementedError(f"No semantic rule for node kind '{node.kind}'")
        method(node)

    def infer(self, node: ASTNode) -> str:
        """Infers and records the type of an expression node."""
        method = getattr(self, f"infer_{node.kind}", None)
        if method is None:
            raise NotImplementedError(f"No type rule for node kind '{node.kind}'")
        node.type = method(node)
        return node.type

    # Statements

    def analyze_program(self, node: ASTNode) -> None:
        """Analyzes a root block in the order the emitters lay it out.

        Top-level functions are hoisted above the entry point, so they are
        checked first, each seeing only the functions declared before it and
        itself. The remaining statements run inside the entry point and see
        every top-level function.
        """
        self.symbols.enter_scope()
        self.local_arities.append({})
        for stmt in node.children:
            if stmt.kind == "func_decl":
                self.analyze_function(stmt, hoisted=True)
        for stmt in node.children:
            if stmt.kind != "func_decl":
                self.visit(stmt)
        self.local_arities.pop()
        self.symbols.exit_scope()

    def analyze_block(self, node: ASTNode) -> None:
        self.symbols.enter_scope()
        self.local_arities.append({})
        for stmt in node.children:
            self.visit(stmt)
        self.local_arities.pop()
        self.symbols.exit_scope()

    def check_redeclaration(self, name: str, node: ASTNode) -> bool:
        existing = self.symbols.lookup_current(name)
        if existing is None:
            return False
        self.report(
            "Redeclaration",
            f"Redeclaration of '{name}' (previously declared at line "
            f"{existing.line}, col {existing.col})",
            node,
        )
        return True

    def analyze_func_decl(self, node: ASTNode) -> None:
        self.analyze_function(node, hoisted=False)

    def analyze_function(self, node: ASTNode, hoisted: bool) -> None:
        # A nested function is bound after its body, so it cannot call itself
        name = str(node.value)
        declared = not self.check_redeclaration(name, node)
        if declared:
            self.symbols.declare(name, FUNCTION, node.line, node.col)
            if hoisted:
                self.symbols.mark_initialized(name)
            if self.local_arities:
                self.local_arities[-1][name] = len(node.params)

        # Parameters and body statements share the function's own scope
        self.symbols.enter_scope()
        self.local_arities.append({})
        for param in node.params:
            if not self.check_redeclaration(param, node):
                self.symbols.declare(param, UNKNOWN_TYPE, node.line, node.col)
                self.symbols.mark_initialized(param)
        for stmt in node.children[0].children:
            self.visit(stmt)
        self.local_arities.pop()
        self.symbols.exit_scope()
        if declared and not hoisted:
            self.symbols.mark_initialized(name)

    def analyze_var_decl(self, node: ASTNode) -> None:
        name = str(node.value)
        redeclared = self.check_redeclaration(name, node)
        if not redeclared:
            self.symbols.declare(
                name, node.declared_type or UNKNOWN_TYPE, node.line, node.col
            )

        if not node.children:
            return
        init_type = self.infer(node.children[0])
        declared = node.declared_type
        if declared and init_type != declared and init_type != UNKNOWN_TYPE:
            self.report(
                "TypeMismatch",
                f"Type mismatch in declaration of '{name}': expected '{declared}', got '{init_type}'",
                node,
            )
        if not redeclared and declared is None:
            info = self.symbols.lookup_current(name)
            assert info is not None  # for mypy
            info.type = init_type
        self.symbols.mark_initialized(name)

    def analyze_if(self, node: ASTNode) -> None:
        cond_type = self.infer(node.children[0])
        if cond_type not in (BOOL, UNKNOWN_TYPE):
            self.report(
                "ConditionNotBoolean",
                f"Condition must be boolean, got '{cond_type}'",
                node.children[0],
            )
        self.visit(node.children[1])
        for else_block in node.else_children:
            self.visit(else_block)

    def analyze_loop(self, node: ASTNode) -> None:
        self.visit(node.children[0])

    def analyze_print(self, node: ASTNode) -> None:
        for child in node.children:
            self.infer(child)

    analyze_return = analyze_print
    analyze_expr_stmt = analyze_print

    # Expressions

    def infer_literal(self, node: ASTNode) -> str:
        if node.literal_kind == STRING:
            return STRING_TYPE
        lexeme = str(node.value)
        if lexeme in BOOL_LITERALS:
            return BOOL
        if "." in lexeme or "e" in lexeme.lower():
            return FLOAT
        return INT

    def infer_identifier(self, node: ASTNode) -> str:
        name = str(node.value)
        info = self.symbols.lookup_with_info(name)
        if info is None:
            self.report("UndefinedVariable", f"Undefined variable '{name}'", node)
            return UNKNOWN_TYPE
        if not info.initialized:
            self.report(
                "UsedBeforeInit", f"Variable '{name}' used before initialization", node
            )
        return info.type

    def infer_binary(self, node: ASTNode) -> str:
        op = str(node.value)
        left = self.infer(node.children[0])
        right = self.infer(node.children[1])
        if UNKNOWN_TYPE not in (left, right) and left != right:
            self.report(
                "TypeMismatch",
                f"Type mismatch in '{op}': '{left}' and '{right}'",
                node,
            )
            return UNKNOWN_TYPE
        if op in ARITH_OPS:
            if STRING_TYPE in (left, right):
                return STRING_TYPE if op == "+" else UNKNOWN_TYPE
            return FLOAT if FLOAT in (left, right) else INT
        if op in COMPARISON_OPS:
            return BOOL
        return UNKNOWN_TYPE

    def lookup_arity(self, name: str) -> int | None:
        for scope in reversed(self.local_arities):
            if name in scope:
                return scope[name]
        return None

    def infer_call(self, node: ASTNode) -> str:
        name = str(node.value)
        for arg in node.children:
            self.infer(arg)

        info = self.symbols.lookup_with_info(name)
        if info is None:
            self.report("UndefinedVariable", f"Undefined function '{name}'", node)
            return UNKNOWN_TYPE
        callee = info.type
        if callee not in (FUNCTION, UNKNOWN_TYPE):
            self.report(
                "TypeMismatch", f"'{name}' has type '{callee}' and is not callable", node
            )
            return UNKNOWN_TYPE
        if callee == FUNCTION and not info.initialized:
            self.report(
                "UsedBeforeInit",
                f"Nested function '{name}' cannot call itself",
                node,
            )
            return UNKNOWN_TYPE

        expected = self.lookup_arity(name) if callee != UNKNOWN_TYPE else None
        if expected is not None and expected != len(node.children):
            self.report(
                "ArgumentCountMismatch",
                f"'{name}' expects {expected} argument(s), got {len(node.children)}",
                node,
            )
        return UNKNOWN_TYPE


def analyze(root: ASTNode, symbols: SymbolTable | None = None) -> SemanticAnalyzer:
    """Runs a full analysis pass and returns the analyzer for inspection."""
    analyzer = SemanticAnalyzer(symbols)
    analyzer.analyze(root)
    return analyzer


__all__ = ["SemanticAnalyzer", "analyze"]
