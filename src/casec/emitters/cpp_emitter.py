"""
Translates CASE AST nodes into C++ source code.

This is the default backend. A program becomes:

    #include <iostream>
    #include <string>

    using namespace std::string_literals;

    auto greet() {
        std::cout << "hi"s << std::endl;
    }

    int main() {
        auto x = 10;
        return 0;
    }

Top-level functions are hoisted above `main`; every other top-level
statement goes inside `main`. Functions declared inside another body become
capturing lambdas, since C++ has no nested functions.

Behavior:
    - `let` bindings are emitted with `auto`.
    - Loop headers are passed through verbatim (`for (;;)` when absent).
    - String literals are re-escaped and given the `s` suffix, so they are
      `std::string` values and `+` concatenates them.
    - Names that are C++ keywords, `main` or `std` get a trailing underscore.
"""

from casec.casec_ast import ASTNode
from casec.casec_constants import CPP_RESERVED, ENTRY_POINT, STRING
from casec.emitters.base_emitter import BaseEmitter, escape_string

PREAMBLE = (
    "// Generated by casec",
    "#include <iostream>",
    "#include <string>",
    "",
    "using namespace std::string_literals;",
)


class CppEmitter(BaseEmitter):
    """Emits C++ code from CASE AST nodes."""

    reserved = CPP_RESERVED

    def open_program(self) -> None:
        self.lines.extend(PREAMBLE)
        self.lines.append("")

    def open_entry_point(self) -> None:
        self.line(f"int {ENTRY_POINT}() {{")
        self.indent += 1

    def close_program(self) -> None:
        self.line("return 0;")
        self.indent -= 1
        self.line("}")

    def emit_expr_literal(self, node: ASTNode) -> str:
        if node.literal_kind == STRING:
            return f'"{escape_string(str(node.value))}"s'
        return str(node.value)

    def emit_print(self, node: ASTNode) -> None:
        e = self.emit_expr(node.children[0])
        self.line(f"std::cout << {e} << std::endl;")

    def emit_var_decl(self, node: ASTNode) -> None:
        rhs = self.emit_expr(node.children[0])
        self.line(f"auto {self.name(node.value)} = {rhs};")

    def emit_if(self, node: ASTNode) -> None:
        cond = self.emit_condition(node.children[0])
        self.line(f"if ({cond}) {{")
        self.emit_body(node.children[1])
        if node.else_children:
            self.line("} else {")
            self.emit_body(node.else_children[0])
        self.line("}")

    def emit_loop(self, node: ASTNode) -> None:
        header = node.value if node.value is not None else ";;"
        self.line(f"for ({header}) {{")
        self.emit_body(node.children[0])
        self.line("}")

    def emit_func_decl(self, node: ASTNode) -> None:
        params = ", ".join(f"auto {self.name(p)}" for p in node.params)
        name = self.name(node.value)
        if self.indent == 0:
            self.line(f"auto {name}({params}) {{")
            self.emit_body(node.children[0])
            self.line("}")
            self.line("")
        else:
            self.line(f"auto {name} = [&]({params}) {{")
            self.emit_body(node.children[0])
            self.line("};")

    def emit_return(self, node: ASTNode) -> None:
        if node.children:
            self.line(f"return {self.emit_expr(node.children[0])};")
        else:
            self.line("return;")

    def emit_call(self, node: ASTNode) -> None:
        self.line(f"{self.emit_expr_call(node)};")

    def emit_expr_stmt(self, node: ASTNode) -> None:
        self.line(f"{self.emit_expr(node.children[0])};")
