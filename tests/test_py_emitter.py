import pytest

from casec.casec_ast import ASTNode
from casec.casec_constants import EXPRESSION_KINDS, NODE_KINDS
from casec.casec_lexer import tokenize
from casec.casec_parser import parse
from casec.casec_transpile import Transpiler
from casec.emitters.py_emitter import PythonEmitter

FOOTER = ["", "", 'if __name__ == "__main__":', "    main()"]


def emit_py(source: str) -> str:
    return Transpiler("py").transpile(parse(tokenize(source)))


def main_body(source: str) -> list[str]:
    lines = emit_py(source)[:-1].split("\n")
    start = lines.index("def main():")
    assert lines[-4:] == FOOTER
    return lines[start + 1 : -4]


def test_program_layout() -> None:
    assert emit_py('Fn greet() { Print "hi" }\nlet x = 10') == "\n".join(
        [
            "# Generated by casec",
            "",
            "def greet():",
            '    print("hi")',
            "",
            "",
            "def main():",
            "    x = 10",
        ]
        + FOOTER
    ) + "\n"


def test_empty_program_gets_pass() -> None:
    assert main_body("") == ["    pass"]


def test_bool_literals() -> None:
    assert main_body("let t = true\nlet f = false") == ["    t = True", "    f = False"]


def test_string_literal_escaping() -> None:
    assert main_body(r'Print "a\"b\tc"') == ['    print("a\\"b\\tc")']


def test_if_else_with_empty_branch() -> None:
    assert main_body("if x > 1 { Print x } else { }") == [
        "    if x > 1:",
        "        print(x)",
        "    else:",
        "        pass",
    ]


def test_loops() -> None:
    assert main_body('loop "i in range(3)" { Print i }\nloop { }') == [
        "    for i in range(3):",
        "        print(i)",
        "    while True:",
        "        pass",
    ]


def test_keyword_names_are_suffixed() -> None:
    assert main_body("let class = 1\nPrint class") == ["    class_ = 1", "    print(class_)"]
    lines = emit_py("Fn def(lambda) { ret lambda }").split("\n")
    assert lines[2:4] == ["def def_(lambda_):", "    return lambda_"]


def test_nested_function() -> None:
    lines = emit_py("Fn outer() { Fn inner() { } call inner }").split("\n")
    assert lines[2:8] == [
        "def outer():",
        "    def inner():",
        "        pass",
        "    inner()",
        "",
        "",
    ]


def test_return_forms() -> None:
    lines = emit_py("Fn f(a) {\n  if a > 1 { ret a * 2 }\n  ret\n}").split("\n")
    assert lines[2:6] == [
        "def f(a):",
        "    if a > 1:",
        "        return (a * 2)",
        "    return",
    ]


def test_call_and_expression_statements() -> None:
    assert main_body("call tick\ncall add(1, 2)\nx - 1") == [
        "    tick()",
        "    add(1, 2)",
        "    (x - 1)",
    ]


def test_generated_code_compiles() -> None:
    source = (
        "Fn fact(n) {\n"
        "  if n < 2 { ret 1 } else { ret n * fact(n - 1) }\n"
        "}\n"
        "let total: int = fact(5)\n"
        'loop "i in range(2)" { Print i }\n'
        'Print "done"\n'
    )
    compile(emit_py(source), "<casec>", "exec")


def test_generated_code_runs(capsys: pytest.CaptureFixture[str]) -> None:
    code = emit_py('Fn add(a, b) { ret a + b }\nPrint add(2, 3)\nPrint "ok"')
    exec(compile(code, "<casec>", "exec"), {"__name__": "__main__"})
    assert capsys.readouterr().out == "5\nok\n"


def test_every_node_kind_has_an_emitter() -> None:
    for kind in NODE_KINDS - (EXPRESSION_KINDS - {"call"}):
        assert callable(getattr(PythonEmitter, f"emit_{kind}", None)), kind
    for kind in EXPRESSION_KINDS:
        assert callable(getattr(PythonEmitter, f"emit_expr_{kind}", None)), kind


def test_unknown_expression_kind_raises() -> None:
    node = ASTNode("literal", "1")
    node.kind = "weird"
    with pytest.raises(NotImplementedError, match="weird"):
        PythonEmitter().emit_expr(node)


def test_unknown_statement_kind_raises() -> None:
    node = ASTNode("print")
    node.kind = "weird"
    with pytest.raises(NotImplementedError, match="no emitter for weird"):
        PythonEmitter()._visit(node)


def test_user_main_does_not_clash_with_entry_point(
    capsys: pytest.CaptureFixture[str],
) -> None:
    code = emit_py("Fn main() { Print 1 }\ncall main")
    assert "def main_():" in code
    assert code.count("def main():") == 1
    exec(compile(code, "<casec>", "exec"), {"__name__": "__main__"})
    assert capsys.readouterr().out == "1\n"


def test_user_print_function_does_not_shadow_builtin(
    capsys: pytest.CaptureFixture[str],
) -> None:
    code = emit_py("Fn print(a) { ret a }\nPrint print(7)")
    assert "def print_(a):" in code
    exec(compile(code, "<casec>", "exec"), {"__name__": "__main__"})
    assert capsys.readouterr().out == "7\n"
