import pytest

from casec.casec_ast import ASTNode
from casec.casec_constants import EXPRESSION_KINDS, NODE_KINDS
from casec.casec_lexer import tokenize
from casec.casec_parser import parse
from casec.casec_semantic import SemanticAnalyzer, analyze
from casec.casec_symbols import SymbolTable


def check(source: str) -> tuple[ASTNode, SemanticAnalyzer]:
    root = parse(tokenize(source))
    return root, analyze(root)


def kinds(source: str) -> list[str]:
    return [d.kind for d in check(source)[1].diagnostics]


def test_clean_program_has_no_errors() -> None:
    _, analyzer = check('Print "Hello, World!"')
    assert analyzer.error_count == 0
    assert not analyzer.has_errors()


def test_redeclaration_in_same_scope() -> None:
    _, analyzer = check("let x: int = 10\nlet x: int = 20")
    assert analyzer.error_count == 1
    (diag,) = analyzer.diagnostics
    assert diag.kind == "Redeclaration"
    assert diag.line == 2
    assert "previously declared at line 1" in diag.message


def test_undefined_variable() -> None:
    _, analyzer = check("Print y")
    (diag,) = analyzer.diagnostics
    assert diag.kind == "UndefinedVariable"
    assert "'y'" in diag.message
    assert (diag.line, diag.col) == (1, 7)


def test_binary_type_mismatch_yields_unknown() -> None:
    root, analyzer = check('let a = 1\nlet b = "s"\nPrint a + b')
    assert [d.kind for d in analyzer.diagnostics] == ["TypeMismatch"]
    assert root.children[2].children[0].type == "unknown"


def test_literal_operand_mismatch_yields_unknown() -> None:
    root, analyzer = check('let x = 5\nlet y = x + "s"')
    assert [d.kind for d in analyzer.diagnostics] == ["TypeMismatch"]
    assert root.children[1].children[0].type == "unknown"


def test_int_and_float_do_not_mix() -> None:
    assert kinds("Print 1 + 2.5") == ["TypeMismatch"]


def test_shadowing_in_nested_block_is_allowed() -> None:
    assert kinds("let x = 1\nif true { let x = 2 }\nloop { let x = 3 }") == []


def test_block_scoped_names_are_not_visible_after_block() -> None:
    assert kinds("if true { let z = 1 }\nPrint z") == ["UndefinedVariable"]


def test_annotation_mismatch() -> None:
    assert kinds('let x: int = "s"') == ["TypeMismatch"]
    assert kinds("let i: int = 1.5") == ["TypeMismatch"]


def test_matching_annotations() -> None:
    source = 'let f: float = 1.5\nlet d: double = 2.0\nlet b: bool = true\nlet s: string = "t"'
    assert kinds(source) == []


def test_unannotated_let_takes_inferred_type() -> None:
    assert kinds('let s = "a"\nlet n = 1\nPrint s + n') == ["TypeMismatch"]


def test_condition_must_be_boolean() -> None:
    _, analyzer = check("if 1 { }")
    (diag,) = analyzer.diagnostics
    assert diag.kind == "ConditionNotBoolean"
    assert (diag.line, diag.col) == (1, 4)
    assert kinds("if 1 < 2 { }") == []
    assert kinds("if false { } else { }") == []


def test_literal_types() -> None:
    root, _ = check('Print 1\nPrint 2.5\nPrint true\nPrint "t"')
    assert [s.children[0].type for s in root.children] == ["int", "float", "bool", "string"]


def test_arithmetic_result_types() -> None:
    root, analyzer = check('Print 1 + 2 * 3\nPrint 1.5 / 0.5\nPrint "a" + "b"\nPrint 1 == 2')
    assert analyzer.error_count == 0
    assert [s.children[0].type for s in root.children] == ["int", "float", "string", "bool"]


def test_string_subtraction_is_unknown() -> None:
    root, analyzer = check('Print "a" - "b"')
    assert analyzer.error_count == 0
    assert root.children[0].children[0].type == "unknown"


def test_every_expression_gets_a_type() -> None:
    root, _ = check("Fn add(a, b) { ret a + b }\nlet r = add(1, 2) * 3\nif r > 2 { Print r }")
    for node in root.walk():
        if node.is_expression:
            assert node.type is not None


def test_used_before_initialization() -> None:
    _, analyzer = check("let x = x + 1")
    assert [d.kind for d in analyzer.diagnostics] == ["UsedBeforeInit"]
    assert kinds("let y: int = y") == ["UsedBeforeInit"]


def test_function_parameters_are_in_scope() -> None:
    assert kinds("Fn add(a, b) { ret a + b }\nPrint add(1, 2)") == []


def test_parameters_not_visible_outside_function() -> None:
    assert kinds("Fn f(a) { }\nPrint a") == ["UndefinedVariable"]


def test_duplicate_parameter() -> None:
    assert kinds("Fn f(a, a) { }") == ["Redeclaration"]


def test_parameter_and_body_share_scope() -> None:
    assert kinds("Fn f(a) { let a = 1 }") == ["Redeclaration"]


def test_recursive_function() -> None:
    assert kinds("Fn fact(n) { if n < 2 { ret 1 } ret n * fact(n - 1) }") == []


def test_top_level_function_callable_before_declaration() -> None:
    assert kinds("call greet\nFn greet() { Print 1 }") == []


def test_top_level_function_cannot_see_entry_point_locals() -> None:
    _, analyzer = check("let x = 1\nFn f() { Print x }\ncall f")
    (diag,) = analyzer.diagnostics
    assert diag.kind == "UndefinedVariable"
    assert (diag.line, diag.col) == (2, 16)


def test_top_level_function_sees_only_earlier_functions() -> None:
    assert kinds("Fn a() { Print 1 }\nFn b() { call a }") == []
    assert kinds("Fn a() { call b }\nFn b() { Print 1 }") == ["UndefinedVariable"]


def test_function_and_let_with_same_name_clash() -> None:
    _, analyzer = check("let f = 1\nFn f() { }")
    (diag,) = analyzer.diagnostics
    assert diag.kind == "Redeclaration"
    assert diag.line == 1


def test_nested_function_cannot_call_itself() -> None:
    source = "Fn outer() { Fn f(n) { if n < 1 { ret 0 } ret f(n - 1) } }"
    _, analyzer = check(source)
    (diag,) = analyzer.diagnostics
    assert diag.kind == "UsedBeforeInit"
    assert "Nested function 'f' cannot call itself" in diag.message


def test_nested_function_callable_after_definition() -> None:
    assert kinds("Fn outer() { Fn f(n) { ret n } call f(1) }") == []
    assert kinds("if true { Fn g() { } call g }") == []


def test_undefined_function() -> None:
    _, analyzer = check("call nope")
    (diag,) = analyzer.diagnostics
    assert diag.kind == "UndefinedVariable"
    assert "Undefined function 'nope'" in diag.message


def test_calling_a_non_function() -> None:
    assert kinds("let x = 1\ncall x") == ["TypeMismatch"]


def test_argument_count_mismatch() -> None:
    assert kinds("Fn f(a) { }\ncall f(1, 2)") == ["ArgumentCountMismatch"]
    assert kinds("Fn f(a) { }\nPrint f()") == ["ArgumentCountMismatch"]


def test_nested_function_arity_is_checked() -> None:
    source = "Fn outer() { Fn inner(a) { } call inner(1, 2) }"
    assert kinds(source) == ["ArgumentCountMismatch"]


def test_nested_function_not_visible_outside() -> None:
    assert kinds("Fn outer() { Fn inner() { } }\ncall inner") == ["UndefinedVariable"]


def test_call_arguments_are_checked() -> None:
    assert kinds("Fn f(a) { }\ncall f(missing)") == ["UndefinedVariable"]


def test_expression_statements_are_checked() -> None:
    assert kinds("ghost + 1") == ["UndefinedVariable"]


def test_analysis_continues_after_errors() -> None:
    source = "Print a\nlet b: int = true\nif 3 { Print c }\nlet d = 1\nlet d = 2"
    assert kinds(source) == [
        "UndefinedVariable",
        "TypeMismatch",
        "ConditionNotBoolean",
        "UndefinedVariable",
        "Redeclaration",
    ]


def test_error_count_is_monotonic_across_runs() -> None:
    table = SymbolTable()
    analyzer = SemanticAnalyzer(table)
    seen = [analyzer.error_count]
    for source in ["Print a", "let x = 1", "Print b\nPrint c"]:
        analyzer.analyze(parse(tokenize(source)))
        seen.append(analyzer.error_count)
    assert seen == sorted(seen)
    assert seen[-1] == 3
    assert table.error_count == len(table.diagnostics) == 3


def test_every_node_kind_has_a_rule() -> None:
    for kind in NODE_KINDS - EXPRESSION_KINDS:
        assert callable(getattr(SemanticAnalyzer, f"analyze_{kind}", None)), kind
    for kind in EXPRESSION_KINDS:
        assert callable(getattr(SemanticAnalyzer, f"infer_{kind}", None)), kind


def test_missing_rule_raises() -> None:
    node = ASTNode("print")
    node.kind = "mystery"
    with pytest.raises(NotImplementedError, match="mystery"):
        SemanticAnalyzer().visit(node)
    with pytest.raises(NotImplementedError, match="mystery"):
        SemanticAnalyzer().infer(node)
