"""
Shared lexical and semantic tables for the CASE language.

All tables are built once at import time and never mutated. The lexer,
parser, analyzer and emitters receive them by reference.

Exports:
    - Token kinds (KEYWORD, IDENT, NUMBER, ...)
    - KEYWORDS, TYPE_KEYWORDS, STATEMENT_KEYWORDS
    - OPERATOR_CHARS, TWO_CHAR_OPERATORS, SYMBOL_CHARS
    - PRECEDENCE, ARITH_OPS, COMPARISON_OPS
    - CPP_RESERVED, PY_RESERVED, ENTRY_POINT
    - NODE_KINDS
    - Type tags (INT, FLOAT, BOOL, STRING, UNKNOWN, FUNCTION)
"""

import keyword

# Token kinds
KEYWORD = "KEYWORD"
IDENT = "IDENT"
NUMBER = "NUMBER"
STRING = "STRING"
OPERATOR = "OPERATOR"
SYMBOL = "SYMBOL"
COMMENT = "COMMENT"
EOF = "EOF"
UNKNOWN = "UNKNOWN"

TOKEN_KINDS: frozenset[str] = frozenset(
    {KEYWORD, IDENT, NUMBER, STRING, OPERATOR, SYMBOL, COMMENT, EOF, UNKNOWN}
)

# Type tags
INT = "int"
FLOAT = "float"
BOOL = "bool"
STRING_TYPE = "string"
UNKNOWN_TYPE = "unknown"
FUNCTION = "function"

TYPE_TAGS: frozenset[str] = frozenset(
    {INT, FLOAT, BOOL, STRING_TYPE, UNKNOWN_TYPE, FUNCTION}
)

# `let x: double = ...` is accepted as a spelling of float
TYPE_KEYWORDS: dict[str, str] = {
    "int": INT,
    "float": FLOAT,
    "double": FLOAT,
    "bool": BOOL,
    "string": STRING_TYPE,
}

STATEMENT_KEYWORDS: frozenset[str] = frozenset(
    {"Fn", "Print", "if", "loop", "let", "ret", "call"}
)

KEYWORDS: frozenset[str] = (
    STATEMENT_KEYWORDS | {"else", "true", "false"} | frozenset(TYPE_KEYWORDS)
)

BOOL_LITERALS: frozenset[str] = frozenset({"true", "false"})

OPERATOR_CHARS = "+-*/%=!<>|&^~"

TWO_CHAR_OPERATORS: frozenset[str] = frozenset(
    {"==", "!=", "<=", ">=", "&&", "||", "++", "--", "+=", "-=", "*=", "/="}
)

SYMBOL_CHARS = "(){}[];,.:"

ARITH_OPS: frozenset[str] = frozenset({"+", "-", "*", "/"})

COMPARISON_OPS: frozenset[str] = frozenset({"==", "!=", "<", ">", "<=", ">="})

PRECEDENCE: dict[str, int] = {
    "*": 20,
    "/": 20,
    "+": 10,
    "-": 10,
    "==": 5,
    "!=": 5,
    "<": 5,
    ">": 5,
    "<=": 5,
    ">=": 5,
}

STRING_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
}

# Names an emitter must not produce verbatim: target keywords plus the
# entry point and the names the generated code itself relies on
ENTRY_POINT = "main"

CPP_RESERVED: frozenset[str] = frozenset(
    {
        "alignas", "alignof", "and", "and_eq", "asm", "auto", "bitand",
        "bitor", "bool", "break", "case", "catch", "char", "char8_t",
        "char16_t", "char32_t", "class", "compl", "concept", "const",
        "consteval", "constexpr", "constinit", "const_cast", "continue",
        "co_await", "co_return", "co_yield", "decltype", "default", "delete",
        "do", "double", "dynamic_cast", "else", "enum", "explicit", "export",
        "extern", "false", "float", "for", "friend", "goto", "if", "inline",
        "int", "long", "mutable", "namespace", "new", "noexcept", "not",
        "not_eq", "nullptr", "operator", "or", "or_eq", "private",
        "protected", "public", "register", "reinterpret_cast", "requires",
        "return", "short", "signed", "sizeof", "static", "static_assert",
        "static_cast", "struct", "switch", "template", "this",
        "thread_local", "throw", "true", "try", "typedef", "typeid",
        "typename", "union", "unsigned", "using", "virtual", "void",
        "volatile", "wchar_t", "while", "xor", "xor_eq",
        ENTRY_POINT, "std",
    }
)

PY_RESERVED: frozenset[str] = frozenset(keyword.kwlist) | {ENTRY_POINT, "print"}

# AST node kinds
BLOCK = "block"
PRINT = "print"
IF = "if"
LOOP = "loop"
FUNC_DECL = "func_decl"
RETURN = "return"
CALL = "call"
BINARY = "binary"
VAR_DECL = "var_decl"
LITERAL = "literal"
IDENTIFIER = "identifier"
EXPR_STMT = "expr_stmt"

NODE_KINDS: frozenset[str] = frozenset(
    {
        BLOCK,
        PRINT,
        IF,
        LOOP,
        FUNC_DECL,
        RETURN,
        CALL,
        BINARY,
        VAR_DECL,
        LITERAL,
        IDENTIFIER,
        EXPR_STMT,
    }
)

EXPRESSION_KINDS: frozenset[str] = frozenset({CALL, BINARY, LITERAL, IDENTIFIER})

__all__ = [
    "ARITH_OPS",
    "BOOL_LITERALS",
    "COMPARISON_OPS",
    "CPP_RESERVED",
    "ENTRY_POINT",
    "EXPRESSION_KINDS",
    "KEYWORDS",
    "NODE_KINDS",
    "OPERATOR_CHARS",
    "PRECEDENCE",
    "PY_RESERVED",
    "STATEMENT_KEYWORDS",
    "STRING_ESCAPES",
    "SYMBOL_CHARS",
    "TOKEN_KINDS",
    "TWO_CHAR_OPERATORS",
    "TYPE_KEYWORDS",
    "TYPE_TAGS",
]
