"""
CASE Language Parser

Parses CASE tokens into an abstract syntax tree rooted at a `block` node.

Supported Constructs
--------------------
- Statements:
    * Functions: `Fn name(a, b) { ... }` (parameter list optional when empty)
    * Output: `Print expr`
    * Conditionals: `if cond { ... } else { ... }`
    * Loops: `loop "header" { ... }` or `loop { ... }`
    * Declarations: `let name = expr` / `let name: int = expr`
    * Returns: `ret expr` / `ret`
    * Calls: `call name(args)` / `call name`
    * Anything else is a bare expression statement
    * A trailing `;` after any statement is optional

- Expressions:
    * Precedence climbing over `* /` > `+ -` > `== != < > <= >=`
    * Left-associative binary operators
    * Primaries: numbers, strings, `true`/`false`, identifiers,
      calls `name(args)` and parenthesized expressions

Parser Behavior
---------------
- Fail-fast by default: the first malformed statement raises `ParseError`.
- With `recover=True`, errors are collected in `Parser.errors` and parsing
  resumes at the next statement boundary (`;`, `}` or a statement keyword).

Entry Points
------------
- `Parser(tokens).parse()`: Parse a full program.
- `parse(tokens)`: Convenience wrapper.

Raises
------
ParseError
    With kind `UnterminatedBlock`, `ExpectedAssignment` or `ExpectedToken`.
"""

from __future__ import annotations

import logging

from casec.casec_ast import ASTNode
from casec.casec_constants import (
    BOOL_LITERALS,
    EOF,
    IDENT,
    KEYWORD,
    NUMBER,
    OPERATOR,
    PRECEDENCE,
    STATEMENT_KEYWORDS,
    STRING,
    TYPE_KEYWORDS,
)
from casec.casec_errors import DiagnosticKind, ParseError
from casec.casec_lexer import Token

logger = logging.getLogger(__name__)


class Parser:
    """
    CASE Parser Class

    Transforms a list of lexical tokens into an `ASTNode` tree.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream to be parsed. Must end with an EOF token.
    position : int
        Current index into the token stream.
    recover : bool
        Whether to recover from statement-level syntax errors.
    errors : list[ParseError]
        Errors collected while `recover` is enabled.
    """

    def __init__(self, tokens: list[Token], recover: bool = False) -> None:
        self.tokens: list[Token] = tokens
        self.position: int = 0
        self.recover = recover
        self.errors: list[ParseError] = []

    def current(self) -> Token:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        last = self.tokens[-1] if self.tokens else Token(EOF, "")
        return Token(EOF, "", last.line, last.col)

    def peek(self, offset: int = 1) -> Token:
        index = self.position + offset
        return self.tokens[index] if index < len(self.tokens) else Token(EOF, "")

    def advance(self) -> Token:
        """Consumes the current token and returns it."""
        tok = self.current()
        if self.position < len(self.tokens):
            self.position += 1
        return tok

    def at_end(self) -> bool:
        return self.current().type == EOF

    def check(self, value: str) -> bool:
        tok = self.current()
        return tok.value == value and tok.type not in (STRING, EOF)

    def match(self, value: str) -> Token | None:
        if self.check(value):
            return self.advance()
        return None

    def error(
        self, message: str, tok: Token | None = None, kind: DiagnosticKind = "ExpectedToken"
    ) -> ParseError:
        tok = tok or self.current()
        return ParseError(kind, message, tok.line, tok.col)

    def expect(
        self, value: str, message: str, kind: DiagnosticKind = "ExpectedToken"
    ) -> Token:
        tok = self.match(value)
        if tok is None:
            raise self.error(f"{message}, got {describe(self.current())}", kind=kind)
        return tok

    def expect_type(self, type_: str, message: str) -> Token:
        tok = self.current()
        if tok.type != type_:
            raise self.error(f"{message}, got {describe(tok)}")
        return self.advance()

    def parse(self) -> ASTNode:
        """Parse a full CASE program and return the root `block` node."""
        first = self.current()
        root = ASTNode("block", line=first.line or 1, col=first.col or 1)
        root.children = self.parse_statements(closing=None)
        logger.debug(
            "Parsed %d top-level statements (%d errors)",
            len(root.children),
            len(self.errors),
        )
        return root

    def parse_statements(self, closing: str | None) -> list[ASTNode]:
        statements: list[ASTNode] = []
        while not self.at_end() and not (closing and self.check(closing)):
            start = self.position
            try:
                statements.append(self.parse_statement())
            except ParseError as err:
                if not self.recover or err.kind == "UnterminatedBlock":
                    raise
                logger.info("Recovering from parse error: %s", err)
                self.errors.append(err)
                self.synchronize(start)
        return statements

    def synchronize(self, start: int) -> None:
        """Skips ahead to the next statement boundary after an error."""
        if self.position == start and not self.at_end():
            self.advance()
        while not self.at_end():
            tok = self.current()
            if self.match(";"):
                return
            if self.check("}"):
                return
            if tok.type == KEYWORD and tok.value in STATEMENT_KEYWORDS:
                return
            self.advance()

    def parse_statement(self) -> ASTNode:
        """Parse a single statement, dispatching on its leading keyword."""
        tok = self.current()
        dispatch = {
            "Fn": self.parse_function,
            "Print": self.parse_print,
            "if": self.parse_if,
            "loop": self.parse_loop,
            "let": self.parse_let,
            "ret": self.parse_return,
            "call": self.parse_call_statement,
        }
        handler = dispatch.get(tok.value) if tok.type == KEYWORD else None
        if handler is not None:
            node = handler()
        else:
            expr = self.parse_expression()
            node = ASTNode("expr_stmt", children=[expr], line=expr.line, col=expr.col)
        self.match(";")
        return node

    def parse_block(self) -> ASTNode:
        """Parse a `{}`-enclosed block of statements."""
        open_tok = self.expect("{", "Expected '{' to open a block")
        block = ASTNode("block", line=open_tok.line, col=open_tok.col)
        block.children = self.parse_statements(closing="}")
        if self.at_end():
            raise self.error(
                "Expected '}' to close block, got end of input",
                tok=open_tok,
                kind="UnterminatedBlock",
            )
        self.advance()
        return block

    def parse_function(self) -> ASTNode:
        """Parse `Fn name(params) { body }`."""
        fn_tok = self.advance()
        name = self.expect_type(IDENT, "Expected function name after 'Fn'")
        params: list[str] = []
        if self.match("("):
            if not self.check(")"):
                params.append(self.expect_type(IDENT, "Expected parameter name").value)
                while self.match(","):
                    params.append(
                        self.expect_type(IDENT, "Expected parameter name").value
                    )
            self.expect(")", "Expected ')' after parameter list")
        body = self.parse_block()
        return ASTNode(
            "func_decl",
            name.value,
            [body],
            line=fn_tok.line,
            col=fn_tok.col,
            params=params,
        )

    def parse_print(self) -> ASTNode:
        print_tok = self.advance()
        expr = self.parse_expression()
        return ASTNode("print", children=[expr], line=print_tok.line, col=print_tok.col)

    def parse_if(self) -> ASTNode:
        """Parse `if cond { ... }` with an optional `else { ... }`."""
        if_tok = self.advance()
        cond = self.parse_expression()
        then_block = self.parse_block()
        node = ASTNode("if", children=[cond, then_block], line=if_tok.line, col=if_tok.col)
        if self.match("else"):
            node.else_children = [self.parse_block()]
        return node

    def parse_loop(self) -> ASTNode:
        """Parse `loop "header" { ... }`; the header is kept verbatim."""
        loop_tok = self.advance()
        header = None
        if self.current().type == STRING:
            header = self.advance().value
        body = self.parse_block()
        return ASTNode("loop", header, [body], line=loop_tok.line, col=loop_tok.col)

    def parse_let(self) -> ASTNode:
        """Parse `let name [: type] = expr`. The initializer is mandatory."""
        let_tok = self.advance()
        name = self.expect_type(IDENT, "Expected variable name after 'let'")
        declared_type = None
        if self.match(":"):
            type_tok = self.current()
            if type_tok.type != KEYWORD or type_tok.value not in TYPE_KEYWORDS:
                raise self.error(f"Expected type name after ':', got {describe(type_tok)}")
            declared_type = TYPE_KEYWORDS[self.advance().value]
        self.expect(
            "=",
            f"Expected '=' after variable name '{name.value}'",
            kind="ExpectedAssignment",
        )
        init = self.parse_expression()
        return ASTNode(
            "var_decl",
            name.value,
            [init],
            line=let_tok.line,
            col=let_tok.col,
            declared_type=declared_type,
        )

    def parse_return(self) -> ASTNode:
        """Parse `ret [expr]`. A value must start on the same line as `ret`."""
        ret_tok = self.advance()
        node = ASTNode("return", line=ret_tok.line, col=ret_tok.col)
        nxt = self.current()
        if (
            not self.at_end()
            and nxt.line == ret_tok.line
            and not self.check(";")
            and not self.check("}")
        ):
            node.children = [self.parse_expression()]
        return node

    def parse_call_statement(self) -> ASTNode:
        """Parse `call name` or `call name(args)`."""
        call_tok = self.advance()
        name = self.expect_type(IDENT, "Expected function name after 'call'")
        args = self.parse_arguments() if self.check("(") else []
        return ASTNode("call", name.value, args, line=call_tok.line, col=call_tok.col)

    def parse_arguments(self) -> list[ASTNode]:
        self.expect("(", "Expected '('")
        args: list[ASTNode] = []
        if not self.check(")"):
            args.append(self.parse_expression())
            while self.match(","):
                args.append(self.parse_expression())
        self.expect(")", "Expected ')' after arguments")
        return args

    def parse_expression(self, min_prec: int = 0) -> ASTNode:
        """Precedence-climbing expression parser."""
        lhs = self.parse_primary()
        while True:
            op = self.current()
            prec = PRECEDENCE.get(op.value, -1) if op.type == OPERATOR else -1
            if prec < 0 or prec < min_prec:
                return lhs
            self.advance()
            rhs = self.parse_expression(prec + 1)
            lhs = ASTNode("binary", op.value, [lhs, rhs], line=op.line, col=op.col)

    def parse_primary(self) -> ASTNode:
        tok = self.current()
        if tok.type in (NUMBER, STRING) or (
            tok.type == KEYWORD and tok.value in BOOL_LITERALS
        ):
            self.advance()
            return ASTNode(
                "literal", tok.value, line=tok.line, col=tok.col, literal_kind=tok.type
            )
        if tok.type == IDENT:
            self.advance()
            if self.check("("):
                args = self.parse_arguments()
                return ASTNode("call", tok.value, args, line=tok.line, col=tok.col)
            return ASTNode("identifier", tok.value, line=tok.line, col=tok.col)
        if self.match("("):
            inner = self.parse_expression()
            self.expect(")", "Expected ')' to close expression")
            return inner
        raise self.error(f"Expected expression, got {describe(tok)}")


def describe(tok: Token) -> str:
    if tok.type == EOF:
        return "end of input"
    if tok.type == STRING:
        return f"string {tok.value!r}"
    return f"'{tok.value}'"


def parse(tokens: list[Token], recover: bool = False) -> ASTNode:
    """Parses a token list into a root `block` node. See `Parser`."""
    return Parser(tokens, recover=recover).parse()


__all__ = ["Parser", "parse"]
