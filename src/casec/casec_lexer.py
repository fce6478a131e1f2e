"""
Lexical analyzer for the CASE programming language.

This module provides core components for converting raw source code into token streams:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Functions:
    tokenize: Lexes a whole source buffer into a list ending in an EOF token.

Features:
    - Skips whitespace, `//` line comments and `/* */` block comments
    - Recognizes:
        * Identifiers and keywords (exact match against an immutable keyword set)
        * Numbers (whole and fractional share one NUMBER kind)
        * Strings (with `\\n \\t \\r \\\\ \\"` escapes)
        * Operators (greedy two-character match) and punctuation symbols

Raises:
    LexError: On unterminated strings or, in strict mode, unexpected characters.

Example:
    >>> [t.value for t in tokenize('Print "hi"')]
    ['Print', 'hi', '']
"""

import logging
from typing import Any

from casec.casec_constants import (
    COMMENT,
    EOF,
    IDENT,
    KEYWORD,
    KEYWORDS,
    NUMBER,
    OPERATOR,
    OPERATOR_CHARS,
    STRING,
    STRING_ESCAPES,
    SYMBOL,
    SYMBOL_CHARS,
    TWO_CHAR_OPERATORS,
    UNKNOWN,
)
from casec.casec_errors import LexError

logger = logging.getLogger(__name__)


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token in the CASE language.

    Tokens are treated as immutable once created.

    Attributes:
        type (str): The token kind (e.g. 'KEYWORD', 'IDENT', 'EOF').
        value (str): The lexeme; for strings, the unescaped contents.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    __slots__ = ("type", "value", "line", "col")

    def __init__(self, type_: str, value: str, line: int = 0, col: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, {self.line}:{self.col})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))


class Lexer:
    """Lexical analyzer for the CASE language.

    Args:
        stream: The source stream to tokenize.
        strict: When True, an unrecognized character raises `LexError`;
            otherwise it is returned as an UNKNOWN token.
        keep_comments: When True, comments are returned as COMMENT tokens.
        keywords: The keyword table; identifiers matching it exactly become KEYWORD.
    """

    def __init__(
        self,
        stream: CharacterStream,
        strict: bool = True,
        keep_comments: bool = False,
        keywords: frozenset[str] = KEYWORDS,
    ) -> None:
        self.stream = stream
        self.strict = strict
        self.keep_comments = keep_comments
        self.keywords = keywords

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while self.peek() in (" ", "\t", "\r", "\n"):
            self.advance()

    def read_line_comment(self) -> str:
        text = ""
        while not self.stream.end_of_file() and self.peek() != "\n":
            text += self.advance()
        return text

    def read_block_comment(self) -> str:
        """Consumes a `/* ... */` comment. An unclosed comment runs to end of input."""
        text = self.advance() + self.advance()
        while not self.stream.end_of_file():
            if self.peek() == "*" and self.peek(1) == "/":
                text += self.advance() + self.advance()
                break
            text += self.advance()
        return text

    def read_identifier(self, line: int, col: int) -> Token:
        ident = ""
        while not self.stream.end_of_file() and (
            self.peek().isascii() and (self.peek().isalnum() or self.peek() == "_")
        ):
            ident += self.advance()
        if ident in self.keywords:
            return Token(KEYWORD, ident, line, col)
        return Token(IDENT, ident, line, col)

    def read_number(self, line: int, col: int) -> Token:
        num = ""
        while self.peek().isascii() and self.peek().isdigit():
            num += self.advance()
        # A trailing '.' is only part of the number when a digit follows it
        nxt = self.peek(1)
        if self.peek() == "." and nxt.isascii() and nxt.isdigit():
            num += self.advance()
            while self.peek().isascii() and self.peek().isdigit():
                num += self.advance()
        return Token(NUMBER, num, line, col)

    def read_string(self, line: int, col: int) -> Token:
        self.advance()  # opening quote
        val = ""
        while not self.stream.end_of_file():
            ch = self.advance()
            if ch == '"':
                return Token(STRING, val, line, col)
            if ch == "\\" and not self.stream.end_of_file():
                esc = self.advance()
                val += STRING_ESCAPES.get(esc, esc)
            else:
                val += ch
        raise LexError("UnterminatedString", "Unterminated string", line, col)

    def read_operator(self, line: int, col: int) -> Token:
        op = self.advance()
        if op + self.peek() in TWO_CHAR_OPERATORS:
            op += self.advance()
        return Token(OPERATOR, op, line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            LexError: On an unterminated string, or an unexpected character in strict mode.
        """
        while True:
            self.skip_whitespace()
            if self.stream.end_of_file():
                return Token(EOF, "", self.stream.line, self.stream.column)

            ch = self.peek()
            line, col = self.stream.line, self.stream.column

            if ch == "/" and self.peek(1) in ("/", "*"):
                text = (
                    self.read_line_comment()
                    if self.peek(1) == "/"
                    else self.read_block_comment()
                )
                if self.keep_comments:
                    return Token(COMMENT, text, line, col)
                continue

            if ch.isascii() and (ch.isalpha() or ch == "_"):
                return self.read_identifier(line, col)

            if ch.isascii() and ch.isdigit():
                return self.read_number(line, col)

            if ch == '"':
                return self.read_string(line, col)

            if ch in OPERATOR_CHARS:
                return self.read_operator(line, col)

            if ch in SYMBOL_CHARS:
                return Token(SYMBOL, self.advance(), line, col)

            if self.strict:
                raise LexError(
                    "UnexpectedCharacter", f"Unexpected character {ch!r}", line, col
                )
            logger.warning("Unexpected character %r at line %d, col %d", ch, line, col)
            return Token(UNKNOWN, self.advance(), line, col)


def tokenize(
    source: str,
    *,
    strict: bool = True,
    keep_comments: bool = False,
    keywords: frozenset[str] = KEYWORDS,
) -> list[Token]:
    """Tokenizes a whole source buffer.

    Args:
        source: CASE source text.
        strict: See `Lexer`.
        keep_comments: See `Lexer`.
        keywords: See `Lexer`.

    Returns:
        The token list, always terminated by exactly one EOF token.

    Raises:
        LexError: See `Lexer.next_token`.
    """
    lexer = Lexer(
        CharacterStream(source),
        strict=strict,
        keep_comments=keep_comments,
        keywords=keywords,
    )
    tokens: list[Token] = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type == EOF:
            break
    logger.debug("Tokenized %d characters into %d tokens", len(source), len(tokens))
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
