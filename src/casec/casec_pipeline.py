"""
End-to-end CASE compilation: tokenize, parse, analyze, emit.

Each call to `compile_source` owns its own token list, AST and symbol table,
so independent compilation units can be processed concurrently by a caller
without sharing state.

Error policy:
    - Lexical and syntactic errors are fatal and raised (`LexError`,
      `ParseError`). With `recover=True`, parse errors are collected as
      diagnostics instead, and analysis and emission are skipped.
    - Semantic errors are collected. Emission is skipped when any were
      reported, unless `emit_on_error=True`.

Example:
    >>> result = compile_source('Print "Hello, World!"')
    >>> result.ok
    True
"""

import logging
from dataclasses import dataclass, field

from casec.casec_ast import ASTNode
from casec.casec_constants import COMMENT
from casec.casec_errors import Diagnostic, ParseError
from casec.casec_lexer import Token, tokenize
from casec.casec_parser import Parser
from casec.casec_semantic import SemanticAnalyzer
from casec.casec_transpile import Transpiler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompilerOptions:
    """Settings for one pipeline run.

    Attributes:
        target: Emitter target name ("cpp" or "py").
        strict: Raise on unexpected characters instead of emitting UNKNOWN tokens.
        recover: Collect parse errors and resynchronize instead of aborting.
        emit_on_error: Emit code even when semantic analysis reported errors.
        keep_comments: Keep COMMENT tokens in `CompileResult.tokens`.
    """

    target: str = "cpp"
    strict: bool = True
    recover: bool = False
    emit_on_error: bool = False
    keep_comments: bool = False


@dataclass
class CompileResult:
    """Everything produced by one pipeline run."""

    tokens: list[Token] = field(default_factory=list)
    ast: ASTNode | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    output: str | None = None

    @property
    def error_count(self) -> int:
        return len(self.diagnostics)

    @property
    def ok(self) -> bool:
        return not self.diagnostics and self.output is not None


def compile_source(source: str, options: CompilerOptions | None = None) -> CompileResult:
    """Runs the full pipeline over one in-memory source buffer.

    Args:
        source: CASE source text.
        options: Pipeline settings; defaults to `CompilerOptions()`.

    Returns:
        A `CompileResult`. `output` is None when emission was skipped.

    Raises:
        LexError: On unterminated strings or (in strict mode) stray characters.
        ParseError: On malformed statements when `recover` is off.
        ValueError: On an unknown target.
    """
    options = options or CompilerOptions()
    transpiler = Transpiler(options.target)
    result = CompileResult()

    tokens = tokenize(source, strict=options.strict, keep_comments=options.keep_comments)
    result.tokens = tokens
    parse_tokens = [t for t in tokens if t.type != COMMENT]

    parser = Parser(parse_tokens, recover=options.recover)
    try:
        root = parser.parse()
    except ParseError as err:
        if not options.recover:
            raise
        parser.errors.append(err)
        root = None
    if parser.errors:
        result.diagnostics = [e.to_diagnostic() for e in parser.errors]
        logger.error("Parsing failed with %d errors", len(parser.errors))
        return result
    assert root is not None  # for mypy
    result.ast = root

    analyzer = SemanticAnalyzer()
    analyzer.analyze(root)
    result.diagnostics = list(analyzer.diagnostics)
    if analyzer.has_errors() and not options.emit_on_error:
        logger.error(
            "Semantic analysis failed with %d errors; skipping emission",
            analyzer.error_count,
        )
        return result

    result.output = transpiler.transpile(root)
    return result


__all__ = ["CompileResult", "CompilerOptions", "compile_source"]
