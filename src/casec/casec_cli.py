"""
CASE CLI Entrypoint.

This module provides the command-line interface for compiling CASE source code.

Features:
    - Read source from `.case` files or inline strings.
    - Lex, parse, analyze and transpile code into the selected target language.
    - Output to console or file.
    - Optional token-stream and AST dumps for debugging.
    - Diagnostics and logging rendered through `rich`.

Example usage:
    casec hello.case
    casec -s 'Print "hi"' -t py
    casec prog.case -o prog.cpp
    casec prog.case --tokens --ast -v

Functions:
    run_casec(...) -> int:
        Executes the full pipeline and returns a process exit code.

    main() -> None:
        Parses CLI arguments and invokes `run_casec`.
"""

import argparse
import json
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from casec.casec_errors import CaseSyntaxError
from casec.casec_pipeline import CompilerOptions, compile_source
from casec.casec_transpile import TARGETS

logger = logging.getLogger("casec")

console = Console(stderr=True)


def configure_logging(verbose: bool = False) -> None:
    """Routes the `casec` loggers through a RichHandler on stderr."""
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def run_casec(
    source: str,
    is_string: bool = False,
    target: str = "cpp",
    out: str | None = None,
    pretty: bool = False,
    show_tokens: bool = False,
    show_ast: bool = False,
    recover: bool = False,
    force: bool = False,
) -> int:
    """
    Run the CASE toolchain: lex, parse, analyze, transpile, and print or write output.

    Args:
        source (str): The CASE source code or path to a `.case` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        target (str): Transpilation target ('cpp' or 'py'). Defaults to 'cpp'.
        out (str | None): Optional path to write the transpiled output. If None, prints to stdout.
        pretty (bool): If True, prints formatted banners around the output.
        show_tokens (bool): Print the token stream before compiling.
        show_ast (bool): Print the AST as JSON.
        recover (bool): Collect all parse errors instead of stopping at the first.
        force (bool): Emit code even when semantic errors were reported.

    Returns:
        int: 0 on success, 1 if any error was reported.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.case'.
    """
    if not is_string and not source.endswith(".case"):
        raise ValueError("Only .case files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    options = CompilerOptions(target=target, recover=recover, emit_on_error=force)
    try:
        result = compile_source(source, options)
    except CaseSyntaxError as e:
        console.print(f"[bold red]{e.kind}[/] {escape(str(e))}")
        return 1

    if show_tokens:
        print("=== Token Stream ===")
        for tok in result.tokens:
            print(f"{tok.line:5}:{tok.col:<3} | {tok.type:<10} -> {tok.value!r}")
    if show_ast and result.ast is not None:
        print("=== AST ===")
        print(json.dumps(result.ast.to_dict(), indent=2))

    for diag in result.diagnostics:
        console.print(escape(str(diag)), style="bold red")
    if result.diagnostics:
        console.print(f"Total errors: {result.error_count}")

    if result.output is None:
        return 1

    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(result.output)
        if pretty:
            print(f"(wrote to {out})")
    elif pretty:
        banner = "=" * 20
        print(f"{banner}\nTranspiled {target}\n{banner}\n{result.output}{banner}")
    else:
        print(result.output, end="")

    return 1 if result.diagnostics else 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="casec")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-t",
        "--target",
        choices=TARGETS,
        default="cpp",
        help="Transpile target (default: cpp)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Show code with banners"
    )
    parser.add_argument("--tokens", action="store_true", help="Dump the token stream")
    parser.add_argument("--ast", action="store_true", help="Dump the AST as JSON")
    parser.add_argument(
        "--recover",
        action="store_true",
        help="Report every syntax error instead of stopping at the first",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Emit code even if semantic analysis reports errors",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main() -> None:
    """
    Entry point for the CASE CLI.

    Parses command-line arguments, configures logging and runs the pipeline.
    Exits with the status returned by `run_casec`.
    """
    args = build_arg_parser().parse_args()
    configure_logging(args.verbose)
    try:
        status = run_casec(
            source=args.source,
            is_string=args.string,
            target=args.target,
            out=args.out,
            pretty=args.pretty,
            show_tokens=args.tokens,
            show_ast=args.ast,
            recover=args.recover,
            force=args.force,
        )
    except (OSError, ValueError) as e:
        console.print(f"[bold red]error[/] {escape(str(e))}")
        status = 2
    sys.exit(status)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
