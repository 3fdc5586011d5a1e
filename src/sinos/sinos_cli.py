"""
Sinos CLI Entrypoint.

This module provides the command-line interface for the Sinos front end.
It parses source code and prints the resulting AST, token stream, or diagnostic.

Features:
    - Read source from `.sinos` files or inline strings.
    - Lex and parse the code; report the first error with a caret display.
    - Print the AST as an indented tree, JSON, or re-serialized source.
    - Output to console or file.
    - Launch an interactive REPL with optional verbosity.

Example usage:
    sinos hello.sinos
    sinos -s "let x = 1 + 2;" -f json
    sinos prog.sinos --tokens
    sinos --repl --verbose

Functions:
    run_sinos(source: str, is_string: bool = False, output: str = "tree", out: str | None = None,
              tokens: bool = False) -> int:
        Executes the Sinos pipeline (read → lex → parse → render) and returns an exit code.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action (REPL or parse).
"""

import argparse
import json
import sys

from sinos.sinos_ast import Module, to_dict
from sinos.sinos_errors import SinosError
from sinos.sinos_lexer import CharacterStream, Lexer, Token
from sinos.sinos_parser import Parser
from sinos.sinos_printer import dump, unparse
from sinos.sinos_source import SourceFile

OUTPUT_FORMATS = ("tree", "json", "source")


def format_tokens(tokens: list[Token]) -> str:
    return "\n".join(
        f"{tok.type:<8} <{tok.span.index},{tok.span.length}> {tok.value!r}"
        for tok in tokens
    )


def render_module(module: Module, output: str) -> str:
    """Renders a parsed module in one of `OUTPUT_FORMATS`."""
    if output == "tree":
        return dump(module)
    if output == "json":
        return json.dumps(to_dict(module), indent=2, ensure_ascii=False)
    if output == "source":
        return unparse(module)
    raise ValueError(f"Unknown output format: {output}")


def run_sinos(
    source: str,
    is_string: bool = False,
    output: str = "tree",
    out: str | None = None,
    tokens: bool = False,
) -> int:
    """
    Run the Sinos front end: lex, parse, and print or write the result.

    Args:
        source (str): The Sinos source code or path to a `.sinos` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path. Defaults to False.
        output (str): AST rendering, one of 'tree', 'json' or 'source'. Defaults to 'tree'.
        out (str | None): Optional path to write the output to. If None, prints to stdout.
        tokens (bool): If True, prints the token stream instead of the AST. Defaults to False.

    Returns:
        int: 0 on success, 1 if a diagnostic was reported.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.sinos',
            or if `output` is not a known format.
    """
    if not is_string and not source.endswith(".sinos"):
        raise ValueError("Only .sinos files are supported.")
    if output not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format: {output}")

    # 1. Read source
    if is_string:
        src = SourceFile("<string>", source)
    else:
        with open(source, encoding="utf-8") as f:
            src = SourceFile(source, f.read())

    # 2. Lexing / parsing
    lexer = Lexer(CharacterStream(src))
    try:
        if tokens:
            text = format_tokens(list(lexer))
        else:
            text = render_module(Parser(lexer).parse(), output)
    except SinosError as e:
        print("[error] >>>", file=sys.stderr)
        print(e.render(), file=sys.stderr)
        return 1

    # 3. Output result
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    else:
        print(text)
    return 0


def main() -> None:
    """
    Entry point for the Sinos CLI.

    Parses command-line arguments and dispatches to the appropriate mode:
    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise, parses the given source and exits with `run_sinos`'s status code.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `-f`, `--format`: AST output format ('tree', 'json' or 'source'), default is 'tree'.
        - `-o`, `--out`: Write output to a file.
        - `--tokens`: Print the token stream instead of the AST.
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Enable verbose REPL mode.
    """
    if len(sys.argv) == 1:
        # No args passed: open REPL instead
        from sinos.sinos_repl import start_repl

        start_repl()
        return
    parser = argparse.ArgumentParser(prog="sinos")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="output",
        choices=OUTPUT_FORMATS,
        default="tree",
        help="AST output format (default: tree)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "--tokens", action="store_true", help="Print tokens instead of the AST"
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL instead of parsing a source",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose REPL mode (if --repl)"
    )

    args = parser.parse_args()

    if args.repl or args.source is None:
        from sinos.sinos_repl import start_repl

        start_repl(verbose=args.verbose, output=args.output)
    else:
        sys.exit(
            run_sinos(
                source=args.source,
                is_string=args.string,
                output=args.output,
                out=args.out,
                tokens=args.tokens,
            )
        )


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
