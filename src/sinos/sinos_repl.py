import io
import traceback

from sinos.sinos_cli import OUTPUT_FORMATS, format_tokens, render_module
from sinos.sinos_constants import COMMENT_PREFIX
from sinos.sinos_errors import SinosError
from sinos.sinos_lexer import CharacterStream, Lexer
from sinos.sinos_parser import Parser
from sinos.sinos_source import SourceFile


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def read_chunk() -> str | None:
    """Reads one input chunk, continuing with `... ` while braces are open.

    Returns:
        str | None: The stripped source, or None when the user asked to exit.
    """
    src_lines: list[str] = []
    brace_count = 0
    while True:
        prompt = ">>> " if not src_lines else "... "
        line = input(prompt)
        if line.strip() in ("exit", "quit") and not src_lines:
            return None
        src_lines.append(line)
        brace_count += line.count("{") - line.count("}")
        if brace_count <= 0:
            break
    return "\n".join(src_lines).strip()


def handle_format_command(src: str, current: str) -> str | None:
    """Handles ``format <name>``; returns the new format, or None if `src` is not the command."""
    parts = src.split()
    if len(parts) != 2 or parts[0].lower() != "format":
        return None
    requested = parts[1].lower()
    if requested not in OUTPUT_FORMATS:
        print(
            f"[error] >>> Unknown format {requested!r}; pick one of {', '.join(OUTPUT_FORMATS)}"
        )
        return current
    print(f"[format] >>> Output format: {requested}")
    return requested


def start_repl(verbose: bool = False, output: str = "tree") -> None:
    print(f"Sinos REPL [format={output}]. Type 'exit' or 'quit' to leave.")
    chunk_no = 0

    while True:
        try:
            src = read_chunk()
            if src is None:
                print("Exiting Sinos REPL.")
                return
            if not src:
                continue
            if src.startswith(COMMENT_PREFIX) and "\n" not in src:
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            new_format = handle_format_command(src, output)
            if new_format is not None:
                output = new_format
                continue

            chunk_no += 1
            source = SourceFile(f"<repl:{chunk_no}>", src)
            try:
                if verbose:
                    print(format_tokens(list(Lexer(CharacterStream(source)))))
                module = Parser(Lexer(CharacterStream(source))).parse()
                print(render_module(module, output))
            except SinosError as e:
                print("[error] >>>")
                print(e.render())
            except Exception:
                print_traceback()

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Sinos REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
