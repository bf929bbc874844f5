"""
Interactive CLINT REPL.

Reads source from the terminal, parses it, and prints either the canonical
rendering of the resulting Program or every diagnostic the parser recorded.
Input continues onto `.. ` lines while braces are unbalanced.

Commands:
    exit, quit      Leave the REPL.
    verbose-mode    Toggle echoing of the token stream before each parse.
"""

import io
import logging
import traceback

from clint.clint_constants import CONTINUATION_PROMPT, DEFAULT_MAX_DEPTH, PROMPT
from clint.clint_lexer import tokenize
from clint.clint_parser import parse

logger = logging.getLogger(__name__)

BANNER = r"""
  ___  __    __  __ _  ____
 / __)(  )  (  )(  ( \(_  _)
( (__ / (_/\ )( /    /  )(
 \___)\____/(__)\_)__) (__)
"""


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def print_parser_errors(errors: list[str]) -> None:
    for message in errors:
        print(f"\t{message}")


def read_source() -> str | None:
    """Reads one unit of input, continuing while `{` outnumbers `}`.

    Returns None when the user asked to leave.
    """
    src_lines: list[str] = []
    brace_count = 0
    while True:
        line = input(PROMPT if not src_lines else CONTINUATION_PROMPT)
        if line.strip() in ("exit", "quit") and not src_lines:
            return None
        src_lines.append(line)
        brace_count += line.count("{") - line.count("}")
        if brace_count <= 0:
            return "\n".join(src_lines).strip()


def start_repl(verbose: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    print(BANNER)
    print("Clint REPL. Type 'exit' or 'quit' to leave.")

    while True:
        try:
            src = read_source()
            if src is None:
                print("Exiting Clint REPL.")
                return
            if not src:
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue

            try:
                tokens = tokenize(src)
                if verbose:
                    print(f"[tokens] >>> {tokens}")
                program, errors = parse(tokens, max_depth=max_depth)
            except Exception:
                print_traceback()
                continue

            if errors:
                logger.debug("discarding program with %d error(s)", len(errors))
                print_parser_errors(errors)
                continue
            print(program.render())

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Clint REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
