"""
CLINT CLI Entrypoint.

Parses CLINT source from a `.clint` file or an inline string and prints the
canonical rendering of the resulting AST, its JSON form, or the raw token
stream. With no arguments it starts the interactive REPL.

Example usage:
    clint program.clint
    clint -s "var x = 1 + 2;"
    clint -s "fun(a, b) { a + b }" --json -o ast.json
    clint -s "1 + 2" --tokens
    clint --repl --verbose

Exit status:
    0 when parsing finished without diagnostics, 1 when the parser reported
    diagnostics or the file could not be read, 2 on usage errors.

Functions:
    run_clint(...) -> int: Runs lex → parse → output and returns the exit status.
    main() -> None: Parses CLI arguments and dispatches to the REPL or `run_clint`.
"""

import argparse
import json
import logging
import sys

from clint.clint_constants import DEFAULT_MAX_DEPTH, SOURCE_SUFFIX
from clint.clint_lexer import tokenize
from clint.clint_parser import parse

logger = logging.getLogger(__name__)


def run_clint(
    source: str,
    is_string: bool = False,
    tokens_only: bool = False,
    as_json: bool = False,
    out: str | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> int:
    """
    Run the CLINT front end on one input.

    Args:
        source (str): CLINT source text, or a path to a `.clint` file.
        is_string (bool): Treat `source` as source text instead of a path.
        tokens_only (bool): Print the token stream instead of parsing.
        as_json (bool): Print the AST as JSON instead of its canonical rendering.
        out (str | None): Write the output to this file instead of stdout.
        max_depth (int): Expression nesting ceiling passed to the parser.

    Returns:
        int: 0 on a clean parse, 1 if the parser reported diagnostics.

    Raises:
        ValueError: If `source` is a path that does not end with `.clint`.
        OSError: If the file cannot be read or the output cannot be written.
    """
    if not is_string and not source.endswith(SOURCE_SUFFIX):
        raise ValueError(f"Only {SOURCE_SUFFIX} files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    tokens = tokenize(source)
    logger.debug("lexed %d token(s)", len(tokens))

    if tokens_only:
        text = "\n".join(repr(tok) for tok in tokens)
    else:
        program, errors = parse(tokens, max_depth=max_depth)
        if errors:
            for message in errors:
                print(f"\t{message}", file=sys.stderr)
            return 1
        if as_json:
            text = json.dumps(program.to_dict(), indent=2)
        else:
            text = program.render()

    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        logger.debug("wrote output to %s", out)
    else:
        print(text)
    return 0


def main() -> None:
    """
    Entry point for the CLINT CLI.

    Launches the REPL when no arguments are given or `--repl` is passed;
    otherwise runs `run_clint` and exits with its status.
    """
    if len(sys.argv) == 1:
        from clint.clint_repl import start_repl

        start_repl()
        return
    parser = argparse.ArgumentParser(prog="clint")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream and stop"
    )
    parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the AST as JSON"
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        metavar="N",
        help=f"Maximum expression nesting depth (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL instead of parsing a source",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    if args.max_depth < 1:
        parser.error("--max-depth must be at least 1")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    if args.repl or args.source is None:
        from clint.clint_repl import start_repl

        start_repl(verbose=args.verbose, max_depth=args.max_depth)
        return

    try:
        status = run_clint(
            source=args.source,
            is_string=args.string,
            tokens_only=args.tokens,
            as_json=args.as_json,
            out=args.out,
            max_depth=args.max_depth,
        )
    except ValueError as e:
        print(f"[error] >>> {e}", file=sys.stderr)
        sys.exit(2)
    except OSError as e:
        print(f"[error] >>> {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(status)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
