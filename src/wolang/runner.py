from __future__ import annotations

import json
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional, TextIO

from .errors import WolangSyntaxError
from .lexer_rd import tokenize
from .parser_rd import parse_source
from .tree import to_data, to_tree
from .utils import configure_logging, debug_py_trace_enabled

logger = logging.getLogger(__name__)

USAGE = "usage: wolang [--tokens | --json | --repl] [SOURCE | FILE | -]"


def render(source: str, mode: str = "tree") -> str:
    """Parse (or just tokenize) source and render it for the terminal."""
    if mode == "tokens":
        return "\n".join(repr(tok) for tok in tokenize(source))

    program = parse_source(source)
    if mode == "json":
        return json.dumps(to_data(program), indent=2)
    return to_tree(program).pretty().rstrip("\n")


def report_error(exc: WolangSyntaxError, stream: Optional[TextIO] = None) -> None:
    stream = stream if stream is not None else sys.stderr
    print(f"Error: {exc}", file=stream)
    if debug_py_trace_enabled() and exc.__traceback__ is not None:
        print("\nPython traceback:", file=stream)
        print("".join(traceback.format_tb(exc.__traceback__)), file=stream, end="")


def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing file => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    try:
        is_file = candidate.is_file()
    except OSError:
        # e.g. a workout longer than the platform allows for a file name
        is_file = False
    if is_file:
        return candidate.read_text(encoding="utf-8")

    return arg


def main(argv: Optional[List[str]] = None) -> None:
    configure_logging()

    mode = "tree"
    arg = None

    for token in (sys.argv[1:] if argv is None else argv):
        if token in ("-h", "--help"):
            print(USAGE)
            return

        if token == "--tokens":
            mode = "tokens"
            continue

        if token == "--json":
            mode = "json"
            continue

        if token == "--repl":
            mode = "repl"
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}\n{USAGE}")

    if mode == "repl" or (arg is None and sys.stdin.isatty()):
        from .repl import repl

        repl()
        return

    source = _load_source(arg)
    logger.debug("parsing %d characters in %s mode", len(source), mode)

    try:
        print(render(source, mode))
    except WolangSyntaxError as exc:
        report_error(exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
