from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from lark import Tree

from .evaluator import evaluate, new_environment
from .lexer_rd import LexError, Lexer
from .parser_rd import ParseError, Parser, UnexpectedTokenError
from .token_types import TT
from .types import Environment, SableRuntimeError, SblValue
from .utils import report_error

logger = logging.getLogger(__name__)

def wrap_program(src: str) -> str:
    """A whole program is one implicit block."""
    return "{" + src + "}"

def parse_program(src: str) -> Tree:
    """Parse *src* as an implicit block; nothing may follow its closing brace."""
    parser = Parser(Lexer(wrap_program(src)))
    tree = parser.parse()

    if not parser.check(TT.EOF):
        raise UnexpectedTokenError("end of input", parser.peek())

    return tree

def run(src: str, env: Optional[Environment]=None) -> SblValue:
    if env is None:
        env = new_environment()

    tree = parse_program(src)
    logger.debug("parsed program: %d top-level expressions", len(tree.children))

    return evaluate(tree, env)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def main() -> None:
    verbose = False
    want_repl = False
    arg = None

    for token in sys.argv[1:]:
        if token in ("-v", "--verbose"):
            verbose = True
            continue

        if token == "--repl":
            want_repl = True
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if want_repl:
        from .repl import repl
        repl()
        return

    source = _load_source(arg or "-")

    try:
        result = run(source)
    except (LexError, ParseError, SableRuntimeError) as exc:
        report_error(exc, stream=sys.stdout)
        raise SystemExit(1) from None

    print(result)

if __name__ == "__main__":
    main()
