"""prompt_toolkit lexer for live Sable syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as SblLexer, LexError
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "error": "bold ansired",
}

_PUNCTUATION = {TT.LPAR, TT.RPAR, TT.LBRACE, TT.RBRACE, TT.COMMA, TT.SEMI}


def _build_groups() -> dict[TT, str]:
    """Token type -> highlight group, derived from the lexer's own tables."""
    groups: dict[TT, str] = {TT.NUMBER: "number", TT.IDENT: "identifier"}

    for tt in SblLexer.KEYWORDS.values():
        groups[tt] = "keyword"
    groups.update({TT.TRUE: "boolean", TT.FALSE: "boolean", TT.NONE: "constant"})

    for tt in SblLexer.SINGLE.values():
        groups[tt] = "punctuation" if tt in _PUNCTUATION else "operator"
    for pair in SblLexer.EQ_SUFFIXED.values():
        for tt in pair:
            groups[tt] = "operator"

    return groups


_TT_GROUP = _build_groups()


def _token_group(tokens: list[Tok], idx: int) -> str:
    tok = tokens[idx]
    if tok.type != TT.IDENT:
        return _TT_GROUP.get(tok.type, "")

    # Name after `fn`, or an identifier directly followed by '(' is a call.
    if idx > 0 and tokens[idx - 1].type == TT.FN:
        return "function"
    if idx + 1 < len(tokens) and tokens[idx + 1].type == TT.LPAR:
        return "function"
    return "identifier"


def highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    tokens: list[Tok] = []
    lexer = SblLexer(text)
    failed_at = None
    try:
        for tok in lexer:
            if tok.type == TT.EOF:
                break
            tokens.append(tok)
    except LexError as exc:
        # Highlight what lexed; mark the bad character and leave the rest plain.
        failed_at = (exc.column or 1) - 1

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        tok_text = str(tok.value)
        start = tok.column - 1

        # Unstyled gap before token.
        if start > pos:
            result.append(("", text[pos:start]))

        style = GROUP_STYLE.get(_token_group(tokens, i), "")
        result.append((style, tok_text))
        pos = start + len(tok_text)

    if failed_at is not None and failed_at >= pos:
        if failed_at > pos:
            result.append(("", text[pos:failed_at]))
        result.append((GROUP_STYLE["error"], text[failed_at:failed_at + 1]))
        pos = failed_at + 1

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class SableLexer(Lexer):
    """prompt_toolkit Lexer that highlights Sable source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights lazily per line.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
