"""prompt_toolkit lexer for live wolang syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable, List

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .errors import LexError
from .lexer_rd import Lexer as WoLexer
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "number": "ansimagenta",
    "unit": "italic ansimagenta",
    "string": "ansigreen",
    "punctuation": "",
    "reserved": "ansiyellow",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

# Token type → highlight group.
_TT_GROUP = {
    TT.REPEAT: "keyword",
    TT.AT: "keyword",
    TT.INT: "number",
    TT.FLOAT: "number",
    TT.WATTS: "unit",
    TT.PERCENT: "unit",
    TT.DURATION_SEC: "unit",
    TT.DURATION_MIN: "unit",
    TT.DURATION_HOUR: "unit",
    TT.STRING: "string",
    TT.COMMA: "punctuation",
    TT.CYCLE: "reserved",
    TT.RAMP: "reserved",
}

_LAYOUT = {TT.NEWLINE, TT.INDENT, TT.DEDENT}


def _line_tokens(body: str) -> tuple[List[Tok], int]:
    """Lex as far as possible. Returns tokens and the column lexing stopped at."""
    lexer = WoLexer(body)
    tokens: List[Tok] = []
    try:
        for tok in lexer:
            tokens.append(tok)
    except LexError:
        return tokens, lexer.column
    return tokens, len(body)


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    # Indentation belongs to the surrounding block, not to this line
    body = text.lstrip(" ")
    offset = len(text) - len(body)
    result: StyleAndTextTuples = [("", text[:offset])] if offset else []

    tokens, stop = _line_tokens(body)
    pos = 0

    for tok in tokens:
        if tok.type in _LAYOUT or not tok.value:
            continue

        # Unstyled gap before token.
        if tok.column > pos:
            result.append(("", body[pos:tok.column]))

        style = GROUP_STYLE.get(_TT_GROUP.get(tok.type, ""), "")
        result.append((style, tok.value))
        pos = tok.column + len(tok.value)

    if stop < len(body):
        # Lexing failed: everything from the bad character on is an error.
        if stop > pos:
            result.append(("", body[pos:stop]))
        result.append((GROUP_STYLE["error"], body[stop:]))
        return result

    # Trailing text: whitespace and possibly a comment.
    rest = body[pos:]
    hash_at = rest.find("#")
    if hash_at >= 0:
        if hash_at:
            result.append(("", rest[:hash_at]))
        result.append((GROUP_STYLE["comment"], rest[hash_at:]))
    elif rest:
        result.append(("", rest))

    return result if result else [("", text)]


class WolangLexer(Lexer):
    """prompt_toolkit Lexer that highlights wolang source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
