"""
Lexer for wolang - Recursive Descent Parser

Turns workout source text into tokens, one at a time.

Features:
- Pull-based: next() produces a single token, None once exhausted
- Indentation-aware (emits INDENT/DEDENT in fixed 2-space steps)
- Position tracking (0-based line, column)
"""

from __future__ import annotations

import re
from typing import Iterator, List, Optional, Tuple

from .errors import UnexpectedCharacter, UnexpectedIndent
from .token_types import TT, Tok

INDENT_STEP = 2

_LEADING_SPACES = re.compile(r" *")

# Rule table: first match wins. A None type means "skip, produce no token".
RULES: List[Tuple[re.Pattern[str], Optional[TT]]] = [
    # Comments
    (re.compile(r" *#.*"), None),
    # Whitespace
    (re.compile(r"[\r\n]"), TT.NEWLINE),
    (re.compile(r"[^\S\r\n]+"), None),
    # Markers
    (re.compile(r","), TT.COMMA),
    (re.compile(r"x", re.IGNORECASE), TT.REPEAT),
    (re.compile(r"/"), TT.CYCLE),
    (re.compile(r">"), TT.RAMP),
    (re.compile(r"@"), TT.AT),
    # Units
    (re.compile(r"watts?|w", re.IGNORECASE), TT.WATTS),
    (re.compile(r"%"), TT.PERCENT),
    (re.compile(r"s((econd|ec)s?)?", re.IGNORECASE), TT.DURATION_SEC),
    (re.compile(r"(minute|min)s?", re.IGNORECASE), TT.DURATION_MIN),
    (re.compile(r"(hour|hr)s?", re.IGNORECASE), TT.DURATION_HOUR),
    # Numbers
    (re.compile(r"\d+\.\d*"), TT.FLOAT),
    (re.compile(r"\d+"), TT.INT),
    # Strings
    (re.compile(r'"[^"]*"'), TT.STRING),
    (re.compile(r"'[^']*'"), TT.STRING),
]

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    wolang lexer with indentation handling.

    Unlike Python's indentation model there is no stack of levels: every
    nesting step is exactly INDENT_STEP spaces, so a single counter is enough.
    One INDENT or DEDENT is emitted per call; a multi-level dedent is drained
    by calling next() repeatedly.
    """

    def __init__(self, source: str = ""):
        self.init(source)

    def init(self, source: str) -> None:
        """Reset the lexer to the start of a new source string"""
        self.source = source
        self.cursor = 0
        self.current_indent = 0
        self.line = 0
        self.column = 0
        self._closed_last_line = False

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next(self) -> Optional[Tok]:
        """Return the next token, or None when the source is exhausted"""
        while True:
            if self.at_line_start():
                tok = self.handle_indentation()
                if tok is not None:
                    return tok

            if self.eof():
                return self.close_indentation()

            tok, skipped = self.scan_token()
            if not skipped:
                return tok

    def tokenize(self) -> List[Tok]:
        """Tokenize the remaining source, return token list"""
        return list(self)

    def __iter__(self) -> Iterator[Tok]:
        while True:
            tok = self.next()
            if tok is None:
                return
            yield tok

    def scan_token(self) -> Tuple[Optional[Tok], bool]:
        """Match one rule at the cursor. Returns (token, skipped)."""
        for pattern, token_type in RULES:
            match = pattern.match(self.source, self.cursor)
            if match is None:
                continue

            value = match.group(0)

            # The newline ending a full-line comment is not a line of its own
            if token_type is TT.NEWLINE and self.current_line().lstrip(" ").startswith("#"):
                self.advance(len(value))
                return None, True

            line, column = self.line, self.column
            self.advance(len(value))

            if token_type is None:
                return None, True

            return Tok(token_type, value, line, column), False

        raise UnexpectedCharacter(self.source[self.cursor], self.line, self.column)

    # ========================================================================
    # Indentation Handling
    # ========================================================================

    def handle_indentation(self) -> Optional[Tok]:
        """
        Compare the indentation of the current line to the tracked level.
        Returns an INDENT/DEDENT token, or None after skipping an unchanged indent.
        """
        if self.source.startswith("\t", self.cursor):
            raise UnexpectedCharacter("\\t", self.line, self.column)

        width = _LEADING_SPACES.match(self.source, self.cursor).end() - self.cursor
        diff = width - self.current_indent

        # Spaces are left in place; the next call sees diff == 0 and skips them
        if diff == INDENT_STEP:
            self.current_indent += INDENT_STEP
            return self.emit(TT.INDENT)

        if diff < 0 and diff % INDENT_STEP == 0:
            self.current_indent -= INDENT_STEP
            return self.emit(TT.DEDENT)

        if diff != 0:
            raise UnexpectedIndent(width, self.line, self.column)

        self.advance(width)
        return None

    def close_indentation(self) -> Optional[Tok]:
        """
        Unwind open blocks at end of input when the last line has no
        trailing newline: one NEWLINE to end that line, then DEDENTs.
        """
        if self.current_indent == 0:
            return None

        if not self._closed_last_line:
            self._closed_last_line = True
            return self.emit(TT.NEWLINE)

        self.current_indent -= INDENT_STEP
        return self.emit(TT.DEDENT)

    # ========================================================================
    # Utilities
    # ========================================================================

    def advance(self, length: int) -> None:
        """Move the cursor ahead, keeping line and column in step"""
        skipped = self.source[self.cursor:self.cursor + length]
        newlines = skipped.count("\n")

        self.line += newlines
        if newlines:
            self.column = length - (skipped.rindex("\n") + 1)
        else:
            self.column += length
        self.cursor += length

    def eof(self) -> bool:
        return self.cursor >= len(self.source)

    def at_line_start(self) -> bool:
        return self.cursor <= 0 or self.source[self.cursor - 1] == "\n"

    def current_line(self) -> str:
        """Text of the current line up to the cursor"""
        start = self.source.rfind("\n", 0, self.cursor) + 1
        return self.source[start:self.cursor]

    def emit(self, token_type: TT, value: str = "") -> Tok:
        """Build a synthetic token at the cursor"""
        return Tok(token_type, value, self.line, self.column)


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()
