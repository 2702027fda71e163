"""
Token queue with speculative lookahead.

The parser never talks to the lexer directly: it peeks and eats through a
TokenQueue, which pulls tokens from the lexer on demand and keeps them in a
buffer while a test() is running so that a failed alternative can be undone
by moving an index back instead of re-lexing.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, TypeVar, Union

from .errors import InvalidArgument, UnexpectedEOF, UnexpectedToken, WolangSyntaxError
from .lexer_rd import Lexer
from .token_types import TT, Tok

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _NoMatch:
    """Result of a test() whose body failed to parse."""

    _instance: Optional["_NoMatch"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_MATCH"


NO_MATCH = _NoMatch()


def _describe(types) -> Optional[str]:
    return "/".join(t.label for t in types) or None


class TokenQueue:
    """Buffered, backtrackable view over a Lexer."""

    def __init__(self, lexer: Lexer):
        if not isinstance(lexer, Lexer):
            raise InvalidArgument(f"TokenQueue requires a Lexer, got {type(lexer).__name__}")
        self.lexer = lexer
        self.reset()

    def reset(self) -> None:
        """Drop buffered tokens and any test marks"""
        self.buffer: List[Optional[Tok]] = []
        self.marks: List[int] = []  # buffer indices saved at test() entry
        self.index = 0  # position of the next token in buffer

    @property
    def count(self) -> int:
        """Number of buffered tokens ahead of the cursor"""
        return len(self.buffer) - self.index

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, amount: int = 1) -> Union[Optional[Tok], List[Optional[Tok]]]:
        """
        Look at upcoming tokens without consuming them.

        Returns the next token (None at end of input) when amount is 1,
        otherwise a list of `amount` tokens padded with None past the end.
        """
        if amount < 1:
            raise InvalidArgument(f"Invalid amount: {amount}. Amount must be at least 1.")

        while self.count < amount:
            self.buffer.append(self.lexer.next())

        if amount == 1:
            return self.buffer[self.index]
        return self.buffer[self.index:self.index + amount]

    def eat(self, *types: TT) -> Tok:
        """Consume the next token; if types are given it must be one of them"""
        tok = self.peek()
        if tok is None:
            raise UnexpectedEOF(_describe(types))
        if types and tok.type not in types:
            raise UnexpectedToken(tok, _describe(types))

        self.index += 1
        if not self.marks:
            self._discard_consumed()
        return tok

    def optional(self, *types: TT) -> Optional[Tok]:
        """Consume and return the next token if it matches, else None"""
        tok = self.peek()
        if tok is None or (types and tok.type not in types):
            return None
        return self.eat(*types)

    def test(self, body: Callable[[], T]) -> Union[T, _NoMatch]:
        """
        Run body speculatively.

        On success the consumed tokens stay consumed and body's result is
        returned. If body raises a syntax error, the cursor is put back where
        it was on entry and NO_MATCH is returned. Tokens are only released
        from the buffer once the outermost test has finished, so an enclosing
        test can still roll back a nested one that succeeded.
        """
        mark = self.index
        self.marks.append(mark)
        try:
            result = body()
        except WolangSyntaxError as exc:
            logger.debug("test rolled back %d token(s): %s", self.index - mark, exc)
            self.index = mark
            return NO_MATCH
        finally:
            self.marks.pop()

        if not self.marks:
            self._discard_consumed()
        return result

    def _discard_consumed(self) -> None:
        del self.buffer[:self.index]
        self.index = 0
