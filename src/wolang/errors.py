"""
Error types for wolang lexing and parsing.

Everything deriving from WolangSyntaxError describes a problem with the
source text; TokenQueue.test() treats those as "no match" and rolls back.
InvalidArgument signals misuse of the API and always propagates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .token_types import Tok


class WolangSyntaxError(Exception):
    """Base exception for all source-level errors."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(message)


class LexError(WolangSyntaxError):
    """Lexical analysis error"""


class UnexpectedCharacter(LexError):
    """No lexical rule matched at the cursor."""

    def __init__(self, character: str, line: int, column: int):
        self.character = character
        super().__init__(f'Unexpected character at [{line}, {column}]: "{character}"', line, column)


class UnexpectedIndent(LexError):
    """Indentation changed by something other than one 2-space step."""

    def __init__(self, width: int, line: int, column: int):
        self.width = width
        super().__init__(f"Unexpected indent of {width} at [{line}, {column}].", line, column)


class ParseError(WolangSyntaxError):
    """Grammar error"""


class UnexpectedToken(ParseError):
    def __init__(self, token: Tok, expected: str):
        self.token = token
        self.expected = expected
        super().__init__(
            f'Unexpected token at [{token.line}, {token.column}]: "{token.value}", expected: {expected}.',
            token.line,
            token.column,
        )


class UnexpectedEOF(ParseError):
    def __init__(self, expected: Optional[str] = None):
        self.expected = expected
        if expected:
            message = f"Unexpected EOF; expected: {expected}."
        else:
            message = "Unexpected EOF."
        super().__init__(message)


class InvalidArgument(ValueError):
    """API misuse, e.g. peek(0). Not a syntax error."""
