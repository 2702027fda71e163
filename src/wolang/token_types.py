"""
Token Types for the wolang parser

Shared between lexer, token queue and parser to avoid circular dependencies.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Layout
    NEWLINE = auto()
    INDENT = auto()
    DEDENT = auto()

    # Markers
    COMMA = auto()
    REPEAT = auto()  # x
    CYCLE = auto()  # /  (reserved)
    RAMP = auto()  # >  (reserved)
    AT = auto()  # @

    # Units
    WATTS = auto()
    PERCENT = auto()
    DURATION_SEC = auto()
    DURATION_MIN = auto()
    DURATION_HOUR = auto()

    # Literals
    INT = auto()
    FLOAT = auto()
    STRING = auto()

    @property
    def label(self) -> str:
        """Short name used in 'expected: ...' error descriptions."""
        return _LABELS.get(self, self.name)


_LABELS = {
    TT.COMMA: ",",
    TT.AT: "@",
    TT.WATTS: "W",
    TT.PERCENT: "%",
    TT.DURATION_SEC: "SEC",
    TT.DURATION_MIN: "MIN",
    TT.DURATION_HOUR: "HR",
}


@dataclass(frozen=True)
class Tok:
    """Token with position info (0-based line and column)"""

    type: TT
    value: str
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
