"""
Recursive Descent Parser for wolang

One method per grammar symbol. Ambiguous alternatives are resolved with
TokenQueue.test(): try the stricter rule, fall back to the looser one.

Grammar:
    Program    := Block(bootstrap)
    Block      := INDENT Set* DEDENT
                | Interval (COMMA? Interval)* NewLine
    Set        := Repeat Block
    Repeat     := (INT REPEAT NEWLINE*)?        default 1
    Interval   := Duration AT? Intensity STRING?
    Duration   := Numeric (SEC | MIN | HR)
    Intensity  := Power | PercentFTP
    Power      := INT WATTS
    PercentFTP := Numeric PERCENT?
    Numeric    := INT | FLOAT
    NewLine    := NEWLINE+ | end of input
"""

from __future__ import annotations

import math
from typing import List, Optional

from .ast_nodes import Intensity, Interval, Node, PercentFTP, Power, Program, Set
from .errors import UnexpectedEOF, UnexpectedToken
from .lexer_rd import Lexer
from .token_queue import NO_MATCH, TokenQueue
from .token_types import TT, Tok

SECONDS_PER_UNIT = {
    TT.DURATION_SEC: 1,
    TT.DURATION_MIN: 60,
    TT.DURATION_HOUR: 3600,
}


def _finite(tok: Tok) -> float:
    """Numeric value of an INT or FLOAT token; literals too large for a float are rejected"""
    value = float(tok.value)
    if not math.isfinite(value):
        raise UnexpectedToken(tok, "a finite number")
    return value


# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser for wolang.

    A Parser can be reused: parse() re-initialises the lexer and drops any
    tokens left in the queue from a previous run.
    """

    def __init__(self, lexer: Optional[Lexer] = None):
        self.lexer = lexer if lexer is not None else Lexer()
        self.queue = TokenQueue(self.lexer)

    def reset(self, source: str = "") -> None:
        """Point the parser at new source text"""
        self.lexer.init(source)
        self.queue.reset()

    def parse(self, source: str) -> Program:
        """Parse a whole workout"""
        self.reset(source)
        return self.parse_program()

    # ========================================================================
    # Structure
    # ========================================================================

    def parse_program(self) -> Program:
        """
        The document is one block, entered without an INDENT token.
        """
        return Program(tuple(self.parse_block(bootstrap=True)))

    def parse_block(self, bootstrap: bool = False) -> List[Node]:
        """
        Block:
            INDENT Set* DEDENT
          | Interval (COMMA? Interval)* NewLine

        Sets repeated fewer than two times are dissolved into the block,
        so plain interval lines never produce Set(1, ...) wrappers.
        """
        queue = self.queue

        if bootstrap or queue.optional(TT.INDENT):
            children: List[Node] = []
            # The top level has no matching DEDENT to stop at
            while queue.peek() is not None and (bootstrap or not queue.optional(TT.DEDENT)):
                child = self.parse_set()
                if child.repeat < 2:
                    children.extend(child.children)
                else:
                    children.append(child)
            return children

        intervals: List[Node] = []
        while queue.test(self.parse_newline) is NO_MATCH:
            intervals.append(self.parse_interval())
            queue.optional(TT.COMMA)
        return intervals

    def parse_set(self) -> Set:
        """Set: Repeat Block"""
        repeat = self.parse_repeat()
        return Set(repeat, tuple(self.parse_block()))

    def parse_repeat(self) -> int:
        """
        Repeat: INT REPEAT NEWLINE*

        Missing repeat header means the block runs once.
        """
        def header():
            count = self.queue.eat(TT.INT)
            self.queue.eat(TT.REPEAT)
            return count

        count = self.queue.test(header)
        if count is NO_MATCH:
            return 1

        if _finite(count) < 1:
            raise UnexpectedToken(count, "a repeat count of at least 1")

        while self.queue.optional(TT.NEWLINE):
            pass
        return int(count.value)

    # ========================================================================
    # Intervals
    # ========================================================================

    def parse_interval(self) -> Interval:
        """Interval: Duration AT? Intensity STRING?"""
        duration = self.parse_duration()
        self.queue.optional(TT.AT)
        intensity = self.parse_intensity()

        annotation = self.queue.test(self.parse_string)
        if not annotation:
            return Interval(duration, intensity)
        return Interval(duration, intensity, annotation)

    def parse_duration(self) -> float:
        """
        Duration in seconds:
            Numeric SEC     (whole seconds only)
          | Numeric MIN
          | Numeric HR
        """
        number = self.queue.peek()
        value = self.parse_numeric()
        unit = self.queue.eat(TT.DURATION_SEC, TT.DURATION_MIN, TT.DURATION_HOUR)

        if unit.type is TT.DURATION_SEC and not value.is_integer():
            raise UnexpectedToken(unit, "MIN/HR")

        seconds = value * SECONDS_PER_UNIT[unit.type]
        if not math.isfinite(seconds):
            raise UnexpectedToken(number, "a finite number")
        return seconds

    def parse_intensity(self) -> Intensity:
        """
        Intensity: Power | PercentFTP

        Both start with a number; Power (INT WATTS) is the stricter one.
        """
        power = self.queue.test(self.parse_power)
        if power is not NO_MATCH:
            return power
        return self.parse_percent_ftp()

    def parse_power(self) -> Power:
        """Power: INT WATTS"""
        value = self.parse_integer()
        self.queue.eat(TT.WATTS)
        return Power(value)

    def parse_percent_ftp(self) -> PercentFTP:
        """
        PercentFTP: Numeric PERCENT?

        `85%` is 0.85 of FTP, a bare `0.85` is taken as-is.
        """
        value = self.parse_numeric()
        if self.queue.optional(TT.PERCENT):
            return PercentFTP(value / 100)
        return PercentFTP(value)

    # ========================================================================
    # Terminals
    # ========================================================================

    def parse_numeric(self) -> float:
        """Numeric: INT | FLOAT"""
        tok = self.queue.peek()
        if tok is None:
            raise UnexpectedEOF("INT/FLOAT")
        if tok.type not in (TT.INT, TT.FLOAT):
            raise UnexpectedToken(tok, "INT/FLOAT")
        return _finite(self.queue.eat())

    def parse_integer(self) -> int:
        tok = self.queue.eat(TT.INT)
        _finite(tok)
        return int(tok.value)

    def parse_string(self) -> str:
        # strip the quotes
        return self.queue.eat(TT.STRING).value[1:-1]

    def parse_newline(self) -> str:
        """
        NewLine: NEWLINE+ | end of input

        Consecutive NEWLINEs collapse into one line break.
        """
        if self.queue.peek() is None:
            return ""

        text = self.queue.eat(TT.NEWLINE).value
        while True:
            tok = self.queue.optional(TT.NEWLINE)
            if tok is None:
                return text
            text += tok.value


def parse_source(source: str) -> Program:
    """Parse wolang source code to a Program"""
    return Parser().parse(source)
