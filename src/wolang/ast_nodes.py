"""AST node types produced by the parser.

All nodes are frozen dataclasses so a parsed workout can be shared and
compared structurally (`parse(s) == parse(s)`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .errors import InvalidArgument


@dataclass(frozen=True)
class Power:
    """Absolute intensity in watts."""

    value: int


@dataclass(frozen=True)
class PercentFTP:
    """Intensity as a fraction of FTP (0.85 == 85%)."""

    value: float


Intensity = Union[Power, PercentFTP]


@dataclass(frozen=True)
class Interval:
    duration: float  # seconds
    intensity: Intensity
    annotation: Optional[str] = None


@dataclass(frozen=True)
class Set:
    repeat: int
    children: Tuple["Node", ...] = ()

    def __post_init__(self):
        if self.repeat < 1:
            raise InvalidArgument(f"Set repeat must be at least 1, got {self.repeat}")


Node = Union[Interval, Set]


@dataclass(frozen=True)
class Program:
    """Document root: the top-level sequence of intervals and sets."""

    body: Tuple[Node, ...] = ()
