from __future__ import annotations

from textwrap import dedent
from typing import Callable, List, Tuple

import pytest

from wolang.ast_nodes import Interval, PercentFTP, Power, Program, Set
from wolang.errors import (
    InvalidArgument,
    ParseError,
    UnexpectedCharacter,
    UnexpectedEOF,
    UnexpectedIndent,
    UnexpectedToken,
    WolangSyntaxError,
)
from wolang.parser_rd import Parser, parse_source


def parse_rule(source: str, rule: Callable[[Parser], object]) -> object:
    """Run a single grammar rule over source."""
    parser = Parser()
    parser.reset(source)
    return rule(parser)


DURATION_CASES: List[Tuple[str, str, float]] = [
    ("seconds", "35 sec", 35),
    ("seconds-short", "30s", 30),
    ("seconds-whole-float", "30.0 seconds", 30),
    ("minutes", "2 Minutes", 120),
    ("minutes-float", "1.5 min", 90),
    ("hours", "1.5 HRS", 5400),
    ("hour", "1 hour", 3600),
]

INTENSITY_CASES: List[Tuple[str, str, object]] = [
    ("power", "350W", Power(350)),
    ("power-spelled", "200 watts", Power(200)),
    ("percent", "85%", PercentFTP(0.85)),
    ("percent-float", "72.5%", PercentFTP(0.725)),
    ("fraction", "1.35", PercentFTP(1.35)),
    ("bare-int", "1", PercentFTP(1.0)),
]

PROGRAM_CASES: List[Tuple[str, str, Program]] = [
    (
        "bare-interval",
        "30s @120W",
        Program((Interval(30, Power(120)),)),
    ),
    (
        "at-is-optional",
        "30s 120W",
        Program((Interval(30, Power(120)),)),
    ),
    (
        "inline-repeat",
        "2x 1min @200W",
        Program((Set(2, (Interval(60, Power(200)),)),)),
    ),
    (
        "inline-repeat-list",
        "2x 1min @200W, 2min @170W",
        Program((Set(2, (Interval(60, Power(200)), Interval(120, Power(170)))),)),
    ),
    (
        "comma-is-optional",
        "1min @200W 2min 85%",
        Program((Interval(60, Power(200)), Interval(120, PercentFTP(0.85)))),
    ),
    (
        "lines",
        "10min 50%\n\n\n5min @250W\n",
        Program((Interval(600, PercentFTP(0.5)), Interval(300, Power(250)))),
    ),
    (
        "nested-blocks",
        "2x\n  1min @200W\n  3x\n    2min @170W\n    30s @120W",
        Program(
            (
                Set(
                    2,
                    (
                        Interval(60, Power(200)),
                        Set(3, (Interval(120, Power(170)), Interval(30, Power(120)))),
                    ),
                ),
            )
        ),
    ),
    (
        "header-blank-lines",
        "3x\n\n  1min 1.1\n",
        Program((Set(3, (Interval(60, PercentFTP(1.1)),)),)),
    ),
    (
        "block-without-repeat-is-flattened",
        "1min 50%\n  2min 60%\n",
        Program((Interval(60, PercentFTP(0.5)), Interval(120, PercentFTP(0.6)))),
    ),
    (
        "annotation",
        '1min @200W "max effort"',
        Program((Interval(60, Power(200), "max effort"),)),
    ),
    (
        "annotation-single-quotes",
        "1min @200W 'easy'",
        Program((Interval(60, Power(200), "easy"),)),
    ),
    (
        "empty-annotation-is-dropped",
        '1min @200W ""',
        Program((Interval(60, Power(200)),)),
    ),
    (
        "comments",
        dedent(
            """\
            # warmup
            10min 55%  # easy spin
            4x
              # hard
              30s @400W "sprint", 30s 50%
            """
        ),
        Program(
            (
                Interval(600, PercentFTP(0.55)),
                Set(4, (Interval(30, Power(400), "sprint"), Interval(30, PercentFTP(0.5)))),
            )
        ),
    ),
    ("empty", "", Program(())),
    ("only-newlines", "\n\n", Program(())),
]

PARSE_ERROR_CASES: List[Tuple[str, str, type, Tuple[int, int]]] = [
    ("fractional-seconds", "3.5 sec 50%", UnexpectedToken, (0, 4)),
    ("missing-unit", "30 @200W", UnexpectedToken, (0, 3)),
    ("missing-intensity", "30s @", UnexpectedEOF, None),
    ("watts-need-int", "1min 200.5W", UnexpectedToken, (0, 10)),
    ("reserved-ramp", "1min 50% > 60%", UnexpectedToken, (0, 9)),
    ("zero-repeat", "0x 1min 50%", UnexpectedToken, (0, 0)),
    ("odd-indent", "2x\n 1min 50%", UnexpectedIndent, (1, 0)),
    ("tab-indent", "2x\n\t1min 50%", UnexpectedCharacter, (1, 0)),
    ("unknown-character", "1min 50% !", UnexpectedCharacter, (0, 9)),
    ("huge-seconds", "1" + "0" * 400 + "s 50%", UnexpectedToken, (0, 0)),
    ("huge-percent", "1min " + "1" * 400 + "%", UnexpectedToken, (0, 5)),
    ("huge-power", "1min @" + "9" * 5000 + "W", UnexpectedToken, (0, 6)),
    ("huge-repeat", "9" * 400 + "x 1min 50%", UnexpectedToken, (0, 0)),
    ("duration-overflow", "1" + "0" * 307 + " hr 50%", UnexpectedToken, (0, 0)),
]


@pytest.mark.parametrize(
    "source,expected",
    [(case[1], case[2]) for case in DURATION_CASES],
    ids=[case[0] for case in DURATION_CASES],
)
def test_duration(source: str, expected: float) -> None:
    assert parse_rule(source, Parser.parse_duration) == expected


def test_fractional_seconds_rejected() -> None:
    with pytest.raises(UnexpectedToken) as exc_info:
        parse_rule("3.5 sec", Parser.parse_duration)

    err = exc_info.value
    assert err.expected == "MIN/HR"
    assert err.token.value == "sec"


@pytest.mark.parametrize(
    "source,expected",
    [(case[1], case[2]) for case in INTENSITY_CASES],
    ids=[case[0] for case in INTENSITY_CASES],
)
def test_intensity(source: str, expected: object) -> None:
    assert parse_rule(source, Parser.parse_intensity) == expected


def test_power_falls_back_without_losing_tokens() -> None:
    # Power consumes the INT before failing on the missing W
    parser = Parser()
    parser.reset("85% 1min")
    assert parser.parse_intensity() == PercentFTP(0.85)
    assert parser.queue.peek().value == "1"


@pytest.mark.parametrize(
    "source,expected",
    [(case[1], case[2]) for case in PROGRAM_CASES],
    ids=[case[0] for case in PROGRAM_CASES],
)
def test_program(source: str, expected: Program) -> None:
    assert parse_source(source) == expected


@pytest.mark.parametrize(
    "source,exc,position",
    [(case[1], case[2], case[3]) for case in PARSE_ERROR_CASES],
    ids=[case[0] for case in PARSE_ERROR_CASES],
)
def test_parse_errors(source: str, exc: type, position) -> None:
    with pytest.raises(exc) as exc_info:
        parse_source(source)

    err = exc_info.value
    assert isinstance(err, WolangSyntaxError)
    if position is not None:
        assert (err.line, err.column) == position


def test_plain_lines_never_produce_single_repeat_sets() -> None:
    program = parse_source("30s @120W\n1min @200W\n")

    assert all(isinstance(node, Interval) for node in program.body)


def test_annotation_absent_is_none() -> None:
    (interval,) = parse_source("1min @200W").body
    assert interval.annotation is None


def test_lex_error_surfaces_after_speculative_rules() -> None:
    # The annotation lookahead rolls back over the "?"; the next read raises it
    with pytest.raises(UnexpectedCharacter) as exc_info:
        parse_source("1min 50% ?")

    assert (exc_info.value.line, exc_info.value.column) == (0, 9)


def test_oversized_literal_names_the_number() -> None:
    with pytest.raises(UnexpectedToken) as exc_info:
        parse_source("1min " + "1" * 400 + "%")

    assert exc_info.value.expected == "a finite number"


def test_missing_unit_reports_expected_units() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_source("30 @200W")
    assert str(exc_info.value) == 'Unexpected token at [0, 3]: "@", expected: SEC/MIN/HR.'


def test_parser_is_reusable() -> None:
    source = "2x\n  1min @200W\n  3x\n    2min @170W\n    30s @120W\n"
    parser = Parser()

    first = parser.parse(source)
    with pytest.raises(WolangSyntaxError):
        parser.parse("3.5 sec 50%")
    second = parser.parse(source)

    assert first == second
    assert first == parse_source(source)


def test_tree_is_immutable() -> None:
    program = parse_source("2x 1min @200W")
    with pytest.raises(AttributeError):
        program.body[0].repeat = 3  # type: ignore[misc]


def test_set_rejects_zero_repeat() -> None:
    with pytest.raises(InvalidArgument):
        Set(0, ())
