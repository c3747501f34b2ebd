import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest

from utils.gp import InvalidFormat, format_gp, parse_gp, parse_non_negative_gp


@pytest.mark.parametrize(
    "text, expected",
    [
        ("125k", 125_000),
        ("1.25m", 1_250_000),
        ("1,250,000", 1_250_000),
        ("2b", 2_000_000_000),
        ("  42  ", 42),
        ("1.5K", 1_500),
        (".5k", 500),
        ("0.0005k", 1),  # 0.5 rounds away from zero
        ("-0.0005k", -1),
        ("-5k", -5_000),
    ],
)
def test_parse_gp(text, expected):
    assert parse_gp(text) == expected


@pytest.mark.parametrize("text", ["abc", "", "   ", "k", "1.2.3m", "12x", "1e5", "nan", "inf", "5kk"])
def test_parse_gp_rejects(text):
    with pytest.raises(InvalidFormat):
        parse_gp(text)


def test_invalid_format_is_value_error():
    with pytest.raises(ValueError):
        parse_gp("oops")


def test_non_negative_rejects_negative():
    assert parse_non_negative_gp("0") == 0
    with pytest.raises(InvalidFormat):
        parse_non_negative_gp("-1k")


def test_format_gp():
    assert format_gp(1_250_000) == "1,250,000"
    assert format_gp(999) == "999"
    assert format_gp(-5_000) == "-5,000"


def test_parse_gp_long_amounts_are_exact():
    assert parse_gp("9" * 29) == int("9" * 29)
    assert parse_gp("12345678901234567890123456.5m") == 12345678901234567890123456500000
    assert parse_gp("1" * 60 + "b") == int("1" * 60) * 1_000_000_000


def test_read_gp_accepts_long_amount_without_crashing():
    from cli import TerminalDashboard

    answers = iter(["9" * 40])
    dash = TerminalDashboard(session=None, fetcher=None, input_fn=lambda _: next(answers), print_fn=lambda *a: None)
    assert dash.read_gp("? ") == int("9" * 40)
