import pytest

from quote_tool.engine.money import round_half_up, round2, safe_percent, format_currency, format_percentage


@pytest.mark.parametrize("value,expected", [
    (0.5, 1),
    (1.5, 2),
    (2.5, 3),
    (212.5, 213),
    (287.49, 287),
    (-0.5, 0),
    (-1.5, -1),
    (-1.51, -2),
])
def test_round_half_up_ties_go_up(value, expected):
    assert round_half_up(value) == expected


def test_round_half_up_returns_int():
    assert isinstance(round_half_up(180.0), int)


@pytest.mark.parametrize("value,expected", [
    (13.043478, 13.04),
    (2.675, 2.68),
    (-11.801242, -11.8),
    (0.005, 0.01),
])
def test_round2(value, expected):
    assert round2(value) == expected


def test_safe_percent_zero_denominator():
    assert safe_percent(500, 0) == 0.0
    assert safe_percent(25, 200) == 12.5


def test_format_currency():
    assert format_currency(80500000) == "$805,000.00"
    assert format_currency(0) == "$0.00"
    assert format_currency(-9500000) == "-$95,000.00"


def test_format_percentage():
    assert format_percentage(13.04) == "13.0%"
