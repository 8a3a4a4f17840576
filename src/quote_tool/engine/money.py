"""
Integer-cent arithmetic helpers.

Every monetary value that is not already integral goes through
round_half_up() before it is summed or compared.
"""
import math
from decimal import Decimal, ROUND_HALF_UP


def round_half_up(cents: float) -> int:
    """Round a fractional cent amount to whole cents, ties toward +infinity."""
    return int(math.floor(cents + 0.5))


def round2(value: float) -> float:
    """Round to two decimal places, half away from zero, for display percentages."""
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def safe_percent(numerator: float, denominator: float) -> float:
    """Return numerator/denominator as a percentage, 0.0 when the denominator is zero."""
    if denominator == 0:
        return 0.0
    return (numerator / denominator) * 100


def format_currency(cents: int) -> str:
    """Format integer cents as USD, e.g. 80500000 -> '$805,000.00'."""
    sign = "-" if cents < 0 else ""
    return f"{sign}${abs(cents) / 100:,.2f}"


def format_percentage(percent: float) -> str:
    """Format a percentage value with one decimal, e.g. 13.04 -> '13.0%'."""
    return f"{percent:.1f}%"
