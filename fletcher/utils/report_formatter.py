"""
Percentage helpers for scores and reports.

Ratios are kept as exact fractions until they are reported, and reported values
round half up (so 62.5 becomes 63, never banker's-rounded down to 62).
"""

from fractions import Fraction
from math import floor
from typing import Union


def ratio(count: int, total: int) -> Fraction:
    """Exact ratio count/total, or 0 when total is 0."""
    if total == 0:
        return Fraction(0)
    return Fraction(count, total)


def round_half_up(value: Union[Fraction, int]) -> int:
    """Round to the nearest integer, halves away from zero for non-negative values."""
    return floor(Fraction(value) + Fraction(1, 2))


def percent(count: int, total: int) -> int:
    """
    Integer percentage of count over total.

    Example:
        >>> percent(1, 3)
        33
        >>> percent(5, 8)
        63
        >>> percent(3, 0)
        0
    """
    return round_half_up(ratio(count, total) * 100)

