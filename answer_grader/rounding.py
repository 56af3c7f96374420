"""
Integer rounding helpers shared by the scorers and the submission aggregate.

Marks and percentages are rounded half-up (2.5 -> 3), not with Python's
round-half-to-even.
"""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float | Decimal | int) -> int:
    """Round a number to the nearest integer, ties away from zero."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp an integer into [lower, upper]."""
    return max(lower, min(upper, value))
