from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any
import math

TWO_PLACES = Decimal('0.01')


def is_number(value: Any) -> bool:
    """True for finite ints and floats; bools are not numbers here"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # Int beyond float range
        return False

def round2(value: int | float) -> float:
    """
    Round to 2 decimal places, halves away from zero.

    The decimal repr of the float is rounded rather than its binary value,
    so 0.005 becomes 0.01 and -40.005 becomes -40.01.

    Args:
        value: Finite number to round
    Returns:
        float: Rounded value
    """
    try:
        return float(Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # Magnitude exceeds decimal context precision; already coarser than 0.01
        return float(value)
