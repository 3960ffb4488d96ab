"""Numeric helpers shared by grading and statistics."""
import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves going up.

    Built-in round() sends halves to the even neighbour, so 12.5 would become 12.

    >>> round_half_up(12.5)
    13
    >>> round_half_up(62.5)
    63
    """
    return int(math.floor(value + 0.5))
