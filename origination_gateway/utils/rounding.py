"""Numeric rounding utilities"""

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round to ndigits decimals with halves going up (2.5 -> 3, 0.125 -> 0.13)"""
    scale = 10**ndigits
    return math.floor(value * scale + 0.5) / scale
