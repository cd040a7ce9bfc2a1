"""
Float helpers that saturate instead of raising.

Experimental flags can drive temperatures far outside any physical range.
The models must keep producing (possibly infinite) numbers there rather
than raising OverflowError or ZeroDivisionError in the middle of a tick.
"""

from __future__ import annotations

import math

_EXP_LIMIT = 709.782712893384   # log(sys.float_info.max)


def safe_exp(x: float) -> float:
    """math.exp that returns inf on overflow."""
    if x > _EXP_LIMIT:
        return math.inf
    return math.exp(x)


def safe_pow(base: float, exponent: float) -> float:
    """base ** exponent that returns inf on overflow."""
    try:
        return base ** exponent
    except OverflowError:
        return math.inf


def safe_div(numerator: float, denominator: float) -> float:
    """Division with IEEE semantics for a zero denominator."""
    if denominator != 0:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
