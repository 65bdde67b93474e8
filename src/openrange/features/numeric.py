"""Arithmetic over possibly-missing values.

Missing values are NaN. Every helper here returns NaN when any operand it
needs is missing, so a gap in the input shows up as a gap in the derived
metric instead of being silently treated as zero.
"""

from __future__ import annotations

import math
from typing import Iterable

NAN = math.nan


def is_finite(value: float | None) -> bool:
    """True if ``value`` is a real, finite number."""
    return value is not None and math.isfinite(value)


def sub(a: float, b: float) -> float:
    """``a - b``, NaN if either side is missing."""
    if is_finite(a) and is_finite(b):
        return a - b
    return NAN


def div(numerator: float, denominator: float) -> float:
    """``numerator / denominator``, NaN if either is missing or the denominator is zero."""
    if is_finite(numerator) and is_finite(denominator) and denominator != 0:
        return numerator / denominator
    return NAN


def extremum(values: Iterable[float], maximum: bool) -> float:
    """Max (or min) over the finite values, NaN if there are none."""
    finite = [v for v in values if is_finite(v)]
    if not finite:
        return NAN
    return max(finite) if maximum else min(finite)


def sign(value: float) -> int:
    """-1, 0 or 1. Missing values have sign 0."""
    if not is_finite(value) or value == 0:
        return 0
    return 1 if value > 0 else -1


__all__ = ["NAN", "is_finite", "sub", "div", "extremum", "sign"]
