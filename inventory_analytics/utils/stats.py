"""
Small numeric helpers shared by the analytics modules.

Pure Python; every routine here works on short in-memory series of ints or
floats.
"""

from __future__ import annotations

import math
from typing import Sequence

# Tolerance below which a sum of squares or a deviation counts as zero.
ZERO_TOL = 1e-12


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's ``round()`` uses banker's rounding (``round(2.5) == 2``); demand
    quantities are rounded the conventional way (``2.5 -> 3``).

    Raises:
        ValueError: For ``inf`` or ``nan``; callers check finiteness first.
    """
    if not math.isfinite(value):
        raise ValueError(f"cannot round non-finite value {value!r}")
    return int(math.floor(value + 0.5))


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def population_std(values: Sequence[float]) -> float:
    """Standard deviation dividing by ``n`` (not ``n - 1``); 0.0 when empty."""
    if not values:
        return 0.0
    m = mean(values)
    variance = max(0.0, sum((v - m) * (v - m) for v in values) / len(values))
    return math.sqrt(variance)


def is_zero(value: float) -> bool:
    return abs(value) <= ZERO_TOL
