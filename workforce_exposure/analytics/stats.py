"""Summary statistics used by the comparative aggregator."""

import math
from typing import Dict, Optional, Sequence


def is_finite_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def average(values: Sequence[float]) -> Optional[float]:
    """Arithmetic mean, or None for an empty sequence."""
    if not values:
        return None
    return sum(values) / len(values)


def weighted_average(weighted_sum: float, weight: float, fallback: Sequence[float]) -> Optional[float]:
    """
    Weighted mean from running sums, falling back to the arithmetic mean
    of ``fallback`` when no weight was accumulated.
    """
    if weight > 0:
        return weighted_sum / weight
    return average(fallback)


def quantiles(values: Sequence[float]) -> Dict[str, Optional[float]]:
    """
    Five-number summary with linear interpolation at rank (n - 1) * p.

    Returns:
        Dict with min, q1, median, q3 and max; all None for no values
    """
    if not values:
        return {"min": None, "q1": None, "median": None, "q3": None, "max": None}

    ordered = sorted(values)

    def at(p: float) -> float:
        position = (len(ordered) - 1) * p
        base = int(math.floor(position))
        rest = position - base
        if base + 1 < len(ordered):
            return ordered[base] + rest * (ordered[base + 1] - ordered[base])
        return ordered[base]

    return {
        "min": ordered[0],
        "q1": at(0.25),
        "median": at(0.5),
        "q3": at(0.75),
        "max": ordered[-1],
    }
