"""
Small statistics helpers shared by the filter and aggregation engines
"""
import math
from typing import Iterable, List, Optional, Sequence

from .models import FiveNumberSummary


def defined(values: Iterable[Optional[float]]) -> List[float]:
    """Drop missing and non-finite values"""
    return [v for v in values if v is not None and math.isfinite(v)]


def mean(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def stddev(values: Sequence[float]) -> float:
    """Population standard deviation; 0 for fewer than two values"""
    if len(values) < 2:
        return 0.0
    m = sum(values) / len(values)
    return math.sqrt(sum((v - m) ** 2 for v in values) / len(values))


def quantile(sorted_values: Sequence[float], q: float) -> Optional[float]:
    """Linear-interpolated quantile of already sorted values"""
    if not sorted_values:
        return None
    pos = (len(sorted_values) - 1) * q
    lo = math.floor(pos)
    hi = math.ceil(pos)
    if lo == hi:
        return sorted_values[lo]
    frac = pos - lo
    return sorted_values[lo] * (1 - frac) + sorted_values[hi] * frac


def five_number_summary(values: Sequence[float]) -> Optional[FiveNumberSummary]:
    if not values:
        return None
    ordered = sorted(values)
    return FiveNumberSummary(
        min=ordered[0],
        q1=quantile(ordered, 0.25),
        median=quantile(ordered, 0.5),
        q3=quantile(ordered, 0.75),
        max=ordered[-1],
    )


def sigma_bounds(values: Sequence[float], sigma: float, min_points: int) -> Optional[tuple]:
    """(low, high) = mean +/- sigma * std-dev, or None with too few points"""
    if len(values) < min_points:
        return None
    m = sum(values) / len(values)
    spread = sigma * stddev(values)
    return (m - spread, m + spread)
