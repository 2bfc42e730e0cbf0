from __future__ import annotations

import math
from typing import Any

from ..models.thresholds import (
    DEFAULT_DISTINCTION,
    DEFAULT_MERIT,
    DEFAULT_PASSING,
    ThresholdSet,
)

"""Threshold normalization.

User-supplied thresholds are clamped into [0, 100] and forced into the order
passing <= merit <= distinction, so the merit range [merit, distinction) used by
the aggregation engine can never be inverted. normalize() is idempotent.
"""

__all__ = [
    "normalize",
    "normalize_set",
]

LOWER_BOUND = 0.0
UPPER_BOUND = 100.0


def _finite_or(value: Any, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    return v if math.isfinite(v) else default


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def normalize(passing: Any, merit: Any, distinction: Any) -> ThresholdSet:
    """Return an ordered, clamped ThresholdSet.

    Non-finite or non-numeric inputs fall back to 40 / 60 / 70. Then
    passing is clamped to [0, 100], merit to [passing, 100] and distinction to
    [merit, 100].

    >>> normalize(70, 50, 120)
    ThresholdSet(passing=70.0, merit=70.0, distinction=100.0)
    """
    p = _finite_or(passing, DEFAULT_PASSING)
    m = _finite_or(merit, DEFAULT_MERIT)
    d = _finite_or(distinction, DEFAULT_DISTINCTION)
    p = _clamp(p, LOWER_BOUND, UPPER_BOUND)
    m = _clamp(m, p, UPPER_BOUND)
    d = _clamp(d, m, UPPER_BOUND)
    return ThresholdSet(passing=p, merit=m, distinction=d)


def normalize_set(thresholds: ThresholdSet) -> ThresholdSet:
    """normalize() applied to an existing (possibly unordered) ThresholdSet."""
    return normalize(thresholds.passing, thresholds.merit, thresholds.distinction)
