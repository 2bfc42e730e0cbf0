from __future__ import annotations

import logging
import math
import statistics
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from ..models.row_data import CoercedRow
from ..models.summary import AggregationResult, GroupSummary, SummaryStats
from ..models.thresholds import ThresholdSet
from .coercion import group_label, parse_number
from .thresholds import normalize_set

"""Aggregation engine: overall and per-group grade summaries.

aggregate() is a pure function of (rows, grade column, group column,
thresholds). Every call recomputes everything from the raw rows; nothing is
cached between calls.

Two counting schemes run side by side:
- dynamic, driven by the user thresholds (Passing / Merit / Distinction rates)
- fixed bands 40-59 / 60-69 / >=70 and the >=40 overall passing rate, which
  ignore the user thresholds
"""

logger = logging.getLogger(__name__)

__all__ = [
    "AggregationError",
    "EmptyResultError",
    "FIXED_PASS",
    "FIXED_MERIT",
    "FIXED_DISTINCTION",
    "coerce_rows",
    "summarize",
    "aggregate",
]

FIXED_PASS = 40.0
FIXED_MERIT = 60.0
FIXED_DISTINCTION = 70.0

_ONE_DECIMAL = Decimal("0.1")
_TWO_DECIMALS = Decimal("0.01")


class AggregationError(Exception):
    """Base exception for aggregation failures."""


class EmptyResultError(AggregationError):
    """Raised when no row has a numeric grade, so there is nothing to summarize."""


def _round_half_up(value: float, exponent: Decimal) -> float:
    if not math.isfinite(value):
        return value
    # str() gives the shortest repr, so 0.15 rounds to 0.2 rather than following
    # its binary expansion down to 0.1.
    d = Decimal(str(value))
    with localcontext() as ctx:
        # enough digits for the integer part plus the quantum
        ctx.prec = max(ctx.prec, d.adjusted() - exponent.as_tuple().exponent + 2)
        return float(d.quantize(exponent, rounding=ROUND_HALF_UP))


def _mean(grades: Sequence[float]) -> float:
    try:
        return statistics.fmean(grades)
    except OverflowError:
        # the running sum left float range; scale first, the mean itself is finite
        n = len(grades)
        return math.fsum(g / n for g in grades)


def _population_sd(grades: Sequence[float]) -> float:
    try:
        return statistics.pstdev(grades)
    except OverflowError:
        return math.inf


def _rate(count: int, n: int) -> float:
    """count / n as a percentage, one decimal, half away from zero (exact)."""
    pct = Decimal(100 * count) / Decimal(n)
    return float(pct.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def coerce_rows(
    rows: Iterable[dict[str, Any]], grade_column: str, group_column: str
) -> tuple[list[CoercedRow], list[int]]:
    """Coerce raw rows; returns (gradable rows, skipped 1-based row numbers)."""
    coerced: list[CoercedRow] = []
    skipped: list[int] = []
    for idx, raw in enumerate(rows, start=1):
        grade = parse_number(raw.get(grade_column))
        if math.isnan(grade):
            skipped.append(idx)
            continue
        coerced.append(CoercedRow(row_number=idx, grade=grade, group=group_label(raw.get(group_column))))
    return coerced, skipped


def summarize(grades: Sequence[float], thresholds: ThresholdSet) -> SummaryStats:
    """Compute the summary metrics over one non-empty multiset of grades.

    Thresholds are expected to be normalized already. SD is the population
    standard deviation (divisor N).
    """
    n = len(grades)
    if n == 0:
        raise EmptyResultError("no numeric grades to summarize")
    p, m, d = thresholds.as_tuple()

    pass_count = sum(1 for g in grades if g >= p)
    merit_count = sum(1 for g in grades if m <= g < d)
    dist_count = sum(1 for g in grades if g >= d)

    pass_band = sum(1 for g in grades if FIXED_PASS <= g < FIXED_MERIT)
    merit_band = sum(1 for g in grades if FIXED_MERIT <= g < FIXED_DISTINCTION)
    dist_band = sum(1 for g in grades if g >= FIXED_DISTINCTION)
    passing_fixed = sum(1 for g in grades if g >= FIXED_PASS)

    mean = _mean(grades)
    sd = _population_sd(grades)

    return SummaryStats(
        n=n,
        passing_count=pass_count,
        failed_count=n - pass_count,
        passing_rate=_rate(pass_count, n),
        merit_rate=_rate(merit_count, n),
        distinction_rate=_rate(dist_count, n),
        overall_passing_rate_fixed=_rate(passing_fixed, n),
        pass_band_count=pass_band,
        merit_band_count=merit_band,
        distinction_band_count=dist_band,
        mean=_round_half_up(mean, _TWO_DECIMALS),
        sd=_round_half_up(sd, _TWO_DECIMALS),
        max=max(grades),
        min=min(grades),
    )


def aggregate(
    rows: Iterable[dict[str, Any]],
    grade_column: str,
    group_column: str,
    thresholds: ThresholdSet,
) -> AggregationResult:
    """Summarize raw rows overall and per group.

    Args:
        rows: raw rows (column name -> cell value)
        grade_column: column holding the grades
        group_column: column holding the group labels
        thresholds: user thresholds (normalized here again; normalize is idempotent)

    Returns:
        AggregationResult with groups sorted by label

    Raises:
        EmptyResultError: if no row has a numeric grade
    """
    coerced, skipped = coerce_rows(rows, grade_column, group_column)
    if not coerced:
        raise EmptyResultError(f"no numeric grades found in column '{grade_column}'")
    ts = normalize_set(thresholds)

    overall = summarize([r.grade for r in coerced], ts)

    grouped: dict[str, list[float]] = {}
    for r in coerced:
        grouped.setdefault(r.group, []).append(r.grade)
    groups = [GroupSummary(group=label, stats=summarize(grouped[label], ts)) for label in sorted(grouped)]

    logger.debug(
        "aggregate grade_column=%s group_column=%s n=%d skipped=%d groups=%d thresholds=%s",
        grade_column,
        group_column,
        overall.n,
        len(skipped),
        len(groups),
        ts.as_tuple(),
    )
    return AggregationResult(overall=overall, groups=groups, rows=coerced, skipped_rows=skipped)
