from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""Summary record models for the grade report generator.

SummaryStats carries the metrics computed over one set of grades. The record
shape handed to presentation and export (column labels and their order) is
fixed here so that the text tables, the charts, the CSV files and the PDF all
read the same columns.

Rates are percentages rounded to one decimal, Mean / SD are rounded to two
decimals, counts are raw integers.
"""

__all__ = [
    "GROUP_LABEL",
    "SUMMARY_COLUMNS",
    "GROUP_COLUMNS",
    "RATE_COLUMNS",
    "TWO_DECIMAL_COLUMNS",
    "SummaryStats",
    "GroupSummary",
    "AggregationResult",
]

GROUP_LABEL = "Group"

SUMMARY_COLUMNS: tuple[str, ...] = (
    "N",
    "Passing Count (≥ current Passing)",
    "Failed Count",
    "Passing Rate (%)",
    "Merit Rate (%)",
    "Distinction Rate (%)",
    "Overall Passing Rate (≥40) (%)",
    "Pass (40–59) Count",
    "Merit (60–69) Count",
    "Distinction (≥70) Count",
    "Mean",
    "SD",
    "Max",
    "Min",
)

GROUP_COLUMNS: tuple[str, ...] = (GROUP_LABEL, *SUMMARY_COLUMNS)

RATE_COLUMNS = frozenset(
    {
        "Passing Rate (%)",
        "Merit Rate (%)",
        "Distinction Rate (%)",
        "Overall Passing Rate (≥40) (%)",
    }
)

TWO_DECIMAL_COLUMNS = frozenset({"Mean", "SD"})


@dataclass(frozen=True)
class SummaryStats:
    """Metrics over one multiset of grades (the whole dataset or one group)."""
    n: int
    passing_count: int
    failed_count: int
    passing_rate: float
    merit_rate: float
    distinction_rate: float
    overall_passing_rate_fixed: float
    pass_band_count: int
    merit_band_count: int
    distinction_band_count: int
    mean: float
    sd: float
    max: float
    min: float

    def to_record(self) -> dict[str, Any]:
        """Return the fixed-shape record keyed by SUMMARY_COLUMNS, in order."""
        values = (
            self.n,
            self.passing_count,
            self.failed_count,
            self.passing_rate,
            self.merit_rate,
            self.distinction_rate,
            self.overall_passing_rate_fixed,
            self.pass_band_count,
            self.merit_band_count,
            self.distinction_band_count,
            self.mean,
            self.sd,
            self.max,
            self.min,
        )
        return dict(zip(SUMMARY_COLUMNS, values, strict=True))


@dataclass(frozen=True)
class GroupSummary:
    """SummaryStats for the rows sharing one group label."""
    group: str
    stats: SummaryStats

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {GROUP_LABEL: self.group}
        record.update(self.stats.to_record())
        return record


@dataclass(frozen=True)
class AggregationResult:
    """Output of aggregate(): one overall record and the ordered group records."""
    overall: SummaryStats
    groups: list[GroupSummary]
    rows: list[Any]  # CoercedRow instances that fed the statistics
    skipped_rows: list[int]  # 1-based row numbers excluded by coercion

    def overall_records(self) -> list[dict[str, Any]]:
        return [self.overall.to_record()]

    def group_records(self) -> list[dict[str, Any]]:
        return [g.to_record() for g in self.groups]
