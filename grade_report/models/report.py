from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .row_data import CoercedRow
from .summary import GroupSummary, SummaryStats
from .thresholds import ThresholdSet

"""Report model for the grade report generator.

A Report is what one successful "generate" action produces: the summaries plus
the inputs that produced them. Presentation and export only ever read Reports.
"""

__all__ = [
    "Report",
]


@dataclass(frozen=True)
class Report:
    """A generated grade report (immutable snapshot)."""
    title: str
    dataset_name: str
    grade_column: str
    group_column: str
    thresholds: ThresholdSet
    overall: SummaryStats
    groups: list[GroupSummary]
    rows: list[CoercedRow]
    skipped_rows: list[int]
    generated_at: datetime

    @property
    def n(self) -> int:
        return self.overall.n

    def overall_records(self) -> list[dict[str, Any]]:
        return [self.overall.to_record()]

    def group_records(self) -> list[dict[str, Any]]:
        return [g.to_record() for g in self.groups]

    def grades(self) -> list[float]:
        return [r.grade for r in self.rows]

    def grades_by_group(self) -> dict[str, list[float]]:
        """Grades per group label, keyed in group-summary order."""
        grouped: dict[str, list[float]] = {g.group: [] for g in self.groups}
        for r in self.rows:
            grouped.setdefault(r.group, []).append(r.grade)
        return grouped
