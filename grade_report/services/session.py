from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from ..models.config_models import DEFAULT_TITLE
from ..models.dataset import Dataset
from ..models.report import Report
from ..models.thresholds import ThresholdSet
from .aggregation import aggregate
from .columns import ColumnSelection, detect_columns
from .thresholds import normalize

"""Report session: the current dataset, selections and last generated report.

A session holds exactly one dataset, one column selection, one title and one
threshold set. Every setter replaces its piece of state wholesale. generate()
recomputes everything from the raw rows and only replaces the current report
once the whole computation succeeded; on error the previous report stays.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ReportError",
    "MissingInputError",
    "MissingColumnSelectionError",
    "ReportNotGeneratedError",
    "ReportSession",
]


class ReportError(Exception):
    """Base exception for recoverable report generation errors."""


class MissingInputError(ReportError):
    """Raised when generate() is called with no dataset loaded."""


class MissingColumnSelectionError(ReportError):
    """Raised when the grade or group column has not been selected."""


class ReportNotGeneratedError(ReportError):
    """Raised when a report is required but none has been generated."""


class ReportSession:
    """Single-report working state (one dataset at a time)."""

    def __init__(self, default_title: str = DEFAULT_TITLE) -> None:
        self.default_title = default_title
        self.dataset: Dataset | None = None
        self.selection = ColumnSelection(grade=None, group=None)
        self.title = ""
        self.thresholds = ThresholdSet()
        self.report: Report | None = None

    @property
    def columns(self) -> list[str]:
        return list(self.dataset.columns) if self.dataset is not None else []

    @property
    def report_generated(self) -> bool:
        return self.report is not None

    def load(self, dataset: Dataset) -> ColumnSelection:
        """Replace the dataset, auto-detect columns and discard the current report."""
        self.dataset = dataset
        self.selection = detect_columns(dataset.columns)
        self.report = None
        logger.debug(
            "loaded %s rows=%d columns=%s grade=%s group=%s",
            dataset.name,
            len(dataset),
            dataset.columns,
            self.selection.grade,
            self.selection.group,
        )
        return self.selection

    def select_columns(self, grade: str | None = None, group: str | None = None) -> ColumnSelection:
        """Override the selected columns; None keeps the current choice."""
        self.selection = ColumnSelection(
            grade=grade if grade is not None else self.selection.grade,
            group=group if group is not None else self.selection.group,
        )
        return self.selection

    def set_thresholds(self, passing: Any, merit: Any, distinction: Any) -> None:
        """Store raw thresholds; they are normalized when a report is generated."""
        self.thresholds = ThresholdSet(passing=passing, merit=merit, distinction=distinction)

    def set_title(self, title: str | None) -> None:
        self.title = title or ""

    def generate(self) -> Report:
        """Aggregate the current dataset and make the result the current report.

        Raises:
            MissingInputError: no dataset loaded (or it has no rows)
            MissingColumnSelectionError: grade or group column not chosen
            EmptyResultError: no numeric grade in the grade column
        """
        if self.dataset is None or self.dataset.is_empty:
            raise MissingInputError("Please upload a data file first.")
        if not self.selection.grade:
            raise MissingColumnSelectionError("Please select a Grade column.")
        if not self.selection.group:
            raise MissingColumnSelectionError("Please select a Group column.")

        thresholds = normalize(*self.thresholds.as_tuple())
        result = aggregate(self.dataset.rows, self.selection.grade, self.selection.group, thresholds)

        title = self.title.strip() or self.default_title
        self.title = title
        self.report = Report(
            title=title,
            dataset_name=self.dataset.name,
            grade_column=self.selection.grade,
            group_column=self.selection.group,
            thresholds=thresholds,
            overall=result.overall,
            groups=result.groups,
            rows=result.rows,
            skipped_rows=result.skipped_rows,
            generated_at=datetime.now(UTC),
        )
        logger.info(
            "generated '%s' from %s n=%d groups=%d skipped=%d",
            title,
            self.dataset.name,
            result.overall.n,
            len(result.groups),
            len(result.skipped_rows),
        )
        return self.report

    def require_report(self) -> Report:
        if self.report is None:
            raise ReportNotGeneratedError("Generate report first.")
        return self.report

    def reset(self) -> None:
        """Back to the initial state: no data, default thresholds, empty title."""
        self.dataset = None
        self.selection = ColumnSelection(grade=None, group=None)
        self.title = ""
        self.thresholds = ThresholdSet()
        self.report = None
