"""Domain models for the grade report generator.

This package contains the dataclasses shared by the reader, the aggregation
engine, the report session, presentation and export.
"""

from .config_models import DEFAULT_TITLE, ReportConfig
from .dataset import Dataset
from .report import Report
from .row_data import MISSING_GROUP, CoercedRow
from .summary import GROUP_COLUMNS, SUMMARY_COLUMNS, AggregationResult, GroupSummary, SummaryStats
from .thresholds import ThresholdSet

__all__ = [
    # Configuration models
    "DEFAULT_TITLE",
    "ReportConfig",
    # Data models
    "Dataset",
    "CoercedRow",
    "MISSING_GROUP",
    "ThresholdSet",
    # Summary models
    "SUMMARY_COLUMNS",
    "GROUP_COLUMNS",
    "SummaryStats",
    "GroupSummary",
    "AggregationResult",
    "Report",
]
