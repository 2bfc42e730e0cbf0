from __future__ import annotations

from dataclasses import dataclass, field

from .thresholds import ThresholdSet

"""Config dataclasses for the grade report generator.

These are the typed form of config/report.yml after loading and schema
validation (see grade_report.config.loader). CLI flags are applied on top with
dataclasses.replace(), never by mutation.
"""

__all__ = [
    "DEFAULT_TITLE",
    "ReportConfig",
]

DEFAULT_TITLE = "Grades Report"


@dataclass(frozen=True)
class ReportConfig:
    """Root configuration for a report run."""
    source_directory: str = "./data"  # scanned for .csv/.xlsx when no paths are given
    output_directory: str = "./reports"  # PDF / CSV / chart output
    grade_column: str | None = None  # None -> auto-detect
    group_column: str | None = None  # None -> auto-detect
    thresholds: ThresholdSet = field(default_factory=ThresholdSet)  # raw, normalized at generate time
    default_title: str = DEFAULT_TITLE  # used when the report title is blank
    title: str | None = None
    prepared_by: str | None = None  # optional title page line
    charts: bool = True
    csv_export: bool = True
    na_strings: list[str] | None = None  # extra cell strings read as blank
