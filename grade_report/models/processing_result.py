from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Run result models for batch report generation.

RunResult aggregates the outcome of one CLI run over every dataset file and
feeds the SUMMARY line.
"""

__all__ = [
    "FileStat",
    "RunResult",
]


@dataclass(frozen=True)
class FileStat:
    """Per-file statistics kept in RunResult."""
    file_name: str
    status: str  # success/failed
    graded_rows: int
    skipped_rows: int
    elapsed_seconds: float


@dataclass(frozen=True)
class RunResult:
    """Aggregated results of a batch run."""
    success_files: int
    failed_files: int
    total_graded_rows: int
    total_skipped_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
