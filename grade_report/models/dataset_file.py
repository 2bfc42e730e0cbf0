from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

"""DatasetFile domain model and FileStatus enum.

A DatasetFile is the processing context for one input spreadsheet in batch
mode: a generated report (with its output files) or a failure.
"""

__all__ = [
    "FileStatus",
    "DatasetFile",
]


class FileStatus(Enum):
    """Outcome of one dataset file in a batch run."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class DatasetFile:
    """Processing context and outcome for a single dataset file."""
    path: Path
    name: str
    status: FileStatus
    start_time: datetime | None = None
    end_time: datetime | None = None
    graded_rows: int = 0  # rows that entered the statistics
    skipped_rows: int = 0  # rows excluded by numeric coercion
    groups: int = 0
    outputs: list[Path] = field(default_factory=list)  # written export files
    error: str | None = None
