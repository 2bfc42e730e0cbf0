from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

"""Grade / group column auto-detection over a header list."""

__all__ = [
    "GRADE_PATTERN",
    "GROUP_PATTERN",
    "ColumnSelection",
    "detect_columns",
]

GRADE_PATTERN = re.compile(r"grade|score|marks?", re.IGNORECASE)
GROUP_PATTERN = re.compile(r"group|section|class|cohort", re.IGNORECASE)


@dataclass(frozen=True)
class ColumnSelection:
    grade: str | None
    group: str | None

    @property
    def complete(self) -> bool:
        return bool(self.grade) and bool(self.group)


def _first_match(columns: Sequence[str], pattern: re.Pattern[str]) -> str | None:
    for c in columns:
        if pattern.search(c):
            return c
    return None


def detect_columns(columns: Sequence[str]) -> ColumnSelection:
    """Pick likely grade and group columns.

    The first header matching grade|score|mark(s) is the grade column and the
    first matching group|section|class|cohort the group column. Without a match
    the first and second headers are used; None when the header is too short.
    """
    grade = _first_match(columns, GRADE_PATTERN)
    group = _first_match(columns, GROUP_PATTERN)
    if grade is None and len(columns) > 0:
        grade = columns[0]
    if group is None and len(columns) > 1:
        group = columns[1]
    return ColumnSelection(grade=grade, group=group)
