from __future__ import annotations

from dataclasses import dataclass

"""CoercedRow model for the grade report generator.

A CoercedRow is a single dataset row after the selected grade column went
through numeric coercion and the selected group column was turned into a label.
Rows whose grade could not be coerced never become CoercedRow instances.
"""

__all__ = [
    "MISSING_GROUP",
    "CoercedRow",
]

MISSING_GROUP = "(missing)"


@dataclass(frozen=True)
class CoercedRow:
    """One gradable row (finite grade + group label)."""
    row_number: int  # 1-based data row number (header excluded)
    grade: float  # finite, never NaN
    group: str  # MISSING_GROUP when the source cell was empty
