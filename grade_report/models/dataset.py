from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Dataset model for the grade report generator.

A Dataset is the in-memory form of one imported spreadsheet: the ordered header
and the raw rows keyed by header name. It is never mutated after loading; a
re-import produces a new Dataset.
"""

__all__ = [
    "Dataset",
]


@dataclass(frozen=True)
class Dataset:
    """Raw rows of an imported spreadsheet (first sheet, first row = header)."""
    name: str  # source file name
    columns: list[str]  # header order
    rows: list[dict[str, Any]] = field(default_factory=list)  # column -> raw cell value (None = blank)
    sheet: str = ""  # sheet the rows came from ("<CSV>" for CSV files)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows
