from __future__ import annotations

import re
from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.config_models import DEFAULT_TITLE
from ..models.report import Report
from ..models.summary import GROUP_COLUMNS, RATE_COLUMNS, SUMMARY_COLUMNS, TWO_DECIMAL_COLUMNS

"""Summary tables: formatting, text rendering and CSV export.

All three consumers (terminal, CSV, PDF) read the same records in the same
column order; only the cell formatting lives here.
"""

__all__ = [
    "format_cell",
    "format_records",
    "summary_frames",
    "render_tables",
    "report_stem",
    "write_summary_csv",
]

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


def _plain_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_cell(column: str, value: Any) -> str:
    """Display form of one summary cell (rates 1 dp, Mean/SD 2 dp)."""
    if column in RATE_COLUMNS:
        return f"{value:.1f}"
    if column in TWO_DECIMAL_COLUMNS:
        return f"{value:.2f}"
    if isinstance(value, float):
        return _plain_number(value)
    return str(value)


def format_records(records: list[dict[str, Any]], columns: tuple[str, ...]) -> list[list[str]]:
    """Header row + formatted data rows, in column order."""
    rows = [list(columns)]
    for rec in records:
        rows.append([format_cell(c, rec[c]) for c in columns])
    return rows


def summary_frames(report: Report) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Raw (unformatted) overall and group tables as DataFrames."""
    overall = pd.DataFrame(report.overall_records(), columns=list(SUMMARY_COLUMNS))
    groups = pd.DataFrame(report.group_records(), columns=list(GROUP_COLUMNS))
    return overall, groups


def _formatted_frame(records: list[dict[str, Any]], columns: tuple[str, ...]) -> pd.DataFrame:
    table = format_records(records, columns)
    return pd.DataFrame(table[1:], columns=table[0])


def render_tables(report: Report) -> str:
    """Plain-text rendering: Overall Summary then Group Summary."""
    overall = _formatted_frame(report.overall_records(), SUMMARY_COLUMNS)
    groups = _formatted_frame(report.group_records(), GROUP_COLUMNS)
    return (
        "Overall Summary\n"
        f"{overall.to_string(index=False)}\n\n"
        "Group Summary\n"
        f"{groups.to_string(index=False)}"
    )


def report_stem(title: str, on: date) -> str:
    """File name stem: title with whitespace runs as '_' plus the ISO date."""
    safe_title = title.strip() or DEFAULT_TITLE
    safe_title = re.sub(r"\s+", "_", safe_title)
    safe_title = _UNSAFE_FILENAME_CHARS.sub("_", safe_title)
    return f"{safe_title}_{on.isoformat()}"


def write_summary_csv(report: Report, output_dir: Path, stem: str) -> list[Path]:
    """Write <stem>_overall.csv and <stem>_groups.csv with formatted cells."""
    output_dir.mkdir(parents=True, exist_ok=True)
    overall_path = output_dir / f"{stem}_overall.csv"
    groups_path = output_dir / f"{stem}_groups.csv"
    _formatted_frame(report.overall_records(), SUMMARY_COLUMNS).to_csv(overall_path, index=False)
    _formatted_frame(report.group_records(), GROUP_COLUMNS).to_csv(groups_path, index=False)
    return [overall_path, groups_path]
