from __future__ import annotations

import zipfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.dataset import Dataset

"""Spreadsheet reader.

Reads the first sheet of a .xlsx workbook, or a .csv file, into a Dataset:
first row = header, following rows = raw rows. Only blank cells become None;
strings such as "N/A" or "NA" stay strings so that numeric coercion and group
labelling see exactly what the user typed. Extra null strings can be given
through na_strings.
"""

__all__ = [
    "SUPPORTED_SUFFIXES",
    "DatasetReadError",
    "UnsupportedFormatError",
    "SheetHeaderError",
    "MissingColumnsError",
    "read_dataset",
    "frame_to_dataset",
    "require_columns",
]

SUPPORTED_SUFFIXES = (".csv", ".xlsx")
CSV_SHEET = "<CSV>"


class DatasetReadError(Exception):
    """Raised when a dataset file cannot be read."""

class UnsupportedFormatError(DatasetReadError):
    """Raised for file types other than .csv / .xlsx."""

class SheetHeaderError(DatasetReadError):
    """Raised when the header row is missing or empty."""

class MissingColumnsError(Exception):
    """Raised when selected columns are not present in the header."""


def _read_frame(path: Path, na_strings: list[str] | None) -> tuple[pd.DataFrame, str]:
    na_values = [""] + [s for s in (na_strings or []) if s]
    suffix = path.suffix.lower()
    try:
        if suffix == ".csv":
            # dtype=str keeps cells as typed ("01" stays "01"); grades are coerced later
            df = pd.read_csv(path, dtype=str, keep_default_na=False, na_values=na_values, skip_blank_lines=True)
            return df, CSV_SHEET
        if suffix == ".xlsx":
            xls = pd.ExcelFile(path, engine="openpyxl")
            sheet = str(xls.sheet_names[0])
            df = xls.parse(sheet, keep_default_na=False, na_values=na_values)
            return df, sheet
    except pd.errors.EmptyDataError as e:
        raise SheetHeaderError(f"{path.name}: no header row") from e
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise DatasetReadError(f"{path.name}: {e}") from e
    raise UnsupportedFormatError(f"{path.name}: unsupported file type '{path.suffix}' (expected .csv or .xlsx)")


def frame_to_dataset(df: pd.DataFrame, name: str, sheet: str = CSV_SHEET) -> Dataset:
    """Convert a header-applied DataFrame into a Dataset.

    Rows whose cells are all blank are dropped; blank cells become None.
    """
    columns = [str(c).strip() for c in df.columns.tolist()]
    if not columns:
        raise SheetHeaderError(f"{name}: no header row")
    rows: list[dict[str, Any]] = []
    for _, raw in df.iterrows():
        if raw.isna().all():
            continue
        row: dict[str, Any] = {}
        for col, val in zip(columns, raw.tolist(), strict=False):
            if pd.isna(val):
                row[col] = None
            else:
                row[col] = val
        rows.append(row)
    return Dataset(name=name, columns=columns, rows=rows, sheet=sheet)


def read_dataset(path: Path, na_strings: list[str] | None = None) -> Dataset:
    """Read a .csv / .xlsx file into a Dataset.

    Parameters
    ----------
    path: dataset file path
    na_strings: additional cell strings to treat as blank (e.g. ['-'])

    Raises
    ------
    UnsupportedFormatError, SheetHeaderError, DatasetReadError
    """
    df, sheet = _read_frame(path, na_strings)
    return frame_to_dataset(df, path.name, sheet=sheet)


def require_columns(dataset: Dataset, columns: Iterable[str]) -> None:
    """Raise MissingColumnsError if any of columns is not in the dataset header."""
    missing = [c for c in columns if c not in dataset.columns]
    if missing:
        raise MissingColumnsError(f"{dataset.name}: missing columns: {sorted(missing)}")
