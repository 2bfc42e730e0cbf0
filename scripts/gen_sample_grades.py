#!/usr/bin/env python3
"""Sample grade dataset generator.

Writes a synthetic grade sheet (.csv or .xlsx, chosen by the output suffix)
with a student id, a grade column and a group column. A small share of the
grades is written as text ("85%", "N/A", blank) so that coercion and row
skipping can be exercised end to end.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd


def generate_grades(rows: int, groups: int, seed: int = 42, text_ratio: float = 0.05) -> pd.DataFrame:
    """Generate a grade DataFrame.

    Args:
        rows: Number of students
        groups: Number of distinct groups (labelled A, B, C, ...)
        seed: Random seed for reproducible data
        text_ratio: Share of grades written as non-plain text

    Returns:
        DataFrame with columns Student, Grade, Group
    """
    rng = np.random.default_rng(seed)
    labels = [chr(65 + (i % 26)) for i in range(groups)]

    scores = np.clip(np.round(rng.normal(58, 15, rows), 1), 0, 100)
    grades: list[object] = scores.tolist()
    for idx in np.flatnonzero(rng.random(rows) < text_ratio):
        kind = rng.integers(0, 3)
        if kind == 0:
            grades[idx] = f"{scores[idx]:g}%"
        elif kind == 1:
            grades[idx] = "N/A"
        else:
            grades[idx] = ""

    return pd.DataFrame(
        {
            "Student": [f"S{j + 1:05d}" for j in range(rows)],
            "Grade": grades,
            "Group": rng.choice(labels, rows).tolist(),
        }
    )


def write_dataset(output_path: Path, df: pd.DataFrame) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.suffix.lower() == ".csv":
        df.to_csv(output_path, index=False)
    else:
        df.to_excel(output_path, index=False, engine="openpyxl")
    print(f"Created dataset: {output_path}")
    print(f"  Rows: {len(df):,}")
    print(f"  Groups: {df['Group'].nunique()}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic grade dataset",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/grades.xlsx
  %(prog)s data/large.csv --rows 50000 --groups 12 --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output file (.csv or .xlsx)")
    parser.add_argument("--rows", type=int, default=200, help="Number of students (default: 200)")
    parser.add_argument("--groups", type=int, default=4, help="Number of groups (default: 4)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument(
        "--text-ratio", type=float, default=0.05,
        help="Share of grades written as text such as '85%%' or 'N/A' (default: 0.05)",
    )
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.groups <= 0:
        print("Error: --groups must be positive", file=sys.stderr)
        return 1
    if args.output.suffix.lower() not in (".csv", ".xlsx"):
        print("Error: output must end with .csv or .xlsx", file=sys.stderr)
        return 1

    try:
        write_dataset(args.output, generate_grades(args.rows, args.groups, args.seed, args.text_ratio))
    except OSError as e:
        print(f"Error writing dataset: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
