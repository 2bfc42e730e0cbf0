from __future__ import annotations

from grade_report.models.summary import GROUP_COLUMNS, SUMMARY_COLUMNS

"""Contract: summary record shape shared by terminal, CSV and PDF output."""

EXPECTED = [
    "N",
    "Passing Count (≥ current Passing)",
    "Failed Count",
    "Passing Rate (%)",
    "Merit Rate (%)",
    "Distinction Rate (%)",
    "Overall Passing Rate (≥40) (%)",
    "Pass (40–59) Count",
    "Merit (60–69) Count",
    "Distinction (≥70) Count",
    "Mean",
    "SD",
    "Max",
    "Min",
]


def test_overall_columns_exact_order():
    assert list(SUMMARY_COLUMNS) == EXPECTED


def test_group_columns_prefix_group():
    assert list(GROUP_COLUMNS) == ["Group", *EXPECTED]


def test_labels_are_unique():
    assert len(set(GROUP_COLUMNS)) == len(GROUP_COLUMNS)
