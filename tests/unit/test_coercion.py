from __future__ import annotations

import math

import numpy as np
import pytest

from grade_report.models.row_data import MISSING_GROUP
from grade_report.services.coercion import group_label, is_gradable, parse_number


@pytest.mark.parametrize(
    "raw,expected",
    [
        (85, 85.0),
        (72.5, 72.5),
        (np.int64(60), 60.0),
        (np.float64(59.9), 59.9),
        ("85%", 85.0),
        ("  64 ", 64.0),
        ("1,234.5", 1234.5),
        ("12 pts", 12.0),
        ("-3", -3.0),
        (".5", 0.5),
        ("1e2", 100.0),
    ],
)
def test_parse_number_numeric_values(raw, expected):
    assert parse_number(raw) == pytest.approx(expected)


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", "N/A", "absent", "%", True, False, np.bool_(True), math.nan, math.inf, "1e999"],
)
def test_parse_number_non_numeric_is_nan(raw):
    assert math.isnan(parse_number(raw))


def test_is_gradable():
    assert is_gradable("85%") is True
    assert is_gradable(0) is True
    assert is_gradable("N/A") is False
    assert is_gradable(None) is False


def test_group_label_blank_cells_are_missing_group():
    assert group_label(None) == MISSING_GROUP
    assert group_label(math.nan) == MISSING_GROUP


def test_group_label_numbers_and_strings():
    assert group_label("A") == "A"
    assert group_label(1) == "1"
    assert group_label(1.0) == "1"
    assert group_label(np.int64(3)) == "3"
    assert group_label(2.5) == "2.5"
    assert group_label(True) == "true"
