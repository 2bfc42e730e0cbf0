from __future__ import annotations

from grade_report.services.columns import ColumnSelection, detect_columns


def test_detects_by_header_name():
    sel = detect_columns(["Student", "Final Score", "Class"])
    assert sel == ColumnSelection(grade="Final Score", group="Class")
    assert sel.complete


def test_first_match_wins_case_insensitive():
    sel = detect_columns(["ID", "MARKS", "Grade", "cohort", "Section"])
    assert sel.grade == "MARKS"
    assert sel.group == "cohort"


def test_falls_back_to_first_and_second_column():
    assert detect_columns(["a", "b", "c"]) == ColumnSelection(grade="a", group="b")


def test_short_headers():
    assert detect_columns(["only"]) == ColumnSelection(grade="only", group=None)
    assert detect_columns([]) == ColumnSelection(grade=None, group=None)
    assert not detect_columns(["only"]).complete
