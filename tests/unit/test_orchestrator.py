from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from grade_report.models.config_models import ReportConfig
from grade_report.services.orchestrator import ProcessingError, process_all, scan_dataset_files

ON = date(2024, 5, 20)


def _error_lines(workdir: Path) -> list[dict]:
    logs = sorted((workdir / "logs").glob("errors-*.log"))
    if not logs:
        return []
    return [json.loads(line) for line in logs[-1].read_text(encoding="utf-8").splitlines()]


def test_scan_filters_and_sorts(temp_workdir: Path):
    data = temp_workdir / "data"
    for name in ["b.xlsx", "a.csv", "~$a.xlsx", "notes.txt", "c.XLSX"]:
        (data / name).write_bytes(b"")
    (data / "sub").mkdir()
    assert [p.name for p in scan_dataset_files(data)] == ["a.csv", "b.xlsx", "c.XLSX"]


def test_scan_missing_directory(temp_workdir: Path):
    with pytest.raises(ProcessingError, match="Directory not found"):
        scan_dataset_files(temp_workdir / "missing")


def test_process_one_file(temp_workdir: Path, write_dataset, sample_rows, capsys):
    src = write_dataset("term1.csv", sample_rows + [{"Student": "s5", "Grade": "absent", "Group": "B"}])
    cfg = ReportConfig(charts=False, title="Term 1")
    result = process_all(cfg, [src], on=ON)

    assert result.success_files == 1
    assert result.failed_files == 0
    assert result.total_graded_rows == 4
    assert result.total_skipped_rows == 1
    assert result.file_stats[0].status == "success"

    out_dir = temp_workdir / "reports" / "term1"
    assert (out_dir / "Term_1_2024-05-20.pdf").exists()
    assert (out_dir / "Term_1_2024-05-20_overall.csv").exists()
    assert not list(out_dir.glob("*.png"))

    assert "== term1.csv: Term 1" in capsys.readouterr().out
    skips = _error_lines(temp_workdir)
    assert [(r["row"], r["error_type"]) for r in skips] == [(5, "COERCION_SKIP")]


def test_failures_do_not_stop_batch(temp_workdir: Path, write_dataset, sample_rows):
    good = write_dataset("good.csv", sample_rows)
    empty = write_dataset("empty.csv", [{"Grade": "N/A", "Group": "A"}])
    wrong = write_dataset("wrong.csv", [{"Name": "x", "Mark": 50}])
    broken = temp_workdir / "data" / "broken.xlsx"
    broken.write_bytes(b"garbage")

    cfg = ReportConfig(charts=False, csv_export=False, grade_column="Grade", group_column="Group")
    result = process_all(cfg, [good, empty, wrong, broken], echo_tables=False, on=ON)

    assert result.success_files == 1
    assert result.failed_files == 3
    types = {r["file"]: r["error_type"] for r in _error_lines(temp_workdir)}
    assert types == {
        "empty.csv": "EMPTY_RESULT",
        "wrong.csv": "MISSING_COLUMNS",
        "broken.xlsx": "READ_ERROR",
    }


def test_single_column_dataset_needs_group_selection(temp_workdir: Path, write_dataset):
    src = write_dataset("one.csv", [{"Score": 50}, {"Score": 70}])
    result = process_all(ReportConfig(charts=False), [src], echo_tables=False, on=ON)
    assert result.failed_files == 1
    assert _error_lines(temp_workdir)[0]["error_type"] == "MISSING_COLUMN_SELECTION"


def test_scans_source_directory_when_no_inputs(temp_workdir: Path, write_dataset, sample_rows):
    write_dataset("a.csv", sample_rows)
    write_dataset("b.xlsx", sample_rows)
    result = process_all(ReportConfig(charts=False, csv_export=False), echo_tables=False, on=ON)
    assert result.success_files == 2
    assert (temp_workdir / "reports" / "a" / "Grades_Report_2024-05-20.pdf").exists()
    assert (temp_workdir / "reports" / "b" / "Grades_Report_2024-05-20.pdf").exists()
    assert _error_lines(temp_workdir) == []
