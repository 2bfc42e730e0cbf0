# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from grade_report.logging.init import reset_logging

@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("GRADE_REPORT_CONFIG", raising=False)
        yield p

@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./reports
grade_column: null
group_column: null
thresholds:
  passing: 40
  merit: 60
  distinction: 70
default_title: Grades Report
prepared_by: Exams Office
charts: false
csv_export: true
na_strings: []
"""

@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "report.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg

@pytest.fixture()
def sample_rows() -> list[dict[str, object]]:
    # N=4, one group; mean 55, population SD sqrt(250)
    return [
        {"Student": "s1", "Grade": 35, "Group": "A"},
        {"Student": "s2", "Grade": 45, "Group": "A"},
        {"Student": "s3", "Grade": 65, "Group": "A"},
        {"Student": "s4", "Grade": 75, "Group": "A"},
    ]

@pytest.fixture()
def write_dataset(temp_workdir: Path):
    """Write rows (list of dicts) as data/<name>; suffix picks CSV or xlsx."""
    def _write(name: str, rows: list[dict[str, object]]) -> Path:
        path = temp_workdir / "data" / name
        df = pd.DataFrame(rows)
        if path.suffix == ".csv":
            df.to_csv(path, index=False)
        else:
            df.to_excel(path, index=False, engine="openpyxl")
        return path
    return _write

@pytest.fixture()
def fresh_logging():
    # The stdout handler binds sys.stdout at setup; capsys swaps it per test.
    reset_logging()
    yield
    reset_logging()
