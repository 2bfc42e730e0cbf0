from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from pathlib import Path

from ..excel.reader import (
    SUPPORTED_SUFFIXES,
    DatasetReadError,
    MissingColumnsError,
    read_dataset,
    require_columns,
)
from ..export.charts import save_charts
from ..export.pdf import export_pdf
from ..export.tables import render_tables, report_stem, write_summary_csv
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import ReportConfig
from ..models.dataset_file import DatasetFile, FileStatus
from ..models.processing_result import FileStat, RunResult
from .aggregation import EmptyResultError
from .progress import ProgressTracker
from .session import MissingColumnSelectionError, MissingInputError, ReportSession

"""Batch orchestration: one report per dataset file.

process_all() resolves the input files (explicit paths or a scan of the
configured source directory), builds and exports a report for each file in its
own ReportSession, records per-file problems in the error log and returns the
aggregated RunResult. A failing file never stops the others.
"""

logger = logging.getLogger(__name__)

FILE_LEVEL = "<FILE_LEVEL>"


class ProcessingError(Exception):
    """Fatal batch error (nothing could be processed)."""
    pass


def scan_dataset_files(directory: Path) -> list[Path]:
    """Scan directory for .csv / .xlsx files (non-recursive, sorted by name).

    Raises:
        ProcessingError: if directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        found = [
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES and not p.name.startswith("~$")
        ]
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e
    return sorted(found, key=lambda p: p.name)


def process_all(
    config: ReportConfig,
    inputs: list[Path] | None = None,
    *,
    echo_tables: bool = True,
    on: date | None = None,
) -> RunResult:
    """Build and export a report for every input dataset.

    Args:
        config: effective configuration (CLI overrides already applied)
        inputs: explicit dataset paths; None scans config.source_directory
        echo_tables: print the summary tables of each report to stdout
        on: report date used in file names and title pages (default: today)

    Returns:
        RunResult with per-file stats

    Raises:
        ProcessingError: if the source directory cannot be scanned
    """
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer()
    on = on or date.today()

    file_paths = list(inputs) if inputs is not None else scan_dataset_files(Path(config.source_directory))
    output_dir = Path(config.output_directory)

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_rows = 0
    total_skipped = 0

    with ProgressTracker(len(file_paths), description="Building reports") as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            file_start = datetime.now(UTC)
            try:
                file_result = _process_single_file(file_path, config, error_log, output_dir, on, echo_tables)
            except Exception as e:
                logger.debug("unexpected failure for %s", file_path.name, exc_info=True)
                error_log.append(
                    ErrorRecord.create(
                        file=file_path.name,
                        sheet=FILE_LEVEL,
                        row=-1,
                        error_type="UNEXPECTED_ERROR",
                        message=str(e),
                    )
                )
                file_result = _failed(file_path, file_start, str(e))
            file_elapsed = (datetime.now(UTC) - file_start).total_seconds()

            if file_result.status == FileStatus.SUCCESS:
                success_count += 1
                total_rows += file_result.graded_rows
                total_skipped += file_result.skipped_rows
            else:
                failed_count += 1
                logger.error("%s: %s", file_path.name, file_result.error)

            progress.set_postfix(success=success_count, failed=failed_count, rows=total_rows)
            progress.finish_file(success=(file_result.status == FileStatus.SUCCESS))

            file_stats.append(
                FileStat(
                    file_name=file_path.name,
                    status=file_result.status.value,
                    graded_rows=file_result.graded_rows,
                    skipped_rows=file_result.skipped_rows,
                    elapsed_seconds=file_elapsed,
                )
            )

    try:
        log_path = error_log.flush()
    except OSError as e:
        logger.warning("error log could not be written: %s", e)
    else:
        if log_path is not None:
            logger.info("error log: %s", log_path)

    end_time = datetime.now(UTC)
    return RunResult(
        success_files=success_count,
        failed_files=failed_count,
        total_graded_rows=total_rows,
        total_skipped_rows=total_skipped,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )


def _failed(file_path: Path, start: datetime, error: str, **kwargs) -> DatasetFile:
    return DatasetFile(
        path=file_path,
        name=file_path.name,
        start_time=start,
        end_time=datetime.now(UTC),
        status=FileStatus.FAILED,
        error=error,
        **kwargs,
    )


def _process_single_file(
    file_path: Path,
    config: ReportConfig,
    error_log: ErrorLogBuffer,
    output_dir: Path,
    on: date,
    echo_tables: bool,
) -> DatasetFile:
    """Read, generate and export one dataset.

    Every failure is turned into an ErrorRecord plus a FAILED DatasetFile; the
    caller moves on to the next file.
    """
    start_time = datetime.now(UTC)

    def record(sheet: str, row: int, error_type: str, message: str) -> None:
        error_log.append(ErrorRecord.create(file=file_path.name, sheet=sheet, row=row, error_type=error_type, message=message))

    try:
        dataset = read_dataset(file_path, na_strings=config.na_strings)
    except DatasetReadError as e:
        record(FILE_LEVEL, -1, "READ_ERROR", str(e))
        return _failed(file_path, start_time, str(e))

    session = ReportSession(default_title=config.default_title)
    session.load(dataset)
    selection = session.select_columns(config.grade_column, config.group_column)
    session.set_thresholds(*config.thresholds.as_tuple())
    session.set_title(config.title)

    try:
        if selection.complete:
            require_columns(dataset, [selection.grade, selection.group])
        report = session.generate()
    except MissingColumnsError as e:
        record(dataset.sheet, -1, "MISSING_COLUMNS", str(e))
        return _failed(file_path, start_time, str(e))
    except MissingInputError as e:
        record(dataset.sheet, -1, "MISSING_INPUT", str(e))
        return _failed(file_path, start_time, str(e))
    except MissingColumnSelectionError as e:
        record(dataset.sheet, -1, "MISSING_COLUMN_SELECTION", str(e))
        return _failed(file_path, start_time, str(e))
    except EmptyResultError as e:
        record(dataset.sheet, -1, "EMPTY_RESULT", str(e))
        return _failed(file_path, start_time, str(e), skipped_rows=len(dataset))

    for row_number in report.skipped_rows:
        record(dataset.sheet, row_number, "COERCION_SKIP", f"non-numeric value in '{report.grade_column}'")

    if echo_tables:
        print(f"== {file_path.name}: {report.title}")
        print(render_tables(report))

    target_dir = output_dir / file_path.stem
    stem = report_stem(report.title, on)
    outputs: list[Path] = []
    try:
        outputs.append(export_pdf(report, target_dir, prepared_by=config.prepared_by, charts=config.charts, on=on))
        if config.csv_export:
            outputs.extend(write_summary_csv(report, target_dir, stem))
        if config.charts:
            outputs.extend(save_charts(report, target_dir, stem).values())
    except (OSError, ValueError) as e:
        record(FILE_LEVEL, -1, "EXPORT_ERROR", str(e))
        return _failed(
            file_path, start_time, f"export failed: {e}",
            graded_rows=report.n, skipped_rows=len(report.skipped_rows), groups=len(report.groups),
        )

    logger.debug("%s outputs=%s", file_path.name, [str(p) for p in outputs])
    return DatasetFile(
        path=file_path,
        name=file_path.name,
        start_time=start_time,
        end_time=datetime.now(UTC),
        status=FileStatus.SUCCESS,
        graded_rows=report.n,
        skipped_rows=len(report.skipped_rows),
        groups=len(report.groups),
        outputs=outputs,
        error=None,
    )
