from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

from dotenv import load_dotenv

from grade_report.config.loader import ConfigError, resolve_config
from grade_report.logging.init import get_logger, log_summary, set_debug, setup_logging
from grade_report.models.config_models import ReportConfig
from grade_report.services.orchestrator import ProcessingError, process_all, scan_dataset_files
from grade_report.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config (--config / $GRADE_REPORT_CONFIG / config/report.yml)
- Apply command-line overrides
- Build one report per dataset (explicit paths or the configured source directory)
- Print the SUMMARY line and exit with the run status
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; a broken file only produces a warning."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except (OSError, ValueError) as e:  # pragma: no cover
        get_logger().warning(f"failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="grade-report",
        description="Grade summaries (overall and per group) with PDF / CSV export",
    )
    p.add_argument("paths", nargs="*", type=Path, help="Dataset files (.csv/.xlsx); default: scan source_directory")
    p.add_argument("--config", type=Path, default=None, help="YAML config file (default: config/report.yml)")
    p.add_argument("--grade-column", default=None, help="Column holding the grades (default: auto-detect)")
    p.add_argument("--group-column", default=None, help="Column holding the group labels (default: auto-detect)")
    p.add_argument("--passing", type=float, default=None, help="Passing threshold (drives Passing Rate)")
    p.add_argument("--merit", type=float, default=None, help="Merit threshold (drives Merit Rate)")
    p.add_argument("--distinction", type=float, default=None, help="Distinction threshold (drives Distinction Rate)")
    p.add_argument("--title", default=None, help="Report title")
    p.add_argument("--prepared-by", default=None, help="'Prepared by' line on the title page")
    p.add_argument("--output-dir", default=None, help="Directory for PDF / CSV / chart files")
    p.add_argument("--no-charts", action="store_true", help="Skip chart rendering")
    p.add_argument("--no-csv", action="store_true", help="Skip CSV export of the summary tables")
    p.add_argument("--inspect-data", action="store_true", help="Print headers, detected columns & first rows then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _apply_overrides(cfg: ReportConfig, args: argparse.Namespace) -> ReportConfig:
    thresholds = dataclasses.replace(
        cfg.thresholds,
        **{
            k: v
            for k, v in (("passing", args.passing), ("merit", args.merit), ("distinction", args.distinction))
            if v is not None
        },
    )
    overrides: dict[str, object] = {"thresholds": thresholds}
    for field_name, value in (
        ("grade_column", args.grade_column),
        ("group_column", args.group_column),
        ("title", args.title),
        ("prepared_by", args.prepared_by),
        ("output_directory", args.output_dir),
    ):
        if value is not None:
            overrides[field_name] = value
    if args.no_charts:
        overrides["charts"] = False
    if args.no_csv:
        overrides["csv_export"] = False
    return dataclasses.replace(cfg, **overrides)


def _inspect_data(cfg: ReportConfig, paths: list[Path]) -> int:
    from grade_report.excel.reader import DatasetReadError, read_dataset
    from grade_report.services.coercion import is_gradable
    from grade_report.services.columns import detect_columns

    if not paths:
        print("inspect: no .csv/.xlsx files")
        return EXIT_SUCCESS_ALL
    for f in paths:
        print(f"FILE: {f.name}")
        try:
            ds = read_dataset(f, na_strings=cfg.na_strings)
        except DatasetReadError as e:
            print(f"  read_error: {e}")
            continue
        detected = detect_columns(ds.columns)
        grade = cfg.grade_column or detected.grade
        group = cfg.group_column or detected.group
        gradable = sum(1 for r in ds.rows if is_gradable(r.get(grade))) if grade else 0
        print(f"  SHEET: {ds.sheet} rows={len(ds)} cols={ds.columns}")
        print(f"  grade_column={grade!r} group_column={group!r} numeric_grades={gradable}")
        safe_rows = []
        for r in ds.rows[:3]:
            safe_rows.append({k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in r.items()})
        print("    sample_rows=", safe_rows)
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not fall back to sys.argv (pytest args).
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = _apply_overrides(resolve_config(args.config), args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    inputs: list[Path] | None = list(args.paths) or None
    if inputs is None:
        directory = Path(cfg.source_directory)
        if not directory.exists():
            logger.error(f"directory not found: {directory}")
            return EXIT_FATAL
        logger.info(f"Processing files from: {directory}")

    if args.inspect_data:
        try:
            paths = inputs if inputs is not None else scan_dataset_files(Path(cfg.source_directory))
        except ProcessingError as e:
            logger.error(f"inspect: {e}")
            return EXIT_FATAL
        return _inspect_data(cfg, paths)

    try:
        result = process_all(cfg, inputs)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
