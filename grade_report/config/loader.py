from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import DEFAULT_TITLE, ReportConfig
from ..models.thresholds import DEFAULT_DISTINCTION, DEFAULT_MERIT, DEFAULT_PASSING, ThresholdSet

"""Config loader.

Responsibilities:
- Load YAML config (config/report.yml unless overridden)
- Validate against the JSON schema shipped next to this module
- Apply defaults for every optional key
"""

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "CONFIG_ENV_VAR",
    "SCHEMA_PATH",
    "ConfigError",
    "ReportConfig",
    "load_config",
    "resolve_config",
]

DEFAULT_CONFIG_PATH = Path("config/report.yml")
CONFIG_ENV_VAR = "GRADE_REPORT_CONFIG"
SCHEMA_PATH = Path(__file__).with_name("report_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: if the schema file is missing or invalid, or the config
            fails validation (unknown keys, wrong types).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _from_mapping(data: dict[str, Any]) -> ReportConfig:
    th_raw = data.get("thresholds") or {}
    thresholds = ThresholdSet(
        passing=th_raw.get("passing", DEFAULT_PASSING),
        merit=th_raw.get("merit", DEFAULT_MERIT),
        distinction=th_raw.get("distinction", DEFAULT_DISTINCTION),
    )
    return ReportConfig(
        source_directory=data.get("source_directory", "./data"),
        output_directory=data.get("output_directory", "./reports"),
        grade_column=data.get("grade_column"),
        group_column=data.get("group_column"),
        thresholds=thresholds,
        default_title=(data.get("default_title") or "").strip() or DEFAULT_TITLE,
        title=data.get("title"),
        prepared_by=data.get("prepared_by"),
        charts=data.get("charts", True),
        csv_export=data.get("csv_export", True),
        na_strings=data.get("na_strings"),
    )


def load_config(path: Path) -> ReportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)
    return _from_mapping(data)


def resolve_config(explicit: Path | None = None) -> ReportConfig:
    """Load the effective configuration.

    Resolution order: explicit path (--config), then $GRADE_REPORT_CONFIG, then
    config/report.yml. An explicit or environment path must exist; the default
    path is optional and built-in defaults apply when it is absent.
    """
    if explicit is not None:
        return load_config(explicit)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return load_config(Path(env_path))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return ReportConfig()
