"""Configuration and execution for the build command.

Example config file (build.yaml):

    input: "data/spy_1m.csv"
    output: "out/spy_daily_features.csv"  # Optional
    data_source: "csv"
    source_params:
      delimiter: ","
    schedule:
      zone: "America/New_York"
      opening_start: "09:30:00"
      opening_bars: 5
      outcome_start: "09:35:00"
      outcome_end: "11:00:00"
      touch_tolerance: 1.0e-8
    logging:
      level: "INFO"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfoNotFoundError

import yaml
from pydantic import ValidationError

from openrange.data.sources import resolve_row_source
from openrange.data.timestamps import get_zone
from openrange.exceptions import ConfigError
from openrange.features.summary import summarize
from openrange.output import write_daily_rows
from openrange.pipeline import process_rows
from openrange.types import BuildFeaturesConfig, ProcessResult, SessionSchedule, SummaryMetrics

# Valid data source types
VALID_DATA_SOURCES = frozenset(["csv", "yahoo"])

# Valid log levels
VALID_LOG_LEVELS = frozenset(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


def _parse_schedule(raw_schedule: Any) -> SessionSchedule:
    """Validate the optional ``schedule`` section.

    :param raw_schedule: Mapping from the config file.
    :returns: Validated SessionSchedule.
    :raises ConfigError: If any value is invalid.
    """
    if not isinstance(raw_schedule, dict):
        raise ConfigError("'schedule' must be a mapping")

    try:
        schedule = SessionSchedule(**raw_schedule)
    except ValidationError as e:
        raise ConfigError(f"Invalid schedule: {e}") from e

    try:
        get_zone(schedule.zone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"Unknown time zone: {schedule.zone}") from e

    return schedule


def _parse_log_level(value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigError("'logging.level' must be a string")
    log_level = value.upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level '{log_level}'. "
            f"Valid options: {sorted(VALID_LOG_LEVELS)}"
        )
    return log_level


def load_build_features_config(config_path: str | Path) -> BuildFeaturesConfig:
    """Parse and validate a build configuration file.

    :param config_path: Path to YAML configuration file.
    :returns: Validated BuildFeaturesConfig object.
    :raises ConfigError: If file cannot be read or config is invalid.
    """
    config_path = Path(config_path)

    # Read and parse YAML
    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError("Configuration must be a YAML mapping")

    if "input" not in raw_config:
        raise ConfigError("Missing required field: input")
    input_path = raw_config["input"]
    if not isinstance(input_path, str) or not input_path:
        raise ConfigError("'input' must be a non-empty string")

    output_path = raw_config.get("output")
    if output_path is not None and not isinstance(output_path, str):
        raise ConfigError("'output' must be a string")

    data_source = raw_config.get("data_source", "csv")
    if data_source not in VALID_DATA_SOURCES:
        raise ConfigError(
            f"Invalid data_source '{data_source}'. "
            f"Valid options: {sorted(VALID_DATA_SOURCES)}"
        )

    source_params: dict[str, Any] = raw_config.get("source_params", {})
    if not isinstance(source_params, dict):
        raise ConfigError("'source_params' must be a mapping")

    schedule = _parse_schedule(raw_config.get("schedule", {}))

    raw_logging = raw_config.get("logging", {})
    if not isinstance(raw_logging, dict):
        raise ConfigError("'logging' must be a mapping")
    log_level = _parse_log_level(raw_logging.get("level", "WARNING"))

    return BuildFeaturesConfig(
        input_path=input_path,
        output_path=output_path,
        data_source=data_source,
        source_params=source_params,
        schedule=schedule,
        log_level=log_level,
    )


def config_from_paths(
    input_path: str,
    output_path: str | None = None,
    log_level: str = "WARNING",
) -> BuildFeaturesConfig:
    """Build a CSV config from command-line paths.

    :raises ConfigError: If the log level is invalid.
    """
    return BuildFeaturesConfig(
        input_path=input_path,
        output_path=output_path,
        log_level=_parse_log_level(log_level),
    )


def run_build_features(config: BuildFeaturesConfig) -> tuple[ProcessResult, SummaryMetrics]:
    """Read rows, compute daily features, and write them if configured.

    :param config: Validated build configuration.
    :returns: Pipeline result and its summary metrics.
    :raises DataSourceError: If the input cannot be read.
    :raises StorageError: If the output cannot be written.
    """
    source = resolve_row_source(config)
    result = process_rows(source.fetch_rows(), config.schedule)
    if config.output_path is not None:
        write_daily_rows(result.daily_rows, config.output_path)
    return result, summarize(result.daily_rows, result.days_dropped)


__all__ = [
    "VALID_DATA_SOURCES",
    "VALID_LOG_LEVELS",
    "load_build_features_config",
    "config_from_paths",
    "run_build_features",
]
