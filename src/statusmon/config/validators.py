"""
Configuration validation utilities.

Each section of config.toml has one validator that turns the raw TOML mapping
into its dataclass, applying defaults and range checks.
"""

import logging
from typing import Any, Dict

from ..models.config import (
    AppConfig,
    DriverConfig,
    GeneralConfig,
    IntervalConfig,
    LogsConfig,
    MetricsConfig,
    ProcessesConfig,
    RunnerConfig,
)
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_non_empty_string,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_SORT_KEYS = ["cpu", "memory"]


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValidationError(f"[{name}] must be a table", field_name=name, value=section)
    return section


def _validate_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a boolean", field_name=field_name, value=value)
    return value


def validate_general_config(general: Dict[str, Any]) -> GeneralConfig:
    log_level = validate_enum_choice(
        general.get("log_level", "INFO"),
        valid_choices=VALID_LOG_LEVELS,
        field_name="general.log_level",
        case_sensitive=False,
    )
    return GeneralConfig(log_level=log_level)


def validate_runner_config(runner: Dict[str, Any]) -> RunnerConfig:
    """
    Validate the [runner] section.

    Raises:
        ValidationError: If a value is out of range
    """
    command_timeout = validate_positive_float(
        runner.get("command_timeout", 15.0),
        min_value=0.5,
        max_value=600.0,
        field_name="runner.command_timeout",
    )
    max_workers = validate_positive_integer(
        runner.get("max_workers", 4),
        min_value=1,
        max_value=64,
        field_name="runner.max_workers",
    )
    thread_name_prefix = validate_non_empty_string(
        runner.get("thread_name_prefix", "StatusWorker"),
        field_name="runner.thread_name_prefix",
    )
    elevation_launcher = validate_non_empty_string(
        runner.get("elevation_launcher", "pkexec"),
        field_name="runner.elevation_launcher",
    )
    return RunnerConfig(
        command_timeout=command_timeout,
        max_workers=max_workers,
        thread_name_prefix=thread_name_prefix,
        elevation_launcher=elevation_launcher,
    )


def validate_interval_config(intervals: Dict[str, Any]) -> IntervalConfig:
    """
    Validate the [intervals] section; every interval is in seconds.

    Raises:
        ValidationError: If an interval is unknown or out of range
    """
    defaults = IntervalConfig().as_dict()
    unknown = sorted(set(intervals) - set(defaults))
    if unknown:
        raise ValidationError(
            f"Unknown poll interval(s) in [intervals]: {unknown}",
            field_name="intervals",
            value=unknown,
        )

    values = {}
    for name, default in defaults.items():
        values[name] = validate_positive_float(
            intervals.get(name, default),
            min_value=0.1,
            max_value=86400.0,
            field_name=f"intervals.{name}",
        )
    return IntervalConfig(**values)


def validate_driver_config(drivers: Dict[str, Any]) -> DriverConfig:
    top_modules = validate_positive_integer(
        drivers.get("top_modules", 10),
        min_value=1,
        max_value=1000,
        field_name="drivers.top_modules",
    )
    driver_lookahead = validate_positive_integer(
        drivers.get("driver_lookahead", 4),
        min_value=1,
        max_value=32,
        field_name="drivers.driver_lookahead",
    )
    return DriverConfig(top_modules=top_modules, driver_lookahead=driver_lookahead)


def validate_metrics_config(metrics: Dict[str, Any]) -> MetricsConfig:
    history_capacity = validate_positive_integer(
        metrics.get("history_capacity", 60),
        min_value=1,
        max_value=100000,
        field_name="metrics.history_capacity",
    )
    return MetricsConfig(history_capacity=history_capacity)


def validate_logs_config(logs: Dict[str, Any]) -> LogsConfig:
    """
    Validate the [logs] section.

    Raises:
        ValidationError: If the line bounds are inconsistent
    """
    min_lines = validate_positive_integer(
        logs.get("min_lines", 10),
        min_value=1,
        field_name="logs.min_lines",
    )
    max_lines = validate_positive_integer(
        logs.get("max_lines", 10000),
        min_value=min_lines,
        field_name="logs.max_lines",
    )
    default_lines = validate_positive_integer(
        logs.get("default_lines", 200),
        min_value=min_lines,
        max_value=max_lines,
        field_name="logs.default_lines",
    )
    auto_refresh = _validate_bool(logs.get("auto_refresh", True), "logs.auto_refresh")
    return LogsConfig(
        default_lines=default_lines,
        min_lines=min_lines,
        max_lines=max_lines,
        auto_refresh=auto_refresh,
    )


def validate_processes_config(processes: Dict[str, Any]) -> ProcessesConfig:
    limit = validate_positive_integer(
        processes.get("limit", 5),
        min_value=1,
        max_value=100,
        field_name="processes.limit",
    )
    sort_by = validate_enum_choice(
        processes.get("sort_by", "cpu"),
        valid_choices=VALID_SORT_KEYS,
        field_name="processes.sort_by",
    )
    return ProcessesConfig(limit=limit, sort_by=sort_by)


def validate_app_config(data: Dict[str, Any]) -> AppConfig:
    """
    Validate the whole configuration mapping and build an AppConfig.

    Args:
        data: Parsed config.toml contents (may be empty)

    Returns:
        Validated AppConfig instance

    Raises:
        ValidationError: If any section fails validation
    """
    return AppConfig(
        general=validate_general_config(_section(data, "general")),
        runner=validate_runner_config(_section(data, "runner")),
        intervals=validate_interval_config(_section(data, "intervals")),
        drivers=validate_driver_config(_section(data, "drivers")),
        metrics=validate_metrics_config(_section(data, "metrics")),
        logs=validate_logs_config(_section(data, "logs")),
        processes=validate_processes_config(_section(data, "processes")),
    )
