"""
Configuration data models.

This module contains the configuration structures loaded from `config.toml`.
Every field has a default so the application can start without a file.
"""

from dataclasses import dataclass, field


@dataclass
class GeneralConfig:
    # [general]
    log_level: str = "INFO"


@dataclass
class RunnerConfig:
    """
    Settings of the Process Runner and the scheduler's worker pool.
    """

    # Seconds before a hung external tool is abandoned.
    command_timeout: float = 15.0
    # Minimum worker threads; the scheduler gives every source its own.
    max_workers: int = 4
    thread_name_prefix: str = "StatusWorker"
    # Program that wraps commands needing administrative rights.
    elevation_launcher: str = "pkexec"


@dataclass
class IntervalConfig:
    """Poll intervals in seconds, one per data source."""

    gpu: float = 2.0
    processes: float = 2.0
    drivers: float = 10.0
    network: float = 10.0
    connectivity: float = 30.0
    snapshot: float = 60.0
    software: float = 300.0
    logs: float = 10.0

    def as_dict(self) -> dict:
        return {
            "gpu": self.gpu,
            "processes": self.processes,
            "drivers": self.drivers,
            "network": self.network,
            "connectivity": self.connectivity,
            "snapshot": self.snapshot,
            "software": self.software,
            "logs": self.logs,
        }


@dataclass
class DriverConfig:
    # Number of kernel modules kept after ranking.
    top_modules: int = 10
    # Lines scanned after a device line for "Kernel driver in use:".
    driver_lookahead: int = 4


@dataclass
class MetricsConfig:
    history_capacity: int = 60


@dataclass
class LogsConfig:
    default_lines: int = 200
    min_lines: int = 10
    max_lines: int = 10000
    auto_refresh: bool = True


@dataclass
class ProcessesConfig:
    limit: int = 5
    sort_by: str = "cpu"


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    general: GeneralConfig = field(default_factory=GeneralConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    intervals: IntervalConfig = field(default_factory=IntervalConfig)
    drivers: DriverConfig = field(default_factory=DriverConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    logs: LogsConfig = field(default_factory=LogsConfig)
    processes: ProcessesConfig = field(default_factory=ProcessesConfig)
