"""
statusmon: local system telemetry.

Polls local command-line tools (lspci, lsmod, ip, nmcli, ufw, journalctl,
nvidia-smi, fastfetch) and normalizes their text output into typed records
that a dashboard, a logger or the bundled CLI can subscribe to.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Typed records and configuration models
- validation: Exception taxonomy, validators and error handling
- system: Process Runner and display formatting
- parsers: Pure text parsers for every polled tool
- collectors: Resolvers, one per data source, and their factory
- snapshot: Host/environment inventory normalization
- services: Privilege broker and log retrieval state machine
- monitoring: Metrics ring buffer, poll scheduler and coordinator
- cli: Command-line interface

Usage:
    From command line:
        statusmon snapshot --section drivers
        statusmon watch --duration 30

    Programmatically:
        from statusmon import TelemetryCoordinator
        coordinator = TelemetryCoordinator()
        records = coordinator.poll_once(["network", "connectivity"])
"""

# Main interfaces
from .config import get_config, clear_config_cache, set_config_path
from .monitoring.coordinator import TelemetryCoordinator
from .monitoring import MetricSeries, PollScheduler
from .collectors import AbstractResolver, ResolverFactory
from .services import LogService, PrivilegeBroker
from .cli import main_cli

# Model classes for external use
from .models import (
    AppConfig,
    ConnectivitySummary,
    DeviceRecord,
    InterfaceRecord,
    LogQuery,
    LogResult,
    ModuleRecord,
    SnapshotRow,
)

# Errors
from .validation import (
    ExecutionError,
    ParseMismatchError,
    ToolUnavailableError,
    ValidationError,
)

# System utilities
from .system import ProcessRunner, format_bytes, run_command

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "TelemetryCoordinator",
    "MetricSeries",
    "PollScheduler",
    "AbstractResolver",
    "ResolverFactory",
    "LogService",
    "PrivilegeBroker",
    "main_cli",
    # Models
    "AppConfig",
    "ConnectivitySummary",
    "DeviceRecord",
    "InterfaceRecord",
    "LogQuery",
    "LogResult",
    "ModuleRecord",
    "SnapshotRow",
    # Errors
    "ExecutionError",
    "ParseMismatchError",
    "ToolUnavailableError",
    "ValidationError",
    # System utilities
    "ProcessRunner",
    "format_bytes",
    "run_command",
]
