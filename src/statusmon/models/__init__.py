"""
Data models and structures for the telemetry layer.

Configuration Models:
- Application-wide settings loaded from config.toml

Record Models:
- Devices, kernel modules, network interfaces, connectivity summaries,
  GPU readings and process rankings produced by the resolvers

Snapshot Models:
- Raw inventory entries and the normalized rows and groups built from them

Log Models:
- Journal queries, retrieval outcomes and the published log texts

All models use type hints and dataclasses; records are immutable values
wherever the two-phase construction does not require otherwise.
"""

# Configuration models
from .config import (
    AppConfig,
    DriverConfig,
    GeneralConfig,
    IntervalConfig,
    LogsConfig,
    MetricsConfig,
    ProcessesConfig,
    RunnerConfig,
)

# Record models
from .records import (
    ConnectivityReport,
    ConnectivitySummary,
    DeviceCategory,
    DeviceRecord,
    DnsConfig,
    DriverReport,
    GpuInfo,
    GpuReport,
    GpuStatus,
    InterfaceRecord,
    InterfaceState,
    KeyValue,
    ModuleRecord,
    NetworkReport,
    ProcessInfo,
    ProcessRanking,
)

# Snapshot models
from .snapshot import (
    RowCategory,
    SnapshotEntry,
    SnapshotGroup,
    SnapshotKind,
    SnapshotReport,
    SnapshotRow,
)

# Log models
from .logs import LogOutcome, LogQuery, LogResult, LogScope, LogsData, RetrievalState

__all__ = [
    # Configuration
    "AppConfig",
    "DriverConfig",
    "GeneralConfig",
    "IntervalConfig",
    "LogsConfig",
    "MetricsConfig",
    "ProcessesConfig",
    "RunnerConfig",
    # Records
    "ConnectivityReport",
    "ConnectivitySummary",
    "DeviceCategory",
    "DeviceRecord",
    "DnsConfig",
    "DriverReport",
    "GpuInfo",
    "GpuReport",
    "GpuStatus",
    "InterfaceRecord",
    "InterfaceState",
    "KeyValue",
    "ModuleRecord",
    "NetworkReport",
    "ProcessInfo",
    "ProcessRanking",
    # Snapshot
    "RowCategory",
    "SnapshotEntry",
    "SnapshotGroup",
    "SnapshotKind",
    "SnapshotReport",
    "SnapshotRow",
    # Logs
    "LogOutcome",
    "LogQuery",
    "LogResult",
    "LogScope",
    "LogsData",
    "RetrievalState",
]
