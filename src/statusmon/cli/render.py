"""
Rendering of telemetry records for the command line.

Records are flattened into titled tables (lists of string dicts); tables
are printed through polars, JSON output goes through json.dumps.
"""

import dataclasses
import json
from enum import Enum
from typing import Any, Dict, List, Tuple

import polars as pl

from ..models.logs import LogsData
from ..models.records import ConnectivityReport, DriverReport, GpuReport, NetworkReport, ProcessRanking
from ..models.snapshot import CATEGORY_TITLES, SnapshotGroup, SnapshotReport, SnapshotRow
from ..parsers.connectivity import summary_rows
from ..parsers.ip_addr import interface_details
from ..parsers.lsmod import describe_module
from ..system.formatting import capitalize_words

Table = Tuple[str, List[Dict[str, str]]]


def _driver_tables(report: DriverReport) -> List[Table]:
    devices = [
        {
            "Category": capitalize_words(device.category.value),
            "Driver": device.driver_name,
            "Device": device.device_description,
            "Version": device.version or "",
        }
        for device in report.devices
    ]
    modules = [
        {"Module": module.name, "Details": describe_module(module), "Version": module.version or ""}
        for module in report.modules
    ]
    return [("Devices", devices), ("Kernel Modules", modules)]


def _gpu_tables(report: GpuReport) -> List[Table]:
    fields = [
        ("Name", report.info.name),
        ("Driver", report.info.driver),
        ("Memory", report.info.memory),
        ("Utilization", report.status.utilization),
        ("Memory Used", report.status.memory_used),
        ("Temperature", report.status.temperature),
        ("Power", report.status.power),
    ]
    return [("GPU", [{"Field": key, "Value": value} for key, value in fields])]


def _process_tables(ranking: ProcessRanking) -> List[Table]:
    rows = [
        {"PID": str(process.pid or ""), "Name": process.name, "Value": value}
        for process, value in zip(ranking.processes, ranking.values)
    ]
    return [(ranking.title, rows)]


def _network_tables(report: NetworkReport) -> List[Table]:
    if report.status is not None:
        return [("Network Interfaces", [{"Status": report.status}])]
    rows = []
    for interface in report.interfaces:
        for key, value in interface_details(interface):
            rows.append({"Interface": interface.name, "Field": key, "Value": value})
    return [("Network Interfaces", rows)]


def _connectivity_tables(report: ConnectivityReport) -> List[Table]:
    rows = []
    for summary in report.summaries:
        for key, value in summary_rows(summary):
            rows.append({"Domain": summary.domain, "Field": key, "Value": value})
    return [("Connectivity", rows)]


def _snapshot_tables(report: SnapshotReport) -> List[Table]:
    tables = []
    for category, (title, _) in CATEGORY_TITLES.items():
        rows = []
        for item in report.for_category(category):
            rows.append({"Title": item.title, "Value": item.subtitle})
            if isinstance(item, SnapshotGroup):
                rows.extend({"Title": f"  {row.title}", "Value": row.subtitle} for row in item.rows)
        if rows:
            tables.append((title, rows))
    return tables


def _software_tables(rows: List[SnapshotRow]) -> List[Table]:
    return [("Software", [{"Title": row.title, "Value": row.subtitle} for row in rows])]


def _logs_tables(data: LogsData) -> List[Table]:
    return [
        ("System Logs", [{"Line": line} for line in data.system_logs.splitlines()]),
        ("User Logs", [{"Line": line} for line in data.user_logs.splitlines()]),
    ]


_TABLE_BUILDERS = {
    "drivers": _driver_tables,
    "gpu": _gpu_tables,
    "processes": _process_tables,
    "network": _network_tables,
    "connectivity": _connectivity_tables,
    "snapshot": _snapshot_tables,
    "software": _software_tables,
    "logs": _logs_tables,
}


def record_tables(name: str, record: Any) -> List[Table]:
    """
    Flatten a source's record into titled tables.

    Raises:
        KeyError: If the source name has no table layout
    """
    if record is None:
        return []
    return _TABLE_BUILDERS[name](record)


def to_jsonable(value: Any) -> Any:
    """Convert records (dataclasses, enums, tuples) into JSON-compatible values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def render_json(results: Dict[str, Any]) -> str:
    return json.dumps(to_jsonable(results), indent=2, ensure_ascii=False)


def render_table(title: str, rows: List[Dict[str, str]]) -> str:
    """Render one titled table; an empty table renders as '(none)'."""
    if not rows:
        return f"== {title} ==\n(none)"
    frame = pl.DataFrame(rows)
    with pl.Config(
        tbl_rows=-1,
        fmt_str_lengths=200,
        tbl_hide_dataframe_shape=True,
        tbl_hide_column_data_types=True,
    ):
        return f"== {title} ==\n{frame}"


def render_tables(results: Dict[str, Any]) -> str:
    blocks = []
    for name, record in results.items():
        for title, rows in record_tables(name, record):
            blocks.append(render_table(title, rows))
    return "\n\n".join(blocks)
