"""
Host/environment snapshot normalization.

Turns the ordered inventory entries produced by `fastfetch --format json`
into categorized display rows. Dispatch is a fixed table from SnapshotKind
to a handler; each handler receives the entry payload and the shared
NormalizationState and returns the items to emit (possibly none).

Swap is the only kind that does not emit directly: it is parked in the
state and folded into the sub-group of the next Disk entry.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..models.snapshot import (
    RowCategory,
    SnapshotEntry,
    SnapshotGroup,
    SnapshotItem,
    SnapshotKind,
    SnapshotReport,
    SnapshotRow,
)
from ..system.formatting import format_bytes, format_uptime, format_usage
from ..validation import ParseMismatchError

logger = logging.getLogger(__name__)

SKIPPED_KINDS = frozenset(
    {
        SnapshotKind.UNKNOWN,
        SnapshotKind.SEPARATOR,
        SnapshotKind.TITLE,
        # Network addresses come from the connectivity and interface resolvers.
        SnapshotKind.LOCAL_IP,
        SnapshotKind.PUBLIC_IP,
        SnapshotKind.WIFI,
    }
)

SWAP_NOT_CONFIGURED = "Not configured"


@dataclass
class NormalizationState:
    """Accumulator threaded through one normalization pass."""

    pending_swap: Optional[Dict[str, Any]] = None


Handler = Callable[[Any, NormalizationState], List[SnapshotItem]]


def _field(payload: Any, key: str, default: Any = None) -> Any:
    if isinstance(payload, dict):
        value = payload.get(key)
        return default if value is None else value
    return default


def _first_of(payload: Any, *keys: str) -> str:
    for key in keys:
        value = _field(payload, key)
        if value:
            return str(value)
    return ""


def _row(title: str, subtitle: str, icon: str, category: RowCategory = RowCategory.SYSTEM) -> List[SnapshotItem]:
    if not title or not subtitle:
        return []
    return [SnapshotRow(title, subtitle, icon, category)]


def _as_list(payload: Any) -> List[Any]:
    if payload is None:
        return []
    return payload if isinstance(payload, list) else [payload]


def _os(payload, state):
    return _row("OS", _first_of(payload, "prettyName", "name"), "computer-symbolic")


def _host(payload, state):
    return _row("Host", _first_of(payload, "name"), "computer-symbolic")


def _kernel(payload, state):
    subtitle = " ".join(part for part in (_first_of(payload, "name"), _first_of(payload, "release")) if part)
    return _row("Kernel", subtitle, "emblem-system-symbolic")


def _uptime(payload, state):
    uptime = _field(payload, "uptime")
    if uptime is None:
        return []
    return _row("Uptime", format_uptime(uptime), "document-open-recent-symbolic")


def _packages(payload, state):
    counts = []
    dpkg = _field(payload, "dpkg", 0)
    if dpkg > 0:
        counts.append(f"{dpkg} (dpkg)")
    flatpak = _field(payload, "flatpakSystem", 0) + _field(payload, "flatpakUser", 0)
    if flatpak > 0:
        counts.append(f"{flatpak} (flatpak)")
    snap = _field(payload, "snap", 0)
    if snap > 0:
        counts.append(f"{snap} (snap)")
    return _row("Packages", ", ".join(counts), "package-x-generic-symbolic")


def _shell(payload, state):
    name = _first_of(payload, "exeName", "prettyName")
    version = _first_of(payload, "version")
    subtitle = f"{name} {version}" if name and version else name
    return _row("Shell", subtitle, "utilities-terminal-symbolic")


def _display(payload, state):
    lines = []
    for display in _as_list(payload):
        output = _field(display, "output", {})
        resolution = f"{_field(output, 'width', 0)}x{_field(output, 'height', 0)}"
        refresh_rate = _field(output, "refreshRate")
        if refresh_rate:
            resolution += f"@{refresh_rate} Hz"
        lines.append(f"{_first_of(display, 'name')} - {resolution}")
    return _row("Display", "\n".join(lines), "video-display-symbolic", RowCategory.HARDWARE)


def _desktop_environment(payload, state):
    pretty = _first_of(payload, "prettyName")
    version = _first_of(payload, "version")
    subtitle = f"{pretty} {version}" if version else (pretty or _first_of(payload, "name"))
    return _row("Desktop Environment", subtitle, "computer-symbolic")


def _window_manager(payload, state):
    pretty = _first_of(payload, "prettyName", "processName")
    protocol = _first_of(payload, "protocolName")
    subtitle = f"{pretty} ({protocol})" if pretty and protocol else pretty
    return _row("Window Manager", subtitle, "computer-apple-ipad-symbolic")


def _theme(payload, state):
    return _row("Theme", _first_of(payload, "pretty", "name"), "preferences-desktop-theme-symbolic")


def _icons(payload, state):
    return _row("Icons", _first_of(payload, "pretty", "name"), "preferences-desktop-icons-symbolic")


def _font(payload, state):
    return _row("Font", _first_of(payload, "pretty", "name"), "font-x-generic-symbolic")


def _cursor(payload, state):
    name = _first_of(payload, "name")
    size = _field(payload, "size")
    subtitle = f"{name} ({size}px)" if name and size else name
    return _row("Cursor", subtitle, "input-mouse-symbolic")


def _cpu(payload, state):
    cores = _field(payload, "cores", {})
    subtitle = (
        f"{_first_of(payload, 'cpu')} - {_field(cores, 'physical', 0)} physical cores / "
        f"{_field(cores, 'logical', 0)} logical cores"
    )
    return _row("CPU", subtitle, "drive-harddisk-solidstate-symbolic", RowCategory.HARDWARE)


def _gpu(payload, state):
    lines = []
    for gpu in _as_list(payload):
        line = f"{_first_of(gpu, 'vendor')} {_first_of(gpu, 'name')}".strip()
        if line:
            lines.append(line)
    return _row("GPU", "\n".join(lines), "video-display-symbolic", RowCategory.HARDWARE)


def _memory(payload, state):
    subtitle = format_usage(_field(payload, "used", 0), _field(payload, "total", 0))
    return _row("Memory", subtitle, "auth-sim-symbolic", RowCategory.HARDWARE)


def _swap(payload, state):
    state.pending_swap = payload if isinstance(payload, dict) else {}
    return []


def _swap_row(swap: Dict[str, Any]) -> SnapshotRow:
    total = _field(swap, "total", 0)
    if total > 0:
        subtitle = format_usage(_field(swap, "used", 0), total)
    else:
        subtitle = SWAP_NOT_CONFIGURED
    return SnapshotRow("Swap", subtitle, "", RowCategory.HARDWARE)


def _disk(payload, state):
    mounts = _as_list(payload)
    rows = []
    for mount in mounts:
        size = _field(mount, "bytes", {})
        rows.append(
            SnapshotRow(
                title=_first_of(mount, "mountpoint"),
                subtitle=format_usage(_field(size, "used", 0), _field(size, "total", 0)),
                icon_hint="",
                category=RowCategory.HARDWARE,
            )
        )
    if state.pending_swap is not None:
        rows.append(_swap_row(state.pending_swap))
        state.pending_swap = None

    count = len(mounts)
    return [
        SnapshotGroup(
            title="Mount points",
            subtitle=f"{count} mount point{'s' if count != 1 else ''}",
            icon_hint="drive-harddisk-symbolic",
            category=RowCategory.HARDWARE,
            rows=tuple(rows),
        )
    ]


def _battery_rows(battery: Dict[str, Any]) -> List[SnapshotRow]:
    details = []
    if _field(battery, "modelName"):
        details.append(("Model", str(battery["modelName"])))
    if _field(battery, "manufacturer"):
        details.append(("Manufacturer", str(battery["manufacturer"])))
    capacity = _field(battery, "capacity")
    if capacity is not None:
        details.append(("Capacity", f"{float(capacity):.1f}%"))
    if _field(battery, "status"):
        details.append(("Status", str(battery["status"])))
    if _field(battery, "technology"):
        details.append(("Technology", str(battery["technology"])))
    cycle_count = _field(battery, "cycleCount")
    if cycle_count is not None:
        details.append(("Cycle Count", str(cycle_count)))
    voltage = _field(battery, "voltage")
    if voltage is not None:
        details.append(("Voltage", f"{float(voltage):.2f} V"))
    temperature = _field(battery, "temperature")
    if temperature is not None:
        details.append(("Temperature", f"{float(temperature):.1f} °C"))
    return [SnapshotRow(title, subtitle, "", RowCategory.HARDWARE) for title, subtitle in details]


def _battery(payload, state):
    batteries = _as_list(payload)
    if not batteries:
        return []
    # Only the first battery is reported.
    battery = batteries[0]
    capacity = _field(battery, "capacity")
    percentage = f"{float(capacity):.1f}%" if capacity is not None else "N/A"
    status = _first_of(battery, "status")
    icon = "battery-full-charging-symbolic" if "Charging" in status else "battery-symbolic"
    return [
        SnapshotGroup(
            title="Battery",
            subtitle=f"{percentage} - {status or 'Unknown'}",
            icon_hint=icon,
            category=RowCategory.HARDWARE,
            rows=tuple(_battery_rows(battery)),
        )
    ]


def _locale(payload, state):
    return _row("Locale", _first_of(payload, "result"), "preferences-desktop-locale-symbolic")


HANDLERS: Dict[SnapshotKind, Handler] = {
    SnapshotKind.OS: _os,
    SnapshotKind.HOST: _host,
    SnapshotKind.KERNEL: _kernel,
    SnapshotKind.UPTIME: _uptime,
    SnapshotKind.PACKAGES: _packages,
    SnapshotKind.SHELL: _shell,
    SnapshotKind.DISPLAY: _display,
    SnapshotKind.DE: _desktop_environment,
    SnapshotKind.WM: _window_manager,
    SnapshotKind.THEME: _theme,
    SnapshotKind.ICONS: _icons,
    SnapshotKind.FONT: _font,
    SnapshotKind.CURSOR: _cursor,
    SnapshotKind.CPU: _cpu,
    SnapshotKind.GPU: _gpu,
    SnapshotKind.MEMORY: _memory,
    SnapshotKind.SWAP: _swap,
    SnapshotKind.DISK: _disk,
    SnapshotKind.BATTERY: _battery,
    SnapshotKind.LOCALE: _locale,
}


def normalize_entry(entry: SnapshotEntry, state: NormalizationState) -> List[SnapshotItem]:
    """
    Normalize a single entry.

    Erroneous entries and skipped kinds produce nothing. A payload whose
    shape does not match its kind is logged and dropped.
    """
    if entry.error or entry.kind in SKIPPED_KINDS:
        return []
    handler = HANDLERS.get(entry.kind)
    if handler is None:
        return []
    try:
        return handler(entry.payload, state)
    except (TypeError, ValueError, KeyError, AttributeError) as e:
        logger.warning(f"Skipping malformed {entry.kind.value} entry: {e}")
        return []


def normalize(entries: List[SnapshotEntry]) -> SnapshotReport:
    """
    Normalize an ordered sequence of inventory entries.

    Args:
        entries: Entries in feed order

    Returns:
        SnapshotReport with rows and groups in feed order
    """
    state = NormalizationState()
    items: List[SnapshotItem] = []
    for entry in entries:
        items.extend(normalize_entry(entry, state))
    if state.pending_swap is not None:
        logger.debug("Swap entry without a following Disk entry was dropped")
    return SnapshotReport(items=items)


def parse_fastfetch_json(text: str) -> List[SnapshotEntry]:
    """
    Decode `fastfetch --format json` output into entries.

    Raises:
        ParseMismatchError: If the text is not a JSON array of objects
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseMismatchError(f"Inventory output is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise ParseMismatchError("Inventory output is not a JSON array")
    return [SnapshotEntry.from_json(item) for item in data if isinstance(item, dict)]
