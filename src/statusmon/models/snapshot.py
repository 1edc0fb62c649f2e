"""
Host snapshot data models.

Raw entries come from the system inventory feed (`fastfetch --format json`);
the normalizer turns them into categorized display rows and groups.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class RowCategory(Enum):
    SYSTEM = "system"
    HARDWARE = "hardware"
    SOFTWARE = "software"
    NETWORK = "network"


CATEGORY_TITLES = {
    RowCategory.SYSTEM: ("System", "computer-symbolic"),
    RowCategory.HARDWARE: ("Hardware", "drive-harddisk-solidstate-symbolic"),
    RowCategory.SOFTWARE: ("Software", "application-x-executable-symbolic"),
    RowCategory.NETWORK: ("Network", "network-wired-symbolic"),
}


class SnapshotKind(Enum):
    """
    Closed set of inventory entry kinds.

    UNKNOWN absorbs every type string the feed may add in the future.
    """

    OS = "OS"
    HOST = "Host"
    KERNEL = "Kernel"
    UPTIME = "Uptime"
    PACKAGES = "Packages"
    SHELL = "Shell"
    DISPLAY = "Display"
    DE = "DE"
    WM = "WM"
    THEME = "Theme"
    ICONS = "Icons"
    FONT = "Font"
    CURSOR = "Cursor"
    CPU = "CPU"
    GPU = "GPU"
    MEMORY = "Memory"
    SWAP = "Swap"
    DISK = "Disk"
    BATTERY = "Battery"
    LOCALE = "Locale"
    LOCAL_IP = "LocalIp"
    PUBLIC_IP = "PublicIp"
    WIFI = "Wifi"
    SEPARATOR = "Separator"
    TITLE = "Title"
    UNKNOWN = "Unknown"

    @classmethod
    def from_type(cls, type_name: Any) -> "SnapshotKind":
        """Map a feed type string onto a kind, case-insensitively."""
        if isinstance(type_name, str):
            lowered = type_name.lower()
            for kind in cls:
                if kind.value.lower() == lowered:
                    return kind
        return cls.UNKNOWN


@dataclass(frozen=True)
class SnapshotEntry:
    """One raw inventory record, prior to normalization."""

    kind: SnapshotKind
    payload: Any = None
    error: Optional[str] = None

    @classmethod
    def from_json(cls, item: Dict[str, Any]) -> "SnapshotEntry":
        return cls(
            kind=SnapshotKind.from_type(item.get("type")),
            payload=item.get("result"),
            error=item.get("error"),
        )


@dataclass(frozen=True)
class SnapshotRow:
    title: str
    subtitle: str
    icon_hint: str
    category: RowCategory


@dataclass(frozen=True)
class SnapshotGroup:
    """A nested block of rows (mount points with swap, battery details)."""

    title: str
    subtitle: str
    icon_hint: str
    category: RowCategory
    rows: Tuple[SnapshotRow, ...] = ()


SnapshotItem = Union[SnapshotRow, SnapshotGroup]


@dataclass
class SnapshotReport:
    """Normalized rows and groups in feed order, grouped by category on demand."""

    items: List[SnapshotItem] = field(default_factory=list)

    def for_category(self, category: RowCategory) -> List[SnapshotItem]:
        return [item for item in self.items if item.category == category]

    @property
    def rows(self) -> List[SnapshotRow]:
        return [item for item in self.items if isinstance(item, SnapshotRow)]

    @property
    def groups(self) -> List[SnapshotGroup]:
        return [item for item in self.items if isinstance(item, SnapshotGroup)]
