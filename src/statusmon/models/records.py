"""
Telemetry record models.

This module contains the typed records produced by the resolvers. Records are
values: each poll builds a fresh set and nothing keeps a reference into a
previous poll's output.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class DeviceCategory(Enum):
    """PCI device buckets reported by the driver resolver."""
    GRAPHICS = "graphics"
    NETWORK = "network"
    STORAGE = "storage"
    AUDIO = "audio"
    USB = "usb"


@dataclass(frozen=True)
class DeviceRecord:
    """A PCI device together with the kernel driver bound to it."""

    driver_name: str
    device_description: str
    version: Optional[str]
    category: DeviceCategory


@dataclass(frozen=True)
class ModuleRecord:
    """One row of the loaded kernel module table."""

    name: str
    size_bytes: int
    use_count: int
    used_by: Tuple[str, ...] = ()
    version: Optional[str] = None


class InterfaceState(Enum):
    UP = "up"
    DOWN = "down"


@dataclass
class InterfaceRecord:
    """
    A network interface from `ip addr show`.

    Built in two phases: the enumeration pass fills the address fields, the
    counters pass fills rx_bytes/tx_bytes (formatted sizes) when /proc/net/dev
    has a row for the interface.
    """

    name: str
    state: Optional[InterfaceState] = None
    ipv4: Optional[str] = None
    ipv6: Optional[str] = None
    netmask_bits: Optional[int] = None
    mac: Optional[str] = None
    mtu: Optional[int] = None
    rx_bytes: Optional[str] = None
    tx_bytes: Optional[str] = None
    icon_hint: str = "network-wired-symbolic"


@dataclass(frozen=True)
class KeyValue:
    key: str
    value: str


@dataclass(frozen=True)
class ConnectivitySummary:
    """
    Result of one connectivity probe (firewall, wifi, ethernet, dns, vpn).

    When needs_elevation is set the details are always empty: nothing is shown
    until the caller has authenticated.
    """

    domain: str
    status: str
    details: Tuple[KeyValue, ...] = ()
    needs_elevation: bool = False

    def __post_init__(self):
        if self.needs_elevation and self.details:
            raise ValueError("A summary that needs elevation cannot carry details")


@dataclass(frozen=True)
class DnsConfig:
    """Parsed /etc/resolv.conf directives."""

    ipv4: Tuple[str, ...] = ()
    ipv6: Tuple[str, ...] = ()
    search_domains: Tuple[str, ...] = ()
    options: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when there is neither a nameserver nor a search domain."""
        return not (self.ipv4 or self.ipv6 or self.search_domains)


@dataclass(frozen=True)
class GpuInfo:
    """Static GPU identity, queried once per poll of the GPU resolver."""

    name: str
    driver: str
    memory: str
    nvidia_available: bool = False


@dataclass(frozen=True)
class GpuStatus:
    """Live GPU readings already formatted for display ("N/A" when unknown)."""

    utilization: str = "N/A"
    memory_used: str = "N/A"
    temperature: str = "N/A"
    power: str = "N/A"
    utilization_value: Optional[float] = None


@dataclass(frozen=True)
class GpuReport:
    info: GpuInfo
    status: GpuStatus
    history: Tuple[float, ...] = ()


@dataclass(frozen=True)
class ProcessInfo:
    """A running process with its CPU percentage and resident memory in KB."""

    name: str
    cpu: float
    memory_kb: int
    pid: Optional[int] = None


@dataclass(frozen=True)
class ProcessRanking:
    """Top processes for one sort key, with the display value per process."""

    sort_by: str
    processes: Tuple[ProcessInfo, ...] = ()
    values: Tuple[str, ...] = ()

    @property
    def title(self) -> str:
        if self.sort_by == "cpu":
            return "Top CPU Processes"
        if self.sort_by == "memory":
            return "Top Memory Processes"
        return "Top Processes"


@dataclass(frozen=True)
class DriverReport:
    """All device categories plus the ranked kernel modules of one poll."""

    devices: Tuple[DeviceRecord, ...] = ()
    modules: Tuple[ModuleRecord, ...] = ()

    def by_category(self, category: DeviceCategory) -> List[DeviceRecord]:
        return [device for device in self.devices if device.category == category]


NO_INTERFACES = "No interfaces found"
INTERFACES_UNAVAILABLE = "Information not available"


@dataclass(frozen=True)
class NetworkReport:
    """
    Interfaces of one poll.

    An empty tuple with no error means the host has no interfaces; `error`
    is set when `ip` could not be run or its output could not be read.
    """

    interfaces: Tuple[InterfaceRecord, ...] = ()
    error: Optional[str] = None

    @property
    def status(self) -> Optional[str]:
        """Placeholder text for the panel, None when there are interfaces to show."""
        if self.error is not None:
            return INTERFACES_UNAVAILABLE
        if not self.interfaces:
            return NO_INTERFACES
        return None


@dataclass(frozen=True)
class ConnectivityReport:
    summaries: Tuple[ConnectivitySummary, ...] = field(default_factory=tuple)

    def get(self, domain: str) -> Optional[ConnectivitySummary]:
        for summary in self.summaries:
            if summary.domain == domain:
                return summary
        return None
