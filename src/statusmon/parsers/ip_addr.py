"""
Network interface parsers for `ip addr show` and `/proc/net/dev`.

Interfaces are built in two phases. parse_ip_addr() walks the enumeration
text once, flushing the current interface every time a new header line
starts; apply_counters() then fills the rx/tx sizes from the counters table.
"""

import logging
import re
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from ..models.records import InterfaceRecord, InterfaceState
from ..system.formatting import format_bytes

logger = logging.getLogger(__name__)

_HEADER_RE = re.compile(r"^\d+:\s+([^:@\s]+)(@\S+)?:")
_FLAGS_RE = re.compile(r"<([^>]*)>")
_MTU_RE = re.compile(r"\bmtu\s+(\d+)")

# Prefix to icon hint, first match wins.
_INTERFACE_ICONS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("wl", "wifi"), "network-wireless-symbolic"),
    (("en", "eth"), "network-wired-symbolic"),
    (("lo",), "network-server-symbolic"),
    (("docker", "br"), "network-workgroup-symbolic"),
)
_DEFAULT_INTERFACE_ICON = "network-wired-symbolic"


def interface_icon(name: str) -> str:
    for prefixes, icon in _INTERFACE_ICONS:
        if name.startswith(prefixes):
            return icon
    return _DEFAULT_INTERFACE_ICON


def _start_interface(line: str, match: "re.Match[str]") -> InterfaceRecord:
    name = match.group(1)
    interface = InterfaceRecord(name=name, icon_hint=interface_icon(name))

    flags = _FLAGS_RE.search(line)
    if flags:
        tokens = [token.strip() for token in flags.group(1).split(",")]
        interface.state = InterfaceState.UP if "UP" in tokens else InterfaceState.DOWN

    mtu = _MTU_RE.search(line)
    if mtu:
        interface.mtu = int(mtu.group(1))
    return interface


def _apply_detail(interface: InterfaceRecord, line: str) -> None:
    fields = line.split()
    if len(fields) < 2:
        return
    keyword, value = fields[0], fields[1]

    if keyword == "link/ether" and interface.mac is None:
        interface.mac = value
    elif keyword == "inet":
        address, _, bits = value.partition("/")
        interface.ipv4 = address
        if bits.isdigit():
            interface.netmask_bits = int(bits)
    elif keyword == "inet6" and interface.ipv6 is None:
        interface.ipv6 = value.partition("/")[0]


def parse_ip_addr(text: str) -> List[InterfaceRecord]:
    """
    Parse `ip addr show` output into interface records.

    Args:
        text: Raw command output

    Returns:
        Interfaces in enumeration order; an empty list for empty or
        unrecognized input
    """
    interfaces: List[InterfaceRecord] = []
    current: Optional[InterfaceRecord] = None

    for line in text.splitlines():
        match = _HEADER_RE.match(line)
        if match:
            if current is not None:
                interfaces.append(current)
            current = _start_interface(line, match)
        elif current is not None:
            _apply_detail(current, line.strip())

    if current is not None:
        interfaces.append(current)
    return interfaces


def parse_net_dev(text: str) -> Dict[str, Tuple[int, int]]:
    """
    Parse the /proc/net/dev counters table.

    Returns:
        Mapping of exact interface name to (rx_bytes, tx_bytes). Rows with
        fewer than ten fields or non-numeric counters are left out.
    """
    counters: Dict[str, Tuple[int, int]] = {}
    for line in text.splitlines():
        name, sep, rest = line.partition(":")
        if not sep:
            continue
        fields = rest.split()
        # Name plus at least nine counters: rx bytes first, tx bytes ninth.
        if len(fields) < 9:
            continue
        try:
            counters[name.strip()] = (int(fields[0]), int(fields[8]))
        except ValueError:
            logger.debug(f"Skipping malformed counters row: {line!r}")
    return counters


def apply_counters(interfaces: List[InterfaceRecord], net_dev_text: str) -> List[InterfaceRecord]:
    """
    Second phase: attach formatted rx/tx sizes by exact interface name.

    Interfaces without a counters row are returned unchanged.
    """
    counters = parse_net_dev(net_dev_text)
    augmented = []
    for interface in interfaces:
        row = counters.get(interface.name)
        if row is None:
            augmented.append(interface)
            continue
        rx, tx = row
        augmented.append(replace(interface, rx_bytes=format_bytes(rx), tx_bytes=format_bytes(tx)))
    return augmented


def interface_details(interface: InterfaceRecord) -> List[Tuple[str, str]]:
    """Display rows for one interface, in panel order, present fields only."""
    rows = []
    if interface.state is not None:
        rows.append(("State", interface.state.name))
    if interface.ipv4:
        rows.append(("IPv4 Address", interface.ipv4))
    if interface.ipv6:
        rows.append(("IPv6 Address", interface.ipv6))
    if interface.netmask_bits is not None:
        rows.append(("Netmask", f"/{interface.netmask_bits}"))
    if interface.mac:
        rows.append(("MAC Address", interface.mac))
    if interface.mtu is not None:
        rows.append(("MTU", str(interface.mtu)))
    if interface.rx_bytes:
        rows.append(("RX bytes", interface.rx_bytes))
    if interface.tx_bytes:
        rows.append(("TX bytes", interface.tx_bytes))
    return rows
