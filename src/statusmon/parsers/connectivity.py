"""
Parsers for the connectivity probes.

Each function turns one tool's text into a ConnectivitySummary. The three
kinds of outcome are kept apart: an informational absence ("Not connected")
is a normal summary, a missing tool is handled by the resolver, and a
permission failure yields needs_elevation with no details.
"""

import logging
from typing import List, Tuple

from ..models.records import ConnectivitySummary, DnsConfig, KeyValue

logger = logging.getLogger(__name__)

FIREWALL = "firewall"
WIFI = "wifi"
ETHERNET = "ethernet"
DNS = "dns"
VPN = "vpn"

NOT_AVAILABLE = "Information not available"
AUTH_REQUIRED = "Authentication required"
MAX_LISTED_RULES = 5

_VPN_TYPE_MARKERS = ("vpn", "tun", "wireguard")


def split_terse_line(line: str) -> List[str]:
    r"""
    Split an `nmcli -t` line on unescaped colons.

    nmcli escapes a literal ':' inside a field as '\:' and a backslash as '\\'.
    """
    fields: List[str] = []
    current: List[str] = []
    chars = iter(line)
    for char in chars:
        if char == "\\":
            escaped = next(chars, "")
            current.append(escaped)
        elif char == ":":
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields


def _terse_rows(text: str) -> List[List[str]]:
    return [split_terse_line(line) for line in text.splitlines() if line.strip()]


def ufw_needs_elevation(stderr: str) -> bool:
    return "permission denied" in stderr.lower() or "ERROR" in stderr


def parse_ufw_status(stdout: str) -> ConnectivitySummary:
    """
    Summarize `ufw status` output that was obtained with sufficient rights.

    Rules are listed only when there are between one and five of them.
    """
    if "Status: active" in stdout:
        rules = []
        for line in stdout.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith(("Status:", "To ", "--")):
                continue
            rules.append(stripped)
        details: Tuple[KeyValue, ...] = ()
        if 0 < len(rules) <= MAX_LISTED_RULES:
            details = tuple(KeyValue("Rule", rule) for rule in rules)
        return ConnectivitySummary(FIREWALL, "Active", details)
    if "Status: inactive" in stdout:
        return ConnectivitySummary(FIREWALL, "Inactive")
    return ConnectivitySummary(FIREWALL, "Unknown")


def parse_firewalld_state(stdout: str, stderr: str) -> ConnectivitySummary:
    """Summarize `firewall-cmd --state`; status is the trimmed stdout."""
    if "authorization" in stderr:
        return elevation_required(FIREWALL)
    return ConnectivitySummary(FIREWALL, stdout.strip() or "Unknown")


def elevation_required(domain: str) -> ConnectivitySummary:
    return ConnectivitySummary(domain, AUTH_REQUIRED, needs_elevation=True)


def not_available(domain: str, status: str = NOT_AVAILABLE) -> ConnectivitySummary:
    return ConnectivitySummary(domain, status)


def parse_wifi(stdout: str) -> ConnectivitySummary:
    """Summarize `nmcli -t -f ACTIVE,SSID,SIGNAL,SECURITY dev wifi`."""
    for fields in _terse_rows(stdout):
        if len(fields) >= 4 and fields[0] == "yes":
            ssid, signal, security = fields[1], fields[2], fields[3]
            details = [KeyValue("Connected to", ssid or "Unknown")]
            if signal:
                details.append(KeyValue("Signal Strength", f"{signal}%"))
            if security:
                details.append(KeyValue("Security", security))
            return ConnectivitySummary(WIFI, "Connected", tuple(details))
    return ConnectivitySummary(WIFI, "Not connected")


def parse_ethernet(stdout: str) -> ConnectivitySummary:
    """Summarize `nmcli -t -f DEVICE,TYPE,STATE,CONNECTION dev`."""
    details: List[KeyValue] = []
    for fields in _terse_rows(stdout):
        if len(fields) >= 4 and fields[1] == "ethernet":
            details.append(KeyValue("Device", fields[0]))
            details.append(KeyValue("State", fields[2]))
            if fields[3]:
                details.append(KeyValue("Connection", fields[3]))
    if not details:
        return ConnectivitySummary(ETHERNET, "No ethernet devices found")
    return ConnectivitySummary(ETHERNET, "Available", tuple(details))


def parse_vpn(stdout: str) -> ConnectivitySummary:
    """Summarize `nmcli -t -f NAME,TYPE,STATE con show --active`."""
    details: List[KeyValue] = []
    for fields in _terse_rows(stdout):
        if len(fields) < 3:
            continue
        name, conn_type, state = fields[0], fields[1], fields[2]
        if any(marker in conn_type for marker in _VPN_TYPE_MARKERS):
            details.extend((
                KeyValue("Connection", name),
                KeyValue("Type", conn_type),
                KeyValue("State", state),
            ))
    if not details:
        return ConnectivitySummary(VPN, "No active VPN connections")
    return ConnectivitySummary(VPN, "Active", tuple(details))


def parse_resolv_conf(text: str) -> DnsConfig:
    """
    Parse resolv.conf directives.

    Nameservers are split into IPv4 and IPv6 by the presence of ':'.
    Comment lines starting with '#' or ';' are ignored.
    """
    ipv4: List[str] = []
    ipv6: List[str] = []
    search: List[str] = []
    options: List[str] = []

    for line in text.splitlines():
        fields = line.split()
        if not fields or fields[0].startswith(("#", ";")):
            continue
        directive, values = fields[0], fields[1:]
        if directive == "nameserver" and values:
            (ipv6 if ":" in values[0] else ipv4).append(values[0])
        elif directive == "search":
            search.extend(values)
        elif directive == "options":
            options.extend(values)

    return DnsConfig(ipv4=tuple(ipv4), ipv6=tuple(ipv6), search_domains=tuple(search), options=tuple(options))


def dns_summary(config: DnsConfig) -> ConnectivitySummary:
    """
    Build the DNS summary.

    Both nameserver rows are always present so the layout does not shift.
    """
    if config.is_empty:
        return ConnectivitySummary(DNS, "No DNS configuration found")

    details = [
        KeyValue("Nameserver IPv6", ", ".join(config.ipv6) or "Not configured"),
        KeyValue("Nameserver IPv4", ", ".join(config.ipv4) or "Not configured"),
    ]
    if config.search_domains:
        details.append(KeyValue("Search Domains", ", ".join(config.search_domains)))
    if config.options:
        details.append(KeyValue("Options", ", ".join(config.options)))
    return ConnectivitySummary(DNS, "Configured", tuple(details))


def summary_rows(summary: ConnectivitySummary) -> List[Tuple[str, str]]:
    """Status row followed by the detail rows."""
    if summary.needs_elevation:
        return [("Authentication Required", "Authenticate to view this information")]
    return [("Status", summary.status)] + [(kv.key, kv.value) for kv in summary.details]
