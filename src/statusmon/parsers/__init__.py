"""
Text parsers for the command-line tools polled by the resolvers.

All parsers are pure functions of their text input: the same text always
yields equal records.
"""

from .connectivity import (
    dns_summary,
    parse_ethernet,
    parse_firewalld_state,
    parse_resolv_conf,
    parse_ufw_status,
    parse_vpn,
    parse_wifi,
    split_terse_line,
)
from .ip_addr import apply_counters, interface_icon, parse_ip_addr, parse_net_dev
from .lsmod import parse_lsmod, rank_modules
from .nvidia import parse_utilization, query_args
from .pci import CATEGORY_KEYWORDS, parse_modinfo_version, parse_pci_devices
from .software import count_packages, parse_tool_version, shell_name

__all__ = [
    # Connectivity
    "dns_summary",
    "parse_ethernet",
    "parse_firewalld_state",
    "parse_resolv_conf",
    "parse_ufw_status",
    "parse_vpn",
    "parse_wifi",
    "split_terse_line",
    # Interfaces
    "apply_counters",
    "interface_icon",
    "parse_ip_addr",
    "parse_net_dev",
    # Kernel modules
    "parse_lsmod",
    "rank_modules",
    # GPU
    "parse_utilization",
    "query_args",
    # PCI
    "CATEGORY_KEYWORDS",
    "parse_modinfo_version",
    "parse_pci_devices",
    # Software
    "count_packages",
    "parse_tool_version",
    "shell_name",
]
