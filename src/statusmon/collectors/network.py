"""
Network interface resolver.
"""

import logging

from ..models.records import INTERFACES_UNAVAILABLE, NetworkReport
from ..parsers.ip_addr import apply_counters, parse_ip_addr
from ..validation import ExecutionError
from .base import AbstractResolver

logger = logging.getLogger(__name__)

NET_DEV_PATH = "/proc/net/dev"


class NetworkResolver(AbstractResolver):
    """
    Interfaces from `ip addr show`, with rx/tx counters from /proc/net/dev.

    A report without interfaces and without error means "no interfaces
    found"; a failure to launch `ip` is reported through the error field.
    """

    name = "network"

    def __init__(self, runner, net_dev_path: str = NET_DEV_PATH, **kwargs):
        super().__init__(runner, **kwargs)
        self.net_dev_path = net_dev_path

    def resolve(self) -> NetworkReport:
        try:
            stdout, stderr = self.runner.run("ip", ["addr", "show"])
        except ExecutionError as e:
            logger.warning(f"Cannot enumerate interfaces: {e}")
            return NetworkReport(error=str(e))
        if stderr.strip():
            logger.warning(f"ip addr show reported: {stderr.strip()}")

        interfaces = parse_ip_addr(stdout)
        if not interfaces:
            logger.info("No network interfaces found")
            return NetworkReport()

        try:
            counters_text = self.runner.read_file(self.net_dev_path)
        except ExecutionError as e:
            logger.warning(f"Interface counters unavailable: {e}")
            return NetworkReport(interfaces=tuple(interfaces))
        return NetworkReport(interfaces=tuple(apply_counters(interfaces, counters_text)))

    def empty_result(self) -> NetworkReport:
        return NetworkReport(error=INTERFACES_UNAVAILABLE)
