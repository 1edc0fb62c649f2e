"""
Connectivity sub-resolvers: firewall, WiFi, Ethernet, DNS and VPN.
"""

import logging
from typing import Callable, List

from ..models.records import ConnectivityReport, ConnectivitySummary
from ..parsers import connectivity as parsing
from ..services.privilege import PrivilegeBroker, is_cancellation
from ..validation import ErrorSeverity, ExecutionError, handle_error
from .base import AbstractResolver

logger = logging.getLogger(__name__)

RESOLV_CONF_PATH = "/etc/resolv.conf"

WIFI_ARGS = ["-t", "-f", "ACTIVE,SSID,SIGNAL,SECURITY", "dev", "wifi"]
ETHERNET_ARGS = ["-t", "-f", "DEVICE,TYPE,STATE,CONNECTION", "dev"]
VPN_ARGS = ["-t", "-f", "NAME,TYPE,STATE", "con", "show", "--active"]


class ConnectivityResolver(AbstractResolver):
    """
    Runs the five connectivity probes and collects their summaries.

    Each probe is isolated: a probe that raises is reported as
    "Information not available" without touching the other four.
    Permission failures never produce details until the broker is
    authenticated.
    """

    name = "connectivity"

    def __init__(self, runner, broker: PrivilegeBroker,
                 resolv_conf_path: str = RESOLV_CONF_PATH, **kwargs):
        super().__init__(runner, **kwargs)
        self.broker = broker
        self.resolv_conf_path = resolv_conf_path

    def probe_firewall(self) -> ConnectivitySummary:
        """ufw first, firewalld when ufw is not installed."""
        try:
            stdout, stderr = self.runner.run("ufw", ["status"])
        except ExecutionError as e:
            logger.debug(f"ufw unavailable ({e}), trying firewalld")
            return self._probe_firewalld()

        if not parsing.ufw_needs_elevation(stderr):
            return parsing.parse_ufw_status(stdout)
        if not self.broker.authenticated:
            return parsing.elevation_required(parsing.FIREWALL)

        try:
            stdout, stderr = self.broker.run_elevated("ufw", ["status"])
        except ExecutionError as e:
            logger.warning(f"Elevated ufw status failed: {e}")
            return parsing.not_available(parsing.FIREWALL)
        if is_cancellation(stderr) or parsing.ufw_needs_elevation(stderr):
            return parsing.elevation_required(parsing.FIREWALL)
        return parsing.parse_ufw_status(stdout)

    def _probe_firewalld(self) -> ConnectivitySummary:
        try:
            stdout, stderr = self.runner.run("firewall-cmd", ["--state"])
        except ExecutionError:
            return parsing.not_available(parsing.FIREWALL, "Not available")
        summary = parsing.parse_firewalld_state(stdout, stderr)
        if summary.needs_elevation and self.broker.authenticated:
            try:
                stdout, stderr = self.broker.run_elevated("firewall-cmd", ["--state"])
            except ExecutionError as e:
                logger.warning(f"Elevated firewall-cmd failed: {e}")
                return parsing.not_available(parsing.FIREWALL)
            if not is_cancellation(stderr):
                summary = parsing.parse_firewalld_state(stdout, stderr)
        return summary

    def probe_wifi(self) -> ConnectivitySummary:
        stdout, _ = self.runner.run("nmcli", WIFI_ARGS)
        return parsing.parse_wifi(stdout)

    def probe_ethernet(self) -> ConnectivitySummary:
        stdout, _ = self.runner.run("nmcli", ETHERNET_ARGS)
        return parsing.parse_ethernet(stdout)

    def probe_dns(self) -> ConnectivitySummary:
        text = self.runner.read_file(self.resolv_conf_path)
        return parsing.dns_summary(parsing.parse_resolv_conf(text))

    def probe_vpn(self) -> ConnectivitySummary:
        stdout, _ = self.runner.run("nmcli", VPN_ARGS)
        return parsing.parse_vpn(stdout)

    def _probes(self) -> List[tuple]:
        return [
            (parsing.FIREWALL, self.probe_firewall),
            (parsing.WIFI, self.probe_wifi),
            (parsing.ETHERNET, self.probe_ethernet),
            (parsing.DNS, self.probe_dns),
            (parsing.VPN, self.probe_vpn),
        ]

    def _run_probe(self, domain: str, probe: Callable[[], ConnectivitySummary]) -> ConnectivitySummary:
        try:
            return probe()
        except ExecutionError as e:
            logger.debug(f"{domain} probe unavailable: {e}")
        except Exception as e:
            handle_error(e, f"{domain} probe", severity=ErrorSeverity.ERROR, reraise=False, logger=logger)
        return parsing.not_available(domain)

    def resolve(self) -> ConnectivityReport:
        summaries = tuple(self._run_probe(domain, probe) for domain, probe in self._probes())
        return ConnectivityReport(summaries=summaries)

    def empty_result(self) -> ConnectivityReport:
        return ConnectivityReport(
            summaries=tuple(parsing.not_available(domain) for domain, _ in self._probes())
        )
