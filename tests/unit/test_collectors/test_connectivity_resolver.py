"""
Unit tests for the connectivity resolver and its fallback order.
"""

import pytest

from statusmon.collectors.connectivity import (
    ETHERNET_ARGS,
    RESOLV_CONF_PATH,
    VPN_ARGS,
    WIFI_ARGS,
    ConnectivityResolver,
)
from statusmon.parsers.connectivity import AUTH_REQUIRED, NOT_AVAILABLE
from statusmon.services.privilege import PrivilegeBroker


def make_resolver(runner, authenticated=False):
    broker = PrivilegeBroker(runner)
    if authenticated:
        broker.mark_authenticated()
    return ConnectivityResolver(runner, broker)


@pytest.mark.unit
class TestFirewallProbe:
    """Test cases for the ufw/firewalld fallback chain."""

    def test_ufw_readable(self, make_runner):
        runner = make_runner({("ufw", ("status",)): "Status: inactive\n"})

        summary = make_resolver(runner).probe_firewall()

        assert summary.status == "Inactive"
        assert summary.needs_elevation is False

    def test_permission_error_without_authentication(self, make_runner):
        runner = make_runner({("ufw", ("status",)): ("", "ERROR: You need to be root to run this script")})

        summary = make_resolver(runner).probe_firewall()

        assert summary.needs_elevation is True
        assert summary.status == AUTH_REQUIRED
        assert summary.details == ()
        assert "pkexec" not in runner.commands()

    def test_permission_error_after_authentication_reruns_elevated(self, make_runner):
        runner = make_runner({
            ("ufw", ("status",)): ("", "ERROR: You need to be root to run this script"),
            ("pkexec", ("ufw", "status")): "Status: active\n\n22/tcp ALLOW Anywhere\n",
        })

        summary = make_resolver(runner, authenticated=True).probe_firewall()

        assert summary.status == "Active"
        assert [kv.value for kv in summary.details] == ["22/tcp ALLOW Anywhere"]

    def test_elevated_rerun_dismissed(self, make_runner):
        runner = make_runner({
            ("ufw", ("status",)): ("", "ERROR: You need to be root to run this script"),
            ("pkexec", ("ufw", "status")): ("", "Error executing command as another user: Request dismissed"),
        })

        summary = make_resolver(runner, authenticated=True).probe_firewall()

        assert summary.needs_elevation is True

    def test_firewalld_fallback(self, make_runner):
        runner = make_runner({("firewall-cmd", ("--state",)): "running\n"})

        summary = make_resolver(runner).probe_firewall()

        assert summary.status == "running"
        assert runner.commands() == ["ufw", "firewall-cmd"]

    def test_firewalld_authorization(self, make_runner):
        runner = make_runner({("firewall-cmd", ("--state",)): ("", "Error: authorization failed")})

        assert make_resolver(runner).probe_firewall().needs_elevation is True

    def test_firewalld_authorization_after_authentication(self, make_runner):
        runner = make_runner({
            ("firewall-cmd", ("--state",)): ("", "Error: authorization failed"),
            ("pkexec", ("firewall-cmd", "--state")): "running\n",
        })

        assert make_resolver(runner, authenticated=True).probe_firewall().status == "running"

    def test_no_firewall_tool(self, make_runner):
        summary = make_resolver(make_runner()).probe_firewall()

        assert summary.status == "Not available"
        assert summary.needs_elevation is False


@pytest.mark.unit
class TestConnectivityResolver:
    """Test cases for the full resolve() pass."""

    def test_resolve_all_domains(self, make_runner):
        runner = make_runner(
            {
                ("ufw", ("status",)): "Status: inactive\n",
                ("nmcli", tuple(WIFI_ARGS)): "yes:HomeNet:72:WPA2\n",
                ("nmcli", tuple(ETHERNET_ARGS)): "enp3s0:ethernet:connected:Wired\n",
                ("nmcli", tuple(VPN_ARGS)): "HomeNet:802-11-wireless:activated\n",
            },
            files={RESOLV_CONF_PATH: "nameserver 9.9.9.9\n"},
        )

        report = make_resolver(runner).resolve()

        assert [s.domain for s in report.summaries] == ["firewall", "wifi", "ethernet", "dns", "vpn"]
        assert report.get("firewall").status == "Inactive"
        assert report.get("wifi").status == "Connected"
        assert report.get("ethernet").status == "Available"
        assert report.get("dns").status == "Configured"
        assert report.get("vpn").status == "No active VPN connections"

    def test_missing_tools_are_not_available(self, make_runner):
        report = make_resolver(make_runner()).resolve()

        assert report.get("firewall").status == "Not available"
        for domain in ("wifi", "ethernet", "dns", "vpn"):
            assert report.get(domain).status == NOT_AVAILABLE

    def test_a_crashing_probe_does_not_affect_others(self, make_runner, monkeypatch):
        runner = make_runner({"nmcli": "yes:HomeNet:72:WPA2\n"})
        resolver = make_resolver(runner)

        def explode():
            raise RuntimeError("parser bug")

        monkeypatch.setattr(resolver, "probe_wifi", explode)

        report = resolver.resolve()

        assert report.get("wifi").status == NOT_AVAILABLE
        assert report.get("ethernet").status == "No ethernet devices found"

    def test_empty_result(self, make_runner):
        report = make_resolver(make_runner()).empty_result()

        assert len(report.summaries) == 5
        assert all(s.status == NOT_AVAILABLE for s in report.summaries)

    def test_get_unknown_domain(self, make_runner):
        assert make_resolver(make_runner()).empty_result().get("bluetooth") is None
