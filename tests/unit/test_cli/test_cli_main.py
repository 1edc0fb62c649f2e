"""
Unit tests for the statusmon command line.

TelemetryCoordinator is patched to receive a FakeRunner, so no command
runs for real.
"""

import json
from unittest.mock import patch

import pytest

from statusmon.cli.main import build_parser, main_cli
from statusmon.monitoring.coordinator import TelemetryCoordinator


def run_cli(argv, runner):
    def make_coordinator(config):
        return TelemetryCoordinator(config, runner=runner)

    with patch("statusmon.cli.main.TelemetryCoordinator", side_effect=make_coordinator):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(argv)
    return exc_info.value.code


@pytest.mark.unit
class TestParser:
    """Test cases for argument parsing."""

    def test_snapshot_sections(self):
        args = build_parser().parse_args(["snapshot", "--section", "gpu", "--section", "software"])

        assert args.command == "snapshot"
        assert args.sections == ["gpu", "software"]
        assert args.format == "table"

    def test_logs_defaults(self):
        args = build_parser().parse_args(["logs"])

        assert args.scope == "system"
        assert args.filter_id == 0
        assert args.priority_id == 0
        assert args.lines is None
        assert args.elevate is False

    def test_unknown_section_is_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["snapshot", "--section", "bluetooth"])

    def test_logs_is_a_watch_source_only(self):
        assert build_parser().parse_args(["watch", "--section", "logs"]).sections == ["logs"]
        with pytest.raises(SystemExit):
            build_parser().parse_args(["snapshot", "--section", "logs"])


@pytest.mark.unit
class TestMainCli:
    """Test cases for main_cli."""

    def test_snapshot_json(self, config_files, make_runner, capsys):
        runner = make_runner({("dpkg", ("-l",)): "ii  bash 5.2 amd64 shell\n"})

        code = run_cli(
            ["--config", str(config_files["config"]), "snapshot", "--section", "software", "--format", "json"],
            runner,
        )

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["software"][0]["title"] == "Packages"
        assert data["software"][0]["subtitle"] == "1 (dpkg)"

    def test_snapshot_table(self, config_files, make_runner, capsys):
        runner = make_runner({"lspci": "00:02.0 VGA compatible controller: Intel Corporation UHD Graphics 620\n"})

        code = run_cli(["--config", str(config_files["config"]), "snapshot", "--section", "gpu"], runner)

        assert code == 0
        output = capsys.readouterr().out
        assert "== GPU ==" in output
        assert "UHD Graphics 620" in output

    def test_logs(self, config_files, make_runner, capsys):
        runner = make_runner({("journalctl", ("--no-pager", "-n", "50", "-o", "short")): "Jan 01 boot ok\n"})
        runner.responses[("journalctl", ("--user", "--no-pager", "-n", "50", "-o", "short"))] = ""

        code = run_cli(["--config", str(config_files["config"]), "logs"], runner)

        assert code == 0
        assert capsys.readouterr().out.strip() == "Jan 01 boot ok"

    def test_logs_user_scope(self, config_files, make_runner, capsys):
        runner = make_runner({"journalctl": ""})

        code = run_cli(["--config", str(config_files["config"]), "logs", "--scope", "user"], runner)

        assert code == 0
        assert capsys.readouterr().out.strip() == "No user logs found"

    def test_cancelled_elevation_falls_back(self, config_files, make_runner, capsys):
        runner = make_runner({
            "journalctl": "visible line\n",
            "pkexec": ("", "Error executing command as another user: Request dismissed"),
        })

        code = run_cli(["--config", str(config_files["config"]), "logs", "--elevate"], runner)

        assert code == 0
        assert capsys.readouterr().out.strip() == "visible line"
        assert runner.commands() == ["pkexec", "journalctl", "journalctl"]

    def test_elevated_logs(self, config_files, make_runner, capsys):
        runner = make_runner({"journalctl": "user line\n", "pkexec": "root line\n"})

        code = run_cli(["--config", str(config_files["config"]), "logs", "--elevate"], runner)

        assert code == 0
        assert capsys.readouterr().out.strip() == "root line"

    @pytest.mark.parametrize("extra", [
        ["--lines", "5"],
        ["--lines", "5000"],
        ["--filter", "9"],
        ["--priority", "9"],
    ])
    def test_logs_argument_validation(self, config_files, make_runner, extra):
        runner = make_runner()

        code = run_cli(["--config", str(config_files["config"]), "logs", *extra], runner)

        assert code == 2
        assert runner.calls == []

    def test_watch_rejects_non_positive_duration(self, config_files, make_runner):
        code = run_cli(["--config", str(config_files["config"]), "watch", "--duration", "0"], make_runner())

        assert code == 2

    def test_malformed_config_file(self, temp_dir, make_runner):
        config_file = temp_dir / "config.toml"
        config_file.write_text("[logs\ndefault_lines = \n")

        code = run_cli(["--config", str(config_file), "snapshot"], make_runner())

        assert code == 1
