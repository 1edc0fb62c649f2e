"""
Unit tests for journal retrieval: argument building, output classification
and the LogService state machine.
"""

import pytest

from statusmon.models.logs import LogOutcome, LogQuery, LogScope, RetrievalState
from statusmon.services.logs import (
    NO_SYSTEM_LOGS,
    NO_USER_LOGS,
    LogService,
    build_journal_args,
    classify_journal_output,
)
from statusmon.services.privilege import PrivilegeBroker

BASE_ARGS = ("--no-pager", "-n", "50", "-o", "short")
SYSTEM_KEY = ("journalctl", BASE_ARGS)
USER_KEY = ("journalctl", ("--user",) + BASE_ARGS)
ELEVATED_KEY = ("pkexec", ("journalctl",) + BASE_ARGS)


def make_service(runner, **kwargs):
    return LogService(runner, PrivilegeBroker(runner), default_lines=50, **kwargs)


@pytest.mark.unit
class TestBuildJournalArgs:
    """Test cases for build_journal_args."""

    def test_defaults(self):
        assert build_journal_args(LogScope.SYSTEM, LogQuery(max_lines=50)) == list(BASE_ARGS)

    def test_system_priority_and_filter(self):
        args = build_journal_args(LogScope.SYSTEM, LogQuery(filter_id=1, priority_id=4, max_lines=100))

        assert args == ["--no-pager", "-n", "100", "-o", "short", "-p", "err", "-k"]

    def test_system_unit_filter(self):
        args = build_journal_args(LogScope.SYSTEM, LogQuery(filter_id=6, max_lines=50))

        assert args[-2:] == ["-u", "NetworkManager"]

    def test_user_scope(self):
        args = build_journal_args(LogScope.USER, LogQuery(filter_id=2, priority_id=8, max_lines=50))

        assert args[0] == "--user"
        assert args[-3:] == ["-p", "debug", "_SYSTEMD_USER_UNIT=gnome-session.target"]

    def test_out_of_range_ids_add_nothing(self):
        args = build_journal_args(LogScope.SYSTEM, LogQuery(filter_id=99, priority_id=9, max_lines=50))

        assert args == list(BASE_ARGS)


@pytest.mark.unit
class TestClassifyJournalOutput:
    """Test cases for classify_journal_output."""

    def test_cancellation_wins(self):
        result = classify_journal_output("some lines", "Request dismissed; insufficient permissions")

        assert result.outcome is LogOutcome.CANCELLED
        assert result.text == ""

    def test_permission_denied_on_system_scope(self):
        result = classify_journal_output("Jan 01 visible line", "journalctl: insufficient permissions", max_lines=50)

        assert result.outcome is LogOutcome.PERMISSION_DENIED
        assert "systemd-journal" in result.text
        assert "journalctl -n 50 --no-pager" in result.text
        assert result.text.endswith("Jan 01 visible line")

    def test_permission_denied_without_output(self):
        result = classify_journal_output("", "insufficient permissions")

        assert result.text.endswith("No accessible logs found")

    def test_permission_phrase_ignored_on_user_scope(self):
        result = classify_journal_output("user line\n", "insufficient permissions", scope=LogScope.USER)

        assert result.outcome is LogOutcome.OK
        assert result.text == "user line"

    def test_empty_output(self):
        assert classify_journal_output("  \n", "").text == NO_SYSTEM_LOGS
        assert classify_journal_output("", "", scope=LogScope.USER).text == NO_USER_LOGS


@pytest.mark.unit
class TestLogServiceRefresh:
    """Test cases for unprivileged and elevated retrieval."""

    def test_refresh_publishes_both_scopes(self, make_runner):
        runner = make_runner({SYSTEM_KEY: "system line\n", USER_KEY: "user line\n"})
        service = make_service(runner)

        data = service.refresh()

        assert data.system_logs == "system line"
        assert data.user_logs == "user line"
        assert service.published == data
        assert service.state is RetrievalState.IDLE
        assert service.last_outcome_state is RetrievalState.SUCCEEDED
        assert "pkexec" not in runner.commands()

    def test_initial_state(self, make_runner):
        service = make_service(make_runner())

        assert service.published is None
        assert service.last_system_result.outcome is LogOutcome.EMPTY
        assert service.last_outcome_state is RetrievalState.IDLE

    def test_permission_denied_state(self, make_runner):
        runner = make_runner({SYSTEM_KEY: ("", "insufficient permissions"), USER_KEY: "u\n"})
        service = make_service(runner)

        data = service.refresh()

        assert "elevated permissions" in data.system_logs
        assert service.last_outcome_state is RetrievalState.PERMISSION_DENIED

    def test_missing_journalctl_fails(self, make_runner):
        service = make_service(make_runner())

        data = service.refresh()

        assert data.system_logs.startswith("Error loading logs:")
        assert data.user_logs.startswith("Error loading user logs:")
        assert service.last_outcome_state is RetrievalState.FAILED
        assert service.state is RetrievalState.IDLE

    def test_elevation_success_is_sticky(self, make_runner):
        runner = make_runner({
            ELEVATED_KEY: "root line\n",
            SYSTEM_KEY: ("", "insufficient permissions"),
            USER_KEY: "user line\n",
        })
        service = make_service(runner)

        result = service.request_elevation()

        assert result.outcome is LogOutcome.OK
        assert service.system_logs_authenticated is True
        assert service.published.system_logs == "root line"

        runner.calls.clear()
        service.refresh()

        assert ("pkexec", ["journalctl", *BASE_ARGS]) in runner.calls
        assert ("journalctl", list(BASE_ARGS)) not in runner.calls

    def test_cancelled_elevation_keeps_published_text(self, make_runner):
        runner = make_runner({
            SYSTEM_KEY: "visible line\n",
            USER_KEY: "user line\n",
            ELEVATED_KEY: ("", "Error executing command as another user: Request dismissed"),
        })
        service = make_service(runner)
        received = []
        service.subscribe(received.append)
        received.clear()
        before = service.last_system_result

        result = service.request_elevation()

        assert result.outcome is LogOutcome.CANCELLED
        assert service.last_system_result == before
        assert service.last_system_result.text == "visible line"
        assert service.last_system_result.outcome is LogOutcome.OK
        assert service.published.system_logs == "visible line"
        assert service.system_logs_authenticated is False
        assert service.last_outcome_state is RetrievalState.CANCELLED
        assert received == []

    def test_request_in_flight_is_skipped(self, make_runner):
        nested = []

        class ReentrantRunner(make_runner):
            def run(self, command, args=()):
                if not nested:
                    nested.append(service.refresh())
                return super().run(command, args)

        runner = ReentrantRunner({SYSTEM_KEY: "s\n", USER_KEY: "u\n"})
        service = make_service(runner)

        assert service.refresh() is not None
        assert nested == [None]
        assert service.state is RetrievalState.IDLE

    def test_set_system_log_filter(self, make_runner):
        runner = make_runner({"journalctl": "line\n"})
        service = make_service(runner)

        service.set_system_log_filter(filter_id=1, priority_id=3, lines=20)

        assert runner.calls[0] == ("journalctl", ["--no-pager", "-n", "20", "-o", "short", "-p", "crit", "-k"])


@pytest.mark.unit
class TestLogServiceSubscribers:
    """Test cases for subscription and auto-refresh."""

    def test_subscribe_delivers_immediately(self, make_runner):
        service = make_service(make_runner({"journalctl": "line\n"}))
        received = []

        service.subscribe(received.append)

        assert len(received) == 1
        assert received[0].system_logs == "line"

    def test_failing_subscriber_is_isolated(self, make_runner):
        service = make_service(make_runner({"journalctl": "line\n"}))
        received = []

        def broken(data):
            raise RuntimeError("widget gone")

        service.subscribe(broken)
        service.subscribe(received.append)

        assert len(received) == 1

    def test_last_unsubscribe_stops_auto_refresh(self, make_runner):
        service = make_service(make_runner({"journalctl": "line\n"}), auto_refresh=True)
        callback = lambda data: None
        service.subscribe(callback)

        service.unsubscribe(callback)

        assert service.auto_refresh_enabled is False

    def test_periodic_refresh_respects_toggle(self, make_runner):
        runner = make_runner({"journalctl": "line\n"})
        service = make_service(runner)

        assert service.periodic_refresh() is None
        assert runner.calls == []

        assert service.toggle_auto_refresh() is True
        assert len(runner.calls) == 2
        assert service.periodic_refresh() is not None

        assert service.toggle_auto_refresh() is False
        assert service.periodic_refresh() is None
