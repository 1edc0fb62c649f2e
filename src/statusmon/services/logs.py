"""
Privileged journal retrieval.

LogService builds journalctl arguments from the system and user queries,
runs them with or without elevation, classifies the outcome and publishes
the resulting texts to its subscribers. A cancelled elevation prompt never
replaces the text that is currently published.
"""

import logging
import threading
from typing import Callable, List, Optional, Tuple

from ..models.logs import LogOutcome, LogQuery, LogResult, LogScope, LogsData, RetrievalState
from ..system.commands import ProcessRunner
from ..validation import ErrorSeverity, ExecutionError, handle_error
from .privilege import PrivilegeBroker, is_cancellation

logger = logging.getLogger(__name__)

JOURNALCTL = "journalctl"
DEFAULT_LINES = 200

PRIORITIES = ("emerg", "alert", "crit", "err", "warning", "notice", "info", "debug")

# filter id -> query refinement appended after the base arguments
SYSTEM_FILTERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("All Logs", ()),
    ("Kernel Logs", ("-k",)),
    ("Boot Logs", ("-b",)),
    ("System Services", ("-u", "systemd")),
    ("Authentication", ("-u", "systemd-logind")),
    ("Cron Jobs", ("-u", "cron")),
    ("Network Manager", ("-u", "NetworkManager")),
    ("Bluetooth", ("-u", "bluetooth")),
    ("USB Events", ("-k",)),
)

USER_FILTERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("All User Logs", ()),
    ("User Services", ()),
    ("Desktop Session", ("_SYSTEMD_USER_UNIT=gnome-session.target",)),
    ("Applications", ("_COMM=gjs",)),
    ("Shell", ("_COMM=gnome-shell",)),
)

PERMISSION_PHRASE = "insufficient permissions"

NO_SYSTEM_LOGS = "No logs found"
NO_USER_LOGS = "No user logs found"

PERMISSION_MESSAGE = (
    "System logs require elevated permissions.\n\n"
    "To view system logs, you can:\n"
    "1. Add your user to the 'systemd-journal' group:\n"
    "   sudo usermod -a -G systemd-journal $USER\n"
    "   (requires logout/login to take effect)\n\n"
    "2. Or run journalctl manually in terminal:\n"
    "   journalctl -n {lines} --no-pager\n\n"
    "Showing accessible logs instead:\n\n{body}"
)

LogsCallback = Callable[[LogsData], None]


def build_journal_args(scope: LogScope, query: LogQuery) -> List[str]:
    """
    Build journalctl arguments for a query.

    Order: [--user] --no-pager -n <N> -o short [-p <level>] [refinement].
    Ids outside the priority or filter tables add nothing.
    """
    args: List[str] = []
    if scope is LogScope.USER:
        args.append("--user")
    args.extend(["--no-pager", "-n", str(query.max_lines), "-o", "short"])

    if 0 < query.priority_id <= len(PRIORITIES):
        args.extend(["-p", PRIORITIES[query.priority_id - 1]])

    filters = USER_FILTERS if scope is LogScope.USER else SYSTEM_FILTERS
    if 0 <= query.filter_id < len(filters):
        args.extend(filters[query.filter_id][1])
    return args


def classify_journal_output(
    stdout: str,
    stderr: str,
    scope: LogScope = LogScope.SYSTEM,
    max_lines: int = DEFAULT_LINES,
) -> LogResult:
    """
    Classify one journalctl run.

    Cancellation phrases win over everything else; a permission phrase on
    the system scope yields the remediation text with whatever output was
    readable; otherwise the trimmed output, or a placeholder when empty.
    """
    if is_cancellation(stderr):
        return LogResult("", LogOutcome.CANCELLED)

    if scope is LogScope.SYSTEM and PERMISSION_PHRASE in stderr:
        body = stdout if stdout else "No accessible logs found"
        return LogResult(PERMISSION_MESSAGE.format(lines=max_lines, body=body), LogOutcome.PERMISSION_DENIED)

    text = stdout.strip()
    if not text:
        text = NO_USER_LOGS if scope is LogScope.USER else NO_SYSTEM_LOGS
    return LogResult(text, LogOutcome.OK)


def _error_result(scope: LogScope, error: Exception) -> LogResult:
    if scope is LogScope.USER:
        text = (
            f"Error loading user logs: {error}\n\n"
            "Note: User logs may not be available or require additional permissions."
        )
    else:
        text = f"Error loading logs: {error}\n\nNote: journalctl may require additional permissions."
    return LogResult(text, LogOutcome.ERROR)


_TERMINAL_STATES = {
    LogOutcome.OK: RetrievalState.SUCCEEDED,
    LogOutcome.EMPTY: RetrievalState.SUCCEEDED,
    LogOutcome.PERMISSION_DENIED: RetrievalState.PERMISSION_DENIED,
    LogOutcome.CANCELLED: RetrievalState.CANCELLED,
    LogOutcome.ERROR: RetrievalState.FAILED,
}


class LogService:
    """
    Log retrieval state machine and publisher.

    Retrieval moves IDLE -> REQUESTING -> {SUCCEEDED, PERMISSION_DENIED,
    CANCELLED, FAILED} and always returns to IDLE. A refresh or elevation
    request that arrives while another one is in flight is skipped.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        broker: PrivilegeBroker,
        default_lines: int = DEFAULT_LINES,
        auto_refresh: bool = False,
    ):
        self.runner = runner
        self.broker = broker
        self.system_query = LogQuery(max_lines=default_lines)
        self.user_query = LogQuery(max_lines=default_lines)

        self._subscribers: List[LogsCallback] = []
        self._published: Optional[LogsData] = None
        self._state = RetrievalState.IDLE
        self._last_outcome_state = RetrievalState.IDLE
        self._last_system_result = LogResult("", LogOutcome.EMPTY)
        self._auto_refresh = auto_refresh
        self._lock = threading.Lock()

    # --- state -----------------------------------------------------------

    @property
    def state(self) -> RetrievalState:
        with self._lock:
            return self._state

    @property
    def last_outcome_state(self) -> RetrievalState:
        """Terminal state reached by the most recent completed request."""
        with self._lock:
            return self._last_outcome_state

    @property
    def last_system_result(self) -> LogResult:
        """Most recent classified system result; EMPTY before the first fetch."""
        with self._lock:
            return self._last_system_result

    @property
    def system_logs_authenticated(self) -> bool:
        return self.broker.authenticated

    @property
    def published(self) -> Optional[LogsData]:
        with self._lock:
            return self._published

    @property
    def auto_refresh_enabled(self) -> bool:
        with self._lock:
            return self._auto_refresh

    def _begin_request(self) -> bool:
        with self._lock:
            if self._state is not RetrievalState.IDLE:
                return False
            self._state = RetrievalState.REQUESTING
            return True

    def _end_request(self, terminal: RetrievalState, system: Optional[LogResult] = None) -> None:
        with self._lock:
            # A cancelled prompt leaves the previous result in place.
            if system is not None and system.outcome is not LogOutcome.CANCELLED:
                self._last_system_result = system
            self._last_outcome_state = terminal
            self._state = RetrievalState.IDLE
        logger.debug(f"Log retrieval finished in state {terminal.name}")

    # --- fetching --------------------------------------------------------

    def fetch_system_logs(self, elevated: bool) -> LogResult:
        """Run the system query once, elevated or not, and classify it."""
        query = self.system_query
        args = build_journal_args(LogScope.SYSTEM, query)
        try:
            if elevated:
                stdout, stderr = self.broker.run_elevated(JOURNALCTL, args)
            else:
                stdout, stderr = self.runner.run(JOURNALCTL, args)
        except ExecutionError as e:
            handle_error(e, "loading system logs", severity=ErrorSeverity.WARNING, reraise=False, logger=logger)
            return _error_result(LogScope.SYSTEM, e)
        return classify_journal_output(stdout, stderr, LogScope.SYSTEM, query.max_lines)

    def fetch_user_logs(self) -> LogResult:
        query = self.user_query
        args = build_journal_args(LogScope.USER, query)
        try:
            stdout, stderr = self.runner.run(JOURNALCTL, args)
        except ExecutionError as e:
            handle_error(e, "loading user logs", severity=ErrorSeverity.WARNING, reraise=False, logger=logger)
            return _error_result(LogScope.USER, e)
        return classify_journal_output(stdout, stderr, LogScope.USER, query.max_lines)

    def _system_text(self, result: LogResult) -> str:
        if result.outcome is LogOutcome.CANCELLED:
            previous = self.published
            return previous.system_logs if previous is not None else ""
        return result.text

    # --- operations ------------------------------------------------------

    def refresh(self) -> Optional[LogsData]:
        """
        Fetch both scopes and publish them.

        System logs are requested elevated once elevation has succeeded,
        without elevation before that.

        Returns:
            The published data, or None when a request was already in flight
        """
        if not self._begin_request():
            logger.debug("Log refresh skipped: a request is already in flight")
            return None

        terminal = RetrievalState.FAILED
        system: Optional[LogResult] = None
        try:
            system = self.fetch_system_logs(elevated=self.broker.authenticated)
            user = self.fetch_user_logs()
            terminal = _TERMINAL_STATES[system.outcome]
            data = LogsData(system_logs=self._system_text(system), user_logs=user.text)
        finally:
            self._end_request(terminal, system)

        self._publish(data)
        return data

    def request_elevation(self) -> Optional[LogResult]:
        """
        Explicit user request for elevated system logs.

        A cancelled prompt leaves the published data untouched. A successful
        elevated run marks the broker authenticated.

        Returns:
            The classified system result, or None when skipped
        """
        if not self._begin_request():
            logger.debug("Elevation request skipped: a request is already in flight")
            return None

        terminal = RetrievalState.FAILED
        system: Optional[LogResult] = None
        data: Optional[LogsData] = None
        try:
            system = self.fetch_system_logs(elevated=True)
            terminal = _TERMINAL_STATES[system.outcome]
            if system.outcome is LogOutcome.OK:
                self.broker.mark_authenticated()
            if system.outcome is not LogOutcome.CANCELLED:
                user = self.fetch_user_logs()
                data = LogsData(system_logs=system.text, user_logs=user.text)
        finally:
            self._end_request(terminal, system)

        if data is not None:
            self._publish(data)
        else:
            logger.info("Elevation cancelled; keeping the current logs")
        return system

    def set_system_log_filter(self, filter_id: int, priority_id: int, lines: int) -> Optional[LogsData]:
        self.system_query.filter_id = filter_id
        self.system_query.priority_id = priority_id
        self.system_query.max_lines = lines
        return self.refresh()

    def set_user_log_filter(self, filter_id: int, priority_id: int, lines: int) -> Optional[LogsData]:
        self.user_query.filter_id = filter_id
        self.user_query.priority_id = priority_id
        self.user_query.max_lines = lines
        return self.refresh()

    def periodic_refresh(self) -> Optional[LogsData]:
        """Timer entry point: refresh only while auto-refresh is on."""
        if not self.auto_refresh_enabled:
            return None
        return self.refresh()

    def toggle_auto_refresh(self) -> bool:
        """Flip auto-refresh; turning it on refreshes immediately."""
        with self._lock:
            self._auto_refresh = not self._auto_refresh
            enabled = self._auto_refresh
        logger.info(f"Log auto-refresh {'enabled' if enabled else 'disabled'}")
        if enabled:
            self.refresh()
        return enabled

    # --- subscribers -----------------------------------------------------

    def subscribe(self, callback: LogsCallback) -> None:
        """Register a callback and deliver an update right away."""
        with self._lock:
            self._subscribers.append(callback)
        if self.refresh() is None and self.published is not None:
            self._deliver(callback, self.published)

    def unsubscribe(self, callback: LogsCallback) -> None:
        """Remove a callback; removing the last one stops auto-refresh."""
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
            if not self._subscribers and self._auto_refresh:
                self._auto_refresh = False
                logger.info("Last log subscriber left; auto-refresh stopped")

    def _publish(self, data: LogsData) -> None:
        with self._lock:
            self._published = data
            subscribers = list(self._subscribers)
        for callback in subscribers:
            self._deliver(callback, data)

    def _deliver(self, callback: LogsCallback, data: LogsData) -> None:
        try:
            callback(data)
        except Exception as e:
            handle_error(e, "log subscriber callback", severity=ErrorSeverity.ERROR, reraise=False, logger=logger)
