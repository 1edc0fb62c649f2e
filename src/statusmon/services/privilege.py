"""
Privilege escalation broker.

Wraps commands with the configured launcher (pkexec by default) and keeps
the process-wide "authenticated" flag. The flag is sticky: once an elevated
command has succeeded it stays set until the process exits.
"""

import logging
import threading
from typing import List, Sequence, Tuple

from ..system.commands import ProcessRunner
from ..validation import ExecutionError

logger = logging.getLogger(__name__)

DEFAULT_LAUNCHER = "pkexec"

# stderr phrases printed when the user dismisses or cancels the prompt.
CANCELLATION_PHRASES = ("dismissed", "Error executing command", "cancelled by user")


def is_cancellation(stderr: str) -> bool:
    return any(phrase in stderr for phrase in CANCELLATION_PHRASES)


class PrivilegeBroker:
    """
    Runs commands through the privilege launcher and remembers success.

    Constructed once at start-up and passed to every component that needs
    elevated output (log retrieval, firewall probe).
    """

    def __init__(self, runner: ProcessRunner, launcher: str = DEFAULT_LAUNCHER):
        self.runner = runner
        self.launcher = launcher
        self._authenticated = False
        self._lock = threading.Lock()

    @property
    def authenticated(self) -> bool:
        with self._lock:
            return self._authenticated

    def mark_authenticated(self) -> None:
        with self._lock:
            if not self._authenticated:
                logger.info("Elevated access granted; later refreshes will request elevated output")
            self._authenticated = True

    def wrap(self, command: str, args: Sequence[str] = ()) -> Tuple[str, List[str]]:
        """Return (launcher, argv) that runs `command args` with elevation."""
        return self.launcher, [command, *args]

    def run_elevated(self, command: str, args: Sequence[str] = ()) -> Tuple[str, str]:
        """
        Run a command through the launcher.

        Raises:
            ExecutionError: If the launcher cannot be started
        """
        launcher, argv = self.wrap(command, args)
        logger.debug(f"Running elevated: {launcher} {' '.join(argv)}")
        return self.runner.run(launcher, argv)

    def authenticate(self) -> bool:
        """
        Prompt for credentials by running `<launcher> true`.

        Returns:
            True unless the prompt was dismissed or the launcher could not
            be started. Success sets the authenticated flag.
        """
        try:
            _, stderr = self.run_elevated("true")
        except ExecutionError as e:
            logger.warning(f"Authentication unavailable: {e}")
            return False

        if is_cancellation(stderr):
            logger.info("Authentication dismissed by user")
            return False

        self.mark_authenticated()
        return True
