"""
Exception taxonomy and error management.

This module provides the error handling used throughout the telemetry layer:
a small hierarchy of telemetry exceptions, the configuration ValidationError,
and the handle_error helpers that log consistently and optionally re-raise.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    Raised by the configuration validators with the offending field name.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


# severity -> (logging level, attach traceback)
_LOG_LEVELS = {
    "debug": (logging.DEBUG, True),
    "info": (logging.INFO, False),
    "warning": (logging.WARNING, False),
    "error": (logging.ERROR, True),
    "critical": (logging.CRITICAL, True),
}


class TelemetryError(Exception):
    """Base class for errors raised while gathering telemetry."""


class ExecutionError(TelemetryError):
    """
    An external program could not be run.

    A non-zero exit status is not an ExecutionError; the runner reports it
    through the captured stderr text instead.
    """

    def __init__(self, message: str, command: Optional[str] = None):
        super().__init__(message)
        self.command = command


class ToolUnavailableError(ExecutionError):
    """The requested program is not installed or not on PATH."""


class ParseMismatchError(TelemetryError):
    """A line or entry does not have the expected shape."""

    def __init__(self, message: str, line: Optional[str] = None):
        super().__init__(message)
        self.line = line


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']
    severity_str = severity.lower() if isinstance(severity, str) else severity.value

    # Unknown severities are not logged.
    level, with_traceback = _LOG_LEVELS.get(severity_str, (None, False))
    if level is not None:
        effective_logger.log(level, f"Error in {context}: {error}", exc_info=with_traceback)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_subprocess_error(error: Exception, command: str, **kwargs) -> None:
    """Handle subprocess-related errors."""
    handle_error(error, f"subprocess command '{command}'", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Log a CLI error and exit with the requested status code."""
    exit_code = kwargs.pop('exit_code', 1)
    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)
    sys.exit(exit_code)
