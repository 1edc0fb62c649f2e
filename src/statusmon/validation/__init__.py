"""
Validation and error handling for the statusmon package.

This module provides the telemetry exception taxonomy, input validation and
error handling with consistent error reporting across the application.
"""

from .exceptions import (
    ErrorSeverity,
    ExecutionError,
    ParseMismatchError,
    TelemetryError,
    ToolUnavailableError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_subprocess_error,
)

from .validators import (
    validate_enum_choice,
    validate_non_empty_string,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    # Exceptions
    "ErrorSeverity",
    "ExecutionError",
    "ParseMismatchError",
    "TelemetryError",
    "ToolUnavailableError",
    "ValidationError",
    # Handlers
    "handle_error",
    "handle_config_error",
    "handle_subprocess_error",
    "handle_cli_error",
    # Validators
    "validate_enum_choice",
    "validate_non_empty_string",
    "validate_positive_float",
    "validate_positive_integer",
]
