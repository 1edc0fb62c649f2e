"""
System interaction utilities.

This module provides the Process Runner, tool discovery and the display
formatting helpers used by the resolvers.
"""

from .commands import (
    DEFAULT_TIMEOUT,
    ProcessRunner,
    is_tool_installed,
    read_text_file,
    run_command,
)
from .formatting import (
    capitalize_words,
    format_bytes,
    format_uptime,
    format_usage,
    usage_percentage,
)

__all__ = [
    # Command execution
    "DEFAULT_TIMEOUT",
    "ProcessRunner",
    "is_tool_installed",
    "read_text_file",
    "run_command",
    # Formatting
    "capitalize_words",
    "format_bytes",
    "format_uptime",
    "format_usage",
    "usage_percentage",
]
