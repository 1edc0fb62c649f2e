"""
Command execution and tool discovery utilities.

This module provides the Process Runner used by every resolver: it executes an
external program with arguments and returns the captured stdout and stderr
text. A non-zero exit status is not an error; callers inspect the stderr text
for known phrases instead.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple, Union

from ..validation import ErrorSeverity, ExecutionError, ToolUnavailableError, handle_subprocess_error

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


def _command_environment() -> Dict[str, str]:
    """Copy of the process environment with a fixed C locale.

    Several parsers match English phrases and column layouts, so the tools
    must not localize their output.
    """
    env = dict(os.environ)
    env["LC_ALL"] = "C"
    return env


def run_command(
    command: str,
    args: Sequence[str] = (),
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> Tuple[str, str]:
    """Execute a program and capture its output.

    Args:
        command: Program name or path (looked up on PATH).
        args: Arguments passed to the program, no shell involved.
        timeout: Seconds to wait before giving up, None for no limit.

    Returns:
        Tuple of (stdout_string, stderr_string).

    Raises:
        ToolUnavailableError: If the program is not installed.
        ExecutionError: If the program cannot be launched or times out.

    Note:
        Uses UTF-8 decoding with error replacement for robust text handling.
    """
    argv = [command, *args]
    command_str = " ".join(argv)
    logger.debug(f"Executing command: '{command_str}'")
    try:
        process = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            env=_command_environment(),
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        logger.debug(f"Command not found: {command}: {type(e).__name__}: {e}")
        raise ToolUnavailableError(f"Command not found: '{command}'", command=command_str) from e
    except subprocess.TimeoutExpired as e:
        logger.warning(f"Command '{command_str}' timed out after {timeout}s")
        raise ExecutionError(f"Command timed out after {timeout}s: '{command_str}'", command=command_str) from e
    except OSError as e:
        handle_subprocess_error(e, command_str, severity=ErrorSeverity.ERROR, reraise=False, logger=logger)
        raise ExecutionError(f"Failed to launch '{command_str}': {e}", command=command_str) from e

    if process.returncode != 0:
        logger.debug(f"Command '{command_str}' exited with status {process.returncode}")
    return process.stdout or "", process.stderr or ""


def read_text_file(path: Union[str, Path]) -> str:
    """Read a small system file such as /proc/net/dev or /etc/resolv.conf.

    Raises:
        ToolUnavailableError: If the file does not exist.
        ExecutionError: If the file cannot be read.
    """
    file_path = Path(path)
    try:
        return file_path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError as e:
        raise ToolUnavailableError(f"File not found: {file_path}", command=str(file_path)) from e
    except OSError as e:
        raise ExecutionError(f"Cannot read {file_path}: {e}", command=str(file_path)) from e


def is_tool_installed(name: str) -> bool:
    """Check if a program is available on the system PATH."""
    return shutil.which(name) is not None


class ProcessRunner:
    """
    Injectable facade over run_command.

    Resolvers receive a ProcessRunner instance instead of calling the module
    functions directly, so tests can substitute a fake runner and the timeout
    comes from configuration in one place.
    """

    def __init__(self, timeout: Optional[float] = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def run(self, command: str, args: Sequence[str] = ()) -> Tuple[str, str]:
        """Run a program and return (stdout, stderr); see run_command."""
        return run_command(command, args, timeout=self.timeout)

    def read_file(self, path: Union[str, Path]) -> str:
        """Return the text of a system file; see read_text_file."""
        return read_text_file(path)

    def which(self, name: str) -> bool:
        """Return True if the program is installed."""
        return is_tool_installed(name)
