"""
Pytest configuration and shared fixtures for the statusmon test suite.

This module provides common fixtures, a scripted Process Runner fake and
configuration helpers for all test modules. No test calls a real system
tool: resolvers and services always receive a FakeRunner.
"""

import shutil
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "general": {"log_level": "DEBUG"},
        "runner": {
            "command_timeout": 5.0,
            "max_workers": 2,
            "thread_name_prefix": "TestWorker",
            "elevation_launcher": "pkexec",
        },
        "intervals": {
            "gpu": 1,
            "processes": 1,
            "drivers": 5,
            "network": 5,
            "connectivity": 10,
            "snapshot": 30,
            "software": 60,
            "logs": 5,
        },
        "drivers": {"top_modules": 3, "driver_lookahead": 4},
        "metrics": {"history_capacity": 10},
        "logs": {"default_lines": 50, "min_lines": 10, "max_lines": 1000, "auto_refresh": False},
        "processes": {"limit": 3, "sort_by": "memory"},
    }


# ============================================================================
# Process Runner fake
# ============================================================================


class FakeRunner:
    """
    Scripted stand-in for ProcessRunner.

    Responses are looked up by (command, args tuple) first and by command
    name second. A response is a (stdout, stderr) tuple, a plain stdout
    string, or an exception instance to raise. Unknown commands and files
    raise ToolUnavailableError like a missing binary would.
    """

    def __init__(
        self,
        responses: Optional[Dict[Any, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        tools: Iterable[str] = (),
    ):
        self.responses = dict(responses or {})
        self.files = dict(files or {})
        self.tools = set(tools)
        self.calls: List[Tuple[str, List[str]]] = []

    def _respond(self, response: Any) -> Tuple[str, str]:
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return response, ""
        return response

    def run(self, command: str, args=()) -> Tuple[str, str]:
        from statusmon.validation import ToolUnavailableError

        self.calls.append((command, list(args)))
        key = (command, tuple(args))
        if key in self.responses:
            return self._respond(self.responses[key])
        if command in self.responses:
            return self._respond(self.responses[command])
        raise ToolUnavailableError(f"Command not found: {command}", command=command)

    def read_file(self, path) -> str:
        from statusmon.validation import ToolUnavailableError

        response = self.files.get(str(path))
        if response is None:
            raise ToolUnavailableError(f"File not found: {path}")
        if isinstance(response, Exception):
            raise response
        return response

    def which(self, name: str) -> bool:
        return name in self.tools

    def commands(self) -> List[str]:
        return [command for command, _ in self.calls]


@pytest.fixture
def make_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def config_files(temp_dir, sample_config_data):
    """Create a temporary config.toml for testing."""
    import toml

    config_file = temp_dir / "config.toml"
    with open(config_file, "w") as f:
        toml.dump(sample_config_data, f)

    return {
        "config": config_file,
        "dir": temp_dir,
    }


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically clear configuration cache after each test."""
    # Store original config path (default path)
    original_config_path = Path(__file__).parent.parent / "conf" / "config.toml"

    yield  # Run the test

    from statusmon.config import clear_config_cache, set_config_path

    clear_config_cache()

    # Always reset to original config path
    set_config_path(original_config_path)
