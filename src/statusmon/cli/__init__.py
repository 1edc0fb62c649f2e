"""
Command-line interface for the statusmon package.

This module provides the main CLI entry point for the telemetry application.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
