"""
Software inventory resolver: package count, login shell and tool versions.
"""

import logging
import os
from typing import List, Optional

from ..models.snapshot import RowCategory, SnapshotRow
from ..parsers.software import PACKAGE_MANAGERS, TOOL_VERSIONS, count_packages, parse_tool_version, shell_name
from ..validation import ExecutionError
from .base import AbstractResolver

logger = logging.getLogger(__name__)

PACKAGES_ICON = "application-x-addon-symbolic"
SHELL_ICON = "utilities-terminal-symbolic"
TOOL_ICON = "application-x-executable-symbolic"


class SoftwareResolver(AbstractResolver):
    """Rows for the Software category. Missing tools simply produce no row."""

    name = "software"

    def __init__(self, runner, shell_path: Optional[str] = None, **kwargs):
        super().__init__(runner, **kwargs)
        self.shell_path = shell_path if shell_path is not None else os.environ.get("SHELL", "")

    def package_row(self) -> Optional[SnapshotRow]:
        """Count from the first package manager that runs and lists anything."""
        for manager, command, args in PACKAGE_MANAGERS:
            try:
                stdout, _ = self.runner.run(command, list(args))
            except ExecutionError as e:
                logger.debug(f"Package manager {manager} unavailable: {e}")
                continue
            if not stdout.strip():
                continue
            count = count_packages(manager, stdout)
            return SnapshotRow("Packages", f"{count} ({manager})", PACKAGES_ICON, RowCategory.SOFTWARE)
        return None

    def shell_row(self) -> Optional[SnapshotRow]:
        shell = shell_name(self.shell_path)
        if not shell:
            return None
        return SnapshotRow("Shell", shell, SHELL_ICON, RowCategory.SOFTWARE)

    def version_rows(self) -> List[SnapshotRow]:
        rows = []
        for label, (command, _) in TOOL_VERSIONS.items():
            try:
                stdout, _ = self.runner.run(command, ["--version"])
            except ExecutionError:
                logger.debug(f"{label} not installed")
                continue
            version = parse_tool_version(label, stdout)
            if version:
                rows.append(SnapshotRow(label, version, TOOL_ICON, RowCategory.SOFTWARE))
        return rows

    def resolve(self) -> List[SnapshotRow]:
        rows = [row for row in (self.package_row(), self.shell_row()) if row is not None]
        rows.extend(self.version_rows())
        return rows

    def empty_result(self) -> List[SnapshotRow]:
        return []
