"""
Host snapshot resolver backed by fastfetch.
"""

import logging

from ..collectors.base import AbstractResolver
from ..models.snapshot import SnapshotReport
from .normalizer import normalize, parse_fastfetch_json

logger = logging.getLogger(__name__)

FASTFETCH_ARGS = ["--format", "json"]


class HostSnapshotResolver(AbstractResolver):
    """
    Runs `fastfetch --format json` and normalizes the result.

    A missing fastfetch or unparsable output fails the poll; poll() then
    publishes an empty report.
    """

    name = "snapshot"

    def resolve(self) -> SnapshotReport:
        stdout, stderr = self.runner.run("fastfetch", FASTFETCH_ARGS)
        if stderr.strip():
            logger.debug(f"fastfetch reported: {stderr.strip()}")
        entries = parse_fastfetch_json(stdout)
        report = normalize(entries)
        logger.debug(f"Normalized {len(entries)} inventory entries into {len(report.items)} items")
        return report

    def empty_result(self) -> SnapshotReport:
        return SnapshotReport()
