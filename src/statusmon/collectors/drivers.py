"""
Device/driver resolver and kernel module ranker.
"""

import logging
from typing import Dict, List, Optional

from ..models.records import DeviceCategory, DeviceRecord, DriverReport, ModuleRecord
from ..parsers.lsmod import DEFAULT_TOP_MODULES, parse_lsmod, rank_modules
from ..parsers.pci import DEFAULT_LOOKAHEAD, parse_modinfo_version, parse_pci_devices
from ..validation import ExecutionError, ErrorSeverity, handle_error
from .base import AbstractResolver

logger = logging.getLogger(__name__)


class DriverResolver(AbstractResolver):
    """
    Buckets PCI devices into categories and ranks loaded kernel modules.

    `lspci -k` runs once per poll and its text is shared by the five
    categories; each category is parsed independently so a failure in one
    leaves the others intact. Driver versions come from `modinfo` and are
    best effort: any failure leaves the version empty.
    """

    name = "drivers"

    def __init__(self, runner, top_modules: int = DEFAULT_TOP_MODULES,
                 lookahead: int = DEFAULT_LOOKAHEAD, **kwargs):
        super().__init__(runner, **kwargs)
        self.top_modules = top_modules
        self.lookahead = lookahead

    def lookup_version(self, driver: str) -> Optional[str]:
        """Version field of `modinfo <driver>`, or None on any failure."""
        try:
            stdout, _ = self.runner.run("modinfo", [driver])
        except ExecutionError as e:
            logger.debug(f"modinfo lookup for '{driver}' failed: {e}")
            return None
        return parse_modinfo_version(stdout)

    def _cached_lookup(self, cache: Dict[str, Optional[str]]):
        def lookup(driver: str) -> Optional[str]:
            if driver not in cache:
                cache[driver] = self.lookup_version(driver)
            return cache[driver]
        return lookup

    def resolve_devices(self, version_cache: Dict[str, Optional[str]]) -> List[DeviceRecord]:
        try:
            lspci_text, _ = self.runner.run("lspci", ["-k"])
        except ExecutionError as e:
            handle_error(e, "reading PCI devices", severity=ErrorSeverity.WARNING, reraise=False, logger=logger)
            return []

        lookup = self._cached_lookup(version_cache)
        devices: List[DeviceRecord] = []
        for category in DeviceCategory:
            try:
                devices.extend(parse_pci_devices(lspci_text, category, lookup, self.lookahead))
            except Exception as e:
                handle_error(
                    e, f"parsing {category.value} devices",
                    severity=ErrorSeverity.ERROR, reraise=False, logger=logger
                )
        return devices

    def resolve_modules(self, version_cache: Dict[str, Optional[str]]) -> List[ModuleRecord]:
        try:
            lsmod_text, _ = self.runner.run("lsmod")
        except ExecutionError as e:
            handle_error(e, "reading kernel modules", severity=ErrorSeverity.WARNING, reraise=False, logger=logger)
            return []

        lookup = self._cached_lookup(version_cache)
        ranked = rank_modules(parse_lsmod(lsmod_text), self.top_modules)
        return [
            ModuleRecord(
                name=module.name,
                size_bytes=module.size_bytes,
                use_count=module.use_count,
                used_by=module.used_by,
                version=lookup(module.name),
            )
            for module in ranked
        ]

    def resolve(self) -> DriverReport:
        # A driver shared by several devices is looked up once per poll.
        version_cache: Dict[str, Optional[str]] = {}
        devices = self.resolve_devices(version_cache)
        modules = self.resolve_modules(version_cache)
        logger.debug(f"Resolved {len(devices)} devices and {len(modules)} modules")
        return DriverReport(devices=tuple(devices), modules=tuple(modules))

    def empty_result(self) -> DriverReport:
        return DriverReport()
