"""
GPU resolver backed by nvidia-smi, with an lspci fallback.
"""

import logging
from typing import Optional

from ..models.records import GpuInfo, GpuReport, GpuStatus
from ..monitoring.series import MetricSeries
from ..parsers.nvidia import (
    first_value,
    format_temperature,
    format_utilization,
    parse_utilization,
    query_args,
)
from ..parsers.pci import find_display_controller
from ..validation import ExecutionError
from .base import AbstractResolver

logger = logging.getLogger(__name__)

NVIDIA_SMI = "nvidia-smi"
NO_NVIDIA_DRIVER = "N/A (nvidia-smi not available)"
UNDETECTED_GPU = "Unable to detect GPU"


class GpuResolver(AbstractResolver):
    """
    GPU identity and live readings.

    The utilization history is owned by the caller and survives across
    polls. Every poll pushes one sample: the utilization when nvidia-smi
    reports a number, 0 when there is no NVIDIA GPU so the chart keeps
    scrolling.
    """

    name = "gpu"

    def __init__(self, runner, history: MetricSeries, **kwargs):
        super().__init__(runner, **kwargs)
        self.history = history
        self._nvidia_available: Optional[bool] = None
        self._info: Optional[GpuInfo] = None

    @property
    def nvidia_available(self) -> bool:
        if self._nvidia_available is None:
            self._nvidia_available = self.runner.which(NVIDIA_SMI)
            logger.info(f"nvidia-smi {'found' if self._nvidia_available else 'not found'}")
        return self._nvidia_available

    def _query(self, field: str) -> str:
        stdout, _ = self.runner.run(NVIDIA_SMI, query_args(field))
        return stdout

    def load_info(self) -> GpuInfo:
        """Static identity; queried on the first poll and then reused."""
        if self._info is not None:
            return self._info

        if self.nvidia_available:
            info = GpuInfo(
                name=first_value(self._query("name")) or "Unknown",
                driver=first_value(self._query("driver_version")) or "Unknown",
                memory=first_value(self._query("memory.total")) or "Unknown",
                nvidia_available=True,
            )
        else:
            try:
                lspci_text, _ = self.runner.run("lspci")
                name = find_display_controller(lspci_text) or "Unknown"
            except ExecutionError as e:
                logger.warning(f"Cannot identify GPU: {e}")
                name = UNDETECTED_GPU
            info = GpuInfo(name=name, driver=NO_NVIDIA_DRIVER, memory="N/A")

        self._info = info
        return info

    def read_status(self) -> GpuStatus:
        if not self.nvidia_available:
            self.history.push(0)
            return GpuStatus()

        utilization = parse_utilization(self._query("utilization.gpu"))
        if utilization is not None:
            self.history.push(utilization)
        return GpuStatus(
            utilization=format_utilization(utilization),
            memory_used=first_value(self._query("memory.used")) or "N/A",
            temperature=format_temperature(self._query("temperature.gpu")),
            power=first_value(self._query("power.draw")) or "N/A",
            utilization_value=utilization,
        )

    def resolve(self) -> GpuReport:
        info = self.load_info()
        status = self.read_status()
        return GpuReport(info=info, status=status, history=tuple(self.history.snapshot()))

    def empty_result(self) -> GpuReport:
        info = self._info or GpuInfo(name=UNDETECTED_GPU, driver="N/A", memory="N/A")
        return GpuReport(info=info, status=GpuStatus(), history=tuple(self.history.snapshot()))
