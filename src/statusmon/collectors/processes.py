"""
Top processes resolver using psutil.
"""

import logging
from typing import Iterable, List

import psutil

from ..models.records import ProcessInfo, ProcessRanking
from ..system.formatting import format_bytes
from .base import AbstractResolver

logger = logging.getLogger(__name__)

SORT_KEYS = ("cpu", "memory")


def format_process_value(process: ProcessInfo, sort_by: str) -> str:
    if sort_by == "cpu":
        return f"{process.cpu:.1f}%"
    return format_bytes(process.memory_kb * 1024)


def rank_processes(processes: Iterable[ProcessInfo], sort_by: str = "cpu", limit: int = 5) -> ProcessRanking:
    """
    Highest consumers first, truncated to `limit`.

    Args:
        processes: Candidate processes
        sort_by: "cpu" (percentage) or "memory" (resident KB)
        limit: Number of processes to keep

    Raises:
        ValueError: If sort_by is not a known key
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort_by must be one of {SORT_KEYS}, got '{sort_by}'")
    if sort_by == "cpu":
        ordered = sorted(processes, key=lambda p: p.cpu, reverse=True)
    else:
        ordered = sorted(processes, key=lambda p: p.memory_kb, reverse=True)
    top = tuple(ordered[:limit])
    return ProcessRanking(
        sort_by=sort_by,
        processes=top,
        values=tuple(format_process_value(p, sort_by) for p in top),
    )


class ProcessResolver(AbstractResolver):
    """
    Samples all processes and ranks them.

    psutil.process_iter() caches Process objects between calls, so CPU
    percentages are measured over the interval since the previous poll. The
    first poll reports 0.0 for every process.
    """

    name = "processes"

    _iter_attrs = ["pid", "name", "cpu_percent", "memory_info"]

    def __init__(self, runner, sort_by: str = "cpu", limit: int = 5, **kwargs):
        super().__init__(runner, **kwargs)
        self.sort_by = sort_by
        self.limit = limit

    def sample_processes(self) -> List[ProcessInfo]:
        samples = []
        for proc in psutil.process_iter(self._iter_attrs):
            info = proc.info
            memory = info.get("memory_info")
            samples.append(
                ProcessInfo(
                    name=info.get("name") or str(info.get("pid")),
                    cpu=info.get("cpu_percent") or 0.0,
                    memory_kb=(memory.rss // 1024) if memory is not None else 0,
                    pid=info.get("pid"),
                )
            )
        logger.debug(f"Sampled {len(samples)} processes")
        return samples

    def resolve(self) -> ProcessRanking:
        return rank_processes(self.sample_processes(), self.sort_by, self.limit)

    def empty_result(self) -> ProcessRanking:
        return ProcessRanking(sort_by=self.sort_by)
