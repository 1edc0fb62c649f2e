"""
Fixed-capacity rolling window of numeric samples.
"""

import logging
import threading
from collections import deque
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 60


class MetricSeries:
    """
    Ring buffer feeding a time-series chart.

    The series starts full of zeros so a consumer can always draw a
    full-width chart; every push evicts the oldest sample. Pushes come from
    worker threads while readers take snapshots from the scheduling loop, so
    all access goes through a lock.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, name: str = "series"):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.name = name
        self._capacity = capacity
        self._samples = deque([0.0] * capacity, maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, sample: float) -> None:
        """Append a sample, evicting the oldest one."""
        with self._lock:
            self._samples.append(float(sample))

    def snapshot(self) -> List[float]:
        """Copy of the samples, oldest first."""
        with self._lock:
            return list(self._samples)

    def latest(self) -> Optional[float]:
        with self._lock:
            return self._samples[-1] if self._samples else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    def __repr__(self) -> str:
        return f"MetricSeries(name={self.name!r}, capacity={self._capacity})"
