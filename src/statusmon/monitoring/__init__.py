"""
Monitoring: the metrics ring buffer and the poll scheduler.

TelemetryCoordinator lives in statusmon.monitoring.coordinator and is not
re-exported here, since resolvers import the series from this package.
"""

from .scheduler import PollScheduler, PollSource
from .series import MetricSeries

__all__ = [
    "MetricSeries",
    "PollScheduler",
    "PollSource",
]
