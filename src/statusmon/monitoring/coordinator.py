"""
Telemetry coordination.

TelemetryCoordinator wires the long-lived services (Process Runner,
privilege broker, log service, GPU history) to the resolvers and registers
every selected data source with the PollScheduler on its configured
interval.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, Optional

from ..collectors.base import AbstractResolver
from ..collectors.factory import RESOLVER_NAMES, ResolverFactory
from ..config import get_config
from ..models.config import AppConfig
from ..services.logs import LogService
from ..services.privilege import PrivilegeBroker
from ..system.commands import ProcessRunner
from ..validation import ErrorSeverity, handle_error
from .scheduler import PollScheduler
from .series import MetricSeries

logger = logging.getLogger(__name__)

LOGS_SOURCE = "logs"
SOURCE_NAMES = RESOLVER_NAMES + (LOGS_SOURCE,)


class TelemetryCoordinator:
    """
    Owns the services and the scheduler for one telemetry session.

    Services are built once here and passed explicitly to the resolvers;
    the authentication flag and the GPU history therefore live exactly as
    long as the coordinator.
    """

    def __init__(self, config: Optional[AppConfig] = None, runner: Optional[ProcessRunner] = None):
        """
        Initialize the coordinator.

        Args:
            config: Application configuration, defaults to get_config()
            runner: Process Runner override, mainly for tests
        """
        self.config = config or get_config()
        self.runner = runner or ProcessRunner(timeout=self.config.runner.command_timeout)
        self.broker = PrivilegeBroker(self.runner, launcher=self.config.runner.elevation_launcher)
        self.gpu_history = MetricSeries(
            capacity=self.config.metrics.history_capacity, name="gpu_utilization"
        )
        self.log_service = LogService(
            self.runner,
            self.broker,
            default_lines=self.config.logs.default_lines,
            auto_refresh=self.config.logs.auto_refresh,
        )
        self.factory = ResolverFactory(self.runner, self.broker, self.config, gpu_history=self.gpu_history)
        self.scheduler = PollScheduler(
            max_workers=self.config.runner.max_workers,
            thread_name_prefix=self.config.runner.thread_name_prefix,
        )
        self.resolvers: Dict[str, AbstractResolver] = {}

    def setup(self, sources: Optional[Iterable[str]] = None) -> None:
        """
        Create resolvers and register them with the scheduler.

        Args:
            sources: Source names to enable, all of SOURCE_NAMES by default

        Raises:
            ValueError: If a source name is unknown
        """
        selected = list(sources) if sources is not None else list(SOURCE_NAMES)
        unknown = [name for name in selected if name not in SOURCE_NAMES]
        if unknown:
            raise ValueError(f"Unknown sources: {', '.join(unknown)}")

        intervals = self.config.intervals.as_dict()
        for name in selected:
            if name == LOGS_SOURCE:
                self.scheduler.register(LOGS_SOURCE, self.log_service.periodic_refresh, intervals[LOGS_SOURCE])
                continue
            resolver = self.factory.create(name)
            self.resolvers[name] = resolver
            self.scheduler.register(name, resolver.poll, intervals[name])

        logger.info(f"Telemetry set up with sources: {', '.join(selected)}")

    def subscribe(self, name: str, callback: Callable[[str, Any], None]) -> None:
        self.scheduler.subscribe(name, callback)

    def subscribe_all(self, callback: Callable[[str, Any], None]) -> None:
        for name in self.scheduler.sources:
            self.scheduler.subscribe(name, callback)

    def poll_once(self, sources: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """
        Poll resolvers synchronously, without the scheduler.

        Resolvers are created on demand for sources not yet set up.
        """
        results = {}
        for name in sources if sources is not None else RESOLVER_NAMES:
            resolver = self.resolvers.get(name)
            if resolver is None:
                resolver = self.factory.create(name)
                self.resolvers[name] = resolver
            results[name] = resolver.poll()
        return results

    async def start(self) -> None:
        if not self.scheduler.sources:
            self.setup()
        await self.scheduler.start()

    async def stop(self) -> None:
        try:
            await self.scheduler.stop()
        except Exception as e:
            handle_error(
                error=e,
                context="stopping telemetry",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger
            )

    async def run_for(self, duration: Optional[float]) -> None:
        """Run the scheduler for `duration` seconds, or until cancelled when None."""
        await self.start()
        try:
            if duration is None:
                await asyncio.Event().wait()
            else:
                await asyncio.sleep(duration)
        finally:
            await self.stop()
