"""
Resolver factory.

Builds resolver instances from the application configuration, injecting the
shared Process Runner, privilege broker and GPU history series.
"""

import logging
from typing import Dict, Optional

from ..models.config import AppConfig
from ..monitoring.series import MetricSeries
from ..services.privilege import PrivilegeBroker
from ..system.commands import ProcessRunner
from .base import AbstractResolver

logger = logging.getLogger(__name__)

RESOLVER_NAMES = ("gpu", "processes", "drivers", "network", "connectivity", "snapshot", "software")


class ResolverFactory:
    """
    Creates resolvers by name.

    Resolver modules are imported on demand so a caller that only needs one
    data source does not pay for the others.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        broker: PrivilegeBroker,
        config: AppConfig,
        gpu_history: Optional[MetricSeries] = None,
    ):
        """
        Initialize the factory.

        Args:
            runner: Process Runner shared by every resolver
            broker: Privilege broker for resolvers that may need elevation
            config: Application configuration
            gpu_history: Series fed by the GPU resolver; created from
                metrics.history_capacity when omitted
        """
        self.runner = runner
        self.broker = broker
        self.config = config
        self.gpu_history = gpu_history if gpu_history is not None else MetricSeries(
            capacity=config.metrics.history_capacity, name="gpu_utilization"
        )

        logger.info(
            f"ResolverFactory initialized: top_modules={config.drivers.top_modules}, "
            f"processes={config.processes.limit} by {config.processes.sort_by}"
        )

    def create(self, name: str) -> AbstractResolver:
        """
        Create a resolver.

        Args:
            name: One of RESOLVER_NAMES

        Returns:
            New resolver instance

        Raises:
            ValueError: If the name is unknown
        """
        if name == "gpu":
            from .gpu import GpuResolver

            return GpuResolver(self.runner, history=self.gpu_history)
        elif name == "processes":
            from .processes import ProcessResolver

            return ProcessResolver(
                self.runner,
                sort_by=self.config.processes.sort_by,
                limit=self.config.processes.limit,
            )
        elif name == "drivers":
            from .drivers import DriverResolver

            return DriverResolver(
                self.runner,
                top_modules=self.config.drivers.top_modules,
                lookahead=self.config.drivers.driver_lookahead,
            )
        elif name == "network":
            from .network import NetworkResolver

            return NetworkResolver(self.runner)
        elif name == "connectivity":
            from .connectivity import ConnectivityResolver

            return ConnectivityResolver(self.runner, broker=self.broker)
        elif name == "snapshot":
            from ..snapshot.resolver import HostSnapshotResolver

            return HostSnapshotResolver(self.runner)
        elif name == "software":
            from .software import SoftwareResolver

            return SoftwareResolver(self.runner)
        else:
            raise ValueError(f"Unknown resolver: {name}")

    def create_all(self) -> Dict[str, AbstractResolver]:
        """One resolver per known data source, keyed by name."""
        return {name: self.create(name) for name in RESOLVER_NAMES}
