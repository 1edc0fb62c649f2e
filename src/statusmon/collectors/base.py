"""
Defines the abstract base class for resolvers.

A resolver runs one or more external tools through the Process Runner,
parses their text and returns one typed record per poll. poll() isolates
failures: whatever goes wrong inside resolve() is logged and converted to
the resolver's empty fallback, so one data source never affects another.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from ..system.commands import ProcessRunner
from ..validation import ErrorSeverity, handle_error

logger = logging.getLogger(__name__)


class AbstractResolver(ABC):
    """
    Abstract base class for resolvers.

    Subclasses implement resolve() for the real work and empty_result() for
    the display-safe value published when resolve() fails.
    """

    #: Identifier used by the factory, the scheduler and in log messages.
    name: str = "resolver"

    def __init__(self, runner: ProcessRunner, **kwargs):
        """
        Initializes the resolver.

        Args:
            runner: Process Runner shared by all resolvers.
            **kwargs: Additional keyword arguments specific to a resolver.
        """
        self.runner = runner
        self.resolver_kwargs = kwargs
        logger.debug(f"Initializing {self.__class__.__name__} with extra_args: {kwargs}")

    @abstractmethod
    def resolve(self) -> Any:
        """
        Perform one poll and return the typed record.

        May raise; poll() takes care of isolation.
        """

    @abstractmethod
    def empty_result(self) -> Any:
        """Fallback record published when resolve() fails."""

    def poll(self) -> Any:
        """
        Run resolve() with failure isolation.

        Returns:
            The resolved record, or empty_result() if anything went wrong.
        """
        try:
            return self.resolve()
        except Exception as e:
            handle_error(
                error=e,
                context=f"{self.name} poll",
                severity=ErrorSeverity.ERROR,
                reraise=False,
                logger=logger
            )
            return self.empty_result()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
