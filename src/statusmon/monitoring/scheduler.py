"""
Interval-driven poll scheduling.

Each registered data source gets its own asyncio task that polls it on a
fixed interval. The poll itself runs in a ThreadPoolExecutor so a slow or
hung external tool only delays its own source. Every source owns an
asyncio.Lock: polls of one source never overlap, and an on-demand trigger
that finds the source busy is skipped rather than queued.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..validation import ErrorSeverity, handle_error

logger = logging.getLogger(__name__)

Subscriber = Callable[[str, Any], None]


@dataclass
class PollSource:
    """One data source and its bookkeeping."""

    name: str
    poll: Callable[[], Any]
    interval: float
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    subscribers: List[Subscriber] = field(default_factory=list)
    last_result: Any = None
    completed_polls: int = 0
    skipped_polls: int = 0


class PollScheduler:
    """
    Runs registered sources on their intervals and publishes results.

    Subscribers are plain callables invoked on the event loop with
    (source_name, result) after a poll has completed.
    """

    def __init__(self, max_workers: int = 4, thread_name_prefix: str = "StatusWorker"):
        self.max_workers = max_workers
        self.thread_name_prefix = thread_name_prefix
        self.executor: Optional[ThreadPoolExecutor] = None
        self._executor_size = 0
        self.sources: Dict[str, PollSource] = {}
        self.tasks: List[asyncio.Task] = []
        self._shutdown_event: Optional[asyncio.Event] = None

    @property
    def is_running(self) -> bool:
        return bool(self.tasks)

    def register(self, name: str, poll: Callable[[], Any], interval: float) -> PollSource:
        """
        Register a data source.

        Args:
            name: Unique source name
            poll: Blocking callable returning the source's record
            interval: Seconds between the end of one poll and the next

        Raises:
            ValueError: If the name is taken or the interval is not positive
        """
        if name in self.sources:
            raise ValueError(f"Source '{name}' is already registered")
        if interval <= 0:
            raise ValueError(f"Interval for '{name}' must be positive, got {interval}")
        source = PollSource(name=name, poll=poll, interval=interval)
        self.sources[name] = source
        logger.debug(f"Registered source '{name}' every {interval}s")
        return source

    def subscribe(self, name: str, callback: Subscriber) -> None:
        self._source(name).subscribers.append(callback)

    def unsubscribe(self, name: str, callback: Subscriber) -> None:
        subscribers = self._source(name).subscribers
        if callback in subscribers:
            subscribers.remove(callback)

    def latest(self, name: str) -> Any:
        """Most recent published result of a source, None before its first poll."""
        return self._source(name).last_result

    def _source(self, name: str) -> PollSource:
        try:
            return self.sources[name]
        except KeyError:
            raise KeyError(f"Unknown source: {name}") from None

    @property
    def worker_count(self) -> int:
        """One worker per source, never fewer than max_workers."""
        return max(self.max_workers, len(self.sources))

    def _ensure_executor(self) -> ThreadPoolExecutor:
        # A hung tool holds its worker until the command timeout; every
        # source needs a worker of its own so it cannot stall the others.
        needed = self.worker_count
        if self.executor is not None and self._executor_size < needed:
            self.executor.shutdown(wait=False)
            self.executor = None
        if self.executor is None:
            self.executor = ThreadPoolExecutor(
                max_workers=needed,
                thread_name_prefix=self.thread_name_prefix,
            )
            self._executor_size = needed
        return self.executor

    async def trigger(self, name: str) -> bool:
        """
        Poll a source now.

        Returns:
            True if a result was published, False otherwise. A poll that
            returns None had nothing new, so the previous result stays
            current and nothing is published.
        """
        source = self._source(name)
        if source.lock.locked():
            source.skipped_polls += 1
            logger.debug(f"Poll of '{name}' skipped: previous poll still running")
            return False

        async with source.lock:
            loop = asyncio.get_running_loop()
            try:
                result = await loop.run_in_executor(self._ensure_executor(), source.poll)
            except Exception as e:
                handle_error(
                    error=e,
                    context=f"polling source '{name}'",
                    severity=ErrorSeverity.ERROR,
                    reraise=False,
                    logger=logger
                )
                return False
            if result is None:
                logger.debug(f"Source '{name}' returned nothing; keeping its last result")
                return False
            source.last_result = result
            source.completed_polls += 1

        self._publish(source, result)
        return True

    def _publish(self, source: PollSource, result: Any) -> None:
        for callback in list(source.subscribers):
            try:
                callback(source.name, result)
            except Exception as e:
                handle_error(
                    error=e,
                    context=f"subscriber of '{source.name}'",
                    severity=ErrorSeverity.WARNING,
                    reraise=False,
                    logger=logger
                )

    async def _run_source(self, source: PollSource) -> None:
        """Poll immediately, then once per interval until shutdown."""
        try:
            while not self._shutdown_event.is_set():
                await self.trigger(source.name)
                try:
                    await asyncio.wait_for(self._shutdown_event.wait(), timeout=source.interval)
                    break
                except asyncio.TimeoutError:
                    continue
        except asyncio.CancelledError:
            logger.debug(f"Task for '{source.name}' cancelled")
            raise
        finally:
            logger.debug(f"Task for '{source.name}' exiting")

    async def start(self) -> None:
        """Start one task per registered source."""
        if self.is_running:
            logger.warning("Scheduler already running")
            return
        if not self.sources:
            raise RuntimeError("No sources registered")

        self._ensure_executor()
        self._shutdown_event = asyncio.Event()
        for source in self.sources.values():
            self.tasks.append(asyncio.create_task(self._run_source(source), name=f"poll-{source.name}"))
        logger.info(f"Started {len(self.tasks)} poll tasks with {self._executor_size} workers")

    async def stop(self) -> None:
        """Signal every task to finish, wait for them and release the executor."""
        if not self.is_running:
            logger.debug("Scheduler not running - nothing to stop")
            return

        self._shutdown_event.set()
        await asyncio.gather(*self.tasks, return_exceptions=True)
        self.tasks.clear()

        if self.executor is not None:
            # A hung tool keeps its worker thread; don't wait for it.
            self.executor.shutdown(wait=False, cancel_futures=True)
            self.executor = None
        logger.info("Scheduler stopped")
