"""
Orchestrator - Dispatches scan tasks under the concurrency governor.

This module implements the producer-consumer pattern: every task is
admitted through the governor, grabbed in its own asyncio task, and any
banner is handed to the result sink without waiting for it to be
written.

Design Pattern: Producer-Consumer + Observer
"""

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

import structlog

from ..scanners import BannerGrabber
from ..targets import ScanTask
from .config import ScanConfig
from .governor import ConcurrencyGovernor
from .jitter import Jitter
from .rate_limiter import AdaptiveRateLimiter
from .sink import ResultSink


@dataclass
class ScanSummary:
    """What a finished scan did"""
    scan_id: str
    tasks: int
    results: int
    errors: int
    peak_concurrency: int
    rate_factor: float
    elapsed: float


class Orchestrator:
    """
    Central coordinator for a banner scan.

    Responsibilities:
    1. Admit each task through the concurrency governor
    2. Run the banner grab for each admitted task
    3. Feed banners to the result sink
    4. Close the sink only after every task has finished

    Example:
        >>> orchestrator = Orchestrator(ScanConfig(rate_limit=50))
        >>> summary = await orchestrator.run(enumerate_tasks(targets, ports))
        >>> print(summary.results)
    """

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        grabber: Optional[Any] = None,
        sink: Optional[ResultSink] = None,
        rate_limiter: Optional[AdaptiveRateLimiter] = None,
        jitter: Optional[Jitter] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Scan configuration
            grabber: Object with an async scan(task) -> ScanResult | None
                (a BannerGrabber built from config if None)
            sink: Result sink (prints to stdout if None)
            rate_limiter: Shared rate limiter (a fresh one if None)
            jitter: Delay generator handed to the default grabber
        """
        self.config = config or ScanConfig()
        self.rate_limiter = rate_limiter or AdaptiveRateLimiter()
        self.grabber = grabber or BannerGrabber(
            config=self.config,
            rate_limiter=self.rate_limiter,
            jitter=jitter or Jitter(self.rate_limiter),
        )
        self.sink = sink or ResultSink()
        self.governor = ConcurrencyGovernor(self.config.rate_limit)

        # State tracking
        self.is_running = False
        self.scan_id: Optional[str] = None
        self.dispatched = 0
        self.completed = 0
        self.result_count = 0
        self.error_count = 0

        # Structured logging
        self.logger = structlog.get_logger(__name__)

        # Observer pattern - callbacks
        self.observers: List[Callable[[str, Dict[str, Any]], None]] = []

    def subscribe(self, observer: Callable[[str, Dict[str, Any]], None]):
        """
        Subscribe to orchestrator events (Observer pattern).

        Events: scan_started, task_completed, scan_completed.

        Args:
            observer: Callback function for events
        """
        self.observers.append(observer)
        self.logger.debug("observer_subscribed", observer=getattr(observer, "__name__", repr(observer)))

    def _notify_observers(self, event: str, data: Dict[str, Any]):
        """Notify all observers of an event"""
        for observer in self.observers:
            try:
                observer(event, data)
            except Exception as e:
                self.logger.error(
                    "observer_error",
                    observer=getattr(observer, "__name__", repr(observer)),
                    error=str(e),
                )

    async def run(self, tasks: Iterable[ScanTask]) -> ScanSummary:
        """
        Scan every task and wait for all of them to finish.

        Args:
            tasks: Scan tasks, consumed once

        Returns:
            Summary of the finished scan
        """
        self.scan_id = f"scan_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        self.is_running = True
        started = time.monotonic()

        self.logger.info(
            "scan_started",
            scan_id=self.scan_id,
            rate_limit=self.config.rate_limit,
            timeout=self.config.timeout,
            retries=self.config.retries,
        )
        self._notify_observers("scan_started", {"scan_id": self.scan_id})

        consumer = asyncio.create_task(self.sink.run())
        try:
            async with asyncio.TaskGroup() as tg:
                for task in tasks:
                    await self.governor.acquire()
                    self.dispatched += 1
                    tg.create_task(self._scan_worker(task))
        finally:
            self.is_running = False
            self.sink.close()
            await consumer

        summary = ScanSummary(
            scan_id=self.scan_id,
            tasks=self.completed,
            results=self.result_count,
            errors=self.error_count,
            peak_concurrency=self.governor.peak,
            rate_factor=self.rate_limiter.current_factor(),
            elapsed=time.monotonic() - started,
        )

        self.logger.info(
            "scan_complete",
            scan_id=self.scan_id,
            tasks=summary.tasks,
            results=summary.results,
            errors=summary.errors,
            peak_concurrency=summary.peak_concurrency,
            rate_factor=f"{summary.rate_factor:.3f}",
            elapsed=f"{summary.elapsed:.2f}s",
        )
        self._notify_observers("scan_completed", {"scan_id": self.scan_id, "summary": summary})

        return summary

    async def _scan_worker(self, task: ScanTask):
        """
        Grab one banner while holding an admission token.

        The token is released on every exit path. Unexpected errors are
        logged and do not disturb other workers.
        """
        found = False
        try:
            result = await self.grabber.scan(task)
            if result is not None:
                self.sink.put(result)
                self.result_count += 1
                found = True

        except Exception as e:
            self.error_count += 1
            self.logger.error(
                "scan_worker_error",
                host=task.host,
                port=task.port,
                error=str(e),
                exc_info=True,
            )

        finally:
            self.governor.release()
            self.completed += 1

        self._notify_observers(
            "task_completed",
            {"host": task.host, "port": task.port, "found": found},
        )

    def get_status(self) -> Dict[str, Any]:
        """
        Get current orchestrator status.

        Returns:
            Status dictionary
        """
        return {
            "scan_id": self.scan_id,
            "is_running": self.is_running,
            "dispatched": self.dispatched,
            "completed": self.completed,
            "results": self.result_count,
            "errors": self.error_count,
            "governor": self.governor.get_stats(),
            "rate_limiter": self.rate_limiter.get_stats(),
        }
