"""Timer loop that drives sampling ticks."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from memsentinel.utils import format_duration

logger = logging.getLogger(__name__)

TICK_ERRORS = (RuntimeError, ValueError, TypeError, KeyError, AttributeError, ArithmeticError)
MONITOR_LOOP_ERRORS = TICK_ERRORS + (OSError, LookupError, asyncio.TimeoutError)

_MS_PER_SECOND = 1000.0


class MonitoringLoop:
    """
    Runs one tick immediately, then one per interval until stopped.

    Stopping wakes the wait instead of cancelling the task, so a tick that is
    already running always completes.
    """

    def __init__(
        self,
        run_tick: Callable[[], Awaitable[Any]],
        interval_ms: Callable[[], int],
        on_error: Optional[Callable[[BaseException], None]] = None,
    ):
        """
        Initialize monitoring loop.

        Args:
            run_tick: Coroutine function executing one sampling tick
            interval_ms: Returns the delay before the next tick, read after every tick
            on_error: Called with any error that escaped a tick
        """
        self.run_tick = run_tick
        self.interval_ms = interval_ms
        self.on_error = on_error
        self.monitoring_task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None

    async def start_monitoring(self) -> None:
        """Start background sampling."""
        if self.is_monitoring_active():
            logger.warning("Memory monitoring already started")
            return

        logger.info("Starting memory monitoring (interval: %s)", format_duration(self.interval_ms()))
        self._stop_event = asyncio.Event()
        self.monitoring_task = asyncio.create_task(self._monitoring_loop(self._stop_event))

    async def stop_monitoring(self) -> None:
        """Stop background sampling, waiting for an in-flight tick."""
        if self.monitoring_task is None:
            return

        logger.info("Stopping memory monitoring")
        if self._stop_event is not None:
            self._stop_event.set()
        task, self.monitoring_task = self.monitoring_task, None
        await task

    async def _monitoring_loop(self, stop_event: asyncio.Event) -> None:
        logger.debug("Memory monitoring loop started")
        while not stop_event.is_set():
            try:
                await self.run_tick()
            except MONITOR_LOOP_ERRORS as exc:
                # Error in a tick - continue with next iteration
                logger.exception("Memory monitoring tick failed: %s", exc)
                if self.on_error is not None:
                    self.on_error(exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval_ms() / _MS_PER_SECOND)
            except asyncio.TimeoutError:
                continue
        logger.debug("Memory monitoring loop ended")

    def is_monitoring_active(self) -> bool:
        return self.monitoring_task is not None and not self.monitoring_task.done()


__all__ = ["MONITOR_LOOP_ERRORS", "MonitoringLoop"]
