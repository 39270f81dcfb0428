"""Refresh Scheduler - decides when a refresh cycle runs.

The scheduler is the only component that starts refresh cycles. It runs
on a single asyncio event loop and guarantees that at most one cycle,
and therefore at most one feed request, is in flight at any time:

- A manual trigger while a cycle is in flight queues exactly one
  follow-up cycle. Further manual triggers during the same flight are
  folded into that follow-up.
- A periodic tick while a cycle is in flight is dropped.
- Disabling auto-refresh cancels the timer only; an in-flight cycle
  always completes and updates the views.

Results are applied in completion order. Because cycles never overlap,
no staleness check is needed when rendering; relaxing single-flight
would require one.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Protocol

from src.core.formatter import STATUS_AUTO_DISABLED, format_auto_refresh_enabled


logger = logging.getLogger(__name__)


DEFAULT_INTERVAL_SECONDS = 10.0


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Timer(Protocol):
    def schedule_repeating(
        self,
        interval: float,
        callback: Callable[[], object],
    ) -> TimerHandle: ...


class StatusReporter(Protocol):
    def report(self, message: str) -> None: ...


class RepeatingTimerHandle:
    """Cancellable handle of a repeating asyncio timer."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], object],
    ) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._timer = loop.call_later(interval, self._fire)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._timer = self._loop.call_later(self._interval, self._fire)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()


class AsyncioTimer:
    """Timer backed by the running event loop's call_later."""

    def schedule_repeating(
        self,
        interval: float,
        callback: Callable[[], object],
    ) -> RepeatingTimerHandle:
        return RepeatingTimerHandle(asyncio.get_running_loop(), interval, callback)


class SchedulerState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    AUTO_IDLE = "auto_idle"
    AUTO_FETCHING = "auto_fetching"


@dataclass
class RefreshSession:
    """Mutable scheduler state. Only the scheduler writes to it.

    Attributes:
        auto_refresh: Whether periodic refresh is enabled
        timer_handle: The one live periodic timer, if any
        in_flight: Whether a cycle is running
        follow_up_pending: Whether a manual trigger arrived mid-flight
        task: The task running the current flight
    """
    auto_refresh: bool = False
    timer_handle: TimerHandle | None = None
    in_flight: bool = False
    follow_up_pending: bool = False
    task: "asyncio.Task[None] | None" = None


class RefreshScheduler:
    """Single-flight refresh scheduler with optional periodic trigger."""

    def __init__(
        self,
        run_cycle: Callable[[], Awaitable[object]],
        timer: Timer | None = None,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        session: RefreshSession | None = None,
        status_reporter: StatusReporter | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            run_cycle: Coroutine function running one refresh cycle
            timer: Timer used for periodic triggers
            interval_seconds: Auto-refresh period
            session: Session state (created if not provided)
            status_reporter: Receives auto-refresh toggle messages
        """
        self.run_cycle = run_cycle
        self.timer = timer or AsyncioTimer()
        self.interval_seconds = interval_seconds
        self.session = session or RefreshSession()
        self.status_reporter = status_reporter
        self.cycles_started = 0

    @property
    def state(self) -> SchedulerState:
        if self.session.auto_refresh:
            if self.session.in_flight:
                return SchedulerState.AUTO_FETCHING
            return SchedulerState.AUTO_IDLE
        if self.session.in_flight:
            return SchedulerState.FETCHING
        return SchedulerState.IDLE

    @property
    def auto_refresh(self) -> bool:
        return self.session.auto_refresh

    def trigger(self) -> bool:
        """Manual trigger: start a cycle, or queue one follow-up.

        Returns:
            True if a cycle started now, False if it was queued
        """
        if self.session.in_flight:
            if not self.session.follow_up_pending:
                logger.info("Refresh in flight, queued one follow-up cycle")
            self.session.follow_up_pending = True
            return False

        self._start_flight()
        return True

    def tick(self) -> bool:
        """Periodic trigger: start a cycle unless one is in flight.

        Returns:
            True if a cycle started, False if the tick was dropped
        """
        if self.session.in_flight:
            logger.debug("Refresh in flight, dropped periodic tick")
            return False

        self._start_flight()
        return True

    def enable_auto_refresh(self) -> None:
        """Start periodic refresh. Does not trigger a cycle by itself."""
        if self.session.auto_refresh:
            return

        self.session.timer_handle = self.timer.schedule_repeating(
            self.interval_seconds, self.tick,
        )
        self.session.auto_refresh = True
        logger.info("Auto-refresh enabled every %.1f seconds", self.interval_seconds)
        self._report(format_auto_refresh_enabled(self.interval_seconds))

    def disable_auto_refresh(self) -> None:
        """Stop future periodic triggers; an in-flight cycle still completes."""
        if not self.session.auto_refresh:
            return

        handle, self.session.timer_handle = self.session.timer_handle, None
        self.session.auto_refresh = False
        if handle is not None:
            handle.cancel()
        logger.info("Auto-refresh disabled")
        self._report(STATUS_AUTO_DISABLED)

    def toggle_auto_refresh(self) -> bool:
        """Flip auto-refresh and return the new setting."""
        if self.session.auto_refresh:
            self.disable_auto_refresh()
        else:
            self.enable_auto_refresh()
        return self.session.auto_refresh

    async def wait_idle(self) -> None:
        """Wait for the current flight, including its follow-up, to finish."""
        task = self.session.task
        if task is not None:
            await asyncio.shield(task)

    async def close(self) -> None:
        """Cancel the periodic timer and let the in-flight cycle finish."""
        if self.session.timer_handle is not None:
            self.session.timer_handle.cancel()
            self.session.timer_handle = None
        self.session.auto_refresh = False
        self.session.follow_up_pending = False
        await self.wait_idle()

    def _report(self, message: str) -> None:
        if self.status_reporter is not None:
            self.status_reporter.report(message)

    def _start_flight(self) -> None:
        self.session.in_flight = True
        self.session.task = asyncio.get_running_loop().create_task(self._fly())

    async def _fly(self) -> None:
        try:
            while True:
                self.session.follow_up_pending = False
                self.cycles_started += 1
                try:
                    await self.run_cycle()
                except Exception:
                    logger.exception("Refresh cycle failed unexpectedly")
                if not self.session.follow_up_pending:
                    break
        finally:
            self.session.in_flight = False
            self.session.task = None
