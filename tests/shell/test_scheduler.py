"""Tests for the refresh scheduler.

Cycles are gated on asyncio events so a test controls exactly when an
in-flight fetch completes. Periodic ticks come from a fake timer that
fires on demand.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from src.scheduler import (
    AsyncioTimer,
    RefreshScheduler,
    RefreshSession,
    SchedulerState,
)


async def settle():
    for _ in range(5):
        await asyncio.sleep(0)


class GatedCycle:
    """Refresh cycle that blocks until its gate is released."""

    def __init__(self):
        self.calls = 0
        self.active = 0
        self.max_active = 0
        self.gates = []

    async def __call__(self):
        self.calls += 1
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        gate = asyncio.Event()
        self.gates.append(gate)
        try:
            await gate.wait()
        finally:
            self.active -= 1

    def release(self, index=-1):
        self.gates[index].set()


class FakeHandle:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.callback()


class FakeTimer:
    def __init__(self):
        self.handles = []
        self.intervals = []

    def schedule_repeating(self, interval, callback):
        handle = FakeHandle(callback)
        self.handles.append(handle)
        self.intervals.append(interval)
        return handle


class TestManualTrigger:
    """Tests for manual refresh triggers."""

    @pytest.mark.asyncio
    async def test_trigger_runs_one_cycle(self):
        cycle = GatedCycle()
        scheduler = RefreshScheduler(cycle, timer=FakeTimer())

        assert scheduler.trigger() is True
        await settle()
        assert scheduler.state == SchedulerState.FETCHING

        cycle.release()
        await scheduler.wait_idle()

        assert cycle.calls == 1
        assert scheduler.state == SchedulerState.IDLE

    @pytest.mark.asyncio
    async def test_triggers_in_flight_coalesce_into_one_follow_up(self):
        cycle = GatedCycle()
        scheduler = RefreshScheduler(cycle, timer=FakeTimer())

        scheduler.trigger()
        await settle()
        assert scheduler.trigger() is False
        assert scheduler.trigger() is False
        assert scheduler.trigger() is False
        assert cycle.calls == 1

        cycle.release(0)
        await settle()
        assert cycle.calls == 2

        cycle.release(1)
        await scheduler.wait_idle()

        assert cycle.calls == 2
        assert cycle.max_active == 1
        assert scheduler.cycles_started == 2

    @pytest.mark.asyncio
    async def test_trigger_after_completion_starts_new_cycle(self):
        cycle = GatedCycle()
        scheduler = RefreshScheduler(cycle, timer=FakeTimer())

        scheduler.trigger()
        await settle()
        cycle.release()
        await scheduler.wait_idle()

        assert scheduler.trigger() is True
        await settle()
        cycle.release()
        await scheduler.wait_idle()

        assert cycle.calls == 2

    @pytest.mark.asyncio
    async def test_failing_cycle_returns_to_idle(self):
        run_cycle = MagicMock(side_effect=[RuntimeError("boom"), None])

        async def cycle():
            run_cycle()

        scheduler = RefreshScheduler(cycle, timer=FakeTimer())

        scheduler.trigger()
        await scheduler.wait_idle()
        await settle()
        assert scheduler.state == SchedulerState.IDLE

        assert scheduler.trigger() is True
        await scheduler.wait_idle()
        assert run_cycle.call_count == 2


class TestAutoRefresh:
    """Tests for the periodic trigger lifecycle."""

    @pytest.mark.asyncio
    async def test_enable_schedules_timer_without_cycle(self):
        cycle = GatedCycle()
        timer = FakeTimer()
        scheduler = RefreshScheduler(cycle, timer=timer, interval_seconds=10)

        scheduler.enable_auto_refresh()

        assert timer.intervals == [10]
        assert cycle.calls == 0
        assert scheduler.state == SchedulerState.AUTO_IDLE

    @pytest.mark.asyncio
    async def test_enable_twice_keeps_one_timer(self):
        timer = FakeTimer()
        scheduler = RefreshScheduler(GatedCycle(), timer=timer)

        scheduler.enable_auto_refresh()
        scheduler.enable_auto_refresh()

        assert len(timer.handles) == 1

    @pytest.mark.asyncio
    async def test_tick_starts_cycle(self):
        cycle = GatedCycle()
        timer = FakeTimer()
        scheduler = RefreshScheduler(cycle, timer=timer)
        scheduler.enable_auto_refresh()

        timer.handles[0].fire()
        await settle()

        assert cycle.calls == 1
        assert scheduler.state == SchedulerState.AUTO_FETCHING

        cycle.release()
        await scheduler.wait_idle()
        assert scheduler.state == SchedulerState.AUTO_IDLE

    @pytest.mark.asyncio
    async def test_tick_in_flight_is_dropped(self):
        cycle = GatedCycle()
        timer = FakeTimer()
        scheduler = RefreshScheduler(cycle, timer=timer)
        scheduler.enable_auto_refresh()

        timer.handles[0].fire()
        await settle()
        assert scheduler.tick() is False
        timer.handles[0].fire()

        cycle.release()
        await scheduler.wait_idle()

        assert cycle.calls == 1

    @pytest.mark.asyncio
    async def test_disable_mid_flight_still_completes_cycle(self):
        cycle = GatedCycle()
        timer = FakeTimer()
        scheduler = RefreshScheduler(cycle, timer=timer)
        scheduler.enable_auto_refresh()
        timer.handles[0].fire()
        await settle()

        scheduler.disable_auto_refresh()

        assert timer.handles[0].cancelled is True
        assert scheduler.state == SchedulerState.FETCHING

        cycle.release()
        await scheduler.wait_idle()
        timer.handles[0].fire()
        await settle()

        assert cycle.calls == 1
        assert scheduler.state == SchedulerState.IDLE

    @pytest.mark.asyncio
    async def test_re_enable_creates_fresh_timer(self):
        timer = FakeTimer()
        scheduler = RefreshScheduler(GatedCycle(), timer=timer)

        scheduler.enable_auto_refresh()
        scheduler.disable_auto_refresh()
        scheduler.enable_auto_refresh()

        assert len(timer.handles) == 2
        assert timer.handles[0].cancelled is True
        assert timer.handles[1].cancelled is False
        assert scheduler.session.timer_handle is timer.handles[1]

    @pytest.mark.asyncio
    async def test_toggle_reports_status(self):
        reporter = MagicMock()
        scheduler = RefreshScheduler(
            GatedCycle(), timer=FakeTimer(), interval_seconds=10,
            status_reporter=reporter,
        )

        assert scheduler.toggle_auto_refresh() is True
        assert scheduler.toggle_auto_refresh() is False

        messages = [c.args[0] for c in reporter.report.call_args_list]
        assert messages == [
            "Auto-refresh enabled (every 10 seconds)",
            "Auto-refresh disabled",
        ]

    @pytest.mark.asyncio
    async def test_close_cancels_timer(self):
        timer = FakeTimer()
        session = RefreshSession()
        scheduler = RefreshScheduler(GatedCycle(), timer=timer, session=session)
        scheduler.enable_auto_refresh()

        await scheduler.close()

        assert timer.handles[0].cancelled is True
        assert session.auto_refresh is False
        assert session.timer_handle is None


class TestAsyncioTimer:
    """Tests for the event-loop backed timer."""

    @pytest.mark.asyncio
    async def test_fires_repeatedly_until_cancelled(self):
        calls = []
        handle = AsyncioTimer().schedule_repeating(0.01, lambda: calls.append(1))

        await asyncio.sleep(0.1)
        handle.cancel()
        fired = len(calls)
        await asyncio.sleep(0.05)

        assert fired >= 2
        assert len(calls) == fired
        assert handle.cancelled is True

    @pytest.mark.asyncio
    async def test_drives_scheduler_ticks(self):
        calls = []

        async def cycle():
            calls.append(1)

        scheduler = RefreshScheduler(cycle, interval_seconds=0.01)
        scheduler.enable_auto_refresh()
        await asyncio.sleep(0.1)
        await scheduler.close()
        fired = len(calls)
        await asyncio.sleep(0.05)

        assert fired >= 2
        assert len(calls) == fired
