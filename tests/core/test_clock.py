"""
Tests for the Clock implementations.
"""

import asyncio

import pytest

from dryer_occupancy.core.clock import AsyncioClock, ManualClock, TimerHandle


class TestManualClock:
    """Deterministic clock behaviour."""

    def test_starts_at_given_instant(self):
        assert ManualClock().now() == 0
        assert ManualClock(start_ms=5_000).now() == 5_000

    def test_fires_due_timers_only(self):
        clock = ManualClock()
        fired = []
        clock.after(100, lambda: fired.append("a"))
        clock.after(300, lambda: fired.append("b"))

        assert clock.advance(200) == 1
        assert fired == ["a"]
        assert clock.now() == 200

        clock.advance(100)
        assert fired == ["a", "b"]

    def test_fires_in_deadline_order_then_schedule_order(self):
        clock = ManualClock()
        fired = []
        clock.after(200, lambda: fired.append("late"))
        clock.after(100, lambda: fired.append("first"))
        clock.after(100, lambda: fired.append("second"))

        clock.advance(500)

        assert fired == ["first", "second", "late"]

    def test_now_reports_deadline_inside_callback(self):
        clock = ManualClock()
        seen = []
        clock.after(250, lambda: seen.append(clock.now()))

        clock.advance(1_000)

        assert seen == [250]
        assert clock.now() == 1_000

    def test_cancelled_timer_never_fires(self):
        clock = ManualClock()
        fired = []
        handle = clock.after(100, lambda: fired.append(True))

        clock.cancel(handle)
        clock.advance(1_000)

        assert fired == []
        assert handle.cancelled is True
        assert clock.pending() == []

    def test_cancel_from_earlier_callback_at_same_deadline(self):
        clock = ManualClock()
        fired = []
        handles = {}
        clock.after(100, lambda: clock.cancel(handles["victim"]))
        handles["victim"] = clock.after(100, lambda: fired.append(True))

        clock.advance(100)

        assert fired == []

    def test_callback_can_schedule_more_work(self):
        clock = ManualClock()
        fired = []
        clock.after(100, lambda: clock.after(50, lambda: fired.append(clock.now())))

        clock.advance(200)

        assert fired == [150]

    def test_cannot_go_backwards(self):
        clock = ManualClock(start_ms=100)

        with pytest.raises(ValueError):
            clock.advance(-1)
        with pytest.raises(ValueError):
            clock.advance_to(50)

    def test_cancel_none_is_ignored(self):
        ManualClock().cancel(None)


class TestTimerHandle:
    """Handle bookkeeping."""

    def test_runs_once(self):
        calls = []
        handle = TimerHandle(10, lambda: calls.append(1))

        handle._run()
        handle._run()

        assert calls == [1]
        assert handle.fired is True
        assert handle.active is False

    def test_cancel_is_idempotent(self):
        handle = TimerHandle(10, lambda: None)

        handle.cancel()
        handle.cancel()

        assert handle.cancelled is True
        assert "cancelled" in repr(handle)


class TestAsyncioClock:
    """Event-loop backed clock."""

    def test_fires_after_delay(self):
        async def scenario():
            clock = AsyncioClock()
            fired = asyncio.Event()
            start = clock.now()
            clock.after(20, fired.set)
            await asyncio.wait_for(fired.wait(), timeout=1)
            return clock.now() - start

        elapsed = asyncio.run(scenario())
        assert elapsed >= 15

    def test_cancelled_timer_never_fires(self):
        async def scenario():
            clock = AsyncioClock()
            fired = []
            handle = clock.after(10, lambda: fired.append(True))
            clock.cancel(handle)
            await asyncio.sleep(0.05)
            return fired

        assert asyncio.run(scenario()) == []

    def test_late_dispatch_after_cancel_is_dropped(self):
        async def scenario():
            clock = AsyncioClock()
            fired = []
            handle = clock.after(0, lambda: fired.append(True))
            # Simulate the loop having already dequeued the callback
            handle.cancelled = True
            await asyncio.sleep(0.01)
            return fired

        assert asyncio.run(scenario()) == []
