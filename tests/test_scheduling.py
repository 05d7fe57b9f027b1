"""Tests for the injectable clock, scheduler and debouncer."""

import asyncio

import pytest

from split_wizard.scheduling import AsyncioScheduler, Debouncer, ManualScheduler


class TestManualScheduler:

    def test_time_moves_only_on_advance(self):
        scheduler = ManualScheduler(start=10.0)
        assert scheduler.now() == 10.0
        scheduler.advance(2.5)
        assert scheduler.now() == 12.5

    def test_callbacks_run_in_deadline_order(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(0.3, lambda: calls.append("late"))
        scheduler.call_later(0.1, lambda: calls.append("early"))
        scheduler.call_later(0.1, lambda: calls.append("early-second"))

        scheduler.advance(0.2)
        assert calls == ["early", "early-second"]

        scheduler.advance(0.2)
        assert calls == ["early", "early-second", "late"]

    def test_callback_sees_its_deadline(self):
        scheduler = ManualScheduler()
        seen = []
        scheduler.call_later(0.5, lambda: seen.append(scheduler.now()))
        scheduler.advance(2.0)
        assert seen == [0.5]

    def test_cancelled_timer_does_not_run(self):
        scheduler = ManualScheduler()
        calls = []
        handle = scheduler.call_later(0.1, lambda: calls.append(1))
        handle.cancel()
        assert scheduler.pending == 0
        scheduler.advance(1.0)
        assert calls == []


class TestDebouncer:

    def test_burst_fires_once(self):
        scheduler = ManualScheduler()
        calls = []
        debouncer = Debouncer(lambda: calls.append(scheduler.now()), 0.1, scheduler)

        debouncer.trigger()
        scheduler.advance(0.05)
        debouncer.trigger()
        assert debouncer.pending

        scheduler.advance(0.2)
        assert len(calls) == 1
        assert not debouncer.pending

    def test_flush_fires_now(self):
        scheduler = ManualScheduler()
        calls = []
        debouncer = Debouncer(lambda: calls.append(1), 0.1, scheduler)

        debouncer.trigger()
        debouncer.flush()
        scheduler.advance(1.0)

        assert calls == [1]

    def test_flush_without_pending_is_noop(self):
        calls = []
        Debouncer(lambda: calls.append(1), 0.1, ManualScheduler()).flush()
        assert calls == []

    def test_cancel(self):
        scheduler = ManualScheduler()
        calls = []
        debouncer = Debouncer(lambda: calls.append(1), 0.1, scheduler)
        debouncer.trigger()
        debouncer.cancel()
        scheduler.advance(1.0)
        assert calls == []

    @pytest.mark.parametrize("delay,scheduler", [(0.1, None), (0.0, ManualScheduler())])
    def test_immediate_without_delay(self, delay, scheduler):
        calls = []
        Debouncer(lambda: calls.append(1), delay, scheduler).trigger()
        assert calls == [1]


class TestAsyncioScheduler:

    def test_runs_on_event_loop(self):
        async def scenario():
            scheduler = AsyncioScheduler()
            fired = asyncio.Event()
            calls = []
            debouncer = Debouncer(lambda: (calls.append(1), fired.set()), 0.01, scheduler)
            debouncer.trigger()
            debouncer.trigger()
            await asyncio.wait_for(fired.wait(), timeout=1.0)
            return calls

        assert asyncio.run(scenario()) == [1]

    def test_needs_running_loop(self):
        with pytest.raises(RuntimeError):
            AsyncioScheduler()
