"""
Tests for the auto-refresh scheduler state machine.

Async code is driven with asyncio.run; intervals are shortened so ticks
fire within the test.
"""

import asyncio

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from metrics_url_input.config import RefreshConfig
from metrics_url_input.enums import RefreshState
from metrics_url_input.exceptions import SchedulerError
from metrics_url_input.scheduler import RefreshScheduler


URL = "https://server.example.com/metrics"

FAST = RefreshConfig(interval_seconds=0.01)
SLOW = RefreshConfig(interval_seconds=100.0)


class CountingCycle:
    """Async cycle that counts invocations and can be held open."""

    def __init__(self, hold: bool = False) -> None:
        self.calls = 0
        self._hold = hold
        self._release: asyncio.Event = None

    async def __call__(self) -> None:
        self.calls += 1
        if self._hold:
            if self._release is None:
                self._release = asyncio.Event()
            await self._release.wait()

    def release(self) -> None:
        if self._release is not None:
            self._release.set()


class TestArming:
    """Transitions between DISABLED and ARMED."""

    def test_initial_state_is_disabled(self) -> None:
        scheduler = RefreshScheduler(cycle=CountingCycle())

        assert scheduler.state == RefreshState.DISABLED
        assert scheduler.session is None
        assert scheduler.interval_seconds == 10.0

    def test_enabled_with_valid_url_arms(self) -> None:
        async def run():
            scheduler = RefreshScheduler(cycle=CountingCycle(), config=SLOW)
            state = scheduler.sync(True, URL)
            handle = scheduler.session.timer_handle
            scheduler.close()
            return state, handle

        state, handle = asyncio.run(run())

        assert state == RefreshState.ARMED
        assert handle is not None

    @pytest.mark.parametrize("url", ["", "not a url", "server.example.com", "https://"])
    def test_invalid_url_is_silently_inert(self, url: str) -> None:
        scheduler = RefreshScheduler(cycle=CountingCycle())

        # No event loop is needed when nothing is armed
        assert scheduler.sync(True, url) == RefreshState.DISABLED

    def test_disabled_toggle_never_arms(self) -> None:
        scheduler = RefreshScheduler(cycle=CountingCycle())

        assert scheduler.sync(False, URL) == RefreshState.DISABLED

    def test_arming_requires_running_loop(self) -> None:
        scheduler = RefreshScheduler(cycle=CountingCycle())

        with pytest.raises(RuntimeError):
            scheduler.sync(True, URL)


class TestReArming:
    """Dependency changes cancel the timer and re-arm from scratch."""

    def test_unchanged_dependencies_keep_the_same_timer(self) -> None:
        async def run():
            scheduler = RefreshScheduler(cycle=CountingCycle(), config=SLOW)
            scheduler.sync(True, URL)
            first = scheduler.session
            scheduler.sync(True, URL)
            second = scheduler.session
            scheduler.close()
            return first, second

        first, second = asyncio.run(run())

        assert first is second

    def test_disable_then_enable_rearms_without_duplicate_timers(self) -> None:
        async def run():
            scheduler = RefreshScheduler(cycle=CountingCycle(), config=SLOW)
            scheduler.sync(True, URL)
            old_handle = scheduler.session.timer_handle
            scheduler.sync(False, URL)
            assert scheduler.state == RefreshState.DISABLED
            scheduler.sync(True, URL)
            new_handle = scheduler.session.timer_handle
            await asyncio.gather(old_handle, return_exceptions=True)
            result = (old_handle.cancelled(), new_handle.done(), scheduler.state)
            scheduler.close()
            return result

        old_cancelled, new_done, state = asyncio.run(run())

        assert old_cancelled
        assert not new_done
        assert state == RefreshState.ARMED

    @given(
        changes=st.lists(
            st.tuples(st.booleans(), st.sampled_from([URL, "http://localhost:9090/metrics", "bad"]), st.booleans()),
            min_size=1,
            max_size=12,
        )
    )
    @settings(max_examples=50, deadline=None)
    def test_at_most_one_live_timer(self, changes) -> None:
        """Whatever the sequence of dependency changes, one timer at most stays live."""

        async def run():
            scheduler = RefreshScheduler(cycle=CountingCycle(), config=SLOW)
            handles = []
            for enabled, url, loading in changes:
                scheduler.sync(enabled, url, loading)
                if scheduler.session is not None:
                    handles.append(scheduler.session.timer_handle)
            await asyncio.sleep(0)
            live = [h for h in set(handles) if not h.done()]
            expected_armed = changes[-1][0] and changes[-1][1] != "bad"
            state = scheduler.state
            scheduler.close()
            await asyncio.sleep(0)
            return live, expected_armed, state, handles

        live, expected_armed, state, handles = asyncio.run(run())

        assert len(live) == (1 if expected_armed else 0)
        assert state == (RefreshState.ARMED if expected_armed else RefreshState.DISABLED)
        assert all(h.done() for h in handles)

    def test_loading_change_rearms(self) -> None:
        async def run():
            scheduler = RefreshScheduler(cycle=CountingCycle(), config=SLOW)
            scheduler.sync(True, URL, False)
            first = scheduler.session
            scheduler.sync(True, URL, True)
            second = scheduler.session
            scheduler.close()
            return first, second

        first, second = asyncio.run(run())

        assert first is not second
        assert not first.enabled


class TestTicking:
    """Ticks run the cycle and never overlap."""

    def test_armed_scheduler_ticks_repeatedly(self) -> None:
        cycle = CountingCycle()

        async def run():
            scheduler = RefreshScheduler(cycle=cycle, config=FAST)
            scheduler.sync(True, URL)
            await asyncio.sleep(0.15)
            scheduler.close()
            await scheduler.wait_idle()

        asyncio.run(run())

        assert cycle.calls >= 2

    def test_busy_ticks_are_dropped(self) -> None:
        cycle = CountingCycle()

        async def run():
            scheduler = RefreshScheduler(cycle=cycle, is_busy=lambda: True, config=FAST)
            scheduler.sync(True, URL)
            await asyncio.sleep(0.1)
            session = scheduler.session
            scheduler.close()
            return session

        session = asyncio.run(run())

        assert cycle.calls == 0
        assert session.skipped_ticks >= 1
        assert session.skipped_ticks == session.tick_count

    def test_tick_during_in_flight_cycle_is_skipped_not_queued(self) -> None:
        cycle = CountingCycle(hold=True)

        async def run():
            scheduler = RefreshScheduler(cycle=cycle, config=SLOW)
            scheduler.sync(True, URL)
            started = scheduler.tick()
            await asyncio.sleep(0)
            skipped = [scheduler.tick() for _ in range(3)]
            in_flight = scheduler.in_flight
            cycle.release()
            await scheduler.wait_idle()
            after = scheduler.tick()
            await asyncio.sleep(0)
            cycle.release()
            await scheduler.wait_idle()
            session = scheduler.session
            scheduler.close()
            return started, skipped, in_flight, after, session

        started, skipped, in_flight, after, session = asyncio.run(run())

        assert started
        assert skipped == [False, False, False]
        assert in_flight
        assert after
        assert cycle.calls == 2
        assert session.tick_count == 5
        assert session.skipped_ticks == 3

    def test_failed_cycle_keeps_ticking(self) -> None:
        calls = []

        async def failing_cycle() -> None:
            calls.append(1)
            raise RuntimeError("probe exploded")

        async def run():
            scheduler = RefreshScheduler(cycle=failing_cycle, config=FAST)
            scheduler.sync(True, URL)
            await asyncio.sleep(0.15)
            state = scheduler.state
            scheduler.close()
            await scheduler.wait_idle()
            return state

        state = asyncio.run(run())

        assert len(calls) >= 2
        assert state == RefreshState.ARMED

    def test_tick_without_session_does_nothing(self) -> None:
        cycle = CountingCycle()
        scheduler = RefreshScheduler(cycle=cycle)

        assert scheduler.tick() is False
        assert cycle.calls == 0


class TestTeardown:
    """Closing the scheduler is terminal."""

    def test_close_cancels_timer_and_stops_ticks(self) -> None:
        cycle = CountingCycle()

        async def run():
            scheduler = RefreshScheduler(cycle=cycle, config=FAST)
            scheduler.sync(True, URL)
            handle = scheduler.session.timer_handle
            scheduler.close()
            calls_at_close = cycle.calls
            await asyncio.sleep(0.05)
            return scheduler, handle, calls_at_close

        scheduler, handle, calls_at_close = asyncio.run(run())

        assert scheduler.state == RefreshState.CLOSED
        assert handle.done()
        assert cycle.calls == calls_at_close

    def test_sync_after_close_raises(self) -> None:
        scheduler = RefreshScheduler(cycle=CountingCycle())
        scheduler.close()

        with pytest.raises(SchedulerError):
            scheduler.sync(True, URL)

    def test_close_is_idempotent(self) -> None:
        scheduler = RefreshScheduler(cycle=CountingCycle())

        scheduler.close()
        scheduler.close()

        assert scheduler.state == RefreshState.CLOSED
