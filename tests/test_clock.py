"""
Simulation Clock Tests
======================
"""

import asyncio
import math
import random

import pytest

from edge_viewer.models.stats import FrameStats
from edge_viewer.simulation.clock import DEFAULT_TICK_RATE_HZ, SimulationClock


# One tick per 1000s: the timer never fires while a test drives tick() by hand
MANUAL_TICK_RATE_HZ = 0.001


class Recorder:
    """Collects (stats, redraw) notifications."""

    def __init__(self) -> None:
        self.events = []

    def __call__(self, stats: FrameStats, redraw: bool) -> None:
        self.events.append((stats, redraw))


def run_started(clock: SimulationClock, body):
    """Run body() inside an event loop while the clock is started."""

    async def scenario():
        clock.start()
        try:
            return body()
        finally:
            clock.stop()

    return asyncio.run(scenario())


def manual_clock(**kwargs) -> SimulationClock:
    return SimulationClock(tick_rate_hz=MANUAL_TICK_RATE_HZ, **kwargs)


class TestLifecycle:
    """Tests for start/stop/reset state handling."""

    def test_created_idle(self):
        """Verify a new clock is idle with zeroed stats."""
        clock = SimulationClock()
        stats = clock.snapshot()

        assert clock.running is False
        assert stats.simulating is False
        assert stats.frame_count == 0
        assert stats.frames_per_second == 0.0
        assert stats.processing_time_ms == 0.0
        assert stats.resolution_label == "640x480"

    def test_default_rate(self):
        """Verify the nominal rate is 15 ticks per second."""
        clock = SimulationClock()
        assert DEFAULT_TICK_RATE_HZ == 15.0
        assert clock.period_seconds == pytest.approx(1 / 15)

    def test_tick_while_idle_is_noop(self, fake_clock):
        """Verify tick() does nothing before start()."""
        recorder = Recorder()
        clock = SimulationClock(now_ms=fake_clock)
        clock.add_listener(recorder)

        assert clock.tick() is None
        assert clock.snapshot().frame_count == 0
        assert recorder.events == []

    def test_stop_while_idle_is_noop(self):
        """Verify stop() on an idle clock leaves it idle."""
        clock = SimulationClock()
        clock.stop()
        assert clock.running is False

    def test_start_twice_keeps_single_timer(self):
        """Verify a second start() does not spawn another timer."""
        async def scenario():
            clock = SimulationClock()
            clock.start()
            first_task = clock._task
            clock.start()
            same = clock._task is first_task
            clock.stop()
            return same

        assert asyncio.run(scenario()) is True

    def test_start_requires_event_loop(self):
        """Verify start() outside an event loop fails and stays idle."""
        clock = SimulationClock()
        with pytest.raises(RuntimeError):
            clock.start()
        assert clock.running is False

    def test_invalid_arguments(self):
        """Verify non-positive rates and inverted ranges are rejected."""
        with pytest.raises(ValueError):
            SimulationClock(tick_rate_hz=0)
        with pytest.raises(ValueError):
            SimulationClock(processing_time_range_ms=(10.0, 5.0))

    def test_idle_after_event_loop_shutdown(self):
        """Verify a clock left running when its loop ends reports idle."""
        clock = SimulationClock()

        async def scenario():
            clock.start()
            await asyncio.sleep(0.1)

        asyncio.run(scenario())

        assert clock.running is False
        assert clock.snapshot().simulating is False

    def test_idle_when_loop_ends_before_first_step(self):
        """Verify a timer cancelled before it ever ran leaves the clock idle."""
        clock = SimulationClock()

        async def scenario():
            clock.start()

        asyncio.run(scenario())

        assert clock.running is False

    def test_restart_in_new_event_loop(self):
        """Verify ticks fire again after the previous loop shut down mid-run."""
        clock = SimulationClock()

        async def first_run():
            clock.start()
            await asyncio.sleep(0.1)

        async def second_run():
            clock.start()
            await asyncio.sleep(0.3)
            running = clock.running
            clock.stop()
            return running

        asyncio.run(first_run())
        before = clock.snapshot().frame_count

        assert asyncio.run(second_run()) is True
        assert clock.snapshot().frame_count > before


class TestTick:
    """Tests for tick arithmetic with injected time and randomness."""

    def test_tick_updates_stats(self, fake_clock, fixed_random):
        """Verify FPS, frame count and processing time after each tick."""
        clock = manual_clock(rng=fixed_random, now_ms=fake_clock)

        def body():
            fake_clock.advance(50.0)
            first = clock.tick()
            fake_clock.advance(100.0)
            return first, clock.tick()

        first, second = run_started(clock, body)

        assert first.frame_count == 1
        assert first.frames_per_second == pytest.approx(20.0)
        assert first.processing_time_ms == pytest.approx(5.0)
        assert first.simulating is True

        assert second.frame_count == 2
        assert second.frames_per_second == pytest.approx(10.0)
        assert second.processing_time_ms == pytest.approx(15.0)

    def test_zero_elapsed_guard(self, fake_clock, fixed_random):
        """Verify zero elapsed time yields FPS 0 instead of dividing by zero."""
        clock = manual_clock(rng=fixed_random, now_ms=fake_clock)

        stats = run_started(clock, clock.tick)

        assert stats.frames_per_second == 0.0
        assert stats.frame_count == 1

    def test_frame_count_increments_by_one(self, fake_clock):
        """Verify frame_count grows by exactly one per tick."""
        clock = manual_clock(now_ms=fake_clock)

        def body():
            counts = []
            for _ in range(10):
                fake_clock.advance(66.0)
                counts.append(clock.tick().frame_count)
            return counts

        assert run_started(clock, body) == list(range(1, 11))

    def test_fps_finite_and_non_negative(self, fake_clock):
        """Verify FPS is finite and non-negative for any positive elapsed time."""
        clock = manual_clock(now_ms=fake_clock)

        def body():
            values = []
            for elapsed in (0.001, 1.0, 66.67, 5000.0):
                fake_clock.advance(elapsed)
                values.append(clock.tick().frames_per_second)
            return values

        for fps in run_started(clock, body):
            assert math.isfinite(fps)
            assert fps >= 0

    def test_processing_time_in_range(self, fake_clock):
        """Verify sampled processing times stay within [5, 25)."""
        clock = manual_clock(rng=random.Random(99), now_ms=fake_clock)

        def body():
            values = []
            for _ in range(200):
                fake_clock.advance(66.0)
                values.append(clock.tick().processing_time_ms)
            return values

        for value in run_started(clock, body):
            assert 5.0 <= value < 25.0

    def test_listeners_get_redraw_cue(self, fake_clock, fixed_random):
        """Verify each tick notifies listeners with redraw=True."""
        recorder = Recorder()
        clock = manual_clock(rng=fixed_random, now_ms=fake_clock)
        clock.add_listener(recorder)

        def body():
            fake_clock.advance(66.0)
            clock.tick()

        run_started(clock, body)

        assert len(recorder.events) == 1
        stats, redraw = recorder.events[0]
        assert redraw is True
        assert stats.frame_count == 1

    def test_remove_listener(self, fake_clock):
        """Verify removed listeners are no longer notified."""
        recorder = Recorder()
        clock = manual_clock(now_ms=fake_clock)
        clock.add_listener(recorder)
        clock.remove_listener(recorder)

        run_started(clock, clock.tick)
        assert recorder.events == []


class TestReset:
    """Tests for reset()."""

    def test_reset_zeroes_stats(self, fake_clock, fixed_random):
        """Verify reset zeroes stats without stopping the clock."""
        recorder = Recorder()
        clock = manual_clock(rng=fixed_random, now_ms=fake_clock)
        clock.add_listener(recorder)

        def body():
            for _ in range(3):
                fake_clock.advance(66.0)
                clock.tick()
            return clock.reset(), clock.running

        stats, still_running = run_started(clock, body)

        assert stats.frame_count == 0
        assert stats.frames_per_second == 0.0
        assert stats.processing_time_ms == 0.0
        assert still_running is True
        assert recorder.events[-1] == (stats, False)

    def test_count_restarts_after_reset(self, fake_clock):
        """Verify the first tick after reset reports frame_count 1."""
        clock = manual_clock(now_ms=fake_clock)

        def body():
            fake_clock.advance(66.0)
            clock.tick()
            clock.reset()
            fake_clock.advance(66.0)
            return clock.tick()

        assert run_started(clock, body).frame_count == 1

    def test_reset_while_idle(self):
        """Verify reset works on an idle clock and keeps it idle."""
        clock = SimulationClock()
        stats = clock.reset()
        assert stats.frame_count == 0
        assert clock.running is False


class TestRecordExternal:
    """Tests for merging externally produced statistics."""

    def test_merges_values(self):
        """Verify external stats replace FPS/processing time and count a frame."""
        recorder = Recorder()
        clock = SimulationClock()
        clock.add_listener(recorder)

        stats = clock.record_external(fps=29.5, processing_time_ms=7.25)

        assert stats.frames_per_second == 29.5
        assert stats.processing_time_ms == 7.25
        assert stats.frame_count == 1
        assert recorder.events[-1] == (stats, True)

    def test_negative_values_clamped(self):
        """Verify negative external values are clamped to zero."""
        clock = SimulationClock()
        stats = clock.record_external(fps=-1.0, processing_time_ms=-3.0)

        assert stats.frames_per_second == 0.0
        assert stats.processing_time_ms == 0.0


class TestTimer:
    """Tests against the real asyncio timer."""

    def test_first_tick_within_200ms(self):
        """Verify at least one tick fires within 200ms of start()."""
        async def scenario():
            fired = asyncio.Event()
            clock = SimulationClock()
            clock.add_listener(lambda stats, redraw: fired.set())

            clock.start()
            try:
                await asyncio.wait_for(fired.wait(), timeout=0.2)
            finally:
                clock.stop()
            return clock.snapshot()

        stats = asyncio.run(scenario())
        assert stats.frame_count >= 1
        assert stats.simulating is False

    def test_no_ticks_after_stop(self):
        """Verify no tick fires in a 500ms window after stop()."""
        async def scenario():
            recorder = Recorder()
            clock = SimulationClock()
            clock.add_listener(recorder)

            clock.start()
            await asyncio.sleep(0.15)
            clock.stop()
            count_at_stop = len(recorder.events)

            await asyncio.sleep(0.5)
            return count_at_stop, len(recorder.events)

        at_stop, after_window = asyncio.run(scenario())
        assert at_stop >= 1
        assert after_window == at_stop

    def test_stop_then_restart(self):
        """Verify the clock ticks again after stop() and start()."""
        async def scenario():
            recorder = Recorder()
            clock = SimulationClock()
            clock.add_listener(recorder)

            clock.start()
            await asyncio.sleep(0.1)
            clock.stop()
            first = len(recorder.events)

            clock.start()
            await asyncio.sleep(0.15)
            clock.stop()
            return first, len(recorder.events)

        first, total = asyncio.run(scenario())
        assert total > first

    def test_failing_listener_does_not_stop_timer(self):
        """Verify a raising listener is logged and ticks continue."""
        calls = []

        def flaky(stats, redraw):
            calls.append(stats.frame_count)
            if len(calls) == 1:
                raise RuntimeError("listener failure")

        async def scenario():
            clock = SimulationClock()
            clock.add_listener(flaky)
            clock.start()
            await asyncio.sleep(0.3)
            clock.stop()

        asyncio.run(scenario())
        assert len(calls) >= 2
