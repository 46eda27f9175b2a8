"""
Simulation Clock
================

Periodic driver that models a live video pipeline without a real source.

At a nominal 15 ticks per second the clock:
    - Measures the real elapsed time since the previous tick
    - Derives instantaneous FPS = 1000 / elapsed_ms (0 if elapsed <= 0)
    - Increments the frame counter
    - Samples a processing time uniformly from [5, 25) ms
    - Pushes the new FrameStats snapshot to its listeners

Concurrency:
    Everything runs on one asyncio event loop. The periodic trigger is a
    background task that sleeps between ticks; stop() clears the running
    flag and cancels the task. The loop re-checks the flag after every
    sleep, so a wakeup that was already queued when stop() ran is a no-op.

Design Rules:
    - The clock is the ONLY writer of FrameStats
    - Time source and random source are injectable for deterministic tests
    - No error states; clock-resolution anomalies are absorbed by the FPS guard
"""

import asyncio
import logging
import random
import time
from typing import Callable, List, Optional, Protocol, Tuple

from edge_viewer.models.stats import FrameStats


logger = logging.getLogger(__name__)


DEFAULT_TICK_RATE_HZ = 15.0
DEFAULT_PROCESSING_TIME_RANGE_MS = (5.0, 25.0)
DEFAULT_RESOLUTION_LABEL = "640x480"


class RandomSource(Protocol):
    """Anything with a random() method returning a float in [0, 1)."""

    def random(self) -> float:
        ...


StatsListener = Callable[[FrameStats, bool], None]


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class SimulationClock:
    """
    Timer-driven frame statistics simulator.

    Listeners are called as listener(stats, redraw). redraw is True when a
    new frame should be drawn (tick or external frame) and False when only
    the numbers changed (reset).

    Attributes:
        tick_rate_hz: Nominal ticks per second
        resolution_label: Reported display resolution
        processing_time_range_ms: (low, high) bounds for sampled processing time

    Example:
        clock = SimulationClock(rng=random.Random(42))
        clock.add_listener(lambda stats, redraw: print(stats.frame_count))

        clock.start()          # inside a running event loop
        await asyncio.sleep(1)
        clock.stop()
    """

    def __init__(
        self,
        tick_rate_hz: float = DEFAULT_TICK_RATE_HZ,
        resolution_label: str = DEFAULT_RESOLUTION_LABEL,
        processing_time_range_ms: Tuple[float, float] = DEFAULT_PROCESSING_TIME_RANGE_MS,
        rng: Optional[RandomSource] = None,
        now_ms: Optional[Callable[[], float]] = None,
    ) -> None:
        """
        Initialize an idle simulation clock.

        Args:
            tick_rate_hz: Nominal tick rate. Must be > 0.
            resolution_label: Resolution reported in every snapshot
            processing_time_range_ms: Sampling range [low, high) for processing time
            rng: Random source for processing time (default: random.Random())
            now_ms: Monotonic time source in milliseconds
        """
        if tick_rate_hz <= 0:
            raise ValueError("tick_rate_hz must be positive")
        low, high = processing_time_range_ms
        if low < 0 or high < low:
            raise ValueError("processing_time_range_ms must satisfy 0 <= low <= high")

        self.tick_rate_hz = tick_rate_hz
        self.resolution_label = resolution_label
        self.processing_time_range_ms = (float(low), float(high))

        self._rng: RandomSource = rng if rng is not None else random.Random()
        self._now_ms: Callable[[], float] = now_ms if now_ms is not None else _monotonic_ms

        # State
        self._running: bool = False
        self._last_tick_ms: float = 0.0
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[StatsListener] = []

        # Stats
        self._fps: float = 0.0
        self._frame_count: int = 0
        self._processing_time_ms: float = 0.0

    @property
    def running(self) -> bool:
        """Whether the periodic trigger is active."""
        if self._running and (self._task is None or self._task.done()):
            # Timer ended without stop(), e.g. its event loop shut down
            self._running = False
            self._task = None
        return self._running

    @property
    def period_seconds(self) -> float:
        """Nominal interval between ticks."""
        return 1.0 / self.tick_rate_hz

    def add_listener(self, listener: StatsListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StatsListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def snapshot(self) -> FrameStats:
        """Current statistics as an immutable snapshot."""
        return FrameStats(
            frames_per_second=self._fps,
            frame_count=self._frame_count,
            processing_time_ms=self._processing_time_ms,
            resolution_label=self.resolution_label,
            simulating=self.running,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """
        Start firing ticks.

        No-op if already running. Must be called from within a running
        asyncio event loop. A timer whose task has already finished (for
        example cancelled when its event loop shut down) counts as idle.
        """
        if self.running:
            return

        loop = asyncio.get_running_loop()
        self._running = True
        self._last_tick_ms = self._now_ms()
        self._task = loop.create_task(self._run())

        logger.info(f"Simulation started at {self.tick_rate_hz:.1f} Hz")

    def stop(self) -> None:
        """
        Stop firing ticks.

        No-op if already idle. No tick runs after this returns.
        """
        if not self.running:
            return

        self._running = False
        if self._task is not None:
            self._task.cancel()
            self._task = None

        logger.info(f"Simulation stopped after {self._frame_count} frames")

    def reset(self) -> FrameStats:
        """
        Zero the frame counter, FPS and processing time.

        Does not stop a running clock.
        """
        self._frame_count = 0
        self._fps = 0.0
        self._processing_time_ms = 0.0

        logger.info("Stats reset")

        stats = self.snapshot()
        self._notify(stats, redraw=False)
        return stats

    # =========================================================================
    # Ticks
    # =========================================================================

    def tick(self) -> Optional[FrameStats]:
        """
        Advance the simulation by one frame.

        Returns:
            The new snapshot, or None if the clock is idle.
        """
        if not self.running:
            return None

        now = self._now_ms()
        elapsed = now - self._last_tick_ms

        self._fps = 1000.0 / elapsed if elapsed > 0 else 0.0
        self._frame_count += 1
        self._processing_time_ms = self._sample_processing_time()
        self._last_tick_ms = now

        stats = self.snapshot()
        self._notify(stats, redraw=True)
        return stats

    def record_external(self, fps: float, processing_time_ms: float) -> FrameStats:
        """
        Merge statistics from an externally produced frame.

        Args:
            fps: Producer-reported frames per second
            processing_time_ms: Producer-reported processing time

        Returns:
            The new snapshot
        """
        self._fps = max(0.0, float(fps))
        self._processing_time_ms = max(0.0, float(processing_time_ms))
        self._frame_count += 1

        stats = self.snapshot()
        self._notify(stats, redraw=True)
        return stats

    def _sample_processing_time(self) -> float:
        low, high = self.processing_time_range_ms
        return low + self._rng.random() * (high - low)

    def _notify(self, stats: FrameStats, redraw: bool) -> None:
        for listener in list(self._listeners):
            listener(stats, redraw)

    async def _run(self) -> None:
        """Periodic trigger loop."""
        period = self.period_seconds
        try:
            while self._running:
                await asyncio.sleep(period)
                if not self._running:
                    break
                try:
                    self.tick()
                except Exception:
                    logger.exception("Stats listener failed during tick")
        finally:
            # Cancelled from outside stop(), e.g. event loop shutdown
            if self._task is asyncio.current_task():
                self._running = False
                self._task = None
