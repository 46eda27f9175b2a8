"""
Simulation Module
=================

Stand-ins for a live video pipeline.

This module provides:
    - SimulationClock: Timer-driven FrameStats producer
    - SampleRenderer: Synthetic before/after frame pair
"""

from edge_viewer.simulation.clock import (
    DEFAULT_PROCESSING_TIME_RANGE_MS,
    DEFAULT_TICK_RATE_HZ,
    RandomSource,
    SimulationClock,
)
from edge_viewer.simulation.sample import SampleRenderer

__all__ = [
    "SimulationClock",
    "RandomSource",
    "DEFAULT_TICK_RATE_HZ",
    "DEFAULT_PROCESSING_TIME_RANGE_MS",
    "SampleRenderer",
]
