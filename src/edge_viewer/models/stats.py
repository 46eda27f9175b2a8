"""
Frame Statistics Model
======================

Snapshot of the streaming statistics shown next to the frame pair.

Snapshots are immutable. The SimulationClock is the only writer; every
change produces a new FrameStats that is pushed to listeners.
"""

from pydantic import BaseModel, ConfigDict, Field


class FrameStats(BaseModel):
    """
    Statistics snapshot for the displayed stream.

    Attributes:
        frames_per_second: Instantaneous FPS from the last inter-frame delta
        frame_count: Frames produced since the last reset
        processing_time_ms: Per-frame processing time in milliseconds
        resolution_label: Display resolution, e.g. "640x480"
        simulating: Whether the simulation clock is running
    """

    model_config = ConfigDict(frozen=True)

    frames_per_second: float = Field(
        default=0.0,
        ge=0,
        description="Instantaneous frames per second",
    )

    frame_count: int = Field(
        default=0,
        ge=0,
        description="Frames produced since last reset",
    )

    processing_time_ms: float = Field(
        default=0.0,
        ge=0,
        description="Per-frame processing time in milliseconds",
    )

    resolution_label: str = Field(
        default="640x480",
        description="Display resolution label",
    )

    simulating: bool = Field(
        default=False,
        description="Whether the simulation clock is running",
    )
