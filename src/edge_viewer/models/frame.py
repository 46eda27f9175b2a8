"""
External Frame Schema
=====================

Pydantic model for a frame produced outside this process (for example by a
device running its own edge detection) and pushed into the viewer.

Such a frame bypasses both the EdgeDetector and the SimulationClock's
timer: its images are displayed as-is and its statistics are merged
directly into FrameStats.

Example:
    frame = FrameData(
        original=original_image,
        processed=edge_image,
        timestamp=time.time(),
        fps=14.8,
        processing_time_ms=11.2,
    )
    viewer.receive_frame_data(frame)
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, InstanceOf, model_validator

from edge_viewer.models.raster import RasterImage


class FrameData(BaseModel):
    """
    Externally produced frame with its statistics.

    Attributes:
        original: Source image
        processed: Processed image, same dimensions as original
        timestamp: UNIX timestamp when the frame was produced
        fps: Producer-reported frames per second
        processing_time_ms: Producer-reported processing time
        resolution: Optional resolution label; derived from original if omitted
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    original: InstanceOf[RasterImage]
    processed: InstanceOf[RasterImage]

    timestamp: float = Field(
        ...,
        ge=0,
        description="UNIX timestamp in seconds when frame was produced",
    )

    fps: float = Field(
        ...,
        ge=0,
        description="Producer-reported frames per second",
    )

    processing_time_ms: float = Field(
        ...,
        ge=0,
        description="Producer-reported processing time in milliseconds",
    )

    resolution: Optional[str] = Field(
        default=None,
        description="Resolution label, e.g. '640x480'",
    )

    @model_validator(mode="after")
    def _check_images(self) -> "FrameData":
        self.original.validate()
        self.processed.validate()
        if (self.original.width, self.original.height) != (
            self.processed.width,
            self.processed.height,
        ):
            raise ValueError(
                f"Original {self.original.resolution_label} and processed "
                f"{self.processed.resolution_label} dimensions differ"
            )
        return self

    @property
    def resolution_label(self) -> str:
        return self.resolution or self.original.resolution_label
