"""
Edge Viewer
===========

Headless before/after frame viewer.

The viewer owns the displayed state (original image, processed image,
latest FrameStats, status line) and wires the core components together:

    image source ──> EdgeDetector ──> (original, processed)
    SimulationClock ──(stats, redraw)──> viewer ──> redraw sample pair
    FrameData (external) ─────────────> (original, processed) + clock stats

Image Sources (fallback chain for load_sample_image):
    1. Candidate sample files (sample.jpg, sample.png, test.jpg, image.jpg)
    2. Synthetic sample pair from SampleRenderer

Design Rules:
    - Components are injected; nothing is held in module-level globals
    - The clock is the only writer of FrameStats; the viewer only stores
      the latest snapshot it was handed
    - External frames and the simulation are alternative producers: an
      incoming external frame stops the simulation
"""

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np

from edge_viewer.config import Settings
from edge_viewer.imaging.export import export_frame
from edge_viewer.imaging.loader import (
    ImageLoadError,
    decode_image_bytes,
    load_first_available,
    load_image_file,
)
from edge_viewer.models.frame import FrameData
from edge_viewer.models.raster import RasterImage
from edge_viewer.models.stats import FrameStats
from edge_viewer.processing.edge_detector import EdgeDetector
from edge_viewer.simulation.clock import SimulationClock
from edge_viewer.simulation.sample import SampleRenderer


logger = logging.getLogger(__name__)


SOURCE_SYNTHETIC = "synthetic"
SOURCE_EXTERNAL = "external"

STATUS_RUNNING = "Simulation Running"
STATUS_STOPPED = "Simulation Stopped"


@dataclass(frozen=True, slots=True)
class ViewerStatus:
    """Status line shown next to the indicator."""

    message: str
    online: bool


def format_stats(stats: FrameStats) -> Dict[str, str]:
    """
    Format a stats snapshot for display.

    Returns:
        Dict with fps, resolution, processing_time and frame_count labels
    """
    return {
        "fps": f"{stats.frames_per_second:.1f}",
        "resolution": stats.resolution_label,
        "processing_time": f"{stats.processing_time_ms:.1f}ms",
        "frame_count": str(stats.frame_count),
    }


class EdgeViewer:
    """
    Owns the displayed frame pair and statistics.

    Attributes:
        settings: Viewer settings
        detector: Edge detector used for loaded images
        clock: Simulation clock, the single writer of FrameStats
        renderer: Synthetic sample renderer
        original: Currently displayed source image
        processed: Currently displayed processed image
        stats: Latest stats snapshot
        status: Current status line
        source: Description of where the displayed pair came from

    Example:
        settings = load_config()
        viewer = EdgeViewer(settings)
        viewer.load_sample_image()

        viewer.start_simulation()   # inside a running event loop
        ...
        viewer.stop_simulation()
        viewer.export_frame()
    """

    def __init__(
        self,
        settings: Settings,
        detector: Optional[EdgeDetector] = None,
        clock: Optional[SimulationClock] = None,
        renderer: Optional[SampleRenderer] = None,
    ) -> None:
        """
        Initialize viewer with the synthetic sample pair displayed.

        Args:
            settings: Viewer settings
            detector: Edge detector (default: new EdgeDetector)
            clock: Simulation clock (default: built from settings.simulation)
            renderer: Sample renderer (default: built from settings.display)
        """
        self.settings = settings
        width, height = settings.display.width, settings.display.height
        seed = settings.simulation.seed

        self.detector = detector if detector is not None else EdgeDetector()
        self.renderer = renderer if renderer is not None else SampleRenderer(
            width,
            height,
            noise_rng=np.random.default_rng(seed),
        )
        if clock is None:
            clock = SimulationClock(
                tick_rate_hz=settings.simulation.tick_rate_hz,
                resolution_label=settings.display.resolution_label,
                processing_time_range_ms=(
                    settings.simulation.processing_time_min_ms,
                    settings.simulation.processing_time_max_ms,
                ),
                rng=random.Random(seed),
            )
        self.clock = clock
        self.clock.add_listener(self._on_stats)

        self.original, self.processed = self.renderer.render_pair()
        self.source: str = SOURCE_SYNTHETIC
        self.stats: FrameStats = self.clock.snapshot()
        self.status = ViewerStatus(message=STATUS_STOPPED, online=False)

        logger.info(f"EdgeViewer initialized at {settings.display.resolution_label}")

    # =========================================================================
    # Image Sources
    # =========================================================================

    def load_sample_image(self) -> str:
        """
        Load the first available sample file, else the synthetic pair.

        Returns:
            The chosen source (file path or "synthetic")
        """
        width, height = self.settings.display.width, self.settings.display.height
        try:
            path, image = load_first_available(
                self.settings.sample.candidate_paths(),
                width,
                height,
            )
        except ImageLoadError as e:
            logger.info(f"No sample image file available, using synthetic sample ({e})")
            self._show_synthetic()
            return self.source

        self.show_image(image, source=str(path))
        return self.source

    def load_image_file(self, path: Union[str, Path]) -> RasterImage:
        """
        Load an image file and display it with its edge map.

        Raises:
            ImageLoadError: If the file cannot be read
        """
        image = load_image_file(
            path,
            self.settings.display.width,
            self.settings.display.height,
        )
        return self.show_image(image, source=str(path))

    def load_image_bytes(self, data: bytes, name: str = "upload") -> RasterImage:
        """
        Decode an encoded image from memory and display it.

        Raises:
            ImageLoadError: If the bytes cannot be decoded
        """
        image = decode_image_bytes(
            data,
            self.settings.display.width,
            self.settings.display.height,
        )
        return self.show_image(image, source=name)

    def show_image(self, image: RasterImage, source: str = "image") -> RasterImage:
        """
        Display an image alongside its freshly computed edge map.

        Returns:
            The edge map

        Raises:
            InvalidImage: If the image buffer is malformed
        """
        edge_map = self.detector.detect(image)
        self.original = image
        self.processed = edge_map
        self.source = source

        logger.info(f"Displaying {image.resolution_label} image from {source}")
        return edge_map

    def _show_synthetic(self) -> None:
        self.original, self.processed = self.renderer.render_pair()
        self.source = SOURCE_SYNTHETIC

    # =========================================================================
    # Simulation
    # =========================================================================

    def start_simulation(self) -> None:
        """Start the simulation clock. Requires a running event loop."""
        self.clock.start()
        self.stats = self.clock.snapshot()
        self.status = ViewerStatus(message=STATUS_RUNNING, online=True)

    def stop_simulation(self) -> None:
        self.clock.stop()
        self.stats = self.clock.snapshot()
        self.status = ViewerStatus(message=STATUS_STOPPED, online=False)

    def toggle_simulation(self) -> bool:
        """
        Start the simulation if idle, stop it if running.

        Returns:
            Whether the simulation is running afterwards
        """
        if self.clock.running:
            self.stop_simulation()
        else:
            self.start_simulation()
        return self.clock.running

    def reset_stats(self) -> FrameStats:
        return self.clock.reset()

    def _on_stats(self, stats: FrameStats, redraw: bool) -> None:
        """Clock listener: store the snapshot, redraw the sample pair on ticks."""
        self.stats = stats
        if redraw and stats.simulating and self.source == SOURCE_SYNTHETIC:
            self._show_synthetic()

    # =========================================================================
    # External Feed
    # =========================================================================

    def receive_frame_data(self, frame: FrameData) -> FrameStats:
        """
        Display an externally produced frame and merge its statistics.

        Bypasses the EdgeDetector; the processed image is shown as-is.
        Stops the simulation first if it is running.

        Returns:
            The merged stats snapshot
        """
        if self.clock.running:
            logger.info("External frame received, stopping simulation")
            self.stop_simulation()

        self.original = frame.original
        self.processed = frame.processed
        self.source = SOURCE_EXTERNAL

        logger.debug(
            f"Received frame data: {frame.resolution_label}, "
            f"fps={frame.fps:.1f}, processing={frame.processing_time_ms:.1f}ms"
        )
        return self.clock.record_external(frame.fps, frame.processing_time_ms)

    # =========================================================================
    # Output
    # =========================================================================

    def export_frame(self, output_dir: Optional[Union[str, Path]] = None) -> Path:
        """
        Export the displayed pair as a side-by-side PNG.

        Raises:
            ExportError: If the file could not be written
        """
        target = output_dir if output_dir is not None else self.settings.export.output_dir
        return export_frame(self.original, self.processed, target)

    def formatted_stats(self) -> Dict[str, str]:
        return format_stats(self.stats)
