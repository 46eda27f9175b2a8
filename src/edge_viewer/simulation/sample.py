"""
Sample Frame Renderer
=====================

Synthetic before/after frame pair used when no image source is available
and redrawn on every simulation tick.

The layout is defined on a 640x480 canvas and scaled to the requested
size. Drawing uses OpenCV primitives directly on RGBA numpy canvases, so
colors are given in (R, G, B, A) order.
"""

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from edge_viewer.models.raster import CHANNELS, RasterImage


logger = logging.getLogger(__name__)


LAYOUT_WIDTH = 640
LAYOUT_HEIGHT = 480

BACKGROUND = (240, 240, 240, 255)       # #f0f0f0
RECT_COLOR = (255, 107, 107, 255)       # #ff6b6b
CIRCLE_COLOR = (78, 205, 196, 255)      # #4ecdc4
TRIANGLE_COLOR = (69, 183, 209, 255)    # #45b7d1
TEXT_COLOR = (44, 62, 80, 255)          # #2c3e50
OUTLINE_COLOR = (255, 255, 255, 255)
PROCESSED_BACKGROUND = (0, 0, 0, 255)

NOISE_PROBABILITY = 0.1
NOISE_AMPLITUDE = 50.0

ORIGINAL_CAPTION = "Sample Original Frame"
PROCESSED_CAPTION = "Edge Detection Result"


class SampleRenderer:
    """
    Draws the synthetic sample frame pair.

    Attributes:
        width: Output width in pixels
        height: Output height in pixels

    Example:
        renderer = SampleRenderer(640, 480, noise_rng=np.random.default_rng(7))
        original = renderer.render_original()
        processed = renderer.render_processed()
    """

    def __init__(
        self,
        width: int = LAYOUT_WIDTH,
        height: int = LAYOUT_HEIGHT,
        noise_rng: Optional[np.random.Generator] = None,
    ) -> None:
        if width < 1 or height < 1:
            raise ValueError("width and height must be >= 1")

        self.width = width
        self.height = height
        self._noise_rng = noise_rng if noise_rng is not None else np.random.default_rng()
        self._sx = width / LAYOUT_WIDTH
        self._sy = height / LAYOUT_HEIGHT

    def render_original(self) -> RasterImage:
        """Filled shapes on a light background."""
        canvas = self._blank(BACKGROUND)

        cv2.rectangle(canvas, self._pt(100, 100), self._pt(300, 250), RECT_COLOR, thickness=-1)
        cv2.circle(canvas, self._pt(400, 200), self._radius(80), CIRCLE_COLOR, thickness=-1)
        cv2.fillPoly(canvas, [self._triangle()], TRIANGLE_COLOR)
        self._caption(canvas, ORIGINAL_CAPTION, self._pt(200, 50), TEXT_COLOR)

        return RasterImage.from_array(canvas)

    def render_processed(self) -> RasterImage:
        """White outlines of the same shapes on black, with speckle noise."""
        canvas = self._blank(PROCESSED_BACKGROUND)

        cv2.rectangle(canvas, self._pt(100, 100), self._pt(300, 250), OUTLINE_COLOR, thickness=2)
        cv2.circle(canvas, self._pt(400, 200), self._radius(80), OUTLINE_COLOR, thickness=2)
        cv2.polylines(canvas, [self._triangle()], isClosed=True, color=OUTLINE_COLOR, thickness=2)

        self._add_noise(canvas)
        self._caption(canvas, PROCESSED_CAPTION, self._pt(180, 50), OUTLINE_COLOR)

        return RasterImage.from_array(canvas)

    def render_pair(self) -> Tuple[RasterImage, RasterImage]:
        return self.render_original(), self.render_processed()

    def _blank(self, color: Tuple[int, int, int, int]) -> np.ndarray:
        canvas = np.empty((self.height, self.width, CHANNELS), dtype=np.uint8)
        canvas[...] = color
        return canvas

    def _pt(self, x: float, y: float) -> Tuple[int, int]:
        return int(round(x * self._sx)), int(round(y * self._sy))

    def _radius(self, r: float) -> int:
        return max(1, int(round(r * min(self._sx, self._sy))))

    def _triangle(self) -> np.ndarray:
        return np.array(
            [self._pt(300, 350), self._pt(200, 450), self._pt(400, 450)],
            dtype=np.int32,
        )

    def _caption(
        self,
        canvas: np.ndarray,
        text: str,
        origin: Tuple[int, int],
        color: Tuple[int, int, int, int],
    ) -> None:
        scale = 0.8 * min(self._sx, self._sy)
        cv2.putText(
            canvas,
            text,
            origin,
            cv2.FONT_HERSHEY_SIMPLEX,
            scale,
            color,
            thickness=max(1, int(round(2 * min(self._sx, self._sy)))),
            lineType=cv2.LINE_AA,
        )

    def _add_noise(self, canvas: np.ndarray) -> None:
        """Brighten ~10% of pixels by a uniform [0, 50) amount, clamped at 255."""
        hit = self._noise_rng.random((self.height, self.width)) < NOISE_PROBABILITY
        noise = self._noise_rng.random((self.height, self.width)) * NOISE_AMPLITUDE

        rgb = canvas[..., :3].astype(np.float64)
        rgb[hit] += noise[hit][:, np.newaxis]
        canvas[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
