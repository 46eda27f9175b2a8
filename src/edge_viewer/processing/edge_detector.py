"""
Edge Detector
=============

Luminance-gradient edge detection over RGBA raster images.

Algorithm:
    1. Luminance per pixel: L = 0.299 R + 0.587 G + 0.114 B (alpha ignored)
    2. Forward differences on interior pixels (1 <= x <= W-2, 1 <= y <= H-2):
           gx = |L(x, y) - L(x+1, y)|
           gy = |L(x, y) - L(x, y+1)|
    3. Magnitude m = sqrt(gx^2 + gy^2)
    4. White (255, 255, 255, 255) if m > 30, else black (0, 0, 0, 255)

Border Policy:
    The output starts as opaque black (BORDER_FILL) and only interior pixels
    are written, so the outermost rows and columns are always black. Images
    narrower or shorter than 3 pixels have no interior and come back entirely
    BORDER_FILL.

Design Rules:
    - Pure: no state, no I/O, input never mutated
    - Output is always a fresh buffer
    - Single fixed algorithm, constants are not configurable
"""

import logging

import numpy as np

from edge_viewer.models.raster import CHANNELS, RasterImage


logger = logging.getLogger(__name__)


LUMA_RED = 0.299
LUMA_GREEN = 0.587
LUMA_BLUE = 0.114

EDGE_THRESHOLD = 30.0

EDGE_VALUE = 255
BORDER_FILL = (0, 0, 0, 255)


def compute_luminance(pixels: np.ndarray) -> np.ndarray:
    """
    Compute per-pixel luminance of an (H, W, 4) uint8 array.

    Returns:
        Float64 array of shape (H, W)
    """
    rgb = pixels[..., :3].astype(np.float64)
    return rgb[..., 0] * LUMA_RED + rgb[..., 1] * LUMA_GREEN + rgb[..., 2] * LUMA_BLUE


def compute_gradient_magnitude(luminance: np.ndarray) -> np.ndarray:
    """
    Forward-difference gradient magnitude over interior pixels.

    Args:
        luminance: (H, W) luminance array

    Returns:
        (H-2, W-2) magnitude array for the interior; empty when H < 3 or W < 3
    """
    height, width = luminance.shape
    if height < 3 or width < 3:
        return np.zeros((max(height - 2, 0), max(width - 2, 0)), dtype=np.float64)

    current = luminance[1:height - 1, 1:width - 1]
    right = luminance[1:height - 1, 2:width]
    down = luminance[2:height, 1:width - 1]

    gx = np.abs(current - right)
    gy = np.abs(current - down)
    return np.sqrt(gx * gx + gy * gy)


def detect_edges(source: RasterImage) -> RasterImage:
    """
    Produce a binary edge map from a raster image.

    Args:
        source: RGBA image; dimensions are taken from it

    Returns:
        New RasterImage of identical size with R=G=B in {0, 255} and A=255

    Raises:
        InvalidImage: If the source buffer does not match its dimensions
    """
    source.validate()

    height, width = source.height, source.width
    edges = np.empty((height, width, CHANNELS), dtype=np.uint8)
    edges[...] = BORDER_FILL

    magnitude = compute_gradient_magnitude(compute_luminance(source.as_array()))
    if magnitude.size:
        interior = np.where(magnitude > EDGE_THRESHOLD, EDGE_VALUE, 0).astype(np.uint8)
        edges[1:height - 1, 1:width - 1, :3] = interior[..., np.newaxis]

    return RasterImage(width=width, height=height, data=edges.reshape(-1))


class EdgeDetector:
    """
    Stateless edge detector.

    Wraps detect_edges so collaborators can hold and inject a detector
    instance instead of importing the function directly.

    Example:
        detector = EdgeDetector()
        edge_map = detector.detect(image)
    """

    def detect(self, source: RasterImage) -> RasterImage:
        """Run edge detection on a single image."""
        edge_map = detect_edges(source)
        logger.debug(f"Edge map computed for {source.resolution_label} frame")
        return edge_map
