"""
Frame Export
============

Writes the current before/after pair as a single side-by-side PNG.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np

from edge_viewer.models.raster import RasterImage


logger = logging.getLogger(__name__)


EXPORT_TITLE = "Edge Detection Export"
TITLE_COLOR = (0, 0, 0, 255)


class ExportError(Exception):
    """Raised when the composite image cannot be written."""
    pass


def compose_side_by_side(
    original: RasterImage,
    processed: RasterImage,
    title: Optional[str] = EXPORT_TITLE,
) -> np.ndarray:
    """
    Place original and processed next to each other.

    Returns:
        (H, 2W, 4) RGBA array with an optional title drawn across the top
    """
    left = original.as_array()
    right = processed.as_array()
    if left.shape != right.shape:
        raise ValueError(
            f"Cannot compose {original.resolution_label} with {processed.resolution_label}"
        )

    composite = np.concatenate([left, right], axis=1)

    if title:
        scale = left.shape[1] / 640
        cv2.putText(
            composite,
            title,
            (int(400 * scale), int(50 * scale)),
            cv2.FONT_HERSHEY_SIMPLEX,
            1.0 * scale,
            TITLE_COLOR,
            thickness=max(1, int(round(2 * scale))),
            lineType=cv2.LINE_AA,
        )

    return composite


def export_frame(
    original: RasterImage,
    processed: RasterImage,
    output_dir: Union[str, Path],
) -> Path:
    """
    Save the side-by-side composite as edge-detection-<epoch_ms>.png.

    Args:
        original: Source image
        processed: Edge map of the same size
        output_dir: Directory to write into (created if missing)

    Returns:
        Path of the written file

    Raises:
        ExportError: If the file could not be written
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    path = output_dir / f"edge-detection-{int(time.time() * 1000)}.png"
    composite = compose_side_by_side(original, processed)
    bgra = cv2.cvtColor(composite, cv2.COLOR_RGBA2BGRA)

    if not cv2.imwrite(str(path), bgra):
        raise ExportError(f"cv2.imwrite failed for {path}")

    logger.info(f"Frame exported to {path}")
    return path
