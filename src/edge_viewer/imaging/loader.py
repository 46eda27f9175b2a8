"""
Image Loader
============

Decodes image files and in-memory encoded images into RGBA RasterImages
at the display resolution.

Design Rules:
    - This is the ONLY place in the codebase that decodes encoded images
    - Every loaded image is resized to the requested display size
    - Fails fast with ImageLoadError; fallback policy belongs to the caller
"""

import logging
from pathlib import Path
from typing import Iterable, List, Tuple, Union

import cv2
import numpy as np

from edge_viewer.models.raster import RasterImage


logger = logging.getLogger(__name__)


DEFAULT_SAMPLE_CANDIDATES = ("sample.jpg", "sample.png", "test.jpg", "image.jpg")


class ImageLoadError(Exception):
    """Raised when an image cannot be read or decoded."""
    pass


def _to_raster(bgr: np.ndarray, width: int, height: int) -> RasterImage:
    """Resize a decoded BGR image and convert it to RGBA."""
    if bgr.ndim != 3 or bgr.shape[2] != 3:
        raise ImageLoadError(f"Invalid decoded image shape: {bgr.shape}")

    if bgr.shape[:2] != (height, width):
        bgr = cv2.resize(bgr, (width, height), interpolation=cv2.INTER_AREA)

    rgba = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGBA)
    return RasterImage.from_array(rgba)


def decode_image_bytes(data: bytes, width: int, height: int) -> RasterImage:
    """
    Decode an encoded image (JPEG, PNG, ...) held in memory.

    Args:
        data: Encoded image bytes
        width: Display width to resize to
        height: Display height to resize to

    Returns:
        RGBA RasterImage of size width x height

    Raises:
        ImageLoadError: If the bytes are empty or not a decodable image
    """
    if not data:
        raise ImageLoadError("Image data is empty")

    nparr = np.frombuffer(data, np.uint8)
    bgr = cv2.imdecode(nparr, cv2.IMREAD_COLOR)
    if bgr is None:
        raise ImageLoadError("Failed to decode image: cv2.imdecode returned None")

    return _to_raster(bgr, width, height)


def load_image_file(path: Union[str, Path], width: int, height: int) -> RasterImage:
    """
    Read an image file from disk.

    Raises:
        ImageLoadError: If the file is missing or cannot be decoded
    """
    path = Path(path)
    if not path.is_file():
        raise ImageLoadError(f"Could not load {path}: file not found")

    bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if bgr is None:
        raise ImageLoadError(f"Could not load {path}: cv2.imread returned None")

    return _to_raster(bgr, width, height)


def load_first_available(
    paths: Iterable[Union[str, Path]],
    width: int,
    height: int,
) -> Tuple[Path, RasterImage]:
    """
    Try each candidate path in order and return the first that loads.

    Returns:
        Tuple of (path, image)

    Raises:
        ImageLoadError: If no candidate could be loaded
    """
    tried: List[str] = []
    for candidate in paths:
        candidate = Path(candidate)
        try:
            image = load_image_file(candidate, width, height)
        except ImageLoadError as e:
            logger.debug(f"Skipping image candidate: {e}")
            tried.append(str(candidate))
            continue
        return candidate, image

    raise ImageLoadError(f"No loadable image among: {', '.join(tried) or '(none)'}")
