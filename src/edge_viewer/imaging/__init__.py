"""
Imaging Module
==============

Image I/O at the edge of the viewer.

This module provides:
    - Loading image files and encoded bytes into RasterImages
    - Fallback chain over candidate sample files
    - Side-by-side PNG export
"""

from edge_viewer.imaging.loader import (
    DEFAULT_SAMPLE_CANDIDATES,
    ImageLoadError,
    decode_image_bytes,
    load_first_available,
    load_image_file,
)
from edge_viewer.imaging.export import ExportError, compose_side_by_side, export_frame

__all__ = [
    "DEFAULT_SAMPLE_CANDIDATES",
    "ImageLoadError",
    "decode_image_bytes",
    "load_first_available",
    "load_image_file",
    "ExportError",
    "compose_side_by_side",
    "export_frame",
]
