"""
Data Models
===========

Typed data passed between the edge viewer components.

Models:
    - RasterImage: Flat RGBA pixel buffer (and the InvalidImage error)
    - FrameStats: Immutable statistics snapshot
    - FrameData: Externally produced frame with statistics
"""

from edge_viewer.models.raster import InvalidImage, RasterImage
from edge_viewer.models.stats import FrameStats
from edge_viewer.models.frame import FrameData

__all__ = [
    "InvalidImage",
    "RasterImage",
    "FrameStats",
    "FrameData",
]
