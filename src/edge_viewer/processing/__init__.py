"""
Processing Module
=================

Frame processing for the edge viewer.

This module provides:
    - EdgeDetector / detect_edges: Luminance-gradient edge map
    - Named constants for the luma weights and threshold
"""

from edge_viewer.processing.edge_detector import (
    BORDER_FILL,
    EDGE_THRESHOLD,
    LUMA_BLUE,
    LUMA_GREEN,
    LUMA_RED,
    EdgeDetector,
    detect_edges,
)

__all__ = [
    "EdgeDetector",
    "detect_edges",
    "BORDER_FILL",
    "EDGE_THRESHOLD",
    "LUMA_RED",
    "LUMA_GREEN",
    "LUMA_BLUE",
]
