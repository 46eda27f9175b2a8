"""
Edge Viewer
===========

Before/after frame viewer with a luminance-gradient edge detector and a
simulated frame statistics stream.

Components:
    - processing: EdgeDetector (pure RGBA -> binary edge map)
    - simulation: SimulationClock (timer-driven FrameStats) and SampleRenderer
    - imaging: Image loading and side-by-side export
    - viewer: EdgeViewer, the headless collaborator owning the displayed state

Example:
    from edge_viewer.config import load_config
    from edge_viewer.viewer import EdgeViewer

    viewer = EdgeViewer(load_config())
    viewer.load_sample_image()
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
