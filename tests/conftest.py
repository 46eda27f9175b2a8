"""
Test Configuration
==================

Pytest fixtures and test configuration for the edge viewer.
"""

import numpy as np
import pytest


class FakeClock:
    """Manually advanced millisecond time source."""

    def __init__(self, start_ms: float = 1000.0) -> None:
        self.now = start_ms

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FixedRandom:
    """Random source that replays a fixed sequence of values."""

    def __init__(self, *values: float) -> None:
        self._values = list(values)
        self._index = 0

    def random(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value


@pytest.fixture
def fake_clock():
    """Provide a manually advanced time source."""
    return FakeClock()


@pytest.fixture
def fixed_random():
    """Provide a random source cycling through 0.0, 0.5, 0.25."""
    return FixedRandom(0.0, 0.5, 0.25)


@pytest.fixture
def make_image():
    """Build RasterImages from an (H, W, 3) RGB array with opaque alpha."""
    from edge_viewer.models.raster import RasterImage

    def _make(rgb: np.ndarray) -> RasterImage:
        rgb = np.asarray(rgb, dtype=np.uint8)
        height, width = rgb.shape[:2]
        rgba = np.full((height, width, 4), 255, dtype=np.uint8)
        rgba[..., :3] = rgb
        return RasterImage.from_array(rgba)

    return _make


@pytest.fixture
def vertical_edge_image(make_image):
    """6x5 image: columns 0-2 black, columns 3-5 white."""
    rgb = np.zeros((5, 6, 3), dtype=np.uint8)
    rgb[:, 3:] = 255
    return make_image(rgb)


@pytest.fixture
def settings(tmp_path):
    """Provide small-resolution settings with paths inside tmp_path."""
    from edge_viewer.config import Settings

    return Settings.model_validate({
        "display": {"width": 64, "height": 48},
        "simulation": {"seed": 1234},
        "sample": {"search_dir": str(tmp_path / "samples")},
        "export": {"output_dir": str(tmp_path / "exports")},
    })


@pytest.fixture
def png_bytes():
    """Encoded 32x24 PNG with a white square on black."""
    import cv2

    bgr = np.zeros((24, 32, 3), dtype=np.uint8)
    bgr[6:18, 8:24] = 255
    ok, encoded = cv2.imencode(".png", bgr)
    assert ok
    return encoded.tobytes()
