"""
Raster Image Model
==================

Flat RGBA pixel buffer shared between the viewer and the edge detector.

Layout:
    H rows of W pixels, row-major, four uint8 channels per pixel (R, G, B, A).
    The buffer is one-dimensional with exactly W * H * 4 values.

Design Rules:
    - Whoever holds a RasterImage owns it exclusively
    - Construction does NOT validate; validate() is called at the boundary
      where a malformed buffer would be a programming error
"""

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np


CHANNELS = 4


class InvalidImage(ValueError):
    """Raised when a raster buffer does not match its declared dimensions."""
    pass


@dataclass(frozen=True, slots=True, eq=False)
class RasterImage:
    """
    RGBA raster image with a flat row-major buffer.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        data: 1-D uint8 array of length width * height * 4
    """

    width: int
    height: int
    data: np.ndarray

    @classmethod
    def from_buffer(
        cls,
        width: int,
        height: int,
        data: Union[bytes, bytearray, memoryview, np.ndarray, list],
    ) -> "RasterImage":
        """
        Build a RasterImage from any byte-like buffer.

        The buffer is copied, so the caller may reuse its own storage.
        """
        if isinstance(data, (bytes, bytearray, memoryview)):
            array = np.frombuffer(data, dtype=np.uint8).copy()
        else:
            array = np.array(data, dtype=np.uint8).reshape(-1)
        return cls(width=width, height=height, data=array)

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "RasterImage":
        """Build a RasterImage from an (H, W, 4) uint8 array."""
        if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
            raise InvalidImage(f"Expected (H, W, 4) array, got shape {pixels.shape}")
        height, width = pixels.shape[:2]
        flat = np.ascontiguousarray(pixels, dtype=np.uint8).reshape(-1).copy()
        return cls(width=width, height=height, data=flat)

    @classmethod
    def filled(
        cls,
        width: int,
        height: int,
        rgba: Tuple[int, int, int, int],
    ) -> "RasterImage":
        """Build an image where every pixel has the same RGBA value."""
        pixels = np.empty((height, width, CHANNELS), dtype=np.uint8)
        pixels[...] = rgba
        return cls(width=width, height=height, data=pixels.reshape(-1))

    @property
    def resolution_label(self) -> str:
        return f"{self.width}x{self.height}"

    def validate(self) -> None:
        """
        Check the buffer against the declared dimensions.

        Raises:
            InvalidImage: On non-positive dimensions, wrong dtype or shape,
                or buffer length != width * height * 4
        """
        if self.width < 1 or self.height < 1:
            raise InvalidImage(
                f"Image dimensions must be >= 1, got {self.width}x{self.height}"
            )
        if not isinstance(self.data, np.ndarray):
            raise InvalidImage(f"Buffer must be a numpy array, got {type(self.data).__name__}")
        if self.data.dtype != np.uint8 or self.data.ndim != 1:
            raise InvalidImage(
                f"Buffer must be 1-D uint8, got {self.data.dtype} with shape {self.data.shape}"
            )
        expected = self.width * self.height * CHANNELS
        if self.data.size != expected:
            raise InvalidImage(
                f"Buffer length {self.data.size} does not match "
                f"{self.width}x{self.height}x{CHANNELS} = {expected}"
            )

    def as_array(self) -> np.ndarray:
        """Return an (H, W, 4) view of the buffer."""
        self.validate()
        return self.data.reshape(self.height, self.width, CHANNELS)

    def to_bytes(self) -> bytes:
        return self.data.tobytes()

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixel buffer."""
        return f"RasterImage(width={self.width}, height={self.height})"
