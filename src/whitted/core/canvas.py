"""In-memory pixel buffer written by the render loop.

The buffer is a float32 NumPy array of shape (height, width, 3), the same
layout image libraries expect, so serialization code can consume
``to_numpy()`` directly. Pixel (0, 0) is the top-left corner.
"""

import numpy as np
import numpy.typing as npt

from src.whitted.core.tuples import Color


class Canvas:
    """A width x height RGB image, initialised to black.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        pixels: Float32 array of shape (height, width, 3).
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels: npt.NDArray[np.float32] = np.zeros((height, width, 3), dtype=np.float32)

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} canvas")

    def write_pixel(self, x: int, y: int, color: Color) -> None:
        self._check_bounds(x, y)
        self.pixels[y, x] = color.to_rgb()

    def pixel_at(self, x: int, y: int) -> Color:
        self._check_bounds(x, y)
        return Color.from_rgb(self.pixels[y, x])

    def to_numpy(self) -> npt.NDArray[np.float32]:
        """Return a copy of the pixel buffer."""
        return self.pixels.copy()
