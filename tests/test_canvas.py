"""Unit tests for the Canvas pixel buffer."""

import numpy as np
import pytest

from src.whitted.core.canvas import Canvas
from src.whitted.core.tuples import Color


class TestCanvas:
    """Tests for canvas creation and pixel access."""

    def test_new_canvas_is_black(self):
        c = Canvas(10, 20)
        assert c.width == 10
        assert c.height == 20
        assert c.pixels.shape == (20, 10, 3)
        assert c.pixels.dtype == np.float32
        assert c.pixel_at(9, 19) == Color(0.0, 0.0, 0.0)

    def test_write_pixel(self):
        c = Canvas(10, 20)
        red = Color(1.0, 0.0, 0.0)
        c.write_pixel(2, 3, red)
        assert c.pixel_at(2, 3) == red
        np.testing.assert_allclose(c.pixels[3, 2], [1.0, 0.0, 0.0])

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (10, 0), (0, 20)])
    def test_out_of_range(self, x, y):
        c = Canvas(10, 20)
        with pytest.raises(IndexError):
            c.write_pixel(x, y, Color(1.0, 1.0, 1.0))
        with pytest.raises(IndexError):
            c.pixel_at(x, y)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            Canvas(0, 5)

    def test_to_numpy_returns_copy(self):
        c = Canvas(2, 2)
        data = c.to_numpy()
        data[0, 0] = 1.0
        assert c.pixel_at(0, 0) == Color(0.0, 0.0, 0.0)
