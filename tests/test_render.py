"""Integration tests for rendering a world through a camera."""

import logging
import math

import numpy as np
import pytest

from src.whitted.core.transforms import translation
from src.whitted.core.tuples import Color, point, vector
from src.whitted.materials.material import Material


class TestRender:
    """Tests for the render kernel."""

    def test_render_default_world(self, default_world):
        from src.whitted.camera.camera import Camera

        camera = Camera.look_at(
            11, 11, math.pi / 2, point(0.0, 0.0, -5.0), point(0.0, 0.0, 0.0), vector(0.0, 1.0, 0.0)
        )
        image = camera.render(default_world)
        assert image.width == 11
        assert image.height == 11
        c = image.pixel_at(5, 5)
        assert c.red == pytest.approx(0.38066, abs=1e-4)
        assert c.green == pytest.approx(0.47583, abs=1e-4)
        assert c.blue == pytest.approx(0.2855, abs=1e-4)

    def test_render_matches_color_at(self, default_world):
        from src.whitted.camera.camera import Camera
        from src.whitted.core.integrator import render

        camera = Camera.look_at(
            9, 7, math.pi / 3, point(1.0, 2.0, -5.0), point(0.0, 0.0, 0.0), vector(0.0, 1.0, 0.0)
        )
        image = render(camera, default_world)
        for px, py in [(0, 0), (4, 3), (6, 2), (8, 6)]:
            expected = default_world.color_at(camera.ray_for_pixel(px, py))
            np.testing.assert_allclose(image.pixels[py, px], expected.to_rgb(), atol=1e-4)

    def test_empty_world_renders_black(self):
        from src.whitted.camera.camera import Camera
        from src.whitted.scene.world import World

        image = Camera(4, 3, math.pi / 2).render(World())
        assert image.pixels.shape == (3, 4, 3)
        assert not image.pixels.any()

    def test_render_picks_up_edits(self, default_world):
        from src.whitted.camera.camera import Camera

        camera = Camera.look_at(
            11, 11, math.pi / 2, point(0.0, 0.0, -5.0), point(0.0, 0.0, 0.0), vector(0.0, 1.0, 0.0)
        )
        first = camera.render(default_world).pixel_at(5, 5)
        default_world.shapes[0].material = Material(color=Color(1.0, 0.0, 0.0))
        second = camera.render(default_world).pixel_at(5, 5)
        assert first != second
        assert second.green == pytest.approx(0.0, abs=1e-6)

    def test_shadowed_pixel_is_ambient(self):
        from src.whitted.camera.camera import Camera
        from src.whitted.scene.lights import PointLight
        from src.whitted.scene.world import World

        world = World()
        world.add_light(PointLight(point(0.0, 10.0, 0.0), Color(1.0, 1.0, 1.0)))
        world.add_plane(material=Material(specular=0.0))
        world.add_sphere(translation(0.0, 2.0, 0.0))
        # The floor point under the sphere, seen from the side
        camera = Camera.look_at(
            3, 3, 0.5, point(0.0, 0.5, -5.0), point(0.0, 0.0, 0.0), vector(0.0, 1.0, 0.0)
        )
        c = camera.render(world).pixel_at(1, 1)
        assert c.red == pytest.approx(0.1, abs=1e-4)
        assert c.green == pytest.approx(0.1, abs=1e-4)
        assert c.blue == pytest.approx(0.1, abs=1e-4)

    def test_render_logs(self, default_world, caplog):
        from src.whitted.camera.camera import Camera

        with caplog.at_level(logging.INFO, logger="src.whitted.core.integrator"):
            Camera(5, 5, math.pi / 2).render(default_world)
        assert "Rendering 5x5 image" in caplog.text
        assert "Rendered 5x5 image" in caplog.text
