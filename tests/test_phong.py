"""Unit tests for Phong lighting.

Tests cover:
- The classic eye/light configurations (head-on, 45 degrees, behind)
- Ambient-only shading in shadow
- Lighting with a pattern replacing the material color
- Material field storage
"""

import math

import pytest

from src.whitted.core.tuples import Color, point, vector
from src.whitted.materials.material import Material, Pattern

H = math.sqrt(2.0) / 2.0


def _assert_color(actual, expected, tol=1e-4):
    assert actual.red == pytest.approx(expected.red, abs=tol)
    assert actual.green == pytest.approx(expected.green, abs=tol)
    assert actual.blue == pytest.approx(expected.blue, abs=tol)


@pytest.fixture
def lit_sphere():
    """A world holding one default-material sphere."""
    from src.whitted.scene.world import World

    world = World()
    shape = world.add_sphere()
    return world, shape


def _light(x, y, z):
    from src.whitted.scene.lights import PointLight

    return PointLight(point(x, y, z), Color(1.0, 1.0, 1.0))


class TestLighting:
    """Tests for the lighting function."""

    def test_eye_between_light_and_surface(self, lit_sphere):
        world, shape = lit_sphere
        result = world.lighting(
            shape, _light(0.0, 0.0, -10.0), point(0.0, 0.0, 0.0), vector(0.0, 0.0, -1.0), vector(0.0, 0.0, -1.0)
        )
        _assert_color(result, Color(1.9, 1.9, 1.9))

    def test_eye_offset_45_degrees(self, lit_sphere):
        world, shape = lit_sphere
        result = world.lighting(
            shape, _light(0.0, 0.0, -10.0), point(0.0, 0.0, 0.0), vector(0.0, H, -H), vector(0.0, 0.0, -1.0)
        )
        _assert_color(result, Color(1.0, 1.0, 1.0))

    def test_light_offset_45_degrees(self, lit_sphere):
        world, shape = lit_sphere
        result = world.lighting(
            shape, _light(0.0, 10.0, -10.0), point(0.0, 0.0, 0.0), vector(0.0, 0.0, -1.0), vector(0.0, 0.0, -1.0)
        )
        _assert_color(result, Color(0.7364, 0.7364, 0.7364))

    def test_eye_in_reflection_path(self, lit_sphere):
        world, shape = lit_sphere
        result = world.lighting(
            shape, _light(0.0, 10.0, -10.0), point(0.0, 0.0, 0.0), vector(0.0, -H, -H), vector(0.0, 0.0, -1.0)
        )
        _assert_color(result, Color(1.6364, 1.6364, 1.6364), tol=5e-4)

    def test_light_behind_surface(self, lit_sphere):
        world, shape = lit_sphere
        result = world.lighting(
            shape, _light(0.0, 0.0, 10.0), point(0.0, 0.0, 0.0), vector(0.0, 0.0, -1.0), vector(0.0, 0.0, -1.0)
        )
        _assert_color(result, Color(0.1, 0.1, 0.1))

    def test_surface_in_shadow(self, lit_sphere):
        world, shape = lit_sphere
        result = world.lighting(
            shape,
            _light(0.0, 0.0, -10.0),
            point(0.0, 0.0, 0.0),
            vector(0.0, 0.0, -1.0),
            vector(0.0, 0.0, -1.0),
            in_shadow=True,
        )
        _assert_color(result, Color(0.1, 0.1, 0.1))

    def test_light_color_tints_result(self):
        from src.whitted.scene.lights import PointLight
        from src.whitted.scene.world import World

        world = World()
        shape = world.add_sphere(material=Material(ambient=1.0, diffuse=0.0, specular=0.0))
        light = PointLight(point(0.0, 0.0, -10.0), Color(1.0, 0.5, 0.0))
        result = world.lighting(shape, light, point(0.0, 0.0, 0.0), vector(0.0, 0.0, -1.0), vector(0.0, 0.0, -1.0))
        _assert_color(result, Color(1.0, 0.5, 0.0))

    def test_pattern_replaces_color(self):
        from src.whitted.scene.world import World

        material = Material(
            ambient=1.0,
            diffuse=0.0,
            specular=0.0,
            pattern=Pattern.stripe(Color(1.0, 1.0, 1.0), Color(0.0, 0.0, 0.0)),
        )
        world = World()
        shape = world.add_sphere(material=material)
        light = _light(0.0, 0.0, -10.0)
        eye = vector(0.0, 0.0, -1.0)
        normal = vector(0.0, 0.0, -1.0)
        c1 = world.lighting(shape, light, point(0.9, 0.0, 0.0), eye, normal)
        c2 = world.lighting(shape, light, point(1.1, 0.0, 0.0), eye, normal)
        _assert_color(c1, Color(1.0, 1.0, 1.0))
        _assert_color(c2, Color(0.0, 0.0, 0.0))


class TestMaterialStorage:
    """Tests for the material fields."""

    def test_load_materials(self):
        from src.whitted.materials.phong import (
            get_material_count,
            load_materials,
            material_colors,
            material_pattern_ids,
            material_shininess,
        )

        load_materials([Material(), Material(color=Color(0.5, 0.25, 1.0), shininess=10.0)], [-1, 3])
        assert get_material_count() == 2
        c = material_colors[1]
        assert abs(c[0] - 0.5) < 1e-6
        assert abs(c[1] - 0.25) < 1e-6
        assert abs(c[2] - 1.0) < 1e-6
        assert abs(material_shininess[1] - 10.0) < 1e-6
        assert material_pattern_ids[0] == -1
        assert material_pattern_ids[1] == 3

    def test_mismatched_pattern_ids(self):
        from src.whitted.materials.phong import load_materials

        with pytest.raises(ValueError):
            load_materials([Material()], [])

    def test_capacity_exceeded(self):
        from src.whitted.materials.phong import MAX_MATERIALS, load_materials

        with pytest.raises(RuntimeError):
            load_materials([Material()] * (MAX_MATERIALS + 1), [-1] * (MAX_MATERIALS + 1))
