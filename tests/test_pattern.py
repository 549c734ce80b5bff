"""Unit tests for procedural patterns.

Tests cover:
- Stripe, gradient, ring and checker color rules in pattern space
- Parity for negative coordinates
- Patterns seen through object and pattern transforms
- Capacity limits of the pattern fields
"""

import numpy as np
import pytest
import taichi as ti

from src.whitted.core.transforms import scaling, translation
from src.whitted.core.tuples import Color, point
from src.whitted.materials.material import Material, Pattern

WHITE = Color(1.0, 1.0, 1.0)
BLACK = Color(0.0, 0.0, 0.0)


def _pattern_colors(pattern, points):
    """Evaluate ``pattern`` at each pattern-space point in a kernel."""
    from src.whitted.materials.pattern import load_patterns, pattern_at

    load_patterns([pattern])
    inputs = ti.Vector.field(3, dtype=ti.f32, shape=len(points))
    outputs = ti.Vector.field(3, dtype=ti.f32, shape=len(points))
    inputs.from_numpy(np.array(points, dtype=np.float32))

    @ti.kernel
    def test_kernel():
        for i in inputs:
            outputs[i] = pattern_at(0, inputs[i])

    test_kernel()
    return [Color.from_rgb(c) for c in outputs.to_numpy()]


def _assert_colors(actual, expected, tol=1e-5):
    assert len(actual) == len(expected)
    for a, e in zip(actual, expected):
        assert a.red == pytest.approx(e.red, abs=tol)
        assert a.green == pytest.approx(e.green, abs=tol)
        assert a.blue == pytest.approx(e.blue, abs=tol)


class TestPatternRules:
    """Tests for the color rules evaluated in pattern space."""

    def test_solid(self):
        red = Color(1.0, 0.0, 0.0)
        colors = _pattern_colors(Pattern.solid(red), [(0.0, 0.0, 0.0), (3.7, -2.0, 9.0)])
        _assert_colors(colors, [red, red])

    def test_stripe_constant_in_y(self):
        colors = _pattern_colors(
            Pattern.stripe(WHITE, BLACK), [(0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 2.0, 0.0)]
        )
        _assert_colors(colors, [WHITE, WHITE, WHITE])

    def test_stripe_constant_in_z(self):
        colors = _pattern_colors(
            Pattern.stripe(WHITE, BLACK), [(0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 2.0)]
        )
        _assert_colors(colors, [WHITE, WHITE, WHITE])

    def test_stripe_alternates_in_x(self):
        xs = [0.0, 0.9, 1.0, -0.1, -1.0, -1.1]
        colors = _pattern_colors(Pattern.stripe(WHITE, BLACK), [(x, 0.0, 0.0) for x in xs])
        _assert_colors(colors, [WHITE, WHITE, BLACK, BLACK, BLACK, WHITE])

    def test_gradient_interpolates(self):
        xs = [0.0, 0.25, 0.5, 0.75]
        colors = _pattern_colors(Pattern.gradient(WHITE, BLACK), [(x, 0.0, 0.0) for x in xs])
        _assert_colors(
            colors,
            [
                WHITE,
                Color(0.75, 0.75, 0.75),
                Color(0.5, 0.5, 0.5),
                Color(0.25, 0.25, 0.25),
            ],
        )

    def test_ring_extends_in_x_and_z(self):
        colors = _pattern_colors(
            Pattern.ring(WHITE, BLACK),
            [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.708, 0.0, 0.708)],
        )
        _assert_colors(colors, [WHITE, BLACK, BLACK, BLACK])

    @pytest.mark.parametrize(
        "points",
        [
            [(0.0, 0.0, 0.0), (0.99, 0.0, 0.0), (1.01, 0.0, 0.0)],
            [(0.0, 0.0, 0.0), (0.0, 0.99, 0.0), (0.0, 1.01, 0.0)],
            [(0.0, 0.0, 0.0), (0.0, 0.0, 0.99), (0.0, 0.0, 1.01)],
        ],
    )
    def test_checker_repeats_in_each_dimension(self, points):
        colors = _pattern_colors(Pattern.checker(WHITE, BLACK), points)
        _assert_colors(colors, [WHITE, WHITE, BLACK])

    def test_checker_negative_coordinates(self):
        colors = _pattern_colors(
            Pattern.checker(WHITE, BLACK), [(-0.5, 0.0, 0.0), (-0.5, -0.5, 0.0), (-1.5, -0.5, 1.5)]
        )
        _assert_colors(colors, [BLACK, WHITE, WHITE])


class TestPatternTransforms:
    """Tests for patterns on transformed shapes."""

    def test_object_transform(self):
        from src.whitted.scene.world import World

        world = World()
        s = world.add_sphere(
            scaling(2.0, 2.0, 2.0), Material(pattern=Pattern.stripe(WHITE, BLACK))
        )
        assert world.pattern_at(s, point(1.5, 0.0, 0.0)) == WHITE

    def test_pattern_transform(self):
        from src.whitted.scene.world import World

        world = World()
        s = world.add_sphere(
            material=Material(pattern=Pattern.stripe(WHITE, BLACK, scaling(2.0, 2.0, 2.0)))
        )
        assert world.pattern_at(s, point(1.5, 0.0, 0.0)) == WHITE

    def test_object_and_pattern_transform(self):
        from src.whitted.scene.world import World

        world = World()
        s = world.add_sphere(
            scaling(2.0, 2.0, 2.0),
            Material(pattern=Pattern.stripe(WHITE, BLACK, translation(0.5, 0.0, 0.0))),
        )
        assert world.pattern_at(s, point(2.5, 0.0, 0.0)) == WHITE

    def test_untransformed_point_is_black(self):
        from src.whitted.scene.world import World

        world = World()
        s = world.add_sphere(material=Material(pattern=Pattern.stripe(WHITE, BLACK)))
        assert world.pattern_at(s, point(1.5, 0.0, 0.0)) == BLACK

    def test_plain_material_returns_color(self):
        from src.whitted.scene.world import World

        red = Color(1.0, 0.0, 0.0)
        world = World()
        s = world.add_sphere(material=Material(color=red))
        assert world.pattern_at(s, point(1.0, 0.0, 0.0)) == red


class TestPatternStorage:
    """Tests for the pattern fields."""

    def test_load_and_count(self):
        from src.whitted.materials.pattern import get_pattern_count, load_patterns

        load_patterns([Pattern.stripe(WHITE, BLACK), Pattern.ring(WHITE, BLACK)])
        assert get_pattern_count() == 2

    def test_capacity_exceeded(self):
        from src.whitted.materials.pattern import MAX_PATTERNS, load_patterns

        with pytest.raises(RuntimeError):
            load_patterns([Pattern.solid(WHITE)] * (MAX_PATTERNS + 1))
