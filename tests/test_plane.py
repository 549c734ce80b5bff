"""Unit tests for the plane primitive.

Tests cover:
- The constant object-space normal
- Parallel and coplanar rays (no intersection)
- Rays from above and below
- Planes placed by a transform
"""

import math

import pytest
import taichi as ti

from src.whitted.core.ray import Ray
from src.whitted.core.transforms import rotation_z, translation
from src.whitted.core.tuples import point, vector


class TestLocalPlane:
    """Tests for the object-space plane functions."""

    def test_normal_is_constant(self):
        from src.whitted.geometry.plane import local_normal_plane, vec3

        results = ti.Vector.field(3, dtype=ti.f32, shape=3)

        @ti.kernel
        def test_kernel():
            results[0] = local_normal_plane(vec3(0.0, 0.0, 0.0))
            results[1] = local_normal_plane(vec3(10.0, 0.0, -10.0))
            results[2] = local_normal_plane(vec3(-5.0, 0.0, 150.0))

        test_kernel()
        for i in range(3):
            n = results[i]
            assert abs(n[0]) < 1e-6
            assert abs(n[1] - 1.0) < 1e-6
            assert abs(n[2]) < 1e-6

    def test_local_intersect_from_above(self):
        from src.whitted.core.ray import TiRay
        from src.whitted.geometry.plane import local_intersect_plane, vec3

        count = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = TiRay(origin=vec3(0.0, 1.0, 0.0), direction=vec3(0.0, -1.0, 0.0))
            n, t0, _ = local_intersect_plane(ray)
            count[None] = n
            t_val[None] = t0

        test_kernel()
        assert count[None] == 1
        assert abs(t_val[None] - 1.0) < 1e-6


class TestPlaneIntersection:
    """Tests for plane intersections through the World."""

    def test_parallel_ray(self):
        from src.whitted.scene.world import World

        world = World()
        p = world.add_plane()
        assert world.intersect_shape(Ray(point(0.0, 10.0, 0.0), vector(0.0, 0.0, 1.0)), p) == []

    def test_coplanar_ray(self):
        from src.whitted.scene.world import World

        world = World()
        p = world.add_plane()
        assert world.intersect_shape(Ray(point(0.0, 0.0, 0.0), vector(0.0, 0.0, 1.0)), p) == []

    def test_ray_from_above(self):
        from src.whitted.scene.world import World

        world = World()
        p = world.add_plane()
        xs = world.intersect_shape(Ray(point(0.0, 1.0, 0.0), vector(0.0, -1.0, 0.0)), p)
        assert len(xs) == 1
        assert xs[0].t == pytest.approx(1.0, abs=1e-5)
        assert xs[0].shape_id == 0

    def test_ray_from_below(self):
        from src.whitted.scene.world import World

        world = World()
        p = world.add_plane()
        xs = world.intersect_shape(Ray(point(0.0, -1.0, 0.0), vector(0.0, 1.0, 0.0)), p)
        assert len(xs) == 1
        assert xs[0].t == pytest.approx(1.0, abs=1e-5)

    def test_translated_plane(self):
        from src.whitted.scene.world import World

        world = World()
        p = world.add_plane(translation(0.0, -2.0, 0.0))
        xs = world.intersect_shape(Ray(point(0.0, 3.0, 0.0), vector(0.0, -1.0, 0.0)), p)
        assert [x.t for x in xs] == pytest.approx([5.0], abs=1e-5)

    def test_normal_of_rotated_plane(self):
        from src.whitted.scene.world import World

        world = World()
        # Rotating +y by 90 degrees about z gives -x
        p = world.add_plane(rotation_z(math.pi / 2))
        n = world.normal_at(p, point(0.0, 3.0, 2.0))
        assert n.x == pytest.approx(-1.0, abs=1e-4)
        assert n.y == pytest.approx(0.0, abs=1e-4)
        assert n.z == pytest.approx(0.0, abs=1e-4)
