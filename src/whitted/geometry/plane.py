"""Infinite plane primitive in object space.

In object space the plane is y = 0 (the xz-plane) with normal +y. A ray
whose direction has |y| < EPSILON is parallel to the plane and never
intersects it, including the coplanar case where the ray lies in the plane.
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import TiRay
from src.whitted.core.tuples import EPSILON

vec3 = tm.vec3


@ti.func
def local_intersect_plane(ray: TiRay):
    """Intersect an object-space ray with the xz-plane.

    Args:
        ray: The ray in the plane's object space.

    Returns:
        A tuple (count, t0, t1) with count 0 or 1; when count == 1 both t
        values hold the single root -origin.y / direction.y.
    """
    count = 0
    t = 0.0
    if ti.abs(ray.direction.y) >= EPSILON:
        t = -ray.origin.y / ray.direction.y
        count = 1
    return count, t, t


@ti.func
def local_normal_plane(local_point: vec3) -> vec3:
    """Object-space normal of the plane, constant +y."""
    return vec3(0.0, 1.0, 0.0)
