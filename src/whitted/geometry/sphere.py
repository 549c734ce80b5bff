"""Unit-sphere primitive in object space.

The sphere is always the unit sphere centred on the origin; position and
size come from the owning shape's transform. Intersection uses the robust
quadratic formula from Ray Tracing Gems to avoid catastrophic cancellation
when b^2 is nearly equal to 4ac.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.geometry.sphere import local_intersect_sphere
    >>> # Use local_intersect_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import TiRay

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def _unit_sphere_roots(a: ti.f32, h: ti.f32, c: ti.f32):
    """Real roots of a*t^2 + 2*h*t + c = 0, in ascending order.

    One root comes from q = -(h + sign(h) * sqrt(h^2 - a*c)) as q / a, the
    other as c / q, so neither subtracts two nearly equal numbers. q only
    vanishes when h and the discriminant are both zero, and then the ray
    grazes the sphere at t = -h / a.

    Returns:
        A tuple (count, t0, t1). count is 0 when the discriminant is
        negative or the direction is the zero vector (a == 0), else 2.
    """
    count = 0
    t0 = 0.0
    t1 = 0.0

    discriminant = h * h - a * c
    if discriminant >= 0.0 and a > 0.0:
        sqrt_d = ti.sqrt(discriminant)
        q = -(h + ti.select(h < 0.0, -1.0, 1.0) * sqrt_d)
        if ti.abs(q) < 1e-10:
            t0 = -h / a
            t1 = t0
        else:
            t0 = ti.min(q / a, c / q)
            t1 = ti.max(q / a, c / q)
        count = 2

    return count, t0, t1


@ti.func
def local_intersect_sphere(ray: TiRay):
    """Intersect an object-space ray with the unit sphere.

    Solves |origin + t * direction|^2 = 1, written in half-b form:
        a*t^2 + 2*h*t + c = 0
    where a = d.d, h = d.o and c = o.o - 1.

    A tangent ray yields two equal roots, and a ray starting inside yields
    one negative and one positive root. Nothing is clipped by sign; hit
    selection happens later.

    Args:
        ray: The ray in the sphere's object space.

    Returns:
        A tuple (count, t0, t1) with count 0 or 2 and t0 <= t1. The t values
        are only meaningful when count == 2.
    """
    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, ray.origin)
    c = tm.dot(ray.origin, ray.origin) - 1.0

    count, t0, t1 = _unit_sphere_roots(a, h, c)
    return count, t0, t1


@ti.func
def local_normal_sphere(local_point: vec3) -> vec3:
    """Object-space normal of the unit sphere: the point minus the origin."""
    return local_point
