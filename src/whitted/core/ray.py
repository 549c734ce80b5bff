"""Ray representations and vector utilities.

Two forms of ray exist side by side:

* ``Ray``: an immutable host-side dataclass built from Tuples, used by
  scene-construction code and by the host query API.
* ``TiRay``: a Taichi dataclass with vec3 origin/direction, used inside
  kernels. Points and vectors are plain vec3s there; the homogeneous w is
  supplied by ``transform_point`` / ``transform_vector`` when a 4x4 matrix
  is applied.

Example:
    >>> from src.whitted.core.ray import Ray
    >>> from src.whitted.core.tuples import point, vector
    >>> ray = Ray(point(2.0, 3.0, 4.0), vector(1.0, 0.0, 0.0))
    >>> ray.position(2.5)
    Tuple(x=4.5, y=3.0, z=4.0, w=1.0)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.whitted.core.matrix import Matrix4
from src.whitted.core.tuples import Tuple

# Type aliases for Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4
mat4 = tm.mat4


@dataclass(frozen=True)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector. Not required to be normalized;
            the parameter t is measured in units of its length.
    """

    origin: Tuple
    direction: Tuple

    def __post_init__(self) -> None:
        if not self.origin.is_point:
            raise TypeError(f"ray origin must be a point, got {self.origin!r}")
        if not self.direction.is_vector:
            raise TypeError(f"ray direction must be a vector, got {self.direction!r}")

    def position(self, t: float) -> Tuple:
        """Return origin + t * direction."""
        return self.origin + self.direction * t

    def transform(self, matrix: Matrix4) -> "Ray":
        """Return a new ray with origin and direction multiplied by ``matrix``."""
        return Ray(matrix @ self.origin, matrix @ self.direction)

    def to_args(self) -> tuple[float, float, float, float, float, float]:
        """Flatten to (ox, oy, oz, dx, dy, dz) for passing to a kernel."""
        return (*self.origin.to_xyz(), *self.direction.to_xyz())


@ti.dataclass
class TiRay:
    """Kernel-side ray.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3).
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: TiRay, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Negative values lie behind the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def transform_point(m: mat4, p: vec3) -> vec3:
    """Apply a 4x4 affine matrix to a point (w = 1)."""
    r = m @ vec4(p.x, p.y, p.z, 1.0)
    return vec3(r[0], r[1], r[2])


@ti.func
def transform_vector(m: mat4, v: vec3) -> vec3:
    """Apply a 4x4 matrix to a vector (w = 0), ignoring translation."""
    r = m @ vec4(v.x, v.y, v.z, 0.0)
    return vec3(r[0], r[1], r[2])


@ti.func
def transform_ray(m: mat4, ray: TiRay) -> TiRay:
    """Return the ray expressed in the space that ``m`` maps into."""
    return TiRay(origin=transform_point(m, ray.origin), direction=transform_vector(m, ray.direction))


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal
