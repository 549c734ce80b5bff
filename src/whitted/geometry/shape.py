"""Shape records and the closed shape-kind dispatch.

Shapes are a tagged variant: every shape carries a ``ShapeKind`` and the
kernel-side ``local_intersect`` / ``local_normal_at`` functions branch on it.
Adding a kind means adding an enum member and one branch to each dispatch
function.

A ``Shape`` is a host-side record (like the scene manager's per-primitive
info records). It keeps its transform together with the cached inverse and
inverse-transpose, so a non-invertible transform is rejected the moment it
is assigned, not when the scene is rendered.

Example:
    >>> from src.whitted.geometry.shape import Shape
    >>> from src.whitted.core.transforms import scaling
    >>> sphere = Shape.sphere(transform=scaling(2.0, 2.0, 2.0))
    >>> sphere.set_transform(scaling(0.0, 1.0, 1.0))
    Traceback (most recent call last):
        ...
    src.whitted.core.errors.DegenerateTransformError: matrix is not invertible ...
"""

from dataclasses import dataclass, field
from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.whitted.core.matrix import IDENTITY, Matrix4
from src.whitted.core.ray import TiRay
from src.whitted.geometry.plane import local_intersect_plane, local_normal_plane
from src.whitted.geometry.sphere import local_intersect_sphere, local_normal_sphere
from src.whitted.materials.material import Material

vec3 = tm.vec3


class ShapeKind(IntEnum):
    """Enumeration of supported primitive kinds.

    Stored per shape in a Taichi field and used for dispatch in kernels.
    """

    SPHERE = 0
    PLANE = 1


@dataclass(eq=False)
class Shape:
    """A primitive with a transform and a material.

    Attributes:
        kind: The geometric kind of the shape.
        material: Surface material. Shared materials are allowed.
    """

    kind: ShapeKind
    transform: Matrix4 = field(default_factory=Matrix4.identity)
    material: Material = field(default_factory=Material)

    def __post_init__(self) -> None:
        self.kind = ShapeKind(self.kind)
        self.set_transform(self.transform)

    @classmethod
    def sphere(cls, transform: Matrix4 = IDENTITY, material: Material | None = None) -> "Shape":
        return cls(ShapeKind.SPHERE, transform, material if material is not None else Material())

    @classmethod
    def plane(cls, transform: Matrix4 = IDENTITY, material: Material | None = None) -> "Shape":
        return cls(ShapeKind.PLANE, transform, material if material is not None else Material())

    def set_transform(self, transform: Matrix4) -> None:
        """Assign the object-to-world transform.

        Raises:
            DegenerateTransformError: If the matrix is not invertible. The
                shape keeps its previous transform in that case.
        """
        inverse = transform.inverse()
        self.transform = transform
        self._inverse = inverse
        self._normal_matrix = inverse.transpose()

    @property
    def inverse(self) -> Matrix4:
        """World-to-object matrix."""
        return self._inverse

    @property
    def normal_matrix(self) -> Matrix4:
        """Inverse-transpose, used to carry normals back to world space."""
        return self._normal_matrix


# =============================================================================
# Kernel-side dispatch
# =============================================================================


@ti.func
def local_intersect(kind: ti.i32, local_ray: TiRay):
    """Intersect an object-space ray with a primitive of the given kind.

    Args:
        kind: ShapeKind value.
        local_ray: The ray already transformed into object space.

    Returns:
        A tuple (count, t0, t1) with t0 <= t1; count is 0, 1 or 2.
    """
    count = 0
    t0 = 0.0
    t1 = 0.0
    if kind == int(ShapeKind.SPHERE):
        count, t0, t1 = local_intersect_sphere(local_ray)
    elif kind == int(ShapeKind.PLANE):
        count, t0, t1 = local_intersect_plane(local_ray)
    return count, t0, t1


@ti.func
def local_normal_at(kind: ti.i32, local_point: vec3) -> vec3:
    """Object-space surface normal of a primitive of the given kind."""
    normal = vec3(0.0, 0.0, 0.0)
    if kind == int(ShapeKind.SPHERE):
        normal = local_normal_sphere(local_point)
    elif kind == int(ShapeKind.PLANE):
        normal = local_normal_plane(local_point)
    return normal
