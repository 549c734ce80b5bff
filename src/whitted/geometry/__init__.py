"""Geometry module for shape primitives.

Components:
    shape: Shape records (kind, transform, material) and kind dispatch
    sphere: Unit sphere intersection and normal
    plane: xz-plane intersection and normal

Primitives are defined in object space and placed in the world by each
shape's transform; rays are carried into object space before intersection.
"""

from .shape import Shape, ShapeKind, local_intersect, local_normal_at

__all__ = [
    "Shape",
    "ShapeKind",
    "local_intersect",
    "local_normal_at",
]
