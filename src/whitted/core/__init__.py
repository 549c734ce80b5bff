"""Core building blocks of the ray tracer.

Components:
    tuples: Points, vectors and colors with epsilon equality
    matrix: Immutable 4x4 matrices with cofactor inversion
    transforms: Translation, scaling, rotation, shearing and view transforms
    ray: Host and kernel ray types plus transform helpers
    intersection: Intersection records and hit selection
    canvas: In-memory RGB pixel buffer
    errors: Exception hierarchy
    numerics: Kernel-side normalization guard (imported after ti.init)
    integrator: Shading and the render kernel (imported after ti.init)

Only the field-free modules are re-exported here, so this package can be
imported before Taichi is initialized.
"""

from .canvas import Canvas
from .errors import DegenerateTransformError, RayTracerError, ZeroVectorNormalizationError
from .intersection import Intersection, hit, intersections
from .matrix import IDENTITY, Matrix4
from .ray import Ray, TiRay
from .transforms import (
    chain,
    rotation_x,
    rotation_y,
    rotation_z,
    scaling,
    shearing,
    translation,
    view_transform,
)
from .tuples import BLACK, EPSILON, WHITE, Color, Tuple, point, vector

__all__ = [
    # Tuples
    "Tuple",
    "Color",
    "point",
    "vector",
    "EPSILON",
    "BLACK",
    "WHITE",
    # Matrices and transforms
    "Matrix4",
    "IDENTITY",
    "translation",
    "scaling",
    "rotation_x",
    "rotation_y",
    "rotation_z",
    "shearing",
    "chain",
    "view_transform",
    # Rays and intersections
    "Ray",
    "TiRay",
    "Intersection",
    "intersections",
    "hit",
    # Output
    "Canvas",
    # Errors
    "RayTracerError",
    "DegenerateTransformError",
    "ZeroVectorNormalizationError",
]
