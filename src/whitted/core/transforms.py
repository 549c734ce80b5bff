"""Affine transform builders.

Transforms compose by matrix multiplication and apply right-to-left:
to rotate, then scale, then translate an object, use

    translation(...) @ scaling(...) @ rotation_x(...)

or equivalently ``chain(rotation_x(...), scaling(...), translation(...))``,
which lists the steps in the order they are applied.

All rotations are right-handed and take radians.
"""

import math

from src.whitted.core.errors import ZeroVectorNormalizationError
from src.whitted.core.matrix import IDENTITY, Matrix4
from src.whitted.core.tuples import EPSILON, Tuple


def translation(x: float, y: float, z: float) -> Matrix4:
    return Matrix4(
        [
            [1.0, 0.0, 0.0, x],
            [0.0, 1.0, 0.0, y],
            [0.0, 0.0, 1.0, z],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def scaling(x: float, y: float, z: float) -> Matrix4:
    return Matrix4(
        [
            [x, 0.0, 0.0, 0.0],
            [0.0, y, 0.0, 0.0],
            [0.0, 0.0, z, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotation_x(radians: float) -> Matrix4:
    c, s = math.cos(radians), math.sin(radians)
    return Matrix4(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, c, -s, 0.0],
            [0.0, s, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotation_y(radians: float) -> Matrix4:
    c, s = math.cos(radians), math.sin(radians)
    return Matrix4(
        [
            [c, 0.0, s, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [-s, 0.0, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotation_z(radians: float) -> Matrix4:
    c, s = math.cos(radians), math.sin(radians)
    return Matrix4(
        [
            [c, -s, 0.0, 0.0],
            [s, c, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def shearing(xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> Matrix4:
    """Shear each axis in proportion to the other two.

    ``xy`` moves x in proportion to y, ``xz`` moves x in proportion to z, and
    so on.
    """
    return Matrix4(
        [
            [1.0, xy, xz, 0.0],
            [yx, 1.0, yz, 0.0],
            [zx, zy, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def chain(*transforms: Matrix4) -> Matrix4:
    """Compose transforms listed in application order.

    Args:
        *transforms: Matrices in the order they should be applied.

    Returns:
        The product ``transforms[-1] @ ... @ transforms[0]``, or the identity
        when called with no arguments.
    """
    result = IDENTITY
    for transform in transforms:
        result = transform @ result
    return result


def view_transform(from_point: Tuple, to: Tuple, up: Tuple) -> Matrix4:
    """Build a world-to-camera matrix for an eye at ``from_point`` looking at ``to``.

    The camera looks down its own -z axis with ``up`` roughly along +y.
    ``up`` does not need to be exactly perpendicular to the view direction.

    Args:
        from_point: Eye position (point).
        to: Point being looked at.
        up: Approximate up vector.

    Returns:
        The view transform.

    Raises:
        ZeroVectorNormalizationError: If ``from_point == to`` or ``up`` is
            parallel to the view direction.
    """
    forward = (to - from_point).normalize()
    left = forward.cross(up.normalize())
    if left.magnitude() < EPSILON:
        raise ZeroVectorNormalizationError("up vector is parallel to the view direction")
    true_up = left.cross(forward)
    orientation = Matrix4(
        [
            [left.x, left.y, left.z, 0.0],
            [true_up.x, true_up.y, true_up.z, 0.0],
            [-forward.x, -forward.y, -forward.z, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    return orientation @ translation(-from_point.x, -from_point.y, -from_point.z)
