"""Kernel-side numeric guards.

Taichi kernels cannot raise exceptions, so kernel code that would normalize
a near-zero vector increments a counter field instead of dividing. Host
entry points reset the counter before launching a kernel and call
``check_numeric_flags`` afterwards, which turns a non-zero count into a
ZeroVectorNormalizationError. A degenerate normal therefore fails the
render instead of leaking NaN into the image.

Note: this module declares a Taichi field, so it must be imported after
``ti.init``. It is deliberately not re-exported from ``src.whitted.core``.
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.errors import ZeroVectorNormalizationError
from src.whitted.core.tuples import EPSILON

vec3 = tm.vec3

# Number of near-zero normalizations since the last reset
_degenerate_normalizations = ti.field(dtype=ti.i32, shape=())


def reset_numeric_flags() -> None:
    """Clear the degenerate-normalization counter."""
    _degenerate_normalizations[None] = 0


def get_degenerate_count() -> int:
    """Number of near-zero normalizations recorded since the last reset."""
    return int(_degenerate_normalizations[None])


def check_numeric_flags(operation: str) -> None:
    """Raise if any kernel hit a degenerate normalization.

    Args:
        operation: Name of the host operation, used in the error message.

    Raises:
        ZeroVectorNormalizationError: If the counter is non-zero.
    """
    count = get_degenerate_count()
    if count > 0:
        raise ZeroVectorNormalizationError(
            f"{operation}: {count} near-zero vector(s) were normalized inside a kernel"
        )


@ti.func
def normalize_checked(v: vec3) -> vec3:
    """Normalize a vector, recording near-zero input instead of dividing.

    Args:
        v: The input vector.

    Returns:
        The unit vector, or the zero vector when ``|v| < EPSILON`` (in which
        case the degenerate counter is incremented).
    """
    length = tm.length(v)
    result = vec3(0.0, 0.0, 0.0)
    if length < EPSILON:
        ti.atomic_add(_degenerate_normalizations[None], 1)
    else:
        result = v / length
    return result
