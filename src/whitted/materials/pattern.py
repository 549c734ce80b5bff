"""Procedural color patterns evaluated inside kernels.

Each pattern maps a point in its own space to a color:

    SOLID     a
    STRIPE    a if floor(x) is even, else b
    GRADIENT  a + (b - a) * (x - floor(x))
    RING      a if floor(sqrt(x^2 + z^2)) is even, else b
    CHECKER   a if floor(x) + floor(y) + floor(z) is even, else b

Parity uses Taichi's Python-style ``%``, so negative coordinates alternate
correctly (floor(-0.1) = -1 is odd).

Pattern parameters live in Structure-of-Arrays Taichi fields, indexed by
pattern id. The World fills them in bulk on commit.
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import transform_point
from src.whitted.materials.material import Pattern, PatternKind

vec3 = tm.vec3

# Maximum number of patterns (at most one per material)
MAX_PATTERNS = 256

pattern_kinds = ti.field(dtype=ti.i32, shape=MAX_PATTERNS)
pattern_color_a = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PATTERNS)
pattern_color_b = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PATTERNS)
# World/object-to-pattern matrices (inverse of the pattern transform)
pattern_inverses = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_PATTERNS)
num_patterns = ti.field(dtype=ti.i32, shape=())


def clear_patterns() -> None:
    """Clear all patterns.

    Resets the count to zero; stale field data is overwritten on the next load.
    """
    num_patterns[None] = 0


def load_patterns(patterns: list[Pattern]) -> None:
    """Upload patterns into the pattern fields, replacing any existing ones.

    Pattern ``i`` in the list gets pattern id ``i``.

    Args:
        patterns: The patterns to upload.

    Raises:
        RuntimeError: If more than MAX_PATTERNS patterns are given.
    """
    count = len(patterns)
    if count > MAX_PATTERNS:
        raise RuntimeError(f"Maximum number of patterns ({MAX_PATTERNS}) exceeded")

    kinds = np.zeros(MAX_PATTERNS, dtype=np.int32)
    color_a = np.zeros((MAX_PATTERNS, 3), dtype=np.float32)
    color_b = np.zeros((MAX_PATTERNS, 3), dtype=np.float32)
    inverses = np.tile(np.identity(4, dtype=np.float32), (MAX_PATTERNS, 1, 1))

    for i, pattern in enumerate(patterns):
        kinds[i] = int(pattern.kind)
        color_a[i] = pattern.a.to_rgb()
        color_b[i] = pattern.b.to_rgb()
        inverses[i] = pattern.inverse.to_numpy()

    pattern_kinds.from_numpy(kinds)
    pattern_color_a.from_numpy(color_a)
    pattern_color_b.from_numpy(color_b)
    pattern_inverses.from_numpy(inverses)
    num_patterns[None] = count


def get_pattern_count() -> int:
    """Get the number of loaded patterns."""
    return int(num_patterns[None])


@ti.func
def _is_even(value: ti.f32) -> ti.i32:
    """1 if floor(value) is even, 0 otherwise."""
    return ti.cast(ti.cast(tm.floor(value), ti.i32) % 2 == 0, ti.i32)


@ti.func
def pattern_at(pattern_id: ti.i32, pattern_point: vec3) -> vec3:
    """Evaluate a pattern's color rule at a point in pattern space.

    Args:
        pattern_id: Index into the pattern fields.
        pattern_point: The point, already in the pattern's own space.

    Returns:
        The pattern color (RGB).
    """
    kind = pattern_kinds[pattern_id]
    a = pattern_color_a[pattern_id]
    b = pattern_color_b[pattern_id]
    x = pattern_point.x
    y = pattern_point.y
    z = pattern_point.z

    color = a
    if kind == int(PatternKind.STRIPE):
        if _is_even(x) == 0:
            color = b
    elif kind == int(PatternKind.GRADIENT):
        color = a + (b - a) * (x - tm.floor(x))
    elif kind == int(PatternKind.RING):
        if _is_even(ti.sqrt(x * x + z * z)) == 0:
            color = b
    elif kind == int(PatternKind.CHECKER):
        total = ti.cast(tm.floor(x), ti.i32) + ti.cast(tm.floor(y), ti.i32) + ti.cast(tm.floor(z), ti.i32)
        if total % 2 != 0:
            color = b

    return color


@ti.func
def pattern_at_object(pattern_id: ti.i32, object_point: vec3) -> vec3:
    """Evaluate a pattern at a point in the owning shape's object space.

    Applies the pattern's inverse transform before the color rule.
    """
    pattern_point = transform_point(pattern_inverses[pattern_id], object_point)
    return pattern_at(pattern_id, pattern_point)
