"""Scene-level intersection, normals and shadow testing.

This module stores every shape of the active World in Taichi fields and
provides the kernel-side queries built on them:

    intersect_shape   world-space ray vs. one shape (via its inverse)
    intersect_scene   closest non-negative hit over all shapes
    normal_at         world-space surface normal (via the inverse-transpose)
    surface_color_at  material color or pattern color at a world point
    is_shadowed       whether a light is occluded from a point
    prepare_hit       precomputed shading state for a hit

Shapes are addressed by their index in the World's shape list; that index
is also the ``shape_id`` stored in host-side Intersection records.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.world import World
    >>> world = World()
    >>> world.add_sphere()
    >>> world.commit()
    >>> # Use intersect_scene / is_shadowed within a Taichi kernel
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from src.whitted.core.numerics import normalize_checked
from src.whitted.core.ray import TiRay, ray_at, transform_point, transform_ray, transform_vector
from src.whitted.geometry.shape import Shape, local_intersect, local_normal_at
from src.whitted.materials.pattern import pattern_at_object
from src.whitted.materials.phong import material_colors, material_pattern_ids
from src.whitted.scene.lights import light_positions

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Offset applied along the normal before casting shadow rays. Larger than
# EPSILON because kernels run in float32.
SHADOW_BIAS = 1e-4


@ti.dataclass
class HitRecord:
    """Shading state for a ray/shape hit.

    Attributes:
        t: The ray parameter of the hit.
        shape_id: Index of the shape that was hit.
        point: World-space hit point.
        over_point: The hit point nudged along the normal, used as the
            shadow-ray origin to avoid self-shadowing acne.
        eye: Unit vector from the hit point toward the ray origin.
        normal: Unit surface normal, flipped to face the eye.
        inside: 1 if the ray hit the surface from inside the shape.
    """

    t: ti.f32
    shape_id: ti.i32
    point: vec3
    over_point: vec3
    eye: vec3
    normal: vec3
    inside: ti.i32


# Maximum number of shapes supported in the scene
MAX_SHAPES = 256

# Shape storage: Structure of Arrays layout
shape_kinds = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
shape_material_ids = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
# World-to-object matrices
shape_inverses = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_SHAPES)
# Transposed inverses for carrying normals back to world space
shape_normal_matrices = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_SHAPES)
num_shapes = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all shapes from the scene.

    Resets the shape count to zero. The field data is not cleared but will
    be overwritten when shapes are loaded again.
    """
    num_shapes[None] = 0


def load_shapes(shapes: list[Shape], material_ids: list[int]) -> None:
    """Upload shapes into the shape fields, replacing any existing ones.

    Args:
        shapes: Shapes in shape-id order.
        material_ids: For each shape, the index of its material.

    Raises:
        RuntimeError: If more than MAX_SHAPES shapes are given.
        ValueError: If the two lists differ in length.
    """
    count = len(shapes)
    if count > MAX_SHAPES:
        raise RuntimeError(f"Maximum number of shapes ({MAX_SHAPES}) exceeded")
    if len(material_ids) != count:
        raise ValueError(f"Expected {count} material ids, got {len(material_ids)}")

    kinds = np.zeros(MAX_SHAPES, dtype=np.int32)
    materials = np.zeros(MAX_SHAPES, dtype=np.int32)
    inverses = np.tile(np.identity(4, dtype=np.float32), (MAX_SHAPES, 1, 1))
    normal_matrices = inverses.copy()

    for i, shape in enumerate(shapes):
        kinds[i] = int(shape.kind)
        materials[i] = material_ids[i]
        inverses[i] = shape.inverse.to_numpy()
        normal_matrices[i] = shape.normal_matrix.to_numpy()

    shape_kinds.from_numpy(kinds)
    shape_material_ids.from_numpy(materials)
    shape_inverses.from_numpy(inverses)
    shape_normal_matrices.from_numpy(normal_matrices)
    num_shapes[None] = count


def get_shape_count() -> int:
    """Get the number of shapes in the scene."""
    return int(num_shapes[None])


# =============================================================================
# Kernel-side queries
# =============================================================================


@ti.func
def intersect_shape(shape_id: ti.i32, ray: TiRay):
    """Intersect a world-space ray with one shape.

    The ray is carried into object space with the shape's cached inverse,
    so the primitive routines only ever see the canonical unit sphere or
    xz-plane. t values are the same in both spaces.

    Args:
        shape_id: Index of the shape.
        ray: The world-space ray.

    Returns:
        A tuple (count, t0, t1) with t0 <= t1; count is 0, 1 or 2.
    """
    local_ray = transform_ray(shape_inverses[shape_id], ray)
    count, t0, t1 = local_intersect(shape_kinds[shape_id], local_ray)
    return count, t0, t1


@ti.func
def intersect_scene(ray: TiRay):
    """Find the visible hit: the smallest non-negative t over all shapes.

    Equivalent to sorting every intersection and selecting the hit, without
    materialising the list.

    Args:
        ray: The world-space ray.

    Returns:
        A tuple (found, t, shape_id). ``found`` is 1 if any shape was hit;
        ``shape_id`` is -1 otherwise.
    """
    found = 0
    closest_t = 0.0
    closest_id = -1

    for i in range(num_shapes[None]):
        count, t0, t1 = intersect_shape(i, ray)
        if count > 0:
            # t0 <= t1, so t0 is the candidate unless it lies behind the origin
            t = t0
            if t < 0.0:
                t = t1
            if t >= 0.0 and (found == 0 or t < closest_t):
                found = 1
                closest_t = t
                closest_id = i

    return found, closest_t, closest_id


@ti.func
def normal_at(shape_id: ti.i32, world_point: vec3) -> vec3:
    """World-space unit normal of a shape at a point on its surface.

    The normal is computed in object space and carried back with the
    inverse-transpose, then renormalized; non-uniform scaling would skew it
    otherwise. Using a w = 0 multiply drops any translation.

    Args:
        shape_id: Index of the shape.
        world_point: A point on the shape's surface.

    Returns:
        The unit normal (zero vector, with the degenerate counter bumped,
        if the transformed normal vanished).
    """
    local_point = transform_point(shape_inverses[shape_id], world_point)
    local_normal = local_normal_at(shape_kinds[shape_id], local_point)
    world_normal = transform_vector(shape_normal_matrices[shape_id], local_normal)
    return normalize_checked(world_normal)


@ti.func
def surface_color_at(shape_id: ti.i32, world_point: vec3) -> vec3:
    """Color of a shape's surface at a world point.

    Uses the material's pattern when it has one, evaluated world ->
    object -> pattern space; otherwise the plain material color.
    """
    material_id = shape_material_ids[shape_id]
    color = material_colors[material_id]
    pattern_id = material_pattern_ids[material_id]
    if pattern_id >= 0:
        object_point = transform_point(shape_inverses[shape_id], world_point)
        color = pattern_at_object(pattern_id, object_point)
    return color


@ti.func
def is_shadowed(point: vec3, light_id: ti.i32) -> ti.i32:
    """Test whether any shape lies between a point and a light.

    Casts a ray from ``point`` toward the light and reports an occluder if
    any intersection satisfies 0 < t < distance to the light. Callers pass
    an over_point so the surface being shaded does not occlude itself.

    Args:
        point: World-space point (typically HitRecord.over_point).
        light_id: Index of the light.

    Returns:
        1 if the light is occluded, 0 otherwise.
    """
    to_light = light_positions[light_id] - point
    distance = tm.length(to_light)
    shadow_ray = TiRay(origin=point, direction=normalize_checked(to_light))

    shadowed = 0
    for i in range(num_shapes[None]):
        if shadowed == 0:
            count, t0, t1 = intersect_shape(i, shadow_ray)
            if count > 0:
                if (t0 > 0.0 and t0 < distance) or (t1 > 0.0 and t1 < distance):
                    shadowed = 1

    return shadowed


@ti.func
def prepare_hit(ray: TiRay, t: ti.f32, shape_id: ti.i32) -> HitRecord:
    """Precompute the shading state for a hit.

    Args:
        ray: The world-space ray that produced the hit.
        t: The ray parameter of the hit.
        shape_id: Index of the shape that was hit.

    Returns:
        A HitRecord with the normal flipped toward the eye when the ray
        started inside the shape.
    """
    point = ray_at(ray, t)
    eye = normalize_checked(-ray.direction)
    normal = normal_at(shape_id, point)

    inside = 0
    if tm.dot(normal, eye) < 0.0:
        inside = 1
        normal = -normal

    return HitRecord(
        t=t,
        shape_id=shape_id,
        point=point,
        over_point=point + normal * SHADOW_BIAS,
        eye=eye,
        normal=normal,
        inside=inside,
    )
