"""Phong material storage and the Phong reflection model.

The Phong model approximates the light leaving a surface toward the eye as
the sum of three terms:

    ambient  = effective_color * ambient
    diffuse  = effective_color * diffuse * max(0, N . L)
    specular = intensity * specular * max(0, R . E) ^ shininess

where effective_color = surface_color * light_intensity (component-wise),
L is the unit vector toward the light, R is -L reflected about N and E is
the unit vector toward the eye. A point in shadow receives only the ambient
term from that light.

Material parameters live in Structure-of-Arrays Taichi fields, indexed by
material id. The World fills them in bulk on commit.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.materials.phong import lighting
    >>> # Use lighting() within a Taichi kernel:
    >>> # color = lighting(material_id, surface_color, light_pos, light_color,
    >>> #                  point, eye, normal, in_shadow)
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from src.whitted.core.numerics import normalize_checked
from src.whitted.core.ray import reflect
from src.whitted.materials.material import Material

vec3 = tm.vec3

# Maximum number of materials (one per shape at most)
MAX_MATERIALS = 256

material_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_ambient = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_diffuse = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_specular = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_shininess = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_reflective = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
# Pattern id for each material, or -1 for a plain color
material_pattern_ids = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all Phong materials."""
    num_materials[None] = 0


def load_materials(materials: list[Material], pattern_ids: list[int]) -> None:
    """Upload materials into the material fields, replacing any existing ones.

    Args:
        materials: Materials in material-id order.
        pattern_ids: For each material, its pattern id or -1.

    Raises:
        RuntimeError: If more than MAX_MATERIALS materials are given.
        ValueError: If the two lists differ in length.
    """
    count = len(materials)
    if count > MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")
    if len(pattern_ids) != count:
        raise ValueError(f"Expected {count} pattern ids, got {len(pattern_ids)}")

    colors = np.zeros((MAX_MATERIALS, 3), dtype=np.float32)
    scalars = np.zeros((5, MAX_MATERIALS), dtype=np.float32)
    patterns = np.full(MAX_MATERIALS, -1, dtype=np.int32)

    for i, material in enumerate(materials):
        colors[i] = material.color.to_rgb()
        scalars[:, i] = (
            material.ambient,
            material.diffuse,
            material.specular,
            material.shininess,
            material.reflective,
        )
        patterns[i] = pattern_ids[i]

    material_colors.from_numpy(colors)
    material_ambient.from_numpy(scalars[0])
    material_diffuse.from_numpy(scalars[1])
    material_specular.from_numpy(scalars[2])
    material_shininess.from_numpy(scalars[3])
    material_reflective.from_numpy(scalars[4])
    material_pattern_ids.from_numpy(patterns)
    num_materials[None] = count


def get_material_count() -> int:
    """Get the number of loaded materials."""
    return int(num_materials[None])


@ti.func
def lighting(
    material_id: ti.i32,
    surface_color: vec3,
    light_position: vec3,
    light_intensity: vec3,
    point: vec3,
    eye: vec3,
    normal: vec3,
    in_shadow: ti.i32,
) -> vec3:
    """Evaluate the Phong reflection model for one light.

    Args:
        material_id: Index into the material fields.
        surface_color: Color of the surface at ``point`` (material color or
            pattern color).
        light_position: World-space position of the point light.
        light_intensity: Light color/intensity (RGB).
        point: World-space point being shaded.
        eye: Unit vector from the point toward the eye.
        normal: Unit surface normal, facing the eye.
        in_shadow: 1 if the light is occluded at this point.

    Returns:
        The light's contribution to the color at ``point``.
    """
    effective_color = surface_color * light_intensity
    ambient = effective_color * material_ambient[material_id]
    diffuse = vec3(0.0, 0.0, 0.0)
    specular = vec3(0.0, 0.0, 0.0)

    if in_shadow == 0:
        lightv = normalize_checked(light_position - point)
        light_dot_normal = tm.dot(lightv, normal)

        # A negative cosine means the light is on the other side of the surface
        if light_dot_normal >= 0.0:
            diffuse = effective_color * material_diffuse[material_id] * light_dot_normal

            reflectv = reflect(-lightv, normal)
            reflect_dot_eye = tm.dot(reflectv, eye)
            if reflect_dot_eye > 0.0:
                factor = reflect_dot_eye ** material_shininess[material_id]
                specular = light_intensity * material_specular[material_id] * factor

    return ambient + diffuse + specular
