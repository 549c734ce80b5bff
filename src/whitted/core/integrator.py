"""Whitted-style shading and the render loop.

Each primary ray is traced to its nearest hit and shaded with the Phong
model against every point light, with one shadow ray per light. There are
no secondary bounces: surfaces are lit directly or not at all, and rays
that miss everything return the background color.

The render is a single Taichi kernel whose outermost loop runs over every
pixel, so Taichi spreads it across its thread pool. Every pixel is computed
independently and written to its own cell of the canvas buffer; the scene
and camera fields are only read.

Example:
    >>> import math
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.camera.camera import Camera
    >>> from src.whitted.core.integrator import render
    >>> from src.whitted.scene.world import default_world
    >>> camera = Camera(11, 11, math.pi / 2)
    >>> canvas = render(camera, default_world())
"""

import logging
import time
from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from src.whitted.camera.camera import Camera, camera_ray_for_pixel, setup_camera
from src.whitted.core.canvas import Canvas
from src.whitted.core.numerics import check_numeric_flags, reset_numeric_flags
from src.whitted.core.ray import TiRay
from src.whitted.materials.phong import lighting
from src.whitted.scene.intersection import (
    HitRecord,
    intersect_scene,
    is_shadowed,
    prepare_hit,
    shape_material_ids,
    surface_color_at,
)
from src.whitted.scene.lights import light_intensities, light_positions, num_lights

if TYPE_CHECKING:
    from src.whitted.scene.world import World

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Color returned for rays that hit nothing
BACKGROUND_COLOR = vec3(0.0, 0.0, 0.0)


# =============================================================================
# Shading
# =============================================================================


@ti.func
def shade_hit(rec: HitRecord) -> vec3:
    """Color at a prepared hit, summed over all lights.

    Each light gets its own shadow test from the over_point, so a point can
    be lit by one light and shadowed from another. Shading is evaluated at
    the over_point too; this keeps the pattern lookup and the shadow test
    on the same side of the surface.

    Args:
        rec: The prepared hit.

    Returns:
        The summed Phong contribution of every light.
    """
    material_id = shape_material_ids[rec.shape_id]
    surface = surface_color_at(rec.shape_id, rec.over_point)

    color = vec3(0.0, 0.0, 0.0)
    for light_id in range(num_lights[None]):
        shadowed = is_shadowed(rec.over_point, light_id)
        color += lighting(
            material_id,
            surface,
            light_positions[light_id],
            light_intensities[light_id],
            rec.over_point,
            rec.eye,
            rec.normal,
            shadowed,
        )

    return color


@ti.func
def color_at(ray: TiRay) -> vec3:
    """Trace a ray into the scene and return the color it sees.

    Args:
        ray: The world-space ray.

    Returns:
        The shaded color of the nearest hit, or BACKGROUND_COLOR on a miss.
    """
    found, t, shape_id = intersect_scene(ray)
    color = BACKGROUND_COLOR
    if found == 1:
        rec = prepare_hit(ray, t, shape_id)
        color = shade_hit(rec)
    return color


# =============================================================================
# Render Loop
# =============================================================================


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32, pixels: ti.types.ndarray(dtype=ti.f32, ndim=3)):
    """Shade every pixel into a (height, width, 3) buffer."""
    for px, py in ti.ndrange(width, height):
        ray = camera_ray_for_pixel(px, py)
        color = color_at(ray)
        for c in ti.static(range(3)):
            pixels[py, px, c] = color[c]


def render(camera: Camera, world: "World") -> Canvas:
    """Render a world through a camera.

    Commits the world and uploads the camera before launching the kernel,
    so any edits made since the last render are picked up.

    Args:
        camera: The camera; its hsize x vsize becomes the canvas size.
        world: The scene to render.

    Returns:
        A new Canvas holding the image.

    Raises:
        ZeroVectorNormalizationError: If a kernel had to normalize a
            near-zero vector (a degenerate normal or camera ray).
    """
    world.commit()
    setup_camera(camera)
    canvas = Canvas(camera.hsize, camera.vsize)

    logger.info(
        "Rendering %dx%d image (%d shapes, %d lights)",
        camera.hsize,
        camera.vsize,
        len(world.shapes),
        len(world.lights),
    )
    start = time.perf_counter()

    reset_numeric_flags()
    _render_kernel(camera.hsize, camera.vsize, canvas.pixels)
    ti.sync()
    check_numeric_flags("render")

    logger.info("Rendered %dx%d image in %.3fs", camera.hsize, camera.vsize, time.perf_counter() - start)
    return canvas
