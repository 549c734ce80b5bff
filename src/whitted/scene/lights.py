"""Point light records and their kernel-side storage."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from src.whitted.core.tuples import Color, Tuple

vec3 = tm.vec3

# Maximum number of point lights in a scene
MAX_LIGHTS = 16

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


@dataclass(eq=False)
class PointLight:
    """A light with no extent, so shadows have hard edges.

    Attributes:
        position: Light position (a point).
        intensity: Light color and brightness.
    """

    position: Tuple
    intensity: Color

    def __post_init__(self) -> None:
        if not self.position.is_point:
            raise TypeError(f"light position must be a point, got {self.position!r}")


def clear_lights() -> None:
    """Remove all lights."""
    num_lights[None] = 0


def load_lights(lights: list[PointLight]) -> None:
    """Upload lights into the light fields, replacing any existing ones.

    Raises:
        RuntimeError: If more than MAX_LIGHTS lights are given.
    """
    count = len(lights)
    if count > MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    positions = np.zeros((MAX_LIGHTS, 3), dtype=np.float32)
    intensities = np.zeros((MAX_LIGHTS, 3), dtype=np.float32)
    for i, light in enumerate(lights):
        positions[i] = light.position.to_xyz()
        intensities[i] = light.intensity.to_rgb()

    light_positions.from_numpy(positions)
    light_intensities.from_numpy(intensities)
    num_lights[None] = count


def get_light_count() -> int:
    """Get the number of loaded lights."""
    return int(num_lights[None])
