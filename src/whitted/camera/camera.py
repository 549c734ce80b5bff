"""Camera model for generating one primary ray per pixel.

The camera sits at the origin of its own space looking toward -z, with the
canvas one unit in front of it. Its view transform (usually built with
``view_transform``) maps world space into camera space, so ray origins and
canvas points are carried back to world space with the inverse.

Pixel geometry is derived once at construction:

    half_view = tan(field_of_view / 2)
    aspect    = hsize / vsize
    aspect >= 1: half_width = half_view,          half_height = half_view / aspect
    aspect <  1: half_width = half_view * aspect, half_height = half_view
    pixel_size = 2 * half_width / hsize

Rays go through pixel centres; pixel (0, 0) is the top-left corner.

Example:
    >>> import math
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.camera.camera import Camera
    >>> from src.whitted.core.tuples import point, vector
    >>> camera = Camera.look_at(
    ...     100, 50, math.pi / 3,
    ...     point(0.0, 1.5, -5.0), point(0.0, 1.0, 0.0), vector(0.0, 1.0, 0.0),
    ... )
    >>> canvas = camera.render(world)
"""

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from src.whitted.core.matrix import Matrix4
from src.whitted.core.numerics import normalize_checked
from src.whitted.core.ray import Ray, TiRay, transform_point
from src.whitted.core.transforms import view_transform
from src.whitted.core.tuples import Tuple, point

if TYPE_CHECKING:
    from src.whitted.core.canvas import Canvas
    from src.whitted.scene.world import World

vec3 = tm.vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(eq=False)
class Camera:
    """A pinhole camera mapping a 3D scene onto a hsize x vsize canvas.

    Attributes:
        hsize: Horizontal size of the canvas in pixels.
        vsize: Vertical size of the canvas in pixels.
        field_of_view: Horizontal or vertical angle (whichever side is
            longer) in radians, in the open interval (0, pi).
        transform: World-to-camera view transform.
    """

    hsize: int
    vsize: int
    field_of_view: float
    transform: Matrix4 = field(default_factory=Matrix4.identity)

    def __post_init__(self) -> None:
        if self.hsize <= 0 or self.vsize <= 0:
            raise ValueError(f"Camera size must be positive, got {self.hsize}x{self.vsize}")
        if not 0.0 < self.field_of_view < math.pi:
            raise ValueError(f"Field of view {self.field_of_view} is outside (0, pi)")

        half_view = math.tan(self.field_of_view / 2.0)
        aspect = self.hsize / self.vsize
        if aspect >= 1.0:
            self.half_width = half_view
            self.half_height = half_view / aspect
        else:
            self.half_width = half_view * aspect
            self.half_height = half_view
        self.pixel_size = (self.half_width * 2.0) / self.hsize

        self.set_transform(self.transform)

    @classmethod
    def look_at(
        cls,
        hsize: int,
        vsize: int,
        field_of_view: float,
        from_point: Tuple,
        to: Tuple,
        up: Tuple,
    ) -> "Camera":
        """Build a camera at ``from_point`` looking toward ``to``.

        Raises:
            ZeroVectorNormalizationError: If ``up`` is parallel to the view
                direction.
        """
        return cls(hsize, vsize, field_of_view, view_transform(from_point, to, up))

    def set_transform(self, transform: Matrix4) -> None:
        """Assign the view transform.

        Raises:
            DegenerateTransformError: If the matrix is not invertible.
        """
        inverse = transform.inverse()
        self.transform = transform
        self._inverse = inverse

    @property
    def inverse(self) -> Matrix4:
        """Camera-to-world matrix."""
        return self._inverse

    def ray_for_pixel(self, px: int, py: int) -> Ray:
        """Compute the world-space ray through the centre of pixel (px, py)."""
        xoffset = (px + 0.5) * self.pixel_size
        yoffset = (py + 0.5) * self.pixel_size

        # The camera looks toward -z, so +x in camera space is to the left
        world_x = self.half_width - xoffset
        world_y = self.half_height - yoffset

        pixel = self._inverse @ point(world_x, world_y, -1.0)
        origin = self._inverse @ point(0.0, 0.0, 0.0)
        direction = (pixel - origin).normalize()
        return Ray(origin, direction)

    def render(self, world: "World") -> "Canvas":
        """Render ``world`` through this camera into a new Canvas."""
        from src.whitted.core.integrator import render

        return render(self, world)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_inverse = ti.Matrix.field(4, 4, dtype=ti.f32, shape=())
_camera_half_width = ti.field(dtype=ti.f32, shape=())
_camera_half_height = ti.field(dtype=ti.f32, shape=())
_camera_pixel_size = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Upload the camera's derived state for use in kernels.

    Must be called before any kernel that uses ``camera_ray_for_pixel``.
    """
    _camera_inverse[None] = ti.Matrix(camera.inverse.to_numpy().tolist())
    _camera_half_width[None] = camera.half_width
    _camera_half_height[None] = camera.half_height
    _camera_pixel_size[None] = camera.pixel_size


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def camera_ray_for_pixel(px: ti.i32, py: ti.i32) -> TiRay:
    """Generate the primary ray through the centre of pixel (px, py).

    Kernel-side counterpart of ``Camera.ray_for_pixel``, reading the state
    uploaded by ``setup_camera``.

    Args:
        px: Pixel column (0 = left).
        py: Pixel row (0 = top).

    Returns:
        A TiRay with a unit direction.
    """
    pixel_size = _camera_pixel_size[None]
    xoffset = (ti.cast(px, ti.f32) + 0.5) * pixel_size
    yoffset = (ti.cast(py, ti.f32) + 0.5) * pixel_size

    world_x = _camera_half_width[None] - xoffset
    world_y = _camera_half_height[None] - yoffset

    inverse = _camera_inverse[None]
    pixel = transform_point(inverse, vec3(world_x, world_y, -1.0))
    origin = transform_point(inverse, vec3(0.0, 0.0, 0.0))
    return TiRay(origin=origin, direction=normalize_checked(pixel - origin))
