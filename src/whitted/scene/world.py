"""World: the collection of shapes and lights that makes up a scene.

The World is the host-side owner of the scene. It keeps ordered lists of
Shapes and PointLights and, on ``commit()``, uploads everything into the
Taichi fields read by kernels:

    shapes    -> scene.intersection fields (index = shape_id)
    materials -> materials.phong fields (one slot per shape)
    patterns  -> materials.pattern fields (one slot per patterned material)
    lights    -> scene.lights fields

Only one World is live in the fields at a time; every query and render
commits first, so edits between calls are always picked up.

The query methods (``intersect``, ``normal_at``, ``shade_hit``, ``color_at``
and friends) each launch a small kernel around the same ``@ti.func``s the
render loop uses and convert the results back to host Tuples and Colors.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.world import default_world
    >>> from src.whitted.core.ray import Ray
    >>> from src.whitted.core.tuples import point, vector
    >>> world = default_world()
    >>> world.color_at(Ray(point(0.0, 0.0, -5.0), vector(0.0, 0.0, 1.0)))
    Color(red=0.38066..., green=0.47583..., blue=0.2855...)
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import taichi as ti
import taichi.math as tm

from src.whitted.core.integrator import color_at, shade_hit
from src.whitted.core.intersection import Intersection, intersections
from src.whitted.core.matrix import IDENTITY, Matrix4
from src.whitted.core.numerics import check_numeric_flags, reset_numeric_flags
from src.whitted.core.ray import Ray, TiRay
from src.whitted.core.transforms import scaling
from src.whitted.core.tuples import Color, Tuple, point, vector
from src.whitted.geometry.shape import Shape, ShapeKind
from src.whitted.materials.material import Material, Pattern, PatternKind
from src.whitted.materials.pattern import load_patterns
from src.whitted.materials.phong import MAX_MATERIALS, lighting, load_materials
from src.whitted.scene.intersection import (
    MAX_SHAPES,
    intersect_shape,
    is_shadowed,
    load_shapes,
    normal_at,
    prepare_hit,
    shape_material_ids,
    surface_color_at,
)
from src.whitted.scene.lights import MAX_LIGHTS, PointLight, load_lights

logger = logging.getLogger(__name__)

vec3 = tm.vec3

# =============================================================================
# Query Buffers
# =============================================================================

# Vector inputs for query kernels (ray origin/direction, points, normals...)
_QUERY_INPUTS = 6
_query_inputs = ti.Vector.field(3, dtype=ti.f32, shape=_QUERY_INPUTS)

# Vector outputs (colors, normals, hit-record vectors)
_query_outputs = ti.Vector.field(3, dtype=ti.f32, shape=4)
_query_flag = ti.field(dtype=ti.i32, shape=())

# Intersection list; a sphere contributes at most two entries
_query_ts = ti.field(dtype=ti.f32, shape=2 * MAX_SHAPES)
_query_ids = ti.field(dtype=ti.i32, shape=2 * MAX_SHAPES)
_query_count = ti.field(dtype=ti.i32, shape=())


def _set_inputs(*values: tuple[float, float, float]) -> None:
    data = np.zeros((_QUERY_INPUTS, 3), dtype=np.float32)
    for i, value in enumerate(values):
        data[i] = value
    _query_inputs.from_numpy(data)


def _set_ray_inputs(ray: Ray) -> None:
    _set_inputs(ray.origin.to_xyz(), ray.direction.to_xyz())


def _output_color(index: int = 0) -> Color:
    return Color.from_rgb(_query_outputs[index].to_numpy())


def _output_point(index: int) -> Tuple:
    return point(*(float(v) for v in _query_outputs[index].to_numpy()))


def _output_vector(index: int) -> Tuple:
    return vector(*(float(v) for v in _query_outputs[index].to_numpy()))


@ti.func
def _input_ray() -> TiRay:
    return TiRay(origin=_query_inputs[0], direction=_query_inputs[1])


# Kernels whose functions loop over shapes or lights wrap their body in a
# single-iteration loop, so those inner loops run serially.


@ti.kernel
def _intersect_kernel(first: ti.i32, last: ti.i32):
    for _ in range(1):
        ray = _input_ray()
        n = 0
        for i in range(first, last):
            count, t0, t1 = intersect_shape(i, ray)
            if count >= 1:
                _query_ts[n] = t0
                _query_ids[n] = i
                n += 1
            if count == 2:
                _query_ts[n] = t1
                _query_ids[n] = i
                n += 1
        _query_count[None] = n


@ti.kernel
def _normal_kernel(shape_id: ti.i32):
    _query_outputs[0] = normal_at(shape_id, _query_inputs[0])


@ti.kernel
def _surface_color_kernel(shape_id: ti.i32):
    _query_outputs[0] = surface_color_at(shape_id, _query_inputs[0])


@ti.kernel
def _lighting_kernel(shape_id: ti.i32, in_shadow: ti.i32):
    # inputs: light position, light intensity, point, eye, normal
    surface = surface_color_at(shape_id, _query_inputs[2])
    _query_outputs[0] = lighting(
        shape_material_ids[shape_id],
        surface,
        _query_inputs[0],
        _query_inputs[1],
        _query_inputs[2],
        _query_inputs[3],
        _query_inputs[4],
        in_shadow,
    )


@ti.kernel
def _shadow_kernel(light_id: ti.i32):
    for _ in range(1):
        _query_flag[None] = is_shadowed(_query_inputs[0], light_id)


@ti.kernel
def _prepare_hit_kernel(t: ti.f32, shape_id: ti.i32):
    rec = prepare_hit(_input_ray(), t, shape_id)
    _query_outputs[0] = rec.point
    _query_outputs[1] = rec.over_point
    _query_outputs[2] = rec.eye
    _query_outputs[3] = rec.normal
    _query_flag[None] = rec.inside


@ti.kernel
def _shade_hit_kernel(t: ti.f32, shape_id: ti.i32):
    for _ in range(1):
        rec = prepare_hit(_input_ray(), t, shape_id)
        _query_outputs[0] = shade_hit(rec)


@ti.kernel
def _color_at_kernel():
    for _ in range(1):
        _query_outputs[0] = color_at(_input_ray())


# =============================================================================
# Host Records
# =============================================================================


@dataclass
class HitInfo:
    """Host-side copy of the shading state prepared for a hit.

    Attributes:
        t: The ray parameter of the hit.
        shape_id: Index of the shape that was hit.
        point: World-space hit point.
        over_point: Hit point nudged along the normal by SHADOW_BIAS.
        eye: Unit vector toward the ray origin.
        normal: Unit surface normal facing the eye.
        inside: True if the ray started inside the shape.
    """

    t: float
    shape_id: int
    point: Tuple
    over_point: Tuple
    eye: Tuple
    normal: Tuple
    inside: bool


@dataclass
class SceneConfig:
    """Serializable scene description.

    Attributes:
        shapes: One dict per shape: kind, transform rows and material.
        lights: One dict per light: position and intensity.
    """

    shapes: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


# =============================================================================
# World
# =============================================================================


class World:
    """An ordered collection of shapes and point lights.

    Shape order defines shape ids (the index stored in Intersection
    records) but has no effect on the rendered image.

    Attributes:
        shapes: Shapes in shape-id order.
        lights: Point lights; every light contributes to shading.

    Example:
        >>> from src.whitted.core.transforms import translation
        >>> world = World()
        >>> world.add_light(PointLight(point(-10.0, 10.0, -10.0), Color(1.0, 1.0, 1.0)))
        >>> floor = world.add_plane(material=Material(specular=0.0))
        >>> ball = world.add_sphere(translation(0.0, 1.0, 0.0))
    """

    def __init__(self) -> None:
        self.shapes: list[Shape] = []
        self.lights: list[PointLight] = []

    def clear(self) -> None:
        """Remove every shape and light."""
        self.shapes.clear()
        self.lights.clear()

    # =========================================================================
    # Scene Construction
    # =========================================================================

    def add_shape(self, shape: Shape) -> Shape:
        """Append a shape and return it.

        Raises:
            RuntimeError: If the world already holds MAX_SHAPES shapes.
        """
        if len(self.shapes) >= MAX_SHAPES:
            raise RuntimeError(f"Maximum number of shapes ({MAX_SHAPES}) exceeded")
        self.shapes.append(shape)
        return shape

    def add_sphere(self, transform: Matrix4 = IDENTITY, material: Material | None = None) -> Shape:
        """Add a unit sphere placed by ``transform``."""
        return self.add_shape(Shape.sphere(transform, material))

    def add_plane(self, transform: Matrix4 = IDENTITY, material: Material | None = None) -> Shape:
        """Add an infinite xz-plane placed by ``transform``."""
        return self.add_shape(Shape.plane(transform, material))

    def add_light(self, light: PointLight) -> PointLight:
        """Append a point light and return it.

        Raises:
            RuntimeError: If the world already holds MAX_LIGHTS lights.
        """
        if len(self.lights) >= MAX_LIGHTS:
            raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
        self.lights.append(light)
        return light

    def shape_index(self, shape: Shape) -> int:
        """Return the shape id of ``shape`` in this world.

        Raises:
            ValueError: If the shape does not belong to this world.
        """
        for i, candidate in enumerate(self.shapes):
            if candidate is shape:
                return i
        raise ValueError("shape is not part of this world")

    def commit(self) -> None:
        """Upload shapes, materials, patterns and lights into the Taichi fields.

        Each shape gets its own material slot, so shared Material objects
        are simply uploaded more than once.
        """
        materials: list[Material] = []
        pattern_ids: list[int] = []
        patterns: list[Pattern] = []
        for shape in self.shapes:
            material = shape.material
            materials.append(material)
            if material.pattern is None:
                pattern_ids.append(-1)
            else:
                pattern_ids.append(len(patterns))
                patterns.append(material.pattern)

        load_patterns(patterns)
        load_materials(materials, pattern_ids)
        load_shapes(self.shapes, list(range(len(self.shapes))))
        load_lights(self.lights)

        logger.debug(
            "Committed world: %d shapes, %d patterns, %d lights",
            len(self.shapes),
            len(patterns),
            len(self.lights),
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def _collect_intersections(self, ray: Ray, first: int, last: int) -> list[Intersection]:
        self.commit()
        _set_ray_inputs(ray)
        _intersect_kernel(first, last)
        count = int(_query_count[None])
        ts = _query_ts.to_numpy()[:count]
        ids = _query_ids.to_numpy()[:count]
        return intersections(*(Intersection(float(t), int(i)) for t, i in zip(ts, ids)))

    def intersect(self, ray: Ray) -> list[Intersection]:
        """Intersect a ray with every shape, sorted by ascending t.

        Negative t values (hits behind the ray origin) are included.
        """
        return self._collect_intersections(ray, 0, len(self.shapes))

    def intersect_shape(self, ray: Ray, shape: Shape) -> list[Intersection]:
        """Intersect a ray with a single shape of this world."""
        index = self.shape_index(shape)
        return self._collect_intersections(ray, index, index + 1)

    def normal_at(self, shape: Shape, world_point: Tuple) -> Tuple:
        """World-space unit normal of ``shape`` at a point on its surface.

        Raises:
            ZeroVectorNormalizationError: If the transformed normal vanished.
        """
        index = self.shape_index(shape)
        self.commit()
        _set_inputs(world_point.to_xyz())
        reset_numeric_flags()
        _normal_kernel(index)
        check_numeric_flags("normal_at")
        return _output_vector(0)

    def pattern_at(self, shape: Shape, world_point: Tuple) -> Color:
        """Surface color of ``shape`` at a world point.

        Uses the material's pattern (world -> object -> pattern space) when
        present, otherwise the material color.
        """
        index = self.shape_index(shape)
        self.commit()
        _set_inputs(world_point.to_xyz())
        _surface_color_kernel(index)
        return _output_color()

    def lighting(
        self,
        shape: Shape,
        light: PointLight,
        world_point: Tuple,
        eye: Tuple,
        normal: Tuple,
        in_shadow: bool = False,
    ) -> Color:
        """Phong color of ``shape``'s material at a point under one light.

        The light does not need to belong to the world.
        """
        index = self.shape_index(shape)
        self.commit()
        _set_inputs(
            light.position.to_xyz(),
            light.intensity.to_rgb(),
            world_point.to_xyz(),
            eye.to_xyz(),
            normal.to_xyz(),
        )
        reset_numeric_flags()
        _lighting_kernel(index, int(in_shadow))
        check_numeric_flags("lighting")
        return _output_color()

    def is_shadowed(self, world_point: Tuple, light_index: int = 0) -> bool:
        """Whether any shape lies strictly between a point and a light.

        Raises:
            IndexError: If ``light_index`` does not name a light.
        """
        if not 0 <= light_index < len(self.lights):
            raise IndexError(f"light index {light_index} out of range ({len(self.lights)} lights)")
        self.commit()
        _set_inputs(world_point.to_xyz())
        reset_numeric_flags()
        _shadow_kernel(light_index)
        check_numeric_flags("is_shadowed")
        return bool(_query_flag[None])

    def _check_shape_id(self, shape_id: int) -> None:
        if not 0 <= shape_id < len(self.shapes):
            raise IndexError(f"shape id {shape_id} out of range ({len(self.shapes)} shapes)")

    def prepare_hit(self, intersection: Intersection, ray: Ray) -> HitInfo:
        """Compute the shading state for ``intersection`` along ``ray``.

        Raises:
            IndexError: If the intersection's shape id is not in this world.
        """
        self._check_shape_id(intersection.shape_id)
        self.commit()
        _set_ray_inputs(ray)
        reset_numeric_flags()
        _prepare_hit_kernel(intersection.t, intersection.shape_id)
        check_numeric_flags("prepare_hit")
        return HitInfo(
            t=intersection.t,
            shape_id=intersection.shape_id,
            point=_output_point(0),
            over_point=_output_point(1),
            eye=_output_vector(2),
            normal=_output_vector(3),
            inside=bool(_query_flag[None]),
        )

    def shade_hit(self, intersection: Intersection, ray: Ray) -> Color:
        """Shaded color of a hit, summed over every light with shadows.

        Raises:
            IndexError: If the intersection's shape id is not in this world.
        """
        self._check_shape_id(intersection.shape_id)
        self.commit()
        _set_ray_inputs(ray)
        reset_numeric_flags()
        _shade_hit_kernel(intersection.t, intersection.shape_id)
        check_numeric_flags("shade_hit")
        return _output_color()

    def color_at(self, ray: Ray) -> Color:
        """Color seen along ``ray``: the shaded hit, or black on a miss."""
        self.commit()
        _set_ray_inputs(ray)
        reset_numeric_flags()
        _color_at_kernel()
        check_numeric_flags("color_at")
        return _output_color()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()
        for shape in self.shapes:
            config.shapes.append(
                {
                    "kind": shape.kind.name.lower(),
                    "transform": _matrix_to_rows(shape.transform),
                    "material": _material_to_dict(shape.material),
                }
            )
        for light in self.lights:
            config.lights.append(
                {
                    "position": list(light.position.to_xyz()),
                    "intensity": list(light.intensity.to_rgb()),
                }
            )
        return config

    def from_config(self, config: SceneConfig) -> None:
        """Replace the scene with the contents of ``config``.

        Raises:
            ValueError: If a shape or pattern kind is unknown, or a material
                parameter is out of range.
            DegenerateTransformError: If a transform is not invertible.
        """
        self.clear()

        for shape_config in config.shapes:
            kind_name = shape_config.get("kind", "").upper()
            if kind_name not in ShapeKind.__members__:
                raise ValueError(f"Unknown shape kind: {shape_config.get('kind')}")
            transform = Matrix4(shape_config.get("transform", _matrix_to_rows(IDENTITY)))
            material = _material_from_dict(shape_config.get("material", {}))
            self.add_shape(Shape(ShapeKind[kind_name], transform, material))

        for light_config in config.lights:
            position = light_config.get("position", [0.0, 0.0, 0.0])
            intensity = light_config.get("intensity", [1.0, 1.0, 1.0])
            self.add_light(PointLight(point(*position), Color(*intensity)))

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a plain dictionary (JSON-compatible)."""
        config = self.to_config()
        return {"shapes": config.shapes, "lights": config.lights}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary with 'shapes' and 'lights' keys."""
        self.from_config(SceneConfig(shapes=data.get("shapes", []), lights=data.get("lights", [])))

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_shapes() -> int:
        """Get the maximum number of shapes supported."""
        return MAX_SHAPES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS


def default_world() -> World:
    """The two-sphere test world.

    A white light at (-10, 10, -10), a unit sphere colored (0.8, 1.0, 0.6)
    with diffuse 0.7 and specular 0.2, and a default-material sphere scaled
    by 0.5 inside it.
    """
    world = World()
    world.add_light(PointLight(point(-10.0, 10.0, -10.0), Color(1.0, 1.0, 1.0)))
    world.add_sphere(material=Material(color=Color(0.8, 1.0, 0.6), diffuse=0.7, specular=0.2))
    world.add_sphere(scaling(0.5, 0.5, 0.5))
    return world


# =============================================================================
# Serialization Helpers
# =============================================================================


def _matrix_to_rows(matrix: Matrix4) -> list[list[float]]:
    return matrix.to_numpy(np.float64).tolist()


def _pattern_to_dict(pattern: Pattern) -> dict[str, Any]:
    return {
        "kind": pattern.kind.name.lower(),
        "a": list(pattern.a.to_rgb()),
        "b": list(pattern.b.to_rgb()),
        "transform": _matrix_to_rows(pattern.transform),
    }


def _pattern_from_dict(data: dict[str, Any]) -> Pattern:
    kind_name = data.get("kind", "").upper()
    if kind_name not in PatternKind.__members__:
        raise ValueError(f"Unknown pattern kind: {data.get('kind')}")
    return Pattern(
        PatternKind[kind_name],
        Color(*data.get("a", [1.0, 1.0, 1.0])),
        Color(*data.get("b", [0.0, 0.0, 0.0])),
        Matrix4(data.get("transform", _matrix_to_rows(IDENTITY))),
    )


def _material_to_dict(material: Material) -> dict[str, Any]:
    return {
        "color": list(material.color.to_rgb()),
        "ambient": material.ambient,
        "diffuse": material.diffuse,
        "specular": material.specular,
        "shininess": material.shininess,
        "reflective": material.reflective,
        "pattern": _pattern_to_dict(material.pattern) if material.pattern is not None else None,
    }


def _material_from_dict(data: dict[str, Any]) -> Material:
    pattern_data = data.get("pattern")
    return Material(
        color=Color(*data.get("color", [1.0, 1.0, 1.0])),
        ambient=data.get("ambient", 0.1),
        diffuse=data.get("diffuse", 0.9),
        specular=data.get("specular", 0.9),
        shininess=data.get("shininess", 200.0),
        reflective=data.get("reflective", 0.0),
        pattern=_pattern_from_dict(pattern_data) if pattern_data is not None else None,
    )
