"""Whitted-style ray tracer built on Taichi.

This package renders scenes of spheres and planes lit by point lights, with
Phong shading, hard shadows and procedural patterns:
- Host-side linear algebra (tuples, 4x4 matrices, transforms) in NumPy
- Per-ray intersection, shading and shadow tests as Taichi functions
- A data-parallel render kernel over every pixel

Subpackages:
    core: Tuples, matrices, transforms, rays, canvas and the render loop
    geometry: Shape records and the sphere/plane primitives
    materials: Phong materials and procedural patterns
    scene: World composition, lights and scene-level intersection
    camera: Camera model with per-pixel ray generation

Modules that declare Taichi fields (everything under ``scene`` and
``camera``, plus ``core.numerics``, ``core.integrator``,
``materials.pattern`` and ``materials.phong``) must be imported after
``ti.init``.
"""

__version__ = "0.1.0"
