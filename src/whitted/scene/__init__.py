"""Scene module for world composition and scene-level queries.

Components:
    world: World container, host query API, scene config and default_world
    intersection: Shape fields, closest-hit search, normals and shadows
    lights: PointLight records and light fields

All three modules declare Taichi fields, so nothing is imported here;
import them directly after ``ti.init``.
"""
