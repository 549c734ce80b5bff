"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate fields declared by modules imported earlier in the session.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene fields before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so the field modules are created after ti.init
    from src.whitted.core.numerics import reset_numeric_flags
    from src.whitted.materials.pattern import clear_patterns
    from src.whitted.materials.phong import clear_materials
    from src.whitted.scene.intersection import clear_scene
    from src.whitted.scene.lights import clear_lights

    def _clear_all():
        clear_scene()
        clear_materials()
        clear_patterns()
        clear_lights()
        reset_numeric_flags()

    _clear_all()

    yield

    _clear_all()


@pytest.fixture
def default_world():
    """The two-sphere test world."""
    from src.whitted.scene.world import default_world

    return default_world()
