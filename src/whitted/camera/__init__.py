"""Camera module for primary ray generation.

Components:
    camera: Camera model, camera fields and kernel-side ray generation

The module declares Taichi fields; import it after ``ti.init``.
"""
