"""Materials module for surface appearance.

Components:
    material: Host-side Material and Pattern records
    phong: Material fields and the Phong lighting function
    pattern: Pattern fields and the pattern color rules

``phong`` and ``pattern`` declare Taichi fields and are not re-exported;
import them directly after ``ti.init``.
"""

from .material import Material, Pattern, PatternKind

__all__ = [
    "Material",
    "Pattern",
    "PatternKind",
]
