"""Host-side Phong material and pattern records.

These records hold plain Python values and carry no Taichi state; the World
uploads them into the material and pattern fields when it commits.

Example:
    >>> from src.whitted.materials.material import Material, Pattern
    >>> from src.whitted.core.tuples import Color
    >>> floor = Material(
    ...     specular=0.0,
    ...     pattern=Pattern.checker(Color(1.0, 1.0, 1.0), Color(0.0, 0.0, 0.0)),
    ... )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from src.whitted.core.matrix import IDENTITY, Matrix4
from src.whitted.core.tuples import Color


class PatternKind(IntEnum):
    """Enumeration of supported pattern rules."""

    SOLID = 0
    STRIPE = 1
    GRADIENT = 2
    RING = 3
    CHECKER = 4


@dataclass(eq=False)
class Pattern:
    """A two-color procedural pattern with its own transform.

    The pattern transform is independent of the shape's: a world point is
    taken into shape space first, then into pattern space.

    Attributes:
        kind: Which color rule to apply.
        a: First color (the only color for SOLID).
        b: Second color.
    """

    kind: PatternKind
    a: Color = field(default_factory=lambda: Color(1.0, 1.0, 1.0))
    b: Color = field(default_factory=lambda: Color(0.0, 0.0, 0.0))
    transform: Matrix4 = field(default_factory=Matrix4.identity)

    def __post_init__(self) -> None:
        self.kind = PatternKind(self.kind)
        self.set_transform(self.transform)

    @classmethod
    def solid(cls, color: Color) -> Pattern:
        return cls(PatternKind.SOLID, color, color)

    @classmethod
    def stripe(cls, a: Color, b: Color, transform: Matrix4 = IDENTITY) -> Pattern:
        return cls(PatternKind.STRIPE, a, b, transform)

    @classmethod
    def gradient(cls, a: Color, b: Color, transform: Matrix4 = IDENTITY) -> Pattern:
        return cls(PatternKind.GRADIENT, a, b, transform)

    @classmethod
    def ring(cls, a: Color, b: Color, transform: Matrix4 = IDENTITY) -> Pattern:
        return cls(PatternKind.RING, a, b, transform)

    @classmethod
    def checker(cls, a: Color, b: Color, transform: Matrix4 = IDENTITY) -> Pattern:
        return cls(PatternKind.CHECKER, a, b, transform)

    def set_transform(self, transform: Matrix4) -> None:
        """Assign the pattern transform.

        Raises:
            DegenerateTransformError: If the matrix is not invertible.
        """
        inverse = transform.inverse()
        self.transform = transform
        self._inverse = inverse

    @property
    def inverse(self) -> Matrix4:
        return self._inverse


@dataclass(eq=False)
class Material:
    """Phong surface parameters.

    Attributes:
        color: Surface color, used when no pattern is set.
        ambient: Ambient reflection weight, >= 0.
        diffuse: Diffuse reflection weight, >= 0.
        specular: Specular reflection weight, >= 0.
        shininess: Specular exponent, > 0. Larger values give a smaller,
            tighter highlight.
        reflective: Reflectivity in [0, 1]. Stored for scene descriptions
            but not used by the shading model.
        pattern: Optional pattern that replaces ``color``.
    """

    color: Color = field(default_factory=lambda: Color(1.0, 1.0, 1.0))
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0
    reflective: float = 0.0
    pattern: Pattern | None = None

    def __post_init__(self) -> None:
        for name in ("ambient", "diffuse", "specular"):
            value = getattr(self, name)
            if value < 0.0:
                raise ValueError(f"Material {name} = {value} must be non-negative")
        if self.shininess <= 0.0:
            raise ValueError(f"Material shininess = {self.shininess} must be positive")
        if not 0.0 <= self.reflective <= 1.0:
            raise ValueError(f"Material reflective = {self.reflective} is outside [0, 1]")
