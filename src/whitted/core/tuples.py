"""Host-side points, vectors and colors.

Tuples carry a ``w`` component that tells points (w = 1) from vectors
(w = 0). Arithmetic that would produce anything else is rejected, so a
mistake like adding two points fails loudly instead of producing a tuple
with w = 2 that later transforms incorrectly.

All comparisons use EPSILON; exact float equality is never used.

Example:
    >>> from src.whitted.core.tuples import point, vector
    >>> p = point(1.0, 2.0, 3.0)
    >>> v = vector(0.0, 0.0, 1.0)
    >>> p + v
    Tuple(x=1.0, y=2.0, z=4.0, w=1.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.whitted.core.errors import ZeroVectorNormalizationError

# Tolerance for every floating-point comparison in the ray tracer
EPSILON = 1e-5

POINT_W = 1.0
VECTOR_W = 0.0


def equal(a: float, b: float) -> bool:
    """Compare two floats within EPSILON."""
    return abs(a - b) < EPSILON


@dataclass(frozen=True, eq=False)
class Tuple:
    """A homogeneous 4-component tuple.

    Attributes:
        x: The x component.
        y: The y component.
        z: The z component.
        w: 1.0 for points, 0.0 for vectors.
    """

    x: float
    y: float
    z: float
    w: float

    @property
    def is_point(self) -> bool:
        return equal(self.w, POINT_W)

    @property
    def is_vector(self) -> bool:
        return equal(self.w, VECTOR_W)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tuple):
            return NotImplemented
        return (
            equal(self.x, other.x)
            and equal(self.y, other.y)
            and equal(self.z, other.z)
            and equal(self.w, other.w)
        )

    __hash__ = None  # type: ignore[assignment]

    def __add__(self, other: Tuple) -> Tuple:
        if self.is_point and other.is_point:
            raise TypeError("cannot add two points")
        return Tuple(self.x + other.x, self.y + other.y, self.z + other.z, self.w + other.w)

    def __sub__(self, other: Tuple) -> Tuple:
        if self.is_vector and other.is_point:
            raise TypeError("cannot subtract a point from a vector")
        return Tuple(self.x - other.x, self.y - other.y, self.z - other.z, self.w - other.w)

    def __neg__(self) -> Tuple:
        if self.is_point:
            raise TypeError("cannot negate a point")
        return Tuple(-self.x, -self.y, -self.z, -self.w)

    def __mul__(self, scalar: float) -> Tuple:
        if self.is_point:
            raise TypeError("cannot scale a point")
        return Tuple(self.x * scalar, self.y * scalar, self.z * scalar, self.w * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Tuple:
        return self * (1.0 / scalar)

    def magnitude(self) -> float:
        """Euclidean length of the tuple."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z + self.w * self.w)

    def normalize(self) -> Tuple:
        """Return a unit vector with the same direction.

        Raises:
            ZeroVectorNormalizationError: If the magnitude is below EPSILON.
        """
        length = self.magnitude()
        if length < EPSILON:
            raise ZeroVectorNormalizationError(f"cannot normalize near-zero vector {self!r}")
        return Tuple(self.x / length, self.y / length, self.z / length, self.w / length)

    def dot(self, other: Tuple) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z + self.w * other.w

    def cross(self, other: Tuple) -> Tuple:
        """Cross product of two vectors.

        Raises:
            TypeError: If either operand is a point.
        """
        if not (self.is_vector and other.is_vector):
            raise TypeError("cross product is only defined for vectors")
        return vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def reflect(self, normal: Tuple) -> Tuple:
        """Reflect this vector about a (unit) normal."""
        return self - normal * (2.0 * self.dot(normal))

    def to_xyz(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


def point(x: float, y: float, z: float) -> Tuple:
    """Create a point (w = 1)."""
    return Tuple(float(x), float(y), float(z), POINT_W)


def vector(x: float, y: float, z: float) -> Tuple:
    """Create a vector (w = 0)."""
    return Tuple(float(x), float(y), float(z), VECTOR_W)


@dataclass(frozen=True, eq=False)
class Color:
    """An RGB color. Components are unbounded; clamping is left to the caller."""

    red: float
    green: float
    blue: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return (
            equal(self.red, other.red)
            and equal(self.green, other.green)
            and equal(self.blue, other.blue)
        )

    __hash__ = None  # type: ignore[assignment]

    def __add__(self, other: Color) -> Color:
        return Color(self.red + other.red, self.green + other.green, self.blue + other.blue)

    def __sub__(self, other: Color) -> Color:
        return Color(self.red - other.red, self.green - other.green, self.blue - other.blue)

    def __mul__(self, other: Color | float) -> Color:
        # Color * Color is the Hadamard (component-wise) product
        if isinstance(other, Color):
            return Color(self.red * other.red, self.green * other.green, self.blue * other.blue)
        return Color(self.red * other, self.green * other, self.blue * other)

    __rmul__ = __mul__

    def to_rgb(self) -> tuple[float, float, float]:
        return (self.red, self.green, self.blue)

    @classmethod
    def from_rgb(cls, rgb) -> Color:
        """Build a color from any 3-element sequence (tuple, list, ndarray)."""
        return cls(float(rgb[0]), float(rgb[1]), float(rgb[2]))


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
