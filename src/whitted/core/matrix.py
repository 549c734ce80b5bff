"""Host-side 4x4 matrices backed by NumPy.

Determinants and inverses use cofactor expansion and the adjugate rather
than LU decomposition. A matrix is singular when its determinant is within
EPSILON of zero relative to the terms of its expansion, so uniformly small
transforms stay invertible. The cofactor helpers work on square arrays of
any size because the expansion recurses through 3x3 and 2x2 submatrices.

Example:
    >>> from src.whitted.core.matrix import Matrix4
    >>> from src.whitted.core.tuples import point
    >>> m = Matrix4.identity()
    >>> m @ point(1.0, 2.0, 3.0)
    Tuple(x=1.0, y=2.0, z=3.0, w=1.0)
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from src.whitted.core.errors import DegenerateTransformError
from src.whitted.core.tuples import EPSILON, Tuple

FloatArray = npt.NDArray[np.float64]


# =============================================================================
# Cofactor Expansion (any square size)
# =============================================================================


def submatrix(a: FloatArray, row: int, col: int) -> FloatArray:
    """Return a copy of ``a`` with the given row and column removed."""
    return np.delete(np.delete(a, row, axis=0), col, axis=1)


def minor(a: FloatArray, row: int, col: int) -> float:
    """Determinant of the submatrix at (row, col)."""
    return determinant(submatrix(a, row, col))


def cofactor(a: FloatArray, row: int, col: int) -> float:
    """Signed minor: negated when row + col is odd."""
    m = minor(a, row, col)
    return -m if (row + col) % 2 else m


def determinant(a: FloatArray) -> float:
    """Determinant by cofactor expansion along the first row."""
    size = a.shape[0]
    if size == 1:
        return float(a[0, 0])
    if size == 2:
        return float(a[0, 0] * a[1, 1] - a[0, 1] * a[1, 0])
    return float(sum(a[0, col] * cofactor(a, 0, col) for col in range(size)))


# =============================================================================
# Matrix4
# =============================================================================


class Matrix4:
    """An immutable 4x4 matrix.

    Use ``@`` to multiply by another matrix or to transform a Tuple.
    ``*`` is accepted as an alias of ``@``.

    Attributes:
        data: Read-only float64 array of shape (4, 4).
    """

    __slots__ = ("data",)

    def __init__(self, rows: Sequence[Sequence[float]] | FloatArray) -> None:
        data = np.array(rows, dtype=np.float64)
        if data.shape != (4, 4):
            raise ValueError(f"Matrix4 requires a 4x4 array, got shape {data.shape}")
        data.flags.writeable = False
        self.data = data

    @classmethod
    def identity(cls) -> Matrix4:
        return cls(np.identity(4))

    def __getitem__(self, index: tuple[int, int]) -> float:
        return float(self.data[index])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix4):
            return NotImplemented
        return bool(np.all(np.abs(self.data - other.data) < EPSILON))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix4({self.data.tolist()!r})"

    def __matmul__(self, other: Matrix4 | Tuple) -> Matrix4 | Tuple:
        if isinstance(other, Matrix4):
            return Matrix4(self.data @ other.data)
        if isinstance(other, Tuple):
            x, y, z, w = self.data @ np.array([other.x, other.y, other.z, other.w])
            return Tuple(float(x), float(y), float(z), float(w))
        return NotImplemented

    __mul__ = __matmul__

    def transpose(self) -> Matrix4:
        return Matrix4(self.data.T)

    def submatrix(self, row: int, col: int) -> FloatArray:
        return submatrix(self.data, row, col)

    def minor(self, row: int, col: int) -> float:
        return minor(self.data, row, col)

    def cofactor(self, row: int, col: int) -> float:
        return cofactor(self.data, row, col)

    def determinant(self) -> float:
        return determinant(self.data)

    def _expansion(self) -> tuple[float, float]:
        """Determinant along the first row, and the summed size of its terms."""
        terms = [self.data[0, col] * cofactor(self.data, 0, col) for col in range(4)]
        return float(sum(terms)), float(sum(abs(t) for t in terms))

    def is_invertible(self) -> bool:
        """True unless the determinant vanishes relative to its own terms.

        The test is scale-free: ``scaling(0.02, 0.02, 0.02)`` (det 8e-6) is
        invertible, while a matrix whose expansion terms cancel to within
        EPSILON of their size is not.
        """
        det, size = self._expansion()
        return abs(det) > EPSILON * size

    def inverse(self) -> Matrix4:
        """Invert via the adjugate (transposed cofactor matrix).

        Raises:
            DegenerateTransformError: If the matrix is not invertible (see
                ``is_invertible``).
        """
        det, size = self._expansion()
        if abs(det) <= EPSILON * size:
            raise DegenerateTransformError(
                f"matrix is not invertible (determinant {det:.3e}): {self.data.tolist()}"
            )
        cofactors = np.array(
            [[cofactor(self.data, row, col) for col in range(4)] for row in range(4)]
        )
        return Matrix4(cofactors.T / det)

    def to_numpy(self, dtype: npt.DTypeLike = np.float32) -> npt.NDArray:
        """Copy the matrix out as a writable array (float32 for Taichi upload)."""
        return self.data.astype(dtype)


IDENTITY = Matrix4.identity()
