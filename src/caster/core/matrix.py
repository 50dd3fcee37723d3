"""General matrices and the affine transforms built from them.

The Matrix type is a small rectangular array of single-precision floats with
row-major indexing (m[row, col]). Determinants are computed by cofactor
(Laplace) expansion along the first row and the inverse is the transposed
cofactor matrix divided by the determinant. Matrices used as transforms are
4x4 and act on homogeneous Tuple4 values treated as column vectors.

Transform constructors:
    translation, scaling, rotation_x, rotation_y, rotation_z, view_transform

TransformBuilder composes transforms in the order they are declared: the
first call acts first on a point.

Example:
    >>> from math import pi
    >>> from src.caster.core.matrix import TransformBuilder, translation
    >>> from src.caster.core.vector import point
    >>> m = TransformBuilder().rotate_x(pi / 2).scale(5, 5, 5).translate(10, 5, 7).build()
    >>> m @ point(1, 0, 1) == point(15, 0, 7)
    True
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from src.caster.core.vector import EPSILON, Tuple4, cross


class SingularMatrixError(ValueError):
    """Raised when inverting a matrix whose determinant is (nearly) zero."""


class Matrix:
    """A rectangular matrix of float32 values.

    Attributes:
        width: Number of columns.
        height: Number of rows.
    """

    __slots__ = ("_data",)

    def __init__(self, rows: Sequence[Sequence[float]] | npt.ArrayLike) -> None:
        data = np.array(rows, dtype=np.float32)
        if data.ndim != 2 or data.size == 0:
            raise ValueError(f"Matrix needs a non-empty 2-D list of rows, got shape {data.shape}")
        self._data = data

    @classmethod
    def identity(cls, size: int = 4) -> Matrix:
        return cls(np.eye(size, dtype=np.float32))

    @classmethod
    def zeros(cls, width: int, height: int) -> Matrix:
        return cls(np.zeros((height, width), dtype=np.float32))

    @property
    def width(self) -> int:
        return int(self._data.shape[1])

    @property
    def height(self) -> int:
        return int(self._data.shape[0])

    def __getitem__(self, index: tuple[int, int]) -> np.float32:
        return self._data[index]

    def to_numpy(self) -> npt.NDArray[np.float32]:
        """Return a copy of the entries as a (height, width) float32 array."""
        return self._data.copy()

    def transpose(self) -> Matrix:
        return Matrix(self._data.T)

    # =========================================================================
    # Determinant and inverse
    # =========================================================================

    def _require_square(self) -> None:
        if self.width != self.height:
            raise ValueError(f"Operation needs a square matrix, got {self.height}x{self.width}")

    def submatrix(self, row: int, col: int) -> Matrix:
        """Return a copy with the given row and column removed."""
        return Matrix(np.delete(np.delete(self._data, row, axis=0), col, axis=1))

    def minor(self, row: int, col: int) -> np.float32:
        return self.submatrix(row, col).determinant()

    def cofactor(self, row: int, col: int) -> np.float32:
        """Minor with sign (-1)^(row + col)."""
        minor = self.minor(row, col)
        return minor if (row + col) % 2 == 0 else -minor

    def determinant(self) -> np.float32:
        """Determinant by cofactor expansion along the first row.

        Raises:
            ValueError: If the matrix is not square.
        """
        self._require_square()
        d = self._data
        if self.width == 1:
            return d[0, 0]
        if self.width == 2:
            return d[0, 0] * d[1, 1] - d[0, 1] * d[1, 0]

        total = np.float32(0.0)
        for col in range(self.width):
            total += d[0, col] * self.cofactor(0, col)
        return total

    def is_invertible(self) -> bool:
        return abs(float(self.determinant())) > EPSILON

    def inverse(self) -> Matrix:
        """Invert via the transposed cofactor matrix.

        Entry (i, j) of the result is cofactor(j, i) / determinant.

        Raises:
            SingularMatrixError: If |determinant| <= EPSILON.
        """
        det = self.determinant()
        if abs(float(det)) <= EPSILON:
            raise SingularMatrixError(f"Matrix is not invertible (determinant={float(det)})")

        result = np.zeros_like(self._data)
        for row in range(self.height):
            for col in range(self.width):
                # Transposed: cofactor(row, col) lands at (col, row)
                result[col, row] = self.cofactor(row, col) / det
        return Matrix(result)

    # =========================================================================
    # Products and comparison
    # =========================================================================

    def __matmul__(self, other: Matrix | Tuple4) -> Matrix | Tuple4:
        if isinstance(other, Tuple4):
            if self._data.shape != (4, 4):
                raise ValueError(f"Only 4x4 matrices transform tuples, got {self.height}x{self.width}")
            return Tuple4.from_array(self._data @ other.to_numpy())
        if isinstance(other, Matrix):
            if self.width != other.height:
                raise ValueError(
                    f"Cannot multiply {self.height}x{self.width} by {other.height}x{other.width}"
                )
            return Matrix(self._data @ other._data)
        return NotImplemented

    def isclose(self, other: Matrix, abs_tol: float = EPSILON) -> bool:
        if self._data.shape != other._data.shape:
            return False
        return bool(np.all(np.abs(self._data - other._data) <= abs_tol))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.isclose(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rows = ", ".join("[" + ", ".join(f"{v:g}" for v in row) + "]" for row in self._data)
        return f"Matrix([{rows}])"


# =============================================================================
# Transform Constructors
# =============================================================================


def translation(x: float, y: float, z: float) -> Matrix:
    m = np.eye(4, dtype=np.float32)
    m[0, 3] = x
    m[1, 3] = y
    m[2, 3] = z
    return Matrix(m)


def scaling(x: float, y: float, z: float) -> Matrix:
    m = np.eye(4, dtype=np.float32)
    m[0, 0] = x
    m[1, 1] = y
    m[2, 2] = z
    return Matrix(m)


def rotation_x(radians: float) -> Matrix:
    """Rotation about the x axis (left-handed, as seen looking toward -x)."""
    c, s = math.cos(radians), math.sin(radians)
    return Matrix(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, c, -s, 0.0],
            [0.0, s, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotation_y(radians: float) -> Matrix:
    c, s = math.cos(radians), math.sin(radians)
    return Matrix(
        [
            [c, 0.0, s, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [-s, 0.0, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotation_z(radians: float) -> Matrix:
    c, s = math.cos(radians), math.sin(radians)
    return Matrix(
        [
            [c, -s, 0.0, 0.0],
            [s, c, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def view_transform(from_point: Tuple4, to_point: Tuple4, up: Tuple4) -> Matrix:
    """Build the world-to-camera transform.

    Orients the world so that the camera at from_point looks down -z toward
    to_point, with up (a hint, need not be exactly perpendicular) roughly +y.

    Args:
        from_point: Camera position.
        to_point: Point the camera looks at.
        up: Approximate up direction.

    Returns:
        The 4x4 view transform.
    """
    forward = (to_point - from_point).normalize()
    left = cross(forward, up.normalize())
    true_up = cross(left, forward)
    orientation = Matrix(
        [
            [left.x, left.y, left.z, 0.0],
            [true_up.x, true_up.y, true_up.z, 0.0],
            [-forward.x, -forward.y, -forward.z, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    return orientation @ translation(-from_point.x, -from_point.y, -from_point.z)


# =============================================================================
# Fluent Composition
# =============================================================================


@dataclass(frozen=True)
class TransformBuilder:
    """Immutable builder that chains transforms in application order.

    Each call left-multiplies the new transform onto the accumulated matrix
    and returns a new builder, so the first declared operation is the first
    one applied to a point.

    Example:
        >>> TransformBuilder().translate(0, 1, 0).rotate_z(pi).build()
        # == rotation_z(pi) @ translation(0, 1, 0)
    """

    matrix: Matrix = field(default_factory=Matrix.identity)

    def then(self, transform: Matrix) -> TransformBuilder:
        return TransformBuilder(transform @ self.matrix)

    def translate(self, x: float, y: float, z: float) -> TransformBuilder:
        return self.then(translation(x, y, z))

    def scale(self, x: float, y: float, z: float) -> TransformBuilder:
        return self.then(scaling(x, y, z))

    def rotate_x(self, radians: float) -> TransformBuilder:
        return self.then(rotation_x(radians))

    def rotate_y(self, radians: float) -> TransformBuilder:
        return self.then(rotation_y(radians))

    def rotate_z(self, radians: float) -> TransformBuilder:
        return self.then(rotation_z(radians))

    def build(self) -> Matrix:
        return self.matrix
