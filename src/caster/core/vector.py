"""Homogeneous 4-component tuples for points and vectors.

This module provides the Tuple4 type used throughout the ray caster. A tuple
with w == 1 is a point (a position in space), a tuple with w == 0 is a vector
(a direction). Arithmetic is applied uniformly to all four components, so the
usual identities hold without special cases:

    point - point   -> vector
    point + vector  -> point
    vector + vector -> vector

Components are stored as single-precision floats (numpy.float32) and equality
is tolerance based, never exact.

Example:
    >>> from src.caster.core.vector import point, vector, dot, cross
    >>> p = point(1.0, 2.0, 3.0)
    >>> v = vector(0.0, 0.0, 2.0)
    >>> (p + v).z
    5.0
    >>> v.normalize() == vector(0.0, 0.0, 1.0)
    True
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np
import numpy.typing as npt

# Tolerance used for every floating-point comparison in the caster
EPSILON = float(np.finfo(np.float32).eps)


class NotAVectorError(ValueError):
    """Raised when a vector-only operation receives a point.

    This signals a logic error in the caller, not bad input data.
    """


class Tuple4:
    """A homogeneous (x, y, z, w) tuple.

    Use point() and vector() to build instances rather than calling the
    constructor with an explicit w.

    Attributes:
        x: First component.
        y: Second component.
        z: Third component.
        w: Homogeneous component (1 for points, 0 for vectors).
    """

    __slots__ = ("_v",)

    def __init__(self, x: float, y: float, z: float, w: float) -> None:
        self._v = np.array([x, y, z, w], dtype=np.float32)

    @classmethod
    def from_array(cls, values: npt.ArrayLike) -> Tuple4:
        """Build a tuple from any 4-element array-like."""
        data = np.asarray(values, dtype=np.float32)
        if data.shape != (4,):
            raise ValueError(f"Tuple4 needs exactly 4 components, got shape {data.shape}")
        result = cls.__new__(cls)
        result._v = data.copy()
        return result

    # =========================================================================
    # Component access
    # =========================================================================

    @property
    def x(self) -> float:
        return float(self._v[0])

    @property
    def y(self) -> float:
        return float(self._v[1])

    @property
    def z(self) -> float:
        return float(self._v[2])

    @property
    def w(self) -> float:
        return float(self._v[3])

    def __getitem__(self, index: int) -> np.float32:
        return self._v[index]

    def __iter__(self) -> Iterator[float]:
        return (float(c) for c in self._v)

    def __len__(self) -> int:
        return 4

    def to_numpy(self) -> npt.NDArray[np.float32]:
        """Return a copy of the components as a float32 array."""
        return self._v.copy()

    def is_point(self) -> bool:
        return abs(float(self._v[3]) - 1.0) <= EPSILON

    def is_vector(self) -> bool:
        return abs(float(self._v[3])) <= EPSILON

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def __add__(self, other: Tuple4) -> Tuple4:
        return Tuple4.from_array(self._v + other._v)

    def __sub__(self, other: Tuple4) -> Tuple4:
        return Tuple4.from_array(self._v - other._v)

    def __neg__(self) -> Tuple4:
        return Tuple4.from_array(-self._v)

    def __mul__(self, scalar: float) -> Tuple4:
        return Tuple4.from_array(self._v * np.float32(scalar))

    def __rmul__(self, scalar: float) -> Tuple4:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Tuple4:
        return Tuple4.from_array(self._v / np.float32(scalar))

    # =========================================================================
    # Vector-only operations
    # =========================================================================

    def magnitude(self) -> np.float32:
        """Euclidean length sqrt(x^2 + y^2 + z^2).

        Raises:
            NotAVectorError: If this tuple is a point.
        """
        _require_vector(self)
        xyz = self._v[:3]
        return np.sqrt(np.dot(xyz, xyz))

    def normalize(self) -> Tuple4:
        """Return the unit vector pointing the same way.

        The zero vector has no direction; normalizing it yields nan components.

        Raises:
            NotAVectorError: If this tuple is a point.
        """
        _require_vector(self)
        return self / self.magnitude()

    def reflect(self, normal: Tuple4) -> Tuple4:
        """Reflect this vector about a surface normal: v - n * 2 * dot(v, n)."""
        return self - normal * np.float32(2.0) * dot(self, normal)

    # =========================================================================
    # Comparison
    # =========================================================================

    def isclose(self, other: Tuple4, abs_tol: float = EPSILON) -> bool:
        """Check every component differs from other's by at most abs_tol."""
        return bool(np.all(np.abs(self._v - other._v) <= abs_tol))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tuple4):
            return NotImplemented
        return self.isclose(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        x, y, z, w = self
        return f"Tuple4({x:g}, {y:g}, {z:g}, {w:g})"


def _require_vector(*tuples: Tuple4) -> None:
    for t in tuples:
        if not t.is_vector():
            raise NotAVectorError(f"{t!r} is not a vector (w={t.w})")


def point(x: float, y: float, z: float) -> Tuple4:
    """Create a point (w = 1)."""
    return Tuple4(x, y, z, 1.0)


def vector(x: float, y: float, z: float) -> Tuple4:
    """Create a vector (w = 0)."""
    return Tuple4(x, y, z, 0.0)


def dot(a: Tuple4, b: Tuple4) -> np.float32:
    """Dot product of two vectors.

    Raises:
        NotAVectorError: If either operand is a point.
    """
    _require_vector(a, b)
    return np.dot(a._v, b._v)


def cross(a: Tuple4, b: Tuple4) -> Tuple4:
    """Cross product of two vectors.

    Raises:
        NotAVectorError: If either operand is a point.
    """
    _require_vector(a, b)
    return Tuple4.from_array(np.append(np.cross(a._v[:3], b._v[:3]), np.float32(0.0)))
