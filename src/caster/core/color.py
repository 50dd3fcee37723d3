"""RGB colors.

Colors are single-precision (r, g, b) triples. Values are not clamped: the
shading pipeline can produce components above 1.0 (several lights adding up)
and it is the serializer's job to clamp them when writing an image.

Example:
    >>> from src.caster.core.color import Color
    >>> Color(1.0, 0.2, 0.4) * Color(0.9, 1.0, 0.1)
    Color(0.9, 0.2, 0.04)
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np
import numpy.typing as npt

from src.caster.core.vector import EPSILON


class Color:
    """An RGB color with tolerance-based equality.

    Multiplying by a scalar scales every channel; multiplying by another
    color is the component-wise (Hadamard) product.
    """

    __slots__ = ("_c",)

    def __init__(self, red: float, green: float, blue: float) -> None:
        self._c = np.array([red, green, blue], dtype=np.float32)

    @classmethod
    def from_array(cls, values: npt.ArrayLike) -> Color:
        data = np.asarray(values, dtype=np.float32)
        if data.shape != (3,):
            raise ValueError(f"Color needs exactly 3 channels, got shape {data.shape}")
        result = cls.__new__(cls)
        result._c = data.copy()
        return result

    @property
    def red(self) -> float:
        return float(self._c[0])

    @property
    def green(self) -> float:
        return float(self._c[1])

    @property
    def blue(self) -> float:
        return float(self._c[2])

    def __iter__(self) -> Iterator[float]:
        return (float(c) for c in self._c)

    def to_numpy(self) -> npt.NDArray[np.float32]:
        return self._c.copy()

    def __add__(self, other: Color) -> Color:
        return Color.from_array(self._c + other._c)

    def __sub__(self, other: Color) -> Color:
        return Color.from_array(self._c - other._c)

    def __mul__(self, other: Color | float) -> Color:
        if isinstance(other, Color):
            return Color.from_array(self._c * other._c)
        return Color.from_array(self._c * np.float32(other))

    def __rmul__(self, scalar: float) -> Color:
        return Color.from_array(self._c * np.float32(scalar))

    def isclose(self, other: Color, abs_tol: float = EPSILON) -> bool:
        return bool(np.all(np.abs(self._c - other._c) <= abs_tol))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return self.isclose(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        r, g, b = self
        return f"Color({r:g}, {g:g}, {b:g})"


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
