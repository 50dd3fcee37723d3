"""Pixel canvas.

A Canvas is a float32 (height, width, 3) RGB buffer addressed by (x, y) with
(0, 0) at the top-left. It stores unclamped colors; clamping happens when the
canvas is serialized.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from src.caster.core.color import Color


class Canvas:
    """A rectangular grid of colors, initially black."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._pixels = np.zeros((height, width, 3), dtype=np.float32)

    @classmethod
    def from_array(cls, image: npt.ArrayLike) -> Canvas:
        """Wrap a copy of an (H, W, 3) array as a canvas."""
        data = np.asarray(image, dtype=np.float32)
        if data.ndim != 3 or data.shape[2] != 3:
            raise ValueError(f"Expected image of shape (H, W, 3), got {data.shape}")
        canvas = cls(data.shape[1], data.shape[0])
        canvas._pixels[...] = data
        return canvas

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} canvas")

    def write_pixel(self, x: int, y: int, color: Color) -> None:
        self._check_bounds(x, y)
        self._pixels[y, x] = color.to_numpy()

    def pixel_at(self, x: int, y: int) -> Color:
        self._check_bounds(x, y)
        return Color.from_array(self._pixels[y, x])

    def to_array(self) -> npt.NDArray[np.float32]:
        """Return a copy of the pixels as a (height, width, 3) array."""
        return self._pixels.copy()
