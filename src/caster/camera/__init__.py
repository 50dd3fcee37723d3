"""Camera module for per-pixel ray generation."""

from .camera import Camera, render_pixel

__all__ = [
    "Camera",
    "render_pixel",
]
