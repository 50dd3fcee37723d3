"""Preview module for image output and visualization.

Components:
    canvas: Float RGB pixel buffer
    export: PPM and PNG export
    display: Gamma correction and Matplotlib preview
"""

from .canvas import Canvas
from .display import apply_gamma, process_image_for_display, show_preview
from .export import canvas_to_ppm, image_to_uint8, save_png, save_ppm

__all__ = [
    "Canvas",
    "canvas_to_ppm",
    "save_ppm",
    "save_png",
    "image_to_uint8",
    "apply_gamma",
    "process_image_for_display",
    "show_preview",
]
