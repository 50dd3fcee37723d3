"""Pinhole camera that maps pixels to world-space rays.

The camera sits at the origin of its own space looking down -z at an image
plane one unit away. The field of view spans the wider image dimension; the
narrower one is scaled by the aspect ratio. A view transform (usually built
with view_transform()) places the camera in the world, and the camera keeps
its inverse to carry rays from camera space out to world space.

Pixel (0, 0) is the top-left corner of the image; rays pass through pixel
centers.

Example:
    >>> from math import pi
    >>> from src.caster.camera.camera import Camera
    >>> from src.caster.core.vector import vector
    >>> camera = Camera(201, 101, pi / 2)
    >>> camera.ray_for_pixel(100, 50).direction == vector(0, 0, -1)
    True
"""

from __future__ import annotations

import logging
import math
import time
from typing import TYPE_CHECKING

import numpy as np

from src.caster.core.color import Color
from src.caster.core.matrix import Matrix
from src.caster.core.ray import Ray
from src.caster.core.vector import point
from src.caster.preview.canvas import Canvas

if TYPE_CHECKING:
    from src.caster.scene.world import World

logger = logging.getLogger(__name__)


class Camera:
    """Camera geometry and its placement in the world.

    Attributes:
        hsize: Image width in pixels.
        vsize: Image height in pixels.
        field_of_view: Angle (radians) covered by the wider image dimension.
        half_width: Half the image plane width at unit distance.
        half_height: Half the image plane height at unit distance.
        pixel_size: World size of one pixel on the image plane.
        inverse_transform: Inverse of the view transform (camera to world).
    """

    def __init__(
        self,
        hsize: int,
        vsize: int,
        field_of_view: float,
        transform: Matrix | None = None,
    ) -> None:
        """Create a camera.

        Args:
            hsize: Image width in pixels.
            vsize: Image height in pixels.
            field_of_view: Field of view in radians.
            transform: View transform (world to camera). Defaults to identity.

        Raises:
            ValueError: If a size is not positive or the field of view is not
                in (0, pi).
            SingularMatrixError: If the transform cannot be inverted.
        """
        if hsize <= 0 or vsize <= 0:
            raise ValueError(f"Camera size must be positive, got {hsize}x{vsize}")
        if not 0.0 < field_of_view < math.pi:
            raise ValueError(f"Field of view must be in (0, pi), got {field_of_view}")

        self.hsize = hsize
        self.vsize = vsize
        self.field_of_view = field_of_view

        # Image plane geometry stays in float32, as in the render kernel
        half_view = np.tan(np.float32(field_of_view) / np.float32(2.0))
        aspect = np.float32(hsize) / np.float32(vsize)
        if aspect >= 1.0:
            self.half_width = half_view
            self.half_height = half_view / aspect
        else:
            self.half_width = half_view * aspect
            self.half_height = half_view
        self.pixel_size = (self.half_width * np.float32(2.0)) / np.float32(hsize)

        self.inverse_transform = Matrix.identity()
        self.set_transform(transform if transform is not None else Matrix.identity())

    def set_transform(self, transform: Matrix) -> None:
        """Replace the view transform.

        Raises:
            SingularMatrixError: If the transform cannot be inverted.
        """
        self.inverse_transform = transform.inverse()

    def ray_for_pixel(self, px: int, py: int) -> Ray:
        """Build the world-space ray through the center of a pixel."""
        x_offset = (np.float32(px) + np.float32(0.5)) * self.pixel_size
        y_offset = (np.float32(py) + np.float32(0.5)) * self.pixel_size

        # Camera looks toward -z, so +x is to the left
        world_x = self.half_width - x_offset
        world_y = self.half_height - y_offset

        pixel = self.inverse_transform @ point(world_x, world_y, -1.0)
        origin = self.inverse_transform @ point(0.0, 0.0, 0.0)
        return Ray(origin, pixel - origin)

    def render_pixel(self, world: World, x: int, y: int) -> Color:
        return render_pixel(world, self, x, y)

    def render(self, world: World) -> Canvas:
        """Render every pixel serially into a new canvas."""
        logger.debug("Serial render %dx%d, %d objects, %d lights",
                     self.hsize, self.vsize, len(world.objects), len(world.lights))
        start = time.perf_counter()

        canvas = Canvas(self.hsize, self.vsize)
        for y in range(self.vsize):
            for x in range(self.hsize):
                canvas.write_pixel(x, y, render_pixel(world, self, x, y))

        logger.info("Serial render finished in %.2fs", time.perf_counter() - start)
        return canvas

    def __repr__(self) -> str:
        return f"Camera(hsize={self.hsize}, vsize={self.vsize}, field_of_view={self.field_of_view:g})"


def render_pixel(world: World, camera: Camera, x: int, y: int) -> Color:
    """Color of one pixel: the world's color along that pixel's ray."""
    return world.color_at(camera.ray_for_pixel(x, y))
