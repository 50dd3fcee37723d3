"""Canonical unit sphere primitive.

The sphere is defined once, in its own canonical space: radius 1, centered at
the origin. Objects place it in the world with an affine transform and hand
it rays that are already mapped into canonical space, so intersection and
normal computation never deal with a center or radius.

The ray-sphere intersection solves

    |origin + t * direction - center|^2 = 1

which expands to the quadratic a*t^2 + b*t + c = 0 with

    a = dot(direction, direction)
    b = 2 * dot(direction, origin - center)
    c = dot(origin - center, origin - center) - 1

Example:
    >>> from src.caster.core.ray import Ray
    >>> from src.caster.core.vector import point, vector
    >>> from src.caster.geometry.sphere import Sphere
    >>> [float(t) for t in Sphere().intersect(Ray(point(0, 0, -5), vector(0, 0, 1)))]
    [4.0, 6.0]
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from src.caster.core.ray import Ray
from src.caster.core.vector import Tuple4, dot, point

# Center of every sphere in canonical space
ORIGIN = point(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Sphere:
    """The unit sphere centered at the canonical origin."""

    def intersect(self, ray: Ray) -> list[np.float32]:
        """Find the parameters where a canonical-space ray meets the sphere.

        Args:
            ray: The ray, already transformed into canonical space. Its
                direction need not be unit length.

        Returns:
            An empty list when the ray misses (negative discriminant),
            otherwise both roots, smaller first. A tangent ray yields the
            same root twice. Roots may be negative (behind the origin).
        """
        sphere_to_ray = ray.origin - ORIGIN

        a = dot(ray.direction, ray.direction)
        b = np.float32(2.0) * dot(ray.direction, sphere_to_ray)
        c = dot(sphere_to_ray, sphere_to_ray) - np.float32(1.0)

        discriminant = b * b - np.float32(4.0) * a * c
        if discriminant < 0.0:
            return []

        sqrt_disc = np.sqrt(discriminant)
        two_a = np.float32(2.0) * a
        return [(-b - sqrt_disc) / two_a, (-b + sqrt_disc) / two_a]

    def normal_at(self, object_point: Tuple4) -> Tuple4:
        """Unit outward normal at a canonical-space point on the surface."""
        return (object_point - ORIGIN).normalize()
