"""Ray data structure.

A ray is an origin point plus a direction vector. Constructing a ray always
normalizes the direction, so positions along a freshly built ray are measured
in world units.

Transforming a ray applies a matrix to both origin and direction and does NOT
renormalize. An object intersects a world ray by transforming it into its
canonical space with the inverse placement transform; because origin and
direction are mapped by the same matrix, a root t found in canonical space
locates the same point as t on the world ray.

Example:
    >>> from src.caster.core.ray import Ray
    >>> from src.caster.core.vector import point, vector
    >>> ray = Ray(point(2.0, 3.0, 4.0), vector(1.0, 0.0, 0.0))
    >>> ray.position(2.5) == point(4.5, 3.0, 4.0)
    True
"""

from __future__ import annotations

from src.caster.core.matrix import Matrix
from src.caster.core.vector import Tuple4


class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector. Unit length when built through the
            constructor; possibly scaled after transform().
    """

    __slots__ = ("origin", "direction")

    def __init__(self, origin: Tuple4, direction: Tuple4) -> None:
        self.origin = origin
        self.direction = direction.normalize()

    @classmethod
    def _unnormalized(cls, origin: Tuple4, direction: Tuple4) -> Ray:
        ray = cls.__new__(cls)
        ray.origin = origin
        ray.direction = direction
        return ray

    def position(self, t: float) -> Tuple4:
        """Compute the point origin + direction * t."""
        return self.origin + self.direction * t

    def transform(self, matrix: Matrix) -> Ray:
        """Apply matrix to origin and direction, keeping the direction's length."""
        return Ray._unnormalized(matrix @ self.origin, matrix @ self.direction)

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin!r}, direction={self.direction!r})"
