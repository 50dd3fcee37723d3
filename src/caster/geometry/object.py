"""Scene objects and hit records.

An Object places a canonical shape in the world. It owns the inverse of its
placement transform, computed once at construction, and uses it to move
world rays into canonical space for intersection and to bring canonical
normals back out (through the inverse's transpose).

Hit records tag each intersection parameter with the object it belongs to.
find_hit() picks the visible one: the smallest non-negative parameter.

Example:
    >>> from src.caster.core.matrix import scaling
    >>> from src.caster.core.ray import Ray
    >>> from src.caster.core.vector import point, vector
    >>> from src.caster.geometry.object import Object, find_hit
    >>> ball = Object.create(transform=scaling(2, 2, 2))
    >>> hit = find_hit(ball.intersect(Ray(point(0, 0, -5), vector(0, 0, 1))))
    >>> float(hit.t)
    3.0
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace

import numpy as np

from src.caster.core.matrix import Matrix
from src.caster.core.ray import Ray
from src.caster.core.vector import Tuple4
from src.caster.geometry.sphere import Sphere
from src.caster.materials.phong import Material

# Closed union of primitive kinds; add new variants here and to the dispatch below
Shape = Sphere


# =============================================================================
# Shape dispatch
# =============================================================================


def intersect_shape(shape: Shape, ray: Ray) -> list[np.float32]:
    """Intersect a canonical-space ray with a shape variant."""
    match shape:
        case Sphere():
            return shape.intersect(ray)
        case _:
            raise TypeError(f"Unsupported shape: {type(shape).__name__}")


def shape_normal_at(shape: Shape, object_point: Tuple4) -> Tuple4:
    """Canonical-space normal of a shape variant."""
    match shape:
        case Sphere():
            return shape.normal_at(object_point)
        case _:
            raise TypeError(f"Unsupported shape: {type(shape).__name__}")


# =============================================================================
# Objects
# =============================================================================


@dataclass(frozen=True, eq=False)
class Object:
    """A shape placed in the world with a material.

    Build instances with Object.create(), which takes the forward placement
    transform. Objects compare by identity: two objects with the same
    parameters are still different scene members.

    Attributes:
        shape: The canonical primitive.
        inverse_transform: Inverse of the placement transform (world to
            canonical space).
        material: Surface material.
    """

    shape: Shape = field(default_factory=Sphere)
    inverse_transform: Matrix = field(default_factory=Matrix.identity)
    material: Material = field(default_factory=Material)

    @classmethod
    def create(
        cls,
        shape: Shape | None = None,
        transform: Matrix | None = None,
        material: Material | None = None,
    ) -> Object:
        """Create an object from its forward placement transform.

        Args:
            shape: Primitive to place (defaults to the unit sphere).
            transform: Canonical-to-world transform (defaults to identity).
            material: Surface material (defaults to Material()).

        Returns:
            The new object.

        Raises:
            SingularMatrixError: If the transform cannot be inverted.
            ValueError: If the transform is not 4x4.
        """
        if transform is None:
            transform = Matrix.identity()
        if (transform.height, transform.width) != (4, 4):
            raise ValueError(f"Object transform must be 4x4, got {transform.height}x{transform.width}")

        return cls(
            shape=shape if shape is not None else Sphere(),
            inverse_transform=transform.inverse(),
            material=material if material is not None else Material(),
        )

    def with_material(self, material: Material) -> Object:
        """Return a copy of this object with a different material."""
        return replace(self, material=material)

    def intersect(self, ray: Ray) -> list[HitRecord]:
        """Intersect a world-space ray, returning records tagged with self."""
        local_ray = ray.transform(self.inverse_transform)
        return HitRecord.from_parameters(intersect_shape(self.shape, local_ray), self)

    def normal_at(self, world_point: Tuple4) -> Tuple4:
        """Unit world-space normal at a world-space point on the surface."""
        object_point = self.inverse_transform @ world_point
        object_normal = shape_normal_at(self.shape, object_point)

        world_normal = (self.inverse_transform.transpose() @ object_normal).to_numpy()
        # The transpose carries translation into w; drop it
        world_normal[3] = 0.0
        return Tuple4.from_array(world_normal).normalize()


# =============================================================================
# Hit Records
# =============================================================================


@dataclass(frozen=True)
class HitRecord:
    """One ray-object intersection.

    Attributes:
        t: Ray parameter of the intersection.
        object: The object that was hit.
    """

    t: np.float32
    object: Object

    @staticmethod
    def from_parameters(ts: Iterable[float], obj: Object) -> list[HitRecord]:
        return [HitRecord(t, obj) for t in ts]


def find_hit(records: Sequence[HitRecord]) -> HitRecord | None:
    """Pick the visible hit from a list of records.

    Records with t < 0 lie behind the ray origin and are ignored. Among the
    rest the smallest t wins; on ties the earliest record is returned.

    Returns:
        The nearest forward hit, or None if there is none.
    """
    best = None
    for record in records:
        if record.t < 0.0:
            continue
        if best is None or record.t < best.t:
            best = record
    return best
