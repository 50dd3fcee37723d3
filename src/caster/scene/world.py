"""World container, hit shading and shadow tests.

The World holds the ordered objects and lights of a scene and implements the
per-ray pipeline of the serial renderer:

    intersect_world -> find_hit -> prepare_computations -> shade_hit

Each light contributes independently; its contribution is reduced to the
ambient term when a shadow ray toward it is blocked. Shading and shadow rays
start from the over point, a point nudged off the surface along the normal,
so a surface never shadows itself through rounding error.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from src.caster.core.color import BLACK, WHITE, Color
from src.caster.core.matrix import scaling
from src.caster.core.ray import Ray
from src.caster.core.vector import Tuple4, dot, point
from src.caster.geometry.object import HitRecord, Object, find_hit
from src.caster.materials.phong import Material, lighting
from src.caster.scene.light import PointLight

# Distance the shading point is pushed off the surface along the normal
SHADOW_OFFSET = 0.01


@dataclass(frozen=True)
class HitInfo:
    """Precomputed values for shading one hit.

    Attributes:
        t: Ray parameter of the hit.
        object: The object that was hit.
        point: World-space hit point.
        over_point: point offset by SHADOW_OFFSET along the normal.
        eye: Unit vector toward the ray origin.
        normal: Unit normal, flipped to face the eye.
        inside: True when the ray origin is inside the object.
    """

    t: np.float32
    object: Object
    point: Tuple4
    over_point: Tuple4
    eye: Tuple4
    normal: Tuple4
    inside: bool


def prepare_computations(hit: HitRecord, ray: Ray) -> HitInfo:
    """Compute the shading context of a hit on a ray."""
    position = ray.position(hit.t)
    normal = hit.object.normal_at(position)
    eye = -ray.direction

    inside = bool(dot(normal, eye) < 0.0)
    if inside:
        normal = -normal

    return HitInfo(
        t=hit.t,
        object=hit.object,
        point=position,
        over_point=position + normal * SHADOW_OFFSET,
        eye=eye,
        normal=normal,
        inside=inside,
    )


@dataclass
class World:
    """Objects and lights that make up a scene.

    Order matters only for ties: records from earlier objects come first
    among hits at the same distance.
    """

    objects: list[Object] = field(default_factory=list)
    lights: list[PointLight] = field(default_factory=list)

    @classmethod
    def default(cls) -> World:
        """The two concentric spheres under one white light.

        The outer sphere is the unit sphere with color (0.8, 1.0, 0.6),
        diffuse 0.7 and specular 0.2; the inner one is the default-material
        unit sphere scaled by 0.5.
        """
        light = PointLight(WHITE, point(-10.0, 10.0, -10.0))
        outer = Object.create(material=Material(color=Color(0.8, 1.0, 0.6), diffuse=0.7, specular=0.2))
        inner = Object.create(transform=scaling(0.5, 0.5, 0.5))
        return cls(objects=[outer, inner], lights=[light])

    def add_object(self, obj: Object) -> None:
        self.objects.append(obj)

    def add_light(self, light: PointLight) -> None:
        self.lights.append(light)

    def intersect_world(self, ray: Ray) -> list[HitRecord]:
        """All hits of the ray with every object, sorted by t (stable)."""
        records: list[HitRecord] = []
        for obj in self.objects:
            records.extend(obj.intersect(ray))
        records.sort(key=lambda record: record.t)
        return records

    def is_shadowed(self, position: Tuple4, light: PointLight) -> bool:
        """Check whether an object blocks the segment from position to light."""
        to_light = light.position - position
        distance = to_light.magnitude()

        hit = find_hit(self.intersect_world(Ray(position, to_light)))
        return bool(hit is not None and hit.t < distance)

    def shade_hit(self, comps: HitInfo) -> Color:
        """Sum the Phong contribution of every light at a prepared hit."""
        material = comps.object.material
        color = BLACK
        for light in self.lights:
            shadowed = self.is_shadowed(comps.over_point, light)
            color = color + lighting(material, light, comps.over_point, comps.eye, comps.normal, shadowed)
        return color

    def color_at(self, ray: Ray) -> Color:
        """Color seen along a ray; black when nothing is hit in front."""
        hit = find_hit(self.intersect_world(ray))
        if hit is None:
            return BLACK
        return self.shade_hit(prepare_computations(hit, ray))
