"""Tests for the world: intersection, hit context, shading and shadows.

Tests cover:
- The default world
- Sorted intersection over all objects
- prepare_computations for outside and inside hits
- shade_hit and color_at
- Shadow rays, including non-uniformly scaled blockers
"""

import pytest

from src.caster.core.color import BLACK, Color
from src.caster.core.matrix import scaling, translation
from src.caster.core.ray import Ray
from src.caster.core.vector import point, vector
from src.caster.geometry.object import HitRecord, Object
from src.caster.materials.phong import Material
from src.caster.scene.light import PointLight
from src.caster.scene.world import SHADOW_OFFSET, World, prepare_computations


class TestDefaultWorld:
    """Tests for World.default."""

    def test_contents(self, default_world):
        assert len(default_world.objects) == 2
        assert len(default_world.lights) == 1

        light = default_world.lights[0]
        assert light.position == point(-10, 10, -10)
        assert light.intensity == Color(1, 1, 1)

        outer, inner = default_world.objects
        assert outer.material == Material(color=Color(0.8, 1.0, 0.6), diffuse=0.7, specular=0.2)
        assert inner.inverse_transform == scaling(2, 2, 2)

    def test_empty_world(self):
        world = World()
        assert world.objects == []
        assert world.color_at(Ray(point(0, 0, -5), vector(0, 0, 1))) == BLACK


class TestIntersectWorld:
    """Tests for World.intersect_world."""

    def test_sorted_hits(self, default_world):
        records = default_world.intersect_world(Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert [float(r.t) for r in records] == pytest.approx([4.0, 4.5, 5.5, 6.0])

    def test_includes_negative_hits(self, default_world):
        records = default_world.intersect_world(Ray(point(0, 0, 0), vector(0, 0, 1)))
        assert [float(r.t) for r in records] == pytest.approx([-1.0, -0.5, 0.5, 1.0])

    def test_ties_keep_object_order(self):
        a = Object.create()
        b = Object.create()
        world = World(objects=[a, b])
        records = world.intersect_world(Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert [r.object for r in records] == [a, b, a, b]


class TestPrepareComputations:
    """Tests for the hit context."""

    def test_outside_hit(self):
        ray = Ray(point(0, 0, -5), vector(0, 0, 1))
        obj = Object.create()
        comps = prepare_computations(HitRecord(4.0, obj), ray)
        assert comps.t == 4.0
        assert comps.object is obj
        assert comps.point == point(0, 0, -1)
        assert comps.eye == vector(0, 0, -1)
        assert comps.normal == vector(0, 0, -1)
        assert comps.inside is False

    def test_inside_hit_flips_normal(self):
        ray = Ray(point(0, 0, 0), vector(0, 0, 1))
        comps = prepare_computations(HitRecord(1.0, Object.create()), ray)
        assert comps.point == point(0, 0, 1)
        assert comps.eye == vector(0, 0, -1)
        assert comps.inside is True
        assert comps.normal == vector(0, 0, -1)

    def test_over_point_is_above_surface(self):
        ray = Ray(point(0, 0, -5), vector(0, 0, 1))
        obj = Object.create(transform=translation(0, 0, 1))
        comps = prepare_computations(HitRecord(5.0, obj), ray)
        assert comps.over_point.z == pytest.approx(-SHADOW_OFFSET, abs=1e-6)
        assert comps.over_point.z < comps.point.z


class TestShading:
    """Tests for shade_hit and color_at."""

    def test_shade_outside(self, default_world):
        ray = Ray(point(0, 0, -5), vector(0, 0, 1))
        hit = HitRecord(4.0, default_world.objects[0])
        color = default_world.shade_hit(prepare_computations(hit, ray))
        assert color.isclose(Color(0.38066, 0.47583, 0.2855), abs_tol=1e-3)

    def test_shade_inside(self, default_world):
        default_world.lights = [PointLight(Color(1, 1, 1), point(0, 0.25, 0))]
        ray = Ray(point(0, 0, 0), vector(0, 0, 1))
        hit = HitRecord(0.5, default_world.objects[1])
        color = default_world.shade_hit(prepare_computations(hit, ray))
        # Shaded at the over point (0, 0, 0.49): 0.1 + 0.9 * 0.49 / |(0, 0.25, -0.49)|
        assert color.isclose(Color(0.90168, 0.90168, 0.90168), abs_tol=1e-3)

    def test_shadowed_hit_gets_ambient_only(self):
        s1 = Object.create()
        s2 = Object.create(transform=translation(0, 0, 10))
        world = World(objects=[s1, s2], lights=[PointLight(Color(1, 1, 1), point(0, 0, -10))])
        ray = Ray(point(0, 0, 5), vector(0, 0, 1))
        color = world.shade_hit(prepare_computations(HitRecord(4.0, s2), ray))
        assert color.isclose(Color(0.1, 0.1, 0.1), abs_tol=1e-6)

    def test_lights_add_up(self, default_world):
        ray = Ray(point(0, 0, -5), vector(0, 0, 1))
        single = default_world.color_at(ray)
        default_world.add_light(default_world.lights[0])
        double = default_world.color_at(ray)
        assert double.isclose(single * 2, abs_tol=1e-5)

    def test_color_at_miss(self, default_world):
        assert default_world.color_at(Ray(point(0, 0, -5), vector(0, 1, 0))) == BLACK

    def test_color_at_hit(self, default_world):
        color = default_world.color_at(Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert color.isclose(Color(0.38066, 0.47583, 0.2855), abs_tol=1e-3)

    def test_color_at_with_hit_behind_ray(self):
        outer = Object.create(material=Material(color=Color(0.8, 1.0, 0.6), ambient=1.0))
        inner = Object.create(transform=scaling(0.5, 0.5, 0.5), material=Material(ambient=1.0))
        world = World(objects=[outer, inner], lights=[PointLight(Color(1, 1, 1), point(-10, 10, -10))])
        color = world.color_at(Ray(point(0, 0, 0.75), vector(0, 0, -1)))
        assert color.isclose(inner.material.color, abs_tol=1e-5)

    def test_sphere_behind_camera_is_ignored(self):
        obj = Object.create(transform=translation(0, 0, -10))
        world = World(objects=[obj], lights=[PointLight(Color(1, 1, 1), point(0, 0, 10))])
        assert world.color_at(Ray(point(0, 0, 0), vector(0, 0, 1))) == BLACK


class TestShadows:
    """Tests for World.is_shadowed."""

    @pytest.mark.parametrize(
        "p, expected",
        [
            (point(0, 10, 0), False),
            (point(10, -10, 10), True),
            (point(-20, 20, -20), False),
            (point(-2, 2, -2), False),
        ],
    )
    def test_default_world(self, default_world, p, expected):
        assert default_world.is_shadowed(p, default_world.lights[0]) is expected

    def test_returns_plain_bool(self, default_world):
        light = default_world.lights[0]
        assert type(default_world.is_shadowed(point(10, -10, 10), light)) is bool
        assert type(default_world.is_shadowed(point(-2, 2, -2), light)) is bool

    def test_blocker_beyond_light_does_not_shadow(self):
        light = PointLight(Color(1, 1, 1), point(0, 0, 5))
        blocker = Object.create(transform=translation(0, 0, 10))
        world = World(objects=[blocker], lights=[light])
        assert world.is_shadowed(point(0, 0, 0), light) is False

    def test_scaled_blocker_distance_is_in_world_units(self):
        # A thin disk between the point and the light; the hit parameter on the
        # transformed ray must compare against the world distance to the light
        light = PointLight(Color(1, 1, 1), point(0, 10, 0))
        disk = Object.create(transform=translation(0, 5, 0) @ scaling(3, 0.01, 3))
        world = World(objects=[disk], lights=[light])
        assert world.is_shadowed(point(0, 0, 0), light) is True
        assert world.is_shadowed(point(0, 6, 0), light) is False
