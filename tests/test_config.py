"""Tests for scene configuration and the demo scene.

Tests cover:
- TransformStep validation and application order
- Dictionary round trips for every config dataclass
- Loading scenes from JSON files
- build_scene output
- The three-sphere demo scene
"""

import json
import math

import pytest

from src.caster.core.color import Color
from src.caster.core.matrix import SingularMatrixError, scaling, translation
from src.caster.core.vector import point
from src.caster.materials.phong import Material
from src.caster.scene.config import (
    CameraConfig,
    LightConfig,
    MaterialConfig,
    ObjectConfig,
    SceneConfig,
    TransformStep,
    build_scene,
    load_scene_config,
)
from src.caster.scene.spheres import create_sphere_scene, sphere_scene_config


class TestTransformStep:
    """Tests for individual transform steps."""

    def test_unknown_op(self):
        with pytest.raises(ValueError, match="Unknown transform op"):
            TransformStep("shear", [1, 2, 3])

    def test_wrong_arity(self):
        with pytest.raises(ValueError):
            TransformStep("translate", [1, 2])
        with pytest.raises(ValueError):
            TransformStep("rotate_x", [1, 2])

    def test_args_are_floats(self):
        assert TransformStep("scale", [1, 2, 3]).args == [1.0, 2.0, 3.0]

    def test_from_dict_requires_op(self):
        with pytest.raises(ValueError):
            TransformStep.from_dict({"args": [1, 2, 3]})

    def test_steps_apply_in_order(self):
        config = ObjectConfig(
            transform=[
                TransformStep("scale", [0.5, 0.5, 0.5]),
                TransformStep("translate", [1.5, 0.0, -0.5]),
            ]
        )
        assert config.build_transform() == translation(1.5, 0, -0.5) @ scaling(0.5, 0.5, 0.5)


class TestRoundTrips:
    """Config dataclasses survive to_dict/from_dict."""

    def test_material(self):
        config = MaterialConfig(color=(0.5, 1.0, 0.1), diffuse=0.7, specular=0.3)
        assert MaterialConfig.from_dict(config.to_dict()) == config

    def test_material_defaults(self):
        assert MaterialConfig.from_dict({}).build() == Material()

    def test_scene(self):
        config = sphere_scene_config(40, 20)
        restored = SceneConfig.from_dict(config.to_dict())
        assert restored == config

    def test_json_serializable(self):
        text = json.dumps(sphere_scene_config().to_dict())
        assert SceneConfig.from_dict(json.loads(text)) == sphere_scene_config()

    def test_bad_triple(self):
        with pytest.raises(ValueError):
            LightConfig.from_dict({"position": [1, 2]})

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            SceneConfig.from_dict([1, 2, 3])


class TestLoadSceneConfig:
    """Tests for reading JSON scene files."""

    def test_load(self, tmp_path):
        data = {
            "objects": [
                {
                    "transform": [{"op": "translate", "args": [0, 1, 0]}],
                    "material": {"color": [1, 0, 0], "shininess": 50},
                }
            ],
            "lights": [{"position": [-10, 10, -10], "intensity": [1, 1, 1]}],
            "camera": {"width": 32, "height": 16, "field_of_view": 1.0},
        }
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(data))

        config = load_scene_config(path)
        assert len(config.objects) == 1
        assert config.objects[0].material.color == (1.0, 0.0, 0.0)
        assert config.objects[0].material.shininess == 50.0
        assert config.camera.width == 32
        assert config.camera.from_point == CameraConfig().from_point

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            load_scene_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_scene_config(tmp_path / "missing.json")


class TestBuildScene:
    """Tests for turning configs into worlds and cameras."""

    def test_build(self):
        config = SceneConfig(
            objects=[ObjectConfig(transform=[TransformStep("translate", [0, 0, 2])])],
            lights=[LightConfig(position=(1, 2, 3), intensity=(0.5, 0.5, 0.5))],
            camera=CameraConfig(width=20, height=10),
        )
        world, camera = build_scene(config)

        assert len(world.objects) == 1
        assert world.objects[0].inverse_transform == translation(0, 0, -2)
        assert world.lights[0].position == point(1, 2, 3)
        assert world.lights[0].intensity == Color(0.5, 0.5, 0.5)
        assert (camera.hsize, camera.vsize) == (20, 10)

    def test_invalid_material(self):
        config = SceneConfig(objects=[ObjectConfig(material=MaterialConfig(ambient=2.0))])
        with pytest.raises(ValueError):
            build_scene(config)

    def test_singular_object_transform(self):
        config = SceneConfig(objects=[ObjectConfig(transform=[TransformStep("scale", [1, 0, 1])])])
        with pytest.raises(SingularMatrixError):
            build_scene(config)


class TestSphereScene:
    """Tests for the three-sphere demo room."""

    def test_contents(self):
        world, camera = create_sphere_scene(200, 100)
        assert len(world.objects) == 6
        assert len(world.lights) == 2
        assert (camera.hsize, camera.vsize) == (200, 100)
        assert camera.field_of_view == pytest.approx(math.pi / 3)

    def test_lights(self):
        world, _ = create_sphere_scene()
        key, fill = world.lights
        assert key.position == point(-10, 10, -10)
        assert key.intensity == Color(1, 1, 1)
        assert fill.position == point(-10, 3, -10)
        assert fill.intensity == Color(0.4, 0.7, 0.2)

    def test_materials(self):
        world, _ = create_sphere_scene()
        floor, left_wall, right_wall, middle, right, left = world.objects
        assert floor.material == Material(color=Color(1.0, 0.9, 0.9), specular=0.0)
        assert left_wall.material == floor.material
        assert middle.material == Material()
        assert right.material == Material(color=Color(0.5, 1.0, 0.1), diffuse=0.7, specular=0.3)
        assert left.material == Material(color=Color(1.0, 0.8, 0.1), diffuse=0.7, specular=0.3)

    def test_center_of_view_hits_the_middle_sphere(self):
        from src.caster.geometry.object import find_hit

        world, camera = create_sphere_scene(100, 50)
        hit = find_hit(world.intersect_world(camera.ray_for_pixel(50, 25)))
        assert hit is not None
        assert hit.object is world.objects[3]

    def test_render_pixel_is_lit(self):
        world, camera = create_sphere_scene(100, 50)
        color = camera.render_pixel(world, 50, 25)
        assert max(color) > 0.1
