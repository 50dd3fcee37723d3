"""Scene module: lights, worlds, configuration and the demo scene.

Components:
    light: Point lights
    world: World container, hit context, shading and shadow tests
    config: Dataclass scene configuration with JSON loading
    spheres: The three-sphere demo room
"""

from .config import (
    CameraConfig,
    LightConfig,
    MaterialConfig,
    ObjectConfig,
    SceneConfig,
    TransformStep,
    build_scene,
    load_scene_config,
)
from .light import PointLight
from .spheres import create_sphere_scene, sphere_scene_config
from .world import SHADOW_OFFSET, HitInfo, World, prepare_computations

__all__ = [
    "PointLight",
    "World",
    "HitInfo",
    "prepare_computations",
    "SHADOW_OFFSET",
    "TransformStep",
    "MaterialConfig",
    "ObjectConfig",
    "LightConfig",
    "CameraConfig",
    "SceneConfig",
    "build_scene",
    "load_scene_config",
    "create_sphere_scene",
    "sphere_scene_config",
]
