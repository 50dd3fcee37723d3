"""Demo scene: three spheres in a corner room.

The room is built from unit spheres flattened to thin disks: a floor and two
walls rotated to meet behind the spheres at a right angle. Three spheres of
different sizes sit on the floor, lit by a white key light and a dimmer
green-tinted fill light, both above and to the left of the camera.

Example:
    >>> from src.caster.scene.spheres import create_sphere_scene
    >>> world, camera = create_sphere_scene(200, 100)
    >>> len(world.objects), len(world.lights)
    (6, 2)
"""

from __future__ import annotations

import math

from src.caster.camera.camera import Camera
from src.caster.scene.config import (
    CameraConfig,
    LightConfig,
    MaterialConfig,
    ObjectConfig,
    SceneConfig,
    TransformStep,
    build_scene,
)
from src.caster.scene.world import World

# Flattened sphere used for the floor and walls
ROOM_SCALE = (10.0, 0.01, 10.0)

ROOM_MATERIAL = MaterialConfig(color=(1.0, 0.9, 0.9), specular=0.0)


def _wall(y_rotation: float) -> ObjectConfig:
    return ObjectConfig(
        transform=[
            TransformStep("scale", list(ROOM_SCALE)),
            TransformStep("rotate_x", [math.pi / 2.0]),
            TransformStep("rotate_y", [y_rotation]),
            TransformStep("translate", [0.0, 0.0, 5.0]),
        ],
        material=ROOM_MATERIAL,
    )


def sphere_scene_config(width: int = 200, height: int = 100) -> SceneConfig:
    """Describe the demo scene as a SceneConfig.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The scene configuration.
    """
    floor = ObjectConfig(
        transform=[TransformStep("scale", list(ROOM_SCALE))],
        material=ROOM_MATERIAL,
    )
    left_wall = _wall(-math.pi / 4.0)
    right_wall = _wall(math.pi / 4.0)

    middle = ObjectConfig(transform=[TransformStep("translate", [-0.5, 1.0, 0.5])])
    right = ObjectConfig(
        transform=[
            TransformStep("scale", [0.5, 0.5, 0.5]),
            TransformStep("translate", [1.5, 0.0, -0.5]),
        ],
        material=MaterialConfig(color=(0.5, 1.0, 0.1), diffuse=0.7, specular=0.3),
    )
    left = ObjectConfig(
        transform=[
            TransformStep("scale", [0.33, 0.33, 0.33]),
            TransformStep("translate", [-1.5, 0.33, -0.75]),
        ],
        material=MaterialConfig(color=(1.0, 0.8, 0.1), diffuse=0.7, specular=0.3),
    )

    lights = [
        LightConfig(position=(-10.0, 10.0, -10.0), intensity=(1.0, 1.0, 1.0)),
        LightConfig(position=(-10.0, 3.0, -10.0), intensity=(0.4, 0.7, 0.2)),
    ]

    camera = CameraConfig(
        width=width,
        height=height,
        field_of_view=math.pi / 3.0,
        from_point=(0.0, 1.5, -5.0),
        to_point=(0.0, 1.0, 0.0),
        up=(0.0, 1.0, 0.0),
    )

    return SceneConfig(
        objects=[floor, left_wall, right_wall, middle, right, left],
        lights=lights,
        camera=camera,
    )


def create_sphere_scene(width: int = 200, height: int = 100) -> tuple[World, Camera]:
    """Build the demo scene's world and camera.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A tuple of (world, camera).
    """
    return build_scene(sphere_scene_config(width, height))
