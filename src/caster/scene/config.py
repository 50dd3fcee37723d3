"""Scene configuration dataclasses and the scene builder.

A SceneConfig is a plain-data description of a scene: objects (each a list
of transform steps plus a material), lights and a camera. It round-trips
through dictionaries so scenes can be stored as JSON and loaded with
load_scene_config(). build_scene() turns a config into the World and Camera
the renderers consume.

Transform steps are applied in the order they are listed, so

    [{"op": "scale", "args": [0.5, 0.5, 0.5]},
     {"op": "translate", "args": [1.5, 0.0, -0.5]}]

shrinks the sphere first and then moves it.

Example:
    >>> from src.caster.scene.config import SceneConfig, build_scene
    >>> config = SceneConfig.from_dict({
    ...     "objects": [{"transform": [{"op": "translate", "args": [0, 1, 0]}]}],
    ...     "lights": [{"position": [-10, 10, -10]}],
    ...     "camera": {"width": 40, "height": 20},
    ... })
    >>> world, camera = build_scene(config)
    >>> len(world.objects), camera.hsize
    (1, 40)
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.caster.camera.camera import Camera
from src.caster.core.color import Color
from src.caster.core.matrix import Matrix, TransformBuilder, view_transform
from src.caster.core.vector import point, vector
from src.caster.geometry.object import Object
from src.caster.materials.phong import Material
from src.caster.scene.light import PointLight
from src.caster.scene.world import World

logger = logging.getLogger(__name__)

# Number of arguments each transform operation takes
TRANSFORM_OPS: dict[str, int] = {
    "translate": 3,
    "scale": 3,
    "rotate_x": 1,
    "rotate_y": 1,
    "rotate_z": 1,
}


def _triple(value: Any, name: str) -> tuple[float, float, float]:
    try:
        x, y, z = (float(v) for v in value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a list of 3 numbers, got {value!r}") from e
    return (x, y, z)


# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class TransformStep:
    """One transform operation.

    Attributes:
        op: Operation name, one of TRANSFORM_OPS.
        args: Operation arguments (x, y, z for translate/scale, an angle in
            radians for rotations).
    """

    op: str
    args: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.op not in TRANSFORM_OPS:
            raise ValueError(f"Unknown transform op {self.op!r}; expected one of {sorted(TRANSFORM_OPS)}")
        expected = TRANSFORM_OPS[self.op]
        if len(self.args) != expected:
            raise ValueError(f"Transform op {self.op!r} takes {expected} args, got {len(self.args)}")
        self.args = [float(a) for a in self.args]

    def apply(self, builder: TransformBuilder) -> TransformBuilder:
        return getattr(builder, self.op)(*self.args)

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op, "args": list(self.args)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransformStep:
        if "op" not in data:
            raise ValueError(f"Transform step needs an 'op' key, got {data!r}")
        return cls(op=data["op"], args=list(data.get("args", [])))


@dataclass
class MaterialConfig:
    """Phong material parameters; defaults match Material()."""

    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0

    def build(self) -> Material:
        return Material(
            color=Color(*self.color),
            ambient=self.ambient,
            diffuse=self.diffuse,
            specular=self.specular,
            shininess=self.shininess,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "color": list(self.color),
            "ambient": self.ambient,
            "diffuse": self.diffuse,
            "specular": self.specular,
            "shininess": self.shininess,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MaterialConfig:
        defaults = cls()
        return cls(
            color=_triple(data.get("color", defaults.color), "material color"),
            ambient=float(data.get("ambient", defaults.ambient)),
            diffuse=float(data.get("diffuse", defaults.diffuse)),
            specular=float(data.get("specular", defaults.specular)),
            shininess=float(data.get("shininess", defaults.shininess)),
        )


@dataclass
class ObjectConfig:
    """A unit sphere placed by a sequence of transform steps.

    Attributes:
        transform: Steps applied in order, first step first.
        material: Surface material.
    """

    transform: list[TransformStep] = field(default_factory=list)
    material: MaterialConfig = field(default_factory=MaterialConfig)

    def build_transform(self) -> Matrix:
        builder = TransformBuilder()
        for step in self.transform:
            builder = step.apply(builder)
        return builder.build()

    def build(self) -> Object:
        return Object.create(transform=self.build_transform(), material=self.material.build())

    def to_dict(self) -> dict[str, Any]:
        return {
            "transform": [step.to_dict() for step in self.transform],
            "material": self.material.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ObjectConfig:
        return cls(
            transform=[TransformStep.from_dict(s) for s in data.get("transform", [])],
            material=MaterialConfig.from_dict(data.get("material", {})),
        )


@dataclass
class LightConfig:
    """A point light."""

    position: tuple[float, float, float] = (-10.0, 10.0, -10.0)
    intensity: tuple[float, float, float] = (1.0, 1.0, 1.0)

    def build(self) -> PointLight:
        return PointLight(Color(*self.intensity), point(*self.position))

    def to_dict(self) -> dict[str, Any]:
        return {"position": list(self.position), "intensity": list(self.intensity)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LightConfig:
        defaults = cls()
        return cls(
            position=_triple(data.get("position", defaults.position), "light position"),
            intensity=_triple(data.get("intensity", defaults.intensity), "light intensity"),
        )


@dataclass
class CameraConfig:
    """Camera image size, field of view and placement.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        field_of_view: Field of view in radians.
        from_point: Camera position.
        to_point: Point the camera looks at.
        up: Approximate up direction.
    """

    width: int = 200
    height: int = 100
    field_of_view: float = math.pi / 3.0
    from_point: tuple[float, float, float] = (0.0, 1.5, -5.0)
    to_point: tuple[float, float, float] = (0.0, 1.0, 0.0)
    up: tuple[float, float, float] = (0.0, 1.0, 0.0)

    def build(self) -> Camera:
        transform = view_transform(point(*self.from_point), point(*self.to_point), vector(*self.up))
        return Camera(self.width, self.height, self.field_of_view, transform)

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "field_of_view": self.field_of_view,
            "from_point": list(self.from_point),
            "to_point": list(self.to_point),
            "up": list(self.up),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CameraConfig:
        defaults = cls()
        return cls(
            width=int(data.get("width", defaults.width)),
            height=int(data.get("height", defaults.height)),
            field_of_view=float(data.get("field_of_view", defaults.field_of_view)),
            from_point=_triple(data.get("from_point", defaults.from_point), "camera from_point"),
            to_point=_triple(data.get("to_point", defaults.to_point), "camera to_point"),
            up=_triple(data.get("up", defaults.up), "camera up"),
        )


@dataclass
class SceneConfig:
    """Configuration for a whole scene.

    Attributes:
        objects: Objects in the scene, in order.
        lights: Point lights, in order.
        camera: The camera.
    """

    objects: list[ObjectConfig] = field(default_factory=list)
    lights: list[LightConfig] = field(default_factory=list)
    camera: CameraConfig = field(default_factory=CameraConfig)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {
            "objects": [o.to_dict() for o in self.objects],
            "lights": [light.to_dict() for light in self.lights],
            "camera": self.camera.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SceneConfig:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'objects', 'lights' and 'camera' keys.

        Raises:
            ValueError: If an entry is malformed.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Scene config must be a mapping, got {type(data).__name__}")
        return cls(
            objects=[ObjectConfig.from_dict(o) for o in data.get("objects", [])],
            lights=[LightConfig.from_dict(light) for light in data.get("lights", [])],
            camera=CameraConfig.from_dict(data.get("camera", {})),
        )


# =============================================================================
# Loading and Building
# =============================================================================


def load_scene_config(path: str | Path) -> SceneConfig:
    """Read a SceneConfig from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not valid JSON or not a valid scene.
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid scene file {path}: {e}") from e
    return SceneConfig.from_dict(data)


def build_scene(config: SceneConfig) -> tuple[World, Camera]:
    """Build the world and camera described by a config.

    Raises:
        ValueError: If a material or camera parameter is invalid.
        SingularMatrixError: If an object or camera transform is singular.
    """
    world = World()
    for obj in config.objects:
        world.add_object(obj.build())
    for light in config.lights:
        world.add_light(light.build())
    camera = config.camera.build()

    logger.debug("Built scene with %d objects, %d lights, %dx%d camera",
                 len(world.objects), len(world.lights), camera.hsize, camera.vsize)
    return world, camera
