"""Phong surface material and the local reflectance model.

A Material holds a base color plus the ambient, diffuse and specular
coefficients and the specular exponent (shininess). lighting() evaluates the
contribution of a single point light at a surface point:

    effective = material.color * light.intensity
    ambient   = effective * ambient
    diffuse   = effective * diffuse * dot(light_dir, normal)
    specular  = intensity * specular * dot(reflect_dir, eye) ** shininess

A point in shadow only receives the ambient term. A surface facing away from
the light gets neither diffuse nor specular light, and specular light is
dropped when the reflection points away from the eye. Results are not
clamped.

Example:
    >>> from src.caster.core.color import Color
    >>> from src.caster.core.vector import point, vector
    >>> from src.caster.materials.phong import Material, lighting
    >>> from src.caster.scene.light import PointLight
    >>> light = PointLight(Color(1, 1, 1), point(0, 0, -10))
    >>> lighting(Material(), light, point(0, 0, 0), vector(0, 0, -1), vector(0, 0, -1), False)
    Color(1.9, 1.9, 1.9)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from src.caster.core.color import BLACK, WHITE, Color
from src.caster.core.vector import Tuple4, dot

if TYPE_CHECKING:
    from src.caster.scene.light import PointLight


@dataclass(frozen=True)
class Material:
    """Phong material parameters.

    Attributes:
        color: Base surface color.
        ambient: Fraction of light reflected regardless of geometry, in [0, 1].
        diffuse: Matte (Lambert) reflection coefficient, in [0, 1].
        specular: Highlight coefficient, in [0, 1].
        shininess: Specular exponent; larger values give smaller, tighter
            highlights. Must be positive.

    Raises:
        ValueError: If a coefficient is outside [0, 1] or shininess <= 0.
    """

    color: Color = field(default_factory=lambda: WHITE)
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0

    def __post_init__(self) -> None:
        for name in ("ambient", "diffuse", "specular"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if self.shininess <= 0.0:
            raise ValueError(f"shininess must be positive, got {self.shininess}")


def lighting(
    material: Material,
    light: PointLight,
    position: Tuple4,
    eye: Tuple4,
    normal: Tuple4,
    in_shadow: bool,
) -> Color:
    """Shade one surface point for one light.

    Args:
        material: Surface material at the point.
        light: The light source.
        position: World-space surface point being shaded.
        eye: Unit vector from the point toward the eye.
        normal: Unit surface normal facing the eye.
        in_shadow: Whether the light is blocked from this point.

    Returns:
        The reflected color. Ambient only when in_shadow is set.
    """
    effective_color = material.color * light.intensity
    ambient = effective_color * material.ambient

    if in_shadow:
        return ambient

    light_dir = (light.position - position).normalize()
    light_dot_normal = dot(light_dir, normal)

    if light_dot_normal < 0.0:
        # Light is on the other side of the surface
        diffuse = BLACK
        specular = BLACK
    else:
        diffuse = effective_color * material.diffuse * light_dot_normal

        reflect_dir = (-light_dir).reflect(normal)
        reflect_dot_eye = dot(reflect_dir, eye)
        if reflect_dot_eye < 0.0:
            specular = BLACK
        else:
            factor = np.power(reflect_dot_eye, np.float32(material.shininess))
            specular = light.intensity * material.specular * factor

    return ambient + diffuse + specular
