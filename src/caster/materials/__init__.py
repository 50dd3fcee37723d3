"""Materials module: the Phong material and its lighting function."""

from .phong import Material, lighting

__all__ = [
    "Material",
    "lighting",
]
