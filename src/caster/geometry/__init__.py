"""Geometry module for the sphere primitive and placed objects.

Components:
    sphere: Unit sphere in canonical space
    object: Objects with placement transforms, hit records and hit selection
"""

from .object import HitRecord, Object, Shape, find_hit
from .sphere import Sphere

__all__ = [
    "Sphere",
    "Shape",
    "Object",
    "HitRecord",
    "find_hit",
]
