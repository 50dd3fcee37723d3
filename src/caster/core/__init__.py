"""Core math and rendering module.

Components:
    vector: Homogeneous points and vectors
    color: RGB colors
    matrix: Matrices, affine transforms and the transform builder
    ray: Ray data structure
    integrator: Parallel Taichi renderer
"""

from .color import BLACK, WHITE, Color
from .matrix import (
    Matrix,
    SingularMatrixError,
    TransformBuilder,
    rotation_x,
    rotation_y,
    rotation_z,
    scaling,
    translation,
    view_transform,
)
from .ray import Ray
from .vector import EPSILON, NotAVectorError, Tuple4, cross, dot, point, vector

# Note: integrator is NOT imported here. It allocates Taichi fields at import
# time and needs ti.init() first; import src.caster.core.integrator directly.

__all__ = [
    "EPSILON",
    "Tuple4",
    "NotAVectorError",
    "point",
    "vector",
    "dot",
    "cross",
    "Color",
    "BLACK",
    "WHITE",
    "Matrix",
    "SingularMatrixError",
    "TransformBuilder",
    "translation",
    "scaling",
    "rotation_x",
    "rotation_y",
    "rotation_z",
    "view_transform",
    "Ray",
]
