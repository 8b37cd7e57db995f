"""Core numeric building blocks.

This module contains the value types every other module is built from:

Components:
    vector: 3-component vector with dot/cross products and normalization
    matrix: Dense row-major matrix used for homogeneous transforms
    transform: Translation, rotation and scaling matrix builders
    ray: Origin plus direction, evaluated with point_at(t)
    mathutil: Tolerant comparisons and IEEE-style min/max/divide helpers
    errors: Exception hierarchy shared by the whole package

Everything here is plain Python (plus NumPy inside Matrix) and runs on the
host; the batched Taichi kernels live in geometry.kernels.
"""

from .errors import (
    CentroidUndefinedError,
    ContractError,
    InvalidBoundsError,
    MatrixIndexError,
    MatrixSizeError,
    MeshLoadError,
    MeshStateError,
    NoHitError,
    NotDivisibleError,
    PartIndexError,
    SceneCoreError,
)
from .matrix import Matrix
from .ray import Ray
from .transform import (
    composite_transform,
    rotation_x_matrix,
    rotation_y_matrix,
    rotation_z_matrix,
    scaling_matrix,
    transform_point,
    translation_matrix,
)
from .vector import Vector3, cross_product, dot_product

__all__ = [
    # Value types
    "Vector3",
    "Matrix",
    "Ray",
    "dot_product",
    "cross_product",
    # Transforms
    "translation_matrix",
    "rotation_x_matrix",
    "rotation_y_matrix",
    "rotation_z_matrix",
    "scaling_matrix",
    "composite_transform",
    "transform_point",
    # Errors
    "SceneCoreError",
    "MatrixSizeError",
    "ContractError",
    "MatrixIndexError",
    "InvalidBoundsError",
    "PartIndexError",
    "NotDivisibleError",
    "CentroidUndefinedError",
    "NoHitError",
    "MeshStateError",
    "MeshLoadError",
]
