"""Builders for 4x4 homogeneous transform matrices.

Points are transformed as 4x1 columns (``Vector3.to_matrix()``) multiplied
on the right: ``p' = M * p``. Rotations are counter-clockwise about the
given axis for a positive angle in radians.
"""

import math

from src.python.core.mathutil import EPSILON
from src.python.core.matrix import Matrix
from src.python.core.vector import Vector3


def translation_matrix(trans: Vector3) -> Matrix:
    m = Matrix.identity(4)
    m.set(0, 3, trans.x)
    m.set(1, 3, trans.y)
    m.set(2, 3, trans.z)
    return m


def rotation_z_matrix(theta: float) -> Matrix:
    m = Matrix.identity(4)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    m[0, 0] = cos_t
    m[0, 1] = -sin_t
    m[1, 0] = sin_t
    m[1, 1] = cos_t
    return m


def rotation_y_matrix(theta: float) -> Matrix:
    m = Matrix.identity(4)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    m[0, 0] = cos_t
    m[0, 2] = sin_t
    m[2, 0] = -sin_t
    m[2, 2] = cos_t
    return m


def rotation_x_matrix(theta: float) -> Matrix:
    m = Matrix.identity(4)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    m[1, 1] = cos_t
    m[1, 2] = -sin_t
    m[2, 1] = sin_t
    m[2, 2] = cos_t
    return m


def scaling_matrix(
    sx: float | Vector3,
    sy: float | None = None,
    sz: float | None = None,
) -> Matrix:
    """Build a scaling matrix.

    Accepts a single uniform factor, three per-axis factors, or a
    ``Vector3`` of per-axis factors.
    """
    if isinstance(sx, Vector3):
        sx, sy, sz = sx.x, sx.y, sx.z
    elif sy is None and sz is None:
        sy = sz = sx
    elif sy is None or sz is None:
        raise ValueError("Provide either one uniform factor or all three axis factors")
    m = Matrix.identity(4)
    m[0, 0] = sx
    m[1, 1] = sy
    m[2, 2] = sz
    return m


def composite_transform(translate: Vector3, scale: Vector3, rotate: Vector3) -> Matrix:
    """Scale, then rotate about x, y and z in turn, then translate.

    Rotation angles whose magnitude is at most ``EPSILON`` are skipped.

    Args:
        translate: Translation applied last.
        scale: Per-axis scale factors applied first.
        rotate: Rotation angles (radians) about x, y and z.

    Returns:
        The 4x4 matrix ``T * Rz * Ry * Rx * S``.
    """
    current = scaling_matrix(scale)
    if abs(rotate.x) > EPSILON:
        current = rotation_x_matrix(rotate.x) * current
    if abs(rotate.y) > EPSILON:
        current = rotation_y_matrix(rotate.y) * current
    if abs(rotate.z) > EPSILON:
        current = rotation_z_matrix(rotate.z) * current
    return translation_matrix(translate) * current


def transform_point(m: Matrix, point: Vector3) -> Vector3:
    """Apply a 4x4 homogeneous transform to a point."""
    return Vector3.from_matrix(m * point.to_matrix())
