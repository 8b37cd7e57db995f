"""Pinhole camera model for perspective primary ray generation.

The camera is described the way a scene file describes it:

- eye_point: camera position
- view_direction: direction the camera looks (need not be unit length)
- view_up: approximate up direction
- image_plane_distance: distance from the eye to the image plane
- horiz_camera_angle: full horizontal field of view, in radians

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points opposite the view direction
- u: points right in the image plane
- v: points up in the image plane

Primary rays are generated on the host with NumPy as (R, 3) arrays, the
layout ``TriangleMesh.cast_rays`` expects.

Example:
    >>> camera = Camera(
    ...     eye_point=Vector3(0.0, 0.0, 3.0),
    ...     view_direction=Vector3(0.0, 0.0, -1.0),
    ...     view_up=Vector3(0.0, 1.0, 0.0),
    ...     image_plane_distance=1.0,
    ...     horiz_camera_angle=math.radians(60.0),
    ... )
    >>> origins, directions = camera.primary_rays(320, 240)
    >>> result = mesh.cast_rays(origins, directions)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from src.python.core.ray import Ray
from src.python.core.vector import Vector3, cross_product


@dataclass
class Camera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        eye_point: Camera position in world space.
        view_direction: Direction the camera looks along.
        view_up: Up direction for camera orientation (typically (0, 1, 0)).
        image_plane_distance: Distance from the eye to the image plane (> 0).
        horiz_camera_angle: Horizontal field of view in radians, in (0, pi).
    """

    eye_point: Vector3 = field(default_factory=Vector3)
    view_direction: Vector3 = field(default_factory=lambda: Vector3(0.0, 0.0, -1.0))
    view_up: Vector3 = field(default_factory=lambda: Vector3(0.0, 1.0, 0.0))
    image_plane_distance: float = 1.0
    horiz_camera_angle: float = math.pi / 3.0

    def __post_init__(self) -> None:
        if self.image_plane_distance <= 0.0:
            raise ValueError(f"image_plane_distance = {self.image_plane_distance} must be positive")
        if not 0.0 < self.horiz_camera_angle < math.pi:
            raise ValueError(f"horiz_camera_angle = {self.horiz_camera_angle} must be in (0, pi)")

    def basis(self) -> tuple[Vector3, Vector3, Vector3]:
        """Orthonormal camera frame (u, v, w).

        Raises:
            ValueError: If the view direction is zero or parallel to view_up.
        """
        w = -self.view_direction
        if w.magnitude_squared() == 0.0:
            raise ValueError("Camera view direction is the zero vector")
        w.normalize()

        u = cross_product(self.view_up, w)
        if u.magnitude_squared() == 0.0:
            raise ValueError("Camera view up is parallel to the view direction")
        u.normalize()

        v = cross_product(w, u)
        return u, v, w

    def image_plane_size(self, width: int, height: int) -> tuple[float, float]:
        """Width and height of the image plane for an image of the given size."""
        plane_width = 2.0 * self.image_plane_distance * math.tan(self.horiz_camera_angle / 2.0)
        return plane_width, plane_width * height / width

    def ray_for_pixel(self, i: int, j: int, width: int, height: int) -> Ray:
        """Ray through the center of pixel (i, j), (0, 0) being the top-left.

        The direction is unit length.
        """
        u, v, w = self.basis()
        plane_w, plane_h = self.image_plane_size(width, height)
        x = -plane_w / 2.0 + (i + 0.5) * plane_w / width
        y = plane_h / 2.0 - (j + 0.5) * plane_h / height
        direction = u * x + v * y - w * self.image_plane_distance
        direction.normalize()
        return Ray(self.eye_point, direction)

    def primary_rays(
        self,
        width: int,
        height: int,
    ) -> tuple[npt.NDArray[np.float32], npt.NDArray[np.float32]]:
        """Rays through every pixel center, row by row from the top-left.

        Ray ``k`` passes through pixel ``(k % width, k // width)``.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.

        Returns:
            ``(origins, directions)``, each (height * width, 3) float32, with
            unit-length directions.

        Raises:
            ValueError: If width or height is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")

        u, v, w = self.basis()
        plane_w, plane_h = self.image_plane_size(width, height)

        xs = -plane_w / 2.0 + (np.arange(width, dtype=np.float64) + 0.5) * plane_w / width
        ys = plane_h / 2.0 - (np.arange(height, dtype=np.float64) + 0.5) * plane_h / height
        grid_x, grid_y = np.meshgrid(xs, ys)

        u_arr = np.array(u.to_tuple())
        v_arr = np.array(v.to_tuple())
        w_arr = np.array(w.to_tuple())

        directions = (
            grid_x.reshape(-1, 1) * u_arr
            + grid_y.reshape(-1, 1) * v_arr
            - self.image_plane_distance * w_arr
        )
        directions /= np.linalg.norm(directions, axis=1, keepdims=True)

        origins = np.tile(np.array(self.eye_point.to_tuple()), (width * height, 1))
        return origins.astype(np.float32), directions.astype(np.float32)
