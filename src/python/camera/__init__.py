"""Camera module for view and primary ray generation.

Components:
    pinhole: Pinhole (perspective) camera described by eye point, view
        direction, up vector, image plane distance and horizontal angle

Ray generation uses pixel centers, row by row from the top-left:
    ray k passes through pixel (k % width, k // width)
"""

from .pinhole import Camera

__all__ = [
    "Camera",
]
