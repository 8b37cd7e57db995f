"""Preview module for turning ray cast results into images.

Components:
    export: Depth and normal visualisations and PNG export

Example:
    >>> from src.python.preview import depth_to_image, save_png_from_array
    >>> result = mesh.cast_rays(*camera.primary_rays(320, 240))
    >>> save_png_from_array(depth_to_image(result, 320, 240), "depth.png")
"""

from src.python.preview.export import (
    apply_gamma,
    depth_to_image,
    image_to_uint8,
    normals_to_image,
    save_png_from_array,
)

__all__ = [
    "depth_to_image",
    "normals_to_image",
    "apply_gamma",
    "image_to_uint8",
    "save_png_from_array",
]
