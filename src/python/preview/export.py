"""Image export utilities for ray cast results.

This module turns per-ray results into viewable images and saves them.

Visualisations:
    - depth: nearest hits bright, farthest hits dark, misses black
    - normals: unit normals mapped from [-1, 1] to [0, 1] per channel

Supported formats:
    - PNG (8-bit via Pillow)

Example:
    >>> from src.python.preview.export import depth_to_image, save_png_from_array
    >>> origins, directions = camera.primary_rays(320, 240)
    >>> result = mesh.cast_rays(origins, directions)
    >>> save_png_from_array(depth_to_image(result, 320, 240), "depth.png")
"""

from __future__ import annotations

from os import PathLike
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from src.python.geometry.kernels import RayCastResult


def _check_ray_count(count: int, width: int, height: int) -> None:
    if count != width * height:
        raise ValueError(f"Got {count} rays for a {width}x{height} image")


def depth_to_image(
    result: RayCastResult,
    width: int,
    height: int,
    *,
    near: float | None = None,
    far: float | None = None,
) -> npt.NDArray[np.float32]:
    """Grayscale depth image from a ray cast.

    Depth is mapped linearly so that ``near`` is white and ``far`` is black.
    By default the range spans the nearest and farthest hit.

    Args:
        result: One result per pixel, row by row from the top-left.
        width: Image width in pixels.
        height: Image height in pixels.
        near: Depth shown as white.
        far: Depth shown as black.

    Returns:
        Image array of shape (H, W, 3) in [0, 1]. Misses are black.

    Raises:
        ValueError: If the result does not hold width * height rays.
    """
    _check_ray_count(len(result), width, height)

    mask = result.hit_mask
    depth = np.zeros(len(result), dtype=np.float32)
    if mask.any():
        hits = result.t[mask]
        lo = float(hits.min()) if near is None else near
        hi = float(hits.max()) if far is None else far
        span = hi - lo
        if span > 0.0:
            depth[mask] = 1.0 - (hits - lo) / span
        else:
            depth[mask] = 1.0
        depth = np.clip(depth, 0.0, 1.0)

    gray = depth.reshape(height, width)
    return np.repeat(gray[:, :, np.newaxis], 3, axis=2).astype(np.float32)


def normals_to_image(
    normals: npt.NDArray[np.floating],
    hit_mask: npt.NDArray[np.bool_],
    width: int,
    height: int,
) -> npt.NDArray[np.float32]:
    """Color-code surface normals, ``(n + 1) / 2`` per channel.

    Args:
        normals: (R, 3) unit normals, one per pixel.
        hit_mask: (R,) True where the ray hit something.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        Image array of shape (H, W, 3) in [0, 1]. Misses are black.
    """
    normals = np.asarray(normals, dtype=np.float32)
    _check_ray_count(normals.shape[0], width, height)

    image = np.zeros_like(normals)
    image[hit_mask] = np.clip((normals[hit_mask] + 1.0) * 0.5, 0.0, 1.0)
    return image.reshape(height, width, 3)


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Apply gamma correction for display.

    Args:
        image: Linear image array of shape (H, W, 3) in [0, 1] range.
        gamma: Gamma value (default 2.2 for sRGB).

    Returns:
        Gamma corrected image.
    """
    if gamma == 1.0:
        return image

    # Clamp to [0, 1] before gamma to avoid NaN from negative values
    image = np.clip(image, 0.0, 1.0)
    return np.power(image, 1.0 / gamma).astype(np.float32)


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a float image in [0, 1] to uint8 for display/export.

    Args:
        image: Image array of shape (H, W, 3).
        gamma: Gamma correction value. 1.0 leaves values unchanged.

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    processed = np.clip(apply_gamma(image, gamma), 0.0, 1.0)
    return (processed * 255).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str | PathLike,
    *,
    gamma: float = 1.0,
) -> None:
    """Save a NumPy array as a PNG file.

    Args:
        image: Image array of shape (H, W, 3) in [0, 1].
        filepath: Output file path (should end in .png).
        gamma: Gamma correction value. 1.0 leaves values unchanged.
    """
    image_uint8 = image_to_uint8(image, gamma=gamma)

    # Save using Pillow
    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath)
