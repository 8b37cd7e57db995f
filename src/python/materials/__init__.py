"""Materials module for surface reflectance descriptions.

Components:
    color: Floating point RGB color with clamping and 8-bit conversion
    surface: Surface reflectance bundle and shared Material handles

A Surface is attached to scene objects by reference and consumed by a
shading stage outside this package; nothing here evaluates lighting.
"""

from .color import Color, max_abs_component_delta
from .surface import AIR_INDEX_OF_REFRACTION, Material, Surface

__all__ = [
    "Color",
    "max_abs_component_delta",
    "Material",
    "Surface",
    "AIR_INDEX_OF_REFRACTION",
]
