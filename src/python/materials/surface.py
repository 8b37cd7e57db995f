"""Surface reflectance descriptions consumed by a shading stage.

A ``Surface`` bundles the colors and coefficients of a simple
Phong-style reflectance model plus reflection and transmission terms. The
core never shades; it only stores a surface on each scene object and hands
it to whoever does.

Sharing:
    Surfaces and materials are shared by reference. Assigning the same
    ``Surface`` to several objects (or the same ``Material`` to several
    surfaces) means a change made through one holder is seen by all of them.
    Use ``Surface.copy()`` for an independent value.

Example:
    >>> glass = Surface(transmission_coeff=0.9, index_of_refraction=1.5)
    >>> glass.set_color(Color(0.9, 0.95, 1.0))
    >>> mesh.surface = glass
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import numpy.typing as npt

from src.python.materials.color import Color

# Index of refraction of air at standard conditions.
AIR_INDEX_OF_REFRACTION = 1.00029


@dataclass(eq=False)
class Material:
    """A shared material handle, optionally carrying an RGB texture.

    Materials compare by identity: two materials are equal only if they are
    the same object.

    Attributes:
        name: Human-readable name.
        texture: Optional (H, W, 3) float array with values in [0, 1].
    """

    name: str
    texture: npt.NDArray[np.floating[Any]] | None = None

    def __post_init__(self) -> None:
        if self.texture is not None:
            self.texture = np.asarray(self.texture, dtype=np.float32)
            if self.texture.ndim != 3 or self.texture.shape[2] != 3:
                raise ValueError(f"Texture must have shape (H, W, 3), got {self.texture.shape}")

    @property
    def has_texture(self) -> bool:
        return self.texture is not None


def _check_unit_interval(name: str, value: float) -> None:
    if value < 0.0 or value > 1.0:
        raise ValueError(f"{name} = {value} is outside [0, 1]")


@dataclass
class Surface:
    """Reflectance description of an object.

    Attributes:
        diffuse_color: Color of diffuse reflection.
        specular_color: Color of specular highlights.
        ambient_color: Color of the ambient term.
        diffuse_coeff: Weight of diffuse reflection, in [0, 1].
        specular_coeff: Weight of specular reflection, in [0, 1].
        ambient_coeff: Weight of the ambient term, in [0, 1].
        specular_exponent: Phong exponent controlling highlight size (>= 0).
        reflection_coeff: Weight of mirror reflection, in [0, 1].
        transmission_coeff: Weight of transmitted light, in [0, 1].
        index_of_refraction: Index of refraction of the interior (> 0).
        transmission_color: Color filter applied to transmitted light.
        material: Optional shared ``Material``.
    """

    diffuse_color: Color = field(default_factory=Color.white)
    specular_color: Color = field(default_factory=Color.white)
    ambient_color: Color = field(default_factory=Color.white)
    diffuse_coeff: float = 0.8
    specular_coeff: float = 0.1
    ambient_coeff: float = 0.1
    specular_exponent: float = 2.0
    reflection_coeff: float = 0.1
    transmission_coeff: float = 0.0
    index_of_refraction: float = 1.0
    transmission_color: Color = field(default_factory=Color.white)
    material: Material | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check every coefficient is in range.

        Raises:
            ValueError: If a coefficient is outside its valid range.
        """
        _check_unit_interval("diffuse_coeff", self.diffuse_coeff)
        _check_unit_interval("specular_coeff", self.specular_coeff)
        _check_unit_interval("ambient_coeff", self.ambient_coeff)
        _check_unit_interval("reflection_coeff", self.reflection_coeff)
        _check_unit_interval("transmission_coeff", self.transmission_coeff)
        if self.specular_exponent < 0.0:
            raise ValueError(f"specular_exponent = {self.specular_exponent} must be non-negative")
        if self.index_of_refraction <= 0.0:
            raise ValueError(f"index_of_refraction = {self.index_of_refraction} must be positive")

    def set_color(self, color: Color) -> None:
        """Set the diffuse, specular and ambient colors at once."""
        self.diffuse_color = color
        self.specular_color = color
        self.ambient_color = color

    def set_coefficients(
        self,
        diffuse: float | None = None,
        specular: float | None = None,
        ambient: float | None = None,
    ) -> None:
        """Update any of the three reflectance weights.

        Raises:
            ValueError: If a weight is outside [0, 1]. Nothing is changed.
        """
        for name, value in (("diffuse_coeff", diffuse), ("specular_coeff", specular), ("ambient_coeff", ambient)):
            if value is not None:
                _check_unit_interval(name, value)
        if diffuse is not None:
            self.diffuse_coeff = diffuse
        if specular is not None:
            self.specular_coeff = specular
        if ambient is not None:
            self.ambient_coeff = ambient

    def copy(self) -> Surface:
        """Independent copy. The material, if any, is still shared."""
        return copy.copy(self)
