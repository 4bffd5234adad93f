"""Material: a bundle of UV-sampled surface properties.

The integrator reads six properties from a material, each sampled at the
hit's UV coordinate:

    albedo            RGB reflectance
    roughness         0 = perfect mirror, 1 = ideal diffuse
    transparency      > 0 selects the dielectric (reflect/refract) path
    emission          scalar power multiplying the radiance
    radiance          RGB emitted color
    refractive_index  index of refraction for the dielectric path

Sampled scalars are clamped to their valid range (roughness and
transparency to [0, 1], emission to >= 0, refractive index to >= 1), so
the integrator can trust every value it reads.

Example:
    >>> red = Material.lambertian((0.9, 0.1, 0.1))
    >>> red.roughness()
    1.0
    >>> glass = Material.glass((1.0, 1.0, 1.0), roughness=0.0, transparency=1.0)
"""

from __future__ import annotations

from typing import Any

import numpy as np

from lumen.core.ray import Vec3
from lumen.materials.properties import UV, PropertySampler, as_property

BLACK = (0.0, 0.0, 0.0)

# Index of refraction of common glass
GLASS_IOR = 1.5

_ORIGIN_UV: UV = (0.0, 0.0)


def _clamp(value: float, lo: float, hi: float) -> float:
    return min(max(float(value), lo), hi)


class Material:
    """Immutable set of property providers.

    Any argument may be a plain value (wrapped in a UniformProperty) or a
    property provider such as CheckerProperty or ImageProperty.
    """

    __slots__ = ("_albedo", "_roughness", "_transparency", "_emission", "_radiance", "_ior")

    def __init__(
        self,
        albedo: Any = BLACK,
        roughness: Any = 1.0,
        transparency: Any = 0.0,
        emission: Any = 0.0,
        radiance: Any = BLACK,
        refractive_index: Any = 1.0,
    ) -> None:
        self._albedo: PropertySampler = as_property(albedo)
        self._roughness: PropertySampler = as_property(roughness)
        self._transparency: PropertySampler = as_property(transparency)
        self._emission: PropertySampler = as_property(emission)
        self._radiance: PropertySampler = as_property(radiance)
        self._ior: PropertySampler = as_property(refractive_index)

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def lambertian(cls, albedo: Any) -> Material:
        """Ideal diffuse reflector."""
        return cls(albedo=albedo, roughness=1.0, transparency=0.0)

    @classmethod
    def metal(cls, albedo: Any, roughness: float = 0.0) -> Material:
        """Specular reflector; roughness mixes in diffuse bounces."""
        return cls(albedo=albedo, roughness=_clamp(roughness, 0.0, 1.0), transparency=0.0)

    @classmethod
    def emissive(cls, radiance: Any, power: float = 1.0) -> Material:
        """Light source with a black, non-reflecting surface."""
        return cls(albedo=BLACK, emission=max(0.0, float(power)), radiance=radiance)

    @classmethod
    def glass(
        cls,
        albedo: Any,
        roughness: float = 0.0,
        transparency: float = 1.0,
        refractive_index: float = GLASS_IOR,
    ) -> Material:
        """Dielectric that reflects and refracts according to Fresnel."""
        return cls(
            albedo=albedo,
            roughness=_clamp(roughness, 0.0, 1.0),
            transparency=_clamp(transparency, 0.0, 1.0),
            refractive_index=max(1.0, float(refractive_index)),
        )

    @classmethod
    def from_params(
        cls,
        albedo: Any,
        roughness: Any,
        transparency: Any,
        radiance: Any,
        emission: Any = 1.0,
        refractive_index: Any = 1.0,
    ) -> Material:
        """Build a material from every property explicitly."""
        return cls(albedo, roughness, transparency, emission, radiance, refractive_index)

    # -------------------------------------------------------------------------
    # Sampling
    # -------------------------------------------------------------------------

    def albedo(self, uv: UV = _ORIGIN_UV) -> Vec3:
        return np.asarray(self._albedo.sample(uv), dtype=np.float64)

    def roughness(self, uv: UV = _ORIGIN_UV) -> float:
        return _clamp(self._roughness.sample(uv), 0.0, 1.0)

    def transparency(self, uv: UV = _ORIGIN_UV) -> float:
        return _clamp(self._transparency.sample(uv), 0.0, 1.0)

    def emission(self, uv: UV = _ORIGIN_UV) -> float:
        return max(0.0, float(self._emission.sample(uv)))

    def radiance(self, uv: UV = _ORIGIN_UV) -> Vec3:
        return np.asarray(self._radiance.sample(uv), dtype=np.float64)

    def refractive_index(self, uv: UV = _ORIGIN_UV) -> float:
        return max(1.0, float(self._ior.sample(uv)))

    def emitted(self, uv: UV = _ORIGIN_UV) -> Vec3:
        """Radiance scaled by emission power."""
        return self.radiance(uv) * self.emission(uv)

    def _providers(self) -> tuple[PropertySampler, ...]:
        return (self._albedo, self._roughness, self._transparency, self._emission, self._radiance, self._ior)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Material):
            return NotImplemented
        return all(a == b for a, b in zip(self._providers(), other._providers()))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        names = ("albedo", "roughness", "transparency", "emission", "radiance", "refractive_index")
        fields = ", ".join(f"{name}={provider!r}" for name, provider in zip(names, self._providers()))
        return f"Material({fields})"
