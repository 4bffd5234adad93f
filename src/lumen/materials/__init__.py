"""Materials module.

Components:
    properties: UV-sampled property providers (uniform, checkerboard, image)
    material: The Material bundle and its factories (lambertian, metal,
        emissive, glass)

The integrator only ever asks a material to sample a property at a UV
coordinate; which provider answers is up to the material.
"""

from .material import GLASS_IOR, Material
from .properties import (
    CheckerProperty,
    ImageProperty,
    PropertySampler,
    UniformProperty,
    as_property,
)

__all__ = [
    "Material",
    "GLASS_IOR",
    "PropertySampler",
    "UniformProperty",
    "CheckerProperty",
    "ImageProperty",
    "as_property",
]
