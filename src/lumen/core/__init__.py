"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure, vector helpers and hemisphere sampling
    aabb: Axis-aligned bounding boxes and the slab test
    transform: Forward/inverse matrix pairs, TRS and look-at construction
    image: Floating-point RGB pixel buffer
    settings: Render configuration
    integrator: Path tracer and headlight ray caster
    renderer: Row-partitioned multi-threaded render driver

The integrator and renderer are NOT imported here because they depend on
the scene package, which itself imports from core. Import them from
lumen.core.integrator and lumen.core.renderer, or from the top-level
lumen package.
"""

from .aabb import AABB, SlabHit
from .image import Image
from .ray import (
    Ray,
    Vec3,
    as_vec3,
    build_onb_from_normal,
    length,
    length_squared,
    local_to_world,
    near_zero,
    normalize,
    random_cosine_direction,
    reflect,
    refract,
    sample_cosine_hemisphere,
    schlick_fresnel,
    vec3,
)
from .settings import RenderSettings
from .transform import (
    IDENTITY_QUATERNION,
    Transform,
    invert_matrix,
    quaternion_from_axis_angle,
    quaternion_to_matrix,
    transform_direction,
    transform_normal,
    transform_point,
)

__all__ = [
    "Ray",
    "Vec3",
    "vec3",
    "as_vec3",
    "length",
    "length_squared",
    "normalize",
    "reflect",
    "refract",
    "schlick_fresnel",
    "near_zero",
    "random_cosine_direction",
    "build_onb_from_normal",
    "local_to_world",
    "sample_cosine_hemisphere",
    "AABB",
    "SlabHit",
    "Transform",
    "IDENTITY_QUATERNION",
    "quaternion_from_axis_angle",
    "quaternion_to_matrix",
    "invert_matrix",
    "transform_point",
    "transform_direction",
    "transform_normal",
    "Image",
    "RenderSettings",
]
