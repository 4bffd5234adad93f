"""Ray data structure and vector utilities for CPU ray tracing.

This module provides the fundamental Ray dataclass and the vector helpers
used throughout the renderer. Vectors are NumPy float64 arrays of shape (3,).
Random sampling helpers take an explicit ``numpy.random.Generator`` so that
every worker can own its generator.

Example:
    >>> import numpy as np
    >>> ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    >>> point = ray.at(5.0)  # Point 5 units along the ray
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

import numpy as np
import numpy.typing as npt

Vec3 = npt.NDArray[np.float64]

# Tolerance used by near_zero and the orthonormal basis construction
NEAR_ZERO_EPSILON = 1e-8


def vec3(x: float, y: float, z: float) -> Vec3:
    """Create a 3D vector."""
    return np.array((x, y, z), dtype=np.float64)


def as_vec3(value: npt.ArrayLike) -> Vec3:
    """Convert a sequence of three numbers into a float64 vector.

    Raises:
        ValueError: If the value does not have exactly three components.
    """
    v = np.asarray(value, dtype=np.float64)
    if v.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {v.shape}")
    return v


@dataclass(frozen=True, eq=False)
class Ray:
    """A ray with an origin, a direction and a valid parameter interval.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector. It need not be unit length; callers
            that require a unit direction normalize it themselves.
        t_min: Smallest parameter value considered a valid hit.
        t_max: Largest parameter value considered a valid hit.
    """

    origin: Vec3
    direction: Vec3
    t_min: float = 0.0
    t_max: float = math.inf

    def __post_init__(self) -> None:
        object.__setattr__(self, "origin", as_vec3(self.origin))
        object.__setattr__(self, "direction", as_vec3(self.direction))

    def at(self, t: float) -> Vec3:
        """Compute the point origin + t * direction."""
        return self.origin + t * self.direction

    def is_valid(self) -> bool:
        """Return True if the parameter interval is non-empty."""
        return self.t_min <= self.t_max

    def normalized_dir(self) -> Ray:
        """Return a copy of this ray with a unit-length direction.

        A zero direction is returned unchanged.
        """
        return replace(self, direction=normalize(self.direction))

    def with_range(self, t_min: float, t_max: float) -> Ray:
        """Return a copy of this ray with a different parameter interval."""
        return replace(self, t_min=t_min, t_max=t_max)


# =============================================================================
# Vector Utility Functions
# =============================================================================


def length(v: Vec3) -> float:
    """Compute the Euclidean length of a vector."""
    return math.sqrt(float(np.dot(v, v)))


def length_squared(v: Vec3) -> float:
    """Compute the squared length of a vector."""
    return float(np.dot(v, v))


def normalize(v: Vec3) -> Vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v. A zero-length vector is
        treated as already normalized and returned unchanged.
    """
    n = length(v)
    if n == 0.0:
        return v
    return v / n


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * float(np.dot(incident, normal)) * normal


def refract(incident: Vec3, normal: Vec3, eta: float) -> Vec3 | None:
    """Refract an incident vector through a surface.

    Computes the refracted direction using Snell's law.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The surface normal facing the incident ray (normalized).
        eta: The ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The refracted direction vector, or None on total internal reflection.
    """
    cos_i = -float(np.dot(incident, normal))
    sin2_t = eta * eta * (1.0 - cos_i * cos_i)
    if sin2_t > 1.0:
        return None
    cos_t = math.sqrt(1.0 - sin2_t)
    return eta * incident + (eta * cos_i - cos_t) * normal


def schlick_fresnel(cosine: float, eta_i: float, eta_t: float) -> float:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal,
            expected in [0, 1].
        eta_i: Refractive index on the incident side.
        eta_t: Refractive index on the transmitted side.

    Returns:
        The approximate Fresnel reflectance, in [0, 1].
    """
    r0 = ((eta_i - eta_t) / (eta_i + eta_t)) ** 2
    cosine = min(max(cosine, 0.0), 1.0)
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


def near_zero(v: Vec3) -> bool:
    """Check if a vector is near zero in all components."""
    return bool(np.all(np.abs(v) < NEAR_ZERO_EPSILON))


# =============================================================================
# Sampling Utilities for Monte Carlo
# =============================================================================


def random_cosine_direction(rng: np.random.Generator) -> Vec3:
    """Generate a random direction with cosine-weighted distribution.

    Uses the disk mapping r = sqrt(u1), phi = 2 pi u2 lifted onto the
    hemisphere with z = sqrt(1 - u1). The distribution has PDF cos(theta) / pi.

    Returns:
        A random direction in the local coordinate frame (z-up).
    """
    u1 = rng.random()
    u2 = rng.random()
    r = math.sqrt(u1)
    phi = 2.0 * math.pi * u2
    return vec3(r * math.cos(phi), r * math.sin(phi), math.sqrt(max(0.0, 1.0 - u1)))


def build_onb_from_normal(normal: Vec3) -> tuple[Vec3, Vec3, Vec3]:
    """Build an orthonormal basis from a normal vector.

    Creates a local coordinate frame where the normal is the z-axis. The
    reference axis is world +Z unless the normal is nearly parallel to it,
    in which case world +X is used.

    Args:
        normal: The surface normal (should be normalized).

    Returns:
        A tuple (tangent, bitangent, normal) forming an orthonormal basis.
    """
    reference = vec3(0.0, 0.0, 1.0)
    if abs(normal[2]) > 0.999:
        reference = vec3(1.0, 0.0, 0.0)
    tangent = normalize(np.cross(reference, normal))
    bitangent = np.cross(normal, tangent)
    return tangent, bitangent, normal


def local_to_world(local_dir: Vec3, tangent: Vec3, bitangent: Vec3, normal: Vec3) -> Vec3:
    """Transform a direction from local (z-up) to world coordinates."""
    return local_dir[0] * tangent + local_dir[1] * bitangent + local_dir[2] * normal


def sample_cosine_hemisphere(normal: Vec3, rng: np.random.Generator) -> Vec3:
    """Cosine-weighted hemisphere sampling around a normal.

    Args:
        normal: The surface normal defining the hemisphere orientation.
        rng: The random generator to draw from.

    Returns:
        A unit direction in world space.
    """
    local_dir = random_cosine_direction(rng)
    tangent, bitangent, n = build_onb_from_normal(normal)
    return normalize(local_to_world(local_dir, tangent, bitangent, n))
