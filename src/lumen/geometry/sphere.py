"""Sphere primitive with robust ray-sphere intersection.

This module provides a Sphere primitive using the robust quadratic formula
from Ray Tracing Gems to avoid floating-point artifacts.

The robust quadratic formula avoids catastrophic cancellation when b^2 is
nearly equal to 4ac by using a reformulated calculation that maintains
numerical stability.

Example:
    >>> sphere = Sphere(center=vec3(0.0, 0.0, -1.0), radius=0.5)
    >>> hit = sphere.intersect(Ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0)))
    >>> round(hit.t, 6)
    0.5
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

from lumen.core.aabb import AABB
from lumen.core.ray import Ray, Vec3, as_vec3
from lumen.geometry.primitive import UV, Hit


def _solve_quadratic_robust(h: float, a: float, c: float, sqrt_d: float) -> tuple[float, float]:
    """Solve a*t^2 + 2*h*t + c = 0 using a numerically stable method.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = -1.0 if h < 0.0 else 1.0
    q = -(h + sign_h * sqrt_d)

    if abs(q) < 1e-12:
        # Tangent ray through the center plane; fall back to the standard formula
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        t0, t1 = t1, t0
    return t0, t1


def sphere_uv(normal: Vec3) -> UV:
    """Spherical (u, v) coordinates of an outward unit normal."""
    u = math.atan2(-normal[2], normal[0]) / (2.0 * math.pi) + 0.5
    v = math.acos(min(1.0, max(-1.0, -normal[1]))) / math.pi
    return (u, v)


class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
    """

    __slots__ = ("_center", "_radius")

    def __init__(self, center: npt.ArrayLike = (0.0, 0.0, 0.0), radius: float = 1.0) -> None:
        if not radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self._center = as_vec3(center).copy()
        self._center.flags.writeable = False
        self._radius = float(radius)

    @property
    def center(self) -> Vec3:
        return self._center

    @property
    def radius(self) -> float:
        return self._radius

    def aabb(self) -> AABB:
        r = np.full(3, self._radius)
        return AABB(self._center - r, self._center + r)

    def roots(self, ray: Ray) -> tuple[float, float] | None:
        """Both parameters where the ray's line meets the sphere.

        The ray-sphere intersection is found by solving:
            |origin + t * direction - center|^2 = radius^2

        Returns:
            (t0, t1) with t0 <= t1 regardless of the ray interval, or None if
            the discriminant is negative.
        """
        oc = ray.origin - self._center
        d = ray.direction
        a = float(np.dot(d, d))
        if a == 0.0:
            return None
        h = float(np.dot(d, oc))
        c = float(np.dot(oc, oc)) - self._radius * self._radius
        discriminant = h * h - a * c
        if discriminant < 0.0:
            return None
        return _solve_quadratic_robust(h, a, c, math.sqrt(discriminant))

    def intersect(self, ray: Ray) -> Hit | None:
        """Test for ray-sphere intersection.

        Picks the smaller root if it lies in [t_min, t_max], else the larger.

        Args:
            ray: The ray to test. Its direction need not be normalized.

        Returns:
            The hit with an outward normal, or None.
        """
        roots = self.roots(ray)
        if roots is None:
            return None
        t0, t1 = roots
        if ray.t_min <= t0 <= ray.t_max:
            t = t0
        elif ray.t_min <= t1 <= ray.t_max:
            t = t1
        else:
            return None

        normal = (ray.at(t) - self._center) / self._radius
        return Hit(t=t, normal=normal, uv=sphere_uv(normal))

    def __repr__(self) -> str:
        return f"Sphere(center={self._center.tolist()}, radius={self._radius})"
