"""Infinite plane primitive."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from lumen.core.aabb import AABB
from lumen.core.ray import Ray, Vec3, as_vec3, build_onb_from_normal, length
from lumen.geometry.mesh import DETERMINANT_EPSILON
from lumen.geometry.primitive import Hit

# Half-size of the cube standing in for the plane's unbounded extent. Large
# enough to cover any scene, small enough that transformed corners stay finite.
PLANE_HALF_EXTENT = 1.0e6


class Plane:
    """A plane through a point with a fixed outward normal.

    Attributes:
        point: A point on the plane.
        normal: The unit outward normal.
    """

    __slots__ = ("_point", "_normal", "_tangent", "_bitangent")

    def __init__(self, point: npt.ArrayLike = (0.0, 0.0, 0.0), normal: npt.ArrayLike = (0.0, 1.0, 0.0)) -> None:
        n = as_vec3(normal)
        n_len = length(n)
        if n_len == 0.0:
            raise ValueError("Plane normal must be non-zero")
        self._point = as_vec3(point).copy()
        self._normal = n / n_len
        self._tangent, self._bitangent, _ = build_onb_from_normal(self._normal)

    @property
    def point(self) -> Vec3:
        return self._point.copy()

    @property
    def normal(self) -> Vec3:
        return self._normal.copy()

    def aabb(self) -> AABB:
        extent = np.full(3, PLANE_HALF_EXTENT)
        return AABB(self._point - extent, self._point + extent)

    def intersect(self, ray: Ray) -> Hit | None:
        """Intersect the plane from either side.

        Rays nearly parallel to the plane are rejected. The UV is the hit
        point's coordinates in the plane's tangent frame.
        """
        denom = float(np.dot(self._normal, ray.direction))
        if abs(denom) < DETERMINANT_EPSILON:
            return None
        t = float(np.dot(self._point - ray.origin, self._normal)) / denom
        if t < ray.t_min or t > ray.t_max:
            return None
        local = ray.at(t) - self._point
        uv = (float(np.dot(local, self._tangent)), float(np.dot(local, self._bitangent)))
        return Hit(t=t, normal=self._normal.copy(), uv=uv)

    def __repr__(self) -> str:
        return f"Plane(point={self._point.tolist()}, normal={self._normal.tolist()})"
