"""Axis-aligned bounding boxes used for culling.

An AABB is stored as a pair of corner points. The empty box has ``min`` set
to +inf and ``max`` set to -inf on every axis, so expanding it by a point
yields the degenerate box around that point.

Example:
    >>> box = AABB()
    >>> box.expand(vec3(1.0, 2.0, 3.0))
    >>> box.contains(vec3(1.0, 2.0, 3.0))
    True
"""

from __future__ import annotations

import itertools
import math
from typing import NamedTuple

import numpy as np
import numpy.typing as npt

from lumen.core.ray import Ray, Vec3, as_vec3


class SlabHit(NamedTuple):
    """Parameter interval where a ray overlaps a box."""

    t_near: float
    t_far: float


class AABB:
    """An axis-aligned bounding box.

    The box is only ever mutated through expand() and union(), which update
    both corners together.
    """

    __slots__ = ("_min", "_max")

    def __init__(self, min_point: npt.ArrayLike | None = None, max_point: npt.ArrayLike | None = None) -> None:
        if min_point is None and max_point is None:
            self._min = np.full(3, math.inf)
            self._max = np.full(3, -math.inf)
            return
        if min_point is None or max_point is None:
            raise ValueError("AABB requires both corners or neither")
        self._min = as_vec3(min_point).copy()
        self._max = as_vec3(max_point).copy()

    @classmethod
    def from_points(cls, points: npt.ArrayLike) -> AABB:
        """Build the smallest box containing all points (empty if none)."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        if len(pts) == 0:
            return cls()
        return cls(pts.min(axis=0), pts.max(axis=0))

    @property
    def min(self) -> Vec3:
        return self._min.copy()

    @property
    def max(self) -> Vec3:
        return self._max.copy()

    def empty(self) -> bool:
        """Return True if the box contains no points."""
        return bool(np.any(self._min > self._max))

    def extent(self) -> Vec3:
        """Return the size along each axis (zero for an empty box)."""
        if self.empty():
            return np.zeros(3)
        return self._max - self._min

    def center(self) -> Vec3:
        return 0.5 * (self._min + self._max)

    def corners(self) -> list[Vec3]:
        """Return the 8 corner points of a non-empty box."""
        lo, hi = self._min, self._max
        return [
            np.array((x, y, z))
            for x, y, z in itertools.product((lo[0], hi[0]), (lo[1], hi[1]), (lo[2], hi[2]))
        ]

    def copy(self) -> AABB:
        if self.empty():
            return AABB()
        return AABB(self._min, self._max)

    def expand(self, point: npt.ArrayLike) -> None:
        """Grow the box in place to include a point."""
        p = as_vec3(point)
        self._min, self._max = np.minimum(self._min, p), np.maximum(self._max, p)

    def union(self, other: AABB) -> None:
        """Grow the box in place to include another box."""
        if other.empty():
            return
        self._min, self._max = np.minimum(self._min, other._min), np.maximum(self._max, other._max)

    def united(self, other: AABB) -> AABB:
        """Return a new box enclosing this box and another one."""
        result = self.copy()
        result.union(other)
        return result

    def contains(self, item: npt.ArrayLike | AABB) -> bool:
        """Test whether a point or another box lies inside this box."""
        if isinstance(item, AABB):
            if item.empty():
                return True
            return bool(np.all(self._min <= item._min) and np.all(item._max <= self._max))
        p = as_vec3(item)
        return bool(np.all(self._min <= p) and np.all(p <= self._max))

    def overlaps(self, other: AABB) -> bool:
        """Test whether two boxes share at least one point."""
        if self.empty() or other.empty():
            return False
        return bool(np.all(self._min <= other._max) and np.all(other._min <= self._max))

    def transformed(self, matrix: npt.NDArray[np.float64]) -> AABB:
        """Return the box enclosing all 8 corners mapped by an affine 4x4 matrix.

        Under rotation the result can be larger than the tight bound of the
        rotated box.
        """
        if self.empty():
            return AABB()
        corners = np.array(self.corners())
        mapped = corners @ matrix[:3, :3].T + matrix[:3, 3]
        return AABB.from_points(mapped)

    def intersect(self, ray: Ray) -> SlabHit | None:
        """Intersect a ray with the box using the slab method.

        The running interval starts at the ray's [t_min, t_max]. An axis with
        an exactly zero direction component only passes when the origin lies
        inside that axis's slab.

        Returns:
            The overlapping interval, or None when the ray misses the box.
        """
        if self.empty():
            return None
        t_near = ray.t_min
        t_far = ray.t_max
        for axis in range(3):
            o = ray.origin[axis]
            d = ray.direction[axis]
            lo = self._min[axis]
            hi = self._max[axis]
            if d == 0.0:
                if o < lo or o > hi:
                    return None
                continue
            inv_d = 1.0 / d
            t0 = (lo - o) * inv_d
            t1 = (hi - o) * inv_d
            if t0 > t1:
                t0, t1 = t1, t0
            t_near = max(t_near, t0)
            t_far = min(t_far, t1)
            if t_near > t_far:
                return None
        return SlabHit(float(t_near), float(t_far))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AABB):
            return NotImplemented
        if self.empty() and other.empty():
            return True
        return bool(np.array_equal(self._min, other._min) and np.array_equal(self._max, other._max))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.empty():
            return "AABB(empty)"
        return f"AABB(min={self._min.tolist()}, max={self._max.tolist()})"
