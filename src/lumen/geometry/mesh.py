"""Triangle soup primitive.

A Mesh stores vertex positions and index triples. Intersection is a linear
scan over all triangles using a two-sided Moller-Trumbore test, evaluated for
every triangle at once with NumPy; no spatial index is built.

Example:
    >>> mesh = Mesh()
    >>> a, b, c = (mesh.add_vertex(p) for p in ((0, 0, 0), (1, 0, 0), (0, 1, 0)))
    >>> mesh.add_triangle(a, b, c)
    0
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np
import numpy.typing as npt

from lumen.core.aabb import AABB
from lumen.core.ray import Ray, Vec3, as_vec3, normalize
from lumen.geometry.primitive import Hit

# Determinant magnitude below which a ray counts as parallel to a triangle
DETERMINANT_EPSILON = 1e-8


class TriangleHit(NamedTuple):
    """Result of a single ray-triangle test.

    Attributes:
        t: Ray parameter of the hit.
        u: Barycentric weight of the second vertex.
        v: Barycentric weight of the third vertex.
        normal: Unit geometric normal, following the winding p0 -> p1 -> p2.
    """

    t: float
    u: float
    v: float
    normal: Vec3


def intersect_triangle(p0: npt.ArrayLike, p1: npt.ArrayLike, p2: npt.ArrayLike, ray: Ray) -> TriangleHit | None:
    """Two-sided ray-triangle intersection.

    Rays nearly parallel to the triangle plane (|det| < DETERMINANT_EPSILON)
    are rejected.

    Returns:
        The hit if it lies inside the triangle and within [t_min, t_max].
    """
    p0 = as_vec3(p0)
    e1 = as_vec3(p1) - p0
    e2 = as_vec3(p2) - p0
    d = ray.direction

    pvec = np.cross(d, e2)
    det = float(np.dot(e1, pvec))
    if abs(det) < DETERMINANT_EPSILON:
        return None
    inv_det = 1.0 / det

    tvec = ray.origin - p0
    u = float(np.dot(tvec, pvec)) * inv_det
    if u < 0.0 or u > 1.0:
        return None

    qvec = np.cross(tvec, e1)
    v = float(np.dot(d, qvec)) * inv_det
    if v < 0.0 or u + v > 1.0:
        return None

    t = float(np.dot(e2, qvec)) * inv_det
    if t < ray.t_min or t > ray.t_max:
        return None
    return TriangleHit(t, u, v, normalize(np.cross(e1, e2)))


class Mesh:
    """An indexed triangle soup.

    Vertices and triangles are appended while building the mesh; once it is
    shared between scene objects it should be treated as read-only.
    """

    def __init__(self) -> None:
        self._vertices: list[Vec3] = []
        self._triangles: list[tuple[int, int, int]] = []
        self._packed: tuple[npt.NDArray[np.float64], ...] | None = None

    @classmethod
    def from_arrays(cls, vertices: npt.ArrayLike, faces: npt.ArrayLike) -> Mesh:
        """Build a mesh from an (N, 3) vertex array and an (M, 3) index array."""
        mesh = cls()
        for p in np.asarray(vertices, dtype=np.float64).reshape(-1, 3):
            mesh.add_vertex(p)
        for i0, i1, i2 in np.asarray(faces, dtype=np.int64).reshape(-1, 3):
            mesh.add_triangle(int(i0), int(i1), int(i2))
        return mesh

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def triangle_count(self) -> int:
        return len(self._triangles)

    def vertex(self, index: int) -> Vec3:
        return self._vertices[index].copy()

    def triangle(self, index: int) -> tuple[int, int, int]:
        return self._triangles[index]

    def add_vertex(self, position: npt.ArrayLike) -> int:
        """Append a vertex and return its index."""
        self._vertices.append(as_vec3(position).copy())
        self._packed = None
        return len(self._vertices) - 1

    def add_triangle(self, i0: int, i1: int, i2: int) -> int:
        """Append a triangle by vertex indices and return its index.

        Raises:
            IndexError: If any index does not name an existing vertex.
        """
        count = len(self._vertices)
        for index in (i0, i1, i2):
            if not 0 <= index < count:
                raise IndexError(f"Vertex index {index} out of range for {count} vertices")
        self._triangles.append((i0, i1, i2))
        self._packed = None
        return len(self._triangles) - 1

    def aabb(self) -> AABB:
        """Union of all vertex positions (empty for a mesh without vertices)."""
        return AABB.from_points(np.array(self._vertices).reshape(-1, 3))

    def _pack(self) -> tuple[npt.NDArray[np.float64], ...]:
        vertices = np.array(self._vertices).reshape(-1, 3)
        faces = np.array(self._triangles, dtype=np.int64).reshape(-1, 3)
        p0 = vertices[faces[:, 0]]
        e1 = vertices[faces[:, 1]] - p0
        e2 = vertices[faces[:, 2]] - p0
        packed = (p0, e1, e2)
        self._packed = packed
        return packed

    def intersect(self, ray: Ray) -> Hit | None:
        """Find the nearest triangle hit in [t_min, t_max].

        Ties go to the triangle added first. The UV of the hit is the
        barycentric (u, v) of that triangle.
        """
        if not self._triangles:
            return None
        packed = self._packed
        if packed is None:
            packed = self._pack()
        p0, e1, e2 = packed
        d = ray.direction

        pvec = np.cross(d, e2)
        det = np.einsum("ij,ij->i", e1, pvec)
        valid = np.abs(det) >= DETERMINANT_EPSILON
        inv_det = np.divide(1.0, det, out=np.zeros_like(det), where=valid)

        tvec = ray.origin - p0
        u = np.einsum("ij,ij->i", tvec, pvec) * inv_det
        qvec = np.cross(tvec, e1)
        v = qvec @ d * inv_det
        t = np.einsum("ij,ij->i", e2, qvec) * inv_det

        valid &= (u >= 0.0) & (u <= 1.0) & (v >= 0.0) & (u + v <= 1.0)
        valid &= (t >= ray.t_min) & (t <= ray.t_max)
        if not valid.any():
            return None

        candidates = np.where(valid, t, np.inf)
        best = int(np.argmin(candidates))
        normal = normalize(np.cross(e1[best], e2[best]))
        return Hit(t=float(t[best]), normal=normal, uv=(float(u[best]), float(v[best])))

    def __repr__(self) -> str:
        return f"Mesh(vertices={self.vertex_count}, triangles={self.triangle_count})"
