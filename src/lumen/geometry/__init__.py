"""Geometry module for shape primitives.

This module provides geometric primitives and intersection algorithms:

Components:
    primitive: Hit record and the Primitive capability (aabb + intersect)
    sphere: Sphere primitive with robust ray-sphere intersection
    mesh: Triangle soup with two-sided ray-triangle tests
    plane: Unbounded plane approximated by a large finite bounding box

Every primitive is defined in its own local space and is immutable once
built, so one instance can be shared by many scene objects.

Ray-object intersection follows the pattern:
    hit = shape.intersect(ray)  # Hit(t, normal, uv) or None
"""

from .mesh import DETERMINANT_EPSILON, Mesh, TriangleHit, intersect_triangle
from .plane import PLANE_HALF_EXTENT, Plane
from .primitive import UV, Hit, Primitive
from .sphere import Sphere, sphere_uv

__all__ = [
    "Hit",
    "Primitive",
    "UV",
    "Sphere",
    "sphere_uv",
    "Mesh",
    "TriangleHit",
    "intersect_triangle",
    "DETERMINANT_EPSILON",
    "Plane",
    "PLANE_HALF_EXTENT",
]
