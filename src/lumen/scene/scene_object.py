"""Scene objects: a shared primitive placed in the world by a transform.

A SceneObject presents a primitive defined in local space as if it existed
in world space. World rays are mapped into object space, intersected there,
and the hit is mapped back. The world matrix, its inverse, the normal
matrix and the world-space bounding box are cached together and recomputed
by every mutator.

Example:
    >>> sphere = Sphere((0.0, 0.0, 0.0), 1.0)
    >>> obj = SceneObject(sphere, Material.lambertian((0.5, 0.5, 0.5)),
    ...                   Transform.translation((0.0, 0.0, 5.0)))
    >>> hit = obj.intersect(Ray(vec3(0, 0, 0), vec3(0, 0, 1)))
    >>> round(hit.t, 6)
    4.0
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np
import numpy.typing as npt

from lumen.core.aabb import AABB
from lumen.core.ray import Ray, length, normalize
from lumen.core.transform import Transform
from lumen.geometry.primitive import Hit, Primitive
from lumen.materials.material import Material


class _WorldCache(NamedTuple):
    world_matrix: npt.NDArray[np.float64]
    inverse_world_matrix: npt.NDArray[np.float64]
    normal_matrix: npt.NDArray[np.float64]
    world_aabb: AABB


class SceneObject:
    """Binds a primitive, a material and a transform.

    The primitive is held by reference and may be shared by any number of
    scene objects. The material and transform belong to this object.
    """

    __slots__ = ("_primitive", "_material", "_transform", "_cache")

    def __init__(
        self,
        primitive: Primitive,
        material: Material | None = None,
        transform: Transform | None = None,
    ) -> None:
        self._primitive = primitive
        self._material = material if material is not None else Material()
        self._transform = transform if transform is not None else Transform()
        self._cache = self._build_cache(self._primitive, self._transform)

    @staticmethod
    def _build_cache(primitive: Primitive, transform: Transform) -> _WorldCache:
        world = np.array(transform.forward)
        inverse = np.array(transform.inverse_matrix)
        normal_matrix = inverse[:3, :3].T.copy()
        world_aabb = primitive.aabb().transformed(world)
        return _WorldCache(world, inverse, normal_matrix, world_aabb)

    # -------------------------------------------------------------------------
    # Accessors and mutators
    # -------------------------------------------------------------------------

    @property
    def primitive(self) -> Primitive:
        return self._primitive

    @property
    def material(self) -> Material:
        return self._material

    @property
    def transform(self) -> Transform:
        return self._transform

    @property
    def world_matrix(self) -> npt.NDArray[np.float64]:
        return self._cache.world_matrix.copy()

    @property
    def inverse_world_matrix(self) -> npt.NDArray[np.float64]:
        return self._cache.inverse_world_matrix.copy()

    @property
    def normal_matrix(self) -> npt.NDArray[np.float64]:
        """Transpose of the inverse world matrix's upper 3x3 block."""
        return self._cache.normal_matrix.copy()

    def aabb(self) -> AABB:
        """World-space bounding box (the 8 local corners, transformed)."""
        return self._cache.world_aabb.copy()

    def set_transform(self, transform: Transform) -> None:
        """Replace the transform and recompute every cached world quantity."""
        cache = self._build_cache(self._primitive, transform)
        self._transform = transform
        self._cache = cache

    def set_material(self, material: Material) -> None:
        self._material = material

    # -------------------------------------------------------------------------
    # Intersection
    # -------------------------------------------------------------------------

    def intersect(self, ray: Ray) -> Hit | None:
        """Intersect a world-space ray with the transformed primitive.

        Args:
            ray: World-space ray.

        Returns:
            A hit whose t is measured along the world ray, whose normal is the
            world-space unit normal and whose uv is the primitive's own uv, or
            None if there is no hit inside [ray.t_min, ray.t_max].
        """
        cache = self._cache
        if cache.world_aabb.intersect(ray) is None:
            return None

        inv = cache.inverse_world_matrix
        local_origin = inv[:3, :3] @ ray.origin + inv[:3, 3]
        local_dir = inv[:3, :3] @ ray.direction

        # Keep object-space t consistent with world-space distances
        scale = length(local_dir)
        if scale > 0.0:
            local_ray = Ray(local_origin, local_dir / scale, ray.t_min * scale, ray.t_max * scale)
        else:
            local_ray = Ray(local_origin, local_dir, ray.t_min, ray.t_max)

        hit = self._primitive.intersect(local_ray)
        if hit is None:
            return None

        world = cache.world_matrix
        world_point = world[:3, :3] @ local_ray.at(hit.t) + world[:3, 3]
        dir_len2 = float(np.dot(ray.direction, ray.direction))
        if dir_len2 > 0.0:
            t = float(np.dot(world_point - ray.origin, ray.direction)) / dir_len2
        else:
            t = ray.t_max

        if t < ray.t_min or t > ray.t_max:
            return None

        normal = normalize(cache.normal_matrix @ hit.normal)
        return Hit(t=t, normal=normal, uv=hit.uv)

    def __repr__(self) -> str:
        return f"SceneObject(primitive={self._primitive!r}, material={self._material!r})"
