"""Scene container and nearest-hit resolution.

A Scene owns an ordered list of SceneObjects, a camera and a background
radiance. During a render it is only read, so it can be shared by every
worker thread without locking.

Example:
    >>> scene = Scene(camera, background=(0.1, 0.2, 0.4))
    >>> scene.add_object(SceneObject(Sphere(), Material.lambertian((0.9, 0.1, 0.1))))
    >>> hit = scene.find_nearest_hit(camera.generate_ray(0, 0, 1, 1))
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy.typing as npt

from lumen.camera.pinhole import Camera
from lumen.core.aabb import AABB
from lumen.core.ray import Ray, Vec3, as_vec3
from lumen.geometry.primitive import UV
from lumen.materials.material import Material
from lumen.scene.scene_object import SceneObject


@dataclass(frozen=True, eq=False)
class SceneHit:
    """Record of a ray-scene intersection with material information.

    Attributes:
        t: Ray parameter of the nearest hit.
        point: World-space hit point.
        normal: Outward world-space unit normal.
        uv: Surface parameterization at the hit.
        material: Material of the hit object.
        obj: The scene object that was hit.
    """

    t: float
    point: Vec3
    normal: Vec3
    uv: UV
    material: Material
    obj: SceneObject


class Scene:
    """Ordered scene objects, one camera and a background radiance."""

    def __init__(
        self,
        camera: Camera,
        background: npt.ArrayLike = (0.0, 0.0, 0.0),
        objects: Sequence[SceneObject] = (),
    ) -> None:
        self._camera = camera
        self._background = as_vec3(background).copy()
        self._background.flags.writeable = False
        self._objects: list[SceneObject] = list(objects)

    @property
    def camera(self) -> Camera:
        return self._camera

    @property
    def background(self) -> Vec3:
        return self._background

    @property
    def objects(self) -> tuple[SceneObject, ...]:
        return tuple(self._objects)

    def add_object(self, obj: SceneObject) -> int:
        """Append an object and return its index."""
        self._objects.append(obj)
        return len(self._objects) - 1

    def size(self) -> int:
        return len(self._objects)

    def empty(self) -> bool:
        return not self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[SceneObject]:
        return iter(self._objects)

    def aabb(self) -> AABB:
        """Union of every object's world-space bounding box."""
        box = AABB()
        for obj in self._objects:
            box.union(obj.aabb())
        return box

    def find_nearest_hit(self, ray: Ray) -> SceneHit | None:
        """Find the nearest hit along a world-space ray.

        Objects are scanned in insertion order; each rejects the ray against
        its cached world AABB before testing the primitive. The search
        interval shrinks to the best t found so far, and a later object only
        replaces the current best with a strictly smaller t, so the first
        inserted object wins exact ties.

        Returns:
            The nearest hit, or None if the ray escapes to the background.
        """
        best = None
        best_obj = None
        query = ray
        for obj in self._objects:
            hit = obj.intersect(query)
            if hit is None or hit.t < ray.t_min:
                continue
            if best is not None and not hit.t < best.t:
                continue
            best = hit
            best_obj = obj
            query = ray.with_range(ray.t_min, hit.t)

        if best is None or best_obj is None:
            return None
        return SceneHit(
            t=best.t,
            point=ray.at(best.t),
            normal=best.normal,
            uv=best.uv,
            material=best_obj.material,
            obj=best_obj,
        )

    def __repr__(self) -> str:
        return f"Scene(objects={len(self._objects)}, background={self._background.tolist()})"
