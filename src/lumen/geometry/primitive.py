"""Hit record and the capability every geometric primitive provides.

A primitive lives in its own local space. It reports a bounding box and
answers ray queries with the nearest hit in the ray's parameter interval.
Normals are outward and never flipped toward the ray; callers decide the
orientation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from lumen.core.aabb import AABB
from lumen.core.ray import Ray, Vec3

UV = tuple[float, float]


@dataclass(frozen=True, eq=False)
class Hit:
    """Record of a ray-primitive intersection.

    Attributes:
        t: Ray parameter of the intersection.
        normal: Outward unit surface normal.
        uv: Surface parameterization at the hit point.
    """

    t: float
    normal: Vec3
    uv: UV


@runtime_checkable
class Primitive(Protocol):
    """Any shape that can bound itself and intersect a ray."""

    def aabb(self) -> AABB: ...

    def intersect(self, ray: Ray) -> Hit | None: ...
