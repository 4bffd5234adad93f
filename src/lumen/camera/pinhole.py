"""Pinhole camera model for perspective projection ray generation.

The camera stores a camera-to-world Transform and its projection
parameters. In camera space it sits at the origin looking down -Z with +Y
up. Primary rays use the pixel-center convention ``(x + 0.5) / width``,
map the image to [-1, 1] with row 0 at the top, and scale by the vertical
field of view and the aspect ratio.

Example:
    >>> camera = Camera.from_look_at(
    ...     eye=(0.0, 0.0, 5.0),
    ...     target=(0.0, 0.0, 0.0),
    ...     up=(0.0, 1.0, 0.0),
    ...     vfov=math.pi / 3,
    ...     aspect=1.0,
    ...     near=0.1,
    ...     far=100.0,
    ... )
    >>> ray = camera.generate_ray(0, 0, 1, 1)  # Ray through the image center
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

from lumen.core.ray import Ray, vec3
from lumen.core.transform import Mat4, Transform


class Camera:
    """A perspective camera.

    Attributes:
        transform: Camera-to-world transform.
        vfov: Vertical field of view in radians.
        aspect: Width divided by height of the output image.
        near: Start of the valid ray interval.
        far: End of the valid ray interval.
    """

    __slots__ = ("_transform", "_vfov", "_aspect", "_near", "_far", "_tan_half_fov")

    def __init__(
        self,
        transform: Transform | None = None,
        vfov: float = math.pi / 3,
        aspect: float = 1.0,
        near: float = 0.1,
        far: float = 1000.0,
    ) -> None:
        """Initialize the camera.

        Raises:
            ValueError: If aspect <= 0, the field of view is outside (0, pi),
                or the clip range does not satisfy 0 < near < far.
        """
        if not aspect > 0.0:
            raise ValueError(f"Camera aspect ratio must be positive, got {aspect}")
        if not 0.0 < near < far:
            raise ValueError(f"Camera clip range must satisfy 0 < near < far, got near={near}, far={far}")
        if not 0.0 < vfov < math.pi:
            raise ValueError(f"Camera vertical field of view must lie in (0, pi), got {vfov}")
        self._transform = transform if transform is not None else Transform()
        self._vfov = float(vfov)
        self._aspect = float(aspect)
        self._near = float(near)
        self._far = float(far)
        self._tan_half_fov = math.tan(0.5 * self._vfov)

    @classmethod
    def from_look_at(
        cls,
        eye: npt.ArrayLike,
        target: npt.ArrayLike,
        up: npt.ArrayLike,
        vfov: float,
        aspect: float,
        near: float,
        far: float,
    ) -> Camera:
        """Create a camera at eye facing target.

        Args:
            eye: Camera position in world space.
            target: Point the camera is looking at.
            up: Approximate up direction.
            vfov: Vertical field of view in radians.
            aspect: Width divided by height.
            near: Near clip distance.
            far: Far clip distance.
        """
        return cls(Transform.look_at(eye, target, up), vfov, aspect, near, far)

    @property
    def transform(self) -> Transform:
        return self._transform

    @property
    def vfov(self) -> float:
        return self._vfov

    @property
    def aspect(self) -> float:
        return self._aspect

    @property
    def near(self) -> float:
        return self._near

    @property
    def far(self) -> float:
        return self._far

    @property
    def position(self) -> npt.NDArray[np.float64]:
        return self._transform.forward[:3, 3].copy()

    def view_matrix(self) -> Mat4:
        """World-to-camera matrix."""
        return self._transform.inverse_matrix.copy()

    def projection_matrix(self) -> Mat4:
        return Transform.perspective(self._vfov, self._aspect, self._near, self._far)

    def viewproj_matrix(self) -> Mat4:
        return self.projection_matrix() @ self.view_matrix()

    def generate_ray(self, pixel_x: float, pixel_y: float, width: int, height: int) -> Ray:
        """Generate the primary ray through a pixel.

        Fractional pixel coordinates are allowed, which is how jittered
        samples are produced.

        Args:
            pixel_x: Column, 0 = left edge.
            pixel_y: Row, 0 = top edge.
            width: Image width in pixels.
            height: Image height in pixels.

        Returns:
            A world-space ray with a unit direction and interval [near, far].
        """
        ndc_x = 2.0 * (pixel_x + 0.5) / width - 1.0
        ndc_y = 1.0 - 2.0 * (pixel_y + 0.5) / height
        cam_dir = vec3(
            ndc_x * self._aspect * self._tan_half_fov,
            ndc_y * self._tan_half_fov,
            -1.0,
        )

        m = self._transform.forward
        direction = m[:3, :3] @ cam_dir
        direction = direction / math.sqrt(float(np.dot(direction, direction)))
        return Ray(m[:3, 3].copy(), direction, self._near, self._far)

    def __repr__(self) -> str:
        return (
            f"Camera(position={self.position.tolist()}, vfov={self._vfov}, "
            f"aspect={self._aspect}, near={self._near}, far={self._far})"
        )
