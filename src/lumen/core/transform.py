"""Affine transforms stored as a forward/inverse matrix pair.

A Transform caches a 4x4 matrix and its inverse together; neither is ever
updated on its own. Composition follows matrix order, so ``a * b`` applies
``b`` first and then ``a``.

Example:
    >>> xf = Transform.from_trs(vec3(0.0, 0.0, 5.0), IDENTITY_QUATERNION, vec3(1.0, 1.0, 1.0))
    >>> transform_point(xf, vec3(0.0, 0.0, 0.0))
    array([0., 0., 5.])
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

from lumen.core.ray import Vec3, as_vec3, normalize

Mat4 = npt.NDArray[np.float64]

# Quaternions are stored as (w, x, y, z)
IDENTITY_QUATERNION = np.array((1.0, 0.0, 0.0, 0.0))

# Determinant magnitude below which a matrix is treated as singular
SINGULAR_EPSILON = 1e-12


def quaternion_from_axis_angle(axis: npt.ArrayLike, angle: float) -> npt.NDArray[np.float64]:
    """Build a unit quaternion (w, x, y, z) rotating by angle radians about axis."""
    a = normalize(as_vec3(axis))
    half = 0.5 * angle
    s = math.sin(half)
    return np.array((math.cos(half), a[0] * s, a[1] * s, a[2] * s))


def quaternion_to_matrix(q: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Convert a quaternion (w, x, y, z) to a 3x3 rotation matrix.

    The quaternion is normalized first; a zero quaternion yields identity.
    """
    q = np.asarray(q, dtype=np.float64)
    n = float(np.dot(q, q))
    if n == 0.0:
        return np.eye(3)
    w, x, y, z = q / math.sqrt(n)
    return np.array(
        (
            (1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - w * z), 2.0 * (x * z + w * y)),
            (2.0 * (x * y + w * z), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - w * x)),
            (2.0 * (x * z - w * y), 2.0 * (y * z + w * x), 1.0 - 2.0 * (x * x + y * y)),
        )
    )


def invert_matrix(matrix: npt.ArrayLike) -> Mat4:
    """Invert a 4x4 matrix.

    Raises:
        ValueError: If the matrix is singular.
    """
    m = np.asarray(matrix, dtype=np.float64)
    if m.shape != (4, 4):
        raise ValueError(f"Expected a 4x4 matrix, got shape {m.shape}")
    if abs(np.linalg.det(m)) < SINGULAR_EPSILON:
        raise ValueError("Cannot invert a singular matrix")
    try:
        return np.linalg.inv(m)
    except np.linalg.LinAlgError as exc:
        raise ValueError("Cannot invert a singular matrix") from exc


class Transform:
    """A 4x4 affine transform and its cached inverse.

    Attributes:
        forward: The object-to-parent matrix.
        inverse_matrix: The parent-to-object matrix.
    """

    __slots__ = ("_forward", "_inverse")

    def __init__(self, forward: npt.ArrayLike | None = None, inverse: npt.ArrayLike | None = None) -> None:
        if forward is None:
            self._forward = np.eye(4)
            self._inverse = np.eye(4)
            return
        self._forward = np.array(forward, dtype=np.float64)
        if inverse is None:
            self._inverse = invert_matrix(self._forward)
        else:
            self._inverse = np.array(inverse, dtype=np.float64)
        self._forward.flags.writeable = False
        self._inverse.flags.writeable = False

    @classmethod
    def from_matrix(cls, matrix: npt.ArrayLike) -> Transform:
        """Create a transform from a forward matrix, computing the inverse."""
        return cls(matrix)

    @classmethod
    def from_trs(
        cls,
        translation: npt.ArrayLike,
        rotation: npt.ArrayLike = IDENTITY_QUATERNION,
        scale: npt.ArrayLike = (1.0, 1.0, 1.0),
    ) -> Transform:
        """Create a transform that rotates, then scales, then translates.

        Args:
            translation: Translation vector.
            rotation: Rotation quaternion (w, x, y, z).
            scale: Per-axis scale factors.

        Raises:
            ValueError: If any scale factor is zero.
        """
        t = as_vec3(translation)
        s = as_vec3(scale)
        if np.any(s == 0.0):
            raise ValueError(f"Scale factors must be non-zero, got {s.tolist()}")
        r = quaternion_to_matrix(rotation)

        forward = np.eye(4)
        forward[:3, :3] = s[:, None] * r
        forward[:3, 3] = t

        inverse = np.eye(4)
        inverse[:3, :3] = r.T / s
        inverse[:3, 3] = -inverse[:3, :3] @ t
        return cls(forward, inverse)

    @classmethod
    def translation(cls, offset: npt.ArrayLike) -> Transform:
        return cls.from_trs(offset)

    @classmethod
    def scaling(cls, factors: npt.ArrayLike) -> Transform:
        return cls.from_trs((0.0, 0.0, 0.0), IDENTITY_QUATERNION, factors)

    @classmethod
    def look_at(cls, eye: npt.ArrayLike, target: npt.ArrayLike, up: npt.ArrayLike) -> Transform:
        """Create a camera-to-world transform.

        The camera looks down its local -Z axis with +Y up, placed at eye and
        facing target.

        Raises:
            ValueError: If eye equals target or up is parallel to the view.
        """
        eye = as_vec3(eye)
        forward = as_vec3(target) - eye
        if not np.any(forward):
            raise ValueError("look_at requires distinct eye and target")
        forward = normalize(forward)
        right = np.cross(forward, as_vec3(up))
        if not np.any(np.abs(right) > 1e-12):
            raise ValueError("look_at up vector is parallel to the view direction")
        right = normalize(right)
        true_up = np.cross(right, forward)

        rotation = np.column_stack((right, true_up, -forward))
        m = np.eye(4)
        m[:3, :3] = rotation
        m[:3, 3] = eye

        inv = np.eye(4)
        inv[:3, :3] = rotation.T
        inv[:3, 3] = -rotation.T @ eye
        return cls(m, inv)

    @staticmethod
    def perspective(fovy: float, aspect: float, near: float, far: float) -> Mat4:
        """OpenGL-style perspective projection matrix (fovy in radians)."""
        f = 1.0 / math.tan(0.5 * fovy)
        m = np.zeros((4, 4))
        m[0, 0] = f / aspect
        m[1, 1] = f
        m[2, 2] = (far + near) / (near - far)
        m[2, 3] = 2.0 * far * near / (near - far)
        m[3, 2] = -1.0
        return m

    @staticmethod
    def orthographic(left: float, right: float, bottom: float, top: float, near: float, far: float) -> Mat4:
        """OpenGL-style orthographic projection matrix."""
        m = np.eye(4)
        m[0, 0] = 2.0 / (right - left)
        m[1, 1] = 2.0 / (top - bottom)
        m[2, 2] = -2.0 / (far - near)
        m[0, 3] = -(right + left) / (right - left)
        m[1, 3] = -(top + bottom) / (top - bottom)
        m[2, 3] = -(far + near) / (far - near)
        return m

    @property
    def forward(self) -> Mat4:
        return self._forward

    @property
    def inverse_matrix(self) -> Mat4:
        return self._inverse

    def inverse(self) -> Transform:
        """Return the inverse transform (the cached pair swapped)."""
        return Transform(self._inverse, self._forward)

    def __matmul__(self, other: Transform) -> Transform:
        if not isinstance(other, Transform):
            return NotImplemented
        return Transform(self._forward @ other._forward, other._inverse @ self._inverse)

    __mul__ = __matmul__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return bool(np.array_equal(self._forward, other._forward))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Transform({self._forward.tolist()})"


def transform_point(xf: Transform, p: npt.ArrayLike) -> Vec3:
    """Map a point (w = 1) through the forward matrix."""
    m = xf.forward
    return m[:3, :3] @ as_vec3(p) + m[:3, 3]


def transform_direction(xf: Transform, d: npt.ArrayLike) -> Vec3:
    """Map a direction (w = 0) through the forward matrix."""
    return xf.forward[:3, :3] @ as_vec3(d)


def transform_normal(xf: Transform, n: npt.ArrayLike) -> Vec3:
    """Map a surface normal with the inverse-transpose of the upper 3x3 block.

    The result is not normalized.
    """
    return xf.inverse_matrix[:3, :3].T @ as_vec3(n)
