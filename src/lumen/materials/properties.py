"""UV-sampled material property providers.

Every provider answers ``sample(uv)`` with either an RGB color (float64
array of shape (3,)) or a scalar, depending on what it was built from.

Example:
    >>> checker = CheckerProperty((1.0, 1.0, 1.0), (0.0, 0.0, 0.0), scale=4)
    >>> checker.sample((0.1, 0.1))
    array([1., 1., 1.])
"""

from __future__ import annotations

import math
from typing import Any, Protocol, runtime_checkable

import numpy as np
import numpy.typing as npt

UV = tuple[float, float]


def _as_value(value: Any) -> float | npt.NDArray[np.float64]:
    arr = np.asarray(value, dtype=np.float64)
    if arr.ndim == 0:
        return float(arr)
    if arr.shape != (3,):
        raise ValueError(f"Property values must be scalars or RGB triples, got shape {arr.shape}")
    arr = arr.copy()
    arr.flags.writeable = False
    return arr


def _values_equal(a: Any, b: Any) -> bool:
    return bool(np.array_equal(np.asarray(a), np.asarray(b)))


@runtime_checkable
class PropertySampler(Protocol):
    """Anything that can be sampled at a UV coordinate."""

    def sample(self, uv: UV) -> Any: ...


class UniformProperty:
    """A property with the same value everywhere."""

    __slots__ = ("_value",)

    def __init__(self, value: Any) -> None:
        self._value = _as_value(value)

    @property
    def value(self) -> Any:
        return self._value

    def sample(self, uv: UV) -> Any:
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UniformProperty):
            return NotImplemented
        return _values_equal(self._value, other._value)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        value = self._value.tolist() if isinstance(self._value, np.ndarray) else self._value
        return f"UniformProperty({value})"


class CheckerProperty:
    """Alternating values on a square grid in UV space.

    Attributes:
        even: Value of cells where floor(u*scale) + floor(v*scale) is even.
        odd: Value of the other cells.
        scale: Number of cells per unit of UV.
    """

    __slots__ = ("_even", "_odd", "_scale")

    def __init__(self, even: Any, odd: Any, scale: float = 8.0) -> None:
        if not scale > 0.0:
            raise ValueError(f"Checker scale must be positive, got {scale}")
        self._even = _as_value(even)
        self._odd = _as_value(odd)
        self._scale = float(scale)

    def sample(self, uv: UV) -> Any:
        cell = math.floor(uv[0] * self._scale) + math.floor(uv[1] * self._scale)
        return self._even if cell % 2 == 0 else self._odd

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CheckerProperty):
            return NotImplemented
        return (
            _values_equal(self._even, other._even)
            and _values_equal(self._odd, other._odd)
            and self._scale == other._scale
        )

    __hash__ = None  # type: ignore[assignment]


class ImageProperty:
    """Nearest-texel lookup into an image, wrapping UVs into [0, 1).

    The texel array has shape (H, W) for scalar properties or (H, W, 3) for
    colors. Row 0 is the top of the image, i.e. v = 1.
    """

    __slots__ = ("_texels",)

    def __init__(self, texels: npt.ArrayLike) -> None:
        data = np.array(texels, dtype=np.float64)
        if data.ndim not in (2, 3) or (data.ndim == 3 and data.shape[2] != 3):
            raise ValueError(f"Texels must have shape (H, W) or (H, W, 3), got {data.shape}")
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError("Texel array must not be empty")
        data.flags.writeable = False
        self._texels = data

    def sample(self, uv: UV) -> Any:
        height, width = self._texels.shape[:2]
        u = uv[0] - math.floor(uv[0])
        v = uv[1] - math.floor(uv[1])
        x = min(int(u * width), width - 1)
        y = min(int((1.0 - v) * height), height - 1)
        texel = self._texels[y, x]
        return float(texel) if texel.ndim == 0 else texel

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageProperty):
            return NotImplemented
        return _values_equal(self._texels, other._texels)

    __hash__ = None  # type: ignore[assignment]


def as_property(value: Any) -> PropertySampler:
    """Wrap plain values in a UniformProperty; pass samplers through."""
    if isinstance(value, PropertySampler):
        return value
    return UniformProperty(value)
