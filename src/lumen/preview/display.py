"""Display transforms for linear radiance images.

Renders hold linear, unbounded radiance. Before quantizing to 8 bits the
values are compressed by a tone mapping operator, gamma encoded and clamped
to [0, 1]:

    display = clip(tone_map(radiance) ** (1 / gamma), 0, 1)

Example:
    >>> from lumen.preview.display import process_image_for_display
    >>> display = process_image_for_display(image.as_array(), tone_map="reinhard")
"""

from __future__ import annotations

from typing import Callable, Literal

import numpy as np
import numpy.typing as npt

ToneMapMethod = Literal["none", "reinhard", "exposure"]

FloatArray = npt.NDArray[np.float64]


def tone_map_reinhard(radiance: npt.ArrayLike) -> FloatArray:
    """Reinhard global operator, L / (1 + L), after clamping negatives to zero."""
    c = np.maximum(np.asarray(radiance, dtype=np.float64), 0.0)
    return c / (1.0 + c)


def tone_map_exposure(radiance: npt.ArrayLike, exposure: float = 1.0) -> FloatArray:
    """Exponential film response, 1 - exp(-L * exposure).

    Larger exposure values brighten the image; the output approaches 1 as
    radiance grows.
    """
    c = np.maximum(np.asarray(radiance, dtype=np.float64), 0.0)
    return -np.expm1(-c * exposure)


def apply_gamma(values: npt.ArrayLike, gamma: float = 2.2) -> FloatArray:
    """Gamma encode values in [0, 1]; gamma 1.0 passes values through."""
    v = np.asarray(values, dtype=np.float64)
    if gamma == 1.0:
        return v.copy()
    return np.power(np.clip(v, 0.0, 1.0), 1.0 / gamma)


_OPERATORS: dict[str, Callable[[FloatArray, float], FloatArray]] = {
    "none": lambda c, exposure: c,
    "reinhard": lambda c, exposure: tone_map_reinhard(c),
    "exposure": tone_map_exposure,
}


def process_image_for_display(
    image: npt.ArrayLike,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> FloatArray:
    """Map a linear (H, W, 3) image to display values in [0, 1].

    Args:
        image: Linear radiance.
        tone_map: Operator name ("none", "reinhard" or "exposure").
        gamma: Display gamma (2.2 approximates sRGB).
        exposure: Only used by the "exposure" operator.

    Raises:
        ValueError: If the tone mapping method is unknown.
    """
    operator = _OPERATORS.get(tone_map)
    if operator is None:
        raise ValueError(f"Unknown tone mapping method: {tone_map}")
    mapped = operator(np.asarray(image, dtype=np.float64), exposure)
    return np.clip(apply_gamma(mapped, gamma), 0.0, 1.0)
