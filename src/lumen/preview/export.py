"""Image export and import.

Supported formats:
    - PNG (8-bit sRGB via Pillow, with tone mapping and gamma)
    - PPM (binary P6 via Pillow, linear values clamped to [0, 1])

Example:
    >>> from lumen.preview.export import save_png, save_ppm, load_ppm
    >>> save_png(image, "output.png", tone_map="reinhard")
    >>> save_ppm(image, "output.ppm")
    True
    >>> restored = load_ppm("output.ppm")
"""

from __future__ import annotations

import logging
import os

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from lumen.core.image import Image
from lumen.preview.display import ToneMapMethod, process_image_for_display

logger = logging.getLogger(__name__)

PathLike = str | os.PathLike[str]


def _as_array(image: Image | npt.NDArray[np.floating]) -> npt.NDArray[np.float64]:
    if isinstance(image, Image):
        return image.as_array()
    return np.asarray(image, dtype=np.float64)


def image_to_uint8(
    image: Image | npt.NDArray[np.floating],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to uint8 for display/export.

    Values are rounded to the nearest 8-bit level.

    Args:
        image: Linear image or (H, W, 3) array.
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 2.2 for sRGB).
        exposure: Exposure value for exposure tone mapping (default 1.0).

    Returns:
        8-bit image array of shape (H, W, 3).
    """
    processed = process_image_for_display(
        _as_array(image),
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )
    return np.rint(processed * 255.0).astype(np.uint8)


def save_png(
    image: Image | npt.NDArray[np.floating],
    filepath: PathLike,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Save a rendered image as an 8-bit sRGB PNG file.

    Args:
        image: Linear image or (H, W, 3) array.
        filepath: Output file path (should end in .png).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 2.2 for sRGB).
        exposure: Exposure value for exposure tone mapping (default 1.0).
    """
    image_uint8 = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    PILImage.fromarray(image_uint8).save(filepath, format="PNG")
    logger.info("Saved PNG %s (%dx%d)", filepath, image_uint8.shape[1], image_uint8.shape[0])


def save_ppm(image: Image | npt.NDArray[np.floating], filepath: PathLike) -> bool:
    """Save an image as a binary (P6) PPM file.

    Linear values are clamped to [0, 1] and quantized without gamma.

    Returns:
        True on success, False if the file could not be written.
    """
    image_uint8 = image_to_uint8(image, gamma=1.0)
    try:
        PILImage.fromarray(image_uint8).save(filepath, format="PPM")
    except OSError as exc:
        logger.warning("Failed to write PPM %s: %s", filepath, exc)
        return False
    logger.info("Saved PPM %s (%dx%d)", filepath, image_uint8.shape[1], image_uint8.shape[0])
    return True


def load_ppm(filepath: PathLike) -> Image | None:
    """Load a PPM file into a linear float image with values in [0, 1].

    Returns:
        The image, or None if the file is missing or not a readable PPM.
    """
    try:
        with PILImage.open(filepath) as pil_image:
            if pil_image.format != "PPM":
                logger.warning("%s is not a PPM file (format %s)", filepath, pil_image.format)
                return None
            data = np.asarray(pil_image.convert("RGB"), dtype=np.float64) / 255.0
    except (OSError, UnidentifiedImageError) as exc:
        logger.warning("Failed to read PPM %s: %s", filepath, exc)
        return None
    return Image.from_array(data)


def compute_rmse(
    image_a: Image | npt.NDArray[np.floating],
    image_b: Image | npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    a = _as_array(image_a)
    b = _as_array(image_b)
    if a.shape != b.shape:
        raise ValueError(f"Image shapes must match: {a.shape} vs {b.shape}")
    diff = a - b
    return float(np.sqrt(np.mean(diff**2)))
