"""Preview module for output.

Components:
    display: Tone mapping (Reinhard, exposure) and gamma correction
    export: PNG and PPM writers, PPM reader, comparison metrics

Example:
    >>> from lumen.preview import save_png
    >>> save_png(image, "output.png", tone_map="reinhard", gamma=2.2)
"""

from lumen.preview.display import (
    ToneMapMethod,
    apply_gamma,
    process_image_for_display,
    tone_map_exposure,
    tone_map_reinhard,
)
from lumen.preview.export import (
    compute_rmse,
    image_to_uint8,
    load_ppm,
    save_png,
    save_ppm,
)

__all__ = [
    # Tone mapping
    "tone_map_reinhard",
    "tone_map_exposure",
    "apply_gamma",
    "process_image_for_display",
    "ToneMapMethod",
    # Export functions
    "save_png",
    "save_ppm",
    "load_ppm",
    "image_to_uint8",
    "compute_rmse",
]
