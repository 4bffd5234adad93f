"""Render configuration.

RenderSettings gathers the tunables of the path tracer and the tiled
renderer. Instances are immutable and validated on construction.

Example:
    >>> settings = RenderSettings(samples_per_pixel=64, seed=7)
    >>> settings.with_overrides(threads=1).threads
    1
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

# Maximum path length (number of surface interactions)
DEFAULT_MAX_DEPTH = 8

# Samples traced through every pixel
DEFAULT_SAMPLES_PER_PIXEL = 16

# Bounces before Russian roulette may terminate a path
MIN_BOUNCES_BEFORE_RR = 3

# Offset applied along a spawned direction to avoid self-intersection
RAY_EPSILON = 1e-4

# Floor applied to every probability used as a divisor
PDF_FLOOR = 1e-3


@dataclass(frozen=True)
class RenderSettings:
    """Configuration for the integrator and the tiled renderer.

    Attributes:
        samples_per_pixel: Number of jittered primary rays averaged per pixel.
        max_depth: Maximum number of bounces per path.
        seed: Global seed mixed into every worker's generator.
        threads: Worker thread count. None uses the available hardware
            parallelism. The effective count never exceeds the image height.
        roulette: Whether Russian roulette termination is enabled.
        min_bounces_before_rr: Bounces traced before roulette applies.
        ray_epsilon: Offset used when spawning secondary rays.
        pdf_floor: Lower bound for probabilities used as divisors.
    """

    samples_per_pixel: int = DEFAULT_SAMPLES_PER_PIXEL
    max_depth: int = DEFAULT_MAX_DEPTH
    seed: int = 0
    threads: int | None = None
    roulette: bool = True
    min_bounces_before_rr: int = MIN_BOUNCES_BEFORE_RR
    ray_epsilon: float = RAY_EPSILON
    pdf_floor: float = PDF_FLOOR

    def __post_init__(self) -> None:
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.threads is not None and self.threads < 1:
            raise ValueError(f"threads must be at least 1, got {self.threads}")
        if self.min_bounces_before_rr < 0:
            raise ValueError("min_bounces_before_rr must be non-negative")
        if self.ray_epsilon < 0.0:
            raise ValueError("ray_epsilon must be non-negative")
        if not 0.0 < self.pdf_floor <= 1.0:
            raise ValueError(f"pdf_floor must lie in (0, 1], got {self.pdf_floor}")
        if self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")

    def with_overrides(self, **changes: Any) -> RenderSettings:
        """Return a copy with some fields replaced (validated again)."""
        return replace(self, **changes)
