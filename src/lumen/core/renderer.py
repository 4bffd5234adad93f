"""Tiled multi-threaded renderer.

The image is split into contiguous row ranges, one per worker thread. Each
worker owns a NumPy generator seeded from the global seed mixed with its
row range and thread index, and writes only the rows it was assigned, so
no pixel is touched by two threads and no locking is needed. The scene is
only read during a render.

Example:
    >>> renderer = Renderer(settings=RenderSettings(samples_per_pixel=32, seed=7))
    >>> image = Image()
    >>> renderer.render(scene, image, 320, 240)
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from lumen.core.image import Image
from lumen.core.integrator import Integrator, PathTracer
from lumen.core.ray import Ray, Vec3
from lumen.core.settings import RenderSettings
from lumen.scene.scene import Scene

logger = logging.getLogger(__name__)

RowRange = tuple[int, int]


def available_parallelism() -> int:
    """Number of CPUs usable by this process."""
    if hasattr(os, "sched_getaffinity"):
        return max(1, len(os.sched_getaffinity(0)))
    return max(1, os.cpu_count() or 1)


def partition_rows(height: int, workers: int) -> list[RowRange]:
    """Split [0, height) into contiguous half-open row ranges.

    The remainder rows go to the earliest ranges, so range sizes differ by
    at most one and the ranges cover every row exactly once.

    Args:
        height: Number of image rows.
        workers: Requested number of ranges; capped at height.

    Returns:
        A list of (start, end) pairs in row order.
    """
    if height <= 0:
        return []
    workers = max(1, min(workers, height))
    base, remainder = divmod(height, workers)
    ranges = []
    start = 0
    for index in range(workers):
        end = start + base + (1 if index < remainder else 0)
        ranges.append((start, end))
        start = end
    return ranges


def worker_seed(seed: int, rows: RowRange, thread_index: int) -> np.random.SeedSequence:
    """Seed sequence for one worker, mixed from the global seed and its partition."""
    return np.random.SeedSequence([seed, rows[0], rows[1], thread_index])


def ray_seed(seed: int, ray: Ray) -> np.random.SeedSequence:
    """Seed sequence hashed from the bits of a ray's origin and direction."""
    bits = np.concatenate((ray.origin, ray.direction)).astype(np.float64).view(np.uint64)
    return np.random.SeedSequence([seed, *(int(word) for word in bits)])


def _sanitize(color: Vec3) -> Vec3:
    # Drop NaN/Inf and negative values from numerical edge cases
    return np.maximum(np.nan_to_num(color, nan=0.0, posinf=0.0, neginf=0.0), 0.0)


class Renderer:
    """Drives an integrator over every pixel of an image.

    Attributes:
        integrator: Radiance estimator called for every primary ray.
        settings: Sample count, seed and thread configuration.
    """

    def __init__(self, integrator: Integrator | None = None, settings: RenderSettings | None = None) -> None:
        self.settings = settings if settings is not None else RenderSettings()
        self.integrator = integrator if integrator is not None else PathTracer(self.settings)

    def thread_count(self, height: int) -> int:
        """Effective worker count: min(configured or hardware threads, height)."""
        requested = self.settings.threads or available_parallelism()
        return max(1, min(requested, height))

    def render(self, scene: Scene, image: Image, width: int, height: int) -> Image:
        """Render the scene into an image.

        The image is resized to width x height first if its size differs.
        Blocks until every worker has finished; exceptions raised inside a
        worker propagate to the caller.

        Args:
            scene: The scene to render (read-only for the whole call).
            image: Destination buffer.
            width: Image width in pixels.
            height: Image height in pixels.

        Returns:
            The destination image.

        Raises:
            ValueError: If width or height is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Render size must be positive, got {width}x{height}")
        if image.width() != width or image.height() != height:
            image.resize(width, height)

        ranges = partition_rows(height, self.thread_count(height))
        logger.info(
            "Rendering %dx%d at %d spp on %d thread(s)",
            width,
            height,
            self.settings.samples_per_pixel,
            len(ranges),
        )
        start_time = time.perf_counter()

        if len(ranges) == 1:
            self._render_rows(scene, image, width, height, ranges[0], 0)
        else:
            with ThreadPoolExecutor(max_workers=len(ranges), thread_name_prefix="lumen-render") as pool:
                futures = [
                    pool.submit(self._render_rows, scene, image, width, height, rows, index)
                    for index, rows in enumerate(ranges)
                ]
                for future in futures:
                    future.result()

        logger.info("Render finished in %.2fs", time.perf_counter() - start_time)
        return image

    def _render_rows(
        self,
        scene: Scene,
        image: Image,
        width: int,
        height: int,
        rows: RowRange,
        thread_index: int,
    ) -> None:
        """Render the rows [rows[0], rows[1]) with a generator private to this worker."""
        logger.debug("Worker %d rendering rows %d-%d", thread_index, rows[0], rows[1] - 1)
        rng = np.random.default_rng(worker_seed(self.settings.seed, rows, thread_index))
        for y in range(*rows):
            row = image.row_view(y)
            for x in range(width):
                row[x] = self._render_pixel(scene, x, y, width, height, rng)

    def _render_pixel(
        self,
        scene: Scene,
        x: int,
        y: int,
        width: int,
        height: int,
        rng: np.random.Generator,
    ) -> Vec3:
        """Average samples_per_pixel jittered samples for one pixel."""
        camera = scene.camera
        spp = self.settings.samples_per_pixel
        total = np.zeros(3)
        for _ in range(spp):
            # Jitter uniformly over the pixel footprint around its center
            jx, jy = rng.random(2)
            ray = camera.generate_ray(x + jx - 0.5, y + jy - 0.5, width, height)
            total += _sanitize(self.integrator.estimate_radiance(scene, ray, rng))
        return total / spp

    def trace_pixel(self, scene: Scene, x: int, y: int, width: int, height: int) -> Vec3:
        """Render a single pixel on the calling thread.

        The generator is seeded by hashing the pixel's unjittered primary ray
        with the global seed, so the result depends only on the scene, the
        pixel and the settings.
        """
        center_ray = scene.camera.generate_ray(x, y, width, height)
        rng = np.random.default_rng(ray_seed(self.settings.seed, center_ray))
        return self._render_pixel(scene, x, y, width, height, rng)
