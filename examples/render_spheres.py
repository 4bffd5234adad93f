#!/usr/bin/env python3
"""Render two spheres sharing one geometry instance.

A red diffuse sphere and a green rough metal sphere are placed left and right
of the origin in front of a sky-blue background and rendered with the path
tracer.

Usage:
    python examples/render_spheres.py [options]

Options:
    --width WIDTH       Image width in pixels (default: 320)
    --height HEIGHT     Image height in pixels (default: 180)
    --samples SAMPLES   Number of samples per pixel (default: 16)
    --threads THREADS   Worker threads (default: all CPUs)
    --seed SEED         Global random seed (default: 0)
    --output OUTPUT     Output file path, .png or .ppm (default: render.png)
    --quiet             Only log warnings

Example:
    python examples/render_spheres.py --width 160 --height 90 --samples 8
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path

from lumen import (
    Camera,
    Image,
    Material,
    Renderer,
    RenderSettings,
    Scene,
    SceneObject,
    Sphere,
    Transform,
)
from lumen.preview.export import save_png, save_ppm

logger = logging.getLogger("render_spheres")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render two spheres with the path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=320, help="Image width in pixels (default: 320)")
    parser.add_argument("--height", type=int, default=180, help="Image height in pixels (default: 180)")
    parser.add_argument("--samples", type=int, default=16, help="Samples per pixel (default: 16)")
    parser.add_argument("--threads", type=int, default=None, help="Worker threads (default: all CPUs)")
    parser.add_argument("--seed", type=int, default=0, help="Global random seed (default: 0)")
    parser.add_argument("--output", type=str, default="render.png", help="Output path (default: render.png)")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings")
    return parser.parse_args()


def build_scene(width: int, height: int) -> Scene:
    """Create the two-sphere scene viewed from +Z."""
    camera = Camera.from_look_at(
        eye=(0.0, 0.0, 5.0),
        target=(0.0, 0.0, 0.0),
        up=(0.0, 1.0, 0.0),
        vfov=math.pi / 3,
        aspect=width / height,
        near=0.1,
        far=100.0,
    )
    scene = Scene(camera, background=(0.1, 0.2, 0.4))

    geometry = Sphere((0.0, 0.0, 0.0), 1.0)
    red_diffuse = Material.lambertian((0.9, 0.1, 0.1))
    green_metal = Material.metal((0.1, 0.9, 0.1), 0.1)

    scene.add_object(SceneObject(geometry, red_diffuse, Transform.translation((-1.25, 0.0, 0.0))))
    scene.add_object(SceneObject(geometry, green_metal, Transform.translation((1.25, 0.0, 0.0))))
    return scene


def render_spheres(
    width: int = 320,
    height: int = 180,
    num_samples: int = 16,
    threads: int | None = None,
    seed: int = 0,
    output_path: str = "render.png",
) -> Path:
    """Render the scene and save it.

    Returns:
        Path to the saved image file.
    """
    scene = build_scene(width, height)
    settings = RenderSettings(samples_per_pixel=num_samples, threads=threads, seed=seed)
    image = Renderer(settings=settings).render(scene, Image(), width, height)

    output_file = Path(output_path)
    if output_file.suffix.lower() == ".ppm":
        if not save_ppm(image, output_file):
            raise OSError(f"Could not write {output_file}")
    else:
        save_png(image, output_file, tone_map="reinhard", gamma=2.2)
    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        output = render_spheres(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            threads=args.threads,
            seed=args.seed,
            output_path=args.output,
        )
    except (OSError, ValueError) as e:
        logger.error("Render failed: %s", e)
        return 1

    logger.info("Wrote %s (%dx%d)", output.absolute(), args.width, args.height)
    return 0


if __name__ == "__main__":
    sys.exit(main())
