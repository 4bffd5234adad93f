"""Path tracing integrator for Monte Carlo light transport.

This module implements unbiased path tracing with a discrete BSDF mixture,
Russian roulette termination and importance-sampling weights, plus a cheap
headlight ray caster for previews.

The path tracer solves the rendering equation by following a ray through
the scene, bouncing off surfaces according to their material properties,
and accumulating emitted radiance along the path.

Key features:
    - Dielectric reflect/refract choice driven by Schlick's Fresnel term
    - Specular/diffuse mixing driven by roughness
    - Cosine-weighted diffuse sampling (BRDF/pdf reduces to albedo)
    - Russian roulette after a minimum number of bounces
    - Self-intersection avoidance by offsetting spawned rays

Example:
    >>> import numpy as np
    >>> tracer = PathTracer(RenderSettings(max_depth=16))
    >>> rng = np.random.default_rng(1)
    >>> radiance = tracer.estimate_radiance(scene, camera.generate_ray(4, 4, 9, 9), rng)
"""

from __future__ import annotations

import math
from typing import Protocol

import numpy as np

from lumen.core.ray import (
    Ray,
    Vec3,
    normalize,
    reflect,
    refract,
    sample_cosine_hemisphere,
    schlick_fresnel,
)
from lumen.core.settings import RenderSettings
from lumen.scene.scene import Scene, SceneHit


class Integrator(Protocol):
    """Anything that estimates the radiance arriving along a ray."""

    def estimate_radiance(self, scene: Scene, ray: Ray, rng: np.random.Generator) -> Vec3: ...


def _spawn_ray(point: Vec3, direction: Vec3, epsilon: float) -> Ray:
    """Start a new ray slightly off the surface along its own direction."""
    return Ray(point + epsilon * direction, direction, 0.0, math.inf)


def russian_roulette_probability(throughput: Vec3) -> float:
    """Termination probability q = 1 - clamp(max channel of throughput, 0, 1)."""
    return 1.0 - min(max(float(np.max(throughput)), 0.0), 1.0)


class PathTracer:
    """Iterative unidirectional path tracer.

    Attributes:
        settings: Depth, roulette, epsilon and pdf-floor configuration.
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self.settings = settings if settings is not None else RenderSettings()

    def estimate_radiance(self, scene: Scene, ray: Ray, rng: np.random.Generator) -> Vec3:
        """Estimate the radiance arriving along a ray.

        Args:
            scene: The scene to trace against.
            ray: The primary ray. Its direction is normalized before use.
            rng: Generator supplying every random decision of this path.

        Returns:
            The RGB radiance estimate.
        """
        settings = self.settings
        radiance = np.zeros(3)
        # Product of all per-bounce weights along the path
        throughput = np.ones(3)
        ray = ray.normalized_dir()

        for depth in range(settings.max_depth):
            hit = scene.find_nearest_hit(ray)
            if hit is None:
                radiance += throughput * scene.background
                break

            material = hit.material
            uv = hit.uv
            radiance += throughput * material.emitted(uv)

            if settings.roulette and depth >= settings.min_bounces_before_rr:
                q = russian_roulette_probability(throughput)
                if rng.random() < q:
                    break
                throughput = throughput / max(1.0 - q, settings.pdf_floor)

            if material.transparency(uv) > 0.0:
                direction, weight = self._scatter_dielectric(ray.direction, hit, rng)
            else:
                direction, weight = self._scatter_opaque(ray.direction, hit, rng)

            throughput = throughput * weight
            if not np.any(throughput):
                break
            ray = _spawn_ray(hit.point, direction, settings.ray_epsilon)

        return radiance

    def _scatter_dielectric(
        self, incident: Vec3, hit: SceneHit, rng: np.random.Generator
    ) -> tuple[Vec3, Vec3]:
        """Choose between Fresnel reflection and refraction.

        Returns:
            (new direction, throughput weight). The weight is the branch's
            Fresnel factor times its color, divided by the probability of
            choosing that branch.
        """
        material = hit.material
        uv = hit.uv
        albedo = material.albedo(uv)
        ior = material.refractive_index(uv)

        entering = float(np.dot(incident, hit.normal)) < 0.0
        normal = hit.normal if entering else -hit.normal
        eta_i, eta_t = (1.0, ior) if entering else (ior, 1.0)
        eta = eta_i / eta_t

        cos_i = min(-float(np.dot(incident, normal)), 1.0)
        reflectance = schlick_fresnel(cos_i, eta_i, eta_t)
        refracted = refract(incident, normal, eta)
        floor = self.settings.pdf_floor

        if refracted is None:
            # Total internal reflection: reflection is the only branch
            return normalize(reflect(incident, normal)), albedo

        if rng.random() < reflectance:
            weight = albedo * (reflectance / max(reflectance, floor))
            return normalize(reflect(incident, normal)), weight

        transmittance = 1.0 - reflectance
        weight = albedo * material.transparency(uv) * (transmittance / max(transmittance, floor))
        return normalize(refracted), weight

    def _scatter_opaque(
        self, incident: Vec3, hit: SceneHit, rng: np.random.Generator
    ) -> tuple[Vec3, Vec3]:
        """Choose between a perfect-specular and a cosine-weighted diffuse bounce.

        The specular lobe is picked with probability 1 - roughness.
        """
        material = hit.material
        uv = hit.uv
        albedo = material.albedo(uv)
        roughness = material.roughness(uv)
        floor = self.settings.pdf_floor

        normal = hit.normal if float(np.dot(incident, hit.normal)) < 0.0 else -hit.normal

        p_specular = 1.0 - roughness
        if rng.random() < p_specular:
            weight = albedo * (p_specular / max(p_specular, floor))
            return normalize(reflect(incident, normal)), weight

        p_diffuse = roughness
        weight = albedo * (p_diffuse / max(p_diffuse, floor))
        return sample_cosine_hemisphere(normal, rng), weight


class HeadlightIntegrator:
    """Single-bounce ray caster lit by a light at the eye.

    Returns emitted radiance plus albedo scaled by the cosine between the
    surface normal and the view ray, or the background on a miss. Useful for
    fast previews of scenes without light sources.
    """

    def estimate_radiance(self, scene: Scene, ray: Ray, rng: np.random.Generator) -> Vec3:
        ray = ray.normalized_dir()
        hit = scene.find_nearest_hit(ray)
        if hit is None:
            return np.array(scene.background, dtype=np.float64)
        cosine = max(0.0, -float(np.dot(hit.normal, ray.direction)))
        return hit.material.emitted(hit.uv) + hit.material.albedo(hit.uv) * cosine
