"""Lumen: an offline CPU path tracer.

This package renders scenes of transformed primitives by simulating light
transport along rays, with support for:
- Unbiased path tracing with Russian roulette termination
- Fresnel-weighted dielectrics, rough/specular metals and diffuse surfaces
- Spheres, triangle meshes and planes placed by affine transforms
- Multi-threaded row-partitioned rendering with reproducible seeding

Subpackages:
    core: Rays, bounding boxes, transforms, images, integrators, renderer
    geometry: Shape primitives and intersection algorithms
    materials: UV-sampled material properties
    scene: Scene objects and nearest-hit queries
    camera: Pinhole camera ray generation
    preview: Tone mapping and image export
"""

from lumen.camera import Camera
from lumen.core import AABB, Image, Ray, RenderSettings, Transform
from lumen.core.integrator import HeadlightIntegrator, Integrator, PathTracer
from lumen.core.renderer import Renderer, partition_rows
from lumen.geometry import Hit, Mesh, Plane, Primitive, Sphere
from lumen.materials import Material
from lumen.scene import Scene, SceneHit, SceneObject

__version__ = "0.1.0"

__all__ = [
    "AABB",
    "Camera",
    "HeadlightIntegrator",
    "Hit",
    "Image",
    "Integrator",
    "Material",
    "Mesh",
    "PathTracer",
    "Plane",
    "Primitive",
    "Ray",
    "RenderSettings",
    "Renderer",
    "Scene",
    "SceneHit",
    "SceneObject",
    "Sphere",
    "Transform",
    "partition_rows",
]
