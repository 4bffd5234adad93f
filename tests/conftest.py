"""Pytest configuration for lumen tests.

This module provides shared fixtures: a camera looking at the origin from
+Z, the single-sphere scenes used by the end-to-end checks, and a seeded
random generator.
"""

import math

import numpy as np
import pytest

from lumen.camera.pinhole import Camera
from lumen.geometry.sphere import Sphere
from lumen.materials.material import Material
from lumen.scene.scene import Scene
from lumen.scene.scene_object import SceneObject


@pytest.fixture
def camera():
    """Camera at (0, 0, 5) looking at the origin with a 60 degree square view."""
    return Camera.from_look_at(
        eye=(0.0, 0.0, 5.0),
        target=(0.0, 0.0, 0.0),
        up=(0.0, 1.0, 0.0),
        vfov=math.pi / 3,
        aspect=1.0,
        near=0.1,
        far=100.0,
    )


@pytest.fixture
def unit_sphere():
    """Unit sphere at the origin, shared by the scene fixtures."""
    return Sphere((0.0, 0.0, 0.0), 1.0)


@pytest.fixture
def emissive_scene(camera, unit_sphere):
    """Red emissive sphere (radiance (1, 0, 0), power 2) on a black background."""
    scene = Scene(camera, background=(0.0, 0.0, 0.0))
    scene.add_object(SceneObject(unit_sphere, Material.emissive((1.0, 0.0, 0.0), 2.0)))
    return scene


@pytest.fixture
def diffuse_scene(camera, unit_sphere):
    """Gray diffuse sphere lit by a white background."""
    scene = Scene(camera, background=(1.0, 1.0, 1.0))
    scene.add_object(SceneObject(unit_sphere, Material.lambertian((0.5, 0.5, 0.5))))
    return scene


@pytest.fixture
def rng():
    """Seeded generator so statistical tests are reproducible."""
    return np.random.default_rng(12345)
