"""Integration tests for the end-to-end rendering pipeline.

This module renders complete scenes from scene construction through image
output and checks pixels whose values are known analytically. Tests are
designed to be fast (low resolution, few samples) while still exercising
camera, scene, integrator, renderer and export together.
"""

from __future__ import annotations

import importlib.util
from pathlib import Path

import numpy as np
import pytest

from lumen import HeadlightIntegrator, Image, Material, Renderer, RenderSettings, Scene, SceneObject
from lumen.preview.export import load_ppm, save_ppm

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


class TestEmitterScene:
    """Red emissive sphere (radiance 1, power 2) on a black background."""

    @pytest.fixture
    def image(self, emissive_scene):
        settings = RenderSettings(samples_per_pixel=4, seed=1, threads=2)
        return Renderer(settings=settings).render(emissive_scene, Image(), 9, 9)

    def test_center_pixel_is_emitter(self, image):
        """Test the center pixel sees only the emitter."""
        np.testing.assert_allclose(image.at(4, 4), [2.0, 0.0, 0.0])

    def test_corner_pixel_is_black(self, image):
        """Test a corner pixel misses the sphere entirely."""
        np.testing.assert_array_equal(image.at(0, 0), [0.0, 0.0, 0.0])

    def test_only_red_channel_lit(self, image):
        """Test no pixel picks up green or blue radiance."""
        pixels = image.as_array()
        assert np.all(pixels[..., 1:] == 0.0)
        assert pixels[..., 0].max() == pytest.approx(2.0)


class TestDiffuseScene:
    """Gray diffuse sphere (albedo 0.5)."""

    def test_lit_by_white_sky(self, diffuse_scene):
        """Test the center pixel is albedo times the sky and the corner is the sky."""
        settings = RenderSettings(samples_per_pixel=4, threads=3)
        image = Renderer(settings=settings).render(diffuse_scene, Image(), 9, 9)
        np.testing.assert_allclose(image.at(4, 4), [0.5, 0.5, 0.5])
        np.testing.assert_allclose(image.at(0, 0), [1.0, 1.0, 1.0])

    def test_headlight_preview_on_black(self, camera, unit_sphere):
        """Test a preview render shows the sphere even without lights."""
        scene = Scene(camera, background=(0.0, 0.0, 0.0))
        scene.add_object(SceneObject(unit_sphere, Material.lambertian((0.5, 0.5, 0.5))))
        settings = RenderSettings(samples_per_pixel=1, threads=1)
        image = Renderer(HeadlightIntegrator(), settings).render(scene, Image(), 9, 9)
        assert np.all(image.at(4, 4) > 0.0)
        np.testing.assert_array_equal(image.at(0, 0), [0.0, 0.0, 0.0])


class TestExportPipeline:
    """Render, save and reload."""

    def test_render_save_load(self, emissive_scene, tmp_path):
        """Test a rendered PPM reloads with clamped channels."""
        settings = RenderSettings(samples_per_pixel=1, threads=1)
        image = Renderer(settings=settings).render(emissive_scene, Image(), 9, 9)
        path = tmp_path / "emitter.ppm"
        assert save_ppm(image, path)
        loaded = load_ppm(path)
        np.testing.assert_allclose(loaded.at(4, 4), [1.0, 0.0, 0.0])
        np.testing.assert_allclose(loaded.at(0, 0), [0.0, 0.0, 0.0])


class TestExampleScript:
    """Smoke test for the bundled example."""

    def test_render_spheres(self, tmp_path):
        """Test the example renders a small PPM."""
        module_spec = importlib.util.spec_from_file_location("render_spheres", EXAMPLES_DIR / "render_spheres.py")
        module = importlib.util.module_from_spec(module_spec)
        module_spec.loader.exec_module(module)

        output = module.render_spheres(
            width=16, height=9, num_samples=1, threads=2, output_path=str(tmp_path / "spheres.ppm")
        )
        loaded = load_ppm(output)
        assert (loaded.width(), loaded.height()) == (16, 9)
        # Corners show the sky
        np.testing.assert_allclose(loaded.at(0, 0), [0.1, 0.2, 0.4], atol=1.0 / 255.0)
