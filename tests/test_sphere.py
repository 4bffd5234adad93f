"""Unit tests for the sphere primitive.

Tests cover:
- Basic intersection from outside and inside
- Interval handling and root selection
- Numerical robustness for distant and tangent rays
- Bounding box and UV parameterization
"""

import math

import numpy as np
import pytest

from lumen.core.ray import Ray, length, vec3
from lumen.geometry.sphere import Sphere, sphere_uv


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_hit_from_outside(self):
        """Test the near root is picked and the normal faces the ray."""
        sphere = Sphere((0.0, 0.0, 0.0), 1.0)
        hit = sphere.intersect(Ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0)))
        assert hit is not None
        assert hit.t == pytest.approx(4.0)
        np.testing.assert_allclose(hit.normal, [0.0, 0.0, 1.0])

    def test_hit_from_inside(self):
        """Test a ray starting inside hits the far wall with an outward normal."""
        sphere = Sphere((0.0, 0.0, 0.0), 2.0)
        hit = sphere.intersect(Ray(vec3(0.0, 0.0, 0.0), vec3(1.0, 0.0, 0.0)))
        assert hit.t == pytest.approx(2.0)
        np.testing.assert_allclose(hit.normal, [1.0, 0.0, 0.0])

    def test_miss(self):
        """Test a ray passing beside the sphere misses."""
        sphere = Sphere((0.0, 0.0, 0.0), 1.0)
        assert sphere.intersect(Ray(vec3(0.0, 2.0, 5.0), vec3(0.0, 0.0, -1.0))) is None

    def test_sphere_behind_ray(self):
        """Test a sphere behind the origin is not hit."""
        sphere = Sphere((0.0, 0.0, 0.0), 1.0)
        assert sphere.intersect(Ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, 1.0))) is None

    def test_interval_selects_far_root(self):
        """Test the far root is used when the near root is below t_min."""
        sphere = Sphere((0.0, 0.0, 0.0), 1.0)
        hit = sphere.intersect(Ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0), 4.5, math.inf))
        assert hit.t == pytest.approx(6.0)
        np.testing.assert_allclose(hit.normal, [0.0, 0.0, -1.0])

    def test_interval_excludes_both_roots(self):
        """Test no hit is reported when both roots lie outside the interval."""
        sphere = Sphere((0.0, 0.0, 0.0), 1.0)
        assert sphere.intersect(Ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0), 0.0, 3.0)) is None

    def test_unnormalized_direction(self):
        """Test t is measured in units of the given direction."""
        sphere = Sphere((0.0, 0.0, 0.0), 1.0)
        hit = sphere.intersect(Ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -2.0)))
        assert hit.t == pytest.approx(2.0)

    def test_roots_ignore_interval(self):
        """Test roots() reports both parameters regardless of the interval."""
        sphere = Sphere((0.0, 0.0, 0.0), 1.0)
        t0, t1 = sphere.roots(Ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0), 100.0, 200.0))
        assert t0 == pytest.approx(4.0)
        assert t1 == pytest.approx(6.0)

    def test_normal_is_unit(self):
        """Test normals are unit length for oblique hits."""
        sphere = Sphere((1.0, -2.0, 0.5), 3.0)
        ray = Ray(vec3(10.0, 3.0, 4.0), vec3(1.0, -2.0, 0.5) - vec3(10.0, 2.0, 4.0))
        hit = sphere.intersect(ray)
        assert hit is not None
        assert length(hit.normal) == pytest.approx(1.0)

    def test_non_positive_radius_rejected(self):
        """Test radius must be positive."""
        with pytest.raises(ValueError):
            Sphere((0.0, 0.0, 0.0), 0.0)


class TestSphereRobustness:
    """Tests for numerically difficult configurations."""

    def test_distant_small_sphere(self):
        """Test a small sphere far away is hit with an accurate t."""
        sphere = Sphere((0.0, 0.0, -1.0e6), 0.5)
        hit = sphere.intersect(Ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0)))
        assert hit is not None
        assert hit.t == pytest.approx(1.0e6 - 0.5, rel=1e-12)

    def test_tangent_ray(self):
        """Test a ray grazing the sphere reports a single touching hit."""
        sphere = Sphere((0.0, 0.0, 0.0), 1.0)
        hit = sphere.intersect(Ray(vec3(1.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0)))
        assert hit is not None
        assert hit.t == pytest.approx(5.0)


class TestSphereBounds:
    """Tests for bounds and UVs."""

    def test_aabb(self):
        """Test the box is center +/- radius."""
        box = Sphere((1.0, 2.0, 3.0), 2.0).aabb()
        np.testing.assert_array_equal(box.min, [-1.0, 0.0, 1.0])
        np.testing.assert_array_equal(box.max, [3.0, 4.0, 5.0])

    def test_uv_range(self, rng):
        """Test UVs of random normals lie in [0, 1]."""
        for _ in range(100):
            n = rng.normal(size=3)
            n /= np.linalg.norm(n)
            u, v = sphere_uv(n)
            assert 0.0 <= u <= 1.0
            assert 0.0 <= v <= 1.0

    def test_uv_poles(self):
        """Test v runs from 0 at the bottom pole to 1 at the top."""
        assert sphere_uv(vec3(0.0, -1.0, 0.0))[1] == pytest.approx(0.0)
        assert sphere_uv(vec3(0.0, 1.0, 0.0))[1] == pytest.approx(1.0)
