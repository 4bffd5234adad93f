"""Unit tests for the triangle mesh primitive."""

import numpy as np
import pytest

from lumen.core.ray import Ray, vec3
from lumen.geometry.mesh import Mesh, intersect_triangle


@pytest.fixture
def quad():
    """Unit square in the z = 0 plane made of two triangles, wound toward +Z."""
    return Mesh.from_arrays(
        [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)],
        [(0, 1, 2), (0, 2, 3)],
    )


class TestTriangle:
    """Tests for the single-triangle test."""

    def test_hit_barycentrics(self):
        """Test t and barycentric coordinates of a hit."""
        hit = intersect_triangle(
            (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0),
            Ray(vec3(0.25, 0.5, 2.0), vec3(0.0, 0.0, -1.0)),
        )
        assert hit is not None
        assert hit.t == pytest.approx(2.0)
        assert hit.u == pytest.approx(0.25)
        assert hit.v == pytest.approx(0.5)
        np.testing.assert_allclose(hit.normal, [0.0, 0.0, 1.0])

    def test_two_sided(self):
        """Test a ray from behind also hits, with the same winding normal."""
        hit = intersect_triangle(
            (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0),
            Ray(vec3(0.25, 0.25, -2.0), vec3(0.0, 0.0, 1.0)),
        )
        assert hit is not None
        np.testing.assert_allclose(hit.normal, [0.0, 0.0, 1.0])

    def test_outside_triangle(self):
        """Test a ray through the missing half of the square misses."""
        hit = intersect_triangle(
            (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0),
            Ray(vec3(0.75, 0.75, 2.0), vec3(0.0, 0.0, -1.0)),
        )
        assert hit is None

    def test_parallel_ray(self):
        """Test a ray in the triangle plane is rejected."""
        hit = intersect_triangle(
            (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0),
            Ray(vec3(-1.0, 0.25, 0.0), vec3(1.0, 0.0, 0.0)),
        )
        assert hit is None


class TestMesh:
    """Tests for mesh construction and intersection."""

    def test_counts(self, quad):
        """Test vertex and triangle counts."""
        assert quad.vertex_count == 4
        assert quad.triangle_count == 2
        assert quad.triangle(1) == (0, 2, 3)

    def test_add_returns_indices(self):
        """Test add_vertex and add_triangle return new indices."""
        mesh = Mesh()
        indices = [mesh.add_vertex(p) for p in ((0, 0, 0), (1, 0, 0), (0, 1, 0))]
        assert indices == [0, 1, 2]
        assert mesh.add_triangle(*indices) == 0

    def test_bad_index_rejected(self):
        """Test triangles must reference existing vertices."""
        mesh = Mesh()
        mesh.add_vertex((0.0, 0.0, 0.0))
        with pytest.raises(IndexError):
            mesh.add_triangle(0, 1, 2)

    def test_aabb(self, quad):
        """Test the box bounds every vertex."""
        box = quad.aabb()
        np.testing.assert_array_equal(box.min, [0.0, 0.0, 0.0])
        np.testing.assert_array_equal(box.max, [1.0, 1.0, 0.0])
        assert Mesh().aabb().empty()

    def test_hit_each_triangle(self, quad):
        """Test rays through both halves hit the quad."""
        for x, y in ((0.75, 0.25), (0.25, 0.75)):
            hit = quad.intersect(Ray(vec3(x, y, 3.0), vec3(0.0, 0.0, -1.0)))
            assert hit is not None
            assert hit.t == pytest.approx(3.0)
            np.testing.assert_allclose(hit.normal, [0.0, 0.0, 1.0])

    def test_nearest_triangle_wins(self):
        """Test the closest of two stacked triangles is reported."""
        mesh = Mesh.from_arrays(
            [
                (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0),
                (0.0, 0.0, 1.0), (1.0, 0.0, 1.0), (0.0, 1.0, 1.0),
            ],
            [(0, 1, 2), (3, 4, 5)],
        )
        hit = mesh.intersect(Ray(vec3(0.2, 0.2, 5.0), vec3(0.0, 0.0, -1.0)))
        assert hit.t == pytest.approx(4.0)

    def test_interval_respected(self, quad):
        """Test hits outside [t_min, t_max] are ignored."""
        assert quad.intersect(Ray(vec3(0.5, 0.25, 3.0), vec3(0.0, 0.0, -1.0), 0.0, 2.0)) is None

    def test_empty_mesh(self):
        """Test a mesh without triangles is never hit."""
        assert Mesh().intersect(Ray(vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, -1.0))) is None

    def test_rebuild_after_append(self, quad):
        """Test triangles added after a query are visible to later queries."""
        ray = Ray(vec3(2.5, 0.25, 1.0), vec3(0.0, 0.0, -1.0))
        assert quad.intersect(ray) is None
        a = quad.add_vertex((2.0, 0.0, 0.0))
        b = quad.add_vertex((3.0, 0.0, 0.0))
        c = quad.add_vertex((2.0, 1.0, 0.0))
        quad.add_triangle(a, b, c)
        assert quad.intersect(ray) is not None
