"""Unit tests for materials and UV property providers."""

import numpy as np
import pytest

from lumen.materials import (
    GLASS_IOR,
    CheckerProperty,
    ImageProperty,
    Material,
    UniformProperty,
    as_property,
)


class TestPropertyProviders:
    """Tests for UV-sampled providers."""

    def test_uniform_ignores_uv(self):
        """Test a uniform provider returns its value everywhere."""
        prop = UniformProperty((0.1, 0.2, 0.3))
        np.testing.assert_array_equal(prop.sample((0.0, 0.0)), prop.sample((0.7, 0.9)))

    def test_uniform_rejects_bad_shape(self):
        """Test values must be scalars or RGB triples."""
        with pytest.raises(ValueError):
            UniformProperty((1.0, 2.0))

    def test_checker_alternates(self):
        """Test neighbouring cells return different values."""
        checker = CheckerProperty(1.0, 0.0, scale=2.0)
        assert checker.sample((0.25, 0.25)) == 1.0
        assert checker.sample((0.75, 0.25)) == 0.0
        assert checker.sample((0.75, 0.75)) == 1.0

    def test_checker_rejects_bad_scale(self):
        """Test the cell scale must be positive."""
        with pytest.raises(ValueError):
            CheckerProperty(1.0, 0.0, scale=0.0)

    def test_image_lookup_and_wrap(self):
        """Test nearest-texel lookup with row 0 at the top and wrapping UVs."""
        texels = np.array([[1.0, 2.0], [3.0, 4.0]])
        prop = ImageProperty(texels)
        assert prop.sample((0.25, 0.75)) == 1.0
        assert prop.sample((0.75, 0.25)) == 4.0
        assert prop.sample((1.25, -0.75)) == 3.0

    def test_image_color_texels(self):
        """Test RGB texel arrays return colors."""
        texels = np.zeros((1, 1, 3))
        texels[0, 0] = (0.5, 0.25, 1.0)
        np.testing.assert_array_equal(ImageProperty(texels).sample((0.5, 0.5)), [0.5, 0.25, 1.0])

    def test_as_property_passthrough(self):
        """Test providers pass through and plain values are wrapped."""
        checker = CheckerProperty(0.0, 1.0)
        assert as_property(checker) is checker
        assert isinstance(as_property(0.5), UniformProperty)


class TestMaterialFactories:
    """Tests for the preset constructors."""

    def test_lambertian(self):
        """Test a diffuse material is fully rough and opaque."""
        m = Material.lambertian((0.8, 0.3, 0.3))
        np.testing.assert_array_equal(m.albedo(), [0.8, 0.3, 0.3])
        assert m.roughness() == 1.0
        assert m.transparency() == 0.0
        np.testing.assert_array_equal(m.emitted(), [0.0, 0.0, 0.0])

    def test_metal_clamps_roughness(self):
        """Test metal roughness is clamped into [0, 1]."""
        assert Material.metal((1.0, 1.0, 1.0), 2.0).roughness() == 1.0
        assert Material.metal((1.0, 1.0, 1.0), -1.0).roughness() == 0.0

    def test_emissive(self):
        """Test an emitter has a black albedo and scaled radiance."""
        m = Material.emissive((1.0, 0.5, 0.0), 2.0)
        np.testing.assert_array_equal(m.albedo(), [0.0, 0.0, 0.0])
        np.testing.assert_array_equal(m.emitted(), [2.0, 1.0, 0.0])

    def test_glass_defaults(self):
        """Test glass is transparent with the default index."""
        m = Material.glass((1.0, 1.0, 1.0))
        assert m.transparency() == 1.0
        assert m.refractive_index() == GLASS_IOR
        assert m.roughness() == 0.0

    def test_from_params(self):
        """Test every property is taken from the arguments."""
        m = Material.from_params((0.5, 0.5, 0.5), 0.3, 0.2, (1.0, 1.0, 1.0), emission=3.0, refractive_index=1.33)
        assert m.roughness() == pytest.approx(0.3)
        assert m.transparency() == pytest.approx(0.2)
        np.testing.assert_array_equal(m.emitted(), [3.0, 3.0, 3.0])
        assert m.refractive_index() == pytest.approx(1.33)


class TestMaterialSampling:
    """Tests for clamped property access."""

    def test_out_of_range_values_are_clamped(self):
        """Test accessors keep scalars inside their valid ranges."""
        m = Material(roughness=1.5, transparency=-0.5, emission=-2.0, refractive_index=0.5)
        assert m.roughness() == 1.0
        assert m.transparency() == 0.0
        assert m.emission() == 0.0
        assert m.refractive_index() == 1.0

    def test_textured_albedo(self):
        """Test providers are sampled at the requested UV."""
        m = Material(albedo=CheckerProperty((1.0, 1.0, 1.0), (0.0, 0.0, 0.0), scale=2.0))
        np.testing.assert_array_equal(m.albedo((0.25, 0.25)), [1.0, 1.0, 1.0])
        np.testing.assert_array_equal(m.albedo((0.75, 0.25)), [0.0, 0.0, 0.0])

    def test_equality(self):
        """Test materials compare by their providers."""
        assert Material.lambertian((0.5, 0.5, 0.5)) == Material.lambertian((0.5, 0.5, 0.5))
        assert Material.lambertian((0.5, 0.5, 0.5)) != Material.metal((0.5, 0.5, 0.5))
