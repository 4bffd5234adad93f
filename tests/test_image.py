"""Unit tests for the float RGB image buffer."""

import numpy as np
import pytest

from lumen.core.image import Image


class TestImage:
    """Tests for Image storage and addressing."""

    def test_default_is_empty(self):
        """Test a default image has no pixels."""
        image = Image()
        assert image.width() == 0
        assert image.height() == 0

    def test_fill(self):
        """Test new images are filled with the given color."""
        image = Image(3, 2, fill=(0.1, 0.2, 0.3))
        np.testing.assert_allclose(image[2, 1], [0.1, 0.2, 0.3])

    def test_xy_addressing(self):
        """Test pixels are addressed by (x, y) with rows stored top to bottom."""
        image = Image(4, 3)
        image[3, 1] = (1.0, 0.5, 0.25)
        assert image.as_array()[1, 3].tolist() == [1.0, 0.5, 0.25]

    def test_at_bounds_checked(self):
        """Test at() raises IndexError outside the image."""
        image = Image(2, 2)
        with pytest.raises(IndexError):
            image.at(2, 0)
        with pytest.raises(IndexError):
            image.at(0, -1)

    def test_reads_are_copies(self):
        """Test mutating a returned pixel does not change the image."""
        image = Image(1, 1)
        pixel = image[0, 0]
        pixel[0] = 5.0
        assert image[0, 0][0] == 0.0

    def test_row_view_writes_through(self):
        """Test writes to a row view land in the image."""
        image = Image(3, 2)
        image.row_view(1)[2] = (0.5, 0.5, 0.5)
        np.testing.assert_array_equal(image.at(2, 1), [0.5, 0.5, 0.5])

    def test_resize_discards_contents(self):
        """Test resize reallocates and refills."""
        image = Image(2, 2, fill=(1.0, 1.0, 1.0))
        image.resize(5, 4)
        assert (image.width(), image.height()) == (5, 4)
        assert np.all(image.as_array() == 0.0)

    def test_clear(self):
        """Test clear overwrites every pixel."""
        image = Image(2, 2)
        image.clear((0.5, 0.0, 0.0))
        assert np.all(image.as_array()[..., 0] == 0.5)

    def test_negative_size_rejected(self):
        """Test negative dimensions raise ValueError."""
        with pytest.raises(ValueError):
            Image(-1, 2)

    def test_from_array_validates_shape(self):
        """Test arrays must be (H, W, 3)."""
        with pytest.raises(ValueError):
            Image.from_array(np.zeros((2, 2)))
        image = Image.from_array(np.ones((2, 3, 3)))
        assert (image.width(), image.height()) == (3, 2)
