"""Floating-point RGB pixel buffer that renders are written into.

Pixels are addressed as ``image[x, y]`` with (0, 0) at the top-left corner.
The storage is a NumPy array of shape (height, width, 3), so disjoint rows
can be written from different threads without coordination.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

Color = npt.NDArray[np.float64]

BLACK = (0.0, 0.0, 0.0)


class Image:
    """A width x height buffer of RGB float pixels."""

    def __init__(self, width: int = 0, height: int = 0, fill: npt.ArrayLike = BLACK) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"Image dimensions must be non-negative, got {width}x{height}")
        self._pixels = np.empty((height, width, 3), dtype=np.float64)
        self._pixels[...] = np.asarray(fill, dtype=np.float64)

    @classmethod
    def from_array(cls, array: npt.ArrayLike) -> Image:
        """Wrap a copy of an (H, W, 3) array."""
        data = np.asarray(array, dtype=np.float64)
        if data.ndim != 3 or data.shape[2] != 3:
            raise ValueError(f"Expected an (H, W, 3) array, got shape {data.shape}")
        image = cls()
        image._pixels = data.copy()
        return image

    def width(self) -> int:
        return self._pixels.shape[1]

    def height(self) -> int:
        return self._pixels.shape[0]

    def resize(self, width: int, height: int, fill: npt.ArrayLike = BLACK) -> None:
        """Reallocate the buffer, discarding its contents."""
        if width < 0 or height < 0:
            raise ValueError(f"Image dimensions must be non-negative, got {width}x{height}")
        pixels = np.empty((height, width, 3), dtype=np.float64)
        pixels[...] = np.asarray(fill, dtype=np.float64)
        self._pixels = pixels

    def clear(self, fill: npt.ArrayLike = BLACK) -> None:
        self._pixels[...] = np.asarray(fill, dtype=np.float64)

    def at(self, x: int, y: int) -> Color:
        """Bounds-checked pixel read.

        Raises:
            IndexError: If (x, y) lies outside the image.
        """
        if not (0 <= x < self.width() and 0 <= y < self.height()):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width()}x{self.height()} image")
        return self._pixels[y, x].copy()

    def __getitem__(self, xy: tuple[int, int]) -> Color:
        x, y = xy
        return self._pixels[y, x].copy()

    def __setitem__(self, xy: tuple[int, int], color: npt.ArrayLike) -> None:
        x, y = xy
        self._pixels[y, x] = color

    def row_view(self, y: int) -> npt.NDArray[np.float64]:
        """Writable view of one pixel row, shape (width, 3)."""
        return self._pixels[y]

    def as_array(self) -> npt.NDArray[np.float64]:
        """Return a copy of the pixels as an (H, W, 3) array."""
        return self._pixels.copy()

    def __repr__(self) -> str:
        return f"Image(width={self.width()}, height={self.height()})"
