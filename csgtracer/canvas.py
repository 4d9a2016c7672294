"""
Canvas: the 2-D grid of linear colors produced by a render.

Pixels live in a ``(height, width, 3)`` float64 numpy array. Export goes
through 8-bit buffers (RGB or RGBA) or a Pillow image.
"""

from __future__ import annotations
from pathlib import Path
from typing import Union

import numpy as np

from .vec3 import Color


class Canvas:
    """A width x height grid of colors, row-major."""

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"Canvas needs at least one pixel, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.float64)

    @property
    def flat(self) -> np.ndarray:
        """Writable ``(width * height, 3)`` view; index ``y * width + x``."""
        return self.pixels.reshape(-1, 3)

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValueError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} canvas")

    def write_pixel(self, x: int, y: int, color: Color) -> None:
        self._check(x, y)
        self.pixels[y, x] = color.to_array()

    def pixel_at(self, x: int, y: int) -> Color:
        self._check(x, y)
        return Color.from_array(self.pixels[y, x].copy())

    def to_ldr(self) -> np.ndarray:
        """Clamp to [0, 1] and convert to 8-bit.

        Returns:
            uint8 array of shape (height, width, 3)
        """
        scaled = np.clip(self.pixels, 0.0, 1.0) * 255.0
        return np.round(scaled).astype(np.uint8)

    def to_rgb_buffer(self) -> bytes:
        """Flat row-major RGB bytes, 3 per pixel."""
        return self.to_ldr().tobytes()

    def to_rgba_buffer(self) -> bytes:
        """Flat row-major RGBA bytes, 4 per pixel, fully opaque."""
        ldr = self.to_ldr()
        alpha = np.full((self.height, self.width, 1), 255, dtype=np.uint8)
        return np.concatenate([ldr, alpha], axis=2).tobytes()

    def to_image(self):
        """Return the canvas as a Pillow RGB image."""
        from PIL import Image as PILImage

        return PILImage.fromarray(self.to_ldr(), 'RGB')

    def save(self, filename: Union[str, Path]) -> None:
        """Save to an image file; the extension picks the format."""
        self.to_image().save(str(filename))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Canvas):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.pixels, other.pixels)
        )

    def __repr__(self) -> str:
        return f"Canvas({self.width}x{self.height})"
