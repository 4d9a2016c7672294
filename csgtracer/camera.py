"""
Camera module for generating primary rays.

The camera sits at the origin of its own frame looking down -z, with the
image plane one unit in front of it. ``transform`` is the world-to-camera
(view) matrix; its inverse maps image-plane points back into the world.
"""

from __future__ import annotations
import math

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray
from .transformations import IDENTITY, inverse, transform_point, view_transform


class Camera:
    """A pinhole camera with a configurable field of view."""

    def __init__(
        self,
        hsize: int,
        vsize: int,
        field_of_view: float,
        transform: np.ndarray = IDENTITY
    ):
        """Create a camera.

        Args:
            hsize: Horizontal size of the canvas in pixels
            vsize: Vertical size of the canvas in pixels
            field_of_view: Angle (radians) covered by the wider image axis
            transform: World-to-camera view transform
        """
        if hsize < 1 or vsize < 1:
            raise ValueError(f"Camera needs at least one pixel, got {hsize}x{vsize}")

        self.hsize = hsize
        self.vsize = vsize
        self.field_of_view = field_of_view

        half_view = math.tan(field_of_view / 2)
        aspect = hsize / vsize

        if aspect >= 1:
            self.half_width = half_view
            self.half_height = half_view / aspect
        else:
            self.half_width = half_view * aspect
            self.half_height = half_view

        self.pixel_size = (self.half_width * 2) / hsize
        self.transform = transform

    @classmethod
    def look_at(cls, hsize: int, vsize: int, field_of_view: float,
                from_: Point3, to: Point3, up: Vec3 = Vec3(0, 1, 0)) -> Camera:
        """Create a camera at ``from_`` looking toward ``to``."""
        return cls(hsize, vsize, field_of_view, view_transform(from_, to, up))

    @property
    def transform(self) -> np.ndarray:
        return self._transform

    @transform.setter
    def transform(self, value: np.ndarray) -> None:
        inv = inverse(value)
        self._transform = np.array(value, dtype=np.float64)
        self._inverse = inv
        self.origin = transform_point(inv, Point3(0, 0, 0))

    def ray_for_pixel(self, px: float, py: float) -> Ray:
        """Generate the world-space ray through the center of a pixel.

        Args:
            px: Column, 0 at the left edge
            py: Row, 0 at the top edge

        Returns:
            A ray from the camera origin through the pixel, normalized
        """
        # Offset from the edge of the canvas to the pixel's center
        xoffset = (px + 0.5) * self.pixel_size
        yoffset = (py + 0.5) * self.pixel_size

        # Camera looks toward -z, so +x is to the left
        world_x = self.half_width - xoffset
        world_y = self.half_height - yoffset

        pixel = transform_point(self._inverse, Point3(world_x, world_y, -1))
        direction = (pixel - self.origin).normalize()

        return Ray(self.origin, direction)

    def __repr__(self) -> str:
        return f"Camera({self.hsize}x{self.vsize}, fov={self.field_of_view:.4f}, origin={self.origin})"
