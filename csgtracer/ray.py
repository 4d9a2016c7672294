"""
Ray class for representing rays in 3D space.

A ray is defined by an origin point and a direction vector.
Ray(t) = origin + t * direction
"""

from __future__ import annotations
import numpy as np

from .vec3 import Vec3, Point3
from .transformations import transform_point, transform_vector


class Ray:
    """A ray with origin and direction.

    The parametric form is: P(t) = origin + t * direction
    Negative t values lie behind the origin.
    """

    __slots__ = ('origin', 'direction')

    def __init__(self, origin: Point3, direction: Vec3):
        """Create a ray with given origin and direction.

        Args:
            origin: The starting point of the ray
            direction: The direction vector (not required to be normalized)
        """
        self.origin = origin
        self.direction = direction

    def at(self, t: float) -> Point3:
        """Get the point along the ray at parameter t.

        Args:
            t: The parameter value (distance if direction is normalized)

        Returns:
            The point at origin + t * direction
        """
        return self.origin + self.direction * t

    def transform(self, matrix: np.ndarray) -> Ray:
        """Return a new ray with origin and direction mapped by ``matrix``.

        The direction is not renormalized, so t values along the new ray
        match t values along this one.
        """
        return Ray(transform_point(matrix, self.origin), transform_vector(matrix, self.direction))

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction})"
