"""
Procedural patterns (textures) for materials.

Implements:
- Solid color
- Gradient (linear blend along x, repeating every unit)
- Checkers (3D checkerboard)
- Stripes (alternating along x)

A pattern has its own transform layered on top of the shape's, so the
lookup chain is: world point -> shape space -> pattern space.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Color, Point3
from .transformations import IDENTITY, inverse, transform_point

if TYPE_CHECKING:
    from .shapes import Shape
    from .intersections import Intersection


class PatternKind(Enum):
    SOLID = 'solid'
    GRADIENT = 'gradient'
    CHECKERS = 'checkers'
    STRIPES = 'stripes'


class Pattern(ABC):
    """Abstract base class for patterns."""

    kind: PatternKind

    def __init__(self, transform: np.ndarray = IDENTITY):
        self.transform = transform

    @property
    def transform(self) -> np.ndarray:
        return self._transform

    @transform.setter
    def transform(self, value: np.ndarray) -> None:
        inv = inverse(value)
        self._transform = np.array(value, dtype=np.float64)
        self._inverse = inv

    @property
    def colors(self) -> tuple[Color, ...]:
        """The reference colors of the pattern, in constructor order."""
        return ()

    @abstractmethod
    def pattern_at(self, point: Point3) -> Color:
        """Get the pattern color at a point.

        Args:
            point: Point already in pattern space

        Returns:
            Color at this location
        """
        pass

    def pattern_at_object(self, object_point: Point3) -> Color:
        """Color for a point given in the space of the shape being shaded."""
        return self.pattern_at(transform_point(self._inverse, object_point))

    def pattern_at_shape(self, shape: Shape, world_point: Point3,
                         hit: Optional[Intersection] = None) -> Color:
        """Color for a world-space point on ``shape``.

        Args:
            shape: The shape carrying this pattern (or the CSG node that
                produced ``hit``)
            world_point: Point in world space
            hit: Intersection used to descend into CSG children

        Returns:
            Color at this location
        """
        return self.pattern_at_object(shape.world_to_object(world_point, hit))

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self.colors}"


class Solid(Pattern):
    """A single color everywhere."""

    kind = PatternKind.SOLID

    def __init__(self, color: Color, transform: np.ndarray = IDENTITY):
        super().__init__(transform)
        self.color = color

    @property
    def colors(self) -> tuple[Color, ...]:
        return (self.color,)

    def pattern_at(self, point: Point3) -> Color:
        return self.color


class TwoColorPattern(Pattern):
    """Base for patterns that alternate or blend between ``a`` and ``b``."""

    def __init__(self, a: Color, b: Color, transform: np.ndarray = IDENTITY):
        super().__init__(transform)
        self.a = a
        self.b = b

    @property
    def colors(self) -> tuple[Color, ...]:
        return (self.a, self.b)


class Gradient(TwoColorPattern):
    """Linear blend from ``a`` to ``b`` along x, repeating with period 1."""

    kind = PatternKind.GRADIENT

    def pattern_at(self, point: Point3) -> Color:
        fraction = point.x - math.floor(point.x)
        return self.a + (self.b - self.a) * fraction


class Checkers(TwoColorPattern):
    """A 3D checkerboard of unit cubes."""

    kind = PatternKind.CHECKERS

    def pattern_at(self, point: Point3) -> Color:
        total = math.floor(point.x) + math.floor(point.y) + math.floor(point.z)
        if total % 2 == 0:
            return self.a
        return self.b


class Stripes(TwoColorPattern):
    """Alternating unit-wide stripes along x."""

    kind = PatternKind.STRIPES

    def pattern_at(self, point: Point3) -> Color:
        if math.floor(point.x) % 2 == 0:
            return self.a
        return self.b
