"""
Light sources for the ray tracer.

Only point lights are supported: a world holds at most one, and it casts
hard shadows.
"""

from __future__ import annotations
from dataclasses import dataclass

from .vec3 import Vec3, Point3, Color


@dataclass
class PointLight:
    """A point light source.

    Point lights emit light equally in all directions from a single point.

    Attributes:
        position: Light position in world space
        intensity: Light color and brightness
    """
    position: Point3
    intensity: Color

    def direction_from(self, point: Point3) -> Vec3:
        """Unit vector from ``point`` toward the light."""
        return (self.position - point).normalize()

    def distance_from(self, point: Point3) -> float:
        return (self.position - point).length()
