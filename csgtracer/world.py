"""
The world: every top-level shape plus the light, and the routines that
intersect a ray with the whole scene and shade the visible hit.
"""

from __future__ import annotations
from typing import Iterator, Optional

from .vec3 import Point3, Color, BLACK
from .ray import Ray
from .lights import PointLight
from .shapes import Shape, Sphere
from .intersections import Intersection, Computations, hit, prepare_computations, sort_intersections
from .transformations import EPSILON, scaling


class MissingLightError(RuntimeError):
    """Raised when shading or shadow testing a world that has no light."""
    pass


class World:
    """A collection of top-level shapes and at most one point light."""

    def __init__(self, objects: Optional[list[Shape]] = None, light: Optional[PointLight] = None):
        self.objects: list[Shape] = list(objects) if objects is not None else []
        self.light = light

    @classmethod
    def default(cls) -> World:
        """The two concentric spheres lit from the upper left.

        The outer unit sphere is greenish-yellow; the inner one is scaled to
        half size with a default material.
        """
        outer = Sphere()
        outer.material.color = Color(0.8, 1.0, 0.6)
        outer.material.diffuse = 0.7
        outer.material.specular = 0.2

        inner = Sphere(transform=scaling(0.5, 0.5, 0.5))

        light = PointLight(Point3(-10, 10, -10), Color(1, 1, 1))
        return cls([outer, inner], light)

    def add_object(self, obj: Shape) -> None:
        """Append a top-level shape."""
        self.objects.append(obj)

    def get_object(self, index: int) -> Optional[Shape]:
        """Return the object at ``index`` or None if out of range."""
        if 0 <= index < len(self.objects):
            return self.objects[index]
        return None

    def require_light(self) -> PointLight:
        """Return the light, failing if the scene has none."""
        if self.light is None:
            raise MissingLightError("World has no light source")
        return self.light

    def intersect_world(self, ray: Ray) -> Optional[list[Intersection]]:
        """Intersect ``ray`` with every object.

        Returns:
            All intersections sorted ascending by t, or None if there are none
        """
        xs: list[Intersection] = []
        for obj in self.objects:
            obj_xs = obj.intersect(ray)
            if obj_xs:
                xs.extend(obj_xs)

        if not xs:
            return None
        return sort_intersections(xs)

    @staticmethod
    def hit(intersections: Optional[list[Intersection]]) -> Optional[Intersection]:
        """The lowest non-negative intersection of a sorted list."""
        return hit(intersections)

    def is_shadow(self, point: Point3) -> bool:
        """Check whether something blocks the light from ``point``.

        A shadow ray is cast from the point toward the light; the point is
        shadowed if the nearest hit along it is closer than the light.
        """
        light = self.require_light()
        v = light.position - point
        distance = v.length()
        if distance < EPSILON:
            return False
        ray = Ray(point, v.normalize())

        h = hit(self.intersect_world(ray))
        return h is not None and h.t < distance

    def shade_hit(self, comps: Computations) -> Color:
        """Phong-shade a prepared hit, including the shadow test."""
        light = self.require_light()
        shadowed = self.is_shadow(comps.over_point)

        return comps.material.lighting(
            light,
            comps.over_point,
            comps.eyev,
            comps.normalv,
            shadowed,
            comps.object_point,
        )

    def color_at(self, ray: Ray) -> Color:
        """Color seen along ``ray``; black when nothing is hit."""
        h = hit(self.intersect_world(ray))
        if h is None:
            return BLACK
        return self.shade_hit(prepare_computations(h, ray))

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Shape]:
        return iter(self.objects)

    def __repr__(self) -> str:
        return f"World(objects={len(self.objects)}, light={self.light})"
