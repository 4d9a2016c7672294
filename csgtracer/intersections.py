"""
Intersection records and the shading inputs derived from them.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional, TYPE_CHECKING

from .vec3 import Vec3, Point3
from .ray import Ray
from .transformations import EPSILON

if TYPE_CHECKING:
    from .shapes import Shape
    from .materials import Material


class Intersection:
    """A candidate hit: parametric distance plus the shape that was hit.

    Compound shapes re-tag the intersections of their children to
    themselves; ``sub`` then holds the child's intersection so the leaf
    primitive can still be reached.
    """

    __slots__ = ('t', 'object', 'sub')

    def __init__(self, t: float, obj: Shape, sub: Optional[Intersection] = None):
        self.t = t
        self.object = obj
        self.sub = sub

    @property
    def leaf(self) -> Shape:
        """The primitive shape that produced this intersection."""
        i = self
        while i.sub is not None:
            i = i.sub
        return i.object

    @property
    def material(self) -> Material:
        return self.leaf.material

    def __repr__(self) -> str:
        return f"Intersection(t={self.t:.5f}, object={self.object!r})"


def sort_intersections(intersections: Iterable[Intersection]) -> list[Intersection]:
    """Sort ascending by t. Stable, so equal t values keep their input order."""
    return sorted(intersections, key=lambda i: i.t)


def hit(intersections: Optional[list[Intersection]]) -> Optional[Intersection]:
    """Return the visible intersection of a sorted list.

    That is the first intersection with t >= 0, or None when the list is
    empty or everything lies behind the ray origin.
    """
    if not intersections:
        return None
    for i in intersections:
        if i.t >= 0:
            return i
    return None


@dataclass
class Computations:
    """Precomputed shading inputs for a single hit.

    Attributes:
        t: The ray parameter at the hit
        object: The shape that was hit (a top-level shape for world queries)
        point: The hit point in world space
        eyev: Unit vector from the hit point back toward the ray origin
        normalv: Surface normal, flipped to face the eye when inside
        inside: True if the ray hit the surface from the inside
        over_point: ``point`` nudged along the normal to avoid self-shadowing
        object_point: ``over_point`` in the leaf primitive's local space
        material: The material of the leaf primitive
    """
    t: float
    object: Shape
    point: Point3
    eyev: Vec3
    normalv: Vec3
    inside: bool
    over_point: Point3
    object_point: Point3
    material: Material


def prepare_computations(intersection: Intersection, ray: Ray) -> Computations:
    """Derive the shading inputs for ``intersection`` along ``ray``."""
    point = ray.at(intersection.t)
    eyev = -ray.direction.normalize()
    normalv = intersection.object.normal_at(point, intersection)

    inside = normalv.dot(eyev) < 0
    if inside:
        normalv = -normalv

    over_point = point + normalv * EPSILON

    return Computations(
        t=intersection.t,
        object=intersection.object,
        point=point,
        eyev=eyev,
        normalv=normalv,
        inside=inside,
        over_point=over_point,
        object_point=intersection.object.world_to_object(over_point, intersection),
        material=intersection.material,
    )
