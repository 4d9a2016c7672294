"""
Geometric shapes for the ray tracer.

Every shape lives in its own local coordinate frame and carries a
local-to-world transform. ``Shape.intersect`` and ``Shape.normal_at`` do the
world/local conversion; subclasses only implement ``local_intersect`` and
``local_normal_at`` against the untransformed primitive.

The set of shapes is closed: Sphere, Plane, Cube and CSG, each tagged with a
``ShapeKind`` discriminant that scene files use as their ``type`` field.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional
import itertools
import math

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray
from .transformations import EPSILON, IDENTITY, inverse, transform_point, transform_vector
from .intersections import Intersection, sort_intersections
from .materials import Material


class ShapeKind(Enum):
    SPHERE = 'sphere'
    PLANE = 'plane'
    CUBE = 'cube'
    CSG = 'csg'


_shape_ids = itertools.count(1)


class Shape(ABC):
    """Abstract base class for all shapes.

    Attributes:
        id: Integer identity assigned at construction; used for equality
            checks and debugging only
        material: Surface material
    """

    kind: ShapeKind

    def __init__(self, transform: np.ndarray = IDENTITY, material: Optional[Material] = None):
        self.id = next(_shape_ids)
        self.material = material if material is not None else Material()
        self._owned = False
        self.transform = transform

    @property
    def transform(self) -> np.ndarray:
        return self._transform

    @transform.setter
    def transform(self, value: np.ndarray) -> None:
        # Invert first so a bad transform leaves the shape untouched
        inv = inverse(value)
        self._transform = np.array(value, dtype=np.float64)
        self._inverse = inv
        self._inverse_transpose = inv.T.copy()

    @property
    def inverse(self) -> np.ndarray:
        return self._inverse

    def intersect(self, ray: Ray) -> Optional[list[Intersection]]:
        """Intersect a world-space ray with this shape.

        Args:
            ray: Ray in the parent frame (world space for top-level shapes)

        Returns:
            Intersections sorted by t, or None if the ray misses
        """
        return self.local_intersect(ray.transform(self._inverse))

    def normal_at(self, point: Point3, hit: Optional[Intersection] = None) -> Vec3:
        """Compute the unit surface normal at a point in the parent frame.

        Args:
            point: Point on the surface
            hit: The intersection that produced ``point``; compound shapes
                use it to find the child that owns the surface

        Returns:
            Normalized normal vector in the parent frame
        """
        local_point = transform_point(self._inverse, point)
        local_normal = self.local_normal_at(local_point, hit)
        return transform_vector(self._inverse_transpose, local_normal).normalize()

    def world_to_object(self, point: Point3, hit: Optional[Intersection] = None) -> Point3:
        """Map a point to the local space of this shape.

        For compound shapes the point continues down to the local space of
        the primitive that produced ``hit``.
        """
        return transform_point(self._inverse, point)

    @abstractmethod
    def local_intersect(self, ray: Ray) -> Optional[list[Intersection]]:
        """Intersect a ray already transformed into local space."""
        pass

    @abstractmethod
    def local_normal_at(self, point: Point3, hit: Optional[Intersection] = None) -> Vec3:
        """Normal at a local-space point, not necessarily normalized."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id})"


class Sphere(Shape):
    """A unit sphere centered at the local origin."""

    kind = ShapeKind.SPHERE

    def local_intersect(self, ray: Ray) -> Optional[list[Intersection]]:
        """Solve |O + tD|^2 = 1 for t.

        Expands to: t²(D·D) + 2t(D·O) + (O·O) - 1 = 0
        A tangent ray yields the same root twice.
        """
        sphere_to_ray = ray.origin
        a = ray.direction.length_squared()
        b = 2.0 * ray.direction.dot(sphere_to_ray)
        c = sphere_to_ray.length_squared() - 1.0

        discriminant = b * b - 4 * a * c
        if discriminant < 0:
            return None

        sqrtd = math.sqrt(discriminant)
        t1 = (-b - sqrtd) / (2 * a)
        t2 = (-b + sqrtd) / (2 * a)
        if t1 > t2:
            t1, t2 = t2, t1

        return [Intersection(t1, self), Intersection(t2, self)]

    def local_normal_at(self, point: Point3, hit: Optional[Intersection] = None) -> Vec3:
        return Vec3(point.x, point.y, point.z)


class Plane(Shape):
    """The local xz-plane (y = 0), extending infinitely."""

    kind = ShapeKind.PLANE

    def local_intersect(self, ray: Ray) -> Optional[list[Intersection]]:
        # Parallel and coplanar rays both report a miss
        if abs(ray.direction.y) < EPSILON:
            return None

        t = -ray.origin.y / ray.direction.y
        return [Intersection(t, self)]

    def local_normal_at(self, point: Point3, hit: Optional[Intersection] = None) -> Vec3:
        return Vec3(0.0, 1.0, 0.0)


class Cube(Shape):
    """An axis-aligned cube spanning [-1, 1] on every local axis."""

    kind = ShapeKind.CUBE

    @staticmethod
    def _check_axis(origin: float, direction: float) -> tuple[float, float]:
        """Entry and exit t for one pair of slab planes."""
        tmin_numerator = -1.0 - origin
        tmax_numerator = 1.0 - origin

        if abs(direction) >= EPSILON:
            tmin = tmin_numerator / direction
            tmax = tmax_numerator / direction
        else:
            tmin = math.copysign(math.inf, tmin_numerator)
            tmax = math.copysign(math.inf, tmax_numerator)

        if tmin > tmax:
            tmin, tmax = tmax, tmin
        return tmin, tmax

    def local_intersect(self, ray: Ray) -> Optional[list[Intersection]]:
        """Intersect with the slab method, keeping a running [tmin, tmax]."""
        tmin, tmax = -math.inf, math.inf
        for axis in range(3):
            axis_min, axis_max = self._check_axis(ray.origin[axis], ray.direction[axis])
            tmin = max(tmin, axis_min)
            tmax = min(tmax, axis_max)

        if tmin > tmax or tmax < 0:
            return None

        return [Intersection(tmin, self), Intersection(tmax, self)]

    def local_normal_at(self, point: Point3, hit: Optional[Intersection] = None) -> Vec3:
        ax, ay, az = abs(point.x), abs(point.y), abs(point.z)
        maxc = max(ax, ay, az)

        if maxc == ax:
            return Vec3(point.x, 0.0, 0.0)
        elif maxc == ay:
            return Vec3(0.0, point.y, 0.0)
        return Vec3(0.0, 0.0, point.z)


class CsgOperation(Enum):
    UNION = 'union'
    INTERSECTION = 'intersection'
    DIFFERENCE = 'difference'


def intersection_allowed(operation: CsgOperation, hit_is_left: bool,
                         inside_left: bool, inside_right: bool) -> bool:
    """Decide whether a child intersection lies on the combined surface.

    Args:
        operation: The boolean operation of the CSG node
        hit_is_left: True if the intersection belongs to the left child
        inside_left: True if the ray is currently inside the left child
        inside_right: True if the ray is currently inside the right child

    Returns:
        True if the intersection should be kept
    """
    if operation is CsgOperation.UNION:
        return (hit_is_left and not inside_right) or (not hit_is_left and not inside_left)
    elif operation is CsgOperation.INTERSECTION:
        return (hit_is_left and inside_right) or (not hit_is_left and inside_left)
    elif operation is CsgOperation.DIFFERENCE:
        return (hit_is_left and not inside_right) or (not hit_is_left and inside_left)
    raise ValueError(f"Unknown CSG operation: {operation}")


class CSG(Shape):
    """Boolean combination of two child shapes.

    No new geometry is built: the children's intersections are merged,
    sorted and filtered by ``intersection_allowed``. Each child is owned by
    exactly one CSG node; the node's transform is applied above the
    children's own transforms.
    """

    kind = ShapeKind.CSG

    def __init__(self, operation: CsgOperation, left: Shape, right: Shape,
                 transform: np.ndarray = IDENTITY, material: Optional[Material] = None):
        if left is right:
            raise ValueError("CSG children must be two distinct shapes")
        for child in (left, right):
            if child._owned:
                raise ValueError(f"{child!r} already belongs to another CSG node")
        super().__init__(transform, material)
        self.operation = CsgOperation(operation)
        self.left = left
        self.right = right
        left._owned = True
        right._owned = True

    def filter_intersections(self, intersections: list[Intersection]) -> list[Intersection]:
        """Keep the sorted child intersections that bound the combined solid.

        Kept intersections are re-tagged to this node, with the child's
        intersection stored as ``sub``.
        """
        inside_left = False
        inside_right = False
        result = []

        for i in intersections:
            hit_is_left = i.object is self.left

            if intersection_allowed(self.operation, hit_is_left, inside_left, inside_right):
                result.append(Intersection(i.t, self, i))

            if hit_is_left:
                inside_left = not inside_left
            else:
                inside_right = not inside_right

        return result

    def local_intersect(self, ray: Ray) -> Optional[list[Intersection]]:
        xs = (self.left.intersect(ray) or []) + (self.right.intersect(ray) or [])
        result = self.filter_intersections(sort_intersections(xs))
        return result or None

    def local_normal_at(self, point: Point3, hit: Optional[Intersection] = None) -> Vec3:
        if hit is None or hit.sub is None:
            raise ValueError("CSG normals need the intersection that produced the point")
        child = hit.sub
        return child.object.normal_at(point, child)

    def world_to_object(self, point: Point3, hit: Optional[Intersection] = None) -> Point3:
        local_point = super().world_to_object(point, hit)
        if hit is None or hit.sub is None:
            return local_point
        return hit.sub.object.world_to_object(local_point, hit.sub)

    def __repr__(self) -> str:
        return f"CSG(id={self.id}, operation={self.operation.name}, left={self.left!r}, right={self.right!r})"
