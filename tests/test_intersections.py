"""Tests for intersections and shading computations."""

import pytest

from csgtracer.vec3 import Vec3, Point3, Color
from csgtracer.ray import Ray
from csgtracer.shapes import Sphere, Plane, Cube, CSG, CsgOperation
from csgtracer.materials import Material
from csgtracer.intersections import Intersection, hit, prepare_computations, sort_intersections
from csgtracer.transformations import EPSILON, translation, scaling


class TestIntersection:
    """Test the Intersection record."""

    def test_creation(self):
        s = Sphere()
        i = Intersection(3.5, s)
        assert i.t == 3.5
        assert i.object is s
        assert i.sub is None

    def test_leaf_of_plain_shape(self):
        s = Sphere()
        assert Intersection(1, s).leaf is s

    def test_material_of_plain_shape(self):
        s = Sphere(material=Material(ambient=0.3))
        assert Intersection(1, s).material is s.material

    def test_sort_is_stable(self):
        a, b = Sphere(), Sphere()
        xs = sort_intersections([Intersection(2, a), Intersection(1, a), Intersection(2, b)])
        assert [i.t for i in xs] == [1, 2, 2]
        assert xs[1].object is a
        assert xs[2].object is b


class TestHit:
    """Test hit selection."""

    def test_all_positive(self):
        s = Sphere()
        i1 = Intersection(1, s)
        i2 = Intersection(2, s)
        assert hit([i1, i2]) is i1

    def test_some_negative(self):
        s = Sphere()
        i1 = Intersection(-1, s)
        i2 = Intersection(1, s)
        assert hit([i1, i2]) is i2

    def test_all_negative(self):
        s = Sphere()
        assert hit([Intersection(-2, s), Intersection(-1, s)]) is None

    def test_zero_counts(self):
        s = Sphere()
        i = Intersection(0, s)
        assert hit([Intersection(-1, s), i]) is i

    def test_lowest_non_negative(self):
        s = Sphere()
        i4 = Intersection(2, s)
        xs = sort_intersections([Intersection(5, s), Intersection(7, s), Intersection(-3, s), i4])
        assert hit(xs) is i4

    def test_empty_and_none(self):
        assert hit([]) is None
        assert hit(None) is None


class TestPrepareComputations:
    """Test prepare_computations."""

    def test_outside_hit(self):
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        shape = Sphere()
        comps = prepare_computations(Intersection(4, shape), ray)

        assert comps.t == 4
        assert comps.object is shape
        assert comps.point == Point3(0, 0, -1)
        assert comps.eyev == Vec3(0, 0, -1)
        assert comps.normalv == Vec3(0, 0, -1)
        assert comps.inside is False

    def test_inside_hit(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        comps = prepare_computations(Intersection(1, Sphere()), ray)

        assert comps.point == Point3(0, 0, 1)
        assert comps.eyev == Vec3(0, 0, -1)
        assert comps.inside is True
        # Normal is flipped to face the eye
        assert comps.normalv == Vec3(0, 0, -1)

    def test_eyev_is_normalized(self):
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 2))
        comps = prepare_computations(Intersection(2, Sphere()), ray)
        assert comps.eyev == Vec3(0, 0, -1)

    def test_over_point(self):
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        shape = Sphere(translation(0, 0, 1))
        comps = prepare_computations(Intersection(5, shape), ray)

        assert comps.over_point.z < -EPSILON / 2
        assert comps.point.z > comps.over_point.z

    def test_object_point(self):
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        shape = Sphere(translation(0, 0, 1))
        comps = prepare_computations(Intersection(5, shape), ray)
        assert abs(comps.object_point.z - (-1 - EPSILON)) < 1e-9

    def test_plane_hit(self):
        ray = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        comps = prepare_computations(Intersection(1, Plane()), ray)
        assert comps.normalv == Vec3(0, 1, 0)
        assert comps.inside is False

    def test_csg_hit_uses_leaf(self):
        left = Sphere(material=Material(color=Color(1, 0, 0)))
        right = Cube(translation(5, 0, 0), material=Material(color=Color(0, 0, 1)))
        csg = CSG(CsgOperation.UNION, left, right, transform=scaling(2, 2, 2))
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        xs = csg.intersect(ray)
        comps = prepare_computations(hit(xs), ray)

        assert comps.object is csg
        assert comps.material is left.material
        assert comps.point == Point3(0, 0, -2)
        assert comps.normalv == Vec3(0, 0, -1)
        assert abs(comps.object_point.z - (-1 - EPSILON / 2)) < 1e-9
