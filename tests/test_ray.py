"""Tests for Ray class."""

import pytest
from csgtracer.vec3 import Vec3, Point3
from csgtracer.ray import Ray
from csgtracer.transformations import translation, scaling


class TestRayCreation:
    """Test Ray construction."""

    def test_stores_origin(self):
        origin = Point3(1, 2, 3)
        ray = Ray(origin, Vec3(1, 0, 0))
        assert ray.origin == origin

    def test_stores_direction(self):
        direction = Vec3(4, 5, 6)
        ray = Ray(Point3(0, 0, 0), direction)
        assert ray.direction == direction


class TestRayAt:
    """Test Ray.at() method."""

    def test_at_zero(self):
        origin = Point3(2, 3, 4)
        ray = Ray(origin, Vec3(1, 0, 0))
        assert ray.at(0) == origin

    def test_at_positive(self):
        ray = Ray(Point3(2, 3, 4), Vec3(1, 0, 0))
        assert ray.at(1) == Point3(3, 3, 4)
        assert ray.at(2.5) == Point3(4.5, 3, 4)

    def test_at_negative(self):
        ray = Ray(Point3(2, 3, 4), Vec3(1, 0, 0))
        assert ray.at(-1) == Point3(1, 3, 4)

    def test_at_unnormalized_direction(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 2, 0))
        assert ray.at(3) == Point3(0, 6, 0)


class TestRayTransform:
    """Test Ray.transform()."""

    def test_translating(self):
        ray = Ray(Point3(1, 2, 3), Vec3(0, 1, 0))
        moved = ray.transform(translation(3, 4, 5))
        assert moved.origin == Point3(4, 6, 8)
        assert moved.direction == Vec3(0, 1, 0)

    def test_scaling(self):
        ray = Ray(Point3(1, 2, 3), Vec3(0, 1, 0))
        scaled = ray.transform(scaling(2, 3, 4))
        assert scaled.origin == Point3(2, 6, 12)
        # Direction is not renormalized
        assert scaled.direction == Vec3(0, 3, 0)

    def test_source_ray_unchanged(self):
        ray = Ray(Point3(1, 2, 3), Vec3(0, 1, 0))
        ray.transform(translation(3, 4, 5))
        assert ray.origin == Point3(1, 2, 3)


class TestRayRepr:
    """Test Ray string representation."""

    def test_repr(self):
        s = repr(Ray(Point3(1, 2, 3), Vec3(0, 1, 0)))
        assert "Ray" in s
        assert "origin" in s
        assert "direction" in s
