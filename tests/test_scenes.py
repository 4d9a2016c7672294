"""Tests for the built-in demo scene."""

import math

from csgtracer.vec3 import Point3, Vec3
from csgtracer.ray import Ray
from csgtracer.shapes import CSG, CsgOperation, Plane, Sphere, Cube
from csgtracer.patterns import Checkers
from csgtracer.scenes import demo_world, demo_camera


class TestDemoWorld:
    """Test demo_world()."""

    def test_contents(self):
        world = demo_world()
        assert len(world) == 5
        assert world.light is not None
        assert world.light.position == Point3(-8, 10, -6)

    def test_floor(self):
        floor = demo_world().objects[0]
        assert isinstance(floor, Plane)
        assert isinstance(floor.material.pattern, Checkers)

    def test_csg_objects(self):
        world = demo_world()
        bitten, pair = world.objects[1], world.objects[2]
        assert bitten.operation is CsgOperation.DIFFERENCE
        assert isinstance(bitten.left, Sphere)
        assert isinstance(bitten.right, Cube)
        assert pair.operation is CsgOperation.UNION

    def test_fresh_objects_each_call(self):
        a = demo_world()
        b = demo_world()
        assert a.objects[1] is not b.objects[1]

    def test_floor_visible_below_camera(self):
        world = demo_world()
        ray = Ray(Point3(0, 1.5, -8), Vec3(0, -1, 0.2).normalize())
        h = world.hit(world.intersect_world(ray))
        assert h.object is world.objects[0]
        assert h.t > 0


class TestDemoCamera:
    """Test demo_camera()."""

    def test_defaults(self):
        cam = demo_camera()
        assert (cam.hsize, cam.vsize) == (400, 400)
        assert cam.field_of_view == math.pi / 4
        assert cam.origin == Point3(0, 1.5, -8)

    def test_size(self):
        cam = demo_camera(40, 30)
        assert (cam.hsize, cam.vsize) == (40, 30)
