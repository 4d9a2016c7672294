"""
Ready-made scenes for demos and tests.
"""

from __future__ import annotations
import math

from .vec3 import Vec3, Point3, Color, BLACK, WHITE, color_from_u8
from .camera import Camera
from .lights import PointLight
from .patterns import Checkers
from .shapes import CSG, CsgOperation, Cube, Plane, Sphere
from .transformations import Transformation
from .world import World


def _glassy_sphere(color: Color, transform) -> Sphere:
    sphere = Sphere(transform)
    sphere.material.color = color
    sphere.material.diffuse = 0.7
    sphere.material.specular = 0.3
    sphere.material.transparency = 0.8
    return sphere


def demo_world() -> World:
    """A checkered floor with CSG objects on it.

    - a yellow sphere with a rotated box bitten out of it (difference)
    - two overlapping dark spheres merged into one (union)
    - two small loose spheres in front
    """
    world = World()

    checkers = Checkers(WHITE, BLACK, Transformation()
                        .scale(0.1, 0.1, 0.1)
                        .rotate_y(0.174)
                        .translate(10.0, 0.0, 10.0)
                        .build())
    floor = Plane()
    floor.material.pattern = checkers
    world.add_object(floor)

    yellow = color_from_u8(255, 242, 0)

    ball = Sphere()
    ball.material.color = yellow
    ball.material.diffuse = 0.7
    ball.material.specular = 0.3

    box = Cube(Transformation()
               .scale(0.55, 0.55, 1.5)
               .rotate_z(math.pi / 4)
               .translate(0.65, 0.0, 0.0)
               .build())
    box.material.color = yellow

    bitten_ball = CSG(CsgOperation.DIFFERENCE, ball, box, Transformation()
                      .scale(1.5, 1.5, 1.5)
                      .rotate_y(math.pi / 8)
                      .translate(-0.75, 1.5, 2.0)
                      .build())
    world.add_object(bitten_ball)

    left = _glassy_sphere(Color(0.1, 0.1, 0.1), Transformation().translate(-0.5, 0.5, -1.0).build())
    right = _glassy_sphere(Color(0.1, 0.15, 0.1), Transformation()
                           .scale(1.5, 1.5, 1.5)
                           .translate(1.5, 0.5, -1.0)
                           .build())
    pair = CSG(CsgOperation.UNION, left, right, Transformation().translate(-0.25, 0.5, 0.0).build())
    world.add_object(pair)

    world.add_object(_glassy_sphere(Color(0.1, 0.15, 0.1), Transformation()
                                    .scale(0.5, 0.5, 0.5)
                                    .translate(-1.75, 0.5, -3.0)
                                    .build()))
    world.add_object(_glassy_sphere(Color(0.1, 0.1, 0.1), Transformation()
                                    .scale(0.5, 0.5, 0.5)
                                    .translate(-2.5, 0.5, -3.0)
                                    .build()))

    world.light = PointLight(Point3(-8.0, 10.0, -6.0), Color(1.0, 1.0, 1.0))
    return world


def demo_camera(hsize: int = 400, vsize: int = 400, field_of_view: float = math.pi / 4) -> Camera:
    """Camera framing ``demo_world`` from slightly above and in front."""
    return Camera.look_at(hsize, vsize, field_of_view,
                          Point3(0.0, 1.5, -8.0), Point3(0.0, 1.0, 0.0), Vec3(0.0, 1.0, 0.0))
