"""
CSGTracer - A Python Ray Tracing Renderer

A ray tracer with support for:
- Spheres, planes and cubes under arbitrary affine transforms
- Constructive solid geometry (union, intersection, difference)
- Phong illumination with hard shadows from a point light
- Procedural patterns (gradient, checkers, stripes)
- Sequential and batch-parallel rendering
- JSON/YAML scene files
"""

__version__ = "0.1.0"
__author__ = "CSGTracer Team"

from .vec3 import Vec3, Point3, Color, BLACK, WHITE, color_from_u8
from .transformations import (
    EPSILON, IDENTITY, NonInvertibleTransformError, Transformation,
    translation, scaling, rotation_x, rotation_y, rotation_z, shearing,
    view_transform, inverse, transform_point, transform_vector
)
from .ray import Ray
from .intersections import Intersection, Computations, hit, prepare_computations, sort_intersections
from .patterns import Pattern, PatternKind, Solid, Gradient, Checkers, Stripes
from .lights import PointLight
from .materials import Material
from .shapes import Shape, ShapeKind, Sphere, Plane, Cube, CSG, CsgOperation, intersection_allowed
from .world import World, MissingLightError
from .camera import Camera
from .canvas import Canvas
from .renderer import Renderer, RenderSettings, render, render_parallel, render_batch, generate_batches
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene, dump_scene, save_scene
from .scenes import demo_world, demo_camera
