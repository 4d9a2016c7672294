"""Tests for scene file parsing and writing."""

import pytest
import json
import math
import numpy as np

from csgtracer.vec3 import Vec3, Point3, Color
from csgtracer.shapes import Sphere, Plane, Cube, CSG, CsgOperation
from csgtracer.patterns import Checkers, Gradient, Solid, Stripes
from csgtracer.scene_parser import (
    SceneParser, SceneParseError, dump_scene, load_scene, parse_scene, save_scene
)
from csgtracer.renderer import render
from csgtracer.scenes import demo_world, demo_camera
from csgtracer.transformations import translation


SCENE = {
    "light": {"position": [-10, 10, -10], "intensity": [1, 1, 1]},
    "camera": {
        "hsize": 20, "vsize": 10, "field_of_view": 1.0,
        "from": [0, 1.5, -5], "to": [0, 1, 0], "up": [0, 1, 0]
    },
    "objects": [
        {"type": "plane",
         "material": {"pattern": {"type": "checkers", "a": [1, 1, 1], "b": [0, 0, 0]}}},
        {"type": "csg", "operation": "difference",
         "left": {"type": "sphere", "material": {"color": "#ff0000", "ambient": 0.2}},
         "right": {"type": "cube", "transform": [[0.5, 0, 0, 0.6], [0, 0.5, 0, 0],
                                                 [0, 0, 0.5, 0], [0, 0, 0, 1]]}}
    ]
}


class TestParseDict:
    """Test parsing scenes from dictionaries."""

    def test_objects(self):
        world, _ = parse_scene(SCENE)
        assert len(world) == 2
        plane, csg = world.objects
        assert isinstance(plane, Plane)
        assert isinstance(plane.material.pattern, Checkers)
        assert isinstance(csg, CSG)
        assert csg.operation is CsgOperation.DIFFERENCE
        assert isinstance(csg.left, Sphere)
        assert isinstance(csg.right, Cube)

    def test_material(self):
        world, _ = parse_scene(SCENE)
        sphere = world.objects[1].left
        assert sphere.material.color == Color(1, 0, 0)
        assert sphere.material.ambient == 0.2
        assert sphere.material.diffuse == 0.9

    def test_transform(self):
        world, _ = parse_scene(SCENE)
        cube = world.objects[1].right
        assert cube.transform[0, 3] == 0.6
        assert cube.transform[0, 0] == 0.5

    def test_light(self):
        world, _ = parse_scene(SCENE)
        assert world.light.position == Point3(-10, 10, -10)
        assert world.light.intensity == Color(1, 1, 1)

    def test_camera(self):
        _, camera = parse_scene(SCENE)
        assert (camera.hsize, camera.vsize) == (20, 10)
        assert camera.field_of_view == 1.0
        assert camera.origin == Point3(0, 1.5, -5)

    def test_no_camera(self):
        world, camera = parse_scene({"objects": [{"type": "sphere"}]})
        assert camera is None
        assert world.light is None

    def test_render_settings(self):
        parser = SceneParser()
        parser.parse_dict({
            "render": {"hsize": 32, "vsize": 16, "parallel": True, "batch_size": 8, "threads": 2},
            "camera": {"from": [0, 0, -5], "to": [0, 0, 0]},
        })
        assert parser.settings.parallel is True
        assert parser.settings.batch_size == 8
        assert parser.settings.num_threads == 2
        # Camera sizes fall back to the render section
        assert (parser.camera.hsize, parser.camera.vsize) == (32, 16)

    def test_patterns(self):
        world, _ = parse_scene({"objects": [
            {"type": "sphere", "material": {"pattern": {"type": "stripes"}}},
            {"type": "sphere", "material": {"pattern": {"type": "gradient", "a": "#000000", "b": "#ffffff"}}},
            {"type": "sphere", "material": {"pattern": {"type": "solid", "color": [0, 1, 0],
                                                        "transform": translation(1, 2, 3).tolist()}}},
        ]})
        stripes, gradient, solid = (s.material.pattern for s in world)
        assert isinstance(stripes, Stripes)
        assert isinstance(gradient, Gradient)
        assert gradient.b == Color(1, 1, 1)
        assert isinstance(solid, Solid)
        assert solid.color == Color(0, 1, 0)
        assert np.array_equal(solid.transform, translation(1, 2, 3))

    def test_type_is_case_insensitive(self):
        world, _ = parse_scene({"objects": [{"type": "Sphere"}]})
        assert isinstance(world.objects[0], Sphere)

    def test_csg_defaults_to_union(self):
        world, _ = parse_scene({"objects": [
            {"type": "csg", "left": {"type": "sphere"}, "right": {"type": "cube"}}
        ]})
        assert world.objects[0].operation is CsgOperation.UNION


class TestParseErrors:
    """Test rejection of malformed scenes."""

    @pytest.mark.parametrize("data", [
        [],
        {"objects": [{"kind": "sphere"}]},
        {"objects": [{"type": "torus"}]},
        {"objects": [{"type": "csg", "left": {"type": "sphere"}}]},
        {"objects": [{"type": "csg", "operation": "xor",
                      "left": {"type": "sphere"}, "right": {"type": "cube"}}]},
        {"objects": [{"type": "sphere", "transform": [[1, 0], [0, 1]]}]},
        {"objects": [{"type": "sphere", "transform": np.zeros((4, 4)).tolist()}]},
        {"objects": [{"type": "sphere", "material": "shiny"}]},
        {"objects": [{"type": "sphere", "material": {"ambient": "lots"}}]},
        {"objects": [{"type": "sphere", "material": {"color": "#12345"}}]},
        {"objects": [{"type": "sphere", "material": {"color": [1, 2]}}]},
        {"objects": [{"type": "sphere", "material": {"pattern": {"type": "waves"}}}]},
        {"objects": [{"type": "sphere", "material": {"pattern": {
            "type": "stripes", "transform": np.zeros((4, 4)).tolist()}}}]},
        {"light": {"position": [0, "up", 0]}},
        {"light": [1, 2, 3]},
        {"camera": {"hsize": 0, "vsize": 10}},
        {"camera": {"hsize": "wide"}},
        {"render": {"batch_size": 0}},
    ])
    def test_invalid(self, data):
        with pytest.raises(SceneParseError):
            parse_scene(data)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SceneParseError):
            load_scene(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(SceneParseError):
            load_scene(path)


class TestSceneFiles:
    """Test reading and writing scene files."""

    def test_load_json(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(SCENE))
        world, camera = load_scene(path)
        assert len(world) == 2
        assert camera.hsize == 20

    def test_load_yaml(self, tmp_path):
        yaml = pytest.importorskip("yaml")
        path = tmp_path / "scene.yaml"
        path.write_text(yaml.safe_dump(SCENE))
        world, camera = load_scene(path)
        assert len(world) == 2
        assert camera.vsize == 10

    def test_dump_omits_identity_transform(self):
        world, _ = parse_scene({"objects": [{"type": "sphere"}]})
        data = dump_scene(world)
        assert 'transform' not in data['objects'][0]
        assert data['objects'][0]['type'] == 'sphere'
        assert 'camera' not in data
        assert 'light' not in data

    def test_dump_csg(self):
        world, _ = parse_scene(SCENE)
        csg = dump_scene(world)['objects'][1]
        assert csg['operation'] == 'difference'
        assert csg['left']['type'] == 'sphere'
        assert csg['right']['transform'][0][3] == 0.6

    def test_round_trip_renders_identically(self):
        world, camera = demo_world(), demo_camera(16, 12)
        data = json.loads(json.dumps(dump_scene(world, camera)))
        world2, camera2 = parse_scene(data)

        assert len(world2) == len(world)
        assert render(world2, camera2) == render(world, camera)

    def test_save_and_load_json(self, tmp_path):
        path = tmp_path / "demo.json"
        save_scene(path, demo_world(), demo_camera(8, 6))
        world, camera = load_scene(path)
        assert len(world) == 5
        assert (camera.hsize, camera.vsize) == (8, 6)

    def test_save_and_load_yaml(self, tmp_path):
        pytest.importorskip("yaml")
        path = tmp_path / "demo.yml"
        save_scene(path, demo_world(), demo_camera(8, 6))
        world, camera = load_scene(path)
        assert len(world) == 5
        assert isinstance(world.objects[1], CSG)
