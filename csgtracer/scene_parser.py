"""
Scene description reader and writer.

Scenes are JSON (or YAML, when PyYAML is installed) documents. Shapes and
patterns carry an explicit ``type`` field; transforms are 4x4 nested lists
and default to the identity.

Example scene file:
```json
{
  "light": {"position": [-10, 10, -10], "intensity": [1, 1, 1]},
  "camera": {
    "hsize": 200, "vsize": 100, "field_of_view": 0.785,
    "from": [0, 1.5, -5], "to": [0, 1, 0], "up": [0, 1, 0]
  },
  "render": {"parallel": true, "batch_size": 100},
  "objects": [
    {"type": "plane",
     "material": {"pattern": {"type": "checkers", "a": [1, 1, 1], "b": [0, 0, 0]}}},
    {"type": "csg", "operation": "difference",
     "left": {"type": "sphere"},
     "right": {"type": "cube", "transform": [[0.5, 0, 0, 0.6], [0, 0.5, 0, 0],
                                             [0, 0, 0.5, 0], [0, 0, 0, 1]]}}
  ]
}
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, Optional, Tuple, Union
import json
import logging

import numpy as np

from .vec3 import Vec3, Color
from .camera import Camera
from .lights import PointLight
from .materials import Material
from .patterns import Pattern, PatternKind, Solid, Gradient, Checkers, Stripes
from .shapes import Shape, ShapeKind, Sphere, Plane, Cube, CSG, CsgOperation
from .renderer import RenderSettings
from .transformations import IDENTITY, NonInvertibleTransformError, view_transform
from .world import World

_LOGGER: logging.Logger = logging.getLogger(__name__)

_SIMPLE_SHAPES = {
    ShapeKind.SPHERE: Sphere,
    ShapeKind.PLANE: Plane,
    ShapeKind.CUBE: Cube,
}

_TWO_COLOR_PATTERNS = {
    PatternKind.GRADIENT: Gradient,
    PatternKind.CHECKERS: Checkers,
    PatternKind.STRIPES: Stripes,
}

_MATERIAL_SCALARS = (
    'ambient', 'diffuse', 'specular', 'shininess',
    'reflective', 'transparency', 'refractive_index',
)


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.world: World = World()
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: Union[str, Path]) -> Tuple[World, Optional[Camera]]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (JSON, or YAML with PyYAML)

        Returns:
            Tuple of (world, camera); camera is None if the file has none
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        if path.suffix in ('.yaml', '.yml'):
            data = _load_yaml(content)
        else:
            try:
                data = json.loads(content)
            except json.JSONDecodeError as e:
                raise SceneParseError(f"Invalid JSON in {filepath}: {e}") from e

        _LOGGER.debug("Loaded scene description from %s", path)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[World, Optional[Camera]]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (world, camera)
        """
        if not isinstance(data, dict):
            raise SceneParseError(f"Scene must be a mapping, got {type(data).__name__}")

        for obj_data in data.get('objects', []):
            self.world.add_object(self._parse_shape(obj_data))

        if data.get('light') is not None:
            self.world.light = self._parse_light(data['light'])

        if 'render' in data:
            self.settings = self._parse_settings(data['render'])

        if 'camera' in data:
            self.camera = self._parse_camera(data['camera'])

        _LOGGER.debug("Parsed %d objects, light=%s, camera=%s",
                      len(self.world), self.world.light is not None, self.camera is not None)
        return self.world, self.camera

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a 3-element list."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            try:
                return Vec3(float(data[0]), float(data[1]), float(data[2]))
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Cannot parse Vec3 from: {data}") from e
        raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a color from [r, g, b] floats or a '#rrggbb' hex string."""
        if isinstance(data, str):
            hex_str = data.lstrip('#')
            if len(hex_str) != 6:
                raise SceneParseError(f"Cannot parse color from string: {data}")
            try:
                r, g, b = (int(hex_str[i:i + 2], 16) for i in (0, 2, 4))
            except ValueError as e:
                raise SceneParseError(f"Cannot parse color from string: {data}") from e
            return Color(r / 255.0, g / 255.0, b / 255.0)
        return self._parse_vec3(data)

    def _parse_transform(self, data: Any) -> np.ndarray:
        if data is None:
            return IDENTITY
        try:
            matrix = np.array(data, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Cannot parse transform from: {data}") from e
        if matrix.shape != (4, 4):
            raise SceneParseError(f"Transform must be 4x4, got shape {matrix.shape}")
        return matrix

    def _parse_kind(self, data: Dict[str, Any], enum_type, what: str):
        if not isinstance(data, dict) or 'type' not in data:
            raise SceneParseError(f"{what} needs a 'type' field: {data}")
        try:
            return enum_type(str(data['type']).lower())
        except ValueError:
            raise SceneParseError(f"Unknown {what.lower()} type: {data['type']}") from None

    def _parse_pattern(self, data: Dict[str, Any]) -> Pattern:
        kind = self._parse_kind(data, PatternKind, "Pattern")
        transform = self._parse_transform(data.get('transform'))

        try:
            if kind is PatternKind.SOLID:
                return Solid(self._parse_color(data.get('color', [1, 1, 1])), transform)
            return _TWO_COLOR_PATTERNS[kind](
                self._parse_color(data.get('a', [1, 1, 1])),
                self._parse_color(data.get('b', [0, 0, 0])),
                transform,
            )
        except NonInvertibleTransformError as e:
            raise SceneParseError(f"Pattern transform is not invertible: {data.get('transform')}") from e

    def _parse_material(self, data: Optional[Dict[str, Any]]) -> Material:
        material = Material()
        if data is None:
            return material
        if not isinstance(data, dict):
            raise SceneParseError(f"Material must be a mapping, got: {data}")

        if 'color' in data:
            material.color = self._parse_color(data['color'])
        for name in _MATERIAL_SCALARS:
            if name in data:
                try:
                    setattr(material, name, float(data[name]))
                except (TypeError, ValueError) as e:
                    raise SceneParseError(f"Material {name} must be a number, got: {data[name]}") from e
        if data.get('pattern') is not None:
            material.pattern = self._parse_pattern(data['pattern'])

        return material

    def _parse_shape(self, data: Dict[str, Any]) -> Shape:
        kind = self._parse_kind(data, ShapeKind, "Shape")
        transform = self._parse_transform(data.get('transform'))
        material = self._parse_material(data.get('material'))

        try:
            if kind is ShapeKind.CSG:
                if 'left' not in data or 'right' not in data:
                    raise SceneParseError("CSG shape needs 'left' and 'right'")
                try:
                    operation = CsgOperation(str(data.get('operation', 'union')).lower())
                except ValueError:
                    raise SceneParseError(f"Unknown CSG operation: {data.get('operation')}") from None
                return CSG(operation, self._parse_shape(data['left']),
                           self._parse_shape(data['right']), transform, material)

            return _SIMPLE_SHAPES[kind](transform, material)
        except NonInvertibleTransformError as e:
            raise SceneParseError(f"Shape transform is not invertible: {data.get('transform')}") from e

    def _parse_light(self, data: Dict[str, Any]) -> PointLight:
        if not isinstance(data, dict):
            raise SceneParseError(f"Light must be a mapping, got: {data}")
        position = self._parse_vec3(data.get('position', [-10, 10, -10]))
        intensity = self._parse_color(data.get('intensity', [1, 1, 1]))
        return PointLight(position, intensity)

    def _parse_camera(self, data: Dict[str, Any]) -> Camera:
        """Parse camera section, using render settings for missing sizes."""
        settings = self.settings if self.settings else RenderSettings()
        if not isinstance(data, dict):
            raise SceneParseError(f"Camera must be a mapping, got: {data}")
        try:
            hsize = int(data.get('hsize', settings.hsize))
            vsize = int(data.get('vsize', settings.vsize))
            field_of_view = float(data.get('field_of_view', settings.field_of_view))
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid camera: {e}") from e

        if 'transform' in data:
            transform = self._parse_transform(data['transform'])
        elif 'from' in data or 'to' in data:
            transform = view_transform(
                self._parse_vec3(data.get('from', [0, 0, 0])),
                self._parse_vec3(data.get('to', [0, 0, -1])),
                self._parse_vec3(data.get('up', [0, 1, 0])),
            )
        else:
            transform = IDENTITY

        try:
            return Camera(hsize, vsize, field_of_view, transform)
        except (ValueError, NonInvertibleTransformError) as e:
            raise SceneParseError(f"Invalid camera: {e}") from e

    def _parse_settings(self, data: Dict[str, Any]) -> RenderSettings:
        """Parse render settings section."""
        if not isinstance(data, dict):
            raise SceneParseError(f"Render settings must be a mapping, got: {data}")
        defaults = RenderSettings()
        try:
            return RenderSettings(
                hsize=int(data.get('hsize', defaults.hsize)),
                vsize=int(data.get('vsize', defaults.vsize)),
                field_of_view=float(data.get('field_of_view', defaults.field_of_view)),
                parallel=bool(data.get('parallel', defaults.parallel)),
                batch_size=int(data.get('batch_size', defaults.batch_size)),
                num_threads=int(data.get('threads', 0)),
                use_processes=bool(data.get('processes', defaults.use_processes)),
            )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def _load_yaml(content: str) -> Any:
    try:
        import yaml
    except ImportError:
        raise SceneParseError("PyYAML not installed. Install with: pip install pyyaml") from None
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SceneParseError(f"Invalid YAML: {e}") from e


def _vec3_to_list(v: Vec3) -> list[float]:
    return [v.x, v.y, v.z]


def _transform_to_list(matrix: np.ndarray) -> Optional[list[list[float]]]:
    if np.array_equal(matrix, IDENTITY):
        return None
    return matrix.tolist()


def _pattern_to_dict(pattern: Pattern) -> Dict[str, Any]:
    data: Dict[str, Any] = {'type': pattern.kind.value}
    if pattern.kind is PatternKind.SOLID:
        data['color'] = _vec3_to_list(pattern.color)
    else:
        data['a'] = _vec3_to_list(pattern.a)
        data['b'] = _vec3_to_list(pattern.b)
    transform = _transform_to_list(pattern.transform)
    if transform is not None:
        data['transform'] = transform
    return data


def _material_to_dict(material: Material) -> Dict[str, Any]:
    data: Dict[str, Any] = {'color': _vec3_to_list(material.color)}
    for name in _MATERIAL_SCALARS:
        data[name] = getattr(material, name)
    if material.pattern is not None:
        data['pattern'] = _pattern_to_dict(material.pattern)
    return data


def _shape_to_dict(shape: Shape) -> Dict[str, Any]:
    data: Dict[str, Any] = {'type': shape.kind.value}
    transform = _transform_to_list(shape.transform)
    if transform is not None:
        data['transform'] = transform
    data['material'] = _material_to_dict(shape.material)
    if shape.kind is ShapeKind.CSG:
        data['operation'] = shape.operation.value
        data['left'] = _shape_to_dict(shape.left)
        data['right'] = _shape_to_dict(shape.right)
    return data


def dump_scene(world: World, camera: Optional[Camera] = None) -> Dict[str, Any]:
    """Describe a world (and optionally a camera) as a scene dictionary.

    The result parses back with ``parse_scene`` into an equivalent scene.
    """
    data: Dict[str, Any] = {'objects': [_shape_to_dict(obj) for obj in world]}
    if world.light is not None:
        data['light'] = {
            'position': _vec3_to_list(world.light.position),
            'intensity': _vec3_to_list(world.light.intensity),
        }
    if camera is not None:
        data['camera'] = {
            'hsize': camera.hsize,
            'vsize': camera.vsize,
            'field_of_view': camera.field_of_view,
            'transform': camera.transform.tolist(),
        }
    return data


def save_scene(filepath: Union[str, Path], world: World, camera: Optional[Camera] = None) -> None:
    """Write a scene file (YAML for .yaml/.yml, JSON otherwise)."""
    path = Path(filepath)
    data = dump_scene(world, camera)

    if path.suffix in ('.yaml', '.yml'):
        try:
            import yaml
        except ImportError:
            raise SceneParseError("PyYAML not installed. Install with: pip install pyyaml") from None
        path.write_text(yaml.safe_dump(data, sort_keys=False))
    else:
        path.write_text(json.dumps(data, indent=2))
    _LOGGER.debug("Wrote scene with %d objects to %s", len(world), path)


def load_scene(filepath: Union[str, Path]) -> Tuple[World, Optional[Camera]]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (world, camera)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[World, Optional[Camera]]:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        Tuple of (world, camera)
    """
    parser = SceneParser()
    return parser.parse_dict(data)
