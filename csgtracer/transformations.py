"""
Affine transformations as 4x4 numpy matrices.

Points are transformed with w = 1 and vectors with w = 0, so translations
only move points. Matrices compose right to left: ``a @ b`` applies ``b``
first.
"""

from __future__ import annotations
import math

import numpy as np

from .vec3 import Vec3, Point3

# Tolerance shared by plane-parallel tests, cube slabs and shadow offsets
EPSILON = 1e-4

IDENTITY = np.identity(4, dtype=np.float64)
IDENTITY.flags.writeable = False


class NonInvertibleTransformError(ValueError):
    """Raised when a transform that must be inverted has no inverse."""
    pass


def translation(x: float, y: float, z: float) -> np.ndarray:
    m = np.identity(4, dtype=np.float64)
    m[0, 3] = x
    m[1, 3] = y
    m[2, 3] = z
    return m


def scaling(x: float, y: float, z: float) -> np.ndarray:
    return np.diag([x, y, z, 1.0]).astype(np.float64)


def rotation_x(radians: float) -> np.ndarray:
    c, s = math.cos(radians), math.sin(radians)
    return np.array([
        [1, 0, 0, 0],
        [0, c, -s, 0],
        [0, s, c, 0],
        [0, 0, 0, 1],
    ], dtype=np.float64)


def rotation_y(radians: float) -> np.ndarray:
    c, s = math.cos(radians), math.sin(radians)
    return np.array([
        [c, 0, s, 0],
        [0, 1, 0, 0],
        [-s, 0, c, 0],
        [0, 0, 0, 1],
    ], dtype=np.float64)


def rotation_z(radians: float) -> np.ndarray:
    c, s = math.cos(radians), math.sin(radians)
    return np.array([
        [c, -s, 0, 0],
        [s, c, 0, 0],
        [0, 0, 1, 0],
        [0, 0, 0, 1],
    ], dtype=np.float64)


def shearing(xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> np.ndarray:
    """Shear each component in proportion to the other two."""
    return np.array([
        [1, xy, xz, 0],
        [yx, 1, yz, 0],
        [zx, zy, 1, 0],
        [0, 0, 0, 1],
    ], dtype=np.float64)


def view_transform(from_: Point3, to: Point3, up: Vec3) -> np.ndarray:
    """World-to-camera matrix for an eye at ``from_`` looking at ``to``.

    Args:
        from_: Eye position in world space
        to: Point the eye looks at
        up: Approximate up direction (need not be normalized or orthogonal)

    Returns:
        4x4 matrix orienting the world relative to the eye
    """
    forward = (to - from_).normalize()
    left = forward.cross(up.normalize())
    true_up = left.cross(forward)
    orientation = np.array([
        [left.x, left.y, left.z, 0],
        [true_up.x, true_up.y, true_up.z, 0],
        [-forward.x, -forward.y, -forward.z, 0],
        [0, 0, 0, 1],
    ], dtype=np.float64)
    return orientation @ translation(-from_.x, -from_.y, -from_.z)


def inverse(matrix: np.ndarray) -> np.ndarray:
    """Invert a 4x4 transform.

    Raises:
        NonInvertibleTransformError: If the determinant is (nearly) zero
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.shape != (4, 4):
        raise NonInvertibleTransformError(f"Transform must be 4x4, got shape {matrix.shape}")
    if abs(np.linalg.det(matrix)) < 1e-12:
        raise NonInvertibleTransformError(f"Transform is not invertible:\n{matrix}")
    return np.linalg.inv(matrix)


def transform_point(matrix: np.ndarray, point: Point3) -> Point3:
    return Vec3.from_array(matrix[:3, :3] @ point._data + matrix[:3, 3])


def transform_vector(matrix: np.ndarray, vector: Vec3) -> Vec3:
    return Vec3.from_array(matrix[:3, :3] @ vector._data)


class Transformation:
    """Fluent builder for chained transforms.

    Operations are applied to points in call order::

        Transformation().scale(2, 2, 2).rotate_y(math.pi / 4).translate(0, 1, 0).build()
    """

    def __init__(self):
        self._matrix = np.identity(4, dtype=np.float64)

    def _then(self, m: np.ndarray) -> Transformation:
        self._matrix = m @ self._matrix
        return self

    def translate(self, x: float, y: float, z: float) -> Transformation:
        return self._then(translation(x, y, z))

    def scale(self, x: float, y: float, z: float) -> Transformation:
        return self._then(scaling(x, y, z))

    def rotate_x(self, radians: float) -> Transformation:
        return self._then(rotation_x(radians))

    def rotate_y(self, radians: float) -> Transformation:
        return self._then(rotation_y(radians))

    def rotate_z(self, radians: float) -> Transformation:
        return self._then(rotation_z(radians))

    def shear(self, xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> Transformation:
        return self._then(shearing(xy, xz, yx, yz, zx, zy))

    def build(self) -> np.ndarray:
        return self._matrix.copy()
