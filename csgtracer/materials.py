"""
Surface materials and Phong illumination.

A material combines a base color (or a pattern) with the coefficients of the
Phong reflection model:
- ambient: light reflected from the surroundings, independent of the light
- diffuse: matte reflection, proportional to the cosine of the light angle
- specular: highlight reflection, sharpened by ``shininess``
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from .vec3 import Vec3, Point3, Color, BLACK
from .lights import PointLight
from .patterns import Pattern


@dataclass
class Material:
    """Phong material.

    ``reflective``, ``transparency`` and ``refractive_index`` are stored and
    round-tripped through scene files but do not affect shading yet.
    """
    color: Color = field(default_factory=lambda: Color(1.0, 1.0, 1.0))
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0
    reflective: float = 0.0
    transparency: float = 0.0
    refractive_index: float = 1.0
    pattern: Optional[Pattern] = None

    def color_at(self, object_point: Optional[Point3]) -> Color:
        """Base color at a point in the shaded shape's local space."""
        if self.pattern is not None and object_point is not None:
            return self.pattern.pattern_at_object(object_point)
        return self.color

    def lighting(
        self,
        light: PointLight,
        point: Point3,
        eyev: Vec3,
        normalv: Vec3,
        in_shadow: bool = False,
        object_point: Optional[Point3] = None
    ) -> Color:
        """Compute the Phong-shaded color at a surface point.

        Args:
            light: The light source
            point: Point being shaded, in world space
            eyev: Unit vector toward the eye
            normalv: Unit surface normal facing the eye
            in_shadow: If True only the ambient term contributes
            object_point: ``point`` in the shape's local space, used for
                pattern lookup

        Returns:
            The shaded color
        """
        effective_color = self.color_at(object_point) * light.intensity
        ambient = effective_color * self.ambient

        if in_shadow:
            return ambient

        lightv = light.direction_from(point)
        light_dot_normal = lightv.dot(normalv)

        # Light is on the other side of the surface
        if light_dot_normal < 0:
            return ambient

        diffuse = effective_color * self.diffuse * light_dot_normal

        reflectv = (-lightv).reflect(normalv)
        reflect_dot_eye = reflectv.dot(eyev)

        if reflect_dot_eye <= 0:
            specular = BLACK
        else:
            factor = reflect_dot_eye ** self.shininess
            specular = light.intensity * self.specular * factor

        return ambient + diffuse + specular
