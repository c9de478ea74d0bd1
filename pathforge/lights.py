"""
Light sources sampled by shadow rays.

Lights are not geometry: they are never hit by scene queries and only
contribute through next-event estimation at opaque surfaces.
"""

from __future__ import annotations
from abc import ABC, abstractmethod

import numpy as np

from .vec3 import Vec3, Point3, Color


class Light(ABC):
    """Abstract base class for light sources."""

    def __init__(self, color: Color, intensity: float = 1.0):
        self.light_color = color
        self.intensity = intensity

    @abstractmethod
    def sample_position(self, reference: Point3, rng: np.random.Generator) -> Point3:
        """Pick the point a shadow ray from ``reference`` should aim at."""

    def falloff_intensity(self, distance_squared: float) -> float:
        """Inverse-square falloff. Not clamped near zero distance."""
        return 1.0 / distance_squared

    def color(self, light_dir: Vec3, normal: Vec3, distance_squared: float) -> Color:
        """Lambertian direct-light contribution.

        Args:
            light_dir: Unit direction from the surface toward the light
            normal: Unit surface normal at the shaded point
            distance_squared: Squared distance to the sampled light position

        Returns:
            Radiance arriving from this light, zero for back-facing surfaces
        """
        cos_theta = max(0.0, light_dir.dot(normal))
        return self.light_color * (cos_theta * self.intensity * self.falloff_intensity(distance_squared))


class RadialLight(Light):
    """A spherical area light.

    Each shadow ray targets a random point inside the light's volume, which
    produces soft shadows with a penumbra proportional to ``radius``.
    """

    def __init__(self, center: Point3, color: Color, radius: float, intensity: float = 1.0):
        super().__init__(color, intensity)
        self.center = center
        self.radius = radius

    def sample_position(self, reference: Point3, rng: np.random.Generator) -> Point3:
        offset = Vec3.random_in_unit_sphere(rng) * self.radius

        # Keep samples on the half of the sphere facing the reference point
        if offset.dot(reference - self.center) < 0:
            offset = -offset

        return self.center + offset

    def __repr__(self) -> str:
        return f"RadialLight(center={self.center}, radius={self.radius}, intensity={self.intensity})"


class PointLight(Light):
    """A point light source.

    Point lights emit light equally in all directions from a single point.
    They produce hard shadows.
    """

    def __init__(self, position: Point3, color: Color, intensity: float = 1.0):
        super().__init__(color, intensity)
        self.position = position

    def sample_position(self, reference: Point3, rng: np.random.Generator) -> Point3:
        return self.position

    def __repr__(self) -> str:
        return f"PointLight(position={self.position}, intensity={self.intensity})"
