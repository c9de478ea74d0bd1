"""
Material models for the path tracer.

Implements:
- Lambertian diffuse
- Metal (mirror reflection with fuzz)
- Dielectric (glass, water - with refraction and Schlick reflectance)
- Emissive (area emitters that terminate paths)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray
from .interval import Interval

if TYPE_CHECKING:
    from .primitives import HitRecord

BLACK = Color(0, 0, 0)
WHITE = Color(1, 1, 1)


class Transparency(Enum):
    """Whether a surface receives direct lighting from shadow rays."""
    OPAQUE = "opaque"
    TRANSPARENT = "transparent"


@dataclass
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color


class Material(ABC):
    """Abstract base class for materials."""

    transparency: Transparency = Transparency.OPAQUE

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit: The intersection being shaded
            rng: Random source for the stochastic lobe

        Returns:
            ScatterResult if ray scatters, None if the path ends here
        """

    def emitted(self) -> Color:
        """Return emitted radiance. Default is no emission."""
        return BLACK


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Color):
        self.albedo = albedo

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        scatter_direction = hit.normal + Vec3.random_unit_vector(rng)

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = hit.normal

        return ScatterResult(
            scattered_ray=Ray(hit.point, scatter_direction.normalize()),
            attenuation=self.albedo
        )

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo})"


class Metal(Material):
    """Metallic material with specular reflection."""

    FUZZ_RANGE = Interval(0.0, 1.0)

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Perturbation radius, clamped into [0, 1] (0 = mirror)
        """
        self.albedo = albedo
        self.fuzz = self.FUZZ_RANGE.clamp(fuzz)

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        reflected = ray_in.direction.reflect(hit.normal)
        # Fuzzed reflections that dip below the surface are still accepted
        reflected = reflected + Vec3.random_unit_vector(rng) * self.fuzz

        return ScatterResult(
            scattered_ray=Ray(hit.point, reflected.normalize()),
            attenuation=self.albedo
        )

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo}, fuzz={self.fuzz})"


class Dielectric(Material):
    """Dielectric (glass-like) material with refraction."""

    transparency = Transparency.TRANSPARENT

    def __init__(self, ior: float = 1.5, albedo: Color = None):
        """Create a dielectric material.

        Args:
            ior: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)
            albedo: Tint applied to every transmitted or reflected path
        """
        self.ior = ior
        self.albedo = albedo if albedo is not None else WHITE

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        # Entering from air on the front face, leaving into air on the back
        refraction_ratio = 1.0 / self.ior if hit.front_face else self.ior

        unit_direction = ray_in.direction.normalize()
        cos_theta = min(-unit_direction.dot(hit.normal), 1.0)
        sin_theta = math.sqrt(1.0 - cos_theta * cos_theta)

        cannot_refract = refraction_ratio * sin_theta > 1.0
        reflect_chance = rng.random()

        if cannot_refract or self.reflectance(cos_theta, refraction_ratio) > reflect_chance:
            direction = unit_direction.reflect(hit.normal)
        else:
            direction = unit_direction.refract(hit.normal, refraction_ratio)

        return ScatterResult(
            scattered_ray=Ray(hit.point, direction.normalize()),
            attenuation=self.albedo
        )

    @staticmethod
    def reflectance(cosine: float, ref_idx: float) -> float:
        """Schlick's approximation for reflectance."""
        r0 = (1 - ref_idx) / (1 + ref_idx)
        r0 = r0 * r0
        return r0 + (1 - r0) * pow(1 - cosine, 5)

    def __repr__(self) -> str:
        return f"Dielectric(ior={self.ior}, albedo={self.albedo})"


class Emissive(Material):
    """Light-emitting material. Never scatters."""

    def __init__(self, color: Color, strength: float = 1.0):
        self.color = color
        self.strength = strength

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        return None

    def emitted(self) -> Color:
        return self.color * self.strength

    def __repr__(self) -> str:
        return f"Emissive(color={self.color}, strength={self.strength})"
