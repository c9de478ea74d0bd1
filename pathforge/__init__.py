"""
PathForge - A Python Monte Carlo Path Tracer

An offline renderer that estimates light transport per pixel with:
- Sphere, plane and rectangle primitives
- Lambertian, metal, dielectric and emissive materials
- Radial area lights sampled with shadow rays (next-event estimation)
- Thin-lens camera with antialiasing
- Row-parallel, seed-reproducible rendering to 8-bit RGB
"""

__version__ = "0.1.0"

from .vec3 import Vec3, Point3, Color
from .interval import Interval
from .ray import Ray
from .primitives import HitRecord, Primitive, Sphere, Plane, Rectangle
from .materials import Material, ScatterResult, Transparency, Lambertian, Metal, Dielectric, Emissive
from .lights import Light, RadialLight, PointLight
from .scene import Scene, SkyGradient
from .camera import Camera, Resolution
from .renderer import Renderer, RenderSettings
