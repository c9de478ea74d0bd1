"""
Geometric primitives for the path tracer.

Each primitive reports its surface normal and its material, and implements
``hit`` returning at most one HitRecord inside the queried interval.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .interval import Interval

if TYPE_CHECKING:
    from .materials import Material

PARALLEL_EPSILON = 1e-8


@dataclass
class HitRecord:
    """Stores information about a ray-primitive intersection.

    Attributes:
        t: The ray parameter at intersection
        point: The intersection point in world space
        normal: The surface normal at the intersection (always opposes the ray)
        front_face: True if the ray hit the outside of the primitive
        material: The material of the primitive that was hit

    A record only lives for the bounce that produced it.
    """
    t: float
    point: Point3
    normal: Vec3
    front_face: bool
    material: Material

    @classmethod
    def from_primitive(cls, t: float, point: Point3, ray: Ray, primitive: Primitive) -> HitRecord:
        """Build a record, flipping the normal when the ray starts inside."""
        normal = primitive.normal(point)
        front_face = True

        # Aligned normal and direction means the ray comes from inside
        if normal.dot(ray.direction) > 0.0:
            normal = primitive.inverted_normal(point)
            front_face = False

        return cls(
            t=t,
            point=point,
            normal=normal,
            front_face=front_face,
            material=primitive.material
        )


class Primitive(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    material: Material

    @abstractmethod
    def normal(self, point: Point3) -> Vec3:
        """Outward surface normal at a point on the surface."""

    def inverted_normal(self, point: Point3) -> Vec3:
        """Normal used when the surface is hit from the back."""
        return -self.normal(point)

    @abstractmethod
    def hit(self, ray: Ray, interval: Interval) -> Optional[HitRecord]:
        """Test if ray intersects this primitive.

        Args:
            ray: The ray to test
            interval: Open range of acceptable ray parameters

        Returns:
            HitRecord if intersection found, None otherwise
        """


class Sphere(Primitive):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Material):
        self.center = center
        self.radius = radius
        self.material = material

    def normal(self, point: Point3) -> Vec3:
        return (point - self.center) / self.radius

    def hit(self, ray: Ray, interval: Interval) -> Optional[HitRecord]:
        """Test ray-sphere intersection using the half-b quadratic.

        The equation (P-C)·(P-C) = r² where P = ray.at(t)
        expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0.
        """
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Near root first, the far root covers origins inside the sphere
        root = (-half_b - sqrtd) / a
        if not interval.surrounds(root):
            root = (-half_b + sqrtd) / a
            if not interval.surrounds(root):
                return None

        return HitRecord.from_primitive(root, ray.at(root), ray, self)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class Plane(Primitive):
    """An infinite plane through a point with a fixed normal."""

    def __init__(self, point: Point3, normal: Vec3, material: Material):
        self.point = point
        self._normal = normal
        self.material = material

    def normal(self, point: Point3) -> Vec3:
        return self._normal

    def _intersect(self, ray: Ray, interval: Interval) -> Optional[float]:
        denom = ray.direction.dot(self._normal)
        if abs(denom) < PARALLEL_EPSILON:
            return None

        t = -(ray.origin - self.point).dot(self._normal) / denom
        if not interval.surrounds(t):
            return None
        return t

    def hit(self, ray: Ray, interval: Interval) -> Optional[HitRecord]:
        t = self._intersect(ray, interval)
        if t is None:
            return None
        return HitRecord.from_primitive(t, ray.at(t), ray, self)

    def __repr__(self) -> str:
        return f"Plane(point={self.point}, normal={self._normal})"


class Rectangle(Plane):
    """A bounded patch of a plane.

    The patch is spanned by the basis vectors (width, 0, 0) and (0, 0, height).
    A hit is kept while its offset from ``point`` projects onto each basis
    vector with magnitude at most 1. The bound is measured in projected units
    rather than world units, so the patch only matches its nominal size for
    width = height = 1.
    """

    def __init__(
        self,
        point: Point3,
        normal: Vec3,
        width: float,
        height: float,
        material: Material
    ):
        super().__init__(point, normal, material)
        self.width = width
        self.height = height
        self.basis = (Vec3(1, 0, 0) * width, Vec3(0, 0, 1) * height)

    def hit(self, ray: Ray, interval: Interval) -> Optional[HitRecord]:
        t = self._intersect(ray, interval)
        if t is None:
            return None

        point = ray.at(t)
        offset = self.point - point
        if abs(offset.dot(self.basis[0])) > 1.0 or abs(offset.dot(self.basis[1])) > 1.0:
            return None

        return HitRecord.from_primitive(t, point, ray, self)

    def __repr__(self) -> str:
        return f"Rectangle(point={self.point}, width={self.width}, height={self.height})"
