"""
Ray class for representing rays in 3D space.

A ray is defined by an origin point and a direction vector.
Ray(t) = origin + t * direction
"""

from __future__ import annotations
from .vec3 import Vec3, Point3


class Ray:
    """An immutable ray with origin and direction.

    The direction is stored as given; the camera and the materials normalize
    it before handing a ray to the scene.
    """

    __slots__ = ('_origin', '_direction')

    def __init__(self, origin: Point3, direction: Vec3):
        self._origin = origin
        self._direction = direction

    @property
    def origin(self) -> Point3:
        return self._origin

    @property
    def direction(self) -> Vec3:
        return self._direction

    def at(self, t: float) -> Point3:
        """Get the point origin + t * direction."""
        return self._origin + self._direction * t

    def __repr__(self) -> str:
        return f"Ray(origin={self._origin}, direction={self._direction})"
