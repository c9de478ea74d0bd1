"""
Camera module for generating primary rays.

Supports:
- Perspective projection with a configurable vertical field of view
- Arbitrary positioning via look-at
- Auto-focus on the look-at point or a manual focal length
- Thin-lens depth of field (defocus disk)
- Box-filtered antialiasing by jittering within each pixel
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import math

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray
from .interval import Interval

WORLD_UP = Vec3(0, 1, 0)


@dataclass(frozen=True)
class Resolution:
    """Output image size in pixels."""
    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Resolution must be positive, got {self.width}x{self.height}")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def dimensions(self) -> tuple[int, int]:
        return self.width, self.height


class Camera:
    """A thin-lens perspective camera."""

    def __init__(
        self,
        position: Point3,
        look_at: Point3,
        resolution: Resolution,
        vfov: float = 90.0,
        focal_length: Optional[float] = None,
        defocus_angle: float = 0.0,
        depth: Optional[Interval] = None,
        vup: Vec3 = WORLD_UP
    ):
        """Create a camera.

        Args:
            position: Camera position in world space
            look_at: Point the camera is looking at
            resolution: Output resolution, fixes the aspect ratio and pixel grid
            vfov: Vertical field of view in degrees
            focal_length: Distance to the view plane; None focuses on look_at
            defocus_angle: Cone angle in degrees of rays through a pixel (0 = pinhole)
            depth: Range of ray parameters accepted by scene queries
            vup: World up vector
        """
        self.position = position
        self.resolution = resolution
        self.depth = depth if depth is not None else Interval(0.001, math.inf)
        self.focal_length = focal_length if focal_length is not None else (look_at - position).length()
        self.defocus_angle = defocus_angle

        self.viewport_width, self.viewport_height = self.viewport_extent(
            vfov, self.focal_length, resolution.aspect_ratio
        )

        # Forward points from the target back toward the camera
        self.forward = (position - look_at).normalize()
        self.right = vup.cross(self.forward).normalize()
        self.up = self.forward.cross(self.right)

        # Rows run top to bottom, so the vertical edge points down
        viewport_u = self.right * self.viewport_width
        viewport_v = -self.up * self.viewport_height

        self.pixel_delta_u = viewport_u / resolution.width
        self.pixel_delta_v = viewport_v / resolution.height
        self.top_left = (
            position
            - self.forward * self.focal_length
            - viewport_u / 2
            - viewport_v / 2
        )

        self.defocus_radius = self.focal_length * math.tan(math.radians(defocus_angle / 2))
        self.defocus_disk_u = self.right * self.defocus_radius
        self.defocus_disk_v = self.up * self.defocus_radius

    @staticmethod
    def viewport_extent(vfov: float, focal_length: float, aspect_ratio: float) -> tuple[float, float]:
        """Return (width, height) of the view plane at the focal distance."""
        h = math.tan(math.radians(vfov) / 2)
        viewport_height = 2.0 * h * focal_length
        return viewport_height * aspect_ratio, viewport_height

    def pixel_offset(self, x: float, y: float) -> Vec3:
        return self.pixel_delta_u * x + self.pixel_delta_v * y

    def pixel_center(self, x: float, y: float) -> Point3:
        """World-space point on the view plane for pixel (x, y)."""
        return self.top_left + self.pixel_offset(x, y)

    def sample_pixel(self, center: Point3, rng: np.random.Generator) -> Point3:
        """Jitter a pixel center uniformly within half a pixel on both axes."""
        dx, dy = rng.uniform(-0.5, 0.5, 2)
        return center + self.pixel_offset(dx, dy)

    def ray_origin(self, rng: np.random.Generator) -> Point3:
        """Pinhole position, or a random point on the defocus disk."""
        if self.defocus_angle <= 0:
            return self.position

        p = Vec3.random_in_unit_disk(rng)
        return self.position + self.defocus_disk_u * p.x + self.defocus_disk_v * p.y

    def get_ray(self, x: int, y: int, rng: np.random.Generator) -> Ray:
        """Generate a jittered primary ray through pixel (x, y).

        Args:
            x: Column index, 0 at the left edge
            y: Row index, 0 at the top edge
            rng: Random source for antialiasing and lens sampling

        Returns:
            A ray with a unit direction
        """
        target = self.sample_pixel(self.pixel_center(x, y), rng)
        origin = self.ray_origin(rng)
        return Ray(origin, (target - origin).normalize())

    def __repr__(self) -> str:
        return (
            f"Camera(position={self.position}, focal_length={self.focal_length:.4f}, "
            f"resolution={self.resolution.width}x{self.resolution.height})"
        )
