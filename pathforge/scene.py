"""
Scene container answering nearest-hit, occlusion and sky queries.

No acceleration structure is used; every query is a linear scan over the
primitive list.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .vec3 import Color
from .ray import Ray
from .interval import Interval
from .primitives import Primitive, HitRecord
from .lights import Light


@dataclass
class SkyGradient:
    """Vertical environment gradient seen by rays that leave the scene."""
    horizon: Color = field(default_factory=lambda: Color(1.0, 1.0, 1.0))
    zenith: Color = field(default_factory=lambda: Color(0.5, 0.7, 1.0))

    def color(self, ray: Ray) -> Color:
        a = 0.5 * (ray.direction.y + 1.0)
        return self.horizon * (1.0 - a) + self.zenith * a


class Scene:
    """Primitives, lights and the sky they sit under."""

    def __init__(
        self,
        primitives: Optional[list[Primitive]] = None,
        lights: Optional[list[Light]] = None,
        sky: Optional[SkyGradient] = None
    ):
        self.primitives: list[Primitive] = primitives if primitives is not None else []
        self.lights: list[Light] = lights if lights is not None else []
        self.sky = sky if sky is not None else SkyGradient()

    def add(self, primitive: Primitive) -> None:
        """Add a primitive to the scene."""
        self.primitives.append(primitive)

    def add_light(self, light: Light) -> None:
        """Add a light to the scene."""
        self.lights.append(light)

    def hit(self, ray: Ray, interval: Interval) -> Optional[HitRecord]:
        """Find the closest intersection among all primitives.

        The search interval shrinks to the best distance found so far, so a
        later primitive can only replace the current hit with a nearer one.
        Exact ties keep the earlier primitive.
        """
        closest_hit: Optional[HitRecord] = None
        search = interval

        for primitive in self.primitives:
            hit_record = primitive.hit(ray, search)
            if hit_record is not None:
                closest_hit = hit_record
                search = search.with_max(hit_record.t)

        return closest_hit

    def occluded(self, ray: Ray, interval: Interval) -> bool:
        """Return True if any primitive intersects the ray within interval."""
        return any(primitive.hit(ray, interval) is not None for primitive in self.primitives)

    def shadow_ray(self, hit: HitRecord, interval: Interval, rng: np.random.Generator) -> Color:
        """Sum the direct light reaching a hit point.

        Each light is sampled once. A light is either fully visible or fully
        blocked; transparent occluders block as much as opaque ones. Any hit
        inside interval blocks, including hits past the sampled light position.

        Args:
            hit: The surface point being shaded
            interval: Depth range of the originating query
            rng: Random source for light position sampling

        Returns:
            Sum of the color contributions of all unoccluded lights
        """
        total = Color(0, 0, 0)

        for light in self.lights:
            target = light.sample_position(hit.point, rng)
            to_light = target - hit.point
            distance_squared = to_light.length_squared()
            light_dir = to_light.normalize()

            if self.occluded(Ray(hit.point, light_dir), interval):
                continue

            total = total + light.color(light_dir, hit.normal, distance_squared)

        return total

    def sky_color(self, ray: Ray) -> Color:
        """Environment radiance for a ray that escapes the scene."""
        return self.sky.color(ray)

    get_sky_color = sky_color

    def __len__(self) -> int:
        return len(self.primitives)

    def __repr__(self) -> str:
        return f"Scene(primitives={len(self.primitives)}, lights={len(self.lights)})"
