"""
Renderer module - the heart of the path tracer.

Implements:
- Forward path tracing with next-event estimation at opaque bounces
- Row-parallel rendering on a thread pool
- Reproducible sampling from a single seed
- Gamma-2 tone mapping and 8-bit quantization
"""

from __future__ import annotations
import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Callable

import numpy as np

from .vec3 import Color
from .ray import Ray
from .interval import Interval
from .camera import Camera, Resolution
from .materials import Transparency
from .scene import Scene

logger = logging.getLogger(__name__)

QUANTIZE_RANGE = Interval(0.0, 0.999)


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 800
    height: int = 600
    samples_per_pixel: int = 100
    max_bounces: int = 50
    num_threads: int = 0  # 0 = auto-detect
    seed: Optional[int] = None

    def __post_init__(self):
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_bounces < 0:
            raise ValueError(f"max_bounces must be non-negative, got {self.max_bounces}")
        if self.num_threads < 0:
            raise ValueError(f"num_threads must be non-negative, got {self.num_threads}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4

    @property
    def resolution(self) -> Resolution:
        return Resolution(self.width, self.height)


class Renderer:
    """Path tracing renderer with row-level parallelism."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback receiving the fraction of rows completed (0.0 to 1.0)."""
        self._progress_callback = callback

    def render(self, scene: Scene, camera: Camera) -> np.ndarray:
        """Render the scene to an 8-bit image.

        Args:
            scene: The scene to render
            camera: The camera to render from

        Returns:
            uint8 array of shape (height, width, 3), row 0 at the top
        """
        return self.to_ldr(self.render_hdr(scene, camera))

    def render_hdr(self, scene: Scene, camera: Camera) -> np.ndarray:
        """Render the scene and return averaged linear radiance per pixel.

        Each row draws from its own generator spawned from the settings seed,
        so the result does not depend on how rows are scheduled.
        """
        width = self.settings.width
        height = self.settings.height

        logger.info(
            "Rendering %dx%d, %d spp, %d bounces, %d threads",
            width, height, self.settings.samples_per_pixel,
            self.settings.max_bounces, self.settings.num_threads
        )
        start = time.perf_counter()

        image = np.zeros((height, width, 3), dtype=np.float64)
        row_seeds = np.random.SeedSequence(self.settings.seed).spawn(height)
        write_lock = threading.Lock()
        completed_rows = [0]  # Use list for mutable in closure

        def render_row(y: int) -> None:
            rng = np.random.default_rng(row_seeds[y])
            row = self.render_row(y, scene, camera, rng)

            with write_lock:
                image[y] = row
                completed_rows[0] += 1
                done = completed_rows[0]

            logger.debug("Row %d done (%d/%d)", y, done, height)
            if self._progress_callback:
                self._progress_callback(done / height)

        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                # list() re-raises worker exceptions here
                list(executor.map(render_row, range(height)))
        else:
            for y in range(height):
                render_row(y)

        logger.info("Frame time: %.3fs", time.perf_counter() - start)
        return image

    def render_row(self, y: int, scene: Scene, camera: Camera, rng: np.random.Generator) -> np.ndarray:
        """Render one scan line of linear radiance, shape (width, 3)."""
        row = np.empty((self.settings.width, 3), dtype=np.float64)
        for x in range(self.settings.width):
            row[x] = self.render_pixel(x, y, scene, camera, rng).to_array()
        return row

    def render_pixel(self, x: int, y: int, scene: Scene, camera: Camera, rng: np.random.Generator) -> Color:
        """Average samples_per_pixel independent paths through pixel (x, y)."""
        samples = self.settings.samples_per_pixel
        total = Color(0, 0, 0)

        for _ in range(samples):
            ray = camera.get_ray(x, y, rng)
            total = total + self.trace(ray, scene, camera.depth, self.settings.max_bounces, rng)

        return total / samples

    def trace(
        self,
        ray: Ray,
        scene: Scene,
        depth: Interval,
        max_bounces: int,
        rng: np.random.Generator
    ) -> Color:
        """Compute the radiance carried back along a ray.

        Every bounce contributes multiplicatively, so the path is walked with
        a running throughput instead of recursion.

        Args:
            ray: The ray to trace
            scene: The scene to trace against
            depth: Accepted range of hit distances
            max_bounces: Bounce budget; exhausting it yields black
            rng: Random source for scattering and light sampling

        Returns:
            The estimated radiance for this path
        """
        throughput = Color(1, 1, 1)

        for _ in range(max_bounces):
            hit = scene.hit(ray, depth)
            if hit is None:
                return throughput * scene.sky_color(ray)

            scatter = hit.material.scatter(ray, hit, rng)
            if scatter is None:
                return throughput * hit.material.emitted()

            throughput = throughput * scatter.attenuation
            if hit.material.transparency is Transparency.OPAQUE:
                throughput = throughput * scene.shadow_ray(hit, depth, rng)

            ray = scatter.scattered_ray

        return Color(0, 0, 0)

    @staticmethod
    def to_gamma(hdr_image: np.ndarray) -> np.ndarray:
        """Gamma-2 correction: per-channel square root of linear radiance."""
        return np.sqrt(np.clip(hdr_image, 0, None))

    @staticmethod
    def quantize(image: np.ndarray) -> np.ndarray:
        """Map [0, 1) floats to 8-bit channels without ever reaching 256."""
        clamped = np.clip(image, QUANTIZE_RANGE.min, QUANTIZE_RANGE.max)
        return (clamped * 256).astype(np.uint8)

    def to_ldr(self, hdr_image: np.ndarray) -> np.ndarray:
        """Convert linear radiance to a gamma-corrected 8-bit image."""
        return self.quantize(self.to_gamma(hdr_image))

    def save_image(self, image: np.ndarray, filename: str) -> None:
        """Save image to file.

        Args:
            image: Image array (linear float or 8-bit)
            filename: Output filename (extension determines format)
        """
        from PIL import Image as PILImage

        if image.dtype != np.uint8:
            image = self.to_ldr(image)

        PILImage.fromarray(image).save(filename)
        logger.info("Saved %s", filename)
