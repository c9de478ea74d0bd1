#!/usr/bin/env python3
"""
PathForge - A Python Monte Carlo Path Tracer

Demo entry point: builds a built-in scene, renders it and writes a PNG.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from pathforge.vec3 import Color, Point3, Vec3
from pathforge.interval import Interval
from pathforge.camera import Camera
from pathforge.primitives import Sphere, Plane
from pathforge.materials import Lambertian, Metal, Dielectric, Emissive
from pathforge.lights import RadialLight
from pathforge.scene import Scene, SkyGradient
from pathforge.renderer import Renderer, RenderSettings


def create_demo_scene() -> Scene:
    """Ground sphere with diffuse, metal and glass spheres under a sky."""
    scene = Scene(sky=SkyGradient(horizon=Color(1.0, 1.0, 1.0), zenith=Color(0.2, 0.7, 1.0)))

    # Ground
    scene.add(Sphere(Point3(0, -100, 0), 100, Lambertian(Color(0.2, 0.2, 0.3))))

    scene.add(Sphere(Point3(0, 1, -1), 1.0, Lambertian(Color(1.0, 0.0, 0.0))))
    scene.add(Sphere(Point3(2, 1, -1), 0.75, Metal(Color(0.7, 0.5, 1.0), 0.05)))
    scene.add(Sphere(Point3(-2, 1, -1), 0.75, Metal(Color(0.8, 1.0, 0.2), 0.4)))
    scene.add(Sphere(Point3(0, 0.5, 1), 0.5, Dielectric(1.5, Color(0.9, 0.95, 1.0))))

    scene.add_light(RadialLight(Point3(2, 6, 3), Color(1.0, 0.95, 0.9), 1.0, 40.0))

    return scene


def create_studio_scene() -> Scene:
    """Matte floor with colored, glass and metal spheres under a radial light.

    Nothing stands above the light, since geometry beyond a light still
    blocks its shadow rays.
    """
    scene = Scene(sky=SkyGradient(horizon=Color(0.05, 0.05, 0.05), zenith=Color(0.25, 0.25, 0.3)))

    scene.add(Plane(Point3(0, 0, 0), Vec3(0, 1, 0), Lambertian(Color(0.73, 0.73, 0.73))))

    scene.add(Sphere(Point3(-3, 1, -2), 1.0, Lambertian(Color(0.65, 0.05, 0.05))))
    scene.add(Sphere(Point3(3, 1, -2), 1.0, Lambertian(Color(0.12, 0.45, 0.15))))
    scene.add(Sphere(Point3(0, 1.5, -3), 1.5, Dielectric(1.5)))
    scene.add(Sphere(Point3(1, 1, 1), 1.0, Metal(Color(0.8, 0.8, 0.8), 0.1)))
    scene.add(Sphere(Point3(-1, 0.4, 2.5), 0.4, Emissive(Color(1.0, 0.8, 0.5), 8.0)))

    scene.add_light(RadialLight(Point3(0, 9, 0), Color(1, 1, 1), 0.5, 60.0))

    return scene


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='PathForge - A Python Monte Carlo Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene demo --output render.png
  python main.py --width 640 --height 360 --samples 64 --seed 7 --output render.png
  python main.py --scene studio --samples 256 --output studio.png
        '''
    )

    parser.add_argument('--width', type=int, default=320, help='Image width (default: 320)')
    parser.add_argument('--height', type=int, default=180, help='Image height (default: 180)')
    parser.add_argument('--samples', type=int, default=32, help='Samples per pixel (default: 32)')
    parser.add_argument('--bounces', type=int, default=10, help='Max bounces per path (default: 10)')
    parser.add_argument('--threads', type=int, default=0, help='Number of threads (0=auto)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for a reproducible render')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--scene', type=str, default='demo', choices=['demo', 'studio'],
                        help='Scene to render (default: demo)')
    parser.add_argument('--verbose', action='store_true', help='Log per-row progress')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    try:
        settings = RenderSettings(
            width=args.width,
            height=args.height,
            samples_per_pixel=args.samples,
            max_bounces=args.bounces,
            num_threads=args.threads,
            seed=args.seed
        )
    except ValueError as e:
        parser.error(str(e))

    print(f"Creating scene: {args.scene}")
    if args.scene == 'studio':
        scene = create_studio_scene()
        camera = Camera(
            position=Point3(0, 3, 12),
            look_at=Point3(0, 1, 0),
            resolution=settings.resolution,
            vfov=40,
            depth=Interval(0.001, 100.0)
        )
    else:
        scene = create_demo_scene()
        camera = Camera(
            position=Point3(0, 1, 4),
            look_at=Point3(0, 1, -1),
            resolution=settings.resolution,
            vfov=60,
            defocus_angle=0.6,
            depth=Interval(0.001, 100.0)
        )

    print(f"  Objects in scene: {len(scene)}")

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    start_time = time.time()
    image = renderer.render(scene, camera)
    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Paths per second: {(settings.width * settings.height * settings.samples_per_pixel) / elapsed:.0f}")

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    renderer.save_image(image, args.output)

    return 0


if __name__ == '__main__':
    sys.exit(main())
