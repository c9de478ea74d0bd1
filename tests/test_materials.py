"""Tests for material system."""

import pytest
import numpy as np

from pathforge.vec3 import Vec3, Point3, Color
from pathforge.ray import Ray
from pathforge.primitives import HitRecord
from pathforge.materials import (
    Lambertian, Metal, Dielectric, Emissive, Transparency
)


def make_hit(material, normal=Vec3(0, 1, 0), front_face=True):
    return HitRecord(t=1.0, point=Point3(0, 0, 0), normal=normal, front_face=front_face, material=material)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


class TestLambertian:
    """Test Lambertian diffuse material."""

    def test_scatter_always_succeeds(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        for _ in range(100):
            assert mat.scatter(ray_in, make_hit(mat), rng) is not None

    def test_scattered_in_hemisphere(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        normal = Vec3(0, 1, 0)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))

        for _ in range(100):
            result = mat.scatter(ray_in, make_hit(mat, normal), rng)
            direction = result.scattered_ray.direction
            assert direction.dot(normal) >= -1e-9
            assert abs(direction.length() - 1.0) < 1e-9

    def test_scatters_from_hit_point(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        hit = HitRecord(t=2.0, point=Point3(1, 2, 3), normal=Vec3(0, 1, 0), front_face=True, material=mat)
        result = mat.scatter(Ray(Point3(1, 4, 3), Vec3(0, -1, 0)), hit, rng)
        assert result.scattered_ray.origin == Point3(1, 2, 3)

    def test_attenuation_matches_albedo(self, rng):
        albedo = Color(0.8, 0.2, 0.3)
        mat = Lambertian(albedo)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit(mat), rng)
        assert result.attenuation == albedo

    def test_degenerate_direction_falls_back_to_normal(self, rng, monkeypatch):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        monkeypatch.setattr(Vec3, 'random_unit_vector', staticmethod(lambda rng: Vec3(0, -1, 0)))

        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit(mat), rng)
        assert result.scattered_ray.direction == Vec3(0, 1, 0)

    def test_no_emission(self):
        assert Lambertian(Color(1, 1, 1)).emitted() == Color(0, 0, 0)

    def test_is_opaque(self):
        assert Lambertian(Color(1, 1, 1)).transparency is Transparency.OPAQUE


class TestMetal:
    """Test Metal material."""

    def test_fuzz_clamped_high(self):
        assert Metal(Color(1, 1, 1), 5.0).fuzz == 1.0

    def test_fuzz_clamped_low(self):
        assert Metal(Color(1, 1, 1), -0.5).fuzz == 0.0

    def test_fuzz_in_range_kept(self):
        assert Metal(Color(1, 1, 1), 0.3).fuzz == 0.3

    def test_perfect_reflection(self, rng):
        mat = Metal(Color(1, 1, 1), 0.0)
        ray_in = Ray(Point3(-1, 1, 0), Vec3(1, -1, 0).normalize())

        result = mat.scatter(ray_in, make_hit(mat), rng)
        assert result.scattered_ray.direction == Vec3(1, 1, 0).normalize()

    def test_rough_metal_adds_fuzz(self, rng):
        mat = Metal(Color(1, 1, 1), 0.5)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))

        directions = [mat.scatter(ray_in, make_hit(mat), rng).scattered_ray.direction for _ in range(50)]
        assert any(abs(d.dot(directions[0]) - 1.0) > 0.01 for d in directions[1:])

    def test_never_absorbs(self, rng):
        """Fuzzed reflections below the surface are still returned."""
        mat = Metal(Color(1, 1, 1), 1.0)
        ray_in = Ray(Point3(-1, 0.1, 0), Vec3(1, -0.1, 0).normalize())

        results = [mat.scatter(ray_in, make_hit(mat), rng) for _ in range(200)]
        assert all(r is not None for r in results)
        assert any(r.scattered_ray.direction.y < 0 for r in results)

    def test_attenuation_is_albedo(self, rng):
        albedo = Color(0.7, 0.6, 0.5)
        mat = Metal(albedo, 0.0)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit(mat), rng)
        assert result.attenuation == albedo


class TestDielectric:
    """Test Dielectric (glass) material."""

    def test_is_transparent(self):
        assert Dielectric(1.5).transparency is Transparency.TRANSPARENT

    def test_default_albedo_is_white(self):
        assert Dielectric(1.5).albedo == Color(1, 1, 1)

    def test_always_scatters(self, rng):
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        for _ in range(100):
            assert mat.scatter(ray_in, make_hit(mat), rng) is not None

    def test_tint(self, rng):
        tint = Color(0.8, 0.9, 1.0)
        mat = Dielectric(1.5, tint)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit(mat), rng)
        assert result.attenuation == tint

    def test_total_internal_reflection(self, rng):
        """Leaving glass at a steep angle always reflects."""
        mat = Dielectric(1.5)
        # sin(theta) = 0.8 > 1 / 1.5
        ray_in = Ray(Point3(-0.8, 0.6, 0), Vec3(0.8, -0.6, 0))
        hit = make_hit(mat, Vec3(0, 1, 0), front_face=False)

        for _ in range(50):
            result = mat.scatter(ray_in, hit, rng)
            assert result.scattered_ray.direction == Vec3(0.8, 0.6, 0)

    def test_normal_incidence_reflect_fraction(self, rng):
        """Schlick gives about 4% reflectance for glass head-on."""
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))

        reflected = 0
        trials = 1000
        for _ in range(trials):
            direction = mat.scatter(ray_in, make_hit(mat), rng).scattered_ray.direction
            if direction.y > 0:
                reflected += 1
            else:
                assert direction == Vec3(0, -1, 0)

        assert 0.01 < reflected / trials < 0.08

    def test_refraction_bends_toward_normal(self, rng):
        mat = Dielectric(1.5)
        incoming = Vec3(1, -1, 0).normalize()
        ray_in = Ray(Point3(-1, 1, 0), incoming)

        refracted = []
        for _ in range(100):
            direction = mat.scatter(ray_in, make_hit(mat), rng).scattered_ray.direction
            if direction.y < 0:
                refracted.append(direction)

        assert len(refracted) > 0
        for d in refracted:
            # Smaller angle to -normal than the incoming ray
            assert -d.y > -incoming.y

    def test_reflectance_limits(self):
        assert abs(Dielectric.reflectance(1.0, 1.0)) < 1e-12
        assert abs(Dielectric.reflectance(0.0, 1.5) - 1.0) < 1e-12
        assert abs(Dielectric.reflectance(1.0, 1 / 1.5) - 0.04) < 1e-9


class TestEmissive:
    """Test Emissive (light) material."""

    def test_no_scatter(self, rng):
        mat = Emissive(Color(1, 1, 1), 1.0)
        assert mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit(mat), rng) is None

    def test_emits_color_times_strength(self):
        mat = Emissive(Color(1, 0.5, 0.2), 2.0)
        assert mat.emitted() == Color(2.0, 1.0, 0.4)

    def test_default_strength(self):
        assert Emissive(Color(1, 1, 1)).emitted() == Color(1, 1, 1)

    def test_is_opaque(self):
        assert Emissive(Color(1, 1, 1)).transparency is Transparency.OPAQUE


class TestMaterialInteractions:
    """Test material behavior in realistic scenarios."""

    def test_multiple_bounces_lose_energy(self, rng):
        mat = Lambertian(Color(0.8, 0.8, 0.8))
        energy = Color(1, 1, 1)
        ray = Ray(Point3(0, 5, 0), Vec3(0, -1, 0))

        for _ in range(10):
            result = mat.scatter(ray, make_hit(mat), rng)
            energy = energy * result.attenuation
            ray = result.scattered_ray

        assert energy.r < 0.11
