"""Tests for material system."""

import pytest
import math

from pathforge.vec3 import Vec3, Point3, Color
from pathforge.ray import Ray
from pathforge.shapes import HitRecord
from pathforge.materials import (
    Lambertian, Metal, Dielectric, ScatterResult, reflect, refract, reflectance
)


def make_hit(material, normal=Vec3(0, 1, 0), point=Point3(0, 0, 0), front_face=True):
    return HitRecord(point=point, normal=normal, t=1.0, front_face=front_face, material=material)


class TestReflectRefract:
    """Test the reflection and refraction helpers."""

    def test_reflect(self):
        assert reflect(Vec3(1, -1, 0), Vec3(0, 1, 0)) == Vec3(1, 1, 0)

    @pytest.mark.parametrize("v", [Vec3(1, -1, 0), Vec3(0.3, -2, 0.7), Vec3(-1, -0.1, 4)])
    def test_reflect_mirrors_normal_component(self, v):
        n = Vec3(0, 1, 0)
        r = reflect(v, n)
        assert r.dot(n) == pytest.approx(-v.dot(n))
        # Angle of incidence equals angle of reflection
        assert r.length() == pytest.approx(v.length())

    def test_refract_same_index_is_straight(self):
        uv = Vec3(1, -1, 0).normalize()
        assert refract(uv, Vec3(0, 1, 0), 1.0) == uv

    def test_refract_bends_toward_normal(self):
        uv = Vec3(1, -1, 0).normalize()
        n = Vec3(0, 1, 0)
        out = refract(uv, n, 1.0 / 1.5)
        assert abs(out.length() - 1.0) < 1e-9
        # Entering a denser medium: smaller angle to the normal
        assert -out.dot(n) > -uv.dot(n)

    def test_reflectance_head_on(self):
        assert reflectance(1.0, 1.5) == pytest.approx(0.04)

    def test_reflectance_grazing(self):
        assert reflectance(0.0, 1.5) == pytest.approx(1.0)


class TestLambertian:
    """Test Lambertian diffuse material."""

    def test_scatter_always_succeeds(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 5, 0), Vec3(0, -1, 0))
        for _ in range(100):
            assert mat.scatter(ray_in, make_hit(mat), rng) is not None

    def test_scattered_in_hemisphere(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 5, 0), Vec3(0, -1, 0))
        normal = Vec3(0, 1, 0)
        for _ in range(100):
            result = mat.scatter(ray_in, make_hit(mat, normal), rng)
            assert result.scattered_ray.direction.dot(normal) >= 0

    def test_scatter_origin_is_hit_point(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        point = Point3(1, 2, 3)
        result = mat.scatter(Ray(Point3(0, 5, 0), Vec3(0, -1, 0)), make_hit(mat, point=point), rng)
        assert result.scattered_ray.origin == point

    def test_attenuation_matches_albedo(self, rng):
        albedo = Color(0.8, 0.2, 0.3)
        mat = Lambertian(albedo)
        result = mat.scatter(Ray(Point3(0, 5, 0), Vec3(0, -1, 0)), make_hit(mat), rng)
        assert result.attenuation == albedo

    def test_degenerate_direction_uses_normal(self, fixed_rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        normal = Vec3(0, 1, 0)
        # The sampled unit vector is exactly -normal
        rng = fixed_rng(uniform_values=[[0.0, -0.5, 0.0]])
        result = mat.scatter(Ray(Point3(0, 5, 0), Vec3(0, -1, 0)), make_hit(mat, normal), rng)

        direction = result.scattered_ray.direction
        assert direction == normal
        assert not direction.near_zero()
        assert all(math.isfinite(c) for c in direction)


class TestMetal:
    """Test Metal material."""

    def test_perfect_reflection(self, rng):
        mat = Metal(Color(1, 1, 1), fuzz=0.0)
        ray_in = Ray(Point3(-1, 1, 0), Vec3(1, -1, 0))
        result = mat.scatter(ray_in, make_hit(mat), rng)

        assert result is not None
        expected = Vec3(1, 1, 0).normalize()
        assert result.scattered_ray.direction == expected

    def test_fuzz_clamped(self):
        assert Metal(Color(1, 1, 1), fuzz=2.5).fuzz == 1.0
        assert Metal(Color(1, 1, 1), fuzz=-0.5).fuzz == 0.0
        assert Metal(Color(1, 1, 1), fuzz=0.3).fuzz == 0.3

    def test_fuzzy_reflection_in_hemisphere(self, rng):
        mat = Metal(Color(1, 1, 1), fuzz=0.5)
        ray_in = Ray(Point3(-1, 1, 0), Vec3(1, -1, 0))
        normal = Vec3(0, 1, 0)
        for _ in range(100):
            result = mat.scatter(ray_in, make_hit(mat, normal), rng)
            if result is not None:
                assert result.scattered_ray.direction.dot(normal) > 0

    def test_absorbed_when_fuzz_points_inside(self, fixed_rng):
        mat = Metal(Color(1, 1, 1), fuzz=1.0)
        # Grazing incoming ray, fuzz pushes the reflection below the surface
        ray_in = Ray(Point3(-1, 0.01, 0), Vec3(1, -0.01, 0))
        rng = fixed_rng(uniform_values=[[0.0, -0.5, 0.0]])
        assert mat.scatter(ray_in, make_hit(mat), rng) is None

    def test_attenuation_is_albedo(self, rng):
        albedo = Color(0.9, 0.6, 0.2)
        mat = Metal(albedo)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit(mat), rng)
        assert result.attenuation == albedo


class TestDielectric:
    """Test Dielectric material."""

    def test_always_scatters(self, rng):
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(-1, 1, 0), Vec3(1, -1, 0))
        for _ in range(100):
            assert mat.scatter(ray_in, make_hit(mat), rng) is not None

    def test_attenuation_is_white(self, rng):
        mat = Dielectric(1.5)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit(mat), rng)
        assert result.attenuation == Color(1, 1, 1)

    @pytest.mark.parametrize("front_face", [True, False])
    def test_index_one_passes_straight_through(self, fixed_rng, front_face):
        mat = Dielectric(1.0)
        direction = Vec3(1, -1, 0.5)
        normal = Vec3(0, 1, 0) if front_face else Vec3(0, -1, 0)
        rng = fixed_rng(random_value=0.999)
        hit = make_hit(mat, normal=normal, front_face=front_face)
        if not front_face:
            direction = Vec3(1, 1, 0.5)
        result = mat.scatter(Ray(Point3(0, 0, 0), direction), hit, rng)
        assert result.scattered_ray.direction == direction.normalize()

    def test_total_internal_reflection(self, fixed_rng):
        mat = Dielectric(1.5)
        # Exiting glass at a shallow angle; sin_theta * 1.5 > 1
        direction = Vec3(1, 0.2, 0).normalize()
        normal = Vec3(0, -1, 0)
        rng = fixed_rng(random_value=0.999)
        hit = make_hit(mat, normal=normal, front_face=False)
        result = mat.scatter(Ray(Point3(0, 0, 0), direction), hit, rng)

        assert result.scattered_ray.direction == reflect(direction, normal)

    def test_schlick_reflection_when_draw_is_low(self, fixed_rng):
        mat = Dielectric(1.5)
        direction = Vec3(0, -1, 0)
        rng = fixed_rng(random_value=0.0)
        result = mat.scatter(Ray(Point3(0, 1, 0), direction), make_hit(mat), rng)
        # Head-on reflectance is 0.04 > 0.0: mirror back up
        assert result.scattered_ray.direction == Vec3(0, 1, 0)

    def test_refraction_when_draw_is_high(self, fixed_rng):
        mat = Dielectric(1.5)
        direction = Vec3(0, -1, 0)
        rng = fixed_rng(random_value=0.5)
        result = mat.scatter(Ray(Point3(0, 1, 0), direction), make_hit(mat), rng)
        assert result.scattered_ray.direction == Vec3(0, -1, 0)


class TestScatterResult:
    """Test ScatterResult container."""

    def test_fields(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 1, 0))
        result = ScatterResult(ray, Color(1, 0, 0))
        assert result.scattered_ray is ray
        assert result.attenuation == Color(1, 0, 0)


class TestMaterialValues:
    """Materials are immutable values."""

    def test_frozen(self):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        with pytest.raises(AttributeError):
            mat.albedo = Color(1, 1, 1)

    def test_equality(self):
        assert Dielectric(1.5) == Dielectric(1.5)
        assert Metal(Color(1, 1, 1), 0.2) == Metal(Color(1, 1, 1), 0.2)
