"""
Materials and their scattering models.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction)

A material answers one question: given an incoming ray and the hit it
produced, does light continue along a new ray, and tinted by what?
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray

if TYPE_CHECKING:
    from .shapes import HitRecord


@dataclass
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color


def reflect(v: Vec3, n: Vec3) -> Vec3:
    """Mirror v about the plane with unit normal n."""
    return v - n * (2 * v.dot(n))


def refract(uv: Vec3, n: Vec3, etai_over_etat: float) -> Vec3:
    """Refract unit vector uv through a surface with unit normal n (Snell's law).

    The refracted ray is split into components perpendicular and parallel
    to n. Callers must rule out total internal reflection beforehand.
    """
    cos_theta = min(-uv.dot(n), 1.0)
    r_out_perp = (uv + n * cos_theta) * etai_over_etat
    r_out_parallel = n * -math.sqrt(abs(1.0 - r_out_perp.length_squared()))
    return r_out_perp + r_out_parallel


def reflectance(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation for reflectance."""
    r0 = (1 - ref_idx) / (1 + ref_idx)
    r0 = r0 * r0
    return r0 + (1 - r0) * pow(1 - cosine, 5)


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, rec: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            rec: The hit record produced by the surface
            rng: Random source for stochastic sampling

        Returns:
            ScatterResult if ray scatters, None if absorbed
        """
        pass


@dataclass(frozen=True)
class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""
    albedo: Color

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        scatter_direction = rec.normal + Vec3.random_unit_vector(rng)

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = rec.normal

        return ScatterResult(
            scattered_ray=Ray(rec.point, scatter_direction),
            attenuation=self.albedo
        )


@dataclass(frozen=True)
class Metal(Material):
    """Metallic material with specular reflection.

    Attributes:
        albedo: The reflection color
        fuzz: Reflection roughness, clamped to [0, 1] (0 = perfect mirror)
    """
    albedo: Color
    fuzz: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'fuzz', max(0.0, min(1.0, self.fuzz)))

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        reflected = reflect(ray_in.direction.normalize(), rec.normal)
        if self.fuzz > 0:
            reflected = reflected + Vec3.random_unit_vector(rng) * self.fuzz

        # Only scatter if reflection is in the correct hemisphere
        if reflected.dot(rec.normal) > 0:
            return ScatterResult(
                scattered_ray=Ray(rec.point, reflected),
                attenuation=self.albedo
            )
        return None


@dataclass(frozen=True)
class Dielectric(Material):
    """Dielectric (glass-like) material with refraction.

    Attributes:
        refractive_index: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)
    """
    refractive_index: float = 1.5

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        attenuation = Color(1.0, 1.0, 1.0)

        # Determine refraction ratio based on whether we're entering or exiting
        refraction_ratio = 1.0 / self.refractive_index if rec.front_face else self.refractive_index

        unit_direction = ray_in.direction.normalize()
        cos_theta = min(-unit_direction.dot(rec.normal), 1.0)
        sin_theta = math.sqrt(1.0 - cos_theta * cos_theta)

        cannot_refract = refraction_ratio * sin_theta > 1.0

        if cannot_refract or reflectance(cos_theta, refraction_ratio) > rng.random():
            direction = reflect(unit_direction, rec.normal)
        else:
            direction = refract(unit_direction, rec.normal, refraction_ratio)

        return ScatterResult(
            scattered_ray=Ray(rec.point, direction),
            attenuation=attenuation
        )
