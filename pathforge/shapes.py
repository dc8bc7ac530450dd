"""
Geometric shapes for the path tracer.

Each shape must implement the Hittable protocol with a `hit` method.
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


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: The unit surface normal at the intersection (always points against ray)
        t: The ray parameter at intersection
        front_face: True if ray hit from outside the object
        material: The material of the surface that was hit (borrowed, not owned)
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool
    material: Material

    def set_face_normal(self, ray: Ray, outward_normal: Vec3) -> None:
        """Set the normal to always point against the ray direction.

        Args:
            ray: The incoming ray
            outward_normal: The geometric normal pointing outward from surface,
                assumed to have unit length
        """
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else -outward_normal


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, ray_t: Interval) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            ray_t: Range of acceptable ray parameters; only hits strictly
                inside it are reported

        Returns:
            HitRecord for the nearest intersection, None otherwise
        """
        pass


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Material):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere (negative flips the normals inward,
                useful for hollow glass)
            material: Material for shading
        """
        self._center = center
        self._radius = radius
        self._material = material

    @property
    def center(self) -> Point3:
        return self._center

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def material(self) -> Material:
        return self._material

    def hit(self, ray: Ray, ray_t: Interval) -> Optional[HitRecord]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation (P-C)·(P-C) = r² where P = ray.at(t)
        expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0.
        Substituting b = 2h removes the factor of two from the roots.
        """
        oc = ray.origin - self._center
        a = ray.direction.length_squared()
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self._radius * self._radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Find the nearest root in the acceptable range
        root = (-half_b - sqrtd) / a
        if not ray_t.surrounds(root):
            root = (-half_b + sqrtd) / a
            if not ray_t.surrounds(root):
                return None

        point = ray.at(root)
        outward_normal = (point - self._center) / self._radius

        hit_record = HitRecord(
            point=point,
            normal=outward_normal,
            t=root,
            front_face=True,
            material=self._material
        )
        hit_record.set_face_normal(ray, outward_normal)

        return hit_record

    def __repr__(self) -> str:
        return f"Sphere(center={self._center}, radius={self._radius})"


class HittableList(Hittable):
    """A collection of hittable objects, searched linearly."""

    def __init__(self, objects: Optional[list[Hittable]] = None):
        self.objects: list[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Add an object to the list."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(self, ray: Ray, ray_t: Interval) -> Optional[HitRecord]:
        """Find the closest intersection among all objects.

        Each object is tested against an interval whose upper bound shrinks
        to the closest hit found so far.
        """
        closest_hit: Optional[HitRecord] = None
        closest_t = ray_t.max

        for obj in self.objects:
            hit_record = obj.hit(ray, ray_t.with_max(closest_t))
            if hit_record is not None:
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self):
        return iter(self.objects)
