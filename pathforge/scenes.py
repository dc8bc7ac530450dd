"""
Built-in scenes.

Each builder takes a random generator (used only by procedurally
populated scenes) and returns a populated HittableList. SCENE_CAMERAS
holds the camera options each scene is meant to be viewed with.
"""

from __future__ import annotations
from typing import Callable, Dict, Any

import numpy as np

from .vec3 import Vec3, Point3, Color
from .shapes import Sphere, HittableList
from .materials import Lambertian, Metal, Dielectric


def single_sphere(rng: np.random.Generator) -> HittableList:
    """One grey diffuse sphere straight ahead of the origin."""
    world = HittableList()
    world.add(Sphere(Point3(0, 0, -1), 0.5, Lambertian(Color(0.5, 0.5, 0.5))))
    return world


def three_spheres(rng: np.random.Generator) -> HittableList:
    """Diffuse, hollow glass, and metal spheres on a large ground sphere."""
    world = HittableList()

    ground = Lambertian(Color(0.8, 0.8, 0.0))
    center = Lambertian(Color(0.1, 0.2, 0.5))
    left = Dielectric(1.5)
    right = Metal(Color(0.8, 0.6, 0.2), 0.0)

    world.add(Sphere(Point3(0.0, -100.5, -1.0), 100.0, ground))
    world.add(Sphere(Point3(0.0, 0.0, -1.0), 0.5, center))
    world.add(Sphere(Point3(-1.0, 0.0, -1.0), 0.5, left))
    # Negative radius flips the normals, making the glass sphere hollow
    world.add(Sphere(Point3(-1.0, 0.0, -1.0), -0.4, left))
    world.add(Sphere(Point3(1.0, 0.0, -1.0), 0.5, right))

    return world


def final(rng: np.random.Generator) -> HittableList:
    """A field of small random spheres around three large ones."""
    world = HittableList()

    ground_material = Lambertian(Color(0.5, 0.5, 0.5))
    world.add(Sphere(Point3(0, -1000, 0), 1000, ground_material))

    clearance = Point3(4, 0.2, 0)
    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            if (center - clearance).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                # diffuse
                albedo = Color.random(rng) * Color.random(rng)
                sphere_material = Lambertian(albedo)
            elif choose_mat < 0.95:
                # metal
                albedo = Color.random(rng) * Color.random(rng)
                fuzz = rng.uniform(0.0, 0.5)
                sphere_material = Metal(albedo, fuzz)
            else:
                # glass
                sphere_material = Dielectric(1.5)
            world.add(Sphere(center, 0.2, sphere_material))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return world


SCENES: Dict[str, Callable[[np.random.Generator], HittableList]] = {
    'single_sphere': single_sphere,
    'three_spheres': three_spheres,
    'final': final,
}

SCENE_CAMERAS: Dict[str, Dict[str, Any]] = {
    'single_sphere': {
        'aspect_ratio': 16.0 / 9.0,
        'image_width': 400,
        'look_from': Point3(0, 0, 0),
        'look_at': Point3(0, 0, -1),
        'focus_dist': 1.0,
    },
    'three_spheres': {
        'aspect_ratio': 16.0 / 9.0,
        'image_width': 400,
        'samples_per_pixel': 100,
        'max_depth': 50,
        'vfov': 20.0,
        'look_from': Point3(-2, 2, 1),
        'look_at': Point3(0, 0, -1),
        'vup': Vec3(0, 1, 0),
        'defocus_angle': 10.0,
        'focus_dist': 3.4,
    },
    'final': {
        'aspect_ratio': 16.0 / 9.0,
        'image_width': 1200,
        'samples_per_pixel': 500,
        'max_depth': 50,
        'vfov': 20.0,
        'look_from': Point3(13, 2, 3),
        'look_at': Point3(0, 0, 0),
        'vup': Vec3(0, 1, 0),
        'defocus_angle': 0.6,
        'focus_dist': 10.0,
    },
}


def build_scene(name: str, rng: np.random.Generator) -> HittableList:
    """Build a named scene.

    Raises:
        KeyError: if no scene has that name
    """
    try:
        builder = SCENES[name]
    except KeyError:
        raise KeyError(f"Unknown scene '{name}'; choose from: {', '.join(sorted(SCENES))}") from None
    return builder(rng)
