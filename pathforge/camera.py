"""
Camera module: primary ray generation and the path tracing loop.

Supports:
- Perspective projection with configurable vertical field of view
- Arbitrary positioning via look-from / look-at / up
- Depth of field (defocus blur)
- Jittered supersampling for antialiasing

Options are set first (all optional); initialize() fills in defaults
and derives the viewport geometry before any ray is generated.
"""

from __future__ import annotations
import logging
import math
import time
from typing import Optional

import numpy as np

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .interval import Interval
from .shapes import Hittable
from .color import ColorSink

logger = logging.getLogger(__name__)

# Lower bound on accepted hit distances; rejects self-intersections
# caused by floating point error at the ray origin ("shadow acne").
HIT_EPSILON = 0.001

DEFAULTS = {
    'aspect_ratio': 1.0,
    'image_width': 100,
    'samples_per_pixel': 10,
    'max_depth': 10,
    'vfov': 90.0,
    'look_from': (0.0, 0.0, -1.0),
    'look_at': (0.0, 0.0, 0.0),
    'vup': (0.0, 1.0, 0.0),
    'defocus_angle': 0.0,
    'focus_dist': 10.0,
}

VECTOR_OPTIONS = ('look_from', 'look_at', 'vup')


class CameraConfigError(ValueError):
    """Invalid camera configuration, detected before rendering starts."""
    pass


class Camera:
    """A camera with perspective projection and depth of field.

    Attributes (options, None until initialize() applies the default):
        aspect_ratio: Ratio of image width over height
        image_width: Rendered image width in pixel count
        samples_per_pixel: Count of random samples for each pixel
        max_depth: Maximum number of ray bounces into scene
        vfov: Vertical view angle (field of view) in degrees
        look_from: Point camera is looking from
        look_at: Point camera is looking at
        vup: Camera-relative "up" direction
        defocus_angle: Variation angle of rays through each pixel, in degrees
        focus_dist: Distance from look_from to the plane of perfect focus
        seed: Seed for the camera's random generator (None = fresh entropy)
    """

    def __init__(self, seed: Optional[int] = None, **options):
        unknown = set(options) - set(DEFAULTS)
        if unknown:
            raise CameraConfigError(f"Unknown camera option(s): {', '.join(sorted(unknown))}")

        self.aspect_ratio: Optional[float] = None
        self.image_width: Optional[int] = None
        self.samples_per_pixel: Optional[int] = None
        self.max_depth: Optional[int] = None
        self.vfov: Optional[float] = None
        self.look_from: Optional[Point3] = None
        self.look_at: Optional[Point3] = None
        self.vup: Optional[Vec3] = None
        self.defocus_angle: Optional[float] = None
        self.focus_dist: Optional[float] = None
        for name, value in options.items():
            setattr(self, name, value)

        self.seed = seed
        self.rng = np.random.default_rng(seed)

        self.image_height = 0
        self.center = Point3()
        self.pixel00_loc = Point3()
        self.pixel_delta_u = Vec3()
        self.pixel_delta_v = Vec3()
        self.u = Vec3()
        self.v = Vec3()
        self.w = Vec3()
        self.defocus_disk_u = Vec3()
        self.defocus_disk_v = Vec3()

    def initialize(self) -> None:
        """Apply defaults and derive the cached viewport geometry.

        Safe to call more than once; call again after changing options.

        Raises:
            CameraConfigError: if the options cannot produce a valid view
        """
        for name, default in DEFAULTS.items():
            if getattr(self, name) is None:
                setattr(self, name, default)
        for name in VECTOR_OPTIONS:
            value = getattr(self, name)
            if not isinstance(value, Vec3):
                setattr(self, name, Vec3(*value))

        self._validate()

        self.image_height = max(1, int(self.image_width / self.aspect_ratio))
        self.center = self.look_from

        # Determine viewport dimensions
        theta = math.radians(self.vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h * self.focus_dist
        viewport_width = viewport_height * (self.image_width / self.image_height)

        # Compute orthonormal camera basis
        self.w = (self.look_from - self.look_at).normalize()  # Points backward from camera
        self.u = self.vup.cross(self.w).normalize()           # Points right
        self.v = self.w.cross(self.u)                         # Points up

        logger.debug("camera basis u=%s v=%s w=%s", self.u, self.v, self.w)

        # Vectors across the horizontal and down the vertical viewport edges
        viewport_u = self.u * viewport_width
        viewport_v = -self.v * viewport_height

        self.pixel_delta_u = viewport_u / self.image_width
        self.pixel_delta_v = viewport_v / self.image_height

        viewport_upper_left = (
            self.center
            - self.w * self.focus_dist
            - viewport_u / 2
            - viewport_v / 2
        )
        logger.debug("viewport upper left %s", viewport_upper_left)
        self.pixel00_loc = viewport_upper_left + (self.pixel_delta_u + self.pixel_delta_v) * 0.5

        defocus_radius = self.focus_dist * math.tan(math.radians(self.defocus_angle / 2))
        self.defocus_disk_u = self.u * defocus_radius
        self.defocus_disk_v = self.v * defocus_radius

    def _validate(self) -> None:
        if self.image_width < 1:
            raise CameraConfigError(f"image_width must be at least 1, got {self.image_width}")
        if self.samples_per_pixel < 1:
            raise CameraConfigError(f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise CameraConfigError(f"max_depth must not be negative, got {self.max_depth}")
        if self.aspect_ratio <= 0:
            raise CameraConfigError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.focus_dist <= 0:
            raise CameraConfigError(f"focus_dist must be positive, got {self.focus_dist}")
        if not 0 < self.vfov < 180:
            raise CameraConfigError(f"vfov must be between 0 and 180 degrees, got {self.vfov}")

        view = self.look_from - self.look_at
        if view.length_squared() == 0:
            raise CameraConfigError("look_from and look_at must be different points")
        if self.vup.cross(view).length_squared() == 0:
            raise CameraConfigError("vup must not be parallel to the viewing direction")

    def get_ray(self, i: int, j: int) -> Ray:
        """Generate a randomly sampled ray for pixel (i, j).

        Args:
            i: Column, 0 at the left edge
            j: Row, 0 at the top edge

        Returns:
            A ray from the camera (or the defocus disk) through a random
            point inside the pixel's footprint
        """
        pixel_center = self.pixel00_loc + self.pixel_delta_u * i + self.pixel_delta_v * j
        pixel_sample = pixel_center + self.pixel_sample_square()

        if self.defocus_angle <= 0:
            ray_origin = self.center
        else:
            ray_origin = self.defocus_disk_sample()

        return Ray(ray_origin, pixel_sample - ray_origin)

    def pixel_sample_square(self) -> Vec3:
        """Random offset within the square surrounding a pixel center."""
        px = -0.5 + self.rng.random()
        py = -0.5 + self.rng.random()
        return self.pixel_delta_u * px + self.pixel_delta_v * py

    def defocus_disk_sample(self) -> Point3:
        """Random point on the camera defocus disk."""
        p = Vec3.random_in_unit_disk(self.rng)
        return self.center + self.defocus_disk_u * p.x + self.defocus_disk_v * p.y

    @staticmethod
    def sky_color(ray: Ray) -> Color:
        """Background: white blended into light blue by ray direction height."""
        unit_direction = ray.direction.normalize()
        a = 0.5 * (unit_direction.y + 1.0)
        return Color(1.0, 1.0, 1.0) * (1.0 - a) + Color(0.5, 0.7, 1.0) * a

    def ray_color(self, ray: Ray, depth: int, world: Hittable) -> Color:
        """Compute the color carried back along a ray.

        Follows the scattered path bounce by bounce, multiplying the
        attenuation of every surface, until the path escapes to the sky,
        is absorbed, or runs out of bounces.

        Args:
            ray: The ray to trace
            world: The scene to trace against
            depth: Remaining bounce budget

        Returns:
            The computed color for this ray
        """
        throughput = Color(1.0, 1.0, 1.0)
        ray_t = Interval(HIT_EPSILON, float('inf'))

        for _ in range(depth):
            rec = world.hit(ray, ray_t)
            if rec is None:
                return throughput * self.sky_color(ray)

            result = rec.material.scatter(ray, rec, self.rng)
            if result is None:
                return Color(0, 0, 0)

            throughput = throughput * result.attenuation
            ray = result.scattered_ray

        # Bounce limit exceeded, no more light is gathered
        return Color(0, 0, 0)

    def render(self, world: Hittable, sink: ColorSink) -> None:
        """Render the world, streaming pixels to sink in scanline order.

        Args:
            world: The scene to render
            sink: Receives each pixel's summed color and the sample count
        """
        self.initialize()

        start = time.perf_counter()
        sink.begin(self.image_width, self.image_height)
        for j in range(self.image_height):
            logger.info("Scanlines remaining: %d", self.image_height - j)
            for i in range(self.image_width):
                pixel_color = Color(0, 0, 0)
                for _ in range(self.samples_per_pixel):
                    ray = self.get_ray(i, j)
                    pixel_color += self.ray_color(ray, self.max_depth, world)
                sink.write_color(pixel_color, self.samples_per_pixel)
        sink.finish()

        elapsed = time.perf_counter() - start
        logger.info("Done in %.3fs.", elapsed)

    def __repr__(self) -> str:
        return f"Camera(look_from={self.look_from}, look_at={self.look_at}, vfov={self.vfov})"
