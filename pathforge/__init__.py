"""
PathForge - A Python Path Tracing Renderer

Turns a scene of spheres and materials into an image by Monte Carlo
integration of light along camera rays:
- Diffuse (Lambertian), metal, and dielectric materials
- Antialiasing by jittered supersampling
- Depth of field (defocus blur)
- PPM and Pillow-backed image output
"""

__version__ = "0.1.0"
__author__ = "PathForge Team"

from .vec3 import Vec3, Point3, Color
from .interval import Interval, EMPTY, UNIVERSE
from .ray import Ray
from .shapes import HitRecord, Hittable, Sphere, HittableList
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric, reflect, refract, reflectance
from .camera import Camera, CameraConfigError, HIT_EPSILON
from .color import ColorSink, PPMWriter, ImageBuffer, linear_to_gamma, to_rgb_bytes
from .scenes import SCENES, SCENE_CAMERAS, build_scene
from .config import RenderConfig, ConfigError, load_config, parse_config
