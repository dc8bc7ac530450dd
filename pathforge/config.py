"""
Render configuration files.

A configuration names the camera options and the scene, either as one of
the built-in scenes or as an explicit list of materials and spheres.

Example (YAML):
```yaml
camera:
  image_width: 400
  aspect_ratio: 1.7778
  samples_per_pixel: 50
  look_from: [13, 2, 3]
  look_at: [0, 0, 0]
  vfov: 20
  defocus_angle: 0.6
  focus_dist: 10
seed: 7

materials:
  ground:
    type: lambertian
    albedo: [0.5, 0.5, 0.5]
  glass:
    type: dielectric
    refractive_index: 1.5

objects:
  - type: sphere
    center: [0, -1000, 0]
    radius: 1000
    material: ground
```

JSON files use the same structure.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union
import json

import numpy as np
import yaml

from .vec3 import Vec3
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric
from .camera import Camera, DEFAULTS, VECTOR_OPTIONS
from .scenes import SCENES, SCENE_CAMERAS, build_scene


class ConfigError(Exception):
    """Error while reading a render configuration."""
    pass


@dataclass
class RenderConfig:
    """A parsed render configuration.

    Attributes:
        camera_options: Camera options given explicitly (unset ones keep their defaults)
        scene: Name of a built-in scene, if one was chosen
        world: Explicitly described world, if materials/objects were given
        seed: Random seed for the camera and procedural scenes
        output: Output path, if the configuration names one
    """
    camera_options: Dict[str, Any] = field(default_factory=dict)
    scene: Optional[str] = None
    world: Optional[HittableList] = None
    seed: Optional[int] = None
    output: Optional[str] = None

    def build_world(self) -> HittableList:
        """Return the configured world, building a named scene if needed."""
        if self.world is not None:
            return self.world
        return build_scene(self.scene or 'final', np.random.default_rng(self.seed))

    def build_camera(self, **overrides) -> Camera:
        """Create a camera: scene presets, then file options, then overrides."""
        options: Dict[str, Any] = {}
        if self.world is None:
            options.update(SCENE_CAMERAS.get(self.scene or 'final', {}))
        options.update(self.camera_options)
        options.update({k: v for k, v in overrides.items() if v is not None})
        return Camera(seed=self.seed, **options)


def load_config(filepath: Union[str, Path]) -> RenderConfig:
    """Read a configuration from a .json, .yaml or .yml file.

    Raises:
        ConfigError: if the file is missing, unreadable, or invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise ConfigError(f"Config file not found: {filepath}")

    content = path.read_text()
    try:
        if path.suffix in ('.yaml', '.yml'):
            data = yaml.safe_load(content)
        elif path.suffix == '.json':
            data = json.loads(content)
        else:
            raise ConfigError(f"Unsupported config format '{path.suffix}' (use .json, .yaml or .yml)")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot parse {filepath}: {e}") from e

    return parse_config(data or {})


def parse_config(data: Dict[str, Any]) -> RenderConfig:
    """Build a RenderConfig from an already-decoded mapping."""
    if not isinstance(data, dict):
        raise ConfigError("Config root must be a mapping")

    seed = data.get('seed')
    config = RenderConfig(
        camera_options=_parse_camera(data.get('camera', {})),
        seed=None if seed is None else _parse_number(seed, int, 'seed'),
        output=data.get('output'),
    )

    if 'objects' in data:
        if 'scene' in data:
            raise ConfigError("Give either 'scene' or 'objects', not both")
        materials = _parse_materials(data.get('materials', {}))
        config.world = _parse_objects(data['objects'], materials)
    elif 'scene' in data:
        if not isinstance(data['scene'], str) or data['scene'] not in SCENES:
            raise ConfigError(f"Unknown scene '{data['scene']}'; choose from: {', '.join(sorted(SCENES))}")
        config.scene = data['scene']

    return config


def _parse_number(value: Any, kind: type, what: str):
    """Convert value with kind (int or float), reporting failures as ConfigError."""
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{what} must be a number, got {value!r}") from e


def _parse_vec3(data: Any, what: str) -> Vec3:
    """Parse a Vec3 from a 3-element list or an x/y/z mapping."""
    if isinstance(data, (list, tuple)):
        if len(data) != 3:
            raise ConfigError(f"{what} must have 3 components, got {len(data)}")
        return Vec3(*(_parse_number(c, float, what) for c in data))
    elif isinstance(data, dict):
        return Vec3(*(_parse_number(data.get(axis, 0), float, what) for axis in ('x', 'y', 'z')))
    raise ConfigError(f"Cannot parse {what} from: {data!r}")


# Longer spellings accepted in files alongside the camera's attribute names
CAMERA_ALIASES = {
    'vertical_fov_degrees': 'vfov',
    'up': 'vup',
    'defocus_angle_degrees': 'defocus_angle',
}


def _parse_camera(camera_data: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(camera_data, dict):
        raise ConfigError("'camera' must be a mapping")

    options: Dict[str, Any] = {}
    for key, value in camera_data.items():
        name = CAMERA_ALIASES.get(key, key)
        if name not in DEFAULTS:
            raise ConfigError(f"Unknown camera option: {key}")
        if name in options:
            raise ConfigError(f"Camera option '{name}' given more than once")
        if name in VECTOR_OPTIONS:
            options[name] = _parse_vec3(value, key)
        elif name in ('image_width', 'samples_per_pixel', 'max_depth'):
            options[name] = _parse_number(value, int, key)
        else:
            options[name] = _parse_number(value, float, key)
    return options


def _parse_materials(materials_data: Any) -> Dict[str, Material]:
    if not isinstance(materials_data, dict):
        raise ConfigError("'materials' must be a mapping of names to materials")

    materials: Dict[str, Material] = {}
    for name, mat_data in materials_data.items():
        if not isinstance(mat_data, dict):
            raise ConfigError(f"Material '{name}' must be a mapping, got {mat_data!r}")
        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        if mat_type == 'lambertian':
            albedo = _parse_vec3(mat_data.get('albedo', [0.5, 0.5, 0.5]), f"albedo of {name}")
            materials[name] = Lambertian(albedo)
        elif mat_type == 'metal':
            albedo = _parse_vec3(mat_data.get('albedo', [0.8, 0.8, 0.8]), f"albedo of {name}")
            fuzz = _parse_number(mat_data.get('fuzz', 0.0), float, f"fuzz of {name}")
            materials[name] = Metal(albedo, fuzz)
        elif mat_type == 'dielectric':
            refractive_index = _parse_number(
                mat_data.get('refractive_index', 1.5), float, f"refractive_index of {name}"
            )
            materials[name] = Dielectric(refractive_index)
        else:
            raise ConfigError(f"Unknown material type '{mat_type}' for material '{name}'")
    return materials


def _parse_objects(objects_data: Any, materials: Dict[str, Material]) -> HittableList:
    if not isinstance(objects_data, list):
        raise ConfigError("'objects' must be a list")

    world = HittableList()
    for index, obj in enumerate(objects_data):
        if not isinstance(obj, dict):
            raise ConfigError(f"Object {index} must be a mapping, got {obj!r}")
        obj_type = str(obj.get('type', 'sphere')).lower()
        if obj_type != 'sphere':
            raise ConfigError(f"Unknown object type '{obj_type}' (object {index})")

        mat_name = obj.get('material')
        if not isinstance(mat_name, str) or mat_name not in materials:
            raise ConfigError(f"Object {index} references undefined material '{mat_name}'")

        if 'radius' not in obj or 'center' not in obj:
            raise ConfigError(f"Sphere {index} needs both 'center' and 'radius'")
        center = _parse_vec3(obj['center'], f"center of object {index}")
        radius = _parse_number(obj['radius'], float, f"radius of object {index}")
        world.add(Sphere(center, radius, materials[mat_name]))
    return world
