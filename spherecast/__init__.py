"""
SphereCast - A Python Sphere Ray Tracer

Renders a scene of diffuse, mirror-like spheres with:
- One ray per pixel from a fixed observer
- Nearest-hit resolution with last-sphere exclusion
- Mirror bounces capped at a configurable count
- Lambertian shading from a single point light
"""

__version__ = "0.1.0"
__author__ = "SphereCast Team"

from .vec3 import Vector, Point, UnitVector, x_reflexion
from .ray import Ray
from .errors import SceneConfigError
from .shapes import Sphere, Scene, Collision, first_collision
from .tracer import (
    Color, RayState, bounce, shade, add_color, to_color,
    step, trace_pixel, pixel_color
)
from .renderer import Renderer, RenderSettings, DEFAULT_MAX_BOUNCES
from .scene_parser import (
    SceneParser, SceneParseError, create_default_scene, load_scene, parse_scene
)
