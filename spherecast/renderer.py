"""
Renderer module - maps pixels to rays and fills the image buffer.

Implements:
- Validated render configuration (RenderSettings)
- Pixel to screen-plane mapping
- Row-by-row rendering with progress reporting
- PNG output through Pillow
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple
import numpy as np

from .errors import SceneConfigError
from .ray import Ray
from .shapes import Scene
from .tracer import Color, pixel_color, trace_pixel
from .vec3 import Point, Vector

DEFAULT_MAX_BOUNCES = 4


def _check_point(name: str, value: Point) -> None:
    if not isinstance(value, Point) or not value.is_finite():
        raise SceneConfigError(f"{name} must be a finite Point, got {value!r}")


@dataclass(frozen=True)
class RenderSettings:
    """Configuration for the renderer.

    Validated on construction; use dataclasses.replace() to derive a
    modified copy, which is validated again.
    """
    width: int = 1920
    height: int = 1080
    screen_distance: float = 500.0
    observer: Point = field(default_factory=lambda: Point.ORIGIN)
    light_source: Point = field(default_factory=lambda: Point(5.0, 0.0, 8.0))
    background_color: Color = (50, 50, 50)
    max_bounces: int = DEFAULT_MAX_BOUNCES

    def __post_init__(self):
        for name in ('width', 'height', 'max_bounces'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise SceneConfigError(f"{name} must be a positive integer, got {value!r}")

        distance = self.screen_distance
        if isinstance(distance, bool) or not isinstance(distance, (int, float)):
            raise SceneConfigError(f"screen_distance must be a number, got {distance!r}")
        if not math.isfinite(self.screen_distance) or self.screen_distance <= 0:
            raise SceneConfigError(
                f"screen_distance must be positive, got {self.screen_distance!r}"
            )

        _check_point('observer', self.observer)
        _check_point('light_source', self.light_source)

        if isinstance(self.background_color, (str, bytes)) or not isinstance(
            self.background_color, (tuple, list)
        ):
            raise SceneConfigError(
                f"background_color must be a sequence of 3 bytes, got {self.background_color!r}"
            )
        background = tuple(self.background_color)
        if len(background) != 3:
            raise SceneConfigError(f"background_color must have 3 channels, got {background!r}")
        for channel in background:
            if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
                raise SceneConfigError(f"background_color channel {channel!r} is not a byte")
        object.__setattr__(self, 'background_color', background)

    def screen_to_space(self, x: int, y: int) -> Point:
        """Point of the virtual screen that pixel (x, y) maps to."""
        return self.observer + Vector(
            x - self.width / 2.0,
            y - self.height / 2.0,
            self.screen_distance
        )


class Renderer:
    """Single-ray-per-pixel sphere renderer."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def primary_ray(self, x: int, y: int) -> Ray:
        """Ray from the observer through pixel (x, y)."""
        observer = self.settings.observer
        screen_point = self.settings.screen_to_space(x, y)
        return Ray(observer, observer.to(screen_point).unit())

    def render_pixel(self, scene: Scene, x: int, y: int) -> Color:
        """Color of a single pixel.

        Depends only on the scene, the settings and (x, y).
        """
        state = trace_pixel(
            self.primary_ray(x, y),
            scene,
            self.settings.light_source,
            self.settings.max_bounces
        )
        return pixel_color(state, self.settings.background_color)

    def render(self, scene: Scene) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Args:
            scene: The spheres to render

        Returns:
            uint8 array of shape (height, width, 3); image[y, x] is pixel (x, y)

        Raises:
            SceneConfigError: if the scene does not fit the settings
        """
        scene.check_light_source(self.settings.light_source)

        width = self.settings.width
        height = self.settings.height
        image = np.empty((height, width, 3), dtype=np.uint8)

        for y in range(height):
            for x in range(width):
                image[y, x] = self.render_pixel(scene, x, y)

            if self._progress_callback:
                self._progress_callback((y + 1) / height)

        return image

    def save_image(self, image: np.ndarray, filename: str) -> None:
        """Save the RGB buffer to an image file.

        Args:
            image: uint8 array as returned by render()
            filename: Output filename (extension determines format)
        """
        from PIL import Image as PILImage

        pil_image = PILImage.fromarray(np.ascontiguousarray(image, dtype=np.uint8))
        pil_image.save(filename)
