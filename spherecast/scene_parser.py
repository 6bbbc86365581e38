"""
Scene description parser.

Supports a YAML (or JSON) scene description with:
- Render settings
- Observer position
- Light source
- Background color
- Spheres

Example scene file:
```yaml
render:
  width: 1920
  height: 1080
  screen_distance: 500
  max_bounces: 4

camera:
  observer: [0, 0, 0]

light:
  position: [5, 0, 8]

background: [50, 50, 50]

spheres:
  - id: 1
    center: [0, 5, 10]
    radius: 1
    color: [216, 84, 52]

  - id: 2
    center: [0, 0, 10]
    radius: 1
    color: "#3454d8"
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Tuple
import json
import math

import yaml

from .errors import SceneConfigError
from .renderer import RenderSettings
from .shapes import Scene, Sphere
from .vec3 import Point


class SceneParseError(SceneConfigError):
    """Error during scene parsing."""
    pass


def create_default_scene() -> Scene:
    """The three-sphere scene rendered when nothing else is given."""
    return Scene([
        Sphere(1, Point(0.0, 5.0, 10.0), 1.0, (216, 84, 52)),
        Sphere(2, Point(0.0, 0.0, 10.0), 1.0, (52, 84, 216)),
        Sphere(3, Point(5.0, -5.0, 15.0), 5.0, (84, 216, 52)),
    ])


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.spheres: List[Sphere] = []
        self.settings: RenderSettings = None

    def parse_file(self, filepath: str) -> Tuple[Scene, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (scene, settings)
        """
        path = Path(filepath)
        if not path.is_file():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        if path.suffix == '.json':
            try:
                data = json.loads(content)
            except json.JSONDecodeError as exc:
                raise SceneParseError(f"Invalid JSON in {filepath}: {exc}") from exc
        else:
            # YAML is a superset of JSON, so it also covers unknown suffixes
            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as exc:
                raise SceneParseError(f"Invalid YAML in {filepath}: {exc}") from exc

        return self.parse_dict(data if data is not None else {})

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[Scene, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, settings)
        """
        self.spheres = []
        self.settings = None

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene description must be a mapping, got {type(data).__name__}")

        self._parse_settings(data)

        if 'spheres' in data:
            self._parse_spheres(data['spheres'])
            scene = Scene(self.spheres)
        else:
            scene = create_default_scene()

        return scene, self.settings

    def _parse_number(self, value: Any, what: str) -> float:
        if isinstance(value, bool):
            raise SceneParseError(f"{what} must be a number, got {value!r}")
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise SceneParseError(f"{what} must be a number, got {value!r}") from exc
        if not math.isfinite(number):
            raise SceneParseError(f"{what} must be finite, got {value!r}")
        return number

    def _parse_int(self, value: Any, what: str) -> int:
        number = self._parse_number(value, what)
        if not number.is_integer():
            raise SceneParseError(f"{what} must be an integer, got {value!r}")
        return int(number)

    def _parse_point(self, data: Any, what: str) -> Point:
        """Parse a Point from a list or an x/y/z mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"{what} must have 3 components, got {len(data)}")
            coords = data
        elif isinstance(data, dict):
            coords = (data.get('x', 0), data.get('y', 0), data.get('z', 0))
        else:
            raise SceneParseError(f"Cannot parse {what} from: {data!r}")
        return Point(*(self._parse_number(c, what) for c in coords))

    def _parse_color(self, data: Any, what: str) -> Tuple[int, int, int]:
        """Parse a 0-255 color from a list, an r/g/b mapping or a hex string."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"{what} must have 3 components, got {len(data)}")
            channels = data
        elif isinstance(data, dict):
            channels = (data.get('r', 0), data.get('g', 0), data.get('b', 0))
        elif isinstance(data, str):
            hex_color = data[1:] if data.startswith('#') else ''
            if len(hex_color) != 6:
                raise SceneParseError(f"Cannot parse {what} from string: {data}")
            try:
                channels = [int(hex_color[i:i + 2], 16) for i in (0, 2, 4)]
            except ValueError as exc:
                raise SceneParseError(f"Cannot parse {what} from string: {data}") from exc
        else:
            raise SceneParseError(f"Cannot parse {what} from: {data!r}")

        color = tuple(self._parse_int(c, what) for c in channels)
        for channel in color:
            if not 0 <= channel <= 255:
                raise SceneParseError(f"{what} channel {channel} outside [0, 255]")
        return color

    def _parse_spheres(self, spheres_data: Any) -> None:
        """Parse spheres section."""
        if not isinstance(spheres_data, list):
            raise SceneParseError("'spheres' must be a list")

        for index, sphere_data in enumerate(spheres_data, start=1):
            if not isinstance(sphere_data, dict):
                raise SceneParseError(f"Sphere #{index} must be a mapping")
            sphere_id = self._parse_int(sphere_data.get('id', index), f"Sphere #{index} id")
            what = f"Sphere {sphere_id}"

            if 'radius' not in sphere_data:
                raise SceneParseError(f"{what}: missing radius")
            center = self._parse_point(sphere_data.get('center', [0, 0, 0]), f"{what} center")
            radius = self._parse_number(sphere_data['radius'], f"{what} radius")
            color = self._parse_color(sphere_data.get('color', [255, 255, 255]), f"{what} color")

            self.spheres.append(Sphere(sphere_id, center, radius, color))

    def _section(self, data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise SceneParseError(f"'{name}' section must be a mapping")
        return section

    def _parse_settings(self, data: Dict[str, Any]) -> None:
        """Parse render, camera, light and background sections."""
        defaults = RenderSettings()
        render = self._section(data, 'render')
        camera = self._section(data, 'camera')
        light = self._section(data, 'light')

        observer = defaults.observer
        if 'observer' in camera:
            observer = self._parse_point(camera['observer'], 'observer')

        light_source = defaults.light_source
        if 'position' in light:
            light_source = self._parse_point(light['position'], 'light position')

        background = defaults.background_color
        if 'background' in data:
            background = self._parse_color(data['background'], 'background')

        self.settings = RenderSettings(
            width=self._parse_int(render.get('width', defaults.width), 'width'),
            height=self._parse_int(render.get('height', defaults.height), 'height'),
            screen_distance=self._parse_number(
                render.get('screen_distance', defaults.screen_distance), 'screen_distance'
            ),
            observer=observer,
            light_source=light_source,
            background_color=background,
            max_bounces=self._parse_int(
                render.get('max_bounces', defaults.max_bounces), 'max_bounces'
            ),
        )


def load_scene(filepath: str) -> Tuple[Scene, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (scene, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[Scene, RenderSettings]:
    """Convenience function to parse a scene from a dictionary."""
    parser = SceneParser()
    return parser.parse_dict(data)
