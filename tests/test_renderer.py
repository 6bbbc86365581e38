"""Tests for Renderer class."""

import pytest
import dataclasses
import math
import numpy as np
from PIL import Image

from spherecast.errors import SceneConfigError
from spherecast.renderer import Renderer, RenderSettings
from spherecast.scene_parser import create_default_scene
from spherecast.shapes import Scene, Sphere
from spherecast.vec3 import Point, Vector


def small_settings(**kwargs):
    values = dict(width=20, height=12, screen_distance=10.0)
    values.update(kwargs)
    return RenderSettings(**values)


class TestRenderSettings:
    """Test RenderSettings configuration."""

    def test_default_values(self):
        settings = RenderSettings()
        assert settings.width == 1920
        assert settings.height == 1080
        assert settings.screen_distance == 500.0
        assert settings.observer == Point(0, 0, 0)
        assert settings.light_source == Point(5, 0, 8)
        assert settings.background_color == (50, 50, 50)
        assert settings.max_bounces == 4

    def test_custom_values(self):
        settings = RenderSettings(width=64, height=48, max_bounces=10)
        assert settings.width == 64
        assert settings.height == 48
        assert settings.max_bounces == 10

    def test_background_list_becomes_tuple(self):
        settings = RenderSettings(background_color=[1, 2, 3])
        assert settings.background_color == (1, 2, 3)

    def test_is_frozen(self):
        settings = RenderSettings()
        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.max_bounces = 100

    @pytest.mark.parametrize("kwargs", [
        {"width": 0},
        {"height": -5},
        {"width": 10.5},
        {"max_bounces": 0},
        {"max_bounces": -1},
        {"max_bounces": True},
        {"screen_distance": 0.0},
        {"screen_distance": math.inf},
        {"screen_distance": "5"},
        {"screen_distance": None},
        {"light_source": Point(math.inf, 0, 0)},
        {"light_source": Vector(5, 0, 8)},
        {"observer": Point(0, math.nan, 0)},
        {"background_color": (256, 0, 0)},
        {"background_color": (-1, 0, 0)},
        {"background_color": (0.5, 0, 0)},
        {"background_color": (0, 0)},
        {"background_color": None},
        {"background_color": "abc"},
        {"background_color": 7},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(SceneConfigError):
            RenderSettings(**kwargs)

    def test_replace_revalidates(self):
        with pytest.raises(SceneConfigError):
            dataclasses.replace(RenderSettings(), max_bounces=0)


class TestScreenMapping:
    """Test pixel to space mapping."""

    def test_center_pixel(self):
        settings = RenderSettings()
        assert settings.screen_to_space(960, 540) == Point(0, 0, 500)

    def test_corner_pixel(self):
        settings = RenderSettings()
        assert settings.screen_to_space(0, 0) == Point(-960, -540, 500)

    def test_relative_to_observer(self):
        settings = RenderSettings(observer=Point(1, 2, 3))
        assert settings.screen_to_space(960, 540) == Point(1, 2, 503)

    def test_primary_ray(self):
        renderer = Renderer(RenderSettings())
        ray = renderer.primary_ray(960, 540)
        assert ray.origin == Point(0, 0, 0)
        assert ray.direction == Vector(0, 0, 1)


class TestRenderPixel:
    """Test single-pixel rendering on the default scene."""

    def test_center_pixel_hits_middle_sphere(self):
        renderer = Renderer(RenderSettings())
        # One bounce on sphere 2, lit at 1/sqrt(26)
        assert renderer.render_pixel(create_default_scene(), 960, 540) == (10, 16, 42)

    def test_corner_pixel_is_background(self):
        renderer = Renderer(RenderSettings())
        assert renderer.render_pixel(create_default_scene(), 0, 0) == (50, 50, 50)

    def test_background_is_configurable(self):
        renderer = Renderer(RenderSettings(background_color=(1, 2, 3)))
        assert renderer.render_pixel(create_default_scene(), 0, 0) == (1, 2, 3)


class TestRendererBasic:
    """Test whole-image rendering."""

    def test_render_produces_image(self):
        image = Renderer(small_settings()).render(create_default_scene())
        assert image.shape == (12, 20, 3)
        assert image.dtype == np.uint8

    def test_empty_scene_is_background(self):
        image = Renderer(small_settings(background_color=(7, 8, 9))).render(Scene())
        assert (image == np.array([7, 8, 9], dtype=np.uint8)).all()

    def test_pixels_are_row_major(self):
        settings = small_settings()
        renderer = Renderer(settings)
        scene = create_default_scene()
        image = renderer.render(scene)
        for x, y in [(0, 0), (10, 6), (19, 3), (4, 11)]:
            assert tuple(image[y, x]) == renderer.render_pixel(scene, x, y)

    def test_sphere_is_visible(self):
        image = Renderer(small_settings()).render(create_default_scene())
        assert tuple(image[6, 10]) != (50, 50, 50)
        assert tuple(image[0, 0]) == (50, 50, 50)

    def test_deterministic(self):
        scene = create_default_scene()
        first = Renderer(small_settings()).render(scene)
        second = Renderer(small_settings()).render(scene)
        assert first.tobytes() == second.tobytes()

    def test_light_on_surface_fails_before_tracing(self):
        scene = Scene([Sphere(1, Point(0, 0, 10), 1.0, (255, 255, 255))])
        renderer = Renderer(small_settings(light_source=Point(0, 0, 9)))
        calls = []
        renderer.set_progress_callback(calls.append)
        with pytest.raises(SceneConfigError):
            renderer.render(scene)
        assert calls == []


class TestRendererProgress:
    """Test renderer progress reporting."""

    def test_progress_callback(self):
        renderer = Renderer(small_settings())
        progress_values = []
        renderer.set_progress_callback(progress_values.append)

        renderer.render(Scene())

        assert len(progress_values) == 12
        assert progress_values == sorted(progress_values)
        assert progress_values[-1] == 1.0


class TestSaveImage:
    """Test writing the buffer to disk."""

    def test_png_round_trip(self, tmp_path):
        renderer = Renderer(small_settings())
        image = renderer.render(create_default_scene())
        path = tmp_path / "render.png"

        renderer.save_image(image, str(path))

        with Image.open(path) as saved:
            assert saved.mode == 'RGB'
            assert saved.size == (20, 12)
            assert np.array_equal(np.asarray(saved), image)
