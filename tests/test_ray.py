"""Tests for Ray class."""

import pytest
from spherecast.vec3 import Vector, Point
from spherecast.ray import Ray


class TestRayCreation:
    """Test Ray construction."""

    def test_stores_origin_and_direction(self):
        origin = Point(1, 2, 3)
        direction = Vector(0, 0, 2).unit()
        ray = Ray(origin, direction)
        assert ray.origin == origin
        assert ray.direction == Vector(0, 0, 1)

    def test_rejects_unnormalized_direction(self):
        with pytest.raises(TypeError):
            Ray(Point(0, 0, 0), Vector(0, 0, 2))


class TestRayAt:
    """Test Ray.at() method."""

    def test_at_zero(self):
        origin = Point(1, 2, 3)
        ray = Ray(origin, Vector(1, 0, 0).unit())
        assert ray.at(0) == origin

    def test_at_distance(self):
        ray = Ray(Point(0, 0, 0), Vector(0, 3, 4).unit())
        point = ray.at(5)
        assert isinstance(point, Point)
        assert point == Point(0, 3, 4)

    def test_repr(self):
        s = repr(Ray(Point(1, 2, 3), Vector(0, 1, 0).unit()))
        assert "Ray" in s
        assert "origin" in s
        assert "direction" in s
