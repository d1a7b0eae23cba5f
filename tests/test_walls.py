"""Tests for wall geometry and ray/wall intersection."""

import math

import numpy as np
import pytest

from sightline.geometry.fov import field_of_view_boundaries
from sightline.geometry.walls import (
    DEFAULT_WALL_CORNERS,
    WallSegment,
    WallSet,
    default_walls,
    intersect_field_of_view,
    nearest_intersection,
    ray_line_parameter,
)

ORIGIN = np.zeros(3)


def _on_supporting_line(point, wall, tol=1e-9):
    return abs(float(np.dot(wall.normal, point - wall.start))) < tol


class TestWallSegment:
    def test_normal_is_horizontal_and_perpendicular(self):
        wall = WallSegment(start=(0.0, 0.0, 0.0), end=(3.0, 0.0, 4.0))
        np.testing.assert_allclose(wall.direction, [0.6, 0.0, 0.8])
        np.testing.assert_allclose(wall.normal, [-0.8, 0.0, 0.6])
        assert wall.length == pytest.approx(5.0)

    def test_points_are_read_only(self):
        wall = WallSegment(start=(0.0, 0.0, 0.0), end=(1.0, 0.0, 0.0))
        with pytest.raises(ValueError):
            wall.start[0] = 5.0

    def test_zero_length_rejected(self):
        with pytest.raises(ValueError, match="zero horizontal length"):
            WallSegment(start=(1.0, 0.0, 1.0), end=(1.0, 3.0, 1.0))

    def test_bad_shape_rejected(self):
        with pytest.raises(ValueError, match="3D point"):
            WallSegment(start=(0.0, 0.0), end=(1.0, 0.0, 0.0))

    def test_to_dict(self):
        wall = WallSegment(start=(0.0, 0.0, 0.0), end=(1.0, 0.0, 2.0))
        assert wall.to_dict() == {"start": [0.0, 0.0, 0.0], "end": [1.0, 0.0, 2.0]}


class TestWallSet:
    def test_default_polygon_is_closed(self):
        walls = default_walls()
        assert len(walls) == len(DEFAULT_WALL_CORNERS) == 6
        for a, b in zip(walls, list(walls[1:]) + [walls[0]]):
            np.testing.assert_array_equal(a.end, b.start)

    def test_dict_round_trip(self):
        walls = default_walls()
        again = WallSet.from_dicts(walls.to_dicts())
        for a, b in zip(walls, again):
            np.testing.assert_array_equal(a.start, b.start)
            np.testing.assert_array_equal(a.end, b.end)

    def test_from_dicts_missing_key(self):
        with pytest.raises(KeyError):
            WallSet.from_dicts([{"start": [0, 0, 0]}])


class TestNearestIntersection:
    def test_straight_ahead(self):
        wall = WallSegment(start=(-5.0, 0.0, -3.0), end=(5.0, 0.0, -3.0))
        hit = nearest_intersection(ORIGIN, np.array([0.0, 0.0, -1.0]), [wall])
        np.testing.assert_allclose(hit, [0.0, 0.0, -3.0])

    def test_parallel_ray_ignored(self):
        wall = WallSegment(start=(-5.0, 0.0, -3.0), end=(5.0, 0.0, -3.0))
        assert ray_line_parameter(ORIGIN, np.array([1.0, 0.0, 0.0]), wall) is None
        assert nearest_intersection(ORIGIN, np.array([1.0, 0.0, 0.0]), [wall]) is None

    def test_wall_behind_ignored(self):
        wall = WallSegment(start=(-5.0, 0.0, 3.0), end=(5.0, 0.0, 3.0))
        assert nearest_intersection(ORIGIN, np.array([0.0, 0.0, -1.0]), [wall]) is None

    def test_no_walls(self):
        assert nearest_intersection(ORIGIN, np.array([0.0, 0.0, -1.0]), []) is None

    def test_nearest_wins(self):
        far = WallSegment(start=(-5.0, 0.0, -8.0), end=(5.0, 0.0, -8.0))
        near = WallSegment(start=(-5.0, 0.0, -2.0), end=(5.0, 0.0, -2.0))
        hit = nearest_intersection(ORIGIN, np.array([0.0, 0.0, -1.0]), [far, near])
        np.testing.assert_allclose(hit, [0.0, 0.0, -2.0])

    def test_equal_distance_first_wall_wins(self):
        # Both walls lie on the same line; first one in order is reported
        a = WallSegment(start=(-5.0, 0.0, -2.0), end=(5.0, 0.0, -2.0))
        b = WallSegment(start=(5.0, 0.0, -2.0), end=(-5.0, 0.0, -2.0))
        direction = np.array([0.0, 0.0, -1.0])
        hit_ab = nearest_intersection(ORIGIN, direction, [a, b])
        hit_ba = nearest_intersection(ORIGIN, direction, [b, a])
        np.testing.assert_allclose(hit_ab, hit_ba)

    def test_hit_beyond_segment_end_counts(self):
        """Walls are infinite lines: extent is not checked."""
        short = WallSegment(start=(10.0, 0.0, -3.0), end=(11.0, 0.0, -3.0))
        hit = nearest_intersection(ORIGIN, np.array([0.0, 0.0, -1.0]), [short])
        np.testing.assert_allclose(hit, [0.0, 0.0, -3.0])

    def test_deterministic(self):
        walls = default_walls()
        direction = np.array([0.3, 0.0, -0.9])
        direction /= np.linalg.norm(direction)
        first = nearest_intersection(ORIGIN, direction, walls)
        for _ in range(5):
            np.testing.assert_array_equal(nearest_intersection(ORIGIN, direction, walls), first)


class TestFieldOfViewQuery:
    def test_default_scene_from_origin(self):
        walls = default_walls()
        boundaries = field_of_view_boundaries(np.array([0.0, 0.0, -1.0]), 30.0)
        result = intersect_field_of_view(ORIGIN, boundaries, walls)

        assert result.left_hit is not None
        assert result.right_hit is not None
        for hit in (result.left_hit, result.right_hit):
            assert any(_on_supporting_line(hit, w) for w in walls)
            assert hit[1] == pytest.approx(0.0)

        np.testing.assert_allclose(result.left_hit, [-1.073817, 0.0, -1.859906], atol=1e-5)
        np.testing.assert_allclose(result.right_hit, [3.104491, 0.0, -5.377136], atol=1e-5)
        assert _on_supporting_line(result.left_hit, walls[3])
        assert _on_supporting_line(result.right_hit, walls[0])

    def test_hits_lie_along_boundaries(self):
        walls = default_walls()
        boundaries = field_of_view_boundaries(np.array([0.0, 0.0, -1.0]), 30.0)
        result = intersect_field_of_view(ORIGIN, boundaries, walls)
        for hit, ray in ((result.left_hit, boundaries.left), (result.right_hit, boundaries.right)):
            direction = hit / np.linalg.norm(hit)
            np.testing.assert_allclose(direction, ray, atol=1e-9)

    def test_square_room(self, square_room):
        origin = np.array([0.0, 0.0, 5.0])
        boundaries = field_of_view_boundaries(np.array([0.0, 0.0, -1.0]), 30.0)
        result = intersect_field_of_view(origin, boundaries, square_room)
        offset = 15.0 * math.tan(math.radians(30))
        np.testing.assert_allclose(result.left_hit, [-offset, 0.0, -10.0], atol=1e-9)
        np.testing.assert_allclose(result.right_hit, [offset, 0.0, -10.0], atol=1e-9)

    def test_open_side(self):
        wall = WallSegment(start=(0.0, 0.0, -5.0), end=(10.0, 0.0, -5.0))
        walls = WallSet([wall])
        # facing +x: left boundary turns toward -z and reaches the wall line,
        # right boundary turns toward +z and never does
        boundaries = field_of_view_boundaries(np.array([1.0, 0.0, 0.0]), 30.0)
        result = intersect_field_of_view(ORIGIN, boundaries, walls)
        assert result.right_hit is None
        np.testing.assert_allclose(result.left_hit, [5.0 / math.tan(math.radians(30)), 0.0, -5.0])
