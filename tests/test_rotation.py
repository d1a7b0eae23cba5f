"""Tests for quaternion/matrix conversion and axis-angle rotation."""

import math

import numpy as np
import pytest

from sightline.errors import DegeneratePoseError
from sightline.geometry.rotation import (
    axis_angle_matrix,
    quaternion_to_rotation_matrix,
    rotate_about_y,
    rotation_matrix_to_quaternion,
)


def _random_quaternions(n, seed=7):
    rng = np.random.default_rng(seed)
    q = rng.normal(size=(n, 4))
    return q / np.linalg.norm(q, axis=1, keepdims=True)


class TestQuaternionToMatrix:
    def test_identity(self):
        np.testing.assert_allclose(quaternion_to_rotation_matrix(1, 0, 0, 0), np.eye(3))

    def test_half_turn_about_y(self):
        R = quaternion_to_rotation_matrix(0, 0, 1, 0)
        np.testing.assert_allclose(R, np.diag([-1.0, 1.0, -1.0]), atol=1e-12)

    def test_quarter_turn_about_z(self):
        s = math.sqrt(0.5)
        R = quaternion_to_rotation_matrix(s, 0, 0, s)
        np.testing.assert_allclose(R @ [1, 0, 0], [0, 1, 0], atol=1e-12)

    @pytest.mark.parametrize("q", _random_quaternions(20).tolist())
    def test_orthonormal(self, q):
        R = quaternion_to_rotation_matrix(*q)
        np.testing.assert_allclose(R.T @ R, np.eye(3), atol=1e-9)
        assert np.linalg.det(R) == pytest.approx(1.0)

    def test_non_unit_quaternion_renormalized(self):
        np.testing.assert_allclose(
            quaternion_to_rotation_matrix(2, 0, 0, 0), np.eye(3)
        )
        R = quaternion_to_rotation_matrix(0.5, 0.5, 0.5, 0.5)
        np.testing.assert_allclose(
            quaternion_to_rotation_matrix(5, 5, 5, 5), R, atol=1e-12
        )

    def test_zero_quaternion_is_degenerate(self):
        with pytest.raises(DegeneratePoseError):
            quaternion_to_rotation_matrix(0, 0, 0, 0)


class TestMatrixToQuaternion:
    @pytest.mark.parametrize("q", _random_quaternions(20, seed=11).tolist())
    def test_recovers_rotation(self, q):
        R = quaternion_to_rotation_matrix(*q)
        back = rotation_matrix_to_quaternion(R)
        assert back[0] >= 0
        np.testing.assert_allclose(quaternion_to_rotation_matrix(*back), R, atol=1e-9)

    @pytest.mark.parametrize("axis", [0, 1, 2])
    def test_half_turn_branches(self, axis):
        """Trace -1: the largest component is x, y or z, never w."""
        R = -np.eye(3)
        R[axis, axis] = 1.0
        q = rotation_matrix_to_quaternion(R)
        assert q[0] == pytest.approx(0.0, abs=1e-12)
        assert abs(q[axis + 1]) == pytest.approx(1.0)

    def test_bad_shape(self):
        with pytest.raises(ValueError, match="3x3"):
            rotation_matrix_to_quaternion(np.eye(4))


class TestAxisAngle:
    def test_rotate_about_y_positive_turns_minus_z_toward_minus_x(self):
        v = rotate_about_y(np.array([0.0, 0.0, -1.0]), math.radians(90))
        np.testing.assert_allclose(v, [-1.0, 0.0, 0.0], atol=1e-12)

    def test_preserves_length(self):
        v = np.array([3.0, 1.0, -4.0])
        R = axis_angle_matrix(np.array([1.0, 2.0, 3.0]), 0.7)
        assert np.linalg.norm(R @ v) == pytest.approx(np.linalg.norm(v))

    def test_zero_axis(self):
        with pytest.raises(ValueError):
            axis_angle_matrix(np.zeros(3), 1.0)
