"""Field-of-view boundary rays on the ground plane."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from sightline.errors import DegeneratePoseError, InvalidAngleError
from sightline.geometry.rotation import rotate_about_y

_HORIZONTAL_EPS = 1e-9


@dataclass(frozen=True)
class FieldOfViewBoundaries:
    left: np.ndarray  # (3,) unit, y == 0
    right: np.ndarray  # (3,) unit, y == 0


def validate_half_angle(half_angle_deg: float) -> float:
    """Return *half_angle_deg* as float, or raise InvalidAngleError."""
    half_angle_deg = float(half_angle_deg)
    if not (0.0 < half_angle_deg < 180.0):
        raise InvalidAngleError(half_angle_deg)
    return half_angle_deg


def field_of_view_boundaries(forward: np.ndarray, half_angle_deg: float) -> FieldOfViewBoundaries:
    """Left/right boundary directions of a horizontal field of view.

    The vertical component of *forward* is dropped so both boundaries stay
    parallel to the ground. Left is +half_angle about +Y, right is
    -half_angle.
    """
    half_angle_deg = validate_half_angle(half_angle_deg)

    flat = np.array(forward, dtype=np.float64)
    flat[1] = 0.0
    norm = float(np.linalg.norm(flat))
    if norm < _HORIZONTAL_EPS:
        raise DegeneratePoseError("forward direction has no horizontal component")
    flat /= norm

    angle = math.radians(half_angle_deg)
    left = rotate_about_y(flat, angle)
    right = rotate_about_y(flat, -angle)

    left[1] = 0.0
    right[1] = 0.0
    return FieldOfViewBoundaries(
        left=left / np.linalg.norm(left),
        right=right / np.linalg.norm(right),
    )
