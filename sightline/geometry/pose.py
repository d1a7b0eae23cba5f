"""
Camera pose geometry.

images.txt stores the world-to-camera extrinsic (R, t):
    x_cam = R @ x_world + t
so the camera centre in world coordinates is C = -R^T @ t and the camera
look axis (-Z in camera coordinates) maps to R^T @ (0, 0, -1).

Everything returned by camera_pose() is in reconstruction space. Use
scene_position() / scene_forward() when handing values to the scene.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from sightline.errors import DegeneratePoseError
from sightline.geometry.basis import COLMAP_TO_SCENE, SceneBasis
from sightline.geometry.rotation import quaternion_to_rotation_matrix
from sightline.poses.records import CameraPoseRecord

CAMERA_LOOK_AXIS = np.array([0.0, 0.0, -1.0])


@dataclass(frozen=True)
class CameraPose:
    """World-space camera centre and look direction for one frame."""

    position: np.ndarray  # (3,) camera centre C
    forward: np.ndarray  # (3,) unit look direction
    rotation: np.ndarray  # (3, 3) world-to-camera R


def camera_pose(record: CameraPoseRecord) -> CameraPose:
    """Decode a pose record into camera centre and forward direction."""
    R = quaternion_to_rotation_matrix(*record.quaternion)
    Rt = R.T

    position = -Rt @ record.translation

    forward = Rt @ CAMERA_LOOK_AXIS
    norm = float(np.linalg.norm(forward))
    if norm < 1e-12:
        raise DegeneratePoseError(f"zero-length look axis for image {record.image_id}")
    forward = forward / norm

    return CameraPose(position=position, forward=forward, rotation=R)


def scene_position(record: CameraPoseRecord, basis: SceneBasis = COLMAP_TO_SCENE) -> np.ndarray:
    """Agent target position for *record* in scene space."""
    return basis.position_to_scene(camera_pose(record).position)


def scene_forward(record: CameraPoseRecord, basis: SceneBasis = COLMAP_TO_SCENE) -> np.ndarray:
    """Camera look direction for *record* in scene space."""
    return basis.direction_to_scene(camera_pose(record).forward)
