"""images.txt writer for synthetic trajectories.

Poses go in as 4x4 camera-to-world transforms (camera placement in the
world). images.txt records the inverse, world-to-camera, which
colmap_extrinsic() computes per frame.

Each image's second line is a single untracked observation rather than an
empty line, so the file survives the decoder's blank-line filtering.

Usage:
    from sightline.poses.writer import circular_trajectory, format_images_txt
    text = format_images_txt(circular_trajectory(120, radius=4.0))
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from sightline.geometry.rotation import rotation_matrix_to_quaternion

logger = logging.getLogger(__name__)

UNTRACKED_OBSERVATION = "0.0 0.0 -1"


def colmap_extrinsic(
    T_world_cam: np.ndarray,
) -> tuple[tuple[float, float, float, float], np.ndarray]:
    """(quaternion, translation) of the world-to-camera inverse of *T_world_cam*."""
    T = np.asarray(T_world_cam, dtype=np.float64)
    R = T[:3, :3].T
    return rotation_matrix_to_quaternion(R), -R @ T[:3, 3]


def look_transform(position: np.ndarray, forward: np.ndarray, up: Sequence[float] = (0.0, 1.0, 0.0)) -> np.ndarray:
    """4x4 T_world_cam for a camera at *position* looking along *forward*.

    The camera looks down its local -Z axis.
    """
    forward = np.asarray(forward, dtype=np.float64)
    forward = forward / np.linalg.norm(forward)
    back = -forward
    x_axis = np.cross(np.asarray(up, dtype=np.float64), back)
    x_axis /= np.linalg.norm(x_axis)
    y_axis = np.cross(back, x_axis)

    T = np.eye(4)
    T[:3, 0] = x_axis
    T[:3, 1] = y_axis
    T[:3, 2] = back
    T[:3, 3] = np.asarray(position, dtype=np.float64)
    return T


def circular_trajectory(
    num_frames: int,
    radius: float = 4.0,
    height: float = 0.0,
    center: Sequence[float] = (0.0, 0.0, 0.0),
    inward: bool = False,
) -> list[np.ndarray]:
    """Camera-to-world poses walking a circle, looking along the tangent.

    With *inward* the camera faces the circle centre instead.
    """
    cx, cy, cz = center
    poses = []
    for i in range(num_frames):
        theta = 2.0 * math.pi * i / max(num_frames, 1)
        position = np.array([cx + radius * math.cos(theta), cy + height, cz + radius * math.sin(theta)])
        if inward:
            forward = np.array([cx, cy + height, cz]) - position
        else:
            forward = np.array([-math.sin(theta), 0.0, math.cos(theta)])
        poses.append(look_transform(position, forward))
    return poses


def format_images_txt(
    camera_poses: list[np.ndarray],
    image_names: Optional[list[str]] = None,
    camera_id: int = 1,
) -> str:
    """Render images.txt text for a list of 4x4 T_world_cam transforms."""
    if image_names is None:
        image_names = [f"frame_{i:05d}.jpg" for i in range(len(camera_poses))]
    if len(image_names) != len(camera_poses):
        raise ValueError(f"{len(image_names)} names for {len(camera_poses)} poses")

    lines = [
        "# Image list with two lines of data per image:",
        "#   IMAGE_ID, QW, QX, QY, QZ, TX, TY, TZ, CAMERA_ID, NAME",
        "#   POINTS2D[] as (X, Y, POINT3D_ID)",
        f"# Number of images: {len(image_names)}",
    ]

    # image ids start at 1
    for image_id, (name, T_world_cam) in enumerate(zip(image_names, camera_poses), start=1):
        quat, t = colmap_extrinsic(T_world_cam)
        values = " ".join(f"{v:.8f}" for v in (*quat, *t.tolist()))
        lines.append(f"{image_id} {values} {camera_id} {name}")
        lines.append(UNTRACKED_OBSERVATION)

    return "\n".join(lines) + "\n"


def export_images_txt(
    output_path: str | Path,
    camera_poses: list[np.ndarray],
    image_names: Optional[list[str]] = None,
    camera_id: int = 1,
) -> Path:
    """Write images.txt for *camera_poses* and return its path."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(format_images_txt(camera_poses, image_names, camera_id))
    logger.info("Exported images.txt with %d images to %s", len(camera_poses), output_path)
    return output_path
