"""Record types decoded from COLMAP text models.

Quaternion ordering follows COLMAP: (qw, qx, qy, qz). Translations are the
world-to-camera translation stored in images.txt, not camera centres.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class CameraPoseRecord:
    """One camera pose line from images.txt."""

    image_id: int
    qw: float
    qx: float
    qy: float
    qz: float
    tx: float
    ty: float
    tz: float
    line_number: int = 0  # 1-based line in the source text
    camera_id: Optional[int] = None
    name: Optional[str] = None

    @property
    def quaternion(self) -> tuple[float, float, float, float]:
        return (self.qw, self.qx, self.qy, self.qz)

    @property
    def translation(self) -> np.ndarray:
        return np.array([self.tx, self.ty, self.tz], dtype=np.float64)


# Camera models whose first parameter is a single shared focal length.
SINGLE_FOCAL_MODELS = frozenset(
    {
        "SIMPLE_PINHOLE",
        "SIMPLE_RADIAL",
        "RADIAL",
        "SIMPLE_RADIAL_FISHEYE",
        "RADIAL_FISHEYE",
    }
)


@dataclass(frozen=True)
class CameraIntrinsics:
    """One camera line from cameras.txt."""

    camera_id: int
    model: str
    width: int
    height: int
    fx: float
    fy: float
    cx: float
    cy: float
    params: tuple[float, ...] = field(default_factory=tuple)

    @property
    def camera_matrix(self) -> np.ndarray:
        """3x3 intrinsic matrix K."""
        return np.array(
            [
                [self.fx, 0.0, self.cx],
                [0.0, self.fy, self.cy],
                [0.0, 0.0, 1.0],
            ],
            dtype=np.float64,
        )


@dataclass(frozen=True)
class Point3DRecord:
    """One reconstructed point from points3D.txt."""

    point_id: int
    x: float
    y: float
    z: float
    rgb: Optional[tuple[int, int, int]] = None
    error: Optional[float] = None

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)
