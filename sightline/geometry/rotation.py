"""Rotation helpers: quaternion <-> matrix and axis-angle rotation.

Quaternion ordering is COLMAP's (qw, qx, qy, qz).
"""

import math

import numpy as np

from sightline.errors import DegeneratePoseError

QUATERNION_EPS = 1e-9

Y_AXIS = np.array([0.0, 1.0, 0.0])


def quaternion_to_rotation_matrix(qw: float, qx: float, qy: float, qz: float) -> np.ndarray:
    """Unit quaternion (w, x, y, z) -> 3x3 rotation matrix.

    The quaternion is renormalized before conversion so text round-off does
    not leak into the matrix. Raises DegeneratePoseError for a near-zero
    quaternion.
    """
    q = np.array([qw, qx, qy, qz], dtype=np.float64)
    norm = float(np.linalg.norm(q))
    if norm < QUATERNION_EPS:
        raise DegeneratePoseError(f"near-zero quaternion {tuple(q.tolist())}")
    w, x, y, z = q / norm
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ],
        dtype=np.float64,
    )


def rotation_matrix_to_quaternion(R: np.ndarray) -> tuple[float, float, float, float]:
    """3x3 rotation matrix -> (qw, qx, qy, qz) with qw >= 0."""
    R = np.asarray(R, dtype=np.float64)
    if R.shape != (3, 3):
        raise ValueError(f"rotation must be 3x3, got shape {R.shape}")

    # 4 * (w^2, x^2, y^2, z^2); divide by the largest component
    squares = np.array(
        [
            1.0 + R[0, 0] + R[1, 1] + R[2, 2],
            1.0 + R[0, 0] - R[1, 1] - R[2, 2],
            1.0 - R[0, 0] + R[1, 1] - R[2, 2],
            1.0 - R[0, 0] - R[1, 1] + R[2, 2],
        ]
    )
    k = int(np.argmax(squares))
    s = 2.0 * math.sqrt(squares[k])

    wx, wy, wz = R[2, 1] - R[1, 2], R[0, 2] - R[2, 0], R[1, 0] - R[0, 1]
    xy, xz, yz = R[0, 1] + R[1, 0], R[0, 2] + R[2, 0], R[1, 2] + R[2, 1]
    q = {
        0: (s / 4, wx / s, wy / s, wz / s),
        1: (wx / s, s / 4, xy / s, xz / s),
        2: (wy / s, xy / s, s / 4, yz / s),
        3: (wz / s, xz / s, yz / s, s / 4),
    }[k]

    q = np.array(q) / np.linalg.norm(q)
    if q[0] < 0:
        q = -q
    qw, qx, qy, qz = (float(v) for v in q)
    return qw, qx, qy, qz


def axis_angle_matrix(axis: np.ndarray, angle_rad: float) -> np.ndarray:
    """Right-handed rotation of *angle_rad* about *axis* (Rodrigues)."""
    axis = np.asarray(axis, dtype=np.float64)
    norm = float(np.linalg.norm(axis))
    if norm < QUATERNION_EPS:
        raise ValueError("rotation axis must be non-zero")
    kx, ky, kz = axis / norm
    K = np.array([[0.0, -kz, ky], [kz, 0.0, -kx], [-ky, kx, 0.0]])
    return np.eye(3) + math.sin(angle_rad) * K + (1.0 - math.cos(angle_rad)) * (K @ K)


def rotate_about_y(vector: np.ndarray, angle_rad: float) -> np.ndarray:
    """Rotate *vector* about the world vertical axis."""
    return axis_angle_matrix(Y_AXIS, angle_rad) @ np.asarray(vector, dtype=np.float64)
