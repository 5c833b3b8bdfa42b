"""
3D math utilities for Anchorpose.

Quaternions are stored as ``[w, x, y, z]`` float64 arrays. Angles returned
by the rotation distance helpers are in degrees, conversions take radians.

``quaternion_angle_deg`` only reports 0 for orientations equal to within
float64 round-off (``1 - |dot| < 1e-12``). A coarser ``1 - 1e-6`` cutoff
would report every angle below about 0.16 degrees as 0, a fifth of the
default ``maximum_rotation_angle_standard_deviation`` of 0.75 degrees.
Small angular jitter therefore always counts towards the rotation
deviation, and the stationary rotation limit is slightly stricter than
it would be under the coarser cutoff.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

# Dot products within this distance of 1 are treated as the same orientation.
_SAME_ORIENTATION_EPS = 1e-12

# Above this dot product slerp degrades to normalized lerp.
_SLERP_LINEAR_THRESHOLD = 0.9995


def normalize_quaternion(q: ArrayLike) -> NDArray[np.float64]:
    """
    Normalize a quaternion to unit length.

    Args:
        q: Quaternion [w, x, y, z].

    Returns:
        Unit quaternion.

    Raises:
        ValueError: If q is not a 4-vector or has zero length.
    """
    q = np.asarray(q, dtype=np.float64).reshape(-1)
    if q.shape != (4,):
        raise ValueError(f"Quaternion must have 4 components, got {q.shape[0]}")
    norm = np.linalg.norm(q)
    if norm < 1e-12:
        raise ValueError("Cannot normalize a zero-length quaternion")
    return q / norm


def quaternion_dot(a: NDArray[np.float64], b: NDArray[np.float64]) -> float:
    """Four-component dot product of two quaternions."""
    return float(np.dot(a, b))


def slerp(
    q0: NDArray[np.float64],
    q1: NDArray[np.float64],
    t: float,
) -> NDArray[np.float64]:
    """
    Spherical linear interpolation between two orientations.

    Always takes the shortest arc. ``t`` is clamped to [0, 1].

    Args:
        q0: Start quaternion [w, x, y, z].
        q1: End quaternion [w, x, y, z].
        t: Interpolation parameter, 0 returns q0 and 1 returns q1.

    Returns:
        Interpolated unit quaternion.
    """
    t = min(max(float(t), 0.0), 1.0)
    q0 = normalize_quaternion(q0)
    q1 = normalize_quaternion(q1)

    dot = quaternion_dot(q0, q1)
    if dot < 0.0:
        q1 = -q1
        dot = -dot

    if dot > _SLERP_LINEAR_THRESHOLD:
        result = q0 + t * (q1 - q0)
        return result / np.linalg.norm(result)

    theta_0 = np.arccos(min(dot, 1.0))
    sin_theta_0 = np.sin(theta_0)
    theta = theta_0 * t

    s0 = np.sin(theta_0 - theta) / sin_theta_0
    s1 = np.sin(theta) / sin_theta_0
    result = s0 * q0 + s1 * q1
    return result / np.linalg.norm(result)


def quaternion_angle_deg(a: NDArray[np.float64], b: NDArray[np.float64]) -> float:
    """
    Shortest-arc angle between two orientations.

    Args:
        a: Quaternion [w, x, y, z].
        b: Quaternion [w, x, y, z].

    Returns:
        Angle in degrees, in [0, 180].
    """
    dot = min(abs(quaternion_dot(a, b)), 1.0)
    if dot > 1.0 - _SAME_ORIENTATION_EPS:
        return 0.0
    return float(np.degrees(2.0 * np.arccos(dot)))


def quaternion_to_rotation_matrix(q: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert quaternion to rotation matrix.

    Args:
        q: Quaternion [w, x, y, z].

    Returns:
        3x3 rotation matrix.
    """
    w, x, y, z = normalize_quaternion(q)

    return np.array(
        [
            [1 - 2 * (y**2 + z**2), 2 * (x * y - z * w), 2 * (x * z + y * w)],
            [2 * (x * y + z * w), 1 - 2 * (x**2 + z**2), 2 * (y * z - x * w)],
            [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x**2 + y**2)],
        ],
        dtype=np.float64,
    )


def rotation_matrix_to_quaternion(R: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert rotation matrix to quaternion.

    Args:
        R: 3x3 rotation matrix.

    Returns:
        Unit quaternion [w, x, y, z] with w >= 0.
    """
    R = np.asarray(R, dtype=np.float64)
    trace = np.trace(R)

    if trace > 0:
        s = 0.5 / np.sqrt(trace + 1.0)
        w = 0.25 / s
        x = (R[2, 1] - R[1, 2]) * s
        y = (R[0, 2] - R[2, 0]) * s
        z = (R[1, 0] - R[0, 1]) * s
    elif R[0, 0] > R[1, 1] and R[0, 0] > R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2])
        w = (R[2, 1] - R[1, 2]) / s
        x = 0.25 * s
        y = (R[0, 1] + R[1, 0]) / s
        z = (R[0, 2] + R[2, 0]) / s
    elif R[1, 1] > R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2])
        w = (R[0, 2] - R[2, 0]) / s
        x = (R[0, 1] + R[1, 0]) / s
        y = 0.25 * s
        z = (R[1, 2] + R[2, 1]) / s
    else:
        s = 2.0 * np.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1])
        w = (R[1, 0] - R[0, 1]) / s
        x = (R[0, 2] + R[2, 0]) / s
        y = (R[1, 2] + R[2, 1]) / s
        z = 0.25 * s

    q = normalize_quaternion([w, x, y, z])
    return -q if q[0] < 0 else q


def euler_to_rotation_matrix(
    roll: float, pitch: float, yaw: float
) -> NDArray[np.float64]:
    """
    Convert Euler angles to rotation matrix.

    Uses ZYX convention (yaw-pitch-roll).

    Args:
        roll: Roll angle in radians.
        pitch: Pitch angle in radians.
        yaw: Yaw angle in radians.

    Returns:
        3x3 rotation matrix.
    """
    cr, sr = np.cos(roll), np.sin(roll)
    cp, sp = np.cos(pitch), np.sin(pitch)
    cy, sy = np.cos(yaw), np.sin(yaw)

    return np.array(
        [
            [cy * cp, cy * sp * sr - sy * cr, cy * sp * cr + sy * sr],
            [sy * cp, sy * sp * sr + cy * cr, sy * sp * cr - cy * sr],
            [-sp, cp * sr, cp * cr],
        ],
        dtype=np.float64,
    )


def rotation_matrix_to_euler(R: NDArray[np.float64]) -> tuple[float, float, float]:
    """
    Convert rotation matrix to Euler angles (roll, pitch, yaw).

    Uses ZYX convention (yaw-pitch-roll).

    Args:
        R: 3x3 rotation matrix.

    Returns:
        Tuple of (roll, pitch, yaw) in radians.
    """
    sy = np.sqrt(R[0, 0] ** 2 + R[1, 0] ** 2)

    if sy >= 1e-6:
        roll = np.arctan2(R[2, 1], R[2, 2])
        pitch = np.arctan2(-R[2, 0], sy)
        yaw = np.arctan2(R[1, 0], R[0, 0])
    else:
        # Gimbal lock
        roll = np.arctan2(-R[1, 2], R[1, 1])
        pitch = np.arctan2(-R[2, 0], sy)
        yaw = 0.0

    return float(roll), float(pitch), float(yaw)


def euler_to_quaternion(roll: float, pitch: float, yaw: float) -> NDArray[np.float64]:
    """Convert ZYX Euler angles in radians to a quaternion [w, x, y, z]."""
    return rotation_matrix_to_quaternion(euler_to_rotation_matrix(roll, pitch, yaw))


def quaternion_to_euler(q: NDArray[np.float64]) -> tuple[float, float, float]:
    """Convert a quaternion [w, x, y, z] to ZYX Euler angles (roll, pitch, yaw) in radians."""
    return rotation_matrix_to_euler(quaternion_to_rotation_matrix(q))
