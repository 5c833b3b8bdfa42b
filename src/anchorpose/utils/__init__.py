"""Utility modules for Anchorpose."""

from anchorpose.utils.time import Timer
from anchorpose.utils.math3d import (
    normalize_quaternion,
    quaternion_angle_deg,
    slerp,
    euler_to_quaternion,
    quaternion_to_euler,
    quaternion_to_rotation_matrix,
    rotation_matrix_to_quaternion,
)
from anchorpose.utils.io import load_yaml, save_yaml

__all__ = [
    "Timer",
    "normalize_quaternion",
    "quaternion_angle_deg",
    "slerp",
    "euler_to_quaternion",
    "quaternion_to_euler",
    "quaternion_to_rotation_matrix",
    "rotation_matrix_to_quaternion",
    "load_yaml",
    "save_yaml",
]
