"""
Shared pytest fixtures for Anchorpose tests.
"""

from pathlib import Path

import pytest
import numpy as np

from anchorpose.config.schema import DetectionConfig, MarkerPositionBehavior
from anchorpose.markers.types import PoseSample

ANCHOR = np.array([0.5, -0.2, 1.5])
ANCHOR_YAW_DEG = 30.0

# Cube corners, so the offsets of all eight cancel out.
CUBE_SIGNS = [
    (1, 1, 1),
    (-1, -1, -1),
    (1, -1, 1),
    (-1, 1, -1),
    (1, 1, -1),
    (-1, -1, 1),
    (1, -1, -1),
    (-1, 1, 1),
]


def yaw_quaternion(yaw_deg: float) -> np.ndarray:
    """Quaternion [w, x, y, z] for a rotation about Z."""
    half = np.radians(yaw_deg) / 2.0
    return np.array([np.cos(half), 0.0, 0.0, np.sin(half)])


def make_sample(
    marker_id: int = 1,
    position: tuple[float, float, float] = (0.0, 0.0, 0.0),
    yaw_deg: float = 0.0,
) -> PoseSample:
    """Build a PoseSample rotated about Z."""
    return PoseSample(marker_id, position, yaw_quaternion(yaw_deg))


def cluster_sample(index: int, marker_id: int = 7, half_size: float = 0.001) -> PoseSample:
    """Sample ``index`` of a tight cluster of eight around the anchor pose."""
    offset = np.array(CUBE_SIGNS[index]) * half_size
    yaw = ANCHOR_YAW_DEG + (0.2 if index % 2 == 0 else -0.2)
    return make_sample(marker_id, tuple(ANCHOR + offset), yaw)


def outlier_sample(marker_id: int = 7) -> PoseSample:
    """Misdetection 10 cm above the anchor with a 20 degree yaw error."""
    return make_sample(
        marker_id, tuple(ANCHOR + np.array([0.0, 0.0, 0.1])), ANCHOR_YAW_DEG + 20.0
    )


@pytest.fixture
def identity_quaternion() -> np.ndarray:
    """Identity rotation."""
    return np.array([1.0, 0.0, 0.0, 0.0])


@pytest.fixture
def cluster_with_outliers() -> list[PoseSample]:
    """Eight clustered samples around the anchor with two outliers mixed in."""
    cluster = [cluster_sample(i) for i in range(8)]
    return cluster[:3] + [outlier_sample()] + cluster[3:6] + [outlier_sample()] + cluster[6:]


@pytest.fixture
def stationary_config() -> DetectionConfig:
    """Stationary detection knobs with the default thresholds."""
    return DetectionConfig(
        marker_position_behavior=MarkerPositionBehavior.STATIONARY,
        required_observations=5,
        required_inlier_count=5,
        maximum_marker_sample_count=15,
        maximum_position_distance_standard_deviation=0.01,
        maximum_rotation_angle_standard_deviation=0.75,
        marker_inlier_standard_deviation_threshold=1.5,
    )


@pytest.fixture
def moving_config() -> DetectionConfig:
    """Moving detection knobs with a five sample window."""
    return DetectionConfig(
        marker_position_behavior=MarkerPositionBehavior.MOVING,
        required_observations=5,
    )


@pytest.fixture
def repo_root() -> Path:
    """Repository root, for shipped configs and observation logs."""
    return Path(__file__).resolve().parents[1]


@pytest.fixture
def anchor() -> np.ndarray:
    """True position of the clustered marker."""
    return ANCHOR.copy()


@pytest.fixture
def sample_factory():
    """Factory building samples rotated about Z."""
    return make_sample


@pytest.fixture
def cluster_factory():
    """Factory building clustered samples around the anchor."""
    return cluster_sample


@pytest.fixture
def outlier_factory():
    """Factory building outlier samples."""
    return outlier_sample


@pytest.fixture
def yaw_factory():
    """Factory building quaternions rotated about Z."""
    return yaw_quaternion
