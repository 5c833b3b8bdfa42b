"""
Pose averaging primitives.

Positions are averaged arithmetically. Rotations are averaged by sequential
weighted slerp: starting from the first rotation, each following rotation
``i`` (zero based) is blended in with weight ``1 / (i + 1)``. This is a cheap
approximation of the rotation centroid that is accurate for small, tightly
clustered sets. It depends on sample order and is not the geodesic (Karcher)
mean; convergence thresholds are tuned against this behaviour.
"""

from typing import Callable, Sequence

import numpy as np
from numpy.typing import NDArray

from anchorpose.markers.types import PoseSample
from anchorpose.utils.math3d import quaternion_angle_deg, slerp

PoseMetric = Callable[[PoseSample, PoseSample], float]


def average_rotation(rotations: Sequence[NDArray[np.float64]]) -> NDArray[np.float64]:
    """
    Sequential slerp mean of a non-empty list of quaternions.

    Args:
        rotations: Unit quaternions [w, x, y, z].

    Returns:
        Approximate mean rotation.
    """
    mean = rotations[0]
    for i in range(1, len(rotations)):
        mean = slerp(mean, rotations[i], 1.0 / (i + 1))
    return mean


def average_pose(samples: Sequence[PoseSample]) -> PoseSample:
    """
    Average a non-empty list of samples of one marker.

    The caller guarantees every sample shares the same marker ID.

    Args:
        samples: Samples in temporal order.

    Returns:
        PoseSample with the mean position and approximate mean rotation.
    """
    positions = np.stack([s.position for s in samples])
    position = positions.sum(axis=0) / len(samples)
    rotation = average_rotation([s.rotation for s in samples])
    return PoseSample(samples[-1].marker_id, position, rotation)


def position_distance(sample: PoseSample, reference: PoseSample) -> float:
    """Euclidean distance between two sample positions, meters."""
    return float(np.linalg.norm(sample.position - reference.position))


def rotation_angle(sample: PoseSample, reference: PoseSample) -> float:
    """Shortest-arc angle between two sample rotations, degrees."""
    return quaternion_angle_deg(sample.rotation, reference.rotation)


def standard_deviation(
    samples: Sequence[PoseSample],
    reference: PoseSample,
    metric: PoseMetric,
) -> float:
    """
    Population standard deviation of a distance metric about a reference pose.

    Computes ``sqrt(sum((metric(s, ref) - metric(ref, ref))**2) / n)``.

    Args:
        samples: Non-empty list of samples.
        reference: Pose the deviation is measured from, usually their average.
        metric: ``position_distance`` or ``rotation_angle``.

    Returns:
        Standard deviation in the metric's unit.
    """
    reference_value = metric(reference, reference)
    deltas = np.array([metric(s, reference) - reference_value for s in samples])
    return float(np.sqrt(np.sum(deltas * deltas) / len(samples)))


def standard_deviations(
    samples: Sequence[PoseSample],
    reference: PoseSample,
) -> tuple[float, float]:
    """
    Position and rotation standard deviations about a reference pose.

    Returns:
        Tuple of (position_std in meters, rotation_std in degrees).
    """
    return (
        standard_deviation(samples, reference, position_distance),
        standard_deviation(samples, reference, rotation_angle),
    )
