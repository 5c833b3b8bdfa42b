"""
Statistical outlier rejection for marker samples.

A sample is an inlier only when both its distance and its angle from the
average pose are strictly below ``threshold`` standard deviations. When a
deviation is exactly zero, no sample survives.
"""

from typing import Sequence

from anchorpose.logging.setup import get_logger
from anchorpose.markers.averaging import (
    position_distance,
    rotation_angle,
    standard_deviations,
)
from anchorpose.markers.types import PoseSample

logger = get_logger(__name__)


def is_inlier(
    candidate: PoseSample,
    average: PoseSample,
    position_std: float,
    rotation_std: float,
    threshold: float,
) -> bool:
    """
    Check whether a sample lies within the inlier band around the average.

    Args:
        candidate: Sample under test.
        average: Average pose of the sample set.
        position_std: Position standard deviation of the set, meters.
        rotation_std: Rotation standard deviation of the set, degrees.
        threshold: Multiple of the standard deviation allowed.

    Returns:
        True if the sample is an inlier.
    """
    return (
        position_distance(candidate, average) < threshold * position_std
        and rotation_angle(candidate, average) < threshold * rotation_std
    )


def partition_inliers(
    samples: Sequence[PoseSample],
    average: PoseSample,
    threshold: float,
) -> list[PoseSample]:
    """
    Drop samples that deviate too far from the average pose.

    Args:
        samples: Non-empty list of samples of one marker.
        average: Average of ``samples``.
        threshold: Multiple of the standard deviation allowed.

    Returns:
        Inlier samples, in their original order.
    """
    position_std, rotation_std = standard_deviations(samples, average)

    inliers: list[PoseSample] = []
    for sample in samples:
        if is_inlier(sample, average, position_std, rotation_std, threshold):
            inliers.append(sample)
        else:
            logger.debug(
                "marker_outlier",
                marker_id=sample.marker_id,
                position=sample.position.tolist(),
                distance_m=position_distance(sample, average),
                angle_deg=rotation_angle(sample, average),
                position_std=position_std,
                rotation_std=rotation_std,
            )

    return inliers
