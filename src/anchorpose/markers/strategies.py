"""
Marker detection completion strategies.

A completion strategy decides whether a buffer of samples for one marker is
a representative sample and, if so, computes the finalized pose. Strategies
are stateless: each is a pair of functions over the buffer and the detection
configuration, selected by ``MarkerPositionBehavior``.

Moving:
    The marker is expected to move every frame (e.g. held in a hand). The
    buffer holds exactly ``required_observations`` samples and completes with
    their plain average once full. No outlier rejection is applied.

Stationary:
    The marker is fixed in the world. A larger rolling window is kept and a
    pose is only finalized once the inliers are numerous enough and tightly
    clustered:

    1. average the whole buffer,
    2. reject outliers against that average,
    3. require ``required_inlier_count`` inliers,
    4. re-average the inliers only,
    5. require the inlier deviations about the refined average to be within
       the configured maxima.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from anchorpose.config.schema import DetectionConfig, MarkerPositionBehavior
from anchorpose.logging.setup import get_logger
from anchorpose.markers.averaging import (
    average_pose,
    position_distance,
    standard_deviations,
)
from anchorpose.markers.outliers import partition_inliers
from anchorpose.markers.types import FinalizedPose, PoseSample

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompletionStrategy:
    """
    Function table for one marker position behavior.

    Attributes:
        behavior: Behavior this strategy implements.
        maximum_sample_count: Buffer capacity under this strategy.
        try_complete: Returns the finalized pose, or None to keep accumulating.
    """

    behavior: MarkerPositionBehavior
    maximum_sample_count: Callable[[DetectionConfig], int]
    try_complete: Callable[
        [Sequence[PoseSample], DetectionConfig], Optional[FinalizedPose]
    ]


def _moving_capacity(config: DetectionConfig) -> int:
    return config.required_observations


def _stationary_capacity(config: DetectionConfig) -> int:
    return config.maximum_marker_sample_count


def try_complete_moving(
    samples: Sequence[PoseSample],
    config: DetectionConfig,
) -> Optional[FinalizedPose]:
    """
    Complete once the window is full, averaging every sample.

    Args:
        samples: Buffered samples of one marker, oldest first.
        config: Detection configuration.

    Returns:
        FinalizedPose, or None while fewer than required_observations samples.
    """
    if len(samples) < config.required_observations:
        return None

    average = average_pose(samples)
    position_std, rotation_std = standard_deviations(samples, average)
    return FinalizedPose(
        marker_id=average.marker_id,
        position=average.position,
        rotation=average.rotation,
        sample_count=len(samples),
        inlier_count=len(samples),
        position_std=position_std,
        rotation_std=rotation_std,
    )


def try_complete_stationary(
    samples: Sequence[PoseSample],
    config: DetectionConfig,
) -> Optional[FinalizedPose]:
    """
    Complete only when enough tightly clustered inliers exist.

    Args:
        samples: Buffered samples of one marker, oldest first.
        config: Detection configuration.

    Returns:
        FinalizedPose from the inlier average, or None to keep accumulating.
    """
    if len(samples) < config.required_observations:
        return None

    average = average_pose(samples)

    # Keep spurious detections from polluting the final pose.
    inliers = partition_inliers(
        samples, average, config.marker_inlier_standard_deviation_threshold
    )
    if len(inliers) < config.required_inlier_count:
        logger.debug(
            "marker_rejected",
            marker_id=average.marker_id,
            reason="inlier_count",
            inliers=len(inliers),
            samples=len(samples),
            required_inliers=config.required_inlier_count,
        )
        return None

    inlier_average = average_pose(inliers)
    position_std, rotation_std = standard_deviations(inliers, inlier_average)

    converged = (
        position_std <= config.maximum_position_distance_standard_deviation
        and rotation_std <= config.maximum_rotation_angle_standard_deviation
    )
    _log_marker_report(
        "marker_final" if converged else "marker_rejected",
        samples,
        inliers,
        average,
        inlier_average,
        position_std,
        rotation_std,
    )
    if not converged:
        return None

    return FinalizedPose(
        marker_id=inlier_average.marker_id,
        position=inlier_average.position,
        rotation=inlier_average.rotation,
        sample_count=len(samples),
        inlier_count=len(inliers),
        position_std=position_std,
        rotation_std=rotation_std,
    )


def _log_marker_report(
    event: str,
    samples: Sequence[PoseSample],
    inliers: Sequence[PoseSample],
    average: PoseSample,
    inlier_average: PoseSample,
    inlier_position_std: float,
    inlier_rotation_std: float,
) -> None:
    position_std, rotation_std = standard_deviations(samples, average)
    log = logger.info if event == "marker_final" else logger.debug
    log(
        event,
        marker_id=average.marker_id,
        inliers=len(inliers),
        samples=len(samples),
        position_std=position_std,
        rotation_std=rotation_std,
        inlier_position_std=inlier_position_std,
        inlier_rotation_std=inlier_rotation_std,
        position=inlier_average.position.tolist(),
        offset_from_average_m=position_distance(inlier_average, average),
    )


MOVING = CompletionStrategy(
    behavior=MarkerPositionBehavior.MOVING,
    maximum_sample_count=_moving_capacity,
    try_complete=try_complete_moving,
)

STATIONARY = CompletionStrategy(
    behavior=MarkerPositionBehavior.STATIONARY,
    maximum_sample_count=_stationary_capacity,
    try_complete=try_complete_stationary,
)

STRATEGIES: dict[MarkerPositionBehavior, CompletionStrategy] = {
    MarkerPositionBehavior.MOVING: MOVING,
    MarkerPositionBehavior.STATIONARY: STATIONARY,
}


def get_strategy(behavior: MarkerPositionBehavior) -> CompletionStrategy:
    """
    Look up the completion strategy for a behavior.

    Args:
        behavior: Marker position behavior, or its string value.

    Returns:
        CompletionStrategy for the behavior.
    """
    return STRATEGIES[MarkerPositionBehavior(behavior)]
