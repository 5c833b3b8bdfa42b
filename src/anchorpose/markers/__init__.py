"""Marker observation aggregation for Anchorpose."""

from anchorpose.markers.types import FinalizedPose, MarkersUpdate, PoseSample
from anchorpose.markers.averaging import average_pose, standard_deviation
from anchorpose.markers.outliers import partition_inliers
from anchorpose.markers.strategies import CompletionStrategy, get_strategy
from anchorpose.markers.aggregator import ObservationAggregator
from anchorpose.markers.session import MarkerDetectionSession

__all__ = [
    "FinalizedPose",
    "MarkersUpdate",
    "PoseSample",
    "average_pose",
    "standard_deviation",
    "partition_inliers",
    "CompletionStrategy",
    "get_strategy",
    "ObservationAggregator",
    "MarkerDetectionSession",
]
