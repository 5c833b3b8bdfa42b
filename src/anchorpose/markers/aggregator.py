"""
Per-marker observation aggregation.

Keeps a rolling buffer of samples per marker ID and asks the active
completion strategy, once per processing cycle, whether each buffer is
enough evidence for a finalized pose.

The active strategy is always the one named by the configuration's
``marker_position_behavior``. It is looked up on every append and every
completion attempt, so assigning that field, directly or through the
``behavior`` property, takes effect on the next sample.

The aggregator is not thread safe. Callers delivering frames from several
threads must serialize calls (see ``MarkerDetectionSession``).
"""

from collections import deque
from typing import Iterable, Optional

from anchorpose.config.schema import DetectionConfig, MarkerPositionBehavior
from anchorpose.config.validation import check_detection
from anchorpose.logging.setup import get_logger
from anchorpose.logging.telemetry import CycleRecord, DetectionTelemetry
from anchorpose.markers.strategies import CompletionStrategy, get_strategy
from anchorpose.markers.types import Detection, FinalizedPose, MarkersUpdate, PoseSample
from anchorpose.utils.time import Timer

logger = get_logger(__name__)


class ObservationAggregator:
    """
    Rolling per-marker sample buffers feeding a completion strategy.

    Buffers are created lazily on a marker's first observation and cleared,
    not removed, whenever that marker completes. Buffers of markers that were
    not observed in a cycle are still retried. They never expire on their own.
    """

    def __init__(
        self,
        config: DetectionConfig,
        behavior: Optional[MarkerPositionBehavior] = None,
        telemetry: Optional[DetectionTelemetry] = None,
    ) -> None:
        """
        Initialize aggregator.

        Args:
            config: Detection knobs, read on every cycle. The aggregator
                keeps this instance, so later assignments to it apply.
            behavior: Initial behavior. When given it is written to
                ``config.marker_position_behavior``.
            telemetry: Optional collector receiving one record per cycle.

        Raises:
            ConfigurationError: If the knobs can never complete under the
                active behavior.
        """
        self._config = config
        if behavior is not None:
            behavior = MarkerPositionBehavior(behavior)
            check_detection(config, behavior)
            config.marker_position_behavior = behavior
        else:
            check_detection(config)
        self._last_behavior = config.marker_position_behavior
        self._telemetry = telemetry
        self._buffers: dict[int, deque[PoseSample]] = {}
        self._cycle = 0

    @property
    def config(self) -> DetectionConfig:
        """Detection configuration."""
        return self._config

    @property
    def behavior(self) -> MarkerPositionBehavior:
        """Active marker position behavior."""
        return self._config.marker_position_behavior

    @behavior.setter
    def behavior(self, value: MarkerPositionBehavior) -> None:
        value = MarkerPositionBehavior(value)
        check_detection(self._config, value)
        self._config.marker_position_behavior = value
        self._active_strategy()

    def _active_strategy(self) -> CompletionStrategy:
        behavior = self._config.marker_position_behavior
        if behavior != self._last_behavior:
            check_detection(self._config, behavior)
            logger.info(
                "behavior_changed",
                from_behavior=self._last_behavior.value,
                to_behavior=behavior.value,
            )
            self._last_behavior = behavior
        return get_strategy(behavior)

    @property
    def maximum_sample_count(self) -> int:
        """Buffer capacity under the active strategy."""
        return self._active_strategy().maximum_sample_count(self._config)

    @property
    def marker_ids(self) -> list[int]:
        """IDs of every marker with a buffer, in first-seen order."""
        return list(self._buffers)

    @property
    def cycle(self) -> int:
        """Number of completed processing cycles."""
        return self._cycle

    def buffer(self, marker_id: int) -> tuple[PoseSample, ...]:
        """Snapshot of a marker's buffered samples, oldest first."""
        return tuple(self._buffers.get(marker_id, ()))

    def add_sample(self, sample: PoseSample) -> None:
        """
        Append one sample to its marker's buffer, evicting the oldest samples.

        Capacity is read from the active strategy on every append, so a
        strategy switch takes effect on the next sample.
        """
        buffer = self._buffers.setdefault(sample.marker_id, deque())
        buffer.append(sample)

        capacity = self.maximum_sample_count
        while len(buffer) > capacity:
            buffer.popleft()

    def try_complete(self, marker_id: int) -> Optional[FinalizedPose]:
        """
        Ask the active strategy to complete one marker.

        Clears the marker's buffer on success.

        Returns:
            FinalizedPose, or None if the marker has not converged.
        """
        buffer = self._buffers.get(marker_id)
        if not buffer:
            return None

        pose = self._active_strategy().try_complete(list(buffer), self._config)
        if pose is not None:
            buffer.clear()
        return pose

    def add_detections(self, detections: Iterable[Detection]) -> MarkersUpdate:
        """
        Run one processing cycle over a frame's detections.

        Args:
            detections: PoseSample objects or (marker_id, position, rotation)
                tuples, all from one frame. May be empty.

        Returns:
            MarkersUpdate with every marker finalized in this cycle.
        """
        with Timer() as timer:
            received = 0
            for detection in detections:
                self.add_sample(PoseSample.from_detection(detection))
                received += 1

            evaluated = 0
            finalized: dict[int, FinalizedPose] = {}
            for marker_id in list(self._buffers):
                if not self._buffers[marker_id]:
                    continue
                evaluated += 1
                pose = self.try_complete(marker_id)
                if pose is not None:
                    finalized[marker_id] = pose

            self._cycle += 1
            update = MarkersUpdate(self._cycle, finalized)

        if finalized:
            logger.debug(
                "markers_updated",
                cycle=self._cycle,
                markers=sorted(finalized),
            )

        if self._telemetry is not None:
            self._telemetry.record(
                CycleRecord(
                    cycle=self._cycle,
                    detections=received,
                    markers_evaluated=evaluated,
                    markers_finalized=len(finalized),
                    buffered_samples=sum(len(b) for b in self._buffers.values()),
                    latency_ms=timer.elapsed_ms,
                )
            )

        return update

    def clear(self) -> None:
        """Drop every buffered sample."""
        self._buffers.clear()
