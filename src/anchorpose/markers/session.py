"""
Marker detection session.

Connects an asynchronous frame source to the aggregator. Frame callbacks may
arrive on capture threads; they are serialized through a lock before touching
the buffers. The batch produced by the latest frame is held as the pending
update and handed to subscribers on the host's next ``tick()``, replacing any
batch that was never delivered.
"""

import threading
from typing import Callable, Iterable, Optional

from anchorpose.config.schema import DetectionConfig, MarkerPositionBehavior
from anchorpose.logging.setup import get_logger
from anchorpose.logging.telemetry import DetectionTelemetry
from anchorpose.markers.aggregator import ObservationAggregator
from anchorpose.markers.types import Detection, MarkersUpdate

logger = get_logger(__name__)

MarkersUpdatedHandler = Callable[[MarkersUpdate], None]


class MarkerDetectionSession:
    """
    Host-facing wrapper around one ObservationAggregator.
    """

    def __init__(
        self,
        config: DetectionConfig,
        behavior: Optional[MarkerPositionBehavior] = None,
        telemetry: Optional[DetectionTelemetry] = None,
    ) -> None:
        self._aggregator = ObservationAggregator(config, behavior, telemetry)
        self._lock = threading.Lock()
        self._handlers: list[MarkersUpdatedHandler] = []
        self._pending: Optional[MarkersUpdate] = None
        self._detecting = False

    @property
    def aggregator(self) -> ObservationAggregator:
        return self._aggregator

    @property
    def is_detecting(self) -> bool:
        return self._detecting

    @property
    def behavior(self) -> MarkerPositionBehavior:
        """Active marker position behavior."""
        return self._aggregator.behavior

    @behavior.setter
    def behavior(self, value: MarkerPositionBehavior) -> None:
        with self._lock:
            self._aggregator.behavior = value

    def subscribe(self, handler: MarkersUpdatedHandler) -> None:
        """Register a handler for markers-updated batches."""
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler: MarkersUpdatedHandler) -> None:
        """Remove a previously registered handler."""
        if handler in self._handlers:
            self._handlers.remove(handler)

    def start(self) -> None:
        """Start accepting frames with empty buffers."""
        with self._lock:
            if self._detecting:
                return
            self._aggregator.clear()
            self._pending = None
            self._detecting = True
        logger.info("detection_started", behavior=self.behavior.value)

    def stop(self) -> None:
        """Stop accepting frames. Buffers are kept until the next start."""
        with self._lock:
            if not self._detecting:
                return
            self._detecting = False
        logger.info("detection_stopped")

    def on_frame_detections(self, detections: Iterable[Detection]) -> None:
        """
        Frame-delivery callback.

        Args:
            detections: Marker poses detected in one frame.
        """
        with self._lock:
            if not self._detecting:
                logger.debug("frame_ignored", reason="not_detecting")
                return
            self._pending = self._aggregator.add_detections(detections)

    def tick(self) -> Optional[MarkersUpdate]:
        """
        Deliver the pending batch to every handler.

        Returns:
            The delivered batch, or None if no frame was processed since the
            last tick.
        """
        with self._lock:
            update, self._pending = self._pending, None

        if update is None:
            return None

        for handler in list(self._handlers):
            handler(update)
        return update
